"""
HTTP Client

Thin requests-based client used by the ledger metadata lookup.
No retries: a failed fetch surfaces to the caller.
"""

from __future__ import annotations

import json as jsonlib
import logging
from dataclasses import dataclass, field
from typing import Any, Optional

import requests


logger = logging.getLogger(__name__)


@dataclass
class HttpResponse:
    """
    Response from an HTTP request.
    """
    status_code: int
    content: bytes
    headers: dict[str, str] = field(default_factory=dict)
    url: str = ""
    elapsed_ms: float = 0.0

    @property
    def ok(self) -> bool:
        """Check if request was successful (2xx status)."""
        return 200 <= self.status_code < 300

    @property
    def text(self) -> str:
        """Get response content as text."""
        return self.content.decode("utf-8", errors="replace")

    def json(self) -> Any:
        """Parse response as JSON."""
        return jsonlib.loads(self.content)

    def raise_for_status(self) -> None:
        """Raise exception if status is not 2xx."""
        if not self.ok:
            raise HttpError(
                f"HTTP {self.status_code}",
                status_code=self.status_code,
                response=self,
            )


class HttpError(Exception):
    """HTTP request error."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        response: Optional[HttpResponse] = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.response = response


class HttpClient:
    """
    Minimal HTTP client over a requests session.

    Usage:
        with HttpClient(timeout=10) as client:
            response = client.get("https://api.example.com/data")
            if response.ok:
                data = response.json()
    """

    def __init__(
        self,
        *,
        timeout: float = 15.0,
        default_headers: Optional[dict[str, str]] = None,
    ) -> None:
        """
        Initialize HTTP client.

        Args:
            timeout: Default request timeout in seconds
            default_headers: Headers to include in all requests
        """
        self.timeout = timeout
        self.default_headers = default_headers or {}
        self._session: Optional[requests.Session] = None

    def _get_session(self) -> requests.Session:
        """Lazy-create the requests session."""
        if self._session is None:
            self._session = requests.Session()
            self._session.headers.update(self.default_headers)
        return self._session

    def get(
        self,
        url: str,
        *,
        headers: Optional[dict[str, str]] = None,
        params: Optional[dict[str, Any]] = None,
        timeout: Optional[float] = None,
    ) -> HttpResponse:
        """
        Make a GET request.

        Returns:
            HttpResponse with status, content, and headers

        Raises:
            HttpError: On connection failure or timeout
        """
        session = self._get_session()
        logger.debug(f"GET {url}")

        try:
            response = session.get(
                url,
                headers=headers,
                params=params,
                timeout=timeout or self.timeout,
            )
        except requests.RequestException as e:
            raise HttpError(str(e)) from e

        return HttpResponse(
            status_code=response.status_code,
            content=response.content,
            headers=dict(response.headers),
            url=str(response.url),
            elapsed_ms=response.elapsed.total_seconds() * 1000,
        )

    def close(self) -> None:
        """Close the HTTP session."""
        if self._session:
            self._session.close()
            self._session = None

    def __enter__(self) -> "HttpClient":
        return self

    def __exit__(self, *args) -> None:
        self.close()
