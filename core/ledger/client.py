"""
Ledger Metadata Client

Fetches the certificate metadata anchored with an NFT from the ledger's
public API. The returned values are the trusted reference (document hash,
root hash, per-field proofs) the engine checks evidence against.

Endpoints:
    GET {base}/v1.0/assets/{ticker}/{nonce}
        -> {"data": {"asset": {"metadata": "<json string>", "issuer": ...}},
            "code": "successful", "error": ""}
    GET {base}/assets/nft/holder/{ticker}/{nonce}
        -> {"data": {"account": {"address": ...}}, "code": "successful"}
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any, Optional

from core.http.client import HttpClient, HttpError
from core.schemas.errors import LedgerException, SchemaValidationException
from core.schemas.metadata import CertificateMetadata

if TYPE_CHECKING:
    from core.config.runtime import RuntimeConfig


logger = logging.getLogger(__name__)


SUCCESS_CODE = "successful"

# Address fields that may carry the issuer, in preference order
_ISSUER_KEYS = ("issuer", "creator", "ownerAddress")


def parse_certificate_id(certificate_id: str) -> tuple[str, str]:
    """
    Split a certificate id of the form "TICKER/NONCE".

    Example:
        >>> parse_certificate_id("KCERT-TEST/1")
        ('KCERT-TEST', '1')

    Raises:
        ValueError: If the id does not have exactly two non-empty parts
    """
    parts = [p for p in certificate_id.strip().strip("/").split("/") if p]
    if len(parts) != 2:
        raise ValueError(f"Certificate id must look like TICKER/NONCE, got: {certificate_id!r}")
    return parts[0], parts[1]


class LedgerClient:
    """
    Client for the ledger asset API.

    Usage:
        client = LedgerClient("https://api.testnet.klever.org")
        metadata = client.fetch_metadata("KCERT-TEST", "1")
    """

    def __init__(
        self,
        base_url: str,
        http: Optional[HttpClient] = None,
        *,
        timeout: float = 15.0,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.http = http or HttpClient(timeout=timeout)

    @classmethod
    def from_config(cls, config: "RuntimeConfig") -> "LedgerClient":
        http = HttpClient(
            timeout=config.http.timeout,
            default_headers={"User-Agent": config.http.user_agent},
        )
        return cls(config.ledger.api_url, http=http)

    def _get_json(self, url: str) -> dict[str, Any]:
        try:
            response = self.http.get(url)
        except HttpError as e:
            raise LedgerException(f"Ledger request failed: {e}", retryable=True) from e

        if not response.ok:
            raise LedgerException(
                f"Failed to fetch NFT metadata: HTTP {response.status_code}",
                status_code=response.status_code,
                retryable=response.status_code >= 500,
            )

        try:
            body = response.json()
        except ValueError as e:
            raise LedgerException(f"Ledger response is not valid JSON: {e}") from e
        if not isinstance(body, dict):
            raise LedgerException("Ledger response is not a JSON object")
        return body

    def fetch_metadata(
        self,
        ticker: str,
        nonce: str,
        *,
        include_holder: bool = True,
    ) -> CertificateMetadata:
        """
        Fetch and parse the metadata anchored with an NFT.

        Raises:
            LedgerException: On transport errors, unsuccessful responses or
                             metadata that does not parse
        """
        url = f"{self.base_url}/v1.0/assets/{ticker}/{nonce}"
        body = self._get_json(url)

        asset = (body.get("data") or {}).get("asset") or {}
        raw_metadata = asset.get("metadata")
        if body.get("code") != SUCCESS_CODE or not raw_metadata:
            raise LedgerException(
                body.get("error") or "Invalid NFT metadata response",
                details={"ticker": ticker, "nonce": nonce, "code": body.get("code")},
            )

        try:
            data = json.loads(raw_metadata) if isinstance(raw_metadata, str) else raw_metadata
            metadata = CertificateMetadata.from_ledger(data)
        except (ValueError, SchemaValidationException) as e:
            message = e.message if isinstance(e, SchemaValidationException) else str(e)
            raise LedgerException(
                f"NFT metadata could not be parsed: {message}",
                details={"ticker": ticker, "nonce": nonce},
            ) from e

        issuer_address = next((asset[k] for k in _ISSUER_KEYS if asset.get(k)), None)
        updates: dict[str, Any] = {"issuer_address": issuer_address}
        if include_holder:
            holder = self.fetch_holder(ticker, nonce)
            if holder:
                updates["holder_address"] = holder

        logger.info(f"Fetched metadata for {ticker}/{nonce} (issuer={issuer_address})")
        return metadata.model_copy(update=updates)

    def fetch_holder(self, ticker: str, nonce: str) -> Optional[str]:
        """
        Fetch the current holder address of an NFT.

        Holder lookup is best-effort: failures are logged and yield None.
        """
        url = f"{self.base_url}/assets/nft/holder/{ticker}/{nonce}"
        try:
            body = self._get_json(url)
        except LedgerException as e:
            logger.warning(f"Failed to fetch NFT holder for {ticker}/{nonce}: {e.message}")
            return None

        account = (body.get("data") or {}).get("account") or {}
        if body.get("code") != SUCCESS_CODE or not account.get("address"):
            logger.warning(f"Invalid NFT holder response for {ticker}/{nonce}: {body.get('error')}")
            return None
        return account["address"]

    def close(self) -> None:
        self.http.close()


# =============================================================================
# Sample metadata (offline development)
# =============================================================================

SAMPLE_METADATA: dict[str, Any] = {
    "hash": "afc23a8d4e155a2f2ce77131169b9b0ff36059a505aabff245ab1557d6d6ac00",
    "rootHash": "5acee99dc59452459ade8f64ffcededf81708fe597c7045ec98008edf551c4d0",
    "nft_id": "KCERT-TEST/1",
    "verify_url": "https://verify.kleverhub.io/KCERT-TEST/1",
    "proofs": {
        "nameProof": [
            {"hash": "eddc99db39f5ab2b6fad7b2d2c1386bf60ea3a0f05f50f0471afb168aef1b0c1", "position": "right"},
            {"hash": "b1c4a13d414e09adbaab5116939fae07ea3b89c71e21e09b9db63cb56368095c", "position": "right"},
            {"hash": "9ed6cacf54e27d03e2266bf162526c225a0d7f19dcd2cd14372c20ae9057032e", "position": "right"},
        ],
        "courseProof": [
            {"hash": "d9f14d2e371465bac156e1f43827fd1a5e11d6c4e0aaf5895b274c02b9ffccdd", "position": "left"},
            {"hash": "b1c4a13d414e09adbaab5116939fae07ea3b89c71e21e09b9db63cb56368095c", "position": "right"},
            {"hash": "9ed6cacf54e27d03e2266bf162526c225a0d7f19dcd2cd14372c20ae9057032e", "position": "right"},
        ],
        "locationProof": [
            {"hash": "b07e2ba8c6a953a9571d9fb852c54ba932aeea6eb93868f1433a3a6f003318e2", "position": "right"},
            {"hash": "ee0fef68255400d357fc3002e48766245d5a1682b25f79f97e246ee68672879f", "position": "left"},
            {"hash": "9ed6cacf54e27d03e2266bf162526c225a0d7f19dcd2cd14372c20ae9057032e", "position": "right"},
        ],
        "dateProof": [
            {"hash": "3da2e6f79ce0ad72d3b5efa661656937f6e27ea7c652022c749d8413cef4b2ad", "position": "left"},
            {"hash": "ee0fef68255400d357fc3002e48766245d5a1682b25f79f97e246ee68672879f", "position": "left"},
            {"hash": "9ed6cacf54e27d03e2266bf162526c225a0d7f19dcd2cd14372c20ae9057032e", "position": "right"},
        ],
        "instructorProof": [
            {"hash": "a3234d7d6f7a057fc8f034d9f8e467a98bfe189efbf8849366d04d3b652a116d", "position": "right"},
            {"hash": "0e7bcd2f1457fd966e29cc339aee9e39aaeae9a693f1a72d06f4d05b8c54aa7f", "position": "right"},
            {"hash": "d32ceb08b232d8595bd47aa3b5f02fda7e1e4c87b04c3cb25720a57282df1fa7", "position": "left"},
        ],
    },
    "issuerAddress": "klv1qqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqpgm89z",
}


class MockLedgerClient:
    """Ledger client stand-in that serves SAMPLE_METADATA for any id."""

    def fetch_metadata(self, ticker: str, nonce: str, *, include_holder: bool = True) -> CertificateMetadata:
        logger.info(f"Serving sample metadata for {ticker}/{nonce}")
        return CertificateMetadata.from_ledger(SAMPLE_METADATA)

    def fetch_holder(self, ticker: str, nonce: str) -> Optional[str]:
        return None

    def close(self) -> None:
        pass


def build_ledger_client(config: "RuntimeConfig") -> "LedgerClient | MockLedgerClient":
    """Pick the real or sample ledger client from configuration."""
    if config.ledger.use_mock:
        return MockLedgerClient()
    return LedgerClient.from_config(config)
