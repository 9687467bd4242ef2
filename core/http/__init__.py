"""
HTTP Client Module

requests-based HTTP client for collaborator lookups.
"""

from .client import HttpClient, HttpError, HttpResponse

__all__ = [
    "HttpClient",
    "HttpError",
    "HttpResponse",
]
