"""Issuer trust registry."""

from .registry import (
    DEFAULT_ISSUERS,
    LEVEL_MESSAGES,
    IssuerRegistry,
    default_registry,
)

__all__ = [
    "DEFAULT_ISSUERS",
    "LEVEL_MESSAGES",
    "IssuerRegistry",
    "default_registry",
]
