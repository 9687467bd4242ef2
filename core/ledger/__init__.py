"""Ledger metadata lookup (external collaborator boundary)."""

from .client import (
    SAMPLE_METADATA,
    LedgerClient,
    MockLedgerClient,
    build_ledger_client,
    parse_certificate_id,
)

__all__ = [
    "SAMPLE_METADATA",
    "LedgerClient",
    "MockLedgerClient",
    "build_ledger_client",
    "parse_certificate_id",
]
