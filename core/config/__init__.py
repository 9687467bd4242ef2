"""
Runtime Configuration Module

Provides configuration loading and management for certproof.
"""

from .runtime import (
    DEFAULT_LEDGER_API_URL,
    HttpConfig,
    LedgerConfig,
    RuntimeConfig,
    VerificationConfig,
    config_search_paths,
    load_runtime_config,
)

__all__ = [
    "DEFAULT_LEDGER_API_URL",
    "HttpConfig",
    "LedgerConfig",
    "RuntimeConfig",
    "VerificationConfig",
    "config_search_paths",
    "load_runtime_config",
]
