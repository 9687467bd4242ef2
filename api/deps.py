"""
Module 05 - API Dependencies

Dependency injection for the API.

Process-wide collaborators (config, issuer registry, verification service,
ledger client) are built once in create_app() and stored on app.state;
routes receive them through these dependency functions.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from fastapi import Request

from core.config.runtime import RuntimeConfig, load_runtime_config
from core.issuers.registry import IssuerRegistry, default_registry
from core.ledger.client import LedgerClient, MockLedgerClient, build_ledger_client
from core.verification.service import CertificateVerificationService

logger = logging.getLogger(__name__)


@dataclass
class AppServices:
    """Collaborators shared by all requests."""
    config: RuntimeConfig
    registry: IssuerRegistry
    service: CertificateVerificationService
    ledger: LedgerClient | MockLedgerClient


def build_services(
    config: RuntimeConfig | None = None,
    registry: IssuerRegistry | None = None,
    ledger: LedgerClient | MockLedgerClient | None = None,
) -> AppServices:
    """
    Build the shared collaborators.

    Without an explicit config, the config file search path and environment
    variables are used (see core.config.runtime.load_runtime_config).
    """
    if config is None:
        config = load_runtime_config()
        logger.info(
            f"Loaded runtime config (strategy={config.verification.combination_strategy.value}, "
            f"mock_ledger={config.ledger.use_mock})"
        )
    registry = registry or default_registry()
    return AppServices(
        config=config,
        registry=registry,
        service=CertificateVerificationService.from_config(config, issuer_registry=registry),
        ledger=ledger or build_ledger_client(config),
    )


def get_services(request: Request) -> AppServices:
    return request.app.state.services


def get_verification_service(request: Request) -> CertificateVerificationService:
    return get_services(request).service


def get_issuer_registry(request: Request) -> IssuerRegistry:
    return get_services(request).registry


def get_ledger_client(request: Request) -> LedgerClient | MockLedgerClient:
    return get_services(request).ledger
