"""
Common test fixtures shared by all modules.

Provides factory functions for the collaborators most tests need:
- RuntimeConfig with a chosen combination strategy
- CertificateVerificationService
- IssuerRegistry with a small set of issuers
"""

from datetime import date
from typing import Optional

from core.config.runtime import LedgerConfig, RuntimeConfig, VerificationConfig
from core.issuers.registry import IssuerRegistry
from core.schemas.issuer import IssuerInfo, VerificationLevel
from core.verification.service import CertificateVerificationService


GOLD_ISSUER = "klv1gold0000000000000000000000000000000000000000000000000000"
SILVER_ISSUER = "klv1silver00000000000000000000000000000000000000000000000000"
EXPIRED_ISSUER = "klv1expired0000000000000000000000000000000000000000000000000"


def make_runtime_config(
    strategy: str = "sorted",
    max_workers: int = 4,
    use_mock_ledger: bool = True,
) -> RuntimeConfig:
    """Create a RuntimeConfig that never touches the network by default."""
    return RuntimeConfig(
        ledger=LedgerConfig(use_mock=use_mock_ledger),
        verification=VerificationConfig(
            combination_strategy=strategy,
            max_workers=max_workers,
        ),
    )


def make_issuer(
    address: str = GOLD_ISSUER,
    name: str = "Test Academy",
    level: VerificationLevel = VerificationLevel.GOLD,
    valid_from: date = date(2025, 1, 1),
    valid_until: Optional[date] = None,
) -> IssuerInfo:
    return IssuerInfo(
        address=address,
        name=name,
        type="university",
        level=level,
        valid_from=valid_from,
        valid_until=valid_until,
    )


def make_issuer_registry() -> IssuerRegistry:
    """Registry with a gold, a silver and an expired issuer."""
    return IssuerRegistry([
        make_issuer(),
        make_issuer(SILVER_ISSUER, "Silver School", VerificationLevel.SILVER),
        make_issuer(
            EXPIRED_ISSUER,
            "Closed Institute",
            VerificationLevel.BRONZE,
            valid_from=date(2020, 1, 1),
            valid_until=date(2021, 1, 1),
        ),
    ])


def make_service(
    strategy: str = "sorted",
    max_workers: int = 4,
    registry: Optional[IssuerRegistry] = None,
) -> CertificateVerificationService:
    return CertificateVerificationService(
        strategy=strategy,
        max_workers=max_workers,
        issuer_registry=registry,
    )
