"""
Issuer Registry

Immutable lookup table of authorised certificate issuers with trust tiers.

The registry is built once (at process start, by the API app or the CLI)
and handed to whatever needs issuer lookups. There is no module-level
singleton.
"""

from __future__ import annotations

import logging
from datetime import date
from types import MappingProxyType
from typing import Iterable, Mapping

from core.schemas.issuer import (
    IssuerInfo,
    IssuerVerification,
    VerificationLevel,
)


logger = logging.getLogger(__name__)


LEVEL_MESSAGES: Mapping[VerificationLevel, str] = MappingProxyType({
    VerificationLevel.GOLD: "Verified Educational Institution",
    VerificationLevel.SILVER: "Verified Organization",
    VerificationLevel.BRONZE: "Registered Issuer (Pending Full Verification)",
    VerificationLevel.UNVERIFIED: "Unverified Issuer",
})


DEFAULT_ISSUERS: tuple[IssuerInfo, ...] = (
    IssuerInfo(
        address="klv1graf3wqa8eefzmp3g95wrnmayzacsje2a6c6y7z6zmu9m8z8gz5qlrctat",
        name="Klever Academy - Testing Issuer",
        type="foundation",
        level=VerificationLevel.GOLD,
        website="https://klever.org",
        valid_from=date(2025, 1, 1),
        description="Official TEST Klever Foundation Academy",
        country="Global",
        accreditation=("Education Authority",),
    ),
    IssuerInfo(
        address="klv1a9wfngw5chea5myr6wmdf9hs50v5hpzmk5fzg4h6pjvk4l9gg5yszuecfs",
        name="Klever Academy",
        type="foundation",
        level=VerificationLevel.GOLD,
        website="https://klever.org",
        valid_from=date(2025, 1, 1),
        description="Official Klever Foundation Academy",
        country="Global",
        accreditation=("Education Authority",),
    ),
)


class IssuerRegistry:
    """
    Read-only registry of issuers keyed by lower-cased address.

    Usage:
        registry = IssuerRegistry(DEFAULT_ISSUERS)
        result = registry.verify("klv1...")
        if result.is_trusted:
            ...
    """

    def __init__(self, issuers: Iterable[IssuerInfo]) -> None:
        table: dict[str, IssuerInfo] = {}
        for issuer in issuers:
            key = issuer.address.lower()
            if key in table:
                raise ValueError(f"Duplicate issuer address in registry: {issuer.address}")
            table[key] = issuer
        self._issuers: Mapping[str, IssuerInfo] = MappingProxyType(table)

    def __len__(self) -> int:
        return len(self._issuers)

    def __contains__(self, address: object) -> bool:
        return isinstance(address, str) and address.lower() in self._issuers

    def get(self, address: str) -> IssuerInfo | None:
        """Look up an issuer by address (case-insensitive)."""
        return self._issuers.get(address.lower())

    def all(self) -> list[IssuerInfo]:
        return list(self._issuers.values())

    def by_level(self, level: VerificationLevel | str) -> list[IssuerInfo]:
        level = VerificationLevel(level)
        return [issuer for issuer in self._issuers.values() if issuer.level == level]

    def verify(self, address: str | None, today: date | None = None) -> IssuerVerification:
        """
        Check an issuer address against the registry.

        Args:
            address: Issuer ledger address (None when the ledger gave none)
            today: Reference date for validity windows (defaults to today)

        Returns:
            IssuerVerification; unknown, not-yet-valid and expired issuers
            are reported as unverified
        """
        if not address:
            return IssuerVerification(
                is_verified=False,
                level=VerificationLevel.UNVERIFIED,
                message="Issuer address not available in NFT data",
            )

        issuer = self.get(address)
        if issuer is None:
            logger.info(f"Issuer not in registry: {address}")
            return IssuerVerification(
                is_verified=False,
                level=VerificationLevel.UNVERIFIED,
                message="Unknown issuer - Certificate issued by unverified entity",
            )

        today = today or date.today()
        if today < issuer.valid_from:
            return IssuerVerification(
                is_verified=False,
                level=VerificationLevel.UNVERIFIED,
                message="Issuer verification not yet valid",
                issuer=issuer,
            )
        if issuer.valid_until is not None and today > issuer.valid_until:
            return IssuerVerification(
                is_verified=False,
                level=VerificationLevel.UNVERIFIED,
                message="Issuer verification has expired",
                issuer=issuer,
            )

        return IssuerVerification(
            is_verified=issuer.level != VerificationLevel.UNVERIFIED,
            level=issuer.level,
            message=LEVEL_MESSAGES[issuer.level],
            issuer=issuer,
        )

    def is_trusted(self, address: str | None, today: date | None = None) -> bool:
        """Gold and silver issuers within their validity window."""
        return self.verify(address, today=today).is_trusted


def default_registry() -> IssuerRegistry:
    """Build a registry from the shipped issuer table."""
    return IssuerRegistry(DEFAULT_ISSUERS)


__all__ = [
    "LEVEL_MESSAGES",
    "DEFAULT_ISSUERS",
    "IssuerRegistry",
    "default_registry",
]
