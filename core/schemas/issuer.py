"""
Module 01 - Schemas
File: issuer.py

Purpose: Issuer trust registry records and lookup results.
"""

from __future__ import annotations

from datetime import date
from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


IssuerType = Literal["university", "institution", "company", "foundation", "individual"]


class VerificationLevel(str, Enum):
    """Trust tier of a registered issuer."""

    GOLD = "gold"
    SILVER = "silver"
    BRONZE = "bronze"
    UNVERIFIED = "unverified"


class IssuerInfo(BaseModel):
    """A registered certificate issuer."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    address: str = Field(..., min_length=1, description="Ledger address of the issuer")
    name: str = Field(..., min_length=1)
    type: IssuerType = Field(...)
    level: VerificationLevel = Field(...)
    valid_from: date = Field(...)
    valid_until: date | None = Field(default=None)
    website: str | None = Field(default=None)
    logo: str | None = Field(default=None)
    description: str | None = Field(default=None)
    country: str | None = Field(default=None)
    accreditation: tuple[str, ...] = Field(default_factory=tuple)


class IssuerVerification(BaseModel):
    """Result of looking up an issuer address in the registry."""

    model_config = ConfigDict(extra="forbid")

    is_verified: bool
    level: VerificationLevel
    message: str
    issuer: IssuerInfo | None = Field(default=None)

    @property
    def is_trusted(self) -> bool:
        """Gold and silver issuers are trusted without further review."""
        return self.level in (VerificationLevel.GOLD, VerificationLevel.SILVER)
