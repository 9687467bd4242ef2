"""
Module 01 - Schemas
File: verification.py

Purpose: Standard result format for certificate verification.
Outcomes are strictly boolean at the cryptographic layer; "status" keeps a
proven mismatch apart from an input that could not be evaluated.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from .errors import CertProofError
from .issuer import IssuerVerification


# matched: cryptographically proven; mismatch: proven false; error: not evaluated
OutcomeStatus = Literal["matched", "mismatch", "error"]


class FieldOutcome(BaseModel):
    """Result of verifying a single certificate field."""

    model_config = ConfigDict(extra="forbid")

    field_name: str = Field(..., min_length=1)
    matched: bool = Field(
        ...,
        description="Whether the field value is proven part of the root",
    )
    status: OutcomeStatus = Field(...)
    leaf_hash: str | None = Field(
        default=None,
        description="Leaf commitment computed from the supplied value",
    )
    computed_root: str | None = Field(
        default=None,
        description="Root reconstructed by replaying the proof",
    )
    message: str = Field(default="")
    error: CertProofError | None = Field(
        default=None,
        description="Error details when the field could not be evaluated",
    )

    @property
    def is_error(self) -> bool:
        return self.status == "error"

    @classmethod
    def proven(
        cls,
        field_name: str,
        matched: bool,
        leaf_hash: str | None = None,
        computed_root: str | None = None,
    ) -> "FieldOutcome":
        """Create an outcome for a field whose proof was replayed."""
        return cls(
            field_name=field_name,
            matched=matched,
            status="matched" if matched else "mismatch",
            leaf_hash=leaf_hash,
            computed_root=computed_root,
            message="Field verified" if matched else "Field does not match anchored root",
        )

    @classmethod
    def unproven(cls, field_name: str, message: str) -> "FieldOutcome":
        """Create a mismatch outcome for a field that has nothing to replay."""
        return cls(
            field_name=field_name,
            matched=False,
            status="mismatch",
            message=message,
        )

    @classmethod
    def failed(cls, field_name: str, error: CertProofError) -> "FieldOutcome":
        """Create an outcome for a field that could not be evaluated."""
        return cls(
            field_name=field_name,
            matched=False,
            status="error",
            message=error.message,
            error=error,
        )


class DocumentOutcome(BaseModel):
    """
    Result of whole-document verification.

    identity_matched is the soft fallback check (embedded identifier vs
    expected identifier) and is never folded into matched.
    """

    model_config = ConfigDict(extra="forbid")

    matched: bool = Field(..., description="Whether the document hash matches")
    status: OutcomeStatus = Field(...)
    computed_hash: str | None = Field(default=None)
    expected_hash: str | None = Field(default=None)
    identity_matched: bool | None = Field(
        default=None,
        description="Fallback identity check result; None when not attempted",
    )
    message: str = Field(default="")
    error: CertProofError | None = Field(default=None)

    @property
    def structurally_plausible(self) -> bool:
        """Hash mismatch, but the embedded identifier matches."""
        return not self.matched and self.identity_matched is True

    @classmethod
    def failed(cls, error: CertProofError, expected_hash: str | None = None) -> "DocumentOutcome":
        return cls(
            matched=False,
            status="error",
            expected_hash=expected_hash,
            message=error.message,
            error=error,
        )


class VerificationReport(BaseModel):
    """
    Complete result of a certificate verification request.

    Aggregates the document outcome, every field outcome, and the issuer
    trust lookup when one was performed.
    """

    model_config = ConfigDict(extra="forbid")

    certificate_id: str | None = Field(default=None)
    document: DocumentOutcome | None = Field(default=None)
    fields: dict[str, FieldOutcome] = Field(default_factory=dict)
    unproven_fields: list[str] = Field(
        default_factory=list,
        description="Supplied field names with no recorded proof; not verified, not counted",
    )
    issuer: IssuerVerification | None = Field(default=None)

    @property
    def fields_total(self) -> int:
        return len(self.fields)

    @property
    def fields_matched(self) -> int:
        return sum(1 for outcome in self.fields.values() if outcome.matched)

    @property
    def all_fields_matched(self) -> bool:
        return bool(self.fields) and self.fields_matched == self.fields_total

    @property
    def has_errors(self) -> bool:
        """Check whether any part could not be evaluated."""
        if self.document is not None and self.document.status == "error":
            return True
        return any(outcome.is_error for outcome in self.fields.values())

    @property
    def ok(self) -> bool:
        """
        Overall verdict: every evaluated part matched.

        A report with neither a document nor fields is not ok.
        """
        if self.document is None and not self.fields:
            return False
        if self.document is not None and not self.document.matched:
            return False
        return all(outcome.matched for outcome in self.fields.values())

    def field_verdicts(self) -> dict[str, bool]:
        return {name: outcome.matched for name, outcome in self.fields.items()}

    def get_error_messages(self) -> list[str]:
        messages: list[str] = []
        if self.document is not None and self.document.error is not None:
            messages.append(f"document: {self.document.error.message}")
        for name, outcome in self.fields.items():
            if outcome.error is not None:
                messages.append(f"{name}: {outcome.error.message}")
        return messages
