"""
Module 05 - API Request Models

Pydantic models for API request validation.
"""

from typing import Any

from pydantic import BaseModel, Field


class FieldEvidence(BaseModel):
    """A field value and the proof path it is checked with."""

    value: str = Field(..., description="Field value as printed on the certificate")
    proof: list[dict[str, Any]] = Field(
        default_factory=list,
        description='Proof steps, leaf-to-root: [{"hash": ..., "position": "left"|"right"}]',
    )


class FieldsVerifyRequest(BaseModel):
    """Request body for POST /verify/fields."""

    root_hash: str = Field(..., min_length=1, description="Anchored Merkle root")
    salt: str | None = Field(
        default=None,
        description="Certificate salt (dash-grouped form accepted)",
    )
    fields: dict[str, FieldEvidence] = Field(
        ...,
        min_length=1,
        description="Field name -> value and proof",
    )
