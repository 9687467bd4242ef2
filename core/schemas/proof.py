"""
Module 01 - Schemas
File: proof.py

Purpose: Merkle proof step schema and wire-format parsing.

Wire shape (one step):
    {"hash": "<64 lowercase hex>", "position": "left" | "right"}

A proof is an ordered list of steps, leaf-to-root: index 0 is combined
with the leaf commitment first.
"""

from __future__ import annotations

from typing import Any, Iterable, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import InvalidHashFormatException, InvalidProofFormatException


# Which side the sibling occupies relative to the running hash
ProofPosition = Literal["left", "right"]


class ProofStep(BaseModel):
    """
    One level of a Merkle proof path.

    Attributes:
        hash: Hex hash of the sibling node at this level
        position: Side of the sibling; "right" combines (current, sibling),
                  "left" combines (sibling, current)
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    hash: str = Field(
        ...,
        description="Sibling hash (64 hex chars, normalised to lowercase)",
    )
    position: ProofPosition = Field(
        ...,
        description="Side of the sibling node: left or right",
    )

    @field_validator("hash", mode="before")
    @classmethod
    def _normalize_sibling(cls, value: Any) -> str:
        # Imported lazily: core.crypto depends on this package's errors module
        from core.crypto.hashing import normalize_hash

        try:
            return normalize_hash(value)
        except InvalidHashFormatException as e:
            raise ValueError(e.message) from e

    @field_validator("position", mode="before")
    @classmethod
    def _normalize_position(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @property
    def sibling_hash(self) -> str:
        return self.hash

    def swapped(self) -> "ProofStep":
        """Return the same step with the opposite position."""
        other: ProofPosition = "left" if self.position == "right" else "right"
        return ProofStep(hash=self.hash, position=other)

    def to_wire(self) -> dict[str, str]:
        return {"hash": self.hash, "position": self.position}


def parse_proof_step(raw: Any, step_index: int | None = None) -> ProofStep:
    """
    Parse one proof step from its wire form.

    Raises:
        InvalidProofFormatException: If the hash or position is malformed
    """
    if isinstance(raw, ProofStep):
        return raw
    if not isinstance(raw, dict):
        raise InvalidProofFormatException(
            f"Proof step must be an object, got {type(raw).__name__}",
            step_index=step_index,
        )
    try:
        return ProofStep.model_validate(raw)
    except ValidationError as e:
        problems = [
            f"{'.'.join(str(p) for p in err['loc']) or 'step'}: {err['msg']}"
            for err in e.errors()
        ]
        raise InvalidProofFormatException(
            f"Malformed proof step: {'; '.join(problems)}",
            step_index=step_index,
            details={"errors": problems},
        ) from e


def parse_proof(raw: Any) -> list[ProofStep]:
    """
    Parse a whole proof (leaf-to-root order is preserved).

    None is treated as an empty proof.

    Raises:
        InvalidProofFormatException: If the proof is not a list or any
                                     step is malformed
    """
    if raw is None:
        return []
    if not isinstance(raw, (list, tuple)):
        raise InvalidProofFormatException(
            f"Proof must be a list of steps, got {type(raw).__name__}",
        )
    return [parse_proof_step(step, step_index=i) for i, step in enumerate(raw)]


def proof_to_wire(proof: Iterable[ProofStep]) -> list[dict[str, str]]:
    """Serialise a proof back to its wire form."""
    return [step.to_wire() for step in proof]
