"""
Module 01 - Schemas
File: metadata.py

Purpose: Typed view of the certificate metadata anchored with the NFT.

The ledger stores an open JSON object. Known keys map to typed fields;
any other string entry lands in `extensions`. Non-string unknown entries
are dropped.

Wire keys:
    hash            -> document_hash
    rootHash        -> root_hash
    nft_id, verify_url
    proofs          -> {"<field>Proof": [{"hash": ..., "position": ...}, ...]}
    issuerAddress   -> issuer_address
    holderAddress   -> holder_address

Proofs stay in wire form here. A malformed step only fails the field it
belongs to, when that field is verified.
"""

from __future__ import annotations

import json
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import InvalidHashFormatException, SchemaValidationException


PROOF_KEY_SUFFIX = "Proof"

_KNOWN_KEYS = {
    "hash",
    "rootHash",
    "nft_id",
    "verify_url",
    "proofs",
    "issuerAddress",
    "holderAddress",
    "issuerVerification",
}


class CertificateMetadata(BaseModel):
    """
    Reference values for one certificate, as anchored on the ledger.

    These are trusted as the expected values; the evidence (PDF bytes,
    typed or extracted field values) is what gets checked against them.
    """

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    document_hash: str = Field(..., alias="hash", description="SHA-256 of the PDF")
    root_hash: str = Field(..., alias="rootHash", description="Merkle root over field leaves")
    nft_id: str | None = Field(default=None)
    verify_url: str | None = Field(default=None)
    proofs: dict[str, Any] = Field(
        default_factory=dict,
        description="Wire proof paths keyed by '<field>Proof', parsed per field at verification time",
    )
    issuer_address: str | None = Field(default=None, alias="issuerAddress")
    holder_address: str | None = Field(default=None, alias="holderAddress")
    extensions: dict[str, str] = Field(
        default_factory=dict,
        description="Unrecognised string entries from the ledger payload",
    )

    @field_validator("document_hash", "root_hash", mode="before")
    @classmethod
    def _normalize_hashes(cls, value: Any) -> str:
        from core.crypto.hashing import normalize_hash

        try:
            return normalize_hash(value)
        except InvalidHashFormatException as e:
            raise ValueError(e.message) from e

    @property
    def proofs_by_field(self) -> dict[str, Any]:
        """Proof paths keyed by bare field name ("nameProof" -> "name")."""
        result: dict[str, Any] = {}
        for key, steps in self.proofs.items():
            if key.endswith(PROOF_KEY_SUFFIX) and len(key) > len(PROOF_KEY_SUFFIX):
                result[key[: -len(PROOF_KEY_SUFFIX)]] = steps
        return result

    @property
    def field_names(self) -> list[str]:
        return list(self.proofs_by_field)

    def proof_for(self, field_name: str) -> Any:
        """Proof path for a field; empty when the field has none."""
        return self.proofs.get(f"{field_name}{PROOF_KEY_SUFFIX}", [])

    @classmethod
    def from_ledger(cls, data: dict[str, Any]) -> "CertificateMetadata":
        """
        Build metadata from the raw ledger object.

        Raises:
            SchemaValidationException: If required keys are missing or a
                                       hash is malformed
        """
        if not isinstance(data, dict):
            raise SchemaValidationException(
                f"Certificate metadata must be an object, got {type(data).__name__}"
            )

        known = {key: value for key, value in data.items() if key in _KNOWN_KEYS}
        # Issuer verification is recomputed locally, never trusted from the payload
        known.pop("issuerVerification", None)

        extensions = {
            key: value
            for key, value in data.items()
            if key not in _KNOWN_KEYS and isinstance(value, str)
        }

        try:
            return cls.model_validate({**known, "extensions": extensions})
        except ValidationError as e:
            problems = [
                f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}"
                for err in e.errors()
            ]
            raise SchemaValidationException(
                f"Invalid certificate metadata: {'; '.join(problems)}",
                details={"errors": problems},
            ) from e

    @classmethod
    def from_json(cls, text: str) -> "CertificateMetadata":
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise SchemaValidationException(f"Certificate metadata is not valid JSON: {e}") from e
        return cls.from_ledger(data)

    def to_ledger(self) -> dict[str, Any]:
        """Serialise back to the ledger wire shape."""
        data: dict[str, Any] = dict(self.extensions)
        data.update(
            self.model_dump(by_alias=True, exclude_none=True, exclude={"extensions"})
        )
        return data
