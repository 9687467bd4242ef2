"""
Module 04 - Certificate Verification Service

Orchestrates document hashing, leaf commitments and proof replay into
per-field and per-document outcomes.

Two layers:
- verify_* methods return plain booleans and let typed errors propagate
  (InvalidProofFormatException, FieldEncodingException, ...).
- evaluate_* methods never raise for bad input: errors become
  status="error" outcomes carrying a CertProofError, so callers can tell
  "proven false" from "could not be evaluated".

Fields are independent. evaluate_all() fans them out on a thread pool;
no state is shared between field verifications.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import IO, TYPE_CHECKING, Any, Mapping, Sequence, Union

from core.crypto.commitment import canonicalize_salt, commit_leaf
from core.crypto.hashing import (
    DEFAULT_CHUNK_SIZE,
    hash_document,
    hash_file,
    hash_stream,
    normalize_hash,
)
from core.merkle.merkle_proofs import CombinationStrategy, MerkleVerifier
from core.schemas.errors import CertProofError, CertProofException, ErrorCodes
from core.schemas.metadata import CertificateMetadata
from core.schemas.proof import ProofStep
from core.schemas.verification import DocumentOutcome, FieldOutcome, VerificationReport

if TYPE_CHECKING:
    from core.config.runtime import RuntimeConfig
    from core.issuers.registry import IssuerRegistry


logger = logging.getLogger(__name__)


DocumentSource = Union[bytes, bytearray, memoryview, str, Path, IO[bytes]]
ProofInput = Sequence[Union[ProofStep, dict[str, Any]]]


def _unexpected_error(exc: Exception) -> CertProofError:
    return CertProofError(
        code=ErrorCodes.EVALUATION_FAILED,
        message=f"Unexpected error during verification: {exc}",
        details={"type": type(exc).__name__},
    )


class CertificateVerificationService:
    """
    Verification engine facade.

    Example:
        service = CertificateVerificationService()
        ok = service.verify_field("name", "Alice", "abcd1234", proof, root)
        verdicts = service.verify_all(
            {"name": ("Alice", name_proof), "course": ("Python", course_proof)},
            salt="abcd1234",
            expected_root=root,
        )
    """

    def __init__(
        self,
        *,
        strategy: CombinationStrategy | str = CombinationStrategy.SORTED,
        max_workers: int = 4,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        identity_fallback: bool = True,
        issuer_registry: "IssuerRegistry | None" = None,
    ) -> None:
        if max_workers < 1:
            raise ValueError(f"max_workers must be at least 1, got {max_workers}")
        self.verifier = MerkleVerifier(strategy)
        self.max_workers = max_workers
        self.chunk_size = chunk_size
        self.identity_fallback = identity_fallback
        self.issuer_registry = issuer_registry

    @classmethod
    def from_config(
        cls,
        config: "RuntimeConfig",
        issuer_registry: "IssuerRegistry | None" = None,
    ) -> "CertificateVerificationService":
        """Create a service from runtime configuration."""
        v = config.verification
        return cls(
            strategy=v.combination_strategy,
            max_workers=v.max_workers,
            chunk_size=v.chunk_size,
            identity_fallback=v.identity_fallback,
            issuer_registry=issuer_registry,
        )

    @property
    def strategy(self) -> CombinationStrategy:
        return self.verifier.strategy

    # -------------------------------------------------------------------------
    # Document
    # -------------------------------------------------------------------------

    def hash_document(self, source: DocumentSource) -> str:
        """Hash bytes, a file path (str or Path) or a readable binary handle."""
        if isinstance(source, (bytes, bytearray, memoryview)):
            return hash_document(bytes(source))
        if isinstance(source, (str, Path)):
            return hash_file(Path(source), chunk_size=self.chunk_size)
        if not hasattr(source, "read"):
            raise TypeError(
                f"Document source must be bytes, a path or a binary stream, got {type(source).__name__}"
            )
        return hash_stream(source, chunk_size=self.chunk_size)

    def verify_document(self, source: DocumentSource, expected_document_hash: str) -> bool:
        """
        Check the whole document against its anchored hash.

        Raises:
            DocumentReadException: If the source cannot be read
            InvalidHashFormatException: If the expected hash is malformed
        """
        expected = normalize_hash(expected_document_hash)
        return self.hash_document(source) == expected

    def evaluate_document(
        self,
        source: DocumentSource,
        expected_document_hash: str,
        embedded_identifier: str | None = None,
        expected_identifier: str | None = None,
    ) -> DocumentOutcome:
        """
        Verify a document and build a structured outcome.

        On a hash mismatch, and when both identifiers are given, the
        embedded identifier (e.g. the NFT id stored in the PDF metadata) is
        compared with the expected one. The result goes to
        identity_matched; matched stays False.
        """
        try:
            expected = normalize_hash(expected_document_hash)
            computed = self.hash_document(source)
        except CertProofException as e:
            logger.warning(f"Document could not be evaluated: {e.message}")
            return DocumentOutcome.failed(e.to_error_model(), expected_hash=expected_document_hash)
        except Exception as e:
            logger.exception("Unexpected error while hashing document")
            return DocumentOutcome.failed(_unexpected_error(e), expected_hash=expected_document_hash)

        if computed == expected:
            return DocumentOutcome(
                matched=True,
                status="matched",
                computed_hash=computed,
                expected_hash=expected,
                message="PDF verified",
            )

        identity_matched: bool | None = None
        message = "PDF verification failed"
        if self.identity_fallback and embedded_identifier and expected_identifier:
            identity_matched = embedded_identifier.strip() == expected_identifier.strip()
            if identity_matched:
                message = "Document hash mismatch; embedded identifier matches"

        logger.info(f"Document hash mismatch: computed={computed} expected={expected}")
        return DocumentOutcome(
            matched=False,
            status="mismatch",
            computed_hash=computed,
            expected_hash=expected,
            identity_matched=identity_matched,
            message=message,
        )

    # -------------------------------------------------------------------------
    # Fields
    # -------------------------------------------------------------------------

    def verify_field(
        self,
        field_name: str,
        field_value: str,
        salt: str | None,
        proof: ProofInput | None,
        expected_root: str,
    ) -> bool:
        """
        Prove a single field value against the anchored root.

        Raises:
            InvalidProofFormatException: Malformed proof step or root
            FieldEncodingException: Field text is not encodable as UTF-8
        """
        leaf = commit_leaf(field_name, field_value, salt)
        return self.verifier.verify(leaf, proof, expected_root)

    def evaluate_field(
        self,
        field_name: str,
        field_value: str,
        salt: str | None,
        proof: ProofInput | None,
        expected_root: str,
    ) -> FieldOutcome:
        """Verify a field and capture errors as a status="error" outcome."""
        try:
            leaf = commit_leaf(field_name, field_value, salt)
            computed_root, matched = self.verifier.replay(leaf, proof, expected_root)
        except CertProofException as e:
            logger.warning(f"Field '{field_name}' could not be evaluated: {e.message}")
            return FieldOutcome.failed(field_name, e.to_error_model())
        except Exception as e:
            logger.exception(f"Unexpected error while verifying field '{field_name}'")
            return FieldOutcome.failed(field_name, _unexpected_error(e))

        return FieldOutcome.proven(
            field_name,
            matched,
            leaf_hash=leaf,
            computed_root=computed_root,
        )

    def evaluate_all(
        self,
        fields: Mapping[str, tuple[str, ProofInput | None]],
        salt: str | None,
        expected_root: str,
    ) -> dict[str, FieldOutcome]:
        """
        Evaluate every field independently.

        Args:
            fields: field name -> (value, proof)
            salt: Shared certificate salt (dashes allowed)
            expected_root: Anchored root hash

        Returns:
            field name -> FieldOutcome, in the input order
        """
        salt = canonicalize_salt(salt)
        names = list(fields)

        def run(name: str) -> FieldOutcome:
            value, proof = fields[name]
            return self.evaluate_field(name, value, salt, proof, expected_root)

        if self.max_workers == 1 or len(names) <= 1:
            outcomes = [run(name) for name in names]
        else:
            with ThreadPoolExecutor(max_workers=min(self.max_workers, len(names))) as pool:
                outcomes = list(pool.map(run, names))

        return dict(zip(names, outcomes))

    def verify_all(
        self,
        fields: Mapping[str, tuple[str, ProofInput | None]],
        salt: str | None,
        expected_root: str,
    ) -> dict[str, bool]:
        """
        Boolean verdict per field.

        A field that could not be evaluated (malformed proof or root,
        unencodable value) is reported as False here, the same as a proven
        mismatch. Use evaluate_all() when the two must be told apart.
        """
        outcomes = self.evaluate_all(fields, salt, expected_root)
        return {name: outcome.matched for name, outcome in outcomes.items()}

    # -------------------------------------------------------------------------
    # Whole certificate
    # -------------------------------------------------------------------------

    def verify_certificate(
        self,
        metadata: CertificateMetadata,
        document: DocumentSource | None = None,
        field_values: Mapping[str, str | None] | None = None,
        salt: str | None = None,
        embedded_identifier: str | None = None,
    ) -> VerificationReport:
        """
        Run the full verification flow for one certificate.

        - The document (if given) is checked against metadata.document_hash,
          with the identity fallback against metadata.nft_id.
        - Every field with a recorded proof is checked; one without a
          supplied value is a mismatch. Supplied values for names that have
          no proof (extra PDF metadata such as creationdate or producer)
          are listed in report.unproven_fields and do not affect ok.
        - The issuer is looked up when a registry was injected.
        """
        report = VerificationReport(certificate_id=metadata.nft_id)

        if document is not None:
            report.document = self.evaluate_document(
                document,
                metadata.document_hash,
                embedded_identifier=embedded_identifier,
                expected_identifier=metadata.nft_id,
            )

        values = dict(field_values or {})
        proofs = metadata.proofs_by_field

        to_evaluate: dict[str, tuple[str, ProofInput | None]] = {}
        skipped: dict[str, FieldOutcome] = {}
        for name, proof in proofs.items():
            value = values.get(name)
            if value is None or value == "":
                skipped[name] = FieldOutcome.unproven(name, "No value supplied")
            else:
                to_evaluate[name] = (value, proof)
        report.unproven_fields = [name for name in values if name not in proofs]
        if report.unproven_fields:
            logger.debug(f"Ignoring values without a recorded proof: {report.unproven_fields}")

        evaluated = self.evaluate_all(to_evaluate, salt, metadata.root_hash)
        report.fields = {
            name: evaluated[name] if name in evaluated else skipped[name]
            for name in proofs
        }

        if self.issuer_registry is not None:
            report.issuer = self.issuer_registry.verify(metadata.issuer_address)

        logger.info(
            f"Certificate {metadata.nft_id or '<unknown>'}: "
            f"{report.fields_matched}/{report.fields_total} fields matched, "
            f"document={'n/a' if report.document is None else report.document.status}"
        )
        return report


__all__ = [
    "DocumentSource",
    "CertificateVerificationService",
]
