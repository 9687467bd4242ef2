"""
Module 01 - Schemas

Pydantic models shared by the verification engine, the API and the CLI.

This package must not import core.crypto at module level: core.crypto
depends on the error taxonomy defined here.
"""

# Errors
from .errors import (
    CertProofError,
    CertProofException,
    DocumentReadException,
    ErrorCodes,
    FieldEncodingException,
    InvalidHashFormatException,
    InvalidProofFormatException,
    LedgerException,
    SchemaValidationException,
)

# Proof steps
from .proof import (
    ProofPosition,
    ProofStep,
    parse_proof,
    parse_proof_step,
    proof_to_wire,
)

# Issuers
from .issuer import (
    IssuerInfo,
    IssuerType,
    IssuerVerification,
    VerificationLevel,
)

# Certificate metadata
from .metadata import (
    PROOF_KEY_SUFFIX,
    CertificateMetadata,
)

# Verification outcomes
from .verification import (
    DocumentOutcome,
    FieldOutcome,
    OutcomeStatus,
    VerificationReport,
)


__all__ = [
    # Errors
    "CertProofError",
    "CertProofException",
    "DocumentReadException",
    "ErrorCodes",
    "FieldEncodingException",
    "InvalidHashFormatException",
    "InvalidProofFormatException",
    "LedgerException",
    "SchemaValidationException",
    # Proof steps
    "ProofPosition",
    "ProofStep",
    "parse_proof",
    "parse_proof_step",
    "proof_to_wire",
    # Issuers
    "IssuerInfo",
    "IssuerType",
    "IssuerVerification",
    "VerificationLevel",
    # Metadata
    "PROOF_KEY_SUFFIX",
    "CertificateMetadata",
    # Verification
    "DocumentOutcome",
    "FieldOutcome",
    "OutcomeStatus",
    "VerificationReport",
]
