"""
Module 01 - Schemas
File: errors.py

Purpose: Standard error taxonomy for the certificate verification engine.
Defines both Pydantic models for structured error communication
and Python exceptions for control flow.

Mismatches (wrong hash, wrong value, missing salt) are NOT errors: they are
ordinary matched=False results. Exceptions here mean "could not evaluate".
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Error Codes (Machine-Readable Constants)
# =============================================================================

class ErrorCodes:
    """Stable machine-readable error codes used across the engine."""

    # Input & Format Errors
    DOCUMENT_READ_ERROR = "DOCUMENT_READ_ERROR"
    INVALID_HASH_FORMAT = "INVALID_HASH_FORMAT"
    INVALID_PROOF_FORMAT = "INVALID_PROOF_FORMAT"
    FIELD_ENCODING_ERROR = "FIELD_ENCODING_ERROR"
    SCHEMA_VALIDATION_ERROR = "SCHEMA_VALIDATION_ERROR"

    # Collaborator Errors
    LEDGER_FETCH_FAILED = "LEDGER_FETCH_FAILED"

    # Catch-all for unexpected failures during evaluation
    EVALUATION_FAILED = "EVALUATION_FAILED"


# =============================================================================
# Pydantic Error Models (Structured Communication)
# =============================================================================

class CertProofError(BaseModel):
    """
    Base error model for structured error communication.

    Carried inside verification outcomes so that a caller can tell
    "cryptographically proven false" from "could not be evaluated".
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=False,
        validate_assignment=True,
    )

    code: str = Field(
        ...,
        description="Stable machine-readable error code",
        examples=[ErrorCodes.INVALID_PROOF_FORMAT],
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional structured details about the error",
    )
    retryable: bool = Field(
        default=False,
        description="Whether the operation can be retried",
    )

    def to_exception(self) -> "CertProofException":
        """Convert this error model to a raised exception."""
        return CertProofException(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )


# =============================================================================
# Python Exceptions (Control Flow)
# =============================================================================

class CertProofException(Exception):
    """
    Base exception for all verification engine errors.

    This exception carries structured error information and can be
    converted to/from CertProofError models.
    """

    def __init__(
        self,
        message: str,
        code: str = ErrorCodes.EVALUATION_FAILED,
        details: dict[str, Any] | None = None,
        retryable: bool = False,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}
        self.retryable = retryable

    def to_error_model(self) -> CertProofError:
        """Convert this exception to a CertProofError model."""
        return CertProofError(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class DocumentReadException(CertProofException):
    """Exception raised when a document source cannot be fully read."""

    def __init__(
        self,
        message: str,
        path: str | None = None,
        bytes_read: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if path:
            full_details["path"] = path
        if bytes_read is not None:
            full_details["bytes_read"] = bytes_read
        super().__init__(
            message=message,
            code=ErrorCodes.DOCUMENT_READ_ERROR,
            details=full_details,
            retryable=False,
        )


class InvalidHashFormatException(CertProofException):
    """Exception raised when a value is not a 64-char hex SHA-256 hash."""

    def __init__(
        self,
        message: str,
        value: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if value is not None:
            full_details["value"] = value
        super().__init__(
            message=message,
            code=ErrorCodes.INVALID_HASH_FORMAT,
            details=full_details,
            retryable=False,
        )


class InvalidProofFormatException(CertProofException):
    """Exception raised when a Merkle proof step or root is malformed."""

    def __init__(
        self,
        message: str,
        step_index: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if step_index is not None:
            full_details["step_index"] = step_index
        super().__init__(
            message=message,
            code=ErrorCodes.INVALID_PROOF_FORMAT,
            details=full_details,
            retryable=False,
        )


class FieldEncodingException(CertProofException):
    """Exception raised when field text cannot be encoded as UTF-8."""

    def __init__(
        self,
        message: str,
        field_name: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if field_name:
            full_details["field_name"] = field_name
        super().__init__(
            message=message,
            code=ErrorCodes.FIELD_ENCODING_ERROR,
            details=full_details,
            retryable=False,
        )


class SchemaValidationException(CertProofException):
    """Exception raised when schema validation fails."""

    def __init__(
        self,
        message: str,
        field_path: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if field_path:
            full_details["field_path"] = field_path
        super().__init__(
            message=message,
            code=ErrorCodes.SCHEMA_VALIDATION_ERROR,
            details=full_details,
            retryable=False,
        )


class LedgerException(CertProofException):
    """Exception raised when certificate metadata cannot be fetched or parsed."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
        retryable: bool = False,
    ) -> None:
        full_details = details or {}
        if status_code is not None:
            full_details["status_code"] = status_code
        super().__init__(
            message=message,
            code=ErrorCodes.LEDGER_FETCH_FAILED,
            details=full_details,
            retryable=retryable,
        )
