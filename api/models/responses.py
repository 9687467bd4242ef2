"""
Module 05 - API Response Models

Pydantic models for API response serialization.
"""

from typing import Any

from pydantic import BaseModel, Field

from core.schemas.issuer import IssuerInfo, IssuerVerification
from core.schemas.verification import DocumentOutcome, FieldOutcome, VerificationReport


class HealthResponse(BaseModel):
    """Response for GET /health endpoint."""

    ok: bool = True
    service: str = "certproof-api"
    version: str = "v1"


class DocumentVerifyResponse(BaseModel):
    """Response for POST /verify/document."""

    ok: bool = Field(..., description="Whether the document hash matched")
    document: DocumentOutcome


class FieldsVerifyResponse(BaseModel):
    """Response for POST /verify/fields."""

    ok: bool = Field(..., description="Whether every field matched")
    verdicts: dict[str, bool] = Field(default_factory=dict)
    fields: dict[str, FieldOutcome] = Field(default_factory=dict)
    errors: list[str] = Field(default_factory=list)


class CertificateResponse(BaseModel):
    """Response for GET /certificates/{ticker}/{nonce}."""

    ok: bool = True
    certificate_id: str
    metadata: dict[str, Any] = Field(..., description="Metadata in ledger wire shape")
    fields: list[str] = Field(default_factory=list, description="Fields that carry a proof")
    issuer: IssuerVerification


class IssuersResponse(BaseModel):
    """Response for GET /issuers."""

    ok: bool = True
    issuers: list[IssuerInfo] = Field(default_factory=list)


class ErrorDetail(BaseModel):
    """Error detail structure."""

    code: str = Field(..., description="Error code")
    message: str = Field(..., description="Human-readable error message")
    details: dict[str, Any] = Field(default_factory=dict)


class ErrorResponse(BaseModel):
    """Standard error response."""

    ok: bool = False
    error: ErrorDetail


class CertificateVerifyResponse(BaseModel):
    """Response for POST /certificates/{ticker}/{nonce}/verify."""

    ok: bool = Field(..., description="Document (if sent) and every field matched")
    fields_matched: int = 0
    fields_total: int = 0
    report: VerificationReport
