"""API request and response models."""

from api.models.requests import FieldEvidence, FieldsVerifyRequest
from api.models.responses import (
    CertificateResponse,
    CertificateVerifyResponse,
    DocumentVerifyResponse,
    ErrorDetail,
    ErrorResponse,
    FieldsVerifyResponse,
    HealthResponse,
    IssuersResponse,
)

__all__ = [
    "FieldEvidence",
    "FieldsVerifyRequest",
    "CertificateResponse",
    "CertificateVerifyResponse",
    "DocumentVerifyResponse",
    "ErrorDetail",
    "ErrorResponse",
    "FieldsVerifyResponse",
    "HealthResponse",
    "IssuersResponse",
]
