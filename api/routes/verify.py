"""
Module 05 - Verify Routes

Stateless verification against caller-supplied reference values:
- POST /verify/document: uploaded PDF vs expected document hash
- POST /verify/fields:   field values + proofs vs expected root
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, File, Form, UploadFile

from api.deps import get_verification_service
from api.errors import MissingFileError
from api.models.requests import FieldsVerifyRequest
from api.models.responses import DocumentVerifyResponse, FieldsVerifyResponse
from core.crypto.hashing import normalize_hash
from core.verification.service import CertificateVerificationService


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/verify", tags=["verification"])


@router.post("/document", response_model=DocumentVerifyResponse)
async def verify_document(
    file: UploadFile | None = File(default=None, description="Certificate PDF"),
    expected_hash: str = Form(..., description="Anchored SHA-256 of the document"),
    embedded_identifier: str | None = Form(default=None),
    expected_identifier: str | None = Form(default=None),
    service: CertificateVerificationService = Depends(get_verification_service),
) -> DocumentVerifyResponse:
    """
    Hash an uploaded document and compare it with the anchored hash.

    The upload is hashed from its spooled file in bounded chunks. A
    malformed expected hash is rejected with 400.
    """
    if file is None:
        raise MissingFileError("A PDF file must be uploaded as 'file'")

    expected = normalize_hash(expected_hash)
    outcome = service.evaluate_document(
        file.file,
        expected,
        embedded_identifier=embedded_identifier,
        expected_identifier=expected_identifier,
    )
    logger.info(f"Document '{file.filename}' verification: {outcome.status}")
    return DocumentVerifyResponse(ok=outcome.matched, document=outcome)


@router.post("/fields", response_model=FieldsVerifyResponse)
async def verify_fields(
    request: FieldsVerifyRequest,
    service: CertificateVerificationService = Depends(get_verification_service),
) -> FieldsVerifyResponse:
    """
    Verify field values against an anchored root.

    A malformed root rejects the whole request. A malformed proof only
    marks its own field as status="error".
    """
    root = normalize_hash(request.root_hash)
    fields = {
        name: (evidence.value, evidence.proof)
        for name, evidence in request.fields.items()
    }
    outcomes = service.evaluate_all(fields, request.salt, root)

    return FieldsVerifyResponse(
        ok=all(outcome.matched for outcome in outcomes.values()),
        verdicts={name: outcome.matched for name, outcome in outcomes.items()},
        fields=outcomes,
        errors=[
            f"{name}: {outcome.error.message}"
            for name, outcome in outcomes.items()
            if outcome.error is not None
        ],
    )
