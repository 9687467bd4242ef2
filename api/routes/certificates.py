"""
Module 05 - Certificate Routes

Verification against the reference values anchored on the ledger:
- GET  /certificates/{ticker}/{nonce}         metadata + issuer trust
- POST /certificates/{ticker}/{nonce}/verify  PDF and/or field values; the
  PDF metadata fills in fields, salt and embedded identifier
"""

from __future__ import annotations

import json
import logging

from fastapi import APIRouter, Depends, File, Form, UploadFile

from api.deps import (
    get_issuer_registry,
    get_ledger_client,
    get_verification_service,
)
from api.errors import InvalidRequestError
from api.models.responses import CertificateResponse, CertificateVerifyResponse
from core.issuers.registry import IssuerRegistry
from core.ledger.client import LedgerClient, MockLedgerClient
from core.metadata.pdf_reader import read_certificate_data
from core.verification.service import CertificateVerificationService


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/certificates", tags=["certificates"])


def _parse_field_values(raw: str) -> dict[str, str]:
    try:
        data = json.loads(raw) if raw else {}
    except json.JSONDecodeError as e:
        raise InvalidRequestError(f"'fields' must be a JSON object: {e}")
    if not isinstance(data, dict) or not all(
        isinstance(k, str) and isinstance(v, str) for k, v in data.items()
    ):
        raise InvalidRequestError("'fields' must map field names to string values")
    return data


@router.get("/{ticker}/{nonce}", response_model=CertificateResponse)
async def get_certificate(
    ticker: str,
    nonce: str,
    ledger: LedgerClient | MockLedgerClient = Depends(get_ledger_client),
    registry: IssuerRegistry = Depends(get_issuer_registry),
) -> CertificateResponse:
    """Fetch anchored metadata and the issuer's trust tier."""
    metadata = ledger.fetch_metadata(ticker, nonce)
    return CertificateResponse(
        certificate_id=f"{ticker}/{nonce}",
        metadata=metadata.to_ledger(),
        fields=metadata.field_names,
        issuer=registry.verify(metadata.issuer_address),
    )


@router.post("/{ticker}/{nonce}/verify", response_model=CertificateVerifyResponse)
async def verify_certificate(
    ticker: str,
    nonce: str,
    file: UploadFile | None = File(default=None, description="Certificate PDF"),
    fields: str = Form(default="{}", description="JSON object of field name -> value"),
    salt: str | None = Form(default=None),
    embedded_identifier: str | None = Form(default=None),
    ledger: LedgerClient | MockLedgerClient = Depends(get_ledger_client),
    service: CertificateVerificationService = Depends(get_verification_service),
) -> CertificateVerifyResponse:
    """
    Verify an uploaded PDF and/or typed field values against the ledger.

    At least one of file or fields is required. Field values, salt and
    embedded identifier read from the PDF metadata fill in whatever the
    form leaves out.
    """
    field_values = _parse_field_values(fields)
    if file is None and not field_values:
        raise InvalidRequestError("Provide a PDF file, field values, or both")

    if file is not None:
        embedded = read_certificate_data(file.file)
        field_values = {**embedded.values, **field_values}
        salt = salt or embedded.salt
        embedded_identifier = embedded_identifier or embedded.nft_id

    metadata = ledger.fetch_metadata(ticker, nonce)
    report = service.verify_certificate(
        metadata,
        document=file.file if file is not None else None,
        field_values=field_values,
        salt=salt,
        embedded_identifier=embedded_identifier,
    )
    return CertificateVerifyResponse(
        ok=report.ok,
        fields_matched=report.fields_matched,
        fields_total=report.fields_total,
        report=report,
    )
