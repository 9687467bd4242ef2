"""PDF metadata reading and field extraction (untrusted input stage)."""

from .pdf_fields import (
    FIELD_ALIASES,
    IDENTIFIER_FIELD,
    STANDARD_FIELDS,
    extract_certificate_fields,
    normalize_key,
    parse_certificate_data,
    split_embedded,
    split_salt,
)
from .pdf_reader import (
    EmbeddedCertificateData,
    PdfMetadata,
    read_certificate_data,
    read_pdf_metadata,
)

__all__ = [
    "FIELD_ALIASES",
    "IDENTIFIER_FIELD",
    "STANDARD_FIELDS",
    "extract_certificate_fields",
    "normalize_key",
    "parse_certificate_data",
    "split_embedded",
    "split_salt",
    "EmbeddedCertificateData",
    "PdfMetadata",
    "read_certificate_data",
    "read_pdf_metadata",
]
