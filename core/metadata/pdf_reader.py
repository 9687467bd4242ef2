"""
PDF Metadata Reader

Reads the metadata of a certificate PDF with pypdf and splits it the way
extract_certificate_fields() expects it:
- info:   standard document information entries (Title, Subject, Keywords, ...)
- custom: every other entry of the information dictionary (CertificateData,
          nft_id, salt, ...)
- xmp:    XMP properties, keyed "pdf:Producer", "pdf:Keywords", ... plus the
          pdfx custom properties under their own names

Reading is best-effort: a PDF that cannot be parsed yields empty metadata
and a warning. The document hash is checked separately and does not
depend on this stage.
"""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import IO, Any, Union

from pypdf import PdfReader

from .pdf_fields import extract_certificate_fields, split_embedded


logger = logging.getLogger(__name__)


PdfSource = Union[bytes, str, Path, IO[bytes]]

STANDARD_INFO_KEYS = frozenset({
    "Title",
    "Author",
    "Subject",
    "Keywords",
    "Creator",
    "Producer",
    "CreationDate",
    "ModDate",
    "Trapped",
})

# XmpInformation attribute -> flattened key
_XMP_PROPERTIES = {
    "pdf_keywords": "pdf:Keywords",
    "pdf_producer": "pdf:Producer",
    "pdf_pdfversion": "pdf:PDFVersion",
    "xmp_creator_tool": "xmp:CreatorTool",
}


@dataclass
class PdfMetadata:
    """Raw metadata read from a PDF, all values as strings."""
    info: dict[str, str] = field(default_factory=dict)
    custom: dict[str, str] = field(default_factory=dict)
    xmp: dict[str, str] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return not (self.info or self.custom or self.xmp)

    def to_fields(self) -> dict[str, str]:
        """Recognised certificate fields (untrusted), salt de-dashed."""
        return extract_certificate_fields(self.info, self.custom, self.xmp)


@dataclass
class EmbeddedCertificateData:
    """Field values, salt and NFT id found in a certificate PDF."""
    values: dict[str, str] = field(default_factory=dict)
    salt: str | None = None
    nft_id: str | None = None


def _split_info(info: Any) -> tuple[dict[str, str], dict[str, str]]:
    standard: dict[str, str] = {}
    custom: dict[str, str] = {}
    for raw_key in info:
        value = info[raw_key]
        if not isinstance(value, str) or not value:
            continue
        key = str(raw_key).lstrip("/")
        target = standard if key in STANDARD_INFO_KEYS else custom
        target[key] = str(value)
    return standard, custom


def _flatten_xmp(xmp: Any) -> dict[str, str]:
    """Flatten an XmpInformation object into string entries."""
    entries: dict[str, str] = {}
    for attribute, key in _XMP_PROPERTIES.items():
        value = getattr(xmp, attribute, None)
        if isinstance(value, str) and value:
            entries[key] = value
    for key, value in (getattr(xmp, "custom_properties", None) or {}).items():
        if value not in (None, ""):
            entries[str(key)] = str(value)
    return entries


def read_pdf_metadata(source: PdfSource) -> PdfMetadata:
    """
    Read the information dictionary and XMP metadata of a PDF.

    Args:
        source: PDF bytes, a path, or a seekable binary stream. A stream is
                rewound to where it started afterwards.

    Returns:
        PdfMetadata; empty when the PDF cannot be read
    """
    stream: Any = io.BytesIO(source) if isinstance(source, (bytes, bytearray)) else source
    start = stream.tell() if hasattr(stream, "tell") else None

    metadata = PdfMetadata()
    try:
        reader = PdfReader(stream)
        if reader.metadata:
            metadata.info, metadata.custom = _split_info(reader.metadata)
    except Exception as e:
        logger.warning(f"Could not read PDF metadata: {e}")
        return metadata
    finally:
        if start is not None:
            stream.seek(start)

    try:
        xmp = reader.xmp_metadata
        if xmp is not None:
            metadata.xmp = _flatten_xmp(xmp)
    except Exception as e:
        logger.warning(f"Could not read XMP metadata: {e}")
    finally:
        if start is not None:
            stream.seek(start)

    logger.debug(
        f"PDF metadata: info={sorted(metadata.info)} custom={sorted(metadata.custom)} "
        f"xmp={sorted(metadata.xmp)}"
    )
    return metadata


def read_certificate_data(source: PdfSource) -> EmbeddedCertificateData:
    """Read a certificate PDF and return its field values, salt and NFT id."""
    values, salt, nft_id = split_embedded(read_pdf_metadata(source).to_fields())
    return EmbeddedCertificateData(values=values, salt=salt, nft_id=nft_id)


__all__ = [
    "PdfSource",
    "STANDARD_INFO_KEYS",
    "PdfMetadata",
    "EmbeddedCertificateData",
    "read_pdf_metadata",
    "read_certificate_data",
]
