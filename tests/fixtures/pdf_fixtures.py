"""
PDF fixtures for metadata-reading tests.

Builds small but real certificate PDFs with pypdf: one blank A4 page and
an information dictionary laid out the way the certificate generator
writes it (Title "CERTIFICADO - <name>", Subject = course, salt in
Keywords, remaining fields in CertificateData, NFT id as a custom entry).
"""

import io
from typing import Optional

from pypdf import PdfWriter


CERTIFICATE_INFO = {
    "Title": "CERTIFICADO - Alice",
    "Subject": "Python Fundamentals",
    "Keywords": "certificate, salt: abcd-1234",
    "CreationDate": "D:20250314120000Z",
    "CertificateData": "Date|2025-03-14||Instructor|Bob Smith||Workload|40h",
    "nft_id": "KCERT-TEST/1",
}


def make_certificate_pdf(info: Optional[dict[str, str]] = None) -> bytes:
    """Create a one-page PDF whose information dictionary holds `info`."""
    writer = PdfWriter()
    writer.add_blank_page(width=595, height=842)
    entries = CERTIFICATE_INFO if info is None else info
    if entries:
        writer.add_metadata({f"/{key}": value for key, value in entries.items()})
    buffer = io.BytesIO()
    writer.write(buffer)
    return buffer.getvalue()
