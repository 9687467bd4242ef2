"""
PDF Metadata Field Extraction

Maps the metadata dictionaries of a certificate PDF onto the field names
used in proofs (name, course, date, instructor, ...).

Input is what a PDF reader already produced:
- info:   the document information dictionary (Title, Subject, Keywords,
          custom keys)
- custom: custom properties; "CertificateData" holds "k|v||k|v" pairs
- xmp:    flattened XMP entries (keys like "pdf:Producer")

This stage is best-effort and returns a partial mapping. Every value it
returns is untrusted input and goes through the same verification as a
typed value.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Mapping

from core.crypto.commitment import canonicalize_salt


logger = logging.getLogger(__name__)


STANDARD_FIELDS = (
    "name",
    "course",
    "course_load",
    "location",
    "date",
    "instructor",
    "instructor_title",
    "issuer",
    "salt",
)

# Key under which the generator embeds the certificate NFT id
IDENTIFIER_FIELD = "nft_id"

# PDF key aliases -> proof field names
FIELD_ALIASES: dict[str, str] = {
    "course_name": "course",
    "instructor_name": "instructor",
    "issue_date": "date",
    "certificate_date": "date",
    "verification_salt": "salt",
    "hash_salt": "salt",
}

# Partial matches kept under their own normalised key
_RELATED_MARKERS = ("name", "course", "instructor", "date", "salt")

_KEYWORDS_SALT_RE = re.compile(r"salt:\s*([a-fA-F0-9-]+)")
_TITLE_MARKER = "CERTIFICADO"


def normalize_key(key: str) -> str:
    """Lower-case, map "-" and " " to "_", drop a leading "pdf:"."""
    normalized = re.sub(r"[- ]", "_", key.strip().lower())
    if normalized.startswith("pdf:"):
        normalized = normalized[len("pdf:"):]
    return normalized


def parse_certificate_data(raw: str) -> dict[str, str]:
    """
    Parse a pipe-delimited CertificateData string.

    Example:
        >>> parse_certificate_data("Name|Alice||Course|Python")
        {'name': 'Alice', 'course': 'Python'}
    """
    result: dict[str, str] = {}
    for pair in raw.split("||"):
        key, sep, value = pair.partition("|")
        if not sep:
            continue
        key, value = key.strip(), value.strip()
        if key and value:
            result[normalize_key(key)] = value
    return result


def _from_info(info: Mapping[str, Any]) -> dict[str, str]:
    fields: dict[str, str] = {}

    for key, value in info.items():
        if not isinstance(key, str) or not isinstance(value, str) or not value:
            continue

        if key == "Title" and " - " in value:
            parts = value.split(" - ")
            if len(parts) == 2 and _TITLE_MARKER in parts[0]:
                fields["name"] = parts[1].strip()

        if key == "Subject":
            fields["course"] = value

        if key == "Keywords" and "salt:" in value:
            match = _KEYWORDS_SALT_RE.search(value)
            if match:
                fields["salt"] = match.group(1)

        normalized = normalize_key(key)
        if normalized in FIELD_ALIASES:
            fields[FIELD_ALIASES[normalized]] = value
        elif normalized in STANDARD_FIELDS:
            fields[normalized] = value
        elif any(marker in normalized for marker in _RELATED_MARKERS):
            fields[normalized] = value

    return fields


def _from_custom(custom: Mapping[str, Any], fields: dict[str, str]) -> None:
    certificate_data = custom.get("CertificateData")
    if certificate_data:
        fields.update(parse_certificate_data(str(certificate_data)))

    for key, value in custom.items():
        if key == "CertificateData" or not isinstance(key, str) or value in (None, ""):
            continue
        normalized = normalize_key(key)
        fields.setdefault(normalized, str(value))
        if normalized == "salt":
            fields["salt"] = str(value)


def _from_xmp(xmp: Mapping[str, Any], fields: dict[str, str]) -> None:
    for key, value in xmp.items():
        if not isinstance(key, str) or value in (None, ""):
            continue
        normalized = normalize_key(key)
        fields.setdefault(normalized, str(value))
        if normalized == "salt":
            fields["salt"] = str(value)


def extract_certificate_fields(
    info: Mapping[str, Any] | None,
    custom: Mapping[str, Any] | None = None,
    xmp: Mapping[str, Any] | None = None,
) -> dict[str, str]:
    """
    Extract recognised certificate fields from PDF metadata.

    Precedence: info dictionary, then CertificateData pairs (which
    override), then other custom properties and XMP entries (which only
    fill gaps). A "salt" key always wins wherever it appears. The salt is
    returned in its de-dashed canonical form.

    Returns:
        Partial mapping of field name -> value (possibly empty)
    """
    fields = _from_info(info or {})
    if custom:
        _from_custom(custom, fields)
    if xmp:
        _from_xmp(xmp, fields)

    if "salt" in fields:
        salt = canonicalize_salt(fields["salt"])
        if salt:
            fields["salt"] = salt
        else:
            del fields["salt"]

    logger.debug(f"Extracted PDF fields: {sorted(fields)} (salt={'salt' in fields})")
    return fields


def split_salt(fields: Mapping[str, str]) -> tuple[dict[str, str], str | None]:
    """Separate the salt from the field values."""
    values = {k: v for k, v in fields.items() if k != "salt"}
    return values, fields.get("salt")


def split_embedded(fields: Mapping[str, str]) -> tuple[dict[str, str], str | None, str | None]:
    """
    Separate the salt and the embedded NFT identifier from field values.

    Returns:
        (values, salt, nft_id)
    """
    values, salt = split_salt(fields)
    nft_id = values.pop(IDENTIFIER_FIELD, None)
    return values, salt, nft_id.strip() if nft_id else None


__all__ = [
    "STANDARD_FIELDS",
    "FIELD_ALIASES",
    "IDENTIFIER_FIELD",
    "normalize_key",
    "parse_certificate_data",
    "extract_certificate_fields",
    "split_salt",
    "split_embedded",
]
