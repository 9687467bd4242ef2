"""
Module 02 - Hashing Utilities
Document hashing and hex-hash normalisation for certificate verification.

Owner: Protocol/Crypto Engineer
Module ID: M02

This module provides:
- SHA-256 hashing for raw bytes (digest and lowercase hex)
- Whole-document hashing, in one shot or streamed from a file/handle
- Canonical hash normalisation (case-insensitive in, lowercase out)

Security/Determinism Notes:
- Documents are hashed as one message: no length prefix, no chunk framing
- Streaming and one-shot hashing produce identical digests
- Empty input hashes zero bytes (no special-casing)
"""
from __future__ import annotations

import hashlib
import logging
import re
from pathlib import Path
from typing import BinaryIO

from core.schemas.errors import DocumentReadException, InvalidHashFormatException


logger = logging.getLogger(__name__)


# Length of a hex-encoded SHA-256 digest
HASH_HEX_LENGTH = 64

# Default read size for streamed hashing (64 KiB)
DEFAULT_CHUNK_SIZE = 64 * 1024

_HEX_HASH_RE = re.compile(r"^[0-9a-f]{64}$")


def sha256(data: bytes) -> bytes:
    """
    Compute SHA-256 hash of raw bytes.

    Args:
        data: Raw bytes to hash

    Returns:
        32-byte SHA-256 digest

    Example:
        >>> sha256(b"hello").hex()
        '2cf24dba5fb0a30e26e83b2ac5b9e29e1b161e5c1fa7425e73043362938b9824'
    """
    return hashlib.sha256(data).digest()


def sha256_hex(data: bytes) -> str:
    """Compute SHA-256 of raw bytes as lowercase hex."""
    return hashlib.sha256(data).hexdigest()


def hash_document(data: bytes) -> str:
    """
    Hash a whole document (e.g. PDF bytes).

    Rule: document_hash = sha256(data).hex()

    Args:
        data: Complete document content

    Returns:
        64-char lowercase hex digest. Empty input yields the digest of
        zero bytes.
    """
    return sha256_hex(bytes(data))


def hash_stream(stream: BinaryIO, chunk_size: int = DEFAULT_CHUNK_SIZE) -> str:
    """
    Hash a binary stream incrementally with bounded memory.

    The result is identical to hash_document() over the full content.

    Args:
        stream: Readable binary handle, positioned at the start of content
        chunk_size: Bytes read per iteration

    Returns:
        64-char lowercase hex digest

    Raises:
        DocumentReadException: If the stream cannot be read to the end
        ValueError: If chunk_size is not positive
    """
    if chunk_size <= 0:
        raise ValueError(f"chunk_size must be positive, got {chunk_size}")

    hasher = hashlib.sha256()
    total = 0
    try:
        while True:
            chunk = stream.read(chunk_size)
            if not chunk:
                break
            hasher.update(chunk)
            total += len(chunk)
    except OSError as e:
        raise DocumentReadException(
            f"Failed to read document stream: {e}",
            bytes_read=total,
        ) from e

    logger.debug(f"Hashed {total} bytes from stream")
    return hasher.hexdigest()


def hash_file(path: str | Path, chunk_size: int = DEFAULT_CHUNK_SIZE) -> str:
    """
    Hash a file on disk by streaming it.

    Raises:
        DocumentReadException: If the file cannot be opened or read
    """
    path = Path(path)
    try:
        handle = open(path, "rb")
    except OSError as e:
        raise DocumentReadException(
            f"Cannot open document: {path}",
            path=str(path),
        ) from e

    with handle:
        return hash_stream(handle, chunk_size=chunk_size)


def is_hex_hash(value: object) -> bool:
    """Check whether value is a 64-char hex string (any case)."""
    if not isinstance(value, str):
        return False
    return _HEX_HASH_RE.match(value.strip().lower()) is not None


def normalize_hash(value: object) -> str:
    """
    Normalise a hex-encoded SHA-256 hash to canonical form.

    Accepts upper or mixed case and surrounding whitespace. The 0x
    prefix is not part of the wire format and is rejected.

    Args:
        value: Candidate hash

    Returns:
        64-char lowercase hex string

    Raises:
        InvalidHashFormatException: If value is not a 64-char hex string
    """
    if not isinstance(value, str):
        raise InvalidHashFormatException(
            f"Hash must be a string, got {type(value).__name__}",
            value=repr(value)[:80],
        )

    canonical = value.strip().lower()
    if not _HEX_HASH_RE.match(canonical):
        raise InvalidHashFormatException(
            f"Hash must be {HASH_HEX_LENGTH} hex characters, got: {value[:80]!r}",
            value=value[:80],
        )
    return canonical


def hashes_equal(left: str, right: str) -> bool:
    """Compare two hex hashes after normalisation."""
    return normalize_hash(left) == normalize_hash(right)


__all__ = [
    "HASH_HEX_LENGTH",
    "DEFAULT_CHUNK_SIZE",
    "sha256",
    "sha256_hex",
    "hash_document",
    "hash_stream",
    "hash_file",
    "is_hex_hash",
    "normalize_hash",
    "hashes_equal",
]
