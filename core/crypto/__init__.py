"""
Core cryptographic utilities.

Module 02 provides document hashing and field leaf commitments.
"""
from .hashing import (
    HASH_HEX_LENGTH,
    DEFAULT_CHUNK_SIZE,
    sha256,
    sha256_hex,
    hash_document,
    hash_stream,
    hash_file,
    is_hex_hash,
    normalize_hash,
    hashes_equal,
)
from .commitment import (
    canonicalize_salt,
    format_salt_for_display,
    build_leaf_message,
    commit_leaf,
)

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
    "canonicalize_salt",
    "format_salt_for_display",
    "build_leaf_message",
    "commit_leaf",
]
