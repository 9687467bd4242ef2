"""
Module 02 - Hashing Unit Tests
Tests for core/crypto/hashing.py

Tests:
- sha256 / hash_document known vectors
- streamed and one-shot hashing agree
- read failures surface as DocumentReadException
- hash normalisation accepts any case and rejects malformed input
"""
import hashlib
import io

import pytest

from core.crypto.hashing import (
    hash_document,
    hash_file,
    hash_stream,
    hashes_equal,
    is_hex_hash,
    normalize_hash,
    sha256,
    sha256_hex,
)
from core.schemas.errors import (
    DocumentReadException,
    ErrorCodes,
    InvalidHashFormatException,
)


EMPTY_SHA256 = "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"
ABC_SHA256 = "ba7816bf8f01cfea414140de5dae2223b00361a396177a9cb410ff61f20015ad"


class TestSha256:
    """Tests for the raw SHA-256 helpers."""

    def test_sha256_known_value(self):
        assert sha256(b"abc").hex() == ABC_SHA256
        assert len(sha256(b"abc")) == 32

    def test_sha256_hex_matches_digest(self):
        assert sha256_hex(b"hello") == sha256(b"hello").hex()

    def test_sha256_different_inputs_different_outputs(self):
        assert sha256(b"input1") != sha256(b"input2")


class TestHashDocument:
    """Tests for hash_document()."""

    def test_known_vector(self):
        assert hash_document(b"abc") == ABC_SHA256

    def test_empty_input_hashes_zero_bytes(self):
        assert hash_document(b"") == EMPTY_SHA256

    def test_lowercase_hex_output(self):
        digest = hash_document(b"certificate")
        assert digest == digest.lower()
        assert len(digest) == 64

    def test_single_byte_change_changes_hash(self):
        original = b"%PDF-1.4 certificate for Alice"
        tampered = original[:-1] + b"x"
        assert hash_document(original) != hash_document(tampered)

    def test_accepts_bytearray(self):
        assert hash_document(bytearray(b"abc")) == ABC_SHA256


class TestHashStream:
    """Tests for streamed hashing."""

    @pytest.mark.parametrize("chunk_size", [1, 7, 64, 65536])
    def test_stream_matches_one_shot(self, chunk_size):
        data = bytes(range(256)) * 50
        assert hash_stream(io.BytesIO(data), chunk_size=chunk_size) == hash_document(data)

    def test_empty_stream(self):
        assert hash_stream(io.BytesIO(b"")) == EMPTY_SHA256

    def test_invalid_chunk_size(self):
        with pytest.raises(ValueError, match="chunk_size"):
            hash_stream(io.BytesIO(b"abc"), chunk_size=0)

    def test_read_failure_raises_document_read_error(self):
        class BrokenStream:
            def __init__(self):
                self.calls = 0

            def read(self, size):
                self.calls += 1
                if self.calls > 1:
                    raise OSError("device unplugged")
                return b"abc"

        with pytest.raises(DocumentReadException) as exc_info:
            hash_stream(BrokenStream(), chunk_size=3)

        assert exc_info.value.code == ErrorCodes.DOCUMENT_READ_ERROR
        assert exc_info.value.details["bytes_read"] == 3


class TestHashFile:
    """Tests for hash_file()."""

    def test_file_matches_bytes(self, tmp_path):
        path = tmp_path / "cert.pdf"
        path.write_bytes(b"abc")
        assert hash_file(path) == ABC_SHA256
        assert hash_file(str(path), chunk_size=1) == ABC_SHA256

    def test_missing_file(self, tmp_path):
        missing = tmp_path / "missing.pdf"
        with pytest.raises(DocumentReadException) as exc_info:
            hash_file(missing)
        assert exc_info.value.details["path"] == str(missing)


class TestNormalizeHash:
    """Tests for hash normalisation."""

    def test_uppercase_is_lowered(self):
        assert normalize_hash(ABC_SHA256.upper()) == ABC_SHA256

    def test_whitespace_is_stripped(self):
        assert normalize_hash(f"  {ABC_SHA256}\n") == ABC_SHA256

    @pytest.mark.parametrize("value", [
        "",
        "abc",
        "0x" + ABC_SHA256[:62],
        ABC_SHA256 + "00",
        "g" * 64,
        "z" + ABC_SHA256[1:],
    ])
    def test_malformed_values_rejected(self, value):
        with pytest.raises(InvalidHashFormatException):
            normalize_hash(value)

    def test_non_string_rejected(self):
        with pytest.raises(InvalidHashFormatException) as exc_info:
            normalize_hash(12345)
        assert exc_info.value.code == ErrorCodes.INVALID_HASH_FORMAT

    def test_is_hex_hash(self):
        assert is_hex_hash(ABC_SHA256)
        assert is_hex_hash(ABC_SHA256.upper())
        assert not is_hex_hash("abc")
        assert not is_hex_hash(None)

    def test_hashes_equal_ignores_case(self):
        assert hashes_equal(ABC_SHA256, ABC_SHA256.upper())
        assert not hashes_equal(ABC_SHA256, EMPTY_SHA256)

    def test_hashes_equal_independent_of_hashlib_helper(self):
        assert hashes_equal(hashlib.sha256(b"").hexdigest(), EMPTY_SHA256)
