"""
Module 04 - Verification Service Unit Tests
Tests for core/verification/service.py

Tests:
- document verification (bytes, path, stream; mismatch is False, not an error)
- identity fallback kept separate from the hash verdict
- per-field verification and error capture
- verify_all independence, ordering and idempotence
- full certificate flow with metadata, missing values and issuer lookup
"""
import io

import pytest

from core.crypto.hashing import hash_document
from core.metadata.pdf_fields import extract_certificate_fields, split_salt
from core.schemas.errors import (
    ErrorCodes,
    FieldEncodingException,
    InvalidHashFormatException,
    InvalidProofFormatException,
)
from core.schemas.metadata import CertificateMetadata
from core.verification.service import CertificateVerificationService

from fixtures.common import GOLD_ISSUER, make_runtime_config, make_service
from fixtures.merkle_fixtures import make_ledger_metadata


# =============================================================================
# Document
# =============================================================================

class TestDocument:
    """Tests for whole-document verification."""

    def test_bytes_match(self, service, pdf_bytes):
        assert service.verify_document(pdf_bytes, hash_document(pdf_bytes))

    def test_path_and_stream_match(self, service, pdf_bytes, tmp_path):
        path = tmp_path / "cert.pdf"
        path.write_bytes(pdf_bytes)
        expected = hash_document(pdf_bytes)

        assert service.verify_document(path, expected)
        assert service.verify_document(io.BytesIO(pdf_bytes), expected)

    def test_str_path(self, service, pdf_bytes, tmp_path):
        path = tmp_path / "cert.pdf"
        path.write_bytes(pdf_bytes)
        assert service.verify_document(str(path), hash_document(pdf_bytes))

    def test_unsupported_source_type(self, service, pdf_bytes):
        with pytest.raises(TypeError, match="binary stream"):
            service.verify_document(12345, hash_document(pdf_bytes))

    def test_scenario_c_one_byte_difference(self, service, pdf_bytes):
        expected = hash_document(pdf_bytes)
        tampered = pdf_bytes[:10] + bytes([pdf_bytes[10] ^ 0x01]) + pdf_bytes[11:]

        assert service.verify_document(tampered, expected) is False

    def test_expected_hash_case_insensitive(self, service, pdf_bytes):
        assert service.verify_document(pdf_bytes, hash_document(pdf_bytes).upper())

    def test_malformed_expected_hash_raises(self, service, pdf_bytes):
        with pytest.raises(InvalidHashFormatException):
            service.verify_document(pdf_bytes, "not-a-hash")

    def test_evaluate_match(self, service, pdf_bytes):
        outcome = service.evaluate_document(pdf_bytes, hash_document(pdf_bytes))
        assert outcome.matched
        assert outcome.status == "matched"
        assert outcome.message == "PDF verified"
        assert outcome.identity_matched is None

    def test_evaluate_mismatch(self, service, pdf_bytes):
        outcome = service.evaluate_document(b"other", hash_document(pdf_bytes))
        assert not outcome.matched
        assert outcome.status == "mismatch"
        assert outcome.computed_hash == hash_document(b"other")

    def test_evaluate_missing_file_is_error(self, service, tmp_path, pdf_bytes):
        from pathlib import Path

        outcome = service.evaluate_document(Path(tmp_path / "nope.pdf"), hash_document(pdf_bytes))
        assert outcome.status == "error"
        assert outcome.error.code == ErrorCodes.DOCUMENT_READ_ERROR
        assert not outcome.matched

    def test_evaluate_malformed_expected_is_error(self, service, pdf_bytes):
        outcome = service.evaluate_document(pdf_bytes, "xyz")
        assert outcome.status == "error"
        assert outcome.error.code == ErrorCodes.INVALID_HASH_FORMAT


class TestIdentityFallback:
    """The identifier check never turns a hash mismatch into a match."""

    def test_identity_match_reported_separately(self, service, pdf_bytes):
        outcome = service.evaluate_document(
            b"re-saved pdf",
            hash_document(pdf_bytes),
            embedded_identifier="KCERT-TEST/1",
            expected_identifier="KCERT-TEST/1",
        )
        assert outcome.matched is False
        assert outcome.identity_matched is True
        assert outcome.structurally_plausible

    def test_identity_mismatch(self, service, pdf_bytes):
        outcome = service.evaluate_document(
            b"re-saved pdf",
            hash_document(pdf_bytes),
            embedded_identifier="KCERT-TEST/2",
            expected_identifier="KCERT-TEST/1",
        )
        assert outcome.identity_matched is False
        assert not outcome.structurally_plausible

    def test_not_attempted_without_identifiers(self, service, pdf_bytes):
        outcome = service.evaluate_document(
            b"re-saved pdf",
            hash_document(pdf_bytes),
            embedded_identifier="KCERT-TEST/1",
        )
        assert outcome.identity_matched is None

    def test_disabled_fallback(self, pdf_bytes):
        service = CertificateVerificationService(identity_fallback=False)
        outcome = service.evaluate_document(
            b"re-saved pdf",
            hash_document(pdf_bytes),
            embedded_identifier="KCERT-TEST/1",
            expected_identifier="KCERT-TEST/1",
        )
        assert outcome.identity_matched is None

    def test_not_attempted_on_match(self, service, pdf_bytes):
        outcome = service.evaluate_document(
            pdf_bytes,
            hash_document(pdf_bytes),
            embedded_identifier="a",
            expected_identifier="b",
        )
        assert outcome.matched
        assert outcome.identity_matched is None


# =============================================================================
# Fields
# =============================================================================

class TestFields:
    """Tests for single-field verification."""

    def test_verify_field(self, service, certificate_tree):
        tree = certificate_tree
        assert service.verify_field("name", "Alice", tree.salt, tree.proofs["name"], tree.root)

    def test_wrong_value(self, service, certificate_tree):
        tree = certificate_tree
        assert not service.verify_field("name", "Mallory", tree.salt, tree.proofs["name"], tree.root)

    def test_missing_salt(self, service, certificate_tree):
        tree = certificate_tree
        assert not service.verify_field("name", "Alice", None, tree.proofs["name"], tree.root)

    def test_dashed_salt(self, service, certificate_tree):
        tree = certificate_tree
        assert service.verify_field("name", "Alice", "abcd-1234", tree.proofs["name"], tree.root)

    def test_verify_field_propagates_proof_errors(self, service, certificate_tree):
        bad = [{"hash": "zz", "position": "left"}]
        with pytest.raises(InvalidProofFormatException):
            service.verify_field("name", "Alice", "abcd1234", bad, certificate_tree.root)

    def test_verify_field_propagates_encoding_errors(self, service, certificate_tree):
        tree = certificate_tree
        with pytest.raises(FieldEncodingException):
            service.verify_field("name", "\ud800", tree.salt, tree.proofs["name"], tree.root)

    def test_evaluate_field_outcome(self, service, certificate_tree):
        tree = certificate_tree
        outcome = service.evaluate_field("course", tree.values["course"], tree.salt, tree.proofs["course"], tree.root)
        assert outcome.matched
        assert outcome.status == "matched"
        assert outcome.leaf_hash == tree.leaves["course"]
        assert outcome.computed_root == tree.root

    def test_evaluate_field_mismatch(self, service, certificate_tree):
        tree = certificate_tree
        outcome = service.evaluate_field("course", "Rust", tree.salt, tree.proofs["course"], tree.root)
        assert outcome.status == "mismatch"
        assert outcome.computed_root != tree.root
        assert outcome.error is None

    def test_evaluate_field_replays_once(self, service, certificate_tree, monkeypatch):
        import core.merkle.merkle_proofs as merkle_proofs

        calls = []
        original = merkle_proofs.compute_root

        def counting(*args, **kwargs):
            calls.append(args)
            return original(*args, **kwargs)

        monkeypatch.setattr(merkle_proofs, "compute_root", counting)
        tree = certificate_tree
        outcome = service.evaluate_field("name", "Alice", tree.salt, tree.proofs["name"], tree.root.upper())

        assert outcome.matched
        assert outcome.computed_root == tree.root
        assert len(calls) == 1

    def test_evaluate_field_error(self, service, certificate_tree):
        outcome = service.evaluate_field(
            "name", "Alice", "abcd1234",
            [{"hash": "g" * 64, "position": "left"}],
            certificate_tree.root,
        )
        assert outcome.status == "error"
        assert outcome.is_error
        assert outcome.error.code == ErrorCodes.INVALID_PROOF_FORMAT
        assert outcome.error.details["step_index"] == 0


class TestVerifyAll:
    """Tests for batch field verification."""

    def _fields(self, tree, **overrides):
        values = {**tree.values, **overrides}
        return {name: (values[name], tree.proofs[name]) for name in tree.values}

    def test_all_match(self, service, certificate_tree):
        verdicts = service.verify_all(self._fields(certificate_tree), "abcd1234", certificate_tree.root)
        assert verdicts == {name: True for name in certificate_tree.values}

    def test_fields_are_independent(self, service, certificate_tree):
        verdicts = service.verify_all(
            self._fields(certificate_tree, course="Forged Course"),
            "abcd1234",
            certificate_tree.root,
        )
        assert verdicts["course"] is False
        assert all(v for name, v in verdicts.items() if name != "course")

    def test_error_in_one_field_does_not_affect_others(self, service, certificate_tree):
        fields = self._fields(certificate_tree)
        fields["date"] = (certificate_tree.values["date"], [{"hash": "bad", "position": "left"}])

        outcomes = service.evaluate_all(fields, "abcd1234", certificate_tree.root)
        assert outcomes["date"].status == "error"
        assert all(o.matched for name, o in outcomes.items() if name != "date")

    def test_verify_all_reports_errors_as_false(self, service, certificate_tree):
        fields = self._fields(certificate_tree)
        fields["date"] = (certificate_tree.values["date"], [{"hash": "bad", "position": "left"}])

        verdicts = service.verify_all(fields, "abcd1234", certificate_tree.root)
        assert verdicts["date"] is False
        assert verdicts["name"] is True

    def test_order_preserved(self, service, certificate_tree):
        fields = self._fields(certificate_tree)
        assert list(service.verify_all(fields, "abcd1234", certificate_tree.root)) == list(fields)

    def test_idempotent(self, service, certificate_tree):
        fields = self._fields(certificate_tree, name="Mallory")
        first = service.verify_all(fields, "abcd1234", certificate_tree.root)
        for _ in range(5):
            assert service.verify_all(fields, "abcd1234", certificate_tree.root) == first

    def test_sequential_and_parallel_agree(self, certificate_tree):
        fields = self._fields(certificate_tree, date="1999-01-01")
        sequential = make_service(max_workers=1).verify_all(fields, "abcd1234", certificate_tree.root)
        parallel = make_service(max_workers=8).verify_all(fields, "abcd1234", certificate_tree.root)
        assert sequential == parallel

    def test_empty_input(self, service, certificate_tree):
        assert service.verify_all({}, "abcd1234", certificate_tree.root) == {}

    def test_invalid_worker_count(self):
        with pytest.raises(ValueError):
            CertificateVerificationService(max_workers=0)


class TestStrategy:
    """The configured combination strategy reaches proof replay."""

    def test_positional_service(self, positional_tree):
        service = make_service(strategy="positional")
        fields = {name: (positional_tree.values[name], positional_tree.proofs[name]) for name in positional_tree.values}
        assert all(service.verify_all(fields, positional_tree.salt, positional_tree.root).values())

    def test_from_config(self):
        service = CertificateVerificationService.from_config(
            make_runtime_config(strategy="positional", max_workers=2)
        )
        assert service.strategy.value == "positional"
        assert service.max_workers == 2


# =============================================================================
# Whole certificate
# =============================================================================

class TestVerifyCertificate:
    """Tests for verify_certificate()."""

    def _metadata(self, tree, pdf_bytes, **kwargs):
        return CertificateMetadata.from_ledger(make_ledger_metadata(tree, document=pdf_bytes, **kwargs))

    def test_full_match(self, service, certificate_tree, pdf_bytes):
        metadata = self._metadata(certificate_tree, pdf_bytes)
        report = service.verify_certificate(
            metadata,
            document=pdf_bytes,
            field_values=certificate_tree.values,
            salt="abcd-1234",
        )
        assert report.ok
        assert report.document.matched
        assert report.fields_matched == report.fields_total == 5
        assert report.certificate_id == "KCERT-TEST/1"
        assert report.issuer is None

    def test_fields_only(self, service, certificate_tree, pdf_bytes):
        metadata = self._metadata(certificate_tree, pdf_bytes)
        report = service.verify_certificate(metadata, field_values={"name": "Alice"}, salt="abcd1234")

        assert report.document is None
        assert report.fields["name"].matched
        assert report.fields["course"].status == "mismatch"
        assert report.fields["course"].message == "No value supplied"
        assert not report.ok

    def test_value_without_proof_is_ignored(self, service, certificate_tree, pdf_bytes):
        metadata = self._metadata(certificate_tree, pdf_bytes)
        values = {**certificate_tree.values, "grade": "A"}
        report = service.verify_certificate(metadata, field_values=values, salt="abcd1234")

        assert "grade" not in report.fields
        assert report.unproven_fields == ["grade"]
        assert report.fields_total == 5
        assert report.ok

    def test_extracted_pdf_metadata_extra_keys(self, service, certificate_tree, pdf_bytes):
        fields = extract_certificate_fields(
            {
                "Title": "CERTIFICADO - Alice",
                "Subject": certificate_tree.values["course"],
                "Keywords": "salt: abcd-1234",
                "CreationDate": "D:20250314120000Z",
                "Producer": "Certificate Generator 2.1",
                "issuer": "Klever Academy",
            },
            custom={"CertificateData": "Date|2025-03-14||Instructor|Bob Smith||Workload|40h"},
            xmp={"pdf:Producer": "Certificate Generator 2.1", "xmp:CreatorTool": "Writer"},
        )
        values, salt = split_salt(fields)
        assert "creationdate" in values and "issuer" in values

        metadata = self._metadata(certificate_tree, pdf_bytes)
        report = service.verify_certificate(metadata, document=pdf_bytes, field_values=values, salt=salt)

        assert report.ok
        assert report.fields_matched == report.fields_total == 5
        assert {"creationdate", "issuer"} <= set(report.unproven_fields)

    def test_malformed_proof_only_fails_its_field(self, service, certificate_tree, pdf_bytes):
        data = make_ledger_metadata(certificate_tree, document=pdf_bytes)
        data["proofs"]["courseProof"][0]["hash"] = "zz" * 32
        metadata = CertificateMetadata.from_ledger(data)

        report = service.verify_certificate(metadata, field_values=certificate_tree.values, salt="abcd1234")

        assert report.fields["course"].status == "error"
        assert report.fields["course"].error.code == ErrorCodes.INVALID_PROOF_FORMAT
        assert report.fields["name"].matched
        assert report.fields_matched == 4
        assert not report.ok

    def test_document_mismatch_with_identity(self, service, certificate_tree, pdf_bytes):
        metadata = self._metadata(certificate_tree, pdf_bytes)
        report = service.verify_certificate(
            metadata,
            document=b"modified",
            embedded_identifier="KCERT-TEST/1",
        )
        assert report.document.status == "mismatch"
        assert report.document.identity_matched is True
        assert not report.ok

    def test_issuer_lookup(self, issuer_registry, certificate_tree, pdf_bytes):
        service = make_service(registry=issuer_registry)
        metadata = self._metadata(certificate_tree, pdf_bytes, issuer_address=GOLD_ISSUER)
        report = service.verify_certificate(metadata, document=pdf_bytes)

        assert report.issuer.is_verified
        assert report.issuer.is_trusted

    def test_error_messages_collected(self, service, certificate_tree, pdf_bytes, tmp_path):
        metadata = self._metadata(certificate_tree, pdf_bytes)
        report = service.verify_certificate(metadata, document=tmp_path / "missing.pdf")

        assert report.has_errors
        assert report.get_error_messages()[0].startswith("document:")
