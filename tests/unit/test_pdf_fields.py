"""
PDF Metadata Field Extraction Unit Tests
Tests for core/metadata/pdf_fields.py
"""
import pytest

from core.metadata.pdf_fields import (
    extract_certificate_fields,
    normalize_key,
    parse_certificate_data,
    split_salt,
)


class TestNormalizeKey:
    """Tests for normalize_key()."""

    @pytest.mark.parametrize("raw,expected", [
        ("Name", "name"),
        ("Course-Name", "course_name"),
        ("Issue Date", "issue_date"),
        ("pdf:Salt", "salt"),
        ("  Instructor  ", "instructor"),
    ])
    def test_normalize(self, raw, expected):
        assert normalize_key(raw) == expected


class TestCertificateData:
    """Tests for the pipe-delimited CertificateData property."""

    def test_pairs(self):
        assert parse_certificate_data("Name|Alice||Course Name|Python||Date|2025-03-14") == {
            "name": "Alice",
            "course_name": "Python",
            "date": "2025-03-14",
        }

    def test_malformed_pairs_skipped(self):
        assert parse_certificate_data("Name|Alice||garbage||Course|") == {"name": "Alice"}

    def test_empty(self):
        assert parse_certificate_data("") == {}


class TestExtractFields:
    """Tests for extract_certificate_fields()."""

    def test_title_subject_keywords(self):
        fields = extract_certificate_fields({
            "Title": "CERTIFICADO - Alice Doe",
            "Subject": "Python Fundamentals",
            "Keywords": "certificate, salt: abcd-1234-ef",
        })
        assert fields["name"] == "Alice Doe"
        assert fields["course"] == "Python Fundamentals"
        assert fields["salt"] == "abcd1234ef"

    def test_title_without_marker_ignored(self):
        fields = extract_certificate_fields({"Title": "Diploma - Alice"})
        assert "name" not in fields

    def test_aliases_and_standard_fields(self):
        fields = extract_certificate_fields({
            "Course_Name": "Go",
            "Issue-Date": "2025-01-02",
            "Instructor": "Bob",
            "Hash Salt": "ffff0000",
        })
        assert fields == {
            "course": "Go",
            "date": "2025-01-02",
            "instructor": "Bob",
            "salt": "ffff0000",
        }

    def test_related_keys_kept(self):
        fields = extract_certificate_fields({"Student Name": "Alice"})
        assert fields["student_name"] == "Alice"

    def test_non_string_values_skipped(self):
        fields = extract_certificate_fields({"Name": 42, "Course": None, "Instructor": ""})
        assert fields == {}

    def test_certificate_data_overrides_info(self):
        fields = extract_certificate_fields(
            {"Subject": "Old Course"},
            custom={"CertificateData": "Course|New Course||Name|Alice"},
        )
        assert fields["course"] == "New Course"
        assert fields["name"] == "Alice"

    def test_custom_properties_fill_gaps_only(self):
        fields = extract_certificate_fields(
            {"Subject": "Python"},
            custom={"course": "Other", "location": "Online"},
        )
        assert fields["course"] == "Python"
        assert fields["location"] == "Online"

    def test_salt_always_wins(self):
        fields = extract_certificate_fields(
            {"Keywords": "salt: aaaa"},
            custom={"salt": "bbbb"},
            xmp={"pdf:Salt": "cccc"},
        )
        assert fields["salt"] == "cccc"

    def test_xmp_fills_gaps(self):
        fields = extract_certificate_fields({"Name": "Alice"}, xmp={"pdf:Name": "Bob", "pdf:Date": "2025"})
        assert fields["name"] == "Alice"
        assert fields["date"] == "2025"

    def test_empty_salt_dropped(self):
        fields = extract_certificate_fields({"Salt": "--"})
        assert "salt" not in fields

    def test_none_info(self):
        assert extract_certificate_fields(None) == {}


class TestSplitSalt:
    """Tests for split_salt()."""

    def test_split(self):
        values, salt = split_salt({"name": "Alice", "salt": "abcd"})
        assert values == {"name": "Alice"}
        assert salt == "abcd"

    def test_no_salt(self):
        values, salt = split_salt({"name": "Alice"})
        assert salt is None
