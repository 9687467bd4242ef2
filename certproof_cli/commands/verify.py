"""
Module 06 - CLI Verify Command

Verify a certificate against its anchored metadata:
- Check the PDF bytes against the anchored document hash
- Prove each field value against the anchored Merkle root
- Look up the issuer in the trust registry

Usage:
    certproof verify --nft KCERT-TEST/1 --pdf cert.pdf [--field name=Alice ...] [--json]
    certproof verify --metadata meta.json --pdf-info info.json [--salt S]

Field values, the salt and the embedded NFT id are read from the --pdf
metadata (see core.metadata.pdf_reader). --pdf-info (already-extracted
metadata as JSON) overrides them, and --field pairs override both. An
explicit --salt or --embedded-id wins over anything found in the PDF.
"""

from __future__ import annotations

import json
import logging
import sys
from argparse import Namespace
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

from certproof_cli.exit_codes import (
    EXIT_RUNTIME_ERROR,
    EXIT_SUCCESS,
    EXIT_VERIFICATION_FAILED,
)
from core.issuers.registry import default_registry
from core.ledger.client import build_ledger_client, parse_certificate_id
from core.metadata.pdf_fields import extract_certificate_fields, split_embedded
from core.metadata.pdf_reader import read_certificate_data
from core.schemas.errors import CertProofException
from core.schemas.metadata import CertificateMetadata
from core.schemas.verification import VerificationReport
from core.verification.service import CertificateVerificationService


logger = logging.getLogger(__name__)


@dataclass
class VerifySummary:
    """Summary of certificate verification for CLI output."""
    certificate_id: str = ""
    document_status: str | None = None
    identity_matched: bool | None = None
    fields_matched: int = 0
    fields_total: int = 0
    fields: dict[str, str] = field(default_factory=dict)
    unproven_fields: list[str] = field(default_factory=list)
    issuer_verified: bool | None = None
    issuer_level: str | None = None
    issuer_message: str | None = None
    errors: list[str] = field(default_factory=list)
    ok: bool = False

    def to_dict(self) -> dict[str, Any]:
        d = asdict(self)
        for key in ("document_status", "identity_matched", "issuer_verified",
                    "issuer_level", "issuer_message"):
            if d[key] is None:
                del d[key]
        for key in ("unproven_fields", "errors"):
            if not d[key]:
                del d[key]
        return d


def parse_field_pairs(pairs: list[str] | None) -> dict[str, str]:
    """
    Parse repeated --field name=value arguments.

    Raises:
        ValueError: If a pair has no '=' or an empty name
    """
    values: dict[str, str] = {}
    for pair in pairs or []:
        name, sep, value = pair.partition("=")
        if not sep or not name.strip():
            raise ValueError(f"--field expects name=value, got: {pair!r}")
        values[name.strip()] = value
    return values


def load_pdf_info(path: Path) -> dict[str, str]:
    """
    Load extracted PDF metadata and normalise it to field values.

    The file is either a flat info dictionary or an object with any of
    "info", "custom" and "xmp" sections.
    """
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"PDF metadata file must contain a JSON object: {path}")
    if data.keys() & {"info", "custom", "xmp"}:
        return extract_certificate_fields(data.get("info"), data.get("custom"), data.get("xmp"))
    return extract_certificate_fields(data)


def load_metadata(args: Namespace) -> CertificateMetadata:
    """Load anchored metadata from a local file or from the ledger."""
    if args.metadata:
        return CertificateMetadata.from_json(Path(args.metadata).read_text(encoding="utf-8"))

    ticker, nonce = parse_certificate_id(args.nft)
    client = build_ledger_client(args.runtime_config)
    try:
        return client.fetch_metadata(ticker, nonce)
    finally:
        client.close()


def build_summary(report: VerificationReport, certificate_id: str) -> VerifySummary:
    """Build a VerifySummary from a verification report."""
    summary = VerifySummary(
        certificate_id=report.certificate_id or certificate_id,
        fields_matched=report.fields_matched,
        fields_total=report.fields_total,
        fields={name: outcome.status for name, outcome in report.fields.items()},
        unproven_fields=list(report.unproven_fields),
        errors=report.get_error_messages(),
        ok=report.ok,
    )
    if report.document is not None:
        summary.document_status = report.document.status
        summary.identity_matched = report.document.identity_matched
    if report.issuer is not None:
        summary.issuer_verified = report.issuer.is_verified
        summary.issuer_level = report.issuer.level.value
        summary.issuer_message = report.issuer.message
    return summary


def print_summary_human(summary: VerifySummary) -> None:
    """Print summary in human-readable format."""
    print(f"certificate: {summary.certificate_id}")
    if summary.document_status is not None:
        print(f"document: {summary.document_status}")
        if summary.identity_matched is not None:
            print(f"identity_matched: {str(summary.identity_matched).lower()}")
    print(f"fields: {summary.fields_matched}/{summary.fields_total} matched")
    for name, status in summary.fields.items():
        mark = "✓" if status == "matched" else "✗"
        print(f"  {mark} {name}: {status}")
    if summary.unproven_fields:
        print(f"not anchored: {', '.join(summary.unproven_fields)}")
    if summary.issuer_level is not None:
        print(f"issuer: {summary.issuer_level} - {summary.issuer_message}")

    if summary.errors:
        print(f"\nerrors ({len(summary.errors)}):")
        for err in summary.errors[:10]:
            print(f"  ✗ {err}")

    print(f"\nok: {str(summary.ok).lower()}")


def collect_evidence(args: Namespace) -> tuple[dict[str, str], str | None, str | None]:
    """
    Gather field values, salt and embedded identifier for a verify run.

    Sources, lowest precedence first: metadata read from --pdf, the
    --pdf-info file, then --field pairs. --salt and --embedded-id win over
    anything found in the PDF.

    Raises:
        OSError: If --pdf-info cannot be read
        ValueError: If --pdf-info or a --field pair is malformed
    """
    field_values: dict[str, str] = {}
    salt: str | None = None
    nft_id: str | None = None

    if args.pdf:
        embedded = read_certificate_data(Path(args.pdf))
        field_values.update(embedded.values)
        salt, nft_id = embedded.salt, embedded.nft_id
        logger.info(f"Read {len(embedded.values)} field(s) from PDF metadata")

    if args.pdf_info:
        info_values, info_salt, info_nft_id = split_embedded(load_pdf_info(Path(args.pdf_info)))
        field_values.update(info_values)
        salt = info_salt or salt
        nft_id = info_nft_id or nft_id

    field_values.update(parse_field_pairs(args.field))
    return field_values, args.salt or salt, args.embedded_id or nft_id


def verify_cmd(args: Namespace) -> int:
    """
    Execute the verify command.

    Returns:
        Exit code
    """
    try:
        field_values, salt, embedded_id = collect_evidence(args)
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    pdf_path = Path(args.pdf) if args.pdf else None
    if pdf_path is None and not field_values:
        print("Error: provide --pdf, --pdf-info or at least one --field", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    try:
        metadata = load_metadata(args)
    except (CertProofException, OSError, ValueError) as e:
        message = e.message if isinstance(e, CertProofException) else str(e)
        print(f"Error loading certificate metadata: {message}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    service = CertificateVerificationService.from_config(
        args.runtime_config,
        issuer_registry=default_registry(),
    )
    report = service.verify_certificate(
        metadata,
        document=pdf_path,
        field_values=field_values,
        salt=salt,
        embedded_identifier=embedded_id,
    )

    summary = build_summary(report, args.nft or args.metadata)
    if args.json:
        print(json.dumps(summary.to_dict(), indent=2))
    else:
        print_summary_human(summary)

    if summary.ok:
        logger.info("Verification passed")
        return EXIT_SUCCESS
    logger.warning("Verification failed")
    return EXIT_VERIFICATION_FAILED
