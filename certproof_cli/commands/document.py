"""
Module 06 - CLI Document Commands

Hash a certificate PDF, or check it against an anchored document hash.

Usage:
    certproof hash certificate.pdf
    certproof verify-document certificate.pdf --expected-hash <hex> [--json]
"""

from __future__ import annotations

import json
import logging
import sys
from argparse import Namespace
from pathlib import Path

from certproof_cli.exit_codes import (
    EXIT_RUNTIME_ERROR,
    EXIT_SUCCESS,
    EXIT_VERIFICATION_FAILED,
)
from core.schemas.errors import CertProofException
from core.verification.service import CertificateVerificationService


logger = logging.getLogger(__name__)


def hash_cmd(args: Namespace) -> int:
    """Print the SHA-256 of a file."""
    path = Path(args.file)
    service = CertificateVerificationService.from_config(args.runtime_config)

    try:
        digest = service.hash_document(path)
    except CertProofException as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    print(f"{digest}  {path}")
    return EXIT_SUCCESS


def verify_document_cmd(args: Namespace) -> int:
    """
    Execute the verify-document command.

    Returns:
        EXIT_SUCCESS on a match, EXIT_VERIFICATION_FAILED on a mismatch,
        EXIT_RUNTIME_ERROR if the file or expected hash is unusable
    """
    path = Path(args.file)
    service = CertificateVerificationService.from_config(args.runtime_config)

    outcome = service.evaluate_document(
        path,
        args.expected_hash,
        embedded_identifier=args.embedded_id,
        expected_identifier=args.expected_id,
    )

    if args.json:
        print(json.dumps(outcome.model_dump(mode="json"), indent=2))
    else:
        print(f"file: {path}")
        print(f"status: {outcome.status}")
        if outcome.computed_hash:
            print(f"computed_hash: {outcome.computed_hash}")
        print(f"expected_hash: {outcome.expected_hash}")
        if outcome.identity_matched is not None:
            print(f"identity_matched: {str(outcome.identity_matched).lower()}")
        if outcome.error is not None:
            print(f"error: {outcome.error.message}")
        elif outcome.message:
            print(outcome.message)

    if outcome.status == "error":
        return EXIT_RUNTIME_ERROR
    return EXIT_SUCCESS if outcome.matched else EXIT_VERIFICATION_FAILED
