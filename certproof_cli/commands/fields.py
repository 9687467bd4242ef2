"""
Module 06 - CLI Field Command

Prove a single field value against an anchored Merkle root.

Usage:
    certproof verify-field name "Alice" --proof name_proof.json --root <hex> [--salt S]

The proof file holds the step list as stored on the ledger:
    [{"hash": "<64 hex>", "position": "left"|"right"}, ...]
"""

from __future__ import annotations

import json
import sys
from argparse import Namespace
from pathlib import Path
from typing import Any

from certproof_cli.exit_codes import (
    EXIT_RUNTIME_ERROR,
    EXIT_SUCCESS,
    EXIT_VERIFICATION_FAILED,
)
from core.crypto.commitment import canonicalize_salt
from core.verification.service import CertificateVerificationService


def load_proof_file(path: Path) -> list[dict[str, Any]]:
    """
    Load a proof step list from JSON.

    A {"proof": [...]} wrapper is accepted as well as a bare list.
    """
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if isinstance(data, dict) and "proof" in data:
        data = data["proof"]
    if not isinstance(data, list):
        raise ValueError(f"Proof file must contain a JSON list of steps: {path}")
    return data


def verify_field_cmd(args: Namespace) -> int:
    """Execute the verify-field command."""
    try:
        proof = load_proof_file(Path(args.proof))
    except (OSError, ValueError) as e:
        print(f"Error loading proof: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    service = CertificateVerificationService.from_config(args.runtime_config)
    outcome = service.evaluate_field(
        args.name,
        args.value,
        canonicalize_salt(args.salt),
        proof,
        args.root,
    )

    if args.json:
        print(json.dumps(outcome.model_dump(mode="json"), indent=2))
    else:
        mark = "✓" if outcome.matched else "✗"
        print(f"{mark} {outcome.field_name}: {outcome.status}")
        if outcome.leaf_hash:
            print(f"  leaf: {outcome.leaf_hash}")
        if outcome.computed_root:
            print(f"  computed_root: {outcome.computed_root}")
        if outcome.error is not None:
            print(f"  error: {outcome.error.message}")

    if outcome.is_error:
        return EXIT_RUNTIME_ERROR
    return EXIT_SUCCESS if outcome.matched else EXIT_VERIFICATION_FAILED
