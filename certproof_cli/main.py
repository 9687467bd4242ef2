"""
Module 06 - CLI Main Entry Point

Parses command-line arguments and dispatches to subcommands.

Usage:
    python -m certproof_cli hash <file>
    python -m certproof_cli verify-document <file> --expected-hash H [--json]
    python -m certproof_cli verify-field NAME VALUE --proof FILE --root H [--salt S] [--json]
    python -m certproof_cli verify (--metadata FILE | --nft TICKER/NONCE) [--pdf FILE]
                                   [--pdf-info FILE] [--field k=v ...] [--salt S] [--json]
    python -m certproof_cli issuers [--json]
    python -m certproof_cli config --show

Environment Variables:
    CERTPROOF_LEDGER_API_URL        Ledger API base URL
    CERTPROOF_USE_MOCK_LEDGER       Serve sample metadata instead of the ledger
    CERTPROOF_HTTP_TIMEOUT          HTTP timeout in seconds (default: 15)
    CERTPROOF_COMBINATION_STRATEGY  Pair hashing: sorted (default) or positional
    CERTPROOF_MAX_WORKERS           Field verification threads (default: 4)
    CERTPROOF_IDENTITY_FALLBACK     Compare embedded identifiers on mismatch
    CERTPROOF_LOG_LEVEL             Log level (default: INFO)
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import traceback
from pathlib import Path
from typing import Sequence

from certproof_cli.commands import document, fields, verify
from certproof_cli.exit_codes import EXIT_RUNTIME_ERROR, EXIT_SUCCESS
from core.config.runtime import load_runtime_config
from core.issuers.registry import default_registry


def setup_logging(level: str = "INFO", log_file: str | None = None) -> None:
    """Configure logging for the CLI."""
    log_level = getattr(logging, level.upper(), logging.INFO)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=handlers,
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="certproof",
        description="CertProof CLI - Verify ledger-anchored certificates and their fields.",
    )
    parser.add_argument(
        "--version", action="version", version="%(prog)s 0.1.0"
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        default=None,
        help="Path to configuration file (default: ./certproof.json or ~/.config/certproof/config.json)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (overrides config)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- hash command ---
    hash_parser = subparsers.add_parser(
        "hash",
        help="Print the SHA-256 of a document",
    )
    hash_parser.add_argument("file", type=str, help="Document to hash")
    hash_parser.set_defaults(func=document.hash_cmd)

    # --- verify-document command ---
    doc_parser = subparsers.add_parser(
        "verify-document",
        help="Check a document against an anchored hash",
        description="Hash the whole document and compare it with the expected hash.",
    )
    doc_parser.add_argument("file", type=str, help="Certificate PDF")
    doc_parser.add_argument(
        "--expected-hash",
        type=str,
        required=True,
        help="Anchored SHA-256 of the document (64 hex chars)",
    )
    doc_parser.add_argument(
        "--embedded-id",
        type=str,
        default=None,
        help="Identifier embedded in the PDF metadata (fallback check)",
    )
    doc_parser.add_argument(
        "--expected-id",
        type=str,
        default=None,
        help="Identifier the certificate should carry (fallback check)",
    )
    doc_parser.add_argument("--json", action="store_true", default=False, help="JSON output")
    doc_parser.set_defaults(func=document.verify_document_cmd)

    # --- verify-field command ---
    field_parser = subparsers.add_parser(
        "verify-field",
        help="Prove one field value against a Merkle root",
    )
    field_parser.add_argument("name", type=str, help="Field name, e.g. name or course")
    field_parser.add_argument("value", type=str, help="Field value as printed")
    field_parser.add_argument(
        "--proof",
        type=str,
        required=True,
        help="JSON file with the proof steps",
    )
    field_parser.add_argument("--root", type=str, required=True, help="Anchored Merkle root")
    field_parser.add_argument("--salt", type=str, default=None, help="Certificate salt")
    field_parser.add_argument("--json", action="store_true", default=False, help="JSON output")
    field_parser.set_defaults(func=fields.verify_field_cmd)

    # --- verify command ---
    verify_parser = subparsers.add_parser(
        "verify",
        help="Verify a certificate against its anchored metadata",
        description="Check the PDF, every field value and the issuer against ledger metadata.",
    )
    source = verify_parser.add_mutually_exclusive_group(required=True)
    source.add_argument(
        "--metadata",
        type=str,
        default=None,
        help="Local JSON file with metadata in ledger shape",
    )
    source.add_argument(
        "--nft",
        type=str,
        default=None,
        help="Certificate id TICKER/NONCE to fetch from the ledger",
    )
    verify_parser.add_argument(
        "--pdf",
        type=str,
        default=None,
        help="Certificate PDF (hashed; its metadata fills fields, salt and embedded id)",
    )
    verify_parser.add_argument(
        "--pdf-info",
        type=str,
        default=None,
        help="JSON file with metadata already extracted from the PDF",
    )
    verify_parser.add_argument(
        "--field",
        action="append",
        default=None,
        metavar="NAME=VALUE",
        help="Field value to prove (repeatable)",
    )
    verify_parser.add_argument("--salt", type=str, default=None, help="Certificate salt")
    verify_parser.add_argument(
        "--embedded-id",
        type=str,
        default=None,
        help="Identifier embedded in the PDF (fallback check against the NFT id)",
    )
    verify_parser.add_argument("--json", action="store_true", default=False, help="JSON output")
    verify_parser.add_argument("--debug", action="store_true", default=False, help="Show tracebacks")
    verify_parser.set_defaults(func=verify.verify_cmd)

    # --- issuers command ---
    issuers_parser = subparsers.add_parser(
        "issuers",
        help="List trusted issuers",
    )
    issuers_parser.add_argument("--json", action="store_true", default=False, help="JSON output")
    issuers_parser.set_defaults(func=issuers_cmd)

    # --- config command ---
    config_parser = subparsers.add_parser(
        "config",
        help="Display configuration",
    )
    config_parser.add_argument(
        "--show",
        action="store_true",
        default=False,
        help="Show effective configuration",
    )
    config_parser.set_defaults(func=config_cmd)

    return parser


def config_cmd(args: argparse.Namespace) -> int:
    """Handle config command."""
    if args.show:
        print(json.dumps(args.runtime_config.to_dict(), indent=2))
        return EXIT_SUCCESS

    print("Usage: certproof config --show")
    print("  --show  Show effective configuration (file + CERTPROOF_* env vars)")
    return EXIT_SUCCESS


def issuers_cmd(args: argparse.Namespace) -> int:
    """Handle issuers command."""
    registry = default_registry()
    issuers = registry.all()

    if args.json:
        print(json.dumps([i.model_dump(mode="json") for i in issuers], indent=2))
        return EXIT_SUCCESS

    if not issuers:
        print("No issuers registered")
        return EXIT_SUCCESS

    for issuer in issuers:
        until = issuer.valid_until.isoformat() if issuer.valid_until else "open"
        print(f"- {issuer.name} [{issuer.level.value}] ({issuer.type})")
        print(f"    address: {issuer.address}")
        print(f"    valid: {issuer.valid_from.isoformat()} .. {until}")

    return EXIT_SUCCESS


def main(argv: Sequence[str] | None = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0=success, 1=error, 2=verification failed)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return EXIT_RUNTIME_ERROR

    # Load configuration
    try:
        config = load_runtime_config(args.config)
    except Exception as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    # Setup logging
    log_level = args.log_level or config.log_level
    setup_logging(level=log_level, log_file=config.log_file)

    # Attach config to args for commands to use
    args.runtime_config = config

    try:
        return args.func(args)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except Exception as e:
        if getattr(args, "debug", False):
            traceback.print_exc()
        else:
            print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR


if __name__ == "__main__":
    sys.exit(main())
