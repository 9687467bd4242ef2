"""
CLI command modules.
"""

from certproof_cli.commands import document, fields, verify

__all__ = ["document", "fields", "verify"]
