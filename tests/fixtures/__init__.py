"""
Test fixtures package for certificate verification tests.

Organized into layers:
- common.py: Config, service and issuer registry factories
- merkle_fixtures.py: Independent tree builder producing roots and proofs

Usage:
    from fixtures.merkle_fixtures import make_certificate_tree

    def test_something():
        tree = make_certificate_tree(salt="abcd1234")
"""

from .common import (
    make_issuer,
    make_issuer_registry,
    make_runtime_config,
    make_service,
)

from .merkle_fixtures import (
    build_tree,
    leaf_hex,
    make_certificate_tree,
    make_ledger_metadata,
    pair_hex,
)

__all__ = [
    # Common
    "make_issuer",
    "make_issuer_registry",
    "make_runtime_config",
    "make_service",
    # Merkle
    "build_tree",
    "leaf_hex",
    "make_certificate_tree",
    "make_ledger_metadata",
    "pair_hex",
]
