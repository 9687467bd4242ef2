"""
Module 03 - Merkle Proof Replay
Field-level inclusion proofs against an anchored certificate root.

This module provides:
- CombinationStrategy: SORTED (commutative) or POSITIONAL pair hashing
- hash_pair / combine_step: single-level combination
- compute_root: replay a proof from a leaf
- verify_merkle_proof: replay and compare with the expected root
- MerkleVerifier: verifier bound to one strategy

Usage:
    from core.crypto import commit_leaf
    from core.merkle import verify_merkle_proof

    leaf = commit_leaf("name", "Alice", salt="abcd1234")
    assert verify_merkle_proof(leaf, proof_steps, root_hash)
"""
from .merkle_proofs import (
    CombinationStrategy,
    hash_pair,
    combine_step,
    compute_root,
    verify_merkle_proof,
    MerkleVerifier,
)


__all__ = [
    "CombinationStrategy",
    "hash_pair",
    "combine_step",
    "compute_root",
    "verify_merkle_proof",
    "MerkleVerifier",
]
