"""
Module 03 - Merkle Proof Replay
Replays a field proof path against a leaf commitment and compares the
reconstructed root with the anchored root hash.

Owner: Protocol/Crypto Engineer
Module ID: M03

Replay Rules (Hard Contracts):
1. current = leaf commitment
2. For each step, leaf-to-root:
   - position "right": nominal operands (current, sibling)
   - position "left":  nominal operands (sibling, current)
   - current = sha256(utf8(first_hex + second_hex)).hex()
3. Valid iff current == expected root (case-insensitive hex)

Pair Combination:
- SORTED (default): the lexicographically smaller hex string goes first,
  whatever the nominal order. The pair hash is commutative, so the
  position field does not influence the result. This is what the issuing
  side produces today.
- POSITIONAL: the nominal order from the position field is hashed as-is.

One strategy applies to every step of a proof. Mixing them breaks
compatibility with proofs generated under the other convention.

Note: pair hashes are taken over the hex TEXT of both children, not over
their raw digest bytes.
"""
from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Iterable, Sequence

from core.crypto.hashing import normalize_hash, sha256_hex
from core.schemas.errors import InvalidHashFormatException, InvalidProofFormatException
from core.schemas.proof import ProofStep, parse_proof


logger = logging.getLogger(__name__)


class CombinationStrategy(str, Enum):
    """How two sibling hashes are ordered before hashing."""

    SORTED = "sorted"
    POSITIONAL = "positional"

    @classmethod
    def parse(cls, value: "str | CombinationStrategy") -> "CombinationStrategy":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            valid = ", ".join(s.value for s in cls)
            raise ValueError(
                f"Unknown combination strategy {value!r} (expected one of: {valid})"
            ) from None


def hash_pair(
    left: str,
    right: str,
    strategy: CombinationStrategy = CombinationStrategy.SORTED,
) -> str:
    """
    Compute the parent hash of two hex-encoded children.

    Args:
        left: Nominal left operand (hex)
        right: Nominal right operand (hex)
        strategy: SORTED puts the smaller hex string first; POSITIONAL
                  keeps (left, right)

    Returns:
        Parent hash (64-char lowercase hex)
    """
    if strategy is CombinationStrategy.SORTED and left > right:
        left, right = right, left
    return sha256_hex((left + right).encode("ascii"))


def combine_step(
    current: str,
    step: ProofStep,
    strategy: CombinationStrategy = CombinationStrategy.SORTED,
) -> str:
    """Apply one proof step to the running hash."""
    if step.position == "right":
        return hash_pair(current, step.hash, strategy)
    return hash_pair(step.hash, current, strategy)


def _normalize_leaf(leaf: str) -> str:
    try:
        return normalize_hash(leaf)
    except InvalidHashFormatException as e:
        raise InvalidProofFormatException(
            f"Leaf commitment is not a valid hash: {e.message}",
            details={"leaf": e.details.get("value")},
        ) from e


def _normalize_root(root: str) -> str:
    try:
        return normalize_hash(root)
    except InvalidHashFormatException as e:
        raise InvalidProofFormatException(
            f"Expected root is not a valid hash: {e.message}",
            details={"expected_root": e.details.get("value")},
        ) from e


def compute_root(
    leaf: str,
    proof: Iterable[ProofStep | dict[str, Any]] | None,
    strategy: CombinationStrategy = CombinationStrategy.SORTED,
) -> str:
    """
    Replay a proof from a leaf and return the reconstructed root.

    An empty proof returns the leaf itself.

    Raises:
        InvalidProofFormatException: If the leaf or any step is malformed
    """
    current = _normalize_leaf(leaf)
    steps = parse_proof(proof)

    for i, step in enumerate(steps):
        current = combine_step(current, step, strategy)
        logger.debug(
            f"Proof step {i + 1}/{len(steps)}: sibling={step.hash} "
            f"position={step.position} result={current}"
        )

    return current


def verify_merkle_proof(
    leaf: str,
    proof: Iterable[ProofStep | dict[str, Any]] | None,
    expected_root: str,
    strategy: CombinationStrategy = CombinationStrategy.SORTED,
) -> bool:
    """
    Verify that a leaf commitment belongs to an anchored root.

    Args:
        leaf: Leaf commitment (hex)
        proof: Proof steps, leaf-to-root (ProofStep or wire dicts)
        expected_root: Anchored root hash (hex, any case)
        strategy: Pair combination strategy

    Returns:
        True iff the replayed root equals expected_root. An empty proof
        is valid input and holds only when the leaf is the root.

    Raises:
        InvalidProofFormatException: Malformed step, leaf or root. Never
                                     downgraded to False.
    """
    root = _normalize_root(expected_root)
    computed = compute_root(leaf, proof, strategy)
    matched = computed == root

    logger.debug(f"Proof replay: computed={computed} expected={root} match={matched}")
    return matched


class MerkleVerifier:
    """
    Proof verifier bound to one combination strategy.

    Example:
        >>> verifier = MerkleVerifier()
        >>> verifier.verify(leaf, proof, root)
        True
    """

    def __init__(
        self,
        strategy: CombinationStrategy | str = CombinationStrategy.SORTED,
    ) -> None:
        self.strategy = CombinationStrategy.parse(strategy)

    def compute_root(
        self,
        leaf: str,
        proof: Sequence[ProofStep | dict[str, Any]] | None,
    ) -> str:
        """Replay proof from leaf without comparing."""
        return compute_root(leaf, proof, self.strategy)

    def replay(
        self,
        leaf: str,
        proof: Sequence[ProofStep | dict[str, Any]] | None,
        expected_root: str,
    ) -> tuple[str, bool]:
        """
        Replay a proof once and compare with the expected root.

        Returns:
            (computed_root, matched)
        """
        root = _normalize_root(expected_root)
        computed = compute_root(leaf, proof, self.strategy)
        return computed, computed == root

    def verify(
        self,
        leaf: str,
        proof: Sequence[ProofStep | dict[str, Any]] | None,
        expected_root: str,
    ) -> bool:
        """Verify a leaf commitment against an expected root."""
        return verify_merkle_proof(leaf, proof, expected_root, self.strategy)

    def __repr__(self) -> str:
        return f"MerkleVerifier(strategy={self.strategy.value!r})"


__all__ = [
    "CombinationStrategy",
    "hash_pair",
    "combine_step",
    "compute_root",
    "verify_merkle_proof",
    "MerkleVerifier",
]
