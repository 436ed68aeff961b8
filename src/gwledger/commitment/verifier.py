"""Inclusion proof verification against a published root."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from gwledger.models import MAX_SCORE, ScoreLeaf

from .builder import DIGEST_SIZE, hash_pair, leaf_digest


def compute_root(leaf: ScoreLeaf, proof: Sequence[bytes]) -> bytes:
    running = leaf_digest(leaf)
    for sibling in proof:
        running = hash_pair(running, sibling)
    return running


def verify_proof(leaf: ScoreLeaf, proof: Sequence[bytes], expected_root: bytes) -> bool:
    """True iff folding ``proof`` over ``leaf`` reproduces ``expected_root``."""

    if len(expected_root) != DIGEST_SIZE:
        return False
    if not 0 <= leaf.score <= MAX_SCORE:
        return False
    if any(len(sibling) != DIGEST_SIZE for sibling in proof):
        return False
    return compute_root(leaf, proof) == expected_root


@dataclass(frozen=True)
class ProofVerifier:
    """Verifier bound to one authoritative root."""

    root: bytes

    def verify(self, leaf: ScoreLeaf, proof: Sequence[bytes]) -> bool:
        return verify_proof(leaf, proof, self.root)

    def first_failure(self, leaves: Sequence[ScoreLeaf], proofs: Sequence[Sequence[bytes]]) -> int | None:
        """Index of the first leaf whose proof does not verify, or None."""

        for index, (leaf, proof) in enumerate(zip(leaves, proofs)):
            if not self.verify(leaf, proof):
                return index
        return None
