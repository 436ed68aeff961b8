"""Merkle commitment over a period's squad scores.

Canonical commitment rules:

1. Owner field: ``sha256(owner.encode("utf-8"))`` (32 bytes).
2. Score field: 32-byte big-endian unsigned integer.
3. Leaf digest: ``sha256(0x00 || owner_field || score_field)``.
4. Node digest: ``sha256(0x01 || min(a, b) || max(a, b))``; the smaller digest
   always goes first, so proofs carry no left/right flags.
5. Leaf digests are sorted ascending before the tree is built.
6. A lone node at the end of a level is carried up unchanged.
7. A single leaf is its own root, with an empty proof.

These roots do not match trees built with keccak-256 over ABI-encoded
``(address, uint256)`` leaves, such as merkletreejs output with
``sortPairs``. An on-chain verifier for these roots must use the same
SHA-256 leaf and node layout.
"""

from __future__ import annotations

import hashlib
import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Sequence, Tuple

from gwledger.errors import DuplicateLeaf, EmptyCommitment
from gwledger.models import MAX_SCORE, ScoreLeaf


logger = logging.getLogger(__name__)

DIGEST_SIZE = 32
SCORE_WIDTH = 32

_LEAF_PREFIX = b"\x00"
_NODE_PREFIX = b"\x01"

InclusionProof = Tuple[bytes, ...]


def encode_leaf(owner: str, score: int) -> bytes:
    """Fixed-width 64-byte layout of one (owner, score) pair."""

    if not 0 <= score <= MAX_SCORE:
        raise ValueError(f"score must fit in {SCORE_WIDTH} unsigned bytes, got {score}")
    owner_field = hashlib.sha256(owner.encode("utf-8")).digest()
    return owner_field + score.to_bytes(SCORE_WIDTH, "big")


def leaf_digest(leaf: ScoreLeaf) -> bytes:
    return hashlib.sha256(_LEAF_PREFIX + encode_leaf(leaf.owner, leaf.score)).digest()


def hash_pair(a: bytes, b: bytes) -> bytes:
    low, high = (a, b) if a <= b else (b, a)
    return hashlib.sha256(_NODE_PREFIX + low + high).digest()


def to_hex(digest: bytes) -> str:
    return "0x" + digest.hex()


def from_hex(value: str) -> bytes:
    text = value[2:] if value.startswith(("0x", "0X")) else value
    digest = bytes.fromhex(text)
    if len(digest) != DIGEST_SIZE:
        raise ValueError(f"expected a {DIGEST_SIZE}-byte digest, got {len(digest)} bytes")
    return digest


def _build_levels(leaves: Sequence[bytes]) -> List[List[bytes]]:
    levels = [list(leaves)]
    current = levels[0]
    while len(current) > 1:
        parents = [hash_pair(current[i], current[i + 1]) for i in range(0, len(current) - 1, 2)]
        if len(current) % 2:
            parents.append(current[-1])
        levels.append(parents)
        current = parents
    return levels


def _proof_for_index(levels: Sequence[Sequence[bytes]], index: int) -> InclusionProof:
    siblings: List[bytes] = []
    for level in levels[:-1]:
        sibling = index ^ 1
        if sibling < len(level):
            siblings.append(level[sibling])
        index //= 2
    return tuple(siblings)


@dataclass
class MerkleCommitment:
    period: int
    leaves: List[ScoreLeaf]
    levels: List[List[bytes]]
    proofs: Dict[str, InclusionProof] = field(default_factory=dict)

    @property
    def root(self) -> bytes:
        return self.levels[-1][0]

    @property
    def root_hex(self) -> str:
        return to_hex(self.root)

    def leaf_for(self, owner: str) -> ScoreLeaf:
        for leaf in self.leaves:
            if leaf.owner == owner:
                return leaf
        raise KeyError(owner)

    def proof_for(self, owner: str) -> InclusionProof:
        return self.proofs[owner]

    def update_payload(self) -> List[dict]:
        """Per-squad ``{owner, score, proof}`` entries in hex, ready to submit."""

        return [
            {
                "owner": leaf.owner,
                "score": leaf.score,
                "proof": [to_hex(sibling) for sibling in self.proofs[leaf.owner]],
            }
            for leaf in self.leaves
        ]


def build_commitment(period: int, leaves: Iterable[ScoreLeaf]) -> MerkleCommitment:
    """Build the Merkle tree, root and every inclusion proof for one period."""

    leaf_list = list(leaves)
    if not leaf_list:
        raise EmptyCommitment(f"No score leaves supplied for period {period}")

    seen: set[str] = set()
    for leaf in leaf_list:
        if leaf.owner in seen:
            raise DuplicateLeaf(leaf.owner)
        seen.add(leaf.owner)

    digests = {leaf.owner: leaf_digest(leaf) for leaf in leaf_list}
    ordered = sorted(leaf_list, key=lambda leaf: digests[leaf.owner])
    levels = _build_levels([digests[leaf.owner] for leaf in ordered])

    proofs = {leaf.owner: _proof_for_index(levels, index) for index, leaf in enumerate(ordered)}
    commitment = MerkleCommitment(period=period, leaves=ordered, levels=levels, proofs=proofs)
    logger.info(
        "Built commitment for period %d: %d leaves, depth %d, root %s",
        period,
        len(ordered),
        len(levels) - 1,
        commitment.root_hex,
    )
    return commitment


def build_root(leaves: Iterable[ScoreLeaf]) -> bytes:
    return build_commitment(0, leaves).root


def build_proof(leaf: ScoreLeaf, leaves: Iterable[ScoreLeaf]) -> InclusionProof:
    commitment = build_commitment(0, leaves)
    if commitment.leaf_for(leaf.owner) != leaf:
        raise KeyError(leaf.owner)
    return commitment.proof_for(leaf.owner)
