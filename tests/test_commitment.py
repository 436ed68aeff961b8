import hashlib
import random

import pytest

from gwledger.commitment import (
    build_commitment,
    build_proof,
    build_root,
    encode_leaf,
    from_hex,
    hash_pair,
    leaf_digest,
    to_hex,
    verify_proof,
)
from gwledger.errors import DuplicateLeaf, EmptyCommitment
from gwledger.models import ScoreLeaf


def _leaves(n: int) -> list[ScoreLeaf]:
    return [ScoreLeaf(owner=f"owner-{i}", score=i * 7) for i in range(n)]


def test_leaf_encoding_is_fixed_width():
    short = encode_leaf("a", 1)
    long = encode_leaf("a-much-longer-owner-identity", 10**30)
    assert len(short) == len(long) == 64
    assert short[32:] == (1).to_bytes(32, "big")


def test_leaf_encoding_has_no_delimiter_ambiguity():
    assert encode_leaf("ab", 1) != encode_leaf("a", 1)
    assert leaf_digest(ScoreLeaf(owner="a1", score=2)) != leaf_digest(ScoreLeaf(owner="a", score=12))


def test_digests_use_prefixed_sha256_layout():
    owner_field = hashlib.sha256(b"alice").digest()
    expected_leaf = hashlib.sha256(b"\x00" + owner_field + (42).to_bytes(32, "big")).digest()
    assert leaf_digest(ScoreLeaf(owner="alice", score=42)) == expected_leaf

    low, high = sorted([hashlib.sha256(b"x").digest(), hashlib.sha256(b"y").digest()])
    assert hash_pair(high, low) == hashlib.sha256(b"\x01" + low + high).digest()


def test_encode_leaf_rejects_scores_outside_the_field():
    with pytest.raises(ValueError):
        encode_leaf("a", -1)
    with pytest.raises(ValueError):
        encode_leaf("a", 2**256)


def test_hash_pair_is_commutative():
    a = hashlib.sha256(b"a").digest()
    b = hashlib.sha256(b"b").digest()
    assert hash_pair(a, b) == hash_pair(b, a)


def test_two_leaf_commitment():
    a = ScoreLeaf(owner="A", score=100)
    b = ScoreLeaf(owner="B", score=150)

    commitment = build_commitment(7, [a, b])

    assert commitment.root == hash_pair(leaf_digest(a), leaf_digest(b))
    assert commitment.proof_for("A") == (leaf_digest(b),)
    assert commitment.proof_for("B") == (leaf_digest(a),)
    assert verify_proof(a, commitment.proof_for("A"), commitment.root)


def test_single_leaf_is_its_own_root():
    leaf = ScoreLeaf(owner="solo", score=12)
    commitment = build_commitment(1, [leaf])
    assert commitment.root == leaf_digest(leaf)
    assert commitment.proof_for("solo") == ()
    assert verify_proof(leaf, (), commitment.root)


def test_odd_node_is_carried_up_without_duplication():
    leaves = _leaves(3)
    digests = sorted(leaf_digest(leaf) for leaf in leaves)

    commitment = build_commitment(1, leaves)

    assert commitment.root == hash_pair(hash_pair(digests[0], digests[1]), digests[2])
    lone = next(leaf for leaf in leaves if leaf_digest(leaf) == digests[2])
    assert commitment.proof_for(lone.owner) == (hash_pair(digests[0], digests[1]),)


def test_root_is_independent_of_input_order():
    leaves = _leaves(9)
    shuffled = leaves[:]
    random.Random(4).shuffle(shuffled)
    assert build_root(leaves) == build_root(shuffled)


@pytest.mark.parametrize("size", [1, 2, 3, 5, 8, 13])
def test_every_leaf_verifies(size):
    leaves = _leaves(size)
    commitment = build_commitment(1, leaves)
    for leaf in leaves:
        assert verify_proof(leaf, commitment.proof_for(leaf.owner), commitment.root)


def test_build_proof_matches_commitment():
    leaves = _leaves(6)
    assert verify_proof(leaves[2], build_proof(leaves[2], leaves), build_root(leaves))


def test_empty_and_duplicate_sets_rejected():
    with pytest.raises(EmptyCommitment):
        build_commitment(1, [])
    with pytest.raises(DuplicateLeaf):
        build_commitment(1, [ScoreLeaf(owner="x", score=1), ScoreLeaf(owner="x", score=2)])


def test_update_payload_is_hex_encoded():
    commitment = build_commitment(2, _leaves(4))
    payload = commitment.update_payload()
    assert {entry["owner"] for entry in payload} == {f"owner-{i}" for i in range(4)}
    for entry in payload:
        proof = tuple(from_hex(sibling) for sibling in entry["proof"])
        leaf = ScoreLeaf(owner=entry["owner"], score=entry["score"])
        assert verify_proof(leaf, proof, commitment.root)


def test_hex_helpers_reject_wrong_width():
    digest = hashlib.sha256(b"x").digest()
    assert from_hex(to_hex(digest)) == digest
    with pytest.raises(ValueError):
        from_hex("0xdeadbeef")
