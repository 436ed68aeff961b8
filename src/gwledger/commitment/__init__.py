"""Merkle commitments over squad scores and their verification."""

from .builder import (
    InclusionProof,
    MerkleCommitment,
    build_commitment,
    build_proof,
    build_root,
    encode_leaf,
    from_hex,
    hash_pair,
    leaf_digest,
    to_hex,
)
from .verifier import ProofVerifier, compute_root, verify_proof

__all__ = [
    "InclusionProof",
    "MerkleCommitment",
    "ProofVerifier",
    "build_commitment",
    "build_proof",
    "build_root",
    "compute_root",
    "encode_leaf",
    "from_hex",
    "hash_pair",
    "leaf_digest",
    "to_hex",
    "verify_proof",
]
