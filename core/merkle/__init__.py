"""
Merkle Tree and Commitments
Deterministic Merkle tree construction + proof generation/verification.

This module provides:
- MerkleTree: Built once from ordered leaf digests, queried for root and proofs
- MerkleProof: Dataclass bundling a leaf, its index and its sibling path
- compute_root_from_proof / verify_leaf: Tree-independent verification
- serialize_proof / deserialize_proof: Raw 32-byte-per-sibling wire format

Canonical Commitment Rules:
1. Parent hashing: sha256(left + right)
2. Padding: Duplicate last node if odd number at any level
3. Empty tree: 32 zero bytes
4. Single leaf: root = leaf

Usage:
    from core.merkle import MerkleTree, verify_leaf
    from core.crypto import sha256

    leaves = [sha256(chunk) for chunk in chunks]
    tree = MerkleTree.from_hashes(leaves)

    proof = tree.make_proof(2)
    outcome = verify_leaf(tree.root, 2, leaves[2], proof)
    assert outcome.ok
"""
from .merkle_tree import (
    MerkleTree,
    VerificationOutcome,
    merkle_parent,
    compute_root_from_proof,
    verify_leaf,
    compute_tree_depth,
)

from .merkle_proofs import (
    MerkleProof,
    serialize_proof,
    deserialize_proof,
)


__all__ = [
    # Core types
    "MerkleTree",
    "MerkleProof",
    "VerificationOutcome",
    # Core functions
    "merkle_parent",
    "compute_root_from_proof",
    "verify_leaf",
    "compute_tree_depth",
    # Wire codec
    "serialize_proof",
    "deserialize_proof",
]
