"""
Merkle Proof Bundles and Wire Codec

This module provides:
- MerkleProof: a leaf's index, digest and sibling path kept together
- serialize_proof / deserialize_proof: the byte-level proof format

Wire Format:
- A serialized proof is the concatenation of its sibling digests in proof
  order, 32 * depth bytes, with no header or length prefix
- A buffer whose length is not a multiple of 32 is rejected, never truncated
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

from core.crypto.hashing import DIGEST_SIZE, is_digest, to_hex
from core.merkle.merkle_tree import VerificationOutcome, compute_root_from_proof, verify_leaf
from core.schemas.errors import ProofFormatError


def serialize_proof(proof: Sequence[bytes]) -> bytes:
    """
    Concatenate proof digests into the wire format.

    Raises:
        ValueError: If any entry is not a 32-byte digest
    """
    for position, sibling in enumerate(proof):
        if not is_digest(sibling):
            raise ValueError(
                f"Proof entry {position} must be {DIGEST_SIZE} bytes, got {len(sibling)}"
            )
    return b"".join(bytes(sibling) for sibling in proof)


def deserialize_proof(proof_bytes: bytes) -> list[bytes]:
    """
    Split a serialized proof back into its digests.

    Args:
        proof_bytes: Raw proof as produced by serialize_proof

    Returns:
        Sibling digests in proof order

    Raises:
        ProofFormatError: If the length is not a multiple of 32
    """
    if len(proof_bytes) % DIGEST_SIZE != 0:
        raise ProofFormatError(
            f"Proof size is not a multiple of {DIGEST_SIZE}: {len(proof_bytes)}",
            size=len(proof_bytes),
        )
    return [
        bytes(proof_bytes[i:i + DIGEST_SIZE])
        for i in range(0, len(proof_bytes), DIGEST_SIZE)
    ]


@dataclass(frozen=True)
class MerkleProof:
    """
    A Merkle inclusion proof for a single leaf.

    Attributes:
        index: The 0-based index of the leaf in the original leaf list
        leaf: The leaf digest being proven
        siblings: Sibling digests from bottom to top of tree
    """
    index: int
    leaf: bytes
    siblings: list[bytes] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.index < 0:
            raise ValueError(f"Leaf index must be non-negative, got {self.index}")

    @property
    def depth(self) -> int:
        return len(self.siblings)

    def compute_root(self) -> bytes:
        return compute_root_from_proof(self.index, self.leaf, self.siblings)

    def verify(self, root: bytes) -> VerificationOutcome:
        """Check this proof against a trusted root."""
        return verify_leaf(root, self.index, self.leaf, self.siblings)

    def to_bytes(self) -> bytes:
        """Serialize the sibling path (index and leaf travel separately)."""
        return serialize_proof(self.siblings)

    @classmethod
    def from_bytes(cls, index: int, leaf: bytes, proof_bytes: bytes) -> "MerkleProof":
        return cls(index=index, leaf=leaf, siblings=deserialize_proof(proof_bytes))

    def to_dict(self) -> dict[str, object]:
        return {
            "index": self.index,
            "leaf": to_hex(self.leaf),
            "siblings": [to_hex(s) for s in self.siblings],
        }


__all__ = [
    "MerkleProof",
    "serialize_proof",
    "deserialize_proof",
]
