"""
Merkle Tree Implementation
Deterministic Merkle tree construction, proof generation, and verification.

This module provides:
- MerkleTree: all levels of a binary hash tree, built once from ordered leaves
- Merkle proof generation for any leaf index
- Tree-independent proof verification

Canonical Commitment Rules (Hard Contracts):
1. Leaves are 32-byte digests supplied in a stable order by the caller
2. Parent hashing: parent = sha256(left + right)
3. Padding rule: Duplicate last node if odd number at any level.
   The duplicate is stored in the level and serves as a regular sibling.
4. Empty leaves: root is 32 zero bytes
5. Single leaf: root = leaf (the leaf hash itself), proofs are empty

Known Weakness:
- Padding by duplication makes a genuine last leaf indistinguishable from its
  padding copy: [a, b, c] and [a, b, c, c] share the same root and the same
  proof for index 2. Kept for compatibility with existing roots and proofs.

Determinism Notes:
- No randomness or non-deterministic ordering
- This module never sorts leaves - it trusts input order
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Sequence, TYPE_CHECKING

from core.crypto.hashing import DIGEST_SIZE, ZERO_DIGEST, hash_concat, is_digest, to_hex
from core.schemas.errors import InvalidIndexError, VerificationMismatch

if TYPE_CHECKING:
    from core.merkle.merkle_proofs import MerkleProof
    from core.sources import DigestSource


def merkle_parent(left: bytes, right: bytes) -> bytes:
    """
    Compute the parent hash of two child nodes.

    Order-sensitive: merkle_parent(a, b) != merkle_parent(b, a).
    """
    return hash_concat(left, right)


def _next_level(level: list[bytes]) -> list[bytes]:
    """
    Derive the parent level, padding ``level`` in place when its length is odd.
    """
    if len(level) % 2 == 1:
        level.append(level[-1])

    return [
        merkle_parent(level[i], level[i + 1])
        for i in range(0, len(level), 2)
    ]


class MerkleTree:
    """
    Binary Merkle tree holding every level, leaves first.

    The whole tree stays in memory (about 2 * 32 * n bytes), so one build
    serves both root publication and any number of proof queries.
    Trees are immutable; a different leaf set needs a new tree.

    Example:
        >>> tree = MerkleTree.from_hashes([sha256(b"a"), sha256(b"b")])
        >>> proof = tree.make_proof(1)
        >>> verify_leaf(tree.root, 1, sha256(b"b"), proof).ok
        True
    """

    __slots__ = ("_levels", "_size")

    def __init__(self, hashes: Sequence[bytes] = ()) -> None:
        """
        Build the tree from ordered leaf digests.

        Args:
            hashes: Leaf digests, 32 bytes each. Order matters and is preserved.

        Raises:
            ValueError: If any leaf is not a 32-byte digest
        """
        leaves = [bytes(h) for h in hashes]
        for position, leaf in enumerate(leaves):
            if not is_digest(leaf):
                raise ValueError(
                    f"Leaf {position} must be {DIGEST_SIZE} bytes, got {len(leaf)}"
                )

        self._size = len(leaves)
        self._levels = tuple(tuple(level) for level in self._build_levels(leaves))

    @staticmethod
    def _build_levels(leaves: list[bytes]) -> list[list[bytes]]:
        if len(leaves) == 0:
            return [[ZERO_DIGEST]]

        if len(leaves) == 1:
            return [leaves]

        levels: list[list[bytes]] = []
        current = leaves
        while len(current) > 1:
            parent = _next_level(current)
            levels.append(current)
            current = parent
        levels.append(current)
        return levels

    @classmethod
    def from_hashes(cls, hashes: Sequence[bytes]) -> "MerkleTree":
        """Build a tree from ordered leaf digests."""
        return cls(hashes)

    @classmethod
    def from_source(cls, source: "DigestSource") -> "MerkleTree":
        """Build a tree from an ordered digest source."""
        return cls(source.digests())

    @property
    def root(self) -> bytes:
        """The single digest at the top level."""
        return self._levels[-1][0]

    @property
    def size(self) -> int:
        """Number of leaves the tree was built from (0 for the empty tree)."""
        return self._size

    @property
    def height(self) -> int:
        """Number of levels, root level included."""
        return len(self._levels)

    @property
    def levels(self) -> tuple[tuple[bytes, ...], ...]:
        """All levels, leaves first. Odd levels include their padding copy."""
        return self._levels

    def leaf(self, index: int) -> bytes:
        """Return the leaf digest at ``index``."""
        self._check_index(index)
        return self._levels[0][index]

    def _check_index(self, index: int) -> None:
        if index < 0 or index >= self._size:
            raise InvalidIndexError(index, self._size)

    def make_proof(self, index: int) -> list[bytes]:
        """
        Get the sibling path for the leaf at ``index``.

        For each level below the root the ancestor of ``index`` is
        ``index >> level`` and its sibling is the ancestor with the lowest bit
        flipped. Padding copies are real level entries, so the sibling index
        is always valid.

        Args:
            index: 0-based leaf index

        Returns:
            Sibling digests ordered from the leaf level upward,
            length ``height - 1``

        Raises:
            InvalidIndexError: If index is outside [0, size)
        """
        self._check_index(index)

        proof: list[bytes] = []
        for level in range(self.height - 1):
            ancestor = index >> level
            proof.append(self._levels[level][ancestor ^ 1])
        return proof

    def make_merkle_proof(self, index: int) -> "MerkleProof":
        """Bundle the proof for ``index`` with its leaf."""
        from core.merkle.merkle_proofs import MerkleProof

        siblings = self.make_proof(index)
        return MerkleProof(index=index, leaf=self._levels[0][index], siblings=siblings)

    def __len__(self) -> int:
        return self._size

    def __iter__(self) -> Iterator[bytes]:
        return iter(self._levels[0][: self._size])

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MerkleTree):
            return NotImplemented
        return self._size == other._size and self._levels == other._levels

    def __hash__(self) -> int:
        return hash((self._size, self.root))

    def __repr__(self) -> str:
        return f"MerkleTree(size={self._size}, root={to_hex(self.root)})"

    def __str__(self) -> str:
        return "\n".join(
            f"Level {level}: [{', '.join(to_hex(h) for h in hashes)}]"
            for level, hashes in enumerate(self._levels)
        )


@dataclass(frozen=True)
class VerificationOutcome:
    """
    Result of checking a leaf against a trusted root.

    Attributes:
        expected_root: The trusted root supplied by the caller
        computed_root: The root recomputed from leaf, index and proof
    """
    expected_root: bytes
    computed_root: bytes
    leaf_index: int = 0

    @property
    def ok(self) -> bool:
        return self.computed_root == self.expected_root

    def __bool__(self) -> bool:
        return self.ok

    def raise_for_mismatch(self) -> None:
        """Raise VerificationMismatch if the roots differ."""
        if not self.ok:
            raise VerificationMismatch(
                expected_root=self.expected_root,
                computed_root=self.computed_root,
                leaf_index=self.leaf_index,
            )


def compute_root_from_proof(
    index: int,
    leaf: bytes,
    proof: Sequence[bytes],
) -> bytes:
    """
    Recompute the Merkle root from a leaf digest, its index and its proof.

    Algorithm:
    1. Start with the leaf hash
    2. For each sibling (bottom-up):
       - If current index is even: hash = parent(hash, sibling)
       - If current index is odd: hash = parent(sibling, hash)
       - Move up: index = index >> 1
    3. The final hash is the root

    Never looks at a tree, so a peer holding only the content and a
    published root can run it.
    """
    current_hash = bytes(leaf)
    current_index = index

    for sibling in proof:
        if current_index % 2 == 0:
            current_hash = merkle_parent(current_hash, sibling)
        else:
            current_hash = merkle_parent(sibling, current_hash)
        current_index >>= 1

    return current_hash


def verify_leaf(
    root: bytes,
    index: int,
    leaf: bytes,
    proof: Sequence[bytes],
) -> VerificationOutcome:
    """
    Verify that ``leaf`` sits at ``index`` under the trusted ``root``.

    Args:
        root: Trusted Merkle root
        index: Claimed leaf index
        leaf: Digest of the leaf content
        proof: Sibling digests, leaf level first

    Returns:
        VerificationOutcome; ``ok`` is False on mismatch and
        ``computed_root`` holds the root that was actually derived
    """
    computed = compute_root_from_proof(index, leaf, proof)
    return VerificationOutcome(
        expected_root=bytes(root),
        computed_root=computed,
        leaf_index=index,
    )


def compute_tree_depth(num_leaves: int) -> int:
    """
    Compute the number of levels of a tree with ``num_leaves`` leaves.

    A tree of 0 or 1 leaves has a single level; proofs are ``depth - 1`` long.
    """
    depth = 1
    n = num_leaves
    while n > 1:
        n = (n + 1) // 2
        depth += 1
    return depth


__all__ = [
    "MerkleTree",
    "VerificationOutcome",
    "merkle_parent",
    "compute_root_from_proof",
    "verify_leaf",
    "compute_tree_depth",
]
