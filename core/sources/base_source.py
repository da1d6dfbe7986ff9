"""
Ordered Digest Sources

Defines the interface the tree builder consumes: an ordered sequence of leaf
digests. How chunks map to digests and how their order is fixed belongs to
the source, which keeps tree logic storage-agnostic.
"""

from abc import ABC, abstractmethod
from typing import Any, Iterable, Optional, Protocol, runtime_checkable

from core.crypto.hashing import DIGEST_SIZE, is_digest


@runtime_checkable
class DigestSourceProtocol(Protocol):
    """Protocol defining the ordered digest source interface."""

    source_id: str

    def digests(self) -> list[bytes]:
        """
        Produce leaf digests in a stable, reproducible order.

        Returns:
            One 32-byte digest per chunk
        """
        ...


class DigestSource(ABC):
    """
    Abstract base class for ordered digest sources.

    Subclasses must return the same order every time they are asked about
    the same underlying chunk set, since the root and every proof depend on
    leaf position.
    """

    source_id: str = "base"

    def __init__(self, config: Optional[dict[str, Any]] = None):
        self.config = config or {}

    @abstractmethod
    def digests(self) -> list[bytes]:
        """Produce leaf digests in order."""
        pass

    def __len__(self) -> int:
        return len(self.digests())


class StaticDigestSource(DigestSource):
    """Digest source over an in-memory, already-ordered list."""

    source_id = "static"

    def __init__(self, digests: Iterable[bytes]):
        super().__init__()
        items = [bytes(d) for d in digests]
        for position, item in enumerate(items):
            if not is_digest(item):
                raise ValueError(
                    f"Digest {position} must be {DIGEST_SIZE} bytes, got {len(item)}"
                )
        self._digests = items

    def digests(self) -> list[bytes]:
        return list(self._digests)

    def __len__(self) -> int:
        return len(self._digests)
