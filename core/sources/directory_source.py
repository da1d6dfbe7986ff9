"""
Directory Digest Source

Hashes the regular files of one directory in name order.

Ordering:
- Entries are sorted by path, so every party listing the same set of file
  names derives the same leaf order.
- Only regular files count; symlinks, directories and other entries are
  skipped.
- Unicode names are compared as Python strings, without normalization.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Iterable, Optional

from core.crypto.hashing import hash_file
from core.sources.base_source import DigestSource


logger = logging.getLogger(__name__)


def list_files_in_order(
    directory: str | Path,
    *,
    exclude: Optional[Iterable[str]] = None,
) -> list[Path]:
    """
    List the regular files of a directory, sorted by path.

    Args:
        directory: Directory to list (not recursive)
        exclude: File names to leave out

    Returns:
        Sorted list of file paths

    Raises:
        OSError: If the directory cannot be read
    """
    excluded = set(exclude or ())
    files: list[Path] = []
    for entry in sorted(Path(directory).iterdir()):
        if entry.name in excluded:
            continue
        if entry.is_symlink() or not entry.is_file():
            continue
        files.append(entry)
    return files


class DirectoryDigestSource(DigestSource):
    """
    Ordered digests of the files in a directory.

    File hashing is I/O bound and runs on a thread pool when ``max_workers``
    is above 1; results are put back into listing order before being returned.

    Usage:
        source = DirectoryDigestSource("./data")
        tree = MerkleTree.from_source(source)
    """

    source_id = "directory"

    def __init__(
        self,
        directory: str | Path,
        *,
        max_workers: Optional[int] = None,
        exclude: Optional[Iterable[str]] = None,
    ):
        super().__init__({"directory": str(directory)})
        self.directory = Path(directory)
        self.max_workers = max_workers
        self.exclude = frozenset(exclude or ())

    def list_files(self) -> list[Path]:
        return list_files_in_order(self.directory, exclude=self.exclude)

    def digests(self) -> list[bytes]:
        return self.digests_for(self.list_files())

    def digests_for(self, files: list[Path]) -> list[bytes]:
        """Hash ``files`` and return their digests in the same order."""
        logger.debug(f"Hashing {len(files)} files in {self.directory}")
        if not files:
            return []
        if self.max_workers is None or self.max_workers <= 1 or len(files) == 1:
            return [hash_file(path) for path in files]

        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            # map() yields in submission order
            return list(executor.map(hash_file, files))

    def __len__(self) -> int:
        return len(self.list_files())
