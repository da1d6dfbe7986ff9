"""
File Store

Server-side storage for uploaded files and their precomputed proofs.

Layout:
    <root_dir>/<index>            uploaded file content, named by leaf index
    <root_dir>/.merklefs-proofs/<index>    serialized proof for that leaf

The tree is built lazily, on the first request that needs a proof or the
root, from every stored file ordered by numeric index. Any upload discards
the cached tree and proofs so they are rebuilt over the new file set.

The proofs directory carries an ownership marker. A directory without the
marker is never deleted; the store refuses to use it instead.
"""

from __future__ import annotations

import io
import logging
import os
import shutil
import threading
from pathlib import Path
from typing import BinaryIO, Optional

from core.merkle.merkle_proofs import serialize_proof
from core.merkle.merkle_tree import MerkleTree
from core.schemas.errors import ErrorCodes, FileNotStoredError, MerkleFSException
from core.sources.directory_source import DirectoryDigestSource


logger = logging.getLogger(__name__)


DEFAULT_PROOFS_DIRNAME = ".merklefs-proofs"

# Present in every directory the store created and may delete
OWNER_MARKER = ".merklefs-owned"


class StorageIncompleteError(MerkleFSException):
    """Raised when stored indices do not form the contiguous range 0..n-1."""

    def __init__(self, missing: list[int], count: int) -> None:
        super().__init__(
            message=(
                f"Stored files are not contiguous: missing indices "
                f"{missing[:10]} among {count} files"
            ),
            code=ErrorCodes.STORAGE_ERROR,
            details={"missing": missing[:100], "count": count},
            retryable=False,
        )
        self.missing = missing


class ForeignDirectoryError(MerkleFSException):
    """Raised when a directory the store would replace was not created by it."""

    def __init__(self, path: Path) -> None:
        super().__init__(
            message=(
                f"Refusing to remove {path}: it exists but was not created "
                f"by merklefs (no {OWNER_MARKER} marker)"
            ),
            code=ErrorCodes.STORAGE_ERROR,
            details={"path": str(path)},
            retryable=False,
        )
        self.path = path


def _remove_owned(path: Path) -> None:
    """Delete ``path`` if it carries the ownership marker, and nothing else."""
    if not path.exists():
        return
    if not (path / OWNER_MARKER).is_file():
        raise ForeignDirectoryError(path)
    shutil.rmtree(path)


def parse_index(name: str) -> Optional[int]:
    """
    Parse a canonical decimal leaf index ("0", "17"; not "007" or "-1").
    """
    if not name.isdigit() or not name.isascii():
        return None
    if len(name) > 1 and name.startswith("0"):
        return None
    return int(name)


class StoredFileDigestSource(DirectoryDigestSource):
    """
    Digests of the stored files, ordered by numeric index.

    Name order would put "10" before "2", so stored files are ordered by the
    integer their name encodes instead.
    """

    source_id = "file_store"

    def list_files(self) -> list[Path]:
        indexed = []
        for path in super().list_files():
            index = parse_index(path.name)
            if index is not None:
                indexed.append((index, path))
        return [path for _, path in sorted(indexed)]


class FileStore:
    """
    Owns the uploaded files, the tree built over them and the proof files.

    Instances are shared between request handlers; tree building is
    serialized by a lock and a built tree is read-only.
    """

    def __init__(
        self,
        root_dir: str | Path,
        *,
        proofs_dirname: str = DEFAULT_PROOFS_DIRNAME,
        hash_workers: int = 1,
    ) -> None:
        self.root_dir = Path(root_dir)
        self.root_dir.mkdir(parents=True, exist_ok=True)
        self.proofs_dirname = proofs_dirname
        self.proofs_dir = self.root_dir / proofs_dirname
        if self.proofs_dir.exists() and not (self.proofs_dir / OWNER_MARKER).is_file():
            raise ForeignDirectoryError(self.proofs_dir)
        self.source = StoredFileDigestSource(
            self.root_dir,
            max_workers=hash_workers,
            exclude={proofs_dirname},
        )
        self._tree: Optional[MerkleTree] = None
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # Files
    # ------------------------------------------------------------------

    def file_path(self, index: int) -> Path:
        """
        Path of the stored file for ``index``.

        Raises:
            FileNotStoredError: If nothing is stored for the index
        """
        if index < 0:
            raise FileNotStoredError(index)
        path = self.root_dir / str(index)
        if not path.is_file():
            raise FileNotStoredError(index)
        return path

    def read_file(self, index: int) -> bytes:
        return self.file_path(index).read_bytes()

    def indices(self) -> list[int]:
        """Stored indices in ascending order."""
        return [int(path.name) for path in self.source.list_files()]

    @property
    def count(self) -> int:
        return len(self.indices())

    def save(self, index: int, stream: BinaryIO) -> Path:
        """
        Store an uploaded file under its leaf index.

        The content is flushed to disk before returning. Cached proofs are
        dropped so the next query rebuilds them.
        """
        if index < 0:
            raise ValueError(f"Leaf index must be non-negative, got {index}")

        path = self.root_dir / str(index)
        logger.info(f"Storing file index {index} at {path}")
        with open(path, "wb") as f:
            shutil.copyfileobj(stream, f)
            f.flush()
            os.fsync(f.fileno())

        self.invalidate()
        return path

    def save_bytes(self, index: int, data: bytes) -> Path:
        return self.save(index, io.BytesIO(data))

    # ------------------------------------------------------------------
    # Tree and proofs
    # ------------------------------------------------------------------

    def invalidate(self) -> None:
        """Forget the cached tree and delete proof files."""
        with self._lock:
            self._tree = None
            _remove_owned(self.proofs_dir)

    def ensure_proofs(self) -> MerkleTree:
        """
        Build the tree and write one proof file per stored index, if needed.

        Returns:
            The tree over the stored files

        Raises:
            StorageIncompleteError: If stored indices have gaps
        """
        with self._lock:
            if self._tree is not None:
                return self._tree

            files = self.source.list_files()
            indices = [int(path.name) for path in files]
            expected = range(len(indices))
            if indices != list(expected):
                present = set(indices)
                missing = [i for i in range(max(indices) + 1) if i not in present]
                raise StorageIncompleteError(missing, len(indices))

            logger.info(f"Computing proofs for {len(files)} files...")
            tree = MerkleTree.from_hashes(self.source.digests_for(files))
            logger.info(f"Merkle root: {tree.root.hex()}")

            self._write_proofs(tree)
            self._tree = tree
            return tree

    def _write_proofs(self, tree: MerkleTree) -> None:
        staging = self.root_dir / f"{self.proofs_dirname}.tmp"
        _remove_owned(staging)
        staging.mkdir()
        (staging / OWNER_MARKER).touch()

        for index in range(tree.size):
            (staging / str(index)).write_bytes(serialize_proof(tree.make_proof(index)))

        _remove_owned(self.proofs_dir)
        staging.rename(self.proofs_dir)

    def read_proof(self, index: int) -> bytes:
        """
        Serialized proof for ``index``.

        Served from the tree the proof files were written from, so an upload
        landing after the tree is built cannot remove the proof being read.

        Raises:
            FileNotStoredError: If no file is stored for the index
        """
        tree = self.ensure_proofs()
        if index < 0 or index >= tree.size:
            raise FileNotStoredError(index, kind="proof")
        return serialize_proof(tree.make_proof(index))

    def root(self) -> bytes:
        return self.ensure_proofs().root
