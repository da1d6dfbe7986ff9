"""
Storage Module

Server-side file and proof storage.
"""

from .file_store import (
    FileStore,
    ForeignDirectoryError,
    StorageIncompleteError,
    StoredFileDigestSource,
    parse_index,
)

__all__ = [
    "FileStore",
    "ForeignDirectoryError",
    "StorageIncompleteError",
    "StoredFileDigestSource",
    "parse_index",
]
