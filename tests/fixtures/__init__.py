"""
Test fixtures package for merklefs tests.

This package provides factory functions for creating test objects.

Usage:
    from fixtures import make_leaves, REGRESSION_LEAVES, REGRESSION_ROOT

    def test_something():
        tree = MerkleTree.from_hashes(make_leaves(5))
"""

from .common import (
    REGRESSION_LEAVES,
    REGRESSION_ROOT,
    TestClientHttp,
    make_leaves,
    make_file_contents,
    write_files,
)

__all__ = [
    "REGRESSION_LEAVES",
    "REGRESSION_ROOT",
    "TestClientHttp",
    "make_leaves",
    "make_file_contents",
    "write_files",
]
