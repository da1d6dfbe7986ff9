"""
Ordered Digest Sources

Leaf providers for Merkle tree construction.
"""

from .base_source import DigestSource, DigestSourceProtocol, StaticDigestSource
from .directory_source import DirectoryDigestSource, list_files_in_order

__all__ = [
    "DigestSource",
    "DigestSourceProtocol",
    "StaticDigestSource",
    "DirectoryDigestSource",
    "list_files_in_order",
]
