"""
Core cryptographic utilities.

Provides the SHA-256 digest primitive and hex helpers.
"""
from .hashing import (
    DIGEST_SIZE,
    ZERO_DIGEST,
    sha256,
    hash_concat,
    hash_stream,
    hash_file,
    is_digest,
    to_hex,
    from_hex,
    parse_digest,
)

__all__ = [
    "DIGEST_SIZE",
    "ZERO_DIGEST",
    "sha256",
    "hash_concat",
    "hash_stream",
    "hash_file",
    "is_digest",
    "to_hex",
    "from_hex",
    "parse_digest",
]
