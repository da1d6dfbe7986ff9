"""
Hashing Utilities
Digest primitive shared by leaf hashing and Merkle node combination.

This module provides:
- SHA-256 hashing for raw bytes and for files (streamed)
- Ordered combination of two digests
- Hex encoding/decoding for display and for reading roots from users

Wire Notes:
- A digest is exactly DIGEST_SIZE raw bytes, never length-prefixed
- Hex is a presentation detail only
"""
from __future__ import annotations

import hashlib
from pathlib import Path
from typing import BinaryIO


DIGEST_SIZE = 32

# Root of the empty leaf set
ZERO_DIGEST: bytes = bytes(DIGEST_SIZE)

# Read size used when streaming file contents into the hasher
FILE_CHUNK_SIZE = 64 * 1024


def sha256(data: bytes) -> bytes:
    """
    Compute SHA-256 hash of raw bytes.

    Args:
        data: Raw bytes to hash

    Returns:
        32-byte SHA-256 digest

    Example:
        >>> sha256(b"hello").hex()
        '2cf24dba5fb0a30e26e83b2ac5b9e29e1b161e5c1fa7425e73043362938b9824'
    """
    return hashlib.sha256(data).digest()


def hash_concat(left: bytes, right: bytes) -> bytes:
    """
    Hash the concatenation of two digests, in the given order.

    parent = sha256(left + right)

    Args:
        left: Left child digest
        right: Right child digest

    Returns:
        32-byte SHA-256 digest of concatenation
    """
    hasher = hashlib.sha256()
    hasher.update(left)
    hasher.update(right)
    return hasher.digest()


def hash_stream(stream: BinaryIO, chunk_size: int = FILE_CHUNK_SIZE) -> bytes:
    """Hash everything readable from a binary stream."""
    hasher = hashlib.sha256()
    for chunk in iter(lambda: stream.read(chunk_size), b""):
        hasher.update(chunk)
    return hasher.digest()


def hash_file(path: str | Path, chunk_size: int = FILE_CHUNK_SIZE) -> bytes:
    """
    Hash a file's content without loading it fully into memory.

    Args:
        path: Path of a regular file
        chunk_size: Bytes read per iteration

    Returns:
        32-byte SHA-256 digest of the file content

    Raises:
        OSError: If the file cannot be opened or read
    """
    with open(path, "rb") as f:
        return hash_stream(f, chunk_size)


def is_digest(value: object) -> bool:
    """Check that a value is a DIGEST_SIZE bytes object."""
    return isinstance(value, (bytes, bytearray)) and len(value) == DIGEST_SIZE


def to_hex(data: bytes) -> str:
    """
    Convert bytes to a lowercase hexadecimal string (no prefix).

    Example:
        >>> to_hex(bytes.fromhex("deadbeef"))
        'deadbeef'
    """
    return data.hex()


def from_hex(hex_string: str) -> bytes:
    """
    Convert a hexadecimal string to bytes.

    Surrounding whitespace and an optional 0x prefix are accepted, so a root
    pasted from a terminal or piped from another command decodes as-is.

    Raises:
        ValueError: If the string has odd length or invalid hex characters
    """
    hex_content = hex_string.strip()
    if hex_content[:2].lower() == "0x":
        hex_content = hex_content[2:]

    if len(hex_content) % 2 != 0:
        raise ValueError(
            f"Hex string must have even length, got length {len(hex_content)}"
        )

    try:
        return bytes.fromhex(hex_content)
    except ValueError as e:
        raise ValueError(f"Invalid hex characters in string: {e}") from e


def parse_digest(hex_string: str) -> bytes:
    """
    Decode a hex digest (such as a published root) and check its size.

    Raises:
        ValueError: If the value is not valid hex or not DIGEST_SIZE bytes
    """
    digest = from_hex(hex_string)
    if len(digest) != DIGEST_SIZE:
        raise ValueError(
            f"Digest must be {DIGEST_SIZE} bytes, got {len(digest)}"
        )
    return digest


__all__ = [
    "DIGEST_SIZE",
    "ZERO_DIGEST",
    "FILE_CHUNK_SIZE",
    "sha256",
    "hash_concat",
    "hash_stream",
    "hash_file",
    "is_digest",
    "to_hex",
    "from_hex",
    "parse_digest",
]
