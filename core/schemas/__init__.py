"""
Schemas
File: __init__.py

Purpose: Export the error taxonomy shared by the core, the API and the CLI.
"""

from .errors import (
    ErrorCodes,
    MerkleFSError,
    MerkleFSException,
    InvalidIndexError,
    ProofFormatError,
    VerificationMismatch,
    FileNotStoredError,
    TransportException,
)

__all__ = [
    "ErrorCodes",
    "MerkleFSError",
    "MerkleFSException",
    "InvalidIndexError",
    "ProofFormatError",
    "VerificationMismatch",
    "FileNotStoredError",
    "TransportException",
]
