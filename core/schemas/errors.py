"""
Error Taxonomy
File: errors.py

Purpose: Standard error taxonomy across merklefs.
Defines both Pydantic models for structured error communication
and Python exceptions for control flow.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Error Codes (Machine-Readable Constants)
# =============================================================================

class ErrorCodes:
    """Stable machine-readable error codes."""

    # Merkle & Commitment Errors
    INVALID_INDEX = "INVALID_INDEX"
    PROOF_FORMAT_ERROR = "PROOF_FORMAT_ERROR"
    ROOT_MISMATCH = "ROOT_MISMATCH"

    # Storage Errors
    FILE_NOT_FOUND = "FILE_NOT_FOUND"
    STORAGE_ERROR = "STORAGE_ERROR"

    # Transport Errors
    TRANSPORT_ERROR = "TRANSPORT_ERROR"


# =============================================================================
# Pydantic Error Models (Structured Communication)
# =============================================================================

class MerkleFSError(BaseModel):
    """
    Base error model for structured error communication.

    Used for passing errors across the HTTP boundary without exceptions.
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=False,
        validate_assignment=True,
    )

    code: str = Field(
        ...,
        description="Stable machine-readable error code",
        examples=[ErrorCodes.INVALID_INDEX],
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional structured details about the error",
    )
    retryable: bool = Field(
        default=False,
        description="Whether the operation can be retried",
    )


# =============================================================================
# Python Exceptions (Control Flow)
# =============================================================================

class MerkleFSException(Exception):
    """
    Base exception for all merklefs errors.

    Carries structured error information and can be converted
    to/from MerkleFSError models.
    """

    def __init__(
        self,
        message: str,
        code: str = "MERKLEFS_ERROR",
        details: dict[str, Any] | None = None,
        retryable: bool = False,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}
        self.retryable = retryable

    def to_error_model(self) -> MerkleFSError:
        """Convert this exception to a MerkleFSError model."""
        return MerkleFSError(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class InvalidIndexError(MerkleFSException, IndexError):
    """Raised when a proof is requested for an index outside [0, leaf count)."""

    def __init__(
        self,
        index: int,
        leaf_count: int,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        full_details["index"] = index
        full_details["leaf_count"] = leaf_count
        super().__init__(
            message=f"Leaf index {index} out of range for {leaf_count} leaves",
            code=ErrorCodes.INVALID_INDEX,
            details=full_details,
            retryable=False,
        )
        self.index = index
        self.leaf_count = leaf_count


class ProofFormatError(MerkleFSException, ValueError):
    """Raised when a serialized proof is not a whole number of digests."""

    def __init__(
        self,
        message: str,
        size: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if size is not None:
            full_details["size"] = size
        super().__init__(
            message=message,
            code=ErrorCodes.PROOF_FORMAT_ERROR,
            details=full_details,
            retryable=False,
        )
        self.size = size


class VerificationMismatch(MerkleFSException):
    """
    Raised when a recomputed root differs from the trusted root.

    A mismatch is an expected outcome of an integrity check, so verification
    normally reports it as a value; this exception exists for callers that
    want it raised. Both roots are kept so they can be displayed side by side.
    """

    def __init__(
        self,
        expected_root: bytes,
        computed_root: bytes,
        leaf_index: int | None = None,
    ) -> None:
        details: dict[str, Any] = {
            "expected_root": expected_root.hex(),
            "computed_root": computed_root.hex(),
        }
        if leaf_index is not None:
            details["leaf_index"] = leaf_index
        super().__init__(
            message=(
                f"Merkle root mismatch: expected {expected_root.hex()}, "
                f"computed {computed_root.hex()}"
            ),
            code=ErrorCodes.ROOT_MISMATCH,
            details=details,
            retryable=False,
        )
        self.expected_root = expected_root
        self.computed_root = computed_root
        self.leaf_index = leaf_index


class FileNotStoredError(MerkleFSException):
    """Raised when the file store holds nothing for an index."""

    def __init__(self, index: int, kind: str = "file") -> None:
        super().__init__(
            message=f"No {kind} stored for index {index}",
            code=ErrorCodes.FILE_NOT_FOUND,
            details={"index": index, "kind": kind},
            retryable=False,
        )
        self.index = index
        self.kind = kind


class TransportException(MerkleFSException):
    """Raised when talking to a remote merklefs server fails."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if status_code is not None:
            full_details["status_code"] = status_code
        super().__init__(
            message=message,
            code=ErrorCodes.TRANSPORT_ERROR,
            details=full_details,
            retryable=False,
        )
        self.status_code = status_code
