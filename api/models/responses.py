"""
API Response Models

Pydantic models for API response serialization.
"""

from typing import Any

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Response for GET /health endpoint."""

    ok: bool = True
    service: str = "merklefs-api"
    version: str = "v1"


class UploadResponse(BaseModel):
    """Response for POST /upload endpoint."""

    ok: bool = True
    index: int = Field(..., description="Leaf index the file was stored under")
    size: int = Field(..., description="Stored size in bytes")


class RootResponse(BaseModel):
    """Response for GET /root endpoint."""

    ok: bool = True
    root: str = Field(..., description="Hex-encoded Merkle root over stored files")
    file_count: int = Field(..., description="Number of stored files (leaves)")
    depth: int = Field(..., description="Proof length for every leaf")


class ErrorDetail(BaseModel):
    """Detailed error information."""

    code: str = Field(..., description="Error code")
    message: str = Field(..., description="Human-readable error message")
    details: dict[str, Any] = Field(default_factory=dict)


class ErrorResponse(BaseModel):
    """Standard error response."""

    ok: bool = False
    error: ErrorDetail = Field(..., description="Error details")
