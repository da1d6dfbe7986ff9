"""API response models."""

from api.models.responses import (
    HealthResponse,
    UploadResponse,
    RootResponse,
    ErrorDetail,
    ErrorResponse,
)

__all__ = [
    "HealthResponse",
    "UploadResponse",
    "RootResponse",
    "ErrorDetail",
    "ErrorResponse",
]
