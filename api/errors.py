"""
API Error Handling

Standardized error handling for the API.
"""

from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse

from api.models.responses import ErrorResponse, ErrorDetail
from core.schemas.errors import ErrorCodes, MerkleFSException


class APIError(Exception):
    """Base API error with structured response."""

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = 400,
        details: dict[str, Any] | None = None,
    ):
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        return ErrorResponse(
            ok=False,
            error=ErrorDetail(
                code=self.code,
                message=self.message,
                details=self.details,
            ),
        )

    @classmethod
    def from_exception(cls, exc: MerkleFSException, status_code: int) -> "APIError":
        error = exc.to_error_model()
        return cls(
            code=error.code,
            message=error.message,
            status_code=status_code,
            details=error.details,
        )


class InvalidFilenameError(APIError):
    """Uploaded filename is not a leaf index."""

    def __init__(self, filename: str | None):
        super().__init__(
            code="INVALID_FILENAME",
            message=(
                "Invalid filename. Must be an index of the file, "
                f"but got: {filename}"
            ),
            status_code=400,
            details={"filename": filename},
        )


# HTTP status per core error code
STATUS_BY_CODE = {
    ErrorCodes.FILE_NOT_FOUND: 404,
    ErrorCodes.INVALID_INDEX: 404,
    ErrorCodes.STORAGE_ERROR: 409,
    ErrorCodes.PROOF_FORMAT_ERROR: 500,
}


async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
    """Handle APIError exceptions."""
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_response().model_dump(),
    )


async def core_error_handler(request: Request, exc: MerkleFSException) -> JSONResponse:
    """Map core exceptions onto the API error envelope."""
    status_code = STATUS_BY_CODE.get(exc.code, 500)
    return await api_error_handler(request, APIError.from_exception(exc, status_code))


async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions."""
    return JSONResponse(
        status_code=500,
        content=ErrorResponse(
            ok=False,
            error=ErrorDetail(
                code="INTERNAL_ERROR",
                message="An unexpected error occurred",
                details={"type": type(exc).__name__},
            ),
        ).model_dump(),
    )
