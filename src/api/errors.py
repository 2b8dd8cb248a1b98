"""Structured error response models for consistent API error handling."""

from typing import Any

import structlog
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from src.core.errors import (
    CatalogError,
    ChangeSubmissionError,
    ConflictError,
    DecodeError,
    NoOpError,
    NotFoundError,
    ValidationError,
)

logger = structlog.get_logger(__name__)

STATUS_BY_ERROR: dict[type[CatalogError], int] = {
    ValidationError: status.HTTP_422_UNPROCESSABLE_ENTITY,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    ConflictError: status.HTTP_409_CONFLICT,
    NoOpError: status.HTTP_409_CONFLICT,
    DecodeError: status.HTTP_502_BAD_GATEWAY,
    ChangeSubmissionError: status.HTTP_502_BAD_GATEWAY,
}


class ErrorResponse(BaseModel):
    """Standardized error response schema."""

    error: bool = True
    code: str
    message: str
    retry_after: int | None = None
    details: dict[str, Any] | None = None


def create_error_response(
    code: str, message: str, retry_after: int | None = None, details: dict[str, Any] | None = None
) -> ErrorResponse:
    """Create standardized error response."""
    return ErrorResponse(code=code, message=message, retry_after=retry_after, details=details)


def status_for(error: CatalogError) -> int:
    for error_type in type(error).__mro__:
        if error_type in STATUS_BY_ERROR:
            return STATUS_BY_ERROR[error_type]
    return status.HTTP_400_BAD_REQUEST


async def catalog_error_handler(request: Request, exc: CatalogError) -> JSONResponse:
    status_code = status_for(exc)
    logger.warning(
        "catalog_request_rejected",
        path=request.url.path,
        code=exc.code,
        status=status_code,
        error=exc.message,
    )
    body = create_error_response(code=exc.code, message=exc.message, details=exc.details or None)
    return JSONResponse(status_code=status_code, content=body.model_dump())


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(CatalogError, catalog_error_handler)
