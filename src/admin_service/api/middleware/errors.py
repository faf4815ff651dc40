"""
Error handling for the FastAPI application.

This module provides:
- Exception handlers for all AppError subclasses
- Fallbacks for storage errors that escaped a resource service
- Structured error responses with error codes and the request ID
- Validation error handling with field-level details
- Production-safe messages for 5xx errors

Usage:
    from fastapi import FastAPI
    from admin_service.api.middleware.errors import register_error_handlers

    app = FastAPI()
    register_error_handlers(app)
"""

import logging
import uuid
from typing import Any, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from admin_service.api.schemas.errors import ErrorCode, ErrorDetail, FieldError
from admin_service.config.settings import get_settings
from admin_service.domain import messages
from admin_service.domain.exceptions import AppError
from admin_service.infrastructure.cache.invalidation import resource_family
from admin_service.infrastructure.database.store import RecordNotFound, is_unique_violation


logger = logging.getLogger(__name__)


def _get_request_id(request: Request) -> str:
    """Request ID set by ``RequestIDMiddleware``, the header, or a fresh one."""
    if hasattr(request.state, "request_id"):
        return request.state.request_id

    request_id = request.headers.get("x-request-id")
    if request_id:
        return request_id

    return str(uuid.uuid4())


def _create_error_response(
    error_code: ErrorCode,
    message: str,
    request_id: str,
    status_code: int,
    details: Optional[list[FieldError]] = None,
    context: Optional[dict[str, Any]] = None,
    is_production: bool = False,
) -> JSONResponse:
    """
    Create standardized error response.

    Example Response:
        ```json
        {
            "error": {
                "code": "NOT_FOUND",
                "message": "A igreja não foi encontrada.",
                "context": {"resource": "church", "id": "3f0c..."}
            },
            "request_id": "550e8400-e29b-41d4-a716-446655440000"
        }
        ```
    """
    if is_production and status_code >= 500:
        message = "An internal error occurred. Please try again later."
        context = None

    error_detail = ErrorDetail(
        code=error_code,
        message=message,
        details=details,
        context=context,
    )

    return JSONResponse(
        status_code=status_code,
        content={
            "error": error_detail.model_dump(mode="json", exclude_none=True),
            "request_id": request_id,
        },
    )


def _log_error(request: Request, error: Exception, status_code: int, request_id: str) -> None:
    log_context = {
        "request_id": request_id,
        "path": request.url.path,
        "method": request.method,
        "status_code": status_code,
        "error_type": type(error).__name__,
    }

    if request.query_params:
        log_context["query_params"] = dict(request.query_params)

    if status_code >= 500:
        logger.error(f"Server error: {error}", extra=log_context, exc_info=True)
    else:
        logger.info(f"Client error: {error}", extra=log_context)


def register_error_handlers(app: FastAPI) -> None:
    """
    Register all error handlers for the FastAPI application.

    Example:
        >>> app = FastAPI()
        >>> register_error_handlers(app)
    """
    settings = get_settings()

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
        request_id = _get_request_id(request)
        _log_error(request, exc, exc.status_code, request_id)

        return _create_error_response(
            error_code=exc.error_code,
            message=exc.message,
            request_id=request_id,
            status_code=exc.status_code,
            context=exc.details or None,
            is_production=settings.is_production,
        )

    @app.exception_handler(RecordNotFound)
    async def record_not_found_handler(request: Request, exc: RecordNotFound) -> JSONResponse:
        """Single-row write on a missing row that no service translated."""
        request_id = _get_request_id(request)
        resource = resource_family(request.url.path) or ""
        _log_error(request, exc, status.HTTP_404_NOT_FOUND, request_id)

        return _create_error_response(
            error_code=ErrorCode.NOT_FOUND,
            message=messages.not_found(resource),
            request_id=request_id,
            status_code=status.HTTP_404_NOT_FOUND,
            context={"resource": resource},
        )

    @app.exception_handler(IntegrityError)
    async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
        """Unique violations are conflicts; other constraint failures are invalid input."""
        request_id = _get_request_id(request)
        resource = resource_family(request.url.path) or ""

        if is_unique_violation(exc):
            error_code, message, status_code = (
                ErrorCode.DUPLICATE_RESOURCE,
                messages.conflict(resource),
                status.HTTP_409_CONFLICT,
            )
        else:
            error_code, message, status_code = (
                ErrorCode.VALIDATION_ERROR,
                messages.invalid(resource),
                status.HTTP_422_UNPROCESSABLE_ENTITY,
            )
        _log_error(request, exc, status_code, request_id)

        return _create_error_response(
            error_code=error_code,
            message=message,
            request_id=request_id,
            status_code=status_code,
            context={"resource": resource},
        )

    @app.exception_handler(SQLAlchemyError)
    async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
        request_id = _get_request_id(request)
        _log_error(request, exc, status.HTTP_503_SERVICE_UNAVAILABLE, request_id)

        return _create_error_response(
            error_code=ErrorCode.DATABASE_ERROR,
            message="Database operation failed",
            request_id=request_id,
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            is_production=settings.is_production,
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        """Convert FastAPI request validation errors to field-level errors."""
        request_id = _get_request_id(request)
        error_detail = ErrorDetail.from_validation_error(exc.errors())

        logger.info(
            f"Validation error: {len(error_detail.details or [])} field(s) failed validation",
            extra={
                "request_id": request_id,
                "path": request.url.path,
                "method": request.method,
            },
        )

        return _create_error_response(
            error_code=ErrorCode.VALIDATION_ERROR,
            message=error_detail.message,
            request_id=request_id,
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            details=error_detail.details,
        )

    @app.exception_handler(PydanticValidationError)
    async def pydantic_validation_error_handler(
        request: Request,
        exc: PydanticValidationError,
    ) -> JSONResponse:
        """Pydantic validation errors raised outside the request body."""
        request_id = _get_request_id(request)
        error_detail = ErrorDetail.from_validation_error(exc.errors())

        return _create_error_response(
            error_code=error_detail.code,
            message=error_detail.message,
            request_id=request_id,
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            details=error_detail.details,
        )

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        request_id = _get_request_id(request)
        _log_error(request, exc, status.HTTP_500_INTERNAL_SERVER_ERROR, request_id)

        error_message = "An unexpected error occurred"
        context = None
        if not settings.is_production:
            error_message = f"An unexpected error occurred: {exc}"
            context = {
                "exception_type": type(exc).__name__,
                "exception_message": str(exc),
            }

        return _create_error_response(
            error_code=ErrorCode.INTERNAL_ERROR,
            message=error_message,
            request_id=request_id,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            context=context,
            is_production=settings.is_production,
        )
