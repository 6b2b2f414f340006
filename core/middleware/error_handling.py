"""
Error handling middleware with security-compliant error sanitization.
Translates workflow errors into HTTP responses without leaking sensitive data.
"""

import logging
import traceback
from typing import Any, Callable
from fastapi import Request, Response, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
import re

from core.exceptions import (
    CandidateNotEligibleForInterview,
    ConcurrentModification,
    DuplicateApplication,
    ForeignKeyViolation,
    InvalidTransition,
    NoInterviewerSelected,
    NotFound,
    PositionNotOpen,
    SessionClosed,
    StoreUnavailable,
    Unauthorized,
    UniqueConstraintViolation,
    ValidationFailed,
    WorkflowError,
)

logger = logging.getLogger(__name__)

# Patterns for sensitive data that should never be logged
SENSITIVE_PATTERNS = [
    re.compile(r'password["\s:=]+[^"\s,}]+', re.IGNORECASE),
    re.compile(r'token["\s:=]+[^"\s,}]+', re.IGNORECASE),
    re.compile(r'secret["\s:=]+[^"\s,}]+', re.IGNORECASE),
    re.compile(r'authorization["\s:]+[^"\s,}]+', re.IGNORECASE),
    re.compile(r'postgres(ql)?(\+\w+)?://\S+', re.IGNORECASE),  # DSN with credentials
    re.compile(r'\b\d{12}\b'),  # National ID
]

WORKFLOW_ERROR_STATUS: dict[type[WorkflowError], int] = {
    NotFound: status.HTTP_404_NOT_FOUND,
    Unauthorized: status.HTTP_403_FORBIDDEN,
    InvalidTransition: status.HTTP_409_CONFLICT,
    DuplicateApplication: status.HTTP_409_CONFLICT,
    UniqueConstraintViolation: status.HTTP_409_CONFLICT,
    ForeignKeyViolation: status.HTTP_409_CONFLICT,
    ConcurrentModification: status.HTTP_409_CONFLICT,
    SessionClosed: status.HTTP_409_CONFLICT,
    ValidationFailed: status.HTTP_422_UNPROCESSABLE_ENTITY,
    NoInterviewerSelected: status.HTTP_422_UNPROCESSABLE_ENTITY,
    CandidateNotEligibleForInterview: status.HTTP_422_UNPROCESSABLE_ENTITY,
    PositionNotOpen: status.HTTP_422_UNPROCESSABLE_ENTITY,
    StoreUnavailable: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def sanitize_error_message(message: str) -> str:
    """
    Remove sensitive information from error messages.

    Args:
        message: Original error message

    Returns:
        Sanitized error message
    """
    sanitized = str(message)
    for pattern in SENSITIVE_PATTERNS:
        sanitized = pattern.sub('[REDACTED]', sanitized)
    return sanitized


def status_for_error(exc: WorkflowError) -> int:
    """HTTP status for a workflow error, walking the class hierarchy."""
    for cls in type(exc).__mro__:
        if cls in WORKFLOW_ERROR_STATUS:
            return WORKFLOW_ERROR_STATUS[cls]
    return status.HTTP_400_BAD_REQUEST


def error_body(code: str, message: str, path: str, method: str, **extra: Any) -> dict[str, Any]:
    body = {
        "error": {
            "code": code,
            "message": message,
            "path": path,
            "method": method,
        }
    }
    body["error"].update(extra)
    return body


def get_safe_error_details(exc: Exception, include_details: bool = False) -> dict[str, Any]:
    """Type and sanitized message of ``exc``; traceback only when requested."""
    details = {
        "type": type(exc).__name__,
        "message": sanitize_error_message(str(exc)),
    }
    if include_details:
        # Only include stack trace in development
        details["traceback"] = traceback.format_exc()
    return details


class ErrorHandlingMiddleware:
    """
    Outermost ASGI middleware turning unhandled exceptions into a sanitized
    500 response with the standard error envelope.
    """

    def __init__(self, app: Callable, debug: bool = False):
        self.app = app
        self.debug = debug

    async def __call__(self, scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        try:
            await self.app(scope, receive, send)
        except Exception as exc:
            response = self._handle_exception(exc, scope)
            await response(scope, receive, send)

    def _handle_exception(self, exc: Exception, scope: dict) -> Response:
        request_path = scope.get("path", "unknown")
        request_method = scope.get("method", "unknown")
        extra: dict[str, Any] = {}

        if isinstance(exc, WorkflowError):
            status_code = status_for_error(exc)
            code = exc.code
            message = sanitize_error_message(exc.message)
        else:
            status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
            code = "INTERNAL_SERVER_ERROR"
            message = "An unexpected error occurred"
            if self.debug:
                extra["details"] = get_safe_error_details(exc, include_details=True)
            logger.error(
                f"Unhandled exception: {request_method} {request_path} - "
                f"{type(exc).__name__}: {sanitize_error_message(str(exc))}",
                exc_info=True,
            )

        headers = dict(scope.get("headers") or [])
        request_id = headers.get(b"x-request-id")
        if request_id:
            extra["request_id"] = request_id.decode()

        return JSONResponse(
            status_code=status_code,
            content=error_body(code, message, request_path, request_method, **extra),
        )


def _format_validation_errors(exc: RequestValidationError) -> list[dict[str, Any]]:
    errors = []
    for error in exc.errors():
        errors.append(
            {
                "field": ".".join(str(loc) for loc in error["loc"]),
                "message": sanitize_error_message(error["msg"]),
                "type": error["type"],
            }
        )
    return errors


def setup_error_handlers(app):
    """
    Set up exception handlers for FastAPI application.

    Args:
        app: FastAPI application instance
    """

    @app.exception_handler(WorkflowError)
    async def workflow_exception_handler(request: Request, exc: WorkflowError):
        """Translate typed workflow errors into their HTTP status."""
        status_code = status_for_error(exc)
        log = logger.error if status_code >= 500 else logger.info
        log(
            f"Workflow error: {request.method} {request.url.path} - "
            f"{exc.code}: {sanitize_error_message(exc.message)}"
        )
        extra = {}
        if isinstance(exc, ValidationFailed):
            extra["field"] = exc.field
        if isinstance(exc, InvalidTransition):
            extra["current"] = exc.current
            extra["requested"] = exc.requested
        return JSONResponse(
            status_code=status_code,
            content=error_body(
                exc.code,
                sanitize_error_message(exc.message),
                str(request.url.path),
                request.method,
                **extra,
            ),
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """Handle HTTP exceptions."""
        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(
                "HTTP_EXCEPTION",
                sanitize_error_message(exc.detail),
                str(request.url.path),
                request.method,
            ),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Handle validation errors."""
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content=error_body(
                "VALIDATION_ERROR",
                "Request validation failed",
                str(request.url.path),
                request.method,
                details=_format_validation_errors(exc),
            ),
        )
