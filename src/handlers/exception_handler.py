"""Global exception handlers for consistent error responses."""

from typing import Any

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from src.exceptions import DeployerError
from src.logging.config import get_logger

logger = get_logger(__name__)


def create_error_response(
    error_code: str,
    message: str,
    status_code: int,
    details: dict[str, Any] | None = None,
    correlation_id: str | None = None,
) -> JSONResponse:
    """
    Create a standardized error response.

    Args:
        error_code: Machine-readable error code
        message: Human-readable error message
        status_code: HTTP status code
        details: Additional error details
        correlation_id: Request correlation ID for tracing

    Returns:
        JSONResponse with error information
    """
    content = {
        "status": "error",
        "error": {
            "error_code": error_code,
            "message": message,
            "details": details or {},
        },
    }

    if correlation_id:
        content["correlation_id"] = correlation_id

    return JSONResponse(status_code=status_code, content=content)


async def deployer_exception_handler(
    request: Request, exc: DeployerError
) -> JSONResponse:
    """
    Handle a DeployerError raised outside the deployment service boundary.

    Args:
        request: FastAPI request
        exc: DeployerError instance

    Returns:
        JSONResponse with error details
    """
    correlation_id = getattr(request.state, "correlation_id", None)
    return create_error_response(
        error_code=exc.error_code,
        message=exc.message,
        status_code=exc.status_code,
        details=exc.details,
        correlation_id=correlation_id,
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """
    Handle payload validation errors.

    Each failing field is listed; the message summarises the first one.

    Args:
        request: FastAPI request
        exc: RequestValidationError from Pydantic

    Returns:
        JSONResponse with validation error details
    """
    correlation_id = getattr(request.state, "correlation_id", None)

    details: dict[str, Any] = {"validation_errors": []}
    error_messages = []

    for error in exc.errors():
        field_parts = [str(loc) for loc in error["loc"] if loc != "body"]
        field = ".".join(field_parts) if field_parts else "request"

        msg = error["msg"]
        error_type = error["type"]
        if error_type == "missing":
            msg = "Field is required"
        elif error_type == "value_error":
            msg = f"Invalid value: {msg}"

        details["validation_errors"].append(
            {"field": field, "message": msg, "type": error_type}
        )
        error_messages.append(f"{field}: {msg}")

    summary = error_messages[0] if error_messages else "Invalid request data"
    if len(error_messages) > 1:
        summary += f" (and {len(error_messages) - 1} more errors)"

    return create_error_response(
        error_code="VALIDATION_ERROR",
        message=summary,
        status_code=status.HTTP_400_BAD_REQUEST,
        details=details,
        correlation_id=correlation_id,
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Handle unexpected exceptions.

    Logs the full traceback and returns a generic 500.

    Args:
        request: FastAPI request
        exc: Any unhandled exception

    Returns:
        JSONResponse with generic error message
    """
    correlation_id = getattr(request.state, "correlation_id", None)

    logger.error(
        f"Unhandled exception: {type(exc).__name__}: {str(exc)}",
        exc_info=exc,
        extra={
            "correlation_id": correlation_id,
            "context": {
                "exception_type": type(exc).__name__,
                "method": request.method,
                "path": request.url.path,
            },
        },
    )

    return create_error_response(
        error_code="INTERNAL_ERROR",
        message="An internal error occurred. Check the deployer logs with the correlation ID.",
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        details={},
        correlation_id=correlation_id,
    )
