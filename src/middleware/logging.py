"""Request logging middleware with correlation ID support."""

import time
import uuid
from collections.abc import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from src.logging.config import get_logger

logger = get_logger(__name__)

CORRELATION_HEADER = "X-Request-ID"


def _get_or_generate_correlation_id(request: Request) -> str:
    """
    Extract or generate a correlation ID for the request.

    API Gateway request ids are reused when the caller sends none, so the
    deployer's log lines can be matched with the gateway's.
    """
    correlation_id = request.headers.get(CORRELATION_HEADER)
    if correlation_id:
        return correlation_id
    aws_event = request.scope.get("aws.event") or {}
    gateway_id = (aws_event.get("requestContext") or {}).get("requestId")
    return gateway_id or str(uuid.uuid4())


def _log_request(
    message: str,
    request: Request,
    correlation_id: str,
    level: str = "info",
    **context,
) -> None:
    getattr(logger, level)(
        message,
        exc_info=context.pop("exc", None),
        extra={
            "correlation_id": correlation_id,
            "context": {
                "method": request.method,
                "path": request.url.path,
                **context,
            },
        },
    )


class LoggingMiddleware(BaseHTTPMiddleware):
    """
    Middleware to log every HTTP request and response.

    - Assigns a correlation ID (X-Request-ID) and stores it on request.state
    - Logs start, completion (status code, response time) and failures
    - Echoes the correlation ID in the response headers
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        correlation_id = _get_or_generate_correlation_id(request)
        request.state.correlation_id = correlation_id

        start_time = time.time()
        _log_request(
            "Request started",
            request,
            correlation_id,
            client_host=request.client.host if request.client else None,
        )

        try:
            response = await call_next(request)
        except Exception as exc:
            elapsed_ms = (time.time() - start_time) * 1000
            _log_request(
                "Request failed with exception",
                request,
                correlation_id,
                level="error",
                exc=exc,
                response_time_ms=round(elapsed_ms, 2),
            )
            raise

        elapsed_ms = (time.time() - start_time) * 1000
        _log_request(
            "Request completed",
            request,
            correlation_id,
            status_code=response.status_code,
            response_time_ms=round(elapsed_ms, 2),
        )

        response.headers[CORRELATION_HEADER] = correlation_id
        return response
