"""
Observability middleware.

Structured request logging with correlation ids. Log records are JSON
(see LicenseValidationService.settings.logging) and carry the active
OpenTelemetry trace id when one exists.
"""

import logging
import time
import uuid
from typing import Callable, Optional

from django.http import HttpRequest, HttpResponse
from opentelemetry import trace
from opentelemetry.trace import format_span_id, format_trace_id

logger = logging.getLogger(__name__)

CORRELATION_HEADER = "X-Correlation-ID"


def _current_trace_id() -> Optional[str]:
    span_context = trace.get_current_span().get_span_context()
    if not span_context.is_valid:
        return None
    return format_trace_id(span_context.trace_id)


class ObservabilityMiddleware:
    """
    Middleware for request observability.

    This middleware:
    1. Reuses the caller's X-Correlation-ID or generates one
    2. Logs request start and completion with duration
    3. Adds correlation and trace ids to response headers
    """

    def __init__(self, get_response: Callable):
        """Initialize middleware."""
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        correlation_id = request.headers.get(CORRELATION_HEADER) or str(uuid.uuid4())
        request.correlation_id = correlation_id  # type: ignore

        trace_id = _current_trace_id()
        if trace_id:
            request.trace_id = trace_id  # type: ignore

        start_time = time.time()
        logger.info(
            "Request started",
            extra={
                "correlation_id": correlation_id,
                "trace_id": trace_id,
                "method": request.method,
                "path": request.path,
                "remote_addr": request.META.get("REMOTE_ADDR"),
                "user_agent": request.META.get("HTTP_USER_AGENT", ""),
            },
        )

        try:
            response = self.get_response(request)
        except Exception as e:
            logger.error(
                "Request failed",
                extra={
                    "correlation_id": correlation_id,
                    "method": request.method,
                    "path": request.path,
                    "error_type": type(e).__name__,
                    "duration_ms": round((time.time() - start_time) * 1000, 2),
                },
                exc_info=True,
            )
            raise

        duration = time.time() - start_time
        self._log_response(request, response, correlation_id, trace_id, duration)

        response[CORRELATION_HEADER] = correlation_id
        response["X-Request-Duration"] = f"{duration:.3f}"
        if trace_id:
            response["X-Trace-ID"] = trace_id
        return response

    def _log_response(self, request, response, correlation_id, trace_id, duration):
        log_extra = {
            "correlation_id": correlation_id,
            "trace_id": trace_id,
            "method": request.method,
            "path": request.path,
            "status_code": response.status_code,
            "duration_ms": round(duration * 1000, 2),
        }
        span_context = trace.get_current_span().get_span_context()
        if span_context.is_valid:
            log_extra["span_id"] = format_span_id(span_context.span_id)

        if response.status_code >= 500:
            logger.error("Request completed with server error", extra=log_extra)
        elif response.status_code >= 400:
            logger.warning("Request completed with client error", extra=log_extra)
        else:
            logger.info("Request completed successfully", extra=log_extra)
