"""
Metrics middleware for Prometheus.

Records HTTP request metrics for monitoring.
"""

import re
import time
from typing import Callable

from django.http import HttpRequest, HttpResponse

from core.metrics import http_request_duration_seconds, http_requests_total

# Path segments that would explode label cardinality
_PATH_PATTERNS = (
    (re.compile(r"/LF-[0-9A-F-]+", re.IGNORECASE), "/{key}"),
    (re.compile(r"/[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}"), "/{id}"),
    (re.compile(r"/\d+"), "/{id}"),
)


def normalize_endpoint(path: str) -> str:
    """Replace license keys, uuids and numeric ids (Discord ids) in a path."""
    for pattern, replacement in _PATH_PATTERNS:
        path = pattern.sub(replacement, path)
    return path


class MetricsMiddleware:
    """
    Middleware to record HTTP metrics for Prometheus.

    Records:
    - Request count by method, endpoint, status
    - Request duration histogram
    """

    def __init__(self, get_response: Callable):
        """Initialize middleware."""
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        start_time = time.time()
        endpoint = normalize_endpoint(request.path)
        status_code = 500
        try:
            response = self.get_response(request)
            status_code = response.status_code
            return response
        finally:
            http_requests_total.labels(
                method=request.method, endpoint=endpoint, status_code=status_code
            ).inc()
            http_request_duration_seconds.labels(
                method=request.method, endpoint=endpoint
            ).observe(time.time() - start_time)
