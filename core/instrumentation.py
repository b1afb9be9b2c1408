"""
OpenTelemetry instrumentation setup.

This module configures OpenTelemetry for distributed tracing and starts
the Prometheus metrics endpoint.
"""

import logging
import os

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.django import DjangoInstrumentor
from opentelemetry.instrumentation.psycopg2 import Psycopg2Instrumentor
from opentelemetry.instrumentation.redis import RedisInstrumentor
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.trace import Status, StatusCode
from prometheus_client import start_http_server

logger = logging.getLogger(__name__)

__all__ = ["Status", "StatusCode", "get_tracer", "setup_opentelemetry"]


def setup_opentelemetry():
    """
    Configure OpenTelemetry instrumentation.

    Sets up:
    - Distributed tracing (exported via OTLP)
    - Auto-instrumentation for Django, PostgreSQL, Redis
    - Prometheus metrics server, when PROMETHEUS_PORT is set

    Tracing is off unless OTEL_ENABLED is "true"; spans are then no-ops.
    """
    if os.environ.get("OTEL_ENABLED", "false").lower() != "true":
        logger.info("OpenTelemetry disabled, spans will not be exported")
    else:
        resource = Resource.create(
            {
                "service.name": os.environ.get("OTEL_SERVICE_NAME", "license-validation-service"),
                "service.version": os.environ.get("OTEL_SERVICE_VERSION", "1.0.0"),
                "deployment.environment": os.environ.get("ENVIRONMENT", "development"),
            }
        )
        trace_provider = TracerProvider(resource=resource)
        trace.set_tracer_provider(trace_provider)

        otlp_endpoint = os.environ.get("OTEL_EXPORTER_OTLP_ENDPOINT", "http://tempo:4317")
        trace_provider.add_span_processor(
            BatchSpanProcessor(OTLPSpanExporter(endpoint=otlp_endpoint, insecure=True))
        )

        DjangoInstrumentor().instrument()
        Psycopg2Instrumentor().instrument()
        RedisInstrumentor().instrument()
        logger.info("OpenTelemetry instrumentation configured", extra={"endpoint": otlp_endpoint})

    prometheus_port = os.environ.get("PROMETHEUS_PORT")
    if prometheus_port:
        try:
            start_http_server(int(prometheus_port), addr="0.0.0.0")
            logger.info("Prometheus metrics server started on 0.0.0.0:%s", prometheus_port)
        except OSError as e:
            logger.warning("Could not start Prometheus metrics server: %s", e)


def get_tracer(name: str) -> trace.Tracer:
    """
    Get a tracer instance for manual instrumentation.

    Args:
        name: Tracer name (usually module name)

    Returns:
        Tracer instance (the default provider's no-op tracer until configured)
    """
    return trace.get_tracer(name)
