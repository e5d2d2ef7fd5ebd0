"""
OpenTelemetry tracing setup.

Services never reach for a global tracer themselves: routes obtain one through
the ``get_tracer`` dependency and hand it to the service constructor, so tests
can swap in a tracer backed by an in-memory exporter.
"""

import logging
from enum import Enum
from typing import Any, Mapping, Optional

from opentelemetry import trace
from opentelemetry.sdk.resources import SERVICE_NAME, SERVICE_VERSION, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import ConsoleSpanExporter, SimpleSpanProcessor
from opentelemetry.trace import Span, Status, StatusCode

from app.core.config import OTEL_CONSOLE_EXPORT, OTEL_ENABLED, OTEL_SERVICE_NAME

logger = logging.getLogger(__name__)

MAX_ATTRIBUTE_LENGTH = 256

_initialized = False


def configure_tracing(
    service_name: str = OTEL_SERVICE_NAME,
    enabled: bool = OTEL_ENABLED,
    console_export: bool = OTEL_CONSOLE_EXPORT,
) -> None:
    """
    Install the global TracerProvider.

    Args:
        service_name: Value of the ``service.name`` resource attribute.
        enabled: When False nothing is installed and the API no-op tracer is used.
        console_export: Print finished spans to stdout (development).
    """
    global _initialized

    if _initialized:
        logger.debug("Tracing already initialized, skipping")
        return

    if not enabled:
        logger.info("Tracing disabled via settings")
        return

    resource = Resource.create({SERVICE_NAME: service_name, SERVICE_VERSION: "1.0.0"})
    provider = TracerProvider(resource=resource)
    if console_export:
        provider.add_span_processor(SimpleSpanProcessor(ConsoleSpanExporter()))

    trace.set_tracer_provider(provider)
    _initialized = True
    logger.info(
        "Tracing initialized",
        extra={"service_name": service_name, "console_export": console_export},
    )


def get_tracer() -> trace.Tracer:
    """FastAPI dependency returning the service tracer."""
    return trace.get_tracer(OTEL_SERVICE_NAME)


def set_span_attributes(span: Span, attributes: Mapping[str, Any]) -> None:
    """
    Copy scalar attributes onto a span.

    None values are skipped, UUIDs/enums/dates become strings and long strings
    are truncated to ``MAX_ATTRIBUTE_LENGTH``.
    """
    if not span.is_recording():
        return
    for key, value in attributes.items():
        if value is None:
            continue
        if isinstance(value, Enum):
            value = value.value
        elif not isinstance(value, (bool, int, float, str)):
            value = str(value)
        if isinstance(value, str) and len(value) > MAX_ATTRIBUTE_LENGTH:
            value = value[:MAX_ATTRIBUTE_LENGTH]
        span.set_attribute(key, value)


def record_exception(span: Span, exception: Exception, attributes: Optional[dict] = None) -> None:
    if span.is_recording():
        span.record_exception(exception, attributes=attributes)
        span.set_status(Status(StatusCode.ERROR, str(exception)))
