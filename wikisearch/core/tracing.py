"""
wikisearch - OpenTelemetry Tracing

The API enables tracing at startup when ``tracing_enabled`` is set. Until
then the global provider is OpenTelemetry's no-op one, so the query core
opens its spans unconditionally.

Span attributes use the ``query.`` namespace: ``query.operator``,
``query.term_count`` and ``query.result_count``.
"""

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from opentelemetry import trace
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import ConsoleSpanExporter, SimpleSpanProcessor

from wikisearch import __version__

SERVICE_NAME = "wikisearch"
ATTRIBUTE_PREFIX = "query."

_configured: bool = False


def configure_tracing(
    service_name: str = SERVICE_NAME,
    console_export: bool = True,
    version: str = __version__,
) -> None:
    """Install the SDK tracer provider once per process.

    Args:
        service_name: ``service.name`` resource attribute
        console_export: Print finished spans to stdout (development only)
        version: ``service.version`` resource attribute
    """
    global _configured

    if _configured:
        return

    provider = TracerProvider(
        resource=Resource.create({"service.name": service_name, "service.version": version})
    )
    if console_export:
        provider.add_span_processor(SimpleSpanProcessor(ConsoleSpanExporter()))

    trace.set_tracer_provider(provider)
    _configured = True


def get_tracer(name: str) -> Any:
    """Return a tracer; a proxy to the no-op provider before configuration."""
    return trace.get_tracer(name)


@contextmanager
def query_span(tracer: Any, name: str, **attributes: Any) -> Iterator[Any]:
    """Open a span with ``query.``-prefixed attributes.

    Example: ``with query_span(tracer, "query_chain.fold", operator="and")``
    sets ``query.operator`` on the span.
    """
    with tracer.start_as_current_span(name) as span:
        for key, value in attributes.items():
            span.set_attribute(ATTRIBUTE_PREFIX + key, value)
        yield span
