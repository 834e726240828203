"""
Tracer initialization for OpenTelemetry.

Until initialize_tracing() is called the global no-op provider is used,
so spans cost nothing in tests and in runs without an exporter.
"""

import logging
import os

from opentelemetry import trace
from opentelemetry.sdk.resources import SERVICE_NAME, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter

logger = logging.getLogger(__name__)

TRACER_NAME = "auditrestore"

_provider: TracerProvider | None = None


def initialize_tracing(
    service_name: str = "audit-restore",
    otlp_endpoint: str | None = None,
    console_export: bool = False,
) -> trace.Tracer:
    """
    Initialize distributed tracing with OpenTelemetry.

    Args:
        service_name: Name of the service for identification
        otlp_endpoint: OTLP collector endpoint (falls back to OTLP_ENDPOINT)
        console_export: If True, also export spans to the console

    Returns:
        Configured tracer instance
    """
    global _provider

    if _provider is not None:
        logger.warning("Tracing already initialized, returning existing tracer")
        return get_tracer()

    provider = TracerProvider(resource=Resource(attributes={SERVICE_NAME: service_name}))
    exporters = []

    otlp_endpoint = otlp_endpoint or os.getenv("OTLP_ENDPOINT")
    if otlp_endpoint:
        from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter

        provider.add_span_processor(
            BatchSpanProcessor(OTLPSpanExporter(endpoint=otlp_endpoint, insecure=True))
        )
        exporters.append("OTLP")

    if console_export or os.getenv("TRACE_CONSOLE", "").lower() == "true":
        provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter()))
        exporters.append("Console")

    trace.set_tracer_provider(provider)
    _provider = provider

    logger.info(
        f"Tracing initialized: {service_name} "
        f"(exporters: {', '.join(exporters) or 'none'})"
    )
    return get_tracer()


def get_tracer() -> trace.Tracer:
    """
    Get the restore tracer from the global provider.

    Returns:
        Tracer instance; a no-op tracer until initialize_tracing() runs

    Example:
        >>> tracer = get_tracer()
        >>> with tracer.start_as_current_span("fetch_live_metadata"):
        ...     remote.fetch_live_metadata()
    """
    return trace.get_tracer(TRACER_NAME)


def shutdown_tracing() -> None:
    """
    Flush pending spans and shut the provider down.

    Safe to call when tracing was never initialized. Errors during
    shutdown are logged, not raised.
    """
    global _provider

    if _provider is None:
        return
    try:
        _provider.shutdown()
        logger.info("Tracing shutdown complete")
    except Exception as e:
        logger.error(f"Error during tracing shutdown: {e}")
    finally:
        _provider = None
