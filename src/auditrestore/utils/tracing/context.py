"""
Context managers and utilities for span management.

Lets restore steps open spans and attach attributes/events to the current
span without passing span references through the executor.
"""

from contextlib import contextmanager

from opentelemetry import trace

from .tracer import get_tracer


@contextmanager
def trace_operation(
    operation_name: str,
    kind: trace.SpanKind = trace.SpanKind.INTERNAL,
    **attributes
):
    """
    Context manager for tracing one restore step.

    Creates a span, adds attributes, records any exception on the span
    and re-raises it.

    Args:
        operation_name: Name of the step being traced
        kind: Span kind (INTERNAL, CLIENT, SERVER, etc.)
        **attributes: Custom attributes to add to the span

    Yields:
        Span instance for adding custom events/attributes

    Example:
        >>> with trace_operation("restore_subset", subset="2024-01") as span:
        ...     remote.import_staged_artifact()
        ...     span.set_attribute("subset.status", "RESTORED")
    """
    tracer = get_tracer()

    with tracer.start_as_current_span(operation_name, kind=kind) as span:
        # Attribute values are stringified for exporter compatibility
        for key, value in attributes.items():
            span.set_attribute(key, str(value))

        try:
            yield span
        except Exception as e:
            span.set_attribute("error", True)
            span.set_attribute("error.type", type(e).__name__)
            span.set_attribute("error.message", str(e))
            span.record_exception(e)
            raise


def add_span_attributes(**attributes):
    """
    Add attributes to the current span.

    Does nothing when no span is recording.

    Args:
        **attributes: Attributes to add to current span

    Example:
        >>> with trace_operation("restore_subset"):
        ...     add_span_attributes(**{"subset.status": "RESTORED"})
    """
    current_span = trace.get_current_span()
    if current_span.is_recording():
        for key, value in attributes.items():
            current_span.set_attribute(key, str(value))


def add_span_event(name: str, **attributes):
    """
    Add an event to the current span.

    Events mark discrete moments inside a step, such as a best-effort
    purge that failed while the subset import still went ahead.

    Args:
        name: Event name
        **attributes: Event attributes

    Example:
        >>> with trace_operation("restore_subset", subset="2024-03"):
        ...     add_span_event("purge_failed", error="Lock wait timeout exceeded")
    """
    current_span = trace.get_current_span()
    if current_span.is_recording():
        attrs = {k: str(v) for k, v in attributes.items()}
        current_span.add_event(name, attributes=attrs)
