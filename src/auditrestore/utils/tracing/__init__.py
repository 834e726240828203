"""
Distributed tracing using OpenTelemetry.

Each remote step of a restore (schema probe, metadata fetch, purge,
transfer, import) runs inside a span so slow or failing steps are visible
per subset.
"""

from .context import add_span_attributes, add_span_event, trace_operation
from .decorators import trace_function
from .tracer import get_tracer, initialize_tracing, shutdown_tracing

__all__ = [
    "initialize_tracing",
    "get_tracer",
    "shutdown_tracing",
    "trace_operation",
    "trace_function",
    "add_span_attributes",
    "add_span_event",
]
