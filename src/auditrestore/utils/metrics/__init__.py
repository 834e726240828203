"""
Prometheus metrics for restore runs

Usage:
    from auditrestore.utils.metrics import MetricsPublisher, RestoreMetrics

    MetricsPublisher(port=9091).start()
    metrics = RestoreMetrics()
    metrics.record_run("audit_log", status="SUCCESS", duration=42.0)
"""

from .publisher import MetricsPublisher
from .restore import RestoreMetrics

__all__ = [
    "MetricsPublisher",
    "RestoreMetrics",
]
