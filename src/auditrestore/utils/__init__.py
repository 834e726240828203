"""
Utility modules for audit-restore

Provides:
- logging: console/file/JSON logging setup and ContextLogger
- metrics: Prometheus restore metrics
- tracing: OpenTelemetry spans around restore steps
"""

__all__ = ["logging", "metrics", "tracing"]
