"""
Metrics for audit-log restore runs.

Tracks run outcomes, per-subset results, purge failures and schema
replacements so a restore that silently skipped subsets shows up on a
dashboard.
"""

import logging
import time

from prometheus_client import REGISTRY, CollectorRegistry, Counter, Gauge, Histogram

logger = logging.getLogger(__name__)


class RestoreMetrics:
    """
    Prometheus metrics for restore runs

    Args:
        registry: Custom Prometheus registry (default: global REGISTRY)
    """

    def __init__(self, registry: CollectorRegistry | None = None):
        self.registry = registry or REGISTRY

        self.restore_runs_total = Counter(
            "audit_restore_runs_total",
            "Total number of restore runs",
            ["table_name", "status"],
            registry=self.registry,
        )

        self.restore_duration_seconds = Histogram(
            "audit_restore_duration_seconds",
            "Duration of restore runs in seconds",
            ["table_name"],
            buckets=(1, 5, 10, 30, 60, 120, 300, 600, 1800, 3600, 7200),
            registry=self.registry,
        )

        self.restore_last_run_timestamp = Gauge(
            "audit_restore_last_run_timestamp",
            "Timestamp of last restore run",
            ["table_name"],
            registry=self.registry,
        )

        self.subsets_total = Counter(
            "audit_restore_subsets_total",
            "Subsets processed by outcome",
            ["table_name", "outcome"],
            registry=self.registry,
        )

        self.subsets_out_of_sync = Gauge(
            "audit_restore_subsets_out_of_sync",
            "Subsets found out of sync in the last run",
            ["table_name"],
            registry=self.registry,
        )

        self.purge_failures_total = Counter(
            "audit_restore_purge_failures_total",
            "Purges that failed before an import",
            ["table_name"],
            registry=self.registry,
        )

        self.schema_replacements_total = Counter(
            "audit_restore_schema_replacements_total",
            "Schema replacements performed",
            ["table_name", "status"],
            registry=self.registry,
        )

    def record_run(self, table_name: str, status: str, duration: float) -> None:
        """
        Record a finished restore run

        Args:
            table_name: Table restored
            status: Report status (SUCCESS, PARTIAL, NOTHING_TO_DO, ABORTED)
            duration: Duration in seconds
        """
        self.restore_runs_total.labels(table_name=table_name, status=status).inc()
        self.restore_duration_seconds.labels(table_name=table_name).observe(duration)
        self.restore_last_run_timestamp.labels(table_name=table_name).set(time.time())

        logger.debug(
            f"Recorded restore run: table={table_name}, status={status}, "
            f"duration={duration:.2f}s"
        )

    def record_out_of_sync(self, table_name: str, count: int) -> None:
        self.subsets_out_of_sync.labels(table_name=table_name).set(count)

    def record_subset(self, table_name: str, outcome: str) -> None:
        self.subsets_total.labels(table_name=table_name, outcome=outcome).inc()

    def record_purge_failure(self, table_name: str) -> None:
        self.purge_failures_total.labels(table_name=table_name).inc()

    def record_schema_replacement(self, table_name: str, success: bool) -> None:
        status = "success" if success else "failed"
        self.schema_replacements_total.labels(table_name=table_name, status=status).inc()
