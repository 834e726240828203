"""
Incremental restore of an audit-log table from a point-in-time snapshot.

Compares the snapshot's per-month metadata with the live instance, replaces
the schema when it has drifted and re-imports only the months that are
missing or differ.
"""

from .errors import RestoreError
from .executor import RestoreExecutor, RestoreOutcome, run_restore
from .metadata import MetadataRecord, MetadataSet, parse_metadata
from .plan import RestorePlan, build_plan, plan_restore
from .reconcile import ReconcileResult, compute_out_of_sync
from .schema import normalize_schema, schema_changed

__version__ = "1.0.0"

__all__ = [
    "RestoreError",
    "RestoreExecutor",
    "RestoreOutcome",
    "run_restore",
    "MetadataRecord",
    "MetadataSet",
    "parse_metadata",
    "RestorePlan",
    "build_plan",
    "plan_restore",
    "ReconcileResult",
    "compute_out_of_sync",
    "normalize_schema",
    "schema_changed",
]
