"""
Restore planning.

A RestorePlan fixes the order of a restore: the schema replacement (if
any) comes first, then one purge-then-import per out-of-sync subset in
snapshot order. Plans are derived fresh on every run and never persisted.
"""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any

from auditrestore.errors import (
    LiveMetadataUnavailable,
    NoSnapshotData,
    RestoreError,
    ToolUnavailable,
)
from auditrestore.metadata import MetadataRecord, MetadataSet, parse_metadata
from auditrestore.reconcile import ReconcileResult, compute_out_of_sync
from auditrestore.remote import RemoteCollaborator
from auditrestore.schema import schema_changed
from auditrestore.snapshot import SnapshotStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RestorePlan:
    """Ordered restore operations for one run."""

    schema_replace_needed: bool
    skip_purge: bool
    subsets: tuple[MetadataRecord, ...]

    @property
    def is_noop(self) -> bool:
        return not self.schema_replace_needed and not self.subsets

    def steps(self) -> list[str]:
        """
        Human-readable list of the operations in execution order

        Returns:
            One string per remote operation
        """
        steps = []
        if self.schema_replace_needed:
            steps.append("replace schema (drop table, recreate from snapshot)")
        for record in self.subsets:
            if not self.skip_purge:
                steps.append(f"purge {record.subset_id} ({record.raw})")
            steps.append(f"import {record.subset_id}")
        return steps

    def to_dict(self) -> dict[str, Any]:
        return {
            "schema_replace_needed": self.schema_replace_needed,
            "skip_purge": self.skip_purge,
            "subsets": [record.to_dict() for record in self.subsets],
            "steps": self.steps(),
            "timestamp": datetime.now(UTC).isoformat(),
        }


def build_plan(schema_replace_needed: bool, reconciled: ReconcileResult) -> RestorePlan:
    """
    Build the plan from the schema decision and the reconciliation result

    Args:
        schema_replace_needed: Whether the schema is replaced first
        reconciled: Output of compute_out_of_sync

    Returns:
        RestorePlan with subsets in snapshot order
    """
    return RestorePlan(
        schema_replace_needed=schema_replace_needed,
        skip_purge=reconciled.skip_purge,
        subsets=tuple(reconciled.out_of_sync),
    )


def plan_restore(remote: RemoteCollaborator, snapshot: SnapshotStore) -> RestorePlan:
    """
    Compute the plan a restore would execute, without changing anything

    Runs the read-only part of a restore: schema probe, snapshot metadata,
    live metadata and reconciliation. When the schema would be replaced
    the live table is about to be recreated empty, so the plan reconciles
    against an empty live set.

    Args:
        remote: Live instance
        snapshot: Snapshot to restore from

    Returns:
        RestorePlan

    Raises:
        ToolUnavailable: If the export tool is missing on the instance
        NoSnapshotData: If the snapshot holds no metadata
        LiveMetadataUnavailable: If the live metadata query failed
    """
    try:
        live_schema = remote.fetch_live_schema()
    except ToolUnavailable:
        raise
    except RestoreError as e:
        logger.warning(f"Live schema fetch failed: {e}")
        live_schema = None

    snapshot_text = snapshot.read_metadata()
    snapshot_set = parse_metadata(snapshot_text)
    if not snapshot_set:
        raise NoSnapshotData("Snapshot holds no metadata")

    replace = schema_changed(live_schema, snapshot.read_schema())

    if replace:
        live_set = MetadataSet()
    else:
        try:
            live_set = parse_metadata(remote.fetch_live_metadata())
        except ToolUnavailable:
            raise
        except RestoreError as e:
            raise LiveMetadataUnavailable(f"Live metadata fetch failed: {e}") from e

    plan = build_plan(replace, compute_out_of_sync(snapshot_set, live_set))
    logger.info(
        f"Planned restore: schema_replace={plan.schema_replace_needed}, "
        f"skip_purge={plan.skip_purge}, subsets={len(plan.subsets)}"
    )
    return plan
