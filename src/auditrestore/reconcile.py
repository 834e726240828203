"""
Reconciliation of snapshot metadata against live metadata.

Decides which subsets of the snapshot are already present on the live
instance and which must be restored, and whether rows must be purged
before re-import.
"""

import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from auditrestore.errors import LiveMetadataUnavailable
from auditrestore.metadata import MetadataRecord, MetadataSet

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReconcileResult:
    """Out-of-sync records in snapshot order, plus the purge decision."""

    out_of_sync: tuple[MetadataRecord, ...]
    skip_purge: bool
    in_sync: tuple[MetadataRecord, ...] = field(default_factory=tuple)

    @property
    def is_empty(self) -> bool:
        return not self.out_of_sync

    def to_dict(self) -> dict[str, Any]:
        return {
            "out_of_sync": [record.raw for record in self.out_of_sync],
            "in_sync": [record.raw for record in self.in_sync],
            "skip_purge": self.skip_purge,
            "timestamp": datetime.now(UTC).isoformat(),
        }


def compute_out_of_sync(
    snapshot_set: MetadataSet,
    live_set: MetadataSet | None,
) -> ReconcileResult:
    """
    Compute which snapshot subsets must be restored

    A snapshot record is in sync only if the live set holds a byte-identical
    line; a matching subset id with a different count or id range is out of
    sync and gets re-imported.

    Args:
        snapshot_set: Metadata stored with the snapshot
        live_set: Metadata fetched from the live instance, or None when the
            fetch failed

    Returns:
        ReconcileResult with the out-of-sync records in snapshot order.
        skip_purge is True when the live instance holds no data, in which
        case every snapshot record is out of sync.

    Raises:
        LiveMetadataUnavailable: If live_set is None
    """
    if live_set is None:
        raise LiveMetadataUnavailable("Live metadata unavailable, cannot reconcile")

    if not live_set:
        logger.info(
            f"Live instance holds no data, all {len(snapshot_set)} snapshot "
            f"subset(s) out of sync, purge not needed"
        )
        return ReconcileResult(out_of_sync=tuple(snapshot_set), skip_purge=True)

    out_of_sync = []
    in_sync = []
    for record in snapshot_set:
        if record in live_set:
            in_sync.append(record)
        else:
            live_record = live_set.get(record.subset_id)
            if live_record is not None:
                logger.debug(
                    f"Subset {record.subset_id} drifted: "
                    f"snapshot={record.raw!r} live={live_record.raw!r}"
                )
            out_of_sync.append(record)

    logger.info(
        f"Reconciled {len(snapshot_set)} subset(s): "
        f"{len(in_sync)} in sync, {len(out_of_sync)} out of sync"
    )
    return ReconcileResult(
        out_of_sync=tuple(out_of_sync),
        skip_purge=False,
        in_sync=tuple(in_sync),
    )
