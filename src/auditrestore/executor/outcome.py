"""
Result types of a restore run.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any


class RestoreState(str, Enum):
    """States of the restore state machine, in order."""

    INIT = "INIT"
    SCHEMA_CHECK = "SCHEMA_CHECK"
    SCHEMA_RESTORE = "SCHEMA_RESTORE"
    META_RECONCILE = "META_RECONCILE"
    PER_SUBSET_RESTORE = "PER_SUBSET_RESTORE"
    DONE = "DONE"


class SubsetStatus(str, Enum):
    RESTORED = "RESTORED"
    SKIPPED_MISSING_ARTIFACT = "SKIPPED_MISSING_ARTIFACT"
    FAILED = "FAILED"


@dataclass
class SubsetOutcome:
    """What happened to one out-of-sync subset."""

    subset_id: str
    raw: str
    status: SubsetStatus
    purge_attempted: bool = False
    purge_failed: bool = False
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "subset_id": self.subset_id,
            "raw": self.raw,
            "status": self.status.value,
            "purge_attempted": self.purge_attempted,
            "purge_failed": self.purge_failed,
            "error": self.error,
        }


@dataclass
class RestoreOutcome:
    """
    Result of one restore run

    terminated_by names the error class that ended the run early, or is
    None when every phase ran.
    """

    table: str
    host: str
    state: RestoreState = RestoreState.INIT
    terminated_by: str | None = None
    termination_reason: str | None = None
    schema_checked: bool = False
    schema_changed: bool | None = None
    schema_replaced: bool = False
    schema_error: str | None = None
    skip_purge: bool | None = None
    in_sync: list[str] = field(default_factory=list)
    subsets: list[SubsetOutcome] = field(default_factory=list)
    started_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    finished_at: datetime | None = None

    def terminate(self, error: Exception) -> None:
        self.terminated_by = type(error).__name__
        self.termination_reason = str(error)
        self.state = RestoreState.DONE

    def _count(self, status: SubsetStatus) -> int:
        return sum(1 for subset in self.subsets if subset.status == status)

    @property
    def restored(self) -> int:
        return self._count(SubsetStatus.RESTORED)

    @property
    def failed(self) -> int:
        return self._count(SubsetStatus.FAILED)

    @property
    def skipped(self) -> int:
        return self._count(SubsetStatus.SKIPPED_MISSING_ARTIFACT)

    @property
    def purge_failures(self) -> int:
        return sum(1 for subset in self.subsets if subset.purge_failed)

    @property
    def duration_seconds(self) -> float:
        end = self.finished_at or datetime.now(UTC)
        return (end - self.started_at).total_seconds()

    def to_dict(self) -> dict[str, Any]:
        return {
            "table": self.table,
            "host": self.host,
            "state": self.state.value,
            "terminated_by": self.terminated_by,
            "termination_reason": self.termination_reason,
            "schema_checked": self.schema_checked,
            "schema_changed": self.schema_changed,
            "schema_replaced": self.schema_replaced,
            "schema_error": self.schema_error,
            "skip_purge": self.skip_purge,
            "in_sync": list(self.in_sync),
            "subsets": [subset.to_dict() for subset in self.subsets],
            "started_at": self.started_at.isoformat(),
            "finished_at": self.finished_at.isoformat() if self.finished_at else None,
            "duration_seconds": self.duration_seconds,
        }
