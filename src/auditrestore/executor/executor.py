"""
Restore executor.

Drives the live instance through one restore:

    INIT -> SCHEMA_CHECK -> SCHEMA_RESTORE (if changed) -> META_RECONCILE
         -> PER_SUBSET_RESTORE (0..n) -> DONE

Failures meaning "nothing to do" end the run before anything is changed.
Failures local to one subset are recorded and the next subset proceeds.
No step is retried.
"""

import logging
from datetime import UTC, datetime
from pathlib import Path

from auditrestore.errors import (
    ArtifactMissing,
    LiveMetadataUnavailable,
    MetadataParseError,
    NoSnapshotData,
    PurgeFailed,
    RestoreError,
    SchemaFetchFailed,
    ToolUnavailable,
    TransferOrImportFailed,
)
from auditrestore.metadata import MetadataRecord, MetadataSet, parse_metadata
from auditrestore.plan import RestorePlan, build_plan
from auditrestore.reconcile import compute_out_of_sync
from auditrestore.remote import RemoteCollaborator
from auditrestore.report import generate_report
from auditrestore.schema import schema_changed, write_replacement_schema
from auditrestore.snapshot import SnapshotStore
from auditrestore.utils.logging import ContextLogger
from auditrestore.utils.metrics import RestoreMetrics
from auditrestore.utils.tracing import add_span_attributes, add_span_event, trace_operation

from .outcome import RestoreOutcome, RestoreState, SubsetOutcome, SubsetStatus
from .session import RestoreSession

logger = logging.getLogger(__name__)


class RestoreExecutor:
    """
    Executes one incremental restore of a table from a snapshot

    Args:
        remote: Live instance to restore onto
        snapshot: Snapshot to restore from
        table: Table being restored (used for the schema replacement)
        metrics: Optional Prometheus metrics
        scratch_root: Optional parent directory for local scratch files
    """

    def __init__(
        self,
        remote: RemoteCollaborator,
        snapshot: SnapshotStore,
        table: str,
        metrics: RestoreMetrics | None = None,
        scratch_root: str | Path | None = None,
    ):
        self.remote = remote
        self.snapshot = snapshot
        self.table = table
        self.metrics = metrics
        self.scratch_root = scratch_root
        self.log = ContextLogger(__name__, host=remote.host, table=table)

    def run(self) -> RestoreOutcome:
        """
        Run the restore to completion

        Returns:
            RestoreOutcome describing every phase that ran
        """
        outcome = RestoreOutcome(table=self.table, host=self.remote.host)
        self.log.info("Starting restore")

        try:
            with trace_operation("restore", table=self.table, host=self.remote.host):
                with RestoreSession(self.remote, self.scratch_root) as session:
                    self._run(session, outcome)
        finally:
            outcome.finished_at = datetime.now(UTC)
            self._record_metrics(outcome)

        self.log.info(
            f"Restore finished: restored={outcome.restored}, failed={outcome.failed}, "
            f"skipped={outcome.skipped}, terminated_by={outcome.terminated_by}"
        )
        return outcome

    def _run(self, session: RestoreSession, outcome: RestoreOutcome) -> None:
        # INIT -> SCHEMA_CHECK
        outcome.state = RestoreState.SCHEMA_CHECK
        try:
            live_schema = self._probe_schema(outcome)
        except ToolUnavailable as e:
            self.log.warning(f"Restore skipped, export tool unavailable: {e}")
            outcome.terminate(e)
            return

        try:
            snapshot_set = self._read_snapshot_metadata()
            snapshot_schema = self.snapshot.read_schema()
        except NoSnapshotData as e:
            self.log.info(f"Nothing to restore: {e}")
            outcome.terminate(e)
            return
        except MetadataParseError as e:
            self.log.error(f"Snapshot metadata unusable: {e}")
            outcome.terminate(e)
            return

        changed = schema_changed(live_schema, snapshot_schema)
        outcome.schema_changed = changed

        if changed:
            outcome.state = RestoreState.SCHEMA_RESTORE
            self._replace_schema(session, snapshot_schema, outcome)

        outcome.state = RestoreState.META_RECONCILE
        try:
            live_set = self._fetch_live_metadata()
        except (ToolUnavailable, LiveMetadataUnavailable) as e:
            self.log.error(f"Per-subset restore skipped: {e}")
            outcome.terminate(e)
            return

        reconciled = compute_out_of_sync(snapshot_set, live_set)
        plan = build_plan(changed, reconciled)
        outcome.skip_purge = plan.skip_purge
        outcome.in_sync = [record.subset_id for record in reconciled.in_sync]
        if self.metrics:
            self.metrics.record_out_of_sync(self.table, len(plan.subsets))

        outcome.state = RestoreState.PER_SUBSET_RESTORE
        self._restore_subsets(session, plan, outcome)
        outcome.state = RestoreState.DONE

    def _probe_schema(self, outcome: RestoreOutcome) -> str | None:
        """
        Fetch the live schema

        Returns:
            Schema dump, or None when the fetch failed for a reason other
            than a missing tool

        Raises:
            ToolUnavailable: If the export tool is missing on the instance
        """
        try:
            with trace_operation("schema_check"):
                live_schema = self.remote.fetch_live_schema()
        except ToolUnavailable:
            raise
        except RestoreError as e:
            failure = SchemaFetchFailed(f"Live schema fetch failed: {e}")
            self.log.warning(f"{failure}, forcing schema replacement")
            outcome.schema_error = str(failure)
            return None
        finally:
            outcome.schema_checked = True

        return live_schema

    def _read_snapshot_metadata(self) -> MetadataSet:
        snapshot_set = parse_metadata(self.snapshot.read_metadata())
        if not snapshot_set:
            raise NoSnapshotData(f"Snapshot {self.snapshot!r} holds no metadata")
        self.log.info(f"Snapshot holds {len(snapshot_set)} subset(s)")
        return snapshot_set

    def _replace_schema(
        self,
        session: RestoreSession,
        snapshot_schema: str,
        outcome: RestoreOutcome,
    ) -> None:
        self.log.info("Replacing live schema from snapshot")
        try:
            with trace_operation("schema_restore", table=self.table):
                schema_file = write_replacement_schema(
                    snapshot_schema, self.table, session.scratch_dir
                )
                session.stage(schema_file)
                self.remote.import_staged_artifact()
        except RestoreError as e:
            self.log.error(f"Schema replacement failed: {e}")
            outcome.schema_error = f"Schema replacement failed: {e}"
            if self.metrics:
                self.metrics.record_schema_replacement(self.table, success=False)
            return

        outcome.schema_replaced = True
        if self.metrics:
            self.metrics.record_schema_replacement(self.table, success=True)

    def _fetch_live_metadata(self) -> MetadataSet:
        """
        Raises:
            ToolUnavailable: If the query tool is missing on the instance
            LiveMetadataUnavailable: If the query or its output failed
        """
        try:
            with trace_operation("meta_reconcile"):
                text = self.remote.fetch_live_metadata()
            live_set = parse_metadata(text)
        except ToolUnavailable:
            raise
        except MetadataParseError as e:
            raise LiveMetadataUnavailable(f"Live metadata unusable: {e}") from e
        except RestoreError as e:
            raise LiveMetadataUnavailable(f"Live metadata fetch failed: {e}") from e

        self.log.info(f"Live instance holds {len(live_set)} subset(s)")
        return live_set

    def _restore_subsets(
        self,
        session: RestoreSession,
        plan: RestorePlan,
        outcome: RestoreOutcome,
    ) -> None:
        if not plan.subsets:
            self.log.info("All subsets in sync, nothing to restore")
            return

        self.log.info(
            f"Restoring {len(plan.subsets)} subset(s)"
            + (" without purge" if plan.skip_purge else "")
        )
        for record in plan.subsets:
            subset_outcome = self._restore_subset(session, record, plan.skip_purge)
            outcome.subsets.append(subset_outcome)
            if self.metrics:
                self.metrics.record_subset(self.table, subset_outcome.status.value)
                if subset_outcome.purge_failed:
                    self.metrics.record_purge_failure(self.table)

    def _restore_subset(
        self,
        session: RestoreSession,
        record: MetadataRecord,
        skip_purge: bool,
    ) -> SubsetOutcome:
        log = self.log.bind(subset=record.subset_id)
        result = SubsetOutcome(
            subset_id=record.subset_id,
            raw=record.raw,
            status=SubsetStatus.FAILED,
        )

        with trace_operation("restore_subset", subset=record.subset_id) as span:
            if not skip_purge:
                result.purge_attempted = True
                try:
                    self.remote.purge_subset(record)
                except (RestoreError, ValueError) as e:
                    # Best effort: the import still runs
                    failure = PurgeFailed(record.subset_id, e)
                    log.warning(f"{failure}, importing anyway")
                    result.purge_failed = True
                    result.error = str(failure)
                    add_span_event("purge_failed", error=str(e))

            artifact = self.snapshot.artifact_path(record.subset_id)
            if artifact is None:
                failure = ArtifactMissing(record.subset_id)
                log.warning(str(failure))
                result.status = SubsetStatus.SKIPPED_MISSING_ARTIFACT
                result.error = str(failure)
                span.set_attribute("subset.status", result.status.value)
                return result

            stage = "transfer"
            try:
                session.stage(artifact)
                stage = "import"
                self.remote.import_staged_artifact()
            except (RestoreError, OSError) as e:
                failure = TransferOrImportFailed(record.subset_id, stage, e)
                log.error(str(failure))
                result.error = str(failure)
                span.set_attribute("subset.status", result.status.value)
                return result

            result.status = SubsetStatus.RESTORED
            add_span_attributes(**{"subset.status": result.status.value})

        log.info(f"Restored subset {record.subset_id}")
        return result

    def _record_metrics(self, outcome: RestoreOutcome) -> None:
        if not self.metrics:
            return
        status = generate_report(outcome)["status"]
        self.metrics.record_run(self.table, status, outcome.duration_seconds)


def run_restore(
    remote: RemoteCollaborator,
    snapshot: SnapshotStore,
    table: str,
    metrics: RestoreMetrics | None = None,
) -> RestoreOutcome:
    """Convenience wrapper: build a RestoreExecutor and run it."""
    return RestoreExecutor(remote, snapshot, table, metrics=metrics).run()
