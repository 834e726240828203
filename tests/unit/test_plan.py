"""
Unit tests for restore planning and the dry run
"""

import pytest

from auditrestore.errors import (
    LiveMetadataUnavailable,
    NoSnapshotData,
    RemoteCommandError,
    ToolUnavailable,
)
from auditrestore.metadata import parse_metadata
from auditrestore.plan import build_plan, plan_restore
from auditrestore.reconcile import compute_out_of_sync
from auditrestore.snapshot import DirectorySnapshotStore

from conftest import LIVE_SCHEMA_DIFFERENT, M1, M2, M3, FakeRemote


class TestBuildPlan:
    """Test build_plan and RestorePlan"""

    def test_steps_order_with_purge(self):
        reconciled = compute_out_of_sync(parse_metadata("\n".join([M1, M2])), parse_metadata(M1))

        plan = build_plan(True, reconciled)

        assert plan.steps() == [
            "replace schema (drop table, recreate from snapshot)",
            f"purge 2024-02 ({M2})",
            "import 2024-02",
        ]
        assert not plan.is_noop

    def test_steps_without_purge(self):
        reconciled = compute_out_of_sync(parse_metadata(M1), parse_metadata(""))

        plan = build_plan(False, reconciled)

        assert plan.skip_purge is True
        assert plan.steps() == ["import 2024-01"]

    def test_noop_plan(self):
        reconciled = compute_out_of_sync(parse_metadata(M1), parse_metadata(M1))

        plan = build_plan(False, reconciled)

        assert plan.is_noop
        assert plan.steps() == []
        assert plan.to_dict()["subsets"] == []


class TestPlanRestore:
    """Test plan_restore (dry run)"""

    def test_plan_matches_out_of_sync_subsets(self, make_snapshot):
        remote = FakeRemote(live_metadata=M1 + "\n")
        snapshot = DirectorySnapshotStore(make_snapshot([M1, M2, M3]))

        plan = plan_restore(remote, snapshot)

        assert [r.subset_id for r in plan.subsets] == ["2024-02", "2024-03"]
        assert plan.schema_replace_needed is False
        assert remote.mutating_calls == []

    def test_schema_change_plans_full_restore(self, make_snapshot):
        """The table is about to be recreated empty, so every subset is imported"""
        remote = FakeRemote(live_schema=LIVE_SCHEMA_DIFFERENT, live_metadata=M1 + "\n")
        snapshot = DirectorySnapshotStore(make_snapshot([M1, M2]))

        plan = plan_restore(remote, snapshot)

        assert plan.schema_replace_needed is True
        assert plan.skip_purge is True
        assert len(plan.subsets) == 2
        assert ("fetch_live_metadata",) not in remote.calls

    def test_schema_fetch_failure_plans_replacement(self, make_snapshot):
        remote = FakeRemote(fail={"schema": RemoteCommandError("Access denied")})
        snapshot = DirectorySnapshotStore(make_snapshot([M1]))

        assert plan_restore(remote, snapshot).schema_replace_needed is True

    def test_no_snapshot_data(self, make_snapshot):
        snapshot = DirectorySnapshotStore(make_snapshot(metadata_lines=None))

        with pytest.raises(NoSnapshotData):
            plan_restore(FakeRemote(), snapshot)

    def test_tool_unavailable(self, make_snapshot):
        remote = FakeRemote(fail={"schema": ToolUnavailable("not found")})
        snapshot = DirectorySnapshotStore(make_snapshot([M1]))

        with pytest.raises(ToolUnavailable):
            plan_restore(remote, snapshot)

    def test_live_metadata_failure(self, make_snapshot):
        remote = FakeRemote(fail={"metadata": RemoteCommandError("Lost connection")})
        snapshot = DirectorySnapshotStore(make_snapshot([M1]))

        with pytest.raises(LiveMetadataUnavailable):
            plan_restore(remote, snapshot)
