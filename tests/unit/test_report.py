"""
Unit tests for restore report generation and formatting
"""

import csv
import json

import pytest

from auditrestore.errors import LiveMetadataUnavailable, NoSnapshotData, ToolUnavailable
from auditrestore.executor import RestoreOutcome, RestoreState, SubsetOutcome, SubsetStatus
from auditrestore.metadata import parse_metadata
from auditrestore.plan import build_plan
from auditrestore.reconcile import compute_out_of_sync
from auditrestore.report import (
    IssueType,
    ReportStatus,
    export_report_csv,
    export_report_json,
    format_plan_console,
    format_report_console,
    generate_report,
    load_report_json,
)


def _outcome(**kwargs):
    outcome = RestoreOutcome(table="audit_log", host="db1", state=RestoreState.DONE, **kwargs)
    outcome.finished_at = outcome.started_at
    return outcome


def _subset(subset_id, status, **kwargs):
    return SubsetOutcome(subset_id=subset_id, raw=f"{subset_id} 10 1 10", status=status, **kwargs)


class TestReportStatus:
    """Test overall status rules"""

    def test_success(self):
        outcome = _outcome(subsets=[_subset("2024-01", SubsetStatus.RESTORED)])

        report = generate_report(outcome)

        assert report["status"] == ReportStatus.SUCCESS
        assert report["issues"] == []
        assert report["summary"] == "Restored 1 of 1 out-of-sync subsets."

    def test_everything_in_sync(self):
        outcome = _outcome(in_sync=["2024-01", "2024-02"])

        report = generate_report(outcome)

        assert report["status"] == ReportStatus.NOTHING_TO_DO
        assert report["summary"] == "All 2 subsets are in sync. Nothing restored."

    def test_schema_only_replacement_is_success(self):
        outcome = _outcome(schema_changed=True, schema_replaced=True)

        assert generate_report(outcome)["status"] == ReportStatus.SUCCESS

    def test_empty_snapshot(self):
        outcome = _outcome()
        outcome.terminate(NoSnapshotData("Snapshot holds no metadata"))

        report = generate_report(outcome)

        assert report["status"] == ReportStatus.NOTHING_TO_DO
        assert "Snapshot holds no metadata" in report["summary"]

    def test_tool_unavailable_is_skipped(self):
        outcome = _outcome()
        outcome.terminate(ToolUnavailable("mysqldump: command not found"))

        report = generate_report(outcome)

        assert report["status"] == ReportStatus.SKIPPED
        assert report["terminated_by"] == "ToolUnavailable"
        assert any("MySQL client tools" in rec for rec in report["recommendations"])

    def test_live_metadata_failure_is_aborted(self):
        outcome = _outcome()
        outcome.terminate(LiveMetadataUnavailable("Lost connection"))

        report = generate_report(outcome)

        assert report["status"] == ReportStatus.ABORTED
        assert any("rerun" in rec for rec in report["recommendations"])

    @pytest.mark.parametrize("status", [SubsetStatus.FAILED, SubsetStatus.SKIPPED_MISSING_ARTIFACT])
    def test_failed_or_skipped_subset_is_partial(self, status):
        outcome = _outcome(subsets=[
            _subset("2024-01", SubsetStatus.RESTORED),
            _subset("2024-02", status, error="boom"),
        ])

        report = generate_report(outcome)

        assert report["status"] == ReportStatus.PARTIAL
        assert report["subsets_restored"] == 1

    def test_failed_schema_replacement_is_partial(self):
        outcome = _outcome(
            schema_changed=True,
            schema_error="Schema replacement failed: ERROR 1050",
            subsets=[_subset("2024-01", SubsetStatus.RESTORED)],
        )

        report = generate_report(outcome)

        assert report["status"] == ReportStatus.PARTIAL
        assert report["issues"][0]["issue_type"] == IssueType.SCHEMA_REPLACE_FAILED
        assert report["issues"][0]["severity"] == "CRITICAL"


class TestReportIssues:
    """Test per-subset issues"""

    def test_purge_failure_is_reported_even_when_restored(self):
        outcome = _outcome(subsets=[
            _subset("2024-01", SubsetStatus.RESTORED, purge_attempted=True, purge_failed=True),
        ])

        report = generate_report(outcome)

        assert report["status"] == ReportStatus.SUCCESS
        assert report["purge_failures"] == 1
        assert [i["issue_type"] for i in report["issues"]] == [IssueType.PURGE_FAILED]

    def test_issue_per_failure_type(self):
        outcome = _outcome(subsets=[
            _subset("2024-01", SubsetStatus.SKIPPED_MISSING_ARTIFACT, error="missing"),
            _subset("2024-02", SubsetStatus.FAILED, error="Import failed"),
        ])

        report = generate_report(outcome)

        assert [(i["subset"], i["issue_type"]) for i in report["issues"]] == [
            ("2024-01", IssueType.ARTIFACT_MISSING),
            ("2024-02", IssueType.RESTORE_FAILED),
        ]
        assert len(report["recommendations"]) == 2


class TestFormatters:
    """Test report export and console rendering"""

    @pytest.fixture
    def report(self):
        outcome = _outcome(
            in_sync=["2024-01"],
            subsets=[
                _subset("2024-02", SubsetStatus.RESTORED, purge_attempted=True),
                _subset("2024-03", SubsetStatus.FAILED, purge_attempted=True, error="Import failed"),
            ],
        )
        return generate_report(outcome)

    def test_json_round_trip(self, report, tmp_path):
        path = tmp_path / "report.json"

        export_report_json(report, str(path))

        assert load_report_json(str(path)) == json.loads(json.dumps(report))

    def test_csv_one_row_per_subset(self, report, tmp_path):
        path = tmp_path / "report.csv"

        export_report_csv(report, str(path))

        with open(path, newline="") as f:
            rows = list(csv.reader(f))
        assert rows[0][:3] == ["Table", "Subset", "Status"]
        assert [row[1] for row in rows[1:]] == ["2024-02", "2024-03"]
        assert rows[2][2] == "FAILED"
        assert rows[2][6] == "Import failed"

    def test_console(self, report):
        text = format_report_console(report)

        assert "AUDIT LOG RESTORE REPORT" in text
        assert "Status: PARTIAL" in text
        assert "Subsets In Sync: 1" in text
        assert "RECOMMENDATIONS" in text
        assert "Subset: 2024-03" in text

    def test_plan_console(self):
        reconciled = compute_out_of_sync(
            parse_metadata("2024-01 1 1 1\n2024-02 1 2 2"), parse_metadata("2024-01 1 1 1")
        )

        text = format_plan_console(build_plan(False, reconciled))

        assert "1. purge 2024-02 (2024-02 1 2 2)" in text
        assert "2. import 2024-02" in text

    def test_plan_console_noop(self):
        reconciled = compute_out_of_sync(parse_metadata("2024-01 1 1 1"), parse_metadata("2024-01 1 1 1"))

        assert "Nothing to do" in format_plan_console(build_plan(False, reconciled))
