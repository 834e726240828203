"""
Report generation for restore runs.

Turns a RestoreOutcome into a plain dictionary with an overall status,
per-subset issues and actionable recommendations, ready to be printed or
exported.
"""

from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from auditrestore.executor.outcome import RestoreOutcome


class ReportStatus:
    """Overall status of a restore run."""

    SUCCESS = "SUCCESS"
    PARTIAL = "PARTIAL"
    NOTHING_TO_DO = "NOTHING_TO_DO"
    SKIPPED = "SKIPPED"
    ABORTED = "ABORTED"


class IssueType:
    """Constants for per-subset issue types."""

    PURGE_FAILED = "PURGE_FAILED"
    ARTIFACT_MISSING = "ARTIFACT_MISSING"
    RESTORE_FAILED = "RESTORE_FAILED"
    SCHEMA_REPLACE_FAILED = "SCHEMA_REPLACE_FAILED"


# Error classes that end a run with nothing to do
NOTHING_TO_DO_ERRORS = {"NoSnapshotData"}
SKIP_ERRORS = {"ToolUnavailable"}

EXIT_OK_STATUSES = {ReportStatus.SUCCESS, ReportStatus.NOTHING_TO_DO, ReportStatus.SKIPPED}


def _schema_replace_failed(outcome: "RestoreOutcome") -> bool:
    return bool(outcome.schema_changed) and not outcome.schema_replaced


def determine_status(outcome: "RestoreOutcome") -> str:
    """
    Determine the overall status of a run

    Args:
        outcome: Restore outcome

    Returns:
        One of the ReportStatus constants
    """
    if outcome.terminated_by in NOTHING_TO_DO_ERRORS:
        return ReportStatus.NOTHING_TO_DO
    if outcome.terminated_by in SKIP_ERRORS:
        return ReportStatus.SKIPPED
    if outcome.terminated_by is not None:
        return ReportStatus.ABORTED

    if outcome.failed or outcome.skipped or _schema_replace_failed(outcome):
        return ReportStatus.PARTIAL
    if not outcome.subsets and not outcome.schema_replaced:
        return ReportStatus.NOTHING_TO_DO
    return ReportStatus.SUCCESS


def _collect_issues(outcome: "RestoreOutcome") -> list[dict[str, Any]]:
    issues = []

    if _schema_replace_failed(outcome):
        issues.append({
            "subset": None,
            "issue_type": IssueType.SCHEMA_REPLACE_FAILED,
            "severity": "CRITICAL",
            "details": outcome.schema_error,
        })

    for subset in outcome.subsets:
        if subset.purge_failed:
            issues.append({
                "subset": subset.subset_id,
                "issue_type": IssueType.PURGE_FAILED,
                "severity": "HIGH",
                "details": f"Purge failed before import ({subset.raw})",
            })
        if subset.status.value == "SKIPPED_MISSING_ARTIFACT":
            issues.append({
                "subset": subset.subset_id,
                "issue_type": IssueType.ARTIFACT_MISSING,
                "severity": "MEDIUM",
                "details": subset.error,
            })
        elif subset.status.value == "FAILED":
            issues.append({
                "subset": subset.subset_id,
                "issue_type": IssueType.RESTORE_FAILED,
                "severity": "HIGH",
                "details": subset.error,
            })

    return issues


def _generate_summary(outcome: "RestoreOutcome", status: str) -> str:
    if status == ReportStatus.NOTHING_TO_DO:
        if outcome.terminated_by:
            return f"Nothing to restore: {outcome.termination_reason}"
        return f"All {len(outcome.in_sync)} subsets are in sync. Nothing restored."
    if status == ReportStatus.SKIPPED:
        return f"Restore skipped: {outcome.termination_reason}"
    if status == ReportStatus.ABORTED:
        return f"Restore aborted before per-subset restore: {outcome.termination_reason}"

    total = len(outcome.subsets)
    summary = f"Restored {outcome.restored} of {total} out-of-sync subsets"
    if outcome.schema_replaced:
        summary += " after replacing the schema"
    summary += "."
    if status == ReportStatus.PARTIAL:
        summary += (
            f" {outcome.failed} failed, {outcome.skipped} skipped for missing artifacts."
        )
    return summary


def _generate_recommendations(outcome: "RestoreOutcome", issues: list[dict[str, Any]]) -> list[str]:
    recommendations = []
    issue_types = {issue["issue_type"] for issue in issues}

    if outcome.terminated_by == "LiveMetadataUnavailable":
        recommendations.append(
            "Check connectivity and credentials for the live instance, then rerun; "
            "the plan is re-derived from scratch."
        )
    if outcome.terminated_by == "ToolUnavailable":
        recommendations.append(
            "Install the MySQL client tools on the target host or restore from a host that has them."
        )
    if IssueType.SCHEMA_REPLACE_FAILED in issue_types:
        recommendations.append(
            "Schema replacement failed. Inspect the snapshot schema dump before rerunning."
        )
    if IssueType.PURGE_FAILED in issue_types:
        recommendations.append(
            "A purge failed before import. Check the affected subsets for duplicate ids."
        )
    if IssueType.ARTIFACT_MISSING in issue_types:
        recommendations.append(
            "Some subsets have no data artifact in the snapshot. Verify the snapshot is complete."
        )
    if IssueType.RESTORE_FAILED in issue_types:
        recommendations.append(
            "Rerun the restore; subsets already restored are now in sync and will be skipped."
        )

    return recommendations


def generate_report(outcome: "RestoreOutcome") -> dict[str, Any]:
    """
    Generate a restore report from a run outcome

    Args:
        outcome: Restore outcome

    Returns:
        Dictionary containing:
        - status: SUCCESS, PARTIAL, NOTHING_TO_DO, SKIPPED or ABORTED
        - table / host: what was restored where
        - terminated_by: error class that ended the run early, if any
        - schema: checked / changed / replaced / error
        - subsets_out_of_sync, subsets_restored, subsets_failed,
          subsets_skipped, subsets_in_sync, purge_failures: counts
        - subsets: per-subset outcomes
        - issues: per-subset problems with severity
        - summary / recommendations: human-readable text
        - timestamp, duration_seconds
    """
    status = determine_status(outcome)
    issues = _collect_issues(outcome)

    return {
        "status": status,
        "table": outcome.table,
        "host": outcome.host,
        "state": outcome.state.value,
        "terminated_by": outcome.terminated_by,
        "schema": {
            "checked": outcome.schema_checked,
            "changed": outcome.schema_changed,
            "replaced": outcome.schema_replaced,
            "error": outcome.schema_error,
        },
        "skip_purge": outcome.skip_purge,
        "subsets_out_of_sync": len(outcome.subsets),
        "subsets_restored": outcome.restored,
        "subsets_failed": outcome.failed,
        "subsets_skipped": outcome.skipped,
        "subsets_in_sync": len(outcome.in_sync),
        "purge_failures": outcome.purge_failures,
        "subsets": [subset.to_dict() for subset in outcome.subsets],
        "issues": issues,
        "summary": _generate_summary(outcome, status),
        "recommendations": _generate_recommendations(outcome, issues),
        "timestamp": datetime.now(UTC).isoformat(),
        "duration_seconds": round(outcome.duration_seconds, 3),
    }
