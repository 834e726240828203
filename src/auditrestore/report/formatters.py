"""
Report formatting and export utilities.

Restore reports can be written as JSON or CSV files or rendered for the
terminal. Dry-run plans get their own console rendering.
"""

import csv
import json
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from auditrestore.plan import RestorePlan


def export_report_json(report: dict[str, Any], output_path: str) -> None:
    """
    Export report to JSON file

    Args:
        report: Report dictionary
        output_path: Path to output file
    """
    with open(output_path, "w") as f:
        json.dump(report, f, indent=2)


def load_report_json(input_path: str) -> dict[str, Any]:
    """Load a report previously written by export_report_json."""
    with open(input_path) as f:
        return json.load(f)


def export_report_csv(report: dict[str, Any], output_path: str) -> None:
    """
    Export report to CSV file, one row per out-of-sync subset

    Args:
        report: Report dictionary
        output_path: Path to output file
    """
    with open(output_path, "w", newline="") as f:
        writer = csv.writer(f)

        writer.writerow([
            "Table",
            "Subset",
            "Status",
            "Purge Attempted",
            "Purge Failed",
            "Metadata",
            "Error",
        ])

        for subset in report.get("subsets", []):
            writer.writerow([
                report.get("table", ""),
                subset.get("subset_id", ""),
                subset.get("status", ""),
                subset.get("purge_attempted", False),
                subset.get("purge_failed", False),
                subset.get("raw", ""),
                subset.get("error") or "",
            ])


def format_report_console(report: dict[str, Any]) -> str:
    """
    Format report for console output

    Args:
        report: Report dictionary

    Returns:
        Formatted string for console display
    """
    lines = []
    schema = report.get("schema", {})

    lines.append("=" * 80)
    lines.append("AUDIT LOG RESTORE REPORT")
    lines.append("=" * 80)
    lines.append(f"Status: {report['status']}")
    lines.append(f"Timestamp: {report['timestamp']}")
    lines.append(f"Host: {report['host']}")
    lines.append(f"Table: {report['table']}")
    lines.append(f"Schema Changed: {schema.get('changed')}")
    lines.append(f"Schema Replaced: {schema.get('replaced')}")
    lines.append(f"Subsets In Sync: {report['subsets_in_sync']}")
    lines.append(f"Subsets Out Of Sync: {report['subsets_out_of_sync']}")
    lines.append(f"Subsets Restored: {report['subsets_restored']}")
    lines.append(f"Subsets Failed: {report['subsets_failed']}")
    lines.append(f"Subsets Skipped: {report['subsets_skipped']}")
    lines.append(f"Purge Failures: {report['purge_failures']}")
    lines.append(f"Duration: {report['duration_seconds']:.1f}s")
    lines.append("")

    lines.append("SUMMARY")
    lines.append("-" * 80)
    lines.append(report["summary"])
    lines.append("")

    if report["issues"]:
        lines.append("ISSUES")
        lines.append("-" * 80)

        for issue in report["issues"]:
            lines.append(f"Subset: {issue['subset'] or '(schema)'}")
            lines.append(f"  Issue: {issue['issue_type']}")
            lines.append(f"  Severity: {issue['severity']}")
            lines.append(f"  Details: {issue['details']}")
            lines.append("")

    if report["recommendations"]:
        lines.append("RECOMMENDATIONS")
        lines.append("-" * 80)
        for i, rec in enumerate(report["recommendations"], 1):
            lines.append(f"{i}. {rec}")
        lines.append("")

    lines.append("=" * 80)

    return "\n".join(lines)


def format_plan_console(plan: "RestorePlan") -> str:
    """Render a dry-run plan as a numbered list of steps."""
    lines = ["=" * 80, "AUDIT LOG RESTORE PLAN (dry run)", "=" * 80]
    lines.append(f"Schema Replace Needed: {plan.schema_replace_needed}")
    lines.append(f"Skip Purge: {plan.skip_purge}")
    lines.append(f"Subsets To Restore: {len(plan.subsets)}")
    lines.append("")

    steps = plan.steps()
    if steps:
        lines.append("STEPS")
        lines.append("-" * 80)
        for i, step in enumerate(steps, 1):
            lines.append(f"{i}. {step}")
    else:
        lines.append("Nothing to do: live instance is in sync with the snapshot.")
    lines.append("")
    lines.append("=" * 80)

    return "\n".join(lines)
