"""
Restore report generation and formatting.
"""

from .formatters import (
    export_report_csv,
    export_report_json,
    format_plan_console,
    format_report_console,
    load_report_json,
)
from .generator import (
    EXIT_OK_STATUSES,
    IssueType,
    ReportStatus,
    determine_status,
    generate_report,
)

__all__ = [
    "generate_report",
    "determine_status",
    "ReportStatus",
    "IssueType",
    "EXIT_OK_STATUSES",
    "export_report_json",
    "load_report_json",
    "export_report_csv",
    "format_report_console",
    "format_plan_console",
]
