"""
CLI command implementations.

- run: restore out-of-sync subsets and report the outcome
- plan: dry run, print what a restore would do
- report: re-render a report from a previous run
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from auditrestore.errors import (
    LiveMetadataUnavailable,
    NoSnapshotData,
    RestoreError,
    ToolUnavailable,
)
from auditrestore.executor import RestoreExecutor
from auditrestore.plan import plan_restore
from auditrestore.report import (
    EXIT_OK_STATUSES,
    export_report_csv,
    export_report_json,
    format_plan_console,
    format_report_console,
    generate_report,
    load_report_json,
)
from auditrestore.utils.metrics import MetricsPublisher, RestoreMetrics

from .settings import build_collaborators, load_settings

logger = logging.getLogger(__name__)


def _start_metrics(args: argparse.Namespace) -> RestoreMetrics | None:
    port = getattr(args, "metrics_port", None)
    if not port:
        return None

    metrics = RestoreMetrics()
    publisher = MetricsPublisher(port=port, registry=metrics.registry)
    try:
        publisher.start()
    except RuntimeError as e:
        # Metrics are optional, the restore still runs
        logger.warning(str(e))
    return metrics


def _write_report(report: dict, output: str | None, fmt: str) -> None:
    if not output or fmt == "console":
        print(format_report_console(report))
        return

    output_path = Path(output)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    if fmt == "json":
        export_report_json(report, str(output_path))
    else:
        export_report_csv(report, str(output_path))
    logger.info(f"Report saved to {output_path}")


def cmd_run(args: argparse.Namespace) -> None:
    """
    Run one restore and exit with its status

    Exit status is 0 when the run succeeded or had nothing to do, 1 when
    it was partial or aborted.

    Args:
        args: Parsed command-line arguments
    """
    settings = load_settings(args)
    logger.info(
        f"Starting restore of {settings.database}.{settings.table} on {settings.host} "
        f"from {settings.snapshot_dir}"
    )

    try:
        remote, snapshot = build_collaborators(settings)
    except ValueError as e:
        logger.error(f"Invalid restore settings: {e}")
        sys.exit(1)

    metrics = _start_metrics(args)

    try:
        outcome = RestoreExecutor(remote, snapshot, settings.table, metrics=metrics).run()
    except KeyboardInterrupt:
        logger.error("Restore interrupted")
        sys.exit(130)

    report = generate_report(outcome)
    _write_report(report, args.output, args.format)

    if report["status"] in EXIT_OK_STATUSES:
        logger.info(f"Restore completed: {report['status']}")
        sys.exit(0)

    logger.warning(f"Restore did not complete cleanly: {report['status']}")
    sys.exit(1)


def cmd_plan(args: argparse.Namespace) -> None:
    """
    Print the restore plan without changing the live instance

    Args:
        args: Parsed command-line arguments
    """
    settings = load_settings(args)

    try:
        remote, snapshot = build_collaborators(settings)
        plan = plan_restore(remote, snapshot)
    except (NoSnapshotData, ToolUnavailable) as e:
        logger.warning(f"Nothing to plan: {e}")
        sys.exit(0)
    except LiveMetadataUnavailable as e:
        logger.error(f"Cannot plan restore: {e}")
        sys.exit(1)
    except (RestoreError, ValueError) as e:
        logger.error(f"Planning failed: {e}")
        sys.exit(1)

    if args.format == "json":
        text = json.dumps(plan.to_dict(), indent=2)
        if args.output:
            Path(args.output).parent.mkdir(parents=True, exist_ok=True)
            Path(args.output).write_text(text + "\n")
            logger.info(f"Plan saved to {args.output}")
        else:
            print(text)
    else:
        print(format_plan_console(plan))


def cmd_report(args: argparse.Namespace) -> None:
    """
    Generate a report from a previous restore JSON file

    Args:
        args: Parsed command-line arguments
    """
    logger.info(f"Loading restore report from {args.input}")

    try:
        report = load_report_json(args.input)

        if args.format == "console":
            print(format_report_console(report))
        elif args.format == "csv":
            if not args.output:
                logger.error("Output file required for CSV format")
                sys.exit(1)
            export_report_csv(report, args.output)
            logger.info(f"Report exported to {args.output}")
        elif args.format == "json":
            if not args.output:
                logger.error("Output file required for JSON format")
                sys.exit(1)
            export_report_json(report, args.output)
            logger.info(f"Report exported to {args.output}")

    except (OSError, ValueError, KeyError) as e:
        logger.error(f"Failed to process report: {e}")
        sys.exit(1)
