"""
Command-line argument parser configuration.

Sets up the argument parser for the audit-restore CLI, defining all
commands and their options.
"""

import argparse


def _add_target_arguments(parser: argparse.ArgumentParser) -> None:
    """Options naming the live instance and the snapshot to restore from."""
    group = parser.add_argument_group("target")
    group.add_argument('--host', help='Live database host (env: AUDIT_RESTORE_HOST)')
    group.add_argument('--ssh-port', help='SSH port (env: AUDIT_RESTORE_SSH_PORT, default: 22)')
    group.add_argument('--ssh-user', help='SSH login user (env: AUDIT_RESTORE_SSH_USER)')
    group.add_argument('--database', help='Database name (env: AUDIT_RESTORE_DATABASE, default: audit)')
    group.add_argument('--table', help='Audit table name (env: AUDIT_RESTORE_TABLE, default: audit_log)')
    group.add_argument(
        '--time-column',
        help='Timestamp column subsets are derived from (env: AUDIT_RESTORE_TIME_COLUMN, default: created_at)'
    )
    group.add_argument(
        '--snapshot-dir',
        help='Directory holding the snapshot (env: AUDIT_RESTORE_SNAPSHOT_DIR)'
    )
    group.add_argument(
        '--artifact-suffix',
        help='File suffix of per-subset data artifacts (default: .sql.gz)'
    )
    group.add_argument(
        '--staging-path',
        help='Remote staging file path (env: AUDIT_RESTORE_STAGING_PATH)'
    )
    group.add_argument(
        '--timeout',
        help='Per-command timeout in seconds (env: AUDIT_RESTORE_TIMEOUT, default: none)'
    )


def create_parser() -> argparse.ArgumentParser:
    """
    Create and configure the argument parser for the CLI.

    Returns:
        Configured ArgumentParser instance
    """
    parser = argparse.ArgumentParser(
        prog="audit-restore",
        description="Incremental restore of an audit-log table from a snapshot",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Restore out-of-sync months onto db1 from a snapshot directory
  audit-restore run --host db1 --snapshot-dir /backups/audit/2024-06-01

  # Same, with settings taken from the environment and a JSON report
  AUDIT_RESTORE_HOST=db1 AUDIT_RESTORE_SNAPSHOT_DIR=/backups/audit/latest \\
      audit-restore run --format json --output restore.json

  # Show what a restore would do without changing anything
  audit-restore plan --host db1 --snapshot-dir /backups/audit/latest

  # Expose Prometheus metrics while the restore runs
  audit-restore --metrics-port 9091 run --host db1 --snapshot-dir /backups/audit/latest

  # Render a previous JSON report on the console
  audit-restore report --input restore.json --format console
        """
    )

    parser.add_argument(
        '--log-level',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
        default='INFO',
        help='Logging level (default: INFO)'
    )
    parser.add_argument(
        '--log-file',
        help='Also write logs to this file (rotated)'
    )
    parser.add_argument(
        '--json-logs',
        action='store_true',
        help='Emit structured JSON logs'
    )
    parser.add_argument(
        '--metrics-port',
        type=int,
        help='Expose Prometheus metrics on this port'
    )
    parser.add_argument(
        '--trace-console',
        action='store_true',
        help='Export trace spans to the console'
    )
    parser.add_argument(
        '--otlp-endpoint',
        help='Export trace spans to this OTLP collector (env: OTLP_ENDPOINT)'
    )

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    # ========== Run command ==========
    run_parser = subparsers.add_parser('run', help='Restore out-of-sync subsets onto the live instance')
    _add_target_arguments(run_parser)
    run_parser.add_argument(
        '--output',
        help='Output file path for report'
    )
    run_parser.add_argument(
        '--format',
        choices=['console', 'json', 'csv'],
        default='console',
        help='Output format (default: console)'
    )

    # ========== Plan command ==========
    plan_parser = subparsers.add_parser('plan', help='Show the restore plan without changing anything')
    _add_target_arguments(plan_parser)
    plan_parser.add_argument(
        '--format',
        choices=['console', 'json'],
        default='console',
        help='Output format (default: console)'
    )
    plan_parser.add_argument(
        '--output',
        help='Output file path for the JSON plan'
    )

    # ========== Report command ==========
    report_parser = subparsers.add_parser('report', help='Render a report from a previous run')
    report_parser.add_argument(
        '--input',
        required=True,
        help='Input JSON report file'
    )
    report_parser.add_argument(
        '--format',
        choices=['console', 'json', 'csv'],
        default='console',
        help='Output format (default: console)'
    )
    report_parser.add_argument(
        '--output',
        help='Output file path (required for json and csv formats)'
    )

    return parser
