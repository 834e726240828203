"""
Command-line interface for audit-log restores.

Available commands:
- run: Restore out-of-sync subsets onto the live instance
- plan: Show what a restore would do
- report: Render a report from a previous run
"""

import os
import sys

from auditrestore.utils.logging import setup_logging
from auditrestore.utils.tracing import initialize_tracing, shutdown_tracing

from .commands import cmd_plan, cmd_report, cmd_run
from .parser import create_parser
from .settings import RestoreSettings, build_collaborators, load_settings


def main() -> None:
    """Main entry point for the audit-restore CLI"""
    parser = create_parser()
    args = parser.parse_args()

    setup_logging(
        level=args.log_level,
        log_file=args.log_file,
        json_format=args.json_logs,
    )

    if args.trace_console or args.otlp_endpoint or os.getenv("OTLP_ENDPOINT"):
        initialize_tracing(otlp_endpoint=args.otlp_endpoint, console_export=args.trace_console)

    try:
        if args.command == 'run':
            cmd_run(args)
        elif args.command == 'plan':
            cmd_plan(args)
        elif args.command == 'report':
            cmd_report(args)
        else:
            parser.print_help()
            sys.exit(1)
    finally:
        shutdown_tracing()


__all__ = [
    'main',
    'create_parser',
    'load_settings',
    'build_collaborators',
    'RestoreSettings',
    'cmd_run',
    'cmd_plan',
    'cmd_report',
]


if __name__ == '__main__':
    main()
