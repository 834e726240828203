"""
Restore settings for the CLI.

Each setting comes from the command line first, then from an
AUDIT_RESTORE_* environment variable, then from its default. Missing
required settings end the process with exit status 1.
"""

import argparse
import logging
import os
import sys
from dataclasses import dataclass

from auditrestore.remote import MySqlRemote, SshTransport
from auditrestore.remote.mysql import DEFAULT_STAGING_PATH
from auditrestore.snapshot import DEFAULT_ARTIFACT_SUFFIX, DirectorySnapshotStore

logger = logging.getLogger(__name__)

ENV_PREFIX = "AUDIT_RESTORE_"


@dataclass(frozen=True)
class RestoreSettings:
    host: str
    snapshot_dir: str
    ssh_port: int = 22
    ssh_user: str | None = None
    database: str = "audit"
    table: str = "audit_log"
    time_column: str = "created_at"
    staging_path: str = DEFAULT_STAGING_PATH
    artifact_suffix: str = DEFAULT_ARTIFACT_SUFFIX
    timeout: float | None = None


def _setting(args: argparse.Namespace, name: str, default: str | None = None) -> str | None:
    value = getattr(args, name, None)
    if value:
        return value
    return os.getenv(f"{ENV_PREFIX}{name.upper()}", default)


def load_settings(args: argparse.Namespace) -> RestoreSettings:
    """
    Resolve restore settings from arguments and environment

    Args:
        args: Parsed command-line arguments

    Returns:
        RestoreSettings
    """
    host = _setting(args, "host")
    snapshot_dir = _setting(args, "snapshot_dir")

    if not host:
        logger.error("Live database host not provided (--host or AUDIT_RESTORE_HOST)")
        sys.exit(1)
    if not snapshot_dir:
        logger.error("Snapshot directory not provided (--snapshot-dir or AUDIT_RESTORE_SNAPSHOT_DIR)")
        sys.exit(1)

    try:
        ssh_port = int(_setting(args, "ssh_port", "22"))
        timeout = _setting(args, "timeout")
        timeout = float(timeout) if timeout else None
    except ValueError as e:
        logger.error(f"Invalid numeric setting: {e}")
        sys.exit(1)

    return RestoreSettings(
        host=host,
        snapshot_dir=snapshot_dir,
        ssh_port=ssh_port,
        ssh_user=_setting(args, "ssh_user"),
        database=_setting(args, "database", "audit"),
        table=_setting(args, "table", "audit_log"),
        time_column=_setting(args, "time_column", "created_at"),
        staging_path=_setting(args, "staging_path", DEFAULT_STAGING_PATH),
        artifact_suffix=_setting(args, "artifact_suffix", DEFAULT_ARTIFACT_SUFFIX),
        timeout=timeout,
    )


def build_collaborators(settings: RestoreSettings) -> tuple[MySqlRemote, DirectorySnapshotStore]:
    """
    Build the live-instance collaborator and snapshot store for a run

    Returns:
        Tuple of (remote, snapshot)

    Raises:
        ValueError: If the host or an identifier is invalid
    """
    transport = SshTransport(
        settings.host,
        user=settings.ssh_user,
        port=settings.ssh_port,
        timeout=settings.timeout,
    )
    remote = MySqlRemote(
        transport,
        database=settings.database,
        table=settings.table,
        time_column=settings.time_column,
        staging_path=settings.staging_path,
    )
    snapshot = DirectorySnapshotStore(settings.snapshot_dir, settings.artifact_suffix)
    return remote, snapshot
