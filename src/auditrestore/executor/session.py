"""
Scoped ownership of the resources a restore holds.

A RestoreSession owns the remote staging file and a local scratch
directory for the rewritten schema dump. Both are released when the
session exits, whether the restore finished, failed or was interrupted.
"""

import logging
import tempfile
from pathlib import Path

from auditrestore.remote import RemoteCollaborator

logger = logging.getLogger(__name__)


class RestoreSession:
    """
    Context manager for one restore run

    Usage:
        with RestoreSession(remote) as session:
            session.stage(path)
            remote.import_staged_artifact()
    """

    def __init__(self, remote: RemoteCollaborator, scratch_root: str | Path | None = None):
        self.remote = remote
        self.scratch_root = scratch_root
        self.scratch_dir: Path | None = None
        self._scratch: tempfile.TemporaryDirectory | None = None
        self._staged = False

    def __enter__(self) -> "RestoreSession":
        self._scratch = tempfile.TemporaryDirectory(
            prefix="audit-restore-",
            dir=self.scratch_root,
        )
        self.scratch_dir = Path(self._scratch.name)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        self.close()
        return False

    @property
    def has_staged(self) -> bool:
        return self._staged

    def stage(self, local_path: Path) -> None:
        """
        Transfer a local file to the remote staging location

        The session counts the staging file as owned before the transfer
        starts, so a half-written file is removed on exit as well.
        """
        self._staged = True
        self.remote.transfer_artifact(local_path)

    def close(self) -> None:
        """Release the remote staging file and the scratch directory."""
        try:
            if self._staged:
                logger.debug("Releasing remote staging file")
                self.remote.release_staging()
                self._staged = False
        finally:
            if self._scratch is not None:
                self._scratch.cleanup()
                self._scratch = None
                self.scratch_dir = None
