"""
Exception taxonomy for audit-log restores.

Each failure the restore can hit has its own exception type so the executor
can decide, at each step boundary, whether the failure ends the run, ends
only the per-subset phase, or is local to a single subset:

- NoSnapshotData: nothing stored in the snapshot, nothing to restore
- ToolUnavailable: export/import tool missing on the instance, restore skipped
- LiveMetadataUnavailable: live metadata query failed, per-subset phase skipped
- SchemaFetchFailed: live schema query failed, schema treated as changed
- ArtifactMissing: no data artifact for a subset, subset skipped
- PurgeFailed: purge before import failed, import proceeds anyway
- TransferOrImportFailed: subset left un-restored, next subset proceeds
"""


class RestoreError(Exception):
    """Base exception for restore errors."""

    pass


class MetadataParseError(RestoreError):
    """Raised when a metadata blob cannot be turned into a MetadataSet."""

    pass


class RemoteCommandError(RestoreError):
    """
    Raised when a command on the remote host exits unsuccessfully.

    Carries the command, its exit status and captured stderr so callers
    can log what actually happened on the far side.
    """

    def __init__(
        self,
        message: str,
        command: str | None = None,
        returncode: int | None = None,
        stderr: str | None = None,
    ):
        super().__init__(message)
        self.command = command
        self.returncode = returncode
        self.stderr = stderr


class TransportError(RemoteCommandError):
    """Raised when the command channel itself fails (connection, timeout)."""

    pass


class ToolUnavailable(RestoreError):
    """Raised when the remote export/import tool is not present."""

    pass


class NoSnapshotData(RestoreError):
    """Raised when the snapshot holds no metadata."""

    pass


class LiveMetadataUnavailable(RestoreError):
    """Raised when the live metadata could not be fetched."""

    pass


class SchemaFetchFailed(RestoreError):
    """Raised when the live schema could not be fetched."""

    pass


class ArtifactMissing(RestoreError):
    """Raised when the snapshot has no data artifact for a subset."""

    def __init__(self, subset_id: str):
        super().__init__(f"No data artifact in snapshot for subset {subset_id}")
        self.subset_id = subset_id


class PurgeFailed(RestoreError):
    """Raised when existing rows for a subset could not be purged."""

    def __init__(self, subset_id: str, cause: Exception | None = None):
        super().__init__(f"Purge failed for subset {subset_id}: {cause}")
        self.subset_id = subset_id
        self.cause = cause


class TransferOrImportFailed(RestoreError):
    """Raised when a subset artifact could not be staged or imported."""

    def __init__(self, subset_id: str, stage: str, cause: Exception | None = None):
        super().__init__(f"{stage.capitalize()} failed for subset {subset_id}: {cause}")
        self.subset_id = subset_id
        self.stage = stage
        self.cause = cause
