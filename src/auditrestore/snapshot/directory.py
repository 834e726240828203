"""
Snapshot store backed by a local directory.

Layout of one snapshot directory:

    metadata.txt          one line per subset: <subset> <count> <min id> <max id>
    schema.sql            schema-only dump of the table
    <subset>.sql.gz       data dump for one subset (suffix configurable)
"""

import logging
from pathlib import Path

from auditrestore.errors import NoSnapshotData
from auditrestore.sql_safety import validate_subset_id

from .base import SnapshotStore

logger = logging.getLogger(__name__)

METADATA_FILENAME = "metadata.txt"
SCHEMA_FILENAME = "schema.sql"
DEFAULT_ARTIFACT_SUFFIX = ".sql.gz"


class DirectorySnapshotStore(SnapshotStore):
    """
    Read-only view of a snapshot directory

    Args:
        snapshot_dir: Directory holding the snapshot files
        artifact_suffix: File suffix of per-subset data artifacts
    """

    def __init__(self, snapshot_dir: str | Path, artifact_suffix: str = DEFAULT_ARTIFACT_SUFFIX):
        self.snapshot_dir = Path(snapshot_dir)
        self.artifact_suffix = artifact_suffix

    def read_metadata(self) -> str | None:
        metadata_file = self.snapshot_dir / METADATA_FILENAME
        if not metadata_file.is_file():
            logger.info(f"No metadata file in snapshot {self.snapshot_dir}")
            return None

        text = metadata_file.read_text(encoding="utf-8", errors="replace")
        if not text.strip():
            logger.info(f"Metadata file in snapshot {self.snapshot_dir} is empty")
            return None
        return text

    def read_schema(self) -> str:
        schema_file = self.snapshot_dir / SCHEMA_FILENAME
        if not schema_file.is_file():
            raise NoSnapshotData(f"No schema dump in snapshot {self.snapshot_dir}")
        return schema_file.read_text(encoding="utf-8", errors="replace")

    def artifact_path(self, subset_id: str) -> Path | None:
        try:
            validate_subset_id(subset_id)
        except ValueError as e:
            logger.warning(f"Not looking up artifact: {e}")
            return None
        path = self.snapshot_dir / f"{subset_id}{self.artifact_suffix}"
        if not path.is_file():
            return None
        return path

    def __repr__(self) -> str:
        return f"DirectorySnapshotStore({str(self.snapshot_dir)!r})"
