"""
Snapshot storage.

- SnapshotStore: abstract read-only interface
- DirectorySnapshotStore: snapshot kept as files in one directory
"""

from .base import SnapshotStore
from .directory import (
    DEFAULT_ARTIFACT_SUFFIX,
    METADATA_FILENAME,
    SCHEMA_FILENAME,
    DirectorySnapshotStore,
)

__all__ = [
    'SnapshotStore',
    'DirectorySnapshotStore',
    'METADATA_FILENAME',
    'SCHEMA_FILENAME',
    'DEFAULT_ARTIFACT_SUFFIX',
]
