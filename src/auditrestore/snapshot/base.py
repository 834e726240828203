"""
Interface to the locally stored snapshot.
"""

from abc import ABC, abstractmethod
from pathlib import Path


class SnapshotStore(ABC):
    """Read-only access to one snapshot: metadata, schema, data artifacts."""

    @abstractmethod
    def read_metadata(self) -> str | None:
        """Return the stored metadata blob, or None if the snapshot holds none."""

    @abstractmethod
    def read_schema(self) -> str:
        """Return the stored schema dump."""

    @abstractmethod
    def artifact_path(self, subset_id: str) -> Path | None:
        """Return the path of the data artifact for subset_id, or None if absent."""
