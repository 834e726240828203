"""
Interface to the live instance.

The restore core never talks to a host directly; it drives an object
implementing RemoteCollaborator. Every call is a blocking round-trip.
"""

from abc import ABC, abstractmethod
from pathlib import Path

from auditrestore.metadata import MetadataRecord


class RemoteCollaborator(ABC):
    """
    Operations the restore needs from the live instance

    Implementations raise ToolUnavailable when the export/import tool is not
    present on the instance, TransportError when the command channel fails
    and RemoteCommandError for any other unsuccessful command.
    """

    host: str = "unknown"

    @abstractmethod
    def fetch_live_metadata(self) -> str:
        """Return the live metadata blob, one line per subset."""

    @abstractmethod
    def fetch_live_schema(self) -> str:
        """Return the live schema-only dump of the table."""

    @abstractmethod
    def purge_subset(self, record: MetadataRecord) -> None:
        """Delete live rows belonging to the subset described by record."""

    @abstractmethod
    def transfer_artifact(self, local_path: Path) -> None:
        """Copy a local file to the remote staging location."""

    @abstractmethod
    def import_staged_artifact(self) -> None:
        """Import the staged file into the live instance."""

    @abstractmethod
    def release_staging(self) -> None:
        """Remove the remote staging file; must not raise."""
