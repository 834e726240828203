"""
Metadata records describing the subsets ("months") of the audit log.

A record is one line of text: the subset identifier followed by the entry
count, minimum id and maximum id. Two records are in sync only when their
lines are byte-identical, so the raw line is what equality is defined on.
The numeric fields are parsed on demand for purge statements and reports.
"""

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass

from auditrestore.errors import MetadataParseError

logger = logging.getLogger(__name__)

# Emitted by the metadata query when the live table has no rows at all
NO_DATA_SENTINEL = "NULL"


def _parse_int(token: str | None) -> int | None:
    if token is None:
        return None
    try:
        return int(token)
    except ValueError:
        return None


@dataclass(frozen=True)
class MetadataRecord:
    """One subset of the audit log, as described by a metadata line."""

    subset_id: str
    raw: str

    @classmethod
    def from_line(cls, line: str) -> "MetadataRecord":
        """
        Build a record from one metadata line

        Args:
            line: Raw metadata line (trailing whitespace is stripped)

        Returns:
            MetadataRecord keyed on the line's first token

        Raises:
            MetadataParseError: If the line has no tokens
        """
        raw = line.rstrip()
        tokens = raw.split()
        if not tokens:
            raise MetadataParseError(f"Empty metadata line: {line!r}")
        return cls(subset_id=tokens[0], raw=raw)

    @property
    def fields(self) -> list[str]:
        return self.raw.split()

    @property
    def count(self) -> int | None:
        return _parse_int(self._field(1))

    @property
    def min_id(self) -> int | None:
        return _parse_int(self._field(2))

    @property
    def max_id(self) -> int | None:
        return _parse_int(self._field(3))

    def _field(self, index: int) -> str | None:
        tokens = self.fields
        return tokens[index] if index < len(tokens) else None

    def in_sync_with(self, other: "MetadataRecord") -> bool:
        """Exact line equality; identical subset ids with drifted counts are not in sync."""
        return self.raw == other.raw

    def to_dict(self) -> dict:
        return {
            "subset_id": self.subset_id,
            "raw": self.raw,
            "count": self.count,
            "min_id": self.min_id,
            "max_id": self.max_id,
        }

    def __str__(self) -> str:
        return self.raw


class MetadataSet:
    """
    Ordered, immutable collection of metadata records

    No two records share a subset identifier. Membership (`in`) is by
    exact raw line, lookup (`get`) is by subset identifier.
    """

    def __init__(self, records: Iterable[MetadataRecord] = ()):
        self._records: tuple[MetadataRecord, ...] = tuple(records)
        self._by_id: dict[str, MetadataRecord] = {}
        for record in self._records:
            if record.subset_id in self._by_id:
                raise MetadataParseError(
                    f"Duplicate subset identifier in metadata: {record.subset_id}"
                )
            self._by_id[record.subset_id] = record
        self._raws = frozenset(record.raw for record in self._records)

    def __iter__(self) -> Iterator[MetadataRecord]:
        return iter(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __bool__(self) -> bool:
        return bool(self._records)

    def __contains__(self, item: object) -> bool:
        if isinstance(item, MetadataRecord):
            return item.raw in self._raws
        if isinstance(item, str):
            return item.rstrip() in self._raws
        return False

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MetadataSet):
            return NotImplemented
        return self._records == other._records

    def __repr__(self) -> str:
        return f"MetadataSet({[r.raw for r in self._records]!r})"

    def get(self, subset_id: str) -> MetadataRecord | None:
        return self._by_id.get(subset_id)

    def subset_ids(self) -> list[str]:
        return [record.subset_id for record in self._records]

    def raws(self) -> list[str]:
        return [record.raw for record in self._records]


def parse_metadata(text: str | None) -> MetadataSet:
    """
    Parse a metadata blob into a MetadataSet

    Blank lines and lines equal to the NULL sentinel are discarded; the
    sentinel means "no live data" and is never a real record.

    Args:
        text: Raw multi-line metadata text (None is treated as empty)

    Returns:
        MetadataSet in the order the lines appear

    Raises:
        MetadataParseError: If two lines share a subset identifier
    """
    if not text:
        return MetadataSet()

    records = []
    for line in text.splitlines():
        stripped = line.rstrip()
        if not stripped or stripped == NO_DATA_SENTINEL:
            continue
        records.append(MetadataRecord.from_line(stripped))

    logger.debug(f"Parsed {len(records)} metadata record(s)")
    return MetadataSet(records)
