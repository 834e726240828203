"""
Schema dump normalisation and comparison.

Dumps taken at different times differ in ways that carry no meaning for
compatibility: header comments, version-conditional comment lines, blank
lines and the table's next AUTO_INCREMENT value. Those are stripped before
two dumps are compared.
"""

import logging
import re

logger = logging.getLogger(__name__)

COMMENT_PREFIXES = ("--", "/*")

AUTO_INCREMENT_PATTERN = re.compile(r"AUTO_INCREMENT=\d+")


def normalize_schema(raw_schema: str) -> str:
    """
    Strip non-semantic content from a schema dump

    Removes lines starting with `--` or `/*`, blank lines, and any
    `AUTO_INCREMENT=<n>` clause from the remaining lines.

    Args:
        raw_schema: Schema dump text

    Returns:
        Normalised text, one kept line per line
    """
    kept = []
    for line in raw_schema.splitlines():
        if not line.strip():
            continue
        if line.startswith(COMMENT_PREFIXES):
            continue
        kept.append(AUTO_INCREMENT_PATTERN.sub("", line))

    return "\n".join(kept)


def schema_changed(live_schema: str | None, snapshot_schema: str) -> bool:
    """
    Decide whether the live schema differs from the snapshot's

    Args:
        live_schema: Live schema dump, or None if it could not be fetched
        snapshot_schema: Schema dump stored with the snapshot

    Returns:
        True if the schema must be replaced. An unknown live schema counts
        as changed.
    """
    if live_schema is None:
        logger.warning("Live schema unknown, treating schema as changed")
        return True

    changed = normalize_schema(live_schema) != normalize_schema(snapshot_schema)
    if changed:
        logger.info("Live schema differs from snapshot schema")
    else:
        logger.info("Live schema matches snapshot schema")
    return changed
