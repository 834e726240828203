"""
Rewriting of the stored schema dump for a schema replacement.

A schema-only dump creates the table but does not remove the existing one,
so before it is shipped to the instance a DROP TABLE statement is placed
right after the line that re-establishes the client character set, which
mysqldump emits immediately before CREATE TABLE.
"""

import logging
import re
from pathlib import Path

from auditrestore.sql_safety import quote_identifier

logger = logging.getLogger(__name__)

CHARSET_ANCHOR_PATTERN = re.compile(r"^/\*!\d+\s+SET\s+character_set_client\s*=", re.IGNORECASE)


def find_charset_anchor(lines: list[str]) -> int | None:
    """
    Find the line re-establishing client character-set state

    Args:
        lines: Schema dump lines

    Returns:
        Index of the first matching line, or None when absent
    """
    for index, line in enumerate(lines):
        if CHARSET_ANCHOR_PATTERN.match(line.strip()):
            return index
    return None


def inject_drop_table(schema_dump: str, table: str) -> str:
    """
    Insert `DROP TABLE IF EXISTS` right after the character-set anchor

    When the dump has no anchor line the statement is prepended, so the
    rewritten dump always drops the table before creating it.

    Args:
        schema_dump: Stored schema dump
        table: Table name to drop

    Returns:
        Rewritten schema dump
    """
    statement = f"DROP TABLE IF EXISTS {quote_identifier(table)};"
    lines = schema_dump.splitlines()

    anchor = find_charset_anchor(lines)
    if anchor is None:
        logger.warning(
            f"No character-set anchor in schema dump, prepending drop for {table}"
        )
        lines.insert(0, statement)
    else:
        lines.insert(anchor + 1, statement)

    rewritten = "\n".join(lines)
    if schema_dump.endswith("\n"):
        rewritten += "\n"
    return rewritten


def write_replacement_schema(schema_dump: str, table: str, output_dir: Path) -> Path:
    """
    Write the rewritten schema dump to a scratch file

    Args:
        schema_dump: Stored schema dump
        table: Table name
        output_dir: Directory to write into

    Returns:
        Path of the written file
    """
    output_path = Path(output_dir) / f"{table}_schema_replace.sql"
    output_path.write_text(inject_drop_table(schema_dump, table), encoding="utf-8")
    logger.debug(f"Wrote replacement schema to {output_path}")
    return output_path
