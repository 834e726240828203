"""
SQL safety utilities for the statements sent to the live instance.

Table and column names and subset identifiers end up inside SQL text and
shell command lines, so they are validated against strict ASCII patterns
before they are quoted or interpolated.
"""

import re

# Strict ASCII-only patterns for SQL identifiers
VALID_IDENTIFIER = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_]*$")

# Subset identifiers are month tokens such as 2024-01
VALID_SUBSET_ID = re.compile(r"^[A-Za-z0-9_][A-Za-z0-9_.:-]*$")


def validate_identifier(identifier: str) -> None:
    """
    Validate a SQL identifier (database, table or column name).

    Args:
        identifier: The identifier to validate

    Raises:
        ValueError: If the identifier contains invalid characters
    """
    if not identifier:
        raise ValueError("SQL identifier cannot be empty")

    if not VALID_IDENTIFIER.match(identifier):
        raise ValueError(
            f"Invalid SQL identifier: {identifier!r}. "
            "Only ASCII letters, digits, and underscores are allowed, "
            "and must start with a letter or underscore."
        )


def validate_subset_id(subset_id: str) -> None:
    """
    Validate a subset identifier before it is used in SQL or file names.

    Raises:
        ValueError: If the identifier contains invalid characters
    """
    if not subset_id or not VALID_SUBSET_ID.match(subset_id):
        raise ValueError(f"Invalid subset identifier: {subset_id!r}")


def quote_identifier(identifier: str) -> str:
    """
    Safely quote a MySQL identifier after validation.

    Args:
        identifier: The identifier to quote

    Returns:
        Backtick-quoted identifier

    Raises:
        ValueError: If the identifier is invalid
    """
    validate_identifier(identifier)
    return f"`{identifier}`"


def quote_literal(value: str) -> str:
    """
    Quote a validated subset identifier as a SQL string literal.

    Raises:
        ValueError: If the value is not a valid subset identifier
    """
    validate_subset_id(value)
    return f"'{value}'"
