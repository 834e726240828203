"""
Schema dump handling.

- normalize_schema / schema_changed: compatibility check between the live
  schema and the snapshot's schema
- inject_drop_table / write_replacement_schema: rewrite of the stored dump
  for a full schema replacement
"""

from .normalize import normalize_schema, schema_changed
from .rewrite import find_charset_anchor, inject_drop_table, write_replacement_schema

__all__ = [
    'normalize_schema',
    'schema_changed',
    'find_charset_anchor',
    'inject_drop_table',
    'write_replacement_schema',
]
