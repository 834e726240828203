"""
Metadata record parsing and comparison.

This submodule turns the line-oriented metadata produced by the snapshot
and by the live instance into comparable values:
- MetadataRecord: one subset line, compared on the raw line
- MetadataSet: ordered collection keyed by subset identifier
- parse_metadata: blob to MetadataSet, dropping blanks and the NULL sentinel
"""

from .records import NO_DATA_SENTINEL, MetadataRecord, MetadataSet, parse_metadata

__all__ = [
    'MetadataRecord',
    'MetadataSet',
    'parse_metadata',
    'NO_DATA_SENTINEL',
]
