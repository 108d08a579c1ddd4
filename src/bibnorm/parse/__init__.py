"""Structural parsing of lexer output.

Main entry points:
- parse_field_value: Convert one raw node into a field value tree
- read_database: Load a raw database JSON file
"""

from bibnorm.parse.database import (
    RAW_DATABASE_SCHEMA,
    RawDatabase,
    RawEntry,
    parse_database,
    read_database,
)
from bibnorm.parse.raw import parse_field_value

__all__ = [
    "parse_field_value",
    "parse_database",
    "read_database",
    "RawDatabase",
    "RawEntry",
    "RAW_DATABASE_SCHEMA",
]
