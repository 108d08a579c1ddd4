"""Loading of raw databases produced by the external lexer.

A raw database is a JSON document holding ``@string`` definitions and
entries whose field values are raw lexer nodes::

    {
      "strings": {"ieee": "IEEE"},
      "entries": [
        {"type": "article", "id": "knuth84",
         "fields": {"title": {"type": "bracedstringwrapper", "data": ["Literate"]}}}
      ]
    }
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import jsonschema

from bibnorm.errors import DatabaseFormatError
from bibnorm.models.values import FieldValue
from bibnorm.parse.raw import parse_field_value

__all__ = ["RawEntry", "RawDatabase", "RAW_DATABASE_SCHEMA", "parse_database", "read_database"]

RAW_DATABASE_SCHEMA: dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "title": "bibnorm raw database",
    "type": "object",
    "required": ["entries"],
    "additionalProperties": False,
    "properties": {
        "strings": {
            "type": "object",
            "additionalProperties": {"$ref": "#/$defs/node"},
        },
        "entries": {
            "type": "array",
            "items": {
                "type": "object",
                "required": ["type", "id", "fields"],
                "properties": {
                    "type": {"type": "string", "minLength": 1},
                    "id": {"type": "string"},
                    "fields": {
                        "type": "object",
                        "additionalProperties": {"$ref": "#/$defs/node"},
                    },
                },
            },
        },
    },
    "$defs": {
        "node": {
            "oneOf": [
                {"type": "string"},
                {"type": "number"},
                {
                    "type": "object",
                    "required": ["type", "data"],
                    "properties": {
                        "type": {
                            "enum": [
                                "braced",
                                "quoted",
                                "quotedstringwrapper",
                                "bracedstringwrapper",
                                "concat",
                            ]
                        },
                        "data": {"type": "array", "items": {"$ref": "#/$defs/node"}},
                    },
                },
                {
                    "type": "object",
                    "required": ["type", "name"],
                    "properties": {
                        "type": {"enum": ["macro", "stringref"]},
                        "name": {"type": "string", "minLength": 1},
                    },
                },
                {
                    "type": "object",
                    "required": ["type", "value"],
                    "properties": {
                        "type": {"const": "number"},
                        "value": {"type": "number"},
                    },
                },
            ]
        }
    },
}


@dataclass(frozen=True)
class RawEntry:
    """Entry as delivered by the lexer, with parsed but unresolved fields.

    Attributes
    ----------
    type : str
        Entry type tag.
    id : str
        Citation key.
    fields : dict[str, FieldValue]
        Field values in source order, macros unresolved.
    """

    type: str
    id: str
    fields: dict[str, FieldValue]


@dataclass(frozen=True)
class RawDatabase:
    """Parsed raw database.

    Attributes
    ----------
    strings : dict[str, FieldValue]
        ``@string`` definitions in definition order, unresolved.
    entries : list[RawEntry]
        Entries in source order.
    """

    strings: dict[str, FieldValue] = field(default_factory=dict)
    entries: list[RawEntry] = field(default_factory=list)


def parse_database(document: Any, source: str | None = None) -> RawDatabase:
    """Validate and parse a decoded raw database document.

    Parameters
    ----------
    document : Any
        Decoded JSON document.
    source : str | None, optional
        Name of the originating file, used in error messages.

    Returns
    -------
    RawDatabase
        Definitions and entries as field value trees.

    Raises
    ------
    DatabaseFormatError
        If the document does not match ``RAW_DATABASE_SCHEMA``.
    """
    try:
        jsonschema.validate(instance=document, schema=RAW_DATABASE_SCHEMA)
    except jsonschema.ValidationError as e:
        where = "/".join(str(p) for p in e.absolute_path) or "<root>"
        raise DatabaseFormatError(f"Invalid raw database at {where}: {e.message}", file=source) from e

    strings = {
        name: parse_field_value(node) for name, node in document.get("strings", {}).items()
    }
    entries = [
        RawEntry(
            type=item["type"],
            id=item["id"],
            fields={name: parse_field_value(node) for name, node in item["fields"].items()},
        )
        for item in document["entries"]
    ]
    return RawDatabase(strings=strings, entries=entries)


def read_database(path: Path) -> RawDatabase:
    """Read and parse a raw database JSON file.

    Parameters
    ----------
    path : Path
        Path to the JSON document.

    Returns
    -------
    RawDatabase
        Parsed database.

    Raises
    ------
    DatabaseFormatError
        If the file is not valid JSON or fails schema validation.
    """
    with path.open(encoding="utf-8") as f:
        try:
            document = json.load(f)
        except json.JSONDecodeError as e:
            raise DatabaseFormatError(f"Invalid JSON in {path.name}: {e}", file=str(path)) from e
    return parse_database(document, source=str(path))
