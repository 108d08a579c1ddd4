"""Shared data types for bibnorm.

- Field value trees → bibnorm.models.values
- Assembled records → bibnorm.models.records
"""

from bibnorm.models.records import Authors, BibEntry, EntryFieldValue, PersonName
from bibnorm.models.values import (
    Braced,
    Concat,
    FieldValue,
    MacroRef,
    Number,
    Quoted,
    Text,
    contains_macro_refs,
    field_value_to_raw,
    flatten_plain,
    flatten_preserving_braces,
)

__all__ = [
    # Field values
    "FieldValue",
    "Text",
    "Number",
    "MacroRef",
    "Braced",
    "Quoted",
    "Concat",
    "flatten_plain",
    "flatten_preserving_braces",
    "contains_macro_refs",
    "field_value_to_raw",
    # Records
    "PersonName",
    "Authors",
    "BibEntry",
    "EntryFieldValue",
]
