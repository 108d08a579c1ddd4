"""Field-value resolution and text normalization for bibliographic entries.

This package provides:
- Data models (bibnorm.models): field value trees and assembled records
- Parsing (bibnorm.parse): lexer output to field value trees
- Macros (bibnorm.macros): ``@string`` tables and resolution
- Normalization (bibnorm.normalize): purify, change_case, name lists
- Engine (bibnorm.engine): entry assembly
- Audit (bibnorm.audit): JSONL event logging
- CLI (bibnorm.cli): command-line interface
- Public API (bibnorm.api): high-level convenience functions
"""

__version__ = "0.1.0"
__license__ = "MIT"

from bibnorm.api import assemble_file, build_macro_table, load_database, write_jsonl
from bibnorm.engine import AssemblyConfig, FieldSemantics, assemble
from bibnorm.errors import (
    CyclicMacroError,
    DuplicateFieldError,
    FieldValueError,
    MalformedBraceWarning,
    UnknownMacroError,
)
from bibnorm.macros import MacroTable, resolve
from bibnorm.models import Authors, BibEntry, PersonName
from bibnorm.normalize import change_case, parse_authors, purify
from bibnorm.parse import parse_field_value

__all__ = [
    "__version__",
    "__license__",
    "AssemblyConfig",
    "Authors",
    "BibEntry",
    "CyclicMacroError",
    "DuplicateFieldError",
    "FieldSemantics",
    "FieldValueError",
    "MacroTable",
    "MalformedBraceWarning",
    "PersonName",
    "UnknownMacroError",
    "assemble",
    "assemble_file",
    "build_macro_table",
    "change_case",
    "load_database",
    "parse_authors",
    "parse_field_value",
    "purify",
    "resolve",
    "write_jsonl",
]
