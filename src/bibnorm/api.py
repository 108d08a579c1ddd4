"""Public API for assembling bibliographic entries.

This module provides the main public API for bibnorm, enabling:
- Loading raw databases produced by the lexer
- Assembling every entry against the database's macro table
- Exporting assembled entries to JSONL format
"""

import json
from collections.abc import Iterable
from pathlib import Path

from bibnorm.audit.logger import AuditLogger
from bibnorm.engine import AssemblyConfig, AssemblyResult, assemble_entries
from bibnorm.macros import MONTH_MACROS, MacroTable
from bibnorm.models import BibEntry
from bibnorm.parse import RawDatabase, read_database

__all__ = [
    "load_database",
    "build_macro_table",
    "assemble_file",
    "write_jsonl",
]


def load_database(path: str | Path) -> RawDatabase:
    """Load a raw database JSON file.

    Parameters
    ----------
    path : str | Path
        Path to the lexer output.

    Returns
    -------
    RawDatabase
        Macro definitions and entries, parsed but unresolved.

    Raises
    ------
    FileNotFoundError
        If the file does not exist.
    DatabaseFormatError
        If the file is not a valid raw database.
    """
    file_path = Path(path)

    if not file_path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    return read_database(file_path)


def build_macro_table(database: RawDatabase, *, month_macros: bool = True) -> MacroTable:
    """Resolve a database's ``@string`` definitions into a macro table.

    Parameters
    ----------
    database : RawDatabase
        Parsed raw database.
    month_macros : bool, optional
        Predefine ``jan`` .. ``dec``, by default True.

    Returns
    -------
    MacroTable
        Resolved, read-only macro table.

    Raises
    ------
    UnknownMacroError
        If a definition references an undefined macro.
    """
    return MacroTable.build(database.strings, base=MONTH_MACROS if month_macros else None)


def assemble_file(
    path: str | Path,
    *,
    config: AssemblyConfig | None = None,
    audit_logger: AuditLogger | None = None,
    month_macros: bool = True,
) -> AssemblyResult:
    """Load a raw database file and assemble all of its entries.

    Parameters
    ----------
    path : str | Path
        Path to the lexer output.
    config : AssemblyConfig | None, optional
        Assembly configuration, by default ``AssemblyConfig()``.
    audit_logger : AuditLogger | None, optional
        Event log for the assembly stage.
    month_macros : bool, optional
        Predefine the month macros, by default True.

    Returns
    -------
    AssemblyResult
        Entries, warnings, and errors.

    Examples
    --------
        >>> from bibnorm import assemble_file
        >>> entries, warnings, errors = assemble_file("library.json")
        >>> for entry in sorted(entries, key=lambda e: e.sort_key):
        ...     print(entry.id, entry.normalized_title)
    """
    database = load_database(path)
    macros = build_macro_table(database, month_macros=month_macros)
    return assemble_entries(database.entries, macros, config=config, audit_logger=audit_logger)


def write_jsonl(entries: Iterable[BibEntry], path: str | Path) -> int:
    """Write assembled entries to a JSONL file.

    Parameters
    ----------
    entries : Iterable[BibEntry]
        Entries to write.
    path : str | Path
        Output file path; parent directories are created.

    Returns
    -------
    int
        Number of entries written.
    """
    output_path = Path(path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    count = 0
    with output_path.open("w", encoding="utf-8") as f:
        for entry in entries:
            json.dump(entry.to_dict(), f, ensure_ascii=False, separators=(",", ":"))
            f.write("\n")
            count += 1
    return count
