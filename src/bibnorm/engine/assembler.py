"""Entry assembly.

Turns raw entries into read-only BibEntry records: macros are resolved in
every field, name-list fields are parsed into Authors, and the title yields
the sort key and the normalized title.
"""

import time
import warnings
from collections.abc import Iterable, Mapping
from types import MappingProxyType
from typing import Any, NamedTuple

from bibnorm.audit.logger import AuditLogger
from bibnorm.engine.config import AssemblyConfig, FieldSemantics
from bibnorm.errors import DuplicateFieldError, EntryError, MalformedBraceWarning
from bibnorm.macros import resolve
from bibnorm.models.records import BibEntry, EntryFieldValue
from bibnorm.models.values import FieldValue, flatten_preserving_braces
from bibnorm.normalize import change_case, parse_authors, purify
from bibnorm.parse.database import RawEntry
from bibnorm.parse.raw import parse_field_value

__all__ = ["AssemblyResult", "assemble", "assemble_entries"]

STAGE_NAME = "assemble"


class AssemblyResult(NamedTuple):
    """Result of assembling a batch of entries.

    Supports tuple unpacking: ``entries, warnings, errors = assemble_entries(...)``.

    Attributes
    ----------
    entries : list[BibEntry]
        Assembled entries in input order.
    warnings : list[str]
        Non-fatal messages (brace fallbacks, dropped fields).
    errors : list[str]
        Entries that could not be assembled.
    """

    entries: list[BibEntry]
    warnings: list[str]
    errors: list[str]


def assemble(
    entry_type: str,
    entry_id: str,
    raw_fields: Mapping[str, Any],
    macros: Mapping[str, FieldValue],
    config: AssemblyConfig | None = None,
) -> BibEntry:
    """Assemble one entry from its raw fields.

    Parameters
    ----------
    entry_type : str
        Entry type tag (case-insensitive).
    entry_id : str
        Citation key.
    raw_fields : Mapping[str, Any]
        Field values by name, either FieldValue trees or raw lexer nodes.
    macros : Mapping[str, FieldValue]
        Resolved macro definitions; read only.
    config : AssemblyConfig | None, optional
        Field semantics and error policy, by default ``AssemblyConfig()``.

    Returns
    -------
    BibEntry
        Read-only entry. ``sort_key`` and ``normalized_title`` are empty
        only when the entry has no title field.

    Raises
    ------
    UnknownMacroError, CyclicMacroError
        In strict mode, annotated with the field name and entry id.
    DuplicateFieldError
        In strict mode, if two field names differ only in case. In lenient
        mode the first spelling wins and the duplicate is reported in
        ``errors``.
    FieldValueError
        If a raw field node is malformed.
    """
    if config is None:
        config = AssemblyConfig()

    fields: dict[str, EntryFieldValue] = {}
    errors: list[str] = []
    title: FieldValue | None = None
    spelled: dict[str, str] = {}

    for name, raw in raw_fields.items():
        key = name.lower()
        value = raw if isinstance(raw, FieldValue) else parse_field_value(raw)

        try:
            if key in spelled:
                raise DuplicateFieldError(key, (spelled[key], name))
            spelled[key] = name
            resolved = resolve(value, macros)
        except EntryError as e:
            e.field = key
            e.entry_id = entry_id
            if config.strict:
                raise
            errors.append(str(e))
            continue

        semantics = config.semantics_for(key)
        if semantics is FieldSemantics.AUTHORS:
            fields[key] = parse_authors(flatten_preserving_braces(resolved))
        else:
            fields[key] = resolved
            if semantics is FieldSemantics.TITLE:
                title = resolved

    sort_key = ""
    normalized_title = ""
    if title is not None:
        title_text = flatten_preserving_braces(title)
        sort_key = purify(title_text)
        normalized_title = change_case(title_text)

    return BibEntry(
        type=entry_type.lower(),
        id=entry_id,
        fields=MappingProxyType(fields),
        sort_key=sort_key,
        normalized_title=normalized_title,
        errors=tuple(errors),
    )


def assemble_entries(
    raw_entries: Iterable[RawEntry],
    macros: Mapping[str, FieldValue],
    config: AssemblyConfig | None = None,
    audit_logger: AuditLogger | None = None,
) -> AssemblyResult:
    """Assemble a batch of entries, isolating failures per entry.

    Parameters
    ----------
    raw_entries : Iterable[RawEntry]
        Entries with parsed, unresolved fields.
    macros : Mapping[str, FieldValue]
        Resolved macro definitions shared by all entries.
    config : AssemblyConfig | None, optional
        Assembly configuration, by default ``AssemblyConfig()``.
    audit_logger : AuditLogger | None, optional
        Event log. If None, no events are written.

    Returns
    -------
    AssemblyResult
        Assembled entries plus warning and error messages. An entry whose
        assembly raises is reported in ``errors`` and skipped.

    Notes
    -----
    Brace warnings are captured with ``warnings.catch_warnings``, which
    swaps the process-wide warning filters for each entry. Call this from
    one thread at a time. To assemble entries in parallel, call
    ``assemble`` per entry instead; it leaves the filters alone and
    ``MalformedBraceWarning`` reaches the caller unchanged.
    """
    if config is None:
        config = AssemblyConfig()

    raw_entries = list(raw_entries)
    entries: list[BibEntry] = []
    warning_messages: list[str] = []
    error_messages: list[str] = []

    start = time.perf_counter()
    if audit_logger:
        audit_logger.stage_started(STAGE_NAME, expected_entries=len(raw_entries))

    for raw in raw_entries:
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always", MalformedBraceWarning)
            try:
                entry = assemble(raw.type, raw.id, raw.fields, macros, config)
            except EntryError as e:
                error_messages.append(str(e))
                if audit_logger:
                    audit_logger.error(type(e).__name__, str(e), entry_id=raw.id)
                continue

        for w in caught:
            if issubclass(w.category, MalformedBraceWarning):
                warning_messages.append(f"Entry '{raw.id}': {w.message}")
                if audit_logger:
                    audit_logger.malformed_braces(entry_id=raw.id, message=str(w.message))
            else:
                warnings.warn_explicit(w.message, w.category, w.filename, w.lineno)

        for message in entry.errors:
            warning_messages.append(message)
            if audit_logger:
                audit_logger.field_unresolved(entry_id=entry.id, message=message)

        if audit_logger:
            audit_logger.entry_assembled(entry_id=entry.id, field_count=len(entry.fields))
        entries.append(entry)

    if audit_logger:
        audit_logger.stage_finished(
            STAGE_NAME,
            duration_seconds=time.perf_counter() - start,
            counters={
                "entries_in": len(raw_entries),
                "entries_out": len(entries),
                "entries_failed": len(error_messages),
                "warnings": len(warning_messages),
            },
        )

    return AssemblyResult(entries, warning_messages, error_messages)
