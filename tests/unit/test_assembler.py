"""Tests for entry assembly."""

import warnings
from collections.abc import Callable

import pytest

from bibnorm.engine import AssemblyConfig, FieldSemantics, assemble, assemble_entries
from bibnorm.errors import (
    CyclicMacroError,
    DuplicateFieldError,
    MalformedBraceWarning,
    UnknownMacroError,
)
from bibnorm.macros import MacroTable
from bibnorm.models import Authors, Braced, Concat, MacroRef, Number, Quoted, Text
from bibnorm.parse import RawEntry


@pytest.mark.unit
def test_assemble_resolves_and_derives(macros: MacroTable) -> None:
    """Test every field is resolved and the title drives the derived strings."""
    entry = assemble(
        "Article",
        "knuth84",
        {
            "Title": Quoted((Text("Literate Programming in {\\TeX}"),)),
            "author": Quoted((Text("Donald E. Knuth"),)),
            "journal": Concat((MacroRef("ieee"), Text(" Journal"))),
            "year": Number(1984),
        },
        macros,
    )

    assert entry.type == "article"
    assert entry.id == "knuth84"
    assert set(entry.fields) == {"title", "author", "journal", "year"}
    assert entry.get_field("journal") == Concat((Text("IEEE"), Text(" Journal")))
    assert entry.sort_key == "LiterateProgramminginTeX"
    assert entry.normalized_title == "Literate programming in {\\TeX}"
    assert entry.authors is not None
    assert entry.authors[0].last == "Knuth"


@pytest.mark.unit
def test_assemble_accepts_raw_nodes(macros: MacroTable) -> None:
    """Test raw lexer nodes are parsed before resolution."""
    entry = assemble(
        "book",
        "b1",
        {
            "title": {
                "type": "bracedstringwrapper",
                "data": ["Bib", {"type": "braced", "data": ["\\TeX"]}],
            },
            "month": {"type": "macro", "name": "jan"},
        },
        macros,
    )

    assert entry.sort_key == "BibTeX"
    assert entry.normalized_title == "Bib{\\TeX}"
    assert entry.get_field_as_string("month") == "January"


@pytest.mark.unit
def test_assemble_without_title_has_empty_derived_strings(macros: MacroTable) -> None:
    """Test sort key and normalized title are empty only when there is no title."""
    entry = assemble("misc", "m1", {"note": Text("n")}, macros)

    assert entry.sort_key == ""
    assert entry.normalized_title == ""


@pytest.mark.unit
def test_absent_author_differs_from_empty_author(macros: MacroTable) -> None:
    """Test a missing author field is None while a blank one is empty Authors."""
    without = assemble("misc", "m1", {}, macros)
    blank = assemble("misc", "m2", {"author": Quoted((Text("  "),))}, macros)

    assert without.authors is None
    assert blank.authors == Authors(())


@pytest.mark.unit
def test_strict_assembly_reports_field_and_entry(macros: MacroTable) -> None:
    """Test macro errors carry the field name and entry id."""
    with pytest.raises(UnknownMacroError) as exc_info:
        assemble("article", "e1", {"publisher": MacroRef("acm")}, macros)

    err = exc_info.value
    assert err.field == "publisher"
    assert err.entry_id == "e1"
    assert str(err) == "entry 'e1', field 'publisher': unknown macro 'acm'"


@pytest.mark.unit
def test_lenient_assembly_isolates_failing_field(macros: MacroTable) -> None:
    """Test a failing field is dropped without touching other fields."""
    entry = assemble(
        "article",
        "e1",
        {"publisher": MacroRef("acm"), "journal": MacroRef("ieee")},
        macros,
        AssemblyConfig(strict=False),
    )

    assert "publisher" not in entry.fields
    assert entry.get_field("journal") == Text("IEEE")
    assert entry.errors == ("entry 'e1', field 'publisher': unknown macro 'acm'",)


@pytest.mark.unit
def test_fields_differing_only_in_case_are_rejected(macros: MacroTable) -> None:
    """Test a second spelling of a field name is an error, not a silent override."""
    fields = {"Title": Text("First Title"), "title": Text("Second Title")}

    with pytest.raises(DuplicateFieldError) as exc_info:
        assemble("article", "d1", fields, macros)

    err = exc_info.value
    assert err.field == "title"
    assert err.spellings == ("Title", "title")
    assert str(err) == "entry 'd1', field 'title': duplicate field, written as 'Title' and 'title'"


@pytest.mark.unit
def test_lenient_assembly_keeps_first_spelling_of_duplicate_field(macros: MacroTable) -> None:
    """Test lenient mode keeps the first value and reports the duplicate."""
    entry = assemble(
        "article",
        "d1",
        {"Title": Text("First Title"), "title": Text("Second Title")},
        macros,
        AssemblyConfig(strict=False),
    )

    assert entry.get_field("title") == Text("First Title")
    assert entry.sort_key == "FirstTitle"
    assert entry.errors == (
        "entry 'd1', field 'title': duplicate field, written as 'Title' and 'title'",
    )


@pytest.mark.unit
def test_assemble_entries_reports_duplicate_fields(macros: MacroTable) -> None:
    """Test a strict duplicate skips only the offending entry."""
    raw_entries = [
        RawEntry("article", "dup", {"YEAR": Number(1990), "year": Number(1991)}),
        RawEntry("article", "ok", {"year": Number(1992)}),
    ]

    result = assemble_entries(raw_entries, macros)

    assert [e.id for e in result.entries] == ["ok"]
    assert result.errors == [
        "entry 'dup', field 'year': duplicate field, written as 'YEAR' and 'year'"
    ]


@pytest.mark.unit
def test_cyclic_table_is_detected_during_assembly() -> None:
    """Test cyclic definitions surface as CyclicMacroError."""
    table = MacroTable({"a": MacroRef("b"), "b": MacroRef("a")})

    with pytest.raises(CyclicMacroError):
        assemble("misc", "c1", {"note": MacroRef("a")}, table)


@pytest.mark.unit
def test_entry_is_read_only(macros: MacroTable) -> None:
    """Test assembled entries and their field maps cannot be mutated."""
    entry = assemble("misc", "m1", {"note": Text("n")}, macros)

    with pytest.raises(AttributeError):
        entry.sort_key = "x"  # type: ignore[misc]
    with pytest.raises(TypeError):
        entry.fields["note"] = Text("changed")  # type: ignore[index]


@pytest.mark.unit
def test_configured_name_lists_and_title_field(macros: MacroTable) -> None:
    """Test field semantics come from configuration."""
    config = AssemblyConfig(
        field_semantics={
            "author": FieldSemantics.AUTHORS,
            "Editor": "authors",
            "booktitle": FieldSemantics.TITLE,
        }
    )

    entry = assemble(
        "inproceedings",
        "p1",
        {
            "editor": Text("Ada Lovelace and Charles Babbage"),
            "title": Text("Ignored For Sorting"),
            "booktitle": Text("Proceedings Of {IEEE}"),
        },
        macros,
        config,
    )

    editors = entry.get_field("editor")
    assert isinstance(editors, Authors)
    assert [p.last for p in editors] == ["Lovelace", "Babbage"]
    assert entry.get_field_as_string("editor") == "Lovelace, Ada and Babbage, Charles"
    assert entry.sort_key == "ProceedingsOfIEEE"
    assert entry.normalized_title == "Proceedings of {IEEE}"


@pytest.mark.unit
def test_config_validation_and_defaults() -> None:
    """Test config normalizes names and rejects two title fields."""
    config = AssemblyConfig.with_name_lists("EDITOR", strict=False)

    assert config.semantics_for("editor") is FieldSemantics.AUTHORS
    assert config.semantics_for("Title") is FieldSemantics.TITLE
    assert config.semantics_for("journal") is FieldSemantics.PLAIN
    assert config.to_dict()["strict"] is False

    with pytest.raises(ValueError, match="title"):
        AssemblyConfig(field_semantics={"title": "title", "booktitle": "title"})


@pytest.mark.unit
def test_get_field_as_string_forms(macros: MacroTable) -> None:
    """Test display forms for numbers, text, and missing fields."""
    entry = assemble(
        "article",
        "a1",
        {"year": Number(2001), "note": Quoted((Text("see "), Braced((Text("NASA"),))))},
        macros,
    )

    assert entry.get_field_as_string("year") == 2001
    assert entry.get_field_as_string("NOTE") == "see NASA"
    assert entry.get_field_as_string("pages") is None


@pytest.mark.unit
def test_to_dict_serializes_fields(macros: MacroTable) -> None:
    """Test the dictionary form carries resolved raw nodes and person parts."""
    entry = assemble(
        "article",
        "a1",
        {"author": Text("Smith, John"), "journal": MacroRef("ieee")},
        macros,
    )

    data = entry.to_dict()

    assert data["fields"]["journal"] == "IEEE"
    assert data["fields"]["author"] == [{"first": "John", "von": "", "last": "Smith", "jr": ""}]
    assert data["errors"] == []


@pytest.mark.unit
def test_assemble_entries_isolates_entry_failures(
    macros: MacroTable,
    make_raw_entry: Callable[..., RawEntry],
) -> None:
    """Test a failing entry is reported and the rest are assembled."""
    raw_entries = [
        make_raw_entry("ok1", title="First"),
        make_raw_entry("bad", journal=MacroRef("missing")),
        make_raw_entry("ok2", title="Second"),
    ]

    entries, warning_messages, errors = assemble_entries(raw_entries, macros)

    assert [e.id for e in entries] == ["ok1", "ok2"]
    assert warning_messages == []
    assert errors == ["entry 'bad', field 'journal': unknown macro 'missing'"]


@pytest.mark.unit
def test_assemble_entries_collects_brace_warnings(
    macros: MacroTable,
    make_raw_entry: Callable[..., RawEntry],
) -> None:
    """Test brace fallbacks become warning messages instead of escaping."""
    raw_entries = [make_raw_entry("w1", title="Broken {Title")]

    with warnings.catch_warnings():
        warnings.simplefilter("error", MalformedBraceWarning)
        result = assemble_entries(raw_entries, macros)

    assert len(result.entries) == 1
    assert result.entries[0].sort_key == "BrokenTitle"
    assert len(result.warnings) == 2
    assert all(w.startswith("Entry 'w1':") for w in result.warnings)


@pytest.mark.unit
def test_assemble_entries_restores_warning_filters(
    macros: MacroTable,
    make_raw_entry: Callable[..., RawEntry],
) -> None:
    """Test the batch leaves the process warning filters as it found them."""
    before = list(warnings.filters)

    assemble_entries([make_raw_entry("w1", title="Broken {Title")], macros)

    assert warnings.filters == before


@pytest.mark.unit
def test_single_entry_assembly_passes_brace_warnings_through(macros: MacroTable) -> None:
    """Test assemble itself does not capture brace warnings."""
    with pytest.warns(MalformedBraceWarning):
        entry = assemble("misc", "w1", {"title": Text("Broken {Title")}, macros)

    assert entry.sort_key == "BrokenTitle"
