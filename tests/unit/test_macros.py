"""Tests for macro tables and macro resolution."""

import pytest

from bibnorm.errors import CyclicMacroError, UnknownMacroError
from bibnorm.macros import MONTH_MACROS, MacroTable, resolve
from bibnorm.models import Braced, Concat, MacroRef, Number, Quoted, Text


@pytest.mark.unit
def test_resolve_known_macro() -> None:
    """Test a macro reference is replaced by its definition."""
    table = MacroTable({"ieee": Text("IEEE")})

    assert resolve(MacroRef("ieee"), table) == Text("IEEE")


@pytest.mark.unit
def test_resolve_unknown_macro_raises() -> None:
    """Test a missing macro is an error, not an empty value."""
    table = MacroTable({"ieee": Text("IEEE")})

    with pytest.raises(UnknownMacroError) as exc_info:
        resolve(MacroRef("acm"), table)

    assert exc_info.value.name == "acm"
    assert "unknown macro 'acm'" in str(exc_info.value)


@pytest.mark.unit
def test_resolve_is_case_insensitive(macros: MacroTable) -> None:
    """Test macro names match regardless of case."""
    assert resolve(MacroRef("IEEE"), macros) == Text("IEEE")
    assert "Ieee" in macros
    assert macros["JAN"] == Text("January")


@pytest.mark.unit
def test_resolve_plain_dict_by_lowercase_name() -> None:
    """Test plain mappings are looked up by exact then lower-cased name."""
    assert resolve(MacroRef("ACM"), {"acm": Text("ACM")}) == Text("ACM")


@pytest.mark.unit
def test_resolve_nested_tree_returns_new_tree(macros: MacroTable) -> None:
    """Test resolution rebuilds nested sequences and leaves the input untouched."""
    value = Concat((MacroRef("jan"), Quoted((Text(" "), Braced((MacroRef("ieee"),)))), Number(3)))

    resolved = resolve(value, macros)

    assert resolved == Concat(
        (Text("January"), Quoted((Text(" "), Braced((Text("IEEE"),)))), Number(3))
    )
    assert value.items[0] == MacroRef("jan")


@pytest.mark.unit
def test_resolve_detects_cycles() -> None:
    """Test self-referencing definitions raise instead of looping."""
    table = MacroTable({"a": Concat((Text("x"), MacroRef("b"))), "b": MacroRef("A")})

    with pytest.raises(CyclicMacroError) as exc_info:
        resolve(MacroRef("a"), table)

    assert exc_info.value.chain == ("a", "b", "a")
    assert "a -> b -> a" in str(exc_info.value)


@pytest.mark.unit
def test_resolve_follows_unresolved_definitions() -> None:
    """Test references left inside definitions are resolved transitively."""
    table = MacroTable({"full": Concat((MacroRef("short"), Text("!"))), "short": Text("hi")})

    assert resolve(MacroRef("full"), table) == Concat((Text("hi"), Text("!")))


@pytest.mark.unit
def test_same_macro_twice_is_not_a_cycle(macros: MacroTable) -> None:
    """Test sibling references to one macro are fine."""
    value = Concat((MacroRef("ieee"), Text("/"), MacroRef("ieee")))

    assert resolve(value, macros) == Concat((Text("IEEE"), Text("/"), Text("IEEE")))


@pytest.mark.unit
def test_build_resolves_in_definition_order() -> None:
    """Test definitions may use earlier macros."""
    table = MacroTable.build(
        {
            "ieee": Text("IEEE"),
            "tpami": Concat((MacroRef("ieee"), Text(" TPAMI"))),
        }
    )

    assert table["tpami"] == Concat((Text("IEEE"), Text(" TPAMI")))


@pytest.mark.unit
def test_build_rejects_forward_reference() -> None:
    """Test definitions may not use later macros."""
    with pytest.raises(UnknownMacroError):
        MacroTable.build({"first": MacroRef("second"), "second": Text("2")})


@pytest.mark.unit
def test_month_macros_can_be_overridden() -> None:
    """Test user definitions replace predefined month names."""
    table = MacroTable.with_month_macros({"JAN": Text("Jan.")})

    assert table["jan"] == Text("Jan.")
    assert table["feb"] == MONTH_MACROS["feb"]
    assert len(table) == 12


@pytest.mark.unit
def test_table_is_read_only(macros: MacroTable) -> None:
    """Test the table exposes no mutation and with_macro copies."""
    extended = macros.with_macro("acm", Text("ACM"))

    assert "acm" in extended
    assert "acm" not in macros
    with pytest.raises(TypeError):
        macros["acm"] = Text("ACM")  # type: ignore[index]
