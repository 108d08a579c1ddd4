"""Macro reference resolution."""

from collections.abc import Mapping

from bibnorm.errors import CyclicMacroError, UnknownMacroError
from bibnorm.models.values import Braced, Concat, FieldValue, MacroRef, Quoted

__all__ = ["resolve"]


def resolve(value: FieldValue, table: Mapping[str, FieldValue]) -> FieldValue:
    """Replace every macro reference in a tree with its definition.

    Parameters
    ----------
    value : FieldValue
        Field value that may contain macro references.
    table : Mapping[str, FieldValue]
        Macro definitions. A ``MacroTable`` gives case-insensitive lookup;
        plain dicts are looked up by the lower-cased name.

    Returns
    -------
    FieldValue
        New macro-free tree; the input is left untouched.

    Raises
    ------
    UnknownMacroError
        If a referenced name is not in the table.
    CyclicMacroError
        If a definition refers back to a macro still being resolved.
    """
    return _resolve(value, table, ())


def _lookup(name: str, table: Mapping[str, FieldValue]) -> FieldValue:
    if name in table:
        return table[name]
    if name.lower() in table:
        return table[name.lower()]
    raise UnknownMacroError(name)


def _resolve(
    value: FieldValue,
    table: Mapping[str, FieldValue],
    active: tuple[str, ...],
) -> FieldValue:
    match value:
        case MacroRef(name):
            key = name.lower()
            if key in active:
                raise CyclicMacroError(name, chain=(*active, key))
            return _resolve(_lookup(name, table), table, (*active, key))
        case Braced(items):
            return Braced(tuple(_resolve(item, table, active) for item in items))
        case Quoted(items):
            return Quoted(tuple(_resolve(item, table, active) for item in items))
        case Concat(items):
            return Concat(tuple(_resolve(item, table, active) for item in items))
        case _:
            return value
