"""Case-insensitive macro table for ``@string`` definitions."""

from collections.abc import Iterator, Mapping

from bibnorm.macros.resolver import resolve
from bibnorm.models.values import FieldValue, Text

__all__ = ["MacroTable", "MONTH_MACROS"]

MONTH_MACROS: dict[str, FieldValue] = {
    "jan": Text("January"),
    "feb": Text("February"),
    "mar": Text("March"),
    "apr": Text("April"),
    "may": Text("May"),
    "jun": Text("June"),
    "jul": Text("July"),
    "aug": Text("August"),
    "sep": Text("September"),
    "oct": Text("October"),
    "nov": Text("November"),
    "dec": Text("December"),
}


class MacroTable(Mapping[str, FieldValue]):
    """Read-only mapping from macro name to field value.

    Lookups ignore case. Values are expected to be fully resolved; the
    resolver still guards against references left inside them.
    """

    def __init__(self, definitions: Mapping[str, FieldValue] | None = None) -> None:
        """Initialize the table.

        Parameters
        ----------
        definitions : Mapping[str, FieldValue] | None, optional
            Macro values by name. Later names override earlier ones that
            differ only in case.
        """
        self._macros: dict[str, FieldValue] = {}
        for name, value in (definitions or {}).items():
            self._macros[name.lower()] = value

    @classmethod
    def build(
        cls,
        definitions: Mapping[str, FieldValue],
        base: Mapping[str, FieldValue] | None = None,
    ) -> "MacroTable":
        """Build a table from ``@string`` definitions in definition order.

        Each definition is resolved against ``base`` and the definitions
        before it, so a definition may use earlier macros but never later
        ones.

        Parameters
        ----------
        definitions : Mapping[str, FieldValue]
            Unresolved definitions in source order.
        base : Mapping[str, FieldValue] | None, optional
            Predefined macros (e.g. ``MONTH_MACROS``).

        Returns
        -------
        MacroTable
            Table of resolved values.

        Raises
        ------
        UnknownMacroError
            If a definition references an undefined or later macro.
        """
        table = cls(base)
        for name, value in definitions.items():
            table = table.with_macro(name, resolve(value, table))
        return table

    @classmethod
    def with_month_macros(cls, definitions: Mapping[str, FieldValue] | None = None) -> "MacroTable":
        """Build a table preloaded with the standard month abbreviations."""
        return cls.build(definitions or {}, base=MONTH_MACROS)

    def with_macro(self, name: str, value: FieldValue) -> "MacroTable":
        """Return a new table with one macro added or replaced."""
        merged = dict(self._macros)
        merged[name.lower()] = value
        return MacroTable(merged)

    def __getitem__(self, name: str) -> FieldValue:
        return self._macros[name.lower()]

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self._macros

    def __iter__(self) -> Iterator[str]:
        return iter(self._macros)

    def __len__(self) -> int:
        return len(self._macros)

    def __repr__(self) -> str:
        return f"MacroTable({sorted(self._macros)!r})"
