"""Assembly configuration."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

__all__ = ["FieldSemantics", "AssemblyConfig", "DEFAULT_FIELD_SEMANTICS"]


class FieldSemantics(StrEnum):
    """How the assembler treats a field beyond macro resolution.

    Attributes
    ----------
    PLAIN : str
        Resolved value is stored as is.
    AUTHORS : str
        Resolved text is parsed into an Authors name list.
    TITLE : str
        Resolved value is stored and drives the sort key and normalized title.
    """

    PLAIN = "plain"
    AUTHORS = "authors"
    TITLE = "title"


DEFAULT_FIELD_SEMANTICS: dict[str, FieldSemantics] = {
    "author": FieldSemantics.AUTHORS,
    "title": FieldSemantics.TITLE,
}


@dataclass
class AssemblyConfig:
    """Configuration for entry assembly.

    Attributes
    ----------
    strict : bool
        If True, the first macro error aborts the entry. If False, the
        failing field is dropped and reported in ``BibEntry.errors``.
    field_semantics : dict[str, FieldSemantics]
        Known field semantics by field name; unlisted fields are PLAIN.
        At most one field may have TITLE semantics.
    """

    strict: bool = True
    field_semantics: dict[str, FieldSemantics] = field(
        default_factory=lambda: dict(DEFAULT_FIELD_SEMANTICS)
    )

    def __post_init__(self) -> None:
        """Normalize field names and validate."""
        normalized: dict[str, FieldSemantics] = {}
        for name, semantics in self.field_semantics.items():
            normalized[name.lower()] = FieldSemantics(semantics)
        self.field_semantics = normalized

        titles = [name for name, s in normalized.items() if s is FieldSemantics.TITLE]
        if len(titles) > 1:
            raise ValueError(f"At most one title field is allowed, got {sorted(titles)}")

    @classmethod
    def with_name_lists(cls, *names: str, strict: bool = True) -> "AssemblyConfig":
        """Build a config where extra fields (e.g. ``editor``) are name lists."""
        semantics: Mapping[str, FieldSemantics] = {
            **DEFAULT_FIELD_SEMANTICS,
            **{name: FieldSemantics.AUTHORS for name in names},
        }
        return cls(strict=strict, field_semantics=dict(semantics))

    def semantics_for(self, field_name: str) -> FieldSemantics:
        """Return the semantics of a field, PLAIN when unlisted."""
        return self.field_semantics.get(field_name.lower(), FieldSemantics.PLAIN)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "strict": self.strict,
            "field_semantics": {name: str(s) for name, s in self.field_semantics.items()},
        }
