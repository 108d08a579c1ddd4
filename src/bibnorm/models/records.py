"""Assembled entry records.

This module defines the read-only outputs of entry assembly: structured
person names, author lists, and the assembled bibliographic entry.
"""

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any

from bibnorm.models.values import FieldValue, Number, field_value_to_raw, flatten_plain

__all__ = ["PersonName", "Authors", "BibEntry", "EntryFieldValue"]


@dataclass(frozen=True)
class PersonName:
    """One person from a name list, split into the four name parts.

    Attributes
    ----------
    first : str
        Given name(s).
    von : str
        Lowercase particle(s) such as "de" or "van der".
    last : str
        Family name(s).
    jr : str
        Lineage suffix such as "Jr." or "III".
    raw : str
        The person's text as it appeared in the name list.
    """

    first: str = ""
    von: str = ""
    last: str = ""
    jr: str = ""
    raw: str = ""

    def to_bibtex(self) -> str:
        """Re-assemble the name in "von Last, Jr, First" order.

        Returns
        -------
        str
            Name text that parses back into the same four parts.
        """
        head = " ".join(part for part in (self.von, self.last) if part)
        if self.jr:
            return f"{head}, {self.jr}, {self.first}"
        if self.first:
            return f"{head}, {self.first}"
        return head

    def to_dict(self) -> dict[str, str]:
        """Convert to dictionary."""
        return {"first": self.first, "von": self.von, "last": self.last, "jr": self.jr}


@dataclass(frozen=True)
class Authors:
    """Ordered sequence of person names from a name-list field.

    An empty Authors is a valid value (the field was present but named
    nobody); an absent field is represented by ``None`` on the entry.
    """

    persons: tuple[PersonName, ...] = ()

    def __iter__(self) -> Iterator[PersonName]:
        return iter(self.persons)

    def __len__(self) -> int:
        return len(self.persons)

    def __getitem__(self, index: int) -> PersonName:
        return self.persons[index]

    def to_bibtex(self) -> str:
        """Join the persons back into a name list separated by `` and ``."""
        return " and ".join(person.to_bibtex() for person in self.persons)


EntryFieldValue = FieldValue | Authors


@dataclass(frozen=True)
class BibEntry:
    """Assembled, read-only bibliographic entry.

    Attributes
    ----------
    type : str
        Entry type tag in lower case (e.g. "article").
    id : str
        Citation key.
    fields : Mapping[str, EntryFieldValue]
        Resolved fields by lower-case name. Name-list fields hold Authors,
        all others hold macro-free field values.
    sort_key : str
        Purified title used to order entries.
    normalized_title : str
        Title with title-style case folding applied.
    errors : tuple[str, ...]
        Fields dropped during lenient assembly, one message each.
    """

    type: str
    id: str
    fields: Mapping[str, EntryFieldValue]
    sort_key: str = ""
    normalized_title: str = ""
    errors: tuple[str, ...] = field(default=())

    def get_field(self, key: str) -> EntryFieldValue | None:
        """Return the resolved field value, or None if absent."""
        return self.fields.get(key.lower())

    def get_field_as_string(self, key: str) -> str | int | float | None:
        """Return the field in display form.

        Numbers are returned as numbers, name lists in "von Last, First"
        form joined with `` and ``, and everything else as plain text.
        """
        value = self.get_field(key)
        if value is None:
            return None
        if isinstance(value, Authors):
            return value.to_bibtex()
        if isinstance(value, Number):
            return value.value
        return flatten_plain(value)

    @property
    def authors(self) -> Authors | None:
        """Parsed ``author`` field, or None when the entry has no author field."""
        value = self.fields.get("author")
        if value is None:
            return None
        if not isinstance(value, Authors):
            raise TypeError(f"Field 'author' of entry '{self.id}' is not a name list")
        return value

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        fields_out: dict[str, Any] = {}
        for name, value in self.fields.items():
            if isinstance(value, Authors):
                fields_out[name] = [person.to_dict() for person in value]
            else:
                fields_out[name] = field_value_to_raw(value)

        return {
            "type": self.type,
            "id": self.id,
            "fields": fields_out,
            "sort_key": self.sort_key,
            "normalized_title": self.normalized_title,
            "errors": list(self.errors),
        }
