"""Field value model.

A field value is a small recursive tree: literal text, numbers, macro
references, and three kinds of sequence nodes (brace groups, delimited
strings and ``#`` concatenations). Nodes are immutable and children keep
source order.
"""

from dataclasses import dataclass
from typing import Any

from bibnorm.errors import FieldValueError

__all__ = [
    "Text",
    "Number",
    "MacroRef",
    "Braced",
    "Quoted",
    "Concat",
    "FieldValue",
    "flatten_preserving_braces",
    "flatten_plain",
    "contains_macro_refs",
    "field_value_to_raw",
]


@dataclass(frozen=True, slots=True)
class Text:
    """Literal text leaf."""

    text: str


@dataclass(frozen=True, slots=True)
class Number:
    """Bare numeric literal (e.g. ``year = 2004``)."""

    value: int | float


@dataclass(frozen=True, slots=True)
class MacroRef:
    """Reference to an ``@string`` macro by name."""

    name: str


@dataclass(frozen=True, slots=True)
class Braced:
    """Brace group inside a value; adds one level of brace depth."""

    items: tuple["FieldValue", ...]


@dataclass(frozen=True, slots=True)
class Quoted:
    """Delimited string value.

    Covers both ``"..."`` and outermost ``{...}`` field delimiters, which
    contribute no brace depth.
    """

    items: tuple["FieldValue", ...]


@dataclass(frozen=True, slots=True)
class Concat:
    """Concatenation of values joined with ``#``."""

    items: tuple["FieldValue", ...]


FieldValue = Text | Number | MacroRef | Braced | Quoted | Concat


def _format_number(value: int | float) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _flatten(value: FieldValue, keep_braces: bool) -> str:
    match value:
        case Text(text):
            if keep_braces:
                return text
            return text.replace("{", "").replace("}", "")
        case Number(number):
            return _format_number(number)
        case MacroRef(name):
            raise FieldValueError(f"Cannot flatten unresolved macro reference '{name}'")
        case Braced(items):
            inner = "".join(_flatten(item, keep_braces) for item in items)
            return "{" + inner + "}" if keep_braces else inner
        case Quoted(items) | Concat(items):
            return "".join(_flatten(item, keep_braces) for item in items)
        case _:
            raise FieldValueError(f"Not a field value: {value!r}")


def flatten_preserving_braces(value: FieldValue) -> str:
    """Flatten a resolved value to text, keeping inner brace groups.

    Parameters
    ----------
    value : FieldValue
        Resolved field value (no macro references).

    Returns
    -------
    str
        Text with ``{``/``}`` marking each Braced group.

    Raises
    ------
    FieldValueError
        If the tree still contains a macro reference.
    """
    return _flatten(value, keep_braces=True)


def flatten_plain(value: FieldValue) -> str:
    """Flatten a resolved value to display text without any brace characters.

    Parameters
    ----------
    value : FieldValue
        Resolved field value (no macro references).

    Returns
    -------
    str
        Concatenated leaf text, braces removed.

    Raises
    ------
    FieldValueError
        If the tree still contains a macro reference.
    """
    return _flatten(value, keep_braces=False)


def contains_macro_refs(value: FieldValue) -> bool:
    """Return True if any node in the tree is a macro reference."""
    match value:
        case MacroRef():
            return True
        case Braced(items) | Quoted(items) | Concat(items):
            return any(contains_macro_refs(item) for item in items)
        case _:
            return False


def field_value_to_raw(value: FieldValue) -> Any:
    """Convert a field value tree back to the raw JSON-compatible node form.

    Parameters
    ----------
    value : FieldValue
        Field value tree.

    Returns
    -------
    Any
        ``str`` for text, ``int``/``float`` for numbers, or a dict node.
    """
    match value:
        case Text(text):
            return text
        case Number(number):
            return number
        case MacroRef(name):
            return {"type": "macro", "name": name}
        case Braced(items):
            return {"type": "braced", "data": [field_value_to_raw(i) for i in items]}
        case Quoted(items):
            return {"type": "quoted", "data": [field_value_to_raw(i) for i in items]}
        case Concat(items):
            return {"type": "concat", "data": [field_value_to_raw(i) for i in items]}
        case _:
            raise FieldValueError(f"Not a field value: {value!r}")
