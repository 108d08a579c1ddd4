"""Conversion of lexer output into field value trees.

The lexer emits JSON-compatible nodes: strings, numbers, and dicts with a
``type`` tag. Parsing is purely structural; macros are not resolved here.
"""

from typing import Any

from bibnorm.errors import FieldValueError
from bibnorm.models.values import Braced, Concat, FieldValue, MacroRef, Number, Quoted, Text

__all__ = ["parse_field_value"]

_SEQUENCE_NODES: dict[str, type[Braced] | type[Quoted] | type[Concat]] = {
    "braced": Braced,
    "quoted": Quoted,
    "quotedstringwrapper": Quoted,
    "bracedstringwrapper": Quoted,
    "concat": Concat,
}

_MACRO_NODES = frozenset({"macro", "stringref"})


def parse_field_value(raw: Any) -> FieldValue:
    """Convert a raw lexer node into a field value tree.

    Parameters
    ----------
    raw : Any
        ``str``, ``int``/``float``, or a dict node tagged with ``type``.

    Returns
    -------
    FieldValue
        Immutable tree mirroring the raw structure.

    Raises
    ------
    FieldValueError
        If the node or any child has an unknown shape.
    """
    if isinstance(raw, str):
        return Text(raw)
    # bool is an int subclass but never a valid literal
    if isinstance(raw, (int, float)) and not isinstance(raw, bool):
        return Number(raw)
    if not isinstance(raw, dict):
        raise FieldValueError(f"Unexpected raw node: {raw!r}")

    node_type = raw.get("type")

    if node_type in _SEQUENCE_NODES:
        data = raw.get("data")
        if not isinstance(data, list):
            raise FieldValueError(f"Expected list for 'data' in {node_type} node: {raw!r}")
        return _SEQUENCE_NODES[node_type](tuple(parse_field_value(item) for item in data))

    if node_type in _MACRO_NODES:
        name = raw.get("name")
        if not isinstance(name, str) or not name.strip():
            raise FieldValueError(f"Macro node without a name: {raw!r}")
        return MacroRef(name.strip())

    if node_type == "number":
        value = raw.get("value")
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise FieldValueError(f"Number node without a numeric value: {raw!r}")
        return Number(value)

    raise FieldValueError(f"Unknown raw node type: {node_type!r}")
