"""Brace-depth helpers shared by the normalizers and the author parser."""

import warnings
from collections.abc import Callable

from bibnorm.errors import MalformedBraceWarning

# Commands that stand for a whole letter or ligature, with their ASCII spelling
SPECIAL_COMMANDS: dict[str, str] = {
    "OE": "OE",
    "oe": "oe",
    "AE": "AE",
    "ae": "ae",
    "AA": "AA",
    "aa": "aa",
    "O": "O",
    "o": "o",
    "L": "L",
    "l": "l",
    "ss": "ss",
    "i": "i",
    "j": "j",
}

# Accent commands; purify drops them and keeps the accented letter
ACCENT_COMMANDS = frozenset("`'^\"~=.uvHtcdbkr")


def split_balanced(text: str, operation: str) -> tuple[str, str]:
    """Split text into a brace-balanced prefix and a literal tail.

    The tail starts at the first brace that has no partner: a ``}`` closing
    nothing, or the outermost ``{`` never closed.

    Parameters
    ----------
    text : str
        Text with brace groups.
    operation : str
        Name of the calling operation, used in the warning message.

    Returns
    -------
    tuple[str, str]
        (balanced_prefix, tail). The tail is empty for well-formed text.
    """
    open_positions: list[int] = []
    cut = len(text)
    for i, char in enumerate(text):
        if char == "{":
            open_positions.append(i)
        elif char == "}":
            if not open_positions:
                cut = i
                break
            open_positions.pop()
    else:
        if open_positions:
            cut = open_positions[0]

    if cut < len(text):
        warnings.warn(
            f"{operation}: unbalanced brace at position {cut} in {text!r}; "
            "treating the rest as plain text",
            MalformedBraceWarning,
            stacklevel=3,
        )
    return text[:cut], text[cut:]


def find_group_end(text: str, start: int) -> int:
    """Return the index of the ``}`` closing the group opened at ``start``.

    ``text`` must be balanced from ``start`` on; returns ``len(text)`` otherwise.
    """
    depth = 0
    for i in range(start, len(text)):
        if text[i] == "{":
            depth += 1
        elif text[i] == "}":
            depth -= 1
            if depth == 0:
                return i
    return len(text)


def read_command(text: str, start: int) -> tuple[str, int]:
    """Read the control sequence whose backslash is at ``start``.

    Returns
    -------
    tuple[str, int]
        (name, end). ``name`` is the control word (letters), the control
        symbol (one non-letter), or "" for a trailing backslash. ``end`` is
        the index just past the sequence.
    """
    i = start + 1
    if i >= len(text):
        return "", i
    if not text[i].isalpha():
        return text[i], i + 1
    while i < len(text) and text[i].isalpha():
        i += 1
    return text[start + 1 : i], i


def is_control_word(name: str) -> bool:
    return bool(name) and name[0].isalpha()


def split_at_depth0(text: str, is_separator: Callable[[str], bool]) -> list[str]:
    """Split on separator characters that are outside every brace group.

    A ``}`` with no open group is kept as a literal character. Empty pieces
    are kept so callers can count separators.
    """
    pieces: list[str] = []
    current: list[str] = []
    depth = 0
    for char in text:
        if char == "{":
            depth += 1
        elif char == "}" and depth > 0:
            depth -= 1
        elif depth == 0 and is_separator(char):
            pieces.append("".join(current))
            current = []
            continue
        current.append(char)
    pieces.append("".join(current))
    return pieces


def strip_braces(text: str) -> str:
    return text.replace("{", "").replace("}", "")
