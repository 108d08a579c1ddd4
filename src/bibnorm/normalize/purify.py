"""Sort-key extraction following the ``purify$`` rules.

At brace depth 0 only letters and digits survive. A brace group is read as
a special character: accent commands such as ``\\^`` or ``\\v`` vanish,
other control words lose their backslash (letter and ligature commands
become their ASCII spelling) and spaces are removed. Every other character
in the group, punctuation included, is kept. ``t{\\^e}te`` and
``t\\^ete`` both purify to ``tete``; ``Bib{\\TeX}`` gives ``BibTeX``.
"""

from ._braces import (
    ACCENT_COMMANDS,
    SPECIAL_COMMANDS,
    find_group_end,
    is_control_word,
    read_command,
    split_balanced,
)

__all__ = ["purify"]


def purify(text: str) -> str:
    """Reduce text to its sort key.

    Parameters
    ----------
    text : str
        Brace-preserving flattened field text.

    Returns
    -------
    str
        Depth-0 letters and digits plus the contents of special
        characters, in source order, no separators.

    Notes
    -----
    Never raises. Unbalanced braces emit ``MalformedBraceWarning`` and the
    text from the first unmatched brace on is treated as depth 0.
    """
    balanced, tail = split_balanced(text, "purify")

    out: list[str] = []
    i = 0
    while i < len(balanced):
        char = balanced[i]
        if char == "{":
            end = find_group_end(balanced, i)
            out.append(_purify_group(balanced[i + 1 : end]))
            i = end + 1
            continue
        if char.isalnum():
            out.append(char)
        i += 1

    out.extend(char for char in tail if char.isalnum())
    return "".join(out)


def _purify_group(group: str) -> str:
    out: list[str] = []
    i = 0
    while i < len(group):
        char = group[i]
        if char == "\\":
            name, i = read_command(group, i)
            if is_control_word(name) and name not in ACCENT_COMMANDS:
                out.append(SPECIAL_COMMANDS.get(name, name))
            continue
        # Nested braces and spaces go; any other character is kept as written
        if char not in "{}" and not char.isspace():
            out.append(char)
        i += 1
    return "".join(out)
