"""Title-style case folding following the ``change.case$`` rules."""

from ._braces import find_group_end, read_command, split_balanced

__all__ = ["change_case"]


def _lower(char: str) -> str:
    lowered = char.lower()
    # Keep the character when lower-casing would change the length (e.g. "İ")
    return lowered if len(lowered) == 1 else char


def change_case(text: str) -> str:
    """Lower-case a title except its first character and protected text.

    Letters at brace depth 0 are lower-cased. A brace group that starts
    with a backslash is a special character: its letters are lower-cased
    too, but control sequences are kept as written. Any other brace group
    is protected and copied verbatim. The first character of the string
    keeps its case, and so does a special character that opens it.

    Parameters
    ----------
    text : str
        Brace-preserving flattened title.

    Returns
    -------
    str
        Case-folded title of the same length.

    Examples
    --------
    ``The {NASA} {\\'E}tude of {\\AE}ther`` becomes
    ``The {NASA} {\\'e}tude of {\\AE}ther``.
    """
    balanced, tail = split_balanced(text, "change_case")

    out: list[str] = []
    i = 0
    while i < len(balanced):
        char = balanced[i]
        if char == "{":
            end = find_group_end(balanced, i)
            group = balanced[i : end + 1]
            # A special character at position 0 keeps its case
            if i > 0 and group.startswith("{\\"):
                group = _lower_special(group)
            out.append(group)
            i = end + 1
            continue
        out.append(char if i == 0 else _lower(char))
        i += 1

    offset = len(balanced)
    out.extend(
        char if offset + j == 0 else _lower(char) for j, char in enumerate(tail)
    )
    return "".join(out)


def _lower_special(group: str) -> str:
    out: list[str] = []
    i = 0
    while i < len(group):
        if group[i] == "\\":
            start = i
            _, i = read_command(group, i)
            out.append(group[start:i])
            continue
        out.append(_lower(group[i]))
        i += 1
    return "".join(out)
