"""Name-list parsing.

A name list separates persons with the word ``and`` at brace depth 0.
Each person is written in one of three forms, told apart by the number of
depth-0 commas:

- ``First von Last``
- ``von Last, First``
- ``von Last, Jr, First``

In the comma-free form the last run of lowercase words before the final
word is the von part, every word after it is the last name, and every word
before it is the first name. With no lowercase word, the final word alone
is the last name. ``Jean de La Fontaine`` therefore splits into first
``Jean``, von ``de``, last ``La Fontaine``. Words inside braces never
separate persons or name parts.
"""

from bibnorm.models.records import Authors, PersonName

from ._braces import SPECIAL_COMMANDS, read_command, split_at_depth0, strip_braces

__all__ = ["parse_authors", "parse_person", "split_persons"]


def parse_authors(text: str) -> Authors:
    """Parse a resolved name-list field into person names.

    Parameters
    ----------
    text : str
        Flattened, macro-free field text. Braces, when present, protect
        their content from splitting.

    Returns
    -------
    Authors
        Persons in source order; empty for blank text.
    """
    return Authors(tuple(parse_person(person) for person in split_persons(text)))


def split_persons(text: str) -> list[str]:
    """Split a name list on depth-0 ``and`` separators.

    Parameters
    ----------
    text : str
        Name-list text.

    Returns
    -------
    list[str]
        Person texts with whitespace collapsed; empty persons are dropped.
    """
    persons: list[list[str]] = [[]]
    for word in _words(text, " \t\n\r"):
        if word.lower() == "and":
            persons.append([])
        else:
            persons[-1].append(word)
    return [" ".join(words) for words in persons if words]


def parse_person(text: str) -> PersonName:
    """Split one person's text into first, von, last and jr parts.

    Parameters
    ----------
    text : str
        A single person from a name list.

    Returns
    -------
    PersonName
        Name parts in plain form (braces removed).
    """
    parts = [part.strip() for part in split_at_depth0(text, lambda c: c == ",")]

    if len(parts) == 1:
        first, von, last = _split_first_von_last(_words(parts[0]))
        jr: list[str] = []
    else:
        von, last = _split_von_last(_words(parts[0]))
        if len(parts) == 2:
            jr, first = [], _words(parts[1])
        else:
            # Commas beyond the second belong to the first name
            jr, first = _words(parts[1]), _words(", ".join(parts[2:]))

    return PersonName(
        first=_join(first),
        von=_join(von),
        last=_join(last),
        jr=_join(jr),
        raw=text.strip(),
    )


def _words(text: str, separators: str = " \t\n\r~") -> list[str]:
    return [w for w in split_at_depth0(text, lambda c: c in separators) if w]


def _join(words: list[str]) -> str:
    return strip_braces(" ".join(words))


def _split_first_von_last(words: list[str]) -> tuple[list[str], list[str], list[str]]:
    if not words:
        return [], [], []

    lowercase = [i for i, word in enumerate(words[:-1]) if _is_lowercase(word)]
    if not lowercase:
        return words[:-1], [], words[-1:]

    von_end = lowercase[-1] + 1
    von_start = lowercase[-1]
    while von_start > 0 and _is_lowercase(words[von_start - 1]):
        von_start -= 1

    return words[:von_start], words[von_start:von_end], words[von_end:]


def _split_von_last(words: list[str]) -> tuple[list[str], list[str]]:
    lowercase = [i for i, word in enumerate(words[:-1]) if _is_lowercase(word)]
    if not lowercase:
        return [], words
    return words[: lowercase[-1] + 1], words[lowercase[-1] + 1 :]


def _is_lowercase(word: str) -> bool:
    """Return True if the word's first significant letter is lowercase.

    Letters inside plain brace groups do not count. In a special character
    (a group opening with a backslash) the letter or ligature command, or
    else the first letter after the command, decides. Words without a
    deciding letter count as capitalized.
    """
    depth = 0
    i = 0
    while i < len(word):
        char = word[i]
        if char == "{":
            if depth == 0 and word.startswith("{\\", i):
                decided = _special_char_case(word, i + 1)
                if decided is not None:
                    return decided
            depth += 1
        elif char == "}":
            depth = max(depth - 1, 0)
        elif depth == 0 and char.isalpha():
            return char.islower()
        i += 1
    return False


def _special_char_case(word: str, start: int) -> bool | None:
    name, i = read_command(word, start)
    if name in SPECIAL_COMMANDS:
        return name[0].islower()

    depth = 1
    while i < len(word) and depth > 0:
        char = word[i]
        if char == "\\":
            _, i = read_command(word, i)
            continue
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
        elif char.isalpha():
            return char.islower()
        i += 1
    return None
