"""Text normalization for resolved field values.

All functions are pure and never raise on malformed brace nesting;
unbalanced text degrades to flat processing with a MalformedBraceWarning.

- purify: alphanumeric sort key
- change_case: title-style case folding
- parse_authors: name-list decomposition
"""

from .authors import parse_authors, parse_person, split_persons
from .change_case import change_case
from .purify import purify

__all__ = [
    "purify",
    "change_case",
    "parse_authors",
    "parse_person",
    "split_persons",
]
