"""Exceptions and warnings raised by bibnorm.

Macro errors and duplicate fields are raised per field. Normalization never
raises and reports brace anomalies through ``MalformedBraceWarning`` instead.
"""

__all__ = [
    "BibnormError",
    "FieldValueError",
    "DatabaseFormatError",
    "EntryError",
    "DuplicateFieldError",
    "MacroError",
    "UnknownMacroError",
    "CyclicMacroError",
    "MalformedBraceWarning",
]


class BibnormError(Exception):
    """Base class for all bibnorm errors."""


class FieldValueError(BibnormError, ValueError):
    """Raised when a raw node or field value tree is malformed."""


class DatabaseFormatError(BibnormError):
    """Raised when a raw database document fails schema validation."""

    def __init__(self, message: str, file: str | None = None) -> None:
        """Initialize database format error.

        Parameters
        ----------
        message : str
            Error message.
        file : str | None, optional
            File where the error occurred.
        """
        super().__init__(message)
        self.file = file


class EntryError(BibnormError):
    """Base class for failures tied to one field of one entry.

    Attributes
    ----------
    field : str | None
        Field name, attached by the assembler.
    entry_id : str | None
        Citation key of the entry, attached by the assembler.
    """

    def __init__(
        self,
        message: str,
        field: str | None = None,
        entry_id: str | None = None,
    ) -> None:
        super().__init__(message)
        self.field = field
        self.entry_id = entry_id

    def describe(self) -> str:
        """Describe the failure without location context."""
        return str(self.args[0])

    def __str__(self) -> str:
        location = []
        if self.entry_id is not None:
            location.append(f"entry '{self.entry_id}'")
        if self.field is not None:
            location.append(f"field '{self.field}'")
        if not location:
            return self.describe()
        return f"{', '.join(location)}: {self.describe()}"


class DuplicateFieldError(EntryError):
    """Raised when an entry spells the same field name twice, ignoring case.

    Attributes
    ----------
    spellings : tuple[str, ...]
        Field names as written in the entry, first occurrence first.
    """

    def __init__(
        self,
        field: str,
        spellings: tuple[str, ...],
        entry_id: str | None = None,
    ) -> None:
        super().__init__(field, field=field, entry_id=entry_id)
        self.spellings = spellings

    def describe(self) -> str:
        written = " and ".join(f"'{name}'" for name in self.spellings)
        return f"duplicate field, written as {written}"


class MacroError(EntryError):
    """Base class for macro resolution failures.

    Attributes
    ----------
    name : str
        Macro name that could not be resolved.
    """

    def __init__(
        self,
        name: str,
        field: str | None = None,
        entry_id: str | None = None,
    ) -> None:
        super().__init__(name, field=field, entry_id=entry_id)
        self.name = name

    def describe(self) -> str:
        return f"cannot resolve macro '{self.name}'"


class UnknownMacroError(MacroError):
    """Raised when a macro reference is absent from the macro table."""

    def describe(self) -> str:
        return f"unknown macro '{self.name}'"


class CyclicMacroError(MacroError):
    """Raised when resolving a macro revisits a macro already being resolved.

    Attributes
    ----------
    chain : tuple[str, ...]
        Macro names in resolution order, ending with the repeated name.
    """

    def __init__(
        self,
        name: str,
        chain: tuple[str, ...] = (),
        field: str | None = None,
        entry_id: str | None = None,
    ) -> None:
        super().__init__(name, field=field, entry_id=entry_id)
        self.chain = chain

    def describe(self) -> str:
        path = " -> ".join(self.chain) if self.chain else self.name
        return f"cyclic macro reference: {path}"


class MalformedBraceWarning(UserWarning):
    """Emitted when text has unbalanced braces and falls back to flat processing."""
