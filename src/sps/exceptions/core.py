"""
Exception classes for SPS table processing.

This module defines specific exception types for the different error conditions
that can occur while parsing a command sequence, loading a table and executing
commands against it.
"""

from dataclasses import dataclass


@dataclass
class ErrorContext:
    """
    Context information for error messages.

    Captures where an error occurred, either in the command sequence (position
    and text of the offending command) or in the table text (line number).

    Params:
        command_index: 1-based position of the command within the sequence
        command_text: The original command text that caused the error
        table_line: 1-based line of the table text that caused the error
    """

    command_index: int | None = None
    command_text: str | None = None
    table_line: int | None = None

    def format_location(self) -> str:
        """
        Format location information as a single-line suffix.

        Returns:
            Location string such as "command 2 'irow'", or empty string
        """
        parts = []

        if self.command_index is not None:
            if self.command_text:
                parts.append(f"command {self.command_index} '{self.command_text}'")
            else:
                parts.append(f"command {self.command_index}")
        elif self.command_text:
            parts.append(f"command '{self.command_text}'")

        if self.table_line is not None:
            parts.append(f"line {self.table_line}")

        return ", ".join(parts)


class SPSError(Exception):
    """Base exception for all SPS errors."""

    exit_code = 1

    def __init__(self, message: str, context: ErrorContext | None = None):
        """
        Initialize the exception.

        Params:
            message: Primary error message
            context: Optional location of the failure
        """
        self.message = message
        self.context = context
        super().__init__(self._compose())

    def _compose(self) -> str:
        if self.context:
            location = self.context.format_location()
            if location:
                return f"{self.message} ({location})"
        return self.message

    def with_context(self, context: ErrorContext) -> "SPSError":
        """
        Attach location information unless the error already has some.

        Params:
            context: Location to attach

        Returns:
            The same exception instance, for re-raising
        """
        if self.context is None:
            self.context = context
            self.args = (self._compose(),)
        return self


class AllocationError(SPSError):
    """Raised when table storage cannot grow."""

    def __init__(self, what: str):
        """
        Initialize the exception.

        Params:
            what: Description of the storage that failed to grow
        """
        self.what = what
        super().__init__(f"Cannot allocate memory for {what}")


class MalformedInputError(SPSError):
    """Raised when quoting, escaping or syntax rules are violated."""

    pass


class UnknownCommandError(SPSError):
    """Raised when a command name is not part of the command language."""

    def __init__(self, name: str, context: ErrorContext | None = None):
        """
        Initialize the exception.

        Params:
            name: The unrecognized command name
            context: Optional location of the command
        """
        self.name = name
        super().__init__(f"Unknown command '{name}'", context)


class InvalidArgumentError(SPSError):
    """Raised when a command parameter fails its precondition."""

    pass


class CellIndexError(SPSError, IndexError):
    """Raised when coordinates fall outside the table where no auto-grow applies."""

    def __init__(self, row: int | None, col: int | None, reason: str):
        """
        Initialize the exception.

        Params:
            row: Requested 1-based row, if relevant
            col: Requested 1-based column, if relevant
            reason: Why the coordinates are out of range
        """
        self.row = row
        self.col = col
        if row is not None and col is not None:
            where = f"cell [{row},{col}]"
        elif row is not None:
            where = f"row {row}"
        else:
            where = f"column {col}"
        super().__init__(f"Invalid {where}: {reason}")


class StateError(SPSError):
    """Raised when a saved selection is requested before any was stored."""

    pass


class NoNumericValueError(SPSError):
    """Raised when an aggregate or extremum command finds no numeric cell."""

    def __init__(self, command_name: str, context: ErrorContext | None = None):
        """
        Initialize the exception.

        Params:
            command_name: The command that needed a numeric value
            context: Optional location of the command
        """
        self.command_name = command_name
        super().__init__(
            f"No numeric value in selection for '{command_name}'", context
        )


class ConfigurationError(SPSError):
    """Raised when the run configuration is invalid."""

    exit_code = 2
