"""
Parser for the SPS command language.

This module turns a command sequence string into typed command records that
the executor consumes in order. Command names are resolved here, so an unknown
command fails before any table is touched.
"""

import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import TypeAlias

from sps.exceptions import (
    ErrorContext,
    InvalidArgumentError,
    MalformedInputError,
    SPSError,
    UnknownCommandError,
)
from sps.parsing.tokenizer import RawCommand, tokenize

logger = logging.getLogger(__name__)


class CommandKind(Enum):
    """How the executor runs a command."""

    SELECTION = "selection"  # Once, may change the selection
    DATA = "data"  # Once per selected cell


class CommandName(Enum):
    """Names of all commands in the language."""

    SELECT = "select"
    MIN = "min"
    MAX = "max"
    FIND = "find"
    SAVE_SELECTION = "set-v"
    IROW = "irow"
    AROW = "arow"
    DROW = "drow"
    ICOL = "icol"
    ACOL = "acol"
    DCOL = "dcol"
    SET = "set"
    CLEAR = "clear"
    SWAP = "swap"
    SUM = "sum"
    AVG = "avg"
    COUNT = "count"
    LEN = "len"
    DEF = "def"
    USE = "use"
    INC = "inc"

    @property
    def kind(self) -> CommandKind:
        """Execution kind of commands with this name."""
        if self in SELECTION_COMMANDS:
            return CommandKind.SELECTION
        return CommandKind.DATA


SELECTION_COMMANDS = frozenset(
    {
        CommandName.SELECT,
        CommandName.MIN,
        CommandName.MAX,
        CommandName.FIND,
        CommandName.SAVE_SELECTION,
    }
)

TABLE_EDIT_COMMANDS = frozenset(
    {
        CommandName.IROW,
        CommandName.AROW,
        CommandName.DROW,
        CommandName.ICOL,
        CommandName.ACOL,
        CommandName.DCOL,
    }
)

CELL_TARGET_COMMANDS = frozenset(
    {
        CommandName.SWAP,
        CommandName.SUM,
        CommandName.AVG,
        CommandName.COUNT,
        CommandName.LEN,
    }
)

VARIABLE_COMMANDS = frozenset({CommandName.DEF, CommandName.USE, CommandName.INC})


class Bound(Enum):
    """Open-ended coordinate, written `_` or `-`."""

    OPEN = "_"

    def __str__(self) -> str:
        return self.value


Coordinate: TypeAlias = int | Bound

OPEN_SPELLINGS = {"_", "-"}
INTEGER_PATTERN = re.compile(r"[+-]?[0-9]+")
VARIABLE_PATTERN = re.compile(r"_[0-9]")


def parse_coordinate(text: str, allow_open: bool = True) -> Coordinate:
    """
    Convert a row/column parameter.

    Params:
        text: Parameter text, e.g. "3", "_" or "-"
        allow_open: Whether the open-ended marker is accepted

    Returns:
        Positive integer, or Bound.OPEN

    Raises:
        InvalidArgumentError: If the value is not a natural number
    """
    text = text.strip()
    if text in OPEN_SPELLINGS:
        if allow_open:
            return Bound.OPEN
        raise InvalidArgumentError(f"Open-ended '{text}' is not allowed here")
    if not INTEGER_PATTERN.fullmatch(text):
        raise InvalidArgumentError(f"Row/column must be a natural number, got '{text}'")
    value = int(text)
    if value < 1:
        raise InvalidArgumentError(f"Row/column must be a natural number, got '{text}'")
    return value


def _check_coordinates(*values: Coordinate) -> None:
    for value in values:
        if value is not Bound.OPEN and (not isinstance(value, int) or value < 1):
            raise InvalidArgumentError(f"Row/column must be a natural number, got '{value}'")


@dataclass(frozen=True)
class SelectCell:
    """Selection `[R,C]`; either coordinate may be open-ended."""

    row: Coordinate
    col: Coordinate
    source: str | None = field(default=None, compare=False)
    name: CommandName = field(default=CommandName.SELECT, init=False)

    def __post_init__(self):
        _check_coordinates(self.row, self.col)

    def __str__(self) -> str:
        return f"[{self.row},{self.col}]"


@dataclass(frozen=True)
class SelectWindow:
    """Selection `[R1,C1,R2,C2]`; open-ended bounds reach the table edge."""

    row_from: Coordinate
    col_from: Coordinate
    row_to: Coordinate
    col_to: Coordinate
    source: str | None = field(default=None, compare=False)
    name: CommandName = field(default=CommandName.SELECT, init=False)

    def __post_init__(self):
        """Validate bound ordering where both bounds are known."""
        _check_coordinates(self.row_from, self.col_from, self.row_to, self.col_to)
        for low, high, axis in (
            (self.row_from, self.row_to, "row"),
            (self.col_from, self.col_to, "column"),
        ):
            if isinstance(low, int) and isinstance(high, int) and low > high:
                raise InvalidArgumentError(
                    f"Window {axis} range {low}..{high} is reversed"
                )

    def __str__(self) -> str:
        return f"[{self.row_from},{self.col_from},{self.row_to},{self.col_to}]"


@dataclass(frozen=True)
class RestoreSelection:
    """Selection `[_]`: restore the saved selection."""

    source: str | None = field(default=None, compare=False)
    name: CommandName = field(default=CommandName.SELECT, init=False)

    def __str__(self) -> str:
        return "[_]"


@dataclass(frozen=True)
class SaveSelection:
    """Selection `[set]`: save the current selection."""

    source: str | None = field(default=None, compare=False)
    name: CommandName = field(default=CommandName.SAVE_SELECTION, init=False)

    def __str__(self) -> str:
        return "[set]"


@dataclass(frozen=True)
class SelectExtreme:
    """Selection `[min]` / `[max]`."""

    name: CommandName
    source: str | None = field(default=None, compare=False)

    def __post_init__(self):
        if self.name not in (CommandName.MIN, CommandName.MAX):
            raise InvalidArgumentError(f"Not an extremum command: {self.name.value}")

    @property
    def largest(self) -> bool:
        return self.name == CommandName.MAX

    def __str__(self) -> str:
        return f"[{self.name.value}]"


@dataclass(frozen=True)
class FindCell:
    """Selection `[find STR]`."""

    needle: str
    source: str | None = field(default=None, compare=False)
    name: CommandName = field(default=CommandName.FIND, init=False)

    def __post_init__(self):
        """Validate search string."""
        if not self.needle:
            raise InvalidArgumentError("find requires a non-empty search string")

    def __str__(self) -> str:
        return f"[find {self.needle}]"


@dataclass(frozen=True)
class TableEdit:
    """Row/column insertion or deletion around the selection."""

    name: CommandName
    source: str | None = field(default=None, compare=False)

    def __post_init__(self):
        if self.name not in TABLE_EDIT_COMMANDS:
            raise InvalidArgumentError(f"Not a table edit command: {self.name.value}")

    def __str__(self) -> str:
        return self.name.value


@dataclass(frozen=True)
class SetValue:
    """`set STR`: write STR into every selected cell."""

    text: str
    source: str | None = field(default=None, compare=False)
    name: CommandName = field(default=CommandName.SET, init=False)

    def __str__(self) -> str:
        return f"set {self.text}"


@dataclass(frozen=True)
class ClearCell:
    """`clear`: empty every selected cell."""

    source: str | None = field(default=None, compare=False)
    name: CommandName = field(default=CommandName.CLEAR, init=False)

    def __str__(self) -> str:
        return "clear"


@dataclass(frozen=True)
class CellTargetCommand:
    """Commands addressing one explicit cell: swap, sum, avg, count, len."""

    name: CommandName
    row: int
    col: int
    source: str | None = field(default=None, compare=False)

    def __post_init__(self):
        """Validate command name and target coordinates."""
        if self.name not in CELL_TARGET_COMMANDS:
            raise InvalidArgumentError(f"Not a cell target command: {self.name.value}")
        for value in (self.row, self.col):
            if not isinstance(value, int) or value < 1:
                raise InvalidArgumentError(
                    f"{self.name.value} target must be natural numbers, got [{self.row},{self.col}]"
                )

    def __str__(self) -> str:
        return f"{self.name.value} [{self.row},{self.col}]"


@dataclass(frozen=True)
class VariableCommand:
    """Temporary variable commands: def, use, inc."""

    name: CommandName
    variable: str
    source: str | None = field(default=None, compare=False)

    def __post_init__(self):
        """Validate command name and variable name format."""
        if self.name not in VARIABLE_COMMANDS:
            raise InvalidArgumentError(f"Not a variable command: {self.name.value}")
        if not VARIABLE_PATTERN.fullmatch(self.variable):
            raise InvalidArgumentError(
                f"Invalid variable name '{self.variable}', expected _0 to _9"
            )

    @property
    def slot(self) -> int:
        """Index of the variable slot."""
        return int(self.variable[1])

    def __str__(self) -> str:
        return f"{self.name.value} {self.variable}"


Command: TypeAlias = (
    SelectCell
    | SelectWindow
    | RestoreSelection
    | SaveSelection
    | SelectExtreme
    | FindCell
    | TableEdit
    | SetValue
    | ClearCell
    | CellTargetCommand
    | VariableCommand
)
CommandSequence: TypeAlias = list[Command]


class CommandParser:
    """Parser for SPS command sequences."""

    BARE_NAMES = {
        name.value: name
        for name in CommandName
        if name not in (CommandName.SAVE_SELECTION,)
    }

    def parse(self, source: str) -> CommandSequence:
        """
        Parse a command sequence.

        Params:
            source: Semicolon-separated commands

        Returns:
            Commands in source order

        Raises:
            MalformedInputError: If quoting, brackets or parameter counts are wrong
            InvalidArgumentError: If a parameter fails its precondition
            UnknownCommandError: If a command name is not recognized
        """
        commands: CommandSequence = []
        for raw in tokenize(source):
            try:
                if raw.bracketed:
                    commands.append(self._parse_selection(raw))
                else:
                    commands.append(self._parse_named(raw))
            except SPSError as e:
                raise e.with_context(
                    ErrorContext(command_index=raw.index, command_text=raw.text)
                )
        logger.debug("Parsed %d commands", len(commands))
        return commands

    def _parse_selection(self, raw: RawCommand) -> Command:
        """Parse the body of a `[...]` form."""
        words = raw.words
        if not words:
            raise MalformedInputError("Empty selection '[]'")

        keyword, arguments = words[0], words[1:]

        if keyword in ("min", "max"):
            self._expect_arguments(keyword, arguments, 0)
            return SelectExtreme(name=CommandName(keyword), source=raw.text)
        if keyword == "find":
            return self._parse_find(arguments, raw.text)
        if keyword == "set":
            self._expect_arguments(keyword, arguments, 0)
            return SaveSelection(source=raw.text)
        if keyword == "_" and not arguments:
            return RestoreSelection(source=raw.text)

        if arguments:
            raise MalformedInputError(
                f"Unexpected text in selection: {' '.join(arguments)}"
            )
        return self._parse_coordinates(keyword, raw.text)

    def _parse_coordinates(self, body: str, source: str) -> Command:
        """Parse `R,C` or `R1,C1,R2,C2`."""
        parts = body.split(",")
        if len(parts) == 1 and not (
            INTEGER_PATTERN.fullmatch(body) or body in OPEN_SPELLINGS
        ):
            raise UnknownCommandError(body)
        if len(parts) == 2:
            return SelectCell(
                row=parse_coordinate(parts[0]),
                col=parse_coordinate(parts[1]),
                source=source,
            )
        if len(parts) == 4:
            return SelectWindow(
                row_from=parse_coordinate(parts[0]),
                col_from=parse_coordinate(parts[1]),
                row_to=parse_coordinate(parts[2]),
                col_to=parse_coordinate(parts[3]),
                source=source,
            )
        raise MalformedInputError(
            f"Selection needs 2 or 4 coordinates, got {len(parts)}"
        )

    def _parse_named(self, raw: RawCommand) -> Command:
        """Parse `name param...`."""
        keyword, arguments = raw.words[0], raw.words[1:]
        name = self.BARE_NAMES.get(keyword)
        if name is None:
            raise UnknownCommandError(keyword)

        if name == CommandName.SELECT:
            self._expect_arguments(keyword, arguments, 1)
            return self._parse_coordinates(arguments[0], raw.text)
        if name in (CommandName.MIN, CommandName.MAX):
            self._expect_arguments(keyword, arguments, 0)
            return SelectExtreme(name=name, source=raw.text)
        if name == CommandName.FIND:
            return self._parse_find(arguments, raw.text)
        if name in TABLE_EDIT_COMMANDS:
            self._expect_arguments(keyword, arguments, 0)
            return TableEdit(name=name, source=raw.text)
        if name == CommandName.SET:
            self._expect_arguments(keyword, arguments, 1)
            return SetValue(text=arguments[0], source=raw.text)
        if name == CommandName.CLEAR:
            self._expect_arguments(keyword, arguments, 0)
            return ClearCell(source=raw.text)
        if name in CELL_TARGET_COMMANDS:
            row, col = self._parse_target(keyword, arguments)
            return CellTargetCommand(name=name, row=row, col=col, source=raw.text)
        if name in VARIABLE_COMMANDS:
            self._expect_arguments(keyword, arguments, 1)
            return VariableCommand(name=name, variable=arguments[0], source=raw.text)

        raise UnknownCommandError(keyword)

    def _parse_find(self, arguments: list[str], source: str) -> FindCell:
        """Parse `find STR`; a missing string counts as empty."""
        if len(arguments) > 1:
            raise MalformedInputError(
                "find takes 1 parameter; escape spaces as '\\ ' or quote the string"
            )
        return FindCell(needle=arguments[0] if arguments else "", source=source)

    def _parse_target(self, keyword: str, arguments: list[str]) -> tuple[int, int]:
        """
        Parse an explicit cell target written `R,C`, `[R,C]` or `R C`.

        Raises:
            MalformedInputError: If the target does not have two coordinates
            InvalidArgumentError: If a coordinate is not a natural number
        """
        text = ",".join(arguments)
        if text.startswith("[") and text.endswith("]"):
            text = text[1:-1]
        parts = text.split(",") if text else []
        if len(parts) != 2:
            raise MalformedInputError(f"{keyword} requires a target cell R,C")
        row = parse_coordinate(parts[0], allow_open=False)
        col = parse_coordinate(parts[1], allow_open=False)
        return row, col

    @staticmethod
    def _expect_arguments(keyword: str, arguments: list[str], count: int) -> None:
        if len(arguments) != count:
            raise MalformedInputError(
                f"{keyword} takes {count} parameter{'s' if count != 1 else ''}, got {len(arguments)}"
            )


def parse_commands(source: str) -> CommandSequence:
    """
    Convenience function to parse a command sequence.

    Params:
        source: Semicolon-separated commands

    Returns:
        Commands in source order

    Raises:
        MalformedInputError, InvalidArgumentError, UnknownCommandError
    """
    parser = CommandParser()
    return parser.parse(source)
