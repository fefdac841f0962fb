"""
Command executor.

Applies a parsed command sequence to a table. Selection commands run once and
change the live selection; data commands run once per selected cell, rows
outer and columns inner, with the cursor pointing at the current cell.
"""

import logging
from collections.abc import Callable, Iterable

from sps.exceptions import (
    CellIndexError,
    ErrorContext,
    NoNumericValueError,
    SPSError,
    UnknownCommandError,
)
from sps.execution.numeric import format_number, to_number
from sps.execution.state import ExecutionState, Selection
from sps.parsing.parser import (
    Bound,
    CellTargetCommand,
    Command,
    CommandKind,
    CommandName,
    Coordinate,
    FindCell,
    RestoreSelection,
    SelectCell,
    SelectExtreme,
    SelectWindow,
    SetValue,
    VariableCommand,
)
from sps.table.store import Table

logger = logging.getLogger(__name__)


class CommandExecutor:
    """Runs commands against one table, keeping selection and variable state."""

    def __init__(self, table: Table, state: ExecutionState | None = None):
        """
        Initialize the executor.

        Params:
            table: Table mutated in place
            state: Optional pre-existing state; a fresh one is created otherwise
        """
        self.table = table
        self.state = state or ExecutionState()
        self._handlers: dict[CommandName, Callable[[Command], None]] = {
            CommandName.SELECT: self._select,
            CommandName.MIN: self._select_extreme,
            CommandName.MAX: self._select_extreme,
            CommandName.FIND: self._find,
            CommandName.SAVE_SELECTION: self._save_selection,
            CommandName.IROW: self._insert_row,
            CommandName.AROW: self._append_row,
            CommandName.DROW: self._delete_rows,
            CommandName.ICOL: self._insert_column,
            CommandName.ACOL: self._append_column,
            CommandName.DCOL: self._delete_columns,
            CommandName.SET: self._set,
            CommandName.CLEAR: self._clear,
            CommandName.SWAP: self._swap,
            CommandName.SUM: self._sum,
            CommandName.AVG: self._avg,
            CommandName.COUNT: self._count,
            CommandName.LEN: self._len,
            CommandName.DEF: self._def,
            CommandName.USE: self._use,
            CommandName.INC: self._inc,
        }

    @property
    def selection(self) -> Selection:
        return self.state.selection

    def execute(self, commands: Iterable[Command]) -> None:
        """
        Run every command in order, stopping at the first error.

        Params:
            commands: Parsed command sequence

        Raises:
            SPSError: The first failure, with the failing command attached
        """
        for index, command in enumerate(commands, start=1):
            try:
                self.run(command)
            except SPSError as e:
                raise e.with_context(
                    ErrorContext(
                        command_index=index,
                        command_text=command.source or str(command),
                    )
                )

    def run(self, command: Command) -> None:
        """
        Run a single command.

        Raises:
            UnknownCommandError: If no handler is registered for the command
        """
        handler = self._handlers.get(command.name)
        if handler is None:
            raise UnknownCommandError(command.name.value)

        logger.debug("Running %s on selection %s", command, self.selection)
        if command.name.kind == CommandKind.SELECTION:
            handler(command)
            return

        selection = self.selection
        self.table.resize(selection.row_to, selection.col_to)
        for row, col in selection.cells():
            self.state.cur_row = row
            self.state.cur_col = col
            handler(command)

    # Selection commands

    def _change_selection(self, selection: Selection) -> None:
        self.table.resize(selection.row_to, selection.col_to)
        self.state.selection = selection

    def _last(self, count: int) -> int:
        return max(count, 1)

    def _resolve(self, value: Coordinate, fallback: int) -> int:
        return fallback if value is Bound.OPEN else value

    def _select(self, command: Command) -> None:
        if isinstance(command, RestoreSelection):
            self.state.restore_selection()
            self._change_selection(self.selection)
            return

        last_row = self._last(self.table.row_count)
        last_col = self._last(self.table.column_count)

        if isinstance(command, SelectCell):
            if command.row is Bound.OPEN:
                row_from, row_to = 1, last_row
            else:
                row_from = row_to = command.row
            if command.col is Bound.OPEN:
                col_from, col_to = 1, last_col
            else:
                col_from = col_to = command.col
        elif isinstance(command, SelectWindow):
            row_from = self._resolve(command.row_from, 1)
            col_from = self._resolve(command.col_from, 1)
            row_to = self._resolve(command.row_to, max(last_row, row_from))
            col_to = self._resolve(command.col_to, max(last_col, col_from))
        else:
            raise UnknownCommandError(str(command))

        self._change_selection(Selection(row_from, col_from, row_to, col_to))

    def _select_extreme(self, command: SelectExtreme) -> None:
        best: tuple[float, int, int] | None = None
        for row, col in self.selection.cells():
            number = to_number(self.table.get_cell(row, col))
            if number is None:
                continue
            if best is None:
                best = (number, row, col)
            elif command.largest and number > best[0]:
                best = (number, row, col)
            elif not command.largest and number < best[0]:
                best = (number, row, col)

        if best is None:
            raise NoNumericValueError(command.name.value)
        self.state.selection = self.selection.collapse(best[1], best[2])

    def _find(self, command: FindCell) -> None:
        for row, col in self.selection.cells():
            value = self.table.get_cell(row, col)
            if value is not None and command.needle in value:
                self.state.selection = self.selection.collapse(row, col)
                return
        logger.debug("No cell contains %r, selection unchanged", command.needle)

    def _save_selection(self, command: Command) -> None:
        self.state.save_selection()

    # Table structure commands, applied once per selection

    def _is_first(self) -> bool:
        return self.selection.is_first(self.state.cur_row, self.state.cur_col)

    def _is_last(self) -> bool:
        return self.selection.is_last(self.state.cur_row, self.state.cur_col)

    def _insert_row(self, command: Command) -> None:
        if self._is_first():
            self.table.insert_row(self.selection.row_from)

    def _append_row(self, command: Command) -> None:
        if self._is_first():
            self.table.insert_row(self.selection.row_to + 1)

    def _delete_rows(self, command: Command) -> None:
        if self._is_first():
            for row in range(self.selection.row_to, self.selection.row_from - 1, -1):
                self.table.delete_row(row)

    def _insert_column(self, command: Command) -> None:
        if self._is_first():
            self.table.insert_column(self.selection.col_from)

    def _append_column(self, command: Command) -> None:
        if self._is_first():
            self.table.insert_column(self.selection.col_to + 1)

    def _delete_columns(self, command: Command) -> None:
        if self._is_first():
            for col in range(self.selection.col_to, self.selection.col_from - 1, -1):
                self.table.delete_column(col)

    # Cell data commands

    def _current(self) -> str:
        value = self.table.get_cell(self.state.cur_row, self.state.cur_col)
        return value if value is not None else ""

    def _write_current(self, value: str) -> None:
        self.table.set_cell(self.state.cur_row, self.state.cur_col, value)

    def _write_target(self, command: CellTargetCommand, value: str) -> None:
        self.table.resize(command.row, command.col)
        self.table.set_cell(command.row, command.col, value)

    def _set(self, command: SetValue) -> None:
        self._write_current(command.text)

    def _clear(self, command: Command) -> None:
        self._write_current("")

    def _swap(self, command: CellTargetCommand) -> None:
        other = self.table.get_cell(command.row, command.col)
        if other is None:
            raise CellIndexError(command.row, command.col, "swap target is outside the table")
        current = self._current()
        self.table.set_cell(command.row, command.col, current)
        self._write_current(other)

    def _accumulate(self) -> None:
        if self._is_first():
            self.state.accumulator = 0.0
            self.state.matches = 0
        number = to_number(self._current())
        if number is not None:
            self.state.accumulator += number
            self.state.matches += 1

    def _sum(self, command: CellTargetCommand) -> None:
        self._accumulate()
        if self._is_last():
            self._write_target(command, format_number(self.state.accumulator))

    def _avg(self, command: CellTargetCommand) -> None:
        self._accumulate()
        if self._is_last():
            if self.state.matches == 0:
                raise NoNumericValueError(command.name.value)
            average = self.state.accumulator / self.state.matches
            self._write_target(command, format_number(average))

    def _count(self, command: CellTargetCommand) -> None:
        if self._is_first():
            self.state.matches = 0
        if self._current():
            self.state.matches += 1
        if self._is_last():
            self._write_target(command, str(self.state.matches))

    def _len(self, command: CellTargetCommand) -> None:
        self._write_target(command, str(len(self._current())))

    # Temporary variables

    def _def(self, command: VariableCommand) -> None:
        self.state.set_variable(command.slot, self._current())

    def _use(self, command: VariableCommand) -> None:
        self._write_current(self.state.get_variable(command.slot))

    def _inc(self, command: VariableCommand) -> None:
        number = to_number(self.state.get_variable(command.slot))
        self.state.set_variable(command.slot, format_number((number or 0.0) + 1))


def execute(commands: Iterable[Command], table: Table) -> ExecutionState:
    """
    Convenience function to run a command sequence against a table.

    Params:
        commands: Parsed command sequence
        table: Table mutated in place

    Returns:
        Final execution state
    """
    executor = CommandExecutor(table)
    executor.execute(commands)
    return executor.state
