"""
Selection and temporary variable state for one execution run.
"""

from attrs import evolve, frozen

from sps.exceptions import InvalidArgumentError, StateError

VARIABLE_COUNT = 10


@frozen
class Selection:
    """Inclusive rectangular cell range, 1-based."""

    row_from: int = 1
    col_from: int = 1
    row_to: int = 1
    col_to: int = 1

    def __attrs_post_init__(self):
        if min(self.row_from, self.col_from) < 1:
            raise InvalidArgumentError(f"Selection {self} starts before row/column 1")
        if self.row_from > self.row_to or self.col_from > self.col_to:
            raise InvalidArgumentError(f"Selection {self} has reversed bounds")

    def __str__(self) -> str:
        return f"[{self.row_from},{self.col_from},{self.row_to},{self.col_to}]"

    @classmethod
    def cell(cls, row: int, col: int) -> "Selection":
        """Selection of a single cell."""
        return cls(row, col, row, col)

    def collapse(self, row: int, col: int) -> "Selection":
        """Return a single-cell selection at `row`, `col`."""
        return evolve(self, row_from=row, col_from=col, row_to=row, col_to=col)

    def cells(self):
        """Yield (row, col) pairs in row-major order."""
        for row in range(self.row_from, self.row_to + 1):
            for col in range(self.col_from, self.col_to + 1):
                yield row, col

    def is_first(self, row: int, col: int) -> bool:
        return row == self.row_from and col == self.col_from

    def is_last(self, row: int, col: int) -> bool:
        return row == self.row_to and col == self.col_to


class ExecutionState:
    """
    Mutable state shared by all commands of one run.

    Holds the live selection, the backup slot for `[set]`/`[_]`, the cursor
    set while data commands iterate, ten string variables `_0`..`_9` and the
    accumulator used by aggregate commands.
    """

    def __init__(self):
        self.selection = Selection()
        self.backup: Selection | None = None
        self.cur_row = 1
        self.cur_col = 1
        self.variables: list[str] = [""] * VARIABLE_COUNT
        self.accumulator: float | None = None
        self.matches = 0

    def save_selection(self) -> None:
        """Copy the live selection into the backup slot."""
        self.backup = self.selection

    def restore_selection(self) -> None:
        """
        Replace the live selection with the backup.

        Raises:
            StateError: If no selection was saved
        """
        if self.backup is None:
            raise StateError("No selection has been saved with [set]")
        self.selection = self.backup

    def get_variable(self, slot: int) -> str:
        return self.variables[slot]

    def set_variable(self, slot: int, value: str) -> None:
        self.variables[slot] = value
