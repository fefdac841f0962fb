"""
In-memory table storage.

A table is a list of rows, each row a list of cell strings. The public API uses
1-based row and column numbers, the way commands address cells; storage is
0-based.
"""

import logging

from sps.exceptions import AllocationError, CellIndexError

logger = logging.getLogger(__name__)


class Table:
    """Rectangular (after alignment) grid of text cells."""

    def __init__(self, rows: list[list[str]] | None = None):
        """
        Initialize a table.

        Params:
            rows: Optional initial rows; copied, not aligned
        """
        self._rows: list[list[str]] = [list(row) for row in rows or []]

    def __len__(self) -> int:
        return len(self._rows)

    def __repr__(self) -> str:
        return f"Table({self.row_count}x{self.column_count})"

    @property
    def row_count(self) -> int:
        """Number of rows."""
        return len(self._rows)

    @property
    def column_count(self) -> int:
        """Length of the longest row."""
        return max((len(row) for row in self._rows), default=0)

    def to_lists(self) -> list[list[str]]:
        """Return a copy of the table content as nested lists."""
        return [list(row) for row in self._rows]

    def rows(self) -> list[list[str]]:
        """Return the live row lists, for serialization."""
        return self._rows

    def get_cell(self, row: int, col: int) -> str | None:
        """
        Get a cell value.

        Params:
            row: 1-based row number
            col: 1-based column number

        Returns:
            The cell value, or None when the cell does not exist
        """
        if row < 1 or col < 1 or row > len(self._rows):
            return None
        cells = self._rows[row - 1]
        if col > len(cells):
            return None
        return cells[col - 1]

    def set_cell(self, row: int, col: int, value: str) -> None:
        """
        Set a cell value.

        Params:
            row: 1-based row number
            col: 1-based column number
            value: New cell content

        Raises:
            CellIndexError: If the cell does not exist
        """
        if self.get_cell(row, col) is None:
            raise CellIndexError(
                row, col, f"table has {self.row_count}x{self.column_count} cells"
            )
        self._rows[row - 1][col - 1] = value

    def insert_row(self, index: int) -> None:
        """
        Insert an empty row so that it becomes row `index`.

        Params:
            index: 1-based position, `row_count + 1` appends

        Raises:
            CellIndexError: If index is outside [1, row_count + 1]
            AllocationError: If storage cannot grow
        """
        if index < 1 or index > len(self._rows) + 1:
            raise CellIndexError(index, None, "cannot insert row here")
        try:
            self._rows.insert(index - 1, [""] * self.column_count)
        except MemoryError as e:
            raise AllocationError("table row") from e
        self.align_row_sizes()

    def insert_column(self, index: int) -> None:
        """
        Insert an empty column so that it becomes column `index` in every row.

        Params:
            index: 1-based position, `column_count + 1` appends

        Raises:
            CellIndexError: If index is outside [1, column_count + 1]
            AllocationError: If storage cannot grow
        """
        if index < 1 or index > self.column_count + 1:
            raise CellIndexError(None, index, "cannot insert column here")
        try:
            for cells in self._rows:
                cells.insert(min(index - 1, len(cells)), "")
        except MemoryError as e:
            raise AllocationError("table column") from e
        self.align_row_sizes()

    def delete_row(self, index: int) -> None:
        """
        Delete row `index`, shifting later rows up.

        Raises:
            CellIndexError: If index is outside [1, row_count]
        """
        if index < 1 or index > len(self._rows):
            raise CellIndexError(index, None, f"table has {self.row_count} rows")
        del self._rows[index - 1]

    def delete_column(self, index: int) -> None:
        """
        Delete column `index` from every row, shifting later cells left.

        Raises:
            CellIndexError: If index is outside [1, column_count]
        """
        if index < 1 or index > self.column_count:
            raise CellIndexError(None, index, f"table has {self.column_count} columns")
        for cells in self._rows:
            if index <= len(cells):
                del cells[index - 1]

    def align_row_sizes(self) -> None:
        """Pad every row with empty cells to the length of the longest row."""
        width = self.column_count
        try:
            for cells in self._rows:
                if len(cells) < width:
                    cells.extend([""] * (width - len(cells)))
        except MemoryError as e:
            raise AllocationError("table cells") from e

    def resize(self, rows: int, cols: int) -> None:
        """
        Grow the table to at least `rows` x `cols` cells. Never shrinks.

        Raises:
            AllocationError: If storage cannot grow
        """
        if rows <= self.row_count and cols <= self.column_count:
            return
        logger.debug(
            "Growing table from %dx%d to at least %dx%d",
            self.row_count,
            self.column_count,
            rows,
            cols,
        )
        width = max(cols, self.column_count)
        try:
            while len(self._rows) < rows:
                self._rows.append([""] * width)
            for cells in self._rows:
                if len(cells) < width:
                    cells.extend([""] * (width - len(cells)))
        except MemoryError as e:
            raise AllocationError("table resize") from e

    def trim(self) -> None:
        """Drop trailing all-empty columns, keeping at least one column."""
        width = self.column_count
        while width > 1 and all(
            len(cells) < width or cells[width - 1] == "" for cells in self._rows
        ):
            width -= 1
        for cells in self._rows:
            del cells[width:]
