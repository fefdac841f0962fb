"""
Reading and writing delimiter-separated table text.

Cells are separated by any character of the delimiter set and rows by line
breaks. A cell may be wrapped in double quotes, in which case delimiters and
line breaks inside it are literal. `\\"` and `\\\\` are escapes everywhere.
"""

import logging

from sps.exceptions import ErrorContext, MalformedInputError
from sps.table.store import Table

logger = logging.getLogger(__name__)

QUOTE = '"'
ESCAPE = "\\"
ESCAPABLE = (QUOTE, ESCAPE)


class _TableReader:
    """Single-pass character reader building rows of cells."""

    def __init__(self, text: str, delimiters: str):
        self.text = text
        self.delimiters = delimiters
        self.pos = 0
        self.line = 1
        self.rows: list[list[str]] = []
        self.row: list[str] = []
        self.cell: list[str] = []
        self.cell_started = False
        self.in_quotes = False
        self.quote_line = 1

    def _error(self, message: str, line: int | None = None) -> MalformedInputError:
        return MalformedInputError(
            message, ErrorContext(table_line=line if line is not None else self.line)
        )

    def _peek(self, offset: int = 1) -> str | None:
        index = self.pos + offset
        return self.text[index] if index < len(self.text) else None

    def _is_cell_end(self, char: str | None) -> bool:
        return char is None or char in self.delimiters or char in "\r\n"

    def _end_cell(self) -> None:
        self.row.append("".join(self.cell))
        self.cell = []
        self.cell_started = False

    def _end_row(self) -> None:
        self._end_cell()
        self.rows.append(self.row)
        self.row = []

    def read(self) -> list[list[str]]:
        while self.pos < len(self.text):
            char = self.text[self.pos]

            if char == ESCAPE and self._peek() in ESCAPABLE:
                self.cell.append(self._peek())
                self.cell_started = True
                self.pos += 2
                continue

            if self.in_quotes:
                if char == QUOTE:
                    if not self._is_cell_end(self._peek()):
                        raise self._error("Closing quote must end the cell")
                    self.in_quotes = False
                elif char == "\n":
                    self.line += 1
                    self.cell.append(char)
                else:
                    self.cell.append(char)
                self.pos += 1
                continue

            if char == QUOTE:
                if self.cell_started:
                    raise self._error("Quote is only allowed at the start of a cell")
                self.in_quotes = True
                self.cell_started = True
                self.quote_line = self.line
            elif char in self.delimiters:
                self._end_cell()
            elif char == "\n" or (char == "\r" and self._peek() == "\n"):
                if char == "\r":
                    self.pos += 1
                self._end_row()
                self.line += 1
            else:
                self.cell.append(char)
                self.cell_started = True
            self.pos += 1

        if self.in_quotes:
            raise self._error("Quoted cell is not terminated", self.quote_line)
        if self.cell_started or self.cell or self.row:
            self._end_row()
        return self.rows


def load(text: str, delimiters: str = " ") -> Table:
    """
    Parse table text into a Table.

    Params:
        text: Table content
        delimiters: Characters that separate cells

    Returns:
        Aligned table

    Raises:
        MalformedInputError: If quoting or escaping rules are violated
    """
    rows = _TableReader(text, delimiters).read()
    table = Table(rows)
    table.align_row_sizes()
    logger.debug("Loaded table with %d rows, %d columns", table.row_count, table.column_count)
    return table


def _escape(value: str, quoted: bool) -> str:
    out = []
    for index, char in enumerate(value):
        if index + 1 < len(value):
            following = value[index + 1]
        else:
            following = QUOTE if quoted else ""
        if char == QUOTE or (char == ESCAPE and following in ESCAPABLE):
            out.append(ESCAPE)
        out.append(char)
    return "".join(out)


def encode_cell(value: str, delimiters: str = " ") -> str:
    """
    Encode one cell value for output.

    The value is quoted only when it contains a delimiter or a line break.
    """
    quoted = any(char in delimiters or char in "\r\n" for char in value)
    escaped = _escape(value, quoted)
    return f"{QUOTE}{escaped}{QUOTE}" if quoted else escaped


def save(table: Table, delimiters: str = " ") -> str:
    """
    Serialize a table to text.

    Trailing empty columns are trimmed first. Cells are joined with the first
    delimiter character and every row ends with a line break.

    Params:
        table: Table to serialize (trimmed in place)
        delimiters: Delimiter set; the first character is used for output

    Returns:
        Table text
    """
    table.trim()
    separator = delimiters[0]
    lines = [
        separator.join(encode_cell(value, delimiters) for value in cells) + "\n"
        for cells in table.rows()
    ]
    return "".join(lines)
