"""
Tests for the command executor.

Each test loads a small table, runs a command sequence and checks either the
serialized output or the executor state.
"""

import pytest

from sps.exceptions import (
    CellIndexError,
    InvalidArgumentError,
    NoNumericValueError,
    StateError,
)
from sps.execution.executor import CommandExecutor, execute
from sps.execution.state import Selection
from sps.parsing.parser import RestoreSelection, SelectCell, parse_commands
from sps.table.codec import load

GRID = "1 2 3\n4 5 6\n7 8 9\n"


class TestSelectionCommands:
    """Tests for commands that change the selection."""

    def test_select_cell(self, run):
        """Test [R,C] selects one cell."""
        _, executor = run(GRID, "[2,3]")
        assert executor.selection == Selection.cell(2, 3)

    def test_select_row(self, run):
        """Test [R,_] selects a whole row."""
        _, executor = run(GRID, "[2,_]")
        assert executor.selection == Selection(2, 1, 2, 3)

    def test_select_column(self, run):
        """Test [_,C] selects a whole column."""
        _, executor = run(GRID, "[_,2]")
        assert executor.selection == Selection(1, 2, 3, 2)

    def test_select_all(self, run):
        """Test [_,_] selects the whole table."""
        _, executor = run(GRID, "[_,_]")
        assert executor.selection == Selection(1, 1, 3, 3)

    def test_window(self, run):
        """Test [R1,C1,R2,C2] selects a window."""
        _, executor = run(GRID, "[1,2,2,3]")
        assert executor.selection == Selection(1, 2, 2, 3)

    def test_window_open_end(self, run):
        """Test open-ended window bounds reach the last row/column."""
        _, executor = run(GRID, "[2,2,_,-]")
        assert executor.selection == Selection(2, 2, 3, 3)

    def test_selection_beyond_table_grows_it(self, run):
        """Test selecting outside the table adds rows and columns."""
        output, executor = run("a\n", "[3,2];set X")
        assert executor.table.row_count == 3
        assert executor.table.column_count == 2
        assert output == "a \n \n X\n"

    def test_min(self, run):
        """Test [min] collapses to the smallest number."""
        _, executor = run("5 x 2\n2 -1 8\n", "[_,_];[min]")
        assert executor.selection == Selection.cell(2, 2)

    def test_max_first_wins_on_ties(self, run):
        """Test [max] keeps the first maximum in row-major order."""
        _, executor = run("9 1\n3 9\n", "[_,_];[max]")
        assert executor.selection == Selection.cell(1, 1)

    def test_min_only_in_selection(self, run):
        """Test extremes are searched within the current selection."""
        _, executor = run(GRID, "[2,_];[min]")
        assert executor.selection == Selection.cell(2, 1)

    def test_min_without_numbers(self, run):
        """Test [min] over text cells fails."""
        with pytest.raises(NoNumericValueError):
            run("a b\nc d\n", "[_,_];[min]")

    def test_find(self, run):
        """Test [find] collapses to the first cell containing the string."""
        _, executor = run("apple pear\nbanana pineapple\n", "[_,_];[find apple]")
        assert executor.selection == Selection.cell(1, 1)

    def test_find_substring_later_cell(self, run):
        """Test substring matches in later cells."""
        _, executor = run("apple pear\nbanana pineapple\n", "[_,_];[find nan]")
        assert executor.selection == Selection.cell(2, 1)

    def test_find_no_match_keeps_selection(self, run):
        """Test a failed search leaves the selection unchanged."""
        _, executor = run(GRID, "[_,_];[find nope]")
        assert executor.selection == Selection(1, 1, 3, 3)

    def test_save_and_restore(self, run):
        """Test [set] stores and [_] restores the selection."""
        _, executor = run(GRID, "[1,2,2,3];[set];[3,3];[_]")
        assert executor.selection == Selection(1, 2, 2, 3)
        assert executor.state.backup == Selection(1, 2, 2, 3)

    def test_restore_without_save(self, run):
        """Test [_] before [set] fails."""
        with pytest.raises(StateError):
            run(GRID, "[_]")

    @pytest.mark.parametrize(
        "commands",
        ["[1,1]", "[_,_]", "[2,_]", "[1,1,3,3]", "[2,2,_,_]", "[_,_];[min]",
         "[_,_];[find 5]", "[1,1];[set];[2,2];[_]", "[5,5]"],
    )
    def test_bounds_stay_ordered(self, commands):
        """Test every selection command leaves ordered bounds."""
        table = load(GRID)
        executor = CommandExecutor(table)
        for command in parse_commands(commands):
            executor.run(command)
            selection = executor.selection
            assert selection.row_from <= selection.row_to
            assert selection.col_from <= selection.col_to


class TestTableEdits:
    """Tests for row and column insertion and deletion."""

    def test_irow(self, run):
        """Test irow inserts one row above the selection."""
        output, _ = run("a\nb\n", "[2,1];irow")
        assert output == "a\n\nb\n"

    def test_arow(self, run):
        """Test arow inserts one row below the selection."""
        output, _ = run("a\nb\n", "[1,_];arow")
        assert output == "a\n\nb\n"

    def test_irow_once_for_multi_cell_selection(self, run):
        """Test a multi-cell selection still inserts a single row."""
        output, _ = run("a b\nc d\n", "[_,_];irow")
        assert output == " \na b\nc d\n"

    def test_drow(self, run):
        """Test drow deletes every selected row."""
        output, _ = run(GRID, "[1,1,2,1];drow")
        assert output == "7 8 9\n"

    def test_icol(self, run):
        """Test icol inserts a column left of the selection."""
        output, _ = run("a b\nc d\n", "[1,2];icol")
        assert output == "a  b\nc  d\n"

    def test_acol(self, run):
        """Test acol inserts a column right of the selection."""
        output, _ = run("a b\nc d\n", "[1,1];acol")
        assert output == "a  b\nc  d\n"

    def test_dcol(self, run):
        """Test dcol deletes every selected column."""
        output, _ = run(GRID, "[_,2];dcol")
        assert output == "1 3\n4 6\n7 9\n"

    def test_drow_then_set_regrows(self, run):
        """Test a data command after deleting the last row grows the table again."""
        output, _ = run("a\nb\n", "[2,1];drow;set X")
        assert output == "a\nX\n"


class TestCellCommands:
    """Tests for set, clear and swap."""

    def test_set_single_cell(self, run):
        """Test writing a value into the selected cell."""
        output, _ = run("a b\nc d\n", "[1,1]set X")
        assert output == "X b\nc d\n"

    def test_set_whole_row(self, run):
        """Test set applies to every selected cell."""
        output, _ = run(GRID, "[2,_];set 0")
        assert output == "1 2 3\n0 0 0\n7 8 9\n"

    def test_set_value_with_delimiter_is_quoted(self, run):
        """Test values with delimiters are quoted on output."""
        output, _ = run("a b\n", "[1,1];set hello\\ world")
        assert output == '"hello world" b\n'

    def test_clear(self, run):
        """Test clear empties selected cells."""
        output, _ = run(GRID, "[_,3];clear")
        assert output == "1 2\n4 5\n7 8\n"

    def test_swap(self, run):
        """Test swap exchanges the current cell with the target."""
        output, _ = run("a b\nc d\n", "[1,1];swap 2,2")
        assert output == "d b\nc a\n"

    def test_swap_per_cell(self, run):
        """Test swap runs for every selected cell in order."""
        output, _ = run("a b c\n", "[1,1,1,2];swap 1,3")
        assert output == "c a b\n"

    def test_swap_target_outside_table(self, run):
        """Test swap does not grow the table."""
        with pytest.raises(CellIndexError):
            run("a b\n", "[1,1];swap 5,5")


class TestAggregates:
    """Tests for sum, avg, count and len."""

    def test_sum_grows_table(self, run):
        """Test sum writes into a new column when the target is outside."""
        output, executor = run("1 2\n3 4\n", "[_,_]sum 1,3")
        assert executor.table.get_cell(1, 3) == "10"
        assert executor.table.column_count == 3
        assert output == "1 2 10\n3 4 \n"

    def test_sum_skips_text(self, run):
        """Test non-numeric cells are ignored."""
        output, _ = run("1 x 2.5\n", "[1,_];sum 2,1")
        assert output == "1 x 2.5\n3.5  \n"

    def test_sum_of_no_numbers_is_zero(self, run):
        """Test sum over text writes 0."""
        output, _ = run("a b\n", "[1,_];sum 1,3")
        assert output == "a b 0\n"

    def test_avg(self, run):
        """Test avg writes the mean of numeric cells."""
        output, _ = run("1 2\n3 x\n", "[_,_];avg 3,1")
        assert output == "1 2\n3 x\n2 \n"

    def test_avg_without_numbers(self, run):
        """Test avg over text fails."""
        with pytest.raises(NoNumericValueError):
            run("a b\n", "[1,_];avg 2,1")

    def test_count(self, run):
        """Test count counts non-empty cells."""
        output, _ = run("a  b\n", "[1,1,1,3];count 1,4")
        assert output == "a  b 2\n"

    def test_len(self, run):
        """Test len writes the length of the current cell."""
        output, _ = run("hello\n", "[1,1];len 1,2")
        assert output == "hello 5\n"

    def test_target_inside_selection(self, run):
        """Test the result is written after all cells were read."""
        output, _ = run("1 2\n3 4\n", "[_,_];sum 1,1")
        assert output == "10 2\n3 4\n"


class TestVariables:
    """Tests for def, use and inc."""

    def test_def_and_use(self, run):
        """Test copying a value through a variable."""
        output, executor = run("a b\n", "[1,1];def _0;[1,2];use _0")
        assert output == "a a\n"
        assert executor.state.variables[0] == "a"

    def test_inc_numeric(self, run):
        """Test inc adds one to a numeric variable."""
        output, _ = run("41 x\n", "[1,1];def _3;inc _3;[1,2];use _3")
        assert output == "41 42\n"

    def test_inc_text_counts_from_zero(self, run):
        """Test inc treats text as zero."""
        _, executor = run("abc\n", "[1,1];def _1;inc _1;inc _1")
        assert executor.state.variables[1] == "2"

    def test_inc_per_cell(self, run):
        """Test inc runs once per selected cell."""
        _, executor = run("a b c\n", "[1,_];inc _2")
        assert executor.state.variables[2] == "3"

    def test_use_unset_variable_writes_empty(self, run):
        """Test unset variables are empty strings."""
        output, _ = run("a b\n", "[1,2];use _5")
        assert output == "a\n"


class TestExecutePolicy:
    """Tests for sequencing and error propagation."""

    def test_stops_at_first_error(self):
        """Test later commands do not run after a failure."""
        table = load("a b\n")
        with pytest.raises(StateError) as exc_info:
            execute(parse_commands("[1,1];set X;[_];set Y"), table)
        assert table.get_cell(1, 1) == "X"
        assert exc_info.value.context.command_index == 3
        assert exc_info.value.context.command_text == "[_]"

    def test_execute_returns_state(self):
        """Test the convenience function returns the final state."""
        state = execute(parse_commands("[2,2]"), load(GRID))
        assert state.selection == Selection.cell(2, 2)

    def test_records_built_in_code(self):
        """Test commands constructed directly run like parsed ones."""
        executor = CommandExecutor(load("a\n"))
        executor.execute([SelectCell(2, 2)])
        assert executor.selection == Selection.cell(2, 2)

    def test_record_without_source_uses_str(self):
        """Test commands built in code still get a readable context."""
        executor = CommandExecutor(load("a\n"))
        with pytest.raises(StateError) as exc_info:
            executor.execute([RestoreSelection()])
        assert exc_info.value.context.command_text == "[_]"

    def test_select_cell_rejects_zero(self):
        """Test coordinates below 1 are refused when building records."""
        with pytest.raises(InvalidArgumentError):
            SelectCell(0, 1)
