"""
Shared test fixtures and utilities for the sps test suite.
"""

import pytest

from sps.execution.executor import CommandExecutor
from sps.parsing.parser import parse_commands
from sps.table.codec import load, save


@pytest.fixture
def table_file(tmp_path):
    """Factory writing table text to a temporary file and returning its path.

    Usage:
        def test_something(table_file):
            path = table_file("a b\\n")
    """

    def _write(text: str, name: str = "table.txt"):
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def run():
    """Run a command sequence on table text and return (output text, executor)."""

    def _run(text: str, commands: str, delimiters: str = " "):
        table = load(text, delimiters)
        executor = CommandExecutor(table)
        executor.execute(parse_commands(commands))
        return save(table, delimiters), executor

    return _run
