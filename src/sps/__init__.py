"""
SPS - a command-line spreadsheet text processor

SPS reads a delimited text table, applies a sequence of selection and editing
commands written in a compact mini-language, and writes the table back.
"""

from importlib.metadata import version

from sps.execution import CommandExecutor, ExecutionState, Selection
from sps.parsing import CommandParser, parse_commands
from sps.processor import process_file, process_text
from sps.table import Table, load, save

__version__ = version("sps")

__all__ = [
    "__version__",
    "CommandExecutor",
    "CommandParser",
    "ExecutionState",
    "Selection",
    "Table",
    "load",
    "parse_commands",
    "process_file",
    "process_text",
    "save",
]
