"""
Command language parsing.

This package contains the tokenizer and parser turning a command sequence
string into typed command records.
"""

from sps.parsing.parser import (
    Bound,
    CellTargetCommand,
    ClearCell,
    Command,
    CommandKind,
    CommandName,
    CommandParser,
    CommandSequence,
    FindCell,
    RestoreSelection,
    SaveSelection,
    SelectCell,
    SelectExtreme,
    SelectWindow,
    SetValue,
    TableEdit,
    VariableCommand,
    parse_commands,
)

__all__ = [
    "Bound",
    "CellTargetCommand",
    "ClearCell",
    "Command",
    "CommandKind",
    "CommandName",
    "CommandParser",
    "CommandSequence",
    "FindCell",
    "RestoreSelection",
    "SaveSelection",
    "SelectCell",
    "SelectExtreme",
    "SelectWindow",
    "SetValue",
    "TableEdit",
    "VariableCommand",
    "parse_commands",
]
