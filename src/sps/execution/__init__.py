"""
Command execution.

This package contains the executor applying parsed commands to a table and the
selection/variable state it keeps for the duration of a run.
"""

from sps.execution.executor import CommandExecutor, execute
from sps.execution.numeric import format_number, is_number, to_number
from sps.execution.state import ExecutionState, Selection

__all__ = [
    "CommandExecutor",
    "ExecutionState",
    "Selection",
    "execute",
    "format_number",
    "is_number",
    "to_number",
]
