"""
Processing pipeline: parse commands, load table, execute, save table.

The table file is opened for writing only after every command succeeded, so a
failing run leaves it untouched.
"""

import logging

from sps.config import RunConfig
from sps.exceptions import ConfigurationError, MalformedInputError
from sps.execution.executor import CommandExecutor
from sps.parsing.parser import parse_commands
from sps.table.codec import load, save

logger = logging.getLogger(__name__)


def process_text(text: str, commands: str, delimiters: str = " ") -> str:
    """
    Apply a command sequence to table text.

    Params:
        text: Table content
        commands: Semicolon-separated command sequence
        delimiters: Cell delimiter characters

    Returns:
        Modified table content

    Raises:
        SPSError: On any parse or execution failure
    """
    sequence = parse_commands(commands)
    table = load(text, delimiters)
    CommandExecutor(table).execute(sequence)
    return save(table, delimiters)


def process_file(config: RunConfig) -> None:
    """
    Apply the configured command sequence to the configured file in place.

    Params:
        config: Validated run configuration

    Raises:
        ConfigurationError: If the file cannot be read or written
        MalformedInputError: If the file is not valid UTF-8
        SPSError: On any parse or execution failure
    """
    try:
        with open(config.path, encoding="utf-8", newline="") as handle:
            text = handle.read()
    except OSError as e:
        raise ConfigurationError(f"Cannot read '{config.path}': {e.strerror}") from e
    except UnicodeDecodeError as e:
        raise MalformedInputError(
            f"'{config.path}' is not valid UTF-8 (byte {e.start})"
        ) from e
    logger.info("Loaded %s (%d bytes)", config.path, len(text))

    result = process_text(text, config.commands, config.delimiters)

    try:
        with open(config.path, "w", encoding="utf-8", newline="") as handle:
            handle.write(result)
    except OSError as e:
        raise ConfigurationError(f"Cannot write '{config.path}': {e.strerror}") from e
    logger.info("Saved %s (%d bytes)", config.path, len(result))
