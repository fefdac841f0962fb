"""
Tokenizer for command sequences.

Splits a command sequence such as ``[1,2];set hello\\ world;[_,_]sum 1,3`` into
raw commands, each a list of unescaped words. Bracketed selection forms are
closed by ``]`` and may be followed directly by the next command.
"""

from dataclasses import dataclass, field

from sps.exceptions import ErrorContext, MalformedInputError

COMMAND_SEPARATOR = ";"
WORD_SEPARATOR = " "
QUOTE = '"'
ESCAPE = "\\"
OPEN_BRACKET = "["
CLOSE_BRACKET = "]"
ESCAPABLE = frozenset(" ;\"\\[]")


@dataclass
class RawCommand:
    """
    One command as written, before interpretation.

    Params:
        words: Unescaped words; for bracketed commands the bracket body
        bracketed: True for ``[...]`` selection forms
        text: Source text of the command, for diagnostics
        index: 1-based position in the sequence
    """

    words: list[str] = field(default_factory=list)
    bracketed: bool = False
    text: str = ""
    index: int = 0


class Tokenizer:
    """Hand-rolled scanner for the command language."""

    def __init__(self, source: str):
        self.source = source
        self.pos = 0
        self.commands: list[RawCommand] = []
        self._reset()

    def _reset(self) -> None:
        self.words: list[str] = []
        self.word: list[str] = []
        self.word_started = False
        self.bracketed = False
        self.in_brackets = False
        self.start = self.pos

    def _error(self, message: str) -> MalformedInputError:
        text = self.source[self.start : self.pos + 1].strip()
        return MalformedInputError(
            message,
            ErrorContext(command_index=len(self.commands) + 1, command_text=text),
        )

    def _end_word(self) -> None:
        if self.word_started:
            self.words.append("".join(self.word))
        self.word = []
        self.word_started = False

    def _end_command(self, end: int) -> None:
        self._end_word()
        if self.in_brackets:
            raise self._error("Missing ']' in selection")
        if self.words or self.bracketed:
            self.commands.append(
                RawCommand(
                    words=self.words,
                    bracketed=self.bracketed,
                    text=self.source[self.start : end].strip(),
                    index=len(self.commands) + 1,
                )
            )
        self.pos = end
        self._reset()

    def _read_quoted(self) -> None:
        """Consume a quoted word; `pos` points at the opening quote."""
        self.pos += 1
        while self.pos < len(self.source):
            char = self.source[self.pos]
            if char == ESCAPE and self._peek() in ESCAPABLE:
                self.word.append(self._peek())
                self.pos += 2
                continue
            if char == QUOTE:
                following = self._peek()
                closers = (None, WORD_SEPARATOR, COMMAND_SEPARATOR)
                if following not in closers and not (
                    self.in_brackets and following == CLOSE_BRACKET
                ):
                    raise self._error("Closing quote must end the parameter")
                self.pos += 1
                return
            self.word.append(char)
            self.pos += 1
        raise self._error("Quoted parameter is not terminated")

    def _peek(self) -> str | None:
        index = self.pos + 1
        return self.source[index] if index < len(self.source) else None

    def tokenize(self) -> list[RawCommand]:
        """
        Split the source into raw commands.

        Returns:
            Raw commands in source order; empty commands are skipped

        Raises:
            MalformedInputError: On unbalanced brackets or quotes
        """
        while self.pos < len(self.source):
            char = self.source[self.pos]

            if char == ESCAPE and self._peek() in ESCAPABLE:
                self.word.append(self._peek())
                self.word_started = True
                self.pos += 2
                continue

            if char == QUOTE:
                if self.word_started:
                    raise self._error("Quote is only allowed at the start of a parameter")
                self.word_started = True
                self._read_quoted()
                continue

            if char == OPEN_BRACKET and not self.words and not self.word_started:
                if self.bracketed:
                    raise self._error("Nested '[' in selection")
                self.bracketed = True
                self.in_brackets = True
                self.start = self.pos
            elif char == CLOSE_BRACKET and self.in_brackets:
                self.in_brackets = False
                self._end_command(self.pos + 1)
                continue
            elif char == COMMAND_SEPARATOR:
                self._end_command(self.pos)
                self.start = self.pos + 1
            elif char == WORD_SEPARATOR:
                self._end_word()
            else:
                self.word.append(char)
                self.word_started = True
            self.pos += 1

        self._end_command(self.pos)
        return self.commands


def tokenize(source: str) -> list[RawCommand]:
    """Convenience function to tokenize a command sequence."""
    return Tokenizer(source).tokenize()
