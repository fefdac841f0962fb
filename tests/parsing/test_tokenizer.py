"""
Tests for splitting command sequences into raw commands.
"""

import pytest

from sps.exceptions import MalformedInputError
from sps.parsing.tokenizer import tokenize


def words(source: str) -> list[tuple[bool, list[str]]]:
    return [(raw.bracketed, raw.words) for raw in tokenize(source)]


class TestTokenize:
    """Tests for the command tokenizer."""

    def test_single_command(self):
        """Test a bare command with one parameter."""
        assert words("set X") == [(False, ["set", "X"])]

    def test_semicolon_separates_commands(self):
        """Test commands are split on semicolons."""
        assert words("irow;clear") == [(False, ["irow"]), (False, ["clear"])]

    def test_selection_form(self):
        """Test bracket body is kept as words."""
        assert words("[1,2]") == [(True, ["1,2"])]

    def test_selection_followed_directly_by_command(self):
        """Test `]` ends the selection and starts the next command."""
        assert words("[1,1]set X") == [(True, ["1,1"]), (False, ["set", "X"])]

    def test_selection_followed_by_space_and_command(self):
        """Test a space after `]` is allowed."""
        assert words("[1,1] set X") == [(True, ["1,1"]), (False, ["set", "X"])]

    def test_selection_followed_by_semicolon(self):
        """Test `];` does not create an empty command."""
        assert words("[1,1];set X") == [(True, ["1,1"]), (False, ["set", "X"])]

    def test_find_keyword(self):
        """Test bracketed keyword with parameter."""
        assert words("[find abc]") == [(True, ["find", "abc"])]

    def test_escaped_space(self):
        """Test `\\ ` is a literal space inside a parameter."""
        assert words("set hello\\ world") == [(False, ["set", "hello world"])]

    def test_escaped_semicolon(self):
        """Test `\\;` does not end the command."""
        assert words("set a\\;b;clear") == [(False, ["set", "a;b"]), (False, ["clear"])]

    def test_quoted_parameter(self):
        """Test quotes keep spaces and semicolons literal."""
        assert words('set "a b;c"') == [(False, ["set", "a b;c"])]

    def test_quoted_empty_parameter(self):
        """Test an empty quoted parameter is kept."""
        assert words('set ""') == [(False, ["set", ""])]

    def test_quoted_in_brackets(self):
        """Test a quoted parameter may be closed right before `]`."""
        assert words('[find "x y"]') == [(True, ["find", "x y"])]

    def test_bracket_inside_parameter_is_literal(self):
        """Test `[` after the command name is part of the parameter."""
        assert words("swap [1,2]") == [(False, ["swap", "[1,2]"])]

    def test_empty_commands_are_skipped(self):
        """Test stray semicolons and spaces produce no commands."""
        assert words(" ;;irow; ") == [(False, ["irow"])]

    def test_raw_text_and_index(self):
        """Test each raw command remembers its source and position."""
        commands = tokenize("[1,2];  set X ;clear")
        assert [c.text for c in commands] == ["[1,2]", "set X", "clear"]
        assert [c.index for c in commands] == [1, 2, 3]

    @pytest.mark.parametrize(
        "source",
        [
            "[1,2",
            "[1,2;set X",
            "[[1,2]]",
            'set "abc',
            'set "ab"c',
            'set a"b',
        ],
    )
    def test_malformed(self, source):
        """Test unbalanced brackets and misplaced quotes are rejected."""
        with pytest.raises(MalformedInputError):
            tokenize(source)
