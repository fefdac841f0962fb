"""
Numeric cell values.

A cell counts as a number only if it is an optional leading minus, digits and
at most one decimal point. Anything else (including exponents, spaces or a
leading plus) is text.
"""

import re

NUMBER_PATTERN = re.compile(r"-?(?:[0-9]+\.?[0-9]*|\.[0-9]+)")


def is_number(value: str | None) -> bool:
    """Check whether a cell value is numeric."""
    return value is not None and NUMBER_PATTERN.fullmatch(value) is not None


def to_number(value: str | None) -> float | None:
    """Parse a numeric cell value, or return None for text."""
    if not is_number(value):
        return None
    return float(value)


def format_number(value: float) -> str:
    """Format a number in its shortest general form, e.g. 10, 2.5, -0.25."""
    text = format(value, ".15g")
    return "0" if text == "-0" else text
