"""
Run configuration.

Validated settings for one invocation: delimiter set, command sequence and the
table file to rewrite.
"""

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from sps.exceptions import ConfigurationError

PROGRAM_TAG = "sps"
DEFAULT_DELIMITERS = " "
FORBIDDEN_DELIMITERS = {'"': "quote", "\\": "backslash", "\n": "newline", "\r": "carriage return"}


class RunConfig(BaseModel):
    """Settings for one processing run."""

    model_config = ConfigDict(frozen=True)

    commands: str = Field(description="Semicolon-separated command sequence")
    path: Path = Field(description="Table file, rewritten in place")
    delimiters: str = Field(
        default=DEFAULT_DELIMITERS,
        description="Cell delimiter characters; the first one is used for output",
    )
    verbose: bool = False

    @field_validator("delimiters")
    @classmethod
    def _check_delimiters(cls, value: str) -> str:
        if not value:
            raise ValueError("delimiter set must not be empty")
        for char, label in FORBIDDEN_DELIMITERS.items():
            if char in value:
                raise ValueError(f"{label} cannot be used as a delimiter")
        return value

    @field_validator("commands")
    @classmethod
    def _check_commands(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("command sequence must not be empty")
        return value

    @property
    def output_delimiter(self) -> str:
        """Delimiter written between cells on output."""
        return self.delimiters[0]

    @classmethod
    def build(cls, **values) -> "RunConfig":
        """
        Create a configuration, converting validation failures.

        Raises:
            ConfigurationError: If any value is invalid
        """
        try:
            return cls(**values)
        except ValidationError as e:
            problems = "; ".join(
                f"{'.'.join(str(loc) for loc in error['loc'])}: {error['msg']}"
                for error in e.errors()
            )
            raise ConfigurationError(f"Invalid configuration: {problems}") from e
