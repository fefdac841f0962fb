"""
Command line entry point.

Usage: sps [-d DELIMCHARS] [-v] COMMAND_SEQUENCE FILE
"""

import argparse
import logging
import sys

from sps.config import DEFAULT_DELIMITERS, PROGRAM_TAG, RunConfig
from sps.exceptions import SPSError
from sps.processor import process_file


def build_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=PROGRAM_TAG,
        description="Apply selection and editing commands to a delimited text table in place.",
    )
    parser.add_argument(
        "-d",
        dest="delimiters",
        default=DEFAULT_DELIMITERS,
        metavar="DELIMCHARS",
        help="cell delimiter characters; the first one is used on output (default: space)",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="log processing steps to stderr"
    )
    parser.add_argument("commands", metavar="COMMAND_SEQUENCE", help="semicolon-separated commands")
    parser.add_argument("path", metavar="FILE", help="table file, rewritten in place")
    return parser


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(name)s: %(levelname)s: %(message)s",
        stream=sys.stderr,
    )


def main(argv: list[str] | None = None) -> int:
    """
    Run the command line interface.

    Params:
        argv: Arguments without the program name; defaults to sys.argv[1:]

    Returns:
        Process exit code
    """
    args = build_argument_parser().parse_args(argv)
    configure_logging(args.verbose)

    try:
        config = RunConfig.build(
            commands=args.commands,
            path=args.path,
            delimiters=args.delimiters,
            verbose=args.verbose,
        )
        process_file(config)
    except SPSError as e:
        print(f"{PROGRAM_TAG}: {e}", file=sys.stderr)
        return e.exit_code
    return 0


if __name__ == "__main__":
    sys.exit(main())
