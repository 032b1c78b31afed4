#!/usr/bin/env python3
"""
% python3 -m optimz ./a.out -3

"""
import argparse
import logging
import shlex
import sys
from typing import Optional

from . import __version__
from .config import DEFAULT_PASSES, configure_logging
from .core import Optimizer
from .errors import OptimzError, UsageError

log = logging.getLogger("optimz")


class ArgumentParser(argparse.ArgumentParser):
    """argparse parser reporting errors as UsageError (exit status 1)"""

    def error(self, message):
        raise UsageError(message)


def parse_passes(value: Optional[str]) -> int:
    """convert a `-<times>` argument into a pass count (at least 1)"""
    if value is None:
        return DEFAULT_PASSES
    if not value.startswith("-"):
        raise UsageError("Second argument must be -<times> (e.g., -2)")
    try:
        passes = int(value[1:])
    except ValueError:
        raise UsageError(f"Invalid optimization count: {value}") from None
    return max(1, passes)


def build_parser() -> ArgumentParser:
    """commandline interface."""
    parser = ArgumentParser(
        prog="optimz",
        description="Performs multiple optimization passes over an ELF binary.",
        epilog="<times> defaults to 1 if omitted. Example: optimz ./a.out -2",
    )
    option = parser.add_argument
    option("path", type=str, help="ELF executable to optimize in place")
    # '-3' parses as a positional since no option looks like a negative number
    option("times", nargs="?", metavar="-<times>",
           help="maximum number of optimization passes")
    option("--verbose", action="store_true",
           help="log every executed command")
    option("--dry-run", action="store_true",
           help="show the commands of one pass without running them")
    option("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
        passes = parse_passes(args.times)
    except UsageError as e:
        configure_logging()
        parser.print_usage(sys.stderr)
        log.critical("%s", e)
        return 1

    configure_logging(args.verbose)
    optimizer = Optimizer(args.path, passes)
    try:
        if args.dry_run:
            for command in optimizer.plan():
                log.info("[plan] %s", shlex.join(command))
        else:
            optimizer.process()
    except OptimzError as e:
        log.critical("%s", e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
