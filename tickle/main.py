"""Command-line entry point: starts the REPL, runs a script, or runs a test file."""

from __future__ import annotations

import argparse
import logging
import sys

from tickle.config import InterpConfig, get_prompt
from tickle.harness import run_tests
from tickle.interpreter import Interp
from tickle.shell import repl, script


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="tickle", description="Tickle command language interpreter")
    parser.add_argument("file", nargs="?", help="script to run (if omitted, starts the interactive shell)")
    parser.add_argument("args", nargs=argparse.REMAINDER, help="arguments passed to the script as $argv")
    parser.add_argument("--test", action="store_true", help="run FILE as a test script and report results")
    parser.add_argument("--prompt", default=None, help="prompt for the interactive shell")
    parser.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        config = InterpConfig.from_env()
    except ValueError as exc:
        print(f"tickle: {exc}", file=sys.stderr)
        return 2
    interp = Interp(config)

    if args.file is None:
        if args.test:
            print("tickle: --test needs a file", file=sys.stderr)
            return 2
        repl(interp, args.prompt if args.prompt is not None else get_prompt())
        return 0

    if args.test:
        counts = run_tests(interp, args.file)
        if counts is None:
            return 1
        return 0 if counts.failed == 0 and counts.errors == 0 else 1

    return script(interp, [args.file, *args.args])
