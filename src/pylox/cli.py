"""pylox CLI — run a .lox file or start an interactive prompt."""

from __future__ import annotations

import logging
import sys

from .session import Lox

logger = logging.getLogger(__name__)

# sysexits.h codes
EX_USAGE = 64
EX_DATAERR = 65
EX_NOINPUT = 66
EX_SOFTWARE = 70

PROMPT = "> "

STACK_OVERFLOW = "pylox: stack overflow (maximum recursion depth exceeded)"

USAGE: str = """\
pylox [OPTIONS] [FILE]

Run a Lox program, or start an interactive prompt when FILE is omitted.

Options:
  --verbose  Log pipeline phases to stderr
  --help     Show this help message
"""


def run_file(path: str) -> int:
    try:
        with open(path, encoding="utf-8") as f:
            source = f.read()
    except FileNotFoundError:
        print("pylox: " + path + ": No such file or directory", file=sys.stderr)
        return EX_NOINPUT
    except (OSError, UnicodeDecodeError) as e:
        print("pylox: " + path + ": " + str(e), file=sys.stderr)
        return EX_NOINPUT

    logger.debug("running %s", path)
    try:
        result = Lox().run(source)
    except RecursionError:
        print(STACK_OVERFLOW, file=sys.stderr)
        return EX_SOFTWARE
    if result.had_error:
        return EX_DATAERR
    if result.had_runtime_error:
        return EX_SOFTWARE
    return 0


def run_prompt() -> int:
    lox = Lox()
    while True:
        try:
            line = input(PROMPT)
        except EOFError:
            print()
            return 0
        # Each line gets its own outcome; a mistake does not end the session
        try:
            lox.run(line)
        except RecursionError:
            print(STACK_OVERFLOW, file=sys.stderr)
            return EX_SOFTWARE


def main(argv: list[str] | None = None) -> int:
    args = argv if argv is not None else sys.argv[1:]
    filepath: str = ""
    verbose = False
    for arg in args:
        if arg == "--help" or arg == "-h":
            print(USAGE, end="")
            return 0
        elif arg == "--verbose" or arg == "-v":
            verbose = True
        elif arg.startswith("-"):
            print("pylox: unknown flag '" + arg + "'", file=sys.stderr)
            print(USAGE, end="", file=sys.stderr)
            return EX_USAGE
        elif filepath == "":
            filepath = arg
        else:
            print("pylox: unexpected argument '" + arg + "'", file=sys.stderr)
            print(USAGE, end="", file=sys.stderr)
            return EX_USAGE

    if verbose:
        logging.basicConfig(
            level=logging.DEBUG, format="%(name)s: %(message)s", stream=sys.stderr
        )

    if filepath == "":
        return run_prompt()
    return run_file(filepath)


if __name__ == "__main__":
    sys.exit(main())
