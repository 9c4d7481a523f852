"""Lox session — drives scan, parse, resolve and interpret for one source unit."""

from __future__ import annotations

import logging
import sys
from typing import Callable

from .parse import Parser
from .report import LoxError, Reporter, RunResult, StreamReporter
from .resolve import Resolver
from .runtime import Interpreter
from .tokens import Scanner

logger = logging.getLogger(__name__)

# Each Lox call nests about eight Python frames
RECURSION_LIMIT = 20_000


def raise_recursion_limit(limit: int = RECURSION_LIMIT) -> None:
    """Raise the host recursion limit to at least `limit`; never lowers it."""
    if sys.getrecursionlimit() < limit:
        sys.setrecursionlimit(limit)


class Lox:
    """One interpreter plus the collaborators it reports through.

    Globals persist across `run` calls, so a prompt can define something on
    one line and use it on the next. The outcome flags do not: each run
    returns a fresh `RunResult`.
    """

    def __init__(
        self,
        *,
        out: Callable[[str], None] | None = None,
        reporter: Reporter | None = None,
    ):
        self.reporter: Reporter = reporter if reporter is not None else StreamReporter()
        self.interpreter: Interpreter = Interpreter(out)
        raise_recursion_limit()

    def _report_static(self, errors: list[LoxError]) -> None:
        for err in errors:
            self.reporter.error(err.line, err.where, err.msg)

    def run(self, source: str) -> RunResult:
        scanner = Scanner(source)
        tokens = scanner.scan_tokens()
        logger.debug("scanned %d tokens", len(tokens))

        parser = Parser(tokens)
        statements = parser.parse()
        logger.debug("parsed %d top-level statements", len(statements))

        static: list[LoxError] = []
        static.extend(scanner.errors)
        static.extend(parser.errors)
        if static:
            self._report_static(static)
            logger.debug("%d syntax errors; skipping resolution", len(static))
            return RunResult(had_error=True)

        resolver = Resolver()
        locals_ = resolver.resolve(statements)
        if resolver.errors:
            self._report_static(list(resolver.errors))
            logger.debug("%d resolution errors; not executing", len(resolver.errors))
            return RunResult(had_error=True)
        logger.debug("resolved %d local bindings", len(locals_))

        self.interpreter.resolve(locals_)
        err = self.interpreter.interpret(statements)
        if err is not None:
            self.reporter.runtime_error(err.line, err.msg)
            logger.debug("execution halted at line %d", err.line)
            return RunResult(had_runtime_error=True)
        return RunResult()
