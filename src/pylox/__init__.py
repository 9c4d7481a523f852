"""Lox scanner, parser, resolver and interpreter — public API."""

from __future__ import annotations

from typing import Callable

from .ast import Stmt
from .parse import ParseError as ParseError, parse_tokens
from .report import (
    CollectingReporter as CollectingReporter,
    LoxError as LoxError,
    LoxRuntimeError as LoxRuntimeError,
    Reporter as Reporter,
    RunResult as RunResult,
    StreamReporter as StreamReporter,
)
from .resolve import ResolveError as ResolveError, Resolver
from .runtime import Interpreter as Interpreter
from .session import Lox as Lox
from .tokens import ScanError as ScanError, Token as Token, tokenize as tokenize


def parse(source: str) -> tuple[list[Stmt], list[LoxError]]:
    """Scan and parse Lox source. Returns (statements, syntax errors)."""
    tokens, scan_errors = tokenize(source)
    statements, parse_errors = parse_tokens(tokens)
    return statements, [*scan_errors, *parse_errors]


def check(source: str) -> list[LoxError]:
    """Scan, parse and resolve Lox source. Returns all static errors (empty = ok)."""
    statements, errors = parse(source)
    if errors:
        return errors
    resolver = Resolver()
    resolver.resolve(statements)
    return list(resolver.errors)


def run(
    source: str,
    *,
    out: Callable[[str], None] | None = None,
    reporter: Reporter | None = None,
) -> RunResult:
    """Run Lox source in a fresh session."""
    return Lox(out=out, reporter=reporter).run(source)
