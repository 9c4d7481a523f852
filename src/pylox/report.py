"""Lox diagnostics — error base class, reporters and the per-run outcome."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from typing import TYPE_CHECKING, TextIO

if TYPE_CHECKING:
    from .tokens import Token


class LoxError(Exception):
    """Base error for Lox diagnostics, static and runtime.

    `where` is the location context: "" for scanner errors, " at end" or
    " at '<lexeme>'" for errors anchored to a token.
    """

    def __init__(self, msg: str, line: int, where: str = ""):
        super().__init__(format_error(line, where, msg))
        self.msg: str = msg
        self.line: int = line
        self.where: str = where


def format_error(line: int, where: str, msg: str) -> str:
    return "[line " + str(line) + "] Error" + where + ": " + msg


class LoxRuntimeError(LoxError):
    """Failure while executing; carries the offending token for line attribution."""

    def __init__(self, tok: Token, msg: str):
        super().__init__(msg, tok.line, "")
        self.token: Token = tok


class Reporter:
    """Sink for diagnostics. Subclasses decide where the text goes."""

    def error(self, line: int, where: str, message: str) -> None:
        raise NotImplementedError

    def runtime_error(self, line: int, message: str) -> None:
        raise NotImplementedError


class StreamReporter(Reporter):
    """Writes one rendered line per diagnostic to a text stream (stderr by default)."""

    def __init__(self, stream: TextIO | None = None):
        self.stream: TextIO | None = stream

    def _write(self, text: str) -> None:
        # Resolve sys.stderr late so pytest's capture sees the output
        stream = self.stream if self.stream is not None else sys.stderr
        stream.write(text + "\n")

    def error(self, line: int, where: str, message: str) -> None:
        self._write(format_error(line, where, message))

    def runtime_error(self, line: int, message: str) -> None:
        self._write(format_error(line, "", message))


class CollectingReporter(Reporter):
    """Keeps rendered diagnostics in memory."""

    def __init__(self) -> None:
        self.lines: list[str] = []

    def error(self, line: int, where: str, message: str) -> None:
        self.lines.append(format_error(line, where, message))

    def runtime_error(self, line: int, message: str) -> None:
        self.lines.append(format_error(line, "", message))


@dataclass
class RunResult:
    """Outcome of one run: whether a static diagnostic or a runtime failure occurred."""

    had_error: bool = False
    had_runtime_error: bool = False

    @property
    def ok(self) -> bool:
        return not self.had_error and not self.had_runtime_error
