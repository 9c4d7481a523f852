"""Pytest configuration for the pylox test suite."""

import sys
from pathlib import Path

import pytest

# Add src directory to path so tests run without an install
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from pylox import CollectingReporter, Lox  # noqa: E402


class Transcript:
    """Captures everything one session prints and reports."""

    def __init__(self) -> None:
        self.output: list[str] = []
        self.reporter = CollectingReporter()
        self.lox = Lox(out=self.output.append, reporter=self.reporter)

    def run(self, source: str):
        return self.lox.run(source)

    @property
    def diagnostics(self) -> list[str]:
        return self.reporter.lines

    @property
    def lines(self) -> list[str]:
        return self.output + self.reporter.lines


@pytest.fixture
def transcript() -> Transcript:
    return Transcript()
