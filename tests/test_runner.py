"""Test runner for Lox programs.

Test cases live in lox/*.tests files. Format:

    === test name
    print 1 + 2;
    ---
    3
    ---

The expected section is the session transcript: printed lines first, then
rendered diagnostics ("[line N] Error...") in the order they were reported.
An empty expected section means no output and no diagnostics.
"""

from pathlib import Path

import pytest

from conftest import Transcript

TESTS_DIR = Path(__file__).parent / "lox"


def _read_section(lines: list[str], i: int) -> tuple[list[str], int]:
    """Collect lines from i up to the next '---' fence; return them and the index past it."""
    section: list[str] = []
    while i < len(lines) and not lines[i].startswith("---"):
        section.append(lines[i])
        i += 1
    if i < len(lines):
        i += 1
    return section, i


def parse_tests_file(path: Path) -> list[tuple[str, str, str]]:
    """Parse a .tests file into (name, program, expected transcript) tuples."""
    lines = path.read_text().split("\n")
    cases: list[tuple[str, str, str]] = []
    i = 0
    while i < len(lines):
        if not lines[i].startswith("=== "):
            i += 1
            continue
        name = lines[i][4:].strip()
        program, i = _read_section(lines, i + 1)
        expected, i = _read_section(lines, i)
        cases.append((name, "\n".join(program), "\n".join(expected).strip()))
    return cases


def discover_cases(test_dir: Path) -> list[tuple[str, str, str]]:
    """Every case under test_dir, with ids of the form '<file stem>/<case name>'."""
    return [
        (test_file.stem + "/" + name, program, expected)
        for test_file in sorted(test_dir.glob("*.tests"))
        for name, program, expected in parse_tests_file(test_file)
    ]


def pytest_generate_tests(metafunc):
    """Parametrize over every program in lox/*.tests."""
    if "lox_source" in metafunc.fixturenames:
        params = [
            pytest.param(source, expected, id=test_id)
            for test_id, source, expected in discover_cases(TESTS_DIR)
        ]
        metafunc.parametrize("lox_source,lox_expected", params)


def test_program(lox_source: str, lox_expected: str):
    t = Transcript()
    t.run(lox_source)
    actual = "\n".join(t.lines).strip()
    assert actual == lox_expected


def test_cases_discovered():
    assert len(discover_cases(TESTS_DIR)) > 50
