"""Lox scanner — lexes source into a flat token list."""

from __future__ import annotations

from dataclasses import dataclass

from .report import LoxError


# Token kind constants

# Single-character tokens
TK_LEFT_PAREN = "LEFT_PAREN"
TK_RIGHT_PAREN = "RIGHT_PAREN"
TK_LEFT_BRACE = "LEFT_BRACE"
TK_RIGHT_BRACE = "RIGHT_BRACE"
TK_COMMA = "COMMA"
TK_DOT = "DOT"
TK_MINUS = "MINUS"
TK_PLUS = "PLUS"
TK_SEMICOLON = "SEMICOLON"
TK_SLASH = "SLASH"
TK_STAR = "STAR"

# One or two character tokens
TK_BANG = "BANG"
TK_BANG_EQUAL = "BANG_EQUAL"
TK_EQUAL = "EQUAL"
TK_EQUAL_EQUAL = "EQUAL_EQUAL"
TK_GREATER = "GREATER"
TK_GREATER_EQUAL = "GREATER_EQUAL"
TK_LESS = "LESS"
TK_LESS_EQUAL = "LESS_EQUAL"

# Literals
TK_IDENTIFIER = "IDENTIFIER"
TK_STRING = "STRING"
TK_NUMBER = "NUMBER"

# Keywords
TK_AND = "AND"
TK_CLASS = "CLASS"
TK_ELSE = "ELSE"
TK_FALSE = "FALSE"
TK_FUN = "FUN"
TK_FOR = "FOR"
TK_IF = "IF"
TK_NIL = "NIL"
TK_OR = "OR"
TK_PRINT = "PRINT"
TK_RETURN = "RETURN"
TK_SUPER = "SUPER"
TK_THIS = "THIS"
TK_TRUE = "TRUE"
TK_VAR = "VAR"
TK_WHILE = "WHILE"

TK_EOF = "EOF"

KEYWORDS: dict[str, str] = {
    "and": TK_AND,
    "class": TK_CLASS,
    "else": TK_ELSE,
    "false": TK_FALSE,
    "for": TK_FOR,
    "fun": TK_FUN,
    "if": TK_IF,
    "nil": TK_NIL,
    "or": TK_OR,
    "print": TK_PRINT,
    "return": TK_RETURN,
    "super": TK_SUPER,
    "this": TK_THIS,
    "true": TK_TRUE,
    "var": TK_VAR,
    "while": TK_WHILE,
}

SINGLE_CHARS: dict[str, str] = {
    "(": TK_LEFT_PAREN,
    ")": TK_RIGHT_PAREN,
    "{": TK_LEFT_BRACE,
    "}": TK_RIGHT_BRACE,
    ",": TK_COMMA,
    ".": TK_DOT,
    "-": TK_MINUS,
    "+": TK_PLUS,
    ";": TK_SEMICOLON,
    "*": TK_STAR,
}

# Operators that become a different token when followed by '='
EQUAL_PAIRS: dict[str, tuple[str, str]] = {
    "!": (TK_BANG, TK_BANG_EQUAL),
    "=": (TK_EQUAL, TK_EQUAL_EQUAL),
    "<": (TK_LESS, TK_LESS_EQUAL),
    ">": (TK_GREATER, TK_GREATER_EQUAL),
}


class ScanError(LoxError):
    """Malformed input found while scanning."""

    def __init__(self, msg: str, line: int):
        super().__init__(msg, line, "")


@dataclass(frozen=True)
class Token:
    """A token with kind, exact lexeme, literal value and 1-based line."""

    kind: str
    lexeme: str
    literal: float | str | None
    line: int

    def __repr__(self) -> str:
        return (
            "Token("
            + self.kind
            + ", "
            + repr(self.lexeme)
            + ", "
            + repr(self.literal)
            + ", "
            + str(self.line)
            + ")"
        )


def _is_digit(c: str) -> bool:
    return c >= "0" and c <= "9"


def _is_alpha(c: str) -> bool:
    return (c >= "a" and c <= "z") or (c >= "A" and c <= "Z") or c == "_"


def _is_alnum(c: str) -> bool:
    return _is_alpha(c) or _is_digit(c)


class Scanner:
    """Single left-to-right pass over source text.

    Errors do not stop the scan: each one is recorded in `errors` and the
    offending character (or unterminated string) is skipped.
    """

    def __init__(self, source: str):
        self.source: str = source
        self.tokens: list[Token] = []
        self.errors: list[ScanError] = []
        self.start: int = 0
        self.current: int = 0
        self.line: int = 1

    def scan_tokens(self) -> list[Token]:
        while not self.at_end():
            self.start = self.current
            self.scan_token()
        self.tokens.append(Token(TK_EOF, "", None, self.line))
        return self.tokens

    # ── Helpers ──────────────────────────────────────────────

    def at_end(self) -> bool:
        return self.current >= len(self.source)

    def advance(self) -> str:
        c = self.source[self.current]
        self.current += 1
        return c

    def match(self, expected: str) -> bool:
        if self.at_end() or self.source[self.current] != expected:
            return False
        self.current += 1
        return True

    def peek(self) -> str:
        if self.at_end():
            return "\0"
        return self.source[self.current]

    def peek_next(self) -> str:
        if self.current + 1 >= len(self.source):
            return "\0"
        return self.source[self.current + 1]

    def add_token(self, kind: str, literal: float | str | None = None) -> None:
        lexeme = self.source[self.start : self.current]
        self.tokens.append(Token(kind, lexeme, literal, self.line))

    def error(self, msg: str) -> None:
        self.errors.append(ScanError(msg, self.line))

    # ── Lexemes ──────────────────────────────────────────────

    def scan_token(self) -> None:
        c = self.advance()
        if c in SINGLE_CHARS:
            self.add_token(SINGLE_CHARS[c])
            return
        if c in EQUAL_PAIRS:
            plain, with_equal = EQUAL_PAIRS[c]
            self.add_token(with_equal if self.match("=") else plain)
            return
        if c == "/":
            if self.match("/"):
                # Line comment runs to the newline, which is left for the loop
                while self.peek() != "\n" and not self.at_end():
                    self.advance()
            else:
                self.add_token(TK_SLASH)
            return
        if c == " " or c == "\r" or c == "\t":
            return
        if c == "\n":
            self.line += 1
            return
        if c == '"':
            self.scan_string()
            return
        if _is_digit(c):
            self.scan_number()
            return
        if _is_alpha(c):
            self.scan_identifier()
            return
        self.error("Unexpected character.")

    def scan_string(self) -> None:
        while self.peek() != '"' and not self.at_end():
            if self.peek() == "\n":
                self.line += 1
            self.advance()
        if self.at_end():
            self.error("Unterminated string.")
            return
        self.advance()  # closing "
        self.add_token(TK_STRING, self.source[self.start + 1 : self.current - 1])

    def scan_number(self) -> None:
        while _is_digit(self.peek()):
            self.advance()
        # A '.' is only part of the number when a digit follows it
        if self.peek() == "." and _is_digit(self.peek_next()):
            self.advance()
            while _is_digit(self.peek()):
                self.advance()
        self.add_token(TK_NUMBER, float(self.source[self.start : self.current]))

    def scan_identifier(self) -> None:
        while _is_alnum(self.peek()):
            self.advance()
        word = self.source[self.start : self.current]
        self.add_token(KEYWORDS.get(word, TK_IDENTIFIER))


def tokenize(source: str) -> tuple[list[Token], list[ScanError]]:
    """Tokenize Lox source into a flat list ending with TK_EOF, plus scan errors."""
    scanner = Scanner(source)
    tokens = scanner.scan_tokens()
    return tokens, scanner.errors
