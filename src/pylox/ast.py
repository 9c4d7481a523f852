"""Lox AST — parse-time node definitions.

Nodes are frozen and compare by identity (`eq=False`), so each node is its
own hash key. The resolver's binding-distance map relies on this: two
textually identical variable references are distinct keys.
"""

from __future__ import annotations

from dataclasses import dataclass

from .tokens import Token


# ============================================================
# EXPRESSIONS
# ============================================================


@dataclass(frozen=True, eq=False)
class Expr:
    """Base for all expressions."""


@dataclass(frozen=True, eq=False)
class Assign(Expr):
    """name = value."""

    name: Token
    value: Expr


@dataclass(frozen=True, eq=False)
class Binary(Expr):
    """left op right, for arithmetic, comparison and equality operators."""

    left: Expr
    operator: Token
    right: Expr


@dataclass(frozen=True, eq=False)
class Call(Expr):
    """callee(args). paren is the closing ')' used for error lines."""

    callee: Expr
    paren: Token
    args: tuple[Expr, ...]


@dataclass(frozen=True, eq=False)
class Get(Expr):
    """obj.name."""

    obj: Expr
    name: Token


@dataclass(frozen=True, eq=False)
class Grouping(Expr):
    """( expression )."""

    expression: Expr


@dataclass(frozen=True, eq=False)
class Literal(Expr):
    """Number, string, true, false or nil."""

    value: float | str | bool | None


@dataclass(frozen=True, eq=False)
class Logical(Expr):
    """left and/or right — short-circuiting."""

    left: Expr
    operator: Token
    right: Expr


@dataclass(frozen=True, eq=False)
class Set(Expr):
    """obj.name = value."""

    obj: Expr
    name: Token
    value: Expr


@dataclass(frozen=True, eq=False)
class Super(Expr):
    """super.method."""

    keyword: Token
    method: Token


@dataclass(frozen=True, eq=False)
class This(Expr):
    keyword: Token


@dataclass(frozen=True, eq=False)
class Unary(Expr):
    """! or - applied to right."""

    operator: Token
    right: Expr


@dataclass(frozen=True, eq=False)
class Variable(Expr):
    name: Token


# ============================================================
# STATEMENTS
# ============================================================


@dataclass(frozen=True, eq=False)
class Stmt:
    """Base for all statements."""


@dataclass(frozen=True, eq=False)
class BlockStmt(Stmt):
    """{ statements }."""

    statements: tuple[Stmt, ...]


@dataclass(frozen=True, eq=False)
class FunctionStmt(Stmt):
    """fun name(params) { body } — also used for methods."""

    name: Token
    params: tuple[Token, ...]
    body: tuple[Stmt, ...]


@dataclass(frozen=True, eq=False)
class ClassStmt(Stmt):
    """class Name < Superclass { methods }."""

    name: Token
    superclass: Variable | None
    methods: tuple[FunctionStmt, ...]


@dataclass(frozen=True, eq=False)
class ExpressionStmt(Stmt):
    """Bare expression as statement."""

    expression: Expr


@dataclass(frozen=True, eq=False)
class IfStmt(Stmt):
    """if (condition) then_branch else else_branch."""

    condition: Expr
    then_branch: Stmt
    else_branch: Stmt | None


@dataclass(frozen=True, eq=False)
class PrintStmt(Stmt):
    expression: Expr


@dataclass(frozen=True, eq=False)
class ReturnStmt(Stmt):
    """return value?; keyword locates errors."""

    keyword: Token
    value: Expr | None


@dataclass(frozen=True, eq=False)
class VarStmt(Stmt):
    """var name = initializer?;"""

    name: Token
    initializer: Expr | None


@dataclass(frozen=True, eq=False)
class WhileStmt(Stmt):
    """while (condition) body. `for` loops are desugared into this."""

    condition: Expr
    body: Stmt
