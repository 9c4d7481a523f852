"""Lox resolver — static scope pass computing binding distances.

The resolver never evaluates anything. It walks the AST with a stack of
block scopes (innermost last) and, for every local variable reference,
records how many scopes out the binding lives. References that match no
scope are left out of the map and looked up in the globals at run time.
"""

from __future__ import annotations

from .ast import (
    Assign,
    Binary,
    BlockStmt,
    Call,
    ClassStmt,
    Expr,
    ExpressionStmt,
    FunctionStmt,
    Get,
    Grouping,
    IfStmt,
    Literal,
    Logical,
    PrintStmt,
    ReturnStmt,
    Set,
    Stmt,
    Super,
    This,
    Unary,
    Variable,
    VarStmt,
    WhileStmt,
)
from .parse import token_location
from .report import LoxError
from .tokens import Token


# Enclosing function kinds
FN_NONE = "none"
FN_FUNCTION = "function"
FN_METHOD = "method"
FN_INITIALIZER = "initializer"

# Enclosing class kinds
CLASS_NONE = "none"
CLASS_CLASS = "class"
CLASS_SUBCLASS = "subclass"


class ResolveError(LoxError):
    """Scoping or placement rule violated."""

    def __init__(self, msg: str, tok: Token):
        super().__init__(msg, tok.line, token_location(tok))
        self.token: Token = tok


class Resolver:
    def __init__(self) -> None:
        self.errors: list[ResolveError] = []
        # name -> True once initialized; False while its initializer runs
        self.scopes: list[dict[str, bool]] = []
        self.locals: dict[Expr, int] = {}
        self.current_function: str = FN_NONE
        self.current_class: str = CLASS_NONE

    def error(self, tok: Token, msg: str) -> None:
        self.errors.append(ResolveError(msg, tok))

    # ── Scopes ───────────────────────────────────────────────

    def enter_scope(self) -> None:
        self.scopes.append({})

    def exit_scope(self) -> None:
        self.scopes.pop()

    def declare(self, name: Token) -> None:
        if not self.scopes:
            return
        scope = self.scopes[-1]
        if name.lexeme in scope:
            self.error(name, "Already a variable with this name in this scope.")
        scope[name.lexeme] = False

    def define(self, name: Token) -> None:
        if not self.scopes:
            return
        self.scopes[-1][name.lexeme] = True

    def resolve_local(self, expr: Expr, name: Token) -> None:
        i = len(self.scopes) - 1
        while i >= 0:
            if name.lexeme in self.scopes[i]:
                self.locals[expr] = len(self.scopes) - 1 - i
                return
            i -= 1
        # Not found: assume global

    # ── Entry ────────────────────────────────────────────────

    def resolve(self, statements: list[Stmt]) -> dict[Expr, int]:
        for stmt in statements:
            self.resolve_stmt(stmt)
        return self.locals

    # ── Statements ───────────────────────────────────────────

    def resolve_stmt(self, stmt: Stmt) -> None:
        if isinstance(stmt, BlockStmt):
            self.enter_scope()
            for inner in stmt.statements:
                self.resolve_stmt(inner)
            self.exit_scope()
            return

        if isinstance(stmt, ClassStmt):
            self.resolve_class(stmt)
            return

        if isinstance(stmt, ExpressionStmt):
            self.resolve_expr(stmt.expression)
            return

        if isinstance(stmt, FunctionStmt):
            # Defined before the body so the function can refer to itself
            self.declare(stmt.name)
            self.define(stmt.name)
            self.resolve_function(stmt, FN_FUNCTION)
            return

        if isinstance(stmt, IfStmt):
            self.resolve_expr(stmt.condition)
            self.resolve_stmt(stmt.then_branch)
            if stmt.else_branch is not None:
                self.resolve_stmt(stmt.else_branch)
            return

        if isinstance(stmt, PrintStmt):
            self.resolve_expr(stmt.expression)
            return

        if isinstance(stmt, ReturnStmt):
            if self.current_function == FN_NONE:
                self.error(stmt.keyword, "Can't return from top-level code.")
            if stmt.value is not None:
                if self.current_function == FN_INITIALIZER:
                    self.error(stmt.keyword, "Can't return a value from an initializer.")
                self.resolve_expr(stmt.value)
            return

        if isinstance(stmt, VarStmt):
            self.declare(stmt.name)
            if stmt.initializer is not None:
                self.resolve_expr(stmt.initializer)
            self.define(stmt.name)
            return

        if isinstance(stmt, WhileStmt):
            self.resolve_expr(stmt.condition)
            self.resolve_stmt(stmt.body)
            return

        raise TypeError("unsupported statement: " + type(stmt).__name__)

    def resolve_class(self, stmt: ClassStmt) -> None:
        enclosing_class = self.current_class
        self.current_class = CLASS_CLASS
        self.declare(stmt.name)
        self.define(stmt.name)

        if stmt.superclass is not None:
            if stmt.superclass.name.lexeme == stmt.name.lexeme:
                self.error(stmt.superclass.name, "A class can't inherit from itself.")
            self.current_class = CLASS_SUBCLASS
            self.resolve_expr(stmt.superclass)
            self.enter_scope()
            self.scopes[-1]["super"] = True

        self.enter_scope()
        self.scopes[-1]["this"] = True
        for method in stmt.methods:
            kind = FN_INITIALIZER if method.name.lexeme == "init" else FN_METHOD
            self.resolve_function(method, kind)
        self.exit_scope()

        if stmt.superclass is not None:
            self.exit_scope()
        self.current_class = enclosing_class

    def resolve_function(self, fn: FunctionStmt, kind: str) -> None:
        enclosing_function = self.current_function
        self.current_function = kind
        self.enter_scope()
        for param in fn.params:
            self.declare(param)
            self.define(param)
        for stmt in fn.body:
            self.resolve_stmt(stmt)
        self.exit_scope()
        self.current_function = enclosing_function

    # ── Expressions ──────────────────────────────────────────

    def resolve_expr(self, expr: Expr) -> None:
        if isinstance(expr, Variable):
            if self.scopes and self.scopes[-1].get(expr.name.lexeme) is False:
                self.error(expr.name, "Can't read local variable in its own initializer.")
            self.resolve_local(expr, expr.name)
            return

        if isinstance(expr, Assign):
            self.resolve_expr(expr.value)
            self.resolve_local(expr, expr.name)
            return

        if isinstance(expr, (Binary, Logical)):
            self.resolve_expr(expr.left)
            self.resolve_expr(expr.right)
            return

        if isinstance(expr, Call):
            self.resolve_expr(expr.callee)
            for arg in expr.args:
                self.resolve_expr(arg)
            return

        if isinstance(expr, Get):
            # Property names are looked up dynamically; only the object resolves
            self.resolve_expr(expr.obj)
            return

        if isinstance(expr, Set):
            self.resolve_expr(expr.value)
            self.resolve_expr(expr.obj)
            return

        if isinstance(expr, Grouping):
            self.resolve_expr(expr.expression)
            return

        if isinstance(expr, Literal):
            return

        if isinstance(expr, Super):
            if self.current_class == CLASS_NONE:
                self.error(expr.keyword, "Can't use 'super' outside of a class.")
            elif self.current_class != CLASS_SUBCLASS:
                self.error(expr.keyword, "Can't use 'super' in a class with no superclass.")
            self.resolve_local(expr, expr.keyword)
            return

        if isinstance(expr, This):
            if self.current_class == CLASS_NONE:
                self.error(expr.keyword, "Can't use 'this' outside of a class.")
                return
            self.resolve_local(expr, expr.keyword)
            return

        if isinstance(expr, Unary):
            self.resolve_expr(expr.right)
            return

        raise TypeError("unsupported expression: " + type(expr).__name__)


def resolve(statements: list[Stmt]) -> tuple[dict[Expr, int], list[ResolveError]]:
    """Resolve a program. Returns (binding-distance map, errors)."""
    resolver = Resolver()
    locals_ = resolver.resolve(statements)
    return locals_, resolver.errors
