"""Lox runtime — tree-walking evaluation of resolved statements."""

from __future__ import annotations

import math
import time
from dataclasses import dataclass
from typing import Callable

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
from .environment import Environment
from .report import LoxRuntimeError as LoxRuntimeError
from .tokens import (
    TK_BANG,
    TK_BANG_EQUAL,
    TK_EQUAL_EQUAL,
    TK_GREATER,
    TK_GREATER_EQUAL,
    TK_LESS,
    TK_LESS_EQUAL,
    TK_MINUS,
    TK_OR,
    TK_PLUS,
    TK_SLASH,
    TK_STAR,
    Token,
)
from .values import (
    NIL,
    LoxCallable,
    LoxClass,
    LoxFunction,
    LoxInstance,
    NativeFunction,
    Value,
    VNumber,
    VString,
    is_truthy,
    values_equal,
    vbool,
)


# ============================================================
# Control flow signals (internal)
# ============================================================


class _Signal(Exception):
    pass


@dataclass
class _Return(_Signal):
    """Unwinds a function body; caught only at the call boundary."""

    value: Value


# ============================================================
# Natives
# ============================================================


def _clock(args: list[Value]) -> Value:
    return VNumber(time.monotonic())


def native_globals() -> dict[str, Value]:
    return {"clock": NativeFunction("clock", 0, _clock)}


# ============================================================
# Arithmetic
# ============================================================


def _divide(a: float, b: float) -> float:
    # IEEE 754 semantics instead of Python's ZeroDivisionError
    if b == 0.0:
        if a == 0.0 or math.isnan(a):
            return math.nan
        return math.copysign(math.inf, a) * math.copysign(1.0, b)
    return a / b


def _literal_value(value: float | str | bool | None) -> Value:
    if value is None:
        return NIL
    if isinstance(value, bool):
        return vbool(value)
    if isinstance(value, float):
        return VNumber(value)
    return VString(value)


# ============================================================
# Interpreter
# ============================================================


class Interpreter:
    """Executes statements against a chain of environments.

    `locals` maps resolved expression nodes to their binding distance; nodes
    missing from it are globals. The map accumulates across calls to
    `resolve`, so one interpreter can run successive REPL lines; functions
    declared on an earlier line keep their distances. Nothing is pruned.
    """

    def __init__(self, out: Callable[[str], None] | None = None):
        self.out: Callable[[str], None] = out if out is not None else print
        self.globals: Environment = Environment()
        self.environment: Environment = self.globals
        self.locals: dict[Expr, int] = {}
        for name, value in native_globals().items():
            self.globals.define(name, value)

    def resolve(self, locals_: dict[Expr, int]) -> None:
        self.locals.update(locals_)

    def interpret(self, statements: list[Stmt]) -> LoxRuntimeError | None:
        """Run top-level statements; stop at and return the first runtime error."""
        try:
            for stmt in statements:
                self.execute(stmt)
        except LoxRuntimeError as e:
            return e
        return None

    # ---- Functions ---------------------------------------------------------

    def call_function(self, fn: LoxFunction, args: list[Value]) -> Value:
        env = Environment(fn.closure)
        for param, arg in zip(fn.declaration.params, args):
            env.define(param.lexeme, arg)
        try:
            self.execute_block(fn.declaration.body, env)
        except _Return as r:
            if fn.is_initializer:
                return fn.closure.get_at(0, "this")
            return r.value
        if fn.is_initializer:
            return fn.closure.get_at(0, "this")
        return NIL

    # ---- Statements --------------------------------------------------------

    def execute(self, stmt: Stmt) -> None:
        if isinstance(stmt, ExpressionStmt):
            self.evaluate(stmt.expression)
            return

        if isinstance(stmt, PrintStmt):
            value = self.evaluate(stmt.expression)
            self.out(value.to_string())
            return

        if isinstance(stmt, VarStmt):
            value: Value = NIL
            if stmt.initializer is not None:
                value = self.evaluate(stmt.initializer)
            self.environment.define(stmt.name.lexeme, value)
            return

        if isinstance(stmt, BlockStmt):
            self.execute_block(stmt.statements, Environment(self.environment))
            return

        if isinstance(stmt, IfStmt):
            if is_truthy(self.evaluate(stmt.condition)):
                self.execute(stmt.then_branch)
            elif stmt.else_branch is not None:
                self.execute(stmt.else_branch)
            return

        if isinstance(stmt, WhileStmt):
            while is_truthy(self.evaluate(stmt.condition)):
                self.execute(stmt.body)
            return

        if isinstance(stmt, FunctionStmt):
            fn = LoxFunction(stmt, self.environment, False)
            self.environment.define(stmt.name.lexeme, fn)
            return

        if isinstance(stmt, ReturnStmt):
            result: Value = NIL
            if stmt.value is not None:
                result = self.evaluate(stmt.value)
            raise _Return(result)

        if isinstance(stmt, ClassStmt):
            self._execute_class(stmt)
            return

        raise TypeError("unsupported statement: " + type(stmt).__name__)

    def execute_block(self, statements: tuple[Stmt, ...], env: Environment) -> None:
        previous = self.environment
        self.environment = env
        try:
            for stmt in statements:
                self.execute(stmt)
        finally:
            self.environment = previous

    def _execute_class(self, stmt: ClassStmt) -> None:
        superclass: LoxClass | None = None
        if stmt.superclass is not None:
            candidate = self.evaluate(stmt.superclass)
            if not isinstance(candidate, LoxClass):
                raise LoxRuntimeError(stmt.superclass.name, "Superclass must be a class.")
            superclass = candidate

        self.environment.define(stmt.name.lexeme, NIL)

        method_env = self.environment
        if superclass is not None:
            method_env = Environment(self.environment)
            method_env.define("super", superclass)

        methods: dict[str, LoxFunction] = {}
        for method in stmt.methods:
            is_init = method.name.lexeme == "init"
            methods[method.name.lexeme] = LoxFunction(method, method_env, is_init)

        klass = LoxClass(stmt.name.lexeme, superclass, methods)
        self.environment.assign(stmt.name, klass)

    # ---- Expressions -------------------------------------------------------

    def evaluate(self, expr: Expr) -> Value:
        if isinstance(expr, Literal):
            return _literal_value(expr.value)

        if isinstance(expr, Grouping):
            return self.evaluate(expr.expression)

        if isinstance(expr, Variable):
            return self._lookup_variable(expr.name, expr)

        if isinstance(expr, Assign):
            value = self.evaluate(expr.value)
            distance = self.locals.get(expr)
            if distance is not None:
                self.environment.assign_at(distance, expr.name, value)
            else:
                self.globals.assign(expr.name, value)
            return value

        if isinstance(expr, Logical):
            left = self.evaluate(expr.left)
            if expr.operator.kind == TK_OR:
                if is_truthy(left):
                    return left
            elif not is_truthy(left):
                return left
            return self.evaluate(expr.right)

        if isinstance(expr, Unary):
            right = self.evaluate(expr.right)
            if expr.operator.kind == TK_BANG:
                return vbool(not is_truthy(right))
            if expr.operator.kind == TK_MINUS:
                if not isinstance(right, VNumber):
                    raise LoxRuntimeError(expr.operator, "Operand must be a number.")
                return VNumber(-right.value)
            raise LoxRuntimeError(expr.operator, "Unknown unary operator.")

        if isinstance(expr, Binary):
            left = self.evaluate(expr.left)
            right = self.evaluate(expr.right)
            return self._eval_binary(expr.operator, left, right)

        if isinstance(expr, Call):
            return self._eval_call(expr)

        if isinstance(expr, Get):
            obj = self.evaluate(expr.obj)
            if isinstance(obj, LoxInstance):
                return obj.get(expr.name)
            raise LoxRuntimeError(expr.name, "Only instances have properties.")

        if isinstance(expr, Set):
            obj = self.evaluate(expr.obj)
            if not isinstance(obj, LoxInstance):
                raise LoxRuntimeError(expr.name, "Only instances have fields.")
            value = self.evaluate(expr.value)
            obj.set(expr.name, value)
            return value

        if isinstance(expr, This):
            return self._lookup_variable(expr.keyword, expr)

        if isinstance(expr, Super):
            return self._eval_super(expr)

        raise TypeError("unsupported expression: " + type(expr).__name__)

    def _lookup_variable(self, name: Token, expr: Expr) -> Value:
        distance = self.locals.get(expr)
        if distance is not None:
            return self.environment.get_at(distance, name.lexeme)
        return self.globals.get(name)

    def _eval_call(self, expr: Call) -> Value:
        callee = self.evaluate(expr.callee)
        args = [self.evaluate(arg) for arg in expr.args]
        if not isinstance(callee, LoxCallable):
            raise LoxRuntimeError(expr.paren, "Can only call functions and classes.")
        if len(args) != callee.arity():
            raise LoxRuntimeError(
                expr.paren,
                "Expected "
                + str(callee.arity())
                + " arguments but got "
                + str(len(args))
                + ".",
            )
        return callee.call(self, args)

    def _eval_super(self, expr: Super) -> Value:
        distance = self.locals[expr]
        superclass = self.environment.get_at(distance, "super")
        # `this` lives in the scope just inside the one holding `super`
        instance = self.environment.get_at(distance - 1, "this")
        if not isinstance(superclass, LoxClass) or not isinstance(instance, LoxInstance):
            raise RuntimeError("malformed super binding")
        method = superclass.find_method(expr.method.lexeme)
        if method is None:
            raise LoxRuntimeError(
                expr.method, "Undefined property '" + expr.method.lexeme + "'."
            )
        return method.bind(instance)

    def _eval_binary(self, op: Token, left: Value, right: Value) -> Value:
        kind = op.kind
        if kind == TK_EQUAL_EQUAL:
            return vbool(values_equal(left, right))
        if kind == TK_BANG_EQUAL:
            return vbool(not values_equal(left, right))

        if kind == TK_PLUS:
            if isinstance(left, VNumber) and isinstance(right, VNumber):
                return VNumber(left.value + right.value)
            if isinstance(left, VString) and isinstance(right, VString):
                return VString(left.value + right.value)
            raise LoxRuntimeError(op, "Operands must be two numbers or two strings.")

        if not isinstance(left, VNumber) or not isinstance(right, VNumber):
            raise LoxRuntimeError(op, "Operands must be numbers.")
        a = left.value
        b = right.value
        if kind == TK_MINUS:
            return VNumber(a - b)
        if kind == TK_STAR:
            return VNumber(a * b)
        if kind == TK_SLASH:
            return VNumber(_divide(a, b))
        if kind == TK_GREATER:
            return vbool(a > b)
        if kind == TK_GREATER_EQUAL:
            return vbool(a >= b)
        if kind == TK_LESS:
            return vbool(a < b)
        if kind == TK_LESS_EQUAL:
            return vbool(a <= b)
        raise LoxRuntimeError(op, "Unknown binary operator.")
