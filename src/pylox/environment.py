"""Lox environments — chained name/value scopes."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .report import LoxRuntimeError

if TYPE_CHECKING:
    from .tokens import Token
    from .values import Value


class Environment:
    """One scope: a name table plus the scope it is nested in.

    Plain lookups walk outward through `enclosing`. The distance-qualified
    forms (`get_at`, `assign_at`) jump straight to the scope the resolver
    computed; a miss there means the resolver and the interpreter disagree
    about scope nesting, which is a bug, not a user error.
    """

    def __init__(self, enclosing: Environment | None = None):
        self.values: dict[str, Value] = {}
        self.enclosing: Environment | None = enclosing

    def define(self, name: str, value: Value) -> None:
        # Redefinition is allowed; globals may be re-declared
        self.values[name] = value

    def get(self, name: Token) -> Value:
        env: Environment | None = self
        while env is not None:
            if name.lexeme in env.values:
                return env.values[name.lexeme]
            env = env.enclosing
        raise LoxRuntimeError(name, "Undefined variable '" + name.lexeme + "'.")

    def assign(self, name: Token, value: Value) -> None:
        env: Environment | None = self
        while env is not None:
            if name.lexeme in env.values:
                env.values[name.lexeme] = value
                return
            env = env.enclosing
        raise LoxRuntimeError(name, "Undefined variable '" + name.lexeme + "'.")

    def ancestor(self, distance: int) -> Environment:
        env = self
        for _ in range(distance):
            if env.enclosing is None:
                raise RuntimeError("no environment at distance " + str(distance))
            env = env.enclosing
        return env

    def get_at(self, distance: int, name: str) -> Value:
        values = self.ancestor(distance).values
        if name not in values:
            raise RuntimeError(
                "unresolved binding '" + name + "' at distance " + str(distance)
            )
        return values[name]

    def assign_at(self, distance: int, name: Token, value: Value) -> None:
        values = self.ancestor(distance).values
        if name.lexeme not in values:
            raise RuntimeError(
                "unresolved binding '" + name.lexeme + "' at distance " + str(distance)
            )
        values[name.lexeme] = value
