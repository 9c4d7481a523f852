"""Lox runtime values — the closed union every evaluation produces."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable, cast

from .environment import Environment
from .report import LoxRuntimeError

if TYPE_CHECKING:
    from .ast import FunctionStmt
    from .runtime import Interpreter
    from .tokens import Token


# ============================================================
# Values
# ============================================================


class Value:
    """A runtime value. Subclasses are the only value kinds that exist."""

    def to_string(self) -> str:
        raise NotImplementedError


@dataclass(eq=False)
class VNil(Value):
    def to_string(self) -> str:
        return "nil"


@dataclass(eq=False)
class VBool(Value):
    value: bool

    def to_string(self) -> str:
        return "true" if self.value else "false"


@dataclass(eq=False)
class VNumber(Value):
    value: float

    def to_string(self) -> str:
        return format_number(self.value)


@dataclass(eq=False)
class VString(Value):
    value: str

    def to_string(self) -> str:
        return self.value


NIL = VNil()
TRUE = VBool(True)
FALSE = VBool(False)


def vbool(b: bool) -> VBool:
    return TRUE if b else FALSE


def format_number(n: float) -> str:
    """Render a number the way Lox prints it.

    Integral values drop the '.0'. Others use the shortest round-trip digits,
    positional for exponents -6 through 20 and '1e-7' / '1e+21' style beyond.
    """
    if math.isnan(n):
        return "NaN"
    if math.isinf(n):
        return "Infinity" if n > 0 else "-Infinity"
    if n.is_integer() and abs(n) < 1e21:
        return str(int(n))
    text = repr(n)
    if "e" not in text:
        return text
    mantissa, exp = text.split("e")
    exponent = int(exp)
    if exponent >= 21 or exponent <= -7:
        return mantissa + "e" + ("+" if exponent > 0 else "-") + str(abs(exponent))
    # repr switches to exponent form below 1e-4; spell out 1e-5 and 1e-6
    sign = "-" if mantissa.startswith("-") else ""
    digits = mantissa.lstrip("-").replace(".", "")
    return sign + "0." + "0" * (-exponent - 1) + digits


# ============================================================
# Callables
# ============================================================


class LoxCallable(Value):
    """Anything a call expression can invoke."""

    def arity(self) -> int:
        raise NotImplementedError

    def call(self, interp: Interpreter, args: list[Value]) -> Value:
        raise NotImplementedError


@dataclass(eq=False)
class NativeFunction(LoxCallable):
    """A host-implemented function with a fixed arity."""

    name: str
    n_params: int
    fn: Callable[[list[Value]], Value]

    def arity(self) -> int:
        return self.n_params

    def call(self, interp: Interpreter, args: list[Value]) -> Value:
        return self.fn(args)

    def to_string(self) -> str:
        return "<native fn>"


@dataclass(eq=False)
class LoxFunction(LoxCallable):
    """A user function: its declaration plus the environment it closed over."""

    declaration: FunctionStmt
    closure: Environment
    is_initializer: bool = False

    def arity(self) -> int:
        return len(self.declaration.params)

    def call(self, interp: Interpreter, args: list[Value]) -> Value:
        return interp.call_function(self, args)

    def bind(self, instance: LoxInstance) -> LoxFunction:
        """Same declaration, with `this` defined in a fresh child of the closure."""
        env = Environment(self.closure)
        env.define("this", instance)
        return LoxFunction(self.declaration, env, self.is_initializer)

    def to_string(self) -> str:
        return "<fn " + self.declaration.name.lexeme + ">"


@dataclass(eq=False)
class LoxClass(LoxCallable):
    name: str
    superclass: LoxClass | None
    methods: dict[str, LoxFunction] = field(default_factory=dict)

    def find_method(self, name: str) -> LoxFunction | None:
        klass: LoxClass | None = self
        while klass is not None:
            if name in klass.methods:
                return klass.methods[name]
            klass = klass.superclass
        return None

    def arity(self) -> int:
        initializer = self.find_method("init")
        if initializer is None:
            return 0
        return initializer.arity()

    def call(self, interp: Interpreter, args: list[Value]) -> Value:
        instance = LoxInstance(self)
        initializer = self.find_method("init")
        if initializer is not None:
            initializer.bind(instance).call(interp, args)
        return instance

    def to_string(self) -> str:
        return self.name


@dataclass(eq=False)
class LoxInstance(Value):
    klass: LoxClass
    fields: dict[str, Value] = field(default_factory=dict)

    def get(self, name: Token) -> Value:
        # Fields shadow methods
        if name.lexeme in self.fields:
            return self.fields[name.lexeme]
        method = self.klass.find_method(name.lexeme)
        if method is not None:
            return method.bind(self)
        raise LoxRuntimeError(name, "Undefined property '" + name.lexeme + "'.")

    def set(self, name: Token, value: Value) -> None:
        self.fields[name.lexeme] = value

    def to_string(self) -> str:
        return self.klass.name + " instance"


# ============================================================
# Semantics shared by every consumer
# ============================================================


def is_truthy(v: Value) -> bool:
    if isinstance(v, VNil):
        return False
    if isinstance(v, VBool):
        return v.value
    return True


def values_equal(a: Value, b: Value) -> bool:
    # Different kinds are never equal; no coercion
    if type(a) is not type(b):
        return False
    if isinstance(a, VNil):
        return True
    if isinstance(a, VBool):
        return a.value == cast(VBool, b).value
    if isinstance(a, VNumber):
        return a.value == cast(VNumber, b).value
    if isinstance(a, VString):
        return a.value == cast(VString, b).value
    # Functions, classes and instances: identity
    return a is b
