"""Tests for the Lox resolver's binding distances and static checks."""

from pylox import check, parse
from pylox.ast import (
    Assign,
    BlockStmt,
    ClassStmt,
    ExpressionStmt,
    FunctionStmt,
    PrintStmt,
    ReturnStmt,
    Super,
    This,
    Variable,
)
from pylox.resolve import Resolver, resolve


def _run(source: str):
    """Parse and resolve. Returns (statements, locals map)."""
    statements, errors = parse(source)
    assert errors == [], [str(e) for e in errors]
    locals_, resolve_errors = resolve(statements)
    assert resolve_errors == [], [str(e) for e in resolve_errors]
    return statements, locals_


def _printed(stmt) -> Variable:
    assert isinstance(stmt, PrintStmt)
    assert isinstance(stmt.expression, Variable)
    return stmt.expression


def test_globals_are_not_recorded():
    statements, locals_ = _run("var a = 1; print a;")
    assert locals_ == {}
    assert _printed(statements[1]) not in locals_


def test_block_local_distance_zero():
    statements, locals_ = _run("{ var a = 1; print a; }")
    block = statements[0]
    assert isinstance(block, BlockStmt)
    assert locals_[_printed(block.statements[1])] == 0


def test_enclosing_block_distance():
    statements, locals_ = _run("{ var a = 1; { { print a; } } }")
    outer = statements[0]
    middle = outer.statements[1]
    inner = middle.statements[0]
    assert locals_[_printed(inner.statements[0])] == 2


def test_identical_references_are_distinct_keys():
    statements, locals_ = _run("""
{
  var a = 1;
  print a;
  {
    print a;
  }
}
""")
    block = statements[0]
    first = _printed(block.statements[1])
    second = _printed(block.statements[2].statements[0])
    assert first is not second
    assert locals_[first] == 0
    assert locals_[second] == 1


def test_assignment_distance():
    statements, locals_ = _run("fun f(x) { { x = 2; } }")
    fn = statements[0]
    assert isinstance(fn, FunctionStmt)
    stmt = fn.body[0].statements[0]
    assert isinstance(stmt, ExpressionStmt)
    assert isinstance(stmt.expression, Assign)
    assert locals_[stmt.expression] == 1


def test_closure_captures_declaration_scope():
    # The inner reference resolves to the global even though a local `a`
    # is declared later in the same block
    statements, locals_ = _run("""
var a = "global";
{
  fun show() { print a; }
  var a = "block";
}
""")
    block = statements[1]
    show = block.statements[0]
    assert _printed(show.body[0]) not in locals_


def test_this_and_super_distances():
    statements, locals_ = _run("""
class A { m() {} }
class B < A {
  m() {
    super.m();
    return this;
  }
}
""")
    cls = statements[1]
    assert isinstance(cls, ClassStmt)
    method = cls.methods[0]
    call_stmt = method.body[0]
    super_expr = call_stmt.expression.callee
    assert isinstance(super_expr, Super)
    return_stmt = method.body[1]
    assert isinstance(return_stmt, ReturnStmt)
    assert isinstance(return_stmt.value, This)
    # method scope -> this scope -> super scope
    assert locals_[return_stmt.value] == 1
    assert locals_[super_expr] == 2


def test_resolver_is_reusable_as_object():
    statements, _ = parse("{ var a; a = 1; }")
    resolver = Resolver()
    locals_ = resolver.resolve(statements)
    assert resolver.errors == []
    assert locals_ is resolver.locals
    assert len(locals_) == 1


def test_check_collects_all_errors():
    errors = check("return 1;\n{ var a; var a; }\nprint this;")
    assert [str(e) for e in errors] == [
        "[line 1] Error at 'return': Can't return from top-level code.",
        "[line 2] Error at 'a': Already a variable with this name in this scope.",
        "[line 3] Error at 'this': Can't use 'this' outside of a class.",
    ]


def test_check_stops_at_syntax_errors():
    errors = check("print ; return 1;")
    assert [e.msg for e in errors] == ["Expect expression."]


def test_global_redeclaration_is_allowed():
    assert check("var a = 1; var a = 2;") == []


def test_global_self_reference_in_initializer_is_allowed():
    assert check("var a = a;") == []


def test_return_in_function_is_allowed():
    assert check("fun f() { return 1; }") == []
