"""Tests for the Lox parser."""

from pylox import parse
from pylox.ast import (
    Assign,
    Binary,
    BlockStmt,
    Call,
    ClassStmt,
    ExpressionStmt,
    FunctionStmt,
    Get,
    Literal,
    Logical,
    PrintStmt,
    Set,
    Unary,
    Variable,
    VarStmt,
    WhileStmt,
)
from pylox.parse import parse_tokens
from pylox.tokens import TK_MINUS, TK_OR, TK_PLUS, TK_STAR, tokenize


def _parse_ok(source: str):
    statements, errors = parse(source)
    assert errors == [], [str(e) for e in errors]
    return statements


def _expr(source: str):
    statements = _parse_ok(source)
    assert len(statements) == 1
    stmt = statements[0]
    assert isinstance(stmt, ExpressionStmt)
    return stmt.expression


# ── Expressions ──


def test_factor_binds_tighter_than_term():
    expr = _expr("1 + 2 * 3;")
    assert isinstance(expr, Binary)
    assert expr.operator.kind == TK_PLUS
    assert isinstance(expr.right, Binary)
    assert expr.right.operator.kind == TK_STAR


def test_binary_is_left_associative():
    expr = _expr("1 - 2 - 3;")
    assert isinstance(expr, Binary)
    assert isinstance(expr.left, Binary)
    assert isinstance(expr.right, Literal)
    assert expr.right.value == 3.0


def test_unary_nests():
    expr = _expr("--x;")
    assert isinstance(expr, Unary)
    assert expr.operator.kind == TK_MINUS
    assert isinstance(expr.right, Unary)
    assert isinstance(expr.right.right, Variable)


def test_logical_nodes():
    expr = _expr("a or b and c;")
    assert isinstance(expr, Logical)
    assert expr.operator.kind == TK_OR
    assert isinstance(expr.right, Logical)


def test_assignment_is_right_associative():
    expr = _expr("a = b = 1;")
    assert isinstance(expr, Assign)
    assert expr.name.lexeme == "a"
    assert isinstance(expr.value, Assign)
    assert expr.value.name.lexeme == "b"


def test_property_assignment_becomes_set():
    expr = _expr("a.b.c = 1;")
    assert isinstance(expr, Set)
    assert expr.name.lexeme == "c"
    assert isinstance(expr.obj, Get)
    assert expr.obj.name.lexeme == "b"


def test_call_chain():
    expr = _expr("f(1)(2, 3).g();")
    assert isinstance(expr, Call)
    assert expr.args == ()
    assert isinstance(expr.callee, Get)
    inner = expr.callee.obj
    assert isinstance(inner, Call)
    assert len(inner.args) == 2
    assert inner.paren.lexeme == ")"


def test_literal_values():
    statements = _parse_ok('print nil; print true; print false; print "s"; print 2;')
    values = []
    for stmt in statements:
        assert isinstance(stmt, PrintStmt)
        assert isinstance(stmt.expression, Literal)
        values.append(stmt.expression.value)
    assert values == [None, True, False, "s", 2.0]


# ── Statements ──


def test_for_desugars_to_while():
    statements = _parse_ok("for (var i = 0; i < 3; i = i + 1) print i;")
    assert len(statements) == 1
    outer = statements[0]
    assert isinstance(outer, BlockStmt)
    init, loop = outer.statements
    assert isinstance(init, VarStmt)
    assert isinstance(loop, WhileStmt)
    assert isinstance(loop.body, BlockStmt)
    body, increment = loop.body.statements
    assert isinstance(body, PrintStmt)
    assert isinstance(increment, ExpressionStmt)
    assert isinstance(increment.expression, Assign)


def test_for_without_clauses_loops_on_true():
    statements = _parse_ok("for (;;) print 1;")
    loop = statements[0]
    assert isinstance(loop, WhileStmt)
    assert isinstance(loop.condition, Literal)
    assert loop.condition.value is True
    assert isinstance(loop.body, PrintStmt)


def test_class_declaration():
    statements = _parse_ok("class B < A { init(x) {} m() { return 1; } }")
    cls = statements[0]
    assert isinstance(cls, ClassStmt)
    assert cls.name.lexeme == "B"
    assert cls.superclass is not None
    assert cls.superclass.name.lexeme == "A"
    assert [m.name.lexeme for m in cls.methods] == ["init", "m"]
    assert [p.lexeme for p in cls.methods[0].params] == ["x"]


def test_function_declaration():
    statements = _parse_ok("fun add(a, b) { return a + b; }")
    fn = statements[0]
    assert isinstance(fn, FunctionStmt)
    assert [p.lexeme for p in fn.params] == ["a", "b"]
    assert len(fn.body) == 1


# ── Errors ──


def test_recovery_reports_each_bad_statement():
    statements, errors = parse("var = 1;\nprint 2;\nprint ;\nprint 4;")
    assert [str(e) for e in errors] == [
        "[line 1] Error at '=': Expect variable name.",
        "[line 3] Error at ';': Expect expression.",
    ]
    assert len(statements) == 2


def test_invalid_assignment_target_does_not_unwind():
    statements, errors = parse("1 = 2; print 3;")
    assert [e.msg for e in errors] == ["Invalid assignment target."]
    assert len(statements) == 2


def test_error_at_end():
    _, errors = parse("print 1")
    assert len(errors) == 1
    assert errors[0].where == " at end"
    assert errors[0].msg == "Expect ';' after value."


def test_argument_limit():
    args = ", ".join(["1"] * 256)
    statements, errors = parse("f(" + args + ");")
    assert [e.msg for e in errors] == ["Can't have more than 255 arguments."]
    # The call still parses in full
    assert len(statements) == 1


def test_argument_limit_not_hit_at_255():
    args = ", ".join(["1"] * 255)
    _parse_ok("f(" + args + ");")


def test_parameter_limit():
    params = ", ".join("p" + str(i) for i in range(256))
    _, errors = parse("fun f(" + params + ") {}")
    assert [e.msg for e in errors] == ["Can't have more than 255 parameters."]
    assert errors[0].where == " at 'p255'"


def test_parse_tokens_matches_parse():
    tokens, _ = tokenize("print 1;")
    statements, errors = parse_tokens(tokens)
    assert errors == []
    assert isinstance(statements[0], PrintStmt)
