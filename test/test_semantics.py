"""
Type checker tests for the Axiom language
"""

import pytest
from ast_nodes import Number, Var, Now, Binary, BinOp, Let, ExprStmt
from type_system import Type, binary_result_type
from error_handling import AxiomTypeError, ErrorKind, Ok, Err
from semantics import (
    check_program, analyze_program, check_expr, make_type_env, env_bind, env_lookup,
    create_checker
)


class TestTypeEnvironment:

  def test_bind_is_pure(self):
    env = make_type_env()
    bound = env_bind(env, "t", Type.TIME)
    assert env_lookup(env, "t") is None
    assert env_lookup(bound, "t") == Type.TIME

  def test_rebind_replaces(self):
    env = env_bind(env_bind(make_type_env(), "x", Type.INT), "x", Type.TIME)
    assert env_lookup(env, "x") == Type.TIME


class TestTypeRules:

  @pytest.fixture
  def checker(self):
    return create_checker()

  def test_literals_and_now(self, checker):
    assert checker.type_of(Number(5)) == Type.INT
    assert checker.type_of(Now()) == Type.TIME

  def test_var_uses_recorded_type(self, checker):
    assert checker.type_of(Var("t"), {"t": Type.TIME}) == Type.TIME

  @pytest.mark.parametrize("op", list(BinOp))
  def test_int_arithmetic(self, op):
    assert binary_result_type(op, Type.INT, Type.INT) == Type.INT
    assert binary_result_type(op, Type.TIME, Type.INT) is None
    assert binary_result_type(op, Type.INT, Type.TIME) is None
    assert binary_result_type(op, Type.TIME, Type.TIME) is None

  def test_let_records_type(self, parse):
    bindings = analyze_program(parse("let t = now\nlet n = 1 + 2"))
    assert bindings == {"t": Type.TIME, "n": Type.INT}

  def test_rebinding_changes_type(self, parse):
    bindings = analyze_program(parse("let x = 1\nlet x = now\nx"))
    assert bindings == {"x": Type.TIME}

  def test_canonical_program_is_well_typed(self, parse):
    assert check_program(parse("let t = now\nt")) == Ok({"t": Type.TIME})
    assert create_checker().check(parse("let t = now\nt")) == Ok({"t": Type.TIME})

  def test_ast_left_untouched(self, parse):
    stmts = parse("let a = 2 * 3\na + 1")
    before = list(stmts)
    check_program(stmts)
    assert stmts == before


class TestTypeErrors:

  def test_time_plus_int(self, parse):
    result = check_program(parse("let t = now\nt + 1"))
    assert isinstance(result, Err)
    diagnostic = result.diagnostic
    assert diagnostic.kind == ErrorKind.TYPE
    assert diagnostic.title == "Type Mismatch"
    assert "Time and Int" in diagnostic.message
    assert diagnostic.help is not None
    assert diagnostic.span is not None
    assert diagnostic.span.start_line == 2

  def test_nested_time_operand(self):
    expr = Binary(Number(1), BinOp.MUL, Binary(Now(), BinOp.SUB, Number(2)))
    with pytest.raises(AxiomTypeError):
      check_expr(expr, make_type_env())

  def test_unproven_variable(self, parse):
    result = check_program(parse("x + 1"))
    assert result.diagnostic.title == "Unproven Variable"
    assert "'x'" in result.diagnostic.message
    assert result.diagnostic.help

  def test_stops_at_first_failure(self, parse):
    result = check_program(parse("let a = now + 1\ny"))
    assert result.diagnostic.title == "Type Mismatch"

  def test_binding_after_use_does_not_help(self):
    stmts = [ExprStmt(Var("z")), Let("z", Number(1))]
    assert check_program(stmts).diagnostic.title == "Unproven Variable"


class TestOperatorChains:

  def test_thousands_of_operands(self, parse):
    source = "let n = " + " * ".join(["1"] * 5000) + "\nn"
    assert check_program(parse(source)) == Ok({"n": Type.INT})

  def test_time_deep_in_chain(self, parse):
    source = " + ".join(["1"] * 2500) + " + now + " + " + ".join(["1"] * 2500)
    result = check_program(parse(source))
    assert result.diagnostic.title == "Type Mismatch"
    assert "Int and Time" in result.diagnostic.message

  def test_trace_matches_nesting(self, parse, capsys):
    analyze_program(parse("1 + 2 * 3 - 4"), debug=True)
    lines = capsys.readouterr().out.splitlines()
    assert lines == [
        "Checking: Number : Int",
        "Checking: Number : Int",
        "Checking: Number : Int",
        "Checking: Binary : Int",
        "Checking: Binary : Int",
        "Checking: Number : Int",
        "Checking: Binary : Int",
    ]


class TestDebugTracing:

  def test_prints_checked_types(self, parse, capsys):
    analyze_program(parse("let t = now"), debug=True)
    out = capsys.readouterr().out
    assert "Checking: Now : Time" in out
    assert "Checking: let t : Time" in out
