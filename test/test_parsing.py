"""
Parsing tests for the Axiom language
Tests precedence, associativity and statement forms
"""

import pytest
from ast_nodes import Number, Var, Now, Binary, Let, ExprStmt, BinOp, pretty_print_ast, ast_to_dict
from error_handling import AxiomParseError, ErrorKind, Ok, Err
from parsing import parse_source


def add(left, right):
  return Binary(left, BinOp.ADD, right)


def sub(left, right):
  return Binary(left, BinOp.SUB, right)


def mul(left, right):
  return Binary(left, BinOp.MUL, right)


def div(left, right):
  return Binary(left, BinOp.DIV, right)


class TestExpressions:
  """Test expression parsing"""

  def test_primary_forms(self, parser):
    assert parser.parse_expression("42") == Number(42)
    assert parser.parse_expression("x") == Var("x")
    assert parser.parse_expression("now") == Now()

  def test_multiplication_binds_tighter(self, parser):
    """2 + 3 * 4 is Add(2, Mul(3, 4)), never Mul(Add(2, 3), 4)"""
    assert parser.parse_expression("2 + 3 * 4") == add(Number(2), mul(Number(3), Number(4)))
    assert parser.parse_expression("2 * 3 + 4") == add(mul(Number(2), Number(3)), Number(4))

  def test_subtraction_is_left_associative(self, parser):
    assert parser.parse_expression("8 - 3 - 2") == sub(sub(Number(8), Number(3)), Number(2))

  def test_division_is_left_associative(self, parser):
    assert parser.parse_expression("64 / 4 / 2") == div(div(Number(64), Number(4)), Number(2))

  def test_mixed_chain(self, parser):
    expected = sub(add(Number(1), div(mul(Number(2), Number(3)), Number(4))), Var("y"))
    assert parser.parse_expression("1 + 2 * 3 / 4 - y") == expected

  def test_now_inside_arithmetic(self, parser):
    assert parser.parse_expression("now - start") == sub(Now(), Var("start"))

  def test_binary_span_covers_operands(self, parser):
    expr = parser.parse_expression("10 +\n  x")
    assert (expr.span.start_line, expr.span.start_col) == (1, 1)
    assert (expr.span.end_line, expr.span.end_col) == (2, 4)


class TestStatements:
  """Test statement parsing"""

  def test_let(self, parse):
    assert parse("let x = 1 + 2") == [Let("x", add(Number(1), Number(2)))]

  def test_expression_statement(self, parse):
    assert parse("x") == [ExprStmt(Var("x"))]

  def test_canonical_program(self, parse):
    assert parse("let t = now\nt") == [Let("t", Now()), ExprStmt(Var("t"))]

  def test_statements_need_no_separator(self, parse):
    assert parse("let a = 1 let b = a a b") == [
        Let("a", Number(1)), Let("b", Var("a")), ExprStmt(Var("a")), ExprStmt(Var("b"))
    ]

  def test_empty_program(self, parse):
    assert parse("") == []
    assert parse("  \n\t ") == []

  def test_statement_order_is_preserved(self, parse):
    program = parse("let x = 5\nlet x = 9\nx")
    assert [type(stmt) for stmt in program] == [Let, Let, ExprStmt]
    assert [stmt.value for stmt in program[:2]] == [Number(5), Number(9)]


class TestParseErrors:
  """Test error handling and reporting"""

  def test_missing_identifier_after_let(self, parse):
    with pytest.raises(AxiomParseError) as exc_info:
      parse("let = 5")
    diagnostic = exc_info.value.diagnostic
    assert diagnostic.kind == ErrorKind.PARSE
    assert "Expected an identifier after 'let'" in diagnostic.message
    assert "found '='" in diagnostic.message

  def test_missing_equals(self, parse):
    with pytest.raises(AxiomParseError) as exc_info:
      parse("let x 5")
    assert "Expected '=' after 'let x', found integer 5" in exc_info.value.diagnostic.message

  def test_missing_operand(self, parse):
    with pytest.raises(AxiomParseError) as exc_info:
      parse("1 +")
    diagnostic = exc_info.value.diagnostic
    assert "found end of input" in diagnostic.message
    assert diagnostic.help is not None

  def test_leading_operator(self, parse):
    with pytest.raises(AxiomParseError) as exc_info:
      parse("-5")
    assert "0 - n" in exc_info.value.diagnostic.help

  def test_error_span_points_at_found_token(self, parse):
    with pytest.raises(AxiomParseError) as exc_info:
      parse("let x = 1\nlet y * 2")
    span = exc_info.value.span
    assert (span.start_line, span.start_col) == (2, 7)

  def test_trailing_input_in_expression(self, parser):
    with pytest.raises(AxiomParseError):
      parser.parse_expression("1 2")


class TestParseSource:
  """Test the Ok/Err boundary of the parsing stage"""

  def test_ok(self):
    result = parse_source("let x = 1")
    assert isinstance(result, Ok)
    assert result.ok
    assert result.value == [Let("x", Number(1))]

  def test_parse_failure_is_err(self):
    result = parse_source("let 1 = x")
    assert isinstance(result, Err)
    assert not result.ok
    assert result.diagnostic.kind == ErrorKind.PARSE

  def test_lex_failure_is_err(self):
    result = parse_source("1 < 2")
    assert isinstance(result, Err)
    assert result.diagnostic.kind == ErrorKind.LEX


class TestDebugRendering:
  """Test AST dumps used by the --parse command"""

  def test_pretty_print(self, parse):
    (stmt,) = parse("let x = 1 + now")
    assert pretty_print_ast(stmt) == (
        "Let('x')\n"
        "  Binary(ADD)\n"
        "    Number(1)\n"
        "    Now\n"
    )

  def test_ast_to_dict(self, parse):
    (stmt,) = parse("2 * y")
    as_dict = ast_to_dict(stmt)
    assert as_dict["type"] == "ExprStmt"
    assert as_dict["expr"]["op"] == "*"
    assert as_dict["expr"]["right"] == {
        "type": "Var", "name": "y",
        "span": {"filename": "<input>", "start_line": 1, "start_col": 5,
                 "end_line": 1, "end_col": 6},
    }

  def test_pretty_print_long_chain(self, parse):
    (stmt,) = parse(" + ".join(["1"] * 3000))
    lines = pretty_print_ast(stmt).splitlines()
    assert lines[0] == "ExprStmt"
    assert lines[1] == "  Binary(ADD)"
    assert len(lines) == 1 + 2999 + 3000
    assert lines[-1] == "    Number(1)"
