"""
Axiom Standard Library
Runtime values and the built-in arithmetic operators on 64-bit integers
"""

from typing import Callable, Dict, Optional
from dataclasses import dataclass
import operator

from ast_nodes import BinOp
from type_system import Type
from error_handling import AxiomRuntimeError, SourceSpan


INT64_MIN = -2**63
INT64_MAX = 2**63 - 1


# ============================================================================
# VALUES
# ============================================================================

@dataclass(frozen=True)
class Value:
  """Tagged runtime result: the type tag plus its integer payload"""
  type: Type
  value: int

  def __str__(self) -> str:
    return f"{self.type}({self.value})"


def int_value(value: int) -> Value:
  return Value(Type.INT, value)


def time_value(value: int) -> Value:
  return Value(Type.TIME, value)


# ============================================================================
# ERROR BUILDERS
# ============================================================================

def operation_error(op: BinOp, left: Value, right: Value,
                    span: Optional[SourceSpan] = None) -> AxiomRuntimeError:
  return AxiomRuntimeError(
      "Type Mismatch",
      f"Cannot apply '{op}' to {left.type} and {right.type}.",
      span=span
  )


def overflow_error(op: BinOp, left: Value, right: Value,
                   span: Optional[SourceSpan] = None) -> AxiomRuntimeError:
  return AxiomRuntimeError(
      "Integer Overflow",
      f"{left.value} {op} {right.value} does not fit in a 64-bit signed integer.",
      help=f"Int values must stay between {INT64_MIN} and {INT64_MAX}.",
      span=span
  )


# ============================================================================
# ARITHMETIC
# ============================================================================

def truncating_div(x: int, y: int) -> int:
  """Integer quotient rounded toward zero"""
  quotient = abs(x) // abs(y)
  return quotient if (x < 0) == (y < 0) else -quotient


def binary_arithmetic_op(
  op: BinOp,
  func: Callable[[int, int], int]
) -> Callable[..., Value]:
  """
  Factory for Int arithmetic operations

  Args:
    op: Operator the function implements (for error messages)
    func: Operation on the raw integer payloads

  Returns:
    Function (left, right, span=None) -> Value raising AxiomRuntimeError
    on non-Int operands or on results outside the 64-bit range
  """
  def arithmetic(x: Value, y: Value, span: Optional[SourceSpan] = None) -> Value:
    if x.type != Type.INT or y.type != Type.INT:
      raise operation_error(op, x, y, span)
    result = func(x.value, y.value)
    if not INT64_MIN <= result <= INT64_MAX:
      raise overflow_error(op, x, y, span)
    return int_value(result)

  return arithmetic


axiom_add = binary_arithmetic_op(BinOp.ADD, operator.add)
axiom_sub = binary_arithmetic_op(BinOp.SUB, operator.sub)
axiom_mul = binary_arithmetic_op(BinOp.MUL, operator.mul)
_checked_div = binary_arithmetic_op(BinOp.DIV, truncating_div)


def axiom_div(x: Value, y: Value, span: Optional[SourceSpan] = None) -> Value:
  """Division"""
  if x.type != Type.INT or y.type != Type.INT:
    raise operation_error(BinOp.DIV, x, y, span)
  if y.value == 0:
    raise AxiomRuntimeError(
        "Division By Zero",
        f"Cannot divide {x.value} by zero.",
        help="Make sure the divisor can never be 0.",
        span=span
    )
  return _checked_div(x, y, span)


BUILTIN_OPERATORS: Dict[BinOp, Callable[..., Value]] = {
    BinOp.ADD: axiom_add,
    BinOp.SUB: axiom_sub,
    BinOp.MUL: axiom_mul,
    BinOp.DIV: axiom_div,
}
