"""
Axiom Semantics Analysis - static type checking
Pure functions over immutable type environments; the AST is never modified
"""

from typing import Dict, List, Optional

from ast_nodes import Expr, Stmt, Number, Var, Now, Binary, Let, ExprStmt, left_spine
from type_system import Type, binary_result_type
from error_handling import AxiomTypeError, Result, capture_errors


# ============================================================================
# DATA STRUCTURES (Immutable Dictionaries)
# ============================================================================

def make_type_env(bindings: Optional[Dict[str, Type]] = None) -> Dict:
  """Create an immutable type environment dictionary"""
  return {
      'bindings': bindings or {}
  }


# ============================================================================
# ENVIRONMENT OPERATIONS (Pure Functions)
# ============================================================================

def env_bind(env: Dict, name: str, type_info: Type) -> Dict:
  """Return new environment with name bound to type; rebinding replaces"""
  return {
      **env,
      'bindings': {**env['bindings'], name: type_info}
  }


def env_lookup(env: Dict, name: str) -> Optional[Type]:
  return env['bindings'].get(name)


# ============================================================================
# EXPRESSION ANALYSIS
# ============================================================================

def check_number(expr: Number, env: Dict, debug: bool = False) -> Type:
  return Type.INT


def check_now(expr: Now, env: Dict, debug: bool = False) -> Type:
  return Type.TIME


def check_var(expr: Var, env: Dict, debug: bool = False) -> Type:
  """Look up the variable's recorded type"""
  type_info = env_lookup(env, expr.name)
  if type_info is None:
    raise AxiomTypeError(
        "Unproven Variable",
        f"The variable '{expr.name}' is used here, but no proof exists that it has been defined.",
        help="Define the variable with 'let' before using it.",
        span=expr.span
    )
  return type_info


def binary_type(expr: Binary, left_type: Type, right_type: Type) -> Type:
  """Both operands must be Int; Time has no arithmetic"""
  result_type = binary_result_type(expr.op, left_type, right_type)
  if result_type is None:
    help = None
    if Type.TIME in (left_type, right_type):
      help = "Time values come from 'now' and cannot take part in arithmetic."
    raise AxiomTypeError(
        "Type Mismatch",
        f"Cannot apply '{expr.op}' to {left_type} and {right_type}; "
        f"both sides of this operation must be Int.",
        help=help,
        span=expr.span
    )
  return result_type


def check_binary(expr: Binary, env: Dict, debug: bool = False) -> Type:
  """Check an operator chain left to right without recursing down its left edge"""
  spine = left_spine(expr)
  left_type = check_expr(spine[0].left, env, debug)

  for node in spine:
    right_type = check_expr(node.right, env, debug)
    left_type = binary_type(node, left_type, right_type)
    # check_expr reports the outermost node itself
    if debug and node is not expr:
      print(f"Checking: Binary : {left_type}")
  return left_type


EXPR_CHECKERS = {
    Number: check_number,
    Now: check_now,
    Var: check_var,
    Binary: check_binary,
}


def check_expr(expr: Expr, env: Dict, debug: bool = False) -> Type:
  """Compute the type of an expression or raise AxiomTypeError"""
  checker = EXPR_CHECKERS.get(type(expr))
  if checker is None:
    raise ValueError(f"Unable to check expression: {expr!r}")

  type_info = checker(expr, env, debug)
  if debug:
    print(f"Checking: {type(expr).__name__} : {type_info}")
  return type_info


# ============================================================================
# STATEMENT ANALYSIS
# ============================================================================

def check_stmt(stmt: Stmt, env: Dict, debug: bool = False) -> Dict:
  """Check one statement and return the environment for the next one"""
  if isinstance(stmt, Let):
    type_info = check_expr(stmt.value, env, debug)
    if debug:
      print(f"Checking: let {stmt.name} : {type_info}")
    return env_bind(env, stmt.name, type_info)

  if isinstance(stmt, ExprStmt):
    check_expr(stmt.expr, env, debug)
    return env

  raise ValueError(f"Unable to check statement: {stmt!r}")


def analyze_program(stmts: List[Stmt], debug: bool = False) -> Dict[str, Type]:
  """Check statements in order, stopping at the first failure; returns final bindings"""
  env = make_type_env()
  for stmt in stmts:
    env = check_stmt(stmt, env, debug)
  return env['bindings']


def check_program(stmts: List[Stmt], debug: bool = False) -> Result:
  """Ok(bindings) when the program is well typed, otherwise Err(diagnostic)"""
  return capture_errors(analyze_program, AxiomTypeError)(stmts, debug)


# ============================================================================
# FACTORY FUNCTIONS (for main.py)
# ============================================================================

def create_checker(debug: bool = False):
  """Factory function returning a type checker"""
  return type('TypeChecker', (), {
      'check': lambda self, stmts: check_program(stmts, debug),
      'type_of': lambda self, expr, bindings=None: check_expr(expr, make_type_env(bindings), debug),
  })()
