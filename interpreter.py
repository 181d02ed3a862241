"""
Axiom Interpreter - Pure Functional Style
Runtime state (environment and clock) is an immutable dictionary threaded
through every evaluation call; nothing is kept between program runs
"""

from typing import Dict, List, Optional, Tuple

from ast_nodes import Expr, Stmt, Number, Var, Now, Binary, Let, ExprStmt, left_spine
from error_handling import AxiomRuntimeError, Result, capture_errors
from stdlib import Value, BUILTIN_OPERATORS, int_value, time_value


# ============================================================================
# DATA STRUCTURES (Immutable Dictionaries)
# ============================================================================

def make_runtime_env(bindings: Optional[Dict[str, Value]] = None) -> Dict:
  """Create an immutable runtime environment"""
  return {
      'bindings': bindings or {}
  }


def make_runtime_state(env: Optional[Dict] = None, time: int = 0) -> Dict:
  """Environment plus the clock read by 'now'"""
  return {
      'env': env or make_runtime_env(),
      'time': time
  }


def env_bind_value(env: Dict, name: str, value: Value) -> Dict:
  """Return new environment with name bound to value; rebinding replaces"""
  return {
      **env,
      'bindings': {**env['bindings'], name: value}
  }


def env_lookup_value(env: Dict, name: str) -> Optional[Value]:
  return env['bindings'].get(name)


def advance_clock(state: Dict) -> Tuple[Value, Dict]:
  """Read the clock, then move it forward by one tick"""
  return time_value(state['time']), {**state, 'time': state['time'] + 1}


# ============================================================================
# EVALUATION
# ============================================================================

def eval_expr(expr: Expr, state: Dict, debug: bool = False) -> Tuple[Value, Dict]:
  """
  Evaluate an expression and return (result_value, updated_state).
  Only 'now' changes the state.
  """
  if debug:
    print(f"Evaluating: {type(expr).__name__}")

  if isinstance(expr, Number):
    return int_value(expr.value), state
  elif isinstance(expr, Now):
    return advance_clock(state)
  elif isinstance(expr, Var):
    return eval_var(expr, state, debug)
  elif isinstance(expr, Binary):
    return eval_binary(expr, state, debug)
  else:
    raise ValueError(f"Unknown expression: {expr!r}")


def eval_var(expr: Var, state: Dict, debug: bool = False) -> Tuple[Value, Dict]:
  """Evaluate identifier by looking up in environment"""
  value = env_lookup_value(state['env'], expr.name)

  if value is None:
    raise AxiomRuntimeError(
        "Undefined Variable",
        f"The variable '{expr.name}' has no value.",
        help="Run the type checker first; it rejects programs that use undefined variables.",
        span=expr.span
    )

  return value, state


def eval_binary(expr: Binary, state: Dict, debug: bool = False) -> Tuple[Value, Dict]:
  """Evaluate an operator chain left to right along its left edge"""
  spine = left_spine(expr)
  if debug:
    # eval_expr already announced the outermost node
    for _ in spine[:-1]:
      print("Evaluating: Binary")

  left_val, state = eval_expr(spine[0].left, state, debug)
  for node in spine:
    right_val, state = eval_expr(node.right, state, debug)
    op_func = BUILTIN_OPERATORS[node.op]
    left_val = op_func(left_val, right_val, node.span)

  return left_val, state


def exec_stmt(stmt: Stmt, state: Dict, debug: bool = False) -> Tuple[Optional[Value], Dict]:
  """Execute one statement; returns (value of an expression statement or None, state)"""
  if isinstance(stmt, Let):
    value, state = eval_expr(stmt.value, state, debug)
    if debug:
      print(f"Bound: {stmt.name} = {value}")
    return None, {**state, 'env': env_bind_value(state['env'], stmt.name, value)}

  if isinstance(stmt, ExprStmt):
    return eval_expr(stmt.expr, state, debug)

  raise ValueError(f"Unknown statement: {stmt!r}")


def eval_program(stmts: List[Stmt], debug: bool = False) -> Tuple[Optional[Value], Dict]:
  """
  Execute statements in order from a fresh state.
  Returns (last expression statement value or None, final state)
  """
  state = make_runtime_state()
  last = None

  for stmt in stmts:
    value, state = exec_stmt(stmt, state, debug)
    if isinstance(stmt, ExprStmt):
      last = value

  return last, state


def execute(stmts: List[Stmt], debug: bool = False) -> Optional[Value]:
  last, _ = eval_program(stmts, debug)
  return last


def execute_program(stmts: List[Stmt], debug: bool = False) -> Result:
  """Ok(last value or None) or Err(diagnostic) for a runtime failure"""
  return capture_errors(execute, AxiomRuntimeError)(stmts, debug)


# ============================================================================
# FACTORY FUNCTIONS (for compatibility with main.py)
# ============================================================================

def create_interpreter(debug: bool = False):
  """Factory function returning an interpreter"""
  def interpret_program_func(stmts):
    _, state = eval_program(stmts, debug)
    return dict(state['env']['bindings'])

  return type('Interpreter', (), {
      'execute': lambda self, stmts: execute(stmts, debug),
      'run': lambda self, stmts: execute_program(stmts, debug),
      'interpret_program': lambda self, stmts: interpret_program_func(stmts),
  })()
