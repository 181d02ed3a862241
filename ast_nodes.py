"""
Axiom abstract syntax tree
Expressions and statements are frozen dataclasses; each child node has exactly one parent
"""

from typing import Any, Dict, List, Optional, Union
from dataclasses import dataclass, field
from enum import Enum

from error_handling import SourceSpan


class BinOp(Enum):
    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"

    def __str__(self) -> str:
        return self.value


# ============================================================================
# EXPRESSIONS
# ============================================================================

@dataclass(frozen=True)
class Number:
    value: int
    span: Optional[SourceSpan] = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class Var:
    name: str
    span: Optional[SourceSpan] = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class Now:
    """The clock primitive; every evaluation yields the next Time value"""
    span: Optional[SourceSpan] = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class Binary:
    left: 'Expr'
    op: BinOp
    right: 'Expr'
    span: Optional[SourceSpan] = field(default=None, compare=False, repr=False)


Expr = Union[Number, Var, Now, Binary]


# ============================================================================
# STATEMENTS
# ============================================================================

@dataclass(frozen=True)
class Let:
    name: str
    value: Expr
    span: Optional[SourceSpan] = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class ExprStmt:
    expr: Expr
    span: Optional[SourceSpan] = field(default=None, compare=False, repr=False)


Stmt = Union[Let, ExprStmt]


def left_spine(expr: Binary) -> List[Binary]:
    """Binary nodes along the left edge of an operator chain, innermost first"""
    spine = []
    node = expr
    while isinstance(node, Binary):
        spine.append(node)
        node = node.left
    spine.reverse()
    return spine


# ============================================================================
# DEBUG RENDERING
# ============================================================================

def pretty_print_ast(node: Union[Expr, Stmt], indent: int = 0) -> str:
    """Pretty print an AST node for debugging"""
    lines = []
    pending = [(node, indent)]

    while pending:
        node, depth = pending.pop()
        pad = "  " * depth

        if isinstance(node, Let):
            lines.append(f"{pad}Let({node.name!r})")
            pending.append((node.value, depth + 1))
        elif isinstance(node, ExprStmt):
            lines.append(f"{pad}ExprStmt")
            pending.append((node.expr, depth + 1))
        elif isinstance(node, Binary):
            lines.append(f"{pad}Binary({node.op.name})")
            pending.append((node.right, depth + 1))
            pending.append((node.left, depth + 1))
        elif isinstance(node, Number):
            lines.append(f"{pad}Number({node.value})")
        elif isinstance(node, Var):
            lines.append(f"{pad}Var({node.name!r})")
        elif isinstance(node, Now):
            lines.append(f"{pad}Now")
        else:
            raise ValueError(f"Not an AST node: {node!r}")

    return "".join(line + "\n" for line in lines)


def ast_to_dict(node: Union[Expr, Stmt]) -> Dict[str, Any]:
    """Convert an AST node to a dictionary representation"""
    result: Dict[str, Any] = {"type": type(node).__name__}

    if isinstance(node, Let):
        result.update(name=node.name, value=ast_to_dict(node.value))
    elif isinstance(node, ExprStmt):
        result.update(expr=ast_to_dict(node.expr))
    elif isinstance(node, Binary):
        result.update(op=node.op.value, left=ast_to_dict(node.left), right=ast_to_dict(node.right))
    elif isinstance(node, Number):
        result.update(value=node.value)
    elif isinstance(node, Var):
        result.update(name=node.name)

    result["span"] = {
        "filename": node.span.filename,
        "start_line": node.span.start_line,
        "start_col": node.span.start_col,
        "end_line": node.span.end_line,
        "end_col": node.span.end_col,
    } if node.span else None
    return result
