"""
Axiom type model
Two nominal types with no subtyping and no coercion
"""

from typing import Optional
from enum import Enum

from ast_nodes import BinOp


class Type(Enum):
    INT = "Int"
    TIME = "Time"

    def __str__(self) -> str:
        return self.value


# Time values have no arithmetic: every operator takes Int operands only
ARITHMETIC_SIGNATURES = {
    op: ((Type.INT, Type.INT), Type.INT) for op in BinOp
}


def binary_result_type(op: BinOp, left: Type, right: Type) -> Optional[Type]:
    """Result type of applying op to the operand types, or None if not allowed"""
    operands, result = ARITHMETIC_SIGNATURES[op]
    if (left, right) == operands:
        return result
    return None
