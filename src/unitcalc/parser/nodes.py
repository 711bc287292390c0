"""Expression tree produced by the parser."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar, Dict, List, Tuple

import sympy as sp

from unitcalc.numeric import format_number


class Expr:
    """Base class for expression nodes."""


@dataclass(frozen=True)
class Num(Expr):
    value: sp.Expr
    base: int = 10


@dataclass(frozen=True)
class Ident(Expr):
    name: str


@dataclass(frozen=True)
class Parens(Expr):
    inner: Expr


@dataclass(frozen=True)
class UnaryMinus(Expr):
    operand: Expr


@dataclass(frozen=True)
class UnaryPlus(Expr):
    operand: Expr


@dataclass(frozen=True)
class BinaryOp(Expr):
    lhs: Expr
    rhs: Expr

    operator: ClassVar[str] = "?"


@dataclass(frozen=True)
class Add(BinaryOp):
    operator: ClassVar[str] = "+"


@dataclass(frozen=True)
class Sub(BinaryOp):
    operator: ClassVar[str] = "-"


@dataclass(frozen=True)
class Mul(BinaryOp):
    operator: ClassVar[str] = "*"


@dataclass(frozen=True)
class Div(BinaryOp):
    operator: ClassVar[str] = "/"


@dataclass(frozen=True)
class Pow(BinaryOp):
    operator: ClassVar[str] = "^"


@dataclass(frozen=True)
class Apply(BinaryOp):
    """Juxtaposition that is neither a multiplication nor a numeric call."""

    operator: ClassVar[str] = " "


@dataclass(frozen=True)
class ApplyFunctionCall(BinaryOp):
    """``f <number>``, e.g. ``sqrt 4``."""

    operator: ClassVar[str] = " "


@dataclass(frozen=True)
class ApplyMul(BinaryOp):
    """Implicit multiplication, e.g. ``3 kg``."""

    operator: ClassVar[str] = " "


@dataclass(frozen=True)
class Convert(BinaryOp):
    """Unit conversion, ``a -> b``."""

    operator: ClassVar[str] = "->"


def children(node: Expr) -> Tuple[Expr, ...]:
    if isinstance(node, Parens):
        return (node.inner,)
    if isinstance(node, (UnaryMinus, UnaryPlus)):
        return (node.operand,)
    if isinstance(node, BinaryOp):
        return (node.lhs, node.rhs)
    return ()


def expression_depth(node: Expr) -> int:
    """Return the number of nodes on the longest root-to-leaf path.

    Walks iteratively so arbitrarily deep trees can be measured safely.
    """

    deepest = 0
    pending: List[Tuple[Expr, int]] = [(node, 1)]
    while pending:
        current, depth = pending.pop()
        deepest = max(deepest, depth)
        pending.extend((child, depth + 1) for child in children(current))
    return deepest


def to_dict(node: Expr) -> Dict[str, Any]:
    """Serialise ``node`` into plain dictionaries (for JSON output)."""

    if isinstance(node, Num):
        return {"type": "Num", "value": format_number(node.value), "base": node.base}
    if isinstance(node, Ident):
        return {"type": "Ident", "name": node.name}
    if isinstance(node, Parens):
        return {"type": "Parens", "inner": to_dict(node.inner)}
    if isinstance(node, (UnaryMinus, UnaryPlus)):
        return {"type": type(node).__name__, "operand": to_dict(node.operand)}
    if isinstance(node, BinaryOp):
        return {"type": type(node).__name__, "lhs": to_dict(node.lhs), "rhs": to_dict(node.rhs)}
    raise ValueError(f"Unknown expression node '{type(node).__name__}'")


def format_expr(node: Expr) -> str:
    """Render ``node`` fully parenthesised, e.g. ``(2 ^ (3 ^ 2))``."""

    if isinstance(node, Num):
        return format_number(node.value)
    if isinstance(node, Ident):
        return node.name
    if isinstance(node, Parens):
        return f"({format_expr(node.inner)})"
    if isinstance(node, UnaryMinus):
        return f"(-{format_expr(node.operand)})"
    if isinstance(node, UnaryPlus):
        return f"(+{format_expr(node.operand)})"
    if isinstance(node, BinaryOp):
        if node.operator == " ":
            return f"({format_expr(node.lhs)} {format_expr(node.rhs)})"
        return f"({format_expr(node.lhs)} {node.operator} {format_expr(node.rhs)})"
    raise ValueError(f"Unknown expression node '{type(node).__name__}'")


__all__ = [
    "Add",
    "Apply",
    "ApplyFunctionCall",
    "ApplyMul",
    "BinaryOp",
    "Convert",
    "Div",
    "Expr",
    "Ident",
    "Mul",
    "Num",
    "Parens",
    "Pow",
    "Sub",
    "UnaryMinus",
    "UnaryPlus",
    "children",
    "expression_depth",
    "format_expr",
    "to_dict",
]
