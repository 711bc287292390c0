"""Evaluate expression trees into quantities."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Dict, Union

import sympy as sp

from unitcalc import numeric
from unitcalc.parser.grammar import MAX_NESTING_DEPTH
from unitcalc.parser.nodes import (
    Add,
    Apply,
    ApplyFunctionCall,
    ApplyMul,
    Convert,
    Div,
    Expr,
    Ident,
    Mul,
    Num,
    Parens,
    Pow,
    Sub,
    UnaryMinus,
    UnaryPlus,
)
from unitcalc.units.algebra import DimensionlessRequiredError
from unitcalc.units.quantity import Quantity

if TYPE_CHECKING:
    from unitcalc.units.registry import UnitRegistry


class EvaluationError(ValueError):
    """Raised when a well-formed expression cannot be evaluated."""


@dataclass(frozen=True)
class BuiltinFunction:
    name: str
    call: Callable[[Quantity], Quantity]


Value = Union[Quantity, BuiltinFunction]


def _unitless(name: str, func: Callable[[sp.Expr], sp.Expr]) -> BuiltinFunction:
    def call(argument: Quantity) -> Quantity:
        if not argument.is_unitless():
            raise DimensionlessRequiredError(f"{name} is only supported for unitless numbers")
        return Quantity(numeric.ensure_finite(func(argument.value)))

    return BuiltinFunction(name, call)


FUNCTIONS: Dict[str, BuiltinFunction] = {
    "sqrt": BuiltinFunction("sqrt", lambda q: q.root_n(Quantity(2))),
    "cbrt": BuiltinFunction("cbrt", lambda q: q.root_n(Quantity(3))),
    "abs": BuiltinFunction("abs", lambda q: Quantity(sp.Abs(q.value), q.unit)),
    "sin": _unitless("sin", sp.sin),
    "cos": _unitless("cos", sp.cos),
    "tan": _unitless("tan", sp.tan),
    "exp": _unitless("exp", sp.exp),
    "ln": _unitless("ln", sp.log),
    "log": _unitless("log", lambda value: sp.log(value, 10)),
}

CONSTANTS: Dict[str, sp.Expr] = {
    "pi": sp.pi,
    "i": sp.I,
}


class Evaluator:
    """Walks an expression tree, resolving names through a unit registry."""

    def __init__(self, registry: UnitRegistry) -> None:
        self.registry = registry
        self._depth = 0

    def evaluate(self, node: Expr) -> Quantity:
        return self._quantity(node)

    def lookup(self, name: str) -> Value:
        unit = self.registry.get(name)
        if unit is not None:
            return unit
        if name in CONSTANTS:
            return Quantity(CONSTANTS[name])
        if name in FUNCTIONS:
            return FUNCTIONS[name]
        raise EvaluationError(f"Unknown identifier '{name}'")

    def _quantity(self, node: Expr) -> Quantity:
        value = self._eval(node)
        if isinstance(value, BuiltinFunction):
            raise EvaluationError(f"Function '{value.name}' is missing its argument")
        return value

    def _apply(self, node: Apply | ApplyFunctionCall) -> Quantity:
        func = self._eval(node.lhs)
        argument = self._quantity(node.rhs)
        if isinstance(func, BuiltinFunction):
            return func.call(argument)
        return func.mul(argument)

    def _eval(self, node: Expr) -> Value:
        if self._depth >= MAX_NESTING_DEPTH:
            raise EvaluationError(
                f"Expression is nested more than {MAX_NESTING_DEPTH} levels deep"
            )
        self._depth += 1
        try:
            return self._eval_node(node)
        finally:
            self._depth -= 1

    def _eval_node(self, node: Expr) -> Value:
        if isinstance(node, Num):
            return Quantity(node.value)
        if isinstance(node, Ident):
            return self.lookup(node.name)
        if isinstance(node, Parens):
            return self._eval(node.inner)
        if isinstance(node, UnaryPlus):
            return self._quantity(node.operand)
        if isinstance(node, UnaryMinus):
            return self._quantity(node.operand).neg()
        if isinstance(node, Add):
            return self._quantity(node.lhs).add(self._quantity(node.rhs))
        if isinstance(node, Sub):
            return self._quantity(node.lhs).sub(self._quantity(node.rhs))
        if isinstance(node, (Mul, ApplyMul)):
            return self._quantity(node.lhs).mul(self._quantity(node.rhs))
        if isinstance(node, Div):
            return self._quantity(node.lhs).div(self._quantity(node.rhs))
        if isinstance(node, Pow):
            return self._quantity(node.lhs).pow(self._quantity(node.rhs))
        if isinstance(node, (Apply, ApplyFunctionCall)):
            return self._apply(node)
        if isinstance(node, Convert):
            return self._quantity(node.lhs).convert_to(self._quantity(node.rhs))
        raise EvaluationError(f"Unknown expression node '{type(node).__name__}'")


def evaluate(node: Expr, registry: UnitRegistry) -> Quantity:
    return Evaluator(registry).evaluate(node)


__all__ = ["BuiltinFunction", "CONSTANTS", "EvaluationError", "Evaluator", "FUNCTIONS", "evaluate"]
