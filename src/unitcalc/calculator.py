"""High-level entry points: text in, quantity or display string out."""

from __future__ import annotations

import logging
import os
from typing import Tuple, Type

from unitcalc.evaluator import EvaluationError, Evaluator
from unitcalc.numeric import NumericError
from unitcalc.observability import log_event
from unitcalc.parser import ParseError, parse_string
from unitcalc.parser.nodes import Expr, format_expr
from unitcalc.units.algebra import UnitError
from unitcalc.units.builtin import default_registry
from unitcalc.units.quantity import Quantity
from unitcalc.units.registry import UnitRegistry

logger = logging.getLogger(__name__)

MAX_EXPRESSION_LENGTH = int(os.getenv("UNITCALC_MAX_EXPRESSION_LENGTH", "1000"))

# Every error the core raises for bad input; all are recoverable.
CALC_ERRORS: Tuple[Type[Exception], ...] = (ParseError, UnitError, NumericError, EvaluationError)


def parse(text: str) -> Expr:
    """Parse ``text`` into an expression tree."""

    if len(text) > MAX_EXPRESSION_LENGTH:
        raise ParseError(
            f"Expression is longer than {MAX_EXPRESSION_LENGTH} characters"
        )
    return parse_string(text)


def evaluate(text: str, registry: UnitRegistry | None = None) -> Quantity:
    """Parse and evaluate ``text`` against ``registry`` (built-in units by default)."""

    if registry is None:
        registry = default_registry()
    try:
        tree = parse(text)
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("Parsed %r as %s", text, format_expr(tree))
        result = Evaluator(registry).evaluate(tree)
    except CALC_ERRORS as exc:
        log_event("calc.failed", expression=text, kind=type(exc).__name__)
        raise
    log_event("calc.evaluated", expression=text, result=str(result))
    return result


def evaluate_to_string(text: str, registry: UnitRegistry | None = None) -> str:
    return str(evaluate(text, registry))


__all__ = ["CALC_ERRORS", "MAX_EXPRESSION_LENGTH", "evaluate", "evaluate_to_string", "parse"]
