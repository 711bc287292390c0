"""unitcalc - a units-aware calculator with exact arithmetic."""

from .calculator import CALC_ERRORS, evaluate, evaluate_to_string, parse
from .units import Quantity, UnitRegistry
from .units.builtin import build_registry, default_registry
from .version import __version__

__all__ = [
    "CALC_ERRORS",
    "Quantity",
    "UnitRegistry",
    "build_registry",
    "default_registry",
    "evaluate",
    "evaluate_to_string",
    "parse",
    "__version__",
]
