"""Unit algebra, quantities and the unit registry.

The built-in table lives in :mod:`unitcalc.units.builtin`; it is not imported
here because building it needs the parser and evaluator.
"""

from .algebra import (
    BaseDimension,
    ConversionTargetError,
    DimensionlessRequiredError,
    FlattenedUnit,
    IncompatibleUnitsError,
    NamedUnit,
    ScaleError,
    UnitError,
    UnitExponent,
    UnitProduct,
    base_named_unit,
    derive_named_unit,
    flatten,
    try_convert,
)
from .quantity import Quantity
from .display import format_quantity, format_units
from .registry import UnitRegistry

__all__ = [
    "BaseDimension",
    "ConversionTargetError",
    "DimensionlessRequiredError",
    "FlattenedUnit",
    "IncompatibleUnitsError",
    "NamedUnit",
    "Quantity",
    "ScaleError",
    "UnitError",
    "UnitExponent",
    "UnitProduct",
    "UnitRegistry",
    "base_named_unit",
    "derive_named_unit",
    "flatten",
    "format_quantity",
    "format_units",
    "try_convert",
]
