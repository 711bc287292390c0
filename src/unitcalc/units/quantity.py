"""Quantities: exact values paired with an unreduced unit product."""

from __future__ import annotations

from dataclasses import dataclass, field

import sympy as sp

from unitcalc import numeric
from unitcalc.units.algebra import (
    ConversionTargetError,
    DimensionlessRequiredError,
    NamedUnit,
    UnitProduct,
    try_convert,
)


@dataclass(frozen=True)
class Quantity:
    """An exact value together with the units it was written in.

    Every operation returns a new quantity. Addition, subtraction and
    conversion keep the unit of the left operand (or the conversion target);
    multiplication and division concatenate unit products without cancelling
    anything.
    """

    value: sp.Expr
    unit: UnitProduct = field(default_factory=UnitProduct)

    def __post_init__(self) -> None:
        object.__setattr__(self, "value", numeric.to_exact(self.value))

    @classmethod
    def of_unit(cls, unit: NamedUnit, value: int | sp.Expr = 1) -> Quantity:
        return cls(value, UnitProduct.of(unit))

    def is_unitless(self) -> bool:
        # Syntactic check only: "m / m" still carries two entries.
        return self.unit.is_unitless()

    # -- Arithmetic -------------------------------------------------------
    def add(self, other: Quantity) -> Quantity:
        factor = try_convert(other.unit, self.unit)
        return Quantity(self.value + other.value * factor, self.unit)

    def sub(self, other: Quantity) -> Quantity:
        factor = try_convert(other.unit, self.unit)
        return Quantity(self.value - other.value * factor, self.unit)

    def mul(self, other: Quantity) -> Quantity:
        return Quantity(self.value * other.value, self.unit * other.unit)

    def div(self, other: Quantity) -> Quantity:
        return Quantity(numeric.divide(self.value, other.value), self.unit / other.unit)

    def convert_to(self, target: Quantity) -> Quantity:
        if not numeric.is_one(target.value):
            raise ConversionTargetError(
                "Right-hand side of unit conversion has a numerical value"
            )
        factor = try_convert(self.unit, target.unit)
        return Quantity(self.value * factor, target.unit)

    def pow(self, exponent: Quantity) -> Quantity:
        if not self.is_unitless() or not exponent.is_unitless():
            raise DimensionlessRequiredError(
                "Exponents are currently only supported for unitless numbers"
            )
        return Quantity(numeric.power(self.value, exponent.value), self.unit)

    def root_n(self, degree: Quantity) -> Quantity:
        if not self.is_unitless() or not degree.is_unitless():
            raise DimensionlessRequiredError(
                "Roots are currently only supported for unitless numbers"
            )
        return Quantity(numeric.root_n(self.value, degree.value), self.unit)

    def neg(self) -> Quantity:
        return Quantity(-self.value, self.unit)

    __add__ = add
    __sub__ = sub
    __mul__ = mul
    __truediv__ = div
    __pow__ = pow
    __neg__ = neg

    def __str__(self) -> str:
        from unitcalc.units.display import format_quantity

        return format_quantity(self)


__all__ = ["Quantity"]
