"""Unit algebra over named units and their canonical base dimensions.

A :class:`UnitProduct` keeps the units of a value exactly as they were
written (``kg m / s s`` has four entries). Comparison and conversion never
look at that surface form directly; they go through :func:`flatten`, which
reduces a product to a :class:`FlattenedUnit`, a mapping from
:class:`BaseDimension` to exponent plus one aggregate scale factor.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Generic, Mapping, Tuple, TypeVar

import sympy as sp

from unitcalc import numeric


class UnitError(ValueError):
    """Raised when units cannot be combined, converted or defined."""


class IncompatibleUnitsError(UnitError):
    """Raised when two unit products do not share the same dimensions."""


class ConversionTargetError(UnitError):
    """Raised when the target of a conversion is not a bare unit."""


class DimensionlessRequiredError(UnitError):
    """Raised when an operation only accepts unitless operands."""


class ScaleError(UnitError):
    """Raised when a unit scale cannot be raised to the requested power."""


@dataclass(frozen=True)
class BaseDimension:
    """An irreducible dimension, identified solely by its name.

    The name is an internal tag and is never shown to the user.
    """

    name: str


T = TypeVar("T")


@dataclass(frozen=True)
class UnitExponent(Generic[T]):
    """A unit (named or base) raised to an exact rational exponent."""

    unit: T
    exponent: sp.Expr

    def __post_init__(self) -> None:
        object.__setattr__(self, "exponent", numeric.to_exact(self.exponent))


@dataclass(frozen=True, eq=False)
class NamedUnit:
    """A user-visible unit such as ``kg``, ``mph`` or ``%``.

    One of this unit equals ``scale`` times the product of each base
    dimension in ``basis`` raised to its exponent. Instances compare by
    identity: two named units with equal bases are interchangeable for
    arithmetic but stay distinct for display.
    """

    singular_name: str
    plural_name: str
    spacing: bool
    basis: Mapping[BaseDimension, sp.Expr]
    scale: sp.Expr

    def __post_init__(self) -> None:
        basis = {dimension: numeric.to_exact(exp) for dimension, exp in self.basis.items()}
        object.__setattr__(self, "basis", MappingProxyType(basis))
        object.__setattr__(self, "scale", numeric.to_exact(self.scale))

    def interchangeable_with(self, other: NamedUnit) -> bool:
        return dict(self.basis) == dict(other.basis)

    def __repr__(self) -> str:
        return f"NamedUnit({self.singular_name!r})"


@dataclass(frozen=True)
class FlattenedUnit:
    """Canonical form of a unit product: base dimension exponents and a scale."""

    exponents: Mapping[BaseDimension, sp.Expr]
    scale: sp.Expr

    def __post_init__(self) -> None:
        object.__setattr__(self, "exponents", MappingProxyType(dict(self.exponents)))

    def same_dimensions(self, other: FlattenedUnit) -> bool:
        return dict(self.exponents) == dict(other.exponents)

    def is_dimensionless(self) -> bool:
        return not self.exponents


@dataclass(frozen=True)
class UnitProduct:
    """Ordered, unreduced sequence of named units with exponents.

    No merging or cancellation happens here; ``m / m`` keeps both entries.
    """

    components: Tuple[UnitExponent[NamedUnit], ...] = field(default_factory=tuple)

    @classmethod
    def of(cls, unit: NamedUnit, exponent: int | sp.Expr = 1) -> UnitProduct:
        return cls((UnitExponent(unit, exponent),))

    def is_unitless(self) -> bool:
        return not self.components

    def inverse(self) -> UnitProduct:
        return UnitProduct(
            tuple(UnitExponent(c.unit, -c.exponent) for c in self.components)
        )

    def __mul__(self, other: UnitProduct) -> UnitProduct:
        return UnitProduct(self.components + other.components)

    def __truediv__(self, other: UnitProduct) -> UnitProduct:
        return self * other.inverse()

    def __len__(self) -> int:
        return len(self.components)

    def __str__(self) -> str:
        if not self.components:
            return "unitless"
        parts = []
        for component in self.components:
            name = component.unit.singular_name
            if numeric.is_one(component.exponent):
                parts.append(name)
            else:
                parts.append(f"{name}^{component.exponent}")
        return " ".join(parts)


def _scale_power(unit: NamedUnit, exponent: sp.Expr) -> sp.Expr:
    try:
        result = numeric.power(unit.scale, exponent)
    except numeric.NumericError as exc:
        raise ScaleError(
            f"Cannot raise the scale of '{unit.singular_name}' to the power {exponent}"
        ) from exc
    if result.is_real is False:
        raise ScaleError(
            f"Raising the scale of '{unit.singular_name}' to the power {exponent} "
            "does not give a real number"
        )
    return result


def flatten(product: UnitProduct) -> FlattenedUnit:
    """Reduce ``product`` to its base dimensions and aggregate scale.

    Exponents that cancel out to exactly zero are dropped.
    """

    exponents: Dict[BaseDimension, sp.Expr] = {}
    scale: sp.Expr = numeric.ONE
    for component in product.components:
        overall = component.exponent
        for dimension, base_exponent in component.unit.basis.items():
            updated = exponents.get(dimension, numeric.ZERO) + overall * base_exponent
            if numeric.is_zero(updated):
                exponents.pop(dimension, None)
            else:
                exponents[dimension] = updated
        scale = scale * _scale_power(component.unit, overall)
    return FlattenedUnit(exponents, scale)


def try_convert(source: UnitProduct, target: UnitProduct) -> sp.Expr:
    """Return the factor that turns a value in ``source`` into ``target``.

    Raises :class:`IncompatibleUnitsError` when the dimensions differ.
    """

    flat_source = flatten(source)
    flat_target = flatten(target)
    if not flat_source.same_dimensions(flat_target):
        raise IncompatibleUnitsError(
            f"Units are incompatible: cannot convert {source} to {target}"
        )
    return numeric.divide(flat_source.scale, flat_target.scale)


def base_named_unit(singular_name: str, plural_name: str, spacing: bool = True) -> NamedUnit:
    """Create a unit that introduces a fresh base dimension of its own."""

    dimension = BaseDimension(singular_name)
    return NamedUnit(singular_name, plural_name, spacing, {dimension: 1}, 1)


def derive_named_unit(
    singular_name: str,
    plural_name: str,
    spacing: bool,
    value: sp.Expr,
    unit: UnitProduct,
) -> NamedUnit:
    """Wrap an evaluated definition (``value`` in ``unit``) into a named unit.

    The numeric coefficient is folded into the scale, so ``1000 m`` yields a
    unit with the length basis and scale 1000.
    """

    flat = flatten(unit)
    scale = flat.scale * numeric.to_exact(value)
    if numeric.is_zero(scale):
        raise ScaleError(f"Unit '{singular_name}' cannot have a scale of zero")
    return NamedUnit(singular_name, plural_name, spacing, flat.exponents, scale)


__all__ = [
    "BaseDimension",
    "ConversionTargetError",
    "DimensionlessRequiredError",
    "FlattenedUnit",
    "IncompatibleUnitsError",
    "NamedUnit",
    "ScaleError",
    "UnitError",
    "UnitExponent",
    "UnitProduct",
    "base_named_unit",
    "derive_named_unit",
    "flatten",
    "try_convert",
]
