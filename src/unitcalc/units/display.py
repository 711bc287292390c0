"""Human readable rendering of quantities."""

from __future__ import annotations

from typing import List

import sympy as sp

from unitcalc import numeric
from unitcalc.units.algebra import UnitExponent, NamedUnit, UnitProduct
from unitcalc.units.quantity import Quantity


def format_exponent(exponent: sp.Expr) -> str:
    exact = numeric.exact_decimal(exponent)
    if exact is not None:
        return exact
    if exponent.is_Rational:
        return f"({exponent.p}/{exponent.q})"
    return f"({exponent})"


def _render(component: UnitExponent[NamedUnit], exponent: sp.Expr, *, plural: bool) -> str:
    name = component.unit.plural_name if plural else component.unit.singular_name
    if numeric.is_one(exponent):
        return name
    return f"{name}^{format_exponent(exponent)}"


def format_units(product: UnitProduct, *, plural: bool = False) -> str:
    """Render the unit suffix of a quantity.

    Positive exponents come first in their original order; negative ones
    follow a ``" /"`` separator with the sign of the exponent flipped. When
    ``plural`` is set the last positive entry uses its plural name.
    """

    positive = [c for c in product.components if not numeric.is_negative(c.exponent)]
    negative = [c for c in product.components if numeric.is_negative(c.exponent)]

    parts: List[str] = []
    for index, component in enumerate(positive):
        if index > 0 or component.unit.spacing:
            parts.append(" ")
        use_plural = plural and index == len(positive) - 1
        parts.append(_render(component, component.exponent, plural=use_plural))
    if negative:
        parts.append(" /")
        for component in negative:
            parts.append(" ")
            parts.append(_render(component, -component.exponent, plural=False))
    return "".join(parts)


def _needs_parentheses(value_text: str) -> bool:
    return value_text.endswith("i") or " + " in value_text or " - " in value_text


def format_quantity(quantity: Quantity) -> str:
    """Return the display string for ``quantity``, e.g. ``"1.012 kg"``."""

    value_text = numeric.format_number(quantity.value)
    if quantity.is_unitless():
        return value_text
    if _needs_parentheses(value_text):
        value_text = f"({value_text})"
    plural = not numeric.is_one(sp.Abs(quantity.value))
    return value_text + format_units(quantity.unit, plural=plural)


__all__ = ["format_exponent", "format_quantity", "format_units"]
