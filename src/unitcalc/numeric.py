"""Exact numeric helpers backed by SymPy.

Every value handled by the calculator is a SymPy expression. Literals become
:class:`sympy.Rational` instances so decimal input stays exact, while
constants such as ``pi`` remain symbolic until they are displayed.
"""

from __future__ import annotations

import os
from fractions import Fraction
from typing import Tuple

import sympy as sp


APPROX_DIGITS = int(os.getenv("UNITCALC_APPROX_DIGITS", "10"))
# Exact powers whose result would need more bits than this are refused.
MAX_EXACT_BITS = int(os.getenv("UNITCALC_MAX_EXACT_BITS", "100000"))
# Longer exact decimals are displayed approximately instead.
_MAX_EXACT_DIGITS = 4000

ZERO = sp.Integer(0)
ONE = sp.Integer(1)


class NumericError(ArithmeticError):
    """Raised when an exact value cannot be computed or represented."""


class DivisionByZeroError(NumericError):
    """Raised when dividing by a value that is exactly zero."""


def to_exact(value: int | str | Fraction | sp.Basic) -> sp.Expr:
    """Convert ``value`` into an exact SymPy number."""

    if isinstance(value, sp.Basic):
        return value
    if isinstance(value, bool):
        raise TypeError("Booleans are not numeric values")
    if isinstance(value, int):
        return sp.Integer(value)
    if isinstance(value, Fraction):
        return sp.Rational(value.numerator, value.denominator)
    if isinstance(value, str):
        return sp.Rational(value)
    raise TypeError(f"Cannot convert {type(value).__name__} to an exact value")


def is_zero(value: sp.Expr) -> bool:
    return value.is_zero is True


def is_one(value: sp.Expr) -> bool:
    return value == ONE


def is_negative(value: sp.Expr) -> bool:
    return value.is_negative is True


def ensure_finite(result: sp.Expr) -> sp.Expr:
    if result.has(sp.zoo, sp.oo, -sp.oo):
        raise DivisionByZeroError("Attempt to divide by zero")
    if result.has(sp.nan):
        raise NumericError("Result is undefined")
    return result


def divide(numerator: sp.Expr, denominator: sp.Expr) -> sp.Expr:
    if is_zero(denominator):
        raise DivisionByZeroError("Attempt to divide by zero")
    return numerator / denominator


def _check_power_size(base: sp.Expr, exponent: sp.Expr) -> None:
    if not exponent.is_Rational or base in (ZERO, ONE, -ONE):
        return
    if base.is_Rational:
        bits = max(max(abs(int(base.p)), int(base.q)).bit_length() - 1, 1)
    else:
        bits = 1
    if abs(exponent) * bits > MAX_EXACT_BITS:
        raise NumericError("Result is too large to compute exactly")


def power(base: sp.Expr, exponent: sp.Expr) -> sp.Expr:
    """Raise ``base`` to ``exponent`` exactly.

    Complex results are allowed (``(-1)^(1/2)`` is ``i``); infinite results are
    reported as division by zero.
    """

    _check_power_size(base, exponent)
    return ensure_finite(sp.Pow(base, exponent))


def root_n(value: sp.Expr, degree: sp.Expr) -> sp.Expr:
    """Return the ``degree``-th root of ``value``.

    Odd roots of negative numbers are real; even roots of negative numbers
    are rejected.
    """

    if not (degree.is_Integer and degree.is_positive):
        raise NumericError("Roots are only supported for positive integer degrees")
    if is_negative(value):
        if degree % 2 == 0:
            raise NumericError("Can't take an even root of a negative number")
        return -sp.root(-value, degree)
    return ensure_finite(sp.root(value, degree))


# -- Formatting -----------------------------------------------------------


def exact_decimal(value: sp.Expr) -> str | None:
    """Render ``value`` as a terminating decimal, or ``None`` if it has none."""

    if not value.is_Rational:
        return None
    numerator, denominator = int(value.p), int(value.q)
    remaining = denominator
    twos = fives = 0
    while remaining % 2 == 0:
        remaining //= 2
        twos += 1
    while remaining % 5 == 0:
        remaining //= 5
        fives += 1
    if remaining != 1:
        return None

    places = max(twos, fives)
    if max(abs(numerator), denominator).bit_length() * 0.30103 + places > _MAX_EXACT_DIGITS:
        return None
    scaled = abs(numerator) * 10**places // denominator
    sign = "-" if numerator < 0 else ""
    if places == 0:
        return f"{sign}{scaled}"
    digits = str(scaled).rjust(places + 1, "0")
    return f"{sign}{digits[:-places]}.{digits[-places:]}"


def _approximate(value: sp.Expr) -> str:
    text = str(sp.N(value, APPROX_DIGITS))
    mantissa, marker, exponent = text.partition("e")
    if "." in mantissa:
        mantissa = mantissa.rstrip("0").rstrip(".")
    return f"{mantissa}{marker}{exponent}"


def _format_part(value: sp.Expr) -> Tuple[str, bool]:
    exact = exact_decimal(value)
    if exact is not None:
        return exact, True
    return _approximate(value), False


def format_number(value: sp.Expr) -> str:
    """Return the display form of ``value``.

    Integers and terminating rationals are printed exactly. Anything else is
    printed with :data:`APPROX_DIGITS` significant digits behind an
    ``approx.`` marker.
    """

    value = to_exact(value)
    real, imag = value.as_real_imag()
    if is_zero(imag):
        text, exact = _format_part(real)
        return text if exact else f"approx. {text}"

    imag_text, imag_exact = _format_part(abs(imag))
    if imag_text == "1":
        imag_text = ""
    exact = imag_exact
    if is_zero(real):
        text = f"{'-' if is_negative(imag) else ''}{imag_text}i"
    else:
        real_text, real_exact = _format_part(real)
        exact = exact and real_exact
        sign = "-" if is_negative(imag) else "+"
        text = f"{real_text} {sign} {imag_text}i"
    return text if exact else f"approx. {text}"


__all__ = [
    "APPROX_DIGITS",
    "MAX_EXACT_BITS",
    "DivisionByZeroError",
    "NumericError",
    "ONE",
    "ZERO",
    "divide",
    "ensure_finite",
    "exact_decimal",
    "format_number",
    "is_negative",
    "is_one",
    "is_zero",
    "power",
    "root_n",
    "to_exact",
]
