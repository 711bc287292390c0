import pytest
import sympy as sp

from unitcalc.numeric import DivisionByZeroError
from unitcalc.units import (
    ConversionTargetError,
    DimensionlessRequiredError,
    IncompatibleUnitsError,
    Quantity,
    UnitProduct,
    base_named_unit,
    derive_named_unit,
)


@pytest.fixture
def kg():
    return base_named_unit("kg", "kg")


@pytest.fixture
def g(kg):
    return derive_named_unit("g", "g", True, sp.Rational(1, 1000), UnitProduct.of(kg))


@pytest.fixture
def m():
    return base_named_unit("m", "m")


def test_addition_keeps_left_unit(kg, g):
    one_kg = Quantity.of_unit(kg)
    twelve_g = Quantity.of_unit(g, 12)
    assert str(one_kg + twelve_g) == "1.012 kg"
    assert str(twelve_g + one_kg) == "1012 g"


def test_addition_is_commutative_up_to_conversion(kg, g):
    left = Quantity.of_unit(kg, 2) + Quantity.of_unit(g, 500)
    right = Quantity.of_unit(g, 500) + Quantity.of_unit(kg, 2)
    target = Quantity.of_unit(g)
    assert left.convert_to(target).value == right.convert_to(target).value == 2500


def test_subtraction_converts_right_operand(kg, g):
    result = Quantity.of_unit(kg) - Quantity.of_unit(g, 250)
    assert result.value == sp.Rational(3, 4)
    assert result.unit == UnitProduct.of(kg)


def test_adding_incompatible_units_fails(kg, m):
    with pytest.raises(IncompatibleUnitsError):
        Quantity.of_unit(kg) + Quantity.of_unit(m)


def test_multiplication_concatenates_units(m):
    area = Quantity.of_unit(m, 2) * Quantity.of_unit(m, 3)
    assert area.value == 6
    assert len(area.unit) == 2


def test_division_does_not_cancel(m):
    ratio = Quantity.of_unit(m) / Quantity.of_unit(m)
    assert ratio.value == 1
    assert len(ratio.unit) == 2
    assert not ratio.is_unitless()
    assert [c.exponent for c in ratio.unit.components] == [1, -1]


def test_power_requires_unitless_operands(m):
    ratio = Quantity.of_unit(m) / Quantity.of_unit(m)
    with pytest.raises(DimensionlessRequiredError):
        ratio ** Quantity(2)
    with pytest.raises(DimensionlessRequiredError):
        Quantity(2) ** Quantity.of_unit(m)
    assert (Quantity(2) ** Quantity(10)).value == 1024


def test_root_requires_unitless_operands(m):
    assert Quantity(27).root_n(Quantity(3)).value == 3
    with pytest.raises(DimensionlessRequiredError):
        Quantity.of_unit(m, 4).root_n(Quantity(2))


def test_division_by_zero(m):
    with pytest.raises(DivisionByZeroError):
        Quantity.of_unit(m) / Quantity(0)


def test_conversion_target_must_be_a_bare_unit(kg, g):
    with pytest.raises(ConversionTargetError):
        Quantity.of_unit(kg).convert_to(Quantity.of_unit(g, 2))
    converted = Quantity.of_unit(kg, 3).convert_to(Quantity.of_unit(g))
    assert converted.value == 3000
    assert converted.unit == UnitProduct.of(g)


def test_negation_keeps_units(kg):
    assert str(-Quantity.of_unit(kg, 5)) == "-5 kg"
