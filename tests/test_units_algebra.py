import pytest
import sympy as sp

from unitcalc.units.algebra import (
    BaseDimension,
    IncompatibleUnitsError,
    NamedUnit,
    ScaleError,
    UnitProduct,
    base_named_unit,
    derive_named_unit,
    flatten,
    try_convert,
)


@pytest.fixture
def meter() -> NamedUnit:
    return base_named_unit("m", "m")


@pytest.fixture
def second() -> NamedUnit:
    return base_named_unit("s", "s")


@pytest.fixture
def kilometer(meter: NamedUnit) -> NamedUnit:
    return derive_named_unit("km", "km", True, sp.Integer(1000), UnitProduct.of(meter))


def test_base_unit_introduces_its_own_dimension(meter):
    assert dict(meter.basis) == {BaseDimension("m"): 1}
    assert meter.scale == 1


def test_base_dimensions_compare_by_name():
    assert BaseDimension("kg") == BaseDimension("kg")
    assert BaseDimension("kg") != BaseDimension("m")
    assert len({BaseDimension("kg"), BaseDimension("kg")}) == 1


def test_derived_unit_folds_coefficient_into_scale(meter, kilometer):
    flat = flatten(UnitProduct.of(kilometer))
    assert dict(flat.exponents) == {BaseDimension("m"): 1}
    assert flat.scale == 1000
    assert kilometer.interchangeable_with(meter)
    assert kilometer is not meter


def test_flatten_drops_cancelled_dimensions(meter, second):
    product = UnitProduct.of(meter) * UnitProduct.of(second) / UnitProduct.of(meter)
    flat = flatten(product)
    assert dict(flat.exponents) == {BaseDimension("s"): 1}
    assert len(product) == 3


def test_flatten_supports_rational_exponents(kilometer):
    flat = flatten(UnitProduct.of(kilometer, sp.Rational(1, 2)))
    assert dict(flat.exponents) == {BaseDimension("m"): sp.Rational(1, 2)}
    assert flat.scale == 10 * sp.sqrt(10)


def test_flatten_rejects_even_root_of_negative_scale():
    odd = NamedUnit("odd", "odd", True, {BaseDimension("odd"): 1}, -4)
    with pytest.raises(ScaleError):
        flatten(UnitProduct.of(odd, sp.Rational(1, 2)))


def test_try_convert_returns_scale_ratio(meter, kilometer):
    assert try_convert(UnitProduct.of(kilometer), UnitProduct.of(meter)) == 1000
    assert try_convert(UnitProduct.of(meter), UnitProduct.of(kilometer)) == sp.Rational(1, 1000)


def test_try_convert_rejects_different_bases(meter, second):
    with pytest.raises(IncompatibleUnitsError) as excinfo:
        try_convert(UnitProduct.of(meter), UnitProduct.of(second))
    assert "incompatible" in str(excinfo.value)


def test_empty_products_are_compatible():
    assert try_convert(UnitProduct(), UnitProduct()) == 1


def test_derived_unit_with_zero_scale_is_rejected(meter):
    with pytest.raises(ScaleError):
        derive_named_unit("nothing", "nothing", True, sp.Integer(0), UnitProduct.of(meter))


def test_compound_definition_matches_expansion(meter, second):
    kilogram = base_named_unit("kg", "kg")
    expansion = (
        UnitProduct.of(kilogram)
        * UnitProduct.of(meter)
        / UnitProduct.of(second)
        / UnitProduct.of(second)
    )
    newton = derive_named_unit("N", "N", True, sp.Integer(1), expansion)
    assert dict(flatten(UnitProduct.of(newton)).exponents) == dict(flatten(expansion).exponents)
    assert try_convert(UnitProduct.of(newton), expansion) == 1
