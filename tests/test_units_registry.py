import pytest
import sympy as sp

from unitcalc.units import UnitError, UnitProduct, base_named_unit, flatten, try_convert
from unitcalc.units.builtin import BUILTIN_UNITS, build_registry, default_registry
from unitcalc.units.registry import RegistryFrozenError, UnitRegistry


@pytest.fixture(scope="module")
def registry():
    return default_registry()


def _named(registry, name):
    return registry.get(name).unit.components[0].unit


def _base_product(registry, name):
    """Express a registered unit purely in terms of base units."""

    flat = flatten(registry.get(name).unit)
    product = UnitProduct()
    for dimension, exponent in flat.exponents.items():
        product = product * UnitProduct.of(_named(registry, dimension.name), exponent)
    return product


def test_default_registry_is_shared_and_frozen(registry):
    assert default_registry() is registry
    assert registry.frozen
    with pytest.raises(RegistryFrozenError):
        registry.register(base_named_unit("widget", "widgets"))


def test_singular_and_plural_resolve_to_same_unit(registry):
    assert registry.get("foot") is registry.get("feet")
    assert registry.get("inch") is registry.get("inches")
    assert registry.get("kg").value == 1
    assert registry.get("furlong") is None


def test_every_builtin_name_is_registered(registry):
    for singular, plural, _spacing, _definition in BUILTIN_UNITS:
        assert singular in registry
        assert plural in registry
    assert registry.names() == sorted(registry)


DERIVED_NAMES = [singular for singular, _plural, _spacing, definition in BUILTIN_UNITS if definition]


@pytest.mark.parametrize("name", DERIVED_NAMES)
def test_derived_units_round_trip_through_base_units(registry, name):
    unit = registry.get(name).unit
    base = _base_product(registry, name)
    there = try_convert(unit, base)
    back = try_convert(base, unit)
    assert sp.simplify(there * back) == 1
    assert sp.simplify(there - flatten(unit).scale) == 0


def test_newton_is_interchangeable_with_its_definition(registry):
    newton = _named(registry, "N")
    expansion = (
        registry.get("kg").unit
        * registry.get("m").unit
        / registry.get("s").unit
        / registry.get("s").unit
    )
    assert flatten(UnitProduct.of(newton)).same_dimensions(flatten(expansion))
    assert _named(registry, "N").interchangeable_with(_named(registry, "newton"))


def test_build_registry_from_custom_table():
    custom = build_registry([("m", "m", True, None), ("km", "km", True, "1000m")])
    assert custom.names() == ["km", "m"]
    assert try_convert(custom.get("km").unit, custom.get("m").unit) == 1000


def test_build_registry_rejects_bad_definitions():
    with pytest.raises(UnitError) as excinfo:
        build_registry([("m", "m", True, None), ("x", "x", True, "3 furlong")])
    assert "Invalid definition" in str(excinfo.value)


def test_duplicate_names_are_rejected():
    registry = UnitRegistry()
    registry.register(base_named_unit("m", "metres"))
    with pytest.raises(ValueError):
        registry.register(base_named_unit("metres", "metres"))
    assert len(registry) == 2
