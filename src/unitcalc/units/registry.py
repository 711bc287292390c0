"""Explicit registry of named units, read-only once built."""

from __future__ import annotations

from types import MappingProxyType
from typing import Dict, Iterator, List, Mapping

from unitcalc.units.algebra import NamedUnit
from unitcalc.units.quantity import Quantity


class RegistryFrozenError(RuntimeError):
    """Raised when registering into a registry that has been frozen."""


class UnitRegistry:
    """Maps unit names (singular and plural) to the quantity ``1 <unit>``.

    The registry is filled once at start-up and then frozen; afterwards it is
    only ever read, so it can be shared freely.
    """

    def __init__(self) -> None:
        self._units: Dict[str, Quantity] = {}
        self._frozen = False

    def register(self, unit: NamedUnit) -> Quantity:
        if self._frozen:
            raise RegistryFrozenError("Unit registry is frozen")
        names = list(dict.fromkeys((unit.singular_name, unit.plural_name)))
        for name in names:
            if name in self._units:
                raise ValueError(f"Unit name '{name}' is already registered")
        quantity = Quantity.of_unit(unit)
        for name in names:
            self._units[name] = quantity
        return quantity

    def freeze(self) -> UnitRegistry:
        self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    def get(self, name: str) -> Quantity | None:
        return self._units.get(name)

    def names(self) -> List[str]:
        return sorted(self._units)

    def as_mapping(self) -> Mapping[str, Quantity]:
        return MappingProxyType(self._units)

    def __contains__(self, name: object) -> bool:
        return name in self._units

    def __iter__(self) -> Iterator[str]:
        return iter(self._units)

    def __len__(self) -> int:
        return len(self._units)


__all__ = ["RegistryFrozenError", "UnitRegistry"]
