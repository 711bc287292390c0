"""Built-in unit table and the default registry built from it."""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Iterable, Optional, Tuple

from unitcalc.evaluator import EvaluationError, Evaluator
from unitcalc.numeric import NumericError
from unitcalc.parser import ParseError, parse_string
from unitcalc.units.algebra import UnitError, base_named_unit, derive_named_unit
from unitcalc.units.registry import UnitRegistry

logger = logging.getLogger(__name__)

# (singular, plural, spacing, definition); a missing definition declares a
# new base dimension. Definitions may only refer to units listed above them.
UnitDefinition = Tuple[str, str, bool, Optional[str]]

BUILTIN_UNITS: Tuple[UnitDefinition, ...] = (
    ("percent", "percent", True, "0.01"),
    ("%", "%", False, "percent"),
    ("‰", "‰", False, "0.001"),
    ("s", "s", True, None),
    ("second", "seconds", True, "s"),
    ("m", "m", True, None),
    ("dm", "dm", True, "0.1m"),
    ("L", "L", True, "dm dm dm"),
    ("cm", "cm", True, "0.01m"),
    ("mm", "mm", True, "0.001m"),
    ("um", "um", True, "0.001mm"),
    ("µm", "µm", True, "0.001mm"),
    ("nm", "nm", True, "1e-9m"),
    ("pm", "pm", True, "1e-12m"),
    ("fm", "fm", True, "1e-15m"),
    ("am", "am", True, "1e-18m"),
    ("angstrom", "angstrom", True, "0.1nm"),
    ("barn", "barn", True, "100 fm fm"),
    ("inch", "inches", True, "2.54cm"),
    ("in", "in", True, "inch"),
    ("ft", "ft", True, "12 inches"),
    ("foot", "feet", True, "1ft"),
    ('"', '"', False, "inch"),
    ("”", "”", False, "inch"),
    ("'", "'", False, "foot"),
    ("’", "’", False, "foot"),
    ("yard", "yards", True, "3 feet"),
    ("mile", "miles", True, "1760 yards"),
    ("km", "km", True, "1000m"),
    ("AU", "AU", True, "149597870700m"),
    ("ly", "ly", True, "9460730472580800m"),
    ("parsec", "parsecs", True, "648000AU/pi"),
    ("kg", "kg", True, None),
    ("A", "A", True, None),
    ("K", "K", True, None),
    ("kelvin", "kelvin", True, "K"),
    ("mol", "mol", True, None),
    ("cd", "cd", True, None),
    ("g", "g", True, "(1/1000)kg"),
    ("mg", "mg", True, "(1/1000)g"),
    ("N", "N", True, "1 kg m / s s"),
    ("newton", "newtons", True, "1 N"),
    ("joule", "joules", True, "1 N m"),
    ("J", "J", True, "1 joule"),
    ("pascal", "pascals", True, "1 kg / m s s"),
    ("Pa", "Pa", True, "1 pascal"),
    ("watt", "watts", True, "1 J/s"),
    ("W", "W", True, "1 watt"),
    ("coulomb", "coulombs", True, "1 A * 1 s"),
    ("C", "C", True, "1 coulomb"),
    ("volt", "volts", True, "1 J / C"),
    ("V", "V", True, "1 volt"),
    ("ohm", "ohms", True, "1 V / A"),
    ("Ω", "Ω", True, "1 ohm"),
    ("siemens", "siemens", True, "1 / ohm"),
    ("S", "S", True, "1 siemens"),
    ("farad", "farad", True, "1 s / ohm"),
    ("F", "F", True, "1 farad"),
    ("hertz", "hertz", True, "1/s"),
    ("Hz", "Hz", True, "1 hertz"),
    ("henry", "henry", True, "J / A A"),
    ("H", "H", True, "1 henry"),
    ("weber", "weber", True, "V s"),
    ("Wb", "Wb", True, "1 weber"),
    ("tesla", "tesla", True, "weber / m m"),
    ("T", "T", True, "1 tesla"),
    ("min", "min", True, "60s"),
    ("hr", "hr", True, "60min"),
    ("hour", "hours", True, "hr"),
    ("minute", "minutes", True, "min"),
    ("day", "days", True, "24 hours"),
    ("kph", "kph", True, "1 km / hr"),
    ("mph", "mph", True, "1 mile / hr"),
    ("bit", "bits", True, None),
    ("b", "b", True, "bit"),
    ("byte", "bytes", True, "8 bit"),
    ("B", "B", True, "byte"),
    ("KB", "KB", True, "1000 bytes"),
    ("MB", "MB", True, "1000 KB"),
    ("GB", "GB", True, "1000 MB"),
    ("TB", "TB", True, "1000 GB"),
    ("KiB", "KiB", True, "1024 bytes"),
    ("MiB", "MiB", True, "1024 KiB"),
    ("GiB", "GiB", True, "1024 MiB"),
    ("TiB", "TiB", True, "1024 GiB"),
    ("Kb", "Kb", True, "1000 bits"),
    ("Mb", "Mb", True, "1000 Kb"),
    ("Gb", "Gb", True, "1000 Mb"),
    ("Tb", "Tb", True, "1000 Gb"),
    ("Kib", "Kib", True, "1024 bits"),
    ("Mib", "Mib", True, "1024 Kib"),
    ("Gib", "Gib", True, "1024 Mib"),
    ("Tib", "Tib", True, "1024 Gib"),
    ("USD", "USD", True, None),
)


def build_registry(definitions: Iterable[UnitDefinition] = BUILTIN_UNITS) -> UnitRegistry:
    """Register ``definitions`` in order and return the frozen registry."""

    registry = UnitRegistry()
    evaluator = Evaluator(registry)
    for singular, plural, spacing, expression in definitions:
        if expression is None:
            unit = base_named_unit(singular, plural, spacing)
        else:
            try:
                quantity = evaluator.evaluate(parse_string(expression))
            except (ParseError, UnitError, NumericError, EvaluationError) as exc:
                raise UnitError(
                    f"Invalid definition {expression!r} for unit '{singular}': {exc}"
                ) from exc
            unit = derive_named_unit(singular, plural, spacing, quantity.value, quantity.unit)
        registry.register(unit)
    registry.freeze()
    logger.debug("Registered %d unit names", len(registry))
    return registry


@lru_cache(maxsize=1)
def default_registry() -> UnitRegistry:
    """Return the shared registry of built-in units."""

    return build_registry()


__all__ = ["BUILTIN_UNITS", "UnitDefinition", "build_registry", "default_registry"]
