"""Unit registry, synonym resolution and intra-family conversion."""

import re
from enum import Enum

from cartplanner.exceptions import IncompatibleUnitsError


class UnitFamily(str, Enum):
    """Group of units that convert into each other."""

    VOLUME = "volume"
    WEIGHT = "weight"
    COUNT = "count"


class Unit(str, Enum):
    """Canonical unit of an ingredient quantity."""

    # Volume
    CUP = "cup"
    TBSP = "tbsp"
    TSP = "tsp"
    FL_OZ = "fl oz"
    PINT = "pint"
    QUART = "quart"
    GALLON = "gallon"
    ML = "ml"
    L = "l"
    # Weight
    OZ = "oz"
    LB = "lb"
    G = "g"
    KG = "kg"
    # Count
    PIECE = "piece"
    CLOVE = "clove"
    BUNCH = "bunch"
    CAN = "can"
    PACKAGE = "package"
    DOZEN = "dozen"

    UNKNOWN = "unknown"


# =============================================================================
# Conversion Tables
# =============================================================================

# Volume conversions (base unit: cup)
VOLUME_FACTORS: dict[Unit, float] = {
    Unit.TSP: 1 / 48,
    Unit.TBSP: 1 / 16,
    Unit.FL_OZ: 1 / 8,
    Unit.CUP: 1.0,
    Unit.PINT: 2.0,
    Unit.QUART: 4.0,
    Unit.GALLON: 16.0,
    Unit.ML: 1 / 236.588,
    Unit.L: 1000 / 236.588,
}

# Weight conversions (base unit: lb)
WEIGHT_FACTORS: dict[Unit, float] = {
    Unit.OZ: 1 / 16,
    Unit.LB: 1.0,
    Unit.G: 1 / 453.592,
    Unit.KG: 1000 / 453.592,
}

# Count conversions (base unit: piece)
COUNT_FACTORS: dict[Unit, float] = {
    Unit.PIECE: 1.0,
    Unit.CLOVE: 1.0,
    Unit.BUNCH: 1.0,
    Unit.CAN: 1.0,
    Unit.PACKAGE: 1.0,
    Unit.DOZEN: 12.0,
    Unit.UNKNOWN: 1.0,
}

FAMILY_FACTORS: dict[UnitFamily, dict[Unit, float]] = {
    UnitFamily.VOLUME: VOLUME_FACTORS,
    UnitFamily.WEIGHT: WEIGHT_FACTORS,
    UnitFamily.COUNT: COUNT_FACTORS,
}

BASE_UNITS: dict[UnitFamily, Unit] = {
    UnitFamily.VOLUME: Unit.CUP,
    UnitFamily.WEIGHT: Unit.LB,
    UnitFamily.COUNT: Unit.PIECE,
}

# Lowercase token -> canonical unit
UNIT_SYNONYMS: dict[str, Unit] = {
    # Volume
    "cup": Unit.CUP,
    "cups": Unit.CUP,
    "c": Unit.CUP,
    "tablespoon": Unit.TBSP,
    "tablespoons": Unit.TBSP,
    "tbsp": Unit.TBSP,
    "tbsps": Unit.TBSP,
    "tbs": Unit.TBSP,
    "teaspoon": Unit.TSP,
    "teaspoons": Unit.TSP,
    "tsp": Unit.TSP,
    "tsps": Unit.TSP,
    "fluid ounce": Unit.FL_OZ,
    "fluid ounces": Unit.FL_OZ,
    "fl oz": Unit.FL_OZ,
    "fl. oz": Unit.FL_OZ,
    "floz": Unit.FL_OZ,
    "pint": Unit.PINT,
    "pints": Unit.PINT,
    "pt": Unit.PINT,
    "quart": Unit.QUART,
    "quarts": Unit.QUART,
    "qt": Unit.QUART,
    "gallon": Unit.GALLON,
    "gallons": Unit.GALLON,
    "gal": Unit.GALLON,
    "milliliter": Unit.ML,
    "milliliters": Unit.ML,
    "millilitre": Unit.ML,
    "millilitres": Unit.ML,
    "ml": Unit.ML,
    "liter": Unit.L,
    "liters": Unit.L,
    "litre": Unit.L,
    "litres": Unit.L,
    "l": Unit.L,
    # Weight
    "ounce": Unit.OZ,
    "ounces": Unit.OZ,
    "oz": Unit.OZ,
    "pound": Unit.LB,
    "pounds": Unit.LB,
    "lb": Unit.LB,
    "lbs": Unit.LB,
    "gram": Unit.G,
    "grams": Unit.G,
    "g": Unit.G,
    "kilogram": Unit.KG,
    "kilograms": Unit.KG,
    "kg": Unit.KG,
    # Count
    "piece": Unit.PIECE,
    "pieces": Unit.PIECE,
    "item": Unit.PIECE,
    "items": Unit.PIECE,
    "each": Unit.PIECE,
    "whole": Unit.PIECE,
    "head": Unit.PIECE,
    "heads": Unit.PIECE,
    "clove": Unit.CLOVE,
    "cloves": Unit.CLOVE,
    "bunch": Unit.BUNCH,
    "bunches": Unit.BUNCH,
    "can": Unit.CAN,
    "cans": Unit.CAN,
    "package": Unit.PACKAGE,
    "packages": Unit.PACKAGE,
    "pkg": Unit.PACKAGE,
    "pack": Unit.PACKAGE,
    "packs": Unit.PACKAGE,
    "dozen": Unit.DOZEN,
    "dozens": Unit.DOZEN,
}

# Units rendered with a trailing "s" when the amount is not exactly one
_PLURAL_UNITS = {
    Unit.CUP,
    Unit.PINT,
    Unit.QUART,
    Unit.GALLON,
    Unit.PIECE,
    Unit.CLOVE,
    Unit.CAN,
    Unit.PACKAGE,
}

_IRREGULAR_PLURALS = {Unit.BUNCH: "bunches"}


def _token_pattern(token: str) -> str:
    return r"\s*".join(re.escape(part) for part in token.split())


# Longest synonym first so "fl oz" wins over "oz" and "cups" over "c"
_UNIT_PREFIX_RE = re.compile(
    r"^(?P<unit>"
    + "|".join(_token_pattern(t) for t in sorted(UNIT_SYNONYMS, key=len, reverse=True))
    + r")\.?(?=[\s,;:)]|$)",
    re.IGNORECASE,
)


# =============================================================================
# Lookup and Conversion
# =============================================================================


def resolve(token: str | None) -> Unit | None:
    """Resolve a unit word ("Tablespoons", "fl. oz") to its canonical unit."""
    if not token:
        return None
    key = " ".join(token.lower().strip().rstrip(".").split())
    for candidate in (key, key.replace(" ", ""), key.replace(".", "").replace(" ", "")):
        if candidate in UNIT_SYNONYMS:
            return UNIT_SYNONYMS[candidate]
    return None


def match_unit_prefix(text: str) -> tuple[Unit, int] | None:
    """
    Match the longest unit token at the start of ``text``.

    Returns:
        Tuple of (unit, length of the matched prefix), or None.
    """
    match = _UNIT_PREFIX_RE.match(text)
    if not match:
        return None
    unit = resolve(match.group("unit"))
    if unit is None:
        return None
    return unit, match.end()


def family(unit: Unit) -> UnitFamily:
    """Return the family of a unit. Unknown units count as pieces."""
    for unit_family, factors in FAMILY_FACTORS.items():
        if unit in factors:
            return unit_family
    return UnitFamily.COUNT


def base_unit(unit_family: UnitFamily) -> Unit:
    """Return the base unit of a family (cup, lb or piece)."""
    return BASE_UNITS[unit_family]


def to_base(unit: Unit, amount: float) -> tuple[UnitFamily, float]:
    """Express ``amount`` of ``unit`` in its family's base unit."""
    unit_family = family(unit)
    return unit_family, amount * FAMILY_FACTORS[unit_family][unit]


def from_base(unit_family: UnitFamily, base_amount: float, unit: Unit) -> float:
    """Express a base-unit amount of ``unit_family`` in ``unit``."""
    if family(unit) != unit_family:
        raise IncompatibleUnitsError(base_unit(unit_family).value, unit.value)
    return base_amount / FAMILY_FACTORS[unit_family][unit]


def convert(amount: float, source: Unit, target: Unit) -> float:
    """Convert between two units of the same family."""
    unit_family, base_amount = to_base(source, amount)
    if family(target) != unit_family:
        raise IncompatibleUnitsError(source.value, target.value)
    return from_base(unit_family, base_amount, target)


def unit_label(unit: Unit, amount: float) -> str:
    """Render a unit for display: "1/2 cup", "2 cups", "4 tbsp"."""
    if unit == Unit.UNKNOWN:
        unit = Unit.PIECE
    if 0 < amount <= 1:
        return unit.value
    if unit in _IRREGULAR_PLURALS:
        return _IRREGULAR_PLURALS[unit]
    if unit in _PLURAL_UNITS:
        return unit.value + "s"
    return unit.value
