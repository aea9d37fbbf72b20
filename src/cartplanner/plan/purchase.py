"""Turn aggregated requirements into purchasable quantities."""

import math
import re
from dataclasses import dataclass

from cartplanner.config import get_settings
from cartplanner.logging_config import get_logger
from cartplanner.normalize.units import (
    Unit,
    UnitFamily,
    family,
    from_base,
    to_base,
    unit_label,
)
from cartplanner.plan.aggregate import AggregatedQuantity

logger = get_logger(__name__)

# Relative slack for float noise when comparing package totals to requirements
_TOLERANCE = 1e-9


@dataclass(frozen=True)
class PackageSize:
    """
    Sizes an ingredient is commonly sold in.

    ``label`` names a package that is not a plain amount of ``unit`` (a bulb
    of garlic holds about ten cloves). Labelled entries have a single size
    and are displayed as a package count.
    """

    unit: Unit
    sizes: tuple[float, ...]
    label: str | None = None


# =============================================================================
# Package Size Table
# =============================================================================

# Common package sizes for ingredients, in their typical store units.
# Static heuristics, not store catalog data.
PACKAGE_SIZES: dict[str, PackageSize] = {
    # Flours & Grains
    "flour": PackageSize(Unit.LB, (1, 2, 5, 10)),
    "sugar": PackageSize(Unit.LB, (1, 2, 4, 10)),
    "brown sugar": PackageSize(Unit.LB, (1, 2)),
    "rice": PackageSize(Unit.LB, (1, 2, 5, 10, 20)),
    "quinoa": PackageSize(Unit.LB, (0.5, 1, 2)),
    "pasta": PackageSize(Unit.LB, (0.5, 1, 2)),
    # Proteins
    "chicken breast": PackageSize(Unit.LB, (1, 2, 3, 5)),
    "chicken": PackageSize(Unit.LB, (1, 2, 3, 5)),
    "ground beef": PackageSize(Unit.LB, (1, 2, 3)),
    "beef": PackageSize(Unit.LB, (1, 2, 3)),
    "salmon": PackageSize(Unit.LB, (0.5, 1, 1.5, 2)),
    "fish": PackageSize(Unit.LB, (0.5, 1, 1.5, 2)),
    "shrimp": PackageSize(Unit.LB, (0.5, 1, 2)),
    "tofu": PackageSize(Unit.OZ, (14, 16, 20)),
    "egg": PackageSize(Unit.DOZEN, (1, 1.5, 2.5)),
    "eggs": PackageSize(Unit.DOZEN, (1, 1.5, 2.5)),
    # Dairy
    "milk": PackageSize(Unit.GALLON, (0.5, 1)),
    "butter": PackageSize(Unit.LB, (0.25, 0.5, 1)),
    "cheese": PackageSize(Unit.OZ, (4, 8, 16, 32)),
    "feta cheese": PackageSize(Unit.OZ, (4, 8, 16)),
    "yogurt": PackageSize(Unit.OZ, (6, 16, 32)),
    # Vegetables
    "onion": PackageSize(Unit.PIECE, (1,)),
    "onions": PackageSize(Unit.PIECE, (1,)),
    "garlic": PackageSize(Unit.CLOVE, (10,), label="bulb"),
    "bell pepper": PackageSize(Unit.PIECE, (1,)),
    "bell peppers": PackageSize(Unit.PIECE, (1,)),
    "tomato": PackageSize(Unit.PIECE, (1,)),
    "tomatoes": PackageSize(Unit.PIECE, (1,)),
    "cherry tomatoes": PackageSize(Unit.PIECE, (1,)),
    "mushroom": PackageSize(Unit.OZ, (8, 16)),
    "mushrooms": PackageSize(Unit.OZ, (8, 16)),
    "portobello mushroom": PackageSize(Unit.PIECE, (1,)),
    "portobello mushrooms": PackageSize(Unit.PIECE, (1,)),
    "lettuce": PackageSize(Unit.PIECE, (1,), label="head"),
    "spinach": PackageSize(Unit.OZ, (5, 10, 16)),
    "carrot": PackageSize(Unit.LB, (1, 2)),
    "carrots": PackageSize(Unit.LB, (1, 2)),
    "broccoli": PackageSize(Unit.LB, (1,)),
    "cucumber": PackageSize(Unit.PIECE, (1,)),
    "cucumbers": PackageSize(Unit.PIECE, (1,)),
    # Oils & Condiments
    "olive oil": PackageSize(Unit.FL_OZ, (8, 16, 32)),
    "vegetable oil": PackageSize(Unit.FL_OZ, (16, 32, 48)),
    "soy sauce": PackageSize(Unit.FL_OZ, (5, 10, 15)),
    "sesame oil": PackageSize(Unit.FL_OZ, (5, 8)),
    # Spices & Herbs
    "salt": PackageSize(Unit.OZ, (4, 8, 16, 26)),
    "pepper": PackageSize(Unit.OZ, (1, 2, 4)),
    "garlic powder": PackageSize(Unit.OZ, (2.5, 3, 5)),
    "cumin": PackageSize(Unit.OZ, (1, 2, 4)),
    "paprika": PackageSize(Unit.OZ, (1, 2, 4)),
    # Canned Goods
    "black beans": PackageSize(Unit.OZ, (15, 29)),
    "tomato sauce": PackageSize(Unit.OZ, (8, 15, 29)),
    "coconut milk": PackageSize(Unit.FL_OZ, (13.5, 14)),
}


@dataclass(frozen=True)
class PurchaseRecommendation:
    """How much of an ingredient to buy."""

    ingredient_name: str
    purchase_amount: float
    purchase_unit: Unit
    display_text: str
    packages: int = 1
    package_size: float | None = None

    @property
    def base_amount(self) -> float:
        """Purchase amount in the unit family's base unit."""
        return to_base(self.purchase_unit, self.purchase_amount)[1]


def format_number(value: float, decimal_places: int = 2) -> str:
    """Render 2.0 as "2" and 13.5 as "13.5", with at most ``decimal_places`` decimals."""
    if math.isclose(value, round(value), abs_tol=1e-9):
        return str(int(round(value)))
    return f"{value:.{decimal_places}f}".rstrip("0").rstrip(".")


def _contains_words(haystack: str, needle: str) -> bool:
    return re.search(rf"\b{re.escape(needle)}\b", haystack) is not None


def _covers(total: float, needed: float) -> bool:
    return total >= needed - _TOLERANCE * max(1.0, abs(needed))


class PurchaseResolver:
    """
    Maps aggregated requirements to purchase recommendations:
    - Known ingredients round up to real package sizes
    - Unknown volume/weight amounts round up in the family's base unit
    - Unknown counts round up to whole units
    """

    def __init__(
        self,
        package_sizes: dict[str, PackageSize] | None = None,
        decimal_places: int | None = None,
    ):
        self.package_sizes = PACKAGE_SIZES if package_sizes is None else package_sizes
        if decimal_places is None:
            decimal_places = get_settings().fallback_decimal_places
        self.decimal_places = decimal_places

    def find_package_size(
        self, ingredient_name: str, unit_family: UnitFamily | None = None
    ) -> tuple[str, PackageSize] | None:
        """
        Find the package table entry for an ingredient.

        Tries an exact match, then the longest key contained in the name
        ("chicken breast" before "chicken"), then the shortest key that
        contains the name. The best match decides: when ``unit_family`` is
        given and that entry is sold in another family, there is no match
        ("tomato sauce" by the can does not fall through to "tomato").
        """
        name = ingredient_name.lower().strip()
        if not name:
            return None

        key = self._best_key(name)
        if key is None:
            return None
        entry = self.package_sizes[key]
        if unit_family is not None and family(entry.unit) != unit_family:
            return None
        return key, entry

    def _best_key(self, name: str) -> str | None:
        if name in self.package_sizes:
            return name
        contained = [key for key in self.package_sizes if _contains_words(name, key)]
        if contained:
            return min(contained, key=lambda key: (-len(key), key))
        containing = [key for key in self.package_sizes if _contains_words(key, name)]
        if containing:
            return min(containing, key=lambda key: (len(key), key))
        return None

    def resolve(self, aggregated: AggregatedQuantity) -> PurchaseRecommendation:
        """Recommend a purchase covering at least the aggregated requirement."""
        required_base = aggregated.base_total
        match = self.find_package_size(aggregated.ingredient_name, aggregated.family)

        if match is None:
            return self._resolve_without_package(aggregated, required_base)

        key, package = match
        logger.debug(f"Using package sizes for {key!r} for {aggregated.ingredient_name!r}")
        needed = from_base(aggregated.family, required_base, package.unit)
        return self._resolve_with_package(aggregated.ingredient_name, package, needed)

    def _resolve_with_package(
        self, ingredient_name: str, package: PackageSize, needed: float
    ) -> PurchaseRecommendation:
        sizes = sorted(package.sizes)

        # Smallest single package that covers the need
        for size in sizes:
            if _covers(size, needed):
                packages, package_size = 1, size
                break
        else:
            # Otherwise several of the largest package
            package_size = sizes[-1]
            packages = max(1, math.ceil(needed / package_size - _TOLERANCE))

        total = packages * package_size
        return PurchaseRecommendation(
            ingredient_name=ingredient_name,
            purchase_amount=total,
            purchase_unit=package.unit,
            display_text=self._package_text(package, packages, package_size),
            packages=packages,
            package_size=package_size,
        )

    def _package_text(self, package: PackageSize, packages: int, package_size: float) -> str:
        if package.label:
            plural = "" if packages == 1 else "s"
            return f"{packages} {package.label}{plural}"

        total = packages * package_size
        total_text = f"{format_number(total)} {unit_label(package.unit, total)}"
        if packages == 1 or package_size == 1:
            return total_text
        size_text = f"{format_number(package_size)} {unit_label(package.unit, package_size)}"
        return f"{total_text} ({packages} × {size_text})"

    def _resolve_without_package(
        self, aggregated: AggregatedQuantity, required_base: float
    ) -> PurchaseRecommendation:
        if aggregated.family == UnitFamily.COUNT:
            unit = aggregated.single_unit
            if unit is None or unit == Unit.UNKNOWN:
                unit = Unit.PIECE
            needed = from_base(UnitFamily.COUNT, required_base, unit)
            amount = float(math.ceil(round(needed, 9)))
        else:
            unit = aggregated.base_unit
            scale = 10**self.decimal_places
            amount = math.ceil(round(required_base * scale, 6)) / scale

        amount_text = format_number(amount, self.decimal_places)
        return PurchaseRecommendation(
            ingredient_name=aggregated.ingredient_name,
            purchase_amount=amount,
            purchase_unit=unit,
            display_text=f"{amount_text} {unit_label(unit, amount)}",
            package_size=None,
        )


_default_resolver: PurchaseResolver | None = None


def resolve(aggregated: AggregatedQuantity) -> PurchaseRecommendation:
    """Resolve with the default package table."""
    global _default_resolver
    if _default_resolver is None:
        _default_resolver = PurchaseResolver()
    return _default_resolver.resolve(aggregated)
