"""Combine parsed quantities across recipes into per-ingredient totals."""

import math
from collections import defaultdict
from collections.abc import Iterable
from dataclasses import dataclass, field

from cartplanner.logging_config import get_logger
from cartplanner.normalize.parser import Quantity
from cartplanner.normalize.units import Unit, UnitFamily, base_unit, family, to_base

logger = get_logger(__name__)

_FAMILY_ORDER = {UnitFamily.VOLUME: 0, UnitFamily.WEIGHT: 1, UnitFamily.COUNT: 2}


@dataclass
class AggregatedQuantity:
    """Total requirement for one ingredient within one unit family."""

    ingredient_name: str
    family: UnitFamily
    totals_by_unit: dict[Unit, float]
    recipe_sources: tuple[str, ...] = field(default_factory=tuple)

    @property
    def base_total(self) -> float:
        """Total expressed in the family's base unit (cup, lb or piece)."""
        return math.fsum(to_base(unit, amount)[1] for unit, amount in self.totals_by_unit.items())

    @property
    def base_unit(self) -> Unit:
        return base_unit(self.family)

    @property
    def single_unit(self) -> Unit | None:
        """The only unit contributing to this total, if there is exactly one."""
        if len(self.totals_by_unit) == 1:
            return next(iter(self.totals_by_unit))
        return None


def aggregate(items: Iterable[tuple[Quantity, float]]) -> list[AggregatedQuantity]:
    """
    Sum scaled quantities per (ingredient name, unit family).

    Quantities of one ingredient in different families ("2 cups broth" and
    "1 can broth") stay in separate buckets. Each per-unit total is an exact
    ``math.fsum`` of its contributions, so the result does not depend on the
    order of ``items``.

    Args:
        items: (quantity, scale factor) pairs. Scale factors must be >= 0.

    Returns:
        One AggregatedQuantity per bucket, sorted by name then family.
    """
    contributions: dict[tuple[str, UnitFamily], dict[Unit, list[float]]] = defaultdict(
        lambda: defaultdict(list)
    )
    sources: dict[tuple[str, UnitFamily], set[str]] = defaultdict(set)

    for quantity, scale_factor in items:
        if scale_factor < 0 or math.isnan(scale_factor):
            raise ValueError(f"Scale factor must be >= 0, got {scale_factor}")

        key = (quantity.ingredient_name, family(quantity.unit))
        contributions[key][quantity.unit].append(quantity.amount * scale_factor)
        if quantity.source_recipe_id:
            sources[key].add(quantity.source_recipe_id)

    families_by_name: dict[str, list[UnitFamily]] = defaultdict(list)
    for name, unit_family in contributions:
        families_by_name[name].append(unit_family)
    for name, families in families_by_name.items():
        if len(families) > 1:
            logger.debug(
                f"Keeping separate totals for {name!r} in {sorted(f.value for f in families)}"
            )

    result = [
        AggregatedQuantity(
            ingredient_name=name,
            family=unit_family,
            totals_by_unit={unit: math.fsum(amounts) for unit, amounts in by_unit.items()},
            recipe_sources=tuple(sorted(sources[(name, unit_family)])),
        )
        for (name, unit_family), by_unit in contributions.items()
    ]
    result.sort(key=lambda agg: (agg.ingredient_name, _FAMILY_ORDER[agg.family]))
    return result
