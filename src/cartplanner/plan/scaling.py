"""Meal-prep scale factors and serving-size scaling of recipes."""

from collections.abc import Iterable
from dataclasses import dataclass

from cartplanner.logging_config import get_logger
from cartplanner.normalize.parser import Quantity, parse
from cartplanner.normalize.units import unit_label

logger = get_logger(__name__)

DEFAULT_SCALE_FACTOR = 1.0

# Display fractions for scaled amounts
COMMON_FRACTIONS: dict[float, str] = {
    0.125: "1/8",
    0.25: "1/4",
    0.333: "1/3",
    0.5: "1/2",
    0.667: "2/3",
    0.75: "3/4",
}


@dataclass(frozen=True)
class MealPrepPortion:
    """A batch of a recipe prepared for the week or the freezer."""

    recipe_id: str
    total_servings: float
    original_servings: float | None = None
    servings_remaining: float | None = None
    is_active: bool = True

    @property
    def is_available(self) -> bool:
        """Active and not fully eaten."""
        return self.is_active and (self.servings_remaining is None or self.servings_remaining > 0)


def scale_factor_for(
    servings: float | None,
    portions: Iterable[MealPrepPortion] = (),
) -> float:
    """
    Scale factor for a recipe from its meal-prep portions.

    The factor is the largest ``total_servings / original_servings`` over
    available portions. A portion without its own original servings uses
    the recipe's servings. Returns 1.0 when no portion yields a factor.
    """
    factors = []
    for portion in portions:
        if not portion.is_available:
            continue
        original = portion.original_servings or servings
        if not original or original <= 0:
            logger.debug(f"Portion for {portion.recipe_id} has no usable serving count")
            continue
        factors.append(max(0.0, portion.total_servings) / original)

    if not factors:
        return DEFAULT_SCALE_FACTOR
    return max(factors)


# =============================================================================
# Recipe Scaling
# =============================================================================


@dataclass(frozen=True)
class ScaledIngredient:
    """An ingredient line rendered at a new serving size."""

    original_text: str
    scaled_text: str
    original_amount: float
    scaled_amount: float
    quantity: Quantity


def format_amount(amount: float) -> str:
    """
    Format an amount for a recipe card.

    2.5 -> "2 1/2", 0.333 -> "1/3", 3.0 -> "3". Amounts without a common
    fraction within 0.1 fall back to one decimal.
    """
    whole = int(amount)
    if amount == whole:
        return str(whole)

    fraction = amount - whole
    closest: str | None = None
    min_diff = float("inf")
    for value, text in COMMON_FRACTIONS.items():
        diff = abs(fraction - value)
        if diff < min_diff and diff < 0.1:
            min_diff = diff
            closest = text

    if closest:
        return f"{whole} {closest}" if whole > 0 else closest

    rounded = round(amount, 1)
    if rounded == int(rounded):
        return str(int(rounded))
    return f"{rounded:.1f}"


def scale_ingredient(line: str, factor: float, recipe_id: str = "") -> ScaledIngredient | None:
    """Scale one ingredient line by ``factor``; None for a blank line."""
    quantity = parse(line, recipe_id)
    if quantity is None:
        return None

    original = line.strip()
    if quantity.is_fallback:
        # No amount to scale ("Salt to taste")
        return ScaledIngredient(original, original, 1.0, 1.0, quantity)

    scaled = quantity.amount * factor
    parts = [format_amount(scaled)]
    if quantity.explicit_unit:
        parts.append(unit_label(quantity.unit, scaled))
    parts.append(quantity.ingredient_name)

    _, comma, descriptor = original.partition(",")
    text = " ".join(parts)
    if comma:
        text = f"{text},{descriptor}"

    return ScaledIngredient(original, text, quantity.amount, scaled, quantity)


def scale_recipe(
    lines: Iterable[str],
    servings: float | None,
    new_servings: float,
    recipe_id: str = "",
) -> list[ScaledIngredient]:
    """
    Scale a recipe's ingredient lines to a new serving count.

    Args:
        lines: Ingredient lines.
        servings: The recipe's nominal servings; missing or non-positive counts as 1.
        new_servings: Target servings.
        recipe_id: Recipe the lines belong to.

    Returns:
        Scaled lines in input order, blank lines dropped.
    """
    original_servings = servings if servings and servings > 0 else 1
    factor = new_servings / original_servings
    scaled = []
    for line in lines:
        ingredient = scale_ingredient(line, factor, recipe_id)
        if ingredient is not None:
            scaled.append(ingredient)
    return scaled
