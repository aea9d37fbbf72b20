"""Tests for meal-prep scale factors and recipe scaling."""

import pytest

from cartplanner.normalize.parser import parse
from cartplanner.normalize.units import Unit
from cartplanner.plan.aggregate import aggregate
from cartplanner.plan.scaling import (
    MealPrepPortion,
    format_amount,
    scale_factor_for,
    scale_ingredient,
    scale_recipe,
)


class TestScaleFactor:
    """Tests for scale factors from meal-prep portions."""

    def test_no_portions(self):
        """Test the default factor."""
        assert scale_factor_for(4) == 1.0

    def test_portion_against_recipe_servings(self):
        """Test a 12-serving batch of a 4-serving recipe."""
        portions = [MealPrepPortion("recipe-1", total_servings=12)]

        assert scale_factor_for(4, portions) == 3.0

    def test_portion_original_servings_preferred(self):
        """Test that a portion's own original servings win."""
        portions = [MealPrepPortion("recipe-1", total_servings=12, original_servings=6)]

        assert scale_factor_for(4, portions) == 2.0

    def test_largest_factor_wins(self):
        """Test several batches of one recipe."""
        portions = [
            MealPrepPortion("recipe-1", total_servings=8),
            MealPrepPortion("recipe-1", total_servings=16),
            MealPrepPortion("recipe-1", total_servings=4),
        ]

        assert scale_factor_for(4, portions) == 4.0

    def test_inactive_and_consumed_portions_ignored(self):
        """Test that only active portions with servings left count."""
        portions = [
            MealPrepPortion("recipe-1", total_servings=40, is_active=False),
            MealPrepPortion("recipe-1", total_servings=20, servings_remaining=0),
            MealPrepPortion("recipe-1", total_servings=8, servings_remaining=3),
        ]

        assert scale_factor_for(4, portions) == 2.0

    def test_unknown_servings(self):
        """Test portions that cannot be turned into a factor."""
        portions = [MealPrepPortion("recipe-1", total_servings=12)]

        assert scale_factor_for(None, portions) == 1.0
        assert scale_factor_for(0, portions) == 1.0

    def test_is_available(self):
        """Test the availability of a portion."""
        assert MealPrepPortion("r", 4).is_available
        assert MealPrepPortion("r", 4, servings_remaining=2).is_available
        assert not MealPrepPortion("r", 4, servings_remaining=0).is_available
        assert not MealPrepPortion("r", 4, is_active=False).is_available

    def test_chicken_scenario(self):
        """Test that 1 lb chicken for 4 becomes 3 lb for a 12-serving batch."""
        factor = scale_factor_for(4, [MealPrepPortion("recipe-1", total_servings=12)])

        (chicken,) = aggregate([(parse("1 lb chicken", "recipe-1"), factor)])

        assert chicken.totals_by_unit == {Unit.LB: 3.0}


# =============================================================================
# Recipe Scaling
# =============================================================================


class TestFormatAmount:
    """Tests for recipe-card amounts."""

    @pytest.mark.parametrize(
        "amount,expected",
        [
            (3.0, "3"),
            (2.5, "2 1/2"),
            (0.5, "1/2"),
            (0.333, "1/3"),
            (1.75, "1 3/4"),
            (0.125, "1/8"),
        ],
    )
    def test_common_fractions(self, amount, expected):
        """Test amounts close to common fractions."""
        assert format_amount(amount) == expected

    def test_decimal_fallback(self):
        """Test an amount with no nearby fraction."""
        assert format_amount(2.9) == "2.9"

    def test_decimal_fallback_rounding_to_whole(self):
        """Test that 2.96 shows as "3", not "3.0"."""
        assert format_amount(2.96) == "3"


class TestScaleRecipe:
    """Tests for scaling a recipe to a new serving count."""

    def test_double(self):
        """Test doubling a recipe."""
        scaled = scale_recipe(["1 cup rice", "2 tbsp butter"], servings=2, new_servings=4)

        assert [s.scaled_text for s in scaled] == ["2 cups rice", "4 tbsp butter"]
        assert scaled[0].original_amount == 1
        assert scaled[0].scaled_amount == 2

    def test_halve_with_fraction(self):
        """Test halving to a fractional amount."""
        (flour,) = scale_recipe(["1 cup flour"], servings=4, new_servings=2)

        assert flour.scaled_text == "1/2 cup flour"

    def test_descriptor_kept(self):
        """Test that the preparation note survives scaling."""
        (garlic,) = scale_recipe(["3 cloves garlic, minced"], servings=1, new_servings=2)

        assert garlic.scaled_text == "6 cloves garlic, minced"
        assert garlic.original_text == "3 cloves garlic, minced"

    def test_counted_ingredient_has_no_unit(self):
        """Test that no unit is invented for counted ingredients."""
        (onions,) = scale_recipe(["2 onions"], servings=2, new_servings=3)

        assert onions.scaled_text == "3 onions"

    def test_line_without_amount_unchanged(self):
        """Test that "Salt to taste" is not scaled."""
        (salt,) = scale_recipe(["Salt to taste"], servings=2, new_servings=8)

        assert salt.scaled_text == "Salt to taste"
        assert salt.scaled_amount == 1.0

    def test_blank_lines_dropped(self):
        """Test that blank lines are not returned."""
        assert len(scale_recipe(["1 cup rice", "", "  "], servings=1, new_servings=1)) == 1

    @pytest.mark.parametrize("servings", [None, 0, -2])
    def test_missing_servings_counts_as_one(self, servings):
        """Test recipes without a usable serving count."""
        (rice,) = scale_recipe(["1 cup rice"], servings=servings, new_servings=3)

        assert rice.scaled_amount == 3

    def test_scale_ingredient_blank(self):
        """Test scaling a blank line."""
        assert scale_ingredient("", 2.0) is None
