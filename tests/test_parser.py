"""Tests for ingredient line parsing and name extraction."""

import pytest

from cartplanner.normalize.names import canonicalize, extract_name
from cartplanner.normalize.parser import (
    match_amount,
    parse,
    parse_lines,
    replace_vulgar_fractions,
)
from cartplanner.normalize.units import Unit

# =============================================================================
# Amount Matching
# =============================================================================


class TestMatchAmount:
    """Tests for leading numeric expressions."""

    def test_integer(self):
        """Test a plain integer."""
        assert match_amount("2 cups") == (2.0, 1)

    def test_fraction(self):
        """Test a simple fraction."""
        assert match_amount("1/2 cup") == (0.5, 3)

    def test_mixed_number(self):
        """Test a whole number followed by a fraction."""
        assert match_amount("1 1/2 cups") == (1.5, 5)

    def test_decimal(self):
        """Test decimals with and without a leading digit."""
        assert match_amount("2.5 lb") == (2.5, 3)
        assert match_amount(".5 tsp") == (0.5, 2)

    def test_dash_range_is_midpoint(self):
        """Test that "2-3" resolves to 2.5."""
        assert match_amount("2-3 tbsp") == (2.5, 3)

    def test_word_range_is_midpoint(self):
        """Test that "2 to 3" resolves to 2.5."""
        amount, end = match_amount("2 to 3 cups")
        assert amount == 2.5
        assert end == len("2 to 3")

    def test_mixed_number_range(self):
        """Test a range whose low end is a mixed number."""
        assert match_amount("1 1/2 to 2 cups") == (1.75, len("1 1/2 to 2"))
        assert match_amount("1 1/2-2 cups") == (1.75, len("1 1/2-2"))

    def test_hyphenated_mixed_number(self):
        """Test that "1-1/2" means one and a half."""
        assert match_amount("1-1/2 cups") == (1.5, len("1-1/2"))

    def test_no_number(self):
        """Test text without a numeric prefix."""
        assert match_amount("salt to taste") is None

    def test_zero_denominator(self):
        """Test that "1/0" is not a number."""
        assert match_amount("1/0 cup") is None


class TestVulgarFractions:
    """Tests for unicode fraction replacement."""

    def test_standalone(self):
        """Test a bare unicode fraction."""
        assert replace_vulgar_fractions("¾ cup") == "3/4 cup"

    def test_attached_to_whole_number(self):
        """Test "1½" becoming a mixed number."""
        assert replace_vulgar_fractions("1½ cups") == "1 1/2 cups"

    def test_fraction_slash(self):
        """Test the unicode fraction slash."""
        assert replace_vulgar_fractions("1⁄2 cup") == "1/2 cup"


# =============================================================================
# Line Parsing
# =============================================================================


class TestParse:
    """Tests for parsing whole ingredient lines."""

    def test_fraction_with_unit(self):
        """Test "1/2 cup sugar"."""
        quantity = parse("1/2 cup sugar")

        assert quantity.amount == 0.5
        assert quantity.unit == Unit.CUP
        assert quantity.ingredient_name == "sugar"
        assert quantity.explicit_unit is True
        assert quantity.is_fallback is False

    def test_descriptor_after_comma_is_ignored(self):
        """Test that the preparation note is kept only in the original text."""
        quantity = parse("3 cloves garlic, minced")

        assert quantity.amount == 3
        assert quantity.unit == Unit.CLOVE
        assert quantity.ingredient_name == "garlic"
        assert quantity.original_text == "3 cloves garlic, minced"

    def test_line_without_amount_falls_back_to_one_piece(self):
        """Test that unparseable lines are emitted, not dropped."""
        quantity = parse("Salt to taste")

        assert quantity.amount == 1
        assert quantity.unit == Unit.PIECE
        assert quantity.ingredient_name == "salt to taste"
        assert quantity.is_fallback is True

    def test_mixed_number(self):
        """Test "1 1/2 cups flour"."""
        quantity = parse("1 1/2 cups flour")

        assert quantity.amount == 1.5
        assert quantity.unit == Unit.CUP
        assert quantity.ingredient_name == "flour"

    def test_unicode_fraction(self):
        """Test "1½ cups milk" and "¾ cup sugar"."""
        assert parse("1½ cups milk").amount == 1.5
        assert parse("¾ cup sugar").amount == 0.75

    def test_range_uses_midpoint(self):
        """Test "2-3 tbsp butter"."""
        quantity = parse("2-3 tbsp butter")

        assert quantity.amount == 2.5
        assert quantity.unit == Unit.TBSP
        assert quantity.ingredient_name == "butter"

    @pytest.mark.parametrize("line", ["1 1/2 to 2 cups flour", "1 1/2-2 cups flour"])
    def test_mixed_number_range(self, line):
        """Test the midpoint of a range starting at a mixed number."""
        quantity = parse(line)

        assert quantity.amount == 1.75
        assert quantity.unit == Unit.CUP
        assert quantity.ingredient_name == "flour"

    def test_hyphenated_mixed_number(self):
        """Test "1-1/2 cups flour"."""
        quantity = parse("1-1/2 cups flour")

        assert quantity.amount == 1.5
        assert quantity.unit == Unit.CUP
        assert quantity.ingredient_name == "flour"

    def test_no_unit_defaults_to_piece(self):
        """Test a counted ingredient."""
        quantity = parse("2 chicken breasts")

        assert quantity.amount == 2
        assert quantity.unit == Unit.PIECE
        assert quantity.ingredient_name == "chicken breasts"
        assert quantity.explicit_unit is False

    def test_unit_with_period(self):
        """Test an abbreviation followed by a period."""
        quantity = parse("2 tbsp. olive oil")

        assert quantity.unit == Unit.TBSP
        assert quantity.ingredient_name == "olive oil"

    def test_unit_attached_to_number(self):
        """Test "500g" style quantities."""
        quantity = parse("500g pasta")

        assert quantity.amount == 500
        assert quantity.unit == Unit.G
        assert quantity.ingredient_name == "pasta"

    def test_parenthetical_size_removed(self):
        """Test "1 (15 oz) can tomato sauce"."""
        quantity = parse("1 (15 oz) can tomato sauce")

        assert quantity.amount == 1
        assert quantity.unit == Unit.CAN
        assert quantity.ingredient_name == "tomato sauce"

    def test_leading_of_removed(self):
        """Test "1 cup of milk"."""
        assert parse("1 cup of milk").ingredient_name == "milk"

    def test_whitespace_collapsed(self):
        """Test irregular spacing and casing."""
        quantity = parse("  2   Cups   Flour  ")

        assert quantity.amount == 2
        assert quantity.unit == Unit.CUP
        assert quantity.ingredient_name == "flour"
        assert quantity.original_text == "2   Cups   Flour"

    def test_zero_amount_clamped(self):
        """Test that a zero amount becomes one."""
        quantity = parse("0 cups water")

        assert quantity.amount == 1
        assert quantity.unit == Unit.CUP
        assert quantity.ingredient_name == "water"

    def test_zero_denominator_falls_back(self):
        """Test that "1/0" is treated as no amount."""
        quantity = parse("1/0 cup sugar")

        assert quantity.is_fallback is True
        assert quantity.amount == 1
        assert quantity.ingredient_name == "1/0 cup sugar"

    def test_bare_number_keeps_a_name(self):
        """Test a line holding only a number."""
        quantity = parse("3")

        assert quantity.amount == 3
        assert quantity.ingredient_name == "3"

    def test_quantity_without_name_uses_unit_word(self):
        """Test a line holding only an amount and unit."""
        quantity = parse("2 cups")

        assert quantity.unit == Unit.CUP
        assert quantity.ingredient_name == "cups"

    @pytest.mark.parametrize("line", ["", "   ", "\n\t", None])
    def test_blank_lines_not_emitted(self, line):
        """Test that only truly empty input is skipped."""
        assert parse(line) is None

    def test_recipe_id_recorded(self):
        """Test that the source recipe is carried through."""
        assert parse("1 cup rice", "recipe-1").source_recipe_id == "recipe-1"

    def test_case_insensitive_name(self):
        """Test that names are canonicalised."""
        assert parse("1 lb Chicken Breast").ingredient_name == "chicken breast"


class TestParseLines:
    """Tests for parsing a recipe's lines."""

    def test_skips_blank_lines(self):
        """Test that blank lines are dropped and order is kept."""
        quantities = parse_lines(["1 cup rice", "", "Salt to taste"], "recipe-1")

        assert [q.ingredient_name for q in quantities] == ["rice", "salt to taste"]
        assert all(q.source_recipe_id == "recipe-1" for q in quantities)

    def test_empty_recipe(self):
        """Test a recipe without lines."""
        assert parse_lines([]) == []


# =============================================================================
# Name Extraction
# =============================================================================


class TestCanonicalize:
    """Tests for canonical names."""

    def test_lowercase_and_whitespace(self):
        """Test case and whitespace normalisation."""
        assert canonicalize("  Fresh   Basil ") == "fresh basil"

    def test_edge_punctuation(self):
        """Test that trailing commas and periods are stripped."""
        assert canonicalize("garlic,") == "garlic"
        assert canonicalize("onion.") == "onion"


class TestExtractName:
    """Tests for the shared name extractor."""

    def test_explicit_unit_stripped(self):
        """Test stripping the quantity and matched unit word."""
        assert extract_name("3 cloves garlic", "3", Unit.CLOVE) == "garlic"
        assert extract_name("1 1/2 cups flour", "1 1/2", Unit.CUP) == "flour"

    def test_unit_word_must_match(self):
        """Test that a different unit word is not stripped."""
        assert extract_name("2 cups flour", "2", Unit.TBSP) == "cups flour"

    def test_implicit_unit(self):
        """Test treating the first word as an unknown unit."""
        assert extract_name("2 sprigs thyme", "2", implicit_unit=True) == "thyme"

    def test_implicit_unit_keeps_single_word(self):
        """Test that a lone word is the name, not a unit."""
        assert extract_name("2 onions", "2", implicit_unit=True) == "onions"

    def test_leading_numeric_characters_stripped(self):
        """Test the last-resort rule."""
        assert extract_name("2 - 3 apples", "2") == "apples"

    def test_quantity_only(self):
        """Test that a line with no name gives an empty string."""
        assert extract_name("2", "2") == ""
