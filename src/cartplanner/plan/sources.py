"""Collaborator interfaces for shopping-list generation."""

from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from cartplanner.exceptions import RecipeLookupError
from cartplanner.plan.scaling import MealPrepPortion
from cartplanner.schemas import MealPrepPortionInput, RecipeInput

if TYPE_CHECKING:
    from cartplanner.plan.shopping_list import ShoppingListItem


@dataclass(frozen=True)
class RecipeIngredients:
    """A recipe's ingredient lines and nominal servings."""

    recipe_id: str
    ingredient_lines: Sequence[str] = field(default_factory=tuple)
    servings: int | None = None


class RecipeSource(ABC):
    """Provides recipe ingredient data."""

    @abstractmethod
    def get_recipe(self, recipe_id: str) -> RecipeIngredients:
        """
        Load a recipe's ingredient lines and servings.

        Raises:
            RecipeLookupError: If the recipe cannot be loaded.
        """


class MealPrepSource(ABC):
    """Provides meal-prep portions used to scale recipes."""

    @abstractmethod
    def get_portions(self, recipe_id: str) -> list[MealPrepPortion]:
        """Return meal-prep portions for a recipe, possibly empty."""


class ShoppingListStore(ABC):
    """Destination shopping list."""

    @abstractmethod
    def existing_item_names(self, list_id: str) -> list[str]:
        """Names of the items already on the list."""

    @abstractmethod
    def add_items(self, list_id: str, items: Sequence["ShoppingListItem"]) -> int:
        """
        Insert items into the list.

        Returns:
            Number of items inserted.
        """


# =============================================================================
# In-memory sources
# =============================================================================


class StaticRecipeSource(RecipeSource):
    """Recipe source over raw recipe payloads, validated on lookup."""

    def __init__(self, recipes: Iterable[Mapping[str, Any] | RecipeInput]):
        self._recipes: dict[str, Mapping[str, Any] | RecipeInput] = {}
        for recipe in recipes:
            recipe_id = recipe.id if isinstance(recipe, RecipeInput) else recipe.get("id")
            if recipe_id is not None:
                self._recipes[str(recipe_id)] = recipe

    def get_recipe(self, recipe_id: str) -> RecipeIngredients:
        payload = self._recipes.get(recipe_id)
        if payload is None:
            raise RecipeLookupError(recipe_id)

        try:
            recipe = RecipeInput.model_validate(payload)
        except ValidationError as e:
            raise RecipeLookupError(recipe_id, f"invalid ingredient data: {e}") from e

        return RecipeIngredients(
            recipe_id=recipe.id,
            ingredient_lines=tuple(recipe.ingredients),
            servings=recipe.servings,
        )


class StaticMealPrepSource(MealPrepSource):
    """Meal-prep source over raw portion payloads."""

    def __init__(self, portions: Iterable[Mapping[str, Any] | MealPrepPortionInput]):
        self._portions: dict[str, list[MealPrepPortion]] = {}
        for raw in portions:
            portion = MealPrepPortionInput.model_validate(raw)
            self._portions.setdefault(portion.recipe_id, []).append(
                MealPrepPortion(
                    recipe_id=portion.recipe_id,
                    total_servings=portion.total_servings,
                    original_servings=portion.original_servings,
                    servings_remaining=portion.servings_remaining,
                    is_active=portion.is_active,
                )
            )

    def get_portions(self, recipe_id: str) -> list[MealPrepPortion]:
        return list(self._portions.get(recipe_id, []))
