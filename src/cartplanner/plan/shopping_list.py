"""Shopping list generation from recipes and meal-prep batches."""

import string
from collections.abc import Iterable, Mapping, Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field

from cartplanner.config import get_settings
from cartplanner.exceptions import RecipeLookupError
from cartplanner.logging_config import LoggingContext, get_logger
from cartplanner.normalize.names import canonicalize
from cartplanner.normalize.parser import Quantity, parse_lines
from cartplanner.plan.aggregate import aggregate
from cartplanner.plan.categories import categorize
from cartplanner.plan.purchase import PurchaseResolver
from cartplanner.plan.scaling import DEFAULT_SCALE_FACTOR, scale_factor_for
from cartplanner.plan.sources import (
    MealPrepSource,
    RecipeIngredients,
    RecipeSource,
    ShoppingListStore,
)
from cartplanner.schemas import GenerateShoppingListRequest

logger = get_logger(__name__)


@dataclass
class ShoppingListItem:
    """A single item to add to a shopping list."""

    name: str
    quantity: str
    category: str | None = None
    normalized_name: str = ""

    def __post_init__(self) -> None:
        if not self.normalized_name:
            self.normalized_name = canonicalize(self.name)


@dataclass
class GenerationResult:
    """Outcome of generating items for one shopping list."""

    list_id: str
    items: list[ShoppingListItem] = field(default_factory=list)
    items_added: int = 0
    skipped_recipe_ids: list[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        """Nothing new to add to the list."""
        return not self.items


def display_name(canonical_name: str) -> str:
    """Title-case a canonical name for the list ("olive oil" -> "Olive Oil")."""
    return string.capwords(canonical_name)


def _parse_recipes(
    recipes: Sequence[RecipeIngredients], workers: int
) -> list[list[Quantity]]:
    """Parse each recipe's lines, fanning out to threads when configured."""

    def parse_recipe(recipe: RecipeIngredients) -> list[Quantity]:
        return parse_lines(list(recipe.ingredient_lines), recipe.recipe_id)

    if workers <= 1 or len(recipes) <= 1:
        return [parse_recipe(recipe) for recipe in recipes]

    with ThreadPoolExecutor(max_workers=workers) as executor:
        return list(executor.map(parse_recipe, recipes))


def generate(
    recipes: Sequence[RecipeIngredients],
    scale_factors: Mapping[str, float] | None = None,
    existing_items: Iterable[str] = (),
    resolver: PurchaseResolver | None = None,
    workers: int | None = None,
) -> list[ShoppingListItem]:
    """
    Build shopping-list items for a set of recipes.

    Steps:
    1. Parse every ingredient line of every recipe
    2. Scale by the recipe's factor (1.0 when absent)
    3. Aggregate per ingredient and unit family
    4. Round each total up to a purchasable quantity
    5. Drop ingredients already on the list (case-insensitive)

    Args:
        recipes: Recipes with their ingredient lines.
        scale_factors: Recipe ID -> scale factor.
        existing_items: Names already on the destination list.
        resolver: Purchase resolver; defaults to the static package table.
        workers: Parser threads; defaults to the configured ``parse_workers``.

    Returns:
        Items sorted by canonical name.
    """
    if not recipes:
        return []

    scale_factors = scale_factors or {}
    resolver = resolver or PurchaseResolver()
    if workers is None:
        workers = get_settings().parse_workers

    parsed = _parse_recipes(recipes, workers)

    scaled: list[tuple[Quantity, float]] = []
    for recipe, quantities in zip(recipes, parsed, strict=True):
        factor = scale_factors.get(recipe.recipe_id, DEFAULT_SCALE_FACTOR)
        scaled.extend((quantity, factor) for quantity in quantities)

    existing = {canonicalize(name) for name in existing_items}
    items: list[ShoppingListItem] = []

    for aggregated in aggregate(scaled):
        name = aggregated.ingredient_name
        if name in existing:
            logger.debug(f"Skipping {name!r}: already on the list")
            continue
        if aggregated.base_total <= 0:
            logger.debug(f"Skipping {name!r}: nothing required after scaling")
            continue

        recommendation = resolver.resolve(aggregated)
        items.append(
            ShoppingListItem(
                name=display_name(name),
                quantity=recommendation.display_text,
                category=categorize(name),
                normalized_name=name,
            )
        )

    return items


class ShoppingListGenerator:
    """
    Generates shopping-list items for a destination list:
    - Loads recipes, skipping any that cannot be loaded
    - Scales recipes by their meal-prep batches
    - Deduplicates against the list's current items
    - Hands new items to the list store
    """

    def __init__(
        self,
        recipe_source: RecipeSource,
        list_store: ShoppingListStore,
        meal_prep_source: MealPrepSource | None = None,
        resolver: PurchaseResolver | None = None,
    ):
        self.recipe_source = recipe_source
        self.list_store = list_store
        self.meal_prep_source = meal_prep_source
        self.resolver = resolver or PurchaseResolver()

    def generate_for_list(self, list_id: str, recipe_ids: Sequence[str]) -> GenerationResult:
        """
        Add the ingredients of ``recipe_ids`` to a shopping list.

        A recipe listed more than once (the same dinner twice in a week)
        contributes once per occurrence.

        Args:
            list_id: Destination shopping list.
            recipe_ids: Recipes to shop for.

        Returns:
            GenerationResult with the items handed to the store.
        """
        with LoggingContext(list_id=list_id):
            result = GenerationResult(list_id=list_id)
            if not recipe_ids:
                logger.info("No recipes given, nothing to add")
                return result

            logger.info(f"Generating shopping list items from {len(recipe_ids)} recipes")

            recipes, result.skipped_recipe_ids = self._load_recipes(recipe_ids)
            if not recipes:
                logger.warning("No recipes could be loaded, nothing to add")
                return result

            scale_factors = self._scale_factors(recipes)
            existing = self.list_store.existing_item_names(list_id)

            result.items = generate(
                recipes,
                scale_factors,
                existing,
                resolver=self.resolver,
            )
            if result.items:
                result.items_added = self.list_store.add_items(list_id, result.items)

            logger.info(
                f"Generated {len(result.items)} items, {result.items_added} added, "
                f"{len(result.skipped_recipe_ids)} recipes skipped"
            )
            return result

    def handle(self, request: GenerateShoppingListRequest) -> GenerationResult:
        """Generate items for a validated request payload."""
        return self.generate_for_list(request.shopping_list_id, request.recipe_ids)

    def _load_recipes(
        self, recipe_ids: Sequence[str]
    ) -> tuple[list[RecipeIngredients], list[str]]:
        """Load recipes in order; failed lookups are logged and skipped."""
        loaded: dict[str, RecipeIngredients] = {}
        skipped: list[str] = []
        recipes: list[RecipeIngredients] = []

        for recipe_id in recipe_ids:
            if recipe_id in skipped:
                continue
            if recipe_id not in loaded:
                try:
                    loaded[recipe_id] = self.recipe_source.get_recipe(recipe_id)
                except RecipeLookupError as e:
                    logger.warning(f"Skipping recipe {recipe_id}: {e}")
                    skipped.append(recipe_id)
                    continue
            recipes.append(loaded[recipe_id])

        return recipes, skipped

    def _scale_factors(self, recipes: Sequence[RecipeIngredients]) -> dict[str, float]:
        """Scale factor per recipe from its available meal-prep portions."""
        if self.meal_prep_source is None:
            return {}

        factors: dict[str, float] = {}
        for recipe in recipes:
            if recipe.recipe_id in factors:
                continue
            with LoggingContext(recipe_id=recipe.recipe_id):
                portions = self.meal_prep_source.get_portions(recipe.recipe_id)
                factors[recipe.recipe_id] = scale_factor_for(recipe.servings, portions)
                if factors[recipe.recipe_id] != DEFAULT_SCALE_FACTOR:
                    logger.debug(f"Scaling by {factors[recipe.recipe_id]:.2f}")
        return factors
