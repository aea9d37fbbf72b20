"""Aggregation, purchase resolution and shopping-list generation."""

from cartplanner.plan.aggregate import AggregatedQuantity, aggregate
from cartplanner.plan.purchase import PackageSize, PurchaseRecommendation, PurchaseResolver
from cartplanner.plan.scaling import MealPrepPortion, scale_factor_for, scale_recipe
from cartplanner.plan.shopping_list import (
    GenerationResult,
    ShoppingListGenerator,
    ShoppingListItem,
    generate,
)
from cartplanner.plan.sources import RecipeIngredients

__all__ = [
    "AggregatedQuantity",
    "GenerationResult",
    "MealPrepPortion",
    "PackageSize",
    "PurchaseRecommendation",
    "PurchaseResolver",
    "RecipeIngredients",
    "ShoppingListGenerator",
    "ShoppingListItem",
    "aggregate",
    "generate",
    "scale_factor_for",
    "scale_recipe",
]
