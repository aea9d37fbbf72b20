"""Payload schemas exchanged with recipe, meal-prep and shopping-list collaborators."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class RecipeInput(BaseModel):
    """Recipe ingredient data as delivered by the recipe collaborator."""

    id: str
    title: str | None = None
    servings: int | None = Field(None, ge=0)
    ingredients: list[str] = Field(default_factory=list)


class MealPrepPortionInput(BaseModel):
    """Meal-prep batch as delivered by the meal-prep collaborator."""

    recipe_id: str
    total_servings: float = Field(ge=0)
    original_servings: float | None = Field(None, ge=0)
    servings_remaining: float | None = Field(None, ge=0)
    is_active: bool = True


class GenerateShoppingListRequest(BaseModel):
    """Request to add recipe ingredients to a shopping list."""

    shopping_list_id: str
    recipe_ids: list[str] = Field(default_factory=list)


class ShoppingListItemRead(BaseModel):
    """Stored shopping-list item."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    shopping_list_id: str
    name: str
    normalized_name: str
    quantity: str
    category: str | None = None
    purchased: bool = False
    created_at: datetime | None = None
