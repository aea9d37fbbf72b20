"""Pytest configuration and shared fixtures."""

from unittest.mock import MagicMock

import pytest
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from cartplanner.database import Base, make_session_factory
from cartplanner.plan.purchase import PurchaseResolver
from cartplanner.plan.sources import RecipeIngredients, ShoppingListStore

# =============================================================================
# Pytest Configuration
# =============================================================================


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests (require external services)"
    )
    config.addinivalue_line("markers", "slow: marks tests as slow running")


# =============================================================================
# Recipe Fixtures
# =============================================================================


@pytest.fixture
def pasta_recipe():
    """Weeknight pasta, serves 4."""
    return RecipeIngredients(
        recipe_id="recipe-pasta",
        ingredient_lines=(
            "1 lb pasta",
            "2 tbsp olive oil",
            "3 cloves garlic, minced",
            "1 (15 oz) can tomato sauce",
            "Salt to taste",
        ),
        servings=4,
    )


@pytest.fixture
def stir_fry_recipe():
    """Chicken stir fry, serves 2."""
    return RecipeIngredients(
        recipe_id="recipe-stir-fry",
        ingredient_lines=(
            "1 lb chicken breast",
            "2 tbsp olive oil",
            "2 cloves garlic",
            "1/4 cup soy sauce",
            "2 bell peppers, sliced",
            "",
        ),
        servings=2,
    )


@pytest.fixture
def raw_recipes():
    """Recipe payloads as a recipe collaborator would return them."""
    return [
        {
            "id": "recipe-1",
            "title": "Garlic Chicken",
            "servings": 4,
            "ingredients": ["1 lb chicken", "2 tbsp olive oil", "3 cloves garlic"],
        },
        {
            "id": "recipe-2",
            "title": "Rice Bowl",
            "servings": 2,
            "ingredients": ["2 cups rice", "2 tbsp olive oil", "Salt to taste"],
        },
    ]


@pytest.fixture
def resolver():
    """Purchase resolver with the default table and one decimal place."""
    return PurchaseResolver(decimal_places=1)


@pytest.fixture
def mock_list_store():
    """Shopping-list store that starts empty and reports every item as inserted."""
    store = MagicMock(spec=ShoppingListStore)
    store.existing_item_names.return_value = []
    store.add_items.side_effect = lambda list_id, items: len(items)
    return store


# =============================================================================
# SQLite Test Database Fixtures
# =============================================================================


@pytest.fixture(scope="function")
def test_db_engine():
    """In-memory SQLite engine shared across sessions of one test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    Base.metadata.create_all(engine)

    yield engine

    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture(scope="function")
def session_factory(test_db_engine):
    """Session factory bound to the test engine."""
    return make_session_factory(test_db_engine)
