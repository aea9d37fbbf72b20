"""Exceptions raised by the shopping-list engine and its collaborators.

Malformed ingredient text never raises: unparseable lines fall back to a
single piece of the whole line, unknown unit words count as pieces, and
quantities in incompatible unit families are kept as separate lines.
"""


class CartPlannerError(Exception):
    """Base exception for cartplanner errors."""


class IncompatibleUnitsError(CartPlannerError):
    """Raised when converting between units of different families."""

    def __init__(self, source: str, target: str):
        super().__init__(f"Cannot convert {source} to {target}: different unit families")
        self.source = source
        self.target = target


class RecipeLookupError(CartPlannerError):
    """Raised by a recipe source when a recipe's ingredients cannot be loaded."""

    def __init__(self, recipe_id: str, reason: str = "not found"):
        super().__init__(f"Recipe {recipe_id}: {reason}")
        self.recipe_id = recipe_id
        self.reason = reason


class DuplicateInsertError(CartPlannerError):
    """Raised when shopping-list items still conflict after the insert retry."""

    def __init__(self, list_id: str, names: list[str] | None = None):
        super().__init__(f"Duplicate items for shopping list {list_id}")
        self.list_id = list_id
        self.names = names or []
