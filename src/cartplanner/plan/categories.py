"""Store-aisle categories for shopping-list items."""

import re

# Category -> keywords. Earlier categories win when several match.
CATEGORY_KEYWORDS: dict[str, tuple[str, ...]] = {
    "Spices & Seasonings": (
        "salt",
        "pepper flakes",
        "black pepper",
        "garlic powder",
        "onion powder",
        "cumin",
        "paprika",
        "oregano",
        "cinnamon",
        "chili powder",
        "turmeric",
        "nutmeg",
        "thyme",
        "seasoning",
    ),
    "Canned Goods": (
        "black beans",
        "kidney beans",
        "chickpeas",
        "tomato sauce",
        "tomato paste",
        "coconut milk",
        "broth",
        "stock",
    ),
    "Meat & Seafood": (
        "chicken",
        "beef",
        "pork",
        "turkey",
        "bacon",
        "sausage",
        "lamb",
        "salmon",
        "tuna",
        "fish",
        "shrimp",
    ),
    "Dairy & Eggs": (
        "milk",
        "butter",
        "cheese",
        "feta",
        "parmesan",
        "yogurt",
        "cream",
        "egg",
        "eggs",
    ),
    "Bakery & Grains": (
        "flour",
        "bread",
        "tortilla",
        "tortillas",
        "rice",
        "quinoa",
        "pasta",
        "oats",
        "noodles",
    ),
    "Produce": (
        "onion",
        "onions",
        "garlic",
        "tomato",
        "tomatoes",
        "bell pepper",
        "bell peppers",
        "carrot",
        "carrots",
        "lettuce",
        "spinach",
        "broccoli",
        "cucumber",
        "mushroom",
        "mushrooms",
        "potato",
        "potatoes",
        "lemon",
        "lime",
        "avocado",
        "basil",
        "cilantro",
        "parsley",
        "ginger",
        "apple",
        "banana",
    ),
    "Pantry": (
        "sugar",
        "olive oil",
        "vegetable oil",
        "sesame oil",
        "oil",
        "vinegar",
        "soy sauce",
        "honey",
        "maple syrup",
        "baking powder",
        "baking soda",
        "vanilla",
        "tofu",
    ),
}

_CATEGORY_PATTERNS: list[tuple[str, re.Pattern]] = [
    (
        category,
        re.compile(r"\b(?:" + "|".join(re.escape(k) for k in keywords) + r")\b"),
    )
    for category, keywords in CATEGORY_KEYWORDS.items()
]


def categorize(ingredient_name: str) -> str | None:
    """Return the aisle category for a canonical ingredient name, if known."""
    name = ingredient_name.lower()
    for category, pattern in _CATEGORY_PATTERNS:
        if pattern.search(name):
            return category
    return None
