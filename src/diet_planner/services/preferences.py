"""Preference filters applied before planning and to recommendation lists."""

from collections.abc import Sequence

from diet_planner.domain.foods import FoodRecord
from diet_planner.domain.preferences import PlanPreferences
from diet_planner.domain.scoring import ScoredFood, TieredCatalog

# Categories that always contain an allergen unless tagged "<allergen>_free".
ALLERGEN_CATEGORIES = {
    "dairy": ("Dairy",),
    "nuts": ("Nut",),
    "gluten": ("Grain",),
    "soy": (),
    "shellfish": (),
    "eggs": (),
}


def contains_allergen(food: FoodRecord, allergen: str) -> bool:
    """Return True if the food declares or is tagged with an allergen.

    Otherwise an ``<allergen>_free`` tag clears the food and its category decides.
    """
    key = allergen.strip().lower()
    if key in food.allergens or food.has_tag(key):
        return True
    if food.has_tag(f"{key}_free"):
        return False
    return food.category in ALLERGEN_CATEGORIES.get(key, ())


def contains_ingredient(food: FoodRecord, ingredient: str) -> bool:
    """Return True if the ingredient appears in the food's name or ingredients."""
    needle = ingredient.strip().lower()
    if not needle:
        return False
    return needle in food.name.lower() or any(
        needle in item for item in food.ingredients
    )


def admits(food: FoodRecord, preferences: PlanPreferences) -> bool:
    """Return True if the food passes the exclusion filters."""
    if preferences.vegetarian_only and not food.is_vegetarian:
        return False
    if any(
        contains_ingredient(food, ingredient)
        for ingredient in preferences.exclude_ingredients
    ):
        return False
    return not any(
        contains_allergen(food, allergen) for allergen in preferences.exclude_allergens
    )


def filter_catalog(
    tiered: TieredCatalog, preferences: PlanPreferences
) -> TieredCatalog:
    """Drop excluded foods from every tier, keeping tier membership intact."""
    return tiered.filter(lambda item: admits(item.food, preferences))


def select_recommendations(
    ranked: Sequence[ScoredFood], preferences: PlanPreferences
) -> list[ScoredFood]:
    """Apply category, minimum score and limit to a ranked list."""
    selected = [
        item
        for item in ranked
        if (preferences.category is None or item.food.category == preferences.category)
        and (preferences.min_score is None or item.score >= preferences.min_score)
    ]
    if preferences.limit is not None:
        selected = selected[: preferences.limit]
    return selected
