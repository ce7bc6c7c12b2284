"""Recipe macro totals from linked nutrition entries."""

from collections.abc import Mapping
from dataclasses import dataclass

from mealplanner.logging_config import get_logger
from mealplanner.models import NutritionCache, Recipe

logger = get_logger(__name__)

MACROS = ("calories", "protein_g", "carbs_g", "fiber_g", "fat_g")


@dataclass(frozen=True)
class Macros:
    calories: float = 0.0
    protein_g: float = 0.0
    carbs_g: float = 0.0
    fiber_g: float = 0.0
    fat_g: float = 0.0

    def divided_by(self, n: int) -> "Macros":
        return Macros(**{macro: getattr(self, macro) / n for macro in MACROS})


@dataclass(frozen=True)
class RecipeNutrition:
    """Whole-recipe totals and the share of one serving."""

    total: Macros
    per_serving: Macros


def calculate_recipe_nutrition(
    recipe: Recipe, entries: Mapping[str, NutritionCache]
) -> RecipeNutrition:
    """
    Sum the macros of every ingredient that links a nutrition entry.

    Entries hold values per 100 g and an ingredient contributes
    ``value * quantity / 100``. Units are not converted, so the quantity is
    read as grams whatever its unit says. Ingredients without a link, without
    a quantity, or whose entry is gone are skipped; a missing macro on an
    entry counts as zero.

    Per-serving values are zero when the recipe has no positive serving count.
    """
    totals = dict.fromkeys(MACROS, 0.0)

    for ingredient in recipe.ingredients:
        if ingredient.nutrition_id is None or ingredient.quantity is None:
            continue

        entry = entries.get(ingredient.nutrition_id)
        if entry is None:
            logger.warning(
                f"No nutrition entry {ingredient.nutrition_id} for ingredient "
                f"'{ingredient.ingredient_name}' of recipe {recipe.id}"
            )
            continue

        factor = float(ingredient.quantity) / 100
        for macro in MACROS:
            value = getattr(entry, macro)
            if value is not None:
                totals[macro] += value * factor

    total = Macros(**totals)
    per_serving = total.divided_by(recipe.servings) if recipe.servings > 0 else Macros()
    return RecipeNutrition(total=total, per_serving=per_serving)
