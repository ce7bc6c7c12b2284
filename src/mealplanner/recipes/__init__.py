"""Recipe management."""

from mealplanner.recipes.repository import RecipeRepository
from mealplanner.recipes.schemas import IngredientInput, InstructionInput, RecipeInput
from mealplanner.recipes.service import RecipeService, validate_recipe

__all__ = [
    "IngredientInput",
    "InstructionInput",
    "RecipeInput",
    "RecipeRepository",
    "RecipeService",
    "validate_recipe",
]
