"""Food nutrition search and recipe macro totals."""

from mealplanner.nutrition.calculation import Macros, RecipeNutrition, calculate_recipe_nutrition
from mealplanner.nutrition.client import (
    FoodDataClient,
    FoodNutrition,
    StubFoodDataClient,
)
from mealplanner.nutrition.repository import NutritionRepository
from mealplanner.nutrition.service import NutritionService

__all__ = [
    "FoodDataClient",
    "FoodNutrition",
    "Macros",
    "NutritionRepository",
    "NutritionService",
    "RecipeNutrition",
    "StubFoodDataClient",
    "calculate_recipe_nutrition",
]
