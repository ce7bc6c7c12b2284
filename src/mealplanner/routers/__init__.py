"""API routers for the meal planner application."""

from mealplanner.routers.cookbooks import router as cookbooks_router
from mealplanner.routers.grocery_lists import router as grocery_lists_router
from mealplanner.routers.meal_plans import router as meal_plans_router
from mealplanner.routers.menu import router as menu_router
from mealplanner.routers.nutrition import router as nutrition_router
from mealplanner.routers.recipes import router as recipes_router

__all__ = [
    "cookbooks_router",
    "grocery_lists_router",
    "meal_plans_router",
    "menu_router",
    "nutrition_router",
    "recipes_router",
]
