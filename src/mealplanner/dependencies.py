"""FastAPI dependencies: caller identity and per-request services."""

from typing import Annotated

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from mealplanner.config import get_settings
from mealplanner.cookbooks import CookbookRepository, CookbookService
from mealplanner.database import get_db
from mealplanner.grocery import GroceryListRepository, GroceryListService, SqlIngredientSource
from mealplanner.logging_config import user_id_ctx
from mealplanner.menu import MenuRepository, RecommendationService
from mealplanner.nutrition import NutritionRepository, NutritionService
from mealplanner.plan import MealPlanRepository, MealPlanService
from mealplanner.recipes import RecipeRepository, RecipeService


async def get_current_user_id(
    x_user_id: Annotated[str | None, Header(description="Caller identity")] = None,
) -> str:
    """Resolve the caller from the X-User-Id header, or the configured default user."""
    user_id = (x_user_id or "").strip() or get_settings().default_user_id
    user_id_ctx.set(user_id)
    return user_id


CurrentUser = Annotated[str, Depends(get_current_user_id)]
DbSession = Annotated[AsyncSession, Depends(get_db)]


async def get_grocery_list_service(db: DbSession) -> GroceryListService:
    return GroceryListService(GroceryListRepository(db), SqlIngredientSource(db))


async def get_recommendation_service(db: DbSession) -> RecommendationService:
    return RecommendationService(MenuRepository(db))


async def get_meal_plan_service(db: DbSession) -> MealPlanService:
    return MealPlanService(MealPlanRepository(db))


async def get_recipe_service(db: DbSession) -> RecipeService:
    return RecipeService(RecipeRepository(db))


async def get_cookbook_service(db: DbSession) -> CookbookService:
    return CookbookService(CookbookRepository(db))


async def get_nutrition_service(db: DbSession) -> NutritionService:
    return NutritionService(NutritionRepository(db))
