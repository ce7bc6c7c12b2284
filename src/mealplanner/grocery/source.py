"""Ingredient source: the planned meals in a date range, flattened to ingredient tuples."""

from collections.abc import Iterable
from typing import Protocol

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from mealplanner.grocery.aggregation import DateRange, IngredientTuple
from mealplanner.logging_config import get_logger
from mealplanner.models import MealPlan, MealPlanRecipe, Recipe
from mealplanner.repository import translate_errors
from mealplanner.schemas import Department

logger = get_logger(__name__)


class IngredientSource(Protocol):
    """Anything that can list the ingredient tuples planned in a date range."""

    async def fetch(self, date_range: DateRange) -> list[IngredientTuple]: ...


def collect_ingredient_tuples(meals: Iterable[MealPlanRecipe]) -> list[IngredientTuple]:
    """
    Flatten meal slots into ingredient tuples.

    Out-of-kitchen slots, slots without a recipe and soft-deleted recipes
    contribute nothing.
    """
    tuples: list[IngredientTuple] = []

    for meal in meals:
        if meal.out_of_kitchen:
            continue

        recipe = meal.recipe
        if recipe is None:
            if meal.recipe_id is not None:
                logger.warning(f"Skipping meal slot {meal.id}: recipe {meal.recipe_id} is missing")
            continue
        if recipe.deleted_at is not None:
            continue

        for ingredient in recipe.ingredients:
            tuples.append(
                IngredientTuple(
                    ingredient_name=ingredient.ingredient_name,
                    quantity=ingredient.quantity,
                    unit=ingredient.unit,
                    department=Department(ingredient.department),
                    recipe_id=recipe.id,
                    recipe_title=recipe.title,
                    meal_servings=meal.servings,
                    recipe_servings=recipe.servings,
                    order_index=ingredient.order_index,
                )
            )

    return tuples


class SqlIngredientSource:
    """Reads planned meals and their recipes from the database."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def fetch(self, date_range: DateRange) -> list[IngredientTuple]:
        """Return the ingredient tuples of every in-kitchen meal planned in the range."""
        stmt = (
            select(MealPlanRecipe)
            .join(MealPlan, MealPlanRecipe.meal_plan_id == MealPlan.id)
            .join(Recipe, MealPlanRecipe.recipe_id == Recipe.id)
            .where(
                MealPlan.plan_date >= date_range.start,
                MealPlan.plan_date <= date_range.end,
                MealPlanRecipe.out_of_kitchen.is_(False),
                Recipe.deleted_at.is_(None),
            )
            .options(selectinload(MealPlanRecipe.recipe).selectinload(Recipe.ingredients))
            .order_by(MealPlan.plan_date, MealPlanRecipe.order_index)
        )

        with translate_errors("read planned meals"):
            result = await self.session.execute(stmt)
            meals = result.scalars().all()

        tuples = collect_ingredient_tuples(meals)

        logger.info(
            f"Ingredient source: {len(meals)} meals, {len(tuples)} ingredient tuples "
            f"between {date_range.start} and {date_range.end}"
        )
        return tuples
