"""Persistence for daily meal plans."""

import uuid
from collections.abc import Iterable
from datetime import date

from sqlalchemy import select
from sqlalchemy.orm import selectinload

from mealplanner.grocery.aggregation import DateRange
from mealplanner.models import MealPlan, MealPlanRecipe, Recipe
from mealplanner.repository import SqlRepository, translate_errors


def _with_meals(stmt):
    return stmt.options(
        selectinload(MealPlan.meals).selectinload(MealPlanRecipe.recipe)
    )


class MealPlanRepository(SqlRepository):
    """Repository for meal plans and their meal slots."""

    async def get_by_date(self, plan_date: date) -> MealPlan | None:
        with translate_errors("load meal plan"):
            result = await self.session.execute(
                _with_meals(select(MealPlan).where(MealPlan.plan_date == plan_date))
            )
            return result.scalar_one_or_none()

    async def list_in_range(self, date_range: DateRange) -> list[MealPlan]:
        with translate_errors("list meal plans"):
            result = await self.session.execute(
                _with_meals(
                    select(MealPlan)
                    .where(
                        MealPlan.plan_date >= date_range.start,
                        MealPlan.plan_date <= date_range.end,
                    )
                    .order_by(MealPlan.plan_date)
                )
            )
            return list(result.scalars().all())

    async def live_recipe_ids(self, recipe_ids: Iterable[str]) -> set[str]:
        """Return the subset of ids naming recipes that exist and are not deleted."""
        ids = set(recipe_ids)
        if not ids:
            return set()
        with translate_errors("look up recipes"):
            result = await self.session.execute(
                select(Recipe.id).where(Recipe.id.in_(sorted(ids)), Recipe.deleted_at.is_(None))
            )
            return set(result.scalars().all())

    async def replace_meals(self, plan_date: date, meals: list[MealPlanRecipe]) -> MealPlan:
        """Replace every slot of a date's plan, creating the plan if needed."""
        plan = await self.get_by_date(plan_date)

        with translate_errors("update meal plan"):
            if plan is None:
                plan = MealPlan(id=str(uuid.uuid4()), plan_date=plan_date, meals=[])
                self.session.add(plan)
            else:
                plan.meals.clear()
                await self.session.flush()

            for index, meal in enumerate(meals):
                meal.order_index = index
            plan.meals.extend(meals)
            await self.session.flush()

        # Reload so every slot carries its recipe.
        with translate_errors("load meal plan"):
            result = await self.session.execute(
                _with_meals(select(MealPlan).where(MealPlan.id == plan.id)).execution_options(
                    populate_existing=True
                )
            )
            return result.scalar_one()
