"""Persistence for the nutrition cache."""

import uuid
from collections.abc import Iterable

from sqlalchemy import select

from mealplanner.models import NutritionCache
from mealplanner.nutrition.client import FoodNutrition
from mealplanner.repository import SqlRepository, translate_errors


class NutritionRepository(SqlRepository):
    """Repository for cached FoodData Central entries."""

    async def search_by_name(self, query: str, limit: int) -> list[NutritionCache]:
        """Cached foods whose name contains the query, alphabetically."""
        with translate_errors("search nutrition cache"):
            result = await self.session.execute(
                select(NutritionCache)
                .where(NutritionCache.food_name.ilike(f"%{query}%"))
                .order_by(NutritionCache.food_name)
                .limit(limit)
            )
            return list(result.scalars().all())

    async def get_by_fdc_id(self, fdc_id: str) -> NutritionCache | None:
        with translate_errors("load nutrition entry"):
            result = await self.session.execute(
                select(NutritionCache).where(NutritionCache.usda_fdc_id == fdc_id)
            )
            return result.scalar_one_or_none()

    async def get_by_ids(self, nutrition_ids: Iterable[str]) -> dict[str, NutritionCache]:
        ids = sorted(set(nutrition_ids))
        if not ids:
            return {}
        with translate_errors("load nutrition entries"):
            result = await self.session.execute(
                select(NutritionCache).where(NutritionCache.id.in_(ids))
            )
            return {entry.id: entry for entry in result.scalars().all()}

    async def create_entry(self, food: FoodNutrition) -> NutritionCache:
        entry = NutritionCache(
            id=str(uuid.uuid4()),
            usda_fdc_id=food.fdc_id,
            food_name=food.description,
            calories=food.calories,
            protein_g=food.protein_g,
            carbs_g=food.carbs_g,
            fiber_g=food.fiber_g,
            fat_g=food.fat_g,
        )
        with translate_errors("cache nutrition entry"):
            self.session.add(entry)
            await self.session.flush()
        return entry
