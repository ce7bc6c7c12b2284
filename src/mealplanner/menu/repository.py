"""Candidate recipe lookup for recommendations."""

from sqlalchemy import func, select
from sqlalchemy.orm import selectinload

from mealplanner.models import Recipe, RecipeIngredient
from mealplanner.normalize import normalize_text
from mealplanner.repository import SqlRepository, translate_errors


class MenuRepository(SqlRepository):
    """Repository for recommendation candidates."""

    async def find_recipes_by_ingredients(self, ingredients: list[str]) -> list[Recipe]:
        """
        Find live recipes with at least one ingredient named like one of the inputs.

        Names compare after trimming and lower-casing only, so a plural input
        does not find a singular ingredient here even though scoring would
        match them. Newest recipes come first.
        """
        if not ingredients:
            return []

        names = sorted({normalize_text(name) for name in ingredients})
        matching_ids = (
            select(RecipeIngredient.recipe_id)
            .where(func.lower(RecipeIngredient.ingredient_name).in_(names))
            .distinct()
        )

        with translate_errors("find recipes by ingredients"):
            result = await self.session.execute(
                select(Recipe)
                .where(Recipe.deleted_at.is_(None), Recipe.id.in_(matching_ids))
                .options(
                    selectinload(Recipe.ingredients),
                    selectinload(Recipe.instructions),
                    selectinload(Recipe.tags),
                )
                .order_by(Recipe.created_at.desc(), Recipe.id)
            )
            return list(result.scalars().all())
