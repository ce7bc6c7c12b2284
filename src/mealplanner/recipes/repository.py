"""Persistence for recipes."""

import uuid
from datetime import datetime

from sqlalchemy import func, or_, select
from sqlalchemy.orm import selectinload

from mealplanner.models import (
    NutritionCache,
    Recipe,
    RecipeIngredient,
    RecipeInstruction,
    RecipeTag,
    stored_quantity,
)
from mealplanner.recipes.schemas import RecipeInput
from mealplanner.repository import SqlRepository, translate_errors

SORT_ORDERS = {
    "title_asc": (Recipe.title.asc(), Recipe.id),
    "title_desc": (Recipe.title.desc(), Recipe.id),
    "date_asc": (Recipe.created_at.asc(), Recipe.id),
    "date_desc": (Recipe.created_at.desc(), Recipe.id),
}

_RECIPE_LOAD = (
    selectinload(Recipe.ingredients),
    selectinload(Recipe.instructions),
    selectinload(Recipe.tags),
)


def clean_tags(tags: list[str]) -> list[str]:
    """Trimmed, non-blank tags with duplicates removed, first spelling kept."""
    seen: dict[str, None] = {}
    for tag in tags:
        tag = tag.strip()
        if tag:
            seen.setdefault(tag, None)
    return list(seen)


def _apply(recipe: Recipe, data: RecipeInput) -> None:
    """Copy a payload onto a recipe, replacing all child rows."""
    recipe.title = data.title.strip()
    recipe.image_url = data.image_url
    recipe.servings = data.servings
    recipe.serving_size = data.serving_size.strip()
    recipe.prep_time_minutes = data.prep_time_minutes
    recipe.cook_time_minutes = data.cook_time_minutes
    recipe.total_time_minutes = (data.prep_time_minutes or 0) + (data.cook_time_minutes or 0)
    recipe.storage_notes = data.storage_notes
    recipe.source = data.source
    recipe.notes = data.notes

    recipe.ingredients = [
        RecipeIngredient(
            nutrition_id=ing.nutrition_id,
            ingredient_name=ing.ingredient_name.strip(),
            quantity=stored_quantity(ing.quantity),
            unit=ing.unit.strip(),
            department=ing.department,
            order_index=index,
        )
        for index, ing in enumerate(data.ingredients)
    ]
    recipe.instructions = [
        RecipeInstruction(step_number=step.step_number, instruction=step.instruction.strip())
        for step in data.instructions
    ]
    recipe.tags = [RecipeTag(tag_name=tag) for tag in clean_tags(data.tags)]


class RecipeRepository(SqlRepository):
    """Repository for recipes and their ingredients, instructions and tags."""

    async def create_recipe(self, user_id: str, data: RecipeInput) -> Recipe:
        recipe = Recipe(
            id=str(uuid.uuid4()),
            created_by_user_id=user_id,
            ingredients=[],
            instructions=[],
            tags=[],
        )
        _apply(recipe, data)

        with translate_errors("create recipe"):
            self.session.add(recipe)
            await self.session.flush()
        return recipe

    async def get_recipe(self, recipe_id: str) -> Recipe | None:
        """Load a recipe with its children, deleted or not."""
        with translate_errors("load recipe"):
            result = await self.session.execute(
                select(Recipe).where(Recipe.id == recipe_id).options(*_RECIPE_LOAD)
            )
            return result.scalar_one_or_none()

    async def list_recipes(
        self,
        search: str | None,
        tags: list[str],
        sort: str,
        limit: int,
        offset: int,
    ) -> tuple[list[Recipe], int]:
        """
        One page of live recipes and the total matching count.

        ``search`` matches the title or any ingredient name, case-insensitively.
        ``tags`` keeps recipes carrying at least one of the given tags.
        """
        conditions = [Recipe.deleted_at.is_(None)]
        if search:
            pattern = f"%{search.strip()}%"
            conditions.append(
                or_(
                    Recipe.title.ilike(pattern),
                    Recipe.id.in_(
                        select(RecipeIngredient.recipe_id).where(
                            RecipeIngredient.ingredient_name.ilike(pattern)
                        )
                    ),
                )
            )
        if tags:
            conditions.append(
                Recipe.id.in_(select(RecipeTag.recipe_id).where(RecipeTag.tag_name.in_(tags)))
            )

        with translate_errors("list recipes"):
            total = await self.session.scalar(
                select(func.count()).select_from(Recipe).where(*conditions)
            )
            result = await self.session.execute(
                select(Recipe)
                .where(*conditions)
                .options(*_RECIPE_LOAD)
                .order_by(*SORT_ORDERS[sort])
                .offset(offset)
                .limit(limit)
            )
            return list(result.scalars().all()), total or 0

    async def replace_recipe(self, recipe: Recipe, data: RecipeInput) -> Recipe:
        with translate_errors("update recipe"):
            _apply(recipe, data)
            recipe.updated_at = datetime.utcnow()
            await self.session.flush()
        return recipe

    async def known_nutrition_ids(self, nutrition_ids: set[str]) -> set[str]:
        """Return the subset of ids that name cached nutrition entries."""
        if not nutrition_ids:
            return set()
        with translate_errors("look up nutrition entries"):
            result = await self.session.execute(
                select(NutritionCache.id).where(NutritionCache.id.in_(sorted(nutrition_ids)))
            )
            return set(result.scalars().all())

    async def soft_delete(self, recipe: Recipe) -> None:
        with translate_errors("delete recipe"):
            recipe.deleted_at = datetime.utcnow()
            await self.session.flush()
