"""Persistence for cookbooks."""

import uuid
from datetime import datetime

from sqlalchemy import func, select
from sqlalchemy.orm import selectinload

from mealplanner.models import Cookbook, CookbookRecipe, Recipe
from mealplanner.repository import SqlRepository, translate_errors


class CookbookRepository(SqlRepository):
    """Repository for cookbooks and the recipes filed in them."""

    async def create_cookbook(
        self, user_id: str, name: str, description: str | None
    ) -> Cookbook:
        cookbook = Cookbook(
            id=str(uuid.uuid4()),
            created_by_user_id=user_id,
            name=name,
            description=description,
            entries=[],
        )
        with translate_errors("create cookbook"):
            self.session.add(cookbook)
            await self.session.flush()
        return cookbook

    async def get_cookbook(self, cookbook_id: str) -> Cookbook | None:
        with translate_errors("load cookbook"):
            result = await self.session.execute(
                select(Cookbook)
                .where(Cookbook.id == cookbook_id)
                .options(selectinload(Cookbook.entries).selectinload(CookbookRecipe.recipe))
            )
            return result.scalar_one_or_none()

    async def list_cookbooks(
        self, user_id: str, limit: int, offset: int
    ) -> tuple[list[tuple[Cookbook, int]], int]:
        """One page of a user's cookbooks, newest first, each with its live recipe count."""
        recipe_count = (
            select(func.count(CookbookRecipe.id))
            .join(Recipe, CookbookRecipe.recipe_id == Recipe.id)
            .where(CookbookRecipe.cookbook_id == Cookbook.id, Recipe.deleted_at.is_(None))
            .correlate(Cookbook)
            .scalar_subquery()
        )

        with translate_errors("list cookbooks"):
            total = await self.session.scalar(
                select(func.count())
                .select_from(Cookbook)
                .where(Cookbook.created_by_user_id == user_id)
            )
            result = await self.session.execute(
                select(Cookbook, recipe_count)
                .where(Cookbook.created_by_user_id == user_id)
                .order_by(Cookbook.created_at.desc(), Cookbook.id)
                .offset(offset)
                .limit(limit)
            )
            return [(cookbook, count or 0) for cookbook, count in result.all()], total or 0

    async def update_cookbook(
        self, cookbook: Cookbook, name: str, description: str | None
    ) -> Cookbook:
        with translate_errors("update cookbook"):
            cookbook.name = name
            cookbook.description = description
            cookbook.updated_at = datetime.utcnow()
            await self.session.flush()
        return cookbook

    async def delete_cookbook(self, cookbook: Cookbook) -> None:
        with translate_errors("delete cookbook"):
            await self.session.delete(cookbook)
            await self.session.flush()

    async def get_live_recipe(self, recipe_id: str) -> Recipe | None:
        with translate_errors("load recipe"):
            result = await self.session.execute(
                select(Recipe).where(Recipe.id == recipe_id, Recipe.deleted_at.is_(None))
            )
            return result.scalar_one_or_none()

    async def add_recipe(self, cookbook: Cookbook, recipe: Recipe) -> None:
        """File a recipe in a cookbook. Filing it twice is a no-op."""
        if any(entry.recipe_id == recipe.id for entry in cookbook.entries):
            return
        with translate_errors("add recipe to cookbook"):
            cookbook.entries.append(CookbookRecipe(recipe_id=recipe.id, recipe=recipe))
            await self.session.flush()

    async def remove_recipe(self, cookbook: Cookbook, recipe_id: str) -> bool:
        """Take a recipe out of a cookbook. Returns False when it was not filed there."""
        entry = next((e for e in cookbook.entries if e.recipe_id == recipe_id), None)
        if entry is None:
            return False
        with translate_errors("remove recipe from cookbook"):
            cookbook.entries.remove(entry)
            await self.session.flush()
        return True
