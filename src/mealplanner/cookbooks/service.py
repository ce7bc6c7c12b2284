"""Cookbook business logic."""

from mealplanner.config import Settings, get_settings
from mealplanner.cookbooks.repository import CookbookRepository
from mealplanner.errors import NotFoundError, ValidationError
from mealplanner.logging_config import get_logger
from mealplanner.models import Cookbook, Recipe
from mealplanner.repository import unit_of_work

logger = get_logger(__name__)

MAX_NAME_LENGTH = 200


def validate_name(name: str) -> str:
    """Return the trimmed cookbook name, or raise ValidationError."""
    name = (name or "").strip()
    if not name:
        raise ValidationError("name is required")
    if len(name) > MAX_NAME_LENGTH:
        raise ValidationError(f"name must be {MAX_NAME_LENGTH} characters or less")
    return name


def cookbook_recipes(cookbook: Cookbook) -> list[Recipe]:
    """Live recipes of a cookbook, most recently added first."""
    entries = sorted(cookbook.entries, key=lambda e: e.added_at, reverse=True)
    return [e.recipe for e in entries if e.recipe is not None and not e.recipe.is_deleted]


class CookbookService:
    """Manages a user's cookbooks. Every operation is restricted to the owner."""

    def __init__(self, repo: CookbookRepository, settings: Settings | None = None):
        self.repo = repo
        self.settings = settings or get_settings()

    async def create_cookbook(
        self, user_id: str, name: str, description: str | None = None
    ) -> Cookbook:
        name = validate_name(name)
        async with unit_of_work(self.repo):
            await self.repo.ensure_user(user_id)
            cookbook = await self.repo.create_cookbook(user_id, name, description)
        logger.info(f"Created cookbook {cookbook.id}: {name}")
        return cookbook

    async def get_cookbook(self, user_id: str, cookbook_id: str) -> Cookbook:
        cookbook = await self.repo.get_cookbook(cookbook_id)
        if cookbook is None or cookbook.created_by_user_id != user_id:
            raise NotFoundError(f"Cookbook {cookbook_id} not found")
        return cookbook

    async def list_cookbooks(
        self, user_id: str, limit: int | None = None, offset: int = 0
    ) -> tuple[list[tuple[Cookbook, int]], int, int, int]:
        """Return ((cookbook, recipe_count) pairs, total, limit, offset)."""
        limit = self.settings.clamp_limit(limit)
        offset = max(offset, 0)
        cookbooks, total = await self.repo.list_cookbooks(user_id, limit, offset)
        return cookbooks, total, limit, offset

    async def update_cookbook(
        self, user_id: str, cookbook_id: str, name: str, description: str | None = None
    ) -> Cookbook:
        name = validate_name(name)
        cookbook = await self.get_cookbook(user_id, cookbook_id)
        cookbook = await self.repo.update_cookbook(cookbook, name, description)
        await self.repo.commit()
        return cookbook

    async def delete_cookbook(self, user_id: str, cookbook_id: str) -> None:
        cookbook = await self.get_cookbook(user_id, cookbook_id)
        await self.repo.delete_cookbook(cookbook)
        await self.repo.commit()
        logger.info(f"Deleted cookbook {cookbook_id}")

    async def add_recipe(self, user_id: str, cookbook_id: str, recipe_id: str) -> Cookbook:
        cookbook = await self.get_cookbook(user_id, cookbook_id)
        recipe = await self.repo.get_live_recipe(recipe_id)
        if recipe is None:
            raise NotFoundError(f"Recipe {recipe_id} not found")

        await self.repo.add_recipe(cookbook, recipe)
        await self.repo.commit()
        return cookbook

    async def remove_recipe(self, user_id: str, cookbook_id: str, recipe_id: str) -> None:
        cookbook = await self.get_cookbook(user_id, cookbook_id)
        if not await self.repo.remove_recipe(cookbook, recipe_id):
            raise NotFoundError(f"Recipe {recipe_id} is not in cookbook {cookbook_id}")
        await self.repo.commit()
