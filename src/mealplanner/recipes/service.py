"""Recipe business logic."""

from mealplanner.config import Settings, get_settings
from mealplanner.errors import NotFoundError, ValidationError
from mealplanner.logging_config import get_logger
from mealplanner.models import Recipe
from mealplanner.recipes.repository import SORT_ORDERS, RecipeRepository
from mealplanner.recipes.schemas import RecipeInput
from mealplanner.repository import unit_of_work
from mealplanner.schemas import Department

logger = get_logger(__name__)

MAX_TITLE_LENGTH = 200
DEFAULT_SORT = "date_desc"


def validate_recipe(data: RecipeInput) -> None:
    """Raise ValidationError on the first rule a recipe payload breaks."""
    title = data.title.strip()
    if not title:
        raise ValidationError("title is required")
    if len(title) > MAX_TITLE_LENGTH:
        raise ValidationError(f"title must be at most {MAX_TITLE_LENGTH} characters")
    if data.servings <= 0:
        raise ValidationError("servings must be greater than 0")
    if not data.serving_size.strip():
        raise ValidationError("serving size is required")
    if data.prep_time_minutes is not None and data.prep_time_minutes < 0:
        raise ValidationError("prep time cannot be negative")
    if data.cook_time_minutes is not None and data.cook_time_minutes < 0:
        raise ValidationError("cook time cannot be negative")
    if not data.ingredients:
        raise ValidationError("at least one ingredient is required")
    if not data.instructions:
        raise ValidationError("at least one instruction is required")

    departments = {d.value for d in Department}
    for i, ing in enumerate(data.ingredients):
        if not ing.ingredient_name.strip():
            raise ValidationError(f"ingredient {i}: name is required")
        if ing.quantity <= 0:
            raise ValidationError(f"ingredient {i}: quantity must be greater than 0")
        if not ing.unit.strip():
            raise ValidationError(f"ingredient {i}: unit is required")
        if ing.department not in departments:
            raise ValidationError(f"ingredient {i}: invalid department '{ing.department}'")

    for i, step in enumerate(data.instructions):
        if step.step_number <= 0:
            raise ValidationError(f"instruction {i}: step number must be greater than 0")
        if not step.instruction.strip():
            raise ValidationError(f"instruction {i}: text is required")


class RecipeService:
    """Creates, searches and edits recipes. Only the creator may change a recipe."""

    def __init__(self, repo: RecipeRepository, settings: Settings | None = None):
        self.repo = repo
        self.settings = settings or get_settings()

    async def _check_nutrition_ids(self, data: RecipeInput) -> None:
        """Ingredients may only link nutrition entries that are in the cache."""
        wanted = {ing.nutrition_id for ing in data.ingredients if ing.nutrition_id}
        if not wanted:
            return

        known = await self.repo.known_nutrition_ids(wanted)
        for i, ing in enumerate(data.ingredients):
            if ing.nutrition_id and ing.nutrition_id not in known:
                raise ValidationError(f"ingredient {i}: unknown nutrition_id '{ing.nutrition_id}'")

    async def create_recipe(self, user_id: str, data: RecipeInput) -> Recipe:
        validate_recipe(data)
        await self._check_nutrition_ids(data)

        async with unit_of_work(self.repo):
            await self.repo.ensure_user(user_id)
            recipe = await self.repo.create_recipe(user_id, data)

        logger.info(f"Created recipe {recipe.id}: {recipe.title}")
        return recipe

    async def get_recipe(self, recipe_id: str) -> Recipe:
        recipe = await self.repo.get_recipe(recipe_id)
        if recipe is None or recipe.is_deleted:
            raise NotFoundError(f"Recipe {recipe_id} not found")
        return recipe

    async def list_recipes(
        self,
        search: str | None = None,
        tags: list[str] | None = None,
        sort: str | None = None,
        limit: int | None = None,
        offset: int = 0,
    ) -> tuple[list[Recipe], int, int, int]:
        """Return (recipes, total, limit, offset) for one page of search results."""
        sort = sort or DEFAULT_SORT
        if sort not in SORT_ORDERS:
            raise ValidationError(
                f"invalid sort '{sort}', expected one of: {', '.join(SORT_ORDERS)}"
            )

        limit = self.settings.clamp_limit(limit)
        offset = max(offset, 0)
        search = search.strip() if search else None
        tags = [t.strip() for t in tags or [] if t.strip()]

        recipes, total = await self.repo.list_recipes(search, tags, sort, limit, offset)
        return recipes, total, limit, offset

    async def _get_owned(self, user_id: str, recipe_id: str) -> Recipe:
        recipe = await self.get_recipe(recipe_id)
        if recipe.created_by_user_id != user_id:
            raise NotFoundError(f"Recipe {recipe_id} not found")
        return recipe

    async def update_recipe(self, user_id: str, recipe_id: str, data: RecipeInput) -> Recipe:
        validate_recipe(data)
        await self._check_nutrition_ids(data)
        recipe = await self._get_owned(user_id, recipe_id)

        async with unit_of_work(self.repo):
            recipe = await self.repo.replace_recipe(recipe, data)

        logger.info(f"Updated recipe {recipe_id}")
        return recipe

    async def delete_recipe(self, user_id: str, recipe_id: str) -> None:
        recipe = await self._get_owned(user_id, recipe_id)
        await self.repo.soft_delete(recipe)
        await self.repo.commit()
        logger.info(f"Deleted recipe {recipe_id}")
