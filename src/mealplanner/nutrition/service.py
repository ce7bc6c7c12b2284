"""Nutrition lookups and recipe macro totals."""

from dataclasses import replace

from mealplanner.config import Settings, get_settings
from mealplanner.errors import NotFoundError, StoreError, ValidationError
from mealplanner.logging_config import get_logger
from mealplanner.models import NutritionCache, Recipe
from mealplanner.nutrition.calculation import RecipeNutrition, calculate_recipe_nutrition
from mealplanner.nutrition.client import FoodDataClient, FoodNutrition, StubFoodDataClient
from mealplanner.nutrition.repository import NutritionRepository
from mealplanner.repository import unit_of_work

logger = get_logger(__name__)

CACHED_DATA_TYPE = "Cached"


def cached_food(entry: NutritionCache) -> FoodNutrition:
    return FoodNutrition(
        fdc_id=entry.usda_fdc_id,
        description=entry.food_name,
        data_type=CACHED_DATA_TYPE,
        calories=entry.calories,
        protein_g=entry.protein_g,
        carbs_g=entry.carbs_g,
        fiber_g=entry.fiber_g,
        fat_g=entry.fat_g,
        nutrition_id=entry.id,
    )


class NutritionService:
    """
    Searches food nutrition data, local cache first.

    Foods fetched from the provider are written to the cache so later
    searches and recipe ingredients can use them.
    """

    def __init__(
        self,
        repo: NutritionRepository,
        client: FoodDataClient | None = None,
        settings: Settings | None = None,
    ):
        self.repo = repo
        self.settings = settings or get_settings()
        self.client = client or StubFoodDataClient(limit=self.settings.nutrition_search_limit)

    async def search(self, query: str | None) -> list[FoodNutrition]:
        """
        Search foods by name.

        Cached matches win; only when the cache has none is the provider
        asked. A cache that cannot be read or written is logged and
        bypassed, it never fails the search.

        Raises:
            ValidationError: If the query is blank.
            ExternalServiceError: If the provider fails.
        """
        query = (query or "").strip()
        if not query:
            raise ValidationError("query is required")

        try:
            cached = await self.repo.search_by_name(query, self.settings.nutrition_search_limit)
        except StoreError as e:
            logger.warning(f"Nutrition cache search failed for '{query}': {e}")
            cached = []

        if cached:
            logger.info(f"Nutrition search '{query}': {len(cached)} cached results")
            return [cached_food(entry) for entry in cached]

        foods = await self.client.search(query)
        logger.info(f"Nutrition search '{query}': {len(foods)} provider results")
        return await self._cache_foods(query, foods)

    async def _cache_foods(self, query: str, foods: list[FoodNutrition]) -> list[FoodNutrition]:
        if not foods:
            return []

        try:
            async with unit_of_work(self.repo):
                stored = []
                for food in foods:
                    entry = await self.repo.get_by_fdc_id(food.fdc_id)
                    if entry is None:
                        entry = await self.repo.create_entry(food)
                    stored.append(replace(food, nutrition_id=entry.id))
        except StoreError as e:
            logger.warning(f"Failed to cache nutrition results for '{query}': {e}")
            return foods

        return stored

    async def get_food(self, fdc_id: str) -> NutritionCache:
        """
        The cached entry for a FoodData Central id, fetched and cached on a miss.

        Raises:
            NotFoundError: If the provider has no food with that id.
            ExternalServiceError: If the provider fails.
        """
        entry = await self.repo.get_by_fdc_id(fdc_id)
        if entry is not None:
            return entry

        food = await self.client.get(fdc_id)
        if food is None:
            raise NotFoundError(f"Food {fdc_id} not found")

        async with unit_of_work(self.repo):
            entry = await self.repo.create_entry(food)

        logger.info(f"Cached nutrition entry {entry.id} for food {fdc_id}")
        return entry

    async def recipe_nutrition(self, recipe: Recipe) -> RecipeNutrition:
        """Total and per-serving macros of a recipe's linked ingredients."""
        ids = {ing.nutrition_id for ing in recipe.ingredients if ing.nutrition_id}
        entries = await self.repo.get_by_ids(ids) if ids else {}
        return calculate_recipe_nutrition(recipe, entries)
