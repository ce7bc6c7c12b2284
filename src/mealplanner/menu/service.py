"""Recipe recommendations from ingredients on hand."""

from mealplanner.errors import ValidationError
from mealplanner.logging_config import get_logger
from mealplanner.menu.repository import MenuRepository
from mealplanner.menu.scoring import RecipeRecommendation, rank_recommendations

logger = get_logger(__name__)


class RecommendationService:
    """Recommends recipes ranked by how many of their ingredients are available."""

    def __init__(self, repo: MenuRepository):
        self.repo = repo

    async def recommend(self, ingredients: list[str]) -> list[RecipeRecommendation]:
        """
        Rank recipes that use any of the given ingredients.

        Raises:
            ValidationError: If no ingredients are given or any name is blank.
        """
        if not ingredients:
            raise ValidationError("at least one ingredient is required")
        if any(not name.strip() for name in ingredients):
            raise ValidationError("ingredient names cannot be empty")

        candidates = await self.repo.find_recipes_by_ingredients(ingredients)
        recommendations = rank_recommendations(candidates, ingredients)

        logger.info(
            f"Recommended {len(recommendations)} recipes for {len(ingredients)} ingredients"
        )
        return recommendations
