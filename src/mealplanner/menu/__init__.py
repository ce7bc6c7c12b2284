"""Recipe recommendations."""

from mealplanner.menu.repository import MenuRepository
from mealplanner.menu.scoring import RecipeRecommendation, rank_recommendations, score_recipe
from mealplanner.menu.service import RecommendationService

__all__ = [
    "MenuRepository",
    "RecipeRecommendation",
    "RecommendationService",
    "rank_recommendations",
    "score_recipe",
]
