"""API routes for recipe recommendations."""

from typing import Annotated

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from mealplanner.dependencies import get_recommendation_service
from mealplanner.logging_config import get_logger
from mealplanner.menu import RecommendationService
from mealplanner.routers.recipes import RecipeResponse, recipe_response

logger = get_logger(__name__)

router = APIRouter(prefix="/api/v1/menu", tags=["menu"])


class RecommendRequest(BaseModel):
    """Ingredients the user has on hand."""

    ingredients: list[str] = Field(default_factory=list)


class RecommendationResponse(BaseModel):
    """A recipe with how much of it the user can already make."""

    recipe: RecipeResponse
    match_score: float = Field(description="Percentage of ingredients available, 0-100")
    matched_ingredients: list[str]
    missing_ingredients: list[str]


class RecommendMeta(BaseModel):
    provided_ingredients: int
    total_recipes_found: int


class RecommendListResponse(BaseModel):
    """Ranked recommendations, best match first."""

    data: list[RecommendationResponse]
    meta: RecommendMeta


@router.post("/recommend", response_model=RecommendListResponse)
async def recommend_recipes(
    request: RecommendRequest,
    service: Annotated[RecommendationService, Depends(get_recommendation_service)],
) -> RecommendListResponse:
    """
    Recommend recipes that use any of the given ingredients.

    Recipes are ranked by the percentage of their ingredients found in the
    request, highest first.
    """
    recommendations = await service.recommend(request.ingredients)

    return RecommendListResponse(
        data=[
            RecommendationResponse(
                recipe=recipe_response(r.recipe),
                match_score=r.match_score,
                matched_ingredients=r.matched_ingredients,
                missing_ingredients=r.missing_ingredients,
            )
            for r in recommendations
        ],
        meta=RecommendMeta(
            provided_ingredients=len(request.ingredients),
            total_recipes_found=len(recommendations),
        ),
    )
