"""API routes for food nutrition data."""

from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from mealplanner.dependencies import get_nutrition_service
from mealplanner.logging_config import get_logger
from mealplanner.models import NutritionCache
from mealplanner.nutrition import FoodNutrition, NutritionService

logger = get_logger(__name__)

router = APIRouter(prefix="/api/v1/nutrition", tags=["nutrition"])

Service = Annotated[NutritionService, Depends(get_nutrition_service)]


# =============================================================================
# Response Schemas
# =============================================================================


class FoodNutritionResponse(BaseModel):
    """Macros per 100 g of one food."""

    fdc_id: str
    description: str
    data_type: str
    nutrition_id: str | None = None
    calories: float | None = None
    protein_g: float | None = None
    carbs_g: float | None = None
    fiber_g: float | None = None
    fat_g: float | None = None


class SearchMeta(BaseModel):
    total: int


class NutritionSearchResponse(BaseModel):
    data: list[FoodNutritionResponse]
    meta: SearchMeta


class NutritionEntryResponse(BaseModel):
    """A cached nutrition entry that recipe ingredients can link to."""

    id: str
    usda_fdc_id: str
    food_name: str
    calories: float | None = None
    protein_g: float | None = None
    carbs_g: float | None = None
    fiber_g: float | None = None
    fat_g: float | None = None
    cached_at: datetime


def food_response(food: FoodNutrition) -> FoodNutritionResponse:
    return FoodNutritionResponse(
        fdc_id=food.fdc_id,
        description=food.description,
        data_type=food.data_type,
        nutrition_id=food.nutrition_id,
        calories=food.calories,
        protein_g=food.protein_g,
        carbs_g=food.carbs_g,
        fiber_g=food.fiber_g,
        fat_g=food.fat_g,
    )


def entry_response(entry: NutritionCache) -> NutritionEntryResponse:
    return NutritionEntryResponse(
        id=entry.id,
        usda_fdc_id=entry.usda_fdc_id,
        food_name=entry.food_name,
        calories=entry.calories,
        protein_g=entry.protein_g,
        carbs_g=entry.carbs_g,
        fiber_g=entry.fiber_g,
        fat_g=entry.fat_g,
        cached_at=entry.cached_at,
    )


# =============================================================================
# Endpoints
# =============================================================================


@router.get("/search", response_model=NutritionSearchResponse)
async def search_nutrition(
    service: Service,
    query: Annotated[str | None, Query(description="Food name to search for")] = None,
) -> NutritionSearchResponse:
    """
    Search foods by name.

    Cached foods are returned when any match; otherwise FoodData Central is
    searched and its results are cached.
    """
    foods = await service.search(query)
    return NutritionSearchResponse(
        data=[food_response(f) for f in foods],
        meta=SearchMeta(total=len(foods)),
    )


@router.get("/foods/{fdc_id}", response_model=NutritionEntryResponse)
async def get_food(fdc_id: str, service: Service) -> NutritionEntryResponse:
    """Get the cached entry for a FoodData Central id, caching it on first use."""
    return entry_response(await service.get_food(fdc_id))
