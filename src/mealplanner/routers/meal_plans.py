"""API routes for daily meal plans."""

from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field

from mealplanner.dependencies import get_meal_plan_service
from mealplanner.logging_config import get_logger
from mealplanner.models import MealPlan
from mealplanner.plan import MealPlanService, MealSlot
from mealplanner.schemas import MealType

logger = get_logger(__name__)

router = APIRouter(prefix="/api/v1/meal-plans", tags=["meal-plans"])

Service = Annotated[MealPlanService, Depends(get_meal_plan_service)]


# =============================================================================
# Request/Response Schemas
# =============================================================================


class MealSlotRequest(BaseModel):
    """One meal slot: a recipe with servings, or eating out."""

    meal_type: MealType
    recipe_id: str | None = None
    servings: int | None = None
    out_of_kitchen: bool = False


class MealPlanUpdateRequest(BaseModel):
    """Replace every meal slot of a date."""

    meals: list[MealSlotRequest] = Field(default_factory=list)


class RecipeInPlan(BaseModel):
    """Recipe summary as it appears in a meal slot."""

    id: str
    title: str
    image_url: str | None = None
    servings: int
    total_time_minutes: int


class MealSlotResponse(BaseModel):
    """A planned meal slot."""

    meal_type: MealType
    recipe_id: str | None = None
    recipe: RecipeInPlan | None = None
    servings: int | None = None
    out_of_kitchen: bool
    order_index: int


class MealPlanResponse(BaseModel):
    """The meals planned for one date. ``id`` is null when nothing was saved yet."""

    id: str | None = None
    plan_date: date
    meals: list[MealSlotResponse]


class MealPlanDetailResponse(BaseModel):
    data: MealPlanResponse


class MealPlanRangeMeta(BaseModel):
    start_date: date
    end_date: date


class MealPlanListResponse(BaseModel):
    """One plan per date in the requested range."""

    data: list[MealPlanResponse]
    meta: MealPlanRangeMeta


def meal_plan_response(plan: MealPlan) -> MealPlanResponse:
    meals = []
    for meal in plan.meals:
        recipe = meal.recipe
        meals.append(
            MealSlotResponse(
                meal_type=MealType(meal.meal_type),
                recipe_id=meal.recipe_id,
                recipe=RecipeInPlan(
                    id=recipe.id,
                    title=recipe.title,
                    image_url=recipe.image_url,
                    servings=recipe.servings,
                    total_time_minutes=recipe.total_time_minutes,
                )
                if recipe is not None
                else None,
                servings=meal.servings,
                out_of_kitchen=meal.out_of_kitchen,
                order_index=meal.order_index,
            )
        )
    return MealPlanResponse(id=plan.id, plan_date=plan.plan_date, meals=meals)


# =============================================================================
# Endpoints
# =============================================================================


@router.get("/", response_model=MealPlanListResponse)
async def get_meal_plans(
    start_date: Annotated[date, Query(description="First date, YYYY-MM-DD")],
    end_date: Annotated[date, Query(description="Last date, YYYY-MM-DD (inclusive)")],
    service: Service,
) -> MealPlanListResponse:
    """
    Get the meal plans for a date range.

    Every date in the range is present; dates without a saved plan come back
    with no meals.
    """
    plans = await service.get_plans(start_date, end_date)
    return MealPlanListResponse(
        data=[meal_plan_response(p) for p in plans],
        meta=MealPlanRangeMeta(start_date=start_date, end_date=end_date),
    )


@router.get("/date", response_model=MealPlanDetailResponse)
async def get_meal_plan(
    plan_date: Annotated[date, Query(alias="date", description="YYYY-MM-DD")],
    service: Service,
) -> MealPlanDetailResponse:
    """Get the meal plan for one date."""
    return MealPlanDetailResponse(data=meal_plan_response(await service.get_plan(plan_date)))


@router.put("/date", response_model=MealPlanDetailResponse)
async def update_meal_plan(
    plan_date: Annotated[date, Query(alias="date", description="YYYY-MM-DD")],
    request: MealPlanUpdateRequest,
    service: Service,
) -> MealPlanDetailResponse:
    """Replace all meals planned for one date. An empty list clears the day."""
    slots = [
        MealSlot(
            meal_type=meal.meal_type.value,
            recipe_id=meal.recipe_id,
            servings=meal.servings,
            out_of_kitchen=meal.out_of_kitchen,
        )
        for meal in request.meals
    ]
    plan = await service.update_plan(plan_date, slots)
    return MealPlanDetailResponse(data=meal_plan_response(plan))
