"""API routes for recipes."""

from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Response, status
from pydantic import BaseModel, Field

from mealplanner.dependencies import CurrentUser, get_nutrition_service, get_recipe_service
from mealplanner.logging_config import get_logger
from mealplanner.models import Recipe
from mealplanner.nutrition import NutritionService, RecipeNutrition
from mealplanner.recipes import RecipeInput, RecipeService
from mealplanner.schemas import Department, PaginationMeta

logger = get_logger(__name__)

router = APIRouter(prefix="/api/v1/recipes", tags=["recipes"])

Service = Annotated[RecipeService, Depends(get_recipe_service)]
Nutrition = Annotated[NutritionService, Depends(get_nutrition_service)]


# =============================================================================
# Response Schemas
# =============================================================================


class IngredientResponse(BaseModel):
    """One ingredient line of a recipe."""

    ingredient_name: str
    quantity: float | None = None
    unit: str | None = None
    department: Department
    order_index: int
    nutrition_id: str | None = None


class InstructionResponse(BaseModel):
    """One numbered step."""

    step_number: int
    instruction: str


class RecipeResponse(BaseModel):
    """Full recipe."""

    id: str
    created_by_user_id: str
    title: str
    image_url: str | None = None
    servings: int
    serving_size: str
    prep_time_minutes: int | None = None
    cook_time_minutes: int | None = None
    total_time_minutes: int
    storage_notes: str | None = None
    source: str | None = None
    notes: str | None = None
    tags: list[str] = Field(default_factory=list)
    ingredients: list[IngredientResponse] = Field(default_factory=list)
    instructions: list[InstructionResponse] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime


class RecipeNutritionResponse(BaseModel):
    """Macros of a recipe's linked ingredients, whole and per serving."""

    recipe_id: str
    servings: int
    total_calories: float
    total_protein_g: float
    total_carbs_g: float
    total_fiber_g: float
    total_fat_g: float
    per_serving_calories: float
    per_serving_protein_g: float
    per_serving_carbs_g: float
    per_serving_fiber_g: float
    per_serving_fat_g: float


class RecipeListResponse(BaseModel):
    """Paginated list of recipes."""

    data: list[RecipeResponse]
    meta: PaginationMeta


def recipe_response(recipe: Recipe) -> RecipeResponse:
    return RecipeResponse(
        id=recipe.id,
        created_by_user_id=recipe.created_by_user_id,
        title=recipe.title,
        image_url=recipe.image_url,
        servings=recipe.servings,
        serving_size=recipe.serving_size,
        prep_time_minutes=recipe.prep_time_minutes,
        cook_time_minutes=recipe.cook_time_minutes,
        total_time_minutes=recipe.total_time_minutes,
        storage_notes=recipe.storage_notes,
        source=recipe.source,
        notes=recipe.notes,
        tags=[tag.tag_name for tag in recipe.tags],
        ingredients=[
            IngredientResponse(
                ingredient_name=ing.ingredient_name,
                quantity=float(ing.quantity) if ing.quantity is not None else None,
                unit=ing.unit,
                department=Department(ing.department),
                order_index=ing.order_index,
                nutrition_id=ing.nutrition_id,
            )
            for ing in recipe.ingredients
        ],
        instructions=[
            InstructionResponse(step_number=step.step_number, instruction=step.instruction)
            for step in recipe.instructions
        ],
        created_at=recipe.created_at,
        updated_at=recipe.updated_at,
    )


def recipe_nutrition_response(recipe: Recipe, nutrition: RecipeNutrition) -> RecipeNutritionResponse:
    total, per_serving = nutrition.total, nutrition.per_serving
    return RecipeNutritionResponse(
        recipe_id=recipe.id,
        servings=recipe.servings,
        total_calories=total.calories,
        total_protein_g=total.protein_g,
        total_carbs_g=total.carbs_g,
        total_fiber_g=total.fiber_g,
        total_fat_g=total.fat_g,
        per_serving_calories=per_serving.calories,
        per_serving_protein_g=per_serving.protein_g,
        per_serving_carbs_g=per_serving.carbs_g,
        per_serving_fiber_g=per_serving.fiber_g,
        per_serving_fat_g=per_serving.fat_g,
    )


# =============================================================================
# Endpoints
# =============================================================================


@router.post("/", response_model=RecipeResponse, status_code=status.HTTP_201_CREATED)
async def create_recipe(
    request: RecipeInput,
    user_id: CurrentUser,
    service: Service,
) -> RecipeResponse:
    """Create a recipe owned by the caller."""
    return recipe_response(await service.create_recipe(user_id, request))


@router.get("/", response_model=RecipeListResponse)
async def list_recipes(
    service: Service,
    search: Annotated[str | None, Query(description="Match title or ingredient name")] = None,
    tags: Annotated[list[str] | None, Query(description="Keep recipes with any of these tags")] = None,
    sort: Annotated[
        str | None, Query(description="title_asc, title_desc, date_asc or date_desc")
    ] = None,
    limit: Annotated[int | None, Query(description="Max recipes to return")] = None,
    offset: Annotated[int, Query(description="Offset for pagination")] = 0,
) -> RecipeListResponse:
    """Search recipes, newest first unless another sort is requested."""
    logger.info(f"Listing recipes: search={search}, tags={tags}, sort={sort}")

    recipes, total, limit, offset = await service.list_recipes(
        search=search, tags=tags, sort=sort, limit=limit, offset=offset
    )
    return RecipeListResponse(
        data=[recipe_response(r) for r in recipes],
        meta=PaginationMeta(total=total, limit=limit, offset=offset),
    )


@router.get("/{recipe_id}", response_model=RecipeResponse)
async def get_recipe(recipe_id: str, service: Service) -> RecipeResponse:
    """Get a recipe with its ingredients, instructions and tags."""
    return recipe_response(await service.get_recipe(recipe_id))


@router.put("/{recipe_id}", response_model=RecipeResponse)
async def update_recipe(
    recipe_id: str,
    request: RecipeInput,
    user_id: CurrentUser,
    service: Service,
) -> RecipeResponse:
    """Replace a recipe's content. Only its creator may do this."""
    return recipe_response(await service.update_recipe(user_id, recipe_id, request))


@router.delete("/{recipe_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_recipe(
    recipe_id: str,
    user_id: CurrentUser,
    service: Service,
) -> Response:
    """Soft-delete a recipe. It stays in past grocery lists but leaves searches and plans."""
    await service.delete_recipe(user_id, recipe_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{recipe_id}/nutrition", response_model=RecipeNutritionResponse)
async def get_recipe_nutrition(
    recipe_id: str,
    service: Service,
    nutrition: Nutrition,
) -> RecipeNutritionResponse:
    """
    Total and per-serving macros of a recipe.

    Only ingredients linked to a nutrition entry count; their quantity is
    read as grams.
    """
    recipe = await service.get_recipe(recipe_id)
    return recipe_nutrition_response(recipe, await nutrition.recipe_nutrition(recipe))
