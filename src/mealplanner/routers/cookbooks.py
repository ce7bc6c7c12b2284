"""API routes for cookbooks."""

from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Response, status
from pydantic import BaseModel, Field

from mealplanner.cookbooks import CookbookService, cookbook_recipes
from mealplanner.dependencies import CurrentUser, get_cookbook_service
from mealplanner.logging_config import get_logger
from mealplanner.models import Cookbook
from mealplanner.schemas import PaginationMeta

logger = get_logger(__name__)

router = APIRouter(prefix="/api/v1/cookbooks", tags=["cookbooks"])

Service = Annotated[CookbookService, Depends(get_cookbook_service)]


class CookbookRequest(BaseModel):
    """Create or rename a cookbook."""

    name: str
    description: str | None = None


class AddRecipeRequest(BaseModel):
    recipe_id: str


class CookbookRecipeSummary(BaseModel):
    """Recipe as listed inside a cookbook."""

    id: str
    title: str
    image_url: str | None = None
    servings: int
    total_time_minutes: int


class CookbookResponse(BaseModel):
    """Cookbook with its recipe count and, on detail reads, its recipes."""

    id: str
    name: str
    description: str | None = None
    recipe_count: int
    recipes: list[CookbookRecipeSummary] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime


class CookbookListResponse(BaseModel):
    data: list[CookbookResponse]
    meta: PaginationMeta


def cookbook_response(
    cookbook: Cookbook, recipe_count: int | None = None, include_recipes: bool = True
) -> CookbookResponse:
    recipes = (
        [
            CookbookRecipeSummary(
                id=r.id,
                title=r.title,
                image_url=r.image_url,
                servings=r.servings,
                total_time_minutes=r.total_time_minutes,
            )
            for r in cookbook_recipes(cookbook)
        ]
        if include_recipes
        else []
    )
    return CookbookResponse(
        id=cookbook.id,
        name=cookbook.name,
        description=cookbook.description,
        recipe_count=recipe_count if recipe_count is not None else len(recipes),
        recipes=recipes,
        created_at=cookbook.created_at,
        updated_at=cookbook.updated_at,
    )


@router.post("/", response_model=CookbookResponse, status_code=status.HTTP_201_CREATED)
async def create_cookbook(
    request: CookbookRequest, user_id: CurrentUser, service: Service
) -> CookbookResponse:
    """Create an empty cookbook."""
    cookbook = await service.create_cookbook(user_id, request.name, request.description)
    return cookbook_response(cookbook)


@router.get("/", response_model=CookbookListResponse)
async def list_cookbooks(
    user_id: CurrentUser,
    service: Service,
    limit: Annotated[int | None, Query(description="Max cookbooks to return")] = None,
    offset: Annotated[int, Query(description="Offset for pagination")] = 0,
) -> CookbookListResponse:
    """List the caller's cookbooks with recipe counts, newest first."""
    rows, total, limit, offset = await service.list_cookbooks(user_id, limit, offset)
    return CookbookListResponse(
        data=[cookbook_response(c, count, include_recipes=False) for c, count in rows],
        meta=PaginationMeta(total=total, limit=limit, offset=offset),
    )


@router.get("/{cookbook_id}", response_model=CookbookResponse)
async def get_cookbook(cookbook_id: str, user_id: CurrentUser, service: Service) -> CookbookResponse:
    """Get a cookbook with its recipes, most recently added first."""
    return cookbook_response(await service.get_cookbook(user_id, cookbook_id))


@router.put("/{cookbook_id}", response_model=CookbookResponse)
async def update_cookbook(
    cookbook_id: str, request: CookbookRequest, user_id: CurrentUser, service: Service
) -> CookbookResponse:
    """Rename a cookbook or change its description."""
    cookbook = await service.update_cookbook(
        user_id, cookbook_id, request.name, request.description
    )
    return cookbook_response(cookbook)


@router.delete("/{cookbook_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_cookbook(cookbook_id: str, user_id: CurrentUser, service: Service) -> Response:
    """Delete a cookbook. Its recipes are not touched."""
    await service.delete_cookbook(user_id, cookbook_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{cookbook_id}/recipes", response_model=CookbookResponse)
async def add_recipe(
    cookbook_id: str, request: AddRecipeRequest, user_id: CurrentUser, service: Service
) -> CookbookResponse:
    """File a recipe in a cookbook. Adding it again changes nothing."""
    cookbook = await service.add_recipe(user_id, cookbook_id, request.recipe_id)
    return cookbook_response(cookbook)


@router.delete("/{cookbook_id}/recipes/{recipe_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_recipe(
    cookbook_id: str, recipe_id: str, user_id: CurrentUser, service: Service
) -> Response:
    """Take a recipe out of a cookbook."""
    await service.remove_recipe(user_id, cookbook_id, recipe_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
