"""API routes for grocery lists."""

from datetime import date, datetime
from decimal import Decimal
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Response, status
from pydantic import BaseModel, Field

from mealplanner.dependencies import CurrentUser, get_grocery_list_service
from mealplanner.grocery import GroceryListService, group_by_department
from mealplanner.grocery.service import sorted_items
from mealplanner.logging_config import get_logger
from mealplanner.models import GroceryList, GroceryListItem
from mealplanner.schemas import Department, DepartmentInfo, ItemStatus, PaginationMeta

logger = get_logger(__name__)

router = APIRouter(prefix="/api/v1/grocery-lists", tags=["grocery-lists"])

Service = Annotated[GroceryListService, Depends(get_grocery_list_service)]


# =============================================================================
# Request/Response Schemas
# =============================================================================


class GroceryListCreateRequest(BaseModel):
    """Generate a grocery list from the meals planned in a date range."""

    start_date: date
    end_date: date


class ManualItemRequest(BaseModel):
    """Add an item by hand."""

    item_name: str
    quantity: Decimal | None = None
    unit: str | None = None
    department: Department | None = None


class ItemStatusUpdateRequest(BaseModel):
    """Change an item's shopping status."""

    status: ItemStatus


class GroceryListItemResponse(BaseModel):
    """Single grocery list item."""

    id: str
    grocery_list_id: str
    item_name: str
    quantity: float | None = None
    unit: str | None = None
    department: Department
    status: ItemStatus
    is_manual: bool
    source_recipe_id: str | None = None


class GroceryListResponse(BaseModel):
    """Grocery list with its items in display order."""

    id: str
    start_date: date
    end_date: date
    created_at: datetime
    updated_at: datetime
    items: list[GroceryListItemResponse]
    items_by_department: dict[Department, list[GroceryListItemResponse]] = Field(
        default_factory=dict, description="Items grouped in store walk order"
    )


class GroceryListSummary(BaseModel):
    """Grocery list without items."""

    id: str
    start_date: date
    end_date: date
    created_at: datetime
    item_count: int


class GroceryListListResponse(BaseModel):
    """Paginated list of grocery lists."""

    data: list[GroceryListSummary]
    meta: PaginationMeta


class DepartmentListResponse(BaseModel):
    """All departments in store walk order."""

    data: list[DepartmentInfo]


# =============================================================================
# Helper Functions
# =============================================================================


def item_response(item: GroceryListItem) -> GroceryListItemResponse:
    return GroceryListItemResponse(
        id=item.id,
        grocery_list_id=item.grocery_list_id,
        item_name=item.item_name,
        quantity=float(item.quantity) if item.quantity is not None else None,
        unit=item.unit,
        department=Department(item.department),
        status=ItemStatus(item.status),
        is_manual=item.is_manual,
        source_recipe_id=item.source_recipe_id,
    )


def grocery_list_response(grocery_list: GroceryList) -> GroceryListResponse:
    items = [item_response(item) for item in sorted_items(grocery_list)]
    return GroceryListResponse(
        id=grocery_list.id,
        start_date=grocery_list.start_date,
        end_date=grocery_list.end_date,
        created_at=grocery_list.created_at,
        updated_at=grocery_list.updated_at,
        items=items,
        items_by_department=group_by_department(items),
    )


# =============================================================================
# Endpoints
# =============================================================================


@router.post("/", response_model=GroceryListResponse, status_code=status.HTTP_201_CREATED)
async def create_grocery_list(
    request: GroceryListCreateRequest,
    user_id: CurrentUser,
    service: Service,
) -> GroceryListResponse:
    """
    Generate a grocery list for the meals planned between two dates (inclusive).

    Ingredients of every in-kitchen meal are scaled to the planned servings and
    combined into one line per ingredient name and unit.
    """
    grocery_list = await service.create_grocery_list(
        user_id, request.start_date, request.end_date
    )
    return grocery_list_response(grocery_list)


@router.get("/", response_model=GroceryListListResponse)
async def list_grocery_lists(
    user_id: CurrentUser,
    service: Service,
    limit: Annotated[int | None, Query(description="Max lists to return")] = None,
    offset: Annotated[int, Query(description="Offset for pagination")] = 0,
) -> GroceryListListResponse:
    """List the caller's grocery lists, latest date range first."""
    lists, total, limit, offset = await service.list_grocery_lists(user_id, limit, offset)
    return GroceryListListResponse(
        data=[
            GroceryListSummary(
                id=gl.id,
                start_date=gl.start_date,
                end_date=gl.end_date,
                created_at=gl.created_at,
                item_count=len(gl.items),
            )
            for gl in lists
        ],
        meta=PaginationMeta(total=total, limit=limit, offset=offset),
    )


@router.get("/departments", response_model=DepartmentListResponse)
async def list_departments() -> DepartmentListResponse:
    """List grocery departments with display names, in store walk order."""
    return DepartmentListResponse(
        data=[DepartmentInfo(id=d, name=d.display_name, order=d.order) for d in Department]
    )


@router.get("/{grocery_list_id}", response_model=GroceryListResponse)
async def get_grocery_list(
    grocery_list_id: str,
    user_id: CurrentUser,
    service: Service,
) -> GroceryListResponse:
    """Get a grocery list with items sorted and grouped by department."""
    return grocery_list_response(await service.get_grocery_list(user_id, grocery_list_id))


@router.delete("/{grocery_list_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_grocery_list(
    grocery_list_id: str,
    user_id: CurrentUser,
    service: Service,
) -> Response:
    """Delete a grocery list and all of its items."""
    await service.delete_grocery_list(user_id, grocery_list_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{grocery_list_id}/items",
    response_model=GroceryListItemResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_manual_item(
    grocery_list_id: str,
    request: ManualItemRequest,
    user_id: CurrentUser,
    service: Service,
) -> GroceryListItemResponse:
    """Add an item by hand. Department defaults to "other"."""
    item = await service.add_manual_item(
        user_id,
        grocery_list_id,
        item_name=request.item_name,
        quantity=request.quantity,
        unit=request.unit,
        department=request.department,
    )
    return item_response(item)


@router.patch("/items/{item_id}", response_model=GroceryListItemResponse)
async def update_item_status(
    item_id: str,
    request: ItemStatusUpdateRequest,
    user_id: CurrentUser,
    service: Service,
) -> GroceryListItemResponse:
    """Mark an item pending, bought or already on hand."""
    item = await service.update_item_status(user_id, item_id, request.status)
    return item_response(item)


@router.delete("/items/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_item(
    item_id: str,
    user_id: CurrentUser,
    service: Service,
) -> Response:
    """Remove an item from its grocery list."""
    await service.delete_item(user_id, item_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
