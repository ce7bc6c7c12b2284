"""Grocery list business logic."""

from datetime import date
from decimal import Decimal

from mealplanner.config import Settings, get_settings
from mealplanner.errors import NotFoundError, ValidationError
from mealplanner.grocery.aggregation import (
    DateRange,
    aggregate_ingredients,
    display_sort_key,
)
from mealplanner.grocery.repository import GroceryListRepository
from mealplanner.grocery.source import IngredientSource
from mealplanner.logging_config import get_logger
from mealplanner.models import GroceryList, GroceryListItem
from mealplanner.repository import unit_of_work
from mealplanner.schemas import Department, ItemStatus

logger = get_logger(__name__)


def sorted_items(grocery_list: GroceryList) -> list[GroceryListItem]:
    """Items in display order: department, item name, unit, generated before manual."""
    return sorted(
        grocery_list.items,
        key=lambda item: (
            *display_sort_key(item.department, item.item_name),
            item.unit or "",
            item.is_manual,
        ),
    )


class GroceryListService:
    """
    Creates grocery lists from planned meals and manages their items.

    A new list and all of its generated items are committed together;
    any failure rolls the whole creation back.
    """

    def __init__(
        self,
        repo: GroceryListRepository,
        source: IngredientSource,
        settings: Settings | None = None,
    ):
        self.repo = repo
        self.source = source
        self.settings = settings or get_settings()

    async def create_grocery_list(self, user_id: str, start_date: date, end_date: date) -> GroceryList:
        """
        Generate a grocery list for the meals planned between two dates (inclusive).

        Raises:
            ValidationError: If end_date is before start_date.
        """
        date_range = DateRange.of(start_date, end_date)

        logger.info(f"Creating grocery list for {date_range.start} to {date_range.end}")

        async with unit_of_work(self.repo):
            tuples = await self.source.fetch(date_range)
            lines = aggregate_ingredients(tuples)

            await self.repo.ensure_user(user_id)
            grocery_list = await self.repo.create_grocery_list(user_id, date_range)
            await self.repo.add_generated_items(grocery_list, lines)

        logger.info(
            f"Created grocery list {grocery_list.id}: {len(tuples)} ingredients "
            f"aggregated into {len(lines)} items"
        )
        return grocery_list

    async def get_grocery_list(self, user_id: str, grocery_list_id: str) -> GroceryList:
        grocery_list = await self.repo.get_grocery_list(grocery_list_id)
        if grocery_list is None or grocery_list.created_by_user_id != user_id:
            raise NotFoundError(f"Grocery list {grocery_list_id} not found")
        return grocery_list

    async def list_grocery_lists(
        self, user_id: str, limit: int | None = None, offset: int = 0
    ) -> tuple[list[GroceryList], int, int, int]:
        """Return (lists, total, limit, offset) for one page of the user's lists."""
        limit = self.settings.clamp_limit(limit)
        offset = max(offset, 0)
        lists, total = await self.repo.list_grocery_lists(user_id, limit, offset)
        return lists, total, limit, offset

    async def delete_grocery_list(self, user_id: str, grocery_list_id: str) -> None:
        grocery_list = await self.get_grocery_list(user_id, grocery_list_id)
        await self.repo.delete_grocery_list(grocery_list)
        await self.repo.commit()
        logger.info(f"Deleted grocery list {grocery_list_id}")

    async def add_manual_item(
        self,
        user_id: str,
        grocery_list_id: str,
        item_name: str,
        quantity: Decimal | None = None,
        unit: str | None = None,
        department: Department | None = None,
    ) -> GroceryListItem:
        """Add a hand-entered item. Department defaults to "other"."""
        name = (item_name or "").strip()
        if not name:
            raise ValidationError("item_name is required")

        grocery_list = await self.get_grocery_list(user_id, grocery_list_id)
        item = await self.repo.add_manual_item(
            grocery_list,
            item_name=name,
            quantity=quantity,
            unit=unit,
            department=department or Department.OTHER,
        )
        await self.repo.commit()
        return item

    async def _get_owned_item(self, user_id: str, item_id: str) -> GroceryListItem:
        item = await self.repo.get_item(item_id)
        if item is None or item.grocery_list.created_by_user_id != user_id:
            raise NotFoundError(f"Grocery list item {item_id} not found")
        return item

    async def update_item_status(
        self, user_id: str, item_id: str, status: ItemStatus
    ) -> GroceryListItem:
        item = await self._get_owned_item(user_id, item_id)
        item = await self.repo.update_item_status(item, status)
        await self.repo.commit()
        return item

    async def delete_item(self, user_id: str, item_id: str) -> None:
        item = await self._get_owned_item(user_id, item_id)
        await self.repo.delete_item(item)
        await self.repo.commit()
