"""Persistence for grocery lists and their items."""

import uuid
from collections.abc import Iterable
from decimal import Decimal

from sqlalchemy import func, select
from sqlalchemy.orm import selectinload

from mealplanner.grocery.aggregation import AggregatedLine, DateRange
from mealplanner.models import GroceryList, GroceryListItem, stored_quantity
from mealplanner.repository import SqlRepository, translate_errors
from mealplanner.schemas import Department, ItemStatus


class GroceryListRepository(SqlRepository):
    """Repository for grocery lists."""

    async def create_grocery_list(self, user_id: str, date_range: DateRange) -> GroceryList:
        grocery_list = GroceryList(
            id=str(uuid.uuid4()),
            created_by_user_id=user_id,
            start_date=date_range.start,
            end_date=date_range.end,
            items=[],
        )
        with translate_errors("create grocery list"):
            self.session.add(grocery_list)
            await self.session.flush()
        return grocery_list

    async def add_generated_items(
        self, grocery_list: GroceryList, lines: Iterable[AggregatedLine]
    ) -> list[GroceryListItem]:
        """Append aggregated lines to a list as generated pending items.

        Quantities are rounded to the stored precision here so the items handed
        back match what a later read returns.
        """
        items = [
            GroceryListItem(
                id=str(uuid.uuid4()),
                grocery_list_id=grocery_list.id,
                item_name=line.item_name,
                quantity=stored_quantity(line.quantity),
                unit=line.unit,
                department=line.department.value,
                status=line.status.value,
                is_manual=False,
                source_recipe_id=line.source_recipe_id,
            )
            for line in lines
        ]
        with translate_errors("create grocery list items"):
            grocery_list.items.extend(items)
            await self.session.flush()
        return items

    async def add_manual_item(
        self,
        grocery_list: GroceryList,
        item_name: str,
        quantity: Decimal | None,
        unit: str | None,
        department: Department,
    ) -> GroceryListItem:
        item = GroceryListItem(
            id=str(uuid.uuid4()),
            grocery_list_id=grocery_list.id,
            item_name=item_name,
            quantity=stored_quantity(quantity),
            unit=unit,
            department=department.value,
            status=ItemStatus.PENDING.value,
            is_manual=True,
            source_recipe_id=None,
        )
        with translate_errors("create grocery list item"):
            grocery_list.items.append(item)
            await self.session.flush()
        return item

    async def get_grocery_list(self, grocery_list_id: str) -> GroceryList | None:
        with translate_errors("load grocery list"):
            result = await self.session.execute(
                select(GroceryList)
                .where(GroceryList.id == grocery_list_id)
                .options(selectinload(GroceryList.items))
            )
            return result.scalar_one_or_none()

    async def list_grocery_lists(
        self, user_id: str, limit: int, offset: int
    ) -> tuple[list[GroceryList], int]:
        """Return one page of a user's lists, latest date range first, and the total."""
        with translate_errors("list grocery lists"):
            total = await self.session.scalar(
                select(func.count())
                .select_from(GroceryList)
                .where(GroceryList.created_by_user_id == user_id)
            )
            result = await self.session.execute(
                select(GroceryList)
                .where(GroceryList.created_by_user_id == user_id)
                .options(selectinload(GroceryList.items))
                .order_by(GroceryList.start_date.desc(), GroceryList.created_at.desc())
                .offset(offset)
                .limit(limit)
            )
            return list(result.scalars().all()), total or 0

    async def delete_grocery_list(self, grocery_list: GroceryList) -> None:
        with translate_errors("delete grocery list"):
            await self.session.delete(grocery_list)
            await self.session.flush()

    async def get_item(self, item_id: str) -> GroceryListItem | None:
        with translate_errors("load grocery list item"):
            result = await self.session.execute(
                select(GroceryListItem)
                .where(GroceryListItem.id == item_id)
                .options(selectinload(GroceryListItem.grocery_list))
            )
            return result.scalar_one_or_none()

    async def update_item_status(self, item: GroceryListItem, status: ItemStatus) -> GroceryListItem:
        with translate_errors("update grocery list item"):
            item.status = status.value
            await self.session.flush()
        return item

    async def delete_item(self, item: GroceryListItem) -> None:
        with translate_errors("delete grocery list item"):
            await self.session.delete(item)
            await self.session.flush()
