"""Tests for the shared repository plumbing and stored quantity precision."""

from decimal import Decimal
from unittest.mock import AsyncMock

import pytest

from mealplanner.errors import NotFoundError, StoreError
from mealplanner.grocery import AggregatedLine, GroceryListRepository
from mealplanner.models import stored_quantity
from mealplanner.repository import unit_of_work
from mealplanner.schemas import Department


class TestUnitOfWork:
    """Tests for commit/rollback handling around a block of writes."""

    @pytest.mark.asyncio
    async def test_commits_on_success(self):
        repo = AsyncMock()

        async with unit_of_work(repo):
            pass

        repo.commit.assert_awaited_once()
        repo.rollback.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_rolls_back_and_reraises(self):
        repo = AsyncMock()

        with pytest.raises(NotFoundError):
            async with unit_of_work(repo):
                raise NotFoundError("Recipe r1 not found")

        repo.commit.assert_not_awaited()
        repo.rollback.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_failed_rollback_keeps_original_error(self):
        repo = AsyncMock()
        repo.rollback.side_effect = StoreError("Failed to roll back transaction")

        with pytest.raises(NotFoundError, match="Recipe r1 not found"):
            async with unit_of_work(repo):
                raise NotFoundError("Recipe r1 not found")

    @pytest.mark.asyncio
    async def test_failed_commit_is_rolled_back(self):
        repo = AsyncMock()
        repo.commit.side_effect = StoreError("Failed to commit transaction")

        with pytest.raises(StoreError, match="commit"):
            async with unit_of_work(repo):
                pass

        repo.rollback.assert_awaited_once()


class TestStoredQuantity:
    """Quantities are rounded to the column's four decimal places."""

    def test_rounds_half_up(self):
        assert stored_quantity(Decimal(1) / Decimal(3)) == Decimal("0.3333")
        assert stored_quantity(Decimal("0.66665")) == Decimal("0.6667")

    def test_none_stays_none(self):
        assert stored_quantity(None) is None

    @pytest.mark.asyncio
    async def test_generated_items_hold_stored_precision(self, make_grocery_list):
        """Items returned from a create match what a later read would return."""
        session = AsyncMock()
        repo = GroceryListRepository(session)
        grocery_list = make_grocery_list()

        items = await repo.add_generated_items(
            grocery_list,
            [
                AggregatedLine(
                    item_name="Cream",
                    quantity=Decimal(1) / Decimal(3),
                    unit="cup",
                    department=Department.DAIRY,
                    source_recipe_id="recipe-1",
                ),
                AggregatedLine(
                    item_name="Salt",
                    quantity=None,
                    unit=None,
                    department=Department.PANTRY,
                    source_recipe_id="recipe-1",
                ),
            ],
        )

        assert [i.quantity for i in items] == [Decimal("0.3333"), None]
        session.flush.assert_awaited_once()
