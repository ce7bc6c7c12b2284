"""Unit tests for MealPlanService."""

from datetime import date, timedelta
from unittest.mock import AsyncMock

import pytest

from mealplanner.errors import NotFoundError, ValidationError
from mealplanner.plan import MealPlanService, MealSlot, validate_slots


@pytest.fixture
def repo():
    repo = AsyncMock()
    repo.list_in_range.return_value = []
    repo.get_by_date.return_value = None
    repo.live_recipe_ids.side_effect = lambda ids: set(ids)
    return repo


@pytest.fixture
def service(repo, settings):
    return MealPlanService(repo, settings)


class TestValidateSlots:
    """Tests for meal slot validation."""

    def test_valid_slots(self):
        validate_slots(
            [
                MealSlot("breakfast", recipe_id="r1", servings=2),
                MealSlot("lunch", out_of_kitchen=True),
            ]
        )

    def test_unknown_meal_type(self):
        with pytest.raises(ValidationError, match="invalid meal type"):
            validate_slots([MealSlot("brunch", recipe_id="r1", servings=2)])

    def test_out_of_kitchen_with_recipe(self):
        with pytest.raises(ValidationError, match="recipe_id"):
            validate_slots([MealSlot("dinner", recipe_id="r1", out_of_kitchen=True)])

    def test_out_of_kitchen_with_servings(self):
        with pytest.raises(ValidationError, match="servings"):
            validate_slots([MealSlot("dinner", servings=2, out_of_kitchen=True)])

    def test_recipe_required(self):
        with pytest.raises(ValidationError, match="recipe_id required"):
            validate_slots([MealSlot("dinner", servings=2)])

    def test_servings_required(self):
        with pytest.raises(ValidationError, match="servings required"):
            validate_slots([MealSlot("dinner", recipe_id="r1")])

    def test_servings_positive(self):
        with pytest.raises(ValidationError, match="greater than 0"):
            validate_slots([MealSlot("dinner", recipe_id="r1", servings=0)])


class TestGetPlans:
    """Tests for reading plans over a date range."""

    @pytest.mark.asyncio
    async def test_missing_dates_are_filled(self, service, repo, make_plan):
        saved = make_plan(date(2025, 3, 4))
        repo.list_in_range.return_value = [saved]

        plans = await service.get_plans(date(2025, 3, 3), date(2025, 3, 5))

        assert [p.plan_date for p in plans] == [date(2025, 3, 3), date(2025, 3, 4), date(2025, 3, 5)]
        assert plans[1] is saved
        assert plans[0].id is None
        assert plans[0].meals == []

    @pytest.mark.asyncio
    async def test_start_after_end_rejected(self, service, repo):
        with pytest.raises(ValidationError):
            await service.get_plans(date(2025, 3, 5), date(2025, 3, 3))
        repo.list_in_range.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_range_limit(self, service):
        start = date(2025, 1, 1)
        plans = await service.get_plans(start, start + timedelta(days=90))
        assert len(plans) == 91

        with pytest.raises(ValidationError, match="90 days"):
            await service.get_plans(start, start + timedelta(days=91))

    @pytest.mark.asyncio
    async def test_single_date_without_plan(self, service):
        plan = await service.get_plan(date(2025, 3, 3))
        assert plan.plan_date == date(2025, 3, 3)
        assert plan.meals == []


class TestUpdatePlan:
    """Tests for replacing a day's meals."""

    @pytest.mark.asyncio
    async def test_replaces_meals_in_order(self, service, repo, make_plan):
        repo.replace_meals.return_value = make_plan(date(2025, 3, 3))

        await service.update_plan(
            date(2025, 3, 3),
            [
                MealSlot("breakfast", recipe_id="r1", servings=2),
                MealSlot("dinner", out_of_kitchen=True),
            ],
        )

        (plan_date, meals), _ = repo.replace_meals.call_args
        assert plan_date == date(2025, 3, 3)
        assert [m.meal_type for m in meals] == ["breakfast", "dinner"]
        assert meals[1].out_of_kitchen is True
        assert meals[1].recipe_id is None
        repo.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_unknown_recipe_not_found(self, service, repo):
        repo.live_recipe_ids.side_effect = None
        repo.live_recipe_ids.return_value = set()

        with pytest.raises(NotFoundError):
            await service.update_plan(date(2025, 3, 3), [MealSlot("dinner", "gone", 2)])
        repo.replace_meals.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_invalid_slot_writes_nothing(self, service, repo):
        with pytest.raises(ValidationError):
            await service.update_plan(date(2025, 3, 3), [MealSlot("dinner")])
        repo.live_recipe_ids.assert_not_awaited()
        repo.replace_meals.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_empty_list_clears_the_day(self, service, repo, make_plan):
        repo.replace_meals.return_value = make_plan(date(2025, 3, 3))

        plan = await service.update_plan(date(2025, 3, 3), [])

        repo.replace_meals.assert_awaited_once_with(date(2025, 3, 3), [])
        assert plan.meals == []
