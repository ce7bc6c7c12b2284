"""Meal plan business logic."""

from dataclasses import dataclass
from datetime import date

from mealplanner.config import Settings, get_settings
from mealplanner.errors import NotFoundError, ValidationError
from mealplanner.grocery.aggregation import DateRange
from mealplanner.logging_config import get_logger
from mealplanner.models import MealPlan, MealPlanRecipe
from mealplanner.plan.repository import MealPlanRepository
from mealplanner.repository import unit_of_work
from mealplanner.schemas import MealType

logger = get_logger(__name__)


@dataclass
class MealSlot:
    """Requested content of one meal slot."""

    meal_type: str
    recipe_id: str | None = None
    servings: int | None = None
    out_of_kitchen: bool = False


def validate_slots(slots: list[MealSlot]) -> None:
    """
    Check every slot before anything is written.

    An out-of-kitchen slot carries neither recipe nor servings; any other
    slot needs both, with servings above zero.
    """
    valid_types = {t.value for t in MealType}

    for i, slot in enumerate(slots):
        if slot.meal_type not in valid_types:
            raise ValidationError(f"meal {i}: invalid meal type '{slot.meal_type}'")

        if slot.out_of_kitchen:
            if slot.recipe_id is not None:
                raise ValidationError(
                    f"meal {i}: cannot have recipe_id when out_of_kitchen is true"
                )
            if slot.servings is not None:
                raise ValidationError(
                    f"meal {i}: cannot have servings when out_of_kitchen is true"
                )
            continue

        if slot.recipe_id is None:
            raise ValidationError(f"meal {i}: recipe_id required when out_of_kitchen is false")
        if slot.servings is None:
            raise ValidationError(f"meal {i}: servings required when out_of_kitchen is false")
        if slot.servings <= 0:
            raise ValidationError(f"meal {i}: servings must be greater than 0")


def empty_plan(plan_date: date) -> MealPlan:
    """An unsaved plan with no meals, standing in for a date nobody planned."""
    return MealPlan(id=None, plan_date=plan_date, meals=[])


class MealPlanService:
    """Reads and replaces the meals planned for calendar dates."""

    def __init__(self, repo: MealPlanRepository, settings: Settings | None = None):
        self.repo = repo
        self.settings = settings or get_settings()

    async def get_plan(self, plan_date: date) -> MealPlan:
        """The plan for one date, or an empty one when nothing is planned."""
        plan = await self.repo.get_by_date(plan_date)
        return plan if plan is not None else empty_plan(plan_date)

    async def get_plans(self, start_date: date, end_date: date) -> list[MealPlan]:
        """
        One plan per date in the inclusive range, empty plans filled in.

        Raises:
            ValidationError: If start is after end or the range is too long.
        """
        if start_date > end_date:
            raise ValidationError("start date must be before end date")

        max_days = self.settings.meal_plan_max_range_days
        if (end_date - start_date).days > max_days:
            raise ValidationError(f"date range cannot exceed {max_days} days")

        date_range = DateRange(start_date, end_date)
        plans = {plan.plan_date: plan for plan in await self.repo.list_in_range(date_range)}

        return [plans.get(day) or empty_plan(day) for day in date_range.dates()]

    async def update_plan(self, plan_date: date, slots: list[MealSlot]) -> MealPlan:
        """
        Replace all meal slots of a date.

        Raises:
            ValidationError: If a slot is malformed.
            NotFoundError: If a slot names a missing or deleted recipe.
        """
        validate_slots(slots)

        recipe_ids = {slot.recipe_id for slot in slots if slot.recipe_id is not None}
        live_ids = await self.repo.live_recipe_ids(recipe_ids)
        missing = sorted(recipe_ids - live_ids)
        if missing:
            raise NotFoundError(f"Recipe {missing[0]} not found")

        meals = [
            MealPlanRecipe(
                meal_type=slot.meal_type,
                recipe_id=slot.recipe_id,
                servings=slot.servings,
                out_of_kitchen=slot.out_of_kitchen,
            )
            for slot in slots
        ]

        async with unit_of_work(self.repo):
            plan = await self.repo.replace_meals(plan_date, meals)

        logger.info(f"Updated meal plan for {plan_date}: {len(meals)} meals")
        return plan
