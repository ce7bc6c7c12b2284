"""Daily meal plans."""

from mealplanner.plan.repository import MealPlanRepository
from mealplanner.plan.service import MealPlanService, MealSlot, validate_slots

__all__ = ["MealPlanRepository", "MealPlanService", "MealSlot", "validate_slots"]
