"""Grocery list generation and management."""

from mealplanner.grocery.aggregation import (
    AggregatedLine,
    DateRange,
    IngredientTuple,
    ScaledTuple,
    aggregate,
    aggregate_ingredients,
    group_by_department,
    scale,
    scale_quantity,
)
from mealplanner.grocery.repository import GroceryListRepository
from mealplanner.grocery.service import GroceryListService
from mealplanner.grocery.source import IngredientSource, SqlIngredientSource

__all__ = [
    "AggregatedLine",
    "DateRange",
    "GroceryListRepository",
    "GroceryListService",
    "IngredientSource",
    "IngredientTuple",
    "ScaledTuple",
    "SqlIngredientSource",
    "aggregate",
    "aggregate_ingredients",
    "group_by_department",
    "scale",
    "scale_quantity",
]
