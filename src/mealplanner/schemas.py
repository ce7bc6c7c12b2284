"""Shared enums and API schemas used across routers."""

from enum import Enum

from pydantic import BaseModel, Field


class Department(str, Enum):
    """Grocery store department, in store walk order."""

    PRODUCE = "produce"
    MEAT = "meat"
    SEAFOOD = "seafood"
    DAIRY = "dairy"
    BAKERY = "bakery"
    FROZEN = "frozen"
    PANTRY = "pantry"
    SPICES = "spices"
    BEVERAGES = "beverages"
    OTHER = "other"

    @property
    def display_name(self) -> str:
        return DEPARTMENT_DISPLAY_NAMES[self]

    @property
    def order(self) -> int:
        return _DEPARTMENT_ORDER[self]


DEPARTMENT_DISPLAY_NAMES: dict[Department, str] = {
    Department.PRODUCE: "Produce",
    Department.MEAT: "Meat",
    Department.SEAFOOD: "Seafood",
    Department.DAIRY: "Dairy & Eggs",
    Department.BAKERY: "Bakery",
    Department.FROZEN: "Frozen",
    Department.PANTRY: "Pantry",
    Department.SPICES: "Spices & Seasonings",
    Department.BEVERAGES: "Beverages",
    Department.OTHER: "Other",
}

_DEPARTMENT_ORDER: dict[Department, int] = {dept: i for i, dept in enumerate(Department)}


class ItemStatus(str, Enum):
    """Shopping status of a grocery list item."""

    PENDING = "pending"
    BOUGHT = "bought"
    HAVE_ON_HAND = "have_on_hand"


class MealType(str, Enum):
    """Meal slot type."""

    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    SNACK = "snack"
    DINNER = "dinner"
    DESSERT = "dessert"


class PaginationMeta(BaseModel):
    """Pagination metadata for list responses."""

    total: int
    limit: int
    offset: int


class DepartmentInfo(BaseModel):
    """A department token with its display metadata."""

    id: Department
    name: str
    order: int = Field(description="Position in store walk order")
