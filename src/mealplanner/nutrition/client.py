"""Food composition lookups against USDA FoodData Central."""

from dataclasses import dataclass
from typing import Protocol

from mealplanner.errors import ValidationError
from mealplanner.logging_config import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class FoodNutrition:
    """
    Macros per 100 g of one food.

    ``nutrition_id`` is set once the food is in the local cache; recipe
    ingredients link to that id.
    """

    fdc_id: str
    description: str
    data_type: str
    calories: float | None = None
    protein_g: float | None = None
    carbs_g: float | None = None
    fiber_g: float | None = None
    fat_g: float | None = None
    nutrition_id: str | None = None


class FoodDataClient(Protocol):
    """A food composition database that can be searched by name or read by id."""

    async def search(self, query: str) -> list[FoodNutrition]:
        """
        Find foods whose description contains the query.

        Raises:
            ExternalServiceError: If the provider cannot be reached.
        """
        ...

    async def get(self, fdc_id: str) -> FoodNutrition | None:
        """The food with exactly this FoodData Central id, or None."""
        ...


def _sr_legacy(fdc_id, description, calories, protein_g, carbs_g, fiber_g, fat_g) -> FoodNutrition:
    return FoodNutrition(
        fdc_id=fdc_id,
        description=description,
        data_type="SR Legacy",
        calories=calories,
        protein_g=protein_g,
        carbs_g=carbs_g,
        fiber_g=fiber_g,
        fat_g=fat_g,
    )


STUB_FOODS: tuple[FoodNutrition, ...] = (
    _sr_legacy("123456", "Chicken breast, raw", 120.0, 22.5, 0.0, 0.0, 2.6),
    _sr_legacy("123457", "Rice, white, long-grain, raw", 365.0, 7.1, 80.0, 1.3, 0.7),
    _sr_legacy("123458", "Broccoli, raw", 34.0, 2.8, 7.0, 2.6, 0.4),
    _sr_legacy("123459", "Olive oil", 884.0, 0.0, 0.0, 0.0, 100.0),
    _sr_legacy("123460", "Milk, whole, 3.25% milkfat", 61.0, 3.2, 4.8, 0.0, 3.3),
    _sr_legacy("123461", "Egg, whole, raw, fresh", 143.0, 12.6, 0.7, 0.0, 9.5),
    _sr_legacy("123462", "Tomato, red, ripe, raw", 18.0, 0.9, 3.9, 1.2, 0.2),
    _sr_legacy("123463", "Onion, raw", 40.0, 1.1, 9.3, 1.7, 0.1),
    _sr_legacy("123464", "Garlic, raw", 149.0, 6.4, 33.1, 2.1, 0.5),
    _sr_legacy("123465", "Pasta, dry, enriched", 371.0, 13.0, 74.7, 3.2, 1.5),
    _sr_legacy("123466", "Ground beef, 80% lean meat / 20% fat, raw", 254.0, 17.2, 0.0, 0.0, 20.0),
    _sr_legacy("123467", "Salmon, Atlantic, raw", 142.0, 19.8, 0.0, 0.0, 6.3),
    _sr_legacy("123468", "Potato, flesh and skin, raw", 77.0, 2.0, 17.5, 2.1, 0.1),
    _sr_legacy("123469", "Carrot, raw", 41.0, 0.9, 9.6, 2.8, 0.2),
    _sr_legacy("123470", "Cheese, cheddar", 403.0, 22.9, 3.1, 0.0, 33.3),
)


class StubFoodDataClient:
    """
    Offline stand-in for FoodData Central.

    Answers from a fixed table of common foods so nutrition search works
    without an API key. Matching is a case-insensitive substring test on
    the description.
    """

    def __init__(self, limit: int = 10):
        self.limit = limit

    async def search(self, query: str) -> list[FoodNutrition]:
        needle = query.strip().lower()
        if not needle:
            raise ValidationError("query cannot be empty")

        matches = [food for food in STUB_FOODS if needle in food.description.lower()]
        logger.debug(f"Stub food data search '{needle}': {len(matches)} matches")
        return matches[: self.limit]

    async def get(self, fdc_id: str) -> FoodNutrition | None:
        return next((food for food in STUB_FOODS if food.fdc_id == fdc_id), None)
