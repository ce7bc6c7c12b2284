"""Grocery list ingredient aggregation.

The pipeline is: ingredient tuples from the meal plans in a date range are put in
a deterministic order, scaled to the servings actually planned, keyed by their
normalized (name, unit) identity, and folded into one line per key.
"""

from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from typing import TypeVar

from mealplanner.errors import ValidationError
from mealplanner.logging_config import get_logger
from mealplanner.normalize.ingredients import NormalizationKey, normalization_key
from mealplanner.schemas import Department, ItemStatus

logger = get_logger(__name__)

LineT = TypeVar("LineT")


# =============================================================================
# Date range
# =============================================================================


def to_calendar_date(value: date | datetime) -> date:
    """Reduce a date or datetime to its calendar date in UTC."""
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.date()
    return value


@dataclass(frozen=True)
class DateRange:
    """Inclusive range of calendar dates."""

    start: date
    end: date

    def __post_init__(self) -> None:
        if self.end < self.start:
            raise ValidationError("end_date must be on or after start_date")

    @classmethod
    def of(cls, start: date | datetime, end: date | datetime) -> "DateRange":
        """Build a range from dates or datetimes, dropping any time of day."""
        return cls(start=to_calendar_date(start), end=to_calendar_date(end))

    @property
    def days(self) -> int:
        return (self.end - self.start).days + 1

    def __contains__(self, day: date) -> bool:
        return self.start <= day <= self.end

    def dates(self) -> Iterator[date]:
        """Every date in the range, in order."""
        for offset in range(self.days):
            yield self.start + timedelta(days=offset)


# =============================================================================
# Ingredient tuples and scaling
# =============================================================================


@dataclass(frozen=True)
class IngredientTuple:
    """One recipe ingredient as it appears in one planned meal."""

    ingredient_name: str
    quantity: Decimal | None
    unit: str | None
    department: Department
    recipe_id: str
    recipe_title: str
    meal_servings: int | None
    recipe_servings: int
    order_index: int = 0


@dataclass(frozen=True)
class ScaledTuple:
    """An ingredient tuple with its scaled quantity and aggregation key."""

    source: IngredientTuple
    quantity: Decimal | None
    key: NormalizationKey


def _to_decimal(value: Decimal | int | float | str | None) -> Decimal | None:
    if value is None or isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def scale_quantity(
    quantity: Decimal | int | float | None,
    meal_servings: int | None,
    recipe_servings: int,
) -> Decimal | None:
    """
    Scale an ingredient quantity to the servings planned for a meal.

    The quantity is returned unchanged when the meal does not specify a
    positive serving count or the recipe's own serving count is not positive.
    """
    amount = _to_decimal(quantity)
    if amount is None:
        return None
    if meal_servings is None or meal_servings <= 0 or recipe_servings <= 0:
        return amount
    return amount * Decimal(meal_servings) / Decimal(recipe_servings)


def tie_break_order(tuples: Iterable[IngredientTuple]) -> list[IngredientTuple]:
    """Stable order by recipe id, then ingredient position within the recipe."""
    return sorted(tuples, key=lambda t: (t.recipe_id, t.order_index))


def scale(tuples: Iterable[IngredientTuple]) -> list[ScaledTuple]:
    """Order tuples deterministically and attach scaled quantities and keys."""
    return [
        ScaledTuple(
            source=t,
            quantity=scale_quantity(t.quantity, t.meal_servings, t.recipe_servings),
            key=normalization_key(t.ingredient_name, t.unit),
        )
        for t in tie_break_order(tuples)
    ]


# =============================================================================
# Fold
# =============================================================================


@dataclass(frozen=True)
class AggregatedLine:
    """One generated grocery list line."""

    item_name: str
    quantity: Decimal | None
    unit: str | None
    department: Department
    source_recipe_id: str | None
    status: ItemStatus = ItemStatus.PENDING


@dataclass
class _Accumulator:
    item_name: str
    quantity: Decimal | None
    unit: str | None
    department: Department
    source_recipe_id: str
    first_seen: int

    def add(self, quantity: Decimal | None) -> None:
        if quantity is None:
            return
        self.quantity = quantity if self.quantity is None else self.quantity + quantity


def display_sort_key(department: Department | str, item_name: str) -> tuple[int, str]:
    """Sort key for grocery lines: store walk order, then case-insensitive name."""
    return Department(department).order, item_name.lower()


def aggregate(tuples: Sequence[ScaledTuple]) -> list[AggregatedLine]:
    """
    Fold scaled tuples into one line per normalization key.

    The first tuple seen for a key supplies the line's display name, unit,
    department and source recipe. Quantities are summed; a missing quantity
    never erases a known one, and a line stays without quantity only when
    every contribution lacked one.

    Lines are returned by department walk order, then item name, then the
    order in which their keys were first seen.
    """
    accumulators: dict[NormalizationKey, _Accumulator] = {}

    for position, scaled in enumerate(tuples):
        existing = accumulators.get(scaled.key)
        if existing is not None:
            existing.add(scaled.quantity)
            continue

        src = scaled.source
        accumulators[scaled.key] = _Accumulator(
            item_name=src.ingredient_name,
            quantity=scaled.quantity,
            unit=src.unit,
            department=src.department,
            source_recipe_id=src.recipe_id,
            first_seen=position,
        )

    ordered = sorted(
        accumulators.values(),
        key=lambda acc: (*display_sort_key(acc.department, acc.item_name), acc.first_seen),
    )

    logger.debug(f"Aggregated {len(tuples)} ingredient tuples into {len(ordered)} lines")

    return [
        AggregatedLine(
            item_name=acc.item_name,
            quantity=acc.quantity,
            unit=acc.unit,
            department=acc.department,
            source_recipe_id=acc.source_recipe_id,
        )
        for acc in ordered
    ]


def aggregate_ingredients(tuples: Iterable[IngredientTuple]) -> list[AggregatedLine]:
    """Run the full scale-and-fold pipeline over raw ingredient tuples."""
    return aggregate(scale(tuples))


def group_by_department(lines: Iterable[LineT]) -> dict[Department, list[LineT]]:
    """Group lines by department, preserving their order inside each group."""
    grouped: dict[Department, list[LineT]] = {}
    for line in lines:
        grouped.setdefault(Department(line.department), []).append(line)
    return dict(sorted(grouped.items(), key=lambda item: item[0].order))
