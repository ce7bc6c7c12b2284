"""Unit tests for grocery list scaling and aggregation."""

from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

import pytest

from mealplanner.errors import ValidationError
from mealplanner.grocery.aggregation import (
    AggregatedLine,
    DateRange,
    aggregate,
    aggregate_ingredients,
    group_by_department,
    scale,
    scale_quantity,
    tie_break_order,
)
from mealplanner.schemas import Department, ItemStatus

# =============================================================================
# Date Range Tests
# =============================================================================


class TestDateRange:
    """Tests for DateRange."""

    def test_single_day(self):
        """Start equal to end is a one-day range."""
        r = DateRange(date(2025, 3, 3), date(2025, 3, 3))
        assert r.days == 1
        assert list(r.dates()) == [date(2025, 3, 3)]

    def test_end_before_start_rejected(self):
        with pytest.raises(ValidationError):
            DateRange(date(2025, 3, 4), date(2025, 3, 3))

    def test_dates_are_inclusive(self):
        r = DateRange(date(2025, 2, 27), date(2025, 3, 2))
        assert list(r.dates()) == [
            date(2025, 2, 27),
            date(2025, 2, 28),
            date(2025, 3, 1),
            date(2025, 3, 2),
        ]
        assert date(2025, 3, 2) in r
        assert date(2025, 3, 3) not in r

    def test_of_drops_time_of_day(self):
        """Datetimes are reduced to their UTC calendar date."""
        start = datetime(2025, 3, 3, 23, 30, tzinfo=timezone(timedelta(hours=-2)))
        r = DateRange.of(start, date(2025, 3, 10))
        assert r.start == date(2025, 3, 4)


# =============================================================================
# Scaling Tests
# =============================================================================


class TestScaleQuantity:
    """Tests for scale_quantity."""

    def test_scales_to_meal_servings(self):
        """2 units for 4 servings, planned for 6, becomes 3."""
        assert scale_quantity(Decimal("2"), 6, 4) == Decimal("3")

    def test_missing_meal_servings_keeps_quantity(self):
        assert scale_quantity(Decimal("2"), None, 4) == Decimal("2")

    def test_non_positive_meal_servings_keeps_quantity(self):
        assert scale_quantity(Decimal("2"), 0, 4) == Decimal("2")

    def test_non_positive_recipe_servings_keeps_quantity(self):
        assert scale_quantity(Decimal("2"), 6, 0) == Decimal("2")

    def test_missing_quantity_stays_missing(self):
        assert scale_quantity(None, 6, 4) is None

    def test_accepts_floats_without_binary_noise(self):
        assert scale_quantity(0.1, 3, 1) == Decimal("0.3")


class TestTieBreakOrder:
    """Tests for the deterministic pre-aggregation order."""

    def test_orders_by_recipe_then_position(self, make_tuple):
        tuples = [
            make_tuple("b2", 1, "g", recipe_id="b", order_index=1),
            make_tuple("a1", 1, "g", recipe_id="a", order_index=1),
            make_tuple("b0", 1, "g", recipe_id="b", order_index=0),
            make_tuple("a0", 1, "g", recipe_id="a", order_index=0),
        ]
        ordered = [t.ingredient_name for t in tie_break_order(tuples)]
        assert ordered == ["a0", "a1", "b0", "b2"]

    def test_scale_attaches_keys(self, make_tuple):
        (scaled,) = scale([make_tuple(" Tomato ", 2, "Cup", meal_servings=8, recipe_servings=4)])
        assert scaled.quantity == Decimal("4")
        assert scaled.key == ("tomato", "cup")


# =============================================================================
# Aggregation Tests
# =============================================================================


class TestAggregate:
    """Tests for the fold into grocery lines."""

    def test_empty_input(self):
        """No tuples, no lines."""
        assert aggregate_ingredients([]) == []
        assert aggregate([]) == []

    def test_case_and_whitespace_are_merged(self, make_tuple):
        """Names and units differing only in case collapse into the first-seen line."""
        lines = aggregate_ingredients(
            [
                make_tuple("Tomato", 2, "cup", order_index=0),
                make_tuple("tomato", 1, "Cup", order_index=1),
            ]
        )
        assert len(lines) == 1
        assert lines[0].item_name == "Tomato"
        assert lines[0].unit == "cup"
        assert lines[0].quantity == Decimal("3")
        assert lines[0].status == ItemStatus.PENDING

    def test_distinct_units_stay_separate(self, make_tuple):
        lines = aggregate_ingredients(
            [
                make_tuple("Flour", 2, "cup", department=Department.PANTRY, order_index=0),
                make_tuple("flour", 100, "g", department=Department.PANTRY, order_index=1),
            ]
        )
        assert [(line.item_name, line.unit, line.quantity) for line in lines] == [
            ("Flour", "cup", Decimal("2")),
            ("flour", "g", Decimal("100")),
        ]

    def test_missing_unit_is_its_own_line(self, make_tuple):
        lines = aggregate_ingredients(
            [
                make_tuple("Egg", 2, None, order_index=0),
                make_tuple("egg", 1, "dozen", order_index=1),
                make_tuple("EGG", 1, None, order_index=2),
            ]
        )
        assert len(lines) == 2
        by_unit = {line.unit: line.quantity for line in lines}
        assert by_unit == {None: Decimal("3"), "dozen": Decimal("1")}

    def test_scaling_applies_before_summing(self, make_tuple):
        lines = aggregate_ingredients(
            [
                make_tuple("Onion", 2, "pc", recipe_id="a", meal_servings=6, recipe_servings=4),
                make_tuple("onion", 1, "pc", recipe_id="b"),
            ]
        )
        assert lines[0].quantity == Decimal("4")

    def test_missing_quantity_never_erases_known_one(self, make_tuple):
        first_missing = aggregate_ingredients(
            [
                make_tuple("Salt", None, "pinch", order_index=0),
                make_tuple("salt", 2, "pinch", order_index=1),
            ]
        )
        last_missing = aggregate_ingredients(
            [
                make_tuple("Salt", 2, "pinch", order_index=0),
                make_tuple("salt", None, "pinch", order_index=1),
            ]
        )
        assert first_missing[0].quantity == Decimal("2")
        assert last_missing[0].quantity == Decimal("2")

    def test_all_missing_quantities_stay_missing(self, make_tuple):
        lines = aggregate_ingredients(
            [
                make_tuple("Pepper", None, "to taste", order_index=0),
                make_tuple("pepper", None, "to taste", order_index=1),
            ]
        )
        assert lines[0].quantity is None

    def test_first_seen_supplies_department_and_recipe(self, make_tuple):
        """After the recipe-id ordering, the first tuple wins name, department and recipe."""
        lines = aggregate_ingredients(
            [
                make_tuple("butter", 1, "tbsp", department=Department.OTHER, recipe_id="b"),
                make_tuple("Butter", 2, "tbsp", department=Department.DAIRY, recipe_id="a"),
            ]
        )
        assert len(lines) == 1
        assert lines[0].item_name == "Butter"
        assert lines[0].department == Department.DAIRY
        assert lines[0].source_recipe_id == "a"
        assert lines[0].quantity == Decimal("3")

    def test_lines_ordered_by_department_then_name(self, make_tuple):
        lines = aggregate_ingredients(
            [
                make_tuple("Milk", 1, "l", department=Department.DAIRY, order_index=0),
                make_tuple("onion", 1, "pc", department=Department.PRODUCE, order_index=1),
                make_tuple("Apple", 3, "pc", department=Department.PRODUCE, order_index=2),
                make_tuple("Basil", 1, "bunch", department=Department.SPICES, order_index=3),
            ]
        )
        assert [line.item_name for line in lines] == ["Apple", "onion", "Milk", "Basil"]

    def test_line_count_equals_distinct_keys(self, make_tuple):
        tuples = [
            make_tuple(name, 1, unit, order_index=i)
            for i, (name, unit) in enumerate(
                [("a", "g"), ("A", "G"), ("b", "g"), ("a", None), ("b", " g ")]
            )
        ]
        # " g " trims to "g"
        assert len(aggregate_ingredients(tuples)) == 3

    def test_sums_match_input_totals(self, make_tuple):
        tuples = [make_tuple("Rice", q, "g", order_index=i) for i, q in enumerate([100, 250, 50])]
        (line,) = aggregate_ingredients(tuples)
        assert line.quantity == Decimal("400")

    def test_idempotent_and_order_independent(self, make_tuple):
        """Aggregating the same tuples in any input order gives the same lines."""
        tuples = [
            make_tuple("Garlic", 2, "clove", recipe_id="a", order_index=0),
            make_tuple("garlic", 3, "clove", recipe_id="b", order_index=0),
            make_tuple("Lemon", 1, "pc", recipe_id="a", order_index=1),
            make_tuple("Cream", 1, "cup", department=Department.DAIRY, recipe_id="b", order_index=1),
        ]
        first = aggregate_ingredients(tuples)
        assert aggregate_ingredients(tuples) == first
        assert aggregate_ingredients(list(reversed(tuples))) == first


class TestGroupByDepartment:
    """Tests for group_by_department."""

    def test_groups_in_walk_order(self):
        lines = [
            AggregatedLine("Milk", Decimal("1"), "l", Department.DAIRY, "r1"),
            AggregatedLine("Apple", Decimal("2"), "pc", Department.PRODUCE, "r1"),
            AggregatedLine("Pear", Decimal("2"), "pc", Department.PRODUCE, "r2"),
        ]
        grouped = group_by_department(lines)
        assert list(grouped) == [Department.PRODUCE, Department.DAIRY]
        assert [line.item_name for line in grouped[Department.PRODUCE]] == ["Apple", "Pear"]

    def test_accepts_department_strings(self):
        class Row:
            def __init__(self, department):
                self.department = department

        grouped = group_by_department([Row("other"), Row("meat")])
        assert list(grouped) == [Department.MEAT, Department.OTHER]
