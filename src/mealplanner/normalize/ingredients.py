"""Ingredient identity normalization.

Two normalizations live here, and they differ:

- ``normalization_key`` decides which grocery list line an ingredient lands on.
  It only trims and lower-cases; "cup" and "cups" stay separate lines.
- ``normalize_for_matching`` is the laxer form used by recipe recommendations.
  It also strips simple English plurals so "tomatoes" matches "tomato".
"""

from typing import NamedTuple


class NormalizationKey(NamedTuple):
    """Identity of a shopping item: trimmed, lower-cased name and unit.

    A missing unit stays ``None`` so it never collides with ``""`` or a named unit.
    """

    name: str
    unit: str | None


def normalize_text(value: str) -> str:
    """Trim surrounding whitespace and lower-case."""
    return value.strip().lower()


def normalization_key(name: str, unit: str | None) -> NormalizationKey:
    """Derive the grocery aggregation key for an ingredient."""
    return NormalizationKey(
        name=normalize_text(name),
        unit=normalize_text(unit) if unit is not None else None,
    )


def normalize_for_matching(name: str) -> str:
    """
    Normalize an ingredient name for recommendation matching.

    Lower-cases, trims, then strips one plural suffix:
    "ies" becomes "y", otherwise "es" is dropped, otherwise a trailing "s"
    is dropped unless the word ends in "ss".
    """
    normalized = normalize_text(name)

    if normalized.endswith("ies"):
        return normalized[: -len("ies")] + "y"
    if normalized.endswith("es"):
        return normalized[: -len("es")]
    if normalized.endswith("s") and not normalized.endswith("ss"):
        return normalized[:-1]
    return normalized
