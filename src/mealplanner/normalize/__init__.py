"""Normalize ingredient names and units into comparable identities."""

from mealplanner.normalize.ingredients import (
    NormalizationKey,
    normalization_key,
    normalize_for_matching,
    normalize_text,
)

__all__ = [
    "NormalizationKey",
    "normalization_key",
    "normalize_for_matching",
    "normalize_text",
]
