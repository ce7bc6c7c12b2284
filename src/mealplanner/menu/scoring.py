"""
Recommendation scoring.

A recipe's match score is the percentage of its ingredient lines whose
matching-normalized name is among the ingredients the user has on hand.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field

from mealplanner.models import Recipe
from mealplanner.normalize import normalize_for_matching


@dataclass
class RecipeRecommendation:
    """A candidate recipe with how well it matches the available ingredients."""

    recipe: Recipe
    match_score: float
    matched_ingredients: list[str] = field(default_factory=list)
    missing_ingredients: list[str] = field(default_factory=list)


def available_set(ingredients: Iterable[str]) -> set[str]:
    """Normalize the user's ingredient names for lookup."""
    return {normalize_for_matching(name) for name in ingredients}


def score_recipe(recipe: Recipe, available: set[str]) -> RecipeRecommendation:
    """
    Score one recipe against a set of matching-normalized ingredient names.

    A recipe without ingredients scores exactly 0 with empty matched and
    missing lists. Otherwise each ingredient line lands in exactly one of the
    two lists under its original spelling.
    """
    if not recipe.ingredients:
        return RecipeRecommendation(recipe=recipe, match_score=0.0)

    matched: list[str] = []
    missing: list[str] = []
    for ingredient in recipe.ingredients:
        if normalize_for_matching(ingredient.ingredient_name) in available:
            matched.append(ingredient.ingredient_name)
        else:
            missing.append(ingredient.ingredient_name)

    score = len(matched) / len(recipe.ingredients) * 100
    return RecipeRecommendation(
        recipe=recipe,
        match_score=score,
        matched_ingredients=matched,
        missing_ingredients=missing,
    )


def rank_recommendations(
    recipes: Iterable[Recipe], ingredients: Iterable[str]
) -> list[RecipeRecommendation]:
    """Score every candidate and order by score, highest first.

    Equal scores keep their candidate order.
    """
    available = available_set(ingredients)
    scored = [score_recipe(recipe, available) for recipe in recipes]
    return sorted(scored, key=lambda r: r.match_score, reverse=True)
