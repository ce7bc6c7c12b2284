"""Cookbooks: named collections of recipes."""

from mealplanner.cookbooks.repository import CookbookRepository
from mealplanner.cookbooks.service import CookbookService, cookbook_recipes

__all__ = ["CookbookRepository", "CookbookService", "cookbook_recipes"]
