"""Unit tests for RecipeService."""

from decimal import Decimal
from unittest.mock import AsyncMock

import pytest

from mealplanner.errors import NotFoundError, ValidationError
from mealplanner.recipes import (
    IngredientInput,
    InstructionInput,
    RecipeInput,
    RecipeService,
    validate_recipe,
)
from mealplanner.recipes.repository import clean_tags


def recipe_input(**overrides) -> RecipeInput:
    data = {
        "title": "Pancakes",
        "servings": 4,
        "serving_size": "2 pancakes",
        "prep_time_minutes": 10,
        "cook_time_minutes": 15,
        "tags": ["breakfast"],
        "ingredients": [
            IngredientInput(ingredient_name="Flour", quantity=Decimal("2"), unit="cup", department="pantry"),
            IngredientInput(ingredient_name="Milk", quantity=Decimal("1.5"), unit="cup", department="dairy"),
        ],
        "instructions": [InstructionInput(step_number=1, instruction="Whisk and fry.")],
    }
    data.update(overrides)
    return RecipeInput(**data)


@pytest.fixture
def repo():
    return AsyncMock()


@pytest.fixture
def service(repo, settings):
    return RecipeService(repo, settings)


class TestValidateRecipe:
    """Tests for recipe payload validation."""

    def test_valid(self):
        validate_recipe(recipe_input())

    @pytest.mark.parametrize(
        "overrides, message",
        [
            ({"title": "  "}, "title is required"),
            ({"title": "x" * 201}, "at most 200"),
            ({"servings": 0}, "servings"),
            ({"serving_size": ""}, "serving size"),
            ({"prep_time_minutes": -1}, "prep time"),
            ({"cook_time_minutes": -5}, "cook time"),
            ({"ingredients": []}, "at least one ingredient"),
            ({"instructions": []}, "at least one instruction"),
        ],
    )
    def test_rejects(self, overrides, message):
        with pytest.raises(ValidationError, match=message):
            validate_recipe(recipe_input(**overrides))

    def test_ingredient_rules(self):
        bad = [
            IngredientInput(ingredient_name="", quantity=Decimal("1"), unit="cup"),
            IngredientInput(ingredient_name="Salt", quantity=Decimal("0"), unit="tsp"),
            IngredientInput(ingredient_name="Salt", quantity=Decimal("1"), unit=" "),
            IngredientInput(ingredient_name="Salt", quantity=Decimal("1"), unit="tsp", department="deli"),
        ]
        for ingredient in bad:
            with pytest.raises(ValidationError, match="ingredient 0"):
                validate_recipe(recipe_input(ingredients=[ingredient]))

    def test_instruction_rules(self):
        for step in [
            InstructionInput(step_number=0, instruction="Stir."),
            InstructionInput(step_number=1, instruction="  "),
        ]:
            with pytest.raises(ValidationError, match="instruction 0"):
                validate_recipe(recipe_input(instructions=[step]))


class TestCleanTags:
    def test_trims_drops_blanks_and_duplicates(self):
        assert clean_tags([" quick ", "", "quick", "vegan"]) == ["quick", "vegan"]


class TestRecipeService:
    """Tests for RecipeService operations."""

    @pytest.mark.asyncio
    async def test_create(self, service, repo, make_recipe):
        repo.create_recipe.return_value = make_recipe()
        data = recipe_input()

        await service.create_recipe("user-1", data)

        repo.ensure_user.assert_awaited_once_with("user-1")
        repo.create_recipe.assert_awaited_once_with("user-1", data)
        repo.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_invalid_create_writes_nothing(self, service, repo):
        with pytest.raises(ValidationError):
            await service.create_recipe("user-1", recipe_input(servings=-1))
        repo.create_recipe.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_deleted_recipe_not_found(self, service, repo, make_recipe):
        repo.get_recipe.return_value = make_recipe(deleted=True)
        with pytest.raises(NotFoundError):
            await service.get_recipe("recipe-1")

    @pytest.mark.asyncio
    async def test_update_requires_owner(self, service, repo, make_recipe):
        repo.get_recipe.return_value = make_recipe(created_by="user-2")
        with pytest.raises(NotFoundError):
            await service.update_recipe("user-1", "recipe-1", recipe_input())
        repo.replace_recipe.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_delete_is_soft(self, service, repo, make_recipe):
        recipe = make_recipe()
        repo.get_recipe.return_value = recipe

        await service.delete_recipe("user-1", "recipe-1")

        repo.soft_delete.assert_awaited_once_with(recipe)
        repo.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_list_defaults(self, service, repo):
        repo.list_recipes.return_value = ([], 0)

        _, total, limit, offset = await service.list_recipes(tags=[" quick ", ""])

        repo.list_recipes.assert_awaited_once_with(None, ["quick"], "date_desc", 20, 0)
        assert (total, limit, offset) == (0, 20, 0)

    @pytest.mark.asyncio
    async def test_list_rejects_unknown_sort(self, service, repo):
        with pytest.raises(ValidationError, match="invalid sort"):
            await service.list_recipes(sort="popularity")
        repo.list_recipes.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_create_with_known_nutrition_id(self, service, repo, make_recipe):
        repo.known_nutrition_ids.return_value = {"n-flour"}
        repo.create_recipe.return_value = make_recipe()
        flour = IngredientInput(
            ingredient_name="Flour", quantity=Decimal("200"), unit="g", nutrition_id="n-flour"
        )

        await service.create_recipe("user-1", recipe_input(ingredients=[flour]))

        repo.known_nutrition_ids.assert_awaited_once_with({"n-flour"})
        repo.create_recipe.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_unknown_nutrition_id_writes_nothing(self, service, repo):
        repo.known_nutrition_ids.return_value = set()
        flour = IngredientInput(
            ingredient_name="Flour", quantity=Decimal("200"), unit="g", nutrition_id="n-gone"
        )

        with pytest.raises(ValidationError, match="ingredient 0: unknown nutrition_id 'n-gone'"):
            await service.create_recipe("user-1", recipe_input(ingredients=[flour]))
        repo.create_recipe.assert_not_awaited()
        repo.commit.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unlinked_ingredients_skip_nutrition_lookup(self, service, repo, make_recipe):
        repo.create_recipe.return_value = make_recipe()

        await service.create_recipe("user-1", recipe_input())

        repo.known_nutrition_ids.assert_not_awaited()
