"""Recipe write payloads, shared by the router and the service."""

from decimal import Decimal

from pydantic import BaseModel, Field


class IngredientInput(BaseModel):
    """One ingredient line of a recipe being written."""

    ingredient_name: str
    quantity: Decimal
    unit: str
    department: str = "other"
    nutrition_id: str | None = None


class InstructionInput(BaseModel):
    """One numbered step of a recipe being written."""

    step_number: int
    instruction: str


class RecipeInput(BaseModel):
    """Full content of a recipe for create and update.

    Business rules are checked by the service so they surface as 400s.
    """

    title: str
    image_url: str | None = None
    servings: int
    serving_size: str
    prep_time_minutes: int | None = None
    cook_time_minutes: int | None = None
    storage_notes: str | None = None
    source: str | None = None
    notes: str | None = None
    tags: list[str] = Field(default_factory=list)
    ingredients: list[IngredientInput] = Field(default_factory=list)
    instructions: list[InstructionInput] = Field(default_factory=list)
