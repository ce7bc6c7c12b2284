"""SQLAlchemy database models."""

from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal

from sqlalchemy import (
    Boolean,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from mealplanner.database import Base

# Quantity columns are Numeric(14, 4); values are rounded to this step before they are stored.
QUANTITY_STEP = Decimal("0.0001")


def stored_quantity(quantity: Decimal | None) -> Decimal | None:
    """Round a quantity the way a Numeric(14, 4) column stores it."""
    if quantity is None:
        return None
    return quantity.quantize(QUANTITY_STEP, rounding=ROUND_HALF_UP)


class User(Base):
    """User account. Credentials are managed by the authentication service."""

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    email: Mapped[str] = mapped_column(String, unique=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    recipes: Mapped[list["Recipe"]] = relationship("Recipe", back_populates="created_by")
    grocery_lists: Mapped[list["GroceryList"]] = relationship(
        "GroceryList", back_populates="created_by"
    )


class Recipe(Base):
    """Recipe with ingredients and instructions."""

    __tablename__ = "recipes"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    created_by_user_id: Mapped[str] = mapped_column(String, ForeignKey("users.id"))
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    image_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    servings: Mapped[int] = mapped_column(Integer, nullable=False)
    serving_size: Mapped[str] = mapped_column(String(100), nullable=False)
    prep_time_minutes: Mapped[int | None] = mapped_column(Integer, nullable=True)
    cook_time_minutes: Mapped[int | None] = mapped_column(Integer, nullable=True)
    total_time_minutes: Mapped[int] = mapped_column(Integer, default=0)
    storage_notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    source: Mapped[str | None] = mapped_column(Text, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )
    deleted_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    created_by: Mapped["User"] = relationship("User", back_populates="recipes")
    ingredients: Mapped[list["RecipeIngredient"]] = relationship(
        "RecipeIngredient",
        back_populates="recipe",
        order_by="RecipeIngredient.order_index",
        cascade="all, delete-orphan",
    )
    instructions: Mapped[list["RecipeInstruction"]] = relationship(
        "RecipeInstruction",
        back_populates="recipe",
        order_by="RecipeInstruction.step_number",
        cascade="all, delete-orphan",
    )
    tags: Mapped[list["RecipeTag"]] = relationship(
        "RecipeTag",
        back_populates="recipe",
        order_by="RecipeTag.id",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        Index("idx_recipes_created_by", "created_by_user_id"),
        Index("idx_recipes_deleted_at", "deleted_at"),
    )

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None


class RecipeIngredient(Base):
    """One ingredient line of a recipe."""

    __tablename__ = "recipe_ingredients"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    recipe_id: Mapped[str] = mapped_column(String, ForeignKey("recipes.id", ondelete="CASCADE"))
    nutrition_id: Mapped[str | None] = mapped_column(
        String, ForeignKey("nutrition_cache.id", ondelete="SET NULL"), nullable=True
    )
    ingredient_name: Mapped[str] = mapped_column(String(200), nullable=False)
    quantity: Mapped[Decimal | None] = mapped_column(Numeric(14, 4), nullable=True)
    unit: Mapped[str | None] = mapped_column(String(50), nullable=True)
    department: Mapped[str] = mapped_column(String(20), nullable=False, default="other")
    order_index: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    recipe: Mapped["Recipe"] = relationship("Recipe", back_populates="ingredients")

    __table_args__ = (Index("idx_recipe_ingredients_recipe_id", "recipe_id"),)


class RecipeInstruction(Base):
    """A numbered cooking step."""

    __tablename__ = "recipe_instructions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    recipe_id: Mapped[str] = mapped_column(String, ForeignKey("recipes.id", ondelete="CASCADE"))
    step_number: Mapped[int] = mapped_column(Integer, nullable=False)
    instruction: Mapped[str] = mapped_column(Text, nullable=False)

    recipe: Mapped["Recipe"] = relationship("Recipe", back_populates="instructions")


class RecipeTag(Base):
    """A free-form label on a recipe."""

    __tablename__ = "recipe_tags"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    recipe_id: Mapped[str] = mapped_column(String, ForeignKey("recipes.id", ondelete="CASCADE"))
    tag_name: Mapped[str] = mapped_column(String(50), nullable=False)

    recipe: Mapped["Recipe"] = relationship("Recipe", back_populates="tags")

    __table_args__ = (Index("idx_recipe_tags_tag_name", "tag_name"),)


class Cookbook(Base):
    """A user's named collection of recipes."""

    __tablename__ = "cookbooks"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    created_by_user_id: Mapped[str] = mapped_column(String, ForeignKey("users.id"))
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    entries: Mapped[list["CookbookRecipe"]] = relationship(
        "CookbookRecipe",
        back_populates="cookbook",
        order_by="CookbookRecipe.added_at",
        cascade="all, delete-orphan",
    )

    __table_args__ = (Index("idx_cookbooks_created_by", "created_by_user_id"),)


class CookbookRecipe(Base):
    """Join table for cookbooks and recipes."""

    __tablename__ = "cookbook_recipes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    cookbook_id: Mapped[str] = mapped_column(
        String, ForeignKey("cookbooks.id", ondelete="CASCADE")
    )
    recipe_id: Mapped[str] = mapped_column(String, ForeignKey("recipes.id"))
    added_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    cookbook: Mapped["Cookbook"] = relationship("Cookbook", back_populates="entries")
    recipe: Mapped["Recipe"] = relationship("Recipe")

    __table_args__ = (UniqueConstraint("cookbook_id", "recipe_id", name="uq_cookbook_recipe"),)


class MealPlan(Base):
    """The meals scheduled for one calendar date."""

    __tablename__ = "meal_plans"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    plan_date: Mapped[date] = mapped_column(Date, nullable=False, unique=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    meals: Mapped[list["MealPlanRecipe"]] = relationship(
        "MealPlanRecipe",
        back_populates="plan",
        order_by="MealPlanRecipe.order_index",
        cascade="all, delete-orphan",
    )


class MealPlanRecipe(Base):
    """A meal slot: a recipe with servings, or an out-of-kitchen marker."""

    __tablename__ = "meal_plan_recipes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    meal_plan_id: Mapped[str] = mapped_column(
        String, ForeignKey("meal_plans.id", ondelete="CASCADE")
    )
    meal_type: Mapped[str] = mapped_column(String(20), nullable=False)
    recipe_id: Mapped[str | None] = mapped_column(
        String, ForeignKey("recipes.id"), nullable=True
    )
    servings: Mapped[int | None] = mapped_column(Integer, nullable=True)
    out_of_kitchen: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    order_index: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    plan: Mapped["MealPlan"] = relationship("MealPlan", back_populates="meals")
    recipe: Mapped["Recipe"] = relationship("Recipe")

    __table_args__ = (Index("idx_meal_plan_recipes_plan_id", "meal_plan_id"),)


class GroceryList(Base):
    """Grocery list generated for an inclusive date range."""

    __tablename__ = "grocery_lists"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    created_by_user_id: Mapped[str] = mapped_column(String, ForeignKey("users.id"))
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    created_by: Mapped["User"] = relationship("User", back_populates="grocery_lists")
    items: Mapped[list["GroceryListItem"]] = relationship(
        "GroceryListItem",
        back_populates="grocery_list",
        order_by="GroceryListItem.id",
        cascade="all, delete-orphan",
    )

    __table_args__ = (Index("idx_grocery_lists_created_by", "created_by_user_id"),)


class GroceryListItem(Base):
    """A line on a grocery list, generated or added by hand."""

    __tablename__ = "grocery_list_items"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    grocery_list_id: Mapped[str] = mapped_column(
        String, ForeignKey("grocery_lists.id", ondelete="CASCADE")
    )
    item_name: Mapped[str] = mapped_column(String(200), nullable=False)
    quantity: Mapped[Decimal | None] = mapped_column(Numeric(14, 4), nullable=True)
    unit: Mapped[str | None] = mapped_column(String(50), nullable=True)
    department: Mapped[str] = mapped_column(String(20), nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="pending")
    is_manual: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    source_recipe_id: Mapped[str | None] = mapped_column(
        String, ForeignKey("recipes.id"), nullable=True
    )

    grocery_list: Mapped["GroceryList"] = relationship("GroceryList", back_populates="items")

    __table_args__ = (Index("idx_grocery_list_items_list_id", "grocery_list_id"),)


class NutritionCache(Base):
    """Macros per 100 g of a food, copied from USDA FoodData Central."""

    __tablename__ = "nutrition_cache"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    usda_fdc_id: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    food_name: Mapped[str] = mapped_column(String(300), nullable=False)
    calories: Mapped[float | None] = mapped_column(Float, nullable=True)
    protein_g: Mapped[float | None] = mapped_column(Float, nullable=True)
    carbs_g: Mapped[float | None] = mapped_column(Float, nullable=True)
    fiber_g: Mapped[float | None] = mapped_column(Float, nullable=True)
    fat_g: Mapped[float | None] = mapped_column(Float, nullable=True)
    cached_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    __table_args__ = (Index("idx_nutrition_cache_food_name", "food_name"),)
