"""Domain models for foods and recipes."""

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum

FOOD_CATEGORIES = (
    "dairy",
    "vegetables",
    "fruit",
    "meat",
    "fish",
    "grains",
    "preserves",
    "condiments",
    "beverages",
    "other",
)
FOOD_UNITS = ("unit", "kg", "g", "L", "mL")
RECIPE_UNITS = (*FOOD_UNITS, "cup", "tablespoon")

DEFAULT_CATEGORY = "other"
DEFAULT_UNIT = "unit"


class Collection(str, Enum):
    """Named collections kept by the persistence gateway."""

    FOODS = "foods"
    RECIPES = "recipes"


@dataclass(frozen=True)
class Food:
    """A perishable item in the inventory."""

    id: str
    name: str
    category: str
    quantity: float
    unit: str
    expiry_date: date
    notes: str
    date_added: datetime


@dataclass(frozen=True)
class Ingredient:
    """An ingredient line embedded in a recipe."""

    name: str
    quantity: float
    unit: str


@dataclass(frozen=True)
class Recipe:
    """A user-authored recipe."""

    id: str
    name: str
    description: str
    instructions: str
    cooking_time: str
    servings: int
    ingredients: tuple[Ingredient, ...]
    date_created: datetime


def collection_path(collection: Collection) -> str:
    """Return the gateway path serving a collection."""
    return f"/{collection.value}-collection"
