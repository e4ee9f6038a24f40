"""Domain models for derived inventory views."""

from dataclasses import dataclass

from fridge_manager.domain.inventory import Food, Ingredient, Recipe


@dataclass(frozen=True)
class IngredientStatus:
    """Availability of a single recipe ingredient."""

    ingredient: Ingredient
    matched_food: Food | None
    has_enough: bool


@dataclass(frozen=True)
class DashboardSummary:
    """Counts and lists shown on the inventory dashboard."""

    total_foods: int
    expiring_soon: list[Food]
    expired: list[Food]
    available_recipes: list[Recipe]
    recipe_preview: list[Recipe]
