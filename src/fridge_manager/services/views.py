"""Derived views over the working set: expiry buckets, recipe feasibility, search."""

import math
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta

from fridge_manager.domain.inventory import Food, Ingredient, Recipe
from fridge_manager.domain.session import InventorySession
from fridge_manager.domain.views import DashboardSummary, IngredientStatus

ALL_CATEGORIES = "all"
DEFAULT_WINDOW_DAYS = 3
DEFAULT_PREVIEW_LIMIT = 4

_SECONDS_PER_DAY = timedelta(days=1).total_seconds()


def days_until_expiry(food: Food, today: date | datetime) -> int:
    """Return whole days until a food expires.

    Zero means it expires today and negative values mean it already expired.
    When given a datetime, the fractional remainder until midnight of the
    expiry date is rounded up.
    """
    if isinstance(today, datetime):
        expiry = datetime.combine(food.expiry_date, time.min, tzinfo=today.tzinfo)
        return math.ceil((expiry - today).total_seconds() / _SECONDS_PER_DAY)
    return (food.expiry_date - today).days


def expiring_soon(
    foods: Sequence[Food],
    today: date | datetime,
    window_days: int = DEFAULT_WINDOW_DAYS,
) -> list[Food]:
    """Return foods expiring between today and the end of the window."""
    return [
        food for food in foods if 0 <= days_until_expiry(food, today) <= window_days
    ]


def expired(foods: Sequence[Food], today: date | datetime) -> list[Food]:
    """Return foods whose expiry date has passed."""
    return [food for food in foods if days_until_expiry(food, today) < 0]


def _matches(food: Food, ingredient: Ingredient) -> bool:
    return ingredient.name.lower() in food.name.lower()


def is_recipe_available(
    recipe: Recipe, foods: Sequence[Food], strict: bool = False
) -> bool:
    """Return True when every ingredient can be covered by some food.

    By default each ingredient is checked on its own, so one food can cover
    several ingredients at once. With ``strict`` the quantity an ingredient
    takes from a food is no longer available to later ingredients of the
    same recipe.
    """
    if not strict:
        return all(
            any(_matches(food, ing) and food.quantity >= ing.quantity for food in foods)
            for ing in recipe.ingredients
        )
    remaining = [food.quantity for food in foods]
    for ingredient in recipe.ingredients:
        for index, food in enumerate(foods):
            if _matches(food, ingredient) and remaining[index] >= ingredient.quantity:
                remaining[index] -= ingredient.quantity
                break
        else:
            return False
    return True


def available_recipes(
    recipes: Sequence[Recipe], foods: Sequence[Food], strict: bool = False
) -> list[Recipe]:
    """Return recipes that can be made from the current foods."""
    return [recipe for recipe in recipes if is_recipe_available(recipe, foods, strict)]


def ingredient_statuses(
    recipe: Recipe, foods: Sequence[Food]
) -> list[IngredientStatus]:
    """Match each ingredient to the first food containing its name."""
    statuses: list[IngredientStatus] = []
    for ingredient in recipe.ingredients:
        match = next((food for food in foods if _matches(food, ingredient)), None)
        statuses.append(
            IngredientStatus(
                ingredient=ingredient,
                matched_food=match,
                has_enough=match is not None and match.quantity >= ingredient.quantity,
            )
        )
    return statuses


def filtered_foods(
    foods: Sequence[Food], search_term: str = "", category: str = ALL_CATEGORIES
) -> list[Food]:
    """Return foods matching a name search and a category filter."""
    needle = search_term.lower()
    return [
        food
        for food in foods
        if needle in food.name.lower()
        and (category == ALL_CATEGORIES or food.category == category)
    ]


def dashboard(  # noqa: PLR0913
    foods: Sequence[Food],
    recipes: Sequence[Recipe],
    today: date | datetime,
    window_days: int = DEFAULT_WINDOW_DAYS,
    preview_limit: int = DEFAULT_PREVIEW_LIMIT,
    strict: bool = False,
) -> DashboardSummary:
    """Summarize the inventory for the landing screen."""
    available = available_recipes(recipes, foods, strict)
    return DashboardSummary(
        total_foods=len(foods),
        expiring_soon=expiring_soon(foods, today, window_days),
        expired=expired(foods, today),
        available_recipes=available,
        recipe_preview=available[:preview_limit],
    )


@dataclass
class InventoryViews:
    """Derived views bound to a session and the configured defaults."""

    session: InventorySession
    window_days: int = DEFAULT_WINDOW_DAYS
    strict: bool = False
    today_provider: Callable[[], date] = field(default=date.today)

    def expiring_soon(self, today: date | None = None) -> list[Food]:
        """Foods expiring within the configured window."""
        return expiring_soon(
            self.session.foods, today or self.today_provider(), self.window_days
        )

    def expired(self, today: date | None = None) -> list[Food]:
        """Foods already past their expiry date."""
        return expired(self.session.foods, today or self.today_provider())

    def available_recipes(self) -> list[Recipe]:
        """Recipes makeable with the current foods."""
        return available_recipes(self.session.recipes, self.session.foods, self.strict)

    def filtered_foods(
        self, search_term: str = "", category: str = ALL_CATEGORIES
    ) -> list[Food]:
        """Foods matching the search box and category selector."""
        return filtered_foods(self.session.foods, search_term, category)

    def dashboard(self, today: date | None = None) -> DashboardSummary:
        """Dashboard summary for the current working set."""
        return dashboard(
            self.session.foods,
            self.session.recipes,
            today or self.today_provider(),
            window_days=self.window_days,
            strict=self.strict,
        )
