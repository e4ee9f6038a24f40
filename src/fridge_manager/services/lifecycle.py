"""Creation, edit and removal of food and recipe records."""

import logging
import math
import secrets
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from datetime import UTC, date, datetime
from typing import Protocol

from fridge_manager.domain.errors import NotFoundError, ValidationError
from fridge_manager.domain.inventory import (
    DEFAULT_CATEGORY,
    DEFAULT_UNIT,
    FOOD_CATEGORIES,
    FOOD_UNITS,
    RECIPE_UNITS,
    Collection,
    Food,
    Ingredient,
    Recipe,
)
from fridge_manager.domain.session import InventorySession, MutationSource

_logger = logging.getLogger(__name__)

_MAX_ID_ATTEMPTS = 16

IdGenerator = Callable[[], str]


class MutationListener(Protocol):
    """Receives every committed change to a collection."""

    def on_mutation(
        self,
        collection: Collection,
        records: Sequence[Food] | Sequence[Recipe],
        source: MutationSource = MutationSource.USER,
    ) -> bool:
        """Handle a changed collection."""


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class TimestampIdGenerator:
    """Generates `<millis hex>-<random hex>` ids that sort by creation time."""

    clock: Callable[[], datetime] = _utcnow
    _last_millis: int = field(default=0, init=False)

    def __call__(self) -> str:
        millis = max(int(self.clock().timestamp() * 1000), self._last_millis)
        self._last_millis = millis
        return f"{millis:011x}-{secrets.token_hex(4)}"


@dataclass
class RecordLifecycleManager:
    """Applies user actions to the working set and reports each change."""

    session: InventorySession
    listener: MutationListener
    id_generator: IdGenerator = field(default_factory=TimestampIdGenerator)
    clock: Callable[[], datetime] = _utcnow

    def create_food(self, payload: Mapping[str, object]) -> Food:
        """Validate a food form and append the new record."""
        fields = _food_fields(payload)
        food = Food(
            id=self._new_id(Collection.FOODS),
            date_added=self.clock(),
            **fields,
        )
        self.session.foods.append(food)
        self._notify(Collection.FOODS)
        return food

    def update_food(self, food_id: str, payload: Mapping[str, object]) -> Food:
        """Replace a food's mutable fields, keeping id, creation time and position."""
        fields = _food_fields(payload)
        index = _index_of(self.session.foods, food_id)
        if index is None:
            raise NotFoundError(Collection.FOODS.value, food_id)
        current = self.session.foods[index]
        updated = Food(id=current.id, date_added=current.date_added, **fields)
        self.session.foods[index] = updated
        self._notify(Collection.FOODS)
        return updated

    def delete_food(self, food_id: str) -> bool:
        """Remove a food by id; unknown ids are ignored."""
        index = _index_of(self.session.foods, food_id)
        if index is None:
            return False
        del self.session.foods[index]
        self._notify(Collection.FOODS)
        return True

    def create_recipe(self, payload: Mapping[str, object]) -> Recipe:
        """Validate a recipe form and append the new record."""
        fields = _recipe_fields(payload)
        recipe = Recipe(
            id=self._new_id(Collection.RECIPES),
            date_created=self.clock(),
            **fields,
        )
        self.session.recipes.append(recipe)
        self._notify(Collection.RECIPES)
        return recipe

    def update_recipe(self, recipe_id: str, payload: Mapping[str, object]) -> Recipe:
        """Replace a recipe's mutable fields, keeping id, creation time and position."""
        fields = _recipe_fields(payload)
        index = _index_of(self.session.recipes, recipe_id)
        if index is None:
            raise NotFoundError(Collection.RECIPES.value, recipe_id)
        current = self.session.recipes[index]
        updated = Recipe(id=current.id, date_created=current.date_created, **fields)
        self.session.recipes[index] = updated
        self._notify(Collection.RECIPES)
        return updated

    def delete_recipe(self, recipe_id: str) -> bool:
        """Remove a recipe by id; unknown ids are ignored."""
        index = _index_of(self.session.recipes, recipe_id)
        if index is None:
            return False
        del self.session.recipes[index]
        self._notify(Collection.RECIPES)
        return True

    def _new_id(self, collection: Collection) -> str:
        issued = self.session.issued_ids[collection]
        for _ in range(_MAX_ID_ATTEMPTS):
            candidate = self.id_generator()
            if candidate not in issued:
                issued.add(candidate)
                return candidate
            _logger.warning("Generated id %s already used in %s", candidate, collection.value)
        raise RuntimeError(f"Could not generate a unique {collection.value} id")

    def _notify(self, collection: Collection) -> None:
        self.listener.on_mutation(
            collection, self.session.records(collection), MutationSource.USER
        )


def _index_of(records: Sequence[Food] | Sequence[Recipe], record_id: str) -> int | None:
    for index, record in enumerate(records):
        if record.id == record_id:
            return index
    return None


def _food_fields(payload: Mapping[str, object]) -> dict[str, object]:
    return {
        "name": _required_text(payload, "name"),
        "category": _choice(payload.get("category"), FOOD_CATEGORIES, DEFAULT_CATEGORY),
        "quantity": _coerce_quantity(payload.get("quantity")),
        "unit": _choice(payload.get("unit"), FOOD_UNITS, DEFAULT_UNIT),
        "expiry_date": _parse_expiry(payload.get("expiry_date")),
        "notes": _optional_text(payload.get("notes")),
    }


def _recipe_fields(payload: Mapping[str, object]) -> dict[str, object]:
    return {
        "name": _required_text(payload, "name"),
        "description": _optional_text(payload.get("description")),
        "instructions": _required_text(payload, "instructions"),
        "cooking_time": _optional_text(payload.get("cooking_time")),
        "servings": _coerce_servings(payload.get("servings")),
        "ingredients": _parse_ingredients(payload.get("ingredients")),
    }


def _required_text(payload: Mapping[str, object], name: str) -> str:
    value = _optional_text(payload.get(name))
    if not value:
        raise ValidationError(name, f"{name} is required")
    return value


def _optional_text(raw: object) -> str:
    if raw is None:
        return ""
    return str(raw).strip()


def _choice(raw: object, allowed: Sequence[str], default: str) -> str:
    value = _optional_text(raw)
    return value if value in allowed else default


def _coerce_quantity(raw: object) -> float:
    try:
        value = float(raw)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return 1.0
    if not math.isfinite(value) or value <= 0:
        return 1.0
    return value


def _coerce_servings(raw: object) -> int:
    try:
        value = int(float(raw))  # type: ignore[arg-type]
    except (TypeError, ValueError, OverflowError):
        return 1
    return value if value > 0 else 1


def _parse_expiry(raw: object) -> date:
    if isinstance(raw, datetime):
        return raw.date()
    if isinstance(raw, date):
        return raw
    text = _optional_text(raw)
    if not text:
        raise ValidationError("expiry_date", "expiry_date is required")
    try:
        return date.fromisoformat(text)
    except ValueError as exc:
        raise ValidationError(
            "expiry_date", f"expiry_date must be YYYY-MM-DD, got {text!r}"
        ) from exc


def _parse_ingredients(raw: object) -> tuple[Ingredient, ...]:
    if raw is None:
        return ()
    if isinstance(raw, (str, bytes)) or not isinstance(raw, Sequence):
        raise ValidationError("ingredients", "ingredients must be a list")
    ingredients: list[Ingredient] = []
    for item in raw:
        if isinstance(item, Ingredient):
            fields: Mapping[str, object] = {
                "name": item.name,
                "quantity": item.quantity,
                "unit": item.unit,
            }
        elif isinstance(item, Mapping):
            fields = item
        else:
            raise ValidationError("ingredients", "each ingredient must be a mapping")
        name = _optional_text(fields.get("name"))
        if not name:
            continue
        ingredients.append(
            Ingredient(
                name=name,
                quantity=_coerce_quantity(fields.get("quantity")),
                unit=_choice(fields.get("unit"), RECIPE_UNITS, DEFAULT_UNIT),
            )
        )
    return tuple(ingredients)
