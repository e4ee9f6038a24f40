"""Wire codec for persisted food and recipe records."""

from datetime import date, datetime

from fridge_manager.domain.errors import SerializationError
from fridge_manager.domain.inventory import Collection, Food, Ingredient, Recipe


def dump_food(food: Food) -> dict[str, object]:
    """Encode a food as a JSON-ready record."""
    return {
        "id": food.id,
        "name": food.name,
        "category": food.category,
        "quantity": food.quantity,
        "unit": food.unit,
        "expiryDate": food.expiry_date.isoformat(),
        "notes": food.notes,
        "dateAdded": food.date_added.isoformat(),
    }


def dump_recipe(recipe: Recipe) -> dict[str, object]:
    """Encode a recipe as a JSON-ready record."""
    return {
        "id": recipe.id,
        "name": recipe.name,
        "description": recipe.description,
        "instructions": recipe.instructions,
        "cookingTime": recipe.cooking_time,
        "servings": recipe.servings,
        "ingredients": [
            {
                "name": ingredient.name,
                "quantity": ingredient.quantity,
                "unit": ingredient.unit,
            }
            for ingredient in recipe.ingredients
        ],
        "dateCreated": recipe.date_created.isoformat(),
    }


def parse_food(row: dict[str, object]) -> Food:
    """Decode a persisted food record."""
    try:
        return Food(
            id=_parse_id(row),
            name=str(row["name"]),
            category=str(row.get("category", "other")),
            quantity=float(row.get("quantity", 1)),
            unit=str(row.get("unit", "unit")),
            expiry_date=_parse_date(row["expiryDate"]),
            notes=str(row.get("notes") or ""),
            date_added=_parse_timestamp(row["dateAdded"]),
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise SerializationError(f"Malformed food record: {exc}") from exc


def parse_recipe(row: dict[str, object]) -> Recipe:
    """Decode a persisted recipe record."""
    try:
        raw_ingredients = row.get("ingredients") or []
        if not isinstance(raw_ingredients, list):
            raise TypeError("ingredients must be a list")
        return Recipe(
            id=_parse_id(row),
            name=str(row["name"]),
            description=str(row.get("description") or ""),
            instructions=str(row.get("instructions") or ""),
            cooking_time=str(row.get("cookingTime") or ""),
            servings=int(row.get("servings", 1)),
            ingredients=tuple(
                Ingredient(
                    name=str(item["name"]),
                    quantity=float(item.get("quantity", 1)),
                    unit=str(item.get("unit", "unit")),
                )
                for item in raw_ingredients
            ),
            date_created=_parse_timestamp(row["dateCreated"]),
        )
    except (KeyError, TypeError, ValueError, AttributeError) as exc:
        raise SerializationError(f"Malformed recipe record: {exc}") from exc


def dump_records(
    collection: Collection, records: list[Food] | list[Recipe]
) -> list[dict[str, object]]:
    """Encode a whole collection."""
    if collection is Collection.FOODS:
        return [dump_food(record) for record in records]
    return [dump_recipe(record) for record in records]


def parse_records(
    collection: Collection, rows: object
) -> list[Food] | list[Recipe]:
    """Decode a whole collection, rejecting anything but a list of objects."""
    if not isinstance(rows, list):
        raise SerializationError(f"Expected a list of {collection.value}")
    for row in rows:
        if not isinstance(row, dict):
            raise SerializationError(f"Expected {collection.value} records as objects")
    if collection is Collection.FOODS:
        return [parse_food(row) for row in rows]
    return [parse_recipe(row) for row in rows]


def _parse_id(row: dict[str, object]) -> str:
    raw = row["id"]
    if raw is None or raw == "":
        raise ValueError("id is empty")
    # Older data carries numeric ids.
    return str(raw)


def _parse_date(raw: object) -> date:
    if isinstance(raw, datetime):
        return raw.date()
    if isinstance(raw, date):
        return raw
    return date.fromisoformat(str(raw)[:10])


def _parse_timestamp(raw: object) -> datetime:
    if isinstance(raw, datetime):
        return raw
    return datetime.fromisoformat(str(raw))
