"""Row conversion and error mapping shared by the Supabase repositories."""

from datetime import datetime
from decimal import Decimal
from typing import Any

import httpx
from postgrest.exceptions import APIError

from matelli_store.domain.errors import DuplicateOrderIdError, PersistenceError
from matelli_store.domain.meals import Meal, parse_category

UNIQUE_VIOLATION = "23505"


def execute(query: Any, action: str) -> Any:
    """Run a PostgREST query, mapping store failures to PersistenceError."""
    try:
        return query.execute()
    except APIError as exc:
        if exc.code == UNIQUE_VIOLATION:
            raise DuplicateOrderIdError(f"Failed to {action}: {exc.message}") from exc
        raise PersistenceError(f"Failed to {action}: {exc.message}") from exc
    except httpx.HTTPError as exc:
        raise PersistenceError(f"Failed to {action}: {exc}") from exc


def meal_row(meal: Meal) -> dict[str, object]:
    """Serialize a meal into a JSON-safe document."""
    return {
        "id": meal.id,
        "name": meal.name,
        "description": meal.description,
        "category": meal.category.value,
        "image": meal.image,
        "tags": list(meal.tags),
        "price": str(meal.price),
        "weight": meal.weight,
        "ingredients": [
            {"name": name, "measure": measure}
            for name, measure in meal.ingredients.items()
        ],
    }


def parse_meal(row: dict[str, Any]) -> Meal:
    """Parse a meal document into a domain model."""
    return Meal(
        id=str(row["id"]),
        name=str(row.get("name", "")),
        description=str(row.get("description") or ""),
        category=parse_category(row.get("category", "")),
        image=str(row.get("image") or ""),
        tags=tuple(row.get("tags") or ()),
        price=Decimal(str(row.get("price", "0"))),
        weight=str(row.get("weight") or ""),
        ingredients=_parse_ingredients(row.get("ingredients")),
    )


def parse_timestamp(value: object) -> datetime | None:
    """Parse an ISO timestamp column, tolerating nulls."""
    if isinstance(value, str) and value:
        return datetime.fromisoformat(value)
    return None


def _parse_ingredients(value: object) -> dict[str, str]:
    # Stored as a list of pairs so the catalog order survives JSONB key sorting.
    if isinstance(value, list):
        return {
            str(item["name"]): str(item.get("measure", ""))
            for item in value
            if isinstance(item, dict) and item.get("name")
        }
    if isinstance(value, dict):
        return {str(key): str(measure) for key, measure in value.items()}
    return {}
