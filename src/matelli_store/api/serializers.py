"""JSON views of domain objects for API responses."""

from decimal import Decimal

from matelli_store.domain.meals import Meal
from matelli_store.domain.orders import ConsolidatedIngredient, Order
from matelli_store.domain.qrcodes import QrTracker, QrVisit
from matelli_store.domain.selection import SelectionState


def money(value: Decimal) -> str:
    """Format a currency amount with two decimals."""
    return f"{value:.2f}"


def serialize_meal(meal: Meal) -> dict[str, object]:
    return {
        "id": meal.id,
        "name": meal.name,
        "description": meal.description,
        "category": meal.category.value,
        "image": meal.image,
        "tags": list(meal.tags),
        "price": money(meal.price),
        "weight": meal.weight,
        "ingredients": dict(meal.ingredients),
    }


def serialize_order(order: Order) -> dict[str, object]:
    if isinstance(order.items, SelectionState):
        items: object = [
            {
                "day": day,
                "category": category.value,
                "meal_id": meal.id,
                "name": meal.name,
            }
            for day, category, meal in order.items.filled_slots()
        ]
    else:
        items = [
            {
                "meal_id": line.meal.id,
                "name": line.meal.name,
                "quantity": line.quantity,
                "line_total": money(line.meal.price * line.quantity),
            }
            for line in order.items.lines()
        ]
    return {
        "id": order.id,
        "type": order.type.value,
        "status": order.status.value,
        "total": money(order.total),
        "created_at": order.created_at.isoformat() if order.created_at else None,
        "items": items,
        "shopping_list": order.shopping_list,
    }


def serialize_consolidated(
    consolidated: dict[str, ConsolidatedIngredient],
) -> dict[str, dict[str, list[str]]]:
    return {
        ingredient: {"measures": entry.measures, "order_ids": entry.order_ids}
        for ingredient, entry in consolidated.items()
    }


def serialize_tracker(tracker: QrTracker) -> dict[str, object]:
    return {
        "id": tracker.id,
        "name": tracker.name,
        "total_accesses": tracker.total_accesses,
        "created_at": tracker.created_at.isoformat() if tracker.created_at else None,
        "last_visit": tracker.last_visit.isoformat() if tracker.last_visit else None,
    }


def serialize_visit(visit: QrVisit) -> dict[str, object]:
    return {
        "timestamp": visit.timestamp.isoformat(),
        "user_agent": visit.user_agent,
        "language": visit.language,
        "outlink": visit.outlink,
    }
