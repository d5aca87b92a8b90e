"""Supabase repository for orders."""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from supabase import Client

from matelli_store.adapters.supabase_rows import (
    execute,
    meal_row,
    parse_meal,
    parse_timestamp,
)
from matelli_store.domain.errors import PersistenceError
from matelli_store.domain.meals import parse_category
from matelli_store.domain.orders import Order, OrderStatus, OrderType
from matelli_store.domain.selection import CartState, SelectionState
from matelli_store.services.orders import OrderRepository


@dataclass
class SupabaseOrderRepository(OrderRepository):
    """Supabase-backed order store."""

    client: Client

    def create_order(self, order: Order) -> Order:
        """Insert a new order; the primary key rejects reused ids."""
        response = execute(
            self.client.table("orders").insert(_order_row(order)),
            f"create order {order.id}",
        )
        if not response.data:
            raise PersistenceError(f"Failed to create order {order.id}")
        return _parse_order(response.data[0])

    def get_order(self, order_id: str) -> Order | None:
        """Return an order by id, if present."""
        response = execute(
            self.client.table("orders").select("*").eq("id", order_id).limit(1),
            f"read order {order_id}",
        )
        if not response.data:
            return None
        return _parse_order(response.data[0])

    def list_orders(self) -> list[Order]:
        """Return all orders, newest first."""
        response = execute(
            self.client.table("orders").select("*").order("created_at", desc=True),
            "list orders",
        )
        return [_parse_order(row) for row in response.data or []]

    def update_status(self, order_id: str, status: OrderStatus) -> None:
        """Set the status of a single order."""
        execute(
            self.client.table("orders")
            .update({"status": status.value})
            .eq("id", order_id),
            f"update order {order_id}",
        )

    def update_statuses(
        self,
        order_ids: list[str],
        status: OrderStatus,
        from_statuses: frozenset[OrderStatus],
    ) -> list[str]:
        """Move matching orders in a single UPDATE statement."""
        response = execute(
            self.client.table("orders")
            .update({"status": status.value})
            .in_("id", order_ids)
            .in_("status", sorted(item.value for item in from_statuses)),
            f"update {len(order_ids)} orders",
        )
        return [str(row["id"]) for row in response.data or []]

    def delete_order(self, order_id: str) -> None:
        """Delete an order by id."""
        execute(
            self.client.table("orders").delete().eq("id", order_id),
            f"delete order {order_id}",
        )


def _order_row(order: Order) -> dict[str, object]:
    if isinstance(order.items, SelectionState):
        items: object = [
            {"day": day, "category": category.value, "meal": meal_row(meal)}
            for day, category, meal in order.items.filled_slots()
        ]
    else:
        items = [
            {"meal": meal_row(line.meal), "quantity": line.quantity}
            for line in order.items.lines()
        ]
    return {
        "id": order.id,
        "type": order.type.value,
        "total": str(order.total),
        "status": order.status.value,
        "items": items,
        "shopping_list": [
            {"ingredient": ingredient, "measures": measures}
            for ingredient, measures in order.shopping_list.items()
        ],
    }


def _parse_order(row: dict[str, Any]) -> Order:
    order_type = OrderType(row.get("type", OrderType.MENU))
    raw_items = row.get("items") or []
    items: SelectionState | CartState
    if order_type == OrderType.KIT:
        items = SelectionState()
        for slot in raw_items:
            items.select(
                slot["day"], parse_category(slot["category"]), parse_meal(slot["meal"])
            )
    else:
        items = CartState()
        for line in raw_items:
            items.add(parse_meal(line["meal"]), int(line["quantity"]))
    return Order(
        id=str(row["id"]),
        type=order_type,
        total=Decimal(str(row.get("total", "0"))),
        status=OrderStatus(row.get("status", OrderStatus.FEITO)),
        items=items,
        shopping_list={
            str(entry["ingredient"]): [str(measure) for measure in entry["measures"]]
            for entry in row.get("shopping_list") or []
        },
        created_at=parse_timestamp(row.get("created_at")),
    )
