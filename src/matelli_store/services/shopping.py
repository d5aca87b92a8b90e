"""Consolidated shopping list across pending orders."""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from matelli_store.domain.orders import (
    ACTIVE_STATUSES,
    PURCHASED_STATUS,
    ConsolidatedIngredient,
    Order,
)
from matelli_store.services.feeds import Subscription
from matelli_store.services.orders import OrderService

_logger = logging.getLogger(__name__)


def consolidate(orders: Iterable[Order]) -> dict[str, ConsolidatedIngredient]:
    """Merge the shopping lists of active orders.

    Measures are concatenated across orders; each ingredient lists a
    contributing order id once, however often that order needs it.
    """
    merged: dict[str, ConsolidatedIngredient] = {}
    for order in orders:
        if order.status not in ACTIVE_STATUSES:
            continue
        for ingredient, measures in order.shopping_list.items():
            entry = merged.setdefault(ingredient, ConsolidatedIngredient())
            entry.measures.extend(measures)
            if order.id not in entry.order_ids:
                entry.order_ids.append(order.id)
    return merged


def active_order_ids(orders: Iterable[Order]) -> list[str]:
    """Return the ids of orders awaiting ingredient purchase."""
    return [order.id for order in orders if order.status in ACTIVE_STATUSES]


def to_chat_text(consolidated: dict[str, ConsolidatedIngredient]) -> str:
    """Flatten a consolidated list into a chat message body."""
    order_ids: list[str] = []
    for entry in consolidated.values():
        for order_id in entry.order_ids:
            if order_id not in order_ids:
                order_ids.append(order_id)
    lines = [
        "*🛒 LISTA DE COMPRAS CONSOLIDADA*",
        f"*Pedidos: {', '.join(order_ids) if order_ids else 'nenhum'}*",
        "",
    ]
    if not consolidated:
        lines.append("Nenhum ingrediente pendente.")
    for ingredient, entry in consolidated.items():
        lines.append(f"• {ingredient}: {' + '.join(entry.measures)}")
    return "\n".join(lines)


@dataclass
class ShoppingListService:
    """Admin operations over the consolidated shopping list."""

    order_service: OrderService

    def mark_purchased(self, order_ids: Iterable[str]) -> list[str]:
        """Move the requested active orders to production in one batch.

        Ids outside the current active set are ignored. The batch either
        updates every remaining order or raises leaving all of them as
        they were.
        """
        repository = self.order_service.repository
        active = set(active_order_ids(repository.list_orders()))
        targets = [
            order_id for order_id in dict.fromkeys(order_ids) if order_id in active
        ]
        if not targets:
            return []
        updated = repository.update_statuses(
            targets, PURCHASED_STATUS, ACTIVE_STATUSES
        )
        _logger.info("Marked %s orders as purchased: %s", len(updated), updated)
        self.order_service.refresh_quietly()
        return updated


@dataclass
class ShoppingListView:
    """Consolidated list recomputed on every order snapshot."""

    consolidated: dict[str, ConsolidatedIngredient] = field(default_factory=dict)
    order_ids: list[str] = field(default_factory=list)
    _subscription: Subscription | None = None

    def attach(self, order_service: OrderService) -> Subscription:
        """Start following the order feed."""
        self.detach()
        self._subscription = order_service.subscribe(self._on_orders)
        return self._subscription

    def detach(self) -> None:
        """Stop following the order feed."""
        if self._subscription is not None:
            self._subscription.close()
            self._subscription = None

    def _on_orders(self, orders: list[Order]) -> None:
        self.consolidated = consolidate(orders)
        self.order_ids = active_order_ids(orders)
