"""Checkout: turns a kit selection or cart into a persisted order."""

import logging
import random
from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass, field, replace
from decimal import Decimal
from typing import Protocol
from urllib.parse import quote

from matelli_store.domain.errors import (
    CheckoutError,
    DuplicateOrderIdError,
    MealValidationError,
    OrderNotFoundError,
    PersistenceError,
    SelectionError,
)
from matelli_store.domain.meals import DAYS_OF_WEEK, Meal, parse_category
from matelli_store.domain.orders import INITIAL_STATUS, Order, OrderStatus, OrderType
from matelli_store.domain.selection import CartState, SelectionState
from matelli_store.services import aggregation
from matelli_store.services.feeds import SnapshotFeed, Subscription

ORDER_ID_PREFIX = "MAT-"
ORDER_ID_ATTEMPTS = 5
_URI_SAFE = "-_.!~*'()"

_logger = logging.getLogger(__name__)


class OrderRepository(Protocol):
    """Persistence interface for orders."""

    def create_order(self, order: Order) -> Order:
        """Insert a new order; raise DuplicateOrderIdError if the id is taken."""

    def get_order(self, order_id: str) -> Order | None:
        """Return an order by id, if present."""

    def list_orders(self) -> list[Order]:
        """Return all orders, newest first."""

    def update_status(self, order_id: str, status: OrderStatus) -> None:
        """Set the status of a single order."""

    def update_statuses(
        self,
        order_ids: list[str],
        status: OrderStatus,
        from_statuses: frozenset[OrderStatus],
    ) -> list[str]:
        """Move orders still in `from_statuses` to `status` in one batch.

        Either every matching order changes or none does. Returns the ids
        that were updated.
        """

    def delete_order(self, order_id: str) -> None:
        """Delete an order by id."""


@dataclass(frozen=True)
class CheckoutResult:
    """A persisted order with its chat hand-off."""

    order: Order
    summary_text: str
    chat_link: str


def generate_order_id() -> str:
    """Return a short human-readable order code."""
    return f"{ORDER_ID_PREFIX}{random.randint(0, 9999):04d}"  # noqa: S311


@dataclass
class OrderService:
    """Compiles checkouts and handles admin order maintenance."""

    repository: OrderRepository
    whatsapp_phone: str
    chat_base_url: str = "https://wa.me"
    feed: SnapshotFeed[Order] = field(default_factory=lambda: SnapshotFeed("orders"))
    id_factory: Callable[[], str] = generate_order_id

    def checkout_kit(self, selection: SelectionState) -> CheckoutResult:
        """Persist a completed weekly kit."""
        return self.checkout(selection, OrderType.KIT)

    def checkout_menu(self, cart: CartState) -> CheckoutResult:
        """Persist an à la carte cart."""
        return self.checkout(cart, OrderType.MENU)

    def checkout(
        self, items: SelectionState | CartState, order_type: OrderType
    ) -> CheckoutResult:
        """Validate, price and persist an order exactly once."""
        snapshot = _validated_snapshot(items, order_type)
        if isinstance(snapshot, SelectionState):
            total = aggregation.kit_total(snapshot)
        else:
            total = aggregation.cart_total(snapshot)
        shopping_list = build_shopping_list(snapshot)

        stored: Order | None = None
        for attempt in range(1, ORDER_ID_ATTEMPTS + 1):
            order = Order(
                id=self.id_factory(),
                type=order_type,
                total=total,
                status=INITIAL_STATUS,
                items=snapshot,
                shopping_list=shopping_list,
            )
            try:
                stored = self.repository.create_order(order)
            except DuplicateOrderIdError:
                _logger.warning(
                    "Order id %s already taken (attempt %s/%s)",
                    order.id,
                    attempt,
                    ORDER_ID_ATTEMPTS,
                )
                continue
            break
        if stored is None:
            raise PersistenceError("Could not allocate a unique order id")

        _logger.info(
            "Checkout %s: type=%s total=%s", stored.id, stored.type, stored.total
        )
        self.refresh_quietly()
        summary = compose_summary_text(stored)
        return CheckoutResult(
            order=stored,
            summary_text=summary,
            chat_link=build_chat_link(self.whatsapp_phone, summary, self.chat_base_url),
        )

    def list_orders(self) -> list[Order]:
        """Return all orders, newest first."""
        return self.repository.list_orders()

    def get_order(self, order_id: str) -> Order:
        """Return an order or raise when it does not exist."""
        order = self.repository.get_order(order_id)
        if order is None:
            raise OrderNotFoundError(f"Order {order_id} not found")
        return order

    def update_status(self, order_id: str, status: OrderStatus) -> Order:
        """Move a single order to a new status."""
        current = self.get_order(order_id)
        self.repository.update_status(order_id, status)
        _logger.info("Order %s moved to %s", order_id, status)
        self.refresh_quietly()
        return replace(current, status=status)

    def delete_order(self, order_id: str) -> None:
        """Permanently delete an order."""
        self.get_order(order_id)
        self.repository.delete_order(order_id)
        _logger.info("Order %s deleted", order_id)
        self.refresh_quietly()

    def refresh(self) -> list[Order]:
        """Re-read all orders and push them to subscribers."""
        orders = self.repository.list_orders()
        self.feed.publish(orders)
        return orders

    def subscribe(self, callback: Callable[[list[Order]], None]) -> Subscription:
        """Receive the full order set on every change."""
        return self.feed.subscribe(callback)

    def refresh_quietly(self) -> None:
        """Refresh after a committed write; a failed re-read is only logged."""
        try:
            self.refresh()
        except PersistenceError:
            _logger.exception("Failed to refresh orders after a write")


def build_shopping_list(items: SelectionState | CartState) -> dict[str, list[str]]:
    """Collect every ingredient measure needed to produce the items.

    Each kit slot contributes its meal once; each cart line contributes its
    meal once per unit. Measures are never merged.
    """
    shopping: dict[str, list[str]] = {}
    for meal in _meal_instances(items):
        for ingredient, measure in meal.ingredients.items():
            shopping.setdefault(ingredient, []).append(measure)
    return shopping


def compose_summary_text(order: Order) -> str:
    """Render the order as a pre-filled chat message."""
    lines = [
        "*Olá Matelli Congelados! Gostaria de finalizar meu pedido:*",
        f"*Pedido: {order.id}*",
        "",
    ]
    if isinstance(order.items, SelectionState):
        lines.append("*🍱 MEU KIT SEMANAL (35 Marmitas):*")
        for day in DAYS_OF_WEEK:
            meals = order.items.day(day)
            if not meals:
                continue
            lines.append("")
            lines.append(f"*{day.upper()}:*")
            lines.extend(
                f"- {meal.name} (R$ {_money(meal.price)})" for meal in meals.values()
            )
    else:
        lines.append("*📖 MEU PEDIDO AVULSO:*")
        lines.extend(
            f"- {line.meal.name} x{line.quantity} "
            f"(R$ {_money(line.meal.price * line.quantity)})"
            for line in order.items.lines()
        )
    lines.extend(
        [
            "",
            f"*Valor Total Estimado: R$ {_money(order.total)}*",
            "",
            "*(Os preços serão confirmados na hora de fechar o pedido "
            "com a equipe de atendimento)*",
            "",
            "*Aguardo confirmação para pagamento e agendamento!*",
        ]
    )
    return "\n".join(lines)


def build_chat_link(phone: str, text: str, base_url: str = "https://wa.me") -> str:
    """Build a chat deep link carrying a pre-filled message."""
    return f"{base_url.rstrip('/')}/{phone}?text={quote(text, safe=_URI_SAFE)}"


def selection_from_ids(
    payload: Mapping[str, Mapping[str, str]], catalog: Mapping[str, Meal]
) -> SelectionState:
    """Resolve a `{day: {category: meal_id}}` payload against the catalog."""
    selection = SelectionState()
    for day, slots in payload.items():
        for category_label, meal_id in slots.items():
            try:
                category = parse_category(category_label)
            except MealValidationError as exc:
                raise SelectionError(str(exc)) from None
            selection.select(day, category, _resolve(meal_id, catalog))
    return selection


def cart_from_ids(
    payload: Mapping[str, int], catalog: Mapping[str, Meal]
) -> CartState:
    """Resolve a `{meal_id: quantity}` payload against the catalog."""
    cart = CartState()
    for meal_id, quantity in payload.items():
        cart.add(_resolve(meal_id, catalog), quantity)
    return cart


def _resolve(meal_id: str, catalog: Mapping[str, Meal]) -> Meal:
    meal = catalog.get(meal_id)
    if meal is None:
        raise SelectionError(f"Unknown meal id: {meal_id!r}")
    return meal


def _validated_snapshot(
    items: SelectionState | CartState, order_type: OrderType
) -> SelectionState | CartState:
    if order_type == OrderType.KIT:
        if not isinstance(items, SelectionState):
            raise CheckoutError("Kit orders take a kit selection")
        if not aggregation.is_kit_complete(items):
            filled = aggregation.count_selected_slots(items)
            raise CheckoutError(
                f"Kit is incomplete: {filled}/{aggregation.KIT_SIZE} slots filled"
            )
        return items.copy()
    if not isinstance(items, CartState):
        raise CheckoutError("Menu orders take a cart")
    if len(items) == 0:
        raise CheckoutError("Cart is empty")
    return items.copy()


def _meal_instances(items: SelectionState | CartState) -> Iterator[Meal]:
    if isinstance(items, SelectionState):
        for _, _, meal in items.filled_slots():
            yield meal
        return
    for line in items.lines():
        for _ in range(line.quantity):
            yield line.meal


def _money(value: Decimal) -> str:
    return f"{value:.2f}"
