"""Tests for checkout and order maintenance."""

from decimal import Decimal
from urllib.parse import parse_qs, urlparse

import pytest

from matelli_store.domain.errors import (
    CheckoutError,
    OrderNotFoundError,
    PersistenceError,
    SelectionError,
)
from matelli_store.domain.meals import MealCategory
from matelli_store.domain.orders import OrderStatus, OrderType
from matelli_store.domain.selection import (
    MAX_LINE_QUANTITY,
    CartState,
    SelectionState,
)
from matelli_store.services.orders import (
    ORDER_ID_ATTEMPTS,
    OrderService,
    build_chat_link,
    build_shopping_list,
    cart_from_ids,
    compose_summary_text,
    generate_order_id,
    selection_from_ids,
)
from tests.conftest import (
    InMemoryOrderRepository,
    full_kit,
    make_meal,
    sequential_order_ids,
)


def _kit_meals():
    return {
        MealCategory.BREAKFAST: make_meal(
            "b1", MealCategory.BREAKFAST, "18.90", {"Ovos": "2 un"}
        ),
        MealCategory.SMOOTHIE: make_meal(
            "s1", MealCategory.SMOOTHIE, "14.90", {"Morango": "120g"}
        ),
        MealCategory.LUNCH: make_meal(
            "l2", MealCategory.LUNCH, "34.90", {"Salmão": "130g"}
        ),
        MealCategory.DESSERT: make_meal(
            "de1", MealCategory.DESSERT, "12.00", {"Chocolate 70%": "40g"}
        ),
        MealCategory.DINNER: make_meal(
            "d1", MealCategory.DINNER, "22.50", {"Cebola": "30g"}
        ),
    }


def test_generate_order_id_format() -> None:
    order_id = generate_order_id()

    assert order_id.startswith("MAT-")
    assert len(order_id) == 8
    assert order_id[4:].isdigit()


def test_shopping_list_repeats_measures_per_unit() -> None:
    cart = CartState()
    cart.add(make_meal("l2", ingredients={"Salmão": "130g"}), 2)

    assert build_shopping_list(cart) == {"Salmão": ["130g", "130g"]}


def test_shopping_list_for_kit_counts_each_slot() -> None:
    selection = full_kit(_kit_meals())

    shopping = build_shopping_list(selection)

    assert shopping["Salmão"] == ["130g"] * 7
    assert shopping["Ovos"] == ["2 un"] * 7


def test_shopping_list_skips_meals_without_ingredients() -> None:
    cart = CartState()
    cart.add(make_meal("x1"), 3)

    assert build_shopping_list(cart) == {}


def test_checkout_menu_persists_once(
    order_service: OrderService, order_repository: InMemoryOrderRepository
) -> None:
    cart = CartState()
    cart.add(make_meal("l2", price="34.90", ingredients={"Salmão": "130g"}), 2)

    result = order_service.checkout_menu(cart)

    assert result.order.id == "MAT-0001"
    assert result.order.type == OrderType.MENU
    assert result.order.status == OrderStatus.APROVADO
    assert result.order.total == Decimal("69.80")
    assert result.order.shopping_list == {"Salmão": ["130g", "130g"]}
    assert list(order_repository.orders) == ["MAT-0001"]
    assert order_repository.insert_attempts == ["MAT-0001"]


def test_checkout_snapshot_ignores_later_cart_edits(
    order_service: OrderService,
) -> None:
    cart = CartState()
    cart.add(make_meal("l1"))

    result = order_service.checkout_menu(cart)
    cart.add(make_meal("l1"), 4)

    assert result.order.items.get("l1").quantity == 1


def test_checkout_kit_requires_complete_kit(
    order_service: OrderService, order_repository: InMemoryOrderRepository
) -> None:
    selection = full_kit(_kit_meals())
    selection.clear("Sábado", MealCategory.DESSERT)

    with pytest.raises(CheckoutError):
        order_service.checkout_kit(selection)
    assert order_repository.orders == {}


def test_checkout_kit_totals_and_summary(order_service: OrderService) -> None:
    result = order_service.checkout_kit(full_kit(_kit_meals()))

    assert result.order.type == OrderType.KIT
    assert result.order.total == Decimal("103.20") * 7
    assert "*Pedido: MAT-0001*" in result.summary_text
    assert "*SEGUNDA:*" in result.summary_text
    assert "*Valor Total Estimado: R$ 722.40*" in result.summary_text


def test_checkout_rejects_empty_cart(order_service: OrderService) -> None:
    with pytest.raises(CheckoutError):
        order_service.checkout_menu(CartState())


def test_checkout_rejects_mismatched_type(order_service: OrderService) -> None:
    with pytest.raises(CheckoutError):
        order_service.checkout(SelectionState(), OrderType.MENU)


def test_checkout_retries_taken_ids(
    order_repository: InMemoryOrderRepository,
) -> None:
    service = OrderService(
        repository=order_repository,
        whatsapp_phone="5511958877900",
        id_factory=sequential_order_ids("MAT-0001", "MAT-0001", "MAT-0042"),
    )
    cart = CartState()
    cart.add(make_meal("l1"))

    first = service.checkout_menu(cart)
    second = service.checkout_menu(cart)

    assert first.order.id == "MAT-0001"
    assert second.order.id == "MAT-0042"
    assert order_repository.insert_attempts == ["MAT-0001", "MAT-0001", "MAT-0042"]
    assert len(order_repository.orders) == 2


def test_checkout_gives_up_after_repeated_collisions(
    order_repository: InMemoryOrderRepository,
) -> None:
    service = OrderService(
        repository=order_repository,
        whatsapp_phone="5511958877900",
        id_factory=lambda: "MAT-0007",
    )
    cart = CartState()
    cart.add(make_meal("l1"))
    service.checkout_menu(cart)

    with pytest.raises(PersistenceError):
        service.checkout_menu(cart)
    assert len(order_repository.insert_attempts) == 1 + ORDER_ID_ATTEMPTS
    assert len(order_repository.orders) == 1


def test_checkout_surfaces_store_failure(
    order_service: OrderService, order_repository: InMemoryOrderRepository
) -> None:
    order_repository.fail_writes = True
    cart = CartState()
    cart.add(make_meal("l1"))

    with pytest.raises(PersistenceError):
        order_service.checkout_menu(cart)
    assert order_repository.orders == {}


def test_checkout_publishes_orders(order_service: OrderService) -> None:
    received: list[list[str]] = []
    order_service.subscribe(lambda orders: received.append([o.id for o in orders]))
    cart = CartState()
    cart.add(make_meal("l1"))

    order_service.checkout_menu(cart)

    assert received[-1] == ["MAT-0001"]


def test_menu_summary_lines() -> None:
    cart = CartState()
    cart.add(make_meal("l2", price="34.90", name="Salmão Grelhado"), 2)
    service = OrderService(
        repository=InMemoryOrderRepository(),
        whatsapp_phone="5511958877900",
        id_factory=sequential_order_ids("MAT-1234"),
    )

    result = service.checkout_menu(cart)
    text = compose_summary_text(result.order)

    assert text.splitlines()[1] == "*Pedido: MAT-1234*"
    assert "*📖 MEU PEDIDO AVULSO:*" in text
    assert "- Salmão Grelhado x2 (R$ 69.80)" in text
    assert "*Valor Total Estimado: R$ 69.80*" in text
    assert text == result.summary_text


def test_chat_link_encodes_text() -> None:
    link = build_chat_link("5511958877900", "*Pedido: MAT-1*\nR$ 10.00 & mais")

    parsed = urlparse(link)
    assert parsed.netloc == "wa.me"
    assert parsed.path == "/5511958877900"
    assert " " not in link
    assert "\n" not in link
    assert parse_qs(parsed.query)["text"] == ["*Pedido: MAT-1*\nR$ 10.00 & mais"]


def test_update_and_delete_order(
    order_service: OrderService, order_repository: InMemoryOrderRepository
) -> None:
    cart = CartState()
    cart.add(make_meal("l1"))
    order_id = order_service.checkout_menu(cart).order.id

    updated = order_service.update_status(order_id, OrderStatus.ENTREGUES)
    assert updated.status == OrderStatus.ENTREGUES

    order_service.delete_order(order_id)
    assert order_repository.orders == {}


def test_unknown_order_raises(order_service: OrderService) -> None:
    with pytest.raises(OrderNotFoundError):
        order_service.update_status("MAT-9999", OrderStatus.COMPRAS)
    with pytest.raises(OrderNotFoundError):
        order_service.delete_order("MAT-9999")


def test_resolve_payloads_against_catalog() -> None:
    lunch = make_meal("l1")
    catalog = {"l1": lunch}

    selection = selection_from_ids({"Segunda": {"Almoço": "l1"}}, catalog)
    cart = cart_from_ids({"l1": 3}, catalog)

    assert selection.get("Segunda", MealCategory.LUNCH) == lunch
    assert cart.get("l1").quantity == 3


def test_resolve_payload_rejects_unknown_ids() -> None:
    with pytest.raises(SelectionError):
        cart_from_ids({"ghost": 1}, {})
    with pytest.raises(SelectionError):
        selection_from_ids({"Segunda": {"Lanche": "l1"}}, {"l1": make_meal("l1")})


def test_resolve_payload_rejects_oversized_quantity() -> None:
    with pytest.raises(SelectionError):
        cart_from_ids({"l1": MAX_LINE_QUANTITY + 1}, {"l1": make_meal("l1")})


def test_status_change_survives_failed_refresh(
    order_service: OrderService, order_repository: InMemoryOrderRepository
) -> None:
    cart = CartState()
    cart.add(make_meal("l1"))
    order_id = order_service.checkout_menu(cart).order.id
    order_repository.fail_listing_after_write = True

    updated = order_service.update_status(order_id, OrderStatus.COMPRAS)
    order_service.delete_order(order_id)

    assert updated.status == OrderStatus.COMPRAS
    assert order_repository.orders == {}
