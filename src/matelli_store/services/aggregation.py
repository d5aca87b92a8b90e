"""Totals and rollups derived from kit selections and carts."""

from decimal import Decimal

from matelli_store.domain.meals import DAYS_OF_WEEK, MEAL_ORDER
from matelli_store.domain.selection import CartState, SelectionState

KIT_SIZE = len(DAYS_OF_WEEK) * len(MEAL_ORDER)

_ZERO = Decimal("0")


def count_selected_slots(selection: SelectionState) -> int:
    """Return how many of the 35 kit slots are filled."""
    return sum(1 for _ in selection.filled_slots())


def is_kit_complete(selection: SelectionState) -> bool:
    """Return whether every slot of the kit is filled."""
    return count_selected_slots(selection) == KIT_SIZE


def kit_total(selection: SelectionState) -> Decimal:
    """Sum meal prices over filled slots."""
    return sum((meal.price for _, _, meal in selection.filled_slots()), _ZERO)


def day_totals(selection: SelectionState) -> dict[str, Decimal]:
    """Return the subtotal of each weekday, zero for empty days."""
    totals = dict.fromkeys(DAYS_OF_WEEK, _ZERO)
    for day, _, meal in selection.filled_slots():
        totals[day] += meal.price
    return totals


def day_slot_counts(selection: SelectionState) -> dict[str, int]:
    """Return how many categories are filled on each weekday."""
    counts = dict.fromkeys(DAYS_OF_WEEK, 0)
    for day, _, _ in selection.filled_slots():
        counts[day] += 1
    return counts


def meal_names_by_day(selection: SelectionState) -> dict[str, list[str]]:
    """Return meal names per weekday in category order."""
    names: dict[str, list[str]] = {day: [] for day in DAYS_OF_WEEK}
    for day, _, meal in selection.filled_slots():
        names[day].append(meal.name)
    return names


def cart_item_count(cart: CartState) -> int:
    """Sum quantities across cart lines."""
    return sum(line.quantity for line in cart.lines())


def cart_total(cart: CartState) -> Decimal:
    """Sum price times quantity across cart lines."""
    return sum((line.meal.price * line.quantity for line in cart.lines()), _ZERO)
