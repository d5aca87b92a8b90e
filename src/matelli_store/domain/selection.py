"""In-memory kit selection and cart models."""

from collections.abc import Iterator
from dataclasses import dataclass

from matelli_store.domain.errors import SelectionError
from matelli_store.domain.meals import DAYS_OF_WEEK, MEAL_ORDER, Meal, MealCategory

MAX_LINE_QUANTITY = 99


class SelectionState:
    """Week-long kit selection: day -> category -> meal.

    Every weekday is always present; a day holds at most one meal per
    category. Selecting into a filled slot replaces the previous meal.
    """

    def __init__(self) -> None:
        self._days: dict[str, dict[MealCategory, Meal]] = {
            day: {} for day in DAYS_OF_WEEK
        }

    def select(self, day: str, category: MealCategory, meal: Meal) -> None:
        """Place a meal in a slot, replacing any prior choice."""
        self._check_slot(day, category)
        self._days[day][category] = meal

    def clear(self, day: str, category: MealCategory) -> None:
        """Empty a slot; clearing an empty slot does nothing."""
        self._check_slot(day, category)
        self._days[day].pop(category, None)

    def get(self, day: str, category: MealCategory) -> Meal | None:
        """Return the meal in a slot, if any."""
        self._check_slot(day, category)
        return self._days[day].get(category)

    def day(self, day: str) -> dict[MealCategory, Meal]:
        """Return a copy of one day's selection in category order."""
        if day not in self._days:
            raise SelectionError(f"Unknown day: {day!r}")
        meals = self._days[day]
        return {
            category: meals[category] for category in MEAL_ORDER if category in meals
        }

    def filled_slots(self) -> Iterator[tuple[str, MealCategory, Meal]]:
        """Yield filled slots in weekday then category order."""
        for day in DAYS_OF_WEEK:
            meals = self._days[day]
            for category in MEAL_ORDER:
                meal = meals.get(category)
                if meal is not None:
                    yield day, category, meal

    def copy(self) -> "SelectionState":
        """Return an independent snapshot of this selection."""
        clone = SelectionState()
        for day, category, meal in self.filled_slots():
            clone._days[day][category] = meal
        return clone

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SelectionState):
            return NotImplemented
        return list(self.filled_slots()) == list(other.filled_slots())

    def __repr__(self) -> str:
        return f"SelectionState(filled={sum(1 for _ in self.filled_slots())})"

    def _check_slot(self, day: str, category: MealCategory) -> None:
        if day not in self._days:
            raise SelectionError(f"Unknown day: {day!r}")
        if not isinstance(category, MealCategory):
            raise SelectionError(f"Unknown meal category: {category!r}")


@dataclass(frozen=True)
class CartLine:
    """A meal snapshot with a positive quantity."""

    meal: Meal
    quantity: int


class CartState:
    """Flat à la carte cart keyed by meal id."""

    def __init__(self) -> None:
        self._lines: dict[str, CartLine] = {}

    def add(self, meal: Meal, quantity: int = 1) -> None:
        """Add units of a meal, creating the line when absent."""
        _check_quantity(quantity)
        current = self._lines.get(meal.id)
        total = quantity + (current.quantity if current else 0)
        if total > MAX_LINE_QUANTITY:
            raise SelectionError(
                f"At most {MAX_LINE_QUANTITY} units per meal, got {total}"
            )
        self._lines[meal.id] = CartLine(meal=meal, quantity=total)

    def remove(self, meal_id: str, quantity: int = 1) -> None:
        """Remove units of a meal; the line disappears at zero."""
        _check_quantity(quantity)
        current = self._lines.get(meal_id)
        if current is None:
            return
        remaining = current.quantity - quantity
        if remaining <= 0:
            del self._lines[meal_id]
            return
        self._lines[meal_id] = CartLine(meal=current.meal, quantity=remaining)

    def get(self, meal_id: str) -> CartLine | None:
        """Return the line for a meal id, if present."""
        return self._lines.get(meal_id)

    def lines(self) -> list[CartLine]:
        """Return cart lines in insertion order."""
        return list(self._lines.values())

    def copy(self) -> "CartState":
        """Return an independent snapshot of this cart."""
        clone = CartState()
        clone._lines = dict(self._lines)
        return clone

    def __contains__(self, meal_id: object) -> bool:
        return meal_id in self._lines

    def __len__(self) -> int:
        return len(self._lines)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CartState):
            return NotImplemented
        return self._lines == other._lines

    def __repr__(self) -> str:
        return f"CartState(lines={len(self._lines)})"


def _check_quantity(quantity: int) -> None:
    if quantity < 1:
        raise SelectionError(f"Quantity must be positive, got {quantity}")
