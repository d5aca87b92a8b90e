"""Catalog domain models."""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from enum import StrEnum

from matelli_store.domain.errors import MealValidationError


class MealCategory(StrEnum):
    """Fixed meal categories, valued by their storefront labels."""

    BREAKFAST = "Café da Manhã"
    SMOOTHIE = "Vitamina de Frutas"
    LUNCH = "Almoço"
    DESSERT = "Sobremesa"
    DINNER = "Jantar"


MEAL_ORDER: tuple[MealCategory, ...] = (
    MealCategory.BREAKFAST,
    MealCategory.SMOOTHIE,
    MealCategory.LUNCH,
    MealCategory.DESSERT,
    MealCategory.DINNER,
)

DAYS_OF_WEEK: tuple[str, ...] = (
    "Segunda",
    "Terça",
    "Quarta",
    "Quinta",
    "Sexta",
    "Sábado",
    "Domingo",
)


@dataclass(frozen=True)
class Meal:
    """An orderable catalog entry."""

    id: str
    name: str
    category: MealCategory
    price: Decimal
    description: str = ""
    image: str = ""
    tags: tuple[str, ...] = ()
    weight: str = ""
    ingredients: dict[str, str] = field(default_factory=dict)

    @classmethod
    def create(  # noqa: PLR0913
        cls,
        *,
        id: str,  # noqa: A002
        name: str,
        category: MealCategory | str,
        price: Decimal | float | str,
        description: str = "",
        image: str = "",
        tags: Iterable[str] = (),
        weight: str = "",
        ingredients: Mapping[str, str] | None = None,
    ) -> "Meal":
        """Build a meal, rejecting missing required fields."""
        meal_id = (id or "").strip()
        meal_name = (name or "").strip()
        if not meal_id:
            raise MealValidationError("Meal id is required")
        if not meal_name:
            raise MealValidationError("Meal name is required")
        return cls(
            id=meal_id,
            name=meal_name,
            category=parse_category(category),
            price=parse_price(price),
            description=description or "",
            image=image or "",
            tags=tuple(tag for tag in tags if tag),
            weight=weight or "",
            ingredients={
                str(key): str(value)
                for key, value in (ingredients or {}).items()
                if str(key).strip()
            },
        )


def parse_category(value: MealCategory | str) -> MealCategory:
    """Resolve a category from its label or member name."""
    if isinstance(value, MealCategory):
        return value
    try:
        return MealCategory(value)
    except ValueError:
        pass
    try:
        return MealCategory[str(value).upper()]
    except KeyError:
        raise MealValidationError(f"Unknown meal category: {value!r}") from None


def parse_price(value: Decimal | float | str) -> Decimal:
    """Parse a non-negative price into a Decimal."""
    if isinstance(value, bool):
        raise MealValidationError(f"Invalid price: {value!r}")
    try:
        price = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise MealValidationError(f"Invalid price: {value!r}") from None
    if not price.is_finite() or price < 0:
        raise MealValidationError(f"Invalid price: {value!r}")
    return price
