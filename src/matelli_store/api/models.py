"""Pydantic models for storefront request payloads."""

from decimal import Decimal
from typing import Annotated

from pydantic import BaseModel, Field

from matelli_store.domain.orders import OrderStatus
from matelli_store.domain.selection import MAX_LINE_QUANTITY

LineQuantity = Annotated[int, Field(ge=1, le=MAX_LINE_QUANTITY)]


class KitSelectionRequest(BaseModel):
    """Kit slots as `{day: {category: meal_id}}`."""

    selection: dict[str, dict[str, str]] = Field(default_factory=dict)


class CartRequest(BaseModel):
    """Cart lines as `{meal_id: quantity}`."""

    cart: dict[str, LineQuantity] = Field(default_factory=dict)


class MealPayload(BaseModel):
    """Catalog entry submitted by the admin form."""

    id: str | None = None
    name: str = ""
    description: str = ""
    category: str = ""
    image: str = ""
    tags: list[str] = Field(default_factory=list)
    price: Decimal = Decimal("0")
    weight: str = ""
    ingredients: dict[str, str] = Field(default_factory=dict)


class StatusUpdateRequest(BaseModel):
    """New status for a single order."""

    status: OrderStatus


class PurchaseRequest(BaseModel):
    """Orders to move to production; all active orders when omitted."""

    order_ids: list[str] | None = None


class TrackerCreateRequest(BaseModel):
    """Admin-created QR tracker."""

    id: str = Field(min_length=1)
    name: str = ""
