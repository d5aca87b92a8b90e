"""Order domain models."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import StrEnum

from matelli_store.domain.selection import CartState, SelectionState


class OrderType(StrEnum):
    """How the order was assembled."""

    KIT = "kit"
    MENU = "menu"


class OrderStatus(StrEnum):
    """Order life cycle, in conventional order; `esperando` is a side state."""

    FEITO = "feito"
    APROVADO = "aprovado"
    COMPRAS = "compras"
    PRODUZINDO = "produzindo"
    ENTREGUES = "entregues"
    AVALIADOS = "avaliados"
    ESPERANDO = "esperando"


INITIAL_STATUS = OrderStatus.APROVADO
ACTIVE_STATUSES: frozenset[OrderStatus] = frozenset(
    {OrderStatus.APROVADO, OrderStatus.COMPRAS}
)
PURCHASED_STATUS = OrderStatus.PRODUZINDO


@dataclass(frozen=True)
class Order:
    """A persisted checkout."""

    id: str
    type: OrderType
    total: Decimal
    status: OrderStatus
    items: SelectionState | CartState
    shopping_list: dict[str, list[str]] = field(default_factory=dict)
    created_at: datetime | None = None

    def __post_init__(self) -> None:
        expected = SelectionState if self.type == OrderType.KIT else CartState
        if not isinstance(self.items, expected):
            raise TypeError(
                f"{self.type} order requires {expected.__name__} items, "
                f"got {type(self.items).__name__}"
            )

    @property
    def is_active(self) -> bool:
        """Whether the order still awaits ingredient purchase."""
        return self.status in ACTIVE_STATUSES


@dataclass
class ConsolidatedIngredient:
    """Measures of one ingredient across active orders."""

    measures: list[str] = field(default_factory=list)
    order_ids: list[str] = field(default_factory=list)
