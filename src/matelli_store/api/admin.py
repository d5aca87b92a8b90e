"""Admin API endpoints with simple token auth."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Header, HTTPException, Query, Request, status

from matelli_store.api.models import (
    MealPayload,
    PurchaseRequest,
    StatusUpdateRequest,
    TrackerCreateRequest,
)
from matelli_store.api.serializers import (
    serialize_consolidated,
    serialize_meal,
    serialize_order,
    serialize_tracker,
    serialize_visit,
)
from matelli_store.catalog_seed import INITIAL_MEALS
from matelli_store.domain.meals import Meal
from matelli_store.domain.orders import OrderStatus
from matelli_store.services.catalog import new_meal_id
from matelli_store.services.orders import build_chat_link
from matelli_store.services.shopping import active_order_ids, to_chat_text

if TYPE_CHECKING:
    from matelli_store.containers import AppContainer

router = APIRouter(prefix="/admin", tags=["admin"])


def _get_admin_token(request: Request) -> str:
    container: AppContainer = request.app.state.container
    return container.settings.admin_token


async def require_admin(
    x_admin_token: str | None = Header(default=None),
    admin_token: str = Depends(_get_admin_token),
) -> None:
    """Ensure requests include a valid admin token."""
    if not x_admin_token or x_admin_token != admin_token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)


@router.get("/health", dependencies=[Depends(require_admin)])
async def admin_health() -> dict[str, str]:
    """Admin health check endpoint."""
    return {"status": "ok"}


@router.get("/meals", dependencies=[Depends(require_admin)])
async def list_meals(request: Request) -> dict[str, object]:
    """Return the full catalog."""
    container: AppContainer = request.app.state.container
    meals = container.catalog_service.list_meals()
    return {"meals": [serialize_meal(meal) for meal in meals]}


@router.post(
    "/meals",
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
async def create_meal(payload: MealPayload, request: Request) -> dict[str, object]:
    """Add a meal, generating an id when none is given."""
    container: AppContainer = request.app.state.container
    meal = _meal_from_payload(payload, payload.id or new_meal_id())
    return serialize_meal(container.catalog_service.save_meal(meal))


@router.put("/meals/{meal_id}", dependencies=[Depends(require_admin)])
async def replace_meal(
    meal_id: str, payload: MealPayload, request: Request
) -> dict[str, object]:
    """Overwrite the full meal document."""
    container: AppContainer = request.app.state.container
    meal = _meal_from_payload(payload, meal_id)
    return serialize_meal(container.catalog_service.save_meal(meal))


@router.delete(
    "/meals/{meal_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_admin)],
)
async def delete_meal(meal_id: str, request: Request) -> None:
    """Remove a meal from the catalog."""
    container: AppContainer = request.app.state.container
    container.catalog_service.delete_meal(meal_id)


@router.post("/meals/seed", dependencies=[Depends(require_admin)])
async def seed_meals(request: Request) -> dict[str, int]:
    """Write the default menu to the store."""
    container: AppContainer = request.app.state.container
    saved = await container.catalog_service.seed(
        INITIAL_MEALS, timeout_seconds=container.settings.store_timeout_seconds
    )
    return {"saved": saved, "total": len(INITIAL_MEALS)}


@router.get("/orders", dependencies=[Depends(require_admin)])
async def list_orders(
    request: Request,
    status_filter: OrderStatus | None = Query(default=None, alias="status"),
) -> dict[str, object]:
    """Return orders newest first, optionally for one status."""
    container: AppContainer = request.app.state.container
    orders = container.order_service.list_orders()
    if status_filter is not None:
        orders = [order for order in orders if order.status == status_filter]
    return {"orders": [serialize_order(order) for order in orders]}


@router.patch("/orders/{order_id}", dependencies=[Depends(require_admin)])
async def update_order_status(
    order_id: str, payload: StatusUpdateRequest, request: Request
) -> dict[str, object]:
    """Move an order through the pipeline."""
    container: AppContainer = request.app.state.container
    order = container.order_service.update_status(order_id, payload.status)
    return serialize_order(order)


@router.delete(
    "/orders/{order_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_admin)],
)
async def delete_order(order_id: str, request: Request) -> None:
    """Permanently delete an order."""
    container: AppContainer = request.app.state.container
    container.order_service.delete_order(order_id)


@router.get("/shopping-list", dependencies=[Depends(require_admin)])
async def shopping_list(request: Request) -> dict[str, object]:
    """Return the consolidated list of ingredients still to buy."""
    container: AppContainer = request.app.state.container
    container.order_service.refresh()
    view = container.shopping_list_view
    chat_text = to_chat_text(view.consolidated)
    return {
        "order_ids": list(view.order_ids),
        "ingredients": serialize_consolidated(view.consolidated),
        "chat_text": chat_text,
        "chat_link": build_chat_link(
            container.settings.whatsapp_phone,
            chat_text,
            container.settings.chat_base_url,
        ),
    }


@router.post("/shopping-list/purchase", dependencies=[Depends(require_admin)])
async def mark_purchased(
    payload: PurchaseRequest, request: Request
) -> dict[str, object]:
    """Move active orders to production once their ingredients are bought."""
    container: AppContainer = request.app.state.container
    service = container.shopping_list_service
    order_ids = payload.order_ids
    if order_ids is None:
        order_ids = active_order_ids(container.order_service.list_orders())
    return {"updated": service.mark_purchased(order_ids)}


@router.get("/qrcodes", dependencies=[Depends(require_admin)])
async def list_trackers(request: Request) -> dict[str, object]:
    """Return all QR trackers with their counters."""
    container: AppContainer = request.app.state.container
    trackers = container.qr_service.list_trackers()
    return {"qrcodes": [serialize_tracker(tracker) for tracker in trackers]}


@router.post(
    "/qrcodes",
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
async def create_tracker(
    payload: TrackerCreateRequest, request: Request
) -> dict[str, object]:
    """Create a tracker, resetting its counter when it already exists."""
    container: AppContainer = request.app.state.container
    tracker = container.qr_service.create_tracker(payload.id, payload.name)
    return serialize_tracker(tracker)


@router.delete(
    "/qrcodes/{tracker_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_admin)],
)
async def delete_tracker(tracker_id: str, request: Request) -> None:
    """Delete a tracker and its visit log."""
    container: AppContainer = request.app.state.container
    container.qr_service.delete_tracker(tracker_id)


@router.get("/qrcodes/{tracker_id}/visits", dependencies=[Depends(require_admin)])
async def list_visits(
    tracker_id: str, request: Request, limit: int = 50
) -> dict[str, object]:
    """Return the latest visits of a tracker."""
    container: AppContainer = request.app.state.container
    visits = container.qr_service.list_visits(tracker_id, limit)
    return {"visits": [serialize_visit(visit) for visit in visits]}


def _meal_from_payload(payload: MealPayload, meal_id: str) -> Meal:
    return Meal.create(
        id=meal_id,
        name=payload.name,
        category=payload.category,
        price=payload.price,
        description=payload.description,
        image=payload.image,
        tags=payload.tags,
        weight=payload.weight,
        ingredients=payload.ingredients,
    )
