"""FastAPI application factory."""

import html
import json
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from urllib.parse import unquote, urlparse

from fastapi import BackgroundTasks, FastAPI, HTTPException, Request, status
from fastapi.responses import HTMLResponse, JSONResponse

from matelli_store.api.admin import router as admin_router
from matelli_store.api.models import CartRequest, KitSelectionRequest
from matelli_store.api.serializers import money, serialize_meal, serialize_order
from matelli_store.app_logging import configure_logging
from matelli_store.containers import AppContainer
from matelli_store.domain import errors
from matelli_store.domain.meals import parse_category
from matelli_store.services import aggregation
from matelli_store.services.orders import (
    CheckoutResult,
    cart_from_ids,
    selection_from_ids,
)

_ERROR_STATUS: dict[type[errors.MatelliError], int] = {
    errors.ValidationError: status.HTTP_422_UNPROCESSABLE_ENTITY,
    errors.NotFoundError: status.HTTP_404_NOT_FOUND,
    errors.PersistenceError: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        try:
            app.state.container.catalog_service.refresh()
            app.state.container.order_service.refresh()
        except errors.PersistenceError:
            logger.exception("Failed to load initial catalog and orders")
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(admin_router)

    @app.exception_handler(errors.MatelliError)
    async def storefront_error(
        request: Request, exc: errors.MatelliError
    ) -> JSONResponse:
        """Map storefront errors to HTTP responses."""
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
        for error_type, code in _ERROR_STATUS.items():
            if isinstance(exc, error_type):
                status_code = code
                break
        if status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc)
        return JSONResponse(status_code=status_code, content={"detail": str(exc)})

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/catalog")
    async def catalog(
        request: Request, category: str | None = None
    ) -> dict[str, object]:
        """Return the orderable meals, optionally for one category."""
        state_container: AppContainer = request.app.state.container
        meals = state_container.catalog_service.list_meals(
            parse_category(category) if category else None
        )
        return {"meals": [serialize_meal(meal) for meal in meals]}

    @app.post("/kit/summary")
    async def kit_summary(
        payload: KitSelectionRequest, request: Request
    ) -> dict[str, object]:
        """Return progress and totals for a kit selection."""
        state_container: AppContainer = request.app.state.container
        selection = selection_from_ids(
            payload.selection, state_container.catalog_service.snapshot()
        )
        return {
            "selected": aggregation.count_selected_slots(selection),
            "kit_size": aggregation.KIT_SIZE,
            "complete": aggregation.is_kit_complete(selection),
            "total": money(aggregation.kit_total(selection)),
            "day_totals": {
                day: money(value)
                for day, value in aggregation.day_totals(selection).items()
            },
            "day_counts": aggregation.day_slot_counts(selection),
        }

    @app.post("/kit/insight")
    async def kit_insight(
        payload: KitSelectionRequest, request: Request
    ) -> dict[str, str]:
        """Return nutritionist feedback for a kit selection."""
        state_container: AppContainer = request.app.state.container
        selection = selection_from_ids(
            payload.selection, state_container.catalog_service.snapshot()
        )
        insight = await state_container.insight_service.get_insight(selection)
        return {"insight": insight}

    @app.post("/cart/summary")
    async def cart_summary(payload: CartRequest, request: Request) -> dict[str, object]:
        """Return the item count and total of a cart."""
        state_container: AppContainer = request.app.state.container
        cart = cart_from_ids(payload.cart, state_container.catalog_service.snapshot())
        return {
            "item_count": aggregation.cart_item_count(cart),
            "total": money(aggregation.cart_total(cart)),
        }

    @app.post("/checkout/kit", status_code=status.HTTP_201_CREATED)
    async def checkout_kit(
        payload: KitSelectionRequest, request: Request
    ) -> dict[str, object]:
        """Persist a complete kit and return its chat hand-off."""
        state_container: AppContainer = request.app.state.container
        selection = selection_from_ids(
            payload.selection, state_container.catalog_service.snapshot()
        )
        result = state_container.order_service.checkout_kit(selection)
        return _checkout_response(result)

    @app.post("/checkout/menu", status_code=status.HTTP_201_CREATED)
    async def checkout_menu(
        payload: CartRequest, request: Request
    ) -> dict[str, object]:
        """Persist an à la carte cart and return its chat hand-off."""
        state_container: AppContainer = request.app.state.container
        cart = cart_from_ids(payload.cart, state_container.catalog_service.snapshot())
        return _checkout_response(state_container.order_service.checkout_menu(cart))

    @app.get("/qrcodes/{tracker_id}/{outlink:path}", response_class=HTMLResponse)
    async def qr_redirect(
        tracker_id: str,
        outlink: str,
        request: Request,
        background_tasks: BackgroundTasks,
    ) -> HTMLResponse:
        """Log a scan in the background and send the visitor to the outlink."""
        state_container: AppContainer = request.app.state.container
        target = _decode_outlink(outlink, request.url.query)
        if urlparse(target).scheme not in {"http", "https"}:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid outlink"
            )
        background_tasks.add_task(
            state_container.qr_service.log_visit,
            tracker_id,
            target,
            request.headers.get("user-agent", ""),
            _primary_language(request.headers.get("accept-language", "")),
        )
        return HTMLResponse(
            render_redirect_page(target, state_container.settings.qr_redirect_delay_ms)
        )

    return app


def render_redirect_page(target: str, delay_ms: int) -> str:
    """Minimal page that forwards to the target after a short delay."""
    seconds = max(delay_ms, 0) / 1000
    escaped = html.escape(target, quote=True)
    script_target = json.dumps(target).replace("<", "\\u003c")
    return (
        "<!doctype html>\n"
        '<html lang="pt-BR">\n'
        "  <head>\n"
        '    <meta charset="utf-8" />\n'
        f'    <meta http-equiv="refresh" content="{seconds:g};url={escaped}" />\n'
        "    <title>Redirecionando...</title>\n"
        "  </head>\n"
        "  <body>\n"
        f'    <p>Redirecionando para <a href="{escaped}">{escaped}</a>...</p>\n'
        "    <script>setTimeout(function () { "
        f"window.location.replace({script_target}); }}, {max(delay_ms, 0)});"
        "</script>\n"
        "  </body>\n"
        "</html>\n"
    )


def _checkout_response(result: CheckoutResult) -> dict[str, object]:
    return {
        "order": serialize_order(result.order),
        "summary_text": result.summary_text,
        "chat_link": result.chat_link,
    }


def _decode_outlink(outlink: str, query: str) -> str:
    # The router hands over the path already percent-decoded once.
    target = outlink if "://" in outlink else unquote(outlink)
    if query:
        target = f"{target}?{query}"
    return target


def _primary_language(accept_language: str) -> str:
    first = accept_language.split(",", 1)[0]
    return first.split(";", 1)[0].strip()
