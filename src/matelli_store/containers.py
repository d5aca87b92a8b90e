"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from matelli_store.adapters.openai_insight_client import OpenAIInsightClient
from matelli_store.adapters.supabase_meal_repository import SupabaseMealRepository
from matelli_store.adapters.supabase_order_repository import SupabaseOrderRepository
from matelli_store.adapters.supabase_qr_repository import SupabaseQrRepository
from matelli_store.config import Settings
from matelli_store.services.catalog import CatalogService
from matelli_store.services.insight import InsightService
from matelli_store.services.orders import OrderService
from matelli_store.services.qrcodes import QrService
from matelli_store.services.shopping import ShoppingListService, ShoppingListView


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    catalog_service: CatalogService
    order_service: OrderService
    shopping_list_service: ShoppingListService
    shopping_list_view: ShoppingListView
    qr_service: QrService
    insight_service: InsightService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    catalog_service = CatalogService(SupabaseMealRepository(supabase_client))
    order_service = OrderService(
        repository=SupabaseOrderRepository(supabase_client),
        whatsapp_phone=resolved_settings.whatsapp_phone,
        chat_base_url=resolved_settings.chat_base_url,
    )
    shopping_list_view = ShoppingListView()
    shopping_list_view.attach(order_service)
    insight_client = OpenAIInsightClient.create(
        resolved_settings.openai_api_key,
        timeout_seconds=resolved_settings.insight_timeout_seconds,
    )

    async def close_resources() -> None:
        shopping_list_view.detach()
        await insight_client.client.close()

    return AppContainer(
        settings=resolved_settings,
        catalog_service=catalog_service,
        order_service=order_service,
        shopping_list_service=ShoppingListService(order_service),
        shopping_list_view=shopping_list_view,
        qr_service=QrService(SupabaseQrRepository(supabase_client)),
        insight_service=InsightService(
            client=insight_client,
            model=resolved_settings.openai_model,
            max_output_tokens=resolved_settings.insight_max_output_tokens,
        ),
        close_resources=close_resources,
    )
