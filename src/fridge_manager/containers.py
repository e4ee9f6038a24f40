"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from pathlib import Path

from supabase import create_client

from fridge_manager.adapters.gateway_client import HttpxGatewayClient
from fridge_manager.adapters.json_file_store import JsonFileCollectionStore
from fridge_manager.adapters.supabase_collection_repository import (
    SupabaseCollectionRepository,
)
from fridge_manager.config import Settings
from fridge_manager.domain.session import InventorySession
from fridge_manager.services.gateway import CollectionRepository, GatewayService
from fridge_manager.services.lifecycle import RecordLifecycleManager
from fridge_manager.services.storage import TwoTierStorage
from fridge_manager.services.sync import SyncEngine
from fridge_manager.services.views import InventoryViews

LOCAL_SLOT_PREFIX = "fridge_manager_"


@dataclass
class AppContainer:
    """Holds the client-side session and the services bound to it."""

    settings: Settings
    session: InventorySession
    storage: TwoTierStorage
    sync_engine: SyncEngine
    lifecycle: RecordLifecycleManager
    views: InventoryViews
    close_resources: Callable[[], Awaitable[None]]


@dataclass
class GatewayContainer:
    """Holds the dependencies of the persistence gateway server."""

    settings: Settings
    gateway_service: GatewayService


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the client-side dependency container."""
    resolved_settings = settings or Settings()
    gateway_client = HttpxGatewayClient.create(
        resolved_settings.gateway_url,
        timeout=resolved_settings.gateway_timeout_seconds,
    )
    local_store = JsonFileCollectionStore(
        directory=Path(resolved_settings.local_store_dir),
        prefix=LOCAL_SLOT_PREFIX,
    )
    storage = TwoTierStorage(gateway=gateway_client, local=local_store)
    session = InventorySession()
    sync_engine = SyncEngine(
        session=session,
        storage=storage,
        debounce_seconds=resolved_settings.debounce_seconds,
    )
    lifecycle = RecordLifecycleManager(session=session, listener=sync_engine)
    views = InventoryViews(
        session=session,
        window_days=resolved_settings.expiring_window_days,
        strict=resolved_settings.strict_recipe_matching,
    )

    async def close_resources() -> None:
        await sync_engine.flush()
        await gateway_client.close()

    return AppContainer(
        settings=resolved_settings,
        session=session,
        storage=storage,
        sync_engine=sync_engine,
        lifecycle=lifecycle,
        views=views,
        close_resources=close_resources,
    )


def build_gateway_container(settings: Settings | None = None) -> GatewayContainer:
    """Create the gateway server dependency container."""
    resolved_settings = settings or Settings()
    return GatewayContainer(
        settings=resolved_settings,
        gateway_service=GatewayService(_build_repository(resolved_settings)),
    )


def _build_repository(settings: Settings) -> CollectionRepository:
    backend = settings.storage_backend.strip().lower()
    if backend == "file":
        return JsonFileCollectionStore(directory=Path(settings.data_dir))
    if backend == "supabase":
        if not settings.supabase_url or not settings.supabase_service_key:
            raise ValueError(
                "Supabase backend needs supabase_url and supabase_service_key"
            )
        client = create_client(settings.supabase_url, settings.supabase_service_key)
        return SupabaseCollectionRepository(client, table=settings.supabase_table)
    raise ValueError(f"Unknown storage backend: {settings.storage_backend}")
