"""FastAPI application factory for the persistence gateway."""

import logging
from typing import Any

from fastapi import Body, FastAPI, HTTPException, Request, status
from fastapi.middleware.cors import CORSMiddleware

from fridge_manager.api.models import HealthStatus, SaveAcknowledgement
from fridge_manager.app_logging import configure_logging
from fridge_manager.config import parse_allowed_origins
from fridge_manager.containers import GatewayContainer
from fridge_manager.domain.errors import PersistenceUnavailable
from fridge_manager.domain.inventory import Collection, collection_path

_logger = logging.getLogger(__name__)


def create_app(container: GatewayContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)

    app = FastAPI(title="Fridge Manager Gateway")
    app.state.container = container
    app.add_middleware(
        CORSMiddleware,
        allow_origins=parse_allowed_origins(container.settings.cors_allow_origins),
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    async def health(request: Request) -> HealthStatus:
        """Liveness probe used by clients to pick a storage tier."""
        state_container: GatewayContainer = request.app.state.container
        return HealthStatus(**state_container.gateway_service.health())

    for collection in Collection:
        _add_collection_routes(app, collection)

    return app


def _add_collection_routes(app: FastAPI, collection: Collection) -> None:
    path = collection_path(collection)

    async def read_collection(request: Request) -> list[dict[str, Any]]:
        state_container: GatewayContainer = request.app.state.container
        return state_container.gateway_service.get_collection(collection)

    async def replace_collection(
        request: Request, records: list[dict[str, Any]] = Body(...)
    ) -> SaveAcknowledgement:
        state_container: GatewayContainer = request.app.state.container
        try:
            state_container.gateway_service.replace_collection(collection, records)
        except PersistenceUnavailable as exc:
            _logger.exception("Failed to save %s", collection.value)
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Failed to save {collection.value}",
            ) from exc
        return SaveAcknowledgement(
            message=f"{collection.value.capitalize()} saved successfully"
        )

    app.add_api_route(
        path,
        read_collection,
        methods=["GET"],
        name=f"get_{collection.value}",
        summary=f"Return all {collection.value}",
    )
    app.add_api_route(
        path,
        replace_collection,
        methods=["PUT", "POST"],
        name=f"replace_{collection.value}",
        summary=f"Replace all {collection.value}",
    )
