"""ASGI entrypoint for the persistence gateway."""

from fridge_manager.api.app import create_app
from fridge_manager.containers import build_gateway_container

app = create_app(build_gateway_container())
