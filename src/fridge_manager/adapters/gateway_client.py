"""HTTP client for the persistence gateway."""

from dataclasses import dataclass
from typing import Protocol

import httpx

from fridge_manager.domain.errors import PersistenceUnavailable, SerializationError
from fridge_manager.domain.inventory import Collection, collection_path


class GatewayClient(Protocol):
    """Interface for the whole-collection persistence gateway."""

    async def get_collection(self, collection: Collection) -> list[dict[str, object]]:
        """Return every stored record of a collection."""

    async def replace_collection(
        self, collection: Collection, records: list[dict[str, object]]
    ) -> None:
        """Replace a stored collection with the given records."""

    async def health(self) -> dict[str, object]:
        """Return the gateway liveness payload."""


@dataclass
class HttpxGatewayClient(GatewayClient):
    """Gateway client implemented with httpx."""

    base_url: str
    http_client: httpx.AsyncClient
    timeout: float = 10

    @classmethod
    def create(cls, base_url: str, timeout: float = 10) -> "HttpxGatewayClient":
        """Create a gateway client with a managed httpx session."""
        return cls(
            base_url=base_url.rstrip("/"),
            http_client=httpx.AsyncClient(),
            timeout=timeout,
        )

    async def get_collection(self, collection: Collection) -> list[dict[str, object]]:
        """Fetch a whole collection."""
        payload = await self._request("GET", collection_path(collection))
        if not isinstance(payload, list):
            raise SerializationError(
                f"Gateway returned {type(payload).__name__} for {collection.value}"
            )
        return payload

    async def replace_collection(
        self, collection: Collection, records: list[dict[str, object]]
    ) -> None:
        """Replace a whole collection."""
        await self._request("PUT", collection_path(collection), json=records)

    async def health(self) -> dict[str, object]:
        """Call the gateway liveness probe."""
        payload = await self._request("GET", "/health")
        if not isinstance(payload, dict):
            raise SerializationError("Gateway health payload is not an object")
        return payload

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()

    async def _request(
        self, method: str, path: str, json: object | None = None
    ) -> object:
        url = f"{self.base_url}{path}"
        try:
            response = await self.http_client.request(
                method, url, json=json, timeout=self.timeout
            )
            response.raise_for_status()
        except httpx.HTTPError as exc:
            raise PersistenceUnavailable(f"{method} {path} failed: {exc}") from exc
        try:
            return response.json()
        except ValueError as exc:
            raise SerializationError(f"{method} {path} returned invalid JSON") from exc
