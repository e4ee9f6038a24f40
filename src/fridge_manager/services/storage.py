"""Two-tier storage policy: gateway first, device-local slots second."""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

from fridge_manager.adapters.gateway_client import GatewayClient
from fridge_manager.domain.errors import PersistenceUnavailable, SerializationError
from fridge_manager.domain.inventory import Collection

_logger = logging.getLogger(__name__)


class LocalStore(Protocol):
    """Device-local whole-collection slots."""

    def load_collection(self, collection: Collection) -> list[dict[str, object]]:
        """Return a slot's records, or an empty list when absent."""

    def save_collection(
        self, collection: Collection, records: list[dict[str, object]]
    ) -> None:
        """Replace a slot's records."""


class StorageTier(str, Enum):
    """Which storage tier served an operation."""

    PRIMARY = "primary"
    FALLBACK = "fallback"


@dataclass(frozen=True)
class ReadResult:
    """Records read for a collection and the tier that supplied them."""

    records: list[dict[str, object]]
    tier: StorageTier


class CollectionStorage(Protocol):
    """Storage contract used by the synchronization engine."""

    async def read(self, collection: Collection) -> ReadResult:
        """Read a whole collection."""

    async def replace(
        self, collection: Collection, records: list[dict[str, object]]
    ) -> StorageTier:
        """Replace a whole collection and report the tier that took it."""


@dataclass
class TwoTierStorage(CollectionStorage):
    """Routes reads and writes to the gateway when it answers its probe.

    A probe failure sends the operation straight to the local store. A
    gateway that passes the probe but then fails the operation itself also
    degrades to the local store, once, without retrying.
    """

    gateway: GatewayClient
    local: LocalStore

    async def probe(self) -> StorageTier:
        """Pick the tier to use by asking the gateway for its health."""
        try:
            await self.gateway.health()
        except (PersistenceUnavailable, SerializationError) as exc:
            _logger.warning("Gateway probe failed, using local storage: %s", exc)
            return StorageTier.FALLBACK
        return StorageTier.PRIMARY

    async def read(self, collection: Collection) -> ReadResult:
        """Read a collection from the selected tier.

        Raises SerializationError when the chosen tier holds malformed data.
        """
        if await self.probe() is StorageTier.PRIMARY:
            try:
                records = await self.gateway.get_collection(collection)
            except PersistenceUnavailable as exc:
                _logger.warning(
                    "Failed to fetch %s from gateway, using local storage: %s",
                    collection.value,
                    exc,
                )
            else:
                return ReadResult(records=records, tier=StorageTier.PRIMARY)
        return ReadResult(
            records=self.local.load_collection(collection),
            tier=StorageTier.FALLBACK,
        )

    async def replace(
        self, collection: Collection, records: list[dict[str, object]]
    ) -> StorageTier:
        """Replace a collection on the selected tier.

        Raises PersistenceUnavailable only when both tiers refuse the write.
        """
        if await self.probe() is StorageTier.PRIMARY:
            try:
                await self.gateway.replace_collection(collection, records)
            except (PersistenceUnavailable, SerializationError) as exc:
                _logger.warning(
                    "Failed to save %s to gateway, using local storage: %s",
                    collection.value,
                    exc,
                )
            else:
                return StorageTier.PRIMARY
        self.local.save_collection(collection, records)
        return StorageTier.FALLBACK
