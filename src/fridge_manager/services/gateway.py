"""Server-side service behind the persistence gateway endpoints."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Protocol

from fridge_manager.domain.errors import SerializationError
from fridge_manager.domain.inventory import Collection

_logger = logging.getLogger(__name__)


class CollectionRepository(Protocol):
    """Durable whole-collection storage."""

    def load_collection(self, collection: Collection) -> list[dict[str, object]]:
        """Return every stored record of a collection."""

    def save_collection(
        self, collection: Collection, records: list[dict[str, object]]
    ) -> None:
        """Replace a stored collection."""


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class GatewayService:
    """Reads and replaces named collections without interpreting records."""

    repository: CollectionRepository
    clock: Callable[[], datetime] = field(default=_utcnow)

    def get_collection(self, collection: Collection) -> list[dict[str, object]]:
        """Return a collection, serving unreadable data as empty."""
        try:
            return self.repository.load_collection(collection)
        except SerializationError:
            _logger.exception("Stored %s are unreadable", collection.value)
            return []

    def replace_collection(
        self, collection: Collection, records: list[dict[str, object]]
    ) -> None:
        """Replace a collection; storage errors propagate to the caller."""
        self.repository.save_collection(collection, records)
        _logger.info("Replaced %s with %s records", collection.value, len(records))

    def health(self) -> dict[str, str]:
        """Return the liveness payload."""
        return {"status": "OK", "timestamp": self.clock().isoformat()}
