"""JSON file storage with one slot per collection."""

import json
import logging
from dataclasses import dataclass
from pathlib import Path

from fridge_manager.domain.errors import PersistenceUnavailable, SerializationError
from fridge_manager.domain.inventory import Collection

_logger = logging.getLogger(__name__)


@dataclass
class JsonFileCollectionStore:
    """Keeps each collection as a pretty-printed JSON array on disk.

    Serves both as the client's local fallback slots and as the gateway
    server's durable file backend; only the slot prefix differs.
    """

    directory: Path
    prefix: str = ""

    def slot_path(self, collection: Collection) -> Path:
        """Return the file backing a collection."""
        return self.directory / f"{self.prefix}{collection.value}.json"

    def load_collection(self, collection: Collection) -> list[dict[str, object]]:
        """Read a collection, returning an empty list when the slot is absent."""
        path = self.slot_path(collection)
        if not path.exists():
            return []
        try:
            with path.open("r", encoding="utf-8") as fp:
                data = json.load(fp)
        except OSError as exc:
            raise PersistenceUnavailable(f"Cannot read {path}: {exc}") from exc
        except ValueError as exc:
            raise SerializationError(f"{path} is not valid JSON") from exc
        if not isinstance(data, list):
            raise SerializationError(f"{path} does not hold a JSON array")
        return data

    def save_collection(
        self, collection: Collection, records: list[dict[str, object]]
    ) -> None:
        """Replace a collection slot."""
        path = self.slot_path(collection)
        tmp_path = path.with_suffix(".json.tmp")
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            with tmp_path.open("w", encoding="utf-8") as fp:
                json.dump(records, fp, indent=2, ensure_ascii=False)
            tmp_path.replace(path)
        except OSError as exc:
            raise PersistenceUnavailable(f"Cannot write {path}: {exc}") from exc
        _logger.debug("Wrote %s %s records to %s", len(records), collection.value, path)
