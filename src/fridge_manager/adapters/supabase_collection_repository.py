"""Supabase implementation of whole-collection storage."""

from dataclasses import dataclass
from datetime import UTC, datetime

from supabase import Client

from fridge_manager.domain.errors import PersistenceUnavailable, SerializationError
from fridge_manager.domain.inventory import Collection
from fridge_manager.services.gateway import CollectionRepository


@dataclass
class SupabaseCollectionRepository(CollectionRepository):
    """Stores each collection as a JSON payload in a single table row."""

    client: Client
    table: str = "collections"

    def load_collection(self, collection: Collection) -> list[dict[str, object]]:
        """Return the stored records for a collection."""
        try:
            response = (
                self.client.table(self.table)
                .select("payload")
                .eq("name", collection.value)
                .limit(1)
                .execute()
            )
        except Exception as exc:
            raise PersistenceUnavailable(
                f"Failed to load {collection.value} from Supabase"
            ) from exc
        if not response.data:
            return []
        payload = response.data[0].get("payload")
        if payload is None:
            return []
        if not isinstance(payload, list):
            raise SerializationError(f"Stored {collection.value} payload is not a list")
        return payload

    def save_collection(
        self, collection: Collection, records: list[dict[str, object]]
    ) -> None:
        """Upsert the row holding a collection."""
        try:
            response = (
                self.client.table(self.table)
                .upsert(
                    {
                        "name": collection.value,
                        "payload": records,
                        "updated_at": datetime.now(tz=UTC).isoformat(),
                    },
                    on_conflict="name",
                )
                .execute()
            )
        except Exception as exc:
            raise PersistenceUnavailable(
                f"Failed to save {collection.value} to Supabase"
            ) from exc
        if not response.data:
            raise PersistenceUnavailable(f"Supabase did not store {collection.value}")
