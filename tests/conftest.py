"""Shared test fixtures."""

from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import UTC, date, datetime
from pathlib import Path

import pytest

from fridge_manager.adapters.gateway_client import GatewayClient
from fridge_manager.config import Settings
from fridge_manager.containers import GatewayContainer
from fridge_manager.domain.errors import PersistenceUnavailable, SerializationError
from fridge_manager.domain.inventory import Collection, Food, Ingredient, Recipe
from fridge_manager.domain.session import InventorySession, MutationSource
from fridge_manager.services.gateway import CollectionRepository, GatewayService
from fridge_manager.services.lifecycle import MutationListener
from fridge_manager.services.storage import LocalStore, TwoTierStorage
from fridge_manager.services.sync import SyncEngine

FIXED_NOW = datetime(2026, 10, 18, 9, 30, tzinfo=UTC)
TODAY = date(2026, 10, 18)


def _empty_slots() -> dict[Collection, list[dict[str, object]]]:
    return {collection: [] for collection in Collection}


@dataclass
class FakeGatewayClient(GatewayClient):
    """Fake gateway holding collections in memory."""

    collections: dict[Collection, list[dict[str, object]]] = field(
        default_factory=_empty_slots
    )
    healthy: bool = True
    fail_reads: bool = False
    fail_writes: bool = False
    reads: list[Collection] = field(default_factory=list)
    writes: list[tuple[Collection, list[dict[str, object]]]] = field(
        default_factory=list
    )

    async def get_collection(self, collection: Collection) -> list[dict[str, object]]:
        self.reads.append(collection)
        if self.fail_reads:
            raise PersistenceUnavailable("gateway refused read")
        return list(self.collections[collection])

    async def replace_collection(
        self, collection: Collection, records: list[dict[str, object]]
    ) -> None:
        if self.fail_writes:
            raise PersistenceUnavailable("gateway refused write")
        self.writes.append((collection, records))
        self.collections[collection] = records

    async def health(self) -> dict[str, object]:
        if not self.healthy:
            raise PersistenceUnavailable("gateway unreachable")
        return {"status": "OK"}

    def writes_for(self, collection: Collection) -> list[list[dict[str, object]]]:
        return [records for name, records in self.writes if name is collection]


@dataclass
class InMemoryLocalStore(LocalStore):
    """Local fallback slots kept in memory."""

    slots: dict[Collection, list[dict[str, object]]] = field(
        default_factory=_empty_slots
    )
    fail_writes: bool = False
    writes: list[tuple[Collection, list[dict[str, object]]]] = field(
        default_factory=list
    )

    def load_collection(self, collection: Collection) -> list[dict[str, object]]:
        return list(self.slots.get(collection, []))

    def save_collection(
        self, collection: Collection, records: list[dict[str, object]]
    ) -> None:
        if self.fail_writes:
            raise PersistenceUnavailable("disk full")
        self.writes.append((collection, records))
        self.slots[collection] = records


@dataclass
class InMemoryCollectionRepository(CollectionRepository):
    """In-memory durable storage for the gateway server."""

    slots: dict[Collection, list[dict[str, object]]] = field(
        default_factory=_empty_slots
    )
    corrupted: set[Collection] = field(default_factory=set)
    fail_writes: bool = False

    def load_collection(self, collection: Collection) -> list[dict[str, object]]:
        if collection in self.corrupted:
            raise SerializationError(f"{collection.value} is corrupted")
        return list(self.slots[collection])

    def save_collection(
        self, collection: Collection, records: list[dict[str, object]]
    ) -> None:
        if self.fail_writes:
            raise PersistenceUnavailable("read-only filesystem")
        self.slots[collection] = records


@dataclass
class RecordingListener(MutationListener):
    """Mutation listener that records notifications."""

    calls: list[tuple[Collection, int]] = field(default_factory=list)

    def on_mutation(
        self,
        collection: Collection,
        records: Sequence[Food] | Sequence[Recipe],
        source: MutationSource = MutationSource.USER,
    ) -> bool:
        self.calls.append((collection, len(records)))
        return True


@dataclass
class SequentialIdGenerator:
    """Deterministic id source."""

    prefix: str = "id"
    counter: int = 0

    def __call__(self) -> str:
        self.counter += 1
        return f"{self.prefix}-{self.counter}"


def make_food(**overrides: object) -> Food:
    values: dict[str, object] = {
        "id": "food-1",
        "name": "Milk",
        "category": "dairy",
        "quantity": 1.0,
        "unit": "L",
        "expiry_date": TODAY,
        "notes": "",
        "date_added": FIXED_NOW,
    }
    values.update(overrides)
    return Food(**values)  # type: ignore[arg-type]


def make_recipe(*ingredients: Ingredient, **overrides: object) -> Recipe:
    values: dict[str, object] = {
        "id": "recipe-1",
        "name": "Pancakes",
        "description": "",
        "instructions": "Mix and fry.",
        "cooking_time": "20 min",
        "servings": 2,
        "ingredients": tuple(ingredients),
        "date_created": FIXED_NOW,
    }
    values.update(overrides)
    return Recipe(**values)  # type: ignore[arg-type]


def food_row(**overrides: object) -> dict[str, object]:
    row: dict[str, object] = {
        "id": "food-1",
        "name": "Milk",
        "category": "dairy",
        "quantity": 1,
        "unit": "L",
        "expiryDate": "2026-10-20",
        "notes": "",
        "dateAdded": "2026-10-01T08:00:00+00:00",
    }
    row.update(overrides)
    return row


def recipe_row(**overrides: object) -> dict[str, object]:
    row: dict[str, object] = {
        "id": "recipe-1",
        "name": "Pancakes",
        "description": "Fluffy",
        "instructions": "Mix and fry.",
        "cookingTime": "20 min",
        "servings": 2,
        "ingredients": [{"name": "milk", "quantity": 1, "unit": "L"}],
        "dateCreated": "2026-10-01T08:00:00+00:00",
    }
    row.update(overrides)
    return row


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        gateway_url="http://gateway.test",
        local_store_dir=str(tmp_path / "local"),
        data_dir=str(tmp_path / "data"),
        debounce_seconds=0,
    )


@pytest.fixture
def gateway_client() -> FakeGatewayClient:
    return FakeGatewayClient()


@pytest.fixture
def local_store() -> InMemoryLocalStore:
    return InMemoryLocalStore()


@pytest.fixture
def session() -> InventorySession:
    return InventorySession()


@pytest.fixture
def engine(
    session: InventorySession,
    gateway_client: FakeGatewayClient,
    local_store: InMemoryLocalStore,
) -> SyncEngine:
    storage = TwoTierStorage(gateway=gateway_client, local=local_store)
    return SyncEngine(session=session, storage=storage, debounce_seconds=0)


@pytest.fixture
def collection_repository() -> InMemoryCollectionRepository:
    return InMemoryCollectionRepository()


@pytest.fixture
def gateway_container(
    settings: Settings, collection_repository: InMemoryCollectionRepository
) -> GatewayContainer:
    service = GatewayService(collection_repository, clock=lambda: FIXED_NOW)
    return GatewayContainer(settings=settings, gateway_service=service)
