"""Tests for the Supabase collection repository."""

from dataclasses import dataclass, field

import pytest

from fridge_manager.adapters.supabase_collection_repository import (
    SupabaseCollectionRepository,
)
from fridge_manager.domain.errors import PersistenceUnavailable, SerializationError
from fridge_manager.domain.inventory import Collection
from tests.conftest import food_row


@dataclass
class FakeResponse:
    data: list[dict[str, object]] | None


@dataclass
class FakeTable:
    name: str
    response_queue: dict[str, list[list[dict[str, object]]]] = field(
        default_factory=lambda: {"select": [], "upsert": []}
    )
    last_payload: object | None = None
    last_filters: list[tuple[str, object]] = field(default_factory=list)
    last_on_conflict: str | None = None
    error: Exception | None = None

    def queue(self, action: str, data: list[dict[str, object]]) -> None:
        self.response_queue[action].append(data)

    def select(self, *_args) -> "FakeTable":
        self._action = "select"
        return self

    def upsert(self, payload, on_conflict: str = "") -> "FakeTable":  # type: ignore[no-untyped-def]
        self._action = "upsert"
        self.last_payload = payload
        self.last_on_conflict = on_conflict
        return self

    def eq(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.last_filters.append((column, value))
        return self

    def limit(self, _count: int) -> "FakeTable":
        return self

    def execute(self) -> FakeResponse:
        if self.error is not None:
            raise self.error
        action = getattr(self, "_action", "select")
        queue = self.response_queue.get(action, [])
        data = queue.pop(0) if queue else []
        return FakeResponse(data=data)


@dataclass
class FakeSupabaseClient:
    tables: dict[str, FakeTable] = field(default_factory=dict)

    def table(self, name: str) -> FakeTable:
        if name not in self.tables:
            self.tables[name] = FakeTable(name=name)
        return self.tables[name]


def test_load_returns_stored_payload() -> None:
    client = FakeSupabaseClient()
    client.table("collections").queue("select", [{"payload": [food_row()]}])
    repository = SupabaseCollectionRepository(client)

    records = repository.load_collection(Collection.FOODS)

    assert records == [food_row()]
    assert client.tables["collections"].last_filters == [("name", "foods")]


def test_load_missing_row_is_empty() -> None:
    repository = SupabaseCollectionRepository(FakeSupabaseClient(), table="inventory")

    assert repository.load_collection(Collection.RECIPES) == []


def test_load_rejects_non_list_payload() -> None:
    client = FakeSupabaseClient()
    client.table("collections").queue("select", [{"payload": {"id": 1}}])

    with pytest.raises(SerializationError):
        SupabaseCollectionRepository(client).load_collection(Collection.FOODS)


def test_save_upserts_by_collection_name() -> None:
    client = FakeSupabaseClient()
    table = client.table("collections")
    table.queue("upsert", [{"name": "recipes"}])

    SupabaseCollectionRepository(client).save_collection(Collection.RECIPES, [])

    assert table.last_on_conflict == "name"
    assert isinstance(table.last_payload, dict)
    assert table.last_payload["name"] == "recipes"
    assert table.last_payload["payload"] == []


def test_save_failures_raise_persistence_unavailable() -> None:
    client = FakeSupabaseClient()
    client.table("collections").error = RuntimeError("network down")
    repository = SupabaseCollectionRepository(client)

    with pytest.raises(PersistenceUnavailable):
        repository.save_collection(Collection.FOODS, [])

    client.tables["collections"].error = None
    with pytest.raises(PersistenceUnavailable):
        repository.save_collection(Collection.FOODS, [])
