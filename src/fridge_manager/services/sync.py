"""Synchronization between the working set and persistent storage."""

import asyncio
import hashlib
import json
import logging
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass, field

from fridge_manager.domain.errors import PersistenceUnavailable, SerializationError
from fridge_manager.domain.inventory import Collection, Food, Recipe
from fridge_manager.domain.serialization import dump_records, parse_records
from fridge_manager.domain.session import InventorySession, MutationSource, SessionState
from fridge_manager.services.storage import CollectionStorage, StorageTier

_logger = logging.getLogger(__name__)

DEFAULT_DEBOUNCE_SECONDS = 0.5


def fingerprint(records: Sequence[dict[str, object]]) -> str:
    """Digest a collection's content independently of record order."""
    keyed = {str(record.get("id")): record for record in records}
    encoded = json.dumps(keyed, sort_keys=True, separators=(",", ":"), default=str)
    return hashlib.sha256(encoded.encode("utf-8")).hexdigest()


@dataclass
class _PendingWrite:
    task: "asyncio.Task[None]"
    payload: list[dict[str, object]]
    digest: str


@dataclass
class SyncEngine:
    """Loads the working set once and writes changed collections back.

    Each collection has at most one pending write-back. A new change replaces
    it and restarts the quiescence window, so bursts of edits collapse into a
    single write of the final state. Writes for one collection never overlap.
    """

    session: InventorySession
    storage: CollectionStorage
    debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep
    _persisted: dict[Collection, str] = field(default_factory=dict, init=False)
    _written: dict[Collection, str] = field(default_factory=dict, init=False)
    _pending: dict[Collection, _PendingWrite] = field(default_factory=dict, init=False)
    _tasks: set["asyncio.Task[None]"] = field(default_factory=set, init=False)
    _locks: dict[Collection, asyncio.Lock] = field(default_factory=dict, init=False)

    async def load(self) -> None:
        """Populate the working set from storage.

        Never raises for storage problems: an unreadable collection starts
        empty and the session becomes READY regardless.
        """
        if self.session.state is not SessionState.UNINITIALIZED:
            raise RuntimeError(f"Session cannot be loaded twice ({self.session.state})")
        self.session.state = SessionState.LOADING
        try:
            for collection in Collection:
                await self._load_collection(collection)
        finally:
            self.session.state = SessionState.READY
        _logger.info(
            "Loaded %s foods and %s recipes",
            len(self.session.foods),
            len(self.session.recipes),
        )

    def on_mutation(
        self,
        collection: Collection,
        records: Sequence[Food] | Sequence[Recipe],
        source: MutationSource = MutationSource.USER,
    ) -> bool:
        """Schedule a write-back unless storage already holds this content.

        A write still in flight counts as not yet held, so reverting to the
        persisted state while it runs schedules another write. Returns True
        when a write-back is now pending. Must be called from inside a
        running event loop.
        """
        if source is MutationSource.LOAD or self.session.state is not SessionState.READY:
            return False
        payload = dump_records(collection, list(records))
        digest = fingerprint(payload)
        self._cancel_pending(collection)
        if self._is_settled(collection, digest):
            _logger.debug("No changes to persist for %s", collection.value)
            return False
        task = asyncio.get_running_loop().create_task(
            self._debounced_write(collection, payload, digest)
        )
        self._track(task)
        self._pending[collection] = _PendingWrite(
            task=task, payload=payload, digest=digest
        )
        return True

    def has_pending(self, collection: Collection) -> bool:
        """Return True while a write-back for the collection is waiting."""
        return collection in self._pending

    async def flush(self) -> None:
        """Run pending write-backs now instead of waiting out the window."""
        pending = list(self._pending.items())
        self._pending.clear()
        for _, write in pending:
            write.task.cancel()
        for collection, write in pending:
            await self._persist(collection, write.payload, write.digest)
        await self.wait_idle()

    async def wait_idle(self) -> None:
        """Wait until no write-back is pending or in flight."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def _load_collection(self, collection: Collection) -> None:
        try:
            result = await self.storage.read(collection)
            records = parse_records(collection, result.records)
        except (PersistenceUnavailable, SerializationError) as exc:
            _logger.warning("Could not load %s, starting empty: %s", collection.value, exc)
            records = []
        else:
            if result.tier is StorageTier.FALLBACK:
                _logger.warning("Loaded %s from local storage", collection.value)
        if collection is Collection.FOODS:
            self.session.foods = records
        else:
            self.session.recipes = records
        self.session.remember_ids(collection, [record.id for record in records])
        digest = fingerprint(dump_records(collection, records))
        self._persisted[collection] = digest
        self._written[collection] = digest

    async def _debounced_write(
        self, collection: Collection, payload: list[dict[str, object]], digest: str
    ) -> None:
        await self.sleep(self.debounce_seconds)
        current = self._pending.get(collection)
        if current is not None and current.task is asyncio.current_task():
            del self._pending[collection]
        await self._persist(collection, payload, digest)

    async def _persist(
        self, collection: Collection, payload: list[dict[str, object]], digest: str
    ) -> None:
        lock = self._locks.setdefault(collection, asyncio.Lock())
        async with lock:
            # A newer write may have landed while this one waited.
            if self._is_settled(collection, digest):
                return
            self._written[collection] = digest
            try:
                tier = await self.storage.replace(collection, payload)
            except PersistenceUnavailable:
                self._written.pop(collection, None)
                _logger.exception("Failed to persist %s to any storage", collection.value)
                return
            if tier is StorageTier.PRIMARY:
                self._persisted[collection] = digest
                _logger.info("Saved %s %s", len(payload), collection.value)
            else:
                _logger.warning(
                    "Saved %s locally; gateway retried on next change",
                    collection.value,
                )

    def _is_settled(self, collection: Collection, digest: str) -> bool:
        # The gateway holds this content and no started write replaces it.
        persisted = self._persisted.get(collection)
        return digest == persisted and digest == self._written.get(collection)

    def _cancel_pending(self, collection: Collection) -> None:
        pending = self._pending.pop(collection, None)
        if pending is not None:
            pending.task.cancel()

    def _track(self, task: "asyncio.Task[None]") -> None:
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
