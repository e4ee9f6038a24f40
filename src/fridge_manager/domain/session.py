"""Session state for the in-memory working set."""

from dataclasses import dataclass, field
from enum import Enum

from fridge_manager.domain.inventory import Collection, Food, Recipe


class SessionState(str, Enum):
    """Lifecycle of a working-set session."""

    UNINITIALIZED = "uninitialized"
    LOADING = "loading"
    READY = "ready"


class MutationSource(str, Enum):
    """Origin of a change to a collection."""

    LOAD = "load"
    USER = "user"


@dataclass
class InventorySession:
    """Explicit handle to the working set shared by the core services."""

    state: SessionState = SessionState.UNINITIALIZED
    foods: list[Food] = field(default_factory=list)
    recipes: list[Recipe] = field(default_factory=list)
    issued_ids: dict[Collection, set[str]] = field(
        default_factory=lambda: {collection: set() for collection in Collection}
    )

    def records(self, collection: Collection) -> list[Food] | list[Recipe]:
        """Return the working list for a collection."""
        if collection is Collection.FOODS:
            return self.foods
        return self.recipes

    def remember_ids(self, collection: Collection, ids: list[str]) -> None:
        """Mark ids as issued so they are never handed out again."""
        self.issued_ids[collection].update(ids)
