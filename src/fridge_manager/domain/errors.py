"""Error taxonomy for the inventory core."""


class FridgeManagerError(Exception):
    """Base class for inventory errors."""


class ValidationError(FridgeManagerError):
    """Raised when a required field is missing or malformed."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(message)
        self.field = field


class NotFoundError(FridgeManagerError):
    """Raised when an update references an unknown record id."""

    def __init__(self, collection: str, record_id: str) -> None:
        super().__init__(f"No record {record_id!r} in {collection}")
        self.collection = collection
        self.record_id = record_id


class PersistenceUnavailable(FridgeManagerError):
    """Raised when a storage tier cannot be reached or rejects a request."""


class SerializationError(FridgeManagerError):
    """Raised when persisted data cannot be decoded into records."""
