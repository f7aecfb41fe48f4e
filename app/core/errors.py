# app/core/errors.py

class InventoryError(Exception):
    """Base class for errors raised by the inventory core."""


class NotFoundError(InventoryError):
    def __init__(self, entity: str, entity_id):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} not found")


class StorageError(InventoryError):
    """The database rejected a write; the transaction has been rolled back."""
