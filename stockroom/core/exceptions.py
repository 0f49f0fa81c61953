"""
Domain error taxonomy shared by services, repositories and the API layer.

Every error carries a human readable message plus keyword context that is
logged alongside it. The API layer maps each class to an HTTP status code.
"""

from typing import Any


class InventoryServiceError(Exception):
    """Base exception for inventory and order operations."""

    def __init__(self, message: str, **context: Any):
        super().__init__(message)
        self.message = message
        self.context = context


class NotFoundError(InventoryServiceError):
    """A referenced product, order or catalog entry does not exist."""


class InvalidOperationError(InventoryServiceError):
    """A domain rule was violated, e.g. confirming an order without stock."""


class StoreConstraintError(InventoryServiceError):
    """The backing store rejected a write because of an integrity constraint."""


class CsvFormatError(InventoryServiceError):
    """An uploaded CSV file cannot be processed at all."""

    def __init__(self, message: str, code: str, **context: Any):
        super().__init__(message, code=code, **context)
        self.code = code
