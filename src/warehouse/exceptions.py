"""Warehouse error taxonomy.

Validation and lookup failures reuse Protean's exception hierarchy so the
FastAPI integration maps them to 400/404 without extra wiring. Conflicts and
external sync failures are warehouse-specific.
"""

from protean.exceptions import ObjectNotFoundError, ValidationError


class InsufficientStockError(ValidationError):
    """Stock on hand is below what a shipment line needs."""

    def __init__(self, product_id: str, product_name: str, available: int, requested: int):
        self.product_id = product_id
        self.product_name = product_name
        self.available = available
        self.requested = requested
        super().__init__(
            {
                "stock": [
                    f"Not enough stock for {product_name}. Available: {available}, Requested: {requested}."
                ]
            }
        )


class MissingReferenceError(ObjectNotFoundError):
    """A referenced document does not exist in the tenant's namespace."""

    def __init__(self, kind: str, identifier: str):
        self.kind = kind
        self.identifier = identifier
        super().__init__({"_entity": [f"{kind} `{identifier}` was not found"]})


class ConflictError(Exception):
    """A concurrent write touched the same documents; the caller may retry."""


class ExternalSyncError(Exception):
    """The external inventory mirror rejected or failed a sync call."""

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)
