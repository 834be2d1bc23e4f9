"""
Ordering Error Hierarchy

Every failure a core operation can report is one of these kinds. The HTTP
layer maps each kind to a status code; the core never deals with transport.
"""

from typing import Optional


class OrderingError(Exception):
    """Base class for all order-pipeline failures."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(OrderingError):
    """Missing or empty required input."""

    def __init__(self, message: str = "Missing required fields"):
        super().__init__(message)


class ProductNotFoundError(OrderingError):
    """A requested line references an item that is not in the catalog."""

    def __init__(self, item_id: str):
        super().__init__(f"Product {item_id} not found")
        self.item_id = item_id


class OrderNotFoundError(OrderingError):
    """No order exists for the given tracking identifier."""

    def __init__(self, tracking_id: Optional[str] = None):
        super().__init__("Order not found")
        self.tracking_id = tracking_id


class StoreError(OrderingError):
    """The underlying database failed. Never retried."""
