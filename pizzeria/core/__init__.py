"""
Core module initialization.
Exports configuration, logging utilities and the error hierarchy.
"""

from pizzeria.core.config import get_settings, Settings, EnvironmentMode
from pizzeria.core.errors import (
    OrderingError,
    ValidationError,
    ProductNotFoundError,
    OrderNotFoundError,
    StoreError,
)

__all__ = [
    "get_settings",
    "Settings",
    "EnvironmentMode",
    "OrderingError",
    "ValidationError",
    "ProductNotFoundError",
    "OrderNotFoundError",
    "StoreError",
]
