"""
                        Services Module

Business logic of the ordering pipeline. Each service works on an open
AsyncSession; the get_* factories below are FastAPI dependencies that build
one instance per request.

Services:
    - catalog: product listing and single-item lookup
    - pricing: order quoting (pure, no writes)
    - orders: atomic order persistence, order detail and order listing
"""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from pizzeria.database import get_db
from pizzeria.services.catalog import CatalogReader, group_by_category
from pizzeria.services.orders import OrderStore, embed_order_items
from pizzeria.services.pricing import DELIVERY_FEE, OrderPricer, round2


def get_catalog_reader(db: AsyncSession = Depends(get_db)) -> CatalogReader:
    """Catalog reader bound to the request session."""
    return CatalogReader(db)


def get_order_pricer(
    catalog: CatalogReader = Depends(get_catalog_reader),
) -> OrderPricer:
    """Order pricer resolving items through the request's catalog reader."""
    return OrderPricer(catalog)


def get_order_store(db: AsyncSession = Depends(get_db)) -> OrderStore:
    """Order store bound to the request session."""
    return OrderStore(db)


__all__ = [
    "CatalogReader",
    "OrderPricer",
    "OrderStore",
    "DELIVERY_FEE",
    "group_by_category",
    "embed_order_items",
    "round2",
    "get_catalog_reader",
    "get_order_pricer",
    "get_order_store",
]
