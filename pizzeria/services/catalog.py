"""
Catalog Reader

Read-only access to the products table: the full menu for the catalog
endpoint and single-item lookups for the pricer.
"""

from typing import Iterable, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from pizzeria.core.errors import StoreError
from pizzeria.models import Product
from pizzeria.schemas import ProductOut


class CatalogReader:
    """Fetches products through an open database session."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def list_products(self) -> list[ProductOut]:
        """
        Return every product sorted by (category, name).

        Raises:
            StoreError: If the query fails
        """
        query = select(Product).order_by(Product.category, Product.name)
        try:
            result = await self.session.execute(query)
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to fetch products: {e}") from e
        return [ProductOut.model_validate(p) for p in result.scalars().all()]

    async def get_product(self, item_id: str) -> Optional[ProductOut]:
        """Return the product with this id, or None."""
        try:
            result = await self.session.execute(
                select(Product).where(Product.item_id == item_id)
            )
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to fetch product {item_id}: {e}") from e
        product = result.scalar_one_or_none()
        return ProductOut.model_validate(product) if product else None


def group_by_category(products: Iterable[ProductOut]) -> dict[str, list[ProductOut]]:
    """Group products by category, keeping their incoming order in each group."""
    grouped: dict[str, list[ProductOut]] = {}
    for product in products:
        grouped.setdefault(product.category, []).append(product)
    return grouped
