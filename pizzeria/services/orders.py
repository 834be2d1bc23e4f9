"""
Order Store & Order Listing

Persists priced orders and reads them back in the denormalized shape used by
the API and the dashboard.

Writes:
    create_order() stages the header and every line in one unit of work and
    commits once, so either the whole order is visible or none of it is.

Reads:
    get_order() and list_orders() join order_items to products at read time
    and embed the live product row into each line (embed_order_items). A
    price change in the catalog is therefore visible on historical orders.

Listing isolates failures per order: if one order's lines cannot be loaded
or embedded, that order is returned with an empty line list and the rest of
the listing continues.
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import Callable, Iterable, Optional

from pydantic import ValidationError
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from pizzeria.core.errors import StoreError
from pizzeria.models import Order, OrderItem, OrderStatus, Product
from pizzeria.schemas import OrderDetail, PricedLineItem, PricedOrder, ProductOut

logger = logging.getLogger(__name__)

ESTIMATED_DELIVERY_TIME = "30-45 minutes"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_tracking_id() -> str:
    return str(uuid.uuid4())


def embed_order_items(rows: Iterable[tuple[OrderItem, Product]]) -> list[PricedLineItem]:
    """Build API line items from (order item, product) join rows."""
    return [
        PricedLineItem(
            product=ProductOut.model_validate(product),
            quantity=item.quantity,
            subtotal=item.subtotal,
        )
        for item, product in rows
    ]


def _order_header(order: Order) -> OrderDetail:
    return OrderDetail(
        tracking_id=order.tracking_id,
        customer_address=order.customer_address,
        subtotal=order.subtotal,
        delivery_fee=order.delivery_fee,
        total=order.total,
        status=order.status,
        created_at=order.created_at,
        estimated_delivery_time=order.estimated_delivery_time,
    )


class OrderStore:
    """
    Order persistence on top of an AsyncSession.

    Args:
        session: Open database session
        clock: Returns the creation timestamp (UTC now by default)
        id_factory: Returns a fresh tracking id (uuid4 by default)
    """

    def __init__(
        self,
        session: AsyncSession,
        clock: Callable[[], datetime] = _utcnow,
        id_factory: Callable[[], str] = _new_tracking_id,
    ):
        self.session = session
        self.clock = clock
        self.id_factory = id_factory

    # =========================================================================
    # WRITE
    # =========================================================================

    async def create_order(self, priced: PricedOrder) -> str:
        """
        Persist a priced order and its lines atomically.

        Returns:
            str: The generated tracking identifier

        Raises:
            StoreError: The commit failed; nothing was written
        """
        tracking_id = self.id_factory()

        order = Order(
            tracking_id=tracking_id,
            customer_address=priced.customer_address,
            subtotal=priced.subtotal,
            delivery_fee=priced.delivery_fee,
            total=priced.total,
            status=OrderStatus.NEW.value,
            created_at=self.clock().isoformat(),
            estimated_delivery_time=ESTIMATED_DELIVERY_TIME,
            items=[
                OrderItem(
                    tracking_id=tracking_id,
                    item_id=line.product.item_id,
                    quantity=line.quantity,
                    subtotal=line.subtotal,
                )
                for line in priced.order_items
            ],
        )

        try:
            self.session.add(order)
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise StoreError(f"Failed to create order: {e}") from e

        return tracking_id

    # =========================================================================
    # READ
    # =========================================================================

    async def _load_items(self, tracking_id: str) -> list[PricedLineItem]:
        query = (
            select(OrderItem, Product)
            .join(Product, OrderItem.item_id == Product.item_id)
            .where(OrderItem.tracking_id == tracking_id)
            .order_by(OrderItem.id)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(query)
        return embed_order_items(result.all())

    async def get_order(self, tracking_id: str) -> Optional[OrderDetail]:
        """
        Fetch one order with its embedded lines.

        Returns:
            OrderDetail, or None when no order has this tracking id

        Raises:
            StoreError: The database failed
        """
        try:
            result = await self.session.execute(
                select(Order).where(Order.tracking_id == tracking_id)
            )
            order = result.scalar_one_or_none()
            if order is None:
                return None

            detail = _order_header(order)
            detail.order_items = await self._load_items(tracking_id)
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to get order {tracking_id}: {e}") from e

        return detail

    async def list_orders(self) -> list[OrderDetail]:
        """
        Fetch every order, newest first, each with its embedded lines.

        Raises:
            StoreError: The order headers could not be read
        """
        try:
            result = await self.session.execute(
                select(Order).order_by(Order.created_at.desc())
            )
            orders = [_order_header(o) for o in result.scalars().all()]
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to list orders: {e}") from e

        for detail in orders:
            try:
                detail.order_items = await self._load_items(detail.tracking_id)
            except (SQLAlchemyError, ValidationError) as e:
                logger.warning(
                    f"Failed to fetch items for order {detail.tracking_id}: {e}"
                )
                await self.session.rollback()
                detail.order_items = []

        return orders
