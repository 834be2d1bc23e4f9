"""
SQLAlchemy Database Models

Normalized storage for the catalog and for placed orders:
- products: the pre-seeded menu
- orders: one header row per placed order
- order_items: one row per ordered line, joined back to products on read

Column names follow the public API field names (itemId, orderTrackingId, ...).
"""

import enum

from sqlalchemy import Column, Integer, String, Float, Text, ForeignKey
from sqlalchemy.orm import relationship

from pizzeria.database import Base


class OrderStatus(str, enum.Enum):
    """
    Known order statuses.

    Only NEW is ever written; the column itself stays free text and there
    is no transition logic.
    """
    NEW = "new"
    PREPARING = "preparing"
    DELIVERING = "delivering"
    COMPLETED = "completed"


class Product(Base):
    """A catalog entry. Read-only for the ordering pipeline."""
    __tablename__ = "products"

    item_id = Column("itemId", String(64), primary_key=True)
    name = Column(String(100), nullable=False)
    price = Column(Float, nullable=False)
    description = Column(Text, nullable=True)
    category = Column(String(50), nullable=False, index=True)

    def __repr__(self):
        return f"<Product {self.item_id} - {self.name} - {self.price:.2f}>"


class Order(Base):
    """
    Order header.

    Written exactly once together with its items, never updated.
    """
    __tablename__ = "orders"

    tracking_id = Column("orderTrackingId", String(36), primary_key=True)
    customer_address = Column("customerAddress", Text, nullable=False)

    # =========================================================================
    # PRICING
    # =========================================================================
    subtotal = Column(Float, nullable=False)
    delivery_fee = Column(Float, nullable=False)
    total = Column(Float, nullable=False)

    # =========================================================================
    # STATUS & TIMESTAMPS
    # =========================================================================
    status = Column(String(20), nullable=False, default=OrderStatus.NEW.value)
    created_at = Column(String(40), nullable=False, index=True)  # ISO-8601
    estimated_delivery_time = Column(String(40), nullable=False)

    items = relationship(
        "OrderItem",
        back_populates="order",
        order_by="OrderItem.id",
        lazy="raise",
    )

    def __repr__(self):
        return f"<Order {self.tracking_id} - {self.total:.2f} - {self.status}>"


class OrderItem(Base):
    """One ordered line. The surrogate id keeps the original line order."""
    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True, autoincrement=True)
    tracking_id = Column(
        "orderTrackingId",
        String(36),
        ForeignKey("orders.orderTrackingId"),
        nullable=False,
        index=True,
    )
    item_id = Column("itemId", String(64), ForeignKey("products.itemId"), nullable=False)
    quantity = Column("itemQuantity", Integer, nullable=False)
    subtotal = Column(Float, nullable=False)

    order = relationship("Order", back_populates="items")

    def __repr__(self):
        return f"<OrderItem {self.tracking_id} - {self.quantity}x {self.item_id}>"
