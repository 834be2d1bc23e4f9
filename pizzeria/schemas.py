"""
Pydantic Schemas for Request/Response Validation

Field aliases carry the public JSON names (itemId, orderItems, ...);
Python code uses the snake_case attribute names.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# CATALOG
# =============================================================================

class ProductOut(BaseModel):
    """Catalog product, also the snapshot embedded in order lines."""
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    item_id: str = Field(..., alias="itemId", examples=["P1"])
    name: str = Field(..., examples=["Pizza Margherita"])
    price: float = Field(..., ge=0, examples=[9.5])
    description: Optional[str] = None
    category: str = Field(..., examples=["Pizzas"])


class CatalogData(BaseModel):
    categories: Dict[str, List[ProductOut]]


# =============================================================================
# REQUEST SCHEMAS
# =============================================================================

class OrderLineRequest(BaseModel):
    """Single requested line: catalog item and quantity."""
    model_config = ConfigDict(populate_by_name=True)

    item_id: str = Field(..., alias="itemId", min_length=1, examples=["P1"])
    quantity: int = Field(..., alias="itemQuantity", ge=1, examples=[2])


class OrderRequest(BaseModel):
    """
    Body of the calculate and create endpoints.

    Both fields default to empty so that missing input surfaces as the
    pricer's "Missing required fields" error instead of a schema error.
    """
    model_config = ConfigDict(populate_by_name=True)

    order_items: List[OrderLineRequest] = Field(default_factory=list, alias="orderItems")
    customer_address: str = Field(default="", alias="customerAddress", examples=["123 Main St"])


# =============================================================================
# PRICED ORDER / ORDER VIEWS
# =============================================================================

class PricedLineItem(BaseModel):
    """A resolved line: product snapshot, quantity and rounded subtotal."""
    model_config = ConfigDict(populate_by_name=True)

    product: ProductOut
    quantity: int = Field(..., alias="itemQuantity")
    subtotal: float


class PricedOrder(BaseModel):
    """Fully computed, not yet persisted order."""
    model_config = ConfigDict(populate_by_name=True)

    order_items: List[PricedLineItem] = Field(..., alias="orderItems")
    subtotal: float
    delivery_fee: float
    total: float
    customer_address: str = Field(..., alias="customerAddress")


class OrderDetail(BaseModel):
    """Persisted order with its lines re-joined to the live catalog."""
    model_config = ConfigDict(populate_by_name=True)

    tracking_id: str = Field(..., alias="orderTrackingId")
    customer_address: str = Field(..., alias="customerAddress")
    subtotal: float
    delivery_fee: float
    total: float
    status: str
    created_at: str
    estimated_delivery_time: str
    order_items: List[PricedLineItem] = Field(default_factory=list, alias="orderItems")


# =============================================================================
# RESPONSE ENVELOPES
# =============================================================================

class CatalogResponse(BaseModel):
    success: bool = True
    data: CatalogData


class PricedOrderResponse(BaseModel):
    success: bool = True
    data: PricedOrder


class CreatedOrderData(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    tracking_id: str = Field(..., alias="orderTrackingId")
    order: Optional[OrderDetail]


class OrderCreateResponse(BaseModel):
    success: bool = True
    data: CreatedOrderData


class OrderData(BaseModel):
    order: OrderDetail


class OrderResponse(BaseModel):
    success: bool = True
    data: OrderData


class ErrorResponse(BaseModel):
    """Standard error response."""
    success: bool = False
    error: str
    timestamp: datetime
    detail: Optional[Any] = None


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    database: str
    timestamp: datetime
