"""
Order Pricer

Turns requested lines plus a delivery address into a PricedOrder.

Rules:
    - line subtotal = round2(price * quantity), rounded once per line
    - order subtotal = round2(sum of the rounded line subtotals)
    - total = round2(order subtotal + DELIVERY_FEE)
    - round2 rounds half away from zero (ROUND_HALF_UP on Decimal)

Lines are resolved one at a time, in input order; the first unknown item
aborts pricing before any later line is looked up.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Optional, Protocol, Sequence, Union

from pizzeria.core.errors import ProductNotFoundError, ValidationError
from pizzeria.schemas import OrderLineRequest, PricedLineItem, PricedOrder, ProductOut

DELIVERY_FEE = Decimal("5.00")

_CENT = Decimal("0.01")


class ProductLookup(Protocol):
    async def get_product(self, item_id: str) -> Optional[ProductOut]: ...


def round2(value: Union[Decimal, float, int]) -> Decimal:
    """Round to two decimals, half away from zero."""
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(_CENT, rounding=ROUND_HALF_UP)


class OrderPricer:
    """Prices prospective orders against the catalog. No side effects."""

    def __init__(self, catalog: ProductLookup):
        self.catalog = catalog

    async def price_order(
        self,
        lines: Sequence[OrderLineRequest],
        address: str,
    ) -> PricedOrder:
        """
        Price an order.

        Args:
            lines: Requested (item, quantity) lines, non-empty
            address: Delivery address, non-empty

        Returns:
            PricedOrder: Lines in input order with subtotal, fee and total

        Raises:
            ValidationError: Empty lines/address or a non-positive quantity
            ProductNotFoundError: First line whose item is not in the catalog
            StoreError: Catalog lookup failed
        """
        if not lines or not address or not address.strip():
            raise ValidationError("Missing required fields")
        for line in lines:
            if line.quantity < 1:
                raise ValidationError(f"Invalid quantity for item {line.item_id}")

        priced_items = []
        subtotal_sum = Decimal("0")

        for line in lines:
            product = await self.catalog.get_product(line.item_id)
            if product is None:
                raise ProductNotFoundError(line.item_id)

            line_subtotal = round2(Decimal(str(product.price)) * line.quantity)
            subtotal_sum += line_subtotal
            priced_items.append(
                PricedLineItem(
                    product=product,
                    quantity=line.quantity,
                    subtotal=float(line_subtotal),
                )
            )

        order_subtotal = round2(subtotal_sum)
        total = round2(order_subtotal + DELIVERY_FEE)

        return PricedOrder(
            order_items=priced_items,
            subtotal=float(order_subtotal),
            delivery_fee=float(DELIVERY_FEE),
            total=float(total),
            customer_address=address,
        )
