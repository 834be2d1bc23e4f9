"""Tests for order pricing."""

from decimal import Decimal

import pytest

from pizzeria.core.errors import ProductNotFoundError, ValidationError
from pizzeria.schemas import OrderLineRequest, ProductOut
from pizzeria.services.pricing import DELIVERY_FEE, OrderPricer, round2

from tests.conftest import RecordingCatalog


def lines(*pairs):
    return [OrderLineRequest(item_id=item_id, quantity=qty) for item_id, qty in pairs]


class TestRound2:
    def test_rounds_half_up(self):
        assert round2(Decimal("0.005")) == Decimal("0.01")
        assert round2(Decimal("0.125")) == Decimal("0.13")

    def test_floats_use_their_shortest_repr(self):
        # 2.675 is stored as 2.67499999... but str() gives "2.675"
        assert round2(2.675) == Decimal("2.68")

    def test_integers(self):
        assert round2(5) == Decimal("5.00")


class TestPriceOrder:
    async def test_reference_scenario(self, recording_catalog):
        pricer = OrderPricer(recording_catalog)

        priced = await pricer.price_order(lines(("P1", 2), ("P2", 1)), "123 Main St")

        assert [item.subtotal for item in priced.order_items] == [19.00, 12.00]
        assert priced.subtotal == 31.00
        assert priced.delivery_fee == 5.00
        assert priced.total == 36.00
        assert priced.customer_address == "123 Main St"

    async def test_lines_keep_input_order(self, recording_catalog):
        pricer = OrderPricer(recording_catalog)

        priced = await pricer.price_order(lines(("S1", 1), ("P1", 3), ("D1", 2)), "1 Elm St")

        assert [item.product.item_id for item in priced.order_items] == ["S1", "P1", "D1"]
        assert [item.quantity for item in priced.order_items] == [1, 3, 2]
        assert priced.order_items[1].product.name == "Margherita"

    async def test_empty_lines_rejected_without_lookups(self, recording_catalog):
        pricer = OrderPricer(recording_catalog)

        with pytest.raises(ValidationError, match="Missing required fields"):
            await pricer.price_order([], "123 Main St")

        assert recording_catalog.lookups == []

    @pytest.mark.parametrize("address", ["", "   "])
    async def test_empty_address_rejected_without_lookups(self, recording_catalog, address):
        pricer = OrderPricer(recording_catalog)

        with pytest.raises(ValidationError):
            await pricer.price_order(lines(("P1", 1)), address)

        assert recording_catalog.lookups == []

    async def test_non_positive_quantity_rejected(self, recording_catalog):
        pricer = OrderPricer(recording_catalog)
        bad = [OrderLineRequest.model_construct(item_id="P1", quantity=0)]

        with pytest.raises(ValidationError):
            await pricer.price_order(bad, "123 Main St")

        assert recording_catalog.lookups == []

    async def test_unknown_item_stops_at_first_miss(self, recording_catalog):
        pricer = OrderPricer(recording_catalog)

        with pytest.raises(ProductNotFoundError) as exc_info:
            await pricer.price_order(lines(("P1", 1), ("NOPE", 1), ("P2", 1)), "123 Main St")

        assert exc_info.value.item_id == "NOPE"
        assert exc_info.value.message == "Product NOPE not found"
        assert recording_catalog.lookups == ["P1", "NOPE"]

    async def test_is_deterministic(self, recording_catalog):
        pricer = OrderPricer(recording_catalog)
        request = lines(("P1", 2), ("D1", 3), ("S1", 1))

        first = await pricer.price_order(request, "9 Oak Ave")
        second = await pricer.price_order(request, "9 Oak Ave")

        assert first.model_dump_json(by_alias=True) == second.model_dump_json(by_alias=True)

    async def test_subtotal_sums_rounded_lines(self):
        catalog = RecordingCatalog([
            ProductOut(item_id="A", name="Mint", price=0.005, category="Extras"),
            ProductOut(item_id="B", name="Salt", price=0.005, category="Extras"),
        ])
        pricer = OrderPricer(catalog)

        priced = await pricer.price_order(lines(("A", 1), ("B", 1)), "2 Pine Rd")

        # each line rounds 0.005 up to 0.01; summing raw products would give 0.01
        assert [item.subtotal for item in priced.order_items] == [0.01, 0.01]
        assert priced.subtotal == 0.02
        assert priced.total == 5.02

    async def test_total_is_subtotal_plus_fee(self, recording_catalog):
        pricer = OrderPricer(recording_catalog)

        priced = await pricer.price_order(lines(("D1", 7), ("S1", 3)), "5 Birch Ln")

        expected_subtotal = round2(
            round2(Decimal("3.25") * 7) + round2(Decimal("4.75") * 3)
        )
        assert Decimal(str(priced.subtotal)) == expected_subtotal
        assert Decimal(str(priced.total)) == round2(expected_subtotal + DELIVERY_FEE)
        assert priced.total == 42.00
