# backend/modules/cart/tests/test_cart_service.py

"""
Tests for the cart store: line merging, totals, loyalty discount,
persistence and change notifications.
"""

import pytest
from decimal import Decimal
from unittest.mock import Mock

from core.error_handling import APIValidationError
from modules.cart.schemas.cart_schemas import Cart
from modules.cart.services.cart_service import CartService, line_item_id


class TestAddItem:

    def test_new_line_uses_calculated_price(self, cart_service, sashimi):
        cart = cart_service.add_item(sashimi, quantity=2)

        assert len(cart.items) == 1
        item = cart.items[0]
        assert item.id == "1-default"
        assert item.unit_price == Decimal("12.90")
        assert item.total_price == Decimal("25.80")
        assert cart.subtotal == Decimal("25.80")
        assert cart.total == Decimal("25.80")

    def test_same_product_and_variant_merge(self, cart_service, sashimi):
        cart_service.add_item(sashimi, variant_id=2, quantity=1)
        cart = cart_service.add_item(sashimi, variant_id=2, quantity=3)

        assert len(cart.items) == 1
        assert cart.items[0].quantity == 4
        assert cart.items[0].total_price == Decimal("99.60")

    def test_different_variants_are_separate_lines(self, cart_service, sashimi):
        cart_service.add_item(sashimi)
        cart = cart_service.add_item(sashimi, variant_id=2)

        assert [item.id for item in cart.items] == ["1-default", "1-2"]

    def test_instructions_only_overwritten_by_new_value(self, cart_service, sashimi):
        cart_service.add_item(sashimi, special_instructions="Sans wasabi")
        cart = cart_service.add_item(sashimi)
        assert cart.items[0].special_instructions == "Sans wasabi"

        cart = cart_service.add_item(sashimi, special_instructions="Extra gingembre")
        assert cart.items[0].special_instructions == "Extra gingembre"

    @pytest.mark.parametrize("quantity", [0, -1, 1.5, "2", True])
    def test_invalid_quantity_rejected(self, cart_service, sashimi, quantity):
        with pytest.raises(APIValidationError):
            cart_service.add_item(sashimi, quantity=quantity)
        assert cart_service.get_cart().is_empty

    def test_unit_price_frozen_at_add_time(self, cart_service, sashimi):
        cart_service.add_item(sashimi)
        sashimi.base_price = Decimal("99.00")

        cart = cart_service.add_item(sashimi)

        assert cart.items[0].unit_price == Decimal("12.90")
        assert cart.items[0].total_price == Decimal("25.80")


class TestUpdateAndRemove:

    def test_zero_quantity_removes_line(self, cart_service, sashimi):
        cart_service.add_item(sashimi, quantity=2)

        cart = cart_service.update_item_quantity("1-default", 0)

        assert cart.items == []
        assert cart.subtotal == Decimal("0.00")
        assert cart.total == Decimal("0.00")

    def test_quantity_update_recomputes_line(self, cart_service, sashimi):
        cart_service.add_item(sashimi)

        cart = cart_service.update_item_quantity("1-default", 5)

        assert cart.items[0].quantity == 5
        assert cart.items[0].total_price == Decimal("64.50")
        assert cart.subtotal == Decimal("64.50")

    def test_unknown_line_is_noop(self, cart_service, sashimi):
        cart_service.add_item(sashimi)

        cart = cart_service.update_item_quantity("42-default", 3)

        assert [item.quantity for item in cart.items] == [1]
        assert cart.subtotal == Decimal("12.90")

    def test_non_integer_quantity_rejected(self, cart_service, sashimi):
        cart_service.add_item(sashimi)
        with pytest.raises(APIValidationError):
            cart_service.update_item_quantity("1-default", "3")

    def test_remove_item(self, cart_service, sashimi, maki):
        cart_service.add_item(sashimi)
        cart_service.add_item(maki)

        cart = cart_service.remove_item("1-default")

        assert [item.id for item in cart.items] == ["3-default"]
        assert cart.subtotal == Decimal("7.90")


class TestDiscountsAndFees:

    def test_loyalty_points_discount(self, cart_service, sashimi):
        cart_service.add_item(sashimi, quantity=2)

        cart = cart_service.apply_loyalty_points(100)

        assert cart.loyalty_discount == Decimal("1.00")
        assert cart.total == Decimal("24.80")

    def test_loyalty_points_replace_previous_value(self, cart_service, sashimi):
        cart_service.add_item(sashimi, quantity=2)
        cart_service.apply_loyalty_points(100)

        cart = cart_service.apply_loyalty_points(250)

        assert cart.loyalty_points_used == 250
        assert cart.loyalty_discount == Decimal("2.50")
        assert cart.total == Decimal("23.30")

    def test_negative_points_rejected(self, cart_service):
        with pytest.raises(APIValidationError):
            cart_service.apply_loyalty_points(-1)

    def test_delivery_fee_added_to_total(self, cart_service, sashimi):
        cart_service.add_item(sashimi)

        cart = cart_service.set_delivery_fee("3.50")

        assert cart.delivery_fee == Decimal("3.50")
        assert cart.total == Decimal("16.40")

    def test_negative_delivery_fee_rejected(self, cart_service):
        with pytest.raises(APIValidationError):
            cart_service.set_delivery_fee(Decimal("-1"))


class TestPersistence:

    def test_reload_from_storage(self, storage, sashimi, maki):
        writer = CartService(storage)
        writer.add_item(sashimi, variant_id=2, quantity=2, special_instructions="Bien frais")
        writer.add_item(maki)
        writer.apply_loyalty_points(50)
        expected = writer.get_cart()

        reloaded = CartService(storage).get_cart()

        assert reloaded == expected
        assert reloaded.items[0].product.name == "Sashimi Saumon"
        assert reloaded.total == Decimal("57.20")

    def test_corrupt_state_yields_empty_cart(self, cart_store, storage):
        cart_store[storage.key] = "{not json"

        cart = CartService(storage).get_cart()

        assert cart == Cart()

    def test_invalid_structure_yields_empty_cart(self, cart_store, storage):
        cart_store[storage.key] = '{"items": [{"id": 1}]}'

        assert CartService(storage).get_cart().is_empty

    def test_item_count_reads_persisted_state(self, storage, sashimi, maki):
        service = CartService(storage)
        service.add_item(sashimi, quantity=2)
        service.add_item(maki, quantity=3)

        assert CartService(storage).get_item_count() == 5

    def test_clear_cart(self, cart_service, cart_store, sashimi):
        cart_service.add_item(sashimi)

        cart = cart_service.clear_cart()

        assert cart.is_empty
        assert cart_store == {}

    def test_line_item_id(self):
        assert line_item_id(7) == "7-default"
        assert line_item_id(7, 3) == "7-3"


class TestObservers:

    def test_observer_receives_new_cart(self, cart_service, sashimi):
        observer = Mock()
        cart_service.subscribe(observer)

        cart = cart_service.add_item(sashimi)

        observer.assert_called_once_with(cart)

    def test_unsubscribe_stops_notifications(self, cart_service, sashimi):
        observer = Mock()
        unsubscribe = cart_service.subscribe(observer)
        unsubscribe()

        cart_service.add_item(sashimi)

        observer.assert_not_called()

    def test_failing_observer_does_not_block_others(self, cart_service, sashimi):
        failing = Mock(side_effect=RuntimeError("boom"))
        healthy = Mock()
        cart_service.subscribe(failing)
        cart_service.subscribe(healthy)

        cart = cart_service.add_item(sashimi)

        healthy.assert_called_once_with(cart)
        assert cart_service.get_cart().model_dump() == cart.model_dump()

    def test_no_notification_when_mutation_rejected(self, cart_service, sashimi):
        observer = Mock()
        cart_service.subscribe(observer)

        with pytest.raises(APIValidationError):
            cart_service.add_item(sashimi, quantity=0)

        observer.assert_not_called()

    def test_clear_notifies_with_empty_cart(self, cart_service, sashimi):
        cart_service.add_item(sashimi)
        observer = Mock()
        cart_service.subscribe(observer)

        cart_service.clear_cart()

        observer.assert_called_once()
        assert observer.call_args.args[0].is_empty


def test_storefront_scenario(cart_service, sashimi):
    cart = cart_service.add_item(sashimi, quantity=2)
    assert cart.subtotal == Decimal("25.80")

    cart = cart_service.add_item(sashimi, variant_id=2)
    assert cart.items[1].unit_price == Decimal("24.90")
    assert cart.subtotal == Decimal("50.70")

    cart = cart_service.remove_item("1-default")
    assert cart.subtotal == Decimal("24.90")

    cart = cart_service.apply_loyalty_points(100)
    assert cart.total == Decimal("23.90")
