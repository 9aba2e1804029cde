# backend/modules/cart/services/cart_service.py

"""
Cart store for one shopping session.

Every mutation reads the persisted cart, applies the change, recomputes the
totals, writes the cart back and then notifies subscribers. The persisted
representation is the only state: nothing is cached between calls, so two
writers for the same session follow last-write-wins.
"""

from decimal import Decimal
from typing import Callable, List, Optional, Union
import logging

from pydantic import ValidationError

from core.error_handling import APIValidationError
from modules.catalog.schemas.catalog_schemas import ProductWithVariants
from ..schemas.cart_schemas import Cart, CartLineItem
from ..storage.cart_storage import CartStorage
from .pricing_service import calculate_item_price, to_money

logger = logging.getLogger(__name__)

# One loyalty point is worth one cent
POINT_VALUE = Decimal("0.01")

CartObserver = Callable[[Cart], None]


def line_item_id(product_id: int, variant_id: Optional[int] = None) -> str:
    """Composite key merging repeated adds of the same product and variant"""
    return f"{product_id}-{variant_id if variant_id is not None else 'default'}"


def empty_cart() -> Cart:
    return Cart()


class CartService:
    """Client-side order draft persisted through a storage port"""

    def __init__(self, storage: CartStorage):
        self.storage = storage
        self._observers: List[CartObserver] = []

    # ========== Observers ==========

    def subscribe(self, callback: CartObserver) -> Callable[[], None]:
        """Register a callback run after each mutation; returns an unsubscribe function."""
        self._observers.append(callback)

        def unsubscribe() -> None:
            if callback in self._observers:
                self._observers.remove(callback)

        return unsubscribe

    # ========== Reads ==========

    def get_cart(self) -> Cart:
        stored = self.storage.get()
        if not stored:
            return empty_cart()

        try:
            return Cart.model_validate_json(stored)
        except ValidationError as e:
            logger.warning(f"Discarding unreadable stored cart: {e.error_count()} error(s)")
            return empty_cart()

    def get_item_count(self) -> int:
        return sum(item.quantity for item in self.get_cart().items)

    # ========== Mutations ==========

    def add_item(
        self,
        product: ProductWithVariants,
        variant_id: Optional[int] = None,
        quantity: int = 1,
        special_instructions: Optional[str] = None,
    ) -> Cart:
        self._require_positive_quantity(quantity)

        cart = self.get_cart()
        item_id = line_item_id(product.id, variant_id)
        unit_price = calculate_item_price(product, variant_id)

        existing = cart.find_item(item_id)
        if existing:
            existing.quantity += quantity
            existing.total_price = existing.unit_price * existing.quantity
            if special_instructions:
                existing.special_instructions = special_instructions
        else:
            cart.items.append(
                CartLineItem(
                    id=item_id,
                    product=product,
                    variant_id=variant_id,
                    quantity=quantity,
                    unit_price=unit_price,
                    total_price=unit_price * quantity,
                    special_instructions=special_instructions or None,
                )
            )

        logger.debug(f"Added {quantity} x {item_id} to cart")
        return self._save(cart)

    def update_item_quantity(self, line_id: str, quantity: int) -> Cart:
        """Set a line's quantity; zero or less removes the line. Unknown ids are ignored."""
        if isinstance(quantity, bool) or not isinstance(quantity, int):
            raise APIValidationError("Quantity must be an integer", {"quantity": quantity})

        cart = self.get_cart()
        item = cart.find_item(line_id)

        if item is None:
            logger.debug(f"Cart line {line_id} not found, nothing to update")
        elif quantity <= 0:
            cart.items = [i for i in cart.items if i.id != line_id]
        else:
            item.quantity = quantity
            item.total_price = item.unit_price * quantity

        return self._save(cart)

    def remove_item(self, line_id: str) -> Cart:
        cart = self.get_cart()
        cart.items = [item for item in cart.items if item.id != line_id]
        return self._save(cart)

    def apply_loyalty_points(self, points: int) -> Cart:
        """
        Replace the points redeemed on this cart.

        The balance is not checked here; the order finalizer verifies it
        before any points are deducted.
        """
        if isinstance(points, bool) or not isinstance(points, int) or points < 0:
            raise APIValidationError(
                "Loyalty points must be a non-negative integer", {"points": points}
            )

        cart = self.get_cart()
        cart.loyalty_points_used = points
        cart.loyalty_discount = to_money(points * POINT_VALUE)
        return self._save(cart)

    def set_delivery_fee(self, fee: Union[Decimal, int, str]) -> Cart:
        fee = to_money(fee)
        if fee < 0:
            raise APIValidationError("Delivery fee cannot be negative", {"delivery_fee": str(fee)})

        cart = self.get_cart()
        cart.delivery_fee = fee
        return self._save(cart)

    def clear_cart(self) -> Cart:
        self.storage.clear()
        cart = empty_cart()
        self._notify(cart)
        return cart

    # ========== Helpers ==========

    @staticmethod
    def update_cart_totals(cart: Cart) -> Cart:
        cart.subtotal = to_money(sum((item.total_price for item in cart.items), Decimal("0")))
        cart.total = cart.subtotal + to_money(cart.delivery_fee) - to_money(cart.loyalty_discount)
        return cart

    @staticmethod
    def _require_positive_quantity(quantity) -> None:
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
            raise APIValidationError(
                "Quantity must be a positive integer", {"quantity": quantity}
            )

    def _save(self, cart: Cart) -> Cart:
        self.update_cart_totals(cart)
        self.storage.set(cart.model_dump_json())
        self._notify(cart)
        return cart

    def _notify(self, cart: Cart) -> None:
        for callback in list(self._observers):
            try:
                callback(cart)
            except Exception:
                logger.exception(f"Cart observer {callback!r} failed")
