"""
Order finalization: turns a session cart into a persisted order.

Order rows, item rows and the purchaser's loyalty movement are written in a
single database transaction. The cart is cleared only after that transaction
commits, so a failed checkout leaves the cart exactly as it was.
"""

import logging
from contextlib import contextmanager
from datetime import datetime
from typing import Callable, List, Optional, Union
from sqlalchemy.orm import Session, joinedload
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from core.config import settings
from core.error_handling import (
    APIError, APIValidationError, ConfigurationError, NotFoundError, PersistenceError
)
from modules.cart.schemas.cart_schemas import Cart
from modules.cart.services.cart_service import CartService
from modules.catalog.services.catalog_service import CatalogService
from modules.loyalty.services.loyalty_service import (
    LoyaltyService, calculate_points_earned
)
from ..enums.order_enums import OrderStatus, OrderType, VALID_TRANSITIONS
from ..models.order_models import Order, OrderItem
from ..schemas.order_schemas import CustomerInfo, OrderItemDetail, OrderWithItemsOut
from .order_number import generate_order_number
from .order_repository import OrderRepository

logger = logging.getLogger(__name__)

UNKNOWN_PRODUCT_NAME = "Unknown product"


class OrderNumberTaken(Exception):
    """The generated order number collided with an existing order"""


class OrderService:

    def __init__(
        self,
        db: Session,
        repository: Optional[OrderRepository] = None,
        number_generator: Callable[[], str] = generate_order_number,
        max_attempts: Optional[int] = None,
        ordering_enabled: Optional[bool] = None,
    ):
        self.db = db
        self.repository = repository or OrderRepository(db)
        self.loyalty = LoyaltyService(db, self.repository)
        self.number_generator = number_generator
        self.max_attempts = max_attempts or settings.order_number_max_attempts
        self.ordering_enabled = (
            settings.ordering_enabled if ordering_enabled is None else ordering_enabled
        )

    # ========== Checkout ==========

    def create_order(
        self,
        cart_service: CartService,
        customer_info: CustomerInfo,
        order_type: Union[OrderType, str],
        delivery_address: Optional[str] = None,
        scheduled_time: Optional[datetime] = None,
        special_instructions: Optional[str] = None,
        customer_id: Optional[int] = None,
    ) -> Order:
        """
        Finalize the session cart into an order.

        ``customer_id`` is None for guest checkouts. Every order records the
        points its total earns, but only customers get them credited; guests
        cannot redeem any. Raises ``APIValidationError`` for carts that
        cannot be ordered and ``PersistenceError`` naming the failed step
        when the database write fails. An unscheduled order is scheduled for
        the time it was placed.
        """
        if not self.ordering_enabled:
            raise ConfigurationError("Ordering is not available in static site mode")

        cart = cart_service.get_cart()
        order_type = self._validate_checkout(
            cart, order_type, delivery_address, customer_id
        )
        points_earned = calculate_points_earned(cart.total)

        order = None
        for attempt in range(1, self.max_attempts + 1):
            order_number = self.number_generator()
            try:
                order = self._persist_order(
                    cart=cart,
                    order_number=order_number,
                    customer_info=customer_info,
                    order_type=order_type,
                    delivery_address=delivery_address,
                    scheduled_time=scheduled_time or datetime.utcnow(),
                    special_instructions=special_instructions,
                    customer_id=customer_id,
                    points_earned=points_earned,
                )
                break
            except OrderNumberTaken:
                logger.warning(
                    f"Order number {order_number} already taken "
                    f"(attempt {attempt}/{self.max_attempts})"
                )

        if order is None:
            raise PersistenceError(
                "Could not allocate a unique order number",
                step="insert_order",
                details={"attempts": self.max_attempts},
            )

        self.db.refresh(order)

        # The order is committed; a stale cart must not turn it into a failure
        try:
            cart_service.clear_cart()
        except APIError as e:
            logger.error(
                f"Order {order.order_number} placed but its cart could not be cleared: "
                f"{e.message}"
            )

        logger.info(
            f"Created order {order.order_number} for "
            f"{'customer ' + str(customer_id) if customer_id is not None else 'guest'}: "
            f"total {order.total_amount}, +{order.loyalty_points_earned} points"
        )
        return order

    def _validate_checkout(
        self,
        cart: Cart,
        order_type: Union[OrderType, str],
        delivery_address: Optional[str],
        customer_id: Optional[int],
    ) -> OrderType:
        if cart.is_empty:
            raise APIValidationError("Cannot create an order from an empty cart")

        try:
            order_type = OrderType(order_type)
        except ValueError:
            raise APIValidationError(
                "Invalid order type", {"order_type": str(order_type)}
            )

        if order_type == OrderType.DELIVERY and not (
            delivery_address and delivery_address.strip()
        ):
            raise APIValidationError("Delivery orders require a delivery address")

        if cart.total < 0:
            raise APIValidationError(
                "Order total cannot be negative", {"total": str(cart.total)}
            )

        if customer_id is None:
            if cart.loyalty_points_used > 0:
                raise APIValidationError(
                    "Guests cannot redeem loyalty points",
                    {"points_used": cart.loyalty_points_used},
                )
        elif self.repository.get_customer(customer_id) is None:
            raise NotFoundError("Customer", customer_id)

        return order_type

    def _persist_order(
        self,
        cart: Cart,
        order_number: str,
        customer_info: CustomerInfo,
        order_type: OrderType,
        delivery_address: Optional[str],
        scheduled_time: Optional[datetime],
        special_instructions: Optional[str],
        customer_id: Optional[int],
        points_earned: int,
    ) -> Order:
        try:
            with self._step("insert_order"):
                order = self.repository.insert_order(
                    Order(
                        order_number=order_number,
                        customer_id=customer_id,
                        status=OrderStatus.PENDING.value,
                        order_type=order_type.value,
                        customer_first_name=customer_info.first_name,
                        customer_last_name=customer_info.last_name,
                        customer_phone=customer_info.phone,
                        customer_email=customer_info.email,
                        subtotal=cart.subtotal,
                        delivery_fee=cart.delivery_fee,
                        loyalty_discount=cart.loyalty_discount,
                        total_amount=cart.total,
                        loyalty_points_used=cart.loyalty_points_used,
                        loyalty_points_earned=points_earned,
                        special_instructions=special_instructions,
                        delivery_address=delivery_address,
                        scheduled_time=scheduled_time,
                    )
                )

            with self._step("insert_order_items"):
                self.repository.insert_order_items([
                    OrderItem(
                        order_id=order.id,
                        product_id=item.product.id,
                        variant_id=item.variant_id,
                        quantity=item.quantity,
                        unit_price=item.unit_price,
                        total_price=item.total_price,
                        special_instructions=item.special_instructions,
                    )
                    for item in cart.items
                ])

            if customer_id is not None:
                with self._step("update_loyalty"):
                    self.loyalty.apply_order_points(
                        customer_id, order.id, points_earned, cart.loyalty_points_used
                    )

            with self._step("commit"):
                self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        return order

    @contextmanager
    def _step(self, step: str):
        try:
            yield
        except IntegrityError as e:
            if "order_number" in str(e.orig):
                raise OrderNumberTaken(str(e.orig)) from e
            logger.error(f"Order persistence failed at {step}: {e.orig}")
            raise PersistenceError(f"Failed to save order ({step})", step=step) from e
        except SQLAlchemyError as e:
            logger.error(f"Order persistence failed at {step}: {e}")
            raise PersistenceError(f"Failed to save order ({step})", step=step) from e

    # ========== Queries ==========

    def get_order(self, order_id: int) -> OrderWithItemsOut:
        """Order with its items labelled from the catalog"""
        order = (
            self.db.query(Order)
            .options(joinedload(Order.order_items))
            .filter(Order.id == order_id)
            .first()
        )
        if not order:
            raise NotFoundError("Order", order_id)

        catalog = CatalogService(self.db)
        items = []
        for item in order.order_items:
            product = catalog.get_product(item.product_id)
            variant = product.find_variant(item.variant_id) if product else None
            items.append(
                OrderItemDetail(
                    id=item.id,
                    order_id=item.order_id,
                    product_id=item.product_id,
                    variant_id=item.variant_id,
                    quantity=item.quantity,
                    unit_price=item.unit_price,
                    total_price=item.total_price,
                    special_instructions=item.special_instructions,
                    product_name=product.name if product else UNKNOWN_PRODUCT_NAME,
                    product_image_url=product.image_url if product else None,
                    variant_name=variant.name if variant else None,
                )
            )

        result = OrderWithItemsOut.model_validate(order)
        result.items = items
        return result

    def get_customer_orders(
        self, customer_id: int, limit: int = 50, offset: int = 0
    ) -> List[Order]:
        return (
            self.db.query(Order)
            .filter(Order.customer_id == customer_id)
            .order_by(Order.created_at.desc(), Order.id.desc())
            .offset(offset)
            .limit(limit)
            .all()
        )

    # ========== Status ==========

    def update_order_status(
        self, order_id: int, new_status: Union[OrderStatus, str]
    ) -> Order:
        order = self.db.query(Order).filter(Order.id == order_id).first()
        if not order:
            raise NotFoundError("Order", order_id)

        current_status = OrderStatus(order.status)
        new_status = OrderStatus(new_status)
        if new_status not in VALID_TRANSITIONS.get(current_status, []):
            raise APIValidationError(
                f"Invalid status transition from {current_status.value} to {new_status.value}",
                {
                    "current_status": current_status.value,
                    "allowed": [s.value for s in VALID_TRANSITIONS.get(current_status, [])],
                },
            )

        order.status = new_status.value
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise PersistenceError("Failed to update order status", step="update_status") from e
        self.db.refresh(order)

        logger.info(
            f"Order {order.order_number} moved from {current_status.value} to {new_status.value}"
        )
        return order
