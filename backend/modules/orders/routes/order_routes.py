from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import List, Optional

from core.auth import get_current_user_id
from core.database import get_db
from core.error_handling import handle_api_errors
from modules.cart.routes.cart_routes import get_cart_service
from modules.cart.services.cart_service import CartService
from ..schemas.order_schemas import (
    CheckoutRequest, OrderOut, OrderWithItemsOut, OrderStatusUpdate
)
from ..services.order_service import OrderService

router = APIRouter(prefix="/api/v1/orders", tags=["Orders"])


@router.post("", response_model=OrderOut, status_code=status.HTTP_201_CREATED)
@handle_api_errors
async def create_order(
    request: CheckoutRequest,
    cart_service: CartService = Depends(get_cart_service),
    customer_id: Optional[int] = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """
    Checkout: place an order from the session cart.

    - **X-Cart-Session**: the cart to order
    - **X-User-Id**: the purchaser; omit for a guest checkout

    The cart is emptied once the order is saved.
    """
    return OrderService(db).create_order(
        cart_service,
        customer_info=request.customer_info,
        order_type=request.order_type,
        delivery_address=request.delivery_address,
        scheduled_time=request.scheduled_time,
        special_instructions=request.special_instructions,
        customer_id=customer_id,
    )


@router.get("", response_model=List[OrderOut])
@handle_api_errors
async def list_customer_orders(
    customer_id: int = Query(..., description="Customer whose orders to list"),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
):
    """Orders for one customer, newest first"""
    return OrderService(db).get_customer_orders(customer_id, limit=limit, offset=offset)


@router.get("/{order_id}", response_model=OrderWithItemsOut)
@handle_api_errors
async def get_order(order_id: int, db: Session = Depends(get_db)):
    return OrderService(db).get_order(order_id)


@router.patch("/{order_id}/status", response_model=OrderOut)
@handle_api_errors
async def update_order_status(
    order_id: int,
    request: OrderStatusUpdate,
    db: Session = Depends(get_db),
):
    return OrderService(db).update_order_status(order_id, request.status)
