# backend/modules/cart/routes/cart_routes.py

from fastapi import APIRouter, Depends, Header
from sqlalchemy.orm import Session

from core.database import get_db
from core.error_handling import handle_api_errors, NotFoundError, APIValidationError
from modules.catalog.services.catalog_service import CatalogService
from ..services.cart_service import CartService
from ..storage.cart_storage import get_cart_storage
from ..schemas.cart_schemas import (
    Cart, CartCount, CartItemAdd, CartItemQuantityUpdate,
    LoyaltyPointsRequest, DeliveryFeeRequest
)

router = APIRouter(prefix="/api/v1/cart", tags=["Cart"])


def get_cart_service(
    x_cart_session: str = Header(..., alias="X-Cart-Session"),
) -> CartService:
    return CartService(get_cart_storage(x_cart_session))


@router.get("", response_model=Cart)
@handle_api_errors
async def get_cart(cart_service: CartService = Depends(get_cart_service)):
    return cart_service.get_cart()


@router.get("/count", response_model=CartCount)
@handle_api_errors
async def get_item_count(cart_service: CartService = Depends(get_cart_service)):
    return CartCount(count=cart_service.get_item_count())


@router.post("/items", response_model=Cart)
@handle_api_errors
async def add_item(
    request: CartItemAdd,
    cart_service: CartService = Depends(get_cart_service),
    db: Session = Depends(get_db),
):
    """
    Add a product to the cart; repeated adds of the same product and
    variant merge into one line.
    """
    product = CatalogService(db).get_product(request.product_id)
    if product is None:
        raise NotFoundError("Product", request.product_id)
    if not product.is_available:
        raise APIValidationError(
            "Product is not available", {"product_id": request.product_id}
        )

    return cart_service.add_item(
        product,
        variant_id=request.variant_id,
        quantity=request.quantity,
        special_instructions=request.special_instructions,
    )


@router.patch("/items/{line_id}", response_model=Cart)
@handle_api_errors
async def update_item_quantity(
    line_id: str,
    request: CartItemQuantityUpdate,
    cart_service: CartService = Depends(get_cart_service),
):
    return cart_service.update_item_quantity(line_id, request.quantity)


@router.delete("/items/{line_id}", response_model=Cart)
@handle_api_errors
async def remove_item(
    line_id: str, cart_service: CartService = Depends(get_cart_service)
):
    return cart_service.remove_item(line_id)


@router.put("/loyalty-points", response_model=Cart)
@handle_api_errors
async def apply_loyalty_points(
    request: LoyaltyPointsRequest,
    cart_service: CartService = Depends(get_cart_service),
):
    return cart_service.apply_loyalty_points(request.points)


@router.put("/delivery-fee", response_model=Cart)
@handle_api_errors
async def set_delivery_fee(
    request: DeliveryFeeRequest,
    cart_service: CartService = Depends(get_cart_service),
):
    return cart_service.set_delivery_fee(request.delivery_fee)


@router.delete("", response_model=Cart)
@handle_api_errors
async def clear_cart(cart_service: CartService = Depends(get_cart_service)):
    return cart_service.clear_cart()
