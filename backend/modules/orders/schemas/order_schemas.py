from pydantic import BaseModel, EmailStr, Field, model_validator
from typing import Optional, List
from datetime import datetime
from decimal import Decimal
from ..enums.order_enums import OrderStatus, OrderType


class CustomerInfo(BaseModel):
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    phone: str = Field(..., min_length=1, max_length=30)
    email: Optional[EmailStr] = None


class CheckoutRequest(BaseModel):
    customer_info: CustomerInfo
    order_type: OrderType
    delivery_address: Optional[str] = Field(None, max_length=500)
    scheduled_time: Optional[datetime] = None
    special_instructions: Optional[str] = Field(None, max_length=1000)

    @model_validator(mode="after")
    def delivery_needs_address(self):
        if self.order_type == OrderType.DELIVERY and not (
            self.delivery_address and self.delivery_address.strip()
        ):
            raise ValueError("Delivery orders require a delivery address")
        return self


class OrderItemOut(BaseModel):
    id: int
    order_id: int
    product_id: int
    variant_id: Optional[int] = None
    quantity: int
    unit_price: Decimal
    total_price: Decimal
    special_instructions: Optional[str] = None

    class Config:
        from_attributes = True


class OrderItemDetail(OrderItemOut):
    """Order line enriched with catalog names for display"""
    product_name: str
    product_image_url: Optional[str] = None
    variant_name: Optional[str] = None


class OrderOut(BaseModel):
    id: int
    order_number: str
    customer_id: Optional[int] = None
    status: OrderStatus
    order_type: OrderType
    customer_first_name: str
    customer_last_name: str
    customer_phone: str
    customer_email: Optional[str] = None
    subtotal: Decimal
    delivery_fee: Decimal
    loyalty_discount: Decimal
    total_amount: Decimal
    loyalty_points_used: int
    loyalty_points_earned: int
    special_instructions: Optional[str] = None
    delivery_address: Optional[str] = None
    scheduled_time: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class OrderWithItemsOut(OrderOut):
    items: List[OrderItemDetail] = Field(default_factory=list)


class OrderStatusUpdate(BaseModel):
    status: OrderStatus
