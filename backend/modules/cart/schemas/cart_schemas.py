from pydantic import BaseModel, Field
from typing import Optional, List
from decimal import Decimal

from modules.catalog.schemas.catalog_schemas import ProductWithVariants


class CartLineItem(BaseModel):
    id: str
    product: ProductWithVariants
    variant_id: Optional[int] = None
    quantity: int = Field(..., gt=0)
    unit_price: Decimal
    total_price: Decimal
    special_instructions: Optional[str] = None


class Cart(BaseModel):
    items: List[CartLineItem] = Field(default_factory=list)
    subtotal: Decimal = Decimal("0.00")
    delivery_fee: Decimal = Decimal("0.00")
    loyalty_points_used: int = Field(0, ge=0)
    loyalty_discount: Decimal = Decimal("0.00")
    total: Decimal = Decimal("0.00")

    def find_item(self, line_id: str) -> Optional[CartLineItem]:
        for item in self.items:
            if item.id == line_id:
                return item
        return None

    @property
    def is_empty(self) -> bool:
        return not self.items


class CartItemAdd(BaseModel):
    product_id: int
    variant_id: Optional[int] = None
    quantity: int = Field(1, gt=0)
    special_instructions: Optional[str] = Field(None, max_length=500)


class CartItemQuantityUpdate(BaseModel):
    quantity: int


class LoyaltyPointsRequest(BaseModel):
    points: int = Field(..., ge=0)


class DeliveryFeeRequest(BaseModel):
    delivery_fee: Decimal = Field(..., ge=0)


class CartCount(BaseModel):
    count: int
