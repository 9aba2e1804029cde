# backend/modules/loyalty/schemas/loyalty_schemas.py

from typing import Optional
from datetime import datetime
from decimal import Decimal
from pydantic import BaseModel, Field

from modules.customers.models.customer_models import CustomerTier
from ..models.loyalty_models import TransactionType


class LoyaltyBalance(BaseModel):
    customer_id: int
    points_balance: int
    current_tier: CustomerTier
    next_tier: Optional[CustomerTier] = None
    points_to_next_tier: Optional[int] = None
    redeemable_value: Decimal


class LoyaltyTransactionResponse(BaseModel):
    id: int
    customer_id: int
    order_id: Optional[int] = None
    transaction_type: TransactionType
    points_change: int
    points_balance_before: int
    points_balance_after: int
    description: str
    created_at: datetime

    class Config:
        from_attributes = True


class PointsPreviewRequest(BaseModel):
    cart_total: Decimal = Field(..., ge=0)
    points_used: int = Field(0, ge=0)


class PointsPreview(BaseModel):
    customer_id: int
    points_to_earn: int
    points_used: int
    current_points: int
    points_after_order: int
    current_tier: CustomerTier
    tier_after_order: CustomerTier
    tier_upgrade: bool
