# backend/modules/customers/schemas/customer_schemas.py

from pydantic import BaseModel, EmailStr, Field
from typing import Optional
from datetime import datetime

from ..models.customer_models import CustomerTier


class CustomerBase(BaseModel):
    email: EmailStr
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    phone: str = Field("", max_length=20)
    address: str = Field("", max_length=500)
    city: str = Field("", max_length=100)
    postal_code: str = Field("", max_length=20)


class CustomerCreate(CustomerBase):
    pass


class CustomerResponse(CustomerBase):
    id: int
    loyalty_points: int
    loyalty_tier: CustomerTier
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
