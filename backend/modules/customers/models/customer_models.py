# backend/modules/customers/models/customer_models.py

from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship
from core.database import Base
from core.mixins import TimestampMixin
from enum import Enum


class CustomerTier(str, Enum):
    """Customer loyalty tier levels"""
    BRONZE = "bronze"
    SILVER = "silver"
    GOLD = "gold"
    PLATINUM = "platinum"


class Customer(Base, TimestampMixin):
    """Registered customer; the loyalty columns cache the ledger balance"""
    __tablename__ = "customers"

    id = Column(Integer, primary_key=True, index=True)

    # Basic Information
    email = Column(String(255), nullable=False, unique=True, index=True)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    phone = Column(String(20), nullable=False, default="")

    # Address
    address = Column(String(500), nullable=False, default="")
    city = Column(String(100), nullable=False, default="")
    postal_code = Column(String(20), nullable=False, default="")

    # Loyalty: written together, tier always derived from the balance
    loyalty_points = Column(Integer, nullable=False, default=0)
    loyalty_tier = Column(String(20), nullable=False, default=CustomerTier.BRONZE.value)

    orders = relationship("Order", back_populates="customer")
    loyalty_transactions = relationship("LoyaltyTransaction", back_populates="customer")

    def __repr__(self):
        return f"<Customer(id={self.id}, email='{self.email}', points={self.loyalty_points})>"
