# backend/modules/loyalty/models/loyalty_models.py

"""
Loyalty ledger models
"""

from sqlalchemy import (
    Column,
    Integer,
    String,
    ForeignKey,
    DateTime,
    Index,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from core.database import Base
from enum import Enum


class TransactionType(str, Enum):
    EARNED = "earned"
    REDEEMED = "redeemed"
    EXPIRED = "expired"
    BONUS = "bonus"


class LoyaltyTransaction(Base):
    """Append-only ledger entry; rows are never updated or deleted"""
    __tablename__ = "loyalty_transactions"

    id = Column(Integer, primary_key=True, index=True)
    customer_id = Column(Integer, ForeignKey("customers.id"), nullable=False, index=True)
    order_id = Column(Integer, ForeignKey("orders.id"), nullable=True, index=True)

    transaction_type = Column(String(20), nullable=False, index=True)
    points_change = Column(Integer, nullable=False)  # Positive for earning, negative for spending
    points_balance_before = Column(Integer, nullable=False)
    points_balance_after = Column(Integer, nullable=False)
    description = Column(String(200), nullable=False, default="")

    created_at = Column(DateTime, default=func.now(), nullable=False)

    customer = relationship("Customer", back_populates="loyalty_transactions")
    order = relationship("Order")

    __table_args__ = (
        Index('ix_loyalty_transactions_customer_type', 'customer_id', 'transaction_type'),
    )

    def __repr__(self):
        return (f"<LoyaltyTransaction(id={self.id}, customer_id={self.customer_id}, "
                f"points={self.points_change})>")
