from sqlalchemy import (Column, Integer, String, ForeignKey, DateTime,
                        Numeric, Text, Index)
from sqlalchemy.orm import relationship
from core.database import Base
from core.mixins import TimestampMixin
from ..enums.order_enums import OrderStatus


class Order(Base, TimestampMixin):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True)
    order_number = Column(String(20), nullable=False, unique=True, index=True)
    # Null for guest checkouts
    customer_id = Column(Integer, ForeignKey("customers.id"),
                         nullable=True, index=True)
    status = Column(String, nullable=False, index=True,
                    default=OrderStatus.PENDING.value)
    order_type = Column(String(20), nullable=False)

    # Contact snapshot taken at checkout
    customer_first_name = Column(String(100), nullable=False)
    customer_last_name = Column(String(100), nullable=False)
    customer_phone = Column(String(30), nullable=False)
    customer_email = Column(String(255), nullable=True)

    subtotal = Column(Numeric(10, 2), nullable=False)
    delivery_fee = Column(Numeric(10, 2), nullable=False, default=0)
    loyalty_discount = Column(Numeric(10, 2), nullable=False, default=0)
    total_amount = Column(Numeric(10, 2), nullable=False)

    loyalty_points_used = Column(Integer, nullable=False, default=0)
    loyalty_points_earned = Column(Integer, nullable=False, default=0)

    special_instructions = Column(Text, nullable=True)
    delivery_address = Column(Text, nullable=True)
    scheduled_time = Column(DateTime, nullable=True)

    order_items = relationship("OrderItem", back_populates="order",
                               order_by="OrderItem.id")
    customer = relationship("Customer", back_populates="orders")

    __table_args__ = (
        Index('ix_orders_customer_created', 'customer_id', 'created_at'),
    )

    def __repr__(self):
        return f"<Order(id={self.id}, number={self.order_number}, status={self.status})>"


class OrderItem(Base, TimestampMixin):
    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(Integer, ForeignKey("orders.id"),
                      nullable=False, index=True)
    product_id = Column(Integer, nullable=False)
    variant_id = Column(Integer, nullable=True)
    quantity = Column(Integer, nullable=False)
    unit_price = Column(Numeric(10, 2), nullable=False)
    total_price = Column(Numeric(10, 2), nullable=False)
    special_instructions = Column(Text, nullable=True)

    order = relationship("Order", back_populates="order_items")
