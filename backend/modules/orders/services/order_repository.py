"""
Persistence operations used while finalizing an order.

None of these methods commit; the order service owns the transaction.
"""

from sqlalchemy.orm import Session
from typing import List, Optional

from modules.customers.models.customer_models import Customer, CustomerTier
from modules.loyalty.models.loyalty_models import LoyaltyTransaction
from ..models.order_models import Order, OrderItem


class OrderRepository:

    def __init__(self, db: Session):
        self.db = db

    def insert_order(self, order: Order) -> Order:
        self.db.add(order)
        self.db.flush()
        return order

    def insert_order_items(self, items: List[OrderItem]) -> List[OrderItem]:
        self.db.add_all(items)
        self.db.flush()
        return items

    def get_customer(self, customer_id: int, for_update: bool = False) -> Optional[Customer]:
        query = self.db.query(Customer).filter(Customer.id == customer_id)
        if for_update:
            query = query.with_for_update()
        return query.first()

    def update_customer(self, customer: Customer, points: int, tier: CustomerTier) -> Customer:
        customer.loyalty_points = points
        customer.loyalty_tier = tier.value
        self.db.flush()
        return customer

    def insert_loyalty_transaction(self, transaction: LoyaltyTransaction) -> LoyaltyTransaction:
        self.db.add(transaction)
        self.db.flush()
        return transaction
