# backend/modules/loyalty/services/loyalty_service.py

"""
Core service for the loyalty points ledger.
"""

from sqlalchemy.orm import Session
from typing import List, Optional, Tuple, Union
from decimal import Decimal, ROUND_FLOOR
import logging

from modules.customers.models.customer_models import Customer, CustomerTier
from modules.orders.services.order_repository import OrderRepository
from core.error_handling import NotFoundError, APIValidationError
from ..models.loyalty_models import LoyaltyTransaction, TransactionType
from ..schemas.loyalty_schemas import LoyaltyBalance, PointsPreview

logger = logging.getLogger(__name__)

# Inclusive lower bounds, highest first
TIER_THRESHOLDS: List[Tuple[int, CustomerTier]] = [
    (5000, CustomerTier.PLATINUM),
    (2000, CustomerTier.GOLD),
    (500, CustomerTier.SILVER),
    (0, CustomerTier.BRONZE),
]

# 100 points = 1 currency unit
POINT_VALUE = Decimal("0.01")


def tier_of(points: int) -> CustomerTier:
    """Tier for a point balance; the only source of tier values."""
    for threshold, tier in TIER_THRESHOLDS:
        if points >= threshold:
            return tier
    return CustomerTier.BRONZE


def next_tier_of(points: int) -> Tuple[Optional[CustomerTier], Optional[int]]:
    """Next tier above the balance and the points still missing, if any."""
    upcoming = None
    for threshold, tier in TIER_THRESHOLDS:
        if points >= threshold:
            break
        upcoming = (tier, threshold - points)
    return upcoming if upcoming else (None, None)


def points_to_discount(points: int) -> Decimal:
    return (Decimal(points) * POINT_VALUE).quantize(POINT_VALUE)


def calculate_points_earned(total: Union[Decimal, int, float, str]) -> int:
    """One point per whole currency unit of the post-discount total."""
    points = int(Decimal(str(total)).to_integral_value(rounding=ROUND_FLOOR))
    return max(points, 0)


class LoyaltyService:
    """Service for loyalty balances and the points ledger"""

    def __init__(self, db: Session, repository: Optional[OrderRepository] = None):
        self.db = db
        self.repository = repository or OrderRepository(db)

    # ========== Order Finalization ==========

    def apply_order_points(
        self,
        customer_id: int,
        order_id: Optional[int],
        points_earned: int,
        points_used: int,
    ) -> Customer:
        """
        Move points for a placed order inside the caller's transaction.

        The customer row is locked for the read-modify-write so concurrent
        checkouts by the same customer are serialised. Earned and redeemed
        points are always recorded as separate ledger entries. Nothing is
        committed here.
        """
        if points_earned < 0 or points_used < 0:
            raise APIValidationError(
                "Point movements must be non-negative",
                {"points_earned": points_earned, "points_used": points_used},
            )

        customer = self.repository.get_customer(customer_id, for_update=True)
        if customer is None:
            raise NotFoundError("Customer", customer_id)

        current_balance = customer.loyalty_points or 0
        if points_used > current_balance:
            raise APIValidationError(
                "Insufficient loyalty points",
                {"current_balance": current_balance, "requested": points_used},
            )

        balance = current_balance
        if points_earned > 0:
            self.repository.insert_loyalty_transaction(
                LoyaltyTransaction(
                    customer_id=customer_id,
                    order_id=order_id,
                    transaction_type=TransactionType.EARNED.value,
                    points_change=points_earned,
                    points_balance_before=balance,
                    points_balance_after=balance + points_earned,
                    description="Points earned on order",
                )
            )
            balance += points_earned

        if points_used > 0:
            self.repository.insert_loyalty_transaction(
                LoyaltyTransaction(
                    customer_id=customer_id,
                    order_id=order_id,
                    transaction_type=TransactionType.REDEEMED.value,
                    points_change=-points_used,
                    points_balance_before=balance,
                    points_balance_after=balance - points_used,
                    description="Points redeemed on order",
                )
            )
            balance -= points_used

        previous_tier = customer.loyalty_tier
        self.repository.update_customer(customer, balance, tier_of(balance))

        if previous_tier != customer.loyalty_tier:
            logger.info(
                f"Customer {customer_id} moved from {previous_tier} to {customer.loyalty_tier}"
            )
        logger.info(
            f"Loyalty update for customer {customer_id}: +{points_earned} -{points_used}, "
            f"balance {current_balance} -> {balance}"
        )
        return customer

    # ========== Queries ==========

    def get_balance(self, customer_id: int) -> LoyaltyBalance:
        customer = self._get_customer(customer_id)
        points = customer.loyalty_points or 0
        upcoming, missing = next_tier_of(points)

        return LoyaltyBalance(
            customer_id=customer_id,
            points_balance=points,
            current_tier=tier_of(points),
            next_tier=upcoming,
            points_to_next_tier=missing,
            redeemable_value=points_to_discount(points),
        )

    def get_transactions(
        self, customer_id: int, limit: int = 50, offset: int = 0
    ) -> List[LoyaltyTransaction]:
        self._get_customer(customer_id)
        return (
            self.db.query(LoyaltyTransaction)
            .filter(LoyaltyTransaction.customer_id == customer_id)
            .order_by(LoyaltyTransaction.created_at.desc(), LoyaltyTransaction.id.desc())
            .offset(offset)
            .limit(limit)
            .all()
        )

    def preview(
        self, customer_id: int, cart_total: Decimal, points_used: int = 0
    ) -> PointsPreview:
        """Points an order of this total would earn and the resulting tier"""
        customer = self._get_customer(customer_id)
        current = customer.loyalty_points or 0
        points_to_earn = calculate_points_earned(cart_total)
        after = current + points_to_earn - points_used

        return PointsPreview(
            customer_id=customer_id,
            points_to_earn=points_to_earn,
            points_used=points_used,
            current_points=current,
            points_after_order=after,
            current_tier=tier_of(current),
            tier_after_order=tier_of(after),
            tier_upgrade=tier_of(after) != tier_of(current) and after > current,
        )

    def _get_customer(self, customer_id: int) -> Customer:
        customer = self.repository.get_customer(customer_id)
        if customer is None:
            raise NotFoundError("Customer", customer_id)
        return customer
