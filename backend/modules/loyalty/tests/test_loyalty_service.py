# backend/modules/loyalty/tests/test_loyalty_service.py

"""
Tests for tier classification and the loyalty points ledger.
"""

import pytest
from decimal import Decimal
from unittest.mock import Mock
from sqlalchemy.orm import Session

from core.error_handling import APIValidationError, NotFoundError
from modules.customers.models.customer_models import CustomerTier
from modules.loyalty.models.loyalty_models import LoyaltyTransaction, TransactionType
from modules.loyalty.services.loyalty_service import (
    LoyaltyService, calculate_points_earned, next_tier_of, points_to_discount, tier_of
)
from tests.factories import CustomerFactory


@pytest.fixture
def loyalty_service(db_session):
    return LoyaltyService(db_session)


class TestTierClassification:

    @pytest.mark.parametrize(
        "points,tier",
        [
            (0, CustomerTier.BRONZE),
            (499, CustomerTier.BRONZE),
            (500, CustomerTier.SILVER),
            (1999, CustomerTier.SILVER),
            (2000, CustomerTier.GOLD),
            (4999, CustomerTier.GOLD),
            (5000, CustomerTier.PLATINUM),
            (120000, CustomerTier.PLATINUM),
        ],
    )
    def test_tier_boundaries(self, points, tier):
        assert tier_of(points) == tier

    def test_next_tier(self):
        assert next_tier_of(0) == (CustomerTier.SILVER, 500)
        assert next_tier_of(1500) == (CustomerTier.GOLD, 500)
        assert next_tier_of(4999) == (CustomerTier.PLATINUM, 1)
        assert next_tier_of(5000) == (None, None)

    def test_points_earned_floors_total(self):
        assert calculate_points_earned(Decimal("37.50")) == 37
        assert calculate_points_earned(Decimal("0.99")) == 0
        assert calculate_points_earned("100") == 100

    def test_points_earned_never_negative(self):
        assert calculate_points_earned(Decimal("-4.20")) == 0

    def test_points_to_discount(self):
        assert points_to_discount(100) == Decimal("1.00")
        assert points_to_discount(1) == Decimal("0.01")


class TestApplyOrderPoints:

    def test_earn_only(self, loyalty_service, db_session):
        customer = CustomerFactory(loyalty_points=100)

        loyalty_service.apply_order_points(customer.id, None, 37, 0)
        db_session.commit()

        db_session.refresh(customer)
        assert customer.loyalty_points == 137
        transactions = db_session.query(LoyaltyTransaction).all()
        assert len(transactions) == 1
        assert transactions[0].transaction_type == TransactionType.EARNED.value
        assert transactions[0].points_balance_before == 100
        assert transactions[0].points_balance_after == 137

    def test_earn_and_redeem_recorded_separately(self, loyalty_service, db_session):
        customer = CustomerFactory(loyalty_points=300)

        loyalty_service.apply_order_points(customer.id, None, 24, 100)
        db_session.commit()

        db_session.refresh(customer)
        assert customer.loyalty_points == 224
        transactions = (
            db_session.query(LoyaltyTransaction).order_by(LoyaltyTransaction.id).all()
        )
        assert [(t.transaction_type, t.points_change) for t in transactions] == [
            ("earned", 24),
            ("redeemed", -100),
        ]
        assert transactions[0].points_balance_after == transactions[1].points_balance_before
        assert transactions[1].points_balance_after == 224

    def test_crossing_threshold_updates_tier(self, loyalty_service, db_session):
        customer = CustomerFactory(loyalty_points=480)

        loyalty_service.apply_order_points(customer.id, None, 37, 0)
        db_session.commit()

        db_session.refresh(customer)
        assert customer.loyalty_points == 517
        assert customer.loyalty_tier == CustomerTier.SILVER.value

    def test_redeeming_can_drop_tier(self, loyalty_service, db_session):
        customer = CustomerFactory(loyalty_points=520, loyalty_tier=CustomerTier.SILVER.value)

        loyalty_service.apply_order_points(customer.id, None, 5, 100)

        assert customer.loyalty_points == 425
        assert customer.loyalty_tier == CustomerTier.BRONZE.value

    def test_stale_tier_corrected(self, loyalty_service, db_session):
        customer = CustomerFactory(loyalty_points=2500, loyalty_tier=CustomerTier.BRONZE.value)

        loyalty_service.apply_order_points(customer.id, None, 0, 0)

        assert customer.loyalty_tier == CustomerTier.GOLD.value
        assert db_session.query(LoyaltyTransaction).count() == 0

    def test_insufficient_balance(self, loyalty_service, db_session):
        customer = CustomerFactory(loyalty_points=50)

        with pytest.raises(APIValidationError) as exc_info:
            loyalty_service.apply_order_points(customer.id, None, 10, 100)

        assert exc_info.value.details["validation_errors"]["current_balance"] == 50
        assert db_session.query(LoyaltyTransaction).count() == 0

    def test_unknown_customer(self, loyalty_service):
        with pytest.raises(NotFoundError):
            loyalty_service.apply_order_points(999, None, 10, 0)

    def test_negative_movement_rejected(self, loyalty_service):
        with pytest.raises(APIValidationError):
            loyalty_service.apply_order_points(1, None, -5, 0)

    def test_customer_row_locked_and_not_committed(self):
        """The balance read goes through SELECT ... FOR UPDATE and never commits"""
        customer = Mock(loyalty_points=100, loyalty_tier="bronze", id=1)
        repository = Mock()
        repository.get_customer.return_value = customer
        session = Mock(spec=Session)

        LoyaltyService(session, repository).apply_order_points(1, 7, 10, 0)

        repository.get_customer.assert_called_once_with(1, for_update=True)
        repository.update_customer.assert_called_once_with(customer, 110, CustomerTier.BRONZE)
        session.commit.assert_not_called()


class TestLoyaltyQueries:

    def test_balance(self, loyalty_service):
        customer = CustomerFactory(loyalty_points=1500, loyalty_tier=CustomerTier.BRONZE.value)

        balance = loyalty_service.get_balance(customer.id)

        assert balance.points_balance == 1500
        assert balance.current_tier == CustomerTier.SILVER
        assert balance.next_tier == CustomerTier.GOLD
        assert balance.points_to_next_tier == 500
        assert balance.redeemable_value == Decimal("15.00")

    def test_balance_unknown_customer(self, loyalty_service):
        with pytest.raises(NotFoundError):
            loyalty_service.get_balance(404)

    def test_transactions_newest_first(self, loyalty_service, db_session):
        customer = CustomerFactory(loyalty_points=0)
        loyalty_service.apply_order_points(customer.id, None, 10, 0)
        loyalty_service.apply_order_points(customer.id, None, 20, 5)
        db_session.commit()

        history = loyalty_service.get_transactions(customer.id)

        assert [t.points_change for t in history] == [-5, 20, 10]

    def test_preview_reports_upgrade(self, loyalty_service):
        customer = CustomerFactory(loyalty_points=480)

        preview = loyalty_service.preview(customer.id, Decimal("37.50"))

        assert preview.points_to_earn == 37
        assert preview.points_after_order == 517
        assert preview.current_tier == CustomerTier.BRONZE
        assert preview.tier_after_order == CustomerTier.SILVER
        assert preview.tier_upgrade is True

    def test_preview_with_redemption(self, loyalty_service):
        customer = CustomerFactory(loyalty_points=600)

        preview = loyalty_service.preview(customer.id, Decimal("20.00"), points_used=200)

        assert preview.points_after_order == 420
        assert preview.tier_after_order == CustomerTier.BRONZE
        assert preview.tier_upgrade is False
