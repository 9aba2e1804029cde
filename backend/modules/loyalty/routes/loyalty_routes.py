# backend/modules/loyalty/routes/loyalty_routes.py

"""
Routes for loyalty balances, ledger history and point previews.
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import List

from core.database import get_db
from core.error_handling import handle_api_errors
from ..services.loyalty_service import LoyaltyService
from ..schemas.loyalty_schemas import (
    LoyaltyBalance,
    LoyaltyTransactionResponse,
    PointsPreview,
    PointsPreviewRequest,
)

router = APIRouter(prefix="/api/v1/loyalty", tags=["Loyalty"])


@router.get("/customers/{customer_id}", response_model=LoyaltyBalance)
@handle_api_errors
async def get_loyalty_balance(customer_id: int, db: Session = Depends(get_db)):
    """Current balance, tier and progress towards the next tier"""
    return LoyaltyService(db).get_balance(customer_id)


@router.get(
    "/customers/{customer_id}/transactions",
    response_model=List[LoyaltyTransactionResponse],
)
@handle_api_errors
async def get_loyalty_transactions(
    customer_id: int,
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
):
    return LoyaltyService(db).get_transactions(customer_id, limit=limit, offset=offset)


@router.post("/customers/{customer_id}/preview", response_model=PointsPreview)
@handle_api_errors
async def preview_points(
    customer_id: int,
    request: PointsPreviewRequest,
    db: Session = Depends(get_db),
):
    return LoyaltyService(db).preview(
        customer_id, request.cart_total, request.points_used
    )
