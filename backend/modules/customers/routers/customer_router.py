# backend/modules/customers/routers/customer_router.py

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from core.database import get_db
from core.error_handling import handle_api_errors
from ..schemas.customer_schemas import CustomerCreate, CustomerResponse
from ..services.customer_service import CustomerService

router = APIRouter(prefix="/api/v1/customers", tags=["Customers"])


@router.post("", response_model=CustomerResponse, status_code=status.HTTP_201_CREATED)
@handle_api_errors
async def create_customer(customer_data: CustomerCreate, db: Session = Depends(get_db)):
    """Register a customer; new accounts start with 0 points in the bronze tier."""
    return CustomerService(db).create_customer(customer_data)


@router.get("/{customer_id}", response_model=CustomerResponse)
@handle_api_errors
async def get_customer(customer_id: int, db: Session = Depends(get_db)):
    return CustomerService(db).get_customer(customer_id)
