# backend/modules/customers/services/customer_service.py

from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
import logging

from core.error_handling import ConflictError, NotFoundError
from ..models.customer_models import Customer, CustomerTier
from ..schemas.customer_schemas import CustomerCreate


logger = logging.getLogger(__name__)


class CustomerService:
    """Service for managing customer profiles"""

    def __init__(self, db: Session):
        self.db = db

    def create_customer(self, customer_data: CustomerCreate) -> Customer:
        """Create a customer at signup: no points, bronze tier"""
        email = customer_data.email.lower()

        existing = self.db.query(Customer).filter(Customer.email == email).first()
        if existing:
            raise ConflictError(
                "Customer with this email already exists", {"email": email}
            )

        customer = Customer(
            **customer_data.model_dump(exclude={"email"}),
            email=email,
            loyalty_points=0,
            loyalty_tier=CustomerTier.BRONZE.value,
        )
        self.db.add(customer)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise ConflictError(
                "Customer with this email already exists", {"email": email}
            )
        self.db.refresh(customer)

        logger.info(f"Created customer {customer.id}")
        return customer

    def get_customer(self, customer_id: int) -> Customer:
        customer = self.db.query(Customer).filter(Customer.id == customer_id).first()
        if not customer:
            raise NotFoundError("Customer", customer_id)
        return customer
