from typing import List

from sqlalchemy.orm import Session

from storefront.data.models.customer import CustomerModel
from storefront.domain.errors import CustomerNotFound, DuplicateCustomer
from storefront.domain.schemas import CustomerOut, CustomerSignup
from storefront.repos.customer_repo import CustomerRepo
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class CustomerService:
    def __init__(self, db: Session):
        self.repo = CustomerRepo(db)

    def signup(self, payload: CustomerSignup) -> CustomerOut:
        email = payload.email.strip().lower()
        if self.repo.get_by_email(email):
            raise DuplicateCustomer(email)

        customer = CustomerModel(email=email, username=payload.username.strip(), active=True)
        created = self.repo.create_customer(customer)
        logger.info(f"Customer {created.id} signed up")
        return CustomerOut.model_validate(created)

    def get_customer(self, customer_id: int) -> CustomerOut:
        customer = self.repo.get_customer(customer_id)
        if not customer:
            raise CustomerNotFound(customer_id)
        return CustomerOut.model_validate(customer)

    def get_by_email(self, email: str) -> CustomerOut:
        customer = self.repo.get_by_email(email.strip().lower())
        if not customer:
            raise CustomerNotFound(email)
        return CustomerOut.model_validate(customer)

    def list_customers(self) -> List[CustomerOut]:
        return [CustomerOut.model_validate(c) for c in self.repo.list_customers()]
