# storefront/api/routers/customers.py
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storefront.api.dependencies import get_current_customer
from storefront.data.database import get_db
from storefront.data.models.customer import CustomerModel
from storefront.domain.schemas import CustomerOut, CustomerSignup, TokenOut
from storefront.services.customer_service import CustomerService
from storefront.services.identity import IdentityBridge

router = APIRouter(prefix="/customers", tags=["customers"])


@router.post("/signup", response_model=CustomerOut)
def signup(payload: CustomerSignup, db: Session = Depends(get_db)):
    return CustomerService(db).signup(payload)


@router.get("/", response_model=List[CustomerOut])
def list_customers(db: Session = Depends(get_db)):
    return CustomerService(db).list_customers()


@router.get("/me", response_model=CustomerOut)
def current_customer(customer: CustomerModel = Depends(get_current_customer)):
    return customer


@router.get("/by-email/{email}", response_model=CustomerOut)
def get_customer_by_email(email: str, db: Session = Depends(get_db)):
    return CustomerService(db).get_by_email(email)


@router.get("/{customer_id}", response_model=CustomerOut)
def get_customer(customer_id: int, db: Session = Depends(get_db)):
    return CustomerService(db).get_customer(customer_id)


@router.post("/{customer_id}/token", response_model=TokenOut)
def issue_token(customer_id: int, db: Session = Depends(get_db)):
    """
    Token dla klienta juz uwierzytelnionego przez zewnetrzny framework.
    """
    token = IdentityBridge(db).issue_token(customer_id)
    return TokenOut(customer_id=customer_id, token=token)
