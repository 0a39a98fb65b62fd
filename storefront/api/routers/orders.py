# storefront/api/routers/orders.py
from fastapi import APIRouter, Depends, Query

from storefront.api.dependencies import get_order_service
from storefront.domain.schemas import AddressIn, AddressOut, OrderCreate, OrderOut, OrderPlacedOut
from storefront.services.order_service import OrderService

router = APIRouter(prefix="/order", tags=["orders"])


@router.post("/create-address", response_model=AddressOut)
def create_address(payload: AddressIn, svc: OrderService = Depends(get_order_service)):
    address = svc.create_address(payload)
    return AddressOut(address_id=address.id)


@router.post("/create", response_model=OrderPlacedOut)
def create_order(payload: OrderCreate, svc: OrderService = Depends(get_order_service)):
    """
    Sklada zamowienie z calego koszyka w jednym wywolaniu (naglowek + pozycje).
    """
    return svc.place_order(payload.customer_id, payload.billing_address_id, payload.shipping_address_id)


@router.get("/{order_id}", response_model=OrderOut)
def get_order(
    order_id: int,
    customer_id: int = Query(..., alias="customerId", gt=0),
    svc: OrderService = Depends(get_order_service),
):
    return svc.get_order(order_id, customer_id)
