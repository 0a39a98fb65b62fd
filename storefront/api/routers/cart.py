# storefront/api/routers/cart.py
from typing import List

from fastapi import APIRouter, Depends, Query

from storefront.api.dependencies import get_cart_service
from storefront.domain.enums import CartKind
from storefront.domain.guest_cart import GuestCart
from storefront.domain.schemas import (
    CartItemIn,
    CartItemOut,
    ItemsRemovedOut,
    MergeIn,
    MergeOut,
    MessageOut,
    QuantityDeltaIn,
    SummaryOut,
)
from storefront.services.cart_service import CartService

router = APIRouter(tags=["cart"])


@router.post("/cart/items", response_model=MessageOut)
def add_cart_item(payload: CartItemIn, svc: CartService = Depends(get_cart_service)):
    line = svc.add_item(payload.customer_id, payload.product_id, payload.quantity, CartKind.CART)
    return MessageOut(message=f"Product {line.product_id} added to cart, quantity {line.quantity}.")


@router.get("/cart/items/{customer_id}", response_model=List[CartItemOut])
def list_cart_items(customer_id: int, svc: CartService = Depends(get_cart_service)):
    return svc.list_items(customer_id, CartKind.CART)


@router.patch("/cart/items/{customer_id}/{product_id}", response_model=MessageOut)
def change_cart_quantity(
    customer_id: int,
    product_id: int,
    payload: QuantityDeltaIn,
    svc: CartService = Depends(get_cart_service),
):
    quantity = svc.set_quantity(customer_id, product_id, CartKind.CART, payload.delta)
    if quantity == 0:
        return MessageOut(message=f"Product {product_id} removed from cart.")
    return MessageOut(message=f"Product {product_id} quantity is now {quantity}.")


@router.delete("/{customer_id}/cart/items/{product_id}", response_model=MessageOut)
def delete_cart_item(customer_id: int, product_id: int, svc: CartService = Depends(get_cart_service)):
    # idempotentne: drugi DELETE tez zwraca 200
    svc.remove_item(customer_id, product_id, CartKind.CART)
    return MessageOut(message="Cart item deleted successfully.")


@router.delete("/cart/clear", response_model=ItemsRemovedOut)
def clear_cart(
    customer_id: int = Query(..., alias="customerId", gt=0),
    svc: CartService = Depends(get_cart_service),
):
    removed = svc.clear(customer_id, CartKind.CART)
    return ItemsRemovedOut(message="Cart cleared successfully.", customer_id=customer_id, items_removed=removed)


@router.get("/cart/summary/{customer_id}", response_model=SummaryOut)
def cart_summary(customer_id: int, svc: CartService = Depends(get_cart_service)):
    return svc.summary(customer_id, CartKind.CART)


@router.post("/cart/merge", response_model=MergeOut)
def merge_guest_cart(payload: MergeIn, svc: CartService = Depends(get_cart_service)):
    """
    Wywolywane raz przy logowaniu. Klient usuwa lokalnie wpisy z "migrated"
    i "skipped"; wpisy z "failed" zostaja u goscia do ponowienia.
    """
    guest = GuestCart.from_entries((e.product_id, e.quantity) for e in payload.entries)
    return svc.merge_guest_cart(payload.customer_id, guest, payload.kind)
