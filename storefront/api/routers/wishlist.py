# storefront/api/routers/wishlist.py
from typing import List

from fastapi import APIRouter, Depends, Query

from storefront.api.dependencies import get_cart_service
from storefront.domain.enums import CartKind
from storefront.domain.schemas import (
    ItemsRemovedOut,
    MessageOut,
    SummaryOut,
    WishlistItemIn,
    WishlistItemOut,
    WishlistRemovedOut,
)
from storefront.services.cart_service import CartService

router = APIRouter(prefix="/wishlist", tags=["wishlist"])


@router.post("/add", response_model=MessageOut)
def add_to_wishlist(payload: WishlistItemIn, svc: CartService = Depends(get_cart_service)):
    svc.add_item(payload.customer_id, payload.product_id, payload.quantity, CartKind.WISHLIST)
    return MessageOut(message="Product added to wishlist successfully.")


@router.get("/summary/{customer_id}", response_model=SummaryOut)
def wishlist_summary(customer_id: int, svc: CartService = Depends(get_cart_service)):
    return svc.summary(customer_id, CartKind.WISHLIST)


@router.get("/{customer_id}", response_model=List[WishlistItemOut])
def list_wishlist(customer_id: int, svc: CartService = Depends(get_cart_service)):
    return svc.list_items(customer_id, CartKind.WISHLIST)


@router.delete("/remove-by-id/{item_id}", response_model=WishlistRemovedOut)
def remove_by_id(
    item_id: int,
    customer_id: int = Query(..., alias="customerId", gt=0),
    svc: CartService = Depends(get_cart_service),
):
    line = svc.remove_line_by_id(customer_id, item_id, CartKind.WISHLIST)
    return WishlistRemovedOut(
        message="Wishlist item removed successfully.",
        customer_id=customer_id,
        item_id=item_id,
        product_id=line.product_id,
    )


@router.delete("/remove", response_model=WishlistRemovedOut)
def remove_by_product(
    customer_id: int = Query(..., alias="customerId", gt=0),
    product_id: int = Query(..., alias="productId", gt=0),
    svc: CartService = Depends(get_cart_service),
):
    svc.remove_item(customer_id, product_id, CartKind.WISHLIST)
    return WishlistRemovedOut(
        message="Product removed from wishlist successfully.",
        customer_id=customer_id,
        product_id=product_id,
    )


@router.delete("/clear", response_model=ItemsRemovedOut)
def clear_wishlist(
    customer_id: int = Query(..., alias="customerId", gt=0),
    svc: CartService = Depends(get_cart_service),
):
    removed = svc.clear(customer_id, CartKind.WISHLIST)
    return ItemsRemovedOut(message="Wishlist cleared successfully.", customer_id=customer_id, items_removed=removed)
