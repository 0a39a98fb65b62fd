# storefront/domain/errors.py
"""
Typowane bledy domeny sklepu.

InputError - blad do poprawienia po stronie wywolujacego (ksztalt danych),
DomainError - stan domeny (brak encji, duplikat, brak towaru).
Handler w storefront.main zamienia je na odpowiedz JSON {error, message, ...}.
"""
from typing import Any, Dict


class StorefrontError(Exception):
    code = "StorefrontError"
    status_code = 400

    def __init__(self, message: str, **extra: Any):
        super().__init__(message)
        self.message = message
        self.extra = extra

    def to_dict(self) -> Dict[str, Any]:
        body = {"error": self.code, "message": self.message}
        body.update(self.extra)
        return body


class InputError(StorefrontError):
    pass


class DomainError(StorefrontError):
    pass


class InvalidInput(InputError):
    code = "InvalidInput"
    status_code = 422


class CustomerNotFound(DomainError):
    code = "CustomerNotFound"
    status_code = 404

    def __init__(self, customer_id=None):
        super().__init__("Customer not found.", customerId=customer_id)


class ProductNotFound(DomainError):
    code = "ProductNotFound"
    status_code = 404

    def __init__(self, product_id: int):
        super().__init__(f"Product {product_id} not found.", productId=product_id)


class ItemNotFound(DomainError):
    code = "ItemNotFound"
    status_code = 404

    def __init__(self, message: str = "Item not found.", **extra: Any):
        super().__init__(message, **extra)


class DuplicateWishlistItem(DomainError):
    code = "DuplicateWishlistItem"
    status_code = 400

    def __init__(self, product_id: int):
        super().__init__("Product already in wishlist.", productId=product_id)


class EmptyCart(DomainError):
    code = "EmptyCart"
    status_code = 400

    def __init__(self):
        super().__init__("Shopping cart is empty.")


class InsufficientStock(DomainError):
    code = "InsufficientStock"
    status_code = 409

    def __init__(self, product_id: int, requested: int, available: int):
        super().__init__(
            f"Not enough stock for product {product_id}.",
            productId=product_id,
            requested=requested,
            available=available,
        )
        self.product_id = product_id


class AddressNotFound(DomainError):
    code = "AddressNotFound"
    status_code = 404

    def __init__(self, address_id: int, role: str = "Address"):
        super().__init__(f"{role} address not found.", addressId=address_id)


class OrderNotFound(DomainError):
    code = "OrderNotFound"
    status_code = 404

    def __init__(self, order_id: int):
        super().__init__(f"Order {order_id} not found.", orderId=order_id)


class DuplicateCustomer(DomainError):
    code = "DuplicateCustomer"
    status_code = 400

    def __init__(self, email: str):
        super().__init__("A customer with this email already exists.", email=email)


class InvalidToken(DomainError):
    code = "InvalidToken"
    status_code = 401

    def __init__(self, message: str = "Invalid token."):
        super().__init__(message)
