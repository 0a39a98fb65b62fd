# storefront/domain/enums.py
from enum import Enum


class CartKind(str, Enum):
    CART = "Cart"
    WISHLIST = "Wishlist"


class OrderStatus(str, Enum):
    PENDING = "Pending"
    PROCESSING = "Processing"
    COMPLETE = "Complete"
    CANCELLED = "Cancelled"


class CartAction(str, Enum):
    ADDED = "added"
    UPDATED = "updated"
    REMOVED = "removed"
    CLEARED = "cleared"
    MERGED = "merged"
