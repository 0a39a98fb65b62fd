# storefront/services/order_service.py
import uuid
from decimal import Decimal
from typing import Any, Dict

from sqlalchemy.orm import Session

from storefront.data.models.address import AddressModel
from storefront.data.models.order import OrderModel, OrderLineModel
from storefront.domain.enums import CartAction, CartKind, OrderStatus
from storefront.domain.errors import (
    AddressNotFound,
    EmptyCart,
    InsufficientStock,
    InvalidInput,
    OrderNotFound,
    ProductNotFound,
)
from storefront.domain.events import CartChanged
from storefront.domain.schemas import AddressIn
from storefront.repos.order_repo import OrderRepo
from storefront.services.cart_service import CartService
from storefront.services.catalog_gateway import CatalogGateway
from storefront.services.identity import IdentityBridge
from storefront.services.notification_service import NotificationService
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class OrderService:
    """
    Skladanie zamowienia z biezacego koszyka.
    Separacja od CartService - koszyk czytany przez jego publiczne operacje.
    """

    def __init__(
        self,
        db: Session,
        catalog: CatalogGateway,
        cart_service: CartService,
        identity: IdentityBridge,
        notification_service: NotificationService | None = None,
    ):
        self.repo = OrderRepo(db)
        self.catalog = catalog
        self.cart_service = cart_service
        self.identity = identity
        self.notification_service = notification_service or NotificationService()

    def create_address(self, payload: AddressIn) -> AddressModel:
        if not payload.first_name.strip() or not payload.last_name.strip():
            raise InvalidInput("FirstName and LastName are required.")

        address = AddressModel(**payload.model_dump())
        created = self.repo.create_address(address)
        logger.info(f"Address {created.id} created")
        return created

    def place_order(self, customer_id: int, billing_address_id: int, shipping_address_id: int) -> Dict[str, Any]:
        """
        Use Case: zlozenie zamowienia.

        1. Weryfikuje klienta i adresy
        2. Snapshot koszyka (list_items), pusty -> EmptyCart
        3. Sprawdza stan magazynu WSZYSTKICH pozycji zanim cokolwiek zmieni
        4. Zmniejsza stany, tworzy naglowek i pozycje z cena z tej chwili
        5. Czysci koszyk (lista zyczen zostaje)
        Wszystko w jednej transakcji - blad = rollback, brak czesciowego zamowienia.
        """
        for name, value in (
            ("customerId", customer_id),
            ("billingAddressId", billing_address_id),
            ("shippingAddressId", shipping_address_id),
        ):
            if value <= 0:
                raise InvalidInput(f"Invalid {name}.", field=name)

        customer = self.identity.resolve(customer_id)

        if self.repo.get_address(billing_address_id) is None:
            raise AddressNotFound(billing_address_id, "Billing")
        if self.repo.get_address(shipping_address_id) is None:
            raise AddressNotFound(shipping_address_id, "Shipping")

        items = self.cart_service.list_items(customer.id, CartKind.CART)
        if not items:
            raise EmptyCart()

        try:
            # faza 1: walidacja wszystkich pozycji na zablokowanych wierszach, bez zmian w bazie
            products = self.catalog.get_products((i["product_id"] for i in items), lock=True)
            priced = []
            for item in items:
                product = products.get(item["product_id"])
                if product is None:
                    # wycofany miedzy odczytem koszyka a blokada
                    raise ProductNotFound(item["product_id"])
                if product.stock_quantity < item["quantity"]:
                    raise InsufficientStock(product.id, item["quantity"], product.stock_quantity)
                priced.append((product, item["quantity"], Decimal(product.price)))

            total = sum((price * qty for _, qty, price in priced), Decimal("0.00"))

            # faza 2: zapis; decrement_stock i tak sprawdza stan warunkiem w UPDATE
            for product, qty, _ in priced:
                self.catalog.decrement_stock(product, qty)

            order = self.repo.add_order(
                OrderModel(
                    order_guid=str(uuid.uuid4()),
                    custom_order_number=uuid.uuid4().hex[:12].upper(),
                    customer_id=customer.id,
                    billing_address_id=billing_address_id,
                    shipping_address_id=shipping_address_id,
                    status=OrderStatus.PENDING.value,
                    total=total,
                )
            )

            for product, qty, price in priced:
                self.repo.add_order_line(
                    OrderLineModel(
                        order_id=order.id,
                        product_id=product.id,
                        product_name=product.name,
                        quantity=qty,
                        unit_price=price,
                        line_total=price * qty,
                    )
                )

            self.cart_service.clear(customer.id, CartKind.CART, commit=False)
            self.repo.commit()
        except Exception:
            self.repo.rollback()
            raise

        logger.info(f"Order {order.id} placed by customer {customer.id}, total {total}")

        self.cart_service.event_bus.publish(
            CartChanged(kind=CartKind.CART, customer_id=customer.id, action=CartAction.CLEARED)
        )
        self.notification_service.send_order_placed(customer.id, order.id, total)

        return {
            "message": "Order placed successfully.",
            "order_id": order.id,
            "order_guid": order.order_guid,
            "total_amount": total,
        }

    def get_order(self, order_id: int, customer_id: int) -> OrderModel:
        """
        Use Case: pobranie zamowienia (Query).
        """
        order = self.repo.get_order(order_id)

        if not order or order.customer_id != customer_id:
            raise OrderNotFound(order_id)

        return order
