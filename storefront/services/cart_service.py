from decimal import Decimal
from typing import Dict, Any, List
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from storefront.data.models.cart_line import CartLineModel
from storefront.domain.enums import CartAction, CartKind
from storefront.domain.errors import (
    CustomerNotFound,
    DuplicateWishlistItem,
    InvalidInput,
    ItemNotFound,
    StorefrontError,
)
from storefront.domain.events import CartChanged
from storefront.domain.guest_cart import GuestCart
from storefront.repos.cart_repo import CartRepo
from storefront.services.catalog_gateway import CatalogGateway
from storefront.services.event_bus import EventBus
from storefront.services.identity import IdentityBridge
from storefront.services.picture_client import PictureClient
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def _require_positive(name: str, value: int):
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise InvalidInput(f"{name} must be a positive integer.", field=name)


class CartService:
    """
    Koszyk i lista zyczen klienta (jedna struktura pozycji, rozna kolekcja - kind).
    commands (add, set_quantity, remove, clear, merge) modyfikuja stan
    query (list_items, summary) tylko odczyt

    Ilosci zmieniane sa wylacznie deltami na liczbie trzymanej w bazie,
    wiec ponowione albo rownolegle zadania nie nadpisuja sie nawzajem.
    """

    def __init__(
        self,
        db: Session,
        catalog: CatalogGateway,
        identity: IdentityBridge,
        event_bus: EventBus,
        picture_client: PictureClient | None = None,
    ):
        self.repo = CartRepo(db)
        self.catalog = catalog
        self.identity = identity
        self.event_bus = event_bus
        self.picture_client = picture_client

    #query - odczyt
    def list_items(self, customer_id: int, kind: CartKind) -> List[Dict[str, Any]]:
        self.identity.resolve(customer_id)

        lines = self.repo.get_lines(customer_id, kind)
        products = self.catalog.get_products(line.product_id for line in lines)

        items = []
        for line in lines:
            product = products.get(line.product_id)
            if product is None:
                # produkt usuniety/niepublikowany - pomijamy bez bledu
                continue

            image = None
            if kind == CartKind.WISHLIST and self.picture_client is not None:
                image = self.picture_client.image_url_for(product)

            items.append(
                {
                    "id": line.id,
                    "item_id": line.id,
                    "product_id": product.id,
                    "name": product.name,
                    "short_description": product.short_description,
                    "price": product.price,
                    "quantity": line.quantity,
                    "created_at": line.created_at,
                    "image_url": image,
                }
            )
        return items

    def summary(self, customer_id: int, kind: CartKind) -> Dict[str, Any]:
        items = self.list_items(customer_id, kind)
        subtotal = sum((Decimal(i["price"]) * i["quantity"] for i in items), Decimal("0.00"))
        return {
            "kind": kind,
            "item_count": len(items),
            "total_quantity": sum(i["quantity"] for i in items),
            "subtotal": subtotal,
        }

    #commands
    def add_item(self, customer_id: int, product_id: int, quantity: int, kind: CartKind) -> CartLineModel:
        """
        quantity to przyrost. Istniejaca pozycja koszyka jest zwiekszana,
        na liscie zyczen duplikat jest odrzucany (DuplicateWishlistItem).
        """
        line = self._add(customer_id, product_id, quantity, kind)
        self._publish(kind, customer_id, CartAction.ADDED, product_id, line.quantity)
        return line

    def set_quantity(self, customer_id: int, product_id: int, kind: CartKind, delta: int) -> int:
        """Zwraca nowa ilosc; 0 gdy pozycja zostala usunieta."""
        if isinstance(delta, bool) or not isinstance(delta, int):
            raise InvalidInput("delta must be an integer.", field="delta")
        if kind == CartKind.WISHLIST:
            raise InvalidInput("Wishlist quantity is fixed when the item is added.", field="kind")

        self.identity.resolve(customer_id)

        updated = self.repo.increment_quantity(customer_id, product_id, kind, delta)
        if updated == 0:
            raise ItemNotFound("Cart item not found.", customerId=customer_id, productId=product_id)

        quantity = self.repo.current_quantity(customer_id, product_id, kind)
        if quantity is not None and quantity <= 0:
            self.repo.delete_line(customer_id, product_id, kind)
            quantity = 0

        self.repo.commit()

        logger.info(
            f"Applied delta {delta:+d} to product {product_id} in {kind.value} "
            f"of customer {customer_id}, new quantity: {quantity}"
        )

        action = CartAction.REMOVED if quantity == 0 else CartAction.UPDATED
        self._publish(kind, customer_id, action, product_id, quantity)
        return quantity

    def remove_item(self, customer_id: int, product_id: int, kind: CartKind) -> bool:
        """Idempotentne - brak pozycji nie jest bledem."""
        self.identity.resolve(customer_id)

        removed = self.repo.delete_line(customer_id, product_id, kind)
        self.repo.commit()

        if removed:
            logger.info(f"Removed product {product_id} from {kind.value} of customer {customer_id}")
            self._publish(kind, customer_id, CartAction.REMOVED, product_id, 0)
        else:
            logger.info(f"Product {product_id} not in {kind.value} of customer {customer_id}, nothing to remove")
        return bool(removed)

    def remove_line_by_id(self, customer_id: int, item_id: int, kind: CartKind) -> CartLineModel:
        line = self.repo.get_line_by_id(item_id)
        if line is None or line.customer_id != customer_id or line.kind != kind.value:
            raise ItemNotFound(f"{kind.value} item not found.", itemId=item_id, customerId=customer_id)

        self.repo.delete_line_by_id(item_id)
        self.repo.commit()

        logger.info(f"Removed {kind.value} line {item_id} of customer {customer_id}")
        self._publish(kind, customer_id, CartAction.REMOVED, line.product_id, 0)
        return line

    def clear(self, customer_id: int, kind: CartKind, commit: bool = True) -> int:
        """commit=False: usuwa w biezacej transakcji wywolujacego (skladanie zamowienia)."""
        self.identity.resolve(customer_id)

        removed = self.repo.delete_all(customer_id, kind)
        if not commit:
            return removed

        self.repo.commit()

        logger.info(f"Cleared {removed} lines from {kind.value} of customer {customer_id}")
        self._publish(kind, customer_id, CartAction.CLEARED)
        return removed

    def merge_guest_cart(self, customer_id: int, guest: GuestCart, kind: CartKind) -> Dict[str, Any]:
        """
        Przenosi koszyk goscia na serwer przy logowaniu.

        Kazdy wpis jest commitowany osobno i dopiero wtedy usuwany z koszyka goscia,
        wiec ponowienie po czesciowym bledzie nie dolicza juz przeniesionych pozycji.
        """
        self.identity.resolve(customer_id)

        migrated, skipped, failed = [], [], []

        for entry in guest.entries():
            try:
                self._add(customer_id, entry.product_id, entry.quantity, kind)
            except DuplicateWishlistItem:
                # juz jest na serwerze - traktujemy jak potwierdzone
                guest.remove(entry.product_id)
                skipped.append(entry.product_id)
                continue
            except CustomerNotFound:
                raise
            except StorefrontError as e:
                logger.warning(f"Guest {kind.value} entry {entry.product_id} not migrated: {e.message}")
                failed.append(
                    {"product_id": entry.product_id, "error": e.code, "message": e.message}
                )
                continue
            except Exception:
                # poprzednie wpisy sa juz zacommitowane, odpowiedz musi je zglosic
                self.repo.rollback()
                logger.exception(f"Guest {kind.value} entry {entry.product_id} not migrated")
                failed.append(
                    {
                        "product_id": entry.product_id,
                        "error": "MergeEntryFailed",
                        "message": "Entry could not be saved, retry later.",
                    }
                )
                continue

            guest.remove(entry.product_id)
            migrated.append(entry.product_id)

        logger.info(
            f"Merged guest {kind.value} into customer {customer_id}: "
            f"migrated={migrated} skipped={skipped} failed={[f['product_id'] for f in failed]}"
        )

        if migrated:
            self._publish(kind, customer_id, CartAction.MERGED)

        return {"migrated": migrated, "skipped": skipped, "failed": failed}

    def _add(self, customer_id: int, product_id: int, quantity: int, kind: CartKind) -> CartLineModel:
        # walidacja przed jakimkolwiek dostepem do bazy
        _require_positive("quantity", quantity)
        _require_positive("productId", product_id)

        self.identity.resolve(customer_id)
        self.catalog.require_product(product_id)

        existing = self.repo.get_line(customer_id, product_id, kind)

        if existing and kind == CartKind.WISHLIST:
            raise DuplicateWishlistItem(product_id)

        if existing:
            logger.info(
                f"Product {product_id} already in {kind.value} of customer {customer_id}, "
                f"increasing quantity by {quantity}"
            )
            self.repo.increment_quantity(customer_id, product_id, kind, quantity)
        else:
            logger.info(f"Adding product {product_id} to {kind.value} of customer {customer_id}")
            try:
                self.repo.insert_line(customer_id, product_id, kind, quantity)
            except IntegrityError:
                # rownolegle zadanie wstawilo ten sam wiersz (u_customer_product_kind)
                self.repo.rollback()
                if kind == CartKind.WISHLIST:
                    raise DuplicateWishlistItem(product_id)
                self.repo.increment_quantity(customer_id, product_id, kind, quantity)

        self.repo.commit()
        return self.repo.get_line(customer_id, product_id, kind)

    def _publish(
        self,
        kind: CartKind,
        customer_id: int,
        action: CartAction,
        product_id: int | None = None,
        quantity: int | None = None,
    ):
        self.event_bus.publish(
            CartChanged(
                kind=kind,
                customer_id=customer_id,
                product_id=product_id,
                action=action,
                quantity=quantity,
            )
        )
