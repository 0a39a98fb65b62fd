# storefront/api/dependencies.py
from fastapi import Depends, Header
from sqlalchemy.orm import Session

from storefront.data.database import get_db
from storefront.data.models.customer import CustomerModel
from storefront.domain.errors import CustomerNotFound, InvalidToken
from storefront.services.cart_service import CartService
from storefront.services.catalog_gateway import CatalogGateway
from storefront.services.event_bus import EventBus, get_event_bus
from storefront.services.identity import IdentityBridge
from storefront.services.notification_service import NotificationService
from storefront.services.order_service import OrderService
from storefront.services.picture_client import PictureClient
from storefront.services.review_service import ReviewService


def get_picture_client() -> PictureClient:
    return PictureClient()


def get_notification_service() -> NotificationService:
    return NotificationService()


def get_cart_service(
    db: Session = Depends(get_db),
    event_bus: EventBus = Depends(get_event_bus),
    picture_client: PictureClient = Depends(get_picture_client),
) -> CartService:
    return CartService(
        db=db,
        catalog=CatalogGateway(db),
        identity=IdentityBridge(db),
        event_bus=event_bus,
        picture_client=picture_client,
    )


def get_order_service(
    db: Session = Depends(get_db),
    cart_service: CartService = Depends(get_cart_service),
    notification_service: NotificationService = Depends(get_notification_service),
) -> OrderService:
    return OrderService(
        db=db,
        catalog=cart_service.catalog,
        cart_service=cart_service,
        identity=cart_service.identity,
        notification_service=notification_service,
    )


def get_review_service(db: Session = Depends(get_db)) -> ReviewService:
    return ReviewService(db, CatalogGateway(db), IdentityBridge(db))


def get_current_customer(
    authorization: str | None = Header(None),
    x_customer_id: str | None = Header(None),
    db: Session = Depends(get_db),
) -> CustomerModel:
    """Bearer token albo naglowek X-Customer-Id."""
    identity = IdentityBridge(db)

    if authorization:
        scheme, _, token = authorization.partition(" ")
        if scheme.lower() != "bearer" or not token:
            raise InvalidToken("Authorization header must be 'Bearer <token>'.")
        return identity.resolve(token)

    if x_customer_id:
        return identity.resolve(x_customer_id)

    raise CustomerNotFound()


def get_optional_customer(
    authorization: str | None = Header(None),
    x_customer_id: str | None = Header(None),
    db: Session = Depends(get_db),
) -> CustomerModel | None:
    """Anonimowy odczyt dozwolony; podane naglowki musza byc poprawne."""
    if not authorization and not x_customer_id:
        return None
    return get_current_customer(authorization, x_customer_id, db)
