"""
Shared fixtures for the storefront tests.

The environment is configured before the storefront package is imported:
- SQLite in-memory database (one shared connection)
- Redis fan-out of cart events disabled
- Celery tasks executed eagerly in-process
- no external picture service
"""
import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["EVENTS_REDIS_URL"] = ""
os.environ["CELERY_TASK_ALWAYS_EAGER"] = "true"
os.environ["PICTURE_SERVICE_URL"] = ""
os.environ["PICTURE_CDN_URL"] = "/images"
os.environ["SEED_CATALOG"] = "false"

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from storefront.main import app
from storefront.api.dependencies import get_picture_client
from storefront.data.database import Base, SessionLocal, engine
from storefront.data.models.catalog import ProductModel
from storefront.data.models.customer import CustomerModel
from storefront.services.cart_service import CartService
from storefront.services.catalog_gateway import CatalogGateway
from storefront.services.event_bus import EventBus, get_event_bus
from storefront.services.identity import IdentityBridge
from storefront.services.order_service import OrderService
from storefront.services.picture_client import PictureClient


@pytest.fixture(autouse=True)
def fresh_tables():
    """Recreate every table so each test starts from an empty database."""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def db_session():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def event_bus():
    return EventBus(url="")


@pytest.fixture
def received_events(event_bus):
    events = []
    event_bus.subscribe(events.append)
    return events


@pytest.fixture
def make_customer(db_session):
    def _make(email="jane@example.com", username="jane", active=True):
        customer = CustomerModel(email=email, username=username, active=active)
        db_session.add(customer)
        db_session.commit()
        return customer

    return _make


@pytest.fixture
def make_product(db_session):
    def _make(product_id, name=None, price="10.00", stock=100, published=True, deleted=False, **extra):
        product = ProductModel(
            id=product_id,
            name=name or f"Product {product_id}",
            short_description=f"Short description {product_id}",
            price=Decimal(price),
            stock_quantity=stock,
            published=published,
            deleted=deleted,
            **extra,
        )
        db_session.add(product)
        db_session.commit()
        return product

    return _make


@pytest.fixture
def customer(make_customer):
    return make_customer()


@pytest.fixture
def cart_service(db_session, event_bus):
    return CartService(
        db=db_session,
        catalog=CatalogGateway(db_session),
        identity=IdentityBridge(db_session),
        event_bus=event_bus,
        picture_client=PictureClient(base_url=""),
    )


class RecordingNotifier:
    def __init__(self):
        self.sent = []

    def send_order_placed(self, customer_id, order_id, total):
        self.sent.append((customer_id, order_id, total))


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def order_service(db_session, cart_service, notifier):
    return OrderService(
        db=db_session,
        catalog=cart_service.catalog,
        cart_service=cart_service,
        identity=cart_service.identity,
        notification_service=notifier,
    )


@pytest.fixture
def test_client(event_bus):
    app.dependency_overrides[get_event_bus] = lambda: event_bus
    app.dependency_overrides[get_picture_client] = lambda: PictureClient(base_url="")
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
def stock_of(db_session):
    def _stock(product_id):
        db_session.expire_all()
        return db_session.get(ProductModel, product_id).stock_quantity

    return _stock
