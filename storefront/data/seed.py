# storefront/data/seed.py
from decimal import Decimal

from sqlalchemy.orm import Session

from storefront.data.models.catalog import (
    CategoryModel,
    ProductAttributeModel,
    ProductAttributeValueModel,
    ProductModel,
)
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

CATEGORIES = [
    {"id": 1, "name": "Electronics", "parent_category_id": 0, "picture_id": 10},
    {"id": 2, "name": "Computers", "parent_category_id": 1},
    {"id": 3, "name": "Apparel", "parent_category_id": 0},
]

PRODUCTS = [
    {"id": 1, "name": "Keyboard", "price": Decimal("199.99"), "show_on_homepage": True, "stock_quantity": 25, "category_id": 2, "picture_id": 1, "seo_filename": "keyboard", "mime_type": "image/jpeg"},
    {"id": 2, "name": "Mouse", "price": Decimal("49.50"), "old_price": Decimal("59.00"), "stock_quantity": 40, "category_id": 2, "picture_id": 2, "seo_filename": "mouse", "mime_type": "image/jpeg"},
    {"id": 3, "name": "Monitor", "price": Decimal("899.00"), "show_on_homepage": True, "stock_quantity": 5, "category_id": 1, "picture_id": 3, "seo_filename": "monitor", "mime_type": "image/png"},
    {"id": 4, "name": "T-shirt", "price": Decimal("19.90"), "stock_quantity": 100, "category_id": 3},
]


def seed(db: Session) -> bool:
    # tylko dla pustej bazy
    if db.query(ProductModel).first():
        return False

    db.add_all(CategoryModel(**c) for c in CATEGORIES)
    db.flush()
    db.add_all(ProductModel(short_description=f"{p['name']} (demo)", **p) for p in PRODUCTS)
    db.flush()

    size = ProductAttributeModel(product_id=4, name="Size")
    size.values = [
        ProductAttributeValueModel(name=s, price_adjustment=Decimal("0.00"), is_pre_selected=(s == "M"))
        for s in ("S", "M", "L")
    ]
    db.add(size)
    db.commit()

    logger.info(f"Seeded {len(CATEGORIES)} categories and {len(PRODUCTS)} products")
    return True
