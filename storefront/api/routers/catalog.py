# storefront/api/routers/catalog.py
from decimal import Decimal
from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from storefront.api.dependencies import get_current_customer, get_optional_customer
from storefront.data.database import get_db
from storefront.data.models.customer import CustomerModel
from storefront.domain.schemas import (
    CategoryImageOut,
    CategoryOut,
    ProductAttributeOut,
    ProductFilterOut,
    ProductOut,
    RecentlyViewedOut,
)
from storefront.services.catalog_gateway import CatalogGateway

router = APIRouter(tags=["catalog"])


@router.get("/products", response_model=List[ProductOut])
def list_homepage_products(db: Session = Depends(get_db)):
    return CatalogGateway(db).homepage_products()


@router.get("/products/search", response_model=List[ProductOut])
def search_products(name: str | None = Query(None), db: Session = Depends(get_db)):
    return CatalogGateway(db).search_products(name)


@router.get("/products/filter", response_model=ProductFilterOut)
def filter_products(
    min_price: Decimal | None = Query(None, alias="minPrice"),
    max_price: Decimal | None = Query(None, alias="maxPrice"),
    category_ids: List[int] | None = Query(None, alias="categoryIds"),
    on_sale: bool = Query(False, alias="onSale"),
    db: Session = Depends(get_db),
):
    return CatalogGateway(db).filter_products(min_price, max_price, category_ids, on_sale)


@router.get("/products/{product_id}", response_model=ProductOut)
def get_product(
    product_id: int,
    customer: CustomerModel | None = Depends(get_optional_customer),
    db: Session = Depends(get_db),
):
    gateway = CatalogGateway(db)
    product = gateway.require_product(product_id)
    if customer is not None:
        gateway.record_view(customer.id, product.id)
    return product


@router.get("/products/{product_id}/attributes", response_model=List[ProductAttributeOut])
def get_product_attributes(product_id: int, db: Session = Depends(get_db)):
    return CatalogGateway(db).product_attributes(product_id)


@router.get("/recentlyViewed", response_model=List[RecentlyViewedOut])
def recently_viewed(
    count: int = Query(10),
    customer: CustomerModel = Depends(get_current_customer),
    db: Session = Depends(get_db),
):
    return CatalogGateway(db).recently_viewed(customer.id, count)


@router.get("/categories", response_model=List[CategoryOut])
def list_categories(db: Session = Depends(get_db)):
    return CatalogGateway(db).list_categories()


@router.get("/categories/with-images", response_model=List[CategoryImageOut])
def categories_with_images(db: Session = Depends(get_db)):
    return CatalogGateway(db).categories_with_images()


@router.get("/categories/{category_id}/products", response_model=List[ProductOut])
def products_by_category(category_id: int, db: Session = Depends(get_db)):
    return CatalogGateway(db).products_by_category(category_id)
