# storefront/services/catalog_gateway.py
from decimal import Decimal
from typing import Any, Dict, Iterable, List

from sqlalchemy.orm import Session

from storefront.data.models.catalog import ProductModel
from storefront.domain.errors import InsufficientStock, InvalidInput, ProductNotFound
from storefront.repos.catalog_repo import CatalogRepo
from storefront.services.picture_client import image_url
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def _is_available(product: ProductModel | None) -> bool:
    return product is not None and product.published and not product.deleted


class CatalogGateway:
    """
    Odczyt katalogu: produkty, kategorie, atrybuty, recenzje.
    Zapisy tylko dwa: decrement_stock (skladanie zamowienia) i record_view.
    """

    def __init__(self, db: Session):
        self.repo = CatalogRepo(db)

    # produkty
    def get_product(self, product_id: int) -> ProductModel | None:
        product = self.repo.get_product(product_id)
        return product if _is_available(product) else None

    def require_product(self, product_id: int) -> ProductModel:
        product = self.get_product(product_id)
        if product is None:
            raise ProductNotFound(product_id)
        return product

    def get_products(self, product_ids: Iterable[int], lock: bool = False) -> Dict[int, ProductModel]:
        """lock=True blokuje wiersze do konca transakcji (skladanie zamowienia)."""
        return {p.id: p for p in self.repo.get_products(product_ids, lock=lock) if _is_available(p)}

    def search_products(self, name: str | None) -> List[ProductModel]:
        if not name or not name.strip():
            raise InvalidInput("Search term is required.")
        return self.repo.search_products(name.strip())

    def products_by_category(self, category_id: int) -> List[ProductModel]:
        return self.repo.products_by_category(category_id)

    def homepage_products(self) -> List[ProductModel]:
        return self.repo.homepage_products()

    def filter_products(
        self,
        min_price: Decimal | None = None,
        max_price: Decimal | None = None,
        category_ids: List[int] | None = None,
        on_sale: bool = False,
    ) -> Dict[str, Any]:
        if min_price is not None and min_price < 0:
            raise InvalidInput("minPrice cannot be negative.", field="minPrice")
        if max_price is not None and max_price < 0:
            raise InvalidInput("maxPrice cannot be negative.", field="maxPrice")
        if min_price is not None and max_price is not None and min_price > max_price:
            raise InvalidInput("minPrice cannot be greater than maxPrice.", field="minPrice")

        products = self.repo.filter_products(min_price, max_price, category_ids, on_sale)
        return {"products": products, "total": len(products)}

    # ostatnio ogladane
    def record_view(self, customer_id: int, product_id: int) -> None:
        self.repo.record_view(customer_id, product_id)

    def recently_viewed(self, customer_id: int, count: int = 10) -> List[ProductModel]:
        if count <= 0:
            raise InvalidInput("count must be a positive integer.", field="count")
        return self.repo.recently_viewed(customer_id, count)

    # kategorie
    def list_categories(self) -> List[dict]:
        categories = self.repo.published_categories()

        children: Dict[int, list] = {}
        for c in categories:
            if c.parent_category_id:
                children.setdefault(c.parent_category_id, []).append(c)

        return [
            {
                "id": c.id,
                "name": c.name,
                "description": c.description,
                "picture_id": c.picture_id,
                "children": children.get(c.id, []),
            }
            for c in categories
            if not c.parent_category_id
        ]

    def categories_with_images(self) -> List[dict]:
        return [
            {
                "id": c.id,
                "name": c.name,
                "description": c.description,
                "picture_id": c.picture_id,
                "image_url": image_url(c.picture_id, None, None),
            }
            for c in self.repo.published_categories()
        ]

    # atrybuty
    def product_attributes(self, product_id: int) -> List[dict]:
        if product_id <= 0:
            raise InvalidInput("Invalid product ID.", productId=product_id)

        return [
            {
                "attribute_id": a.id,
                "attribute_name": a.name,
                "values": a.values,
            }
            for a in self.repo.product_attributes(product_id)
        ]

    # recenzje
    def product_rating(self, product_id: int) -> dict:
        self.require_product(product_id)
        average, total = self.repo.rating_stats(product_id)
        return {"average_rating": average or 0.0, "total_reviews": total}

    def reviews_for_product(self, product_id: int):
        return self.repo.reviews(product_id=product_id, approved_only=True)

    def all_reviews(self):
        return self.repo.reviews(approved_only=True)

    # stan magazynowy
    def decrement_stock(self, product: ProductModel, quantity: int) -> None:
        logger.info(f"Decrementing stock of product {product.id} by {quantity}")
        if self.repo.decrement_stock(product.id, quantity) == 0:
            # stan zmienil sie od sprawdzenia (rownolegle zamowienie)
            current = self.repo.get_product(product.id)
            available = current.stock_quantity if current else 0
            raise InsufficientStock(product.id, quantity, available)
