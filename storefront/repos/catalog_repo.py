# storefront/repos/catalog_repo.py
from datetime import datetime, timezone
from decimal import Decimal
from typing import Iterable, List

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session, selectinload

from storefront.data.models.catalog import (
    CategoryModel,
    ProductAttributeModel,
    ProductModel,
    ProductReviewModel,
    RecentlyViewedModel,
)


class CatalogRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_product(self, product_id: int) -> ProductModel | None:
        return self.db.get(ProductModel, product_id, populate_existing=True)

    def get_products(self, product_ids: Iterable[int], lock: bool = False) -> List[ProductModel]:
        ids = list(product_ids)
        if not ids:
            return []
        query = (
            select(ProductModel)
            .where(ProductModel.id.in_(ids))
            .order_by(ProductModel.id)
            .execution_options(populate_existing=True)
        )
        if lock:
            # SELECT ... FOR UPDATE, kolejnosc po id zeby dwa zamowienia nie zakleszczyly sie
            query = query.with_for_update()
        return list(self.db.execute(query).scalars())

    def search_products(self, name: str) -> List[ProductModel]:
        return list(
            self.db.execute(
                select(ProductModel)
                .where(
                    ProductModel.name.ilike(f"%{name}%"),
                    ProductModel.deleted.is_(False),
                )
                .order_by(ProductModel.id)
            ).scalars()
        )

    def homepage_products(self) -> List[ProductModel]:
        return list(
            self.db.execute(
                select(ProductModel)
                .where(
                    ProductModel.show_on_homepage.is_(True),
                    ProductModel.published.is_(True),
                    ProductModel.deleted.is_(False),
                )
                .order_by(ProductModel.id)
            ).scalars()
        )

    def filter_products(
        self,
        min_price: Decimal | None = None,
        max_price: Decimal | None = None,
        category_ids: List[int] | None = None,
        on_sale: bool = False,
    ) -> List[ProductModel]:
        query = select(ProductModel).where(
            ProductModel.published.is_(True),
            ProductModel.deleted.is_(False),
        )
        if min_price is not None:
            query = query.where(ProductModel.price >= min_price)
        if max_price is not None:
            query = query.where(ProductModel.price <= max_price)
        if category_ids:
            query = query.where(ProductModel.category_id.in_(category_ids))
        if on_sale:
            query = query.where(ProductModel.old_price > ProductModel.price)
        return list(self.db.execute(query.order_by(ProductModel.id)).scalars())

    def products_by_category(self, category_id: int) -> List[ProductModel]:
        return list(
            self.db.execute(
                select(ProductModel)
                .where(
                    ProductModel.category_id == category_id,
                    ProductModel.published.is_(True),
                    ProductModel.deleted.is_(False),
                )
                .order_by(ProductModel.id)
            ).scalars()
        )

    def published_categories(self) -> List[CategoryModel]:
        return list(
            self.db.execute(
                select(CategoryModel)
                .where(CategoryModel.published.is_(True))
                .order_by(CategoryModel.id)
            ).scalars()
        )

    def product_attributes(self, product_id: int) -> List[ProductAttributeModel]:
        return list(
            self.db.execute(
                select(ProductAttributeModel)
                .where(ProductAttributeModel.product_id == product_id)
                .options(selectinload(ProductAttributeModel.values))
                .order_by(ProductAttributeModel.id)
            ).scalars()
        )

    def decrement_stock(self, product_id: int, quantity: int) -> int:
        """Zmniejsza stan tylko gdy wystarcza towaru; 0 = nie zmieniono."""
        result = self.db.execute(
            update(ProductModel)
            .where(
                ProductModel.id == product_id,
                ProductModel.stock_quantity >= quantity,
            )
            .values(stock_quantity=ProductModel.stock_quantity - quantity)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    def add_review(self, review: ProductReviewModel) -> ProductReviewModel:
        self.db.add(review)
        self.db.commit()
        self.db.refresh(review)
        return review

    def reviews(self, product_id: int | None = None, approved_only: bool = False) -> List[ProductReviewModel]:
        query = select(ProductReviewModel)
        if product_id is not None:
            query = query.where(ProductReviewModel.product_id == product_id)
        if approved_only:
            query = query.where(ProductReviewModel.is_approved.is_(True))
        return list(self.db.execute(query.order_by(ProductReviewModel.id)).scalars())

    def rating_stats(self, product_id: int) -> tuple[float | None, int]:
        avg, total = self.db.execute(
            select(func.avg(ProductReviewModel.rating), func.count(ProductReviewModel.id)).where(
                ProductReviewModel.product_id == product_id,
                ProductReviewModel.is_approved.is_(True),
            )
        ).one()
        return (float(avg) if avg is not None else None), total

    def record_view(self, customer_id: int, product_id: int) -> RecentlyViewedModel:
        view = self.db.execute(
            select(RecentlyViewedModel).where(
                RecentlyViewedModel.customer_id == customer_id,
                RecentlyViewedModel.product_id == product_id,
            )
        ).scalar_one_or_none()

        if view is None:
            view = RecentlyViewedModel(customer_id=customer_id, product_id=product_id)
            self.db.add(view)
        else:
            view.viewed_at = datetime.now(timezone.utc)

        self.db.commit()
        return view

    def recently_viewed(self, customer_id: int, count: int) -> List[ProductModel]:
        return list(
            self.db.execute(
                select(ProductModel)
                .join(RecentlyViewedModel, RecentlyViewedModel.product_id == ProductModel.id)
                .where(
                    RecentlyViewedModel.customer_id == customer_id,
                    ProductModel.published.is_(True),
                    ProductModel.deleted.is_(False),
                )
                .order_by(RecentlyViewedModel.viewed_at.desc(), RecentlyViewedModel.id.desc())
                .limit(count)
            ).scalars()
        )
