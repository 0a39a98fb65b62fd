from typing import List

from sqlalchemy.orm import Session

from storefront.data.models.catalog import ProductReviewModel
from storefront.domain.errors import InvalidInput
from storefront.domain.schemas import ReviewIn, ReviewOut
from storefront.repos.catalog_repo import CatalogRepo
from storefront.repos.customer_repo import CustomerRepo
from storefront.services.catalog_gateway import CatalogGateway
from storefront.services.identity import IdentityBridge
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class ReviewService:
    def __init__(self, db: Session, catalog: CatalogGateway, identity: IdentityBridge):
        self.repo = CatalogRepo(db)
        self.customers = CustomerRepo(db)
        self.catalog = catalog
        self.identity = identity

    def submit_review(self, payload: ReviewIn) -> ProductReviewModel:
        if payload.rating < 1 or payload.rating > 5:
            raise InvalidInput("Rating must be between 1 and 5.", field="rating")

        customer = self.identity.resolve(payload.customer_id)
        product = self.catalog.require_product(payload.product_id)

        review = self.repo.add_review(
            ProductReviewModel(
                product_id=product.id,
                customer_id=customer.id,
                title=payload.title,
                review_text=payload.review_text,
                rating=payload.rating,
                is_approved=True,
            )
        )
        logger.info(f"Review {review.id} submitted for product {product.id} by customer {customer.id}")
        return review

    def list_reviews(self, product_id: int | None = None) -> List[ReviewOut]:
        if product_id is None:
            reviews = self.catalog.all_reviews()
        else:
            reviews = self.catalog.reviews_for_product(product_id)
        return [self._shape(r) for r in reviews]

    def _shape(self, review: ProductReviewModel) -> ReviewOut:
        product = self.repo.get_product(review.product_id)
        customer = self.customers.get_customer(review.customer_id)
        return ReviewOut(
            id=review.id,
            product=product.name if product else None,
            customer=customer.email if customer else None,
            title=review.title,
            review_text=review.review_text,
            rating=review.rating,
            is_approved=review.is_approved,
            created_at=review.created_at,
        )
