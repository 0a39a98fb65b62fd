from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storefront.api.dependencies import get_review_service
from storefront.data.database import get_db
from storefront.domain.schemas import MessageOut, RatingOut, ReviewIn, ReviewOut
from storefront.services.catalog_gateway import CatalogGateway
from storefront.services.review_service import ReviewService

router = APIRouter(prefix="/reviews", tags=["reviews"])


@router.post("", response_model=MessageOut)
def submit_review(payload: ReviewIn, svc: ReviewService = Depends(get_review_service)):
    svc.submit_review(payload)
    return MessageOut(message="Review submitted successfully.")


@router.get("", response_model=List[ReviewOut])
def all_reviews(svc: ReviewService = Depends(get_review_service)):
    return svc.list_reviews()


@router.get("/product/{product_id}", response_model=List[ReviewOut])
def reviews_for_product(product_id: int, svc: ReviewService = Depends(get_review_service)):
    return svc.list_reviews(product_id)


@router.get("/product/{product_id}/rating", response_model=RatingOut)
def product_rating(product_id: int, db: Session = Depends(get_db)):
    return CatalogGateway(db).product_rating(product_id)
