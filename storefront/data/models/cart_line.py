# storefront/data/models/cart_line.py
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, UniqueConstraint

from storefront.data.database import Base


def _now():
    return datetime.now(timezone.utc)


class CartLineModel(Base):
    """Jedna pozycja koszyka albo listy zyczen (kind rozroznia kolekcje)."""

    __tablename__ = "cart_lines"

    id = Column(Integer, primary_key=True)
    customer_id = Column(Integer, ForeignKey("customers.id"), nullable=False, index=True)
    product_id = Column(Integer, nullable=False)
    kind = Column(String(16), nullable=False)

    quantity = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_now)

    __table_args__ = (
        UniqueConstraint("customer_id", "product_id", "kind", name="u_customer_product_kind"),
    )
