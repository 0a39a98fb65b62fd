# storefront/data/models/catalog.py
from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, Numeric, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from storefront.data.database import Base


def _now():
    return datetime.now(timezone.utc)


class CategoryModel(Base):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True)
    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    parent_category_id = Column(Integer, nullable=False, default=0)
    picture_id = Column(Integer, nullable=False, default=0)
    published = Column(Boolean, nullable=False, default=True)


class ProductModel(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True)
    name = Column(String(400), nullable=False)
    short_description = Column(Text, nullable=True)
    full_description = Column(Text, nullable=True)
    sku = Column(String(100), nullable=True)
    price = Column(Numeric(10, 2), nullable=False)
    # cena przed obnizka; old_price > price = produkt w promocji
    old_price = Column(Numeric(10, 2), nullable=False, default=0)
    stock_quantity = Column(Integer, nullable=False, default=0)
    published = Column(Boolean, nullable=False, default=True)
    deleted = Column(Boolean, nullable=False, default=False)
    show_on_homepage = Column(Boolean, nullable=False, default=False)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=True)

    # referencja do obrazka w zewnetrznym serwisie mediow
    picture_id = Column(Integer, nullable=False, default=0)
    seo_filename = Column(String(300), nullable=True)
    mime_type = Column(String(40), nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_now, onupdate=_now)

    attributes = relationship(
        "ProductAttributeModel",
        back_populates="product",
        cascade="all, delete-orphan",
        order_by="ProductAttributeModel.id",
    )


class ProductAttributeModel(Base):
    __tablename__ = "product_attributes"

    id = Column(Integer, primary_key=True)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(200), nullable=False)

    product = relationship("ProductModel", back_populates="attributes")
    values = relationship(
        "ProductAttributeValueModel",
        back_populates="attribute",
        cascade="all, delete-orphan",
        order_by="ProductAttributeValueModel.id",
    )


class ProductAttributeValueModel(Base):
    __tablename__ = "product_attribute_values"

    id = Column(Integer, primary_key=True)
    attribute_id = Column(Integer, ForeignKey("product_attributes.id", ondelete="CASCADE"), nullable=False)
    name = Column(String(200), nullable=False)
    price_adjustment = Column(Numeric(10, 2), nullable=False, default=0)
    is_pre_selected = Column(Boolean, nullable=False, default=False)

    attribute = relationship("ProductAttributeModel", back_populates="values")


class ProductReviewModel(Base):
    __tablename__ = "product_reviews"

    id = Column(Integer, primary_key=True)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True)
    customer_id = Column(Integer, ForeignKey("customers.id"), nullable=False)
    title = Column(String(200), nullable=True)
    review_text = Column(Text, nullable=True)
    rating = Column(Integer, nullable=False)
    is_approved = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_now)


class RecentlyViewedModel(Base):
    """Ostatnio ogladane produkty klienta, jeden wiersz na produkt."""

    __tablename__ = "recently_viewed_products"

    id = Column(Integer, primary_key=True)
    customer_id = Column(Integer, ForeignKey("customers.id"), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False)
    viewed_at = Column(DateTime(timezone=True), nullable=False, default=_now)

    __table_args__ = (
        UniqueConstraint("customer_id", "product_id", name="u_customer_recently_viewed"),
    )
