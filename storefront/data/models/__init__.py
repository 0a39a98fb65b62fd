#import wszystkich modeli zeby SQLAlchemy je zarejestrowal w base metadata

from storefront.data.models.customer import CustomerModel
from storefront.data.models.address import AddressModel
from storefront.data.models.catalog import (
    CategoryModel,
    ProductModel,
    ProductAttributeModel,
    ProductAttributeValueModel,
    ProductReviewModel,
    RecentlyViewedModel,
)
from storefront.data.models.cart_line import CartLineModel
from storefront.data.models.order import OrderModel, OrderLineModel

__all__ = [
    "CustomerModel",
    "AddressModel",
    "CategoryModel",
    "ProductModel",
    "ProductAttributeModel",
    "ProductAttributeValueModel",
    "ProductReviewModel",
    "RecentlyViewedModel",
    "CartLineModel",
    "OrderModel",
    "OrderLineModel",
]
