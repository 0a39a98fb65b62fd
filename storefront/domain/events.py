# storefront/domain/events.py
from datetime import datetime, timezone
from typing import Optional

from pydantic import Field

from storefront.domain.enums import CartAction, CartKind
from storefront.domain.schemas import ApiModel


class CartChanged(ApiModel):
    """
    Zdarzenie "koszyk/lista zyczen zmienione" dla wszystkich widokow klienta.
    productId = None dla operacji na calej kolekcji (clear, merge).
    """

    kind: CartKind
    customer_id: int
    product_id: Optional[int] = None
    action: CartAction
    quantity: Optional[int] = None
    occurred_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)
