# storefront/domain/guest_cart.py
"""
Koszyk goscia - lustro stanu trzymanego w przegladarce, kluczowany tylko product_id.

Regula konsolidacji: wiele surowych wpisow tego samego produktu sumuje sie
do jednego wpisu. Kolejnosc iteracji = kolejnosc pierwszego pojawienia sie.
"""
from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, List, Tuple, Union

from storefront.domain.errors import InvalidInput


@dataclass(frozen=True)
class GuestEntry:
    product_id: int
    quantity: int


RawEntry = Union[GuestEntry, Tuple[int, int], dict]


class GuestCart:
    def __init__(self):
        self._lines: Dict[int, int] = {}

    @classmethod
    def from_entries(cls, raw: Iterable[RawEntry]) -> "GuestCart":
        cart = cls()
        for entry in raw:
            product_id, quantity = _unpack(entry)
            cart.add(product_id, quantity)
        return cart

    def add(self, product_id: int, quantity: int) -> int:
        if product_id <= 0:
            raise InvalidInput("Invalid product ID.", productId=product_id)
        if quantity <= 0:
            raise InvalidInput("Quantity must be greater than zero.", productId=product_id)

        self._lines[product_id] = self._lines.get(product_id, 0) + quantity
        return self._lines[product_id]

    def apply_delta(self, product_id: int, delta: int) -> int:
        """Zwraca nowa ilosc; 0 oznacza ze pozycja zostala usunieta."""
        if product_id not in self._lines:
            raise InvalidInput("Product is not in the guest cart.", productId=product_id)

        new_quantity = self._lines[product_id] + delta
        if new_quantity <= 0:
            del self._lines[product_id]
            return 0
        self._lines[product_id] = new_quantity
        return new_quantity

    def remove(self, product_id: int) -> bool:
        return self._lines.pop(product_id, None) is not None

    def quantity_of(self, product_id: int) -> int:
        return self._lines.get(product_id, 0)

    def entries(self) -> List[GuestEntry]:
        return [GuestEntry(pid, qty) for pid, qty in self._lines.items()]

    def clear(self) -> None:
        self._lines.clear()

    def __iter__(self) -> Iterator[GuestEntry]:
        return iter(self.entries())

    def __len__(self) -> int:
        return len(self._lines)

    def __contains__(self, product_id: int) -> bool:
        return product_id in self._lines


def _unpack(entry: RawEntry) -> Tuple[int, int]:
    if isinstance(entry, GuestEntry):
        return entry.product_id, entry.quantity
    if isinstance(entry, dict):
        try:
            product_id = entry.get("productId", entry.get("product_id"))
            return int(product_id), int(entry.get("quantity", 1))
        except (TypeError, ValueError):
            raise InvalidInput("Malformed guest cart entry.", entry=str(entry))
    try:
        product_id, quantity = entry
        return int(product_id), int(quantity)
    except (TypeError, ValueError):
        raise InvalidInput("Malformed guest cart entry.", entry=str(entry))
