# storefront/repos/order_repo.py
from sqlalchemy.orm import Session

from storefront.data.models.address import AddressModel
from storefront.data.models.order import OrderModel, OrderLineModel


class OrderRepo:
    def __init__(self, db: Session):
        self.db = db

    def add_order(self, order: OrderModel) -> OrderModel:
        # bez commita - zamowienie i pozycje ida w jednej transakcji
        self.db.add(order)
        self.db.flush()
        return order

    def add_order_line(self, line: OrderLineModel) -> OrderLineModel:
        self.db.add(line)
        self.db.flush()
        return line

    def get_order(self, order_id: int) -> OrderModel | None:
        return self.db.get(OrderModel, order_id)

    def create_address(self, address: AddressModel) -> AddressModel:
        self.db.add(address)
        self.db.commit()
        self.db.refresh(address)
        return address

    def get_address(self, address_id: int) -> AddressModel | None:
        return self.db.get(AddressModel, address_id)

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()
