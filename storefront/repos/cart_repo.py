# storefront/repos/cart_repo.py
from datetime import datetime, timezone
from typing import List

from sqlalchemy import delete, select, update
from sqlalchemy.orm import Session

from storefront.data.models.cart_line import CartLineModel
from storefront.domain.enums import CartKind


class CartRepo:
    """Wiersze cart_lines; repo nie commituje, transakcja nalezy do serwisu."""

    def __init__(self, db: Session):
        self.db = db

    def get_line(self, customer_id: int, product_id: int, kind: CartKind) -> CartLineModel | None:
        return self.db.execute(
            select(CartLineModel).where(
                CartLineModel.customer_id == customer_id,
                CartLineModel.product_id == product_id,
                CartLineModel.kind == kind.value,
            )
            .execution_options(populate_existing=True)
        ).scalar_one_or_none()

    def get_line_by_id(self, line_id: int) -> CartLineModel | None:
        return self.db.get(CartLineModel, line_id, populate_existing=True)

    def get_lines(self, customer_id: int, kind: CartKind) -> List[CartLineModel]:
        # kolejnosc wstawiania, najstarsza pozycja pierwsza
        return list(
            self.db.execute(
                select(CartLineModel)
                .where(
                    CartLineModel.customer_id == customer_id,
                    CartLineModel.kind == kind.value,
                )
                .order_by(CartLineModel.id)
                .execution_options(populate_existing=True)
            ).scalars()
        )

    def insert_line(self, customer_id: int, product_id: int, kind: CartKind, quantity: int) -> CartLineModel:
        line = CartLineModel(
            customer_id=customer_id,
            product_id=product_id,
            kind=kind.value,
            quantity=quantity,
        )
        # IntegrityError (u_customer_product_kind) obsluguje serwis
        self.db.add(line)
        self.db.flush()
        return line

    def increment_quantity(self, customer_id: int, product_id: int, kind: CartKind, delta: int) -> int:
        # UPDATE ... SET quantity = quantity + delta, delty sa przemienne
        result = self.db.execute(
            update(CartLineModel)
            .where(
                CartLineModel.customer_id == customer_id,
                CartLineModel.product_id == product_id,
                CartLineModel.kind == kind.value,
            )
            .values(
                quantity=CartLineModel.quantity + delta,
                updated_at=datetime.now(timezone.utc),
            )
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    def current_quantity(self, customer_id: int, product_id: int, kind: CartKind) -> int | None:
        return self.db.execute(
            select(CartLineModel.quantity).where(
                CartLineModel.customer_id == customer_id,
                CartLineModel.product_id == product_id,
                CartLineModel.kind == kind.value,
            )
        ).scalar_one_or_none()

    def delete_line(self, customer_id: int, product_id: int, kind: CartKind) -> int:
        result = self.db.execute(
            delete(CartLineModel)
            .where(
                CartLineModel.customer_id == customer_id,
                CartLineModel.product_id == product_id,
                CartLineModel.kind == kind.value,
            )
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    def delete_line_by_id(self, line_id: int) -> int:
        result = self.db.execute(
            delete(CartLineModel)
            .where(CartLineModel.id == line_id)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    def delete_all(self, customer_id: int, kind: CartKind) -> int:
        result = self.db.execute(
            delete(CartLineModel)
            .where(
                CartLineModel.customer_id == customer_id,
                CartLineModel.kind == kind.value,
            )
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()
