# storefront/services/identity.py
from datetime import datetime, timedelta, timezone

import jwt
from sqlalchemy.orm import Session

from storefront.data.models.customer import CustomerModel
from storefront.domain.errors import CustomerNotFound, InvalidToken
from storefront.repos.customer_repo import CustomerRepo
from storefront.utils.settings import (
    IDENTITY_ALGORITHM,
    IDENTITY_SECRET_KEY,
    IDENTITY_TOKEN_TTL_SECONDS,
)
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class IdentityBridge:
    """
    Ustala "biezacego klienta" z identyfikatora od klienta HTTP:
    liczbowe id albo podpisany token (sub = id klienta).
    Sesje i hasla obsluguje zewnetrzny framework uwierzytelniania.
    """

    def __init__(self, db: Session, secret_key: str | None = None, algorithm: str | None = None):
        self.repo = CustomerRepo(db)
        self.secret_key = secret_key or IDENTITY_SECRET_KEY
        self.algorithm = algorithm or IDENTITY_ALGORITHM

    def resolve(self, identifier: int | str) -> CustomerModel:
        customer_id = self._customer_id(identifier)
        customer = self.repo.get_customer(customer_id)

        if customer is None or not customer.active:
            raise CustomerNotFound(customer_id)
        return customer

    def issue_token(self, customer_id: int) -> str:
        customer = self.resolve(customer_id)
        now = datetime.now(timezone.utc)
        payload = {
            "sub": str(customer.id),
            "iat": now,
            "exp": now + timedelta(seconds=IDENTITY_TOKEN_TTL_SECONDS),
        }
        logger.info(f"Issued token for customer {customer.id}")
        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)

    def _customer_id(self, identifier: int | str) -> int:
        if isinstance(identifier, bool):
            raise CustomerNotFound(identifier)
        if isinstance(identifier, int):
            return identifier

        text = str(identifier).strip()
        try:
            # liczba (takze ujemna) to id, nigdy token
            return int(text)
        except ValueError:
            pass

        try:
            payload = jwt.decode(text, self.secret_key, algorithms=[self.algorithm])
        except jwt.ExpiredSignatureError:
            raise InvalidToken("Token expired.")
        except jwt.PyJWTError:
            raise InvalidToken()

        sub = payload.get("sub")
        if sub is None or not str(sub).isdigit():
            raise InvalidToken()
        return int(sub)
