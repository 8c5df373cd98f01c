import logging
from collections.abc import Iterator
from contextlib import AbstractContextManager, contextmanager
from datetime import datetime
from typing import Protocol

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from stocksales.core.errors import PersistenceError
from stocksales.models.inventory import Product, Sale, utcnow

logger = logging.getLogger(__name__)


class InventoryRepository(Protocol):
    """Storage operations the product, sale and report services rely on."""

    def atomic(self, failure_message: str = ...) -> AbstractContextManager[None]: ...

    def reading(self, failure_message: str = ...) -> AbstractContextManager[None]: ...

    def add(self, record: Product | Sale) -> None: ...

    def refresh(self, record: Product | Sale) -> None: ...

    def get_product(self, product_id: int) -> Product | None: ...

    def list_products(self) -> list[Product]: ...

    def delete_product(self, product: Product) -> None: ...

    def decrement_stock(self, product_id: int, quantity: int) -> bool: ...

    def list_sales(self) -> list[Sale]: ...

    def list_sales_between(self, start: datetime, end: datetime) -> list[Sale]: ...


class SqlInventoryRepository:
    def __init__(self, db: Session):
        self.db = db

    @contextmanager
    def atomic(self, failure_message: str = "Database operation failed") -> Iterator[None]:
        """Unit of work: commit everything done inside the block, or nothing.

        SQLAlchemy failures are rolled back and surface as ``PersistenceError``;
        any other exception is rolled back and re-raised unchanged.
        """
        try:
            yield
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception(failure_message)
            raise PersistenceError(failure_message) from exc
        except Exception:
            self.db.rollback()
            raise

    @contextmanager
    def reading(self, failure_message: str = "Database operation failed") -> Iterator[None]:
        """Like ``atomic`` for queries: translate store failures, commit nothing."""
        try:
            yield
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception(failure_message)
            raise PersistenceError(failure_message) from exc

    def add(self, record: Product | Sale) -> None:
        self.db.add(record)

    def refresh(self, record: Product | Sale) -> None:
        self.db.refresh(record)

    def get_product(self, product_id: int) -> Product | None:
        return self.db.get(Product, product_id)

    def list_products(self) -> list[Product]:
        return list(self.db.scalars(select(Product).order_by(Product.id.asc())).all())

    def delete_product(self, product: Product) -> None:
        self.db.delete(product)

    def decrement_stock(self, product_id: int, quantity: int) -> bool:
        # Check and decrement in one statement so concurrent sales cannot both
        # pass the stock check.
        result = self.db.execute(
            update(Product)
            .where(Product.id == product_id, Product.quantity >= quantity)
            .values(quantity=Product.quantity - quantity, updated_at=utcnow())
        )
        return result.rowcount == 1

    def list_sales(self) -> list[Sale]:
        query = select(Sale).options(joinedload(Sale.product)).order_by(Sale.sale_date.asc(), Sale.id.asc())
        return list(self.db.scalars(query).all())

    def list_sales_between(self, start: datetime, end: datetime) -> list[Sale]:
        query = (
            select(Sale)
            .options(joinedload(Sale.product))
            .where(Sale.sale_date >= start, Sale.sale_date <= end)
            .order_by(Sale.sale_date.asc(), Sale.id.asc())
        )
        return list(self.db.scalars(query).all())
