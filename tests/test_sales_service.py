from decimal import Decimal

import pytest
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from stocksales.core.errors import (
    InsufficientStockError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)
from stocksales.models import Product, Sale
from stocksales.services.products import get_product, list_products
from stocksales.services.reports import generate_report
from stocksales.services.sales import list_sales_with_profit, record_sale


def _sale_count(session) -> int:
    return len(session.scalars(select(Sale)).all())


class TestRecordSale:
    """Tests for recording a sale against product stock."""

    def test_sale_decrements_stock_and_computes_total(self, repo, session, widget):
        sale = record_sale(repo, widget.id, 3, 8)

        assert sale.id is not None
        assert sale.quantity == 3
        assert sale.sales_price == Decimal("8")
        assert sale.total_price == Decimal("24")
        assert sale.sale_date is not None
        assert session.get(Product, widget.id).quantity == 7

    def test_sale_exceeding_stock_is_rejected_without_mutation(self, repo, session, widget):
        record_sale(repo, widget.id, 3, 8)

        with pytest.raises(InsufficientStockError):
            record_sale(repo, widget.id, 8, 8)

        assert session.get(Product, widget.id).quantity == 7
        assert _sale_count(session) == 1

    def test_selling_entire_stock_leaves_zero(self, repo, session, widget):
        record_sale(repo, widget.id, 10, "7.50")

        product = session.get(Product, widget.id)
        assert product.quantity == 0
        with pytest.raises(InsufficientStockError):
            record_sale(repo, widget.id, 1, "7.50")

    def test_total_price_is_exact_for_fractional_prices(self, repo, widget):
        sale = record_sale(repo, widget.id, 3, Decimal("0.10"))
        assert sale.total_price == Decimal("0.30")

    def test_missing_product_raises_not_found(self, repo):
        with pytest.raises(NotFoundError):
            record_sale(repo, 999, 1, 5)

    @pytest.mark.parametrize("quantity", [0, -1, True, 1.5])
    def test_invalid_quantity_raises_validation_error(self, repo, widget, quantity):
        with pytest.raises(ValidationError):
            record_sale(repo, widget.id, quantity, 5)

    @pytest.mark.parametrize("price", [-1, "abc", "1.005", "NaN"])
    def test_invalid_sales_price_raises_validation_error(self, repo, widget, price):
        with pytest.raises(ValidationError):
            record_sale(repo, widget.id, 1, price)

    def test_failed_conditional_decrement_inserts_no_sale(self, repo, session, widget, monkeypatch):
        """Stock taken by a concurrent request between check and decrement."""
        monkeypatch.setattr(repo, "decrement_stock", lambda product_id, quantity: False)

        with pytest.raises(InsufficientStockError):
            record_sale(repo, widget.id, 2, 8)

        assert _sale_count(session) == 0

    def test_failed_sale_insert_rolls_back_stock_decrement(self, repo, session, widget, monkeypatch):
        def broken_add(record):
            raise SQLAlchemyError("insert failed")

        monkeypatch.setattr(repo, "add", broken_add)

        with pytest.raises(PersistenceError):
            record_sale(repo, widget.id, 4, 8)

        assert session.get(Product, widget.id).quantity == 10
        assert _sale_count(session) == 0


class TestDecrementStock:
    """Tests for the conditional stock decrement primitive."""

    def test_decrement_only_when_enough_stock(self, repo, session, widget):
        with repo.atomic():
            assert repo.decrement_stock(widget.id, 11) is False
            assert repo.decrement_stock(widget.id, 10) is True
            assert repo.decrement_stock(widget.id, 1) is False

        assert session.get(Product, widget.id).quantity == 0

    def test_decrement_unknown_product(self, repo):
        with repo.atomic():
            assert repo.decrement_stock(12345, 1) is False


class TestListSalesWithProfit:
    def test_profit_per_sale(self, repo, widget):
        record_sale(repo, widget.id, 3, 8)
        record_sale(repo, widget.id, 2, 12)

        items = list_sales_with_profit(repo)

        assert [item["profit"] for item in items] == [Decimal("9"), Decimal("14")]
        assert all(item["product_name"] == "Widget" for item in items)
        assert items[0]["buying_price"] == Decimal("5")


def _broken_query(*args, **kwargs):
    raise SQLAlchemyError("connection lost")


class TestReadFailures:
    """Store failures on reads surface as PersistenceError with a fixed message."""

    def test_list_products(self, repo, session, monkeypatch):
        monkeypatch.setattr(session, "scalars", _broken_query)

        with pytest.raises(PersistenceError) as excinfo:
            list_products(repo)

        assert excinfo.value.message == "Error fetching products"

    def test_get_product(self, repo, session, monkeypatch):
        monkeypatch.setattr(session, "get", _broken_query)

        with pytest.raises(PersistenceError) as excinfo:
            get_product(repo, 1)

        assert excinfo.value.message == "Error fetching product"

    def test_record_sale_lookup(self, repo, session, monkeypatch):
        monkeypatch.setattr(session, "get", _broken_query)

        with pytest.raises(PersistenceError):
            record_sale(repo, 1, 1, 5)

    def test_list_sales(self, repo, session, monkeypatch):
        monkeypatch.setattr(session, "scalars", _broken_query)

        with pytest.raises(PersistenceError) as excinfo:
            list_sales_with_profit(repo)

        assert excinfo.value.message == "Error fetching sales"

    def test_report_query(self, repo, session, monkeypatch):
        monkeypatch.setattr(session, "scalars", _broken_query)

        with pytest.raises(PersistenceError):
            generate_report(repo, "2024-01-01", "2024-01-31")
