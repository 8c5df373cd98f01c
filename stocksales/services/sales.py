import logging
from datetime import datetime
from decimal import Decimal, InvalidOperation

from stocksales.core.errors import InsufficientStockError, NotFoundError, ValidationError
from stocksales.models.inventory import Sale, utcnow
from stocksales.repositories import InventoryRepository
from stocksales.services.reports import sale_profit

logger = logging.getLogger(__name__)


def _validate_sale_input(quantity: int, sales_price: Decimal | int | float | str) -> Decimal:
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
        raise ValidationError("Quantity must be a positive integer")
    try:
        price = Decimal(str(sales_price))
    except (InvalidOperation, ValueError) as exc:
        raise ValidationError("Sales price must be a non-negative number") from exc
    if not price.is_finite() or price < 0:
        raise ValidationError("Sales price must be a non-negative number")
    if price.as_tuple().exponent < -2:
        raise ValidationError("Sales price must have at most two decimal places")
    return price


def record_sale(
    repo: InventoryRepository,
    product_id: int,
    quantity: int,
    sales_price: Decimal | int | float | str,
    sold_at: datetime | None = None,
) -> Sale:
    """Record a sale and take its quantity out of the product's stock.

    The stock decrement and the sale insert run in one unit of work; the
    decrement is conditional on enough stock remaining, so a sale never
    drives stock below zero even when requests race.
    """
    price = _validate_sale_input(quantity, sales_price)

    with repo.reading("Error fetching product"):
        product = repo.get_product(product_id)
    if not product:
        raise NotFoundError("Product not found")
    if product.quantity < quantity:
        logger.warning(f"Rejected sale of {quantity} x product {product_id}: only {product.quantity} in stock")
        raise InsufficientStockError("Insufficient stock")

    sale = Sale(
        product_id=product.id,
        quantity=quantity,
        sales_price=price,
        total_price=price * quantity,
        sale_date=sold_at or utcnow(),
    )
    with repo.atomic("Error recording sale"):
        if not repo.decrement_stock(product.id, quantity):
            logger.warning(f"Rejected sale of {quantity} x product {product_id}: stock changed concurrently")
            raise InsufficientStockError("Insufficient stock")
        repo.add(sale)
    repo.refresh(sale)
    logger.info(f"Recorded sale {sale.id}: {quantity} x product {product_id}, total {sale.total_price}")
    return sale


def list_sales_with_profit(repo: InventoryRepository) -> list[dict]:
    with repo.reading("Error fetching sales"):
        sales = repo.list_sales()
    items = []
    for sale in sales:
        items.append(
            {
                "id": sale.id,
                "product_id": sale.product_id,
                "product_name": sale.product.name,
                "quantity": sale.quantity,
                "buying_price": sale.product.price,
                "sales_price": sale.sales_price,
                "total_price": sale.total_price,
                "profit": sale_profit(sale.sales_price, sale.product.price, sale.quantity),
                "sale_date": sale.sale_date,
            }
        )
    return items
