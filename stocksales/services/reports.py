import logging
import re
from collections.abc import Iterable, Mapping
from datetime import date, datetime, time, timezone
from decimal import Decimal

from stocksales.core.errors import ValidationError
from stocksales.models.inventory import Product, Sale
from stocksales.repositories import InventoryRepository
from stocksales.schemas.inventory import ReportOut, SaleDetailOut

logger = logging.getLogger(__name__)

_DATE_ONLY = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def sale_profit(sales_price: Decimal, buying_price: Decimal, quantity: int) -> Decimal:
    return (Decimal(sales_price) - Decimal(buying_price)) * quantity


def _parse_boundary(raw: str | None, field_name: str, *, end_of_day: bool) -> datetime:
    if raw is None or not raw.strip():
        raise ValidationError("startDate and endDate are required")
    value = raw.strip()
    try:
        if _DATE_ONLY.match(value):
            # A bare date covers the whole day on the closing side of the range.
            return datetime.combine(date.fromisoformat(value), time.max if end_of_day else time.min)
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        if parsed.tzinfo is not None:
            parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    except (ValueError, OverflowError) as exc:
        raise ValidationError(f"{field_name} must be a valid ISO 8601 date") from exc
    return parsed


def parse_report_range(start_raw: str | None, end_raw: str | None) -> tuple[datetime, datetime]:
    """Validate the ``startDate``/``endDate`` pair of a report request.

    Both values are required ISO 8601 dates or datetimes. Aware datetimes are
    normalised to naive UTC, which is how sale dates are stored.
    """
    start = _parse_boundary(start_raw, "startDate", end_of_day=False)
    end = _parse_boundary(end_raw, "endDate", end_of_day=True)
    if start > end:
        raise ValidationError("startDate must not be after endDate")
    return start, end


def build_report(
    sales: Iterable[Sale],
    products_by_id: Mapping[int, Product],
    start: datetime,
    end: datetime,
) -> ReportOut:
    """Aggregate revenue, items sold and profit over ``sales``.

    Pure function: no storage access. Sales are expected to be already
    filtered to ``[start, end]``; their product supplies the buying price.
    """
    total_revenue = Decimal("0")
    total_profit = Decimal("0")
    total_items_sold = 0
    details: list[SaleDetailOut] = []

    for sale in sales:
        product = products_by_id.get(sale.product_id)
        if product is None:
            logger.warning(f"Sale {sale.id} references missing product {sale.product_id}; skipped")
            continue
        profit = sale_profit(sale.sales_price, product.price, sale.quantity)
        total_revenue += Decimal(sale.total_price)
        total_items_sold += sale.quantity
        total_profit += profit
        details.append(
            SaleDetailOut(
                sale_id=sale.id,
                product_name=product.name,
                quantity=sale.quantity,
                buying_price=Decimal(product.price),
                sales_price=Decimal(sale.sales_price),
                total_price=Decimal(sale.total_price),
                profit=profit,
                sale_date=sale.sale_date,
            )
        )

    details.sort(key=lambda item: (item.sale_date, item.sale_id))
    return ReportOut(
        start_date=start,
        end_date=end,
        total_revenue=total_revenue,
        total_items_sold=total_items_sold,
        total_profit=total_profit,
        total_sales=len(details),
        sales_details=details,
    )


def generate_report(repo: InventoryRepository, start_raw: str | None, end_raw: str | None) -> ReportOut:
    start, end = parse_report_range(start_raw, end_raw)
    with repo.reading("Error fetching sales"):
        sales = repo.list_sales_between(start, end)
    products_by_id = {sale.product.id: sale.product for sale in sales}
    report = build_report(sales, products_by_id, start, end)
    logger.info(f"Built report for {start.isoformat()} - {end.isoformat()}: {report.total_sales} sales")
    return report
