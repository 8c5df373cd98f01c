from decimal import Decimal

from stocksales.core.config import settings
from stocksales.schemas.inventory import ReportOut

PAGE_WIDTH = 595
PAGE_HEIGHT = 842
LEFT_MARGIN = 50
TOP_Y = 800
BOTTOM_MARGIN = 60
LINE_HEIGHT = 14
PAGE_CAPACITY = (TOP_Y - BOTTOM_MARGIN) // LINE_HEIGHT + 1
MAX_LINE_CHARS = 90
TITLE_FONT_SIZE = 16
BODY_FONT_SIZE = 10


def _money(value: Decimal) -> str:
    return f"{Decimal(value):.2f}"


def report_lines(report: ReportOut) -> list[str]:
    lines = [
        "Sales Report",
        f"Period: {report.start_date:%Y-%m-%d %H:%M:%S} to {report.end_date:%Y-%m-%d %H:%M:%S}",
        "",
        f"Total Revenue: {_money(report.total_revenue)}",
        f"Total Items Sold: {report.total_items_sold}",
        f"Total Profit: {_money(report.total_profit)}",
        f"Total Sales: {report.total_sales}",
        "",
    ]
    if not report.sales_details:
        lines.append("No sales recorded in this period.")
    for detail in report.sales_details:
        lines.extend(
            [
                f"Sale #{detail.sale_id}: {detail.product_name}",
                f"  Quantity: {detail.quantity}",
                f"  Buying Price: {_money(detail.buying_price)}",
                f"  Sales Price: {_money(detail.sales_price)}",
                f"  Total Price: {_money(detail.total_price)}",
                f"  Profit: {_money(detail.profit)}",
                f"  Date: {detail.sale_date:%Y-%m-%d %H:%M:%S}",
                "",
            ]
        )
    return lines


def _paginate(lines: list[str], lines_per_page: int) -> list[list[str]]:
    lines_per_page = max(1, min(lines_per_page, PAGE_CAPACITY))
    pages = [lines[i : i + lines_per_page] for i in range(0, len(lines), lines_per_page)]
    return pages or [[]]


def _fit(text: str) -> str:
    if len(text) <= MAX_LINE_CHARS:
        return text
    return text[: MAX_LINE_CHARS - 3] + "..."


def _page_stream(lines: list[str], *, with_title: bool) -> bytes:
    def esc(text: str) -> str:
        return text.replace("\\", "\\\\").replace("(", "\\(").replace(")", "\\)")

    content_lines = ["BT"]
    y = TOP_Y
    for index, line in enumerate(lines):
        size = TITLE_FONT_SIZE if with_title and index == 0 else BODY_FONT_SIZE
        content_lines.append(f"/F1 {size} Tf")
        content_lines.append(f"1 0 0 1 {LEFT_MARGIN} {y} Tm ({esc(_fit(line))}) Tj")
        y -= LINE_HEIGHT
    content_lines.append("ET")
    return "\n".join(content_lines).encode("latin-1", errors="replace")


def simple_pdf(lines: list[str], lines_per_page: int | None = None) -> bytes:
    """Lay ``lines`` out top to bottom on A4 pages, breaking pages on overflow.

    Object numbering: 1 catalog, 2 page tree, 3 font, then a page/contents
    pair per page.
    """
    per_page = lines_per_page or settings.pdf_lines_per_page
    pages = _paginate(lines, per_page)

    page_refs = " ".join(f"{4 + 2 * i} 0 R" for i in range(len(pages)))
    objects: list[bytes] = [
        b"<< /Type /Catalog /Pages 2 0 R >>",
        f"<< /Type /Pages /Kids [{page_refs}] /Count {len(pages)} >>".encode("ascii"),
        b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica /Encoding /WinAnsiEncoding >>",
    ]
    for i, page_lines in enumerate(pages):
        stream = _page_stream(page_lines, with_title=i == 0)
        objects.append(
            f"<< /Type /Page /Parent 2 0 R /MediaBox [0 0 {PAGE_WIDTH} {PAGE_HEIGHT}] "
            f"/Contents {5 + 2 * i} 0 R /Resources << /Font << /F1 3 0 R >> >> >>".encode("ascii")
        )
        objects.append(
            f"<< /Length {len(stream)} >>\nstream\n".encode("ascii")
            + stream
            + b"\nendstream"
        )

    out = bytearray(b"%PDF-1.4\n")
    xref_positions = [0]
    for i, obj in enumerate(objects, start=1):
        xref_positions.append(len(out))
        out.extend(f"{i} 0 obj\n".encode("ascii"))
        out.extend(obj)
        out.extend(b"\nendobj\n")
    xref_start = len(out)
    out.extend(f"xref\n0 {len(objects)+1}\n".encode("ascii"))
    out.extend(b"0000000000 65535 f \n")
    for pos in xref_positions[1:]:
        out.extend(f"{pos:010d} 00000 n \n".encode("ascii"))
    out.extend(
        f"trailer\n<< /Size {len(objects)+1} /Root 1 0 R >>\nstartxref\n{xref_start}\n%%EOF\n".encode(
            "ascii"
        )
    )
    return bytes(out)


def render_report_pdf(report: ReportOut, lines_per_page: int | None = None) -> bytes:
    return simple_pdf(report_lines(report), lines_per_page=lines_per_page)


def report_filename(report: ReportOut) -> str:
    return f"sales-report_{report.start_date:%Y-%m-%d}_{report.end_date:%Y-%m-%d}.pdf"
