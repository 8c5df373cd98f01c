from fastapi import APIRouter, Depends, Query, Response

from stocksales.api.deps import get_repository
from stocksales.repositories import InventoryRepository
from stocksales.schemas.inventory import ReportOut
from stocksales.services.report_pdf import render_report_pdf, report_filename
from stocksales.services.reports import generate_report

router = APIRouter(tags=["Reports"])


@router.get("/reports", response_model=ReportOut)
def sales_report(
    start_date: str | None = Query(default=None, alias="startDate"),
    end_date: str | None = Query(default=None, alias="endDate"),
    repo: InventoryRepository = Depends(get_repository),
):
    return generate_report(repo, start_date, end_date)


@router.get("/download-report")
def download_sales_report(
    start_date: str | None = Query(default=None, alias="startDate"),
    end_date: str | None = Query(default=None, alias="endDate"),
    repo: InventoryRepository = Depends(get_repository),
):
    report = generate_report(repo, start_date, end_date)
    return Response(
        content=render_report_pdf(report),
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{report_filename(report)}"'},
    )
