from fastapi import APIRouter, Depends, status

from stocksales.api.deps import get_repository
from stocksales.repositories import InventoryRepository
from stocksales.schemas.inventory import SaleCreatedOut, SaleCreateRequest, SaleOut, SaleWithProfitOut
from stocksales.services import sales as sale_service

router = APIRouter(prefix="/sales", tags=["Sales"])


@router.post("", response_model=SaleCreatedOut, status_code=status.HTTP_201_CREATED)
def create_sale(payload: SaleCreateRequest, repo: InventoryRepository = Depends(get_repository)):
    sale = sale_service.record_sale(repo, payload.product_id, payload.quantity, payload.sales_price)
    return SaleCreatedOut(message="Sale recorded successfully", sale=SaleOut.model_validate(sale))


@router.get("", response_model=list[SaleWithProfitOut])
def list_sales(repo: InventoryRepository = Depends(get_repository)):
    return sale_service.list_sales_with_profit(repo)
