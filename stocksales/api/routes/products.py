from fastapi import APIRouter, Depends, status

from stocksales.api.deps import get_repository
from stocksales.repositories import InventoryRepository
from stocksales.schemas.inventory import MessageOut, ProductCreate, ProductOut, ProductUpdate
from stocksales.services import products as product_service

router = APIRouter(prefix="/products", tags=["Products"])


@router.post("", response_model=ProductOut, status_code=status.HTTP_201_CREATED)
def create_product(payload: ProductCreate, repo: InventoryRepository = Depends(get_repository)):
    return product_service.create_product(repo, payload)


@router.get("", response_model=list[ProductOut])
def list_products(repo: InventoryRepository = Depends(get_repository)):
    return product_service.list_products(repo)


@router.get("/{product_id}", response_model=ProductOut)
def get_product(product_id: int, repo: InventoryRepository = Depends(get_repository)):
    return product_service.get_product(repo, product_id)


@router.put("/{product_id}", response_model=ProductOut)
def update_product(
    product_id: int,
    payload: ProductUpdate,
    repo: InventoryRepository = Depends(get_repository),
):
    return product_service.update_product(repo, product_id, payload)


@router.delete("/{product_id}", response_model=MessageOut)
def delete_product(product_id: int, repo: InventoryRepository = Depends(get_repository)):
    product_service.delete_product(repo, product_id)
    return MessageOut(message="Product deleted successfully")
