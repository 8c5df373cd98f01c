import logging

from stocksales.core.errors import NotFoundError
from stocksales.models.inventory import Product
from stocksales.repositories import InventoryRepository
from stocksales.schemas.inventory import ProductCreate, ProductUpdate

logger = logging.getLogger(__name__)


def create_product(repo: InventoryRepository, payload: ProductCreate) -> Product:
    product = Product(name=payload.name, price=payload.price, quantity=payload.quantity)
    with repo.atomic("Error creating product"):
        repo.add(product)
    repo.refresh(product)
    logger.info(f"Created product {product.id} ({product.name}) with stock {product.quantity}")
    return product


def list_products(repo: InventoryRepository) -> list[Product]:
    with repo.reading("Error fetching products"):
        return repo.list_products()


def get_product(repo: InventoryRepository, product_id: int) -> Product:
    with repo.reading("Error fetching product"):
        product = repo.get_product(product_id)
    if not product:
        raise NotFoundError("Product not found")
    return product


def update_product(repo: InventoryRepository, product_id: int, payload: ProductUpdate) -> Product:
    product = get_product(repo, product_id)
    with repo.atomic("Error updating product"):
        product.name = payload.name
        product.price = payload.price
        product.quantity = payload.quantity
    repo.refresh(product)
    return product


def delete_product(repo: InventoryRepository, product_id: int) -> None:
    product = get_product(repo, product_id)
    with repo.atomic("Error deleting product"):
        repo.delete_product(product)
    logger.info(f"Deleted product {product_id} and its sales")
