from stocksales.models.inventory import Product, Sale

__all__ = [
    "Product",
    "Sale",
]
