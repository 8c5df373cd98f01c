from stocksales.repositories.inventory import InventoryRepository, SqlInventoryRepository

__all__ = [
    "InventoryRepository",
    "SqlInventoryRepository",
]
