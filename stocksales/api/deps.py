from fastapi import Depends
from sqlalchemy.orm import Session

from stocksales.db.database import get_db
from stocksales.repositories import InventoryRepository, SqlInventoryRepository


def get_repository(db: Session = Depends(get_db)) -> InventoryRepository:
    return SqlInventoryRepository(db)
