import logging
from enum import Enum

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class ErrorType(Enum):
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    INSUFFICIENT_STOCK = "insufficient_stock"
    PERSISTENCE = "persistence"


# Map error types to HTTP status codes
ERROR_STATUS_MAP = {
    ErrorType.VALIDATION: 400,
    ErrorType.NOT_FOUND: 404,
    ErrorType.INSUFFICIENT_STOCK: 400,
    ErrorType.PERSISTENCE: 500,
}


class InventoryError(Exception):
    """Base class for errors the services raise and the API translates."""

    error_type = ErrorType.PERSISTENCE

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

    @property
    def status_code(self) -> int:
        return ERROR_STATUS_MAP.get(self.error_type, 500)


class ValidationError(InventoryError):
    error_type = ErrorType.VALIDATION


class NotFoundError(InventoryError):
    error_type = ErrorType.NOT_FOUND


class InsufficientStockError(InventoryError):
    error_type = ErrorType.INSUFFICIENT_STOCK


class PersistenceError(InventoryError):
    error_type = ErrorType.PERSISTENCE


async def inventory_error_handler(_request: Request, exc: InventoryError) -> JSONResponse:
    """Convert a domain error to its status code and an ``{"error": ...}`` body."""
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.warning(f"Invalid request to {request.url.path}: {exc.errors()}")
    return JSONResponse(status_code=400, content={"error": "Invalid request payload"})


async def generic_exception_handler(_request: Request, exc: Exception) -> JSONResponse:
    """Global handler for unhandled exceptions - returns 500."""
    logger.error("Unhandled exception", exc_info=exc)
    return JSONResponse(status_code=500, content={"error": "Internal server error"})
