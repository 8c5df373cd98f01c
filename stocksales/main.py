import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from stocksales.api.routes.products import router as products_router
from stocksales.api.routes.reports import router as reports_router
from stocksales.api.routes.sales import router as sales_router
from stocksales.core.config import settings
from stocksales.core.errors import (
    InventoryError,
    generic_exception_handler,
    inventory_error_handler,
    request_validation_handler,
)
from stocksales.db.database import init_db

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI):
    if settings.auto_create_schema:
        init_db()
        logger.info("Database schema synced")
    yield


app = FastAPI(title=settings.app_name, lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.cors_origins),
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_exception_handler(InventoryError, inventory_error_handler)
app.add_exception_handler(RequestValidationError, request_validation_handler)
app.add_exception_handler(Exception, generic_exception_handler)

app.include_router(products_router)
app.include_router(sales_router)
app.include_router(reports_router)


@app.get("/", response_class=PlainTextResponse, tags=["System"])
def home():
    return "Welcome to Inventory and Sales Management App"


@app.get("/health", tags=["System"])
def health_check():
    return {"status": "ok"}
