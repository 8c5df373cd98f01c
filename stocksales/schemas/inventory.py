from datetime import datetime
from decimal import Decimal
from typing import Annotated

from pydantic import BaseModel, Field, PlainSerializer
from pydantic.alias_generators import to_camel

Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


class CamelModel(BaseModel):
    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
        "from_attributes": True,
        "str_strip_whitespace": True,
    }


class MessageOut(CamelModel):
    message: str


class ProductCreate(CamelModel):
    name: str = Field(min_length=1, max_length=160)
    price: Decimal = Field(ge=0, max_digits=12, decimal_places=2)
    quantity: int = Field(ge=0)


class ProductUpdate(CamelModel):
    name: str = Field(min_length=1, max_length=160)
    price: Decimal = Field(ge=0, max_digits=12, decimal_places=2)
    quantity: int = Field(ge=0)


class ProductOut(CamelModel):
    id: int
    name: str
    price: Money
    quantity: int
    created_at: datetime
    updated_at: datetime


class SaleCreateRequest(CamelModel):
    product_id: int
    quantity: int = Field(gt=0)
    sales_price: Decimal = Field(ge=0, max_digits=12, decimal_places=2)


class SaleOut(CamelModel):
    id: int
    product_id: int
    quantity: int
    sales_price: Money
    total_price: Money
    sale_date: datetime


class SaleCreatedOut(CamelModel):
    message: str
    sale: SaleOut


class SaleWithProfitOut(SaleOut):
    product_name: str
    buying_price: Money
    profit: Money


class SaleDetailOut(CamelModel):
    sale_id: int
    product_name: str
    quantity: int
    buying_price: Money
    sales_price: Money
    total_price: Money
    profit: Money
    sale_date: datetime


class ReportOut(CamelModel):
    start_date: datetime
    end_date: datetime
    total_revenue: Money
    total_items_sold: int
    total_profit: Money
    total_sales: int
    sales_details: list[SaleDetailOut]
