"""Pydantic models describing Product payloads and operation results."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field, field_serializer, field_validator
from pydantic.alias_generators import to_camel

from inventory.db.models.product import BRAND_MAX_LENGTH, DEFAULT_BRAND


class CamelModel(BaseModel):
    """Base for wire models: snake_case attributes, camelCase JSON keys."""

    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
        "from_attributes": True,
    }


INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1
CENTS = Decimal("0.01")


def _require_non_blank(value: str) -> str:
    if not value.strip():
        raise ValueError("must not be blank")
    return value


class BulkProductItem(CamelModel):
    """One row of a bulk insert. Bulk rows always get the default brand."""

    name: str = Field(..., min_length=1, max_length=100)
    price: Decimal
    stock_quantity: int = Field(..., ge=INT32_MIN, le=INT32_MAX)

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        return _require_non_blank(v)


class ProductCreate(BulkProductItem):
    """Schema for UI-created product rows."""

    brand: str = Field(DEFAULT_BRAND, max_length=BRAND_MAX_LENGTH)


class ProductUpdate(CamelModel):
    """Full replacement of the mutable product fields."""

    name: str = Field(..., min_length=1, max_length=100)
    price: Decimal
    stock_quantity: int = Field(..., ge=INT32_MIN, le=INT32_MAX)
    is_active: bool

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        return _require_non_blank(v)


class ProductRead(CamelModel):
    id: int
    brand: str | None = None
    name: str
    price: Decimal
    stock_quantity: int
    is_active: bool
    created_at: datetime | None = None

    @field_serializer("price", when_used="json")
    def serialize_price(self, value: Decimal) -> str:
        # Exact fixed-point text, a float would drop cents on large amounts
        return f"{value.quantize(CENTS):f}"


class ProductPage(CamelModel):
    """Pagination envelope for the active product listing."""

    total_count: int
    page: int
    page_size: int
    total_pages: int
    items: list[ProductRead]


class BulkCreateResult(CamelModel):
    count: int
    message: str


class LowStockItem(CamelModel):
    id: int
    name: str
    stock_quantity: int
    status: str = Field(..., description="out of stock|low stock")
    reorder_urgency: str = Field(..., description="high|medium")


class LowStockAlert(CamelModel):
    alert_count: int
    threshold_used: int
    products: list[LowStockItem]
    timestamp: datetime


class PriceIncreaseResult(CamelModel):
    affected_rows: int
    message: str
    brand_targeted: str
    increase_percentage: str


class BrandFixResult(CamelModel):
    updated: int
    message: str
