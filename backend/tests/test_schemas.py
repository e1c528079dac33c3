import json
from datetime import datetime, timezone
from decimal import Decimal

import pytest
from pydantic import ValidationError

from inventory.api.schemas.product import BulkProductItem, ProductCreate, ProductRead, ProductUpdate


def _read(price: str) -> ProductRead:
    return ProductRead(
        id=1,
        brand="Acme",
        name="Anvil",
        price=Decimal(price),
        stock_quantity=1,
        is_active=True,
        created_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
    )


@pytest.mark.parametrize(
    "price,expected",
    [
        ("1234567890123456.78", "1234567890123456.78"),
        ("9999999999999999.99", "9999999999999999.99"),
        ("110", "110.00"),
        ("0.5", "0.50"),
    ],
)
def test_price_keeps_every_digit_on_the_wire(price, expected):
    product = _read(price)
    payload = json.loads(product.model_dump_json(by_alias=True))

    assert payload["price"] == expected
    assert Decimal(payload["price"]) == Decimal(price)
    # Python-side dumps keep the Decimal
    assert product.model_dump()["price"] == Decimal(price)


@pytest.mark.parametrize("model", [ProductCreate, BulkProductItem])
@pytest.mark.parametrize("name", ["", " ", "\t\n"])
def test_blank_name_is_invalid(model, name):
    with pytest.raises(ValidationError):
        model(name=name, price=Decimal("1"), stock_quantity=1)


def test_update_rejects_blank_name_and_wide_stock():
    with pytest.raises(ValidationError):
        ProductUpdate(name="   ", price=Decimal("1"), stock_quantity=1, is_active=True)
    with pytest.raises(ValidationError):
        ProductUpdate(name="ok", price=Decimal("1"), stock_quantity=2**31, is_active=True)


def test_bulk_item_ignores_brand():
    item = BulkProductItem.model_validate(
        {"brand": "Sony", "name": "Sony WH-1000", "price": "1.00", "stockQuantity": 1}
    )
    assert not hasattr(item, "brand")
