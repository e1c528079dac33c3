"""SQLAlchemy model for product records."""

from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, Integer, Numeric, String
from sqlalchemy.types import DateTime

from inventory.db.base import Base

DEFAULT_BRAND = "Unknown"
BRAND_MAX_LENGTH = 50
NAME_MAX_LENGTH = 150


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True)
    brand = Column(String(BRAND_MAX_LENGTH), default=DEFAULT_BRAND)
    name = Column(String(NAME_MAX_LENGTH), nullable=False)
    price = Column(Numeric(18, 2), nullable=False)
    stock_quantity = Column(Integer, nullable=False)
    is_active = Column(Boolean, nullable=False, default=True, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    def __repr__(self) -> str:
        return f"<Product id={self.id} name={self.name!r} active={self.is_active}>"
