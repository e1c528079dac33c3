"""Database session and service dependencies."""

from collections.abc import Generator

from fastapi import Depends
from sqlalchemy.orm import Session

from inventory.core.config import get_settings
from inventory.db.session import get_db
from inventory.services.product_service import ProductService


def get_session() -> Generator[Session, None, None]:
    """FastAPI dependency that yields a managed SQLAlchemy session."""
    yield from get_db()


def get_product_service(db: Session = Depends(get_session)) -> ProductService:
    """Build a ProductService bound to the request's session."""
    settings = get_settings()
    return ProductService(db, default_page_size=settings.default_page_size)
