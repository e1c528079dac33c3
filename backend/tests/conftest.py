import os

# Configure an in-memory database before any application module is imported
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("AUTO_CREATE_TABLES", "false")

from collections.abc import Iterator
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from inventory.api.dependencies.db import get_session
from inventory.db.base import Base
from inventory.db.models.product import Product, utcnow
from inventory.db.session import SessionLocal, engine, init_db
from inventory.main import app
from inventory.services.product_service import ProductService


@pytest.fixture
def session() -> Iterator[Session]:
    init_db(engine)
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def service(session: Session) -> ProductService:
    return ProductService(session)


@pytest.fixture
def client(session: Session) -> Iterator[TestClient]:
    def _override() -> Iterator[Session]:
        yield session

    app.dependency_overrides[get_session] = _override
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def make_product(session: Session):
    """Insert a product row directly, bypassing request validation."""

    def _make(
        name: str = "Widget",
        price: str | Decimal = "10.00",
        stock_quantity: int = 10,
        brand: str = "Unknown",
        is_active: bool = True,
    ) -> Product:
        product = Product(
            name=name,
            price=Decimal(price),
            stock_quantity=stock_quantity,
            brand=brand,
            is_active=is_active,
            created_at=utcnow(),
        )
        session.add(product)
        session.commit()
        session.refresh(product)
        return product

    return _make
