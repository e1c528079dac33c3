"""Business rules for the product inventory."""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence
from decimal import Decimal

from sqlalchemy import func, or_, select, update
from sqlalchemy.orm import Session

from inventory.api.schemas.product import (
    BrandFixResult,
    BulkCreateResult,
    BulkProductItem,
    LowStockAlert,
    LowStockItem,
    PriceIncreaseResult,
    ProductCreate,
    ProductPage,
    ProductRead,
    ProductUpdate,
)
from inventory.db.models.product import (
    BRAND_MAX_LENGTH,
    DEFAULT_BRAND,
    Product,
    utcnow,
)
from inventory.services.errors import NotFoundError, ValidationError

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 10
DEFAULT_LOW_STOCK_THRESHOLD = 5
DEFAULT_PRICE_INCREASE = Decimal(5)


def infer_brand(name: str | None) -> str | None:
    """Return the first whitespace-delimited token of a product name.

    "Samsung Galaxy A54" -> "Samsung". Returns None for blank names.
    """
    tokens = (name or "").split()
    if not tokens:
        return None
    return tokens[0][:BRAND_MAX_LENGTH]


def stock_status(stock_quantity: int) -> str:
    return "out of stock" if stock_quantity == 0 else "low stock"


def reorder_urgency(stock_quantity: int, threshold: int) -> str:
    # Half the threshold, truncated toward zero like integer division
    half = int(threshold / 2)
    return "high" if stock_quantity <= half else "medium"


def format_percentage(percentage: Decimal) -> str:
    return f"{Decimal(percentage).normalize():f}%"


class ProductService:
    """Mediate all product reads and writes against a SQLAlchemy session.

    The session is the only state. Every write operation commits exactly once,
    so each call is a single unit of work at the store boundary.
    """

    def __init__(self, db: Session, *, default_page_size: int = DEFAULT_PAGE_SIZE):
        self.db = db
        self.default_page_size = default_page_size

    def create_product(self, payload: ProductCreate) -> Product:
        product = Product(
            brand=payload.brand or DEFAULT_BRAND,
            name=payload.name,
            price=payload.price,
            stock_quantity=payload.stock_quantity,
            is_active=True,
            created_at=utcnow(),
        )
        self.db.add(product)
        self.db.commit()
        self.db.refresh(product)

        logger.info(f"Created product {product.id} ({product.name!r})")
        return product

    def bulk_create_products(
        self, payloads: Sequence[BulkProductItem] | None
    ) -> BulkCreateResult:
        """Insert every payload in one batch sharing a single commit.

        Bulk rows are stamped with the default brand.
        """
        if not payloads:
            raise ValidationError("The product list is empty.")

        created_at = utcnow()
        products = [
            Product(
                brand=DEFAULT_BRAND,
                name=payload.name,
                price=payload.price,
                stock_quantity=payload.stock_quantity,
                is_active=True,
                created_at=created_at,
            )
            for payload in payloads
        ]
        self.db.add_all(products)
        self.db.commit()

        logger.info(f"Bulk created {len(products)} products")
        return BulkCreateResult(
            count=len(products),
            message=f"{len(products)} products added successfully!",
        )

    def list_active_products(
        self, page_number: int = 1, page_size: int | None = None
    ) -> ProductPage:
        """Return one page of active products ordered by id.

        Out of range paging arguments are coerced rather than rejected.
        """
        if page_number < 1:
            page_number = 1
        if page_size is None or page_size < 1:
            page_size = self.default_page_size

        total = (
            self.db.scalar(
                select(func.count(Product.id)).where(Product.is_active.is_(True))
            )
            or 0
        )

        offset = (page_number - 1) * page_size
        query = (
            select(Product)
            .where(Product.is_active.is_(True))
            .order_by(Product.id.asc())
            .offset(offset)
            .limit(page_size)
        )
        products = self.db.scalars(query).all()

        return ProductPage(
            total_count=total,
            page=page_number,
            page_size=page_size,
            total_pages=math.ceil(total / page_size),
            items=[ProductRead.model_validate(p) for p in products],
        )

    def get_product_by_id(self, product_id: int) -> Product:
        """Fetch an active product; inactive and missing ids look the same."""
        product = self.db.get(Product, product_id)
        if product is None or not product.is_active:
            logger.warning(f"Active product {product_id} not found")
            raise NotFoundError(f"Product {product_id} not found")
        return product

    def _get_any(self, product_id: int) -> Product:
        product = self.db.get(Product, product_id)
        if product is None:
            logger.warning(f"Product {product_id} not found")
            raise NotFoundError(f"Product {product_id} not found")
        return product

    def update_product(self, product_id: int, payload: ProductUpdate) -> Product:
        """Overwrite name, price, stock and active flag regardless of current state."""
        product = self._get_any(product_id)

        product.name = payload.name
        product.price = payload.price
        product.stock_quantity = payload.stock_quantity
        product.is_active = payload.is_active

        self.db.commit()
        self.db.refresh(product)

        logger.info(f"Updated product {product_id}")
        return product

    def delete_product(self, product_id: int) -> None:
        """Soft delete: flip is_active off, the row is kept."""
        product = self._get_any(product_id)

        product.is_active = False
        self.db.commit()

        logger.info(f"Soft deleted product {product_id}")

    def get_low_stock_alert(
        self, threshold: int = DEFAULT_LOW_STOCK_THRESHOLD
    ) -> LowStockAlert:
        query = (
            select(Product)
            .where(Product.is_active.is_(True), Product.stock_quantity <= threshold)
            .order_by(Product.id.asc())
        )
        items = [
            LowStockItem(
                id=p.id,
                name=p.name,
                stock_quantity=p.stock_quantity,
                status=stock_status(p.stock_quantity),
                reorder_urgency=reorder_urgency(p.stock_quantity, threshold),
            )
            for p in self.db.scalars(query)
        ]

        return LowStockAlert(
            alert_count=len(items),
            threshold_used=threshold,
            products=items,
            timestamp=utcnow(),
        )

    def increase_price_by_brand(
        self, brand: str | None, percentage: Decimal = DEFAULT_PRICE_INCREASE
    ) -> PriceIncreaseResult:
        """Multiply the price of active products whose name contains ``brand``.

        Runs as one set-based UPDATE so the whole match set changes atomically.
        """
        if brand is None or not brand.strip():
            raise ValidationError("Brand name is required.")

        multiplier = Decimal(1) + Decimal(percentage) / Decimal(100)
        stmt = (
            update(Product)
            .where(
                Product.name.contains(brand, autoescape=True),
                Product.is_active.is_(True),
            )
            .values(price=func.round(Product.price * multiplier, 2))
            .execution_options(synchronize_session=False)
        )
        result = self.db.execute(stmt)
        self.db.commit()
        # In-memory instances may hold stale prices after a bulk UPDATE
        self.db.expire_all()

        affected = result.rowcount or 0
        if affected == 0:
            logger.warning(f"No active products matched brand {brand!r}")
            raise NotFoundError(
                f"No active products found containing the brand name '{brand}'."
            )

        logger.info(
            f"Increased price by {percentage}% for {affected} products matching {brand!r}"
        )
        return PriceIncreaseResult(
            affected_rows=affected,
            message=f"Successfully updated {affected} products.",
            brand_targeted=brand,
            increase_percentage=format_percentage(percentage),
        )

    def auto_fix_brands(self) -> BrandFixResult:
        """Backfill missing or "Unknown" brands from the first word of the name."""
        products = self.db.scalars(
            select(Product)
            .where(
                or_(
                    Product.brand.is_(None),
                    Product.brand == "",
                    Product.brand == DEFAULT_BRAND,
                )
            )
            .order_by(Product.id.asc())
        ).all()

        if not products:
            return BrandFixResult(
                updated=0, message="No products found that need a brand update."
            )

        updated = 0
        for product in products:
            brand = infer_brand(product.name)
            if brand is None:
                continue
            product.brand = brand
            updated += 1

        self.db.commit()

        logger.info(f"Auto-fixed brands for {updated} of {len(products)} products")
        return BrandFixResult(
            updated=updated,
            message=f"Successfully updated brands for {updated} products.",
        )
