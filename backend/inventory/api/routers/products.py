"""CRUD, paging and bulk endpoints for the product inventory."""

from __future__ import annotations

import logging
from decimal import Decimal

from fastapi import APIRouter, Body, Depends, HTTPException, Path, Query, Response, status
from sqlalchemy.exc import SQLAlchemyError

from inventory.api.dependencies.db import get_product_service
from inventory.api.schemas.product import (
    BrandFixResult,
    BulkCreateResult,
    BulkProductItem,
    INT32_MAX,
    INT32_MIN,
    LowStockAlert,
    PriceIncreaseResult,
    ProductCreate,
    ProductPage,
    ProductRead,
    ProductUpdate,
)
from inventory.core.config import get_settings
from inventory.services.errors import NotFoundError, ValidationError
from inventory.services.product_service import ProductService

logger = logging.getLogger(__name__)

router = APIRouter()


def _server_error(
    service: ProductService, action: str, exc: Exception
) -> HTTPException:
    """Roll back, log and build the 500 response for an unhandled failure."""
    service.db.rollback()
    if isinstance(exc, SQLAlchemyError):
        logger.error(f"Database error while trying to {action}: {exc}", exc_info=True)
        return HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to {action}",
        )
    logger.error(f"Unexpected error while trying to {action}: {exc}", exc_info=True)
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="An unexpected error occurred",
    )


@router.post(
    "",
    summary="Create a product",
    response_model=ProductRead,
)
async def create_product(
    payload: ProductCreate,
    service: ProductService = Depends(get_product_service),
) -> ProductRead:
    """Persist one product. Brand defaults to "Unknown" when omitted."""
    try:
        product = service.create_product(payload)
        return ProductRead.model_validate(product)
    except Exception as e:
        raise _server_error(service, "create product", e) from e


@router.post(
    "/bulk-create",
    summary="Create many products in one batch",
    response_model=BulkCreateResult,
)
async def bulk_create_products(
    payloads: list[BulkProductItem] | None = Body(None),
    service: ProductService = Depends(get_product_service),
) -> BulkCreateResult:
    """Insert every product in the body with a single commit."""
    try:
        return service.bulk_create_products(payloads)
    except ValidationError as e:
        logger.warning(f"Rejected bulk create: {e.message}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=e.message
        ) from e
    except Exception as e:
        raise _server_error(service, "create products", e) from e


@router.get(
    "",
    summary="List active products with pagination",
    response_model=ProductPage,
)
async def list_products(
    page_number: int = Query(
        1, alias="pageNumber", ge=INT32_MIN, le=INT32_MAX, description="1-indexed page"
    ),
    page_size: int | None = Query(
        None, alias="pageSize", ge=INT32_MIN, le=INT32_MAX, description="Items per page"
    ),
    service: ProductService = Depends(get_product_service),
) -> ProductPage:
    """Return active products ordered by id together with paging metadata.

    Page numbers below 1 fall back to the first page and page sizes below 1
    fall back to the configured default.
    """
    try:
        return service.list_active_products(page_number, page_size)
    except Exception as e:
        raise _server_error(service, "retrieve products", e) from e


@router.get(
    "/low-stock",
    summary="List active products at or below a stock threshold",
    response_model=LowStockAlert,
)
async def low_stock_alert(
    threshold: int | None = Query(
        None, ge=INT32_MIN, le=INT32_MAX, description="Alert threshold (inclusive)"
    ),
    service: ProductService = Depends(get_product_service),
) -> LowStockAlert:
    if threshold is None:
        threshold = get_settings().low_stock_threshold
    try:
        return service.get_low_stock_alert(threshold)
    except Exception as e:
        raise _server_error(service, "retrieve low stock products", e) from e


@router.post(
    "/increase-price-by-brand",
    summary="Raise prices of active products whose name contains a brand",
    response_model=PriceIncreaseResult,
)
async def increase_price_by_brand(
    brand: str | None = Query(None, description="Substring matched against name"),
    percentage: Decimal | None = Query(None, description="Increase in percent"),
    service: ProductService = Depends(get_product_service),
) -> PriceIncreaseResult:
    if percentage is None:
        percentage = Decimal(str(get_settings().default_price_increase))
    try:
        return service.increase_price_by_brand(brand, percentage)
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=e.message
        ) from e
    except NotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail=e.message
        ) from e
    except Exception as e:
        raise _server_error(service, "increase prices", e) from e


@router.post(
    "/auto-fix-brands",
    summary="Fill missing brands from the first word of the product name",
    response_model=BrandFixResult,
)
async def auto_fix_brands(
    service: ProductService = Depends(get_product_service),
) -> BrandFixResult:
    try:
        return service.auto_fix_brands()
    except Exception as e:
        raise _server_error(service, "fix brands", e) from e


@router.get(
    "/{product_id}",
    summary="Get an active product",
    response_model=ProductRead,
)
async def get_product(
    product_id: int = Path(..., ge=INT32_MIN, le=INT32_MAX),
    service: ProductService = Depends(get_product_service),
) -> ProductRead:
    """Soft-deleted products are reported as not found."""
    try:
        return ProductRead.model_validate(service.get_product_by_id(product_id))
    except NotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail=e.message
        ) from e
    except Exception as e:
        raise _server_error(service, f"retrieve product {product_id}", e) from e


@router.put(
    "/{product_id}",
    summary="Replace the mutable fields of a product",
    response_model=ProductRead,
)
async def update_product(
    payload: ProductUpdate,
    product_id: int = Path(..., ge=INT32_MIN, le=INT32_MAX),
    service: ProductService = Depends(get_product_service),
) -> ProductRead:
    """Full update. Setting isActive=true reactivates a deleted product."""
    try:
        product = service.update_product(product_id, payload)
        return ProductRead.model_validate(product)
    except NotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail=e.message
        ) from e
    except Exception as e:
        raise _server_error(service, f"update product {product_id}", e) from e


@router.delete(
    "/{product_id}",
    summary="Delete product (soft delete)",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def delete_product(
    product_id: int = Path(..., ge=INT32_MIN, le=INT32_MAX),
    service: ProductService = Depends(get_product_service),
) -> Response:
    """Mark the product inactive. The row stays in the database."""
    try:
        service.delete_product(product_id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    except NotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail=e.message
        ) from e
    except Exception as e:
        raise _server_error(service, f"delete product {product_id}", e) from e
