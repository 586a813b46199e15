# ecommerce/services/product_service.py
import logging
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from .. import crud
from ..errors import BadRequestError
from ..models import Product
from ..schemas import (
    AdminProductOut,
    BulkDeleteOut,
    PaginatedOut,
    PaginationParams,
    ProductCreateIn,
    ProductOut,
    ProductUpdateIn,
    RestockIn,
)

logger = logging.getLogger(__name__)

LOW_STOCK_THRESHOLD = 10


def display_stock(stock: Optional[int]) -> str:
    """What a shopper sees: "In Stock", the remaining count, or "Out of Stock"."""
    if stock is None or stock <= 0:
        return "Out of Stock"
    if stock > LOW_STOCK_THRESHOLD:
        return "In Stock"
    return str(stock)


def to_product_out(product: Product) -> ProductOut:
    return ProductOut(
        id=product.id,
        name=product.name,
        description=product.description,
        image_url=product.image_url,
        price=float(product.price or 0),
        stock_status=display_stock(product.stock),
        is_available=bool(product.is_available),
        category_id=product.category_id,
        category_name=product.category.name if product.category else None,
    )


def to_admin_product_out(product: Product) -> AdminProductOut:
    return AdminProductOut(
        id=product.id,
        name=product.name,
        description=product.description,
        image_url=product.image_url,
        price=float(product.price or 0),
        stock=product.stock,
        is_available=bool(product.is_available),
        category_id=product.category_id,
        category_name=product.category.name if product.category else None,
        is_deleted=bool(product.is_deleted),
    )


def normalize_page(page: int, page_size: int):
    """Clamp page/pageSize and turn them into (offset, limit)."""
    if page < 1:
        page = 1
    if page_size < 1:
        page_size = 10
    if page_size > 100:
        page_size = 100
    return (page - 1) * page_size, page_size


async def add_product(db: AsyncSession, payload: ProductCreateIn) -> ProductOut:
    category = await crud.get_category(db, payload.category_id)
    if category is None:
        raise BadRequestError("Category not found")
    product = await crud.create_product(
        db,
        name=payload.name.strip(),
        description=payload.description,
        image_url=str(payload.image_url),
        price=payload.price,
        stock=payload.stock,
        category_id=payload.category_id,
        is_available=True,
    )
    logger.info("Added product %s in category %s", product.id, product.category_id)
    return to_product_out(product)


async def get_product(db: AsyncSession, product_id: int) -> Optional[ProductOut]:
    product = await crud.get_product(db, product_id)
    return to_product_out(product) if product else None


async def list_products(db: AsyncSession) -> List[ProductOut]:
    return [to_product_out(p) for p in await crud.list_products(db)]


async def list_products_by_category(db: AsyncSession, category_id: int) -> List[ProductOut]:
    return [to_product_out(p) for p in await crud.list_products_by_category(db, category_id)]


async def list_products_paginated(db: AsyncSession, params: PaginationParams) -> PaginatedOut[ProductOut]:
    total, products = await crud.list_products_paginated(db, params, is_admin=False)
    data = [to_product_out(p) for p in products]
    return PaginatedOut[ProductOut](
        total_count=total,
        offset=params.offset,
        limit=params.limit,
        current_page_count=len(data),
        has_more=(params.offset + params.limit) < total,
        data=data,
    )


async def list_products_admin_paginated(db: AsyncSession, params: PaginationParams) -> PaginatedOut[AdminProductOut]:
    total, products = await crud.list_products_paginated(db, params, is_admin=True)
    data = [to_admin_product_out(p) for p in products]
    return PaginatedOut[AdminProductOut](
        total_count=total,
        offset=params.offset,
        limit=params.limit,
        current_page_count=len(data),
        has_more=(params.offset + params.limit) < total,
        data=data,
    )


async def update_product(db: AsyncSession, payload: ProductUpdateIn) -> ProductOut:
    product = await crud.get_product(db, payload.id)
    if product is None:
        raise BadRequestError("Product not found")

    if payload.category_id is not None and payload.category_id != product.category_id:
        if await crud.get_category(db, payload.category_id) is None:
            raise BadRequestError("Category not found")
        product.category_id = payload.category_id
    if payload.name is not None:
        product.name = payload.name.strip()
    if payload.description is not None:
        product.description = payload.description
    if payload.image_url is not None:
        product.image_url = str(payload.image_url)
    if payload.price is not None:
        product.price = payload.price
    product.is_available = payload.is_available

    product = await crud.save_product(db, product)
    return to_product_out(product)


async def delete_product(db: AsyncSession, product_id: int) -> bool:
    return await crud.set_product_deleted(db, product_id, True)


async def restore_product(db: AsyncSession, product_id: int) -> bool:
    return await crud.set_product_deleted(db, product_id, False)


async def bulk_delete_products(db: AsyncSession, product_ids: List[int]) -> BulkDeleteOut:
    deleted = await crud.soft_delete_products(db, product_ids)
    missing = sorted(set(product_ids) - set(deleted))
    message = f"Successfully deleted {len(deleted)} products."
    if missing:
        message += f" {len(missing)} products were not found."
    logger.info("Bulk delete removed %d products, %d not found", len(deleted), len(missing))
    return BulkDeleteOut(total_deleted=len(deleted), not_found_ids=missing, message=message)


async def restock_product(db: AsyncSession, payload: RestockIn) -> ProductOut:
    product = await crud.get_product(db, payload.product_id)
    if product is None:
        raise BadRequestError("Product not found")

    current = product.stock if product.stock is not None and product.stock > 0 else 0
    product.stock = current + payload.quantity_to_add

    product = await crud.save_product(db, product)
    return to_product_out(product)
