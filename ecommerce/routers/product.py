# ecommerce/routers/product.py
from decimal import Decimal
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Query, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from ..db import get_db
from ..deps import require_admin
from ..errors import BadRequestError, NotFoundError
from ..schemas import (
    AdminProductOut,
    ApiResponse,
    BulkDeleteIn,
    BulkDeleteOut,
    ImportPreviewOut,
    ImportResultOut,
    PaginatedOut,
    PaginationParams,
    ProductCreateIn,
    ProductOut,
    ProductUpdateIn,
    RestockIn,
)
from ..services import bulk_import, product_service

router = APIRouter(prefix="/api/Product", tags=["product"])


async def _read_upload(file: Optional[UploadFile]) -> bytes:
    content = await file.read() if file is not None else b""
    if not content:
        raise BadRequestError("No file provided")
    return content


@router.post("/Add", response_model=ApiResponse[ProductOut], dependencies=[Depends(require_admin)])
async def add_product(payload: ProductCreateIn, db: AsyncSession = Depends(get_db)):
    result = await product_service.add_product(db, payload)
    return ApiResponse[ProductOut](message="Product added successfully", data=result)


@router.get("/GetById/{id}", response_model=ApiResponse[ProductOut])
async def get_product_by_id(id: int, db: AsyncSession = Depends(get_db)):
    result = await product_service.get_product(db, id)
    if result is None:
        raise NotFoundError("Product not found")
    return ApiResponse[ProductOut](message="Product retrieved successfully", data=result)


@router.get("/GetAll", response_model=ApiResponse[List[ProductOut]])
async def get_all_products(db: AsyncSession = Depends(get_db)):
    result = await product_service.list_products(db)
    return ApiResponse[List[ProductOut]](message="Products retrieved successfully", data=result)


@router.get("/GetPaginated", response_model=ApiResponse[PaginatedOut[ProductOut]])
async def get_products_paginated(
    page: int = Query(1),
    page_size: int = Query(10, alias="pageSize"),
    search: Optional[str] = Query(None, max_length=100),
    category_id: Optional[int] = Query(None, alias="categoryId"),
    min_price: Optional[Decimal] = Query(None, alias="minPrice"),
    max_price: Optional[Decimal] = Query(None, alias="maxPrice"),
    db: AsyncSession = Depends(get_db),
):
    offset, limit = product_service.normalize_page(page, page_size)
    params = PaginationParams(
        offset=offset,
        limit=limit,
        search_term=search,
        category_id=category_id,
        min_price=min_price,
        max_price=max_price,
    )
    result = await product_service.list_products_paginated(db, params)
    return ApiResponse[PaginatedOut[ProductOut]](message="Products retrieved successfully", data=result)


@router.get(
    "/GetPaginatedAdmin",
    response_model=ApiResponse[PaginatedOut[AdminProductOut]],
    dependencies=[Depends(require_admin)],
)
async def get_products_admin_paginated(
    page: int = Query(1),
    page_size: int = Query(10, alias="pageSize"),
    search: Optional[str] = Query(None, max_length=100),
    category_id: Optional[int] = Query(None, alias="categoryId"),
    min_price: Optional[Decimal] = Query(None, alias="minPrice"),
    max_price: Optional[Decimal] = Query(None, alias="maxPrice"),
    min_quantity: Optional[int] = Query(None, alias="minQuantity"),
    max_quantity: Optional[int] = Query(None, alias="maxQuantity"),
    sort_by_price: Optional[str] = Query(None, alias="sortByPrice"),
    sort_by_quantity: Optional[str] = Query(None, alias="sortByQuantity"),
    include_deleted: bool = Query(False, alias="includeDeleted"),
    db: AsyncSession = Depends(get_db),
):
    offset, limit = product_service.normalize_page(page, page_size)
    params = PaginationParams(
        offset=offset,
        limit=limit,
        search_term=search,
        category_id=category_id,
        min_price=min_price,
        max_price=max_price,
        min_quantity=min_quantity,
        max_quantity=max_quantity,
        sort_by_price=sort_by_price,
        sort_by_quantity=sort_by_quantity,
        include_deleted=include_deleted,
    )
    result = await product_service.list_products_admin_paginated(db, params)
    return ApiResponse[PaginatedOut[AdminProductOut]](message="Products retrieved successfully", data=result)


@router.put("/Update", response_model=ApiResponse[ProductOut], dependencies=[Depends(require_admin)])
async def update_product(payload: ProductUpdateIn, db: AsyncSession = Depends(get_db)):
    result = await product_service.update_product(db, payload)
    return ApiResponse[ProductOut](message="Product updated successfully", data=result)


@router.delete("/Delete/{id}", response_model=ApiResponse[bool], dependencies=[Depends(require_admin)])
async def delete_product(id: int, db: AsyncSession = Depends(get_db)):
    if not await product_service.delete_product(db, id):
        raise NotFoundError("Product not found")
    return ApiResponse[bool](message="Product deleted successfully", data=True)


@router.post("/Restore/{id}", response_model=ApiResponse[bool], dependencies=[Depends(require_admin)])
async def restore_product(id: int, db: AsyncSession = Depends(get_db)):
    if not await product_service.restore_product(db, id):
        raise NotFoundError("Product not found")
    return ApiResponse[bool](message="Product restored successfully", data=True)


@router.get("/GetByCategory/{category_id}", response_model=ApiResponse[List[ProductOut]])
async def get_products_by_category(category_id: int, db: AsyncSession = Depends(get_db)):
    result = await product_service.list_products_by_category(db, category_id)
    return ApiResponse[List[ProductOut]](message="Products retrieved successfully", data=result)


@router.put("/Restock", response_model=ApiResponse[ProductOut], dependencies=[Depends(require_admin)])
async def restock_product(payload: RestockIn, db: AsyncSession = Depends(get_db)):
    result = await product_service.restock_product(db, payload)
    return ApiResponse[ProductOut](message="Product restocked successfully", data=result)


@router.post("/BulkDelete", response_model=ApiResponse[BulkDeleteOut], dependencies=[Depends(require_admin)])
async def bulk_delete_products(payload: BulkDeleteIn, db: AsyncSession = Depends(get_db)):
    result = await product_service.bulk_delete_products(db, payload.product_ids)
    return ApiResponse[BulkDeleteOut](message=result.message, data=result)


@router.post(
    "/BulkImport/Preview",
    response_model=ApiResponse[ImportPreviewOut],
    dependencies=[Depends(require_admin)],
)
async def preview_bulk_import(file: Optional[UploadFile] = File(None)):
    content = await _read_upload(file)
    result = bulk_import.preview_import(file.filename, content)
    return ApiResponse[ImportPreviewOut](message="Preview generated successfully", data=result)


@router.post(
    "/BulkImport/Upload",
    response_model=ApiResponse[ImportResultOut],
    dependencies=[Depends(require_admin)],
)
async def bulk_import_products(file: Optional[UploadFile] = File(None), db: AsyncSession = Depends(get_db)):
    content = await _read_upload(file)
    result = await bulk_import.import_products(db, file.filename, content)
    return ApiResponse[ImportResultOut](message=result.message, data=result)
