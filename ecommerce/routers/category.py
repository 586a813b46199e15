# ecommerce/routers/category.py
from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ..db import get_db
from ..deps import require_admin
from ..errors import NotFoundError
from ..schemas import ApiResponse, CategoryIn, CategoryOut, ChangeCategoryNameIn
from ..services import category_service

router = APIRouter(prefix="/api/Category", tags=["category"])


@router.post("/Add", response_model=ApiResponse[CategoryOut], dependencies=[Depends(require_admin)])
async def add_category(payload: CategoryIn, db: AsyncSession = Depends(get_db)):
    result = await category_service.add_category(db, payload)
    return ApiResponse[CategoryOut](message="Category added successfully", data=result)


@router.get("/GetById/{id}", response_model=ApiResponse[CategoryOut])
async def get_category_by_id(id: int, db: AsyncSession = Depends(get_db)):
    result = await category_service.get_category(db, id)
    if result is None:
        raise NotFoundError("Category not found")
    return ApiResponse[CategoryOut](message="Category retrieved successfully", data=result)


@router.get("/GetAll", response_model=ApiResponse[List[CategoryOut]])
async def get_all_categories(db: AsyncSession = Depends(get_db)):
    result = await category_service.list_categories(db)
    return ApiResponse[List[CategoryOut]](message="Categories retrieved successfully", data=result)


@router.get("/GetAllAdmin", response_model=ApiResponse[List[CategoryOut]], dependencies=[Depends(require_admin)])
async def get_all_categories_admin(
    include_deleted: bool = Query(False, alias="includeDeleted"),
    db: AsyncSession = Depends(get_db),
):
    result = await category_service.list_categories(db, include_deleted=include_deleted)
    return ApiResponse[List[CategoryOut]](message="Categories retrieved successfully", data=result)


@router.put("/ChangeName", response_model=ApiResponse[CategoryOut], dependencies=[Depends(require_admin)])
async def change_category_name(payload: ChangeCategoryNameIn, db: AsyncSession = Depends(get_db)):
    result = await category_service.change_name(db, payload)
    return ApiResponse[CategoryOut](message="Category name changed successfully", data=result)


@router.delete("/Delete/{id}", response_model=ApiResponse[bool], dependencies=[Depends(require_admin)])
async def delete_category(id: int, db: AsyncSession = Depends(get_db)):
    if not await category_service.delete_category(db, id):
        raise NotFoundError("Category not found")
    return ApiResponse[bool](message="Category deleted successfully", data=True)


@router.post("/Restore/{id}", response_model=ApiResponse[bool], dependencies=[Depends(require_admin)])
async def restore_category(id: int, db: AsyncSession = Depends(get_db)):
    if not await category_service.restore_category(db, id):
        raise NotFoundError("Category not found")
    return ApiResponse[bool](message="Category restored successfully", data=True)
