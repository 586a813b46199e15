# ecommerce/services/category_service.py
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from .. import crud
from ..errors import BadRequestError
from ..schemas import CategoryIn, CategoryOut, ChangeCategoryNameIn


async def add_category(db: AsyncSession, payload: CategoryIn) -> CategoryOut:
    category = await crud.create_category(db, payload.name.strip(), payload.description)
    return CategoryOut.model_validate(category)


async def get_category(db: AsyncSession, category_id: int) -> Optional[CategoryOut]:
    category = await crud.get_category(db, category_id)
    return CategoryOut.model_validate(category) if category else None


async def list_categories(db: AsyncSession, include_deleted: bool = False) -> List[CategoryOut]:
    categories = await crud.list_categories(db, include_deleted=include_deleted)
    return [CategoryOut.model_validate(c) for c in categories]


async def change_name(db: AsyncSession, payload: ChangeCategoryNameIn) -> CategoryOut:
    category = await crud.get_category(db, payload.category_id)
    if category is None:
        raise BadRequestError("Category not found")
    category.name = payload.new_name.strip()
    await db.commit()
    return CategoryOut.model_validate(category)


async def delete_category(db: AsyncSession, category_id: int) -> bool:
    return await crud.set_category_deleted(db, category_id, True)


async def restore_category(db: AsyncSession, category_id: int) -> bool:
    return await crud.set_category_deleted(db, category_id, False)
