# ecommerce/crud.py
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from sqlalchemy import select, update, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from .models import User, Category, Product, Cart, CartItem
from .schemas import PaginationParams
from . import product_query


# ---------- users ----------
async def get_user_by_email(db: AsyncSession, email: str) -> Optional[User]:
    q = select(User).where(func.lower(User.email) == email.strip().lower())
    r = await db.execute(q)
    return r.scalar_one_or_none()


async def get_user_by_id(db: AsyncSession, user_id: int) -> Optional[User]:
    q = select(User).where(User.id == user_id)
    r = await db.execute(q)
    return r.scalar_one_or_none()


async def email_taken(db: AsyncSession, email: str) -> bool:
    # deleted accounts still hold their address
    q = (
        select(func.count(User.id))
        .where(func.lower(User.email) == email.strip().lower())
        .execution_options(include_deleted=True)
    )
    r = await db.execute(q)
    return r.scalar_one() > 0


async def count_users(db: AsyncSession) -> int:
    r = await db.execute(select(func.count(User.id)).execution_options(include_deleted=True))
    return r.scalar_one()


async def create_user(db: AsyncSession, full_name: str, email: str, password_hash: str, role: str) -> User:
    user = User(full_name=full_name, email=email, password=password_hash, role=role)
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


# ---------- categories ----------
async def get_category(db: AsyncSession, category_id: int, include_deleted: bool = False) -> Optional[Category]:
    q = select(Category).where(Category.id == category_id).execution_options(include_deleted=include_deleted)
    r = await db.execute(q)
    return r.scalar_one_or_none()


async def list_categories(db: AsyncSession, include_deleted: bool = False) -> Sequence[Category]:
    q = select(Category).order_by(Category.id).execution_options(include_deleted=include_deleted)
    r = await db.execute(q)
    return r.scalars().all()


async def create_category(db: AsyncSession, name: str, description: Optional[str]) -> Category:
    category = Category(name=name, description=description)
    db.add(category)
    await db.commit()
    await db.refresh(category)
    return category


async def set_category_deleted(db: AsyncSession, category_id: int, deleted: bool) -> bool:
    # deleting looks at active rows only, restoring at every row
    category = await get_category(db, category_id, include_deleted=not deleted)
    if category is None:
        return False
    category.is_deleted = deleted
    await db.commit()
    return True


async def category_map_by_name(db: AsyncSession) -> Dict[str, int]:
    """Lower-cased name -> id for active categories."""
    categories = await list_categories(db)
    return {c.name.strip().lower(): c.id for c in categories if c.name}


# ---------- products ----------
async def get_product(db: AsyncSession, product_id: int, include_deleted: bool = False) -> Optional[Product]:
    q = (
        select(Product)
        .options(selectinload(Product.category))
        .where(Product.id == product_id)
        .execution_options(include_deleted=include_deleted, populate_existing=True)
    )
    r = await db.execute(q)
    return r.scalar_one_or_none()


async def list_products(db: AsyncSession) -> Sequence[Product]:
    q = select(Product).options(selectinload(Product.category)).order_by(Product.id)
    r = await db.execute(q)
    return r.scalars().all()


async def list_products_by_category(db: AsyncSession, category_id: int) -> Sequence[Product]:
    q = (
        select(Product)
        .options(selectinload(Product.category))
        .where(Product.category_id == category_id)
        .order_by(Product.id)
    )
    r = await db.execute(q)
    return r.scalars().all()


async def list_products_paginated(
    db: AsyncSession, params: PaginationParams, is_admin: bool = False
) -> Tuple[int, Sequence[Product]]:
    filters = product_query.build_filters(params, is_admin)

    # visibility is decided by the filters, not by the global soft-delete criteria
    count_q = select(func.count(Product.id)).where(*filters).execution_options(include_deleted=True)
    total = (await db.execute(count_q)).scalar_one()

    q = (
        select(Product)
        .options(selectinload(Product.category))
        .where(*filters)
        .order_by(*product_query.build_ordering(params, is_admin))
        .offset(params.offset)
        .limit(params.limit)
        .execution_options(include_deleted=True)
    )
    r = await db.execute(q)
    return total, r.scalars().all()


async def create_product(db: AsyncSession, **values) -> Product:
    product = Product(**values)
    db.add(product)
    await db.commit()
    return await get_product(db, product.id)


async def save_product(db: AsyncSession, product: Product) -> Product:
    await db.commit()
    return await get_product(db, product.id, include_deleted=True)


async def set_product_deleted(db: AsyncSession, product_id: int, deleted: bool) -> bool:
    product = await get_product(db, product_id, include_deleted=not deleted)
    if product is None:
        return False
    product.is_deleted = deleted
    await db.commit()
    return True


async def soft_delete_products(db: AsyncSession, product_ids: Iterable[int]) -> List[int]:
    """Flags every active product in ``product_ids``; returns the ids it touched."""
    ids = list(set(product_ids))
    r = await db.execute(select(Product.id).where(Product.id.in_(ids)))
    found = sorted(r.scalars().all())
    if found:
        await db.execute(update(Product).where(Product.id.in_(found)).values(is_deleted=True))
    await db.commit()
    return found


async def products_by_name_in_categories(db: AsyncSession, category_ids: Iterable[int]) -> Dict[Tuple[str, int], Product]:
    """(lower-cased name, category id) -> active product, for import matching."""
    ids = list(set(category_ids))
    if not ids:
        return {}
    r = await db.execute(select(Product).where(Product.category_id.in_(ids)).order_by(Product.id))
    out: Dict[Tuple[str, int], Product] = {}
    for p in r.scalars().all():
        out.setdefault((p.name.strip().lower(), p.category_id), p)
    return out


# ---------- cart ----------
async def get_cart(db: AsyncSession, user_id: int) -> Optional[Cart]:
    q = select(Cart).where(Cart.user_id == user_id).order_by(Cart.id)
    r = await db.execute(q)
    return r.scalars().first()


async def get_cart_with_items(db: AsyncSession, user_id: int) -> Optional[Cart]:
    q = (
        select(Cart)
        .options(selectinload(Cart.items).selectinload(CartItem.product))
        .where(Cart.user_id == user_id)
        .order_by(Cart.id)
        .execution_options(populate_existing=True)
    )
    r = await db.execute(q)
    return r.scalars().first()


async def create_cart(db: AsyncSession, user_id: int) -> Cart:
    now = datetime.now(timezone.utc)
    cart = Cart(user_id=user_id, created_at=now, updated_at=now)
    db.add(cart)
    await db.flush()
    return cart


async def get_or_create_cart(db: AsyncSession, user_id: int) -> Cart:
    cart = await get_cart(db, user_id)
    if cart:
        return cart
    return await create_cart(db, user_id)


async def get_cart_item(db: AsyncSession, cart_id: int, cart_item_id: int) -> Optional[CartItem]:
    q = select(CartItem).where(CartItem.id == cart_item_id, CartItem.cart_id == cart_id)
    r = await db.execute(q)
    return r.scalar_one_or_none()


async def get_cart_item_for_product(db: AsyncSession, cart_id: int, product_id: int) -> Optional[CartItem]:
    q = select(CartItem).where(CartItem.cart_id == cart_id, CartItem.product_id == product_id)
    r = await db.execute(q)
    return r.scalars().first()


async def get_active_cart_items(db: AsyncSession, cart_id: int) -> Sequence[CartItem]:
    q = select(CartItem).where(CartItem.cart_id == cart_id)
    r = await db.execute(q)
    return r.scalars().all()


def touch_cart(cart: Cart):
    cart.updated_at = datetime.now(timezone.utc)
