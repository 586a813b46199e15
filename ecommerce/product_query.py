# ecommerce/product_query.py
"""Predicate and ordering composition for product listings.

User listings never see soft-deleted rows. Admin listings see every row,
or only the deleted ones when ``include_deleted`` is set (the "trash" view
of the admin screen). Quantity bounds and sorting are admin-only.
"""
from typing import List

from sqlalchemy import or_, true
from sqlalchemy.sql.elements import ColumnElement

from .models import Product
from .schemas import PaginationParams


def _direction(value) -> str:
    return (value or "").strip().lower()


def visibility_filter(is_admin: bool, include_deleted: bool) -> ColumnElement:
    if not is_admin:
        return Product.is_deleted.is_(False)
    if include_deleted:
        return Product.is_deleted.is_(True)
    return true()


def search_filter(term: str) -> ColumnElement:
    # % and _ in the term are literal characters
    by_name = Product.name.icontains(term, autoescape=True)
    try:
        product_id = int(term)
    except ValueError:
        return by_name
    return or_(by_name, Product.id == product_id)


def build_filters(params: PaginationParams, is_admin: bool) -> List[ColumnElement]:
    filters = [visibility_filter(is_admin, params.include_deleted)]

    term = (params.search_term or "").strip()
    if term:
        filters.append(search_filter(term))

    if params.category_id is not None and params.category_id > 0:
        filters.append(Product.category_id == params.category_id)

    if params.min_price is not None and params.min_price >= 0:
        filters.append(Product.price >= params.min_price)
    if params.max_price is not None and params.max_price >= 0:
        filters.append(Product.price <= params.max_price)

    if is_admin:
        if params.min_quantity is not None and params.min_quantity >= 0:
            filters.append(Product.stock >= params.min_quantity)
        if params.max_quantity is not None and params.max_quantity >= 0:
            filters.append(Product.stock <= params.max_quantity)

    return filters


def build_ordering(params: PaginationParams, is_admin: bool) -> List[ColumnElement]:
    default = [Product.id.desc()]
    if not is_admin:
        return default

    # price sort wins whenever it is present, even with an unknown direction
    if _direction(params.sort_by_price):
        column = Product.price
        direction = _direction(params.sort_by_price)
    elif _direction(params.sort_by_quantity):
        column = Product.stock
        direction = _direction(params.sort_by_quantity)
    else:
        return default

    if direction == "asc":
        return [column.asc(), Product.id.desc()]
    if direction == "desc":
        return [column.desc(), Product.id.desc()]
    return default
