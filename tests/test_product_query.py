from decimal import Decimal

import pytest

from ecommerce.models import Category, Product
from ecommerce.schemas import PaginationParams, RestockIn
from ecommerce.services import product_service
from ecommerce.services.product_service import display_stock, normalize_page


@pytest.fixture
async def catalog(session):
    phones = Category(name="Phones")
    books = Category(name="Books")
    session.add_all([phones, books])
    await session.flush()

    rows = [
        ("Galaxy Phone", "700.00", 12, phones, False),
        ("Pixel Phone", "650.00", 3, phones, False),
        ("Old Phone", "50.00", 0, phones, True),
        ("Python Cookbook", "45.00", 40, books, False),
        ("SQL Primer", "30.00", 8, books, False),
    ]
    products = []
    for name, price, stock, category, deleted in rows:
        p = Product(
            name=name,
            description=f"{name} description",
            image_url="https://img.example.com/p.png",
            price=Decimal(price),
            stock=stock,
            category_id=category.id,
            is_available=True,
            is_deleted=deleted,
        )
        session.add(p)
        products.append(p)
    await session.commit()
    return {"phones": phones, "books": books, "products": products}


def _names(page):
    return [p.name for p in page.data]


@pytest.mark.parametrize(
    "page, size, expected",
    [(1, 10, (0, 10)), (3, 20, (40, 20)), (0, 10, (0, 10)), (-4, 0, (0, 10)), (2, 1000, (100, 100))],
)
def test_normalize_page(page, size, expected):
    assert normalize_page(page, size) == expected


@pytest.mark.parametrize(
    "stock, status",
    [(None, "Out of Stock"), (-1, "Out of Stock"), (0, "Out of Stock"), (1, "1"), (10, "10"), (11, "In Stock")],
)
def test_display_stock(stock, status):
    assert display_stock(stock) == status


async def test_user_view_hides_deleted(session, catalog):
    page = await product_service.list_products_paginated(session, PaginationParams())
    assert page.total_count == 4
    assert "Old Phone" not in _names(page)


async def test_user_view_ignores_include_deleted(session, catalog):
    page = await product_service.list_products_paginated(session, PaginationParams(include_deleted=True))
    assert "Old Phone" not in _names(page)


async def test_admin_view_shows_everything(session, catalog):
    page = await product_service.list_products_admin_paginated(session, PaginationParams())
    assert page.total_count == 5


async def test_admin_include_deleted_shows_only_deleted(session, catalog):
    page = await product_service.list_products_admin_paginated(session, PaginationParams(include_deleted=True))
    assert _names(page) == ["Old Phone"]
    assert page.data[0].is_deleted is True


async def test_default_order_is_newest_first(session, catalog):
    page = await product_service.list_products_paginated(session, PaginationParams())
    assert _names(page) == ["SQL Primer", "Python Cookbook", "Pixel Phone", "Galaxy Phone"]


async def test_search_is_case_insensitive(session, catalog):
    page = await product_service.list_products_paginated(session, PaginationParams(search_term="PHONE"))
    assert sorted(_names(page)) == ["Galaxy Phone", "Pixel Phone"]


async def test_numeric_search_matches_id(session, catalog):
    target = catalog["products"][3]
    page = await product_service.list_products_paginated(session, PaginationParams(search_term=str(target.id)))
    assert _names(page) == ["Python Cookbook"]


async def test_category_filter(session, catalog):
    params = PaginationParams(category_id=catalog["books"].id)
    page = await product_service.list_products_paginated(session, params)
    assert sorted(_names(page)) == ["Python Cookbook", "SQL Primer"]


async def test_zero_category_means_all(session, catalog):
    page = await product_service.list_products_paginated(session, PaginationParams(category_id=0))
    assert page.total_count == 4


async def test_price_range(session, catalog):
    params = PaginationParams(min_price=Decimal("40"), max_price=Decimal("660"))
    page = await product_service.list_products_paginated(session, params)
    assert sorted(_names(page)) == ["Pixel Phone", "Python Cookbook"]


async def test_negative_price_bound_is_ignored(session, catalog):
    page = await product_service.list_products_paginated(session, PaginationParams(min_price=Decimal("-1")))
    assert page.total_count == 4


async def test_quantity_range_is_admin_only(session, catalog):
    params = PaginationParams(min_quantity=5, max_quantity=20)
    user_page = await product_service.list_products_paginated(session, params)
    admin_page = await product_service.list_products_admin_paginated(session, params)
    assert user_page.total_count == 4
    assert sorted(_names(admin_page)) == ["Galaxy Phone", "SQL Primer"]


async def test_sort_by_price_desc(session, catalog):
    params = PaginationParams(sort_by_price="desc")
    page = await product_service.list_products_admin_paginated(session, params)
    assert _names(page)[:2] == ["Galaxy Phone", "Pixel Phone"]


async def test_price_sort_wins_over_quantity_sort(session, catalog):
    params = PaginationParams(sort_by_price="asc", sort_by_quantity="desc")
    page = await product_service.list_products_admin_paginated(session, params)
    assert _names(page) == ["SQL Primer", "Python Cookbook", "Old Phone", "Pixel Phone", "Galaxy Phone"]


async def test_sort_by_quantity(session, catalog):
    params = PaginationParams(sort_by_quantity="ASC")
    page = await product_service.list_products_admin_paginated(session, params)
    assert _names(page) == ["Old Phone", "Pixel Phone", "SQL Primer", "Galaxy Phone", "Python Cookbook"]


async def test_sorting_ignored_for_users(session, catalog):
    params = PaginationParams(sort_by_price="asc")
    page = await product_service.list_products_paginated(session, params)
    assert _names(page) == ["SQL Primer", "Python Cookbook", "Pixel Phone", "Galaxy Phone"]


async def test_unknown_direction_falls_back_to_id(session, catalog):
    params = PaginationParams(sort_by_price="sideways")
    page = await product_service.list_products_admin_paginated(session, params)
    assert _names(page)[0] == "SQL Primer"


async def test_paging_and_has_more(session, catalog):
    first = await product_service.list_products_paginated(session, PaginationParams(offset=0, limit=3))
    assert first.total_count == 4
    assert first.current_page_count == 3
    assert first.has_more is True

    last = await product_service.list_products_paginated(session, PaginationParams(offset=3, limit=3))
    assert last.current_page_count == 1
    assert last.has_more is False


async def test_count_is_taken_after_filtering(session, catalog):
    params = PaginationParams(search_term="phone", limit=1)
    page = await product_service.list_products_paginated(session, params)
    assert page.total_count == 2
    assert page.current_page_count == 1
    assert page.has_more is True


async def test_search_wildcards_are_literal(session, catalog):
    session.add(Product(
        name="50% off lamp", description="sale", image_url="https://img.example.com/p.png",
        price=Decimal("10.00"), stock=4, category_id=catalog["books"].id, is_available=True,
    ))
    await session.commit()

    page = await product_service.list_products_paginated(session, PaginationParams(search_term="%"))
    assert _names(page) == ["50% off lamp"]

    page = await product_service.list_products_paginated(session, PaginationParams(search_term="SQL_Primer"))
    assert page.total_count == 0


async def test_restock_clamps_negative_stock(session, catalog):
    product = catalog["products"][1]
    product.stock = -3
    await session.commit()

    out = await product_service.restock_product(session, RestockIn(product_id=product.id, quantity_to_add=4))
    assert out.stock_status == "4"
    admin = await product_service.list_products_admin_paginated(session, PaginationParams(search_term="Pixel"))
    assert admin.data[0].stock == 4
