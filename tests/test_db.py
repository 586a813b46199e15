from ecommerce.db import strip_query_params


def test_absolute_sqlite_url_is_untouched():
    url = "sqlite+aiosqlite:////tmp/shop/test.db"
    assert strip_query_params(url) == url


def test_relative_sqlite_url_is_untouched():
    url = "sqlite+aiosqlite:///./ecommerce.db"
    assert strip_query_params(url) == url


def test_postgres_ssl_params_are_dropped():
    url = "postgresql+asyncpg://shop:pw@db.example.com:5432/shop?sslmode=require&channel_binding=require"
    assert strip_query_params(url) == "postgresql+asyncpg://shop:pw@db.example.com:5432/shop"


def test_other_query_params_survive():
    url = "postgresql+asyncpg://shop:pw@db.example.com/shop?sslmode=require&application_name=api"
    assert strip_query_params(url) == "postgresql+asyncpg://shop:pw@db.example.com/shop?application_name=api"
