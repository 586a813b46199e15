import os
import tempfile

# Settings are read at import time, so the environment comes first.
_TMP_DIR = tempfile.mkdtemp(prefix="ecommerce-tests-")
DB_PATH = os.path.join(_TMP_DIR, "test.db")

os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{DB_PATH}"
os.environ["JWT_SECRET_KEY"] = "test-secret-key-that-is-long-enough-for-hs256"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["AUTH_COOKIE_SECURE"] = "false"
os.environ["CLOUDINARY_CLOUD_NAME"] = "demo-cloud"
os.environ["CLOUDINARY_UPLOAD_PRESET"] = "unsigned-preset"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import StaticPool

from ecommerce.app import app
from ecommerce.db import Base

ADMIN = {"email": "admin@ecommerce.com", "password": "Admin@123"}
USER = {"email": "user@ecommerce.com", "password": "User@123"}


def login(client: TestClient, email: str, password: str) -> dict:
    """Log in and return bearer headers; the cookie jar is cleared so each
    request only carries the identity it is given."""
    resp = client.post("/api/Auth/Login", json={"email": email, "password": password})
    assert resp.status_code == 200, resp.text
    token = resp.cookies.get("AccessToken")
    assert token
    client.cookies.clear()
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def client():
    # fresh database per test; the lifespan recreates tables and seeds users
    if os.path.exists(DB_PATH):
        os.remove(DB_PATH)
    with TestClient(app) as c:
        yield c


@pytest.fixture
def admin_headers(client):
    return login(client, **ADMIN)


@pytest.fixture
def user_headers(client):
    return login(client, **USER)


@pytest.fixture
def category(client, admin_headers):
    resp = client.post(
        "/api/Category/Add",
        json={"name": "Electronics", "description": "Gadgets"},
        headers=admin_headers,
    )
    assert resp.status_code == 200, resp.text
    return resp.json()["data"]


@pytest.fixture
def product(client, admin_headers, category):
    resp = client.post(
        "/api/Product/Add",
        json={
            "name": "Headphones",
            "description": "Over-ear headphones",
            "imageUrl": "https://img.example.com/headphones.png",
            "price": 49.99,
            "stock": 5,
            "categoryId": category["id"],
        },
        headers=admin_headers,
    )
    assert resp.status_code == 200, resp.text
    return resp.json()["data"]


@pytest.fixture
async def session():
    """Session on a private in-memory database for service-level tests."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    maker = async_sessionmaker(bind=engine, autoflush=False, expire_on_commit=False, class_=AsyncSession)
    async with maker() as s:
        yield s
    await engine.dispose()
