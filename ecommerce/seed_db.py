# ecommerce/seed_db.py
import asyncio
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from .db import engine, AsyncSessionLocal, Base
from .models import ROLE_ADMIN, ROLE_USER
from .security import hash_password
from . import crud

logger = logging.getLogger(__name__)

DEFAULT_USERS = [
    {"full_name": "Admin User", "email": "admin@ecommerce.com", "password": "Admin@123", "role": ROLE_ADMIN},
    {"full_name": "Regular User", "email": "user@ecommerce.com", "password": "User@123", "role": ROLE_USER},
]


async def seed_users(db: AsyncSession) -> int:
    """Create the default accounts on an empty user table; returns how many were added."""
    if await crud.count_users(db) > 0:
        return 0
    for u in DEFAULT_USERS:
        await crud.create_user(
            db,
            full_name=u["full_name"],
            email=u["email"],
            password_hash=hash_password(u["password"]),
            role=u["role"],
        )
    logger.info("Seeded %d default users", len(DEFAULT_USERS))
    return len(DEFAULT_USERS)


async def seed():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    async with AsyncSessionLocal() as session:
        await seed_users(session)
    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(seed())
