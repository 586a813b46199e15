# ecommerce/db.py
from urllib.parse import urlparse, parse_qs, urlencode, urlunparse, ParseResult

from sqlalchemy import Boolean, Column, event, false
from sqlalchemy.ext.asyncio import (
    create_async_engine,
    AsyncSession,
    async_sessionmaker,
)
from sqlalchemy.orm import DeclarativeBase, Session, with_loader_criteria
from collections.abc import AsyncGenerator

from .config import Config

DATABASE_URL = Config.DATABASE_URL

# Ensure async driver
if DATABASE_URL.startswith("postgresql://"):
    DATABASE_URL = DATABASE_URL.replace("postgresql://", "postgresql+asyncpg://", 1)


def strip_query_params(url: str, drop_keys=("sslmode", "channel_binding")) -> str:
    p = urlparse(url)
    qs = parse_qs(p.query, keep_blank_values=True)
    changed = False
    for k in list(qs.keys()):
        if k in drop_keys:
            qs.pop(k)
            changed = True
    # urlunparse collapses the sqlite:////abs/path form, leave such URLs alone
    if not changed:
        return url
    new_query = urlencode({k: v[0] for k, v in qs.items()})
    newp = ParseResult(
        scheme=p.scheme, netloc=p.netloc, path=p.path,
        params=p.params, query=new_query, fragment=p.fragment
    )
    return urlunparse(newp)


CLEAN_DATABASE_URL = strip_query_params(DATABASE_URL)


def engine_options(url: str) -> dict:
    # sqlite has no server-side pool to size
    if url.startswith("sqlite"):
        return {"echo": False}
    return {
        "echo": False,
        "pool_pre_ping": True,
        "pool_recycle": 1800,
        "pool_size": 5,
        "max_overflow": 10,
    }


engine = create_async_engine(CLEAN_DATABASE_URL, **engine_options(CLEAN_DATABASE_URL))

AsyncSessionLocal = async_sessionmaker(
    bind=engine,
    autoflush=False,
    expire_on_commit=False,
    class_=AsyncSession,
)


class Base(DeclarativeBase):
    pass


class SoftDeleteMixin:
    """Rows carrying this flag are hidden from ORM selects unless the
    statement sets ``execution_options(include_deleted=True)``."""

    is_deleted = Column(Boolean, default=False, nullable=False)


@event.listens_for(Session, "do_orm_execute")
def _hide_soft_deleted(execute_state):
    if (
        execute_state.is_select
        and not execute_state.is_column_load
        and not execute_state.is_relationship_load
        and not execute_state.execution_options.get("include_deleted", False)
    ):
        execute_state.statement = execute_state.statement.options(
            with_loader_criteria(
                SoftDeleteMixin,
                lambda cls: cls.is_deleted == false(),
                include_aliases=True,
            )
        )


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async with AsyncSessionLocal() as session:
        try:
            yield session
        finally:
            await session.close()
