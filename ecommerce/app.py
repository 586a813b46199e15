# ecommerce/app.py
import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import Config, setup_logging
from .db import engine, Base, AsyncSessionLocal
from .errors import register_error_handlers
from .seed_db import seed_users
from .routers import auth, cart, category, cloudinary, product

setup_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    async with AsyncSessionLocal() as session:
        await seed_users(session)
    logger.info("Database ready")
    yield
    await engine.dispose()


app = FastAPI(
    title="E-Commerce Backend",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=Config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

# Routers
app.include_router(auth.router)
app.include_router(category.router)
app.include_router(product.router)
app.include_router(cart.router)
app.include_router(cloudinary.router)


if __name__ == "__main__":
    uvicorn.run("ecommerce.app:app", host="0.0.0.0", port=Config.PORT, reload=False)
