# ecommerce/config.py
import os
import logging
from typing import List
from dotenv import load_dotenv

load_dotenv()


def _as_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes")


class Config:
    """Runtime settings read from the environment"""

    # Database
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite+aiosqlite:///./ecommerce.db")

    # JWT
    JWT_SECRET_KEY: str = os.getenv("JWT_SECRET_KEY", "change_me_long_secret")
    JWT_ALGORITHM: str = "HS256"
    JWT_ISSUER: str = os.getenv("JWT_ISSUER", "ecommerce-api")
    JWT_AUDIENCE: str = os.getenv("JWT_AUDIENCE", "ecommerce-client")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", str(60 * 24 * 7)))

    # Auth cookie
    AUTH_COOKIE_NAME: str = os.getenv("AUTH_COOKIE_NAME", "AccessToken")
    AUTH_COOKIE_SECURE: bool = _as_bool(os.getenv("AUTH_COOKIE_SECURE", "true"))
    AUTH_COOKIE_MAX_AGE: int = 60 * 60 * 24 * 7

    # Password hashing
    BCRYPT_ROUNDS: int = int(os.getenv("BCRYPT_ROUNDS", "12"))

    # CORS
    CORS_ORIGINS: List[str] = [
        origin.strip()
        for origin in os.getenv(
            "CORS_ORIGINS",
            "http://localhost:4200,http://127.0.0.1:4200,https://localhost:4200",
        ).split(",")
        if origin.strip()
    ]

    # Cloudinary (unsigned uploads from the browser)
    CLOUDINARY_CLOUD_NAME: str = os.getenv("CLOUDINARY_CLOUD_NAME", "")
    CLOUDINARY_UPLOAD_PRESET: str = os.getenv("CLOUDINARY_UPLOAD_PRESET", "")

    # Other settings
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    PORT: int = int(os.getenv("PORT", "8000"))


def setup_logging():
    """Configure logging settings"""
    logging.basicConfig(
        level=getattr(logging, Config.LOG_LEVEL.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler()],
    )
