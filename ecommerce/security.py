# ecommerce/security.py
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import jwt, JWTError
from passlib.context import CryptContext

from .config import Config

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=Config.BCRYPT_ROUNDS)


class InvalidTokenError(Exception):
    pass


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain: str, hashed: str) -> bool:
    try:
        return pwd_context.verify(plain, hashed)
    except ValueError:
        # malformed stored hash
        return False


def create_access_token(user, expires_minutes: Optional[int] = None) -> str:
    expire = datetime.now(timezone.utc) + timedelta(
        minutes=expires_minutes if expires_minutes is not None else Config.ACCESS_TOKEN_EXPIRE_MINUTES
    )
    claims = {
        "sub": str(user.id),
        "email": user.email,
        "name": user.full_name,
        "role": user.role,
        "iss": Config.JWT_ISSUER,
        "aud": Config.JWT_AUDIENCE,
        "exp": expire,
    }
    return jwt.encode(claims, Config.JWT_SECRET_KEY, algorithm=Config.JWT_ALGORITHM)


def decode_access_token(token: str) -> dict:
    try:
        payload = jwt.decode(
            token,
            Config.JWT_SECRET_KEY,
            algorithms=[Config.JWT_ALGORITHM],
            audience=Config.JWT_AUDIENCE,
            issuer=Config.JWT_ISSUER,
        )
    except JWTError as e:
        raise InvalidTokenError(str(e)) from e
    if not payload.get("sub"):
        raise InvalidTokenError("Token has no subject")
    return payload
