# ecommerce/services/auth_service.py
import logging
from typing import Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from .. import crud
from ..errors import BadRequestError, NotFoundError
from ..schemas import AuthOut, LoginIn, RegistrationIn
from ..security import create_access_token, hash_password, verify_password

logger = logging.getLogger(__name__)


async def register(db: AsyncSession, payload: RegistrationIn) -> AuthOut:
    if await crud.email_taken(db, payload.email):
        raise BadRequestError("User with given Email ID is already exists")
    user = await crud.create_user(
        db,
        full_name=payload.full_name.strip(),
        email=payload.email.strip().lower(),
        password_hash=hash_password(payload.password),
        role=payload.role,
    )
    logger.info("Registered user %s with role %s", user.id, user.role)
    return AuthOut.model_validate(user)


async def login(db: AsyncSession, payload: LoginIn) -> Tuple[AuthOut, str]:
    user = await crud.get_user_by_email(db, payload.email)
    if user is None:
        raise BadRequestError("User not Found")
    if not verify_password(payload.password, user.password):
        raise BadRequestError("Password is incorrect")
    token = create_access_token(user)
    return AuthOut.model_validate(user), token


async def me(db: AsyncSession, user_id: int) -> AuthOut:
    user = await crud.get_user_by_id(db, user_id)
    if user is None:
        raise NotFoundError("User not Found")
    return AuthOut.model_validate(user)
