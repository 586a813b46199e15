# ecommerce/routers/auth.py
from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from ..config import Config
from ..db import get_db
from ..deps import CurrentUser, get_current_user
from ..schemas import ApiResponse, AuthOut, LoginIn, RegistrationIn
from ..services import auth_service

router = APIRouter(prefix="/api/Auth", tags=["auth"])


def _set_auth_cookie(response: Response, token: str):
    # SameSite=None so the SPA on another origin still sends it
    response.set_cookie(
        key=Config.AUTH_COOKIE_NAME,
        value=token,
        max_age=Config.AUTH_COOKIE_MAX_AGE,
        path="/",
        httponly=True,
        secure=Config.AUTH_COOKIE_SECURE,
        samesite="none",
    )


@router.post("/Login", response_model=ApiResponse[AuthOut])
async def login(payload: LoginIn, response: Response, db: AsyncSession = Depends(get_db)):
    user, token = await auth_service.login(db, payload)
    _set_auth_cookie(response, token)
    return ApiResponse[AuthOut](message="Login successful", data=user)


@router.post("/Register", response_model=ApiResponse[AuthOut])
async def register(payload: RegistrationIn, db: AsyncSession = Depends(get_db)):
    user = await auth_service.register(db, payload)
    return ApiResponse[AuthOut](message="Registration successful", data=user)


@router.post("/Logout")
async def logout(response: Response):
    response.delete_cookie(
        key=Config.AUTH_COOKIE_NAME,
        path="/",
        httponly=True,
        secure=Config.AUTH_COOKIE_SECURE,
        samesite="none",
    )
    return {"message": "Logged out successfully"}


@router.get("/Me", response_model=ApiResponse[AuthOut])
async def me(user: CurrentUser = Depends(get_current_user), db: AsyncSession = Depends(get_db)):
    data = await auth_service.me(db, user.id)
    return ApiResponse[AuthOut](message="User retrieved successfully", data=data)
