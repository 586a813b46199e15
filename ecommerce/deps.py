# ecommerce/deps.py
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from .config import Config
from .models import ROLE_ADMIN
from .security import decode_access_token, InvalidTokenError

security = HTTPBearer(auto_error=False)


@dataclass
class CurrentUser:
    id: int
    email: str
    full_name: str
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN


def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> CurrentUser:
    # Cookie first, bearer header as fallback for non-browser clients
    token = request.cookies.get(Config.AUTH_COOKIE_NAME)
    if not token and credentials is not None:
        token = credentials.credentials
    if not token:
        raise HTTPException(status_code=401, detail="Missing auth token")
    try:
        payload = decode_access_token(token)
        user_id = int(payload["sub"])
    except (InvalidTokenError, ValueError):
        raise HTTPException(status_code=401, detail="Invalid token")
    return CurrentUser(
        id=user_id,
        email=payload.get("email", ""),
        full_name=payload.get("name", ""),
        role=payload.get("role", ""),
    )


def require_admin(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    if not user.is_admin:
        raise HTTPException(status_code=403, detail="Admin role required")
    return user
