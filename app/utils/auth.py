from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends, HTTPException, Request, Response
from jose import JWTError, jwt

from app.config import settings
from app.dependencies import get_credential_service
from app.schemas.user import Principal
from app.services.credential_service import CredentialService


def create_session_token(principal: Principal, expires_minutes: int = settings.SESSION_EXPIRE_MINUTES) -> str:
    expire = datetime.now(timezone.utc) + timedelta(minutes=expires_minutes)
    to_encode = {"sub": principal.identity, "role": principal.role, "exp": expire}
    return jwt.encode(to_encode, settings.SESSION_SECRET, algorithm=settings.SESSION_ALGORITHM)


def read_session_token(token: str) -> Optional[Principal]:
    try:
        payload = jwt.decode(token, settings.SESSION_SECRET, algorithms=[settings.SESSION_ALGORITHM])
    except JWTError:
        return None
    username = payload.get("sub")
    if not username:
        return None
    return Principal(identity=username, role=payload.get("role") or "User")


def sign_in(response: Response, principal: Principal) -> None:
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=create_session_token(principal),
        max_age=settings.SESSION_EXPIRE_MINUTES * 60,
        httponly=True,
        samesite="lax",
        secure=settings.SESSION_COOKIE_SECURE,
    )


def sign_out(response: Response) -> None:
    response.delete_cookie(
        key=settings.SESSION_COOKIE_NAME,
        httponly=True,
        samesite="lax",
        secure=settings.SESSION_COOKIE_SECURE,
    )


def get_optional_user(request: Request) -> Optional[Principal]:
    token = request.cookies.get(settings.SESSION_COOKIE_NAME)
    if not token:
        return None
    return read_session_token(token)


def get_current_user(
    user: Optional[Principal] = Depends(get_optional_user),
    credentials: CredentialService = Depends(get_credential_service),
) -> Principal:
    if user is None:
        raise HTTPException(status_code=401, detail="Not authenticated")
    # the cookie only names the user; existence and role come from the store
    stored = credentials.get_user(user.identity)
    if stored is None:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return Principal(identity=stored.username, role=stored.role)


def require_admin(user: Principal = Depends(get_current_user)) -> Principal:
    if not user.is_admin:
        raise HTTPException(status_code=403, detail="Admin only")
    return user
