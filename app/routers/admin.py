from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from app.dependencies import get_credential_service
from app.schemas.paging import PagedResult
from app.schemas.user import Principal, RoleUpdateIn, UserSummary
from app.services.credential_service import CredentialService, normalize_username
from app.utils.auth import require_admin

import logging
logger = logging.getLogger("app.admin")


router = APIRouter(prefix="/admin", tags=["Admin"])


@router.get("/users", response_model=PagedResult[UserSummary])
def admin_list_users(
    credentials: CredentialService = Depends(get_credential_service),
    admin: Principal = Depends(require_admin),

    search: Optional[str] = Query(None, description="username contains, case-insensitive"),
    sort_by: Optional[str] = Query(None, description="username / role"),
    sort_ascending: bool = Query(True),

    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
):
    return credentials.list_users(page, page_size, search, sort_by, sort_ascending)


@router.patch("/users/{username}/role", response_model=UserSummary)
def admin_update_role(
    username: str,
    body: RoleUpdateIn,
    credentials: CredentialService = Depends(get_credential_service),
    admin: Principal = Depends(require_admin),
):
    if not credentials.update_role(username, body.role):
        raise HTTPException(status_code=404, detail="User not found")
    logger.info("%s changed role of %s to %s", admin.identity, normalize_username(username), body.role)
    return credentials.get_user(username)


@router.delete("/users/{username}", status_code=status.HTTP_204_NO_CONTENT)
def admin_delete_user(
    username: str,
    credentials: CredentialService = Depends(get_credential_service),
    admin: Principal = Depends(require_admin),
):
    if not credentials.delete_user(username):
        raise HTTPException(status_code=404, detail="User not found")
    logger.info("%s deleted user %s", admin.identity, normalize_username(username))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
