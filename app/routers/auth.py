from fastapi import APIRouter, Depends, HTTPException, Response

from app.dependencies import get_credential_service, get_email_service
from app.services.credential_service import CredentialService, normalize_username
from app.services.email_service import EmailService, build_reset_link
from app.schemas.user import Principal, UserCreate, UserLogin, UserSummary
from app.schemas.password_reset import ForgotPasswordIn, ResetPasswordIn
from app.utils.auth import get_current_user, sign_in, sign_out
from app.utils.hashing import PasswordTooLongError

import logging
logger = logging.getLogger("app.auth")


router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post("/register")
def register(user_data: UserCreate, credentials: CredentialService = Depends(get_credential_service)):
    try:
        ok = credentials.register(user_data.username, user_data.password)
    except PasswordTooLongError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if not ok:
        raise HTTPException(status_code=409, detail="Username already exists")
    return {"detail": "registered"}


@router.post("/login", response_model=Principal)
def login(body: UserLogin, response: Response, credentials: CredentialService = Depends(get_credential_service)):
    principal = credentials.validate_credentials(body.username, body.password)
    if principal is None:
        logger.warning("Failed login for %s", normalize_username(body.username))
        raise HTTPException(status_code=401, detail="Invalid credentials")

    sign_in(response, principal)
    return principal


@router.post("/logout")
def logout(response: Response):
    sign_out(response)
    return {"detail": "signed out"}


@router.get("/me", response_model=UserSummary)
def get_me(user: Principal = Depends(get_current_user)):
    return UserSummary(username=user.identity, role=user.role)


@router.post("/forgot-password")
def forgot_password(
    body: ForgotPasswordIn,
    credentials: CredentialService = Depends(get_credential_service),
    email: EmailService = Depends(get_email_service),
):
    username = normalize_username(body.username)
    token = credentials.generate_password_reset_token(username)
    if token is not None:
        email.send_password_reset_email(username, build_reset_link(username, token))
    else:
        logger.info("Reset requested for unknown user %s", username)

    # same answer either way, so existence is not revealed
    return {"detail": "If the account exists, a reset link has been sent"}


@router.post("/reset-password")
def reset_password(body: ResetPasswordIn, credentials: CredentialService = Depends(get_credential_service)):
    try:
        ok = credentials.reset_password(body.username, body.token, body.new_password)
    except PasswordTooLongError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if not ok:
        raise HTTPException(status_code=400, detail="Invalid or expired token")
    return {"detail": "Password reset"}
