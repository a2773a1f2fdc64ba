"""Auth Routes — register, login, logout, password change and the caller's profile.

Invariants:
    - Register and login are gated by feature "auth"
    - Login and register set the HttpOnly access-token cookie; logout clears it
    - Tokens are stateless: logout only clears the cookie on the client
    - Login and register answer with redirect_to: a safe ?redirect= target, else
      /admin for admins and /offers for signers
    - GET /access applies the page-path table to the caller
"""

import logging

from fastapi import APIRouter, Depends, Query, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user, get_optional_user, require_feature
from app.config import get_settings
from app.core import messages
from app.core.domain_types import FeatureName
from app.core.redirects import access_redirect, get_post_login_redirect
from app.infrastructure.database import get_db
from app.models.user import User
from app.schemas.auth import (
    AuthResult, ChangePasswordRequest, LoginRequest, PageAccess, RegisterRequest,
    UserResponse,
)
from app.schemas.common import Envelope
from app.services.auth_service import AuthService, to_user_response

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/auth", tags=["auth"])

auth_enabled = Depends(require_feature(FeatureName.AUTH))


def _with_redirect(request: Request, result: AuthResult) -> AuthResult:
    """?redirect= on the auth call wins; otherwise the role's landing page."""
    result.redirect_to = get_post_login_redirect(str(request.url), result.user.role)
    return result


def _set_session_cookie(response: Response, result: AuthResult) -> None:
    settings = get_settings()
    response.set_cookie(
        settings.auth_cookie_name,
        result.session.access_token,
        max_age=settings.access_token_expire_minutes * 60,
        httponly=True,
        secure=settings.auth_cookie_secure,
        samesite="lax",
        path="/",
    )


@router.post(
    "/register",
    response_model=Envelope[AuthResult],
    status_code=status.HTTP_201_CREATED,
    dependencies=[auth_enabled],
)
async def register(
    body: RegisterRequest, request: Request, response: Response,
    db: AsyncSession = Depends(get_db),
):
    result = _with_redirect(request, await AuthService(db).register(body))
    _set_session_cookie(response, result)
    return Envelope(data=result, message=messages.AUTH_REGISTER_OK)


@router.post(
    "/login", response_model=Envelope[AuthResult], dependencies=[auth_enabled],
)
async def login(
    body: LoginRequest, request: Request, response: Response,
    db: AsyncSession = Depends(get_db),
):
    result = _with_redirect(request, await AuthService(db).login(body))
    _set_session_cookie(response, result)
    return Envelope(data=result, message=messages.AUTH_LOGIN_OK)


@router.post("/logout", response_model=Envelope[None])
async def logout(response: Response):
    response.delete_cookie(get_settings().auth_cookie_name, path="/")
    return Envelope(message=messages.AUTH_LOGOUT_OK)


@router.post("/change-password", response_model=Envelope[None])
async def change_password(
    body: ChangePasswordRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await AuthService(db).change_password(user, body)
    return Envelope(message=messages.AUTH_PASSWORD_CHANGED)


@router.get("/me", response_model=Envelope[UserResponse])
async def me(user: User = Depends(get_current_user)):
    return Envelope(data=to_user_response(user))


@router.get("/access", response_model=Envelope[PageAccess])
async def page_access(
    path: str = Query(..., pattern="^/", max_length=2000),
    user: User | None = Depends(get_optional_user),
):
    redirect_to = access_redirect(user, path)
    return Envelope(data=PageAccess(
        path=path, allowed=redirect_to is None, redirect_to=redirect_to,
    ))
