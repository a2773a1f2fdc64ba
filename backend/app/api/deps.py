"""Request Dependencies — caller identity, role gates and feature-flag gates.

Invariants:
    - The access token is read from the Authorization: Bearer header first, then
      from the auth cookie set at login
    - Missing or invalid token -> AuthenticationError (401); a role predicate
      from core/roles refusing the caller -> ForbiddenError (403); disabled
      feature -> FeatureDisabledError (503)
    - The user row is loaded fresh per request; role changes apply immediately

Design Decisions:
    - Feature flags come from get_feature_flags() (resolved once per process) and
      are overridable in tests through dependency_overrides
"""

import logging
from typing import Callable
from uuid import UUID

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import get_feature_flags, get_settings
from app.core import messages
from app.core.domain_types import FeatureName
from app.core.errors import (
    AuthenticationError, ErrorContext, FeatureDisabledError, ForbiddenError,
)
from app.core.feature_flags import FeatureFlags
from app.core.roles import can_invest, is_admin
from app.infrastructure.database import get_db
from app.infrastructure.security import decode_access_token
from app.models.user import User
from app.services.auth_service import AuthService

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def _extract_token(
    request: Request, credentials: HTTPAuthorizationCredentials | None,
) -> str | None:
    if credentials and credentials.credentials:
        return credentials.credentials
    return request.cookies.get(get_settings().auth_cookie_name)


async def get_optional_user(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db),
) -> User | None:
    """Resolve the caller, or None for anonymous requests."""
    token = _extract_token(request, credentials)
    if not token:
        return None
    payload = decode_access_token(token)
    if payload is None:
        raise AuthenticationError(messages.AUTH_INVALID_TOKEN)
    try:
        user_id = UUID(payload["sub"])
    except ValueError:
        raise AuthenticationError(messages.AUTH_INVALID_TOKEN)
    user = await AuthService(db).get_user(user_id)
    if user is None:
        raise AuthenticationError(messages.AUTH_INVALID_TOKEN)
    return user


async def get_current_user(
    user: User | None = Depends(get_optional_user),
) -> User:
    if user is None:
        raise AuthenticationError(messages.AUTH_REQUIRED)
    return user


def require_permission(
    allowed: Callable[[User], bool], message: str = messages.ADMIN_REQUIRED,
):
    """Build a dependency that admits only callers the predicate allows."""

    async def check_permission(user: User = Depends(get_current_user)) -> User:
        if not allowed(user):
            logger.warning(
                f"{allowed.__name__} refused role {user.role}",
                extra={"user_id": str(user.id)},
            )
            raise ForbiddenError(message, ErrorContext(user_id=user.id))
        return user

    return check_permission


require_admin = require_permission(is_admin)


async def get_investor(user: User | None = Depends(get_optional_user)) -> User:
    if not can_invest(user):
        raise AuthenticationError(messages.AUTH_REQUIRED)
    return user


def require_feature(feature: FeatureName):
    """Build a dependency that rejects requests while `feature` is switched off."""

    async def check_feature(
        flags: FeatureFlags = Depends(get_feature_flags),
    ) -> None:
        lookup = flags.lookup(feature)
        if not lookup.configured:
            logger.warning(
                f"No flag configured for environment {flags.environment.value}, "
                "treating as enabled",
                extra={"feature": feature.value},
            )
        if not lookup.enabled:
            raise FeatureDisabledError(feature.value)

    return check_feature
