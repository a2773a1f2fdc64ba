"""Auth Service — registration, login, password change and admin bootstrap.

Invariants:
    - Emails are compared lower-cased; one account per email
    - Registration always creates a signer; admins come only from create_admin
    - Login failures never reveal whether the email exists
    - Issued tokens carry user id and role; the role is re-read from the DB per request
"""

import logging
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core import messages
from app.core.domain_types import UserRole
from app.core.errors import AuthenticationError, ConflictError, ValidationError
from app.core.roles import is_signer
from app.infrastructure.security import (
    create_access_token, hash_password, verify_password,
)
from app.models.user import User
from app.schemas.auth import (
    AuthResult, ChangePasswordRequest, LoginRequest, RegisterRequest,
    SessionToken, UserResponse,
)

logger = logging.getLogger(__name__)


def to_user_response(user: User) -> UserResponse:
    return UserResponse(
        id=user.id, email=user.email, first_name=user.first_name,
        last_name=user.last_name, role=user.role,
        created_at=user.created_at, updated_at=user.updated_at,
    )


def issue_session(user: User) -> SessionToken:
    token, expire = create_access_token(str(user.id), user.role)
    return SessionToken(access_token=token, expires_at=int(expire.timestamp()))


class AuthService:
    """Account operations for one request-scoped session."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_user(self, user_id: UUID) -> User | None:
        return await self.db.get(User, user_id)

    async def get_user_by_email(self, email: str) -> User | None:
        result = await self.db.execute(
            select(User).where(User.email == email.strip().lower()),
        )
        return result.scalar_one_or_none()

    async def register(self, data: RegisterRequest) -> AuthResult:
        if await self.get_user_by_email(data.email):
            raise ConflictError(messages.AUTH_EMAIL_TAKEN)
        user = User(
            email=data.email,
            password_hash=hash_password(data.password),
            first_name=data.first_name,
            last_name=data.last_name,
            role=UserRole.SIGNER.value,
        )
        self.db.add(user)
        try:
            await self.db.commit()
        except IntegrityError:
            # Concurrent registration with the same email
            await self.db.rollback()
            raise ConflictError(messages.AUTH_EMAIL_TAKEN)
        logger.info("User registered", extra={"user_id": user.id})
        return AuthResult(user=to_user_response(user), session=issue_session(user))

    async def login(self, data: LoginRequest) -> AuthResult:
        user = await self.get_user_by_email(data.email)
        if user is None or not verify_password(data.password, user.password_hash):
            logger.info("Login rejected: invalid credentials")
            raise AuthenticationError(messages.AUTH_INVALID_CREDENTIALS)
        logger.info("User logged in", extra={"user_id": user.id})
        return AuthResult(user=to_user_response(user), session=issue_session(user))

    async def change_password(
        self, user: User, data: ChangePasswordRequest,
    ) -> None:
        if not verify_password(data.current_password, user.password_hash):
            raise ValidationError(
                messages.AUTH_WRONG_CURRENT_PASSWORD, field="current_password",
            )
        user.password_hash = hash_password(data.new_password)
        await self.db.commit()
        logger.info("Password changed", extra={"user_id": user.id})

    async def create_admin(
        self, email: str, password: str,
        first_name: str | None = None, last_name: str | None = None,
    ) -> User:
        """Create an admin account, or promote and re-key an existing one."""
        user = await self.get_user_by_email(email)
        if user is None:
            user = User(
                email=email.strip().lower(),
                first_name=first_name,
                last_name=last_name,
                password_hash=hash_password(password),
                role=UserRole.ADMIN.value,
            )
            self.db.add(user)
        else:
            if is_signer(user):
                logger.info(
                    f"Promoting signer {user.email} to admin",
                    extra={"user_id": user.id},
                )
            user.role = UserRole.ADMIN.value
            user.password_hash = hash_password(password)
        await self.db.commit()
        logger.info(f"Admin account ready: {user.email}", extra={"user_id": user.id})
        return user
