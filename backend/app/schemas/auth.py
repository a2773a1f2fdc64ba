"""Auth Schemas — login, registration and password change payloads.

Invariants:
    - Password policy: 8-128 chars, at least one uppercase letter, one digit and one
      special character
    - Names: 2-50 chars, letters (Polish diacritics included) and spaces only
    - Emails are stripped and lower-cased before they reach a service
"""

import re
from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, ValidationInfo, field_validator

from app.core import messages

_NAME_RE = re.compile(r"^[A-Za-zĄĆĘŁŃÓŚŹŻąćęłńóśźż\s]+$")
_SPECIAL_RE = re.compile(r"[!@#$%^&*(),.?\":{}|<>]")
MAX_EMAIL_LENGTH = 100


def check_password_policy(value: str) -> str:
    if not re.search(r"[A-Z]", value):
        raise ValueError(messages.PASSWORD_UPPERCASE)
    if not re.search(r"[0-9]", value):
        raise ValueError(messages.PASSWORD_DIGIT)
    if not _SPECIAL_RE.search(value):
        raise ValueError(messages.PASSWORD_SPECIAL)
    return value


def _normalize_email(v):
    return v.strip().lower() if isinstance(v, str) else v


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=8)

    normalize_email = field_validator("email", mode="before")(_normalize_email)


class RegisterRequest(BaseModel):
    first_name: str = Field(min_length=2, max_length=50)
    last_name: str = Field(min_length=2, max_length=50)
    email: EmailStr
    password: str = Field(min_length=8, max_length=128)
    confirm_password: str = Field(min_length=1)

    normalize_email = field_validator("email", mode="before")(_normalize_email)

    @field_validator("email")
    @classmethod
    def email_length(cls, v: str) -> str:
        if len(v) > MAX_EMAIL_LENGTH:
            raise ValueError(messages.EMAIL_TOO_LONG)
        return v

    @field_validator("first_name", "last_name", mode="before")
    @classmethod
    def strip_names(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("first_name", "last_name")
    @classmethod
    def letters_only(cls, v: str) -> str:
        if not _NAME_RE.match(v):
            raise ValueError(messages.NAME_LETTERS_ONLY)
        return v

    @field_validator("password")
    @classmethod
    def password_policy(cls, v: str) -> str:
        return check_password_policy(v)

    @field_validator("confirm_password")
    @classmethod
    def passwords_match(cls, v: str, info: ValidationInfo) -> str:
        password = info.data.get("password")
        if password is not None and v != password:
            raise ValueError(messages.PASSWORDS_MISMATCH)
        return v


class ChangePasswordRequest(BaseModel):
    current_password: str = Field(min_length=1)
    new_password: str = Field(min_length=8, max_length=128)

    @field_validator("new_password")
    @classmethod
    def policy_and_differs(cls, v: str, info: ValidationInfo) -> str:
        check_password_policy(v)
        if v == info.data.get("current_password"):
            raise ValueError(messages.PASSWORD_UNCHANGED)
        return v


class UserResponse(BaseModel):
    id: UUID
    email: str
    first_name: str | None = None
    last_name: str | None = None
    role: str
    created_at: datetime | None = None
    updated_at: datetime | None = None


class SessionToken(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_at: int


class AuthResult(BaseModel):
    user: UserResponse
    session: SessionToken
    redirect_to: str | None = None


class PageAccess(BaseModel):
    """Whether a page may be shown to the caller, and where to go instead."""
    path: str
    allowed: bool
    redirect_to: str | None = None
