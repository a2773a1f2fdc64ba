"""Role Predicates — pure "can this user do X" checks.

Invariants:
    - All functions are PURE: no IO, no async, no DB, no side effects
    - An absent user (None) never passes a check that requires authentication
    - Values are evaluated fresh per request; nothing here holds state

Design Decisions:
    - Booleans over exceptions: routes decide between 401 and 403, predicates only answer
    - Path table is static and ordered; the first matching rule wins
"""

from uuid import UUID

from app.core.domain_types import InvestmentStatus, UserRole
from app.core.repository_protocols import UserLike

PUBLIC_PATHS = ("/about", "/contact")
ANONYMOUS_ONLY_PATHS = ("/login", "/register", "/forgot-password")
AUTHENTICATED_PATHS = ("/investments", "/profile", "/offers")
ADMIN_PATH_PREFIX = "/admin"


def _matches(path: str, prefixes: tuple[str, ...]) -> bool:
    return any(path == p or path.startswith(p + "/") for p in prefixes)


def has_role(user: UserLike | None, role: UserRole) -> bool:
    if user is None:
        return False
    return user.role == role


def is_admin(user: UserLike | None) -> bool:
    return has_role(user, UserRole.ADMIN)


def is_signer(user: UserLike | None) -> bool:
    return has_role(user, UserRole.SIGNER)


def can_access_path(user: UserLike | None, path: str) -> bool:
    """Route-level gate for page paths."""
    # Home page is for visitors; signed-in users are sent to their dashboard
    if path == "/":
        return user is None
    if _matches(path, PUBLIC_PATHS):
        return True
    if _matches(path, ANONYMOUS_ONLY_PATHS):
        return user is None
    if path.startswith(ADMIN_PATH_PREFIX):
        return is_admin(user)
    if _matches(path, AUTHENTICATED_PATHS):
        return user is not None
    return True


def can_create_offer(user: UserLike | None) -> bool:
    return is_admin(user)


def can_manage_investments(user: UserLike | None) -> bool:
    """Approve, reject or close investments."""
    return is_admin(user)


def can_invest(user: UserLike | None) -> bool:
    return user is not None


def can_view_investment(user: UserLike | None, owner_id: UUID) -> bool:
    if user is None:
        return False
    return user.id == owner_id or is_admin(user)


def can_cancel_investment(
    user: UserLike | None, owner_id: UUID, status: str,
) -> bool:
    """Owners may withdraw an investment only while it awaits review."""
    if user is None:
        return False
    return user.id == owner_id and status == InvestmentStatus.PENDING
