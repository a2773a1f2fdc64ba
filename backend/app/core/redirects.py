"""Redirect helpers — post-login targets and open-redirect protection.

Invariants:
    - Only same-site relative paths are ever returned as redirect targets
    - Functions are pure string manipulation; no request objects
    - access_redirect answers None exactly when can_access_path allows the page
"""

from urllib.parse import parse_qs, urlencode, urlsplit

from app.core.domain_types import UserRole
from app.core.repository_protocols import UserLike
from app.core.roles import ADMIN_PATH_PREFIX, can_access_path

_AUTH_PAGES = ("/login", "/register", "/forgot-password", "/reset-password")
_PUBLIC_PAGES = ("/", "/about", "/contact")
_BLOCKED_FRAGMENTS = ("/api/", "javascript:", "data:", "vbscript:")


def is_allowed_redirect(url: str) -> bool:
    """True when url is a safe relative path on this site."""
    if not url.startswith("/") or url.startswith("//"):
        return False
    if any(ch in url for ch in ("\\", "\n", "\r")):
        return False
    lowered = url.lower()
    return not any(fragment in lowered for fragment in _BLOCKED_FRAGMENTS)


def should_preserve_redirect(path: str) -> bool:
    """Auth and public pages are never worth returning to after login."""
    return path not in _AUTH_PAGES and path not in _PUBLIC_PAGES


def build_redirect_url(target_path: str, return_path: str | None = None) -> str:
    """target_path, with ?redirect=return_path when the return path is worth keeping."""
    if not return_path or return_path == target_path:
        return target_path
    if should_preserve_redirect(return_path):
        return f"{target_path}?{urlencode({'redirect': return_path})}"
    return target_path


def get_redirect_target(url: str, default_path: str = "/") -> str:
    """Sanitized ``redirect`` query parameter of url, or default_path."""
    values = parse_qs(urlsplit(url).query).get("redirect")
    if not values:
        return default_path
    candidate = values[0]
    return candidate if is_allowed_redirect(candidate) else default_path


def get_post_login_redirect(url: str, role: str) -> str:
    """Explicit redirect wins; otherwise admins land on /admin, signers on /offers."""
    explicit = get_redirect_target(url, "")
    if explicit:
        return explicit
    if role == UserRole.ADMIN:
        return "/admin"
    return "/offers"


def access_redirect(user: UserLike | None, url: str) -> str | None:
    """Where to send the caller instead of url, or None when the page may be shown.

    Visitors go to /login carrying the page as ?redirect=; signed-in users on a
    visitor-only page go where they would after login; non-admins on /admin/*
    go to /unauthorized.
    """
    path = urlsplit(url).path or "/"
    if can_access_path(user, path):
        return None
    if user is None:
        return build_redirect_url("/login", path)
    if path.startswith(ADMIN_PATH_PREFIX):
        return "/unauthorized"
    return get_post_login_redirect(url, user.role)
