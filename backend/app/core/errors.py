"""Error Hierarchy — typed, categorized exceptions for every marketplace failure mode.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - category is the explicit kind the HTTP boundary switches on; message text is never parsed
    - Domain errors (400-level) are recoverable; infrastructure errors (500-level) are critical
    - Messages are user-facing (Polish) and never carry internal details

Design Decisions:
    - Single hierarchy with MarketplaceError base: FastAPI global handler catches all
      (ADR: uniform error shape, replaces substring matching on messages)
    - ErrorContext carries the ids known at the raise site; the handler logs them
"""

from dataclasses import dataclass
from enum import Enum
from uuid import UUID


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories — the kind the API layer maps to a status code."""
    VALIDATION = "validation"
    BUSINESS_RULE = "business_rule"
    AUTHENTICATION = "authentication"
    FORBIDDEN = "forbidden"
    RESOURCE_NOT_FOUND = "resource_not_found"
    CONFLICT = "conflict"
    FEATURE_DISABLED = "feature_disabled"
    DATABASE = "database"
    STORAGE = "storage"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Identifiers of the caller and records involved; logged, never returned."""
    user_id: UUID | None = None
    offer_id: UUID | None = None
    investment_id: UUID | None = None

    def log_fields(self) -> dict[str, str]:
        return {
            name: str(value)
            for name, value in (
                ("user_id", self.user_id),
                ("offer_id", self.offer_id),
                ("investment_id", self.investment_id),
            )
            if value is not None
        }


class MarketplaceError(Exception):
    """Base exception for all marketplace errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
        details: list[dict] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status
        self.details = details

    def to_response(self) -> dict:
        """Convert to the standard REST envelope."""
        body = {
            "error": self.code,
            "message": self.message,
            "category": self.category.value,
        }
        if self.details:
            body["details"] = self.details
        return body


# ─── Domain Errors (400-level) ──────────────────────────────────

class ValidationError(MarketplaceError):
    """Input failed a rule that schemas cannot express on their own."""
    def __init__(
        self, message: str, field: str | None = None, context: ErrorContext | None = None,
    ):
        details = [{"field": field, "message": message}] if field else None
        super().__init__(
            message, "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400, details,
        )
        self.field = field


class BusinessRuleError(MarketplaceError):
    """A business rule rejected an otherwise well-formed request."""
    def __init__(self, message: str, rule: str, context: ErrorContext | None = None):
        super().__init__(
            message, "BUSINESS_RULE_VIOLATION", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.ERROR, context, 400,
        )
        self.rule = rule


class InvalidStatusTransitionError(MarketplaceError):
    """Requested status change is not an edge of the transition table."""
    def __init__(
        self, message: str, current: str, requested: str,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, "INVALID_STATUS_TRANSITION", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.ERROR, context, 400,
        )
        self.current = current
        self.requested = requested


class AuthenticationError(MarketplaceError):
    """Caller is not authenticated or credentials are wrong."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "UNAUTHORIZED", ErrorCategory.AUTHENTICATION,
            ErrorSeverity.WARNING, context, 401,
        )


class ForbiddenError(MarketplaceError):
    """Caller is authenticated but lacks the role or ownership required."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "FORBIDDEN", ErrorCategory.FORBIDDEN,
            ErrorSeverity.WARNING, context, 403,
        )


class ResourceNotFoundError(MarketplaceError):
    """Requested resource does not exist."""
    def __init__(
        self, resource_type: str, resource_id: str, message: str | None = None,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message or f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


class ConflictError(MarketplaceError):
    """Write collides with existing state (e.g. duplicate email)."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "CONFLICT", ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, context, 409,
        )


class FeatureDisabledError(MarketplaceError):
    """Feature flag is switched off for the current environment."""
    def __init__(self, feature: str, context: ErrorContext | None = None):
        super().__init__(
            f"Funkcja '{feature}' jest obecnie niedostępna",
            "FEATURE_DISABLED", ErrorCategory.FEATURE_DISABLED,
            ErrorSeverity.WARNING, context, 503,
        )
        self.feature = feature


# ─── Infrastructure Errors (500-level) ──────────────────────────

class DatabaseError(MarketplaceError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            message, "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 500,
        )
        self.operation = operation


class StorageError(MarketplaceError):
    """File storage backend failed to write, read or remove a file."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            message, "STORAGE_ERROR", ErrorCategory.STORAGE,
            ErrorSeverity.CRITICAL, context, 500,
        )
        self.operation = operation
