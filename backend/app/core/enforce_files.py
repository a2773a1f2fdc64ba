"""Investment File Rules — upload eligibility, metadata limits and storage keys.

Invariants:
    - All functions are PURE: no IO, no async, no DB; `now` is always passed in
    - Files may be attached only while the investment is accepted
    - file_name 1-255 chars; size 1 byte to 10 MB; MIME type from ALLOWED_FILE_TYPES
    - Storage keys are "<investment_id>/<epoch millis>-<safe name>" and never
      contain a path separator inside the name part
"""

import re
from datetime import datetime
from pathlib import PurePath
from uuid import UUID

from app.core import messages
from app.core.domain_types import InvestmentStatus
from app.core.errors import BusinessRuleError, ErrorContext, ValidationError
from app.core.repository_protocols import InvestmentLike

MAX_FILE_SIZE = 10 * 1024 * 1024
MAX_FILE_NAME_LENGTH = 255

ALLOWED_FILE_TYPES = frozenset({
    "application/pdf",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "application/vnd.ms-excel",
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    "image/jpeg",
    "image/png",
    "image/jpg",
    "text/plain",
})

_UNSAFE_NAME_CHARS = re.compile(r"[^\w.\- ]")


def check_upload_allowed(investment: InvestmentLike) -> None:
    if investment.status != InvestmentStatus.ACCEPTED:
        raise BusinessRuleError(
            messages.FILE_REQUIRES_ACCEPTED, "investment_not_accepted",
            ErrorContext(investment_id=investment.id),
        )


def check_file_metadata(file_name: str, file_size: int, file_type: str | None) -> None:
    """First failing rule wins, reported on its field."""
    if not file_name:
        raise ValidationError(messages.FILE_NAME_REQUIRED, field="file_name")
    if len(file_name) > MAX_FILE_NAME_LENGTH:
        raise ValidationError(messages.FILE_NAME_TOO_LONG, field="file_name")
    if file_size <= 0:
        raise ValidationError(messages.FILE_EMPTY, field="file_size")
    if file_size > MAX_FILE_SIZE:
        raise ValidationError(
            messages.FILE_TOO_LARGE.format(limit_mb=MAX_FILE_SIZE // (1024 * 1024)),
            field="file_size",
        )
    if file_type not in ALLOWED_FILE_TYPES:
        raise ValidationError(messages.FILE_TYPE_UNSUPPORTED, field="file_type")


def safe_file_name(file_name: str) -> str:
    name = _UNSAFE_NAME_CHARS.sub("_", PurePath(file_name).name).lstrip(".")
    return name or "file"


def build_file_path(investment_id: UUID, file_name: str, now: datetime) -> str:
    millis = int(now.timestamp() * 1000)
    return f"{investment_id}/{millis}-{safe_file_name(file_name)}"
