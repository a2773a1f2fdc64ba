"""Investment File Rules — upload eligibility, metadata limits, storage keys.

Tests:
    - Only accepted investments take uploads
    - Metadata: name length, empty and oversized files, MIME allow-list
    - Storage keys: "<investment_id>/<millis>-<name>" with path parts stripped
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from uuid import UUID, uuid4

import pytest

from app.core import messages
from app.core.enforce_files import (
    MAX_FILE_SIZE, build_file_path, check_file_metadata, check_upload_allowed,
    safe_file_name,
)
from app.core.errors import BusinessRuleError, ValidationError

PDF = "application/pdf"


@dataclass
class _Investment:
    status: str
    id: UUID | None = None
    user_id: UUID | None = None


@pytest.mark.parametrize("status", ["pending", "rejected", "completed", "cancelled"])
def test_upload_needs_accepted_investment(status):
    investment = _Investment(status=status, id=uuid4())
    with pytest.raises(BusinessRuleError) as exc:
        check_upload_allowed(investment)
    assert exc.value.message == messages.FILE_REQUIRES_ACCEPTED
    assert exc.value.context.investment_id == investment.id


def test_accepted_investment_takes_uploads():
    check_upload_allowed(_Investment(status="accepted", id=uuid4()))


@pytest.mark.parametrize("name,size,mime,field", [
    ("", 10, PDF, "file_name"),
    ("a" * 256, 10, PDF, "file_name"),
    ("umowa.pdf", 0, PDF, "file_size"),
    ("umowa.pdf", MAX_FILE_SIZE + 1, PDF, "file_size"),
    ("skrypt.sh", 10, "application/x-sh", "file_type"),
    ("bez_typu", 10, None, "file_type"),
])
def test_bad_metadata_is_reported_on_its_field(name, size, mime, field):
    with pytest.raises(ValidationError) as exc:
        check_file_metadata(name, size, mime)
    assert exc.value.field == field


def test_limits_are_inclusive():
    check_file_metadata("a" * 255, MAX_FILE_SIZE, PDF)
    check_file_metadata("notatka.txt", 1, "text/plain")


def test_too_large_message_names_the_limit():
    with pytest.raises(ValidationError) as exc:
        check_file_metadata("skan.png", MAX_FILE_SIZE + 1, "image/png")
    assert "10 MB" in exc.value.message


def test_safe_file_name_drops_directories_and_odd_characters():
    assert safe_file_name("../../etc/passwd") == "passwd"
    assert safe_file_name("umowa końcowa.pdf") == "umowa końcowa.pdf"
    assert safe_file_name("a;b|c.pdf") == "a_b_c.pdf"
    assert safe_file_name("..") == "file"


def test_build_file_path_prefixes_investment_and_millis():
    investment_id = uuid4()
    now = datetime(2026, 5, 1, 12, 0, tzinfo=timezone.utc)
    path = build_file_path(investment_id, "umowa.pdf", now)
    assert path == f"{investment_id}/{int(now.timestamp() * 1000)}-umowa.pdf"
