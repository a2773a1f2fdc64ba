"""Investment File Service — storage ordering, soft delete and visibility.

Invariants:
    - The row is committed only after the bytes are on disk
    - A failed write leaves neither a row nor a file behind
    - Delete removes the bytes, then hides the row
    - Listing is newest first and skips deleted files
"""

from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import func, select

from app.core import messages
from app.core.errors import (
    BusinessRuleError, ForbiddenError, ResourceNotFoundError, StorageError,
)
from app.infrastructure.file_storage import LocalFileStorage
from app.models.investment_file import InvestmentFile
from app.services.investment_file_service import InvestmentFileService

PDF = "application/pdf"
NOW = datetime(2026, 5, 1, 12, 0, tzinfo=timezone.utc)


class _FailingStorage(LocalFileStorage):
    async def save(self, key: str, data: bytes) -> None:
        raise OSError("disk full")


async def _file_count(db) -> int:
    return (await db.execute(select(func.count(InvestmentFile.id)))).scalar_one()


async def test_upload_stores_bytes_then_row(
    test_db, file_storage, admin_user, signer_user, make_offer, make_investment,
):
    investment = await make_investment(signer_user, await make_offer(), status="accepted")
    service = InvestmentFileService(test_db, file_storage)

    record = await service.upload_file(
        investment.id, admin_user, "umowa.pdf", PDF, b"%PDF-1.4", now=NOW,
    )

    assert record.file_path == (
        f"{investment.id}/{int(NOW.timestamp() * 1000)}-umowa.pdf"
    )
    assert record.file_size == 8
    assert record.uploaded_by == admin_user.id
    assert await file_storage.read(record.file_path) == b"%PDF-1.4"
    assert await _file_count(test_db) == 1


async def test_failed_write_rolls_back_row(
    test_db, tmp_path, admin_user, signer_user, make_offer, make_investment,
):
    investment = await make_investment(signer_user, await make_offer(), status="accepted")
    investment_id = investment.id
    service = InvestmentFileService(test_db, _FailingStorage(tmp_path))

    with pytest.raises(StorageError) as exc:
        await service.upload_file(investment_id, admin_user, "umowa.pdf", PDF, b"x")
    assert exc.value.message == messages.FILE_STORAGE_FAILED
    assert exc.value.context.investment_id == investment_id
    assert await _file_count(test_db) == 0


async def test_pending_investment_takes_no_files(
    test_db, file_storage, admin_user, signer_user, make_offer, make_investment,
):
    investment = await make_investment(signer_user, await make_offer())
    service = InvestmentFileService(test_db, file_storage)

    with pytest.raises(BusinessRuleError):
        await service.upload_file(investment.id, admin_user, "umowa.pdf", PDF, b"x")
    assert await _file_count(test_db) == 0


async def test_list_is_newest_first_and_hides_deleted(
    test_db, file_storage, admin_user, signer_user, make_offer, make_investment,
):
    investment = await make_investment(signer_user, await make_offer(), status="accepted")
    service = InvestmentFileService(test_db, file_storage)
    older = await service.upload_file(
        investment.id, admin_user, "stara.pdf", PDF, b"1", now=NOW,
    )
    newer = await service.upload_file(
        investment.id, admin_user, "nowa.pdf", PDF, b"2", now=NOW + timedelta(seconds=1),
    )

    listed = await service.list_files(investment.id, signer_user)
    assert [f.id for f in listed] == [newer.id, older.id]

    await service.delete_file(investment.id, older.id)
    listed = await service.list_files(investment.id, signer_user)
    assert [f.id for f in listed] == [newer.id]
    assert not (file_storage.root / older.file_path).exists()
    # Soft delete keeps the row
    assert await _file_count(test_db) == 2


async def test_other_signer_cannot_list(
    test_db, file_storage, signer_user, other_signer, make_offer, make_investment,
):
    investment = await make_investment(signer_user, await make_offer(), status="accepted")
    service = InvestmentFileService(test_db, file_storage)

    with pytest.raises(ForbiddenError) as exc:
        await service.list_files(investment.id, other_signer)
    assert exc.value.message == messages.FILE_ACCESS_FORBIDDEN


async def test_deleted_investment_has_no_files(
    test_db, file_storage, signer_user, make_offer, make_investment,
):
    investment = await make_investment(
        signer_user, await make_offer(), status="accepted", deleted=True,
    )
    service = InvestmentFileService(test_db, file_storage)

    with pytest.raises(ResourceNotFoundError):
        await service.list_files(investment.id, signer_user)
