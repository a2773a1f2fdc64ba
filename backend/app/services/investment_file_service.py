"""Investment File Service — documents attached to accepted investments.

Invariants:
    - Listing and download: investment owner or admin (can_view_investment)
    - Upload: only while the investment is accepted; metadata checked by
      core/enforce_files before anything is written
    - The metadata row is committed only after the bytes are stored; a storage
      failure rolls the row back
    - Delete removes the stored bytes first, then soft-deletes the row
    - Soft-deleted investments and files are invisible to every read
"""

import logging
from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core import messages
from app.core.enforce_files import (
    build_file_path, check_file_metadata, check_upload_allowed,
)
from app.core.errors import (
    ErrorContext, ForbiddenError, ResourceNotFoundError, StorageError,
)
from app.core.repository_protocols import UserLike
from app.core.roles import can_view_investment
from app.infrastructure.file_storage import LocalFileStorage
from app.models.investment import Investment
from app.models.investment_file import InvestmentFile
from app.schemas.investment_file import InvestmentFileResponse

logger = logging.getLogger(__name__)


def to_file_response(record: InvestmentFile) -> InvestmentFileResponse:
    return InvestmentFileResponse(
        id=record.id,
        investment_id=record.investment_id,
        file_name=record.file_name,
        file_path=record.file_path,
        file_size=record.file_size,
        file_type=record.file_type,
        uploaded_by=record.uploaded_by,
        created_at=record.created_at,
    )


class InvestmentFileService:
    def __init__(self, db: AsyncSession, storage: LocalFileStorage):
        self.db = db
        self.storage = storage

    async def list_files(
        self, investment_id: UUID, user: UserLike,
    ) -> list[InvestmentFileResponse]:
        """Newest first."""
        await self._get_viewable_investment(investment_id, user)
        result = await self.db.execute(
            select(InvestmentFile)
            .where(
                InvestmentFile.investment_id == investment_id,
                InvestmentFile.deleted_at.is_(None),
            )
            .order_by(InvestmentFile.created_at.desc(), InvestmentFile.id),
        )
        return [to_file_response(f) for f in result.scalars().all()]

    async def upload_file(
        self, investment_id: UUID, user: UserLike,
        file_name: str, file_type: str | None, data: bytes,
        now: datetime | None = None,
    ) -> InvestmentFileResponse:
        user_id = user.id
        now = now or datetime.now(timezone.utc)
        investment = await self._get_investment(investment_id)
        check_upload_allowed(investment)
        check_file_metadata(file_name, len(data), file_type)

        record = InvestmentFile(
            investment_id=investment.id,
            file_name=file_name,
            file_path=build_file_path(investment.id, file_name, now),
            file_size=len(data),
            file_type=file_type,
            uploaded_by=user_id,
            created_at=now,
        )
        self.db.add(record)
        await self.db.flush()
        try:
            await self.storage.save(record.file_path, data)
        except OSError as e:
            logger.error(
                f"Storing {record.file_path} failed: {e}",
                extra={"investment_id": investment_id},
            )
            await self.db.rollback()
            raise StorageError(
                messages.FILE_STORAGE_FAILED, "write",
                ErrorContext(user_id=user_id, investment_id=investment_id),
            )
        await self.db.commit()
        logger.info(
            f"File attached: {record.file_name} ({record.file_size} bytes)",
            extra={
                "investment_id": investment_id, "file_id": record.id,
                "user_id": user_id,
            },
        )
        return to_file_response(record)

    async def read_file(
        self, investment_id: UUID, file_id: UUID, user: UserLike,
    ) -> tuple[InvestmentFileResponse, bytes]:
        """Metadata plus stored bytes, for download."""
        await self._get_viewable_investment(investment_id, user)
        record = await self._get_file(investment_id, file_id)
        try:
            data = await self.storage.read(record.file_path)
        except OSError as e:
            logger.error(
                f"Reading {record.file_path} failed: {e}",
                extra={"investment_id": investment_id, "file_id": file_id},
            )
            raise StorageError(
                messages.FILE_STORAGE_FAILED, "read",
                ErrorContext(user_id=user.id, investment_id=investment_id),
            )
        return to_file_response(record), data

    async def delete_file(self, investment_id: UUID, file_id: UUID) -> None:
        record = await self._get_file(investment_id, file_id)
        try:
            await self.storage.delete(record.file_path)
        except OSError as e:
            logger.error(
                f"Removing {record.file_path} failed: {e}",
                extra={"investment_id": investment_id, "file_id": file_id},
            )
            raise StorageError(
                messages.FILE_STORAGE_FAILED, "delete",
                ErrorContext(investment_id=investment_id),
            )
        record.deleted_at = datetime.now(timezone.utc)
        await self.db.commit()
        logger.info(
            f"File removed: {record.file_name}",
            extra={"investment_id": investment_id, "file_id": file_id},
        )

    # ─── Helpers ─────────────────────────────────────────────────

    async def _get_investment(self, investment_id: UUID) -> Investment:
        result = await self.db.execute(
            select(Investment).where(
                Investment.id == investment_id, Investment.deleted_at.is_(None),
            ),
        )
        investment = result.scalar_one_or_none()
        if investment is None:
            raise ResourceNotFoundError(
                "Investment", str(investment_id), messages.INVESTMENT_NOT_FOUND,
                ErrorContext(investment_id=investment_id),
            )
        return investment

    async def _get_viewable_investment(
        self, investment_id: UUID, user: UserLike,
    ) -> Investment:
        investment = await self._get_investment(investment_id)
        if not can_view_investment(user, investment.user_id):
            raise ForbiddenError(
                messages.FILE_ACCESS_FORBIDDEN,
                ErrorContext(user_id=user.id, investment_id=investment_id),
            )
        return investment

    async def _get_file(self, investment_id: UUID, file_id: UUID) -> InvestmentFile:
        result = await self.db.execute(
            select(InvestmentFile).where(
                InvestmentFile.id == file_id,
                InvestmentFile.investment_id == investment_id,
                InvestmentFile.deleted_at.is_(None),
            ),
        )
        record = result.scalar_one_or_none()
        if record is None:
            raise ResourceNotFoundError(
                "InvestmentFile", str(file_id), messages.FILE_NOT_FOUND,
                ErrorContext(investment_id=investment_id),
            )
        return record
