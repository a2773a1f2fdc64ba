"""Investment File Routes — list, upload, download and delete investment documents.

Invariants:
    - GET list and GET download: investment owner or admin
    - POST upload (multipart field "file") and DELETE: can_manage_investments
    - Download streams the stored bytes with the recorded MIME type and an
      RFC 5987 attachment filename, so non-ASCII names survive the header
"""

import logging
from urllib.parse import quote
from uuid import UUID

from fastapi import APIRouter, Depends, File, Response, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user, require_permission
from app.core import messages
from app.core.roles import can_manage_investments
from app.infrastructure.database import get_db
from app.infrastructure.file_storage import LocalFileStorage, get_file_storage
from app.models.user import User
from app.schemas.common import Envelope
from app.schemas.investment_file import InvestmentFileResponse
from app.services.investment_file_service import InvestmentFileService

logger = logging.getLogger(__name__)
router = APIRouter(
    prefix="/api/investments/{investment_id}/files", tags=["investment-files"],
)

file_manager = Depends(
    require_permission(can_manage_investments, messages.FILE_MANAGE_FORBIDDEN),
)


def _service(
    db: AsyncSession = Depends(get_db),
    storage: LocalFileStorage = Depends(get_file_storage),
) -> InvestmentFileService:
    return InvestmentFileService(db, storage)


@router.get("", response_model=Envelope[list[InvestmentFileResponse]])
async def list_files(
    investment_id: UUID,
    user: User = Depends(get_current_user),
    service: InvestmentFileService = Depends(_service),
):
    return Envelope(data=await service.list_files(investment_id, user))


@router.post(
    "",
    response_model=Envelope[InvestmentFileResponse],
    status_code=status.HTTP_201_CREATED,
)
async def upload_file(
    investment_id: UUID,
    file: UploadFile = File(...),
    admin: User = file_manager,
    service: InvestmentFileService = Depends(_service),
):
    data = await file.read()
    record = await service.upload_file(
        investment_id, admin, file.filename or "", file.content_type, data,
    )
    return Envelope(data=record, message=messages.FILE_UPLOADED)


@router.get("/{file_id}")
async def download_file(
    investment_id: UUID,
    file_id: UUID,
    user: User = Depends(get_current_user),
    service: InvestmentFileService = Depends(_service),
):
    record, data = await service.read_file(investment_id, file_id, user)
    return Response(
        content=data,
        media_type=record.file_type or "application/octet-stream",
        headers={
            "Content-Disposition": (
                f"attachment; filename*=UTF-8''{quote(record.file_name)}"
            ),
        },
    )


@router.delete("/{file_id}", response_model=Envelope[None])
async def delete_file(
    investment_id: UUID,
    file_id: UUID,
    admin: User = file_manager,
    service: InvestmentFileService = Depends(_service),
):
    await service.delete_file(investment_id, file_id)
    return Envelope(message=messages.FILE_DELETED)
