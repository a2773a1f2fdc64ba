"""Investment File Schemas — metadata of documents attached to an investment."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel


class InvestmentFileResponse(BaseModel):
    id: UUID
    investment_id: UUID
    file_name: str
    file_path: str
    file_size: int
    file_type: str
    uploaded_by: UUID
    created_at: datetime
