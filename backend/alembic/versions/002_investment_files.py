"""Investment files — documents attached to accepted investments.

Revision ID: 002_investment_files
Revises: 001_initial
Create Date: 2026-10-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID

revision: str = "002_investment_files"
down_revision: Union[str, None] = "001_initial"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "investment_files",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "investment_id", UUID(as_uuid=True),
            sa.ForeignKey("investments.id"), nullable=False,
        ),
        sa.Column("file_name", sa.String(255), nullable=False),
        sa.Column("file_path", sa.String(600), nullable=False),
        sa.Column("file_size", sa.BigInteger, nullable=False),
        sa.Column("file_type", sa.String(100), nullable=False),
        sa.Column("uploaded_by", UUID(as_uuid=True), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index(
        "ix_investment_files_investment_id", "investment_files", ["investment_id"],
    )


def downgrade() -> None:
    op.drop_index("ix_investment_files_investment_id", table_name="investment_files")
    op.drop_table("investment_files")
