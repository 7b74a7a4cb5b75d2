"""Add event documents table

Revision ID: eventdesk_0002
Revises: eventdesk_0001
Create Date: 2026-10-19

Metadata for files attached to events. The file bytes live in the
object store under storage_key.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "eventdesk_0002"
down_revision: Union[str, None] = "eventdesk_0001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "documentos_evento",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("evento_id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.String(), nullable=False),
        sa.Column("nome_arquivo", sa.String(), nullable=False),
        sa.Column("tipo_documento", sa.String(), nullable=False, server_default="Outro"),
        sa.Column("mime_type", sa.String(), nullable=False),
        sa.Column("tamanho", sa.Integer(), nullable=False),
        sa.Column("storage_key", sa.String(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["evento_id"], ["eventos.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("storage_key"),
    )
    op.create_index("ix_documentos_evento_evento_id", "documentos_evento", ["evento_id"])
    op.create_index("ix_documentos_evento_user_id", "documentos_evento", ["user_id"])


def downgrade() -> None:
    op.drop_index("ix_documentos_evento_user_id", table_name="documentos_evento")
    op.drop_index("ix_documentos_evento_evento_id", table_name="documentos_evento")
    op.drop_table("documentos_evento")
