"""Create event management tables

Revision ID: eventdesk_0001
Revises:
Create Date: 2026-10-19

Creates clients, suppliers, events, receivables, payables, checklist
templates, template tasks and event tasks. Every table carries user_id,
the owner id issued by the identity provider.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "eventdesk_0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _payment_schedule_columns():
    return [
        sa.Column("descricao", sa.String(), nullable=False),
        sa.Column("valor", sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column("data_vencimento", sa.Date(), nullable=False),
        sa.Column("status_pagamento", sa.String(), nullable=False, server_default="Pendente"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "contratantes",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.String(), nullable=False),
        sa.Column("nome", sa.String(), nullable=False),
        sa.Column("email", sa.String(), nullable=True),
        sa.Column("telefone", sa.String(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_contratantes_user_id", "contratantes", ["user_id"])

    op.create_table(
        "fornecedores",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.String(), nullable=False),
        sa.Column("nome_fornecedor", sa.String(), nullable=False),
        sa.Column("tipo_servico", sa.String(), nullable=True),
        sa.Column("email_contato", sa.String(), nullable=True),
        sa.Column("telefone_contato", sa.String(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_fornecedores_user_id", "fornecedores", ["user_id"])

    op.create_table(
        "eventos",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.String(), nullable=False),
        sa.Column("contratante_id", sa.Integer(), nullable=True),
        sa.Column("nome_evento", sa.String(), nullable=False),
        sa.Column("data_evento", sa.Date(), nullable=False),
        sa.Column("valor_total_receber", sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column("valor_total_custos", sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column("status_evento", sa.String(), nullable=False, server_default="Planejamento"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["contratante_id"], ["contratantes.id"], ondelete="SET NULL"),
    )
    op.create_index("ix_eventos_user_id", "eventos", ["user_id"])
    op.create_index("ix_eventos_contratante_id", "eventos", ["contratante_id"])
    op.create_index("ix_eventos_user_data", "eventos", ["user_id", "data_evento"])

    op.create_table(
        "vencimentos_receber",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.String(), nullable=False),
        sa.Column("evento_id", sa.Integer(), nullable=False),
        *_payment_schedule_columns(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["evento_id"], ["eventos.id"], ondelete="CASCADE"),
    )
    op.create_index("ix_vencimentos_receber_user_id", "vencimentos_receber", ["user_id"])
    op.create_index("ix_vencimentos_receber_evento_id", "vencimentos_receber", ["evento_id"])
    op.create_index("ix_vencimentos_receber_user_vencimento", "vencimentos_receber", ["user_id", "data_vencimento"])

    op.create_table(
        "vencimentos_pagar",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.String(), nullable=False),
        sa.Column("evento_id", sa.Integer(), nullable=False),
        sa.Column("fornecedor_id", sa.Integer(), nullable=True),
        *_payment_schedule_columns(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["evento_id"], ["eventos.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["fornecedor_id"], ["fornecedores.id"], ondelete="SET NULL"),
    )
    op.create_index("ix_vencimentos_pagar_user_id", "vencimentos_pagar", ["user_id"])
    op.create_index("ix_vencimentos_pagar_evento_id", "vencimentos_pagar", ["evento_id"])
    op.create_index("ix_vencimentos_pagar_fornecedor_id", "vencimentos_pagar", ["fornecedor_id"])
    op.create_index("ix_vencimentos_pagar_user_vencimento", "vencimentos_pagar", ["user_id", "data_vencimento"])

    op.create_table(
        "templates_checklist",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.String(), nullable=False),
        sa.Column("nome_template", sa.String(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_templates_checklist_user_id", "templates_checklist", ["user_id"])

    op.create_table(
        "tarefas_template",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("template_id", sa.Integer(), nullable=False),
        sa.Column("descricao_tarefa", sa.String(), nullable=False),
        sa.Column("prazo_relativo_dias", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("tipo_prazo", sa.String(), nullable=False, server_default="antes"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["template_id"], ["templates_checklist.id"], ondelete="CASCADE"),
        sa.CheckConstraint("prazo_relativo_dias >= 0", name="ck_tarefas_template_prazo_nao_negativo"),
    )
    op.create_index("ix_tarefas_template_template_id", "tarefas_template", ["template_id"])

    op.create_table(
        "tarefas_evento",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("evento_id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.String(), nullable=False),
        sa.Column("descricao_tarefa", sa.String(), nullable=False),
        sa.Column("data_vencimento", sa.Date(), nullable=False),
        sa.Column("is_concluida", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["evento_id"], ["eventos.id"], ondelete="CASCADE"),
    )
    op.create_index("ix_tarefas_evento_evento_id", "tarefas_evento", ["evento_id"])
    op.create_index("ix_tarefas_evento_user_id", "tarefas_evento", ["user_id"])


def downgrade() -> None:
    op.drop_table("tarefas_evento")
    op.drop_table("tarefas_template")
    op.drop_table("templates_checklist")
    op.drop_table("vencimentos_pagar")
    op.drop_table("vencimentos_receber")
    op.drop_table("eventos")
    op.drop_table("fornecedores")
    op.drop_table("contratantes")
