"""Checklist template and event task models."""
from sqlalchemy import Column, String, DateTime, Date, Integer, Boolean, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import false, func

from eventdesk.database import Base
from eventdesk.models.enums import DeadlineDirection


class ChecklistTemplate(Base):
    """Reusable, ordered list of task blueprints."""

    __tablename__ = "templates_checklist"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String, nullable=False, index=True)
    nome_template = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    # Relationships
    tasks = relationship(
        "TemplateTask",
        back_populates="template",
        cascade="all, delete-orphan",
        order_by="TemplateTask.id",
    )


class TemplateTask(Base):
    """One blueprint entry: description plus a day offset relative to the event date."""

    __tablename__ = "tarefas_template"

    id = Column(Integer, primary_key=True, autoincrement=True)
    template_id = Column(Integer, ForeignKey("templates_checklist.id", ondelete="CASCADE"), nullable=False, index=True)

    descricao_tarefa = Column(String, nullable=False)
    prazo_relativo_dias = Column(Integer, nullable=False, default=0, server_default="0")  # always >= 0
    tipo_prazo = Column(String, nullable=False, default=DeadlineDirection.ANTES.value, server_default=DeadlineDirection.ANTES.value)  # "antes" | "depois"

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    # Relationships
    template = relationship("ChecklistTemplate", back_populates="tasks")

    __table_args__ = (
        CheckConstraint("prazo_relativo_dias >= 0", name="ck_tarefas_template_prazo_nao_negativo"),
    )


class EventTask(Base):
    """Concrete, dated to-do for one event, entered manually or generated from a template."""

    __tablename__ = "tarefas_evento"

    id = Column(Integer, primary_key=True, autoincrement=True)
    evento_id = Column(Integer, ForeignKey("eventos.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(String, nullable=False, index=True)

    descricao_tarefa = Column(String, nullable=False)
    data_vencimento = Column(Date, nullable=False)
    is_concluida = Column(Boolean, nullable=False, default=False, server_default=false())

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    # Relationships
    event = relationship("Event", back_populates="tasks")
