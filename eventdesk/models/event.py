"""Event, client, supplier and payment schedule models."""
from sqlalchemy import Column, String, DateTime, Date, Numeric, Integer, ForeignKey, Index
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from eventdesk.database import Base
from eventdesk.models.enums import EventStatus, PaymentStatus


class Client(Base):
    """Client (contratante) - the party hiring the event."""

    __tablename__ = "contratantes"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String, nullable=False, index=True)

    nome = Column(String, nullable=False)
    email = Column(String, nullable=True)
    telefone = Column(String, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    # Relationships
    events = relationship("Event", back_populates="client")


class Supplier(Base):
    """Supplier (fornecedor) - provides services paid through payables."""

    __tablename__ = "fornecedores"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String, nullable=False, index=True)

    nome_fornecedor = Column(String, nullable=False)
    tipo_servico = Column(String, nullable=True)
    email_contato = Column(String, nullable=True)
    telefone_contato = Column(String, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    # Relationships
    payables = relationship("Payable", back_populates="supplier")


class Event(Base):
    """Event model - a billable occurrence with planned revenue and cost."""

    __tablename__ = "eventos"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String, nullable=False, index=True)
    contratante_id = Column(Integer, ForeignKey("contratantes.id", ondelete="SET NULL"), nullable=True, index=True)

    # Core Fields
    nome_evento = Column(String, nullable=False)
    data_evento = Column(Date, nullable=False)
    valor_total_receber = Column(Numeric(precision=12, scale=2), nullable=False, default=0)
    valor_total_custos = Column(Numeric(precision=12, scale=2), nullable=False, default=0)
    status_evento = Column(String, nullable=False, default=EventStatus.PLANEJAMENTO.value, server_default=EventStatus.PLANEJAMENTO.value)

    # Metadata
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    client = relationship("Client", back_populates="events")
    receivables = relationship("Receivable", back_populates="event")
    payables = relationship("Payable", back_populates="event")
    tasks = relationship("EventTask", back_populates="event")
    documents = relationship("EventDocument", back_populates="event")

    __table_args__ = (
        Index("ix_eventos_user_data", "user_id", "data_evento"),
    )


class Receivable(Base):
    """Receivable (vencimento a receber) - scheduled incoming payment for one event."""

    __tablename__ = "vencimentos_receber"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String, nullable=False, index=True)
    evento_id = Column(Integer, ForeignKey("eventos.id", ondelete="CASCADE"), nullable=False, index=True)

    descricao = Column(String, nullable=False)
    valor = Column(Numeric(precision=12, scale=2), nullable=False)
    data_vencimento = Column(Date, nullable=False)
    status_pagamento = Column(String, nullable=False, default=PaymentStatus.PENDENTE.value, server_default=PaymentStatus.PENDENTE.value)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    # Relationships
    event = relationship("Event", back_populates="receivables")

    __table_args__ = (
        Index("ix_vencimentos_receber_user_vencimento", "user_id", "data_vencimento"),
    )


class Payable(Base):
    """Payable (vencimento a pagar) - scheduled outgoing payment, optionally to a supplier."""

    __tablename__ = "vencimentos_pagar"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String, nullable=False, index=True)
    evento_id = Column(Integer, ForeignKey("eventos.id", ondelete="CASCADE"), nullable=False, index=True)
    fornecedor_id = Column(Integer, ForeignKey("fornecedores.id", ondelete="SET NULL"), nullable=True, index=True)

    descricao = Column(String, nullable=False)
    valor = Column(Numeric(precision=12, scale=2), nullable=False)
    data_vencimento = Column(Date, nullable=False)
    status_pagamento = Column(String, nullable=False, default=PaymentStatus.PENDENTE.value, server_default=PaymentStatus.PENDENTE.value)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    # Relationships
    event = relationship("Event", back_populates="payables")
    supplier = relationship("Supplier", back_populates="payables")

    __table_args__ = (
        Index("ix_vencimentos_pagar_user_vencimento", "user_id", "data_vencimento"),
    )
