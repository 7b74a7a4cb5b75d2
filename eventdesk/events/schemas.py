"""Pydantic schemas for events and event tasks."""
from pydantic import BaseModel, Field, field_validator
from datetime import date, datetime
from decimal import Decimal
from typing import Literal, Optional

from eventdesk.schemas import Money
from eventdesk.services.text import sanitize_string

EventStatusLiteral = Literal["Planejamento", "Confirmado", "Concluído", "Cancelado"]


def _required_text(value: str) -> str:
    cleaned = sanitize_string(value)
    if not cleaned:
        raise ValueError("must not be blank")
    return cleaned


class EventCreate(BaseModel):
    """Schema for creating an event."""
    contratante_id: Optional[int] = None
    nome_evento: str = Field(..., min_length=1)
    data_evento: date
    valor_total_receber: Decimal = Field(..., ge=0, max_digits=12, decimal_places=2)
    valor_total_custos: Decimal = Field(default=Decimal("0"), ge=0, max_digits=12, decimal_places=2)
    status_evento: EventStatusLiteral = "Planejamento"

    @field_validator("nome_evento")
    @classmethod
    def clean_name(cls, v: str) -> str:
        return _required_text(v)


class EventResponse(BaseModel):
    """Schema for event response."""
    id: int
    user_id: str
    contratante_id: Optional[int] = None
    nome_evento: str
    data_evento: date
    valor_total_receber: Money
    valor_total_custos: Money
    status_evento: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    contratante_nome: Optional[str] = None

    model_config = {"from_attributes": True}


class EventDetailResponse(EventResponse):
    """Event with its client's contact details."""
    contratante_email: Optional[str] = None
    contratante_telefone: Optional[str] = None


class EventTaskCreate(BaseModel):
    """Schema for creating a manual event task."""
    descricao_tarefa: str = Field(..., min_length=1)
    data_vencimento: date
    is_concluida: bool = False

    @field_validator("descricao_tarefa")
    @classmethod
    def clean_description(cls, v: str) -> str:
        return _required_text(v)


class EventTaskUpdate(BaseModel):
    """Schema for updating an event task. Omitted fields stay unchanged."""
    descricao_tarefa: Optional[str] = Field(default=None, min_length=1)
    data_vencimento: Optional[date] = None
    is_concluida: Optional[bool] = None

    @field_validator("descricao_tarefa")
    @classmethod
    def clean_description(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        return _required_text(v)


class EventTaskResponse(BaseModel):
    """Schema for event task response."""
    id: int
    evento_id: int
    user_id: str
    descricao_tarefa: str
    data_vencimento: date
    is_concluida: bool
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class EventDocumentResponse(BaseModel):
    """Document metadata; the bytes are served by the download endpoint."""
    id: int
    evento_id: int
    nome_arquivo: str
    tipo_documento: str
    mime_type: str
    tamanho: int
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
