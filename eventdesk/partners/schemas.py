"""Pydantic schemas for client and supplier overviews."""
from pydantic import BaseModel
from datetime import date, datetime
from typing import List, Optional

from eventdesk.events.schemas import EventResponse
from eventdesk.schemas import Money


class ClientResponse(BaseModel):
    id: int
    user_id: str
    nome: str
    email: Optional[str] = None
    telefone: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class ClientStats(BaseModel):
    totalEventos: int
    totalReceita: Money
    totalLucro: Money
    margemMedia: Money
    ultimoEvento: Optional[EventResponse] = None
    proximoEvento: Optional[EventResponse] = None


class ClientOverviewResponse(BaseModel):
    contratante: ClientResponse
    eventos: List[EventResponse]
    stats: ClientStats


class SupplierResponse(BaseModel):
    id: int
    user_id: str
    nome_fornecedor: str
    tipo_servico: Optional[str] = None
    email_contato: Optional[str] = None
    telefone_contato: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class SupplierPayable(BaseModel):
    """Payable owed to the supplier, with its event name."""
    id: int
    evento_id: int
    fornecedor_id: Optional[int] = None
    descricao: str
    valor: Money
    data_vencimento: date
    status_pagamento: str
    evento_nome: Optional[str] = None


class SupplierStats(BaseModel):
    totalPagamentos: int
    totalPago: Money
    totalPendente: Money
    proximoPagamento: Optional[SupplierPayable] = None


class SupplierOverviewResponse(BaseModel):
    fornecedor: SupplierResponse
    compromissos: List[SupplierPayable]
    stats: SupplierStats
