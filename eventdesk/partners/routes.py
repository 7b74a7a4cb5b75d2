"""Client (contratante) and supplier (fornecedor) overview routes."""
from datetime import date

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from eventdesk.auth.dependencies import get_current_owner_id
from eventdesk.database import get_db
from eventdesk.errors import NotFoundError
from eventdesk.events.schemas import EventResponse
from eventdesk.partners.engine import client_overview, supplier_overview
from eventdesk.partners.schemas import (
    ClientOverviewResponse,
    ClientResponse,
    ClientStats,
    SupplierOverviewResponse,
    SupplierPayable,
    SupplierResponse,
    SupplierStats,
)

router = APIRouter()


def _event(event):
    return EventResponse.model_validate(event) if event is not None else None


@router.get("/contratantes/{contratante_id}", response_model=ClientOverviewResponse)
async def get_client_overview(
    contratante_id: int,
    owner_id: str = Depends(get_current_owner_id),
    db: AsyncSession = Depends(get_db),
):
    """Client with its events and revenue/profit stats."""
    try:
        overview = await client_overview(db, contratante_id, owner_id, date.today())
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=e.detail)

    return ClientOverviewResponse(
        contratante=ClientResponse.model_validate(overview.client),
        eventos=[_event(e) for e in overview.events],
        stats=ClientStats(
            totalEventos=overview.total_eventos,
            totalReceita=overview.total_receita,
            totalLucro=overview.total_lucro,
            margemMedia=overview.margem_media,
            ultimoEvento=_event(overview.ultimo_evento),
            proximoEvento=_event(overview.proximo_evento),
        ),
    )


@router.get("/fornecedores/{fornecedor_id}", response_model=SupplierOverviewResponse)
async def get_supplier_overview(
    fornecedor_id: int,
    owner_id: str = Depends(get_current_owner_id),
    db: AsyncSession = Depends(get_db),
):
    """Supplier with its payables and paid/pending totals."""
    try:
        overview = await supplier_overview(db, fornecedor_id, owner_id, date.today())
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=e.detail)

    return SupplierOverviewResponse(
        fornecedor=SupplierResponse.model_validate(overview.supplier),
        compromissos=[SupplierPayable(**p) for p in overview.payables],
        stats=SupplierStats(
            totalPagamentos=overview.total_pagamentos,
            totalPago=overview.total_pago,
            totalPendente=overview.total_pendente,
            proximoPagamento=(
                SupplierPayable(**overview.proximo_pagamento)
                if overview.proximo_pagamento else None
            ),
        ),
    )
