"""Per-client and per-supplier overview statistics."""
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from eventdesk.models import Client, Event, Payable, PaymentStatus, Supplier
from eventdesk.services.money import ZERO, percentage, to_decimal
from eventdesk.services.ownership import require_owned_client, require_owned_supplier


@dataclass
class ClientOverview:
    """A client, its events (most recent first) and lifetime figures."""
    client: Client
    events: List[Event] = field(default_factory=list)
    total_receita: Decimal = ZERO
    total_lucro: Decimal = ZERO
    margem_media: Decimal = ZERO
    ultimo_evento: Optional[Event] = None
    proximo_evento: Optional[Event] = None

    @property
    def total_eventos(self) -> int:
        return len(self.events)


@dataclass
class SupplierOverview:
    """A supplier, its payables (latest due date first) and payment figures."""
    supplier: Supplier
    payables: List[Dict[str, Any]] = field(default_factory=list)
    total_pago: Decimal = ZERO
    total_pendente: Decimal = ZERO
    proximo_pagamento: Optional[Dict[str, Any]] = None

    @property
    def total_pagamentos(self) -> int:
        return len(self.payables)


def summarize_client_events(client: Client, events: List[Event], today: date) -> ClientOverview:
    """Lifetime revenue, profit and margin over a client's events."""
    total_receita = sum((to_decimal(e.valor_total_receber) for e in events), ZERO)
    total_lucro = sum(
        (to_decimal(e.valor_total_receber) - to_decimal(e.valor_total_custos) for e in events),
        ZERO,
    )
    upcoming = [e for e in events if e.data_evento >= today]

    return ClientOverview(
        client=client,
        events=events,
        total_receita=total_receita,
        total_lucro=total_lucro,
        margem_media=percentage(total_lucro, total_receita),
        ultimo_evento=events[0] if events else None,
        proximo_evento=min(upcoming, key=lambda e: e.data_evento) if upcoming else None,
    )


def summarize_supplier_payables(
    supplier: Supplier, payables: List[Dict[str, Any]], today: date
) -> SupplierOverview:
    """Paid and pending totals plus the next pending payment due."""
    total_pago = sum(
        (to_decimal(p["valor"]) for p in payables if p["status_pagamento"] == PaymentStatus.PAGO.value),
        ZERO,
    )
    pending = [p for p in payables if p["status_pagamento"] == PaymentStatus.PENDENTE.value]
    total_pendente = sum((to_decimal(p["valor"]) for p in pending), ZERO)
    upcoming = [p for p in pending if p["data_vencimento"] >= today]

    return SupplierOverview(
        supplier=supplier,
        payables=payables,
        total_pago=total_pago,
        total_pendente=total_pendente,
        proximo_pagamento=min(upcoming, key=lambda p: p["data_vencimento"]) if upcoming else None,
    )


async def client_overview(
    db: AsyncSession, client_id: int, owner_id: str, today: date
) -> ClientOverview:
    """Load a client and its events. Raises NotFoundError for a foreign or missing client."""
    client = await require_owned_client(db, client_id, owner_id)
    result = await db.execute(
        select(Event)
        .where(Event.contratante_id == client.id, Event.user_id == owner_id)
        .order_by(Event.data_evento.desc(), Event.id.desc())
    )
    return summarize_client_events(client, list(result.scalars().all()), today)


async def supplier_overview(
    db: AsyncSession, supplier_id: int, owner_id: str, today: date
) -> SupplierOverview:
    """Load a supplier and its payables. Raises NotFoundError for a foreign or missing supplier."""
    supplier = await require_owned_supplier(db, supplier_id, owner_id)
    result = await db.execute(
        select(
            Payable.id,
            Payable.evento_id,
            Payable.fornecedor_id,
            Payable.descricao,
            Payable.valor,
            Payable.data_vencimento,
            Payable.status_pagamento,
            Event.nome_evento.label("evento_nome"),
        )
        .join(Event, Event.id == Payable.evento_id)
        .where(Payable.fornecedor_id == supplier.id, Payable.user_id == owner_id)
        .order_by(Payable.data_vencimento.desc(), Payable.id.desc())
    )
    payables = [dict(row) for row in result.mappings().all()]
    return summarize_supplier_payables(supplier, payables, today)
