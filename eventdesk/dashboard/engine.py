"""
Dashboard Aggregator.

Builds the consolidated financial snapshot shown on the dashboard. Ten
independent reads run concurrently, each on its own session. The rows are
then assembled in memory into month buckets, margins and a cash flow
projection.

Windows (calendar-date granularity, all derived from `now`):
- month:        first to last day of the current month
- next 30 days: today .. today + 30
- next 90 days: today .. today + 90
- series:       first day of the month five months back .. end of current month

All money stays Decimal. Missing sums count as zero and every percentage
is 0 when its denominator is 0.
"""
import asyncio
import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional, Tuple

from dateutil.relativedelta import relativedelta
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import async_sessionmaker

from eventdesk.models import Client, Event, Payable, PaymentStatus, Receivable
from eventdesk.services.dates import parse_date
from eventdesk.services.money import ZERO, percentage, to_decimal

logger = logging.getLogger(__name__)

SERIES_MONTHS = 6
UPCOMING_EVENTS_DAYS = 30
CASHFLOW_PROJECTION_DAYS = 90

MONTH_ABBREVIATIONS_PT = (
    "jan", "fev", "mar", "abr", "mai", "jun",
    "jul", "ago", "set", "out", "nov", "dez",
)

PENDING = PaymentStatus.PENDENTE.value
CANCELLED = PaymentStatus.CANCELADO.value


# =============================================================================
# Windows
# =============================================================================

@dataclass(frozen=True)
class DashboardWindows:
    """Date windows the dashboard queries are bounded by."""
    today: date
    month_start: date
    month_end: date
    next30_end: date
    next90_end: date
    series_start: date

    @classmethod
    def from_now(cls, now: datetime) -> "DashboardWindows":
        today = now.date() if isinstance(now, datetime) else now
        month_start = today.replace(day=1)
        return cls(
            today=today,
            month_start=month_start,
            month_end=month_start + relativedelta(months=1, days=-1),
            next30_end=today + timedelta(days=UPCOMING_EVENTS_DAYS),
            next90_end=today + timedelta(days=CASHFLOW_PROJECTION_DAYS),
            series_start=month_start - relativedelta(months=SERIES_MONTHS - 1),
        )

    def series_months(self) -> List[date]:
        """First day of each series month, oldest first."""
        return [self.series_start + relativedelta(months=i) for i in range(SERIES_MONTHS)]


# =============================================================================
# Snapshot
# =============================================================================

@dataclass
class SeriesPoint:
    """One calendar month of the financial series."""
    period: str
    label: str
    receita: Decimal
    despesa: Decimal
    lucro: Decimal
    margem: Decimal


@dataclass
class CashflowPoint:
    """Projected inflow and outflow for a single due date."""
    date: date
    receita: Decimal
    despesa: Decimal


@dataclass
class DashboardSnapshot:
    """Consolidated dashboard figures for one owner."""
    receivables_month: Decimal
    overdue_count: int
    overdue_total: Decimal
    upcoming_events: List[Dict[str, Any]]
    financial_series: List[SeriesPoint]
    receita_total: Decimal
    custo_total: Decimal
    lucro_total: Decimal
    margem_percentual: Decimal
    cash_position: Decimal
    cashflow_projection: List[CashflowPoint]

    def to_dict(self) -> Dict[str, Any]:
        """Shape the snapshot into the public API structure."""
        return {
            "receivablesMonth": self.receivables_month,
            "overduePayments": {
                "count": self.overdue_count,
                "total": self.overdue_total,
            },
            "upcomingEvents": self.upcoming_events,
            "financialSeries": [
                {
                    "period": point.period,
                    "label": point.label,
                    "receita": point.receita,
                    "despesa": point.despesa,
                    "lucro": point.lucro,
                    "margem": point.margem,
                }
                for point in self.financial_series
            ],
            "marginAnalysis": {
                "receitaTotal": self.receita_total,
                "custoTotal": self.custo_total,
                "lucroTotal": self.lucro_total,
                "margemPercentual": self.margem_percentual,
            },
            "cashPosition": self.cash_position,
            "cashflowProjection": [
                {
                    "date": point.date.isoformat(),
                    "receita": point.receita,
                    "despesa": point.despesa,
                }
                for point in self.cashflow_projection
            ],
        }


# =============================================================================
# Queries
# =============================================================================

def receivables_month_query(owner_id: str, windows: DashboardWindows):
    return select(func.coalesce(func.sum(Receivable.valor), 0)).where(
        Receivable.user_id == owner_id,
        Receivable.status_pagamento == PENDING,
        Receivable.data_vencimento.between(windows.month_start, windows.month_end),
    )


def overdue_receivables_query(owner_id: str, windows: DashboardWindows):
    # Receivables only; overdue payables are not part of this metric
    return select(
        func.count(Receivable.id),
        func.coalesce(func.sum(Receivable.valor), 0),
    ).where(
        Receivable.user_id == owner_id,
        Receivable.status_pagamento == PENDING,
        Receivable.data_vencimento < windows.today,
    )


def upcoming_events_query(owner_id: str, windows: DashboardWindows):
    return (
        select(
            Event.id,
            Event.contratante_id,
            Event.nome_evento,
            Event.data_evento,
            Event.valor_total_receber,
            Event.valor_total_custos,
            Event.status_evento,
            Client.nome.label("contratante_nome"),
        )
        .outerjoin(Client, Event.contratante_id == Client.id)
        .where(
            Event.user_id == owner_id,
            Event.data_evento.between(windows.today, windows.next30_end),
        )
        .order_by(Event.data_evento.asc(), Event.id.asc())
    )


def due_totals_by_date_query(model, owner_id: str, start: date, end: date):
    """Non-cancelled amounts of `model` summed per due date within [start, end]."""
    return (
        select(model.data_vencimento, func.sum(model.valor))
        .where(
            model.user_id == owner_id,
            model.data_vencimento.between(start, end),
            model.status_pagamento != CANCELLED,
        )
        .group_by(model.data_vencimento)
        .order_by(model.data_vencimento.asc())
    )


def lifetime_margin_query(owner_id: str):
    return select(
        func.coalesce(func.sum(Event.valor_total_receber), 0),
        func.coalesce(func.sum(Event.valor_total_custos), 0),
    ).where(Event.user_id == owner_id)


def pending_total_query(model, owner_id: str):
    return select(func.coalesce(func.sum(model.valor), 0)).where(
        model.user_id == owner_id,
        model.status_pagamento == PENDING,
    )


async def _fetch_scalar(session_factory: async_sessionmaker, stmt):
    async with session_factory() as session:
        result = await session.execute(stmt)
        return result.scalar()


async def _fetch_one(session_factory: async_sessionmaker, stmt):
    async with session_factory() as session:
        result = await session.execute(stmt)
        return tuple(result.one())


async def _fetch_all(session_factory: async_sessionmaker, stmt):
    async with session_factory() as session:
        result = await session.execute(stmt)
        return [tuple(row) for row in result.all()]


async def _fetch_mappings(session_factory: async_sessionmaker, stmt):
    async with session_factory() as session:
        result = await session.execute(stmt)
        return [dict(row) for row in result.mappings().all()]


# =============================================================================
# Assembly
# =============================================================================

def _totals_by_date(rows: Iterable[Tuple[Any, Any]]) -> Dict[date, Decimal]:
    totals: Dict[date, Decimal] = {}
    for due_date, amount in rows:
        day = parse_date(due_date)
        totals[day] = totals.get(day, ZERO) + to_decimal(amount)
    return totals


def _totals_by_month(rows: Iterable[Tuple[Any, Any]]) -> Dict[Tuple[int, int], Decimal]:
    totals: Dict[Tuple[int, int], Decimal] = {}
    for day, amount in _totals_by_date(rows).items():
        key = (day.year, day.month)
        totals[key] = totals.get(key, ZERO) + amount
    return totals


def month_label(month: date) -> str:
    """Short pt-BR label, e.g. "mar/2025"."""
    return f"{MONTH_ABBREVIATIONS_PT[month.month - 1]}/{month.year}"


def build_financial_series(
    windows: DashboardWindows,
    receitas: Iterable[Tuple[Any, Any]],
    despesas: Iterable[Tuple[Any, Any]],
) -> List[SeriesPoint]:
    """
    Six contiguous monthly buckets, oldest first.

    Months without rows report zero rather than being omitted.
    """
    receita_by_month = _totals_by_month(receitas)
    despesa_by_month = _totals_by_month(despesas)

    series = []
    for month in windows.series_months():
        key = (month.year, month.month)
        receita = receita_by_month.get(key, ZERO)
        despesa = despesa_by_month.get(key, ZERO)
        lucro = receita - despesa
        series.append(SeriesPoint(
            period=f"{month.year:04d}-{month.month:02d}",
            label=month_label(month),
            receita=receita,
            despesa=despesa,
            lucro=lucro,
            margem=percentage(lucro, receita),
        ))
    return series


def build_cashflow_projection(
    receitas: Iterable[Tuple[Any, Any]],
    despesas: Iterable[Tuple[Any, Any]],
) -> List[CashflowPoint]:
    """One point per distinct due date on either side, ascending; absent side is zero."""
    receita_by_date = _totals_by_date(receitas)
    despesa_by_date = _totals_by_date(despesas)

    return [
        CashflowPoint(
            date=day,
            receita=receita_by_date.get(day, ZERO),
            despesa=despesa_by_date.get(day, ZERO),
        )
        for day in sorted(set(receita_by_date) | set(despesa_by_date))
    ]


def _shape_upcoming_event(row: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "id": row["id"],
        "contratante_id": row["contratante_id"],
        "nome_evento": row["nome_evento"],
        "data_evento": parse_date(row["data_evento"]),
        "valor_total_receber": to_decimal(row["valor_total_receber"]),
        "valor_total_custos": to_decimal(row["valor_total_custos"]),
        "status_evento": row["status_evento"],
        "contratante_nome": row["contratante_nome"],
    }


async def compute_dashboard(
    session_factory: async_sessionmaker,
    owner_id: str,
    now: Optional[datetime] = None,
) -> DashboardSnapshot:
    """
    Compute the dashboard snapshot for an owner.

    Args:
        session_factory: Factory for the sessions used by the concurrent reads
        owner_id: Owner whose data is aggregated
        now: Reference instant, defaults to the current local time

    Returns:
        DashboardSnapshot with Decimal amounts
    """
    windows = DashboardWindows.from_now(now or datetime.now())

    results = await asyncio.gather(
        _fetch_scalar(session_factory, receivables_month_query(owner_id, windows)),
        _fetch_one(session_factory, overdue_receivables_query(owner_id, windows)),
        _fetch_mappings(session_factory, upcoming_events_query(owner_id, windows)),
        _fetch_all(session_factory, due_totals_by_date_query(
            Receivable, owner_id, windows.series_start, windows.month_end)),
        _fetch_all(session_factory, due_totals_by_date_query(
            Payable, owner_id, windows.series_start, windows.month_end)),
        _fetch_one(session_factory, lifetime_margin_query(owner_id)),
        _fetch_scalar(session_factory, pending_total_query(Receivable, owner_id)),
        _fetch_scalar(session_factory, pending_total_query(Payable, owner_id)),
        _fetch_all(session_factory, due_totals_by_date_query(
            Receivable, owner_id, windows.today, windows.next90_end)),
        _fetch_all(session_factory, due_totals_by_date_query(
            Payable, owner_id, windows.today, windows.next90_end)),
        return_exceptions=True,
    )
    # All reads have settled; surface the first failure
    for result in results:
        if isinstance(result, BaseException):
            raise result
    (
        receivables_month,
        overdue,
        upcoming_rows,
        receita_series,
        despesa_series,
        margin,
        pending_receivables,
        pending_payables,
        receita_flow,
        despesa_flow,
    ) = results

    overdue_count, overdue_total = overdue
    receita_total, custo_total = (to_decimal(value) for value in margin)
    lucro_total = receita_total - custo_total

    snapshot = DashboardSnapshot(
        receivables_month=to_decimal(receivables_month),
        overdue_count=int(overdue_count or 0),
        overdue_total=to_decimal(overdue_total),
        upcoming_events=[_shape_upcoming_event(row) for row in upcoming_rows],
        financial_series=build_financial_series(windows, receita_series, despesa_series),
        receita_total=receita_total,
        custo_total=custo_total,
        lucro_total=lucro_total,
        margem_percentual=percentage(lucro_total, receita_total),
        cash_position=to_decimal(pending_receivables) - to_decimal(pending_payables),
        cashflow_projection=build_cashflow_projection(receita_flow, despesa_flow),
    )

    logger.debug(
        f"Dashboard for {owner_id}: {len(snapshot.upcoming_events)} upcoming events, "
        f"{len(snapshot.cashflow_projection)} cash flow dates"
    )
    return snapshot
