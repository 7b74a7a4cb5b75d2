"""Dashboard response schemas.

Amounts are Decimal internally and serialised as JSON numbers.
"""
from datetime import date
from typing import List, Optional

from pydantic import BaseModel, Field

from eventdesk.schemas import Money


class OverduePayments(BaseModel):
    count: int
    total: Money


class UpcomingEvent(BaseModel):
    """Event in the next 30 days, joined with its client name."""
    id: int
    contratante_id: Optional[int] = None
    nome_evento: str
    data_evento: date
    valor_total_receber: Money
    valor_total_custos: Money
    status_evento: str
    contratante_nome: Optional[str] = None


class FinancialSeriesPoint(BaseModel):
    """One month of receita/despesa with derived profit and margin."""
    period: str
    label: str
    receita: Money
    despesa: Money
    lucro: Money
    margem: Money


class MarginAnalysis(BaseModel):
    receitaTotal: Money
    custoTotal: Money
    lucroTotal: Money
    margemPercentual: Money


class CashflowPoint(BaseModel):
    date: str
    receita: Money
    despesa: Money


class DashboardStatsResponse(BaseModel):
    """Complete dashboard snapshot."""
    receivablesMonth: Money
    overduePayments: OverduePayments
    upcomingEvents: List[UpcomingEvent] = Field(default_factory=list)
    financialSeries: List[FinancialSeriesPoint]
    marginAnalysis: MarginAnalysis
    cashPosition: Money
    cashflowProjection: List[CashflowPoint] = Field(default_factory=list)
