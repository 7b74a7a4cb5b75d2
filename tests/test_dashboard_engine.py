"""
Tests for the Dashboard Aggregator.

Unit tests cover window arithmetic and in-memory assembly. Integration
tests run the full concurrent computation against SQLite.
"""
import asyncio

import pytest
import pytest_asyncio
from datetime import date, datetime
from decimal import Decimal

from sqlalchemy.exc import OperationalError

from eventdesk.dashboard import engine as dashboard_engine
from eventdesk.dashboard.engine import (
    DashboardWindows,
    build_cashflow_projection,
    build_financial_series,
    compute_dashboard,
    month_label,
)
from eventdesk.models import Client, Event, Payable, Receivable

from tests.conftest import OTHER_OWNER_ID, OWNER_ID

NOW = datetime(2025, 2, 15, 10, 30)


# =============================================================================
# Unit Tests - Windows
# =============================================================================

class TestDashboardWindows:
    """Date windows derived from the reference instant."""

    def test_windows_from_mid_month(self):
        windows = DashboardWindows.from_now(NOW)

        assert windows.today == date(2025, 2, 15)
        assert windows.month_start == date(2025, 2, 1)
        assert windows.month_end == date(2025, 2, 28)
        assert windows.next30_end == date(2025, 3, 17)
        assert windows.next90_end == date(2025, 5, 16)
        assert windows.series_start == date(2024, 9, 1)

    def test_leap_february_month_end(self):
        assert DashboardWindows.from_now(datetime(2024, 2, 10)).month_end == date(2024, 2, 29)

    def test_series_months_cross_year_boundary(self):
        months = DashboardWindows.from_now(NOW).series_months()

        assert months == [
            date(2024, 9, 1),
            date(2024, 10, 1),
            date(2024, 11, 1),
            date(2024, 12, 1),
            date(2025, 1, 1),
            date(2025, 2, 1),
        ]

    def test_month_label(self):
        assert month_label(date(2025, 3, 1)) == "mar/2025"
        assert month_label(date(2024, 12, 1)) == "dez/2024"


# =============================================================================
# Unit Tests - Assembly
# =============================================================================

class TestFinancialSeries:
    """Monthly buckets built from per-date sums."""

    def test_empty_months_are_zero_not_omitted(self):
        series = build_financial_series(DashboardWindows.from_now(NOW), [], [])

        assert len(series) == 6
        assert [p.period for p in series] == [
            "2024-09", "2024-10", "2024-11", "2024-12", "2025-01", "2025-02",
        ]
        assert all(p.receita == 0 and p.despesa == 0 and p.margem == 0 for p in series)

    def test_sums_dates_into_their_month(self):
        receitas = [(date(2025, 2, 3), Decimal("1000")), (date(2025, 2, 20), Decimal("3000"))]
        despesas = [(date(2025, 2, 10), Decimal("1000"))]

        feb = build_financial_series(DashboardWindows.from_now(NOW), receitas, despesas)[-1]

        assert feb.receita == Decimal("4000")
        assert feb.despesa == Decimal("1000")
        assert feb.lucro == Decimal("3000")
        assert feb.margem == Decimal("75")

    def test_margin_is_zero_without_revenue(self):
        despesas = [(date(2025, 1, 5), Decimal("800"))]

        jan = build_financial_series(DashboardWindows.from_now(NOW), [], despesas)[4]

        assert jan.lucro == Decimal("-800")
        assert jan.margem == 0

    def test_accepts_string_dates(self):
        series = build_financial_series(
            DashboardWindows.from_now(NOW), [("2024-12-24", 250.5)], []
        )

        assert series[3].receita == Decimal("250.5")


class TestCashflowProjection:
    """Union of receivable and payable due dates."""

    def test_union_of_dates_in_ascending_order(self):
        receitas = [(date(2025, 3, 20), Decimal("4000")), (date(2025, 2, 20), Decimal("3000"))]
        despesas = [(date(2025, 2, 20), Decimal("1500")), (date(2025, 2, 18), Decimal("200"))]

        points = build_cashflow_projection(receitas, despesas)

        assert [(p.date, p.receita, p.despesa) for p in points] == [
            (date(2025, 2, 18), Decimal("0"), Decimal("200")),
            (date(2025, 2, 20), Decimal("3000"), Decimal("1500")),
            (date(2025, 3, 20), Decimal("4000"), Decimal("0")),
        ]

    def test_empty(self):
        assert build_cashflow_projection([], []) == []


# =============================================================================
# Integration Tests - compute_dashboard
# =============================================================================

@pytest_asyncio.fixture
async def ledger(seed):
    """
    Owner data around 2025-02-15:

    - three events (one upcoming within 30 days)
    - receivables that are pending, overdue, paid, cancelled and future
    - payables that are pending, overdue, paid and cancelled
    """
    client = await seed(Client(user_id=OWNER_ID, nome="Maria"))
    upcoming, past, later = await seed(
        Event(
            user_id=OWNER_ID, contratante_id=client.id, nome_evento="Casamento",
            data_evento=date(2025, 2, 20),
            valor_total_receber=Decimal("10000"), valor_total_custos=Decimal("6000"),
        ),
        Event(
            user_id=OWNER_ID, nome_evento="Formatura", data_evento=date(2024, 10, 5),
            valor_total_receber=Decimal("5000"), valor_total_custos=Decimal("5000"),
        ),
        Event(
            user_id=OWNER_ID, nome_evento="Congresso", data_evento=date(2025, 4, 1),
            valor_total_receber=Decimal("0"), valor_total_custos=Decimal("1000"),
        ),
    )
    await seed(
        Receivable(user_id=OWNER_ID, evento_id=upcoming.id, descricao="Parcela 2",
                   valor=Decimal("3000"), data_vencimento=date(2025, 2, 20), status_pagamento="Pendente"),
        Receivable(user_id=OWNER_ID, evento_id=upcoming.id, descricao="Sinal",
                   valor=Decimal("2000"), data_vencimento=date(2025, 2, 10), status_pagamento="Pendente"),
        Receivable(user_id=OWNER_ID, evento_id=past.id, descricao="Total",
                   valor=Decimal("5000"), data_vencimento=date(2024, 10, 5), status_pagamento="Pago"),
        Receivable(user_id=OWNER_ID, evento_id=upcoming.id, descricao="Extra",
                   valor=Decimal("1000"), data_vencimento=date(2025, 2, 25), status_pagamento="Cancelado"),
        Receivable(user_id=OWNER_ID, evento_id=upcoming.id, descricao="Parcela final",
                   valor=Decimal("4000"), data_vencimento=date(2025, 3, 20), status_pagamento="Pendente"),
        Payable(user_id=OWNER_ID, evento_id=upcoming.id, descricao="Buffet",
                valor=Decimal("1500"), data_vencimento=date(2025, 2, 20), status_pagamento="Pendente"),
        Payable(user_id=OWNER_ID, evento_id=past.id, descricao="Som",
                valor=Decimal("5000"), data_vencimento=date(2024, 9, 30), status_pagamento="Pago"),
        Payable(user_id=OWNER_ID, evento_id=upcoming.id, descricao="Decoração",
                valor=Decimal("800"), data_vencimento=date(2025, 1, 5), status_pagamento="Pendente"),
        Payable(user_id=OWNER_ID, evento_id=later.id, descricao="Locação",
                valor=Decimal("1000"), data_vencimento=date(2025, 3, 1), status_pagamento="Cancelado"),
    )
    return client, upcoming


class TestComputeDashboard:
    """Full snapshot computation."""

    @pytest.mark.asyncio
    async def test_owner_without_data_gets_zeros(self, session_factory):
        snapshot = await compute_dashboard(session_factory, OWNER_ID, now=NOW)

        assert snapshot.receivables_month == 0
        assert snapshot.overdue_count == 0
        assert snapshot.overdue_total == 0
        assert snapshot.upcoming_events == []
        assert len(snapshot.financial_series) == 6
        assert all(p.receita == 0 and p.despesa == 0 for p in snapshot.financial_series)
        assert snapshot.receita_total == 0
        assert snapshot.margem_percentual == 0
        assert snapshot.cash_position == 0
        assert snapshot.cashflow_projection == []

    @pytest.mark.asyncio
    async def test_receivables_due_this_month(self, ledger, session_factory):
        snapshot = await compute_dashboard(session_factory, OWNER_ID, now=NOW)

        assert snapshot.receivables_month == Decimal("5000")

    @pytest.mark.asyncio
    async def test_overdue_counts_receivables_only(self, ledger, session_factory):
        snapshot = await compute_dashboard(session_factory, OWNER_ID, now=NOW)

        assert snapshot.overdue_count == 1
        assert snapshot.overdue_total == Decimal("2000")

    @pytest.mark.asyncio
    async def test_upcoming_events_include_client_name(self, ledger, session_factory):
        client, upcoming = ledger

        snapshot = await compute_dashboard(session_factory, OWNER_ID, now=NOW)

        assert [e["id"] for e in snapshot.upcoming_events] == [upcoming.id]
        event = snapshot.upcoming_events[0]
        assert event["contratante_nome"] == "Maria"
        assert event["data_evento"] == date(2025, 2, 20)
        assert event["valor_total_receber"] == Decimal("10000")

    @pytest.mark.asyncio
    async def test_financial_series(self, ledger, session_factory):
        snapshot = await compute_dashboard(session_factory, OWNER_ID, now=NOW)

        rows = [(p.period, p.receita, p.despesa, p.lucro, p.margem) for p in snapshot.financial_series]
        assert rows == [
            ("2024-09", Decimal("0"), Decimal("5000"), Decimal("-5000"), Decimal("0")),
            ("2024-10", Decimal("5000"), Decimal("0"), Decimal("5000"), Decimal("100")),
            ("2024-11", Decimal("0"), Decimal("0"), Decimal("0"), Decimal("0")),
            ("2024-12", Decimal("0"), Decimal("0"), Decimal("0"), Decimal("0")),
            ("2025-01", Decimal("0"), Decimal("800"), Decimal("-800"), Decimal("0")),
            ("2025-02", Decimal("5000"), Decimal("1500"), Decimal("3500"), Decimal("70")),
        ]

    @pytest.mark.asyncio
    async def test_lifetime_margin(self, ledger, session_factory):
        snapshot = await compute_dashboard(session_factory, OWNER_ID, now=NOW)

        assert snapshot.receita_total == Decimal("15000")
        assert snapshot.custo_total == Decimal("12000")
        assert snapshot.lucro_total == Decimal("3000")
        assert snapshot.margem_percentual == Decimal("20")

    @pytest.mark.asyncio
    async def test_cash_position_nets_pending_amounts(self, ledger, session_factory):
        snapshot = await compute_dashboard(session_factory, OWNER_ID, now=NOW)

        # pending receivables 9000, pending payables 2300
        assert snapshot.cash_position == Decimal("6700")

    @pytest.mark.asyncio
    async def test_cashflow_projection_skips_cancelled_and_past(self, ledger, session_factory):
        snapshot = await compute_dashboard(session_factory, OWNER_ID, now=NOW)

        assert [(p.date, p.receita, p.despesa) for p in snapshot.cashflow_projection] == [
            (date(2025, 2, 20), Decimal("3000"), Decimal("1500")),
            (date(2025, 3, 20), Decimal("4000"), Decimal("0")),
        ]

    @pytest.mark.asyncio
    async def test_other_owner_sees_nothing(self, ledger, session_factory):
        snapshot = await compute_dashboard(session_factory, OTHER_OWNER_ID, now=NOW)

        assert snapshot.receivables_month == 0
        assert snapshot.upcoming_events == []
        assert snapshot.receita_total == 0
        assert snapshot.cash_position == 0

    @pytest.mark.asyncio
    async def test_to_dict_uses_api_keys(self, ledger, session_factory):
        data = (await compute_dashboard(session_factory, OWNER_ID, now=NOW)).to_dict()

        assert set(data) == {
            "receivablesMonth",
            "overduePayments",
            "upcomingEvents",
            "financialSeries",
            "marginAnalysis",
            "cashPosition",
            "cashflowProjection",
        }
        assert data["overduePayments"] == {"count": 1, "total": Decimal("2000")}
        assert data["cashflowProjection"][0]["date"] == "2025-02-20"
        assert data["financialSeries"][-1]["label"] == "fev/2025"


# =============================================================================
# Concurrency
# =============================================================================

class ReadTracker:
    """Replaces the fetch helpers with slow fakes and records overlap."""

    def __init__(self, fail_on=None):
        self.active = 0
        self.peak = 0
        self.finished = 0
        self.fail_on = fail_on

    def fake(self, name, value):
        async def _fetch(session_factory, stmt):
            self.active += 1
            self.peak = max(self.peak, self.active)
            try:
                await asyncio.sleep(0.01)
                if name == self.fail_on:
                    raise OperationalError("SELECT", {}, Exception("connection lost"))
                return value
            finally:
                self.active -= 1
                self.finished += 1
        return _fetch

    def install(self, monkeypatch):
        monkeypatch.setattr(dashboard_engine, "_fetch_scalar", self.fake("scalar", 0))
        monkeypatch.setattr(dashboard_engine, "_fetch_one", self.fake("one", (0, 0)))
        monkeypatch.setattr(dashboard_engine, "_fetch_all", self.fake("all", []))
        monkeypatch.setattr(dashboard_engine, "_fetch_mappings", self.fake("mappings", []))


class TestConcurrentReads:

    @pytest.mark.asyncio
    async def test_all_ten_reads_overlap(self, monkeypatch):
        tracker = ReadTracker()
        tracker.install(monkeypatch)

        snapshot = await compute_dashboard(session_factory=None, owner_id=OWNER_ID, now=NOW)

        assert tracker.peak == 10
        assert tracker.finished == 10
        assert snapshot.cash_position == 0

    @pytest.mark.asyncio
    async def test_failed_read_raises_after_siblings_settle(self, monkeypatch):
        tracker = ReadTracker(fail_on="mappings")
        tracker.install(monkeypatch)

        with pytest.raises(OperationalError):
            await compute_dashboard(session_factory=None, owner_id=OWNER_ID, now=NOW)

        assert tracker.finished == 10
        assert tracker.active == 0
