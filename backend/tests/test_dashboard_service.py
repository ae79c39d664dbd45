"""
Testes do dashboard: crescimento, clientes recorrentes, série mensal
e agregação das métricas com leituras paralelas.
"""

import asyncio
import datetime
import uuid
from contextlib import asynccontextmanager
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest

from locdecor.core.dates import add_months, month_end
from locdecor.schemas.transaction import TransactionType
from locdecor.services.dashboard_service import (
    DashboardService,
    count_returning_customers,
    default_period,
    month_label,
    monthly_growth,
    revenue_by_month,
    run_concurrently,
)


class TestPureFunctions:

    def test_monthly_growth(self):
        assert monthly_growth(15, 10) == 50.0
        assert monthly_growth(5, 10) == -50.0

    def test_monthly_growth_without_previous(self):
        assert monthly_growth(7, 0) == 0.0

    def test_returning_customers(self):
        a, b, c = uuid.uuid4(), uuid.uuid4(), uuid.uuid4()
        assert count_returning_customers([a, b, a, c, a, b]) == 2
        assert count_returning_customers([]) == 0

    def test_month_label(self):
        assert month_label(datetime.date(2026, 1, 20)) == "Jan/2026"

    def test_default_period(self):
        start, end = default_period(datetime.date(2026, 3, 18))
        assert start == datetime.date(2025, 10, 1)
        assert end == datetime.date(2026, 3, 31)

    def test_month_arithmetic(self):
        assert add_months(datetime.date(2026, 1, 31), 1) == datetime.date(2026, 2, 28)
        assert add_months(datetime.date(2026, 1, 15), -2) == datetime.date(2025, 11, 15)
        assert month_end(datetime.date(2028, 2, 3)) == datetime.date(2028, 2, 29)


class TestRevenueByMonth:

    def test_fills_empty_months(self):
        rows = [
            (datetime.date(2026, 1, 5), Decimal("100.00")),
            (datetime.date(2026, 1, 20), Decimal("50.50")),
            (datetime.date(2026, 3, 2), Decimal("80.00")),
        ]
        points = revenue_by_month(rows, datetime.date(2025, 12, 1), 4)

        assert [p.date for p in points] == ["Dec/2025", "Jan/2026", "Feb/2026", "Mar/2026"]
        assert [p.value for p in points] == [0.0, 150.5, 0.0, 80.0]
        assert all(p.previous_value == 0.0 for p in points)


def _session_factory(opened):
    @asynccontextmanager
    async def factory():
        session = MagicMock(name=f"session-{len(opened)}")
        opened.append(session)
        yield session

    return factory


class TestMetrics:

    @pytest.mark.asyncio
    async def test_aggregates_independent_reads(self):
        opened = []
        service = DashboardService(session_factory=_session_factory(opened))
        a, b = uuid.uuid4(), uuid.uuid4()

        async def sum_by_type(db, type_, start, end):
            return Decimal("1000.00") if type_ is TransactionType.RECEITA else Decimal("250.00")

        service._order_status_counts = AsyncMock(
            return_value={"pending": 4, "active": 2, "completed": 5, "canceled": 1}
        )
        service._transactions = MagicMock()
        service._transactions.sum_by_type = AsyncMock(side_effect=sum_by_type)
        service._availability = MagicMock()
        service._availability.occupancy = AsyncMock(return_value=37.5)
        service._client_ids_since = AsyncMock(return_value=[a, b, a])
        service._count_orders = AsyncMock(return_value=8)

        metrics = await service.metrics(
            datetime.date(2026, 1, 1),
            datetime.date(2026, 6, 30),
            today=datetime.date(2026, 6, 15),
        )

        assert metrics.total_orders == 12
        assert metrics.completed_orders == 5
        assert metrics.canceled_orders == 1
        assert metrics.revenue == Decimal("1000.00")
        assert metrics.expenses == Decimal("250.00")
        assert metrics.balance == Decimal("750.00")
        assert metrics.occupation_rate == 37.5
        assert metrics.returning_customers == 1
        assert metrics.monthly_growth == 50.0

        # Uma sessão por leitura
        assert len(opened) == 6
        assert len({id(s) for s in opened}) == 6

        _, prev_start, prev_end = service._count_orders.call_args.args
        assert prev_start == datetime.date(2025, 12, 1)
        assert prev_end == datetime.date(2026, 5, 31)
        _, since = service._client_ids_since.call_args.args
        assert since == datetime.date(2026, 3, 1)

    @pytest.mark.asyncio
    async def test_empty_period(self):
        service = DashboardService(session_factory=_session_factory([]))
        service._order_status_counts = AsyncMock(return_value={})
        service._transactions = MagicMock()
        service._transactions.sum_by_type = AsyncMock(return_value=Decimal("0"))
        service._availability = MagicMock()
        service._availability.occupancy = AsyncMock(return_value=0.0)
        service._client_ids_since = AsyncMock(return_value=[])
        service._count_orders = AsyncMock(return_value=0)

        metrics = await service.metrics(datetime.date(2026, 3, 1), datetime.date(2026, 3, 31))

        assert metrics.total_orders == 0
        assert metrics.monthly_growth == 0.0
        assert metrics.balance == Decimal("0")

    @pytest.mark.asyncio
    async def test_failed_read_cancels_the_others(self):
        opened, closed = [], []

        @asynccontextmanager
        async def factory():
            session = MagicMock(name=f"session-{len(opened)}")
            opened.append(session)
            try:
                yield session
            finally:
                closed.append(session)

        service = DashboardService(session_factory=factory)
        started = asyncio.Event()
        blocked = asyncio.Event()

        async def slow(*args):
            started.set()
            await blocked.wait()

        async def failing(*args):
            await started.wait()
            raise RuntimeError("conexão perdida")

        service._order_status_counts = AsyncMock(side_effect=slow)
        service._transactions = MagicMock()
        service._transactions.sum_by_type = AsyncMock(side_effect=slow)
        service._availability = MagicMock()
        service._availability.occupancy = AsyncMock(side_effect=slow)
        service._client_ids_since = AsyncMock(side_effect=slow)
        service._count_orders = AsyncMock(side_effect=failing)

        with pytest.raises(RuntimeError, match="conexão perdida"):
            await service.metrics(datetime.date(2026, 3, 1), datetime.date(2026, 3, 31))

        assert not blocked.is_set()
        assert len(opened) == 6
        assert sorted(map(id, closed)) == sorted(map(id, opened))


class TestRunConcurrently:

    @pytest.mark.asyncio
    async def test_results_in_order(self):
        async def value(v, delay):
            await asyncio.sleep(delay)
            return v

        assert await run_concurrently(value("a", 0.02), value("b", 0)) == ["a", "b"]

    @pytest.mark.asyncio
    async def test_original_exception_propagates(self):
        cancelled = []

        async def waits():
            try:
                await asyncio.sleep(10)
            except asyncio.CancelledError:
                cancelled.append(True)
                raise

        async def fails():
            raise ValueError("falhou")

        with pytest.raises(ValueError, match="falhou"):
            await run_concurrently(waits(), fails())
        assert cancelled == [True]


class TestSchedule:

    @pytest.mark.asyncio
    async def test_revenue_chart_reads_window(self, mock_db, result_factory):
        mock_db.execute.return_value = result_factory(rows=[(datetime.date(2026, 3, 4), Decimal("90"))])
        service = DashboardService(session_factory=_session_factory([]))

        points = await service.revenue_chart(mock_db, months=3, today=datetime.date(2026, 3, 18))

        assert [p.date for p in points] == ["Jan/2026", "Feb/2026", "Mar/2026"]
        assert points[-1].value == 90.0

    @pytest.mark.asyncio
    async def test_today_returns(self, mock_db, result_factory, order_factory):
        order = order_factory(order_status="active", return_date=datetime.date(2026, 3, 16))
        mock_db.execute.return_value = result_factory(items=[order])
        service = DashboardService(session_factory=_session_factory([]))

        returns = await service.today_returns(mock_db, today=datetime.date(2026, 3, 16))

        assert returns == [order]
