"""
Service Layer do dashboard
Projeto: LocDecor (Gestão de Locação de Decorações)

Agrega pedidos, lançamentos e disponibilidade em métricas do período.
As leituras independentes rodam em paralelo (asyncio.TaskGroup), cada uma
com a própria sessão obtida da session factory.
"""

import asyncio
import datetime
import logging
import uuid
from collections import Counter
from decimal import Decimal
from typing import Awaitable, Callable, Iterable, Optional, TypeVar
from zoneinfo import ZoneInfo

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import selectinload

from locdecor.core.config import settings
from locdecor.core.database import get_session_factory
from locdecor.core.dates import add_months, local_today, month_end, month_start
from locdecor.models import Order, OrderItem, Transaction, User
from locdecor.schemas.dashboard import ChartPoint, DashboardMetrics, ReportData
from locdecor.schemas.order import OrderStatus
from locdecor.schemas.transaction import TransactionType
from locdecor.services.availability_service import AvailabilityService
from locdecor.services.order_service import OrderService
from locdecor.services.transaction_service import TransactionService

logger = logging.getLogger(__name__)

T = TypeVar("T")

MONTH_LABELS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def monthly_growth(current: int, previous: int) -> float:
    """
    Crescimento percentual do número de pedidos.

    Examples:
        >>> monthly_growth(15, 10)
        50.0
        >>> monthly_growth(7, 0)
        0.0
    """
    if not previous:
        return 0.0
    return (current - previous) / previous * 100


def count_returning_customers(client_ids: Iterable[uuid.UUID]) -> int:
    """Quantidade de clientes que aparecem em mais de um pedido."""
    return sum(1 for count in Counter(client_ids).values() if count > 1)


def month_label(day: datetime.date) -> str:
    return f"{MONTH_LABELS[day.month - 1]}/{day.year}"


def revenue_by_month(
    rows: Iterable[tuple[datetime.date, Decimal]],
    first_month: datetime.date,
    months: int,
) -> list[ChartPoint]:
    """
    Série mensal de receitas.

    Todos os meses da janela aparecem, inclusive os sem lançamentos.
    """
    totals: dict[tuple[int, int], Decimal] = {}
    for day, amount in rows:
        key = (day.year, day.month)
        totals[key] = totals.get(key, Decimal("0")) + Decimal(amount)

    points = []
    for offset in range(months):
        month = add_months(first_month, offset)
        value = totals.get((month.year, month.month), Decimal("0"))
        points.append(ChartPoint(date=month_label(month), value=float(value), previous_value=0.0))
    return points


def default_period(today: datetime.date) -> tuple[datetime.date, datetime.date]:
    """Janela padrão: do início do mês de N-1 meses atrás até o fim do mês atual."""
    start = month_start(add_months(today, -(settings.dashboard_window_months - 1)))
    return start, month_end(today)


async def run_concurrently(*coros: Awaitable) -> list:
    """
    Executa as corrotinas em paralelo e devolve os resultados na ordem.

    Se uma delas falhar, as demais são canceladas (liberando as sessões
    abertas) e a exceção original é propagada.
    """
    try:
        async with asyncio.TaskGroup() as tg:
            tasks = [tg.create_task(coro) for coro in coros]
    except ExceptionGroup as group:
        logger.error("Falha em leitura paralela: %r", group.exceptions)
        raise group.exceptions[0]
    return [task.result() for task in tasks]


def day_bounds(
    start: datetime.date,
    end: datetime.date,
) -> tuple[datetime.datetime, datetime.datetime]:
    """Instantes [início de start, início do dia seguinte a end) no fuso configurado."""
    tz = ZoneInfo(settings.timezone)
    lower = datetime.datetime.combine(start, datetime.time.min, tzinfo=tz)
    upper = datetime.datetime.combine(end + datetime.timedelta(days=1), datetime.time.min, tzinfo=tz)
    return lower, upper


class DashboardService:
    """
    Métricas, gráficos e agenda de retiradas/devoluções.

    Args:
        session_factory: Fábrica de sessões para as leituras paralelas
            (padrão: a do módulo database)
    """

    def __init__(self, session_factory: Optional[async_sessionmaker[AsyncSession]] = None):
        self._session_factory = session_factory or get_session_factory()
        self._orders = OrderService()
        self._transactions = TransactionService()
        self._availability = AvailabilityService()

    async def _read(self, query: Callable[[AsyncSession], Awaitable[T]]) -> T:
        async with self._session_factory() as session:
            return await query(session)

    async def metrics(
        self,
        start: datetime.date,
        end: datetime.date,
        today: Optional[datetime.date] = None,
    ) -> DashboardMetrics:
        """
        Métricas do período [start, end].

        O crescimento compara com os meses civis anteriores à janela; os
        clientes recorrentes consideram os pedidos desde o início do mês
        de N meses atrás.
        """
        today = today or local_today()
        previous_start = month_start(add_months(start, -1))
        previous_end = month_end(add_months(end, -1))
        returning_since = month_start(add_months(today, -settings.returning_customer_months))

        (
            status_counts,
            revenue,
            expenses,
            occupation,
            client_ids,
            previous_orders,
        ) = await run_concurrently(
            self._read(lambda s: self._order_status_counts(s, start, end)),
            self._read(lambda s: self._transactions.sum_by_type(s, TransactionType.RECEITA, start, end)),
            self._read(lambda s: self._transactions.sum_by_type(s, TransactionType.DESPESA, start, end)),
            self._read(lambda s: self._availability.occupancy(s, start, end)),
            self._read(lambda s: self._client_ids_since(s, returning_since)),
            self._read(lambda s: self._count_orders(s, previous_start, previous_end)),
        )

        total_orders = sum(status_counts.values())
        metrics = DashboardMetrics(
            period_start=start,
            period_end=end,
            total_orders=total_orders,
            completed_orders=status_counts.get(OrderStatus.COMPLETED.value, 0),
            canceled_orders=status_counts.get(OrderStatus.CANCELED.value, 0),
            revenue=revenue,
            expenses=expenses,
            balance=revenue - expenses,
            occupation_rate=occupation,
            returning_customers=count_returning_customers(client_ids),
            monthly_growth=monthly_growth(total_orders, previous_orders),
        )
        logger.info(
            "Métricas %s a %s: %d pedidos, receita %s, despesas %s",
            start, end, total_orders, revenue, expenses,
        )
        return metrics

    async def revenue_chart(
        self,
        db: AsyncSession,
        months: Optional[int] = None,
        today: Optional[datetime.date] = None,
    ) -> list[ChartPoint]:
        """Receitas por mês nos últimos N meses, incluindo o atual."""
        months = months or settings.dashboard_window_months
        today = today or local_today()
        first_month = month_start(add_months(today, -(months - 1)))

        result = await db.execute(
            select(Transaction.date, Transaction.amount)
            .where(
                Transaction.type == TransactionType.RECEITA.value,
                Transaction.date >= first_month,
                Transaction.date <= month_end(today),
            )
            .order_by(Transaction.date.asc())
        )
        return revenue_by_month(result.all(), first_month, months)

    async def occupation_chart(
        self,
        db: AsyncSession,
        days: Optional[int] = None,
        today: Optional[datetime.date] = None,
    ) -> list[ChartPoint]:
        """Ocupação diária nos últimos N dias."""
        days = days or settings.occupation_chart_days
        today = today or local_today()
        start = today - datetime.timedelta(days=days)
        return await self._availability.occupation_chart(db, start, today)

    async def today_returns(
        self,
        db: AsyncSession,
        today: Optional[datetime.date] = None,
    ) -> list[Order]:
        """Pedidos ativos com devolução prevista para hoje."""
        today = today or local_today()
        result = await db.execute(
            select(Order)
            .options(selectinload(Order.items).selectinload(OrderItem.item))
            .where(Order.return_date == today, Order.order_status == OrderStatus.ACTIVE.value)
            .order_by(Order.return_time.asc())
        )
        return list(result.unique().scalars().all())

    async def upcoming_pickups(
        self,
        db: AsyncSession,
        today: Optional[datetime.date] = None,
        days: Optional[int] = None,
    ) -> list[Order]:
        """Pedidos pendentes com retirada entre hoje e os próximos N dias."""
        today = today or local_today()
        last_day = today + datetime.timedelta(days=days or settings.upcoming_pickup_days)
        result = await db.execute(
            select(Order)
            .options(selectinload(Order.items).selectinload(OrderItem.item))
            .where(
                Order.pickup_date >= today,
                Order.pickup_date <= last_day,
                Order.order_status == OrderStatus.PENDING.value,
            )
            .order_by(Order.pickup_date.asc(), Order.pickup_time.asc())
        )
        return list(result.unique().scalars().all())

    async def confirm_pickup(self, db: AsyncSession, order_id: uuid.UUID, actor: Optional[User]) -> Order:
        return await self._orders.confirm_pickup(db, order_id, actor)

    async def confirm_return(self, db: AsyncSession, order_id: uuid.UUID, actor: Optional[User]) -> Order:
        return await self._orders.confirm_return(db, order_id, actor)

    async def report_data(
        self,
        db: AsyncSession,
        start: datetime.date,
        end: datetime.date,
    ) -> ReportData:
        """Métricas e série de receitas para exportação."""
        metrics, chart = await run_concurrently(
            self.metrics(start, end),
            self.revenue_chart(db),
        )
        return ReportData(
            metrics=metrics,
            revenue_chart=chart,
            generated_at=datetime.datetime.now(datetime.timezone.utc),
        )

    # ----------------------------------------------------------------
    # Leituras
    # ----------------------------------------------------------------

    @staticmethod
    async def _order_status_counts(
        db: AsyncSession,
        start: datetime.date,
        end: datetime.date,
    ) -> dict[str, int]:
        lower, upper = day_bounds(start, end)
        result = await db.execute(
            select(Order.order_status, func.count(Order.id))
            .where(Order.created_at >= lower, Order.created_at < upper)
            .group_by(Order.order_status)
        )
        return {status: count for status, count in result.all()}

    @staticmethod
    async def _count_orders(db: AsyncSession, start: datetime.date, end: datetime.date) -> int:
        lower, upper = day_bounds(start, end)
        result = await db.execute(
            select(func.count(Order.id)).where(Order.created_at >= lower, Order.created_at < upper)
        )
        return result.scalar() or 0

    @staticmethod
    async def _client_ids_since(db: AsyncSession, since: datetime.date) -> list[uuid.UUID]:
        lower, _ = day_bounds(since, since)
        result = await db.execute(select(Order.client_id).where(Order.created_at >= lower))
        return list(result.scalars().all())


def get_dashboard_service() -> DashboardService:
    """Factory do serviço do dashboard."""
    return DashboardService()


__all__ = [
    "DashboardService",
    "get_dashboard_service",
    "monthly_growth",
    "count_returning_customers",
    "revenue_by_month",
    "month_label",
    "default_period",
]
