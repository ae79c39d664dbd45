"""
Router FastAPI do dashboard
Projeto: LocDecor (Gestão de Locação de Decorações)

Métricas do período, gráficos, retiradas e devoluções do dia e os
descritores de exibição dos status.
"""

import datetime
import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from locdecor.core.database import get_db
from locdecor.core.dates import local_today
from locdecor.core.deps import CurrentUser
from locdecor.core.exceptions import BusinessValidationError
from locdecor.schemas.dashboard import ChartPoint, DashboardMetrics, OrderSchedule, ReportPeriod
from locdecor.schemas.display import DISPLAY_TABLES, Display
from locdecor.schemas.order import OrderRead
from locdecor.services.dashboard_service import DashboardService, default_period, get_dashboard_service

router = APIRouter(
    prefix="/dashboard",
    tags=["Dashboard"],
)


def resolve_period(
    start_date: Optional[datetime.date] = Query(None, description="Início do período"),
    end_date: Optional[datetime.date] = Query(None, description="Fim do período"),
) -> tuple[datetime.date, datetime.date]:
    """Período da consulta; datas omitidas seguem a janela padrão."""
    try:
        period = ReportPeriod(start_date=start_date, end_date=end_date)
    except ValidationError as e:
        raise BusinessValidationError(e.errors()[0]["msg"].removeprefix("Value error, "))
    default_start, default_end = default_period(local_today())
    return period.start_date or default_start, period.end_date or default_end


@router.get(
    "/metrics",
    name="dashboard_metricas",
    summary="Métricas do período",
    response_model=DashboardMetrics,
)
async def get_metrics(
    current_user: CurrentUser,
    period: tuple[datetime.date, datetime.date] = Depends(resolve_period),
    service: DashboardService = Depends(get_dashboard_service),
) -> DashboardMetrics:
    start, end = period
    return await service.metrics(start, end)


@router.get(
    "/revenue-chart",
    name="dashboard_receitas",
    summary="Receitas por mês",
    response_model=list[ChartPoint],
)
async def get_revenue_chart(
    current_user: CurrentUser,
    months: Optional[int] = Query(None, ge=1, le=24),
    db: AsyncSession = Depends(get_db),
    service: DashboardService = Depends(get_dashboard_service),
) -> list[ChartPoint]:
    return await service.revenue_chart(db, months=months)


@router.get(
    "/occupation-chart",
    name="dashboard_ocupacao",
    summary="Ocupação diária",
    response_model=list[ChartPoint],
)
async def get_occupation_chart(
    current_user: CurrentUser,
    days: Optional[int] = Query(None, ge=1, le=365),
    db: AsyncSession = Depends(get_db),
    service: DashboardService = Depends(get_dashboard_service),
) -> list[ChartPoint]:
    return await service.occupation_chart(db, days=days)


@router.get(
    "/today-returns",
    name="dashboard_devolucoes_hoje",
    summary="Devoluções previstas para hoje",
    response_model=list[OrderSchedule],
)
async def get_today_returns(
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_db),
    service: DashboardService = Depends(get_dashboard_service),
) -> list[OrderSchedule]:
    orders = await service.today_returns(db)
    return [OrderSchedule.model_validate(o) for o in orders]


@router.get(
    "/upcoming-pickups",
    name="dashboard_proximas_retiradas",
    summary="Retiradas dos próximos dias",
    response_model=list[OrderSchedule],
)
async def get_upcoming_pickups(
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_db),
    service: DashboardService = Depends(get_dashboard_service),
) -> list[OrderSchedule]:
    orders = await service.upcoming_pickups(db)
    return [OrderSchedule.model_validate(o) for o in orders]


@router.post(
    "/pickups/{order_id}/confirm",
    name="dashboard_confirma_retirada",
    summary="Confirma retirada a partir do dashboard",
    response_model=OrderRead,
)
async def confirm_pickup(
    order_id: uuid.UUID,
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_db),
    service: DashboardService = Depends(get_dashboard_service),
) -> OrderRead:
    order = await service.confirm_pickup(db, order_id, current_user)
    await db.commit()
    return OrderRead.model_validate(order)


@router.post(
    "/returns/{order_id}/confirm",
    name="dashboard_confirma_devolucao",
    summary="Confirma devolução a partir do dashboard",
    response_model=OrderRead,
)
async def confirm_return(
    order_id: uuid.UUID,
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_db),
    service: DashboardService = Depends(get_dashboard_service),
) -> OrderRead:
    order = await service.confirm_return(db, order_id, current_user)
    await db.commit()
    return OrderRead.model_validate(order)


@router.get(
    "/display",
    name="dashboard_descritores",
    summary="Rótulos, cores e ícones dos status",
    response_model=dict[str, dict[str, Display]],
)
async def get_display_descriptors(current_user: CurrentUser):
    return {
        name: {member.value: display for member, display in table.items()}
        for name, table in DISPLAY_TABLES.items()
    }
