"""
Schemas Pydantic do dashboard e dos relatórios
Projeto: LocDecor (Gestão de Locação de Decorações)
"""

import datetime
import uuid
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from locdecor.schemas.client import ClientSummary
from locdecor.schemas.order import OrderItemRead, OrderStatus


class ReportFormat(str, Enum):
    """Formatos de exportação do relatório."""
    PDF = "pdf"
    EXCEL = "excel"
    CSV = "csv"


class DashboardMetrics(BaseModel):
    """
    Métricas consolidadas de um período.

    Attributes:
        period_start / period_end: Janela consultada
        total_orders: Pedidos criados na janela
        completed_orders: Pedidos concluídos entre eles
        canceled_orders: Pedidos cancelados entre eles
        revenue: Soma das receitas
        expenses: Soma das despesas
        balance: revenue - expenses
        occupation_rate: Taxa média de ocupação (%)
        returning_customers: Clientes com mais de um pedido nos últimos meses
        monthly_growth: Crescimento (%) do número de pedidos contra o mês anterior
    """
    period_start: datetime.date
    period_end: datetime.date
    total_orders: int = 0
    completed_orders: int = 0
    canceled_orders: int = 0
    revenue: Decimal = Decimal("0")
    expenses: Decimal = Decimal("0")
    balance: Decimal = Decimal("0")
    occupation_rate: float = 0.0
    returning_customers: int = 0
    monthly_growth: float = 0.0


class ChartPoint(BaseModel):
    """Ponto de série temporal para gráficos."""
    date: str = Field(..., description="Rótulo do ponto (ex.: Jan/2026, 05/03)")
    value: float
    previous_value: Optional[float] = None


class OrderSchedule(BaseModel):
    """Pedido resumido para retiradas e devoluções do dashboard."""
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    order_number: str
    pickup_date: datetime.date
    pickup_time: datetime.time
    return_date: datetime.date
    return_time: datetime.time
    total_amount: Decimal
    order_status: OrderStatus
    client: Optional[ClientSummary] = None
    items: list[OrderItemRead] = Field(default_factory=list)


class ReportPeriod(BaseModel):
    """Período do relatório; o padrão são os últimos meses configurados."""
    start_date: Optional[datetime.date] = None
    end_date: Optional[datetime.date] = None

    @model_validator(mode="after")
    def validate_range(self) -> "ReportPeriod":
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError("A data final não pode ser anterior à data inicial")
        return self


class ReportData(BaseModel):
    """Conteúdo de um relatório exportado."""
    metrics: DashboardMetrics
    revenue_chart: list[ChartPoint]
    generated_at: datetime.datetime


__all__ = [
    "ReportFormat",
    "DashboardMetrics",
    "ChartPoint",
    "OrderSchedule",
    "ReportPeriod",
    "ReportData",
]
