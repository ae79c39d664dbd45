"""
Ocupação do acervo
Projeto: LocDecor (Gestão de Locação de Decorações)

Leitura da tabela de disponibilidade diária (mantida externamente) e
cálculo da taxa de ocupação.
"""

import datetime
import logging
from collections import defaultdict
from typing import Iterable

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from locdecor.models import ItemAvailability
from locdecor.schemas.dashboard import ChartPoint

logger = logging.getLogger(__name__)


def utilisation(record: ItemAvailability) -> float:
    """Percentual reservado de um registro; capacidade zero vale 0."""
    capacity = (record.reserved_quantity or 0) + (record.available_quantity or 0)
    if capacity <= 0:
        return 0.0
    return (record.reserved_quantity or 0) / capacity * 100


def occupancy_rate(records: Iterable[ItemAvailability]) -> float:
    """
    Média simples da ocupação dos registros.

    Lista vazia resulta em 0.

    Example:
        reservado 3 / disponível 1 → 75%; reservado 0 / disponível 4 → 0%
        média = 37.5
    """
    values = [utilisation(r) for r in records]
    if not values:
        return 0.0
    return sum(values) / len(values)


def daily_occupation_chart(records: Iterable[ItemAvailability]) -> list[ChartPoint]:
    """Soma da ocupação por dia, em ordem cronológica, rotulada dd/MM."""
    per_day: dict[datetime.date, float] = defaultdict(float)
    for record in records:
        per_day[record.date] += utilisation(record)
    return [
        ChartPoint(date=day.strftime("%d/%m"), value=round(total, 2))
        for day, total in sorted(per_day.items())
    ]


class AvailabilityService:
    """Consultas somente leitura sobre ItemAvailability."""

    async def get_records(
        self,
        db: AsyncSession,
        start: datetime.date,
        end: datetime.date,
    ) -> list[ItemAvailability]:
        result = await db.execute(
            select(ItemAvailability)
            .where(ItemAvailability.date >= start, ItemAvailability.date <= end)
            .order_by(ItemAvailability.date.asc())
        )
        return list(result.scalars().all())

    async def occupancy(
        self,
        db: AsyncSession,
        start: datetime.date,
        end: datetime.date,
    ) -> float:
        """Taxa de ocupação (%) na janela [start, end]."""
        records = await self.get_records(db, start, end)
        rate = occupancy_rate(records)
        logger.debug("Ocupação %s a %s: %.2f%% (%d registros)", start, end, rate, len(records))
        return rate

    async def occupation_chart(
        self,
        db: AsyncSession,
        start: datetime.date,
        end: datetime.date,
    ) -> list[ChartPoint]:
        return daily_occupation_chart(await self.get_records(db, start, end))


def get_availability_service() -> AvailabilityService:
    return AvailabilityService()


__all__ = [
    "AvailabilityService",
    "get_availability_service",
    "occupancy_rate",
    "daily_occupation_chart",
]
