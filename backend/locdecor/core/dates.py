"""
Datas no fuso da empresa
Projeto: LocDecor (Gestão de Locação de Decorações)
"""

import calendar
import datetime
from zoneinfo import ZoneInfo

from locdecor.core.config import settings


def local_now() -> datetime.datetime:
    """Agora, no fuso configurado (settings.timezone)."""
    return datetime.datetime.now(ZoneInfo(settings.timezone))


def local_today() -> datetime.date:
    return local_now().date()


def start_of_day(moment: datetime.datetime) -> datetime.datetime:
    return moment.replace(hour=0, minute=0, second=0, microsecond=0)


def month_start(day: datetime.date) -> datetime.date:
    return day.replace(day=1)


def add_months(day: datetime.date, months: int) -> datetime.date:
    """
    Desloca uma data em meses, limitando o dia ao fim do mês de destino.

    Examples:
        >>> add_months(datetime.date(2026, 1, 31), 1)
        datetime.date(2026, 2, 28)
        >>> add_months(datetime.date(2026, 3, 15), -3)
        datetime.date(2025, 12, 15)
    """
    index = day.year * 12 + (day.month - 1) + months
    year, month = divmod(index, 12)
    month += 1
    last_day = calendar.monthrange(year, month)[1]
    return day.replace(year=year, month=month, day=min(day.day, last_day))


def month_end(day: datetime.date) -> datetime.date:
    return add_months(month_start(day), 1) - datetime.timedelta(days=1)
