"""
Descritores de exibição
Projeto: LocDecor (Gestão de Locação de Decorações)

Mapeia cada valor dos enums de status/prioridade para rótulo, cor e
ícone usados pela interface. Cada mapeamento cobre o enum inteiro; um
valor sem descritor interrompe o import do módulo.
"""

from enum import Enum
from typing import Mapping, Optional, TypeVar

from pydantic import BaseModel, ConfigDict

from locdecor.schemas.order import OrderStatus
from locdecor.schemas.task import TaskPriority, TaskStatus
from locdecor.schemas.transaction import TransactionStatus


class Display(BaseModel):
    """Rótulo, cor e ícone de um valor de enum."""
    model_config = ConfigDict(frozen=True)

    label: str
    color: str
    icon: Optional[str] = None


E = TypeVar("E", bound=Enum)


def _total(enum_cls: type[E], mapping: Mapping[E, Display]) -> dict[E, Display]:
    missing = [member.value for member in enum_cls if member not in mapping]
    if missing:
        raise RuntimeError(
            f"Descritores ausentes para {enum_cls.__name__}: {', '.join(missing)}"
        )
    return dict(mapping)


ORDER_STATUS_DISPLAY = _total(OrderStatus, {
    OrderStatus.PENDING: Display(label="Pendente", color="yellow", icon="Clock"),
    OrderStatus.ACTIVE: Display(label="Ativo", color="blue", icon="Package"),
    OrderStatus.COMPLETED: Display(label="Concluído", color="green", icon="CheckCircle2"),
    OrderStatus.CANCELED: Display(label="Cancelado", color="red", icon="XCircle"),
})

TASK_STATUS_DISPLAY = _total(TaskStatus, {
    TaskStatus.PENDING: Display(label="Pendente", color="gray", icon="Clock"),
    TaskStatus.IN_PROGRESS: Display(label="Em Andamento", color="yellow", icon="CircleDot"),
    TaskStatus.COMPLETED: Display(label="Concluída", color="green", icon="CheckCircle2"),
})

TASK_PRIORITY_DISPLAY = _total(TaskPriority, {
    TaskPriority.LOW: Display(label="Baixa", color="green"),
    TaskPriority.MEDIUM: Display(label="Média", color="yellow"),
    TaskPriority.HIGH: Display(label="Alta", color="red"),
})

TRANSACTION_STATUS_DISPLAY = _total(TransactionStatus, {
    TransactionStatus.PENDING: Display(label="Pendente", color="yellow"),
    TransactionStatus.COMPLETED: Display(label="Pago", color="green"),
    TransactionStatus.SCHEDULED: Display(label="Agendado", color="blue"),
})


DISPLAY_TABLES: dict[str, dict] = {
    "order_status": ORDER_STATUS_DISPLAY,
    "task_status": TASK_STATUS_DISPLAY,
    "task_priority": TASK_PRIORITY_DISPLAY,
    "transaction_status": TRANSACTION_STATUS_DISPLAY,
}


__all__ = [
    "Display",
    "ORDER_STATUS_DISPLAY",
    "TASK_STATUS_DISPLAY",
    "TASK_PRIORITY_DISPLAY",
    "TRANSACTION_STATUS_DISPLAY",
    "DISPLAY_TABLES",
]
