"""
Service Layer das tarefas
Projeto: LocDecor (Gestão de Locação de Decorações)

Tarefas internas com prazo, prioridade e alertas por vencimento.
Os limites de dia e semana são calculados no fuso configurado.
"""

import datetime
import logging
import uuid
from typing import Iterable, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from locdecor.core.dates import add_months, local_now, start_of_day
from locdecor.core.exceptions import ConflictError, NotFoundError
from locdecor.models import Task, User
from locdecor.schemas.task import TaskAlerts, TaskCreate, TaskRead, TaskStatus, TaskTimeframe, TaskUpdate
from locdecor.services.auth_service import ensure_authenticated

logger = logging.getLogger(__name__)


def end_of_week(moment: datetime.datetime) -> datetime.datetime:
    """Último instante do sábado da semana corrente (semana de domingo a sábado)."""
    days_to_saturday = (5 - moment.weekday()) % 7
    saturday = start_of_day(moment) + datetime.timedelta(days=days_to_saturday)
    return saturday.replace(hour=23, minute=59, second=59, microsecond=999999)


def bucket_tasks(tasks: Iterable[Task], now: datetime.datetime) -> dict[str, list[Task]]:
    """
    Agrupa tarefas abertas por prazo.

    - overdue: prazo antes do início de hoje
    - today: prazo dentro de hoje
    - week: prazo depois de hoje até o fim da semana

    Tarefas concluídas e prazos posteriores à semana ficam fora.
    Cada tarefa cai em no máximo um grupo.
    """
    today = start_of_day(now)
    tomorrow = today + datetime.timedelta(days=1)
    week_end = end_of_week(now)

    buckets: dict[str, list[Task]] = {"today": [], "week": [], "overdue": []}
    for task in tasks:
        if task.status == TaskStatus.COMPLETED.value:
            continue
        due = task.due_date.astimezone(now.tzinfo) if now.tzinfo else task.due_date
        if due < today:
            buckets["overdue"].append(task)
        elif due < tomorrow:
            buckets["today"].append(task)
        elif due <= week_end:
            buckets["week"].append(task)
    return buckets


def timeframe_window(
    timeframe: TaskTimeframe,
    now: datetime.datetime,
) -> tuple[datetime.datetime, datetime.datetime]:
    """Janela [início, fim) de listagem a partir do início de hoje."""
    start = start_of_day(now)
    if timeframe == TaskTimeframe.TODAY:
        end = start + datetime.timedelta(days=1)
    elif timeframe == TaskTimeframe.WEEK:
        end = start + datetime.timedelta(days=7)
    else:
        end = add_months(start, 1)
    return start, end


class TaskService:
    """CRUD e alertas de tarefas."""

    async def list_tasks(
        self,
        db: AsyncSession,
        timeframe: Optional[TaskTimeframe] = None,
        status: Optional[TaskStatus] = None,
        now: Optional[datetime.datetime] = None,
    ) -> list[Task]:
        """
        Tarefas ordenadas por prazo.

        Args:
            timeframe: Janela de hoje, dos próximos 7 dias ou do próximo mês
            status: Filtro de situação
        """
        query = select(Task).order_by(Task.due_date.asc())
        if timeframe is not None:
            start, end = timeframe_window(TaskTimeframe(timeframe), now or local_now())
            query = query.where(Task.due_date >= start, Task.due_date < end)
        if status is not None:
            query = query.where(Task.status == TaskStatus(status).value)

        result = await db.execute(query)
        return list(result.scalars().all())

    async def alerts(
        self,
        db: AsyncSession,
        now: Optional[datetime.datetime] = None,
    ) -> TaskAlerts:
        """Tarefas abertas vencidas, de hoje e da semana."""
        now = now or local_now()
        result = await db.execute(
            select(Task)
            .where(Task.status != TaskStatus.COMPLETED.value, Task.due_date <= end_of_week(now))
            .order_by(Task.due_date.asc())
        )
        buckets = bucket_tasks(result.scalars().all(), now)
        if buckets["overdue"]:
            logger.info("%d tarefas vencidas", len(buckets["overdue"]))
        return TaskAlerts(
            **{name: [TaskRead.model_validate(t) for t in tasks] for name, tasks in buckets.items()}
        )

    async def get_by_id(self, db: AsyncSession, task_id: uuid.UUID) -> Task:
        result = await db.execute(select(Task).where(Task.id == task_id))
        task = result.scalar_one_or_none()
        if task is None:
            logger.warning("Tarefa não encontrada: %s", task_id)
            raise NotFoundError(f"Tarefa {task_id} não encontrada")
        return task

    async def create(
        self,
        db: AsyncSession,
        data: TaskCreate,
        actor: Optional[User],
    ) -> Task:
        """
        Cria uma tarefa atribuída ao próprio usuário.

        Raises:
            AuthenticationError: Sem usuário autenticado
        """
        ensure_authenticated(actor, "criar tarefas")
        task = Task(
            title=data.title,
            description=data.description,
            due_date=data.due_date,
            priority=data.priority.value,
            status=data.status.value,
            created_by=actor.id,
            assigned_to=actor.id,
        )

        try:
            db.add(task)
            await db.flush()
            await db.refresh(task)
        except SQLAlchemyError as e:
            logger.error("Erro SQLAlchemy ao criar tarefa: %s - %s", e.__class__.__name__, e)
            await db.rollback()
            raise ConflictError(f"Erro do banco ao criar tarefa: {e}")

        logger.info("Tarefa criada: %s (prazo %s, por %s)", task.title, task.due_date, actor.email)
        return task

    async def update(
        self,
        db: AsyncSession,
        task_id: uuid.UUID,
        data: TaskUpdate,
        actor: Optional[User],
    ) -> Task:
        ensure_authenticated(actor, "alterar tarefas")
        task = await self.get_by_id(db, task_id)

        for field, value in data.model_dump(exclude_unset=True).items():
            if field in ("priority", "status") and value is not None:
                value = value.value
            setattr(task, field, value)

        try:
            await db.flush()
            await db.refresh(task)
        except SQLAlchemyError as e:
            logger.error("Erro SQLAlchemy ao alterar tarefa: %s - %s", e.__class__.__name__, e)
            await db.rollback()
            raise ConflictError(f"Erro do banco ao alterar tarefa: {e}")

        logger.info("Tarefa atualizada: %s", task.id)
        return task

    async def complete(
        self,
        db: AsyncSession,
        task_id: uuid.UUID,
        actor: Optional[User],
    ) -> Task:
        """Marca a tarefa como concluída."""
        return await self.update(db, task_id, TaskUpdate(status=TaskStatus.COMPLETED), actor)

    async def delete(
        self,
        db: AsyncSession,
        task_id: uuid.UUID,
        actor: Optional[User],
    ) -> None:
        ensure_authenticated(actor, "excluir tarefas")
        task = await self.get_by_id(db, task_id)
        try:
            await db.delete(task)
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Erro SQLAlchemy ao excluir tarefa: %s - %s", e.__class__.__name__, e)
            await db.rollback()
            raise ConflictError(f"Erro do banco ao excluir tarefa: {e}")
        logger.info("Tarefa excluída: %s", task_id)


def get_task_service() -> TaskService:
    """Factory do serviço de tarefas."""
    return TaskService()


__all__ = [
    "TaskService",
    "get_task_service",
    "bucket_tasks",
    "end_of_week",
    "timeframe_window",
]
