"""
Router FastAPI das tarefas
Projeto: LocDecor (Gestão de Locação de Decorações)
"""

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from locdecor.core.database import get_db
from locdecor.core.deps import CurrentUser
from locdecor.schemas.task import TaskAlerts, TaskCreate, TaskRead, TaskStatus, TaskTimeframe, TaskUpdate
from locdecor.services.task_service import TaskService, get_task_service

router = APIRouter(
    prefix="/tasks",
    tags=["Tarefas"],
)


@router.get(
    "/",
    name="tarefas_lista",
    summary="Lista tarefas",
    description="Tarefas ordenadas por prazo, opcionalmente limitadas a hoje, semana ou mês.",
    response_model=list[TaskRead],
)
async def get_tasks(
    current_user: CurrentUser,
    timeframe: Optional[TaskTimeframe] = Query(None),
    status_filter: Optional[TaskStatus] = Query(None, alias="status"),
    db: AsyncSession = Depends(get_db),
    service: TaskService = Depends(get_task_service),
) -> list[TaskRead]:
    tasks = await service.list_tasks(db=db, timeframe=timeframe, status=status_filter)
    return [TaskRead.model_validate(t) for t in tasks]


@router.get(
    "/alerts",
    name="tarefas_alertas",
    summary="Alertas de prazo",
    response_model=TaskAlerts,
)
async def get_alerts(
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_db),
    service: TaskService = Depends(get_task_service),
) -> TaskAlerts:
    """Tarefas abertas vencidas, de hoje e da semana (grupos disjuntos)."""
    return await service.alerts(db=db)


@router.post(
    "/",
    name="tarefa_cria",
    summary="Cria tarefa",
    response_model=TaskRead,
    status_code=status.HTTP_201_CREATED,
)
async def create_task(
    data: TaskCreate,
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_db),
    service: TaskService = Depends(get_task_service),
) -> TaskRead:
    task = await service.create(db=db, data=data, actor=current_user)
    await db.commit()
    return TaskRead.model_validate(task)


@router.put(
    "/{task_id}",
    name="tarefa_atualiza",
    summary="Atualiza tarefa",
    response_model=TaskRead,
)
async def update_task(
    task_id: uuid.UUID,
    data: TaskUpdate,
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_db),
    service: TaskService = Depends(get_task_service),
) -> TaskRead:
    task = await service.update(db=db, task_id=task_id, data=data, actor=current_user)
    await db.commit()
    return TaskRead.model_validate(task)


@router.post(
    "/{task_id}/complete",
    name="tarefa_conclui",
    summary="Conclui tarefa",
    response_model=TaskRead,
)
async def complete_task(
    task_id: uuid.UUID,
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_db),
    service: TaskService = Depends(get_task_service),
) -> TaskRead:
    task = await service.complete(db=db, task_id=task_id, actor=current_user)
    await db.commit()
    return TaskRead.model_validate(task)


@router.delete(
    "/{task_id}",
    name="tarefa_exclui",
    summary="Exclui tarefa",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def delete_task(
    task_id: uuid.UUID,
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_db),
    service: TaskService = Depends(get_task_service),
) -> None:
    await service.delete(db=db, task_id=task_id, actor=current_user)
    await db.commit()
