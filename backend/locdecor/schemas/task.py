"""
Schemas Pydantic para as tarefas
Projeto: LocDecor (Gestão de Locação de Decorações)
"""

import datetime
import uuid
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class TaskPriority(str, Enum):
    """Prioridade da tarefa."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class TaskStatus(str, Enum):
    """Situação da tarefa."""
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class TaskTimeframe(str, Enum):
    """Janelas de listagem de tarefas a partir de hoje."""
    TODAY = "today"
    WEEK = "week"
    MONTH = "month"


class TaskCreate(BaseModel):
    """
    Criação de tarefa.

    created_by e assigned_to são preenchidos com o usuário autenticado.
    """
    title: str = Field(..., max_length=200, description="Título")
    description: Optional[str] = Field(None, max_length=5000, description="Descrição")
    due_date: datetime.datetime = Field(..., description="Prazo")
    priority: TaskPriority = TaskPriority.MEDIUM
    status: TaskStatus = TaskStatus.PENDING

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("O título é obrigatório")
        return v


class TaskUpdate(BaseModel):
    """Atualização parcial de tarefa."""
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=5000)
    due_date: Optional[datetime.datetime] = None
    priority: Optional[TaskPriority] = None
    status: Optional[TaskStatus] = None


class TaskRead(BaseModel):
    """Tarefa serializada para a API."""
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    title: str
    description: Optional[str] = None
    due_date: datetime.datetime
    priority: TaskPriority
    status: TaskStatus
    created_by: Optional[uuid.UUID] = None
    assigned_to: Optional[uuid.UUID] = None
    created_at: datetime.datetime
    updated_at: datetime.datetime


class TaskAlerts(BaseModel):
    """
    Tarefas abertas agrupadas por prazo.

    Os grupos são disjuntos: uma tarefa aparece em no máximo um deles.
    """
    today: list[TaskRead] = Field(default_factory=list)
    week: list[TaskRead] = Field(default_factory=list)
    overdue: list[TaskRead] = Field(default_factory=list)


__all__ = [
    "TaskPriority",
    "TaskStatus",
    "TaskTimeframe",
    "TaskCreate",
    "TaskUpdate",
    "TaskRead",
    "TaskAlerts",
]
