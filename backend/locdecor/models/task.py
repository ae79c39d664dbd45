"""
Modelo SQLAlchemy para as tarefas
Projeto: LocDecor (Gestão de Locação de Decorações)
"""


from __future__ import annotations
import datetime
import uuid
from typing import Optional

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Index, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from locdecor.models import Base
from locdecor.models.mixins import TimestampMixin, UUIDMixin


class Task(Base, UUIDMixin, TimestampMixin):
    """
    Tarefa interna da equipe.

    Attributes:
        title: Título
        description: Descrição
        due_date: Prazo (data e hora)
        priority: low | medium | high
        status: pending | in_progress | completed
        created_by: Usuário que criou a tarefa
        assigned_to: Usuário responsável
    """

    __tablename__ = "tasks"

    title: Mapped[str] = mapped_column(
        String(200),
        nullable=False,
        doc="Título da tarefa",
    )

    description: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
        doc="Descrição",
    )

    due_date: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        doc="Prazo",
    )

    priority: Mapped[str] = mapped_column(
        String(10),
        nullable=False,
        default="medium",
        doc="Prioridade",
    )

    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default="pending",
        doc="Situação",
    )

    created_by: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        doc="Usuário criador",
    )

    assigned_to: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
        doc="Usuário responsável",
    )

    __table_args__ = (
        Index("ix_tasks_due_date", "due_date"),
        Index("ix_tasks_status_due", "status", "due_date"),
        CheckConstraint("priority IN ('low', 'medium', 'high')", name="ck_tasks_priority"),
        CheckConstraint(
            "status IN ('pending', 'in_progress', 'completed')",
            name="ck_tasks_status",
        ),
    )

    def __repr__(self) -> str:
        return f"<Task(title={self.title}, status={self.status}, due={self.due_date})>"
