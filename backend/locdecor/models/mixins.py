"""
Mixins SQLAlchemy para os modelos
Projeto: LocDecor (Gestão de Locação de Decorações)

Mixins reutilizáveis com colunas comuns aos modelos.
"""

import datetime
import uuid

from sqlalchemy import DateTime, String, Uuid
from sqlalchemy import event
from sqlalchemy.ext.hybrid import hybrid_property
from sqlalchemy.orm import Mapped, Session, mapped_column
from sqlalchemy.sql import func

STATUS_ACTIVE = "active"
STATUS_INACTIVE = "inactive"


class SoftDeleteMixin:
    """
    Mixin para exclusão lógica (soft delete).

    Adiciona a coluna status ('active' | 'inactive'). Excluir um registro
    apenas muda o status para 'inactive'; a linha permanece no banco para
    preservar a integridade referencial com pedidos antigos.

    Usage:
        class MyModel(Base, SoftDeleteMixin):
            __tablename__ = "my_table"
            ...
    """

    status: Mapped[str] = mapped_column(
        String(10),
        default=STATUS_ACTIVE,
        nullable=False,
        index=True,
        doc="Status do registro: 'active' ou 'inactive'",
    )

    @hybrid_property
    def is_active(self) -> bool:
        """True se o registro não foi excluído logicamente."""
        return self.status == STATUS_ACTIVE


class TimestampMixin:
    """
    Mixin para timestamps de criação e atualização.

    - created_at: preenchido pelo banco na inserção
    - updated_at: atualizado pelo listener before_flush
    """

    created_at: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
        doc="Data/hora de criação do registro",
    )

    updated_at: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
        doc="Data/hora da última atualização do registro",
    )


class UUIDMixin:
    """Mixin para chave primária UUID gerada na aplicação."""

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
        doc="UUID primary key",
    )


# ------------------------------------------------------------
# Event Listeners
# ------------------------------------------------------------
@event.listens_for(Session, "before_flush")
def update_timestamp(session: Session, flush_context, instances) -> None:
    """
    Atualiza updated_at de todos os objetos novos e modificados antes do flush.
    """
    now = datetime.datetime.now(datetime.timezone.utc)

    for obj in session.dirty:
        if hasattr(obj, "updated_at") and session.is_modified(obj, include_collections=False):
            obj.updated_at = now

    for obj in session.new:
        if hasattr(obj, "updated_at"):
            obj.updated_at = now
