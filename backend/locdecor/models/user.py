"""
Modelos SQLAlchemy de autenticação
Projeto: LocDecor (Gestão de Locação de Decorações)

- User: usuários do back-office
- RevokedToken: tokens invalidados no logout
"""

from __future__ import annotations
import datetime
from enum import Enum

from sqlalchemy import Boolean, DateTime, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from locdecor.models import Base
from locdecor.models.mixins import TimestampMixin, UUIDMixin


class UserRole(str, Enum):
    """Papéis de usuário."""
    ADMIN = "admin"
    OPERATOR = "operator"


class User(Base, UUIDMixin, TimestampMixin):
    """
    Usuário do sistema.

    Attributes:
        email: Email único do usuário
        hashed_password: Hash bcrypt da senha
        full_name: Nome completo
        role: Papel (admin, operator)
        is_active: False bloqueia o login
    """

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        doc="Email único do usuário",
    )

    hashed_password: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        doc="Hash da senha",
    )

    full_name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        default="",
        doc="Nome completo do usuário",
    )

    role: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=UserRole.OPERATOR.value,
        doc="Papel do usuário",
    )

    is_active: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        nullable=False,
        doc="Indica se o usuário está ativo",
    )

    __table_args__ = (
        Index("ix_users_email", "email"),
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email}, role={self.role})>"


class RevokedToken(Base, UUIDMixin, TimestampMixin):
    """
    Token JWT revogado pelo logout.

    O identificador (jti) fica registrado até a expiração do token.
    """

    __tablename__ = "revoked_tokens"

    jti: Mapped[str] = mapped_column(
        String(64),
        unique=True,
        nullable=False,
        index=True,
        doc="Identificador único do token (claim jti)",
    )

    expires_at: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        doc="Expiração original do token",
    )

    def __repr__(self) -> str:
        return f"<RevokedToken(jti={self.jti}, expires_at={self.expires_at})>"
