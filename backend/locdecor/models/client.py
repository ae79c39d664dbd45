"""
Modelo SQLAlchemy para a entidade Client
Projeto: LocDecor (Gestão de Locação de Decorações)

Representa o cadastro de clientes (locatários).
"""


from __future__ import annotations
import datetime
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import Date, Index, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from locdecor.models import Base
from locdecor.models.mixins import SoftDeleteMixin, TimestampMixin, UUIDMixin

if TYPE_CHECKING:
    from locdecor.models.order import Order


class Client(Base, UUIDMixin, TimestampMixin, SoftDeleteMixin):
    """
    Cadastro de clientes.

    Attributes:
        name: Nome completo (obrigatório)
        document: CPF, sempre armazenado apenas com dígitos (11), único
        birth_date: Data de nascimento
        phone: Telefone, apenas dígitos
        email: Email de contato
        address: Logradouro
        address_number: Número
        neighborhood: Bairro
        zip_code: CEP, apenas dígitos
        status: 'active' | 'inactive' (soft delete)

    Relationships:
        orders: Pedidos do cliente
    """

    __tablename__ = "clients"

    # ------------------------------------------------------------
    # Dados pessoais
    # ------------------------------------------------------------
    name: Mapped[str] = mapped_column(
        String(150),
        nullable=False,
        doc="Nome completo",
    )

    document: Mapped[str] = mapped_column(
        String(11),
        nullable=False,
        unique=True,
        doc="CPF (11 dígitos)",
    )

    birth_date: Mapped[Optional[datetime.date]] = mapped_column(
        Date,
        nullable=True,
        doc="Data de nascimento",
    )

    # ------------------------------------------------------------
    # Contato
    # ------------------------------------------------------------
    phone: Mapped[Optional[str]] = mapped_column(
        String(20),
        nullable=True,
        doc="Telefone (apenas dígitos)",
    )

    email: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
        doc="Email",
    )

    # ------------------------------------------------------------
    # Endereço
    # ------------------------------------------------------------
    address: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
        doc="Logradouro",
    )

    address_number: Mapped[Optional[str]] = mapped_column(
        String(20),
        nullable=True,
        doc="Número",
    )

    neighborhood: Mapped[Optional[str]] = mapped_column(
        String(100),
        nullable=True,
        doc="Bairro",
    )

    zip_code: Mapped[Optional[str]] = mapped_column(
        String(8),
        nullable=True,
        doc="CEP (apenas dígitos)",
    )

    # ------------------------------------------------------------
    # Relationships
    # ------------------------------------------------------------
    orders: Mapped[List["Order"]] = relationship(
        "Order",
        back_populates="client",
        lazy="noload",
        doc="Pedidos do cliente",
    )

    __table_args__ = (
        Index("ix_clients_name", "name"),
    )

    def __repr__(self) -> str:
        return f"<Client(id={self.id}, name={self.name}, status={self.status})>"
