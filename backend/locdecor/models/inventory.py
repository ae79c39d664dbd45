"""
Modelos SQLAlchemy do acervo
Projeto: LocDecor (Gestão de Locação de Decorações)

Contém:
- InventoryItem: item do acervo de decoração
- ItemAvailability: contadores diários de disponibilidade/reserva por item
"""


from __future__ import annotations
import datetime
import uuid
from decimal import Decimal
from typing import Optional

from sqlalchemy import CheckConstraint, Date, ForeignKey, Index, Integer, Numeric, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from locdecor.models import Base
from locdecor.models.mixins import SoftDeleteMixin, TimestampMixin, UUIDMixin

# As categorias são definidas em locdecor.schemas.inventory.InventoryCategory


class InventoryItem(Base, UUIDMixin, TimestampMixin, SoftDeleteMixin):
    """
    Item do acervo disponível para locação.

    Attributes:
        code: Código sequencial único no formato NNNNN-AA (ex.: 00001-25)
        name: Nome do item
        category: Categoria (MÓVEIS, SUPORTES, ...)
        description: Descrição livre
        rental_price: Valor de aluguel por unidade
        acquisition_price: Valor de aquisição, usado como valor de reposição no contrato
        current_stock: Quantidade em estoque
        min_stock: Estoque mínimo para alerta
        status: 'active' | 'inactive' (soft delete)
    """

    __tablename__ = "inventory_items"

    code: Mapped[str] = mapped_column(
        String(10),
        unique=True,
        nullable=False,
        doc="Código sequencial único (NNNNN-AA)",
    )

    name: Mapped[str] = mapped_column(
        String(150),
        nullable=False,
        doc="Nome do item",
    )

    category: Mapped[str] = mapped_column(
        String(30),
        nullable=False,
        doc="Categoria do item",
    )

    description: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
        doc="Descrição do item",
    )

    rental_price: Mapped[Decimal] = mapped_column(
        Numeric(10, 2),
        nullable=False,
        doc="Valor de aluguel por unidade",
    )

    acquisition_price: Mapped[Optional[Decimal]] = mapped_column(
        Numeric(10, 2),
        nullable=True,
        doc="Valor de aquisição (reposição em caso de dano)",
    )

    current_stock: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        doc="Quantidade em estoque",
    )

    min_stock: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        doc="Estoque mínimo",
    )

    __table_args__ = (
        Index("ix_inventory_items_name", "name"),
        Index("ix_inventory_items_category", "category"),
        CheckConstraint("current_stock >= 0", name="ck_inventory_items_current_stock"),
        CheckConstraint("min_stock >= 0", name="ck_inventory_items_min_stock"),
        CheckConstraint("rental_price >= 0", name="ck_inventory_items_rental_price"),
    )

    @property
    def is_low_stock(self) -> bool:
        """True se o estoque atual está no mínimo ou abaixo dele."""
        return self.current_stock <= self.min_stock

    def __repr__(self) -> str:
        return f"<InventoryItem(code={self.code}, name={self.name}, stock={self.current_stock})>"


class ItemAvailability(Base, UUIDMixin, TimestampMixin):
    """
    Disponibilidade diária de um item.

    Tabela mantida fora deste serviço (somente leitura aqui). Cada linha
    registra, para um item e um dia, quantas unidades estão livres e
    quantas estão reservadas.
    """

    __tablename__ = "item_availability"

    item_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("inventory_items.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        doc="UUID do item",
    )

    date: Mapped[datetime.date] = mapped_column(
        Date,
        nullable=False,
        doc="Dia de referência",
    )

    available_quantity: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        doc="Unidades livres no dia",
    )

    reserved_quantity: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        doc="Unidades reservadas no dia",
    )

    item: Mapped["InventoryItem"] = relationship(
        "InventoryItem",
        lazy="noload",
        doc="Item de referência",
    )

    __table_args__ = (
        Index("ix_item_availability_date", "date"),
        Index("ix_item_availability_item_date", "item_id", "date", unique=True),
    )

    def __repr__(self) -> str:
        return (
            f"<ItemAvailability(item_id={self.item_id}, date={self.date}, "
            f"reserved={self.reserved_quantity}, available={self.available_quantity})>"
        )
