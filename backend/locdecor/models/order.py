"""
Modelos SQLAlchemy dos Pedidos de Locação
Projeto: LocDecor (Gestão de Locação de Decorações)

Contém:
- Order: pedido de locação (cabeçalho)
- OrderItem: itens do acervo locados no pedido
"""


from __future__ import annotations
import datetime
import uuid
from decimal import Decimal
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import CheckConstraint, Date, ForeignKey, Index, Integer, Numeric, String, Text, Time, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from locdecor.models import Base
from locdecor.models.mixins import TimestampMixin, UUIDMixin

if TYPE_CHECKING:
    from locdecor.models.client import Client
    from locdecor.models.inventory import InventoryItem


# Os estados são definidos em locdecor.schemas.order.OrderStatus


class Order(Base, UUIDMixin, TimestampMixin):
    """
    Pedido de locação.

    Attributes:
        order_number: Número sequencial do pedido, com zeros à esquerda (000001)
        client_id: UUID do cliente locatário
        plan: Plano contratado (MINI DECORAÇÃO, BRONZE, PRATA, OURO, COMPOSICAO)
        pickup_date / pickup_time: Data e hora da retirada
        return_date / return_time: Data e hora da devolução
        payment_status: SINAL 50% | COMPLETO
        order_status: pending | active | completed | canceled
        total_amount: Σ quantity × unit_price dos itens (recalculado no servidor)
        payment_method: pix | credit | debit | cash | transfer
        notes: Observações livres

    Relationships:
        client: Cliente locatário
        items: Itens locados

    States:
        pending → active → completed
           ↓        ↓
        canceled  canceled
    """

    __tablename__ = "orders"

    # ------------------------------------------------------------
    # Colunas Relações
    # ------------------------------------------------------------
    client_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("clients.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
        doc="UUID do cliente locatário",
    )

    # ------------------------------------------------------------
    # Colunas Dados
    # ------------------------------------------------------------
    order_number: Mapped[str] = mapped_column(
        String(10),
        unique=True,
        nullable=False,
        doc="Número sequencial do pedido",
    )

    plan: Mapped[str] = mapped_column(
        String(30),
        nullable=False,
        doc="Plano contratado",
    )

    pickup_date: Mapped[datetime.date] = mapped_column(
        Date,
        nullable=False,
        doc="Data da retirada",
    )

    pickup_time: Mapped[datetime.time] = mapped_column(
        Time,
        nullable=False,
        doc="Hora da retirada",
    )

    return_date: Mapped[datetime.date] = mapped_column(
        Date,
        nullable=False,
        doc="Data da devolução",
    )

    return_time: Mapped[datetime.time] = mapped_column(
        Time,
        nullable=False,
        doc="Hora da devolução",
    )

    payment_status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default="SINAL 50%",
        doc="Situação do pagamento",
    )

    order_status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default="pending",
        doc="Estado do pedido",
    )

    total_amount: Mapped[Decimal] = mapped_column(
        Numeric(10, 2),
        nullable=False,
        default=Decimal("0.00"),
        doc="Valor total da locação",
    )

    payment_method: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default="pix",
        doc="Forma de pagamento",
    )

    notes: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
        doc="Observações",
    )

    # ------------------------------------------------------------
    # Relationships
    # ------------------------------------------------------------
    client: Mapped["Client"] = relationship(
        "Client",
        back_populates="orders",
        lazy="joined",
        doc="Cliente locatário",
    )

    items: Mapped[List["OrderItem"]] = relationship(
        "OrderItem",
        back_populates="order",
        cascade="all, delete-orphan",
        lazy="noload",
        doc="Itens locados",
    )

    # ------------------------------------------------------------
    # Índices e Restrições
    # ------------------------------------------------------------
    __table_args__ = (
        Index("ix_orders_order_status", "order_status"),
        Index("ix_orders_pickup_date", "pickup_date"),
        Index("ix_orders_return_date", "return_date"),
        Index("ix_orders_status_created", "order_status", "created_at"),
        CheckConstraint(
            "order_status IN ('pending', 'active', 'completed', 'canceled')",
            name="ck_orders_order_status",
        ),
        CheckConstraint(
            "payment_status IN ('SINAL 50%', 'COMPLETO')",
            name="ck_orders_payment_status",
        ),
        CheckConstraint(
            "payment_method IN ('pix', 'credit', 'debit', 'cash', 'transfer')",
            name="ck_orders_payment_method",
        ),
        CheckConstraint("return_date >= pickup_date", name="ck_orders_dates"),
        CheckConstraint("total_amount >= 0", name="ck_orders_total_amount"),
    )

    def __repr__(self) -> str:
        return f"<Order(number={self.order_number}, status={self.order_status}, client_id={self.client_id})>"


class OrderItem(Base, UUIDMixin, TimestampMixin):
    """
    Item locado em um pedido.

    O unit_price é uma cópia do valor de aluguel do item no momento do
    pedido; alterações posteriores no acervo não afetam pedidos existentes.
    """

    __tablename__ = "order_items"

    order_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("orders.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        doc="UUID do pedido",
    )

    item_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("inventory_items.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
        doc="UUID do item do acervo",
    )

    quantity: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=1,
        doc="Quantidade locada",
    )

    unit_price: Mapped[Decimal] = mapped_column(
        Numeric(10, 2),
        nullable=False,
        doc="Valor unitário no momento do pedido",
    )

    # ------------------------------------------------------------
    # Relationships
    # ------------------------------------------------------------
    order: Mapped["Order"] = relationship(
        "Order",
        back_populates="items",
        doc="Pedido",
    )

    item: Mapped["InventoryItem"] = relationship(
        "InventoryItem",
        lazy="joined",
        doc="Item do acervo",
    )

    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_order_items_quantity"),
        CheckConstraint("unit_price >= 0", name="ck_order_items_unit_price"),
    )

    @property
    def line_total(self) -> Decimal:
        """Total da linha (quantity * unit_price)."""
        return self.quantity * self.unit_price

    def __repr__(self) -> str:
        return f"<OrderItem(order_id={self.order_id}, item_id={self.item_id}, qty={self.quantity})>"
