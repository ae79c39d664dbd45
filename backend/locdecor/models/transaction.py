"""
Modelo SQLAlchemy para os lançamentos financeiros
Projeto: LocDecor (Gestão de Locação de Decorações)
"""


from __future__ import annotations
import datetime
import uuid
from decimal import Decimal
from typing import Optional

from sqlalchemy import CheckConstraint, Date, ForeignKey, Index, Numeric, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from locdecor.models import Base
from locdecor.models.mixins import TimestampMixin, UUIDMixin


class Transaction(Base, UUIDMixin, TimestampMixin):
    """
    Lançamento financeiro (receita ou despesa).

    Attributes:
        type: receita | despesa
        category: Categoria do lançamento (depende do tipo)
        amount: Valor (sempre positivo; o tipo define o sinal)
        date: Data de competência
        description: Descrição livre
        payment_method: Forma de pagamento
        status: pending | completed | scheduled
        order_id: Pedido relacionado (opcional)
    """

    __tablename__ = "transactions"

    type: Mapped[str] = mapped_column(
        String(10),
        nullable=False,
        doc="Tipo: receita ou despesa",
    )

    category: Mapped[str] = mapped_column(
        String(30),
        nullable=False,
        doc="Categoria do lançamento",
    )

    amount: Mapped[Decimal] = mapped_column(
        Numeric(10, 2),
        nullable=False,
        doc="Valor do lançamento",
    )

    date: Mapped[datetime.date] = mapped_column(
        Date,
        nullable=False,
        doc="Data do lançamento",
    )

    description: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
        doc="Descrição",
    )

    payment_method: Mapped[Optional[str]] = mapped_column(
        String(20),
        nullable=True,
        doc="Forma de pagamento",
    )

    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default="completed",
        doc="Situação: pending, completed ou scheduled",
    )

    order_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("orders.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
        doc="Pedido relacionado",
    )

    __table_args__ = (
        Index("ix_transactions_date", "date"),
        Index("ix_transactions_type_date", "type", "date"),
        CheckConstraint("type IN ('receita', 'despesa')", name="ck_transactions_type"),
        CheckConstraint(
            "status IN ('pending', 'completed', 'scheduled')",
            name="ck_transactions_status",
        ),
        CheckConstraint("amount > 0", name="ck_transactions_amount"),
    )

    def __repr__(self) -> str:
        return f"<Transaction(type={self.type}, amount={self.amount}, date={self.date})>"
