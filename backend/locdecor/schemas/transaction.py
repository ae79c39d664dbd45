"""
Schemas Pydantic para os lançamentos financeiros
Projeto: LocDecor (Gestão de Locação de Decorações)
"""

import datetime
import uuid
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from locdecor.schemas.order import PaymentMethod


class TransactionType(str, Enum):
    """Tipo do lançamento."""
    RECEITA = "receita"
    DESPESA = "despesa"


class TransactionStatus(str, Enum):
    """Situação do lançamento."""
    PENDING = "pending"
    COMPLETED = "completed"
    SCHEDULED = "scheduled"


# Categorias aceitas por tipo de lançamento
TRANSACTION_CATEGORIES: dict[TransactionType, tuple[str, ...]] = {
    TransactionType.RECEITA: ("vendas", "servicos", "aluguel", "outros"),
    TransactionType.DESPESA: ("fornecedores", "salarios", "marketing", "infraestrutura", "outros"),
}


def validate_category(type_: TransactionType, category: str) -> str:
    """
    Verifica se a categoria pertence ao tipo do lançamento.

    Raises:
        ValueError: Se a categoria não for aceita para o tipo
    """
    category = category.strip().lower()
    if category not in TRANSACTION_CATEGORIES[type_]:
        allowed = ", ".join(TRANSACTION_CATEGORIES[type_])
        raise ValueError(f"Categoria inválida para {type_.value}. Use: {allowed}")
    return category


class TransactionCreate(BaseModel):
    """
    Criação de lançamento.

    Valor, categoria e data são obrigatórios; o status padrão é 'completed'.
    """
    type: TransactionType = TransactionType.RECEITA
    category: Optional[str] = None
    amount: Optional[Decimal] = Field(None, description="Valor")
    date: Optional[datetime.date] = None
    description: Optional[str] = Field(None, max_length=5000)
    payment_method: Optional[PaymentMethod] = None
    status: TransactionStatus = TransactionStatus.COMPLETED
    order_id: Optional[uuid.UUID] = None

    @model_validator(mode="after")
    def validate_required(self) -> "TransactionCreate":
        if not self.amount or not self.category or self.date is None:
            raise ValueError("Valor, categoria e data são obrigatórios")
        if self.amount < 0:
            raise ValueError("O valor deve ser positivo")
        self.category = validate_category(self.type, self.category)
        return self


class TransactionUpdate(BaseModel):
    """Atualização parcial de lançamento."""
    type: Optional[TransactionType] = None
    category: Optional[str] = None
    amount: Optional[Decimal] = Field(None, gt=Decimal("0"))
    date: Optional[datetime.date] = None
    description: Optional[str] = Field(None, max_length=5000)
    payment_method: Optional[PaymentMethod] = None
    status: Optional[TransactionStatus] = None
    order_id: Optional[uuid.UUID] = None


class TransactionRead(BaseModel):
    """Lançamento serializado para a API."""
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    type: TransactionType
    category: str
    amount: Decimal
    date: datetime.date
    description: Optional[str] = None
    payment_method: Optional[PaymentMethod] = None
    status: TransactionStatus
    order_id: Optional[uuid.UUID] = None
    created_at: datetime.datetime
    updated_at: datetime.datetime


class TransactionList(BaseModel):
    """Resposta paginada de lançamentos."""
    items: list[TransactionRead]
    total: int
    page: int
    per_page: int
    total_pages: int = 0

    @model_validator(mode="after")
    def compute_total_pages(self) -> "TransactionList":
        if self.per_page > 0:
            self.total_pages = (self.total + self.per_page - 1) // self.per_page
        return self


__all__ = [
    "TransactionType",
    "TransactionStatus",
    "TRANSACTION_CATEGORIES",
    "validate_category",
    "TransactionCreate",
    "TransactionUpdate",
    "TransactionRead",
    "TransactionList",
]
