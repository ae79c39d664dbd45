"""
Schemas Pydantic para os Pedidos de Locação
Projeto: LocDecor (Gestão de Locação de Decorações)

Define os schemas de validação e serialização da API, a matriz de
transições de estado e as ações disponíveis por estado.
"""

import datetime
import uuid
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    computed_field,
    field_validator,
    model_validator,
)

from locdecor.schemas.client import ClientSummary
from locdecor.schemas.inventory import InventoryItemSummary


# -------------------------------------------------------------------
# Enums
# -------------------------------------------------------------------

class OrderStatus(str, Enum):
    """Estados do pedido."""
    PENDING = "pending"
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELED = "canceled"


class Plan(str, Enum):
    """Planos de decoração."""
    MINI = "MINI DECORAÇÃO"
    BRONZE = "BRONZE"
    PRATA = "PRATA"
    OURO = "OURO"
    COMPOSICAO = "COMPOSICAO"


class PaymentStatus(str, Enum):
    """Situação do pagamento."""
    SINAL = "SINAL 50%"
    COMPLETO = "COMPLETO"


class PaymentMethod(str, Enum):
    """Formas de pagamento."""
    PIX = "pix"
    CREDIT = "credit"
    DEBIT = "debit"
    CASH = "cash"
    TRANSFER = "transfer"


class OrderAction(str, Enum):
    """Ações que a interface pode oferecer para um pedido."""
    CONFIRM_PICKUP = "confirm_pickup"
    CONFIRM_RETURN = "confirm_return"
    CANCEL = "cancel"
    EDIT = "edit"


# -------------------------------------------------------------------
# Matriz de transições e ações por estado
# -------------------------------------------------------------------

# A validação das transições acontece no service (order_service.py);
# esta matriz é a única fonte e é importada de lá.
VALID_TRANSITIONS: dict[OrderStatus, list[OrderStatus]] = {
    OrderStatus.PENDING: [OrderStatus.ACTIVE, OrderStatus.CANCELED],
    OrderStatus.ACTIVE: [OrderStatus.COMPLETED, OrderStatus.CANCELED],
    OrderStatus.COMPLETED: [],  # Estado final
    OrderStatus.CANCELED: [],  # Estado final
}

TERMINAL_STATUSES = frozenset(s for s, targets in VALID_TRANSITIONS.items() if not targets)

_ACTION_TARGETS: dict[OrderAction, OrderStatus] = {
    OrderAction.CONFIRM_PICKUP: OrderStatus.ACTIVE,
    OrderAction.CONFIRM_RETURN: OrderStatus.COMPLETED,
    OrderAction.CANCEL: OrderStatus.CANCELED,
}


def available_actions(status: OrderStatus | str) -> list[OrderAction]:
    """
    Ações permitidas para um pedido no estado informado.

    Uma ação de transição só aparece se a matriz permitir o estado de
    destino a partir do estado atual; editar só vale para estados não finais.

    Args:
        status: Estado atual do pedido

    Returns:
        Lista de ações, na ordem de exibição
    """
    status = OrderStatus(status)
    allowed = VALID_TRANSITIONS[status]
    actions = [action for action, target in _ACTION_TARGETS.items() if target in allowed]
    if status not in TERMINAL_STATUSES:
        actions.append(OrderAction.EDIT)
    return actions


# -------------------------------------------------------------------
# Itens do pedido
# -------------------------------------------------------------------

class OrderItemCreate(BaseModel):
    """
    Linha do pedido.

    Attributes:
        item_id: Item do acervo
        quantity: Quantidade (> 0)
        unit_price: Valor unitário; se omitido, usa o valor de aluguel atual do item
    """
    item_id: uuid.UUID
    quantity: int = Field(default=1, description="Quantidade")
    unit_price: Optional[Decimal] = Field(None, ge=Decimal("0"), description="Valor unitário")

    @field_validator("quantity")
    @classmethod
    def validate_quantity(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("A quantidade deve ser maior que zero")
        return v


class OrderItemRead(BaseModel):
    """Linha do pedido serializada, com o item do acervo expandido."""
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    item_id: uuid.UUID
    quantity: int
    unit_price: Decimal
    item: Optional[InventoryItemSummary] = None

    @computed_field
    @property
    def line_total(self) -> Decimal:
        """Total da linha (quantity * unit_price)."""
        return self.quantity * self.unit_price


# -------------------------------------------------------------------
# Pedido
# -------------------------------------------------------------------

class OrderCreate(BaseModel):
    """
    Criação de pedido.

    O total é sempre recalculado no servidor a partir dos itens; um
    total_amount enviado pelo cliente é ignorado.
    """
    client_id: Optional[uuid.UUID] = None
    plan: Optional[Plan] = None
    pickup_date: Optional[datetime.date] = None
    pickup_time: Optional[datetime.time] = None
    return_date: Optional[datetime.date] = None
    return_time: Optional[datetime.time] = None
    payment_status: PaymentStatus = PaymentStatus.SINAL
    payment_method: PaymentMethod = PaymentMethod.PIX
    notes: Optional[str] = Field(None, max_length=5000)
    items: list[OrderItemCreate] = Field(default_factory=list)

    @model_validator(mode="after")
    def validate_required(self) -> "OrderCreate":
        if (
            self.client_id is None
            or self.plan is None
            or self.pickup_date is None
            or self.pickup_time is None
            or self.return_date is None
            or self.return_time is None
        ):
            raise ValueError("Cliente, plano e datas são obrigatórios")
        if not self.items:
            raise ValueError("Adicione pelo menos um item ao pedido")
        if self.return_date < self.pickup_date:
            raise ValueError("A data de devolução não pode ser anterior à data de retirada")
        return self


class OrderUpdate(OrderCreate):
    """
    Edição de pedido.

    Substitui o cabeçalho e a coleção completa de itens.
    """
    pass


class OrderCancel(BaseModel):
    """Cancelamento de pedido; exige a reconfirmação explícita."""
    confirm: bool = Field(default=False, description="Confirmação do cancelamento")


class OrderRead(BaseModel):
    """Pedido serializado para a API, com cliente e itens."""
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    order_number: str
    client_id: uuid.UUID
    client: Optional[ClientSummary] = None
    plan: Plan
    pickup_date: datetime.date
    pickup_time: datetime.time
    return_date: datetime.date
    return_time: datetime.time
    payment_status: PaymentStatus
    order_status: OrderStatus
    total_amount: Decimal
    payment_method: PaymentMethod
    notes: Optional[str] = None
    items: list[OrderItemRead] = Field(default_factory=list)
    created_at: datetime.datetime
    updated_at: datetime.datetime

    @computed_field
    @property
    def available_actions(self) -> list[OrderAction]:
        """Ações que a interface pode exibir para este pedido."""
        return available_actions(self.order_status)


class OrderList(BaseModel):
    """Resposta paginada de pedidos."""
    items: list[OrderRead]
    total: int
    page: int
    per_page: int
    total_pages: int = 0

    @model_validator(mode="after")
    def compute_total_pages(self) -> "OrderList":
        if self.per_page > 0:
            self.total_pages = (self.total + self.per_page - 1) // self.per_page
        return self


class OrderContract(BaseModel):
    """Texto do contrato de locação."""
    order_id: uuid.UUID
    order_number: str
    content: str


__all__ = [
    "OrderStatus",
    "Plan",
    "PaymentStatus",
    "PaymentMethod",
    "OrderAction",
    "VALID_TRANSITIONS",
    "TERMINAL_STATUSES",
    "available_actions",
    "OrderItemCreate",
    "OrderItemRead",
    "OrderCreate",
    "OrderUpdate",
    "OrderCancel",
    "OrderRead",
    "OrderList",
    "OrderContract",
]
