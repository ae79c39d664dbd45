"""
Service Layer dos Pedidos de Locação
Projeto: LocDecor (Gestão de Locação de Decorações)

Ciclo de vida do pedido (pending → active → completed, cancelamento),
composição das linhas com cópia do valor de aluguel, cálculo do total no
servidor, edição por diferença de linhas e geração do contrato.
"""

import datetime
import logging
import uuid
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Iterable, NamedTuple, Optional, Sequence

from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from locdecor.core.config import settings
from locdecor.core.dates import local_today
from locdecor.core.exceptions import BusinessValidationError, ConflictError, NotFoundError
from locdecor.models import Client, InventoryItem, Order, OrderItem, User
from locdecor.models.mixins import STATUS_ACTIVE
from locdecor.schemas.order import (
    TERMINAL_STATUSES,
    VALID_TRANSITIONS,
    OrderContract,
    OrderCreate,
    OrderItemCreate,
    OrderStatus,
    OrderUpdate,
)
from locdecor.services.auth_service import ensure_authenticated
from locdecor.services.contract import build_contract, render_contract_text

logger = logging.getLogger(__name__)

CENTS = Decimal("0.01")
ORDER_NUMBER_DIGITS = 6


# -------------------------------------------------------------------
# Funções puras
# -------------------------------------------------------------------

class LineSpec(NamedTuple):
    """Linha desejada do pedido, já resolvida (preço definido)."""
    item_id: uuid.UUID
    quantity: int
    unit_price: Decimal


@dataclass
class ItemDiff:
    """Diferença entre as linhas atuais do pedido e as desejadas."""
    added: list[LineSpec] = field(default_factory=list)
    removed: list[OrderItem] = field(default_factory=list)
    changed: list[tuple[OrderItem, LineSpec]] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (self.added or self.removed or self.changed)


def compute_total(items: Iterable) -> Decimal:
    """
    Total do pedido: Σ quantity × unit_price, arredondado a centavos.

    Example:
        2 × 50.00 + 1 × 30.00 = 130.00
    """
    total = sum(
        (Decimal(line.quantity) * Decimal(line.unit_price) for line in items),
        Decimal("0"),
    )
    return total.quantize(CENTS)


def next_order_number(last_number: Optional[str]) -> str:
    """Próximo número sequencial de pedido, com zeros à esquerda (000001)."""
    number = int(last_number) + 1 if last_number else 1
    return f"{number:0{ORDER_NUMBER_DIGITS}d}"


def merge_lines(lines: Sequence[OrderItemCreate]) -> list[OrderItemCreate]:
    """
    Junta linhas repetidas do mesmo item somando as quantidades.

    O pedido guarda uma linha por item, então as linhas repetidas precisam
    ter o mesmo valor unitário (ou nenhuma delas informar valor).

    Raises:
        BusinessValidationError: Mesmo item com valores unitários diferentes
    """
    merged: dict[uuid.UUID, OrderItemCreate] = {}
    for line in lines:
        if line.item_id in merged:
            current = merged[line.item_id]
            if current.unit_price != line.unit_price:
                logger.warning("Valores unitários divergentes para o item %s", line.item_id)
                raise BusinessValidationError(
                    "O mesmo item foi informado com valores unitários diferentes",
                    extra={"item_id": str(line.item_id)},
                )
            merged[line.item_id] = current.model_copy(
                update={"quantity": current.quantity + line.quantity}
            )
        else:
            merged[line.item_id] = line
    return list(merged.values())


def diff_items(current: Sequence[OrderItem], desired: Sequence[LineSpec]) -> ItemDiff:
    """
    Calcula as linhas adicionadas, removidas e alteradas.

    As linhas são casadas pelo item do acervo.
    """
    diff = ItemDiff()
    current_by_item = {line.item_id: line for line in current}
    desired_ids = set()

    for spec in desired:
        desired_ids.add(spec.item_id)
        existing = current_by_item.get(spec.item_id)
        if existing is None:
            diff.added.append(spec)
        elif existing.quantity != spec.quantity or Decimal(existing.unit_price) != spec.unit_price:
            diff.changed.append((existing, spec))

    diff.removed = [line for line in current if line.item_id not in desired_ids]
    return diff


def check_transition(current: OrderStatus | str, target: OrderStatus) -> None:
    """
    Valida uma transição de estado pela matriz VALID_TRANSITIONS.

    Raises:
        BusinessValidationError: Se a transição não for permitida
    """
    current = OrderStatus(current)
    if target not in VALID_TRANSITIONS[current]:
        logger.warning("Transição não permitida: %s -> %s", current.value, target.value)
        raise BusinessValidationError(
            f"Transição de '{current.value}' para '{target.value}' não permitida"
        )


# -------------------------------------------------------------------
# Service
# -------------------------------------------------------------------

class OrderService:
    """
    Operações sobre pedidos.

    As escritas recebem o usuário da sessão; o commit fica a cargo do
    router, então todas as alterações de uma requisição são atômicas.
    """

    def _base_query(self):
        return select(Order).options(
            selectinload(Order.items).selectinload(OrderItem.item),
        )

    async def get_all(
        self,
        db: AsyncSession,
        page: int = 1,
        per_page: int = 20,
        search: Optional[str] = None,
        status: Optional[OrderStatus] = None,
    ) -> tuple[list[Order], int]:
        """
        Lista paginada de pedidos, mais recentes primeiro.

        Args:
            search: Termo buscado no nome do cliente e no número do pedido
            status: Filtro de estado

        Returns:
            Tupla (pedidos, total)
        """
        conditions = []
        if status is not None:
            conditions.append(Order.order_status == OrderStatus(status).value)
        if search:
            term = f"%{search.strip()}%"
            conditions.append(or_(Client.name.ilike(term), Order.order_number.ilike(term)))

        query = (
            self._base_query()
            .join(Client, Order.client_id == Client.id)
            .order_by(Order.created_at.desc())
        )
        count_query = (
            select(func.count(Order.id))
            .select_from(Order)
            .join(Client, Order.client_id == Client.id)
        )
        if conditions:
            query = query.where(*conditions)
            count_query = count_query.where(*conditions)

        result = await db.execute(query.offset((page - 1) * per_page).limit(per_page))
        orders = list(result.unique().scalars().all())

        count_result = await db.execute(count_query)
        total = count_result.scalar() or 0

        logger.debug("Recuperados %d pedidos de %d", len(orders), total)
        return orders, total

    async def get_by_id(self, db: AsyncSession, order_id: uuid.UUID) -> Order:
        """
        Busca um pedido com cliente e itens.

        Raises:
            NotFoundError: Se o pedido não existir
        """
        result = await db.execute(self._base_query().where(Order.id == order_id))
        order = result.unique().scalar_one_or_none()
        if order is None:
            logger.warning("Pedido não encontrado: %s", order_id)
            raise NotFoundError(f"Pedido {order_id} não encontrado")
        return order

    async def create(
        self,
        db: AsyncSession,
        data: OrderCreate,
        actor: Optional[User],
    ) -> Order:
        """
        Cria um pedido no estado 'pending'.

        Valida cliente ativo e estoque de cada item, copia o valor de aluguel
        quando o valor unitário não é informado e calcula o total.

        Raises:
            AuthenticationError: Sem usuário autenticado
            NotFoundError: Cliente ou item inexistente
            BusinessValidationError: Cliente inativo ou estoque insuficiente
        """
        ensure_authenticated(actor, "criar pedidos")
        await self._get_active_client(db, data.client_id)

        lines = merge_lines(data.items)
        inventory = await self._load_inventory(db, [line.item_id for line in lines])

        for line in lines:
            item = inventory[line.item_id]
            if item.status != STATUS_ACTIVE:
                raise BusinessValidationError(f"O item {item.name} está inativo")
            if line.quantity > item.current_stock:
                logger.warning(
                    "Estoque insuficiente para %s: pedido %s, disponível %s",
                    item.code, line.quantity, item.current_stock,
                )
                raise BusinessValidationError(
                    f"Quantidade disponível insuficiente. Máximo: {item.current_stock}",
                    extra={"item_id": str(item.id), "item_name": item.name},
                )

        specs = [self._resolve_line(line, inventory[line.item_id]) for line in lines]
        order_number = await self._next_order_number(db)

        order = Order(
            order_number=order_number,
            client_id=data.client_id,
            plan=data.plan.value,
            pickup_date=data.pickup_date,
            pickup_time=data.pickup_time,
            return_date=data.return_date,
            return_time=data.return_time,
            payment_status=data.payment_status.value,
            payment_method=data.payment_method.value,
            notes=data.notes,
            order_status=OrderStatus.PENDING.value,
            total_amount=compute_total(specs),
        )
        order.items = [
            OrderItem(item_id=s.item_id, quantity=s.quantity, unit_price=s.unit_price)
            for s in specs
        ]

        try:
            db.add(order)
            await db.flush()
        except IntegrityError as e:
            logger.error("IntegrityError ao criar pedido %s: %s", order_number, e.orig)
            await db.rollback()
            raise ConflictError(f"Erro ao criar pedido: {e.orig}")
        except SQLAlchemyError as e:
            logger.error("Erro SQLAlchemy ao criar pedido: %s - %s", e.__class__.__name__, e)
            await db.rollback()
            raise ConflictError(f"Erro do banco ao criar pedido: {e}")

        logger.info(
            "Pedido %s criado por %s: %d itens, total %s",
            order.order_number, actor.email, len(specs), order.total_amount,
        )
        return await self.get_by_id(db, order.id)

    async def update(
        self,
        db: AsyncSession,
        order_id: uuid.UUID,
        data: OrderUpdate,
        actor: Optional[User],
    ) -> Order:
        """
        Substitui o cabeçalho e a coleção de itens de um pedido.

        As linhas são aplicadas por diferença (adicionadas, removidas,
        alteradas) dentro da transação da requisição: uma falha desfaz
        cabeçalho e itens juntos. O estoque não é revalidado na edição.

        Raises:
            BusinessValidationError: Pedido concluído ou cancelado
        """
        ensure_authenticated(actor, "alterar pedidos")
        order = await self.get_by_id(db, order_id)

        if OrderStatus(order.order_status) in TERMINAL_STATUSES:
            raise BusinessValidationError(
                f"Não é possível alterar um pedido em estado '{order.order_status}'"
            )

        if data.client_id != order.client_id:
            await self._get_active_client(db, data.client_id)

        lines = merge_lines(data.items)
        inventory = await self._load_inventory(db, [line.item_id for line in lines])
        current_prices = {line.item_id: Decimal(line.unit_price) for line in order.items}
        specs = [
            self._resolve_line(line, inventory[line.item_id], current_prices.get(line.item_id))
            for line in lines
        ]
        diff = diff_items(order.items, specs)

        order.client_id = data.client_id
        order.plan = data.plan.value
        order.pickup_date = data.pickup_date
        order.pickup_time = data.pickup_time
        order.return_date = data.return_date
        order.return_time = data.return_time
        order.payment_status = data.payment_status.value
        order.payment_method = data.payment_method.value
        order.notes = data.notes

        for line in diff.removed:
            order.items.remove(line)
        for line, spec in diff.changed:
            line.quantity = spec.quantity
            line.unit_price = spec.unit_price
        for spec in diff.added:
            order.items.append(
                OrderItem(item_id=spec.item_id, quantity=spec.quantity, unit_price=spec.unit_price)
            )
        order.total_amount = compute_total(specs)

        try:
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Erro ao atualizar pedido %s: %s - %s", order.order_number, e.__class__.__name__, e)
            await db.rollback()
            raise ConflictError(f"Erro do banco ao atualizar pedido: {e}")

        logger.info(
            "Pedido %s atualizado: +%d -%d ~%d linhas, total %s",
            order.order_number, len(diff.added), len(diff.removed), len(diff.changed),
            order.total_amount,
        )
        db.expire(order)
        return await self.get_by_id(db, order_id)

    async def confirm_pickup(
        self,
        db: AsyncSession,
        order_id: uuid.UUID,
        actor: Optional[User],
    ) -> Order:
        """Confirma a retirada: pending → active."""
        ensure_authenticated(actor, "confirmar retiradas")
        return await self._transition(db, order_id, OrderStatus.ACTIVE)

    async def confirm_return(
        self,
        db: AsyncSession,
        order_id: uuid.UUID,
        actor: Optional[User],
    ) -> Order:
        """Confirma a devolução: active → completed."""
        ensure_authenticated(actor, "confirmar devoluções")
        return await self._transition(db, order_id, OrderStatus.COMPLETED)

    async def cancel(
        self,
        db: AsyncSession,
        order_id: uuid.UUID,
        confirm: bool,
        actor: Optional[User],
    ) -> Order:
        """
        Cancela um pedido pendente ou ativo.

        Exige a reconfirmação explícita (confirm=True).

        Raises:
            BusinessValidationError: Sem confirmação ou pedido já finalizado
        """
        ensure_authenticated(actor, "cancelar pedidos")
        if not confirm:
            raise BusinessValidationError("Confirme o cancelamento do pedido")
        return await self._transition(db, order_id, OrderStatus.CANCELED)

    async def generate_contract(
        self,
        db: AsyncSession,
        order_id: uuid.UUID,
        today: Optional[datetime.date] = None,
    ) -> OrderContract:
        """Texto do contrato de locação do pedido."""
        order = await self.get_by_id(db, order_id)
        document = build_contract(order, settings, today or local_today())
        return OrderContract(
            order_id=order.id,
            order_number=order.order_number,
            content=render_contract_text(document),
        )

    # ----------------------------------------------------------------
    # Métodos auxiliares
    # ----------------------------------------------------------------

    async def _transition(
        self,
        db: AsyncSession,
        order_id: uuid.UUID,
        target: OrderStatus,
    ) -> Order:
        order = await self.get_by_id(db, order_id)
        check_transition(order.order_status, target)

        previous = order.order_status
        order.order_status = target.value
        try:
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Erro ao mudar estado do pedido %s: %s", order.order_number, e)
            await db.rollback()
            raise ConflictError(f"Erro do banco ao mudar estado do pedido: {e}")

        logger.info("Pedido %s: %s -> %s", order.order_number, previous, target.value)
        return order

    async def _get_active_client(self, db: AsyncSession, client_id: uuid.UUID) -> Client:
        result = await db.execute(select(Client).where(Client.id == client_id))
        client = result.scalar_one_or_none()
        if client is None:
            raise NotFoundError(f"Cliente {client_id} não encontrado")
        if client.status != STATUS_ACTIVE:
            raise BusinessValidationError("O cliente selecionado está inativo")
        return client

    async def _load_inventory(
        self,
        db: AsyncSession,
        item_ids: list[uuid.UUID],
    ) -> dict[uuid.UUID, InventoryItem]:
        result = await db.execute(select(InventoryItem).where(InventoryItem.id.in_(item_ids)))
        items = {item.id: item for item in result.scalars().all()}
        missing = [str(i) for i in item_ids if i not in items]
        if missing:
            raise NotFoundError(f"Itens do acervo não encontrados: {', '.join(missing)}")
        return items

    @staticmethod
    def _resolve_line(
        line: OrderItemCreate,
        item: InventoryItem,
        current_price: Optional[Decimal] = None,
    ) -> LineSpec:
        # Sem valor informado: mantém o valor já copiado na linha, senão usa o aluguel atual
        if line.unit_price is not None:
            price = line.unit_price
        elif current_price is not None:
            price = current_price
        else:
            price = item.rental_price
        return LineSpec(item_id=line.item_id, quantity=line.quantity, unit_price=Decimal(price))

    async def _next_order_number(self, db: AsyncSession) -> str:
        result = await db.execute(select(func.max(Order.order_number)))
        return next_order_number(result.scalar_one_or_none())


def get_order_service() -> OrderService:
    """Factory do serviço de pedidos."""
    return OrderService()


__all__ = [
    "OrderService",
    "get_order_service",
    "LineSpec",
    "ItemDiff",
    "compute_total",
    "next_order_number",
    "merge_lines",
    "diff_items",
    "check_transition",
]
