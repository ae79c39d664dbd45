"""
Service Layer dos lançamentos financeiros
Projeto: LocDecor (Gestão de Locação de Decorações)
"""

import datetime
import logging
import uuid
from decimal import Decimal
from typing import Optional

from sqlalchemy import func, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from locdecor.core.exceptions import BusinessValidationError, ConflictError, NotFoundError
from locdecor.models import Order, Transaction, User
from locdecor.schemas.transaction import (
    TransactionCreate,
    TransactionType,
    TransactionUpdate,
    validate_category,
)
from locdecor.services.auth_service import ensure_authenticated

logger = logging.getLogger(__name__)


class TransactionService:
    """Livro de receitas e despesas."""

    async def get_all(
        self,
        db: AsyncSession,
        page: int = 1,
        per_page: int = 20,
        search: Optional[str] = None,
        type_: Optional[TransactionType] = None,
    ) -> tuple[list[Transaction], int]:
        """
        Lista paginada de lançamentos, mais recentes primeiro.

        Args:
            search: Termo buscado na descrição e na categoria
            type_: Filtro receita/despesa

        Returns:
            Tupla (lançamentos, total)
        """
        conditions = []
        if type_ is not None:
            conditions.append(Transaction.type == TransactionType(type_).value)
        if search:
            term = f"%{search.strip()}%"
            conditions.append(or_(Transaction.description.ilike(term), Transaction.category.ilike(term)))

        query = select(Transaction).order_by(Transaction.date.desc(), Transaction.created_at.desc())
        count_query = select(func.count()).select_from(Transaction)
        if conditions:
            query = query.where(*conditions)
            count_query = count_query.where(*conditions)

        result = await db.execute(query.offset((page - 1) * per_page).limit(per_page))
        transactions = list(result.scalars().all())

        count_result = await db.execute(count_query)
        total = count_result.scalar() or 0

        logger.debug("Recuperados %d lançamentos de %d", len(transactions), total)
        return transactions, total

    async def get_by_id(self, db: AsyncSession, transaction_id: uuid.UUID) -> Transaction:
        """
        Raises:
            NotFoundError: Se o lançamento não existir
        """
        result = await db.execute(select(Transaction).where(Transaction.id == transaction_id))
        transaction = result.scalar_one_or_none()
        if transaction is None:
            logger.warning("Lançamento não encontrado: %s", transaction_id)
            raise NotFoundError(f"Lançamento {transaction_id} não encontrado")
        return transaction

    async def create(
        self,
        db: AsyncSession,
        data: TransactionCreate,
        actor: Optional[User],
    ) -> Transaction:
        """
        Registra um lançamento.

        Raises:
            AuthenticationError: Sem usuário autenticado
            NotFoundError: Pedido relacionado inexistente
        """
        ensure_authenticated(actor, "registrar lançamentos")
        if data.order_id is not None:
            await self._check_order_exists(db, data.order_id)

        transaction = Transaction(
            type=data.type.value,
            category=data.category,
            amount=data.amount,
            date=data.date,
            description=data.description,
            payment_method=data.payment_method.value if data.payment_method else None,
            status=data.status.value,
            order_id=data.order_id,
        )

        try:
            db.add(transaction)
            await db.flush()
            await db.refresh(transaction)
        except SQLAlchemyError as e:
            logger.error("Erro SQLAlchemy ao registrar lançamento: %s - %s", e.__class__.__name__, e)
            await db.rollback()
            raise ConflictError(f"Erro do banco ao registrar lançamento: {e}")

        logger.info(
            "Lançamento registrado: %s %s R$ %s (%s)",
            transaction.type, transaction.category, transaction.amount, transaction.date,
        )
        return transaction

    async def update(
        self,
        db: AsyncSession,
        transaction_id: uuid.UUID,
        data: TransactionUpdate,
        actor: Optional[User],
    ) -> Transaction:
        """
        Atualiza os campos enviados.

        A categoria é revalidada contra o tipo resultante.
        """
        ensure_authenticated(actor, "alterar lançamentos")
        transaction = await self.get_by_id(db, transaction_id)

        update_data = data.model_dump(exclude_unset=True)
        new_type = TransactionType(update_data.get("type") or transaction.type)
        category = update_data.get("category") or transaction.category
        try:
            update_data["category"] = validate_category(new_type, category)
        except ValueError as e:
            raise BusinessValidationError(str(e))

        if update_data.get("order_id") is not None:
            await self._check_order_exists(db, update_data["order_id"])

        for field, value in update_data.items():
            if hasattr(value, "value"):
                value = value.value
            setattr(transaction, field, value)

        try:
            await db.flush()
            await db.refresh(transaction)
        except SQLAlchemyError as e:
            logger.error("Erro SQLAlchemy ao alterar lançamento: %s - %s", e.__class__.__name__, e)
            await db.rollback()
            raise ConflictError(f"Erro do banco ao alterar lançamento: {e}")

        logger.info("Lançamento atualizado: %s", transaction.id)
        return transaction

    async def delete(
        self,
        db: AsyncSession,
        transaction_id: uuid.UUID,
        actor: Optional[User],
    ) -> None:
        """Remove definitivamente um lançamento."""
        ensure_authenticated(actor, "excluir lançamentos")
        transaction = await self.get_by_id(db, transaction_id)

        try:
            await db.delete(transaction)
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Erro SQLAlchemy ao excluir lançamento: %s - %s", e.__class__.__name__, e)
            await db.rollback()
            raise ConflictError(f"Erro do banco ao excluir lançamento: {e}")

        logger.info("Lançamento excluído: %s", transaction_id)

    async def sum_by_type(
        self,
        db: AsyncSession,
        type_: TransactionType,
        start: datetime.date,
        end: datetime.date,
    ) -> Decimal:
        """Soma dos lançamentos de um tipo com data na janela [start, end]."""
        result = await db.execute(
            select(func.coalesce(func.sum(Transaction.amount), 0)).where(
                Transaction.type == type_.value,
                Transaction.date >= start,
                Transaction.date <= end,
            )
        )
        return Decimal(result.scalar() or 0)

    async def _check_order_exists(self, db: AsyncSession, order_id: uuid.UUID) -> None:
        result = await db.execute(select(Order.id).where(Order.id == order_id))
        if result.scalar_one_or_none() is None:
            raise NotFoundError(f"Pedido {order_id} não encontrado")


def get_transaction_service() -> TransactionService:
    """Factory do serviço financeiro."""
    return TransactionService()


__all__ = [
    "TransactionService",
    "get_transaction_service",
]
