"""
Service Layer do acervo
Projeto: LocDecor (Gestão de Locação de Decorações)

Cadastro de itens com código sequencial, busca, alerta de estoque mínimo
e exclusão lógica.
"""

import logging
import uuid
from typing import Optional

from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from locdecor.core.config import settings
from locdecor.core.exceptions import ConflictError, DuplicateError, NotFoundError
from locdecor.models import InventoryItem, User
from locdecor.models.mixins import STATUS_ACTIVE, STATUS_INACTIVE
from locdecor.schemas.client import RecordStatus
from locdecor.schemas.inventory import InventoryCategory, InventoryItemCreate, InventoryItemUpdate
from locdecor.services.auth_service import ensure_authenticated
from locdecor.services.client_service import is_unique_violation

logger = logging.getLogger(__name__)

CODE_DIGITS = 5


def next_code(last_code: Optional[str], suffix: str) -> str:
    """
    Próximo código do acervo.

    Incrementa a parte numérica do último código emitido e completa com
    zeros até 5 dígitos.

    Examples:
        >>> next_code(None, "25")
        '00001-25'
        >>> next_code("00041-25", "25")
        '00042-25'
    """
    number = int(last_code.split("-")[0]) + 1 if last_code else 1
    return f"{number:0{CODE_DIGITS}d}-{suffix}"


class InventoryService:
    """CRUD do acervo."""

    async def get_all(
        self,
        db: AsyncSession,
        page: int = 1,
        per_page: int = 20,
        search: Optional[str] = None,
        category: Optional[InventoryCategory] = None,
        status: Optional[RecordStatus] = None,
    ) -> tuple[list[InventoryItem], int]:
        """
        Lista paginada do acervo, ordenada por nome.

        Args:
            search: Termo buscado em nome e código
            category: Filtro de categoria
            status: Filtro de status (sem filtro inclui inativos)

        Returns:
            Tupla (itens, total)
        """
        conditions = []
        if search:
            term = f"%{search.strip()}%"
            conditions.append(or_(InventoryItem.name.ilike(term), InventoryItem.code.ilike(term)))
        if category is not None:
            conditions.append(InventoryItem.category == InventoryCategory(category).value)
        if status is not None:
            conditions.append(InventoryItem.status == RecordStatus(status).value)

        query = select(InventoryItem).order_by(InventoryItem.name.asc())
        count_query = select(func.count()).select_from(InventoryItem)
        if conditions:
            query = query.where(*conditions)
            count_query = count_query.where(*conditions)

        result = await db.execute(query.offset((page - 1) * per_page).limit(per_page))
        items = list(result.scalars().all())

        count_result = await db.execute(count_query)
        total = count_result.scalar() or 0

        logger.info("Recuperados %s itens do acervo de %s (página %s)", len(items), total, page)
        return items, total

    async def get_orderable(
        self,
        db: AsyncSession,
        search: Optional[str] = None,
    ) -> list[InventoryItem]:
        """Itens ativos com estoque, oferecidos na montagem do pedido."""
        query = (
            select(InventoryItem)
            .where(InventoryItem.is_active, InventoryItem.current_stock > 0)
            .order_by(InventoryItem.name.asc())
        )
        if search:
            term = f"%{search.strip()}%"
            query = query.where(or_(InventoryItem.name.ilike(term), InventoryItem.code.ilike(term)))

        result = await db.execute(query)
        return list(result.scalars().all())

    async def get_low_stock(self, db: AsyncSession) -> list[InventoryItem]:
        """Itens ativos com estoque atual menor ou igual ao mínimo."""
        result = await db.execute(
            select(InventoryItem)
            .where(
                InventoryItem.is_active,
                InventoryItem.current_stock <= InventoryItem.min_stock,
            )
            .order_by(InventoryItem.current_stock.asc(), InventoryItem.name.asc())
        )
        items = list(result.scalars().all())
        if items:
            logger.info("%s itens com estoque no mínimo ou abaixo", len(items))
        return items

    async def get_by_id(self, db: AsyncSession, item_id: uuid.UUID) -> InventoryItem:
        """
        Busca um item pelo ID.

        Raises:
            NotFoundError: Se o item não existir
        """
        result = await db.execute(select(InventoryItem).where(InventoryItem.id == item_id))
        item = result.scalar_one_or_none()
        if item is None:
            logger.warning("Item do acervo não encontrado: %s", item_id)
            raise NotFoundError(f"Item {item_id} não encontrado")
        return item

    async def create(
        self,
        db: AsyncSession,
        item_data: InventoryItemCreate,
        actor: Optional[User],
    ) -> InventoryItem:
        """
        Cadastra um item gerando o próximo código sequencial.

        Raises:
            AuthenticationError: Sem usuário autenticado
            DuplicateError: Código gerado colidiu com outro cadastro simultâneo
        """
        ensure_authenticated(actor, "cadastrar itens do acervo")

        result = await db.execute(
            select(InventoryItem.code).order_by(InventoryItem.code.desc()).limit(1)
        )
        code = next_code(result.scalar_one_or_none(), settings.inventory_code_suffix)

        data = item_data.model_dump()
        data["category"] = item_data.category.value
        item = InventoryItem(**data, code=code, status=STATUS_ACTIVE)

        try:
            db.add(item)
            await db.flush()
            await db.refresh(item)
        except IntegrityError as e:
            logger.error("IntegrityError ao cadastrar item %s: %s", code, e.orig)
            await db.rollback()
            if is_unique_violation(e, "code"):
                raise DuplicateError(f"Código {code} já utilizado, tente novamente")
            raise ConflictError(f"Erro ao cadastrar item: {e.orig}")
        except SQLAlchemyError as e:
            logger.error("Erro SQLAlchemy ao cadastrar item: %s - %s", e.__class__.__name__, e)
            await db.rollback()
            raise ConflictError(f"Erro do banco ao cadastrar item: {e}")

        logger.info("Item cadastrado: %s - %s", item.code, item.name)
        return item

    async def update(
        self,
        db: AsyncSession,
        item_id: uuid.UUID,
        item_data: InventoryItemUpdate,
        actor: Optional[User],
    ) -> InventoryItem:
        """Atualiza os campos enviados de um item."""
        ensure_authenticated(actor, "alterar itens do acervo")
        item = await self.get_by_id(db, item_id)

        update_data = item_data.model_dump(exclude_unset=True)
        if update_data.get("category") is not None:
            update_data["category"] = InventoryCategory(update_data["category"]).value

        for field, value in update_data.items():
            setattr(item, field, value)

        try:
            await db.flush()
            await db.refresh(item)
        except SQLAlchemyError as e:
            logger.error("Erro SQLAlchemy ao atualizar item: %s - %s", e.__class__.__name__, e)
            await db.rollback()
            raise ConflictError(f"Erro do banco ao atualizar item: {e}")

        logger.info("Item atualizado: %s - %s", item.code, item.name)
        return item

    async def delete(
        self,
        db: AsyncSession,
        item_id: uuid.UUID,
        actor: Optional[User],
    ) -> InventoryItem:
        """Exclusão lógica: o item passa para 'inactive'."""
        ensure_authenticated(actor, "excluir itens do acervo")
        item = await self.get_by_id(db, item_id)

        item.status = STATUS_INACTIVE
        try:
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Erro SQLAlchemy ao excluir item: %s - %s", e.__class__.__name__, e)
            await db.rollback()
            raise ConflictError(f"Erro do banco ao excluir item: {e}")

        logger.info("Soft delete item: %s - %s", item.code, item.name)
        return item


def get_inventory_service() -> InventoryService:
    """Factory do serviço do acervo."""
    return InventoryService()


__all__ = [
    "InventoryService",
    "get_inventory_service",
    "next_code",
]
