"""
Service Layer da entidade Client
Projeto: LocDecor (Gestão de Locação de Decorações)

Regras de negócio do cadastro de clientes:
- CPF normalizado e único
- Exclusão lógica (status 'inactive')
- Busca por nome, CPF e telefone
"""

import logging
import uuid
from typing import Optional

from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from locdecor.core.exceptions import ConflictError, DuplicateError, NotFoundError
from locdecor.models import Client, User
from locdecor.models.mixins import STATUS_ACTIVE, STATUS_INACTIVE
from locdecor.schemas.client import ClientCreate, ClientUpdate, RecordStatus
from locdecor.services.auth_service import ensure_authenticated

logger = logging.getLogger(__name__)

UNIQUE_VIOLATION = "23505"
PICKER_LIMIT = 10


def is_unique_violation(error: IntegrityError, column: str) -> bool:
    """True se o IntegrityError for uma violação de unicidade envolvendo a coluna."""
    code = getattr(error.orig, "pgcode", None) or getattr(error.orig, "sqlstate", None)
    message = str(error.orig).lower()
    if code is not None and code != UNIQUE_VIOLATION:
        return False
    return column in message or code == UNIQUE_VIOLATION


class ClientService:
    """
    CRUD de clientes.

    Métodos assíncronos sem dependência do FastAPI; as operações de
    escrita recebem o usuário da sessão explicitamente.
    """

    async def get_all(
        self,
        db: AsyncSession,
        page: int = 1,
        per_page: int = 20,
        search: Optional[str] = None,
        status: Optional[RecordStatus] = None,
    ) -> tuple[list[Client], int]:
        """
        Lista paginada de clientes.

        Sem filtro de status a lista inclui clientes inativos.

        Args:
            db: Sessão do banco
            page: Página (a partir de 1)
            per_page: Registros por página
            search: Termo buscado em nome, CPF e telefone
            status: Filtro opcional de status

        Returns:
            Tupla (clientes, total)
        """
        conditions = []

        if status is not None:
            conditions.append(Client.status == RecordStatus(status).value)

        if search:
            conditions.append(self._search_condition(search))

        query = select(Client).order_by(Client.name.asc())
        count_query = select(func.count()).select_from(Client)
        if conditions:
            query = query.where(*conditions)
            count_query = count_query.where(*conditions)

        query = query.offset((page - 1) * per_page).limit(per_page)
        result = await db.execute(query)
        clients = list(result.scalars().all())

        count_result = await db.execute(count_query)
        total = count_result.scalar() or 0

        logger.info(
            "Recuperados %s clientes de %s (página %s, status=%s)",
            len(clients), total, page, status,
        )
        return clients, total

    async def search_active(
        self,
        db: AsyncSession,
        search: Optional[str] = None,
    ) -> list[Client]:
        """
        Clientes ativos para seleção no pedido.

        Sem termo de busca retorna apenas os mais recentes.
        """
        query = (
            select(Client)
            .where(Client.is_active)
            .order_by(Client.created_at.desc())
        )
        if search:
            query = query.where(self._search_condition(search))
        else:
            query = query.limit(PICKER_LIMIT)

        result = await db.execute(query)
        return list(result.scalars().all())

    async def get_by_id(
        self,
        db: AsyncSession,
        client_id: uuid.UUID,
    ) -> Client:
        """
        Busca um cliente pelo ID (ativo ou não).

        Raises:
            NotFoundError: Se o cliente não existir
        """
        result = await db.execute(select(Client).where(Client.id == client_id))
        client = result.scalar_one_or_none()

        if client is None:
            logger.warning("Cliente não encontrado: %s", client_id)
            raise NotFoundError(f"Cliente {client_id} não encontrado")

        return client

    async def create(
        self,
        db: AsyncSession,
        client_data: ClientCreate,
        actor: Optional[User],
    ) -> Client:
        """
        Cadastra um cliente.

        Raises:
            AuthenticationError: Sem usuário autenticado
            DuplicateError: CPF já cadastrado
            ConflictError: Erro inesperado do banco
        """
        ensure_authenticated(actor, "cadastrar clientes")

        existing = await self._check_document_exists(db, client_data.document)
        if existing:
            logger.warning(
                "Tentativa de cadastrar CPF duplicado: %s (existente: %s)",
                client_data.document, existing.id,
            )
            raise DuplicateError("CPF já cadastrado")

        client = Client(**client_data.model_dump(), status=STATUS_ACTIVE)

        try:
            db.add(client)
            await db.flush()
            await db.refresh(client)
        except IntegrityError as e:
            logger.error("IntegrityError ao cadastrar cliente: %s", e.orig)
            await db.rollback()
            if is_unique_violation(e, "document"):
                raise DuplicateError("CPF já cadastrado")
            raise ConflictError(f"Erro ao cadastrar cliente: {e.orig}")
        except SQLAlchemyError as e:
            logger.error("Erro SQLAlchemy ao cadastrar cliente: %s - %s", e.__class__.__name__, e)
            await db.rollback()
            raise ConflictError(f"Erro do banco ao cadastrar cliente: {e}")

        logger.info("Cliente cadastrado: %s - %s (por %s)", client.id, client.name, actor.email)
        return client

    async def update(
        self,
        db: AsyncSession,
        client_id: uuid.UUID,
        client_data: ClientUpdate,
        actor: Optional[User],
    ) -> Client:
        """
        Atualiza os campos enviados de um cliente.

        Raises:
            AuthenticationError: Sem usuário autenticado
            NotFoundError: Cliente inexistente
            DuplicateError: CPF já usado por outro cliente
        """
        ensure_authenticated(actor, "alterar clientes")
        client = await self.get_by_id(db, client_id)

        update_data = client_data.model_dump(exclude_unset=True)

        new_document = update_data.get("document")
        if new_document and new_document != client.document:
            existing = await self._check_document_exists(db, new_document, exclude_id=client_id)
            if existing:
                raise DuplicateError("CPF já cadastrado")

        for field, value in update_data.items():
            setattr(client, field, value)

        try:
            await db.flush()
            await db.refresh(client)
        except IntegrityError as e:
            logger.error("IntegrityError ao atualizar cliente: %s", e.orig)
            await db.rollback()
            if is_unique_violation(e, "document"):
                raise DuplicateError("CPF já cadastrado")
            raise ConflictError(f"Erro ao atualizar cliente: {e.orig}")
        except SQLAlchemyError as e:
            logger.error("Erro SQLAlchemy ao atualizar cliente: %s - %s", e.__class__.__name__, e)
            await db.rollback()
            raise ConflictError(f"Erro do banco ao atualizar cliente: {e}")

        logger.info("Cliente atualizado: %s - %s", client.id, client.name)
        return client

    async def delete(
        self,
        db: AsyncSession,
        client_id: uuid.UUID,
        actor: Optional[User],
    ) -> Client:
        """
        Exclusão lógica: o cliente passa para 'inactive'.

        A linha permanece no banco; pedidos antigos continuam íntegros.
        """
        ensure_authenticated(actor, "excluir clientes")
        client = await self.get_by_id(db, client_id)

        client.status = STATUS_INACTIVE
        try:
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Erro SQLAlchemy ao excluir cliente: %s - %s", e.__class__.__name__, e)
            await db.rollback()
            raise ConflictError(f"Erro do banco ao excluir cliente: {e}")

        logger.info("Soft delete cliente: %s - %s", client.id, client.name)
        return client

    # ----------------------------------------------------------------
    # Métodos auxiliares
    # ----------------------------------------------------------------

    @staticmethod
    def _search_condition(search: str):
        term = f"%{search.strip()}%"
        return or_(
            Client.name.ilike(term),
            Client.document.ilike(term),
            Client.phone.ilike(term),
        )

    async def _check_document_exists(
        self,
        db: AsyncSession,
        document: str,
        exclude_id: Optional[uuid.UUID] = None,
    ) -> Optional[Client]:
        """Cliente (ativo ou não) que já usa o CPF, se houver."""
        query = select(Client).where(Client.document == document)
        if exclude_id:
            query = query.where(Client.id != exclude_id)
        result = await db.execute(query)
        return result.scalar_one_or_none()


def get_client_service() -> ClientService:
    """Factory do serviço de clientes."""
    return ClientService()


__all__ = [
    "ClientService",
    "get_client_service",
    "is_unique_violation",
]
