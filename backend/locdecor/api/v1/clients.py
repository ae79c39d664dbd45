"""
Router FastAPI da entidade Client
Projeto: LocDecor (Gestão de Locação de Decorações)

Endpoints do cadastro de clientes.
"""

import logging
import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from locdecor.core.database import get_db
from locdecor.core.deps import CurrentUser
from locdecor.schemas.client import (
    ClientCreate,
    ClientList,
    ClientRead,
    ClientSummary,
    ClientUpdate,
    RecordStatus,
)
from locdecor.services.client_service import ClientService, get_client_service

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/clients",
    tags=["Clientes"],
)


@router.get(
    "/",
    name="clientes_lista",
    summary="Lista clientes",
    description="Lista paginada de clientes com busca por nome, CPF e telefone.",
    response_model=ClientList,
    status_code=status.HTTP_200_OK,
)
async def get_clients(
    current_user: CurrentUser,
    page: int = Query(1, ge=1, description="Número da página"),
    per_page: int = Query(20, ge=1, le=100, description="Registros por página"),
    search: Optional[str] = Query(None, description="Termo de busca"),
    status_filter: Optional[RecordStatus] = Query(None, alias="status", description="active ou inactive"),
    db: AsyncSession = Depends(get_db),
    service: ClientService = Depends(get_client_service),
) -> ClientList:
    """
    Lista paginada de clientes.

    Sem o filtro de status a lista inclui os clientes excluídos.
    """
    clients, total = await service.get_all(
        db=db,
        page=page,
        per_page=per_page,
        search=search,
        status=status_filter,
    )
    return ClientList(
        items=[ClientRead.model_validate(c) for c in clients],
        total=total,
        page=page,
        per_page=per_page,
    )


@router.get(
    "/picker",
    name="clientes_selecao",
    summary="Clientes para seleção no pedido",
    response_model=list[ClientSummary],
)
async def pick_clients(
    current_user: CurrentUser,
    search: Optional[str] = Query(None, description="Termo de busca"),
    db: AsyncSession = Depends(get_db),
    service: ClientService = Depends(get_client_service),
) -> list[ClientSummary]:
    """Clientes ativos; sem busca, os 10 cadastrados mais recentemente."""
    clients = await service.search_active(db=db, search=search)
    return [ClientSummary.model_validate(c) for c in clients]


@router.get(
    "/{client_id}",
    name="cliente_detalhe",
    summary="Detalhe do cliente",
    response_model=ClientRead,
)
async def get_client(
    client_id: uuid.UUID,
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_db),
    service: ClientService = Depends(get_client_service),
) -> ClientRead:
    client = await service.get_by_id(db=db, client_id=client_id)
    return ClientRead.model_validate(client)


@router.post(
    "/",
    name="cliente_cria",
    summary="Cadastra cliente",
    response_model=ClientRead,
    status_code=status.HTTP_201_CREATED,
)
async def create_client(
    client_data: ClientCreate,
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_db),
    service: ClientService = Depends(get_client_service),
) -> ClientRead:
    """
    Cadastra um cliente.

    Raises:
        DuplicateError: CPF já cadastrado
    """
    client = await service.create(db=db, client_data=client_data, actor=current_user)
    await db.commit()
    return ClientRead.model_validate(client)


@router.put(
    "/{client_id}",
    name="cliente_atualiza",
    summary="Atualiza cliente",
    response_model=ClientRead,
)
async def update_client(
    client_id: uuid.UUID,
    client_data: ClientUpdate,
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_db),
    service: ClientService = Depends(get_client_service),
) -> ClientRead:
    client = await service.update(
        db=db,
        client_id=client_id,
        client_data=client_data,
        actor=current_user,
    )
    await db.commit()
    return ClientRead.model_validate(client)


@router.delete(
    "/{client_id}",
    name="cliente_exclui",
    summary="Exclui cliente",
    description="Exclusão lógica: o cliente passa para 'inactive'.",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def delete_client(
    client_id: uuid.UUID,
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_db),
    service: ClientService = Depends(get_client_service),
) -> None:
    await service.delete(db=db, client_id=client_id, actor=current_user)
    await db.commit()
