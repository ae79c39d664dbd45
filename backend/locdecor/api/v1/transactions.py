"""
Router FastAPI do financeiro
Projeto: LocDecor (Gestão de Locação de Decorações)
"""

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from locdecor.core.database import get_db
from locdecor.core.deps import CurrentUser
from locdecor.schemas.transaction import (
    TRANSACTION_CATEGORIES,
    TransactionCreate,
    TransactionList,
    TransactionRead,
    TransactionType,
    TransactionUpdate,
)
from locdecor.services.transaction_service import TransactionService, get_transaction_service

router = APIRouter(
    prefix="/transactions",
    tags=["Financeiro"],
)


@router.get(
    "/",
    name="lancamentos_lista",
    summary="Lista lançamentos",
    response_model=TransactionList,
)
async def get_transactions(
    current_user: CurrentUser,
    page: int = Query(1, ge=1),
    per_page: int = Query(20, ge=1, le=100),
    search: Optional[str] = Query(None, description="Busca em descrição e categoria"),
    type_filter: Optional[TransactionType] = Query(None, alias="type"),
    db: AsyncSession = Depends(get_db),
    service: TransactionService = Depends(get_transaction_service),
) -> TransactionList:
    transactions, total = await service.get_all(
        db=db, page=page, per_page=per_page, search=search, type_=type_filter
    )
    return TransactionList(
        items=[TransactionRead.model_validate(t) for t in transactions],
        total=total,
        page=page,
        per_page=per_page,
    )


@router.get(
    "/categories",
    name="lancamentos_categorias",
    summary="Categorias por tipo",
    response_model=dict[TransactionType, list[str]],
)
async def get_categories(current_user: CurrentUser):
    return {type_: list(categories) for type_, categories in TRANSACTION_CATEGORIES.items()}


@router.get(
    "/{transaction_id}",
    name="lancamento_detalhe",
    summary="Detalhe do lançamento",
    response_model=TransactionRead,
)
async def get_transaction(
    transaction_id: uuid.UUID,
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_db),
    service: TransactionService = Depends(get_transaction_service),
) -> TransactionRead:
    transaction = await service.get_by_id(db=db, transaction_id=transaction_id)
    return TransactionRead.model_validate(transaction)


@router.post(
    "/",
    name="lancamento_cria",
    summary="Registra lançamento",
    response_model=TransactionRead,
    status_code=status.HTTP_201_CREATED,
)
async def create_transaction(
    data: TransactionCreate,
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_db),
    service: TransactionService = Depends(get_transaction_service),
) -> TransactionRead:
    transaction = await service.create(db=db, data=data, actor=current_user)
    await db.commit()
    return TransactionRead.model_validate(transaction)


@router.put(
    "/{transaction_id}",
    name="lancamento_atualiza",
    summary="Atualiza lançamento",
    response_model=TransactionRead,
)
async def update_transaction(
    transaction_id: uuid.UUID,
    data: TransactionUpdate,
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_db),
    service: TransactionService = Depends(get_transaction_service),
) -> TransactionRead:
    transaction = await service.update(
        db=db, transaction_id=transaction_id, data=data, actor=current_user
    )
    await db.commit()
    return TransactionRead.model_validate(transaction)


@router.delete(
    "/{transaction_id}",
    name="lancamento_exclui",
    summary="Exclui lançamento",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def delete_transaction(
    transaction_id: uuid.UUID,
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_db),
    service: TransactionService = Depends(get_transaction_service),
) -> None:
    await service.delete(db=db, transaction_id=transaction_id, actor=current_user)
    await db.commit()
