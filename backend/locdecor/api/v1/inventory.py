"""
Router FastAPI do acervo
Projeto: LocDecor (Gestão de Locação de Decorações)
"""

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from locdecor.core.database import get_db
from locdecor.core.deps import CurrentUser
from locdecor.schemas.client import RecordStatus
from locdecor.schemas.inventory import (
    InventoryCategory,
    InventoryItemCreate,
    InventoryItemList,
    InventoryItemRead,
    InventoryItemSummary,
    InventoryItemUpdate,
)
from locdecor.services.inventory_service import InventoryService, get_inventory_service

router = APIRouter(
    prefix="/inventory",
    tags=["Acervo"],
)


@router.get(
    "/",
    name="acervo_lista",
    summary="Lista o acervo",
    response_model=InventoryItemList,
)
async def get_items(
    current_user: CurrentUser,
    page: int = Query(1, ge=1),
    per_page: int = Query(20, ge=1, le=100),
    search: Optional[str] = Query(None, description="Busca por nome ou código"),
    category: Optional[InventoryCategory] = Query(None),
    status_filter: Optional[RecordStatus] = Query(None, alias="status"),
    db: AsyncSession = Depends(get_db),
    service: InventoryService = Depends(get_inventory_service),
) -> InventoryItemList:
    items, total = await service.get_all(
        db=db,
        page=page,
        per_page=per_page,
        search=search,
        category=category,
        status=status_filter,
    )
    return InventoryItemList(
        items=[InventoryItemRead.model_validate(i) for i in items],
        total=total,
        page=page,
        per_page=per_page,
    )


@router.get(
    "/orderable",
    name="acervo_disponivel",
    summary="Itens disponíveis para pedidos",
    response_model=list[InventoryItemSummary],
)
async def get_orderable_items(
    current_user: CurrentUser,
    search: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db),
    service: InventoryService = Depends(get_inventory_service),
) -> list[InventoryItemSummary]:
    items = await service.get_orderable(db=db, search=search)
    return [InventoryItemSummary.model_validate(i) for i in items]


@router.get(
    "/low-stock",
    name="acervo_estoque_baixo",
    summary="Itens com estoque no mínimo",
    response_model=list[InventoryItemRead],
)
async def get_low_stock_items(
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_db),
    service: InventoryService = Depends(get_inventory_service),
) -> list[InventoryItemRead]:
    items = await service.get_low_stock(db=db)
    return [InventoryItemRead.model_validate(i) for i in items]


@router.get(
    "/{item_id}",
    name="acervo_detalhe",
    summary="Detalhe do item",
    response_model=InventoryItemRead,
)
async def get_item(
    item_id: uuid.UUID,
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_db),
    service: InventoryService = Depends(get_inventory_service),
) -> InventoryItemRead:
    item = await service.get_by_id(db=db, item_id=item_id)
    return InventoryItemRead.model_validate(item)


@router.post(
    "/",
    name="acervo_cria",
    summary="Cadastra item",
    description="O código (NNNNN-AA) é gerado automaticamente.",
    response_model=InventoryItemRead,
    status_code=status.HTTP_201_CREATED,
)
async def create_item(
    item_data: InventoryItemCreate,
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_db),
    service: InventoryService = Depends(get_inventory_service),
) -> InventoryItemRead:
    item = await service.create(db=db, item_data=item_data, actor=current_user)
    await db.commit()
    return InventoryItemRead.model_validate(item)


@router.put(
    "/{item_id}",
    name="acervo_atualiza",
    summary="Atualiza item",
    response_model=InventoryItemRead,
)
async def update_item(
    item_id: uuid.UUID,
    item_data: InventoryItemUpdate,
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_db),
    service: InventoryService = Depends(get_inventory_service),
) -> InventoryItemRead:
    item = await service.update(db=db, item_id=item_id, item_data=item_data, actor=current_user)
    await db.commit()
    return InventoryItemRead.model_validate(item)


@router.delete(
    "/{item_id}",
    name="acervo_exclui",
    summary="Exclui item",
    description="Exclusão lógica: o item passa para 'inactive'.",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def delete_item(
    item_id: uuid.UUID,
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_db),
    service: InventoryService = Depends(get_inventory_service),
) -> None:
    await service.delete(db=db, item_id=item_id, actor=current_user)
    await db.commit()
