"""
Router FastAPI dos pedidos
Projeto: LocDecor (Gestão de Locação de Decorações)

CRUD de pedidos, transições de estado e documentos (contrato e
ordem de retirada).
"""

import logging
import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.ext.asyncio import AsyncSession

from locdecor.api.responses import PDF, attachment
from locdecor.core.database import get_db
from locdecor.core.deps import CurrentUser
from locdecor.schemas.order import (
    OrderCancel,
    OrderContract,
    OrderCreate,
    OrderList,
    OrderRead,
    OrderStatus,
    OrderUpdate,
)
from locdecor.services.export_service import ExportService, get_export_service
from locdecor.services.order_service import OrderService, get_order_service

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/orders",
    tags=["Pedidos"],
)


@router.get(
    "/",
    name="pedidos_lista",
    summary="Lista pedidos",
    description="Lista paginada, mais recentes primeiro, com busca por cliente ou número.",
    response_model=OrderList,
)
async def get_orders(
    current_user: CurrentUser,
    page: int = Query(1, ge=1),
    per_page: int = Query(20, ge=1, le=100),
    search: Optional[str] = Query(None, description="Nome do cliente ou número do pedido"),
    status_filter: Optional[OrderStatus] = Query(None, alias="status"),
    db: AsyncSession = Depends(get_db),
    service: OrderService = Depends(get_order_service),
) -> OrderList:
    orders, total = await service.get_all(
        db=db, page=page, per_page=per_page, search=search, status=status_filter
    )
    return OrderList(
        items=[OrderRead.model_validate(o) for o in orders],
        total=total,
        page=page,
        per_page=per_page,
    )


@router.get(
    "/{order_id}",
    name="pedido_detalhe",
    summary="Detalhe do pedido",
    response_model=OrderRead,
)
async def get_order(
    order_id: uuid.UUID,
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_db),
    service: OrderService = Depends(get_order_service),
) -> OrderRead:
    order = await service.get_by_id(db=db, order_id=order_id)
    return OrderRead.model_validate(order)


@router.post(
    "/",
    name="pedido_cria",
    summary="Cria pedido",
    response_model=OrderRead,
    status_code=status.HTTP_201_CREATED,
)
async def create_order(
    data: OrderCreate,
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_db),
    service: OrderService = Depends(get_order_service),
) -> OrderRead:
    """
    Cria um pedido pendente.

    O total é calculado no servidor a partir dos itens.

    Raises:
        BusinessValidationError: Estoque insuficiente ou cliente inativo
        NotFoundError: Cliente ou item inexistente
    """
    order = await service.create(db=db, data=data, actor=current_user)
    await db.commit()
    return OrderRead.model_validate(order)


@router.put(
    "/{order_id}",
    name="pedido_atualiza",
    summary="Edita pedido",
    description="Substitui cabeçalho e itens do pedido numa única transação.",
    response_model=OrderRead,
)
async def update_order(
    order_id: uuid.UUID,
    data: OrderUpdate,
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_db),
    service: OrderService = Depends(get_order_service),
) -> OrderRead:
    order = await service.update(db=db, order_id=order_id, data=data, actor=current_user)
    await db.commit()
    return OrderRead.model_validate(order)


@router.post(
    "/{order_id}/confirm-pickup",
    name="pedido_confirma_retirada",
    summary="Confirma a retirada",
    response_model=OrderRead,
)
async def confirm_pickup(
    order_id: uuid.UUID,
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_db),
    service: OrderService = Depends(get_order_service),
) -> OrderRead:
    order = await service.confirm_pickup(db=db, order_id=order_id, actor=current_user)
    await db.commit()
    return OrderRead.model_validate(order)


@router.post(
    "/{order_id}/confirm-return",
    name="pedido_confirma_devolucao",
    summary="Confirma a devolução",
    response_model=OrderRead,
)
async def confirm_return(
    order_id: uuid.UUID,
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_db),
    service: OrderService = Depends(get_order_service),
) -> OrderRead:
    order = await service.confirm_return(db=db, order_id=order_id, actor=current_user)
    await db.commit()
    return OrderRead.model_validate(order)


@router.post(
    "/{order_id}/cancel",
    name="pedido_cancela",
    summary="Cancela pedido",
    description="Exige confirm=true no corpo da requisição.",
    response_model=OrderRead,
)
async def cancel_order(
    order_id: uuid.UUID,
    data: OrderCancel,
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_db),
    service: OrderService = Depends(get_order_service),
) -> OrderRead:
    order = await service.cancel(db=db, order_id=order_id, confirm=data.confirm, actor=current_user)
    await db.commit()
    return OrderRead.model_validate(order)


@router.get(
    "/{order_id}/contract",
    name="pedido_contrato",
    summary="Texto do contrato",
    response_model=OrderContract,
)
async def get_contract(
    order_id: uuid.UUID,
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_db),
    service: OrderService = Depends(get_order_service),
) -> OrderContract:
    return await service.generate_contract(db=db, order_id=order_id)


@router.get(
    "/{order_id}/contract.pdf",
    name="pedido_contrato_pdf",
    summary="Contrato em PDF",
)
async def get_contract_pdf(
    order_id: uuid.UUID,
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_db),
    service: OrderService = Depends(get_order_service),
    exporter: ExportService = Depends(get_export_service),
):
    order = await service.get_by_id(db=db, order_id=order_id)
    pdf, file_name = await run_in_threadpool(exporter.contract_pdf, order)
    return attachment(pdf, file_name, PDF)


@router.get(
    "/{order_id}/pickup-receipt.pdf",
    name="pedido_ordem_retirada",
    summary="Ordem de retirada em PDF",
)
async def get_pickup_receipt(
    order_id: uuid.UUID,
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_db),
    service: OrderService = Depends(get_order_service),
    exporter: ExportService = Depends(get_export_service),
):
    order = await service.get_by_id(db=db, order_id=order_id)
    pdf, file_name = await run_in_threadpool(exporter.pickup_receipt_pdf, order)
    return attachment(pdf, file_name, PDF)
