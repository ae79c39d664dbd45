"""
API v1 Routes
Projeto: LocDecor (Gestão de Locação de Decorações)

Router da versão 1 da API.
"""

from fastapi import APIRouter

from locdecor.api.v1 import (
    auth, clients, dashboard, inventory, orders, reports, tasks, transactions
)

# Router agregado da v1
api_v1_router = APIRouter(prefix="/api/v1")

api_v1_router.include_router(auth.router)
api_v1_router.include_router(clients.router)
api_v1_router.include_router(inventory.router)
api_v1_router.include_router(orders.router)
api_v1_router.include_router(transactions.router)
api_v1_router.include_router(tasks.router)
api_v1_router.include_router(dashboard.router)
api_v1_router.include_router(reports.router)

__all__ = ["api_v1_router"]
