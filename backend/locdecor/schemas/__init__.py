"""
Schemas Pydantic do projeto LocDecor

Schemas de validação das requisições e serialização das respostas da API.
"""

# Import dos schemas para permitir import direto
# ex.: from locdecor.schemas import ClientRead, OrderRead

from locdecor.schemas.token import TokenPayload, TokenRefresh, TokenResponse
from locdecor.schemas.user import UserLogin, UserRead, UserSignUp
from locdecor.schemas.client import (
    ClientCreate,
    ClientList,
    ClientRead,
    ClientSummary,
    ClientUpdate,
    RecordStatus,
)
from locdecor.schemas.inventory import (
    InventoryCategory,
    InventoryItemCreate,
    InventoryItemList,
    InventoryItemRead,
    InventoryItemUpdate,
)
from locdecor.schemas.order import (
    OrderAction,
    OrderCancel,
    OrderContract,
    OrderCreate,
    OrderItemCreate,
    OrderItemRead,
    OrderList,
    OrderRead,
    OrderStatus,
    OrderUpdate,
    PaymentMethod,
    PaymentStatus,
    Plan,
)
from locdecor.schemas.transaction import (
    TransactionCreate,
    TransactionList,
    TransactionRead,
    TransactionStatus,
    TransactionType,
    TransactionUpdate,
)
from locdecor.schemas.task import (
    TaskAlerts,
    TaskCreate,
    TaskPriority,
    TaskRead,
    TaskStatus,
    TaskTimeframe,
    TaskUpdate,
)
from locdecor.schemas.dashboard import (
    ChartPoint,
    DashboardMetrics,
    OrderSchedule,
    ReportFormat,
    ReportPeriod,
)
from locdecor.schemas.display import Display

__all__ = [
    "TokenPayload",
    "TokenRefresh",
    "TokenResponse",
    "UserLogin",
    "UserRead",
    "UserSignUp",
    "ClientCreate",
    "ClientList",
    "ClientRead",
    "ClientSummary",
    "ClientUpdate",
    "RecordStatus",
    "InventoryCategory",
    "InventoryItemCreate",
    "InventoryItemList",
    "InventoryItemRead",
    "InventoryItemUpdate",
    "OrderAction",
    "OrderCancel",
    "OrderContract",
    "OrderCreate",
    "OrderItemCreate",
    "OrderItemRead",
    "OrderList",
    "OrderRead",
    "OrderStatus",
    "OrderUpdate",
    "PaymentMethod",
    "PaymentStatus",
    "Plan",
    "TransactionCreate",
    "TransactionList",
    "TransactionRead",
    "TransactionStatus",
    "TransactionType",
    "TransactionUpdate",
    "TaskAlerts",
    "TaskCreate",
    "TaskPriority",
    "TaskRead",
    "TaskStatus",
    "TaskTimeframe",
    "TaskUpdate",
    "ChartPoint",
    "DashboardMetrics",
    "OrderSchedule",
    "ReportFormat",
    "ReportPeriod",
    "Display",
]
