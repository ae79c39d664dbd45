"""
Modelos SQLAlchemy
Projeto: LocDecor (Gestão de Locação de Decorações)

Import centralizado de todos os modelos (metadata completa para
create_all e reset_db.py).

Modelos:
- User, RevokedToken: autenticação
- Client: cadastro de clientes
- InventoryItem, ItemAvailability: acervo e disponibilidade
- Order, OrderItem: pedidos de locação
- Transaction: lançamentos financeiros
- Task: tarefas
"""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base declarativa de todos os modelos SQLAlchemy."""
    pass


from locdecor.models.user import RevokedToken, User, UserRole
from locdecor.models.client import Client
from locdecor.models.inventory import InventoryItem, ItemAvailability
from locdecor.models.order import Order, OrderItem
from locdecor.models.transaction import Transaction
from locdecor.models.task import Task

__all__ = [
    "Base",
    "User",
    "UserRole",
    "RevokedToken",
    "Client",
    "InventoryItem",
    "ItemAvailability",
    "Order",
    "OrderItem",
    "Transaction",
    "Task",
]
