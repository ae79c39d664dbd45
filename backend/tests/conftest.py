"""
Fixtures do pytest para os testes do LocDecor.

A sessão do banco é um AsyncMock: os services são exercitados sem
PostgreSQL, configurando o retorno de db.execute em cada teste.
"""

import datetime
import uuid
from decimal import Decimal
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.ext.asyncio import AsyncSession


# ============================================================
# Sessão do banco
# ============================================================


@pytest.fixture
def mock_db():
    """Mock de AsyncSession."""
    db = AsyncMock(spec=AsyncSession)
    db.execute = AsyncMock()
    db.add = MagicMock()
    db.commit = AsyncMock()
    db.rollback = AsyncMock()
    db.flush = AsyncMock()
    db.refresh = AsyncMock()
    db.delete = AsyncMock()
    db.expire = MagicMock()
    return db


def make_result(scalar=None, items=None, rows=None):
    """
    Resultado falso de db.execute.

    Args:
        scalar: Valor de scalar()/scalar_one_or_none()
        items: Lista devolvida por scalars().all()
        rows: Lista devolvida por all()
    """
    result = MagicMock()
    result.scalar.return_value = scalar
    result.scalar_one_or_none.return_value = scalar
    result.scalars.return_value.all.return_value = items or []
    result.all.return_value = rows or []
    result.unique.return_value = result
    return result


# ============================================================
# Objetos de domínio
# ============================================================


@pytest.fixture
def user():
    """Usuário autenticado."""
    return SimpleNamespace(
        id=uuid.uuid4(),
        email="operador@locdecor.com",
        full_name="Operador",
        role="operator",
        is_active=True,
        created_at=datetime.datetime(2026, 1, 5, 10, 0, tzinfo=datetime.timezone.utc),
        updated_at=None,
    )


def make_client(**kwargs):
    now = datetime.datetime(2026, 3, 1, 9, 0, tzinfo=datetime.timezone.utc)
    defaults = dict(
        id=uuid.uuid4(),
        name="Maria Souza",
        document="12345678901",
        birth_date=None,
        phone="48999990000",
        email="maria@example.com",
        address="Rua das Flores",
        address_number="120",
        neighborhood="Centro",
        zip_code="88130000",
        status="active",
        created_at=now,
        updated_at=now,
    )
    defaults.update(kwargs)
    return SimpleNamespace(**defaults)


def make_item(**kwargs):
    now = datetime.datetime(2026, 3, 1, 9, 0, tzinfo=datetime.timezone.utc)
    defaults = dict(
        id=uuid.uuid4(),
        code="00001-25",
        name="Mesa de cilindros",
        category="MÓVEIS",
        description=None,
        rental_price=Decimal("50.00"),
        acquisition_price=Decimal("400.00"),
        current_stock=5,
        min_stock=1,
        status="active",
        created_at=now,
        updated_at=now,
    )
    defaults.update(kwargs)
    return SimpleNamespace(**defaults)


def make_line(item=None, **kwargs):
    item = item or make_item()
    defaults = dict(
        id=uuid.uuid4(),
        item_id=item.id,
        quantity=1,
        unit_price=item.rental_price,
        item=item,
    )
    defaults.update(kwargs)
    line = SimpleNamespace(**defaults)
    line.line_total = line.quantity * line.unit_price
    return line


def make_order(**kwargs):
    now = datetime.datetime(2026, 3, 2, 14, 0, tzinfo=datetime.timezone.utc)
    client = kwargs.pop("client", None) or make_client()
    defaults = dict(
        id=uuid.uuid4(),
        order_number="000001",
        client_id=client.id,
        client=client,
        plan="PRATA",
        pickup_date=datetime.date(2026, 3, 13),
        pickup_time=datetime.time(10, 0),
        return_date=datetime.date(2026, 3, 16),
        return_time=datetime.time(18, 0),
        payment_status="SINAL 50%",
        order_status="pending",
        total_amount=Decimal("130.00"),
        payment_method="pix",
        notes=None,
        items=[],
        created_at=now,
        updated_at=now,
    )
    defaults.update(kwargs)
    return SimpleNamespace(**defaults)


@pytest.fixture
def client_factory():
    return make_client


@pytest.fixture
def item_factory():
    return make_item


@pytest.fixture
def order_factory():
    return make_order


@pytest.fixture
def line_factory():
    return make_line


@pytest.fixture
def result_factory():
    return make_result
