"""
Testes dos endpoints HTTP com services e sessão substituídos.

O TestClient é usado sem o bloco with: o lifespan (conexão com o
banco) não é executado.
"""

import datetime
import uuid
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from locdecor.core.database import get_db
from locdecor.core.deps import get_current_user
from locdecor.core.exceptions import BusinessValidationError, DuplicateError, NotFoundError
from locdecor.main import app
from locdecor.schemas.dashboard import DashboardMetrics
from locdecor.services.client_service import get_client_service
from locdecor.services.dashboard_service import get_dashboard_service
from locdecor.services.order_service import get_order_service


@pytest.fixture
def session():
    db = MagicMock()
    db.commit = AsyncMock()
    db.rollback = AsyncMock()
    return db


@pytest.fixture
def api(session, user):
    async def override_db():
        yield session

    app.dependency_overrides[get_db] = override_db
    app.dependency_overrides[get_current_user] = lambda: user
    yield TestClient(app)
    app.dependency_overrides.clear()


def _override(factory, service):
    app.dependency_overrides[factory] = lambda: service


def _order_body(**overrides):
    body = {
        "client_id": str(uuid.uuid4()),
        "plan": "PRATA",
        "pickup_date": "2026-03-13",
        "pickup_time": "10:00",
        "return_date": "2026-03-16",
        "return_time": "18:00",
        "items": [{"item_id": str(uuid.uuid4()), "quantity": 2}],
    }
    body.update(overrides)
    return body


# ============================================================
# Sistema e autenticação
# ============================================================


def test_health():
    response = TestClient(app).get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_requires_token(session):
    async def override_db():
        yield session

    app.dependency_overrides[get_db] = override_db
    try:
        response = TestClient(app).get("/api/v1/clients/")
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 401
    assert response.headers["www-authenticate"] == "Bearer"


# ============================================================
# Clientes
# ============================================================


class TestClientsApi:

    def test_create_commits(self, api, session, client_factory):
        service = MagicMock()
        service.create = AsyncMock(return_value=client_factory())
        _override(get_client_service, service)

        response = api.post(
            "/api/v1/clients/",
            json={
                "name": "Maria Souza",
                "document": "123.456.789-01",
                "phone": "48999990000",
                "address": "Rua das Flores",
            },
        )

        assert response.status_code == 201
        assert response.json()["document"] == "12345678901"
        session.commit.assert_awaited_once()

    def test_duplicate_is_conflict(self, api):
        service = MagicMock()
        service.create = AsyncMock(side_effect=DuplicateError("CPF já cadastrado"))
        _override(get_client_service, service)

        response = api.post(
            "/api/v1/clients/",
            json={"name": "Maria", "document": "12345678901", "phone": "4899990000", "address": "Rua A"},
        )

        assert response.status_code == 409
        assert response.json() == {"detail": "CPF já cadastrado", "error_code": "DUPLICATE_RESOURCE"}

    def test_not_found(self, api):
        service = MagicMock()
        service.get_by_id = AsyncMock(side_effect=NotFoundError("Cliente não encontrado"))
        _override(get_client_service, service)

        response = api.get(f"/api/v1/clients/{uuid.uuid4()}")

        assert response.status_code == 404
        assert response.json()["error_code"] == "RESOURCE_NOT_FOUND"


# ============================================================
# Pedidos
# ============================================================


class TestOrdersApi:

    def test_create_returns_actions(self, api, session, order_factory, line_factory):
        order = order_factory(items=[line_factory(quantity=2)], total_amount=Decimal("100.00"))
        service = MagicMock()
        service.create = AsyncMock(return_value=order)
        _override(get_order_service, service)

        response = api.post("/api/v1/orders/", json=_order_body(total_amount="1.00"))

        assert response.status_code == 201
        body = response.json()
        assert body["order_number"] == "000001"
        assert body["available_actions"] == ["confirm_pickup", "cancel", "edit"]
        assert body["items"][0]["quantity"] == 2
        session.commit.assert_awaited_once()

    def test_missing_items_rejected(self, api):
        _override(get_order_service, MagicMock())

        response = api.post("/api/v1/orders/", json=_order_body(items=[]))

        assert response.status_code == 422

    def test_stock_error_payload(self, api, session):
        item_id = str(uuid.uuid4())
        service = MagicMock()
        service.create = AsyncMock(side_effect=BusinessValidationError(
            "Quantidade disponível insuficiente. Máximo: 2",
            extra={"item_id": item_id, "item_name": "Mesa"},
        ))
        _override(get_order_service, service)

        response = api.post("/api/v1/orders/", json=_order_body())

        assert response.status_code == 422
        body = response.json()
        assert body["detail"] == "Quantidade disponível insuficiente. Máximo: 2"
        assert body["error_code"] == "BUSINESS_VALIDATION_ERROR"
        assert body["extra"]["item_id"] == item_id
        session.commit.assert_not_called()

    def test_cancel_passes_confirmation(self, api, order_factory):
        order = order_factory(order_status="canceled")
        service = MagicMock()
        service.cancel = AsyncMock(return_value=order)
        _override(get_order_service, service)

        response = api.post(f"/api/v1/orders/{order.id}/cancel", json={"confirm": True})

        assert response.status_code == 200
        assert response.json()["available_actions"] == []
        assert service.cancel.await_args.kwargs["confirm"] is True


# ============================================================
# Dashboard
# ============================================================


class TestDashboardApi:

    def test_metrics_with_period(self, api):
        service = MagicMock()
        service.metrics = AsyncMock(return_value=DashboardMetrics(
            period_start=datetime.date(2026, 1, 1),
            period_end=datetime.date(2026, 1, 31),
            total_orders=3,
        ))
        _override(get_dashboard_service, service)

        response = api.get("/api/v1/dashboard/metrics?start_date=2026-01-01&end_date=2026-01-31")

        assert response.status_code == 200
        assert response.json()["total_orders"] == 3
        service.metrics.assert_awaited_once_with(datetime.date(2026, 1, 1), datetime.date(2026, 1, 31))

    def test_inverted_period(self, api):
        _override(get_dashboard_service, MagicMock())

        response = api.get("/api/v1/dashboard/metrics?start_date=2026-02-01&end_date=2026-01-01")

        assert response.status_code == 422
        assert response.json()["error_code"] == "BUSINESS_VALIDATION_ERROR"

    def test_display_descriptors(self, api):
        response = api.get("/api/v1/dashboard/display")

        assert response.status_code == 200
        tables = response.json()
        assert tables["order_status"]["pending"]["color"] == "yellow"
        assert tables["task_status"]["pending"]["color"] == "gray"
