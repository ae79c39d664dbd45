"""
Testes do OrderService: total, numeração, diferença de linhas,
transições de estado e regras de criação/edição.
"""

import datetime
import uuid
from decimal import Decimal
from types import SimpleNamespace

import pytest

from locdecor.core.exceptions import AuthenticationError, BusinessValidationError, NotFoundError
from locdecor.models import Order
from locdecor.schemas.order import OrderCreate, OrderItemCreate, OrderStatus, OrderUpdate
from locdecor.services.order_service import (
    LineSpec,
    OrderService,
    check_transition,
    compute_total,
    diff_items,
    merge_lines,
    next_order_number,
)


def _payload(client_id, lines, **overrides):
    data = dict(
        client_id=client_id,
        plan="OURO",
        pickup_date=datetime.date(2026, 3, 13),
        pickup_time=datetime.time(10, 0),
        return_date=datetime.date(2026, 3, 16),
        return_time=datetime.time(18, 0),
        items=lines,
    )
    data.update(overrides)
    return data


# ============================================================
# Funções puras
# ============================================================


class TestComputeTotal:

    def test_sum_of_lines(self):
        lines = [
            SimpleNamespace(quantity=2, unit_price=Decimal("50.00")),
            SimpleNamespace(quantity=1, unit_price=Decimal("30.00")),
        ]
        assert compute_total(lines) == Decimal("130.00")

    def test_empty(self):
        assert compute_total([]) == Decimal("0.00")

    def test_rounds_to_cents(self):
        lines = [SimpleNamespace(quantity=3, unit_price=Decimal("33.333"))]
        assert compute_total(lines) == Decimal("100.00")


class TestOrderNumber:

    def test_first_number(self):
        assert next_order_number(None) == "000001"

    def test_increments(self):
        assert next_order_number("000041") == "000042"


class TestMergeLines:

    def test_repeated_item_sums_quantities(self):
        item_id = uuid.uuid4()
        merged = merge_lines([
            OrderItemCreate(item_id=item_id, quantity=2, unit_price=Decimal("45")),
            OrderItemCreate(item_id=item_id, quantity=3, unit_price=Decimal("45.00")),
        ])
        assert len(merged) == 1
        assert merged[0].quantity == 5
        assert merged[0].unit_price == Decimal("45")

    def test_total_matches_submitted_lines(self):
        item_id = uuid.uuid4()
        lines = [
            OrderItemCreate(item_id=item_id, quantity=1, unit_price=Decimal("10.00")),
            OrderItemCreate(item_id=item_id, quantity=2, unit_price=Decimal("10.00")),
        ]
        merged = merge_lines(lines)
        assert compute_total(merged) == compute_total(lines) == Decimal("30.00")

    def test_conflicting_prices_rejected(self):
        item_id = uuid.uuid4()
        with pytest.raises(BusinessValidationError, match="valores unitários diferentes") as exc:
            merge_lines([
                OrderItemCreate(item_id=item_id, quantity=1, unit_price=Decimal("10.00")),
                OrderItemCreate(item_id=item_id, quantity=1, unit_price=Decimal("20.00")),
            ])
        assert exc.value.extra == {"item_id": str(item_id)}

    def test_explicit_and_missing_price_conflict(self):
        item_id = uuid.uuid4()
        with pytest.raises(BusinessValidationError):
            merge_lines([
                OrderItemCreate(item_id=item_id, quantity=1),
                OrderItemCreate(item_id=item_id, quantity=1, unit_price=Decimal("20.00")),
            ])


class TestDiffItems:

    def test_added_removed_changed(self, line_factory):
        kept = line_factory(quantity=1, unit_price=Decimal("50"))
        changed = line_factory(quantity=1, unit_price=Decimal("20"))
        removed = line_factory(quantity=4, unit_price=Decimal("10"))
        new_id = uuid.uuid4()

        diff = diff_items(
            [kept, changed, removed],
            [
                LineSpec(kept.item_id, 1, Decimal("50")),
                LineSpec(changed.item_id, 3, Decimal("20")),
                LineSpec(new_id, 2, Decimal("15")),
            ],
        )

        assert [s.item_id for s in diff.added] == [new_id]
        assert diff.removed == [removed]
        assert [(line, spec.quantity) for line, spec in diff.changed] == [(changed, 3)]

    def test_no_changes(self, line_factory):
        line = line_factory(quantity=2, unit_price=Decimal("50"))
        diff = diff_items([line], [LineSpec(line.item_id, 2, Decimal("50.00"))])
        assert diff.is_empty


class TestTransitions:

    @pytest.mark.parametrize("current,target", [
        ("pending", OrderStatus.ACTIVE),
        ("pending", OrderStatus.CANCELED),
        ("active", OrderStatus.COMPLETED),
        ("active", OrderStatus.CANCELED),
    ])
    def test_allowed(self, current, target):
        check_transition(current, target)

    @pytest.mark.parametrize("current,target", [
        ("pending", OrderStatus.COMPLETED),
        ("active", OrderStatus.PENDING),
        ("completed", OrderStatus.ACTIVE),
        ("canceled", OrderStatus.PENDING),
        ("completed", OrderStatus.CANCELED),
    ])
    def test_rejected(self, current, target):
        with pytest.raises(BusinessValidationError, match="não permitida"):
            check_transition(current, target)


# ============================================================
# Service
# ============================================================


class TestCreateOrder:

    @pytest.mark.asyncio
    async def test_requires_actor(self, mock_db):
        data = OrderCreate(**_payload(uuid.uuid4(), [{"item_id": uuid.uuid4()}]))
        with pytest.raises(AuthenticationError, match="autenticado"):
            await OrderService().create(mock_db, data, actor=None)
        mock_db.execute.assert_not_called()

    @pytest.mark.asyncio
    async def test_snapshots_prices_and_computes_total(
        self, mock_db, user, client_factory, item_factory, result_factory
    ):
        client = client_factory()
        table = item_factory(rental_price=Decimal("50.00"), current_stock=4)
        vase = item_factory(name="Vaso", rental_price=Decimal("99.00"), current_stock=2)
        created = object()
        mock_db.execute.side_effect = [
            result_factory(scalar=client),
            result_factory(items=[table, vase]),
            result_factory(scalar="000041"),
            result_factory(scalar=created),
        ]
        data = OrderCreate(**_payload(client.id, [
            {"item_id": table.id, "quantity": 2},
            {"item_id": vase.id, "quantity": 1, "unit_price": "30.00"},
        ]))

        result = await OrderService().create(mock_db, data, actor=user)

        assert result is created
        order = mock_db.add.call_args.args[0]
        assert isinstance(order, Order)
        assert order.order_number == "000042"
        assert order.order_status == "pending"
        assert order.total_amount == Decimal("130.00")
        prices = {line.item_id: line.unit_price for line in order.items}
        assert prices == {table.id: Decimal("50.00"), vase.id: Decimal("30.00")}
        mock_db.flush.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_insufficient_stock(self, mock_db, user, client_factory, item_factory, result_factory):
        client = client_factory()
        item = item_factory(current_stock=2)
        mock_db.execute.side_effect = [
            result_factory(scalar=client),
            result_factory(items=[item]),
        ]
        data = OrderCreate(**_payload(client.id, [{"item_id": item.id, "quantity": 3}]))

        with pytest.raises(BusinessValidationError, match="Máximo: 2") as exc:
            await OrderService().create(mock_db, data, actor=user)

        assert exc.value.extra["item_id"] == str(item.id)
        mock_db.add.assert_not_called()

    @pytest.mark.asyncio
    async def test_stock_checked_on_merged_quantity(
        self, mock_db, user, client_factory, item_factory, result_factory
    ):
        client = client_factory()
        item = item_factory(current_stock=3)
        mock_db.execute.side_effect = [
            result_factory(scalar=client),
            result_factory(items=[item]),
        ]
        data = OrderCreate(**_payload(client.id, [
            {"item_id": item.id, "quantity": 2},
            {"item_id": item.id, "quantity": 2},
        ]))

        with pytest.raises(BusinessValidationError, match="Máximo: 3"):
            await OrderService().create(mock_db, data, actor=user)

    @pytest.mark.asyncio
    async def test_repeated_item_with_other_price(self, mock_db, user, client_factory, result_factory):
        client = client_factory()
        item_id = uuid.uuid4()
        mock_db.execute.side_effect = [result_factory(scalar=client)]
        data = OrderCreate(**_payload(client.id, [
            {"item_id": item_id, "quantity": 1, "unit_price": "10.00"},
            {"item_id": item_id, "quantity": 1, "unit_price": "20.00"},
        ]))

        with pytest.raises(BusinessValidationError, match="valores unitários diferentes"):
            await OrderService().create(mock_db, data, actor=user)
        mock_db.add.assert_not_called()

    @pytest.mark.asyncio
    async def test_unknown_client(self, mock_db, user, result_factory):
        mock_db.execute.side_effect = [result_factory(scalar=None)]
        data = OrderCreate(**_payload(uuid.uuid4(), [{"item_id": uuid.uuid4()}]))

        with pytest.raises(NotFoundError, match="Cliente"):
            await OrderService().create(mock_db, data, actor=user)

    @pytest.mark.asyncio
    async def test_inactive_client(self, mock_db, user, client_factory, result_factory):
        client = client_factory(status="inactive")
        mock_db.execute.side_effect = [result_factory(scalar=client)]
        data = OrderCreate(**_payload(client.id, [{"item_id": uuid.uuid4()}]))

        with pytest.raises(BusinessValidationError, match="inativo"):
            await OrderService().create(mock_db, data, actor=user)

    @pytest.mark.asyncio
    async def test_unknown_item(self, mock_db, user, client_factory, result_factory):
        client = client_factory()
        mock_db.execute.side_effect = [
            result_factory(scalar=client),
            result_factory(items=[]),
        ]
        data = OrderCreate(**_payload(client.id, [{"item_id": uuid.uuid4()}]))

        with pytest.raises(NotFoundError, match="Itens do acervo não encontrados"):
            await OrderService().create(mock_db, data, actor=user)


class TestUpdateOrder:

    @pytest.mark.asyncio
    async def test_applies_diff_and_recomputes_total(
        self, mock_db, user, order_factory, item_factory, line_factory, result_factory
    ):
        table = item_factory(rental_price=Decimal("50.00"))
        vase = item_factory(name="Vaso", rental_price=Decimal("30.00"))
        tray = item_factory(name="Bandeja", rental_price=Decimal("12.00"))
        # Valor copiado na criação, antes do reajuste do aluguel
        table_line = line_factory(item=table, quantity=1, unit_price=Decimal("45.00"))
        vase_line = line_factory(item=vase, quantity=1, unit_price=Decimal("30.00"))
        order = order_factory(items=[table_line, vase_line], total_amount=Decimal("75.00"))

        mock_db.execute.side_effect = [
            result_factory(scalar=order),
            result_factory(items=[table, tray]),
            result_factory(scalar=order),
        ]
        data = OrderUpdate(**_payload(order.client_id, [
            {"item_id": table.id, "quantity": 2},
            {"item_id": tray.id, "quantity": 1},
        ]))

        await OrderService().update(mock_db, order.id, data, actor=user)

        by_item = {line.item_id: line for line in order.items}
        assert set(by_item) == {table.id, tray.id}
        assert by_item[table.id] is table_line
        assert table_line.quantity == 2
        assert table_line.unit_price == Decimal("45.00")
        assert by_item[tray.id].unit_price == Decimal("12.00")
        assert order.total_amount == Decimal("102.00")
        assert order.plan == "OURO"
        mock_db.flush.assert_awaited_once()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", ["completed", "canceled"])
    async def test_terminal_orders_are_read_only(self, mock_db, user, order_factory, result_factory, status):
        order = order_factory(order_status=status)
        mock_db.execute.side_effect = [result_factory(scalar=order)]
        data = OrderUpdate(**_payload(order.client_id, [{"item_id": uuid.uuid4()}]))

        with pytest.raises(BusinessValidationError, match="Não é possível alterar"):
            await OrderService().update(mock_db, order.id, data, actor=user)
        mock_db.flush.assert_not_called()


class TestLifecycle:

    @pytest.mark.asyncio
    async def test_confirm_pickup(self, mock_db, user, order_factory, result_factory):
        order = order_factory(order_status="pending")
        mock_db.execute.return_value = result_factory(scalar=order)

        result = await OrderService().confirm_pickup(mock_db, order.id, actor=user)

        assert result.order_status == "active"

    @pytest.mark.asyncio
    async def test_confirm_return_requires_active(self, mock_db, user, order_factory, result_factory):
        order = order_factory(order_status="pending")
        mock_db.execute.return_value = result_factory(scalar=order)

        with pytest.raises(BusinessValidationError):
            await OrderService().confirm_return(mock_db, order.id, actor=user)
        assert order.order_status == "pending"

    @pytest.mark.asyncio
    async def test_cancel_requires_confirmation(self, mock_db, user, order_factory):
        with pytest.raises(BusinessValidationError, match="Confirme o cancelamento"):
            await OrderService().cancel(mock_db, uuid.uuid4(), confirm=False, actor=user)
        mock_db.execute.assert_not_called()

    @pytest.mark.asyncio
    async def test_cancel_active_order(self, mock_db, user, order_factory, result_factory):
        order = order_factory(order_status="active")
        mock_db.execute.return_value = result_factory(scalar=order)

        result = await OrderService().cancel(mock_db, order.id, confirm=True, actor=user)

        assert result.order_status == "canceled"

    @pytest.mark.asyncio
    async def test_not_found(self, mock_db, user, result_factory):
        mock_db.execute.return_value = result_factory(scalar=None)

        with pytest.raises(NotFoundError, match="Pedido"):
            await OrderService().confirm_pickup(mock_db, uuid.uuid4(), actor=user)

    @pytest.mark.asyncio
    async def test_generate_contract(self, mock_db, order_factory, line_factory, result_factory):
        order = order_factory(items=[line_factory(quantity=2)])
        mock_db.execute.return_value = result_factory(scalar=order)

        contract = await OrderService().generate_contract(
            mock_db, order.id, today=datetime.date(2026, 3, 10)
        )

        assert contract.order_number == order.order_number
        assert "10/03/2026" in contract.content
        assert "Mesa de cilindros: R$ 400.00" in contract.content
