"""
Testes do cadastro de clientes e do acervo.
"""

import uuid
from decimal import Decimal

import pytest
from sqlalchemy.exc import IntegrityError

from locdecor.core.exceptions import AuthenticationError, DuplicateError, NotFoundError
from locdecor.schemas.client import ClientCreate, ClientUpdate
from locdecor.schemas.inventory import InventoryItemCreate
from locdecor.services.client_service import ClientService, is_unique_violation
from locdecor.services.inventory_service import InventoryService, next_code


def _client_data(**overrides):
    data = dict(
        name="Maria Souza",
        document="123.456.789-01",
        phone="(48) 99999-0000",
        address="Rua das Flores",
    )
    data.update(overrides)
    return ClientCreate(**data)


class _PgError(Exception):
    def __init__(self, message, pgcode):
        super().__init__(message)
        self.pgcode = pgcode


# ============================================================
# Clientes
# ============================================================


class TestClientCreate:

    @pytest.mark.asyncio
    async def test_create_active_client(self, mock_db, user, result_factory):
        mock_db.execute.return_value = result_factory(scalar=None)

        client = await ClientService().create(mock_db, _client_data(), actor=user)

        assert client.status == "active"
        assert client.document == "12345678901"
        mock_db.add.assert_called_once_with(client)
        mock_db.flush.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_duplicate_document(self, mock_db, user, client_factory, result_factory):
        # Um cliente inativo também bloqueia o CPF
        mock_db.execute.return_value = result_factory(scalar=client_factory(status="inactive"))

        with pytest.raises(DuplicateError, match="CPF já cadastrado"):
            await ClientService().create(mock_db, _client_data(), actor=user)
        mock_db.add.assert_not_called()

    @pytest.mark.asyncio
    async def test_unique_violation_on_flush(self, mock_db, user, result_factory):
        mock_db.execute.return_value = result_factory(scalar=None)
        mock_db.flush.side_effect = IntegrityError(
            "INSERT", {}, _PgError('duplicate key value violates "clients_document_key"', "23505")
        )

        with pytest.raises(DuplicateError):
            await ClientService().create(mock_db, _client_data(), actor=user)
        mock_db.rollback.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_requires_actor(self, mock_db):
        with pytest.raises(AuthenticationError):
            await ClientService().create(mock_db, _client_data(), actor=None)


class TestClientUpdateDelete:

    @pytest.mark.asyncio
    async def test_update_partial(self, mock_db, user, client_factory, result_factory):
        client = client_factory()
        mock_db.execute.return_value = result_factory(scalar=client)

        result = await ClientService().update(
            mock_db, client.id, ClientUpdate(neighborhood="Pagani"), actor=user
        )

        assert result.neighborhood == "Pagani"
        assert result.name == "Maria Souza"

    @pytest.mark.asyncio
    async def test_update_to_used_document(self, mock_db, user, client_factory, result_factory):
        client = client_factory()
        other = client_factory(document="98765432100")
        mock_db.execute.side_effect = [result_factory(scalar=client), result_factory(scalar=other)]

        with pytest.raises(DuplicateError):
            await ClientService().update(
                mock_db, client.id, ClientUpdate(document="987.654.321-00"), actor=user
            )

    @pytest.mark.asyncio
    async def test_soft_delete(self, mock_db, user, client_factory, result_factory):
        client = client_factory()
        mock_db.execute.return_value = result_factory(scalar=client)

        result = await ClientService().delete(mock_db, client.id, actor=user)

        assert result.status == "inactive"
        mock_db.delete.assert_not_called()

    @pytest.mark.asyncio
    async def test_not_found(self, mock_db, result_factory):
        mock_db.execute.return_value = result_factory(scalar=None)
        with pytest.raises(NotFoundError):
            await ClientService().get_by_id(mock_db, uuid.uuid4())


def test_is_unique_violation():
    unique = IntegrityError("INSERT", {}, _PgError("duplicate key clients_document_key", "23505"))
    not_null = IntegrityError("INSERT", {}, _PgError("null value in column document", "23502"))
    assert is_unique_violation(unique, "document")
    assert not is_unique_violation(not_null, "document")


# ============================================================
# Acervo
# ============================================================


class TestNextCode:

    def test_first_code(self):
        assert next_code(None, "25") == "00001-25"

    def test_increments_numeric_part(self):
        assert next_code("00041-25", "25") == "00042-25"
        assert next_code("00999-24", "25") == "01000-25"


class TestInventoryService:

    @pytest.mark.asyncio
    async def test_create_generates_code(self, mock_db, user, result_factory):
        mock_db.execute.return_value = result_factory(scalar="00007-25")
        data = InventoryItemCreate(
            name="Letreiro neon", category="LETREIROS", rental_price=Decimal("80"), current_stock=2
        )

        item = await InventoryService().create(mock_db, data, actor=user)

        assert item.code == "00008-25"
        assert item.category == "LETREIROS"
        assert item.status == "active"

    @pytest.mark.asyncio
    async def test_soft_delete(self, mock_db, user, item_factory, result_factory):
        item = item_factory()
        mock_db.execute.return_value = result_factory(scalar=item)

        result = await InventoryService().delete(mock_db, item.id, actor=user)

        assert result.status == "inactive"

    @pytest.mark.asyncio
    async def test_low_stock(self, mock_db, item_factory, result_factory):
        low = item_factory(current_stock=1, min_stock=2)
        mock_db.execute.return_value = result_factory(items=[low])

        assert await InventoryService().get_low_stock(mock_db) == [low]


# ============================================================
# Listagens e exclusão lógica
# ============================================================


def _where(statement):
    """Cláusula WHERE do comando enviado ao banco, com os valores embutidos."""
    if statement.whereclause is None:
        return ""
    return str(statement.whereclause.compile(compile_kwargs={"literal_binds": True}))


class TestListingFilters:

    @pytest.mark.asyncio
    async def test_active_clients_exclude_inactive(self, mock_db, client_factory, result_factory):
        active = client_factory()
        mock_db.execute.side_effect = [result_factory(items=[active]), result_factory(scalar=1)]

        clients, total = await ClientService().get_all(mock_db, status="active")

        assert (clients, total) == ([active], 1)
        query, count_query = (call.args[0] for call in mock_db.execute.call_args_list)
        assert _where(query) == "clients.status = 'active'"
        assert _where(count_query) == "clients.status = 'active'"

    @pytest.mark.asyncio
    async def test_unfiltered_clients_include_inactive(self, mock_db, client_factory, result_factory):
        rows = [client_factory(), client_factory(status="inactive")]
        mock_db.execute.side_effect = [result_factory(items=rows), result_factory(scalar=2)]

        clients, total = await ClientService().get_all(mock_db)

        assert total == 2
        assert [c.status for c in clients] == ["active", "inactive"]
        query, count_query = (call.args[0] for call in mock_db.execute.call_args_list)
        assert "status" not in _where(query)
        assert "status" not in _where(count_query)

    @pytest.mark.asyncio
    async def test_client_picker_only_active(self, mock_db, result_factory):
        mock_db.execute.return_value = result_factory(items=[])

        await ClientService().search_active(mock_db)

        assert _where(mock_db.execute.call_args.args[0]) == "clients.status = 'active'"

    @pytest.mark.asyncio
    async def test_active_items_exclude_inactive(self, mock_db, item_factory, result_factory):
        item = item_factory()
        mock_db.execute.side_effect = [result_factory(items=[item]), result_factory(scalar=1)]

        await InventoryService().get_all(mock_db, status="active")

        query, count_query = (call.args[0] for call in mock_db.execute.call_args_list)
        assert _where(query) == "inventory_items.status = 'active'"
        assert _where(count_query) == "inventory_items.status = 'active'"

    @pytest.mark.asyncio
    async def test_unfiltered_items_include_inactive(self, mock_db, item_factory, result_factory):
        rows = [item_factory(), item_factory(status="inactive")]
        mock_db.execute.side_effect = [result_factory(items=rows), result_factory(scalar=2)]

        items, total = await InventoryService().get_all(mock_db)

        assert (len(items), total) == (2, 2)
        query, count_query = (call.args[0] for call in mock_db.execute.call_args_list)
        assert "status" not in _where(query)
        assert "status" not in _where(count_query)

    @pytest.mark.asyncio
    async def test_orderable_items_only_active(self, mock_db, result_factory):
        mock_db.execute.return_value = result_factory(items=[])

        await InventoryService().get_orderable(mock_db)

        clause = _where(mock_db.execute.call_args.args[0])
        assert "inventory_items.status = 'active'" in clause
        assert "inventory_items.current_stock > 0" in clause
