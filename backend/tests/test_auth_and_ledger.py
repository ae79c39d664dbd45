"""
Testes de autenticação (tokens, cadastro, logout) e dos lançamentos financeiros.
"""

import datetime
import uuid
from decimal import Decimal
from types import SimpleNamespace

import pytest

from locdecor.core.exceptions import (
    AuthenticationError,
    BusinessValidationError,
    DuplicateError,
    NotFoundError,
)
from locdecor.core.security import (
    create_access_token,
    create_refresh_token,
    decode_token,
    hash_password,
    verify_password,
)
from locdecor.models.user import RevokedToken
from locdecor.schemas.transaction import TransactionCreate, TransactionUpdate
from locdecor.schemas.user import UserLogin, UserSignUp
from locdecor.services.auth_service import AuthService
from locdecor.services.transaction_service import TransactionService


# ============================================================
# Tokens
# ============================================================


class TestTokens:

    def test_access_token_round_trip(self):
        user_id = str(uuid.uuid4())
        payload = decode_token(create_access_token(user_id, "admin"))

        assert payload.sub == user_id
        assert payload.role == "admin"
        assert payload.type == "access"
        assert payload.jti

    def test_tokens_have_distinct_ids(self):
        a = decode_token(create_refresh_token("1", "operator"))
        b = decode_token(create_refresh_token("1", "operator"))
        assert a.type == "refresh"
        assert a.jti != b.jti

    def test_invalid_token(self):
        with pytest.raises(AuthenticationError, match="Token inválido"):
            decode_token("not-a-jwt")

    def test_password_hash(self):
        hashed = hash_password("segredo1")
        assert verify_password("segredo1", hashed)
        assert not verify_password("outra", hashed)


# ============================================================
# AuthService
# ============================================================


class TestAuthService:

    @pytest.mark.asyncio
    async def test_first_user_is_admin(self, mock_db, result_factory):
        mock_db.execute.side_effect = [result_factory(scalar=None), result_factory(scalar=0)]
        data = UserSignUp(email="dona@locdecor.com", password="123456", password_confirm="123456")

        user = await AuthService().sign_up(mock_db, data)

        assert user.role == "admin"
        assert user.hashed_password != "123456"

    @pytest.mark.asyncio
    async def test_next_users_are_operators(self, mock_db, result_factory):
        mock_db.execute.side_effect = [result_factory(scalar=None), result_factory(scalar=3)]
        data = UserSignUp(email="op@locdecor.com", password="123456", password_confirm="123456")

        user = await AuthService().sign_up(mock_db, data)

        assert user.role == "operator"

    @pytest.mark.asyncio
    async def test_duplicate_email(self, mock_db, user, result_factory):
        mock_db.execute.return_value = result_factory(scalar=user)
        data = UserSignUp(email=user.email, password="123456", password_confirm="123456")

        with pytest.raises(DuplicateError, match="Email já cadastrado"):
            await AuthService().sign_up(mock_db, data)

    @pytest.mark.asyncio
    async def test_wrong_password(self, mock_db, result_factory):
        stored = SimpleNamespace(
            id=uuid.uuid4(), role="operator", is_active=True,
            hashed_password=hash_password("certa1"),
        )
        mock_db.execute.return_value = result_factory(scalar=stored)

        with pytest.raises(AuthenticationError, match="Email ou senha incorretos"):
            await AuthService().sign_in(mock_db, UserLogin(email="a@b.com", password="errada"))

    @pytest.mark.asyncio
    async def test_sign_in_issues_pair(self, mock_db, result_factory):
        stored = SimpleNamespace(
            id=uuid.uuid4(), role="operator", is_active=True,
            hashed_password=hash_password("certa1"),
        )
        mock_db.execute.return_value = result_factory(scalar=stored)

        tokens = await AuthService().sign_in(mock_db, UserLogin(email="a@b.com", password="certa1"))

        assert decode_token(tokens.access_token).sub == str(stored.id)
        assert decode_token(tokens.refresh_token).type == "refresh"

    @pytest.mark.asyncio
    async def test_refresh_rejects_access_token(self, mock_db):
        token = create_access_token(str(uuid.uuid4()), "operator")
        with pytest.raises(AuthenticationError, match="não é válido para renovação"):
            await AuthService().refresh(mock_db, token)

    @pytest.mark.asyncio
    async def test_sign_out_records_jti(self, mock_db, result_factory):
        payload = decode_token(create_access_token(str(uuid.uuid4()), "operator"))
        mock_db.execute.side_effect = [result_factory(scalar=None), result_factory()]

        await AuthService().sign_out(mock_db, payload)

        revoked = mock_db.add.call_args.args[0]
        assert isinstance(revoked, RevokedToken)
        assert revoked.jti == payload.jti
        assert revoked.expires_at == payload.exp

    @pytest.mark.asyncio
    async def test_refresh_after_sign_out(self, mock_db, result_factory):
        token = create_refresh_token(str(uuid.uuid4()), "operator")
        mock_db.execute.return_value = result_factory(scalar=uuid.uuid4())

        with pytest.raises(AuthenticationError, match="Sessão encerrada"):
            await AuthService().refresh(mock_db, token)


# ============================================================
# Lançamentos
# ============================================================


def _transaction(**kwargs):
    defaults = dict(
        id=uuid.uuid4(),
        type="despesa",
        category="marketing",
        amount=Decimal("80.00"),
        date=datetime.date(2026, 3, 1),
        status="completed",
    )
    defaults.update(kwargs)
    return SimpleNamespace(**defaults)


class TestTransactionService:

    @pytest.mark.asyncio
    async def test_create_stores_values(self, mock_db, user):
        data = TransactionCreate(
            type="receita", category="Aluguel", amount=Decimal("150"),
            date=datetime.date(2026, 3, 5), payment_method="pix",
        )

        tx = await TransactionService().create(mock_db, data, actor=user)

        assert (tx.type, tx.category, tx.status, tx.payment_method) == ("receita", "aluguel", "completed", "pix")
        mock_db.execute.assert_not_called()

    @pytest.mark.asyncio
    async def test_create_with_unknown_order(self, mock_db, user, result_factory):
        mock_db.execute.return_value = result_factory(scalar=None)
        data = TransactionCreate(
            type="receita", category="aluguel", amount=Decimal("150"),
            date=datetime.date(2026, 3, 5), order_id=uuid.uuid4(),
        )

        with pytest.raises(NotFoundError):
            await TransactionService().create(mock_db, data, actor=user)
        mock_db.add.assert_not_called()

    @pytest.mark.asyncio
    async def test_type_change_revalidates_category(self, mock_db, user, result_factory):
        mock_db.execute.return_value = result_factory(scalar=_transaction())

        with pytest.raises(BusinessValidationError, match="Categoria inválida para receita"):
            await TransactionService().update(
                mock_db, uuid.uuid4(), TransactionUpdate(type="receita"), actor=user
            )

    @pytest.mark.asyncio
    async def test_update_type_and_category(self, mock_db, user, result_factory):
        tx = _transaction()
        mock_db.execute.return_value = result_factory(scalar=tx)

        await TransactionService().update(
            mock_db, tx.id, TransactionUpdate(type="receita", category="vendas"), actor=user
        )

        assert (tx.type, tx.category) == ("receita", "vendas")

    @pytest.mark.asyncio
    async def test_delete_is_physical(self, mock_db, user, result_factory):
        tx = _transaction()
        mock_db.execute.return_value = result_factory(scalar=tx)

        await TransactionService().delete(mock_db, tx.id, actor=user)

        mock_db.delete.assert_awaited_once_with(tx)
