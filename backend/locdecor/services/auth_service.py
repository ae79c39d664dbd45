"""
Serviço de autenticação
Projeto: LocDecor (Gestão de Locação de Decorações)

Cadastro, login, renovação de tokens, logout e verificação de sessão.
"""

import logging
from datetime import datetime, timezone
from typing import Optional
from uuid import UUID

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from locdecor.core.exceptions import AuthenticationError, DuplicateError
from locdecor.core.security import (
    create_access_token,
    create_refresh_token,
    decode_token,
    hash_password,
    verify_password,
)
from locdecor.models.user import RevokedToken, User, UserRole
from locdecor.schemas.token import TokenPayload, TokenResponse
from locdecor.schemas.user import UserLogin, UserSignUp

logger = logging.getLogger(__name__)


def ensure_authenticated(actor: Optional[User], action: str) -> User:
    """
    Garante que existe um usuário autenticado para a operação.

    Args:
        actor: Usuário da sessão (ou None)
        action: Descrição da operação, usada na mensagem de erro

    Returns:
        O próprio usuário

    Raises:
        AuthenticationError: Se não houver usuário autenticado
    """
    if actor is None:
        logger.warning("Operação sem sessão rejeitada: %s", action)
        raise AuthenticationError(f"Usuário deve estar autenticado para {action}")
    return actor


class AuthService:
    """Serviço de autenticação."""

    async def sign_up(self, db: AsyncSession, data: UserSignUp) -> User:
        """
        Cadastra um novo usuário.

        O primeiro usuário do sistema recebe o papel admin.

        Raises:
            DuplicateError: Se o email já estiver cadastrado
        """
        result = await db.execute(select(User).where(User.email == data.email))
        if result.scalar_one_or_none():
            raise DuplicateError("Email já cadastrado")

        count_result = await db.execute(select(func.count(User.id)))
        role = UserRole.ADMIN if count_result.scalar() == 0 else UserRole.OPERATOR

        user = User(
            email=data.email,
            hashed_password=hash_password(data.password),
            full_name=data.full_name,
            role=role.value,
        )
        db.add(user)
        try:
            await db.flush()
        except IntegrityError:
            await db.rollback()
            raise DuplicateError("Email já cadastrado")
        await db.refresh(user)

        logger.info("Usuário cadastrado: %s (%s)", user.email, user.role)
        return user

    async def sign_in(self, db: AsyncSession, data: UserLogin) -> TokenResponse:
        """
        Autentica o usuário e emite o par de tokens.

        Raises:
            AuthenticationError: Credenciais inválidas ou usuário desativado
        """
        result = await db.execute(select(User).where(User.email == data.email))
        user = result.scalar_one_or_none()

        if not user or not verify_password(data.password, user.hashed_password):
            logger.warning("Falha de login para %s", data.email)
            raise AuthenticationError("Email ou senha incorretos")

        if not user.is_active:
            raise AuthenticationError("Usuário desativado")

        return self._issue_tokens(user)

    async def refresh(self, db: AsyncSession, refresh_token: str) -> TokenResponse:
        """
        Emite um novo par de tokens a partir de um refresh token válido.

        Raises:
            AuthenticationError: Token inválido, revogado ou de tipo errado
        """
        token_data = decode_token(refresh_token)
        if token_data.type != "refresh":
            raise AuthenticationError("Token de acesso não é válido para renovação")

        if await self.is_revoked(db, token_data.jti):
            raise AuthenticationError("Sessão encerrada")

        user = await self._get_active_user(db, token_data.sub)
        return self._issue_tokens(user)

    async def sign_out(self, db: AsyncSession, token: TokenPayload) -> None:
        """
        Encerra a sessão revogando o token informado.

        O jti fica registrado até a expiração original do token.
        """
        if await self.is_revoked(db, token.jti):
            return
        await self.purge_expired_tokens(db)
        db.add(RevokedToken(jti=token.jti, expires_at=token.exp))
        await db.flush()
        logger.info("Sessão encerrada para o usuário %s", token.sub)

    async def is_revoked(self, db: AsyncSession, jti: str) -> bool:
        """True se o token com este jti já foi revogado."""
        result = await db.execute(
            select(RevokedToken.id).where(RevokedToken.jti == jti)
        )
        return result.scalar_one_or_none() is not None

    async def purge_expired_tokens(self, db: AsyncSession) -> int:
        """Remove da lista de revogação os tokens já expirados."""
        result = await db.execute(
            delete(RevokedToken).where(RevokedToken.expires_at < datetime.now(timezone.utc))
        )
        return result.rowcount or 0

    # ------------------------------------------------------------
    # Auxiliares
    # ------------------------------------------------------------

    async def _get_active_user(self, db: AsyncSession, sub: str) -> User:
        try:
            user_id = UUID(sub)
        except ValueError:
            raise AuthenticationError("ID de usuário inválido no token")

        result = await db.execute(select(User).where(User.id == user_id))
        user = result.scalar_one_or_none()
        if not user:
            raise AuthenticationError("Usuário não encontrado")
        if not user.is_active:
            raise AuthenticationError("Usuário desativado")
        return user

    @staticmethod
    def _issue_tokens(user: User) -> TokenResponse:
        return TokenResponse(
            access_token=create_access_token(str(user.id), user.role),
            refresh_token=create_refresh_token(str(user.id), user.role),
            token_type="bearer",
        )


def get_auth_service() -> AuthService:
    """Factory do serviço de autenticação."""
    return AuthService()


__all__ = [
    "AuthService",
    "ensure_authenticated",
    "get_auth_service",
]
