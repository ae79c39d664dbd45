"""
Dependency Injection de autenticação
Projeto: LocDecor (Gestão de Locação de Decorações)

Dependencies do FastAPI para obter o usuário autenticado.
"""

from typing import Annotated, Optional
from uuid import UUID

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from locdecor.core.database import get_db
from locdecor.core.security import decode_token
from locdecor.models.user import User
from locdecor.schemas.token import TokenPayload
from locdecor.services.auth_service import get_auth_service

# Extrai o token do header Authorization
oauth2_scheme = OAuth2PasswordBearer(
    tokenUrl="/api/v1/auth/login",
    auto_error=False,
)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_token_payload(
    token: Optional[str] = Depends(oauth2_scheme),
    db: AsyncSession = Depends(get_db),
) -> TokenPayload:
    """
    Decodifica o access token da requisição.

    Raises:
        HTTPException 401: Token ausente, inválido, revogado ou de refresh
    """
    if not token:
        raise _unauthorized("Token de autenticação não informado")

    token_data = decode_token(token)

    if token_data.type != "access":
        raise _unauthorized("Token de renovação não é válido para esta operação")

    if await get_auth_service().is_revoked(db, token_data.jti):
        raise _unauthorized("Sessão encerrada")

    return token_data


async def get_current_user(
    token_data: TokenPayload = Depends(get_token_payload),
    db: AsyncSession = Depends(get_db),
) -> User:
    """
    Usuário da sessão atual.

    Raises:
        HTTPException 401: Usuário inexistente ou desativado
    """
    try:
        user_id = UUID(token_data.sub)
    except ValueError:
        raise _unauthorized("ID de usuário inválido no token")

    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()

    if not user:
        raise _unauthorized("Usuário não encontrado")

    if not user.is_active:
        raise _unauthorized("Usuário desativado")

    return user


# Aliases de tipo de uso comum
CurrentUser = Annotated[User, Depends(get_current_user)]
CurrentToken = Annotated[TokenPayload, Depends(get_token_payload)]


__all__ = [
    "get_token_payload",
    "get_current_user",
    "oauth2_scheme",
    "CurrentUser",
    "CurrentToken",
]
