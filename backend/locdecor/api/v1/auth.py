"""
Router de autenticação
Projeto: LocDecor (Gestão de Locação de Decorações)

Endpoints de cadastro, login, renovação de tokens, logout e sessão atual.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from locdecor.core.database import get_db
from locdecor.core.deps import CurrentToken, CurrentUser
from locdecor.schemas.token import TokenRefresh, TokenResponse
from locdecor.schemas.user import UserLogin, UserRead, UserSignUp
from locdecor.services.auth_service import AuthService, get_auth_service

router = APIRouter(
    prefix="/auth",
    tags=["Autenticação"],
)


@router.post(
    "/signup",
    response_model=UserRead,
    status_code=status.HTTP_201_CREATED,
    summary="Cadastra um novo usuário",
)
async def sign_up(
    data: UserSignUp,
    db: AsyncSession = Depends(get_db),
    service: AuthService = Depends(get_auth_service),
):
    """
    Cadastra um usuário.

    O primeiro cadastro do sistema recebe o papel admin; os demais, operator.
    """
    user = await service.sign_up(db, data)
    await db.commit()
    return user


@router.post(
    "/login",
    response_model=TokenResponse,
    summary="Efetua o login",
)
async def login(
    data: UserLogin,
    db: AsyncSession = Depends(get_db),
    service: AuthService = Depends(get_auth_service),
):
    """
    Autentica e devolve os tokens JWT.

    Returns:
        TokenResponse com access_token e refresh_token
    """
    return await service.sign_in(db, data)


@router.post(
    "/refresh",
    response_model=TokenResponse,
    summary="Renova os tokens",
)
async def refresh(
    data: TokenRefresh,
    db: AsyncSession = Depends(get_db),
    service: AuthService = Depends(get_auth_service),
):
    return await service.refresh(db, data.refresh_token)


@router.post(
    "/logout",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Encerra a sessão",
)
async def logout(
    token: CurrentToken,
    db: AsyncSession = Depends(get_db),
    service: AuthService = Depends(get_auth_service),
) -> None:
    """Revoga o access token usado na requisição."""
    await service.sign_out(db, token)
    await db.commit()


@router.get(
    "/me",
    response_model=UserRead,
    summary="Usuário da sessão atual",
)
async def get_me(current_user: CurrentUser):
    return current_user


__all__ = ["router"]
