"""
Schemas Pydantic para autenticação JWT
Projeto: LocDecor (Gestão de Locação de Decorações)
"""

from datetime import datetime

from pydantic import BaseModel, Field


class TokenResponse(BaseModel):
    """
    Resposta com o par de tokens JWT.

    Attributes:
        access_token: Token de acesso
        refresh_token: Token de renovação
        token_type: Tipo do token (bearer)
    """

    access_token: str = Field(..., description="Token de acesso JWT")
    refresh_token: str = Field(..., description="Token de renovação JWT")
    token_type: str = Field(default="bearer", description="Tipo do token")


class TokenRefresh(BaseModel):
    """Requisição de renovação do access token."""

    refresh_token: str = Field(..., description="Token de renovação JWT")


class TokenPayload(BaseModel):
    """
    Payload decodificado de um token JWT.

    Attributes:
        sub: ID do usuário
        role: Papel do usuário
        exp: Data/hora de expiração
        type: "access" ou "refresh"
        jti: Identificador único do token, usado na revogação
    """

    sub: str = Field(..., description="ID do usuário")
    role: str = Field(..., description="Papel do usuário")
    exp: datetime = Field(..., description="Data/hora de expiração")
    type: str = Field(..., description="Tipo do token (access/refresh)")
    jti: str = Field(..., description="Identificador único do token")


__all__ = [
    "TokenResponse",
    "TokenRefresh",
    "TokenPayload",
]
