"""
Schemas Pydantic para a entidade User
Projeto: LocDecor (Gestão de Locação de Decorações)
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field, model_validator

from locdecor.core.config import settings
from locdecor.models.user import UserRole


class UserSignUp(BaseModel):
    """
    Cadastro de um novo usuário.

    Attributes:
        email: Email (único)
        password: Senha em texto puro
        password_confirm: Confirmação da senha
        full_name: Nome completo
    """

    email: EmailStr = Field(..., description="Email do usuário")
    password: str = Field(..., max_length=100, description="Senha")
    password_confirm: str = Field(..., max_length=100, description="Confirmação da senha")
    full_name: str = Field(default="", max_length=100, description="Nome completo")

    @model_validator(mode="after")
    def validate_password_policy(self) -> "UserSignUp":
        """Senha com tamanho mínimo e confirmação idêntica."""
        if len(self.password) < settings.password_min_length:
            raise ValueError(
                f"A senha deve ter pelo menos {settings.password_min_length} caracteres"
            )
        if self.password != self.password_confirm:
            raise ValueError("As senhas não coincidem")
        return self


class UserLogin(BaseModel):
    """Credenciais de login."""

    email: EmailStr = Field(..., description="Email do usuário")
    password: str = Field(..., min_length=1, description="Senha")


class UserRead(BaseModel):
    """Dados públicos do usuário."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    email: EmailStr
    full_name: str
    role: UserRole
    is_active: bool
    created_at: datetime
    updated_at: Optional[datetime] = None


__all__ = [
    "UserSignUp",
    "UserLogin",
    "UserRead",
]
