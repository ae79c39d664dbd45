"""
Schemas Pydantic para a entidade Client
Projeto: LocDecor (Gestão de Locação de Decorações)
"""
# Define os schemas de validação e serialização da API.

import datetime
import re
import uuid
from enum import Enum
from typing import Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    field_validator,
    model_validator,
)


class RecordStatus(str, Enum):
    """Status de registros com exclusão lógica (clientes e itens do acervo)."""
    ACTIVE = "active"
    INACTIVE = "inactive"


# -------------------------------------------------------------------
# Funções de normalização e validação
# -------------------------------------------------------------------

# Somente dígitos ASCII (0-9)
_NON_DIGITS = re.compile(r"[^0-9]")
_CPF = re.compile(r"[0-9]{11}")


def only_digits(value: Optional[str]) -> Optional[str]:
    """
    Remove tudo que não for dígito.

    Strings vazias (ou sem nenhum dígito) viram None.
    """
    if value is None:
        return None
    digits = _NON_DIGITS.sub("", value)
    return digits or None


def normalize_document(document: str) -> str:
    """
    Normaliza e valida um CPF.

    Remove pontuação e exige exatamente 11 dígitos.

    Args:
        document: CPF digitado (ex.: "123.456.789-01")

    Returns:
        CPF apenas com dígitos (ex.: "12345678901")

    Raises:
        ValueError: Se o CPF não tiver 11 dígitos
    """
    digits = _NON_DIGITS.sub("", document or "")
    if not _CPF.fullmatch(digits):
        raise ValueError("CPF inválido")
    return digits


def _blank_to_none(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


# -------------------------------------------------------------------
# Schemas
# -------------------------------------------------------------------

class ClientBase(BaseModel):
    """
    Campos comuns do cliente.

    Attributes:
        name: Nome completo
        document: CPF (normalizado para 11 dígitos)
        birth_date: Data de nascimento
        phone: Telefone (normalizado para dígitos)
        email: Email
        address: Logradouro
        address_number: Número
        neighborhood: Bairro
        zip_code: CEP (normalizado para dígitos)
    """
    name: str = Field(default="", max_length=150, description="Nome completo")
    document: str = Field(default="", description="CPF")
    birth_date: Optional[datetime.date] = Field(None, description="Data de nascimento")
    phone: Optional[str] = Field(None, max_length=30, description="Telefone")
    email: Optional[EmailStr] = Field(None, description="Email")
    address: Optional[str] = Field(None, max_length=255, description="Logradouro")
    address_number: Optional[str] = Field(None, max_length=20, description="Número")
    neighborhood: Optional[str] = Field(None, max_length=100, description="Bairro")
    zip_code: Optional[str] = Field(None, max_length=10, description="CEP")

    @field_validator("email", mode="before")
    @classmethod
    def empty_email_to_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("address", "address_number", "neighborhood")
    @classmethod
    def strip_text(cls, v: Optional[str]) -> Optional[str]:
        return _blank_to_none(v)

    @field_validator("phone", "zip_code")
    @classmethod
    def strip_non_digits(cls, v: Optional[str]) -> Optional[str]:
        """Telefone e CEP são armazenados apenas com dígitos."""
        return only_digits(v)


class ClientCreate(ClientBase):
    """
    Cadastro de cliente.

    Nome, CPF, telefone e endereço são obrigatórios.
    """

    @model_validator(mode="after")
    def validate_required(self) -> "ClientCreate":
        self.name = self.name.strip()
        if not self.name or not self.document or not self.phone or not self.address:
            raise ValueError("Nome, CPF, Telefone e Endereço são obrigatórios")
        self.document = normalize_document(self.document)
        return self


class ClientUpdate(BaseModel):
    """
    Atualização parcial de cliente.

    O status não é alterado por aqui (usar o DELETE para desativar).
    """
    name: Optional[str] = Field(None, min_length=1, max_length=150)
    document: Optional[str] = None
    birth_date: Optional[datetime.date] = None
    phone: Optional[str] = Field(None, max_length=30)
    email: Optional[EmailStr] = None
    address: Optional[str] = Field(None, max_length=255)
    address_number: Optional[str] = Field(None, max_length=20)
    neighborhood: Optional[str] = Field(None, max_length=100)
    zip_code: Optional[str] = Field(None, max_length=10)

    @field_validator("document")
    @classmethod
    def validate_document(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        return normalize_document(v)

    @field_validator("phone", "zip_code")
    @classmethod
    def strip_non_digits(cls, v: Optional[str]) -> Optional[str]:
        return only_digits(v)


class ClientRead(BaseModel):
    """Cliente serializado para a API."""
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    document: str
    birth_date: Optional[datetime.date] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    address_number: Optional[str] = None
    neighborhood: Optional[str] = None
    zip_code: Optional[str] = None
    status: RecordStatus
    created_at: datetime.datetime
    updated_at: datetime.datetime


class ClientSummary(BaseModel):
    """Versão resumida do cliente, usada dentro do pedido."""
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    document: str
    phone: Optional[str] = None
    email: Optional[str] = None


class ClientList(BaseModel):
    """
    Resposta paginada de clientes.

    Attributes:
        items: Clientes da página
        total: Total de registros
        page: Página atual
        per_page: Registros por página
        total_pages: Total de páginas (calculado)
    """
    items: list[ClientRead]
    total: int
    page: int
    per_page: int
    total_pages: int = 0

    @model_validator(mode="after")
    def compute_total_pages(self) -> "ClientList":
        if self.per_page > 0:
            self.total_pages = (self.total + self.per_page - 1) // self.per_page
        return self


__all__ = [
    "RecordStatus",
    "only_digits",
    "normalize_document",
    "ClientCreate",
    "ClientUpdate",
    "ClientRead",
    "ClientSummary",
    "ClientList",
]
