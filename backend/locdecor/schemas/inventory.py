"""
Schemas Pydantic para o acervo
Projeto: LocDecor (Gestão de Locação de Decorações)
"""

import datetime
import uuid
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field, model_validator

from locdecor.schemas.client import RecordStatus


class InventoryCategory(str, Enum):
    """Categorias do acervo."""
    MOVEIS = "MÓVEIS"
    SUPORTES = "SUPORTES"
    ESTRUTURA = "ESTRUTURA"
    CAPAS = "CAPAS"
    BANDEJAS = "BANDEJAS"
    VASOS = "VASOS"
    BOLEIRAS = "BOLEIRAS"
    ARRANJOS = "ARRANJOS"
    ENFEITES = "ENFEITES"
    BOLO_FAKES = "BOLO FAKES"
    TAPETES = "TAPETES"
    LETREIROS = "LETREIROS"


class InventoryItemCreate(BaseModel):
    """
    Cadastro de item do acervo.

    O código é gerado pelo servidor. Nome, categoria e valor de aluguel
    são obrigatórios.
    """
    name: str = Field(default="", max_length=150, description="Nome do item")
    category: Optional[InventoryCategory] = Field(None, description="Categoria")
    description: Optional[str] = Field(None, description="Descrição")
    rental_price: Optional[Decimal] = Field(None, ge=Decimal("0"), description="Valor de aluguel")
    acquisition_price: Optional[Decimal] = Field(None, ge=Decimal("0"), description="Valor de aquisição")
    current_stock: int = Field(default=0, ge=0, description="Estoque atual")
    min_stock: int = Field(default=0, ge=0, description="Estoque mínimo")

    @model_validator(mode="after")
    def validate_required(self) -> "InventoryItemCreate":
        self.name = self.name.strip()
        if not self.name or self.category is None or not self.rental_price:
            raise ValueError("Nome, categoria e valor de aluguel são obrigatórios")
        return self


class InventoryItemUpdate(BaseModel):
    """Atualização parcial de item do acervo (código e status não são editáveis)."""
    name: Optional[str] = Field(None, min_length=1, max_length=150)
    category: Optional[InventoryCategory] = None
    description: Optional[str] = None
    rental_price: Optional[Decimal] = Field(None, ge=Decimal("0"))
    acquisition_price: Optional[Decimal] = Field(None, ge=Decimal("0"))
    current_stock: Optional[int] = Field(None, ge=0)
    min_stock: Optional[int] = Field(None, ge=0)


class InventoryItemRead(BaseModel):
    """Item do acervo serializado para a API."""
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    code: str
    name: str
    category: InventoryCategory
    description: Optional[str] = None
    rental_price: Decimal
    acquisition_price: Optional[Decimal] = None
    current_stock: int
    min_stock: int
    status: RecordStatus
    created_at: datetime.datetime
    updated_at: datetime.datetime

    @computed_field
    @property
    def is_low_stock(self) -> bool:
        """Estoque atual no mínimo ou abaixo dele."""
        return self.current_stock <= self.min_stock


class InventoryItemSummary(BaseModel):
    """Versão resumida do item, usada nas linhas do pedido."""
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    code: str
    name: str
    category: InventoryCategory
    rental_price: Decimal
    acquisition_price: Optional[Decimal] = None


class InventoryItemList(BaseModel):
    """Resposta paginada de itens do acervo."""
    items: list[InventoryItemRead]
    total: int
    page: int
    per_page: int
    total_pages: int = 0

    @model_validator(mode="after")
    def compute_total_pages(self) -> "InventoryItemList":
        if self.per_page > 0:
            self.total_pages = (self.total + self.per_page - 1) // self.per_page
        return self


__all__ = [
    "InventoryCategory",
    "InventoryItemCreate",
    "InventoryItemUpdate",
    "InventoryItemRead",
    "InventoryItemSummary",
    "InventoryItemList",
]
