"""
Exceções customizadas da aplicação.
Projeto: LocDecor (Gestão de Locação de Decorações)

Define as exceções de domínio para um tratamento centralizado dos erros.

NOTA: BusinessValidationError é distinta de pydantic.ValidationError.
- pydantic.ValidationError: erros de formato/tipo na entrada (FastAPI → 422)
- BusinessValidationError: violações de regras de negócio (nosso handler → 422)
"""

from typing import Any, Dict, Optional

__all__ = [
    "AppException",
    "NotFoundError",
    "DuplicateError",
    "BusinessValidationError",
    "ConflictError",
    "AuthenticationError",
]


class AppException(Exception):
    """
    Exceção base da aplicação.

    Attributes:
        status_code: HTTP status code devolvido ao cliente
        error_code: Identificador único do erro para o frontend
        detail: Mensagem legível para o usuário
        extra: Dados adicionais para o frontend
    """

    status_code: int = 500
    error_code: str = "INTERNAL_SERVER_ERROR"
    default_detail: str = "Erro interno"

    def __init__(
        self,
        detail: Optional[str] = None,
        error_code: Optional[str] = None,
        extra: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.detail = detail if detail is not None else self.default_detail
        self.error_code = error_code if error_code is not None else self.error_code
        self.extra = extra
        self.status_code = self.__class__.status_code
        super().__init__(self.detail)


class NotFoundError(AppException):
    """Recurso inexistente no banco."""

    status_code: int = 404
    error_code: str = "RESOURCE_NOT_FOUND"
    default_detail: str = "Recurso não encontrado"


class DuplicateError(AppException):
    """
    Tentativa de criar um recurso duplicado.

    Usada para violações de unicidade (ex.: CPF já cadastrado).
    """

    status_code: int = 409
    error_code: str = "DUPLICATE_RESOURCE"
    default_detail: str = "Recurso já existente"


class BusinessValidationError(ValueError, AppException):
    """
    Violação de regra de negócio.

    Herda de ValueError para ser capturada pelos validadores Pydantic.

    Exemplos:
        - "CPF inválido"
        - "Adicione pelo menos um item ao pedido"
        - "Quantidade disponível insuficiente"
        - "Transição de status não permitida"
    """

    status_code: int = 422
    error_code: str = "BUSINESS_VALIDATION_ERROR"
    default_detail: str = "Validação dos dados falhou"

    def __init__(
        self,
        detail: Optional[str] = None,
        error_code: Optional[str] = None,
        extra: Optional[Dict[str, Any]] = None,
    ) -> None:
        AppException.__init__(self, detail, error_code, extra)


class ConflictError(AppException):
    """
    Conflito de estado ou erro genérico do banco.

    A mensagem original do banco é repassada ao usuário.
    """

    status_code: int = 409
    error_code: str = "CONFLICT_STATE"
    default_detail: str = "Conflito de estado"


class AuthenticationError(AppException):
    """
    Sessão ausente ou credenciais rejeitadas.

    Exemplos:
        - "Usuário deve estar autenticado para cadastrar clientes"
        - "Email ou senha incorretos"
    """

    status_code: int = 401
    error_code: str = "NOT_AUTHENTICATED"
    default_detail: str = "Autenticação necessária"
