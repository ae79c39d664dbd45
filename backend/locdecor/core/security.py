"""
Módulo de segurança para autenticação JWT
Projeto: LocDecor (Gestão de Locação de Decorações)

Hash de senhas e emissão/validação dos tokens JWT.
"""

import uuid
from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt
from passlib.context import CryptContext

from locdecor.core.config import settings
from locdecor.core.exceptions import AuthenticationError
from locdecor.schemas.token import TokenPayload

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    """Gera o hash de uma senha em texto puro."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verifica uma senha em texto puro contra o hash armazenado."""
    return pwd_context.verify(plain_password, hashed_password)


def _create_token(user_id: str, role: str, token_type: str, lifetime: timedelta) -> str:
    expire = datetime.now(timezone.utc) + lifetime
    payload = {
        "sub": user_id,
        "role": role,
        "exp": expire,
        "type": token_type,
        "jti": uuid.uuid4().hex,
    }
    return jwt.encode(payload, settings.secret_key, algorithm=settings.jwt_algorithm)


def create_access_token(user_id: str, role: str) -> str:
    """
    Cria um access token JWT.

    Args:
        user_id: ID do usuário
        role: Papel do usuário

    Returns:
        Token JWT codificado
    """
    return _create_token(
        user_id,
        role,
        "access",
        timedelta(minutes=settings.access_token_expire_minutes),
    )


def create_refresh_token(user_id: str, role: str) -> str:
    """
    Cria um refresh token JWT.

    Args:
        user_id: ID do usuário
        role: Papel do usuário

    Returns:
        Token JWT codificado
    """
    return _create_token(
        user_id,
        role,
        "refresh",
        timedelta(days=settings.refresh_token_expire_days),
    )


def decode_token(token: str) -> TokenPayload:
    """
    Decodifica e valida um token JWT.

    Args:
        token: Token JWT

    Returns:
        TokenPayload com os dados do token

    Raises:
        AuthenticationError: Se o token for inválido ou estiver expirado
    """
    try:
        payload = jwt.decode(
            token,
            settings.secret_key,
            algorithms=[settings.jwt_algorithm],
        )
    except JWTError as e:
        raise AuthenticationError(f"Token inválido ou expirado: {e}")

    if not payload.get("sub") or not payload.get("jti"):
        raise AuthenticationError("Token inválido: claims obrigatórias ausentes")

    return TokenPayload(
        sub=payload["sub"],
        role=payload.get("role", ""),
        exp=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
        type=payload.get("type", ""),
        jti=payload["jti"],
    )


__all__ = [
    "hash_password",
    "verify_password",
    "create_access_token",
    "create_refresh_token",
    "decode_token",
]
