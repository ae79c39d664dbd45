"""
Configuração do Banco de Dados - SQLAlchemy 2.0 Async
Projeto: LocDecor (Gestão de Locação de Decorações)

Define engine, session factory e a dependency de sessão para o FastAPI.
"""

import logging
from typing import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from locdecor.core.config import settings

logger = logging.getLogger(__name__)

# ------------------------------------------------------------
# Engine Async SQLAlchemy 2.0
# ------------------------------------------------------------
engine: AsyncEngine = create_async_engine(
    settings.database_url,
    echo=settings.debug,
    pool_pre_ping=True,
    pool_size=settings.db_pool_size,
    max_overflow=settings.db_max_overflow,
)


# ------------------------------------------------------------
# Session Factory
# ------------------------------------------------------------
AsyncSessionLocal = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency injection para o FastAPI.

    Cria uma sessão por requisição e a fecha ao final. Qualquer exceção
    durante a requisição faz rollback da transação inteira.

    Yields:
        AsyncSession: Sessão async do banco
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """
    Dependency que expõe a session factory.

    Usada pelo dashboard, que abre uma sessão por leitura concorrente.
    """
    return AsyncSessionLocal


async def init_db() -> None:
    """
    Inicializa a conexão com o banco.

    Executa um teste de conexão para verificar se o banco está acessível.
    """
    try:
        async with engine.begin() as conn:
            await conn.execute(text("SELECT 1"))
        logger.info("Conexão com o banco de dados estabelecida")
    except Exception as e:
        logger.error("Erro de conexão com o banco de dados: %s", e)
        raise


async def close_db() -> None:
    """Fecha as conexões do pool. Chamada no shutdown da aplicação."""
    await engine.dispose()
    logger.info("Conexões com o banco de dados encerradas")
