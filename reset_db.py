"""
Apaga e recria todas as tabelas do LocDecor.

Uso: python reset_db.py (com o pacote instalado via pip install -e .)
"""

import asyncio
import logging

from locdecor.core.database import engine
from locdecor.models import Base

logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s")
logger = logging.getLogger("reset_db")


async def reset():
    logger.info("Conectando ao banco, removendo tabelas...")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        logger.info("Tabelas removidas. Criando as tabelas novamente...")
        await conn.run_sync(Base.metadata.create_all)
    await engine.dispose()
    logger.info("Banco de dados recriado com sucesso!")


if __name__ == "__main__":
    asyncio.run(reset())
