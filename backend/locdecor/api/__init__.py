"""
API Routes
Projeto: LocDecor (Gestão de Locação de Decorações)

Agregação dos routers versionados.
"""

from locdecor.api.v1 import api_v1_router

__all__ = ["api_v1_router"]
