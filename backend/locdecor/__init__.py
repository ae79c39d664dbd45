"""
LocDecor - Gestão de Locação de Decorações

Backend FastAPI do back-office: clientes, acervo, pedidos, financeiro,
tarefas e dashboard.
"""

__version__ = "1.0.0"
