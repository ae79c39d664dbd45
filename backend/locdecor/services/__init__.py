"""Camada de serviços (regras de negócio e acesso ao banco)."""
