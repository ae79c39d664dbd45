"""Configuração, banco de dados, segurança e exceções da aplicação."""
