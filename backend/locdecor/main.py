"""
Main Entry Point - FastAPI Application
Projeto: LocDecor (Gestão de Locação de Decorações)

Configura a aplicação FastAPI com middleware, routers e ciclo de vida.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from locdecor.api.v1 import api_v1_router
from locdecor.core.config import settings
from locdecor.core.database import close_db, init_db
from locdecor.core.exceptions import (
    AppException,
    AuthenticationError,
    BusinessValidationError,
    ConflictError,
    DuplicateError,
    NotFoundError,
)

# ------------------------------------------------------------
# Configuração de logging
# ------------------------------------------------------------
logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


# ------------------------------------------------------------
# Lifespan Handler
# ------------------------------------------------------------
@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Ciclo de vida da aplicação.

    - Startup: testa a conexão com o banco
    - Shutdown: fecha o pool de conexões
    """
    logger.info("Iniciando %s v%s", settings.app_name, settings.app_version)
    await init_db()
    logger.info("Aplicação iniciada")

    yield

    logger.info("Encerrando aplicação...")
    await close_db()
    logger.info("Aplicação encerrada")


# ------------------------------------------------------------
# FastAPI Application
# ------------------------------------------------------------
app = FastAPI(
    title=settings.app_name,
    description="Back-office de locação de decorações - API",
    version=settings.app_version,
    lifespan=lifespan,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
)


# ------------------------------------------------------------
# Exception Handlers
# ------------------------------------------------------------
def _error_response(exc: AppException) -> JSONResponse:
    content = {"detail": exc.detail, "error_code": exc.error_code}
    if exc.extra:
        content["extra"] = exc.extra
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, AuthenticationError) else None
    return JSONResponse(status_code=exc.status_code, content=content, headers=headers)


@app.exception_handler(NotFoundError)
async def not_found_exception_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    """NotFoundError → 404."""
    return _error_response(exc)


@app.exception_handler(DuplicateError)
async def duplicate_exception_handler(request: Request, exc: DuplicateError) -> JSONResponse:
    """DuplicateError → 409."""
    return _error_response(exc)


@app.exception_handler(BusinessValidationError)
async def validation_exception_handler(request: Request, exc: BusinessValidationError) -> JSONResponse:
    """BusinessValidationError → 422."""
    logger.info("Validação rejeitada em %s: %s", request.url.path, exc.detail)
    return _error_response(exc)


@app.exception_handler(ConflictError)
async def conflict_exception_handler(request: Request, exc: ConflictError) -> JSONResponse:
    """ConflictError → 409."""
    return _error_response(exc)


@app.exception_handler(AuthenticationError)
async def authentication_exception_handler(request: Request, exc: AuthenticationError) -> JSONResponse:
    """AuthenticationError → 401."""
    return _error_response(exc)


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Exceções não tratadas viram 500 e são registradas com traceback.
    """
    logger.error("Exceção não tratada em %s: %s", request.url.path, exc, exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"detail": "Erro interno do servidor", "error_code": AppException.error_code},
    )


# ------------------------------------------------------------
# Middleware CORS
# ------------------------------------------------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ------------------------------------------------------------
# Endpoints
# ------------------------------------------------------------
@app.get(
    "/health",
    name="Health Check",
    summary="Estado da aplicação",
    tags=["Sistema"],
)
async def health_check() -> dict[str, str]:
    return {
        "status": "healthy",
        "app": settings.app_name,
        "version": settings.app_version,
        "environment": settings.app_env,
    }


app.include_router(api_v1_router)
