from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .shared.database import Database
from .shared.env import get_setting
from .shared.logger import get_logger
from .shared.provisioning import provision_database
from .eventos.routes import router as eventos_router
from .tipos_eventos.routes import router as tipos_eventos_router

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    database: Database = app.state.database

    # Falha aqui não impede o servidor de escutar
    try:
        provision_database(database)
        logger.info("Database tables created successfully")
    except Exception as e:
        logger.error(f"Error initializing database: {e}")

    yield

    database.close()


def error_response(status_code: int, mensagem: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={'sucesso': False, 'mensagem': mensagem})


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return error_response(exc.status_code, str(exc.detail))


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.warning(f"Invalid request to {request.url.path}: {exc.errors()}")
    return error_response(400, 'Requisição inválida')


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(f"Error processing request {request.method} {request.url.path}: {exc}")
    return error_response(500, 'Erro interno do servidor')


def create_app(database: Optional[Database] = None) -> FastAPI:
    """
    Cria a aplicação com o banco de dados injetado.

    Args:
        database: Pool de conexões a usar (padrão: construído a partir do ambiente)

    Returns:
        Aplicação FastAPI configurada
    """
    app = FastAPI(title='Eventos Clima API', lifespan=lifespan)
    app.state.database = database or Database.from_env()

    origins = [origin.strip() for origin in get_setting('CORS_ORIGINS').split(',') if origin.strip()]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials='*' not in origins,
        allow_methods=['GET', 'POST', 'OPTIONS'],
        allow_headers=['*'],
    )

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    app.include_router(eventos_router)
    app.include_router(tipos_eventos_router)

    @app.get('/health')
    def health():
        return {'status': 'ok'}

    return app
