from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from starlette.middleware.cors import CORSMiddleware

from api import auth, autos
from api.graphql import create_graphql_router
from api.middleware import ResponseTimeMiddleware
from core.auto.exceptions import (
    AutoNotFoundException,
    InvalidSearchCriteriaException,
    VersionInvalidException,
    VersionMissingException,
    VersionOutdatedException,
    VinExistsException,
)
from infrastructure.database.seed import populate
from infrastructure.database.session import Database
from infrastructure.keycloak import KeycloakClient
from infrastructure.logging.logger import setup_logger
from infrastructure.mail import MailService
from settings import settings

logger = setup_logger("auto_catalog")

# Исключение прикладного ядра -> HTTP-статус
EXCEPTION_STATUS = {
    AutoNotFoundException: status.HTTP_404_NOT_FOUND,
    InvalidSearchCriteriaException: status.HTTP_404_NOT_FOUND,
    VinExistsException: status.HTTP_422_UNPROCESSABLE_ENTITY,
    VersionMissingException: status.HTTP_428_PRECONDITION_REQUIRED,
    VersionInvalidException: status.HTTP_412_PRECONDITION_FAILED,
    VersionOutdatedException: status.HTTP_412_PRECONDITION_FAILED,
}


def create_app(
    db: Optional[Database] = None,
    mail_service: Optional[MailService] = None,
    keycloak: Optional[KeycloakClient] = None,
) -> FastAPI:
    """Собирает приложение; зависимости можно подменить (например, в тестах)."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.logger = logger
        app.state.db = db or Database()
        app.state.mail_service = mail_service or MailService()
        app.state.keycloak = keycloak or KeycloakClient()
        logger.info(f"[startup] БД: {app.state.db.redacted_url}")

        if settings.DB_POPULATE:
            populate(app.state.db)

        yield

        if db is None:
            app.state.db.dispose()
        logger.info("[shutdown] Приложение остановлено")

    app = FastAPI(
        title="Auto Catalog",
        version="0.1.0",
        description="Каталог автомобилей: REST и GraphQL",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["ETag", "Location"],
    )
    app.add_middleware(ResponseTimeMiddleware)

    for exc_class in EXCEPTION_STATUS:
        app.add_exception_handler(exc_class, domain_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    # Подключаем эндпоинты
    app.include_router(autos.router)
    app.include_router(auth.router)
    app.include_router(create_graphql_router(), prefix="/graphql")

    @app.get("/")
    def root():
        return {"status": "ok"}

    @app.get("/health/liveness")
    def liveness():
        return {"status": "up"}

    @app.get("/health/readiness")
    def readiness(request: Request):
        try:
            request.app.state.db.ping()
        except Exception as e:
            logger.error(f"[health] БД недоступна: {e}")
            return JSONResponse(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, content={"db": "down"})
        return {"db": "up"}

    return app


async def domain_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    status_code = EXCEPTION_STATUS.get(type(exc), status.HTTP_400_BAD_REQUEST)
    logger.debug(f"[errors] {request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=status_code, content={"detail": getattr(exc, "message", str(exc))})


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(f"[errors] Необработанная ошибка {request.method} {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


app = create_app()
