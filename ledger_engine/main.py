"""
Ledger Engine: FastAPI application.

create_app() is the entry point. It owns the lifecycle of the
database engine: the engine is built here, handed to the store,
and disposed when the application shuts down. Nothing below the
API layer reaches for a global connection.

Run with:
    uvicorn ledger_engine.main:create_app --factory
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.engine import Engine

from ledger_engine.config import Settings, check_settings, get_settings
from ledger_engine.errors import LedgerError, ValidationError
from ledger_engine.models.base import Base, build_engine, build_session_factory
from ledger_engine.services.ledger_store import SqlLedgerStore
from ledger_engine.api.health import router as health_router
from ledger_engine.api.accounts import router as accounts_router
from ledger_engine.api.transactions import router as transactions_router
from ledger_engine.api.ledger import router as ledger_router

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def create_app(
    settings: Settings | None = None,
    engine: Engine | None = None,
) -> FastAPI:
    """
    Build the application.

    Tests pass their own engine; in production it is built from
    DATABASE_URL.
    """
    settings = settings or get_settings()
    check_settings(settings)
    configure_logging(settings)

    if engine is None:
        engine = build_engine(
            settings.DATABASE_URL,
            lock_timeout=settings.LOCK_TIMEOUT_SECONDS,
            echo=settings.DEBUG,
        )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if settings.AUTO_CREATE_SCHEMA:
            Base.metadata.create_all(bind=engine)
            logger.info("Database schema created")
        logger.info(
            "%s %s started (%s)",
            settings.APP_NAME, settings.APP_VERSION, settings.ENVIRONMENT,
        )
        yield
        engine.dispose()
        logger.info("Database connections closed")

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="Double-entry ledger with derived balances",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.store = SqlLedgerStore(build_session_factory(engine))

    register_error_handlers(app)

    # Register routers
    app.include_router(health_router)
    app.include_router(accounts_router)
    app.include_router(transactions_router)
    app.include_router(ledger_router)
    return app


def register_error_handlers(app: FastAPI) -> None:

    @app.exception_handler(LedgerError)
    async def ledger_error_handler(_: Request, exc: LedgerError) -> JSONResponse:
        """Convert ledger errors into structured API responses."""
        if exc.status_code >= 500:
            logger.error("%s: %s", exc.code, exc.message)
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def request_validation_error_handler(
        _: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        """Report malformed payloads in the same shape as ledger errors."""
        detail = exc.errors()
        if detail:
            location = ".".join(str(part) for part in detail[0].get("loc", ()))
            message = f"{location}: {detail[0].get('msg', 'Invalid request')}"
        else:
            message = "Invalid request"
        error = ValidationError(message)
        return JSONResponse(status_code=error.status_code, content=error.to_dict())

    @app.exception_handler(Exception)
    async def unhandled_error_handler(_: Request, exc: Exception) -> JSONResponse:
        """Catch unexpected errors without leaking internals."""
        logger.exception("Unhandled exception", exc_info=exc)
        return JSONResponse(
            status_code=500,
            content={"error": "Internal server error", "code": "INTERNAL_ERROR"},
        )


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "ledger_engine.main:create_app",
        factory=True,
        host=settings.HOST,
        port=settings.PORT,
    )
