# finance_api/main.py
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse

from finance_api import __version__
from finance_api.api import auth, categories, health, transactions
from finance_api.core.config import Settings, settings as default_settings
from finance_api.core.errors import NotFoundError, PersistenceError
from finance_api.db.session import Database
from finance_api.services.google_oauth import GoogleOAuthClient, IdentityProvider

logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    database: Optional[Database] = None,
    identity_provider: Optional[IdentityProvider] = None,
) -> FastAPI:
    settings = settings or default_settings
    logging.basicConfig(level=settings.LOG_LEVEL)

    database = database or Database(settings.DATABASE_URL)
    identity_provider = identity_provider or GoogleOAuthClient(
        settings.GOOGLE_CLIENT_ID, settings.GOOGLE_CLIENT_SECRET
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        database.open()
        logger.info("Database pool opened")
        try:
            yield
        finally:
            database.close()
            logger.info("Database pool closed")

    app = FastAPI(title="Finance API", version=__version__, lifespan=lifespan)
    app.state.settings = settings
    app.state.database = database
    app.state.identity_provider = identity_provider

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.CLIENT_URL],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health.router)
    app.include_router(auth.router, prefix="/auth", tags=["auth"])
    app.include_router(categories.router, prefix="/categorias")
    app.include_router(transactions.router, prefix="/transacoes")

    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError):
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(PersistenceError)
    async def persistence_handler(request: Request, exc: PersistenceError):
        # details were logged where the error was raised
        return PlainTextResponse(str(exc), status_code=500)

    return app


app = create_app()
