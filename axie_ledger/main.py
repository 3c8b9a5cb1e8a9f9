"""Axie Ledger API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map LedgerError → structured JSON responses
    - Migrations applied before the database manager is created; failure aborts startup
    - Database manager lives on app.state and is disposed on shutdown

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Graceful shutdown delegated to uvicorn: SIGINT/SIGTERM stop accepting new
      connections and in-flight requests get shutdown_timeout_seconds to finish
"""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from axie_ledger.api.error_handlers import register_error_handlers
from axie_ledger.api.routes import accounts, health, purchase
from axie_ledger.config import Settings, get_settings
from axie_ledger.infrastructure.database import DatabaseSessionManager
from axie_ledger.infrastructure.migrations import run_migrations
from axie_ledger.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Startup/shutdown lifecycle."""
        setup_logging(settings.log_level, settings.log_format)
        if settings.run_migrations_on_startup:
            await run_migrations(settings.database_url)
        app.state.db = DatabaseSessionManager(
            settings.database_url,
            pool_size=settings.database_pool_size,
            max_overflow=settings.database_max_overflow,
        )
        logger.info("Axie Ledger API started")
        try:
            yield
        finally:
            logger.info("Axie Ledger API shutting down")
            await app.state.db.dispose()

    app = FastAPI(title="Axie Ledger API", version="1.0.0", lifespan=lifespan)
    app.state.settings = settings

    app.include_router(health.router)
    app.include_router(purchase.router)
    app.include_router(purchase.legacy_router)
    app.include_router(accounts.router)

    register_error_handlers(app)
    return app


app = create_app()


def run() -> None:
    """Console entry point: serve the app with graceful shutdown."""
    settings = get_settings()
    uvicorn.run(
        "axie_ledger.main:app",
        host=settings.host,
        port=settings.port,
        timeout_graceful_shutdown=settings.shutdown_timeout_seconds,
        log_config=None,
    )


if __name__ == "__main__":
    run()
