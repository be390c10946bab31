import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from user_service.config import Settings, load_settings
from user_service.db import Database
from user_service.errors import register_error_handlers
from user_service.routers import health, users
from user_service.schema import ensure_user_table

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

openapi_tags = [
    {"name": "Health", "description": "Service and database health check."},
    {"name": "Users", "description": "User resource routes."},
]


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """
    Startup: open the database pool and create the users table.
    Shutdown: close the pool.

    Startup failures propagate and abort the server.
    """
    db = app.state.db
    db.connect()
    try:
        ensure_user_table(db)
        yield
    finally:
        logger.info("Shutting down")
        db.close()


class Server(uvicorn.Server):
    """uvicorn server that reports readiness once its socket is bound."""

    async def startup(self, sockets=None) -> None:
        # uvicorn calls sys.exit() from here when the bind fails.
        await super().startup(sockets=sockets)
        if self.started:
            logger.info("Server is running on port %s", self.config.port)


# PUBLIC_INTERFACE
def create_app(settings: Optional[Settings] = None, database: Optional[Database] = None) -> FastAPI:
    """
    Build the application.

    Request pipeline: CORS, routers (request bodies are parsed by
    FastAPI/pydantic per route), then the terminal error handlers. CORS is
    added last because Starlette wraps later middleware around earlier ones.
    """
    if settings is None:
        settings = load_settings()
    if database is None:
        database = Database(settings.database_dsn, minconn=settings.db_pool_min, maxconn=settings.db_pool_max)

    app = FastAPI(
        title="User Service",
        description="Minimal user service backed by PostgreSQL.",
        version="1.0.0",
        openapi_tags=openapi_tags,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.db = database

    app.include_router(health.router)
    app.include_router(users.router, prefix="/api")

    register_error_handlers(app, debug=settings.debug)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials="*" not in settings.cors_allow_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    return app


# PUBLIC_INTERFACE
def run() -> None:
    """Process entry point. Takes no command-line arguments."""
    settings = load_settings()
    configure_logging(settings.log_level)
    app = create_app(settings)
    config = uvicorn.Config(app, host=settings.host, port=settings.port, log_config=None)
    # Bind failure exits the process; there is no retry.
    Server(config).run()


if __name__ == "__main__":
    run()
