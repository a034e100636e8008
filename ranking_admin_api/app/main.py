"""
Main entrypoint for the character ranking admin API.

This module assembles the FastAPI application, sets up logging and
includes versioned routers.  The ``create_app`` function builds and
configures the app, which is then instantiated at module import time
as ``app``.  Importing the app here makes it easy to run with uvicorn
or another ASGI server, e.g.::

    uvicorn ranking_admin_api.app.main:app --reload

The character store is opened once when the application starts and
closed when it shuts down; request handlers reach it through
``app.state.character_store``.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .api.v1.router import router as v1_router
from .core.config import Settings, settings as default_settings
from .core.errors import STATUS_CODES, ServiceError
from .core.logging_config import setup_logging
from .repositories.character_repository import SQLiteCharacterStore

logger = logging.getLogger(__name__)


def create_app(app_settings: Optional[Settings] = None) -> FastAPI:
    """Create and configure a FastAPI application.

    Parameters
    ----------
    app_settings : Optional[Settings]
        Settings to use instead of the module‑level ``settings``
        instance.  Tests pass one pointing at a temporary database.

    Returns
    -------
    FastAPI
        A configured FastAPI application instance.
    """
    cfg = app_settings or default_settings

    # Logging first so that start‑up messages below are formatted.
    setup_logging(cfg.log_level, cfg.log_file)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        store = SQLiteCharacterStore.open(cfg.database_url)
        app.state.character_store = store
        try:
            yield
        finally:
            store.close()
            logger.info("Closed character store")

    app = FastAPI(
        title=cfg.project_name,
        version=cfg.api_version,
        debug=cfg.debug,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cfg.cors_origins,
        allow_credentials=cfg.cors_credentials,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(ServiceError)
    async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
        return JSONResponse(
            status_code=STATUS_CODES[exc.kind],
            content={"detail": exc.message, "error": exc.kind.value},
        )

    app.include_router(v1_router, prefix="/api/v1")

    return app


# Create the application instance at import time so that tools such as
# uvicorn can discover it without calling create_app manually.
app = create_app()
