"""
Main entrypoint for the Khadmaty API.

This module assembles the FastAPI application: logging, error
handlers, the uploaded media mount and the versioned routers.  The
``create_app`` function builds the app, which is then instantiated at
module import time as ``app`` so it can be served with::

    uvicorn khadmaty_api.app.main:app --reload
"""

import os

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from .core.config import settings
from .core.logging_config import setup_logging
from .core.errors import register_error_handlers
from .api.v1.router import router as v1_router
from .core.db import init_db
from .services.storage_service import get_media_root


def create_app() -> FastAPI:
    """Create and configure a FastAPI application.

    Returns
    -------
    FastAPI
        A configured FastAPI application instance.
    """
    # Logging first so that startup messages are formatted.
    setup_logging(settings.log_level, settings.log_file or None)

    app = FastAPI(title=settings.project_name, version=settings.api_version, debug=settings.debug)
    register_error_handlers(app)

    media_root = get_media_root()
    os.makedirs(media_root, exist_ok=True)
    app.mount(settings.media_url, StaticFiles(directory=str(media_root)), name="media")

    app.include_router(v1_router, prefix="/api/v1")

    @app.on_event("startup")
    async def startup_event() -> None:
        # Creates the database file on first run and applies new migrations.
        init_db()

    return app


app = create_app()
