"""
Main entrypoint for the Lecturer Ratings API.

This module assembles the FastAPI application, sets up logging,
creates the key-value store and services, and includes the versioned
routers.  The ``create_app`` function builds and configures the app,
which is then instantiated at module import time as ``app``, e.g.::

    uvicorn lecturer_api.app.main:app --reload

Tests and embedding applications call ``create_app`` with their own
``Settings`` to point the store at another database or to supply a
different default course catalog.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from .core.config import Settings, settings as default_settings
from .core.errors import InvalidArgument, ServiceError
from .core.logging_config import setup_logging
from .core.store import KeyValueStore
from .api.v1.router import router as v1_router
from .services.catalog_service import CatalogService
from .services.lecturer_service import LecturerService

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Create and configure a FastAPI application.

    Parameters
    ----------
    settings : Optional[Settings]
        Configuration to use.  Defaults to the module level settings
        read from the environment.

    Returns
    -------
    FastAPI
        A configured FastAPI application instance.
    """
    settings = settings or default_settings
    setup_logging(settings.log_level, settings.log_file or None)

    store = KeyValueStore(settings.database_url, settings.store_timeout)
    catalog_service = CatalogService(store, settings.course_list)
    lecturer_service = LecturerService(store)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Starting lecturer plugin...")
        try:
            store.initialize()
            await catalog_service.initialize()
        except ServiceError as exc:
            logger.error("Lecturer plugin failed to start: %s", exc.message)
            raise
        logger.info("Lecturer plugin started")
        yield

    app = FastAPI(title=settings.project_name, version=settings.api_version, lifespan=lifespan)
    app.state.settings = settings
    app.state.store = store
    app.state.catalog_service = catalog_service
    app.state.lecturer_service = lecturer_service

    @app.exception_handler(InvalidArgument)
    async def invalid_argument_handler(request: Request, exc: InvalidArgument) -> JSONResponse:
        logger.warning("Rejected %s %s: %s", request.method, request.url.path, exc.message)
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": exc.message})

    @app.exception_handler(ServiceError)
    async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
        return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"error": exc.message})

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"error": str(exc) or "Internal error"})

    app.include_router(v1_router, prefix="/api/v1")
    return app


# Create the application instance at import time so that tools such as
# uvicorn can discover it without calling create_app manually.
app = create_app()
