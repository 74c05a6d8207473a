"""
Main entrypoint for the Wanderlust application.

This module assembles the FastAPI application: logging, the session
and method-override middleware, the exception handlers, the upload
directory and the routers.  The ``create_app`` function builds and
configures the app, which is then instantiated at module import time as
``app``, e.g.::

    uvicorn wanderlust.app.main:app --reload
"""

from pathlib import Path

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from .core.config import settings
from .core.db import init_db
from .core.errors import register_exception_handlers
from .core.logging_config import setup_logging
from .core.method_override import MethodOverrideMiddleware
from .core.session import SessionMiddleware, SessionStore
from .api.router import router
from .services.image_service import LOCAL_URL_PREFIX


def create_app() -> FastAPI:
    """Create and configure a FastAPI application.

    Returns
    -------
    FastAPI
        A configured FastAPI application instance.
    """
    # Initialise logging before anything else so that imports below can
    # safely log messages.
    setup_logging(settings.log_level, settings.log_file or None)

    app = FastAPI(title=settings.project_name, debug=settings.debug)

    app.add_middleware(SessionMiddleware)
    # Added last so it wraps the session middleware and the router.
    app.add_middleware(MethodOverrideMiddleware)

    register_exception_handlers(app)

    # Locally stored images.  Mounted before the router so the catch-all
    # not-found route does not shadow it.
    app.mount(LOCAL_URL_PREFIX, StaticFiles(directory=settings.upload_dir, check_dir=False), name="uploads")
    app.include_router(router)

    @app.on_event("startup")
    async def startup_event() -> None:
        init_db()
        SessionStore.purge_expired()
        if not settings.cloud_configured:
            Path(settings.upload_dir).mkdir(parents=True, exist_ok=True)

    return app


# Create the application instance at import time so that tools such as
# uvicorn can discover it without calling create_app manually.
app = create_app()
