"""FastAPI application entry point.

Wiring only: logging, registry, lifespan, exception handlers, routers.
No business logic here. See crudkit.core.lifespan and
crudkit.core.exception_handlers.

Settings are loaded inside create_app() so that tests can set env (and
clear the get_settings cache) before calling create_app().
"""

from fastapi import FastAPI

from crudkit.api.router import api_router
from crudkit.core.config import get_settings
from crudkit.core.exception_handlers import register_exception_handlers
from crudkit.core.lifespan import create_lifespan
from crudkit.core.logging import setup_logging
from crudkit.core.registry import build_registry


def create_app() -> FastAPI:
    """Build and return the FastAPI application. Invalid settings fail here."""
    settings = get_settings()
    setup_logging(settings)
    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        lifespan=create_lifespan,
    )
    app.state.registry = build_registry(settings)

    register_exception_handlers(app)

    app.include_router(api_router, prefix="/api")

    return app
