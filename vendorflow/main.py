"""FastAPI application entry point.

Wiring only: logging, lifespan, exception handlers, middleware, routers.
No business logic here (SRP). See vendorflow.core.lifespan and
vendorflow.core.exception_handlers.

Settings are loaded inside create_app() so that tests can set env (and optionally
clear get_settings cache) before importing or calling create_app().
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from vendorflow.api.v1 import api_router
from vendorflow.core.config import get_settings
from vendorflow.core.exception_handlers import register_exception_handlers
from vendorflow.core.lifespan import create_lifespan
from vendorflow.core.limiter import limiter
from vendorflow.shared.telemetry.logging import setup_logging


def create_app() -> FastAPI:
    """Build and return the FastAPI application. Settings are resolved here (deferred from import)."""
    settings = get_settings()
    setup_logging()
    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        lifespan=create_lifespan,
    )

    app.state.limiter = limiter

    register_exception_handlers(app)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[o.strip() for o in settings.allowed_origins.split(",") if o.strip()],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router, prefix="/api/v1")

    return app


app = create_app()
