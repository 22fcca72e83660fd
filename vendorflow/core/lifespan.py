"""Application lifespan: startup and shutdown.

Single place for all startup/shutdown logic (SRP). Used by main.py;
no business logic here, only wiring of infrastructure (record store,
lock registry, telemetry).
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from vendorflow.application.services.keyed_locks import KeyedLockRegistry
from vendorflow.core.config import get_settings
from vendorflow.infrastructure.persistence.store_factory import create_record_store

logger = logging.getLogger(__name__)


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Run startup then yield; on exit run shutdown.

    Startup order: record store, lock registry, telemetry (if enabled).
    Shutdown order: telemetry shutdown, record store close.
    A store already placed on app.state (tests) is kept and not closed.
    """
    settings = get_settings()

    # ---- Startup ----
    owns_store = getattr(app.state, "record_store", None) is None
    if owns_store:
        app.state.record_store = await create_record_store(settings)
    if getattr(app.state, "locks", None) is None:
        app.state.locks = KeyedLockRegistry()

    if settings.telemetry_enabled:
        from vendorflow.shared.telemetry.telemetry import TelemetryConfig, set_telemetry

        telemetry = TelemetryConfig(
            service_name=settings.app_name,
            service_version=settings.app_version,
            enabled=True,
            environment=settings.telemetry_environment,
        )
        telemetry.setup_telemetry(
            exporter_type=settings.telemetry_exporter,
            otlp_endpoint=settings.telemetry_otlp_endpoint,
            sample_rate=settings.telemetry_sample_rate,
        )
        set_telemetry(telemetry)
        telemetry.instrument_fastapi(app)
        logger.info("Telemetry initialized")

    yield

    # ---- Shutdown ----
    from vendorflow.shared.telemetry.telemetry import get_telemetry, set_telemetry

    telemetry_instance = get_telemetry()
    if telemetry_instance is not None:
        telemetry_instance.shutdown()
        set_telemetry(None)
        logger.info("Telemetry shutdown complete")

    if owns_store:
        await app.state.record_store.close()
        app.state.record_store = None
        logger.info("Record store closed")
