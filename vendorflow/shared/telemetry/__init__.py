"""Shared telemetry: logging setup, OpenTelemetry config, and tracing helpers."""

from vendorflow.shared.telemetry.logging import get_logger, setup_logging
from vendorflow.shared.telemetry.telemetry import (
    TelemetryConfig,
    get_telemetry,
    set_telemetry,
)
from vendorflow.shared.telemetry.tracing import traced

__all__ = [
    "setup_logging",
    "get_logger",
    "TelemetryConfig",
    "get_telemetry",
    "set_telemetry",
    "traced",
]
