"""Shared utilities: datetime, generators."""

from vendorflow.shared.utils.datetime import (
    ensure_utc,
    is_past,
    parse_datetime,
    utc_now,
)
from vendorflow.shared.utils.generators import generate_cuid, generate_share_token

__all__ = [
    "generate_cuid",
    "generate_share_token",
    "utc_now",
    "ensure_utc",
    "is_past",
    "parse_datetime",
]
