"""Shared utilities: logging setup and cross-cutting helpers.

Used by domain, application, and infrastructure. No business logic.
"""

from vendorflow.shared.utils import (
    ensure_utc,
    generate_cuid,
    generate_share_token,
    is_past,
    parse_datetime,
    utc_now,
)

__all__ = [
    "generate_cuid",
    "generate_share_token",
    "utc_now",
    "ensure_utc",
    "is_past",
    "parse_datetime",
]
