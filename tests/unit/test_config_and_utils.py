"""Tests for settings validation and shared utils (ids, tokens, datetimes)."""

from datetime import UTC, datetime, timedelta

import pytest
from pydantic import ValidationError

from vendorflow.core.config import Settings
from vendorflow.shared.utils.datetime import ensure_utc, is_past, parse_datetime
from vendorflow.shared.utils.generators import generate_cuid, generate_share_token


class TestSettings:
    def test_memory_backend_needs_nothing(self) -> None:
        assert Settings(storage_backend="memory").storage_backend == "memory"

    def test_unknown_backend_rejected(self) -> None:
        with pytest.raises(ValidationError, match="storage_backend"):
            Settings(storage_backend="mongo")

    def test_postgres_requires_database_url(self) -> None:
        with pytest.raises(ValidationError, match="DATABASE_URL"):
            Settings(storage_backend="postgres", database_url="")

    def test_supabase_requires_url_and_key(self) -> None:
        with pytest.raises(ValidationError, match="SUPABASE"):
            Settings(storage_backend="supabase", supabase_url="https://x.supabase.co")

    def test_default_depth_must_fit_limit(self) -> None:
        with pytest.raises(ValidationError, match="DEFAULT_MAX_CHAIN_DEPTH"):
            Settings(default_max_chain_depth=20, max_chain_depth_limit=10)
        assert Settings(default_max_chain_depth=-1).default_max_chain_depth == -1

    def test_short_tokens_rejected(self) -> None:
        with pytest.raises(ValidationError, match="SHARE_TOKEN_BYTES"):
            Settings(share_token_bytes=8)


def test_share_tokens_are_256_bit_hex() -> None:
    token = generate_share_token()
    assert len(token) == 64
    int(token, 16)
    assert generate_share_token() != token


def test_share_token_minimum_entropy() -> None:
    with pytest.raises(ValueError):
        generate_share_token(8)


def test_cuids_are_unique_strings() -> None:
    ids = {generate_cuid() for _ in range(50)}
    assert len(ids) == 50


def test_parse_and_compare_datetimes() -> None:
    parsed = parse_datetime("2026-01-01T00:00:00Z")
    assert parsed == datetime(2026, 1, 1, tzinfo=UTC)
    assert parse_datetime(None) is None
    assert ensure_utc(datetime(2026, 1, 1)).tzinfo is not None
    now = datetime(2026, 6, 1, tzinfo=UTC)
    assert is_past(now - timedelta(seconds=1), now)
    assert not is_past(None, now)
