"""Thin PostgREST client for a Supabase project (no supabase-py).

All HTTP calls use httpx.AsyncClient so they do not block the event loop.
Authenticates with the service-role key, so row-level security is bypassed;
access rules live in the application layer.
"""

from __future__ import annotations

from typing import Any

import httpx

from vendorflow.domain.exceptions import ConflictException, StorageBackendException
from vendorflow.infrastructure.supabase._rest_encoding import encode_record

_REST_PATH = "/rest/v1"


def _error_message(resp: httpx.Response) -> str:
    try:
        body = resp.json()
    except ValueError:
        return resp.text or resp.reason_phrase
    if isinstance(body, dict):
        return str(body.get("message") or body.get("error") or body)
    return str(body)


class PostgrestClient:
    """Table-level select/insert/patch/delete against ``{url}/rest/v1``."""

    def __init__(
        self,
        base_url: str,
        service_key: str,
        *,
        timeout: float = 30.0,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._base = base_url.rstrip("/") + _REST_PATH
        self._headers = {
            "apikey": service_key,
            "Authorization": f"Bearer {service_key}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        self._http = http_client if http_client is not None else httpx.AsyncClient(timeout=timeout)
        self._owns_http = http_client is None

    async def aclose(self) -> None:
        """Close the HTTP client only if we created it (do not close injected client)."""
        if self._owns_http:
            await self._http.aclose()

    async def _request(
        self,
        method: str,
        table: str,
        params: dict[str, str] | None = None,
        body: Any = None,
        prefer: str | None = None,
    ) -> Any:
        headers = dict(self._headers)
        if prefer:
            headers["Prefer"] = prefer
        try:
            resp = await self._http.request(
                method,
                f"{self._base}/{table}",
                params=params,
                json=body,
                headers=headers,
            )
        except httpx.HTTPError as e:
            raise StorageBackendException(f"Supabase request failed: {e}") from e
        if resp.status_code == 409:
            raise ConflictException(_error_message(resp), resource_type=table)
        if resp.status_code >= 400:
            raise StorageBackendException(
                f"Supabase {method} {table} failed: {_error_message(resp)}",
                status_code=resp.status_code,
            )
        if resp.status_code == 204 or not resp.content:
            return None
        return resp.json()

    async def select(self, table: str, params: dict[str, str]) -> list[dict[str, Any]]:
        rows = await self._request("GET", table, params={"select": "*", **params})
        return rows or []

    async def insert(self, table: str, row: dict[str, Any]) -> dict[str, Any]:
        rows = await self._request(
            "POST", table, body=encode_record(row), prefer="return=representation"
        )
        if not rows:
            raise StorageBackendException(f"Supabase insert into {table} returned no row")
        return rows[0]

    async def patch(
        self, table: str, params: dict[str, str], changes: dict[str, Any]
    ) -> list[dict[str, Any]]:
        rows = await self._request(
            "PATCH", table, params=params, body=encode_record(changes), prefer="return=representation"
        )
        return rows or []

    async def delete(self, table: str, params: dict[str, str]) -> None:
        await self._request("DELETE", table, params=params, prefer="return=minimal")
