"""
Adapter: Hosted table store.

Implements the StorageGateway port against a hosted REST table service
speaking the PostgREST dialect (``/rest/v1/<table>``). Filters become
``column=eq.value`` query parameters; writes ask for the stored rows
back with ``Prefer: return=representation``.

The service has no multi-statement transactions, so ``transaction()``
yields the adapter itself and each call commits on its own.
"""

import logging
from contextlib import contextmanager
from datetime import date, datetime
from typing import Any, Iterator, Mapping, Optional, Sequence

import httpx

from artfolio.domain.portfolio.errors import (
    StorageConflictError,
    StorageError,
    StorageUnavailableError,
)
from artfolio.domain.portfolio.ports import Row, StorageGateway, check_columns

logger = logging.getLogger(__name__)

RETURN_REPRESENTATION = "return=representation"


def _encode(value: Any) -> Any:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return value


def _filter_value(value: Any) -> str:
    if value is None:
        return "is.null"
    if isinstance(value, bool):
        return f"eq.{str(value).lower()}"
    return f"eq.{_encode(value)}"


def _filter_params(filters: Mapping[str, Any]) -> dict[str, str]:
    return {column: _filter_value(value) for column, value in filters.items()}


class TableStoreAdapter(StorageGateway):
    """StorageGateway over a PostgREST-compatible HTTP API.

    Args:
        base_url: Service root, e.g. ``https://project.example.co``.
        api_key: Key sent as both ``apikey`` and bearer token.
        timeout: Per-request timeout in seconds.
        client: Pre-built httpx client, mainly for tests.
    """

    name = "table_store"

    def __init__(
        self,
        base_url: str,
        api_key: str,
        timeout: float = 10.0,
        client: Optional[httpx.Client] = None,
    ) -> None:
        self._client = client or httpx.Client(
            base_url=f"{base_url.rstrip('/')}/rest/v1",
            headers={
                "apikey": api_key,
                "Authorization": f"Bearer {api_key}",
                "Content-Type": "application/json",
            },
            timeout=timeout,
        )

    def select(
        self,
        table: str,
        filters: Optional[Mapping[str, Any]] = None,
        order_by: Sequence[str] = (),
        limit: Optional[int] = None,
    ) -> list[Row]:
        filters = filters or {}
        check_columns(table, [*filters, *order_by])
        params = {"select": "*", **_filter_params(filters)}
        if order_by:
            params["order"] = ",".join(
                f"{key[1:]}.desc" if key.startswith("-") else f"{key}.asc"
                for key in order_by
            )
        if limit is not None:
            params["limit"] = str(limit)
        return self._request("GET", table, params=params)

    def insert(self, table: str, row: Mapping[str, Any]) -> Row:
        check_columns(table, list(row))
        rows = self._request(
            "POST",
            table,
            json={column: _encode(value) for column, value in row.items()},
            headers={"Prefer": RETURN_REPRESENTATION},
        )
        if not rows:
            raise StorageError(f"Insert into {table} returned no row")
        return rows[0]

    def update(
        self,
        table: str,
        filters: Mapping[str, Any],
        changes: Mapping[str, Any],
    ) -> list[Row]:
        check_columns(table, [*filters, *changes])
        return self._request(
            "PATCH",
            table,
            params=_filter_params(filters),
            json={column: _encode(value) for column, value in changes.items()},
            headers={"Prefer": RETURN_REPRESENTATION},
        )

    def delete(self, table: str, filters: Mapping[str, Any]) -> int:
        check_columns(table, list(filters))
        rows = self._request(
            "DELETE",
            table,
            params=_filter_params(filters),
            headers={"Prefer": RETURN_REPRESENTATION},
        )
        return len(rows)

    @contextmanager
    def transaction(self) -> Iterator[StorageGateway]:
        logger.debug("Table store has no transactions; calls commit individually")
        yield self

    def close(self) -> None:
        self._client.close()

    def _request(
        self,
        method: str,
        table: str,
        params: Optional[Mapping[str, str]] = None,
        json: Any = None,
        headers: Optional[Mapping[str, str]] = None,
    ) -> list[Row]:
        try:
            response = self._client.request(
                method, f"/{table}", params=params, json=json, headers=headers
            )
        except httpx.TransportError as exc:
            raise StorageUnavailableError(f"{type(exc).__name__}: {exc}") from exc

        if response.status_code == 409:
            raise StorageConflictError(table, self._error_detail(response))
        if response.status_code >= 500:
            raise StorageUnavailableError(
                f"{method} {table} returned {response.status_code}"
            )
        if response.status_code >= 400:
            raise StorageError(
                f"{method} {table} returned {response.status_code}: "
                f"{self._error_detail(response)}"
            )

        if not response.content:
            return []
        try:
            payload = response.json()
        except ValueError as exc:
            raise StorageError(f"{method} {table} returned invalid JSON") from exc
        if isinstance(payload, dict):
            return [payload]
        return payload

    @staticmethod
    def _error_detail(response: httpx.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            return response.text[:200]
        if isinstance(body, dict):
            return str(body.get("message") or body.get("details") or body)
        return str(body)
