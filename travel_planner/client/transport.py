"""httpx transport used by the data provider.

Every call is one independent round trip. There is no retry: a failed call
surfaces to the caller immediately.
"""

from __future__ import annotations

from typing import Any, Optional

import httpx

from travel_planner.config.settings import get_settings
from travel_planner.infrastructure.logging import StructuredLogger, get_logger
from travel_planner.shared.exceptions import NotFound, TransportError


def _error_detail(resp: httpx.Response) -> str:
    try:
        body = resp.json()
    except ValueError:
        return resp.text[:200]
    if isinstance(body, dict) and "detail" in body:
        return str(body["detail"])
    return str(body)[:200]


class HttpTransport:
    """Thin wrapper over `httpx.Client` that maps HTTP failures onto domain errors."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        *,
        client: Optional[httpx.Client] = None,
        timeout: Optional[float] = None,
        logger: Optional[StructuredLogger] = None,
    ):
        if client is None:
            settings = get_settings()
            client = httpx.Client(
                base_url=base_url or settings.api_url,
                timeout=timeout or settings.http_timeout,
            )
        self._client = client
        self._logger = logger or get_logger()

    def request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[dict[str, Any]] = None,
        json: Any = None,
        resource: str = "",
        identifier: Any = None,
    ) -> tuple[Any, httpx.Headers]:
        key = f"{method} {path}"
        self._logger.request_start(key, params=params or {})
        try:
            resp = self._client.request(method, path, params=params, json=json)
        except httpx.HTTPError as exc:
            self._logger.error("transport", f"{key} failed: {exc}")
            raise TransportError(f"{key} failed: {exc}") from exc
        self._logger.request_end(key, status_code=resp.status_code)

        if resp.status_code == 404:
            raise NotFound(resource or path, identifier if identifier is not None else path)
        if resp.status_code >= 400:
            raise TransportError(
                f"HTTP {resp.status_code} on {key}: {_error_detail(resp)}",
                status_code=resp.status_code,
            )
        body = resp.json() if resp.content else None
        return body, resp.headers

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> HttpTransport:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()


__all__ = ["HttpTransport"]
