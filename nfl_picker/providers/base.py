"""Shared plumbing for rate-governed provider clients.

Every outbound call is wrapped in a unit of work and submitted to the
client's RequestScheduler. The unit performs the HTTP request, measures its
latency, records an ``api_call`` log event, and converts httpx failures into
ProviderRequestError. Calls are never retried here.
"""

import time
from typing import Any

import httpx

from nfl_picker.monitoring import log_api_call
from nfl_picker.providers.errors import ProviderRequestError
from nfl_picker.providers.scheduler import RequestScheduler


class ProviderClient:
    """Base class for provider clients that own a RequestScheduler.

    Subclasses set ``PROVIDER`` and call ``_get_json`` for each endpoint.

    Attributes:
        base_url: Provider base URL; endpoints are relative to it
        timeout: Per-call timeout in seconds, enforced by httpx
        scheduler: The scheduler all calls are routed through
    """

    PROVIDER = "provider"

    def __init__(
        self,
        base_url: str,
        timeout: float,
        scheduler: RequestScheduler,
        auth: tuple[str, str] | None = None,
        default_params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        self.base_url = base_url
        self.timeout = timeout
        self.scheduler = scheduler
        self._auth = auth
        self._default_params = dict(default_params or {})
        self._headers = dict(headers or {})

    async def _get_json(self, endpoint: str, params: dict[str, Any] | None = None) -> Any:
        """Queue a GET request on the scheduler and return the decoded body.

        Args:
            endpoint: Path relative to base_url (e.g., "/teams.json")
            params: Query parameters merged over the client defaults

        Returns:
            Decoded JSON payload

        Raises:
            ProviderRequestError: On non-2xx status, transport failure or
                an undecodable body
        """

        async def unit() -> Any:
            return await self._send(endpoint, params)

        return await self.scheduler.submit(unit)

    async def _send(self, endpoint: str, params: dict[str, Any] | None) -> Any:
        start_time = time.perf_counter()
        query = {**self._default_params, **(params or {})}

        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                auth=self._auth,
                headers=self._headers,
            ) as client:
                response = await client.get(endpoint, params=query)
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status_code = e.response.status_code
            duration_ms = self._elapsed_ms(start_time)
            message = f"HTTP {status_code} {e.response.reason_phrase}"
            log_api_call(self.PROVIDER, endpoint, status_code, duration_ms, error=message)
            raise ProviderRequestError(
                self.PROVIDER, endpoint, message, status_code=status_code, duration_ms=duration_ms
            ) from e
        except httpx.RequestError as e:
            duration_ms = self._elapsed_ms(start_time)
            message = f"{type(e).__name__}: {e}"
            log_api_call(self.PROVIDER, endpoint, None, duration_ms, error=message)
            raise ProviderRequestError(
                self.PROVIDER, endpoint, message, duration_ms=duration_ms
            ) from e

        duration_ms = self._elapsed_ms(start_time)
        try:
            data = response.json()
        except ValueError as e:
            message = f"invalid JSON body: {e}"
            log_api_call(self.PROVIDER, endpoint, response.status_code, duration_ms, error=message)
            raise ProviderRequestError(
                self.PROVIDER,
                endpoint,
                message,
                status_code=response.status_code,
                duration_ms=duration_ms,
            ) from e

        log_api_call(self.PROVIDER, endpoint, response.status_code, duration_ms)
        return data

    @staticmethod
    def _elapsed_ms(start_time: float) -> int:
        return int((time.perf_counter() - start_time) * 1000)
