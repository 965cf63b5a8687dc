"""
Outbound HTTP client used by the GitHub and Gemini integrations.

Every request is counted and timed per upstream service, and transport
failures surface as ExternalServiceError so that callers only deal with
HTTP status codes.
"""

import logging
import time
from typing import Dict, Optional

import httpx

from app.core.exceptions import ExternalServiceError
from app.core.metrics import (
    external_api_duration_seconds,
    external_api_errors_total,
    external_api_requests_total,
)

logger = logging.getLogger(__name__)


class InstrumentedAsyncClient:
    """
    Short-lived httpx.AsyncClient wrapper.

    Usage:
        async with InstrumentedAsyncClient("github", base_url=api_url) as client:
            response = await client.get("/users/octocat")
    """

    def __init__(
        self,
        service: str,
        timeout: float = 30.0,
        base_url: str = "",
        headers: Optional[Dict[str, str]] = None,
    ):
        self.service = service
        self._client = httpx.AsyncClient(timeout=timeout, base_url=base_url, headers=headers)

    async def __aenter__(self) -> "InstrumentedAsyncClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self._client.aclose()

    async def get(self, url: str, **kwargs) -> httpx.Response:
        return await self.request("GET", url, **kwargs)

    async def post(self, url: str, **kwargs) -> httpx.Response:
        return await self.request("POST", url, **kwargs)

    async def request(self, method: str, url: str, **kwargs) -> httpx.Response:
        external_api_requests_total.labels(service=self.service).inc()
        started = time.perf_counter()
        try:
            response = await self._client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            external_api_errors_total.labels(service=self.service).inc()
            logger.error(f"{self.service} {method} {url} failed: {e}")
            raise ExternalServiceError(f"{self.service} request failed", service=self.service)
        finally:
            external_api_duration_seconds.labels(service=self.service).observe(time.perf_counter() - started)

        if response.is_error:
            external_api_errors_total.labels(service=self.service).inc()
        return response
