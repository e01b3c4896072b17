"""
HTTP client for the GitHub REST API.

Wraps httpx.AsyncClient so every call is counted and timed per service.
Nothing is retried here: transport errors are counted and then propagate
unchanged, and error statuses are handed back to the caller to classify.
"""

import logging
import time
from typing import Dict, Optional

import httpx

from sarif_upload.core.metrics import (
    api_request_seconds,
    api_requests_total,
    api_transport_errors_total,
)

logger = logging.getLogger(__name__)


class HTTPRequestError(Exception):
    """A request could not be made, or its response was missing required data."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class InstrumentedAsyncClient:
    """
    Metered httpx client, opened and closed around a unit of work.

        async with InstrumentedAsyncClient("GitHub API", headers=headers) as http:
            response = await http.put(url, content=body)

    ``transport`` replaces the network layer, which is how tests fake GitHub.
    """

    def __init__(
        self,
        service: str,
        timeout: float = 30.0,
        headers: Optional[Dict[str, str]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.service = service
        self.timeout = timeout
        self.headers = dict(headers or {})
        self.transport = transport
        self._http: Optional[httpx.AsyncClient] = None

    @property
    def is_open(self) -> bool:
        return self._http is not None

    async def start(self) -> None:
        if self.is_open:
            return
        self._http = httpx.AsyncClient(timeout=self.timeout, headers=self.headers, transport=self.transport)

    async def close(self) -> None:
        http, self._http = self._http, None
        if http is not None:
            await http.aclose()

    async def __aenter__(self) -> "InstrumentedAsyncClient":
        await self.start()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def request(self, method: str, url: str, **kwargs) -> httpx.Response:
        if self._http is None:
            raise HTTPRequestError(f"{self.service} client used before start(); open it with 'async with'")

        metric_labels = {"service": self.service, "method": method}
        api_requests_total.labels(**metric_labels).inc()
        began = time.perf_counter()
        try:
            response = await self._http.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            api_transport_errors_total.labels(**metric_labels).inc()
            logger.debug(f"{self.service} {method} {url} failed: {e!r}")
            raise
        finally:
            api_request_seconds.labels(**metric_labels).observe(time.perf_counter() - began)

        logger.debug(f"{self.service} {method} {url} -> {response.status_code}")
        return response

    async def get(self, url: str, **kwargs) -> httpx.Response:
        return await self.request("GET", url, **kwargs)

    async def post(self, url: str, **kwargs) -> httpx.Response:
        return await self.request("POST", url, **kwargs)

    async def put(self, url: str, **kwargs) -> httpx.Response:
        return await self.request("PUT", url, **kwargs)
