"""Tests for the instrumented HTTP client."""

import asyncio

import httpx
import pytest
from prometheus_client import REGISTRY

from sarif_upload.core.http_utils import HTTPRequestError, InstrumentedAsyncClient
from tests.mocks.github import RecordingTransport


def _sample(name, service, method):
    return REGISTRY.get_sample_value(name, {"service": service, "method": method}) or 0.0


class TestInstrumentedAsyncClient:
    def test_request_before_start_raises(self):
        client = InstrumentedAsyncClient("test-unstarted")
        with pytest.raises(HTTPRequestError, match="used before start"):
            asyncio.run(client.get("https://example.com"))

    def test_requests_counted(self):
        transport = RecordingTransport({("PUT", "/thing"): 201})
        before = _sample("sarif_upload_api_requests_total", "test-counted", "PUT")

        async def _call():
            async with InstrumentedAsyncClient("test-counted", transport=transport) as client:
                return await client.put("https://example.com/thing", content=b"{}")

        response = asyncio.run(_call())
        assert response.status_code == 201
        assert _sample("sarif_upload_api_requests_total", "test-counted", "PUT") == before + 1

    def test_error_status_is_returned_not_raised(self):
        transport = RecordingTransport(default_status=503)

        async def _call():
            async with InstrumentedAsyncClient("test-status", transport=transport) as client:
                return await client.get("https://example.com/")

        assert asyncio.run(_call()).status_code == 503

    def test_transport_errors_counted_and_reraised(self):
        transport = RecordingTransport({("POST", "/fail"): httpx.ConnectError})
        before = _sample("sarif_upload_api_transport_errors_total", "test-errors", "POST")

        async def _call():
            async with InstrumentedAsyncClient("test-errors", transport=transport) as client:
                await client.post("https://example.com/fail")

        with pytest.raises(httpx.ConnectError):
            asyncio.run(_call())
        assert _sample("sarif_upload_api_transport_errors_total", "test-errors", "POST") == before + 1

    def test_close_is_idempotent(self):
        client = InstrumentedAsyncClient("test-close")

        async def _cycle():
            await client.start()
            await client.close()
            await client.close()

        asyncio.run(_cycle())
        assert client.is_open is False
