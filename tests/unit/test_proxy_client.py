"""Unit tests for the proxy gateway client."""

import asyncio

import httpx
import pytest

from devportal.lib.cancellation import CancellationToken, RequestAborted
from devportal.lib.proxy_client import ProxyClient, ProxyError

TARGET = "https://accounts.cfapps.example.com/health"


def _client(handler, **kwargs) -> ProxyClient:
    return ProxyClient(
        "http://portal.local/", transport=httpx.MockTransport(handler), **kwargs
    )


@pytest.mark.asyncio
async def test_get_passes_target_as_query_param():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["url"] = request.url.params["url"]
        seen["auth"] = request.headers.get("Authorization")
        return httpx.Response(200, json={"status": "UP", "componentSuccess": True, "statusCode": 200})

    async with _client(handler, token="secret") as client:
        body = await client.get(TARGET)

    assert body["status"] == "UP"
    assert seen == {"path": "/cis-public/proxy", "url": TARGET, "auth": "Bearer secret"}


@pytest.mark.asyncio
async def test_upstream_failure_is_returned_as_body():
    def handler(request):
        return httpx.Response(200, json={"componentSuccess": False, "statusCode": 503})

    async with _client(handler) as client:
        body = await client.get(TARGET)

    assert body["componentSuccess"] is False
    assert body["statusCode"] == 503


@pytest.mark.asyncio
async def test_proxy_http_error_raises_proxy_error():
    def handler(request):
        return httpx.Response(502, json={"error": "Failed to fetch from component endpoint"})

    async with _client(handler) as client:
        with pytest.raises(ProxyError) as exc_info:
            await client.get(TARGET)

    assert exc_info.value.status_code == 502
    assert "502" in str(exc_info.value)


@pytest.mark.asyncio
async def test_malformed_json_raises_proxy_error():
    def handler(request):
        return httpx.Response(200, text="<html>gateway</html>")

    async with _client(handler) as client:
        with pytest.raises(ProxyError, match="malformed JSON"):
            await client.get(TARGET)


@pytest.mark.asyncio
async def test_non_object_json_raises_proxy_error():
    def handler(request):
        return httpx.Response(200, json=["UP"])

    async with _client(handler) as client:
        with pytest.raises(ProxyError):
            await client.get(TARGET)


@pytest.mark.asyncio
async def test_connection_error_raises_proxy_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    async with _client(handler) as client:
        with pytest.raises(ProxyError, match="connection refused"):
            await client.get(TARGET)


@pytest.mark.asyncio
async def test_timeout_raises_proxy_error():
    def handler(request):
        raise httpx.ReadTimeout("read timed out", request=request)

    async with _client(handler, timeout=2.5) as client:
        with pytest.raises(ProxyError, match="timed out after 2.5s"):
            await client.get(TARGET)


@pytest.mark.asyncio
async def test_cancelled_token_aborts_before_sending():
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(200, json={})

    token = CancellationToken()
    token.cancel()

    async with _client(handler) as client:
        with pytest.raises(RequestAborted):
            await client.get(TARGET, token)

    assert calls == []


@pytest.mark.asyncio
async def test_cancel_during_request_aborts():
    async def handler(request):
        await asyncio.sleep(5)
        return httpx.Response(200, json={})

    token = CancellationToken()

    async with _client(handler) as client:
        request = asyncio.create_task(client.get(TARGET, token))
        await asyncio.sleep(0.01)
        token.cancel()

        with pytest.raises(RequestAborted):
            await asyncio.wait_for(request, timeout=1)
