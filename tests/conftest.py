"""Pytest configuration and shared fixtures.

Provides:
- Custom markers
- FakeProxy, an in-memory stand-in for the proxy gateway
"""

import asyncio
from typing import Any

import pytest

from devportal.lib.cancellation import CancellationToken
from devportal.models.component import Component, Landscape


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "integration: marks tests as integration tests")
    config.addinivalue_line("markers", "unit: marks tests as unit tests")


class FakeProxy:
    """Proxy double answering from a url -> response table.

    A response may be a dict (returned as the proxy body), an Exception
    (raised), or a callable returning either. URLs missing from the table
    answer like an unreachable upstream.
    """

    def __init__(self, responses: dict[str, Any] | None = None, delays: dict[str, float] | None = None):
        self.responses = responses or {}
        self.delays = delays or {}
        self.calls: list[str] = []

    async def get(self, url: str, cancel_token: CancellationToken | None = None) -> dict[str, Any]:
        self.calls.append(url)
        if cancel_token is not None:
            return await cancel_token.guard(self._answer(url), url=url)
        return await self._answer(url)

    async def _answer(self, url: str) -> dict[str, Any]:
        await asyncio.sleep(self.delays.get(url, 0))

        response = self.responses.get(url)
        if callable(response):
            response = response()
        if response is None:
            return {"componentSuccess": False, "statusCode": 404}
        if isinstance(response, BaseException):
            raise response
        return dict(response)


def up(**extra) -> dict[str, Any]:
    return {"status": "UP", "componentSuccess": True, "statusCode": 200, **extra}


def down_upstream(status_code: int = 503) -> dict[str, Any]:
    return {"status": "DOWN", "componentSuccess": False, "statusCode": status_code}


@pytest.fixture
def landscape():
    return Landscape(name="eu10", route="cfapps.example.com")


@pytest.fixture
def accounts():
    return Component(id="c1", name="Accounts", metadata={})


@pytest.fixture
def billing():
    return Component(id="c2", name="Billing", metadata={"subdomain": "sap-x"})


@pytest.fixture
def fake_proxy():
    return FakeProxy()


