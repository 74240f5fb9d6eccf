"""Unit tests for system information fallbacks."""

import asyncio

import pytest
from conftest import FakeProxy, down_upstream

from devportal.core.system_info import candidate_urls, fetch_system_info
from devportal.lib.cancellation import CancellationToken
from devportal.lib.proxy_client import ProxyError
from devportal.models.component import Component, Landscape
from devportal.models.probe import ProbeErrorKind, ProbeStatus

LANDSCAPE = Landscape(name="eu10", route="example.com")
PLAIN = Component(id="c1", name="Accounts")
WITH_SUBDOMAIN = Component(id="c2", name="Billing", metadata={"subdomain": "sap-x"})

SYS = "https://billing.cfapps.example.com/systemInformation/public"
SYS_SUB = "https://sap-x.billing.cfapps.example.com/systemInformation/public"
VER = "https://billing.cfapps.example.com/version"
VER_SUB = "https://sap-x.billing.cfapps.example.com/version"

BUILD_INFO = {"buildProperties": {"version": "2.4.0"}, "componentSuccess": True, "statusCode": 200}


def test_candidate_order_with_subdomain():
    assert candidate_urls(WITH_SUBDOMAIN, LANDSCAPE) == [SYS, SYS_SUB, VER, VER_SUB]


def test_candidates_skip_non_string_subdomain():
    component = Component(id="c3", name="Billing", metadata={"subdomain": 42})

    assert candidate_urls(component, LANDSCAPE) == [SYS, VER]


@pytest.mark.asyncio
async def test_primary_endpoint_wins():
    proxy = FakeProxy({SYS: BUILD_INFO})

    result = await fetch_system_info(proxy, WITH_SUBDOMAIN, LANDSCAPE)

    assert result.status == ProbeStatus.SUCCESS
    assert result.url == SYS
    assert result.data["buildProperties"]["version"] == "2.4.0"
    assert proxy.calls == [SYS]


@pytest.mark.asyncio
async def test_fourth_variant_wins_after_three_failures():
    proxy = FakeProxy(
        {
            SYS: ProxyError("timeout"),
            SYS_SUB: down_upstream(404),
            VER: ProxyError("bad gateway"),
            VER_SUB: {"app": "1.0.7", "componentSuccess": True, "statusCode": 200},
        }
    )

    result = await fetch_system_info(proxy, WITH_SUBDOMAIN, LANDSCAPE)

    assert result.status == ProbeStatus.SUCCESS
    assert result.url == VER_SUB
    assert result.data["app"] == "1.0.7"
    assert proxy.calls == [SYS, SYS_SUB, VER, VER_SUB]


@pytest.mark.asyncio
async def test_exhaustion_without_subdomain_calls_two_variants():
    proxy = FakeProxy(
        {
            "https://accounts.cfapps.example.com/systemInformation/public": down_upstream(500),
            "https://accounts.cfapps.example.com/version": ProxyError("unreachable"),
        }
    )

    result = await fetch_system_info(proxy, PLAIN, LANDSCAPE)

    assert result.status == ProbeStatus.ERROR
    assert result.error == "All system info endpoints failed"
    assert result.data is None
    assert result.url is None
    assert len(proxy.calls) == 2
    assert all("sap-x" not in url for url in proxy.calls)


@pytest.mark.asyncio
async def test_cancel_mid_flight_is_marked_aborted():
    proxy = FakeProxy({SYS: BUILD_INFO}, delays={SYS: 5})
    token = CancellationToken()

    lookup = asyncio.create_task(fetch_system_info(proxy, WITH_SUBDOMAIN, LANDSCAPE, token))
    await asyncio.sleep(0.01)
    token.cancel()
    result = await asyncio.wait_for(lookup, timeout=1)

    assert result.status == ProbeStatus.ERROR
    assert result.aborted
    assert result.error_kind == ProbeErrorKind.CANCELLED
    assert result.error == "Request aborted"
    assert proxy.calls == [SYS]


@pytest.mark.asyncio
async def test_cancelled_token_stops_chain_before_first_call():
    proxy = FakeProxy({SYS: BUILD_INFO})
    token = CancellationToken()
    token.cancel()

    result = await fetch_system_info(proxy, WITH_SUBDOMAIN, LANDSCAPE, token)

    assert result.aborted
    assert proxy.calls == []


@pytest.mark.asyncio
async def test_exhaustion_is_not_aborted():
    result = await fetch_system_info(FakeProxy(), PLAIN, LANDSCAPE, CancellationToken())

    assert result.error == "All system info endpoints failed"
    assert not result.aborted
