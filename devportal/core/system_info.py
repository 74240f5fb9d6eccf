"""Build/version metadata lookup with ordered endpoint fallbacks.

Service generations expose build metadata under different conventions, so
variants are tried in order until one answers:

1. /systemInformation/public
2. {subdomain}.{component}/systemInformation/public (if subdomain available)
3. /version
4. {subdomain}.{component}/version (if subdomain available)
"""

import logging

from devportal.core.endpoint_resolver import (
    SYSTEM_INFO_PATH,
    VERSION_PATH,
    build_system_info_endpoint,
    build_system_info_endpoint_with_subdomain,
)
from devportal.core.probe_executor import Proxy
from devportal.lib.cancellation import CancellationToken, RequestAborted
from devportal.models.component import Component, Landscape
from devportal.models.probe import (
    REQUEST_ABORTED,
    SYSTEM_INFO_EXHAUSTED,
    ProbeErrorKind,
    ProbeStatus,
    SystemInfoResult,
)

logger = logging.getLogger(__name__)

# (path, use_subdomain) in the order they are attempted
SYSTEM_INFO_VARIANTS: list[tuple[str, bool]] = [
    (SYSTEM_INFO_PATH, False),
    (SYSTEM_INFO_PATH, True),
    (VERSION_PATH, False),
    (VERSION_PATH, True),
]


def candidate_urls(component: Component, landscape: Landscape) -> list[str]:
    """List the system info URLs that will be attempted, in order.

    Subdomain variants are left out when the component has no subdomain.

    Args:
        component: Component to look up
        landscape: Landscape it runs in

    Returns:
        Ordered list of URLs
    """
    subdomain = component.subdomain
    urls = []
    for path, use_subdomain in SYSTEM_INFO_VARIANTS:
        if not use_subdomain:
            urls.append(build_system_info_endpoint(component, landscape, path))
        elif subdomain:
            urls.append(
                build_system_info_endpoint_with_subdomain(component, landscape, subdomain, path)
            )
    return urls


def _aborted(component: Component) -> SystemInfoResult:
    logger.debug(f"System info lookup for {component.name} aborted")
    return SystemInfoResult(
        status=ProbeStatus.ERROR,
        error=REQUEST_ABORTED,
        error_kind=ProbeErrorKind.CANCELLED,
    )


async def fetch_system_info(
    proxy: Proxy,
    component: Component,
    landscape: Landscape,
    cancel_token: CancellationToken | None = None,
) -> SystemInfoResult:
    """Fetch system information from the first endpoint variant that answers.

    Args:
        proxy: Proxy client
        component: Component to look up
        landscape: Landscape it runs in
        cancel_token: Optional token aborting the lookup

    Returns:
        SystemInfoResult; error status once every variant failed, or a
        cancelled error_kind when the token stopped the lookup
    """
    for url in candidate_urls(component, landscape):
        if cancel_token is not None and cancel_token.cancelled:
            return _aborted(component)

        try:
            data = await proxy.get(url, cancel_token)
        except RequestAborted:
            return _aborted(component)
        except Exception as e:
            logger.debug(f"System info attempt failed for {url}: {e}")
            continue

        if data.get("componentSuccess") is not False:
            return SystemInfoResult(status=ProbeStatus.SUCCESS, data=data, url=url)

        logger.debug(f"System info endpoint {url} returned status {data.get('statusCode')}")

    logger.info(f"No system info endpoint answered for {component.name} in {landscape.name}")
    return SystemInfoResult(status=ProbeStatus.ERROR, error=SYSTEM_INFO_EXHAUSTED)
