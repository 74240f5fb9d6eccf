"""Probe URL construction for components deployed on a landscape.

Example: accounts-service on a landscape routed at sap.hana.ondemand.com
    https://accounts-service.cfapps.sap.hana.ondemand.com/health

Some older components are only reachable behind a subdomain recorded in
their metadata:
    https://sap-provisioning.accounts-service.cfapps.sap.hana.ondemand.com/health
"""

from devportal.models.component import Component, Landscape

HEALTH_PATH = "/health"
SYSTEM_INFO_PATH = "/systemInformation/public"
VERSION_PATH = "/version"

_CF_PREFIX = "cfapps."


def _host_suffix(component: Component, landscape: Landscape) -> str:
    if not component.name:
        raise ValueError(f"Component {component.id!r} has no name")
    if not landscape.route:
        raise ValueError(f"Landscape {landscape.name!r} has no route")

    route = landscape.route.strip(".")
    # Landscapes configured with the full cfapps domain must not get it twice
    if not route.startswith(_CF_PREFIX):
        route = _CF_PREFIX + route
    return f"{component.name.lower()}.{route}"


def build_probe_url(component: Component, landscape: Landscape, path: str = HEALTH_PATH) -> str:
    return f"https://{_host_suffix(component, landscape)}{path}"


def build_probe_url_with_subdomain(
    component: Component,
    landscape: Landscape,
    subdomain: str,
    path: str = HEALTH_PATH,
) -> str:
    if not subdomain:
        raise ValueError("Subdomain must be a non-empty string")
    return f"https://{subdomain}.{_host_suffix(component, landscape)}{path}"


def build_health_endpoint(component: Component, landscape: Landscape) -> str:
    return build_probe_url(component, landscape, HEALTH_PATH)


def build_health_endpoint_with_subdomain(
    component: Component, landscape: Landscape, subdomain: str
) -> str:
    return build_probe_url_with_subdomain(component, landscape, subdomain, HEALTH_PATH)


def build_system_info_endpoint(
    component: Component, landscape: Landscape, path: str = SYSTEM_INFO_PATH
) -> str:
    return build_probe_url(component, landscape, path)


def build_system_info_endpoint_with_subdomain(
    component: Component,
    landscape: Landscape,
    subdomain: str,
    path: str = SYSTEM_INFO_PATH,
) -> str:
    return build_probe_url_with_subdomain(component, landscape, subdomain, path)
