"""Health endpoint handlers."""

import logging

from devportal.core.health_service import ComponentHealthService
from devportal.lib.cancellation import CancellationToken
from devportal.lib.config import ConfigLoader
from devportal.models.component import Landscape

from ..config import APIConfig
from ..models.health import (
    BatchHealthRequest,
    BatchHealthResponse,
    HealthStatus,
    ProbeOutcomeOut,
    ProbeRequest,
    ServiceStatus,
    SystemInfoOut,
    SystemInfoRequest,
)

logger = logging.getLogger(__name__)


async def check_health(config: APIConfig, catalog: ConfigLoader | None) -> HealthStatus:
    """Check health of this service and its configuration.

    Args:
        config: API configuration
        catalog: Loaded landscape/component catalog, None if loading failed

    Returns:
        HealthStatus with service statuses
    """
    services = {}

    if config.config:
        services["config"] = ServiceStatus(
            name="configuration",
            status="healthy",
            message="Configuration loaded successfully",
        )
    else:
        services["config"] = ServiceStatus(
            name="configuration",
            status="unhealthy",
            message="Configuration not loaded",
        )

    if catalog is None:
        services["catalog"] = ServiceStatus(
            name="catalog",
            status="unhealthy",
            message="Component catalog failed to load",
        )
    elif catalog.landscapes and catalog.components:
        services["catalog"] = ServiceStatus(
            name="catalog",
            status="healthy",
            message=(
                f"{len(catalog.components)} components across "
                f"{len(catalog.landscapes)} landscapes"
            ),
        )
    else:
        services["catalog"] = ServiceStatus(
            name="catalog",
            status="unknown",
            message="No landscapes or components configured",
        )

    services["proxy"] = ServiceStatus(
        name="proxy",
        status="unknown" if catalog is None else "healthy",
        message=f"Proxy at {catalog.proxy.base_url}" if catalog else "Proxy not configured",
    )

    statuses = [s.status for s in services.values()]

    if all(s == "healthy" for s in statuses):
        overall_status = "healthy"
    elif all(s == "unhealthy" for s in statuses):
        overall_status = "unhealthy"
    else:
        overall_status = "degraded"

    logger.info(f"Health check: {overall_status}")

    return HealthStatus(status=overall_status, services=services)


async def check_batch(
    service: ComponentHealthService,
    request: BatchHealthRequest,
    cancel_token: CancellationToken | None = None,
) -> BatchHealthResponse:
    """Check every component of the request against its landscape.

    Raises:
        ValueError: If the batch cannot start
    """
    landscape = request.landscape.to_landscape()
    components = [c.to_component() for c in request.components]

    checks, summary = await service.check_landscape(components, landscape, cancel_token)
    return BatchHealthResponse.from_batch(landscape, checks, summary)


async def check_catalog_landscape(
    service: ComponentHealthService,
    catalog: ConfigLoader,
    landscape: Landscape,
    cancel_token: CancellationToken | None = None,
) -> BatchHealthResponse:
    """Check every catalog component in one configured landscape."""
    checks, summary = await service.check_landscape(
        catalog.get_components(), landscape, cancel_token
    )
    return BatchHealthResponse.from_batch(landscape, checks, summary)


async def probe_url(
    service: ComponentHealthService,
    request: ProbeRequest,
    cancel_token: CancellationToken | None = None,
) -> ProbeOutcomeOut:
    outcome = await service.fetch_health_status(request.url, cancel_token)
    return ProbeOutcomeOut.from_outcome(outcome)


async def lookup_system_info(
    service: ComponentHealthService,
    request: SystemInfoRequest,
    cancel_token: CancellationToken | None = None,
) -> SystemInfoOut:
    result = await service.fetch_system_info(
        request.component.to_component(),
        request.landscape.to_landscape(),
        cancel_token,
    )
    return SystemInfoOut.from_result(result)
