"""Health service binding the proxy client to the probe operations."""

import logging

from devportal.core.health_orchestrator import ProgressCallback, fetch_all_health_statuses
from devportal.core.probe_executor import Proxy, fetch_health_status
from devportal.core.system_info import fetch_system_info
from devportal.lib.cancellation import CancellationToken
from devportal.models.component import Component, Landscape
from devportal.models.health import ComponentHealthCheck, HealthSummary, summarize
from devportal.models.probe import ProbeOutcome, SystemInfoResult

logger = logging.getLogger(__name__)


class ComponentHealthService:
    """Entry point used by the API to probe components through the proxy."""

    def __init__(self, proxy: Proxy):
        """Initialize health service.

        Args:
            proxy: Proxy client performing the outbound calls
        """
        self.proxy = proxy

    async def fetch_health_status(
        self, url: str, cancel_token: CancellationToken | None = None
    ) -> ProbeOutcome:
        return await fetch_health_status(self.proxy, url, cancel_token)

    async def fetch_system_info(
        self,
        component: Component,
        landscape: Landscape,
        cancel_token: CancellationToken | None = None,
    ) -> SystemInfoResult:
        return await fetch_system_info(self.proxy, component, landscape, cancel_token)

    async def fetch_all_health_statuses(
        self,
        components: list[Component],
        landscape: Landscape,
        cancel_token: CancellationToken | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> list[ComponentHealthCheck]:
        return await fetch_all_health_statuses(
            self.proxy, components, landscape, cancel_token, on_progress
        )

    async def check_landscape(
        self,
        components: list[Component],
        landscape: Landscape,
        cancel_token: CancellationToken | None = None,
    ) -> tuple[list[ComponentHealthCheck], HealthSummary]:
        """Run a batch and summarize it.

        Args:
            components: Components to check
            landscape: Landscape to check them in
            cancel_token: Optional token aborting the batch

        Returns:
            Tuple of (health checks, summary)
        """
        checks = await self.fetch_all_health_statuses(components, landscape, cancel_token)
        summary = summarize(checks)
        logger.info(
            f"Landscape {landscape.name}: {summary.up} up, {summary.down} down, "
            f"{summary.error} error, avg {summary.avg_response_time_ms}ms"
        )
        return checks, summary
