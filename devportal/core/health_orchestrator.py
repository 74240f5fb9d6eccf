"""Concurrent health checks for every component of a landscape."""

import asyncio
import logging
from collections.abc import Callable

from devportal.core.endpoint_resolver import (
    build_health_endpoint,
    build_health_endpoint_with_subdomain,
)
from devportal.core.probe_executor import Proxy, fetch_health_status
from devportal.lib.cancellation import CancellationToken
from devportal.models.component import Component, Landscape
from devportal.models.health import (
    STATUS_ERROR,
    STATUS_UNKNOWN,
    ComponentHealthCheck,
    summarize,
)
from devportal.models.probe import ProbeOutcome

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int], None]


def _validate_batch(components: list[Component], landscape: Landscape) -> None:
    if landscape is None or not landscape.route:
        raise ValueError("Landscape with a route is required")

    for component in components:
        if not isinstance(component.name, str) or not isinstance(component.id, str):
            raise ValueError(f"Component id and name must be strings: {component!r}")
        if not component.id or not component.name:
            raise ValueError(f"Component needs both id and name: {component!r}")


def _empty_record(component: Component, landscape: Landscape) -> ComponentHealthCheck:
    # health_url stays empty until the URL has been built
    return ComponentHealthCheck(
        component_id=str(component.id),
        component_name=str(component.name),
        landscape=landscape.name,
        health_url="",
    )


def _apply_success(check: ComponentHealthCheck, outcome: ProbeOutcome) -> None:
    body = outcome.data or {}
    check.status = str(body.get("status") or STATUS_UNKNOWN)
    check.response = body
    check.response_time_ms = outcome.response_time_ms
    check.error = None
    check.error_kind = None
    check.mark_checked()


def _apply_failure(check: ComponentHealthCheck, outcome: ProbeOutcome) -> None:
    check.status = STATUS_ERROR
    check.error = outcome.error
    check.error_kind = outcome.error_kind
    check.response_time_ms = outcome.response_time_ms
    check.mark_checked()


async def _check_component(
    proxy: Proxy,
    component: Component,
    landscape: Landscape,
    cancel_token: CancellationToken | None,
) -> ComponentHealthCheck:
    check = _empty_record(component, landscape)

    try:
        check.health_url = build_health_endpoint(component, landscape)
        outcome = await fetch_health_status(proxy, check.health_url, cancel_token)
        if outcome.ok:
            _apply_success(check, outcome)
            return check

        subdomain = component.subdomain
        if subdomain and not outcome.aborted:
            fallback_url = build_health_endpoint_with_subdomain(component, landscape, subdomain)
            logger.debug(f"Retrying {component.name} via subdomain URL {fallback_url}")

            outcome = await fetch_health_status(proxy, fallback_url, cancel_token)
            if outcome.ok:
                check.health_url = fallback_url
                _apply_success(check, outcome)
                return check

        _apply_failure(check, outcome)
        if outcome.aborted:
            logger.debug(f"Health check for {component.name} aborted")
        else:
            logger.warning(
                f"Health check failed for {component.name} in {landscape.name}: {outcome.error}"
            )
        return check

    except Exception as e:
        logger.error(f"Unexpected error checking {component.name}: {e}", exc_info=True)
        check.status = STATUS_ERROR
        check.error = str(e) or "Unknown error"
        check.mark_checked()
        return check


async def fetch_all_health_statuses(
    proxy: Proxy,
    components: list[Component],
    landscape: Landscape,
    cancel_token: CancellationToken | None = None,
    on_progress: ProgressCallback | None = None,
) -> list[ComponentHealthCheck]:
    """Check the health of every component in parallel.

    Every component yields exactly one record, in input order, whatever
    happens to its probes. A component whose primary /health probe fails is
    retried once on its subdomain URL when metadata carries a subdomain.

    Args:
        proxy: Proxy client
        components: Components to check
        landscape: Landscape to check them in
        cancel_token: Optional token aborting every probe of the batch
        on_progress: Optional callback receiving (completed, total) once per
            component as it settles, in completion order

    Returns:
        One ComponentHealthCheck per component

    Raises:
        ValueError: If the batch cannot start (invalid landscape or component)
    """
    components = list(components)
    _validate_batch(components, landscape)

    total = len(components)
    completed = 0

    def report_progress() -> None:
        nonlocal completed
        completed += 1
        if on_progress is None:
            return
        try:
            on_progress(completed, total)
        except Exception as e:
            logger.warning(f"Progress callback failed: {e}")

    async def run(component: Component) -> ComponentHealthCheck:
        try:
            return await _check_component(proxy, component, landscape, cancel_token)
        finally:
            report_progress()

    # Run all checks in parallel
    results = await asyncio.gather(
        *(run(component) for component in components),
        return_exceptions=True,
    )

    health_checks = []
    for component, result in zip(components, results):
        if isinstance(result, BaseException):
            if isinstance(result, asyncio.CancelledError):
                raise result
            logger.error(f"Health check task for {component.name} raised: {result}")
            error = str(result) or "Unknown error"
            result = _empty_record(component, landscape)
            result.status = STATUS_ERROR
            result.error = error
            result.mark_checked()
        health_checks.append(result)

    summary = summarize(health_checks)
    logger.info(
        f"Health batch for {landscape.name}: {summary.up}/{total} components UP",
        extra={
            "extra_fields": {
                "landscape": landscape.name,
                "total": summary.total,
                "up": summary.up,
                "down": summary.down,
                "error": summary.error,
                "unknown": summary.unknown,
                "aborted": sum(1 for check in health_checks if check.aborted),
                "avg_response_time_ms": summary.avg_response_time_ms,
            }
        },
    )

    return health_checks
