"""Single proxied probe against a component endpoint."""

import logging
import time
from typing import Any, Protocol

from devportal.lib.cancellation import CancellationToken, RequestAborted
from devportal.models.probe import (
    REQUEST_ABORTED,
    ProbeErrorKind,
    ProbeOutcome,
    ProbeStatus,
)

logger = logging.getLogger(__name__)


class Proxy(Protocol):
    """Anything that can fetch a URL through the proxy gateway."""

    async def get(
        self, url: str, cancel_token: CancellationToken | None = None
    ) -> dict[str, Any]: ...


def _elapsed_ms(start: float) -> float:
    return max(0.0, (time.perf_counter() - start) * 1000)


async def fetch_health_status(
    proxy: Proxy,
    url: str,
    cancel_token: CancellationToken | None = None,
) -> ProbeOutcome:
    """Probe one URL through the proxy and classify the outcome.

    Never raises for probe failures; cancellation, transport and upstream
    errors are all returned as an ERROR outcome with the matching error_kind.

    Args:
        proxy: Proxy client
        url: Component endpoint to probe
        cancel_token: Optional token aborting the probe

    Returns:
        ProbeOutcome with the elapsed time always set
    """
    start = time.perf_counter()

    try:
        data = await proxy.get(url, cancel_token)
    except RequestAborted:
        return ProbeOutcome(
            status=ProbeStatus.ERROR,
            error=REQUEST_ABORTED,
            error_kind=ProbeErrorKind.CANCELLED,
            response_time_ms=_elapsed_ms(start),
        )
    except Exception as e:
        logger.debug(f"Probe transport failure for {url}: {e}")
        return ProbeOutcome(
            status=ProbeStatus.ERROR,
            error=str(e) or "Unknown error",
            error_kind=ProbeErrorKind.TRANSPORT,
            response_time_ms=_elapsed_ms(start),
        )

    response_time_ms = _elapsed_ms(start)

    if data.get("componentSuccess") is False:
        status_code = data.get("statusCode")
        return ProbeOutcome(
            status=ProbeStatus.ERROR,
            error=f"Component returned status {status_code}",
            error_kind=ProbeErrorKind.UPSTREAM,
            status_code=status_code,
            response_time_ms=response_time_ms,
        )

    return ProbeOutcome(
        status=ProbeStatus.SUCCESS,
        data=data,
        response_time_ms=response_time_ms,
    )
