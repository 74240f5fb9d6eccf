"""Component health check records and batch summaries."""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from devportal.models.probe import ProbeErrorKind

STATUS_LOADING = "LOADING"
STATUS_ERROR = "ERROR"
STATUS_UNKNOWN = "UNKNOWN"
STATUS_UP = "UP"
STATUS_DOWN = "DOWN"


@dataclass
class ComponentHealthCheck:
    """Health of one component in one landscape for a single batch."""

    component_id: str
    component_name: str
    landscape: str
    health_url: str
    status: str = STATUS_LOADING
    response: dict[str, Any] | None = None
    response_time_ms: float | None = None
    error: str | None = None
    error_kind: ProbeErrorKind | None = None
    last_checked: datetime | None = None

    @property
    def aborted(self) -> bool:
        """True when the check ended because the batch was cancelled."""
        return self.error_kind == ProbeErrorKind.CANCELLED

    def mark_checked(self) -> None:
        self.last_checked = datetime.now(UTC)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for API responses.

        Returns:
            Dict representation
        """
        return {
            "component_id": self.component_id,
            "component_name": self.component_name,
            "landscape": self.landscape,
            "health_url": self.health_url,
            "status": self.status,
            "response": self.response,
            "response_time_ms": self.response_time_ms,
            "error": self.error,
            "error_kind": self.error_kind.value if self.error_kind else None,
            "last_checked": self.last_checked.isoformat() if self.last_checked else None,
        }


@dataclass
class HealthSummary:
    """Aggregate view over one batch of health checks."""

    total: int = 0
    up: int = 0
    down: int = 0
    error: int = 0
    unknown: int = 0
    avg_response_time_ms: int = 0
    by_status: dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "total": self.total,
            "up": self.up,
            "down": self.down,
            "error": self.error,
            "unknown": self.unknown,
            "avg_response_time_ms": self.avg_response_time_ms,
            "by_status": dict(self.by_status),
        }


def summarize(checks: list[ComponentHealthCheck]) -> HealthSummary:
    """Count statuses and average response time over a batch.

    Anything that is neither UP, DOWN nor ERROR (including LOADING and
    custom upstream values such as OUT_OF_SERVICE) is counted as unknown.

    Args:
        checks: Health check records from one batch

    Returns:
        HealthSummary
    """
    summary = HealthSummary(total=len(checks))
    timings = []

    for check in checks:
        status = check.status.upper()
        summary.by_status[status] = summary.by_status.get(status, 0) + 1

        if status == STATUS_UP:
            summary.up += 1
        elif status == STATUS_DOWN:
            summary.down += 1
        elif status == STATUS_ERROR:
            summary.error += 1
        else:
            summary.unknown += 1

        if check.response_time_ms is not None:
            timings.append(check.response_time_ms)

    if timings:
        summary.avg_response_time_ms = round(sum(timings) / len(timings))

    return summary
