"""Probe outcome models."""

from dataclasses import dataclass
from enum import Enum
from typing import Any

# Stable message for probes cut short by the caller's cancellation token
REQUEST_ABORTED = "Request aborted"
SYSTEM_INFO_EXHAUSTED = "All system info endpoints failed"


class ProbeStatus(Enum):
    """Outcome of a single proxied request."""

    SUCCESS = "success"
    ERROR = "error"


class ProbeErrorKind(Enum):
    """Why a probe failed."""

    CANCELLED = "cancelled"
    TRANSPORT = "transport"
    UPSTREAM = "upstream"


@dataclass
class ProbeOutcome:
    """Result of one HTTP attempt through the proxy."""

    status: ProbeStatus
    response_time_ms: float = 0.0
    data: dict[str, Any] | None = None
    error: str | None = None
    error_kind: ProbeErrorKind | None = None
    status_code: int | None = None

    @property
    def ok(self) -> bool:
        return self.status == ProbeStatus.SUCCESS

    @property
    def aborted(self) -> bool:
        """True when the caller cancelled the probe (not a real failure)."""
        return self.error_kind == ProbeErrorKind.CANCELLED

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status.value,
            "data": self.data,
            "error": self.error,
            "error_kind": self.error_kind.value if self.error_kind else None,
            "status_code": self.status_code,
            "response_time_ms": self.response_time_ms,
        }


@dataclass
class SystemInfoResult:
    """Build/version metadata from the first endpoint variant that answered."""

    status: ProbeStatus
    data: dict[str, Any] | None = None
    url: str | None = None
    error: str | None = None
    error_kind: ProbeErrorKind | None = None

    @property
    def ok(self) -> bool:
        return self.status == ProbeStatus.SUCCESS

    @property
    def aborted(self) -> bool:
        """True when the lookup stopped because the caller cancelled it."""
        return self.error_kind == ProbeErrorKind.CANCELLED

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status.value,
            "data": self.data,
            "url": self.url,
            "error": self.error,
            "error_kind": self.error_kind.value if self.error_kind else None,
        }
