"""Request and response schemas for the health endpoints."""

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, Field

from devportal.models.component import Component, Landscape
from devportal.models.health import ComponentHealthCheck, HealthSummary
from devportal.models.probe import ProbeOutcome, SystemInfoResult


class ServiceStatus(BaseModel):
    """Individual dependency status of this service."""

    name: str
    status: Literal["healthy", "unhealthy", "unknown"]
    message: str = ""


class HealthStatus(BaseModel):
    """Overall status of this service."""

    status: Literal["healthy", "degraded", "unhealthy"]
    services: dict[str, ServiceStatus]
    version: str = "0.1.0"


class ComponentIn(BaseModel):
    id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    metadata: dict[str, Any] = Field(default_factory=dict)

    def to_component(self) -> Component:
        return Component(id=self.id, name=self.name, metadata=dict(self.metadata))


class LandscapeIn(BaseModel):
    name: str
    route: str = Field(min_length=1)

    def to_landscape(self) -> Landscape:
        return Landscape(name=self.name, route=self.route)


class BatchHealthRequest(BaseModel):
    components: list[ComponentIn]
    landscape: LandscapeIn


class ProbeRequest(BaseModel):
    url: str = Field(min_length=1)


class SystemInfoRequest(BaseModel):
    component: ComponentIn
    landscape: LandscapeIn


class ProbeOutcomeOut(BaseModel):
    status: Literal["success", "error"]
    data: dict[str, Any] | None = None
    error: str | None = None
    error_kind: Literal["cancelled", "transport", "upstream"] | None = None
    status_code: int | None = None
    response_time_ms: float

    @classmethod
    def from_outcome(cls, outcome: ProbeOutcome) -> "ProbeOutcomeOut":
        return cls(**outcome.to_dict())


class SystemInfoOut(BaseModel):
    status: Literal["success", "error"]
    data: dict[str, Any] | None = None
    url: str | None = None
    error: str | None = None
    error_kind: Literal["cancelled", "transport", "upstream"] | None = None

    @classmethod
    def from_result(cls, result: SystemInfoResult) -> "SystemInfoOut":
        return cls(**result.to_dict())


class ComponentHealthOut(BaseModel):
    component_id: str
    component_name: str
    landscape: str
    health_url: str
    status: str
    response: dict[str, Any] | None = None
    response_time_ms: float | None = None
    error: str | None = None
    error_kind: str | None = None
    last_checked: datetime | None = None


class HealthSummaryOut(BaseModel):
    total: int
    up: int
    down: int
    error: int
    unknown: int
    avg_response_time_ms: int
    by_status: dict[str, int] = Field(default_factory=dict)


class BatchHealthResponse(BaseModel):
    """Health of every requested component plus a summary."""

    landscape: str
    components: list[ComponentHealthOut]
    summary: HealthSummaryOut

    @classmethod
    def from_batch(
        cls, landscape: Landscape, checks: list[ComponentHealthCheck], summary: HealthSummary
    ) -> "BatchHealthResponse":
        return cls(
            landscape=landscape.name,
            components=[ComponentHealthOut(**check.to_dict()) for check in checks],
            summary=HealthSummaryOut(**summary.to_dict()),
        )


class LandscapeOut(BaseModel):
    name: str
    route: str


class LandscapeList(BaseModel):
    object: str = "list"
    data: list[LandscapeOut]
