"""Component and landscape descriptors."""

from dataclasses import dataclass, field
from typing import Any

DEFAULT_LANDSCAPE_ROUTE = "cfapps.sap.hana.ondemand.com"


@dataclass(frozen=True)
class Component:
    """One independently deployable service tracked by the portal."""

    id: str
    name: str
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def subdomain(self) -> str | None:
        """Subdomain used by the older URL naming convention, if any.

        Returns:
            The subdomain when metadata holds a non-empty string, else None
        """
        value = (self.metadata or {}).get("subdomain")
        if isinstance(value, str) and value:
            return value
        return None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Component":
        """Build a component from catalog or request data.

        Args:
            data: Dict with id, name and optional metadata

        Returns:
            Component instance
        """
        # YAML turns names like 1234 into ints
        name = str(data.get("name") or "")
        return cls(
            id=str(data.get("id") or name),
            name=name,
            metadata=dict(data.get("metadata") or {}),
        )


@dataclass(frozen=True)
class Landscape:
    """One deployment environment a component may run in."""

    name: str
    route: str

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Landscape":
        """Build a landscape, falling back to the default route.

        Args:
            data: Dict with name and route (or landscape_url)

        Returns:
            Landscape instance
        """
        route = data.get("route") or data.get("landscape_url") or DEFAULT_LANDSCAPE_ROUTE
        return cls(name=str(data.get("name", "")), route=str(route))

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "route": self.route}
