"""Models for management API (Meta) resources."""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class MetaResource(BaseModel):
    """
    A resource returned by the management API.

    Resources are fetched on demand and never persisted locally. Unknown
    fields are kept so a resource can be sent back (PUT) unchanged.

    Attributes:
        id: Resource UUID
        name: Resource name, unique within its parent by convention
        description: Free-text description
        resource_type: Fully qualified type, e.g. Gestalt::Resource::Environment
        properties: Type-specific properties
    """

    model_config = ConfigDict(extra="allow")

    id: str = Field(..., description="Resource UUID")
    name: str = Field(..., description="Resource name")
    description: Optional[str] = Field(None, description="Description")
    resource_type: Optional[str] = Field(None, description="Resource type")
    properties: Dict[str, Any] = Field(
        default_factory=dict, description="Type-specific properties"
    )

    def disp(self) -> str:
        """Short display form used in log lines: ``name(id)``."""
        return f"{self.name}({self.id})"


class Organization(MetaResource):
    """An organization; its fqon scopes every management API path."""

    @property
    def fqon(self) -> str:
        return self.properties.get("fqon") or self.name


class Environment(MetaResource):
    """A deployment target grouping nested in a workspace."""

    @property
    def environment_type(self) -> Optional[str]:
        return self.properties.get("environment_type")


class Lambda(MetaResource):
    """A packaged serverless function."""

    @property
    def runtime(self) -> Optional[str]:
        return self.properties.get("runtime")

    @property
    def package_url(self) -> Optional[str]:
        return self.properties.get("package_url")

    @property
    def handler(self) -> Optional[str]:
        return self.properties.get("handler")


class Api(MetaResource):
    """An API resource grouping endpoints behind the gateway."""


class ApiEndpoint(MetaResource):
    """A routable path bound to an implementation within an API."""

    @property
    def implementation_id(self) -> Optional[str]:
        return self.properties.get("implementation_id")

    @property
    def resource(self) -> str:
        return self.properties.get("resource", "")


class Entitlement(MetaResource):
    """An action entitlement on a resource, granted to identities."""

    @property
    def action(self) -> Optional[str]:
        return self.properties.get("action")

    @property
    def identity_ids(self) -> list[str]:
        identities = self.properties.get("identities") or []
        return [
            identity["id"] if isinstance(identity, dict) else identity
            for identity in identities
        ]
