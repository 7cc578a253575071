"""Repository for APIs and API endpoints."""

import json
from typing import Any

from src.models.resource import Api, ApiEndpoint, Environment, MetaResource, Organization
from src.repositories.base import (
    BaseRepository,
    fqon,
    patch_replace,
    to_model,
    to_resource,
)


class ApiRepository(BaseRepository):
    """APIs within an environment and the endpoints routed through them."""

    async def find_api_by_name(
        self, org: Organization, env: Environment, name: str
    ) -> Api | None:
        return await self.find_named(
            Api, f"/{fqon(org)}/environments/{env.id}/apis?expand=true", name
        )

    async def find_api(self, org: Organization, api_id: str) -> Api | None:
        return to_model(Api, await self.client.get(f"/{fqon(org)}/apis/{api_id}"))

    async def create_api(
        self, org: Organization, env: Environment, payload: dict[str, Any]
    ) -> Api:
        self.log.info(
            f"Creating api {payload['name']} in {fqon(org)}/environments/{env.id}"
        )
        return to_resource(
            Api,
            await self.client.post(f"/{fqon(org)}/environments/{env.id}/apis", payload),
        )

    async def find_endpoint_by_name(
        self, org: Organization, api: Api, name: str
    ) -> ApiEndpoint | None:
        return await self.find_named(
            ApiEndpoint, f"/{fqon(org)}/apis/{api.id}/apiendpoints?expand=true", name
        )

    async def create_apiendpoint(
        self, org: Organization, api: Api, payload: dict[str, Any]
    ) -> ApiEndpoint:
        """
        Create an endpoint in an API.

        Args:
            org: Owning organization
            api: Parent API
            payload: Endpoint payload (name, properties.implementation_*,
                properties.resource)

        Returns:
            Created endpoint
        """
        self.log.info(
            f"Creating apiendpoint {payload['name']} in {fqon(org)}/apis/{api.id}"
        )
        return to_resource(
            ApiEndpoint,
            await self.client.post(f"/{fqon(org)}/apis/{api.id}/apiendpoints", payload),
        )

    async def list_implementation_endpoints(
        self, org: Organization, implementation: MetaResource, kind: str = "lambdas"
    ) -> list[ApiEndpoint]:
        """
        List endpoints via the implementation's sub-collection.

        ``kind`` is the collection name, ``lambdas`` by default. Pass
        ``containers`` for endpoints bound to containers that were created
        outside this deployer; containers themselves are not managed here.
        """
        return await self.list_resources(
            ApiEndpoint,
            f"/{fqon(org)}/{kind}/{implementation.id}/apiendpoints?expand=true",
        )

    async def delete_endpoint(self, org: Organization, endpoint: ApiEndpoint) -> None:
        self.log.info(f"Deleting endpoint {endpoint.disp()} from {fqon(org)}")
        await self.client.delete(f"/{fqon(org)}/apiendpoints/{endpoint.id}")

    async def update_endpoint_target(
        self, org: Organization, endpoint: ApiEndpoint, new_target: MetaResource
    ) -> ApiEndpoint:
        """Rebind an endpoint to another implementation."""
        patch = [patch_replace("/properties/implementation_id", new_target.id)]
        self.log.info(json.dumps(patch))
        return to_resource(
            ApiEndpoint,
            await self.client.patch(f"/{fqon(org)}/apiendpoints/{endpoint.id}", patch),
        )
