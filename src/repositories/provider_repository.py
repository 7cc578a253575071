"""Repository for providers."""

from typing import Any

from src.models.resource import MetaResource, Organization
from src.repositories.base import BaseRepository, fqon, to_model, to_resource


class ProviderTypes:
    """Provider type names: short names for search, full names for create."""

    GATEWAYMANAGER = "GatewayManager"
    KONG = "Kong"
    CAAS = "CaaS"
    LAMBDA = "Lambda"
    DCOS = "Gestalt::Configuration::Provider::CaaS::DCOS"
    KUBE = "Gestalt::Configuration::Provider::CaaS::Kubernetes"


class ProviderRepository(BaseRepository):
    """Provider lookups and lifecycle calls."""

    async def list_providers(
        self, org: Organization, provider_type: str | None = None
    ) -> list[MetaResource]:
        endpoint = f"/{fqon(org)}/providers?expand=true"
        if provider_type:
            endpoint += f"&type={provider_type}"
        return await self.list_resources(MetaResource, endpoint)

    async def find_provider(
        self, org: Organization, provider_id: str
    ) -> MetaResource | None:
        return to_model(
            MetaResource, await self.client.get(f"/{fqon(org)}/providers/{provider_id}")
        )

    async def create_provider(
        self, org: Organization, payload: dict[str, Any]
    ) -> MetaResource:
        self.log.info(f"Creating provider {payload['name']}")
        return to_resource(
            MetaResource,
            await self.client.post(f"/{fqon(org)}/providers", payload),
        )

    async def redeploy_provider(self, org: Organization, provider: MetaResource) -> Any:
        self.log.info(f"Redeploying provider {provider.disp()}")
        return await self.client.post(f"/{fqon(org)}/providers/{provider.id}/redeploy")

    async def patch_provider(
        self, org: Organization, provider: MetaResource, patch: list[dict[str, Any]]
    ) -> MetaResource:
        self.log.info(f"Patching provider {provider.disp()}")
        return to_resource(
            MetaResource,
            await self.client.patch(f"/{fqon(org)}/providers/{provider.id}", patch),
        )
