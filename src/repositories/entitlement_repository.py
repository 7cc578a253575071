"""Repository for resource entitlements."""

from typing import Any

from src.models.resource import Entitlement, MetaResource, Organization
from src.repositories.base import BaseRepository, fqon
from src.utils.concurrency import sequence
from src.utils.lookup import find_first

ENVIRONMENT_TYPE = "Gestalt::Resource::Environment"
WORKSPACE_TYPE = "Gestalt::Resource::Workspace"
ORGANIZATION_TYPE = "Gestalt::Resource::Organization"


class EntitlementRepository(BaseRepository):
    """Grant identities entitlements on resources."""

    def _entitlement_path(
        self, base_org: Organization, resource: MetaResource, entitlement_id: str
    ) -> str:
        if resource.resource_type == ENVIRONMENT_TYPE:
            return f"/{fqon(base_org)}/environments/{resource.id}/entitlements/{entitlement_id}"
        if resource.resource_type == WORKSPACE_TYPE:
            return f"/{fqon(base_org)}/workspaces/{resource.id}/entitlements/{entitlement_id}"
        if resource.resource_type == ORGANIZATION_TYPE:
            org_fqon = resource.properties.get("fqon") or resource.name
            return f"/{org_fqon}/entitlements/{entitlement_id}"
        return f"/{fqon(base_org)}/entitlements/{entitlement_id}"

    async def list_entitlements(
        self, base_org: Organization, resource: MetaResource
    ) -> list[Entitlement]:
        return await self.list_resources(
            Entitlement,
            f"/{fqon(base_org)}/resources/{resource.id}/entitlements?expand=true",
        )

    async def add_entitlements(
        self,
        base_org: Organization,
        resource: MetaResource,
        entitlement_names: str | list[str],
        identity: MetaResource,
    ) -> list[Any]:
        """
        Add an identity to one or more entitlements on a resource.

        The resource's entitlements are fetched once, then one PUT per
        entitlement that needs the identity is issued concurrently. Unknown
        entitlement names and entitlements already holding the identity are
        logged and skipped (their slot in the result is None).

        Args:
            base_org: Organization scoping the calls
            resource: Resource carrying the entitlements
            entitlement_names: Action name(s), e.g. ``lambda.view``
            identity: User or group to grant

        Returns:
            Update results in the order of ``entitlement_names``

        Raises:
            RemoteError: The first failed update
        """
        if isinstance(entitlement_names, str):
            entitlement_names = [entitlement_names]

        entitlements = await self.list_entitlements(base_org, resource)

        updates = []
        for name in entitlement_names:
            updates.append(self._grant(base_org, resource, entitlements, name, identity))
        return await sequence(updates)

    async def _grant(
        self,
        base_org: Organization,
        resource: MetaResource,
        entitlements: list[Entitlement],
        entitlement_name: str,
        identity: MetaResource,
    ) -> Any:
        entitlement = find_first(entitlements, lambda e: e.action == entitlement_name)
        if entitlement is None:
            self.log.info(
                f"Could not locate entitlement {entitlement_name} on resource {resource.disp()}"
            )
            return None

        current_ids = entitlement.identity_ids
        if identity.id in current_ids:
            self.log.info(
                f"Entitlement {resource.name}[{entitlement_name}] already contains "
                f"identity {identity.disp()}"
            )
            return None

        new_entitlement = {
            "id": entitlement.id,
            "name": entitlement.name,
            "properties": {
                "action": entitlement.action,
                "identities": current_ids + [identity.id],
            },
        }
        self.log.info(
            f"Updating entitlement {resource.name}[{entitlement_name}] with identity "
            f"{identity.disp()}"
        )
        return await self.client.submit(
            "PUT",
            self._entitlement_path(base_org, resource, entitlement.id),
            new_entitlement,
        )
