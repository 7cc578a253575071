"""Repository for organizations, workspaces and environments."""

from src.models.resource import Environment, MetaResource, Organization
from src.repositories.base import BaseRepository, fqon, to_model, to_resource


class EnvironmentTypes:
    """Values accepted for ``properties.environment_type``."""

    DEVELOPMENT = "development"
    PRODUCTION = "production"
    TEST = "test"


class OrgRepository(BaseRepository):
    """Organization hierarchy lookups and management."""

    async def find_org(self, org_fqon: str) -> Organization | None:
        """
        Get an organization by fully qualified name.

        Args:
            org_fqon: Fully qualified org name, e.g. ``galacticfog.engineering``

        Returns:
            Organization, or None if absent
        """
        return to_model(Organization, await self.client.get(f"/{org_fqon}"))

    async def create_org(
        self, parent_org: Organization, name: str, description: str
    ) -> Organization:
        self.log.info(f"Creating org {parent_org.name}/{name}")
        payload = {"description": description, "name": name}
        return to_resource(
            Organization,
            await self.client.post(f"/{fqon(parent_org)}", payload),
        )

    async def delete_org(self, org: Organization, force: bool = False) -> None:
        self.log.info(f"Deleting org {fqon(org)}")
        await self.client.delete(f"/{fqon(org)}?force={str(force).lower()}")

    async def find_environment(
        self, parent_org: Organization, environment_id: str
    ) -> Environment | None:
        """
        Get an environment by id (a direct get, not a scan).

        Args:
            parent_org: Organization the environment belongs to
            environment_id: Environment UUID

        Returns:
            Environment, or None if absent
        """
        return to_model(
            Environment,
            await self.client.get(
                f"/{fqon(parent_org)}/environments/{environment_id}"
            ),
        )

    async def create_workspace(
        self, parent_org: Organization, name: str, description: str
    ) -> MetaResource:
        self.log.info(f"Creating workspace {parent_org.name}/{name}")
        payload = {"description": description, "name": name}
        return to_resource(
            MetaResource,
            await self.client.post(f"/{fqon(parent_org)}/workspaces", payload),
        )

    async def create_environment(
        self,
        parent_org: Organization,
        parent_workspace: MetaResource,
        name: str,
        description: str,
        environment_type: str = EnvironmentTypes.DEVELOPMENT,
    ) -> Environment:
        """
        Create an environment inside a workspace.

        Args:
            parent_org: Organization owning the workspace
            parent_workspace: Workspace to create the environment in
            name: Environment name
            description: Environment description
            environment_type: One of EnvironmentTypes

        Returns:
            Created environment
        """
        self.log.info(f"Creating environment {parent_workspace.name}/{name}")
        payload = {
            "description": description,
            "name": name,
            "properties": {"environment_type": environment_type},
        }
        return to_resource(
            Environment,
            await self.client.post(
                f"/{fqon(parent_org)}/workspaces/{parent_workspace.id}/environments",
                payload,
            ),
        )
