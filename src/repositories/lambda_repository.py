"""Repository for lambda resources."""

import json
from typing import Any

from src.models.resource import ApiEndpoint, Environment, Lambda, Organization
from src.repositories.base import BaseRepository, fqon, to_resource


class LambdaRepository(BaseRepository):
    """Lambda lookup, create, patch and delete within an environment."""

    @staticmethod
    def _collection(org: Organization, env: Environment) -> str:
        return f"/{fqon(org)}/environments/{env.id}/lambdas"

    async def find_by_name(
        self, org: Organization, env: Environment, name: str
    ) -> Lambda | None:
        """
        Find a lambda by exact name in an environment.

        Lambda names are unique per environment only because callers look
        them up before creating; the platform does not enforce it.
        """
        return await self.find_named(
            Lambda, f"{self._collection(org, env)}?expand=true", name
        )

    async def create(
        self, org: Organization, env: Environment, payload: dict[str, Any]
    ) -> Lambda:
        self.log.info(f"Creating lambda {env.name}/{payload['name']}")
        return to_resource(
            Lambda,
            await self.client.post(self._collection(org, env), payload),
        )

    async def patch(
        self,
        org: Organization,
        env: Environment,
        target: Lambda,
        patch: list[dict[str, Any]],
    ) -> Lambda:
        """
        Apply a JSON-patch to a lambda.

        Args:
            org: Owning organization
            env: Owning environment
            target: Lambda to patch
            patch: List of patch operations (see patch_replace)

        Returns:
            The patched lambda as returned by the server
        """
        self.log.info(f"Patching lambda {target.disp()} using patch {json.dumps(patch)}")
        return to_resource(
            Lambda,
            await self.client.patch(f"{self._collection(org, env)}/{target.id}", patch),
        )

    async def delete(self, org: Organization, env: Environment, target: Lambda) -> None:
        self.log.info(
            f"Deleting lambda {target.disp()} from {fqon(org)}/environments/{env.id}"
        )
        await self.client.delete(f"{self._collection(org, env)}/{target.id}")

    async def list_apiendpoints(
        self, org: Organization, target: Lambda
    ) -> list[ApiEndpoint]:
        """List API endpoints whose implementation is this lambda."""
        return await self.list_resources(
            ApiEndpoint,
            f"/{fqon(org)}/apiendpoints?expand=true"
            f"&implementation_type=lambda&implementation_id={target.id}",
        )
