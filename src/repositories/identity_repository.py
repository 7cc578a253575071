"""Repository for users and groups."""

from typing import Any

from src.models.resource import MetaResource, Organization
from src.repositories.base import BaseRepository, fqon, to_resource


class IdentityRepository(BaseRepository):
    """User and group management within an organization."""

    async def create_user(
        self, org: Organization, account_payload: dict[str, Any]
    ) -> MetaResource:
        self.log.info(f"Creating user {fqon(org)}/{account_payload['name']}")
        return to_resource(
            MetaResource,
            await self.client.post(f"/{fqon(org)}/users", account_payload),
        )

    async def find_user(self, org: Organization, username: str) -> MetaResource | None:
        """Search users, then require an exact name match."""
        self.log.info(f"Searching for user {fqon(org)}/{username}")
        return await self.find_named(
            MetaResource, f"/{fqon(org)}/users/search?username={username}", username
        )

    async def delete_user(self, org: Organization, user: MetaResource) -> None:
        self.log.info(f"Deleting user {fqon(org)}/{user.disp()}")
        await self.client.delete(f"/{fqon(org)}/users/{user.id}")

    async def create_group(
        self, org: Organization, name: str, description: str
    ) -> MetaResource:
        self.log.info(f"Creating group {org.name}/{name}")
        return to_resource(
            MetaResource,
            await self.client.post(
                f"/{fqon(org)}/groups", {"name": name, "description": description}
            ),
        )

    async def find_group(self, org: Organization, group_name: str) -> MetaResource | None:
        self.log.info(f"Searching for group {fqon(org)}/{group_name}")
        return await self.find_named(
            MetaResource, f"/{fqon(org)}/groups/search?name={group_name}", group_name
        )

    async def delete_group(self, org: Organization, group: MetaResource) -> None:
        self.log.info(f"Deleting group {fqon(org)}/{group.disp()}")
        await self.client.delete(f"/{fqon(org)}/groups/{group.id}")

    async def add_user_to_group(
        self, org: Organization, group: MetaResource, user: MetaResource
    ) -> None:
        self.log.info(f"Adding user {user.name} to group {group.name}")
        await self.client.patch(f"/{fqon(org)}/groups/{group.id}/users?id={user.id}")
