"""Repository for policies and their rules."""

from typing import Any

from src.models.resource import Environment, Lambda, MetaResource, Organization
from src.repositories.base import BaseRepository, fqon, to_resource

EVENT_RULE_TYPE = "Gestalt::Resource::Rule::Event"
LIMIT_RULE_TYPE = "Gestalt::Resource::Rule::Limit"


class PolicyRepository(BaseRepository):
    """Policies attached to environments, with event and limit rules."""

    async def create_policy(
        self,
        org: Organization,
        environment: Environment,
        name: str,
        description: str | None = None,
    ) -> MetaResource:
        self.log.info(f"creating new policy in {environment.name}")
        return to_resource(
            MetaResource,
            await self.client.post(
                f"/{fqon(org)}/environments/{environment.id}/policies",
                {"name": name, "description": description or "", "properties": {}},
            ),
        )

    async def create_event_rule(
        self,
        org: Organization,
        policy: MetaResource,
        name: str,
        lambda_id: str,
        actions: list[str],
        description: str | None = None,
    ) -> MetaResource:
        """Create a rule that runs a lambda when one of ``actions`` fires."""
        self.log.info(f"creating new event rule in {policy.name}")
        return to_resource(
            MetaResource,
            await self.client.post(
                f"/{fqon(org)}/policies/{policy.id}/rules",
                {
                    "name": name,
                    "description": description or "",
                    "properties": {"parent": {}, "lambda": lambda_id, "actions": actions},
                    "resource_type": EVENT_RULE_TYPE,
                },
            ),
        )

    async def create_limit_rule(
        self,
        org: Organization,
        policy: MetaResource,
        name: str,
        actions: list[str],
        prop: str,
        operator: str,
        value: Any,
        description: str | None = None,
    ) -> MetaResource:
        """
        Create a non-strict limit rule.

        Args:
            org: Owning organization
            policy: Parent policy
            name: Rule name
            actions: Actions the rule applies to, e.g. ``container.create``
            prop: Property path evaluated by the rule
            operator: Comparison operator, e.g. ``<=``
            value: Right-hand side of the comparison
            description: Optional description

        Returns:
            Created rule
        """
        self.log.info(f"creating new limit rule in {policy.name}")
        return to_resource(
            MetaResource,
            await self.client.post(
                f"/{fqon(org)}/policies/{policy.id}/rules",
                {
                    "name": name,
                    "description": description or "",
                    "properties": {
                        "parent": {},
                        "strict": False,
                        "actions": actions,
                        "eval_logic": {
                            "property": prop,
                            "operator": operator,
                            "value": value,
                        },
                    },
                    "resource_type": LIMIT_RULE_TYPE,
                },
            ),
        )

    async def create_migrate_policy(
        self, org: Organization, environment: Environment, handler: Lambda
    ) -> MetaResource:
        """
        Install the default migration policy driven by ``handler``.

        The rule fires ``handler`` on ``container.migrate.pre`` for containers
        managed outside this deployer. Only the policy and the rule are created.
        """
        self.log.info(f"creating new migrate policy in {environment.name}")
        policy = await self.create_policy(
            org,
            environment,
            "default-migrate-policy",
            "default container migration policy",
        )
        self.log.info(
            f"creating migrate event rule in migrate policy {policy.id} "
            f"against lambda {handler.id}"
        )
        await self.client.post(
            f"/{fqon(org)}/policies/{policy.id}/rules",
            {
                "name": "migration-handler",
                "description": "execute migrate lambda on container.migrate.pre",
                "resource_type": EVENT_RULE_TYPE,
                "properties": {
                    "actions": ["container.migrate.pre"],
                    "eval_logic": {},
                    "lambda": handler.id,
                },
            },
        )
        return policy
