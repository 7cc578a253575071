"""Request-scoped context for one deployment invocation."""

import logging
from dataclasses import dataclass
from typing import Any

import httpx

from src.clients.gitlab_client import GitLabClient
from src.clients.meta_client import MetaClient
from src.config import Settings
from src.logging.config import get_logger
from src.logging.request_log import DeploymentLog
from src.schemas.deployment import DeploymentRequest

logger = get_logger("src.deployer")


@dataclass
class DeploymentContext:
    """
    Everything one invocation needs: settings, clients and its own log.

    Nothing here is shared between invocations, so concurrent requests
    (and tests) never see each other's state.
    """

    settings: Settings
    log: DeploymentLog
    meta: MetaClient
    gitlab: GitLabClient | None = None
    target_org: str = ""
    lambda_provider_id: str | None = None

    @classmethod
    def create(
        cls,
        settings: Settings,
        request: DeploymentRequest,
        log: DeploymentLog | None = None,
        correlation_id: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> "DeploymentContext":
        """
        Validate configuration for ``request`` and build the clients.

        All required settings are checked here, before any remote call.

        Args:
            settings: Application settings
            request: The invocation payload
            log: Request log to use (a new one is created if None)
            correlation_id: Correlation id for log lines
            transport: Optional httpx transport shared by both clients

        Returns:
            Ready-to-use context; close it with ``aclose`` or ``async with``

        Raises:
            ConfigurationError: If a required variable is missing
        """
        if log is None:
            log = DeploymentLog(
                logger,
                correlation_id=correlation_id,
                capture_level=logging.DEBUG if settings.log_debug else logging.INFO,
            )

        meta_url = request.meta_url or settings.require("meta_url")
        credentials = settings.meta_credentials()
        target_org = settings.require("target_org")
        lambda_provider_id = None
        if request.action == "deploy":
            lambda_provider_id = settings.require("lambda_provider_id")

        gitlab_token = None
        if settings.gitlab_enabled and request.action == "deploy":
            gitlab_token = settings.require("gitlab_token")
            settings.require("api_gateway_url")

        meta = MetaClient(
            meta_url,
            credentials,
            log=log,
            timeout=settings.http_timeout_seconds,
            transport=transport,
        )
        log.info(f"[init] found meta: {meta_url}")

        gitlab = None
        if gitlab_token is not None:
            gitlab = GitLabClient(
                settings.gitlab_api_url,
                gitlab_token,
                log=log,
                timeout=settings.http_timeout_seconds,
                transport=transport,
            )

        return cls(
            settings=settings,
            log=log,
            meta=meta,
            gitlab=gitlab,
            target_org=target_org,
            lambda_provider_id=lambda_provider_id,
        )

    async def aclose(self) -> None:
        await self.meta.close()
        if self.gitlab is not None:
            await self.gitlab.close()

    async def __aenter__(self) -> "DeploymentContext":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()
