"""GitLab API client used to publish environment external URLs."""

from typing import Any

import httpx

from src.clients.base import Log, RestClient, expect_list, logger
from src.models.gitlab import GitLabEnvironment, GitLabProject
from src.utils.lookup import find_first

# Single page per lookup; larger collections are silently truncated
PAGE_SIZE = 1000


class GitLabClient(RestClient):
    """
    Minimal GitLab REST client.

    Lookups fetch one large page and scan it for an exact match. Results
    beyond the first page are never seen.
    """

    def __init__(
        self,
        base_url: str,
        token: str,
        log: Log = logger,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        super().__init__(
            base_url,
            headers={"PRIVATE-TOKEN": token},
            log=log,
            timeout=timeout,
            transport=transport,
        )

    async def find_project(self, project_path: str) -> GitLabProject | None:
        """
        Find a project by exact ``path_with_namespace``.

        Args:
            project_path: Full project path, e.g. ``group/project``

        Returns:
            The project, or None if absent
        """
        path = f"/projects?per_page={PAGE_SIZE}"
        projects = expect_list(await self.request("GET", path), self.url_for(path))
        for project in projects:
            if isinstance(project, dict):
                self.log.debug(f"Gitlab Project: {project.get('name')}")
        match = find_first(
            projects,
            lambda p: isinstance(p, dict) and p.get("path_with_namespace") == project_path,
        )
        return GitLabProject.model_validate(match) if match else None

    async def find_environment(
        self, project_url: str, environment_name: str
    ) -> GitLabEnvironment | None:
        """
        Find an environment by exact name under a project.

        Args:
            project_url: Project API URL (already scheme-corrected)
            environment_name: Environment name, e.g. ``review/test-1``

        Returns:
            The environment, or None if absent
        """
        url = f"{project_url}/environments?per_page={PAGE_SIZE}"
        envs = expect_list(await self.request("GET", url), url)
        for env in envs:
            if isinstance(env, dict):
                self.log.debug(f"Gitlab Environment: {env.get('name')}")
        match = find_first(
            envs, lambda e: isinstance(e, dict) and e.get("name") == environment_name
        )
        return GitLabEnvironment.model_validate(match) if match else None

    async def update_environment(
        self,
        project_url: str,
        environment: GitLabEnvironment,
        payload: dict[str, Any],
    ) -> Any:
        """PUT an update (e.g. ``external_url``) to a project environment."""
        return await self.request(
            "PUT", f"{project_url}/environments/{environment.id}", payload
        )
