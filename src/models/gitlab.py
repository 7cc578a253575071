"""Models for GitLab API resources used by the environment callback."""

from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class GitLabProject(BaseModel):
    """
    GitLab project as returned by ``GET /projects``.

    Attributes:
        id: Numeric project id
        name: Project name
        path_with_namespace: Full path, e.g. ``group/project``
        links: The ``_links`` map; ``self`` is the project's API URL
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: int
    name: str
    path_with_namespace: str
    links: Dict[str, str] = Field(default_factory=dict, alias="_links")

    @property
    def api_url(self) -> str:
        """
        Project API URL with an https scheme.

        GitLab sometimes reports the self link with http even when served
        over https; the first ``http://`` is rewritten.
        """
        return self.links.get("self", "").replace("http://", "https://", 1)


class GitLabEnvironment(BaseModel):
    """GitLab environment within a project."""

    model_config = ConfigDict(extra="ignore")

    id: int
    name: str
    external_url: Optional[str] = None
