"""REST clients for the management API and GitLab."""

from src.clients.base import RestClient, handle_response
from src.clients.gitlab_client import GitLabClient
from src.clients.meta_client import MetaClient

__all__ = ["GitLabClient", "MetaClient", "RestClient", "handle_response"]
