"""Data models for the Gestalt Lambda Deployer."""

from src.models.gitlab import GitLabEnvironment, GitLabProject
from src.models.resource import (
    Api,
    ApiEndpoint,
    Entitlement,
    Environment,
    Lambda,
    MetaResource,
    Organization,
)

__all__ = [
    "Api",
    "ApiEndpoint",
    "Entitlement",
    "Environment",
    "GitLabEnvironment",
    "GitLabProject",
    "Lambda",
    "MetaResource",
    "Organization",
]
