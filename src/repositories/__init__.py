"""Repository layer for management API resources."""

from src.repositories.api_repository import ApiRepository
from src.repositories.entitlement_repository import EntitlementRepository
from src.repositories.identity_repository import IdentityRepository
from src.repositories.lambda_repository import LambdaRepository
from src.repositories.org_repository import EnvironmentTypes, OrgRepository
from src.repositories.policy_repository import PolicyRepository
from src.repositories.provider_repository import ProviderRepository, ProviderTypes

__all__ = [
    "ApiRepository",
    "EntitlementRepository",
    "EnvironmentTypes",
    "IdentityRepository",
    "LambdaRepository",
    "OrgRepository",
    "PolicyRepository",
    "ProviderRepository",
    "ProviderTypes",
]
