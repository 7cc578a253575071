"""Base repository with common management API helpers."""

from typing import Any, TypeVar

from pydantic import ValidationError

from src.clients.base import expect_list
from src.clients.meta_client import MetaClient
from src.exceptions import RemoteError
from src.models.resource import MetaResource, Organization
from src.utils.lookup import find_by_name

R = TypeVar("R", bound=MetaResource)


def fqon(org: Organization) -> str:
    """Fully qualified org name used as the first path segment."""
    return org.fqon


def patch_replace(prop_path: str, value: Any) -> dict[str, Any]:
    """
    Build a JSON-patch ``replace`` operation.

    Args:
        prop_path: JSON pointer, e.g. ``/properties/runtime``
        value: New value

    Returns:
        Patch operation dict
    """
    return {"op": "replace", "path": prop_path, "value": value}


def to_resource(model: type[R], data: Any) -> R:
    """
    Validate a response body that must be a resource object.

    Args:
        model: Resource model
        data: Parsed response body

    Returns:
        The validated resource

    Raises:
        RemoteError: If the body is not a JSON object describing a resource
    """
    if not isinstance(data, dict):
        raise RemoteError(
            remote_status=None,
            url=None,
            body=str(data),
            message=f"expected a {model.__name__} object, got {type(data).__name__}",
        )
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        raise RemoteError(
            remote_status=None,
            url=None,
            body=str(data),
            message=f"invalid {model.__name__} in response: {exc.error_count()} errors",
        ) from exc


def to_model(model: type[R], data: Any) -> R | None:
    """Validate a lookup body into ``model``; None stays None."""
    if data is None:
        return None
    return to_resource(model, data)


class BaseRepository:
    """
    Base repository providing common management API operations.

    All methods are async and go through the request-scoped MetaClient,
    which also carries the request log.
    """

    def __init__(self, client: MetaClient) -> None:
        """
        Initialize repository with a client.

        Args:
            client: MetaClient bound to the management API
        """
        self.client = client
        self.log = client.log

    async def list_resources(self, model: type[R], endpoint: str) -> list[R]:
        """
        Fetch a collection; a 404 yields an empty list.

        Args:
            model: Resource model to validate each item into
            endpoint: Collection path

        Returns:
            List of resources
        """
        items = await self._fetch_list(endpoint)
        return [to_resource(model, item) for item in items]

    async def find_named(
        self, model: type[R], endpoint: str, name: str
    ) -> R | None:
        """
        Fetch a whole collection and return the first exact name match.

        Args:
            model: Resource model for the match
            endpoint: Collection path
            name: Exact resource name

        Returns:
            Matching resource, or None
        """
        items = await self._fetch_list(endpoint)
        return to_model(model, find_by_name(items, name))

    async def _fetch_list(self, endpoint: str) -> list[Any]:
        return expect_list(
            await self.client.get(endpoint), self.client.url_for(endpoint)
        )
