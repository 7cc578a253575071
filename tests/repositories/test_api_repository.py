"""Tests for ApiRepository."""

import httpx
import pytest

from src.exceptions import RemoteError
from src.models.resource import (
    Api,
    ApiEndpoint,
    Environment,
    Lambda,
    MetaResource,
    Organization,
)
from src.repositories.api_repository import ApiRepository

ORG = Organization(id="org-1", name="engineering", properties={"fqon": "engineering"})
ENV = Environment(id="env-1", name="dev")
API = Api(id="api-1", name="dev1")


async def test_find_api_by_name_scans_environment(recorder, meta_client):
    """Test that the API is matched by exact name within the environment."""
    recorder.on(
        "GET",
        "/engineering/environments/env-1/apis",
        body=[{"id": "api-0", "name": "dev10"}, {"id": "api-1", "name": "dev1"}],
    )

    api = await ApiRepository(meta_client).find_api_by_name(ORG, ENV, "dev1")

    assert api.id == "api-1"
    assert recorder.calls() == ["GET /engineering/environments/env-1/apis?expand=true"]


async def test_find_endpoint_by_name_absent(recorder, meta_client):
    """Test that an empty endpoint list is a miss."""
    recorder.on("GET", "/engineering/apis/api-1/apiendpoints", body=[])

    assert await ApiRepository(meta_client).find_endpoint_by_name(ORG, API, "x") is None


async def test_create_apiendpoint_posts_under_api(recorder, meta_client):
    """Test the endpoint create path and returned model."""
    recorder.on_echo("POST", "/engineering/apis/api-1/apiendpoints")

    endpoint = await ApiRepository(meta_client).create_apiendpoint(
        ORG,
        API,
        {
            "name": "p/master/f.py",
            "properties": {
                "implementation_type": "lambda",
                "implementation_id": "lam-1",
                "resource": "/p/master/f.py",
            },
        },
    )

    assert endpoint.implementation_id == "lam-1"
    assert endpoint.resource == "/p/master/f.py"


async def test_list_implementation_endpoints(recorder, meta_client):
    """Test listing through the implementation's sub-collection."""
    recorder.on(
        "GET",
        "/engineering/lambdas/lam-1/apiendpoints",
        body=[{"id": "ep-1", "name": "a"}, {"id": "ep-2", "name": "b"}],
    )

    endpoints = await ApiRepository(meta_client).list_implementation_endpoints(
        ORG, Lambda(id="lam-1", name="f")
    )

    assert [e.id for e in endpoints] == ["ep-1", "ep-2"]


async def test_list_implementation_endpoints_for_container(recorder, meta_client):
    """Test that the collection name selects the implementation kind."""
    recorder.on(
        "GET", "/engineering/containers/c-1/apiendpoints", body=[{"id": "ep-9", "name": "c"}]
    )

    endpoints = await ApiRepository(meta_client).list_implementation_endpoints(
        ORG, MetaResource(id="c-1", name="web"), kind="containers"
    )

    assert [e.id for e in endpoints] == ["ep-9"]
    assert recorder.calls() == ["GET /engineering/containers/c-1/apiendpoints?expand=true"]


async def test_update_endpoint_target_patches_implementation(recorder, meta_client):
    """Test the rebind patch."""
    recorder.on(
        "PATCH",
        "/engineering/apiendpoints/ep-1",
        body={"id": "ep-1", "name": "a", "properties": {"implementation_id": "lam-2"}},
    )

    updated = await ApiRepository(meta_client).update_endpoint_target(
        ORG, ApiEndpoint(id="ep-1", name="a"), Lambda(id="lam-2", name="g")
    )

    assert updated.implementation_id == "lam-2"
    assert recorder.body(0) == [
        {"op": "replace", "path": "/properties/implementation_id", "value": "lam-2"}
    ]


async def test_delete_endpoint(recorder, meta_client):
    recorder.on("DELETE", "/engineering/apiendpoints/ep-1", status_code=204)

    await ApiRepository(meta_client).delete_endpoint(ORG, ApiEndpoint(id="ep-1", name="a"))

    assert recorder.calls() == ["DELETE /engineering/apiendpoints/ep-1"]


async def test_find_api_by_id_absent(recorder, meta_client):
    """Test that a missing API id is None."""
    assert await ApiRepository(meta_client).find_api(ORG, "nope") is None


async def test_create_api_in_environment(recorder, meta_client):
    recorder.on_echo("POST", "/engineering/environments/env-1/apis")

    api = await ApiRepository(meta_client).create_api(
        ORG, ENV, {"name": "dev2", "properties": {"provider": {"id": "kong-1"}}}
    )

    assert api.name == "dev2"
    assert recorder.calls() == ["POST /engineering/environments/env-1/apis"]


async def test_create_with_non_object_body_is_remote_error(recorder, meta_client):
    """Test that a success answer without a resource object is rejected."""
    recorder.routes[("POST", "/engineering/environments/env-1/apis")] = (
        lambda request: httpx.Response(201, text="created")
    )

    with pytest.raises(RemoteError) as exc_info:
        await ApiRepository(meta_client).create_api(ORG, ENV, {"name": "dev2"})

    assert exc_info.value.remote_status is None
    assert exc_info.value.body == "created"


async def test_create_with_incomplete_resource_is_remote_error(recorder, meta_client):
    """Test that an object missing the resource id is rejected."""
    recorder.on("POST", "/engineering/environments/env-1/apis", 201, {"name": "dev2"})

    with pytest.raises(RemoteError):
        await ApiRepository(meta_client).create_api(ORG, ENV, {"name": "dev2"})


async def test_collection_that_is_not_a_list_is_remote_error(recorder, meta_client):
    """Test that a lookup answered with an object instead of a list is rejected."""
    recorder.on("GET", "/engineering/environments/env-1/apis", body={"items": []})

    with pytest.raises(RemoteError) as exc_info:
        await ApiRepository(meta_client).find_api_by_name(ORG, ENV, "dev1")

    assert exc_info.value.url == "http://meta.test/engineering/environments/env-1/apis?expand=true"
