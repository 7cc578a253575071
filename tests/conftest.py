"""Shared fixtures: an in-memory management API and GitLab behind httpx.MockTransport."""

import json
import re
import uuid
from typing import Any

import httpx
import pytest

from src.config import Settings
from src.schemas.deployment import DeploymentRequest

META_URL = "http://meta.test"
GITLAB_API_URL = "https://ci.example.com/api/v4"
GATEWAY_URL = "https://gateway.example.com"
ORG_FQON = "engineering"
ENV_ID = "e7b3ca8b-5b9a-4a51-8309-3ced4718e41f"
API_ID = "api-dev1"


def _json(data: Any, status_code: int = 200) -> httpx.Response:
    return httpx.Response(status_code, json=data)


def _not_found() -> httpx.Response:
    return httpx.Response(404, text="not found")


class FakeControlPlane:
    """
    Minimal stand-in for the management API and GitLab.

    Records every request so tests can assert on call counts, order and
    bodies. ``fail(method, pattern, status)`` makes matching calls fail.
    """

    def __init__(self) -> None:
        self.orgs: dict[str, dict[str, Any]] = {}
        self.environments: dict[str, dict[str, Any]] = {}
        self.lambdas: dict[str, list[dict[str, Any]]] = {}
        self.apis: dict[str, list[dict[str, Any]]] = {}
        self.endpoints: dict[str, list[dict[str, Any]]] = {}
        self.entitlements: dict[str, list[dict[str, Any]]] = {}
        self.gitlab_projects: list[dict[str, Any]] = []
        self.gitlab_environments: dict[int, list[dict[str, Any]]] = {}
        self.requests: list[httpx.Request] = []
        self.failures: list[tuple[str, str, int]] = []

    # -- seeding -----------------------------------------------------------

    def add_org(self, fqon: str = ORG_FQON) -> dict[str, Any]:
        org = {
            "id": str(uuid.uuid4()),
            "name": fqon,
            "resource_type": "Gestalt::Resource::Organization",
            "properties": {"fqon": fqon},
        }
        self.orgs[fqon] = org
        return org

    def add_environment(self, env_id: str = ENV_ID, name: str = "dev") -> dict[str, Any]:
        env = {
            "id": env_id,
            "name": name,
            "resource_type": "Gestalt::Resource::Environment",
            "properties": {"environment_type": "development"},
        }
        self.environments[env_id] = env
        self.lambdas.setdefault(env_id, [])
        self.apis.setdefault(env_id, [])
        return env

    def add_api(self, env_id: str = ENV_ID, api_id: str = API_ID, name: str = "dev1") -> dict[str, Any]:
        api = {"id": api_id, "name": name, "properties": {}}
        self.apis.setdefault(env_id, []).append(api)
        self.endpoints.setdefault(api_id, [])
        return api

    def add_lambda(self, name: str, env_id: str = ENV_ID, lambda_id: str | None = None) -> dict[str, Any]:
        resource = {
            "id": lambda_id or str(uuid.uuid4()),
            "name": name,
            "description": "seeded",
            "properties": {
                "provider": {"id": "old-provider", "locations": []},
                "runtime": "nodejs",
                "handler": "old.js",
                "package_url": "https://old.example.com/pkg",
                "cpus": 0.2,
                "memory": 1024,
            },
        }
        self.lambdas.setdefault(env_id, []).append(resource)
        return resource

    def add_endpoint(self, name: str, implementation_id: str, api_id: str = API_ID) -> dict[str, Any]:
        endpoint = {
            "id": str(uuid.uuid4()),
            "name": name,
            "properties": {
                "implementation_type": "lambda",
                "implementation_id": implementation_id,
                "resource": f"/{name}",
            },
        }
        self.endpoints.setdefault(api_id, []).append(endpoint)
        return endpoint

    def add_gitlab_project(self, path: str, project_id: int = 1, self_link: str | None = None) -> dict[str, Any]:
        project = {
            "id": project_id,
            "name": path.split("/")[-1],
            "path_with_namespace": path,
            "_links": {
                "self": self_link or f"http://ci.example.com/api/v4/projects/{project_id}"
            },
        }
        self.gitlab_projects.append(project)
        self.gitlab_environments.setdefault(project_id, [])
        return project

    def add_gitlab_environment(self, project_id: int, name: str, env_id: int = 10) -> dict[str, Any]:
        env = {"id": env_id, "name": name, "external_url": None}
        self.gitlab_environments.setdefault(project_id, []).append(env)
        return env

    def fail(self, method: str, pattern: str, status_code: int = 500) -> None:
        self.failures.append((method, pattern, status_code))

    # -- inspection --------------------------------------------------------

    @property
    def mutating_requests(self) -> list[httpx.Request]:
        return [r for r in self.requests if r.method != "GET"]

    def calls(self, method: str | None = None) -> list[str]:
        return [
            f"{r.method} {r.url.path}"
            for r in self.requests
            if method is None or r.method == method
        ]

    def all_endpoints(self) -> list[dict[str, Any]]:
        return [e for eps in self.endpoints.values() for e in eps]

    # -- transport ---------------------------------------------------------

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        for method, pattern, status_code in self.failures:
            if request.method == method and re.search(pattern, request.url.path):
                return httpx.Response(status_code, text="boom")
        if request.url.host == "ci.example.com":
            return self._gitlab(request)
        return self._meta(request)

    def _body(self, request: httpx.Request) -> Any:
        return json.loads(request.content) if request.content else None

    def _meta(self, request: httpx.Request) -> httpx.Response:
        method, path = request.method, request.url.path
        params = request.url.params

        m = re.fullmatch(r"/([^/]+)", path)
        if m and method == "GET":
            org = self.orgs.get(m.group(1))
            return _json(org) if org else _not_found()

        m = re.fullmatch(r"/[^/]+/environments/([^/]+)", path)
        if m and method == "GET":
            env = self.environments.get(m.group(1))
            return _json(env) if env else _not_found()

        m = re.fullmatch(r"/[^/]+/environments/([^/]+)/lambdas", path)
        if m:
            env_lambdas = self.lambdas.setdefault(m.group(1), [])
            if method == "GET":
                return _json(env_lambdas)
            if method == "POST":
                created = {"id": str(uuid.uuid4()), **self._body(request)}
                env_lambdas.append(created)
                return _json(created, 201)

        m = re.fullmatch(r"/[^/]+/environments/([^/]+)/lambdas/([^/]+)", path)
        if m:
            env_lambdas = self.lambdas.get(m.group(1), [])
            target = next((l for l in env_lambdas if l["id"] == m.group(2)), None)
            if target is None:
                return _not_found()
            if method == "PATCH":
                for op in self._body(request):
                    keys = op["path"].strip("/").split("/")
                    node = target
                    for key in keys[:-1]:
                        node = node.setdefault(key, {})
                    node[keys[-1]] = op["value"]
                return _json(target)
            if method == "DELETE":
                env_lambdas.remove(target)
                return httpx.Response(204)

        m = re.fullmatch(r"/[^/]+/environments/([^/]+)/apis", path)
        if m and method == "GET":
            return _json(self.apis.get(m.group(1), []))

        m = re.fullmatch(r"/[^/]+/apis/([^/]+)/apiendpoints", path)
        if m:
            api_endpoints = self.endpoints.setdefault(m.group(1), [])
            if method == "GET":
                return _json(api_endpoints)
            if method == "POST":
                created = {"id": str(uuid.uuid4()), **self._body(request)}
                api_endpoints.append(created)
                return _json(created, 201)

        if path == f"/{ORG_FQON}/apiendpoints" and method == "GET":
            implementation_id = params.get("implementation_id")
            return _json(
                [
                    e
                    for e in self.all_endpoints()
                    if e["properties"].get("implementation_id") == implementation_id
                ]
            )

        m = re.fullmatch(r"/[^/]+/apiendpoints/([^/]+)", path)
        if m and method == "DELETE":
            for api_endpoints in self.endpoints.values():
                for endpoint in list(api_endpoints):
                    if endpoint["id"] == m.group(1):
                        api_endpoints.remove(endpoint)
                        return httpx.Response(204)
            return _not_found()

        m = re.fullmatch(r"/[^/]+/resources/([^/]+)/entitlements", path)
        if m and method == "GET":
            return _json(self.entitlements.get(m.group(1), []))

        if method == "PUT" and "/entitlements/" in path:
            return _json(self._body(request))

        return _not_found()

    def _gitlab(self, request: httpx.Request) -> httpx.Response:
        method, path = request.method, request.url.path

        if path == "/api/v4/projects" and method == "GET":
            return _json(self.gitlab_projects)

        m = re.fullmatch(r"/api/v4/projects/(\d+)/environments", path)
        if m and method == "GET":
            return _json(self.gitlab_environments.get(int(m.group(1)), []))

        m = re.fullmatch(r"/api/v4/projects/(\d+)/environments/(\d+)", path)
        if m and method == "PUT":
            for env in self.gitlab_environments.get(int(m.group(1)), []):
                if env["id"] == int(m.group(2)):
                    env.update(self._body(request))
                    return _json(env)

        return _not_found()


def make_settings(**overrides: Any) -> Settings:
    """Settings isolated from the process environment."""
    values: dict[str, Any] = {
        "meta_url": META_URL,
        "meta_token": None,
        "api_key": "key",
        "api_secret": "secret",
        "target_org": ORG_FQON,
        "lambda_provider_id": "provider-1",
        "gitlab_api_url": None,
        "gitlab_token": None,
        "api_gateway_url": None,
        "log_debug": False,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def control_plane() -> FakeControlPlane:
    """Management API with the target org, environment and API in place."""
    plane = FakeControlPlane()
    plane.add_org()
    plane.add_environment()
    plane.add_api()
    return plane


@pytest.fixture
def deployer_settings() -> Settings:
    """Settings with the GitLab callback disabled."""
    return make_settings()


@pytest.fixture
def gitlab_settings() -> Settings:
    """Settings with the GitLab callback and gateway configured."""
    return make_settings(
        gitlab_api_url=GITLAB_API_URL,
        gitlab_token="gitlab-token",
        api_gateway_url=GATEWAY_URL,
    )


@pytest.fixture
def deploy_payload() -> dict[str, Any]:
    return {
        "file": "test_lambda_2.py",
        "runtime": "python",
        "api": "dev1",
        "project": "example-gitlab-project",
        "lambda_url": "https://s3.amazonaws.com/example-bucket/example-gitlab-project/test_lambda.py",
        "git_ref": "master",
        "git_sha": "6c1ce958d57695498f30a3a82150b821c5e5f74c",
        "git_env": "review/test-1",
        "env_id": ENV_ID,
    }


@pytest.fixture
def deploy_request(deploy_payload: dict[str, Any]) -> DeploymentRequest:
    return DeploymentRequest(**deploy_payload)


@pytest.fixture
def settings_factory():
    """Build isolated Settings with overrides."""
    return make_settings
