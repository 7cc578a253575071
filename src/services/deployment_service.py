"""Deployment service: reconcile a lambda and its endpoint, or tear them down."""

import json
import logging
from dataclasses import dataclass
from typing import Any

import httpx

from src.config import Settings, settings as default_settings
from src.exceptions import (
    DeployerError,
    InvalidRequestError,
    RemoteError,
    TargetNotFoundError,
)
from src.logging.request_log import DeploymentLog
from src.models.resource import Api, ApiEndpoint, Environment, Lambda, Organization
from src.repositories.api_repository import ApiRepository
from src.repositories.base import patch_replace
from src.repositories.lambda_repository import LambdaRepository
from src.repositories.org_repository import OrgRepository
from src.schemas.deployment import DeploymentRequest, DeploymentResult, ErrorDetail
from src.services.context import DeploymentContext, logger


@dataclass
class DeploymentTarget:
    """The resolved org, environment and API a request points at."""

    org: Organization
    environment: Environment
    api: Api


def build_lambda_payload(
    request: DeploymentRequest, lambda_provider_id: str
) -> dict[str, Any]:
    """
    Build the create payload for a package lambda.

    Resource limits, headers and timeout are fixed; only the handler,
    runtime and package URL come from the request.
    """
    return {
        "name": request.lambda_name,
        "description": f"deploy by gitlab, ref {request.git_ref}, sha {request.short_sha}",
        "properties": {
            "provider": {"id": lambda_provider_id, "locations": []},
            "public": True,
            "cpus": 0.1,
            "memory": 512,
            "code_type": "package",
            "package_url": request.lambda_url,
            "compressed": False,
            "headers": {"Accept": "text/plain"},
            "periodic_info": {},
            "timeout": 30,
            "handler": request.file,
            "runtime": request.runtime,
            "env": {},
        },
    }


def build_lambda_patch(payload: dict[str, Any]) -> list[dict[str, Any]]:
    """
    Patch for an existing lambda: description, package_url, handler, runtime.

    The provider binding and resource limits are never patched; moving a
    lambda to another provider has to be done by hand.
    """
    properties = payload["properties"]
    return [
        patch_replace("/description", payload["description"]),
        patch_replace("/properties/package_url", properties["package_url"]),
        patch_replace("/properties/handler", properties["handler"]),
        patch_replace("/properties/runtime", properties["runtime"]),
    ]


def _warn(log: DeploymentLog, result: DeploymentResult, message: str) -> None:
    log.warning(message)
    result.warnings.append(message)


class DeploymentService:
    """
    Orchestrates one deploy or stop invocation.

    Hard failures (configuration, missing targets, remote errors) abort the
    invocation and come back as an error result. Expected misses (GitLab
    project or environment not found, nothing to stop) are warnings and
    the result stays ``ok``.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize DeploymentService.

        Args:
            settings: Settings to use (module settings if None)
            transport: Optional httpx transport for both REST clients
        """
        self.settings = settings or default_settings
        self.transport = transport

    async def execute(
        self, request: DeploymentRequest, correlation_id: str | None = None
    ) -> DeploymentResult:
        """
        Run the requested action and return the unified result.

        This is the only place DeployerError is turned into a result.

        Args:
            request: Invocation payload
            correlation_id: Request correlation id for log lines

        Returns:
            DeploymentResult with status ``ok`` or ``error``
        """
        log = DeploymentLog(
            logger,
            correlation_id=correlation_id,
            capture_level=logging.DEBUG if self.settings.log_debug else logging.INFO,
        )
        log.debug(f"args : {request.model_dump_json()}")
        result = DeploymentResult(action=request.action, lambda_name=request.lambda_name)

        try:
            missing = request.missing_for_action()
            if missing:
                raise InvalidRequestError(
                    f"{', '.join(missing)} required for {request.action}",
                    details={"missing": missing},
                )
            context = DeploymentContext.create(
                self.settings,
                request,
                log=log,
                correlation_id=correlation_id,
                transport=self.transport,
            )
            async with context:
                target = await self.resolve_target(context, request)
                if request.action == "stop":
                    await self.stop(context, target, request, result)
                else:
                    await self.deploy(context, target, request, result)
        except DeployerError as exc:
            log.error(f"ERROR: {exc.message}")
            result.status = "error"
            result.error = ErrorDetail(
                error_code=exc.error_code,
                message=exc.message,
                details=exc.details,
                status_code=exc.status_code,
            )

        result.log = list(log.lines)
        return result

    async def resolve_target(
        self, context: DeploymentContext, request: DeploymentRequest
    ) -> DeploymentTarget:
        """
        Resolve org, environment and API; any miss aborts before mutations.

        Raises:
            TargetNotFoundError: If the org, environment or API is absent
        """
        orgs = OrgRepository(context.meta)
        org = await orgs.find_org(context.target_org)
        if org is None:
            raise TargetNotFoundError("org", context.target_org)

        environment = await orgs.find_environment(org, request.env_id)
        if environment is None:
            raise TargetNotFoundError("environment", request.env_id)

        api = await ApiRepository(context.meta).find_api_by_name(
            org, environment, request.api
        )
        if api is None:
            raise TargetNotFoundError("API", request.api)

        return DeploymentTarget(org=org, environment=environment, api=api)

    async def deploy(
        self,
        context: DeploymentContext,
        target: DeploymentTarget,
        request: DeploymentRequest,
        result: DeploymentResult,
    ) -> None:
        """Create or patch the lambda, ensure its endpoint, then call back to GitLab."""
        log = context.log
        lambdas = LambdaRepository(context.meta)
        name = request.lambda_name
        log.info(f"Will deploy lambda {name}")

        payload = build_lambda_payload(request, context.lambda_provider_id)
        log.debug(f"lambda update/create payload: {json.dumps(payload)}")

        try:
            app = await lambdas.find_by_name(target.org, target.environment, name)
            if app is not None:
                app = await lambdas.patch(
                    target.org, target.environment, app, build_lambda_patch(payload)
                )
                result.lambda_status = "patched"
            else:
                app = await lambdas.create(target.org, target.environment, payload)
                result.lambda_status = "created"
        except RemoteError as exc:
            if exc.remote_status is None:
                log.error(f"ERROR: error creating lambda: {exc.message}")
            else:
                log.error(f"ERROR: error creating lambda: response code {exc.remote_status}")
            raise
        log.info(f"Lambda {app.disp()} is {result.lambda_status}")

        endpoint = await self.ensure_endpoint(context, target, app, result)

        if self.settings.api_gateway_url:
            external_url = (
                f"{self.settings.api_gateway_url.rstrip('/')}/{target.api.name}"
                f"{endpoint.resource}"
            )
            log.info(f"using URL {external_url}")
            result.external_url = external_url

        if context.gitlab is None:
            log.info("Skipping Gitlab update since GITLAB_API_URL is not defined.")
        else:
            await self.notify_gitlab(context, request, result)

        log.info("***** done ************")

    async def ensure_endpoint(
        self,
        context: DeploymentContext,
        target: DeploymentTarget,
        app: Lambda,
        result: DeploymentResult,
    ) -> ApiEndpoint:
        """
        Create the lambda's endpoint if absent; an existing one is left intact.

        An existing endpoint is not rebound, even when it points at another
        lambda id. That case is reported as a warning.
        """
        log = context.log
        apis = ApiRepository(context.meta)
        endpoint = await apis.find_endpoint_by_name(target.org, target.api, app.name)
        if endpoint is None:
            endpoint = await apis.create_apiendpoint(
                target.org,
                target.api,
                {
                    "name": app.name,
                    "properties": {
                        "implementation_type": "lambda",
                        "implementation_id": app.id,
                        "resource": f"/{app.name}",
                    },
                },
            )
            result.api_endpoint = "created"
            log.info(f"Created api-endpoint for lambda with id {endpoint.id}")
            return endpoint

        result.api_endpoint = "already existed"
        log.info("ApiEndpoint already existed, will leave it intact.")
        if endpoint.implementation_id != app.id:
            _warn(
                log,
                result,
                f"ApiEndpoint {endpoint.disp()} is bound to {endpoint.implementation_id}, "
                f"not lambda {app.id}; binding left unchanged",
            )
        return endpoint

    async def notify_gitlab(
        self,
        context: DeploymentContext,
        request: DeploymentRequest,
        result: DeploymentResult,
    ) -> None:
        """Set the GitLab environment's external_url; misses are warnings."""
        log = context.log
        project_path = request.gitlab_project_path
        project = await context.gitlab.find_project(project_path)
        if project is None:
            _warn(log, result, f"Could not find gitlab project for path {project_path}")
            return

        project_url = project.api_url
        result.project_url = project_url

        log.info("Searching for associated GitLab Environment")
        gitlab_env = None
        if request.git_env:
            gitlab_env = await context.gitlab.find_environment(project_url, request.git_env)
        if gitlab_env is None:
            _warn(
                log,
                result,
                "WARNING: Could not locate GitLab environment in order to update external_url",
            )
            return
        result.gitlab_env = gitlab_env.name

        log.info("Calling back to GitLab to provision new environment")
        await context.gitlab.update_environment(
            project_url, gitlab_env, {"external_url": result.external_url}
        )
        result.update_gitlab_environment = "updated"

    async def stop(
        self,
        context: DeploymentContext,
        target: DeploymentTarget,
        request: DeploymentRequest,
        result: DeploymentResult,
    ) -> None:
        """
        Delete the lambda's endpoints, then the lambda.

        A missing lambda is nothing to do. Deleted endpoints are not restored
        if the lambda delete fails afterwards.
        """
        log = context.log
        lambdas = LambdaRepository(context.meta)
        apis = ApiRepository(context.meta)
        name = request.lambda_name

        log.info("***** begin stop ************")
        log.info(f"Will delete lambda {name}")

        found = await lambdas.find_by_name(target.org, target.environment, name)
        if found is None:
            _warn(log, result, f"did not find any deployments matching {name}")
            log.info("***** done stop ************")
            return

        log.info("Listing endpoints for lambda")
        endpoints = await lambdas.list_apiendpoints(target.org, found)
        result.endpoints = []
        for endpoint in endpoints:
            log.info(f"Deleting api endpoint {endpoint.name}")
            await apis.delete_endpoint(target.org, endpoint)
            result.endpoints.append(endpoint.name)

        await lambdas.delete(target.org, target.environment, found)
        log.info("***** done stop ************")
