"""
Deploy or stop a review lambda from a GitLab CI job.

Builds the deployment payload from the predefined CI variables plus a few
job variables, posts it to the deployer and prints the returned log.

Job variables:
    DEPLOYER_URL     Base URL of the deployer (e.g. the API Gateway stage URL)
    LAMBDA_FILE      Lambda file name, also the handler
    LAMBDA_RUNTIME   Lambda runtime (deploy only)
    LAMBDA_URL       Package URL (deploy only)
    GESTALT_ENV_ID   Target environment UUID
    GESTALT_API      Target API name

Usage:
    python examples/ci_deploy.py [deploy|stop]

Requirements:
    pip install httpx python-dotenv
"""

import asyncio
import os
import sys
from typing import Any, Dict, Optional

import httpx
from dotenv import load_dotenv

# Predefined GitLab CI variables mapped onto payload fields
CI_FIELDS = {
    "project": "CI_PROJECT_NAME",
    "project_path": "CI_PROJECT_PATH",
    "git_ref": "CI_COMMIT_REF_SLUG",
    "git_sha": "CI_COMMIT_SHA",
    "git_env": "CI_ENVIRONMENT_NAME",
}

JOB_FIELDS = {
    "file": "LAMBDA_FILE",
    "runtime": "LAMBDA_RUNTIME",
    "lambda_url": "LAMBDA_URL",
    "env_id": "GESTALT_ENV_ID",
    "api": "GESTALT_API",
}


class DeployerClient:
    """Async client for the deployer's /deployments endpoint."""

    def __init__(self, base_url: str, timeout: float = 120.0) -> None:
        self.client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            headers={"Content-Type": "application/json"},
            timeout=timeout,
        )

    async def close(self) -> None:
        await self.client.aclose()

    async def __aenter__(self) -> "DeployerClient":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    async def run(
        self, payload: Dict[str, Any], request_id: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Post a deployment once and return the unified result.

        Args:
            payload: Deployment payload
            request_id: Sent as X-Request-ID, e.g. the CI job id

        Returns:
            The deployer's result, whatever its status
        """
        headers = {"X-Request-ID": request_id} if request_id else {}
        response = await self.client.post("/deployments", json=payload, headers=headers)
        return response.json()


def build_payload(action: str) -> Dict[str, Any]:
    """Collect payload fields from the job environment; unset ones are left out."""
    payload: Dict[str, Any] = {"action": action}
    for field, variable in {**CI_FIELDS, **JOB_FIELDS}.items():
        value = os.getenv(variable)
        if value:
            payload[field] = value
    return payload


def print_result(result: Dict[str, Any]) -> None:
    for line in result.get("log", []):
        print(line)
    for warning in result.get("warnings", []):
        print(f"warning: {warning}", file=sys.stderr)
    if result.get("external_url"):
        print(f"\nDeployed at {result['external_url']}")


async def main() -> None:
    load_dotenv()
    action = sys.argv[1] if len(sys.argv) > 1 else "deploy"

    deployer_url = os.getenv("DEPLOYER_URL")
    if not deployer_url:
        print("Error: DEPLOYER_URL not set in environment", file=sys.stderr)
        sys.exit(1)

    async with DeployerClient(deployer_url) as client:
        result = await client.run(build_payload(action), request_id=os.getenv("CI_JOB_ID"))

    print_result(result)

    if result.get("status") != "ok":
        error = result.get("error", {})
        print(
            f"{action} failed: {error.get('error_code')}: {error.get('message')}",
            file=sys.stderr,
        )
        sys.exit(1)


if __name__ == "__main__":
    asyncio.run(main())
