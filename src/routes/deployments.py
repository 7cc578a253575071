"""API routes for deployment operations."""

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse

from src.schemas.deployment import DeploymentRequest
from src.services.deployment_service import DeploymentService

router = APIRouter(prefix="/deployments", tags=["Deployments"])


def get_deployment_service() -> DeploymentService:
    """Build the service for one request; overridden in tests."""
    return DeploymentService()


@router.post(
    "",
    status_code=status.HTTP_200_OK,
    responses={
        200: {
            "description": "Deployment reconciled or torn down",
            "content": {
                "application/json": {
                    "example": {
                        "status": "ok",
                        "action": "deploy",
                        "lambda_name": "example-gitlab-project/master/test_lambda_2.py",
                        "lambda": "created",
                        "api_endpoint": "created",
                        "external_url": "https://gateway.example.com/dev1/example-gitlab-project/master/test_lambda_2.py",
                        "warnings": [],
                        "log": ["Will deploy lambda example-gitlab-project/master/test_lambda_2.py"],
                    }
                }
            },
        },
        404: {
            "description": "Target org, environment or API not found",
            "content": {
                "application/json": {
                    "example": {
                        "status": "error",
                        "action": "deploy",
                        "error": {
                            "error_code": "NOT_FOUND",
                            "message": "could not find target org",
                            "details": {"target": "org", "identifier": "engineering"},
                        },
                        "warnings": [],
                        "log": ["ERROR: could not find target org"],
                    }
                }
            },
        },
        502: {"description": "The management API or GitLab returned an error"},
    },
)
async def run_deployment(
    request: Request,
    deployment: DeploymentRequest,
    service: DeploymentService = Depends(get_deployment_service),
) -> JSONResponse:
    """
    Deploy (default) or stop a lambda and its API endpoint.

    Args:
        request: FastAPI request object
        deployment: Invocation payload
        service: DeploymentService (injected)

    Returns:
        The unified deployment result; the HTTP status reflects the error
        kind when the action failed
    """
    correlation_id = getattr(request.state, "correlation_id", None)
    result = await service.execute(deployment, correlation_id=correlation_id)

    status_code = status.HTTP_200_OK
    if result.error is not None:
        status_code = result.error.status_code

    return JSONResponse(status_code=status_code, content=result.to_response())
