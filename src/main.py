"""FastAPI application entry point."""

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError

from src.config import settings
from src.exceptions import DeployerError
from src.handlers.exception_handler import (
    deployer_exception_handler,
    generic_exception_handler,
    validation_exception_handler,
)
from src.logging.config import configure_logging
from src.middleware.logging import LoggingMiddleware
from src.routes import deployments, status

# Configure logging before creating the app
configure_logging()

app = FastAPI(
    title=settings.api_title,
    version=settings.api_version,
    description="""
## Gestalt Lambda Deployer

Deploys or tears down a package lambda and its API endpoint in a Gestalt
environment, typically from a GitLab CI job, and optionally sets the GitLab
environment's external URL.

### Actions

- **deploy** (default): create or patch the lambda
  `<project>/<git_ref>/<file>`, create its API endpoint if absent, then call
  back to GitLab when `GITLAB_API_URL` is set.
- **stop**: delete the lambda's API endpoints, then the lambda.

### Responses

Every call returns the same shape: `status` (`ok` or `error`), the fields
reached by the flow, `warnings`, an `error` detail on failure, and the
request `log`.
""",
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(LoggingMiddleware)

app.add_exception_handler(DeployerError, deployer_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, generic_exception_handler)

app.include_router(deployments.router)
app.include_router(status.router)


@app.get("/", tags=["Root"])
async def root() -> dict[str, str]:
    """
    Root endpoint with service information.

    Returns:
        Dict with welcome message and docs link
    """
    return {
        "message": f"Welcome to {settings.api_title}",
        "version": settings.api_version,
        "docs": "/docs",
        "health": "/status",
    }
