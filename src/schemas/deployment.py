"""Pydantic schemas for deployment requests and results."""

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class DeploymentRequest(BaseModel):
    """
    Invocation payload, typically posted by a GitLab CI job.

    Attributes:
        action: ``stop`` tears the deployment down; anything else deploys
        file: Lambda file name, also used as the handler
        runtime: Lambda runtime (python, nodejs, nashorn, golang, ...)
        env_id: UUID of the target environment
        api: Name of the target API in that environment
        project: Project name (CI_PROJECT_NAME)
        project_path: GitLab path_with_namespace, defaults to ``project``
        lambda_url: URL of the lambda package
        git_ref: Ref slug (CI_COMMIT_REF_SLUG)
        git_sha: Commit SHA (CI_COMMIT_SHA)
        git_env: GitLab environment name (CI_ENVIRONMENT_NAME)
        meta_url: Optional override of the management API URL
    """

    model_config = ConfigDict(
        extra="ignore",
        json_schema_extra={
            "example": {
                "file": "test_lambda_2.py",
                "runtime": "python",
                "api": "dev1",
                "project": "example-gitlab-project",
                "lambda_url": "https://s3.amazonaws.com/example-bucket/example-gitlab-project/test_lambda.py",
                "git_ref": "master",
                "git_sha": "6c1ce958d57695498f30a3a82150b821c5e5f74c",
                "git_env": "review/test-1",
                "env_id": "e7b3ca8b-5b9a-4a51-8309-3ced4718e41f",
            }
        },
    )

    action: Literal["deploy", "stop"] = Field(
        "deploy", description="Deployment action"
    )
    file: str = Field(..., min_length=1, description="Lambda file name")
    runtime: Optional[str] = Field(None, description="Lambda runtime")
    env_id: str = Field(..., min_length=1, description="Target environment UUID")
    api: str = Field(..., min_length=1, description="Target API name")
    project: str = Field(..., min_length=1, description="Project name")
    project_path: Optional[str] = Field(
        None, description="GitLab project path_with_namespace"
    )
    lambda_url: Optional[str] = Field(None, description="Lambda package URL")
    git_ref: str = Field(..., min_length=1, description="Git ref slug")
    git_sha: str = Field("", description="Git commit SHA")
    git_env: Optional[str] = Field(None, description="GitLab environment name")
    meta_url: Optional[str] = Field(None, description="Management API URL override")

    @model_validator(mode="before")
    @classmethod
    def default_action(cls, data: Any) -> Any:
        """Any action other than ``stop`` means deploy."""
        if isinstance(data, dict) and data.get("action") != "stop":
            data = {**data, "action": "deploy"}
        return data

    def missing_for_action(self) -> List[str]:
        """Fields the action needs that the payload left empty."""
        if self.action != "deploy":
            return []
        return [name for name in ("runtime", "lambda_url") if not getattr(self, name)]

    @property
    def lambda_name(self) -> str:
        """Derived resource name: ``project/git_ref/file``."""
        return f"{self.project}/{self.git_ref}/{self.file}"

    @property
    def short_sha(self) -> str:
        return self.git_sha[:8]

    @property
    def gitlab_project_path(self) -> str:
        return self.project_path or self.project


class ErrorDetail(BaseModel):
    """Typed error carried by a failed result."""

    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable message")
    details: Dict[str, Any] = Field(default_factory=dict)
    status_code: int = Field(500, exclude=True, description="HTTP status for the route")


class DeploymentResult(BaseModel):
    """
    Unified result for deploy and stop.

    Fields are filled as the flow progresses, so a failed result still
    reports what was done before the failure.
    """

    model_config = ConfigDict(populate_by_name=True)

    status: Literal["ok", "error"] = "ok"
    action: Literal["deploy", "stop"] = "deploy"
    lambda_name: Optional[str] = None
    lambda_status: Optional[Literal["created", "patched"]] = Field(
        None, alias="lambda"
    )
    api_endpoint: Optional[Literal["created", "already existed"]] = None
    external_url: Optional[str] = None
    project_url: Optional[str] = None
    gitlab_env: Optional[str] = None
    update_gitlab_environment: Optional[str] = None
    endpoints: Optional[List[str]] = None
    warnings: List[str] = Field(default_factory=list)
    error: Optional[ErrorDetail] = None
    log: List[str] = Field(default_factory=list)

    def to_response(self) -> Dict[str, Any]:
        """Serialize with wire names, dropping fields never reached."""
        return self.model_dump(by_alias=True, exclude_none=True)
