"""Custom exception classes for the Gestalt Lambda Deployer."""

from typing import Any


class DeployerError(Exception):
    """Base exception for the deployer."""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        error_code: str = "INTERNAL_ERROR",
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize exception.

        Args:
            message: Human-readable error message
            status_code: HTTP status code returned to the caller
            error_code: Machine-readable error code
            details: Additional error details
        """
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.error_code = error_code
        self.details = details or {}


class ConfigurationError(DeployerError):
    """Raised when a required environment variable is missing."""

    def __init__(
        self,
        message: str | None = None,
        variable: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize ConfigurationError.

        Args:
            message: Error message (derived from variable if omitted)
            variable: Name of the missing environment variable
            details: Additional error details
        """
        error_details = details or {}
        if variable:
            error_details["variable"] = variable
        super().__init__(
            message=message or f"Env missing variable {variable}",
            status_code=500,
            error_code="CONFIGURATION_ERROR",
            details=error_details,
        )
        self.variable = variable


class TargetNotFoundError(DeployerError):
    """Raised when the target org, environment or API cannot be resolved (404)."""

    def __init__(
        self,
        target: str,
        identifier: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize TargetNotFoundError.

        Args:
            target: Kind of target that was not found (org, environment, API)
            identifier: Name or id that was looked up
            details: Additional error details
        """
        error_details = details or {}
        error_details["target"] = target
        if identifier:
            error_details["identifier"] = identifier
        super().__init__(
            message=f"could not find target {target}",
            status_code=404,
            error_code="NOT_FOUND",
            details=error_details,
        )


class RemoteError(DeployerError):
    """
    Raised when a downstream REST call fails (502).

    Covers status >= 300 other than 404, transport failures (connection
    refused, timeout) and success bodies that are not the expected JSON.
    """

    def __init__(
        self,
        remote_status: int | None,
        url: str | None,
        body: str = "",
        message: str | None = None,
    ) -> None:
        """
        Initialize RemoteError.

        Args:
            remote_status: HTTP status returned by the downstream service,
                None when no usable response arrived
            url: URL that was called, if known
            body: Response body text
            message: Error message (derived from status if omitted)
        """
        super().__init__(
            message=message or f"status code {remote_status} from {url}",
            status_code=502,
            error_code="REMOTE_ERROR",
            details={"remote_status": remote_status, "url": url, "body": body},
        )
        self.remote_status = remote_status
        self.url = url
        self.body = body


class InvalidRequestError(DeployerError):
    """Raised when the payload does not carry what the action needs (400)."""

    def __init__(
        self,
        message: str = "Invalid deployment request",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            status_code=400,
            error_code="INVALID_REQUEST",
            details=details,
        )
