"""Shared HTTP client plumbing for the management API and GitLab."""

import logging
from typing import Any

import httpx

from src.exceptions import RemoteError
from src.logging.config import get_logger

logger = get_logger(__name__)

Log = logging.Logger | logging.LoggerAdapter


def handle_response(response: httpx.Response, log: Log = logger) -> Any:
    """
    Map an HTTP response to a value.

    - 404: None (the resource is absent, never an error)
    - >= 300: logged with its body, then RemoteError
    - 204: None
    - JSON content type: parsed body
    - anything else: raw text

    Args:
        response: Completed httpx response
        log: Logger receiving the warning for failed calls

    Returns:
        Parsed JSON, raw text, or None

    Raises:
        RemoteError: For any status >= 300 other than 404
    """
    code = response.status_code
    if code == 404:
        return None
    if code >= 300:
        log.warning(f"WARNING: status code {code} from {response.request.url}")
        log.warning(f"response: {response.text}")
        raise RemoteError(
            remote_status=code, url=str(response.request.url), body=response.text
        )
    if code == 204:
        return None
    content_type = response.headers.get("content-type", "")
    if content_type.startswith("application/json"):
        return response.json()
    return response.text


def expect_list(data: Any, url: str) -> list[Any]:
    """
    Treat a collection body as a list; absent (None) is empty.

    Raises:
        RemoteError: If the body is anything other than a JSON list
    """
    if data is None:
        return []
    if not isinstance(data, list):
        raise RemoteError(
            remote_status=None,
            url=url,
            body=str(data),
            message=f"expected a list from {url}, got {type(data).__name__}",
        )
    return data


class RestClient:
    """
    Async JSON REST client bound to one base URL and one auth header.

    Use as an async context manager; the underlying connection pool is
    closed on exit.
    """

    def __init__(
        self,
        base_url: str,
        headers: dict[str, str],
        log: Log = logger,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            base_url: Base URL every path is appended to
            headers: Headers sent with every request (credentials)
            log: Request-scoped logger
            timeout: Transport timeout in seconds, None to wait indefinitely
            transport: Optional httpx transport (tests inject MockTransport)
        """
        self.base_url = base_url.rstrip("/")
        self.log = log
        self.client = httpx.AsyncClient(
            headers=headers, timeout=timeout, transport=transport
        )

    async def close(self) -> None:
        """Close the HTTP client."""
        await self.client.aclose()

    async def __aenter__(self) -> "RestClient":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    def url_for(self, path: str) -> str:
        """Absolute paths (already full URLs) pass through unchanged."""
        if path.startswith("http://") or path.startswith("https://"):
            return path
        return self.base_url + path

    async def request(
        self, method: str, path: str, payload: Any | None = None
    ) -> Any:
        """
        Issue one request and block until its response is handled.

        Args:
            method: HTTP method
            path: Path relative to the base URL, or an absolute URL
            payload: JSON-serializable body, omitted when None

        Returns:
            See handle_response

        Raises:
            RemoteError: For failed statuses and transport failures
        """
        url = self.url_for(path)
        self.log.debug(f"{method} {url}")
        try:
            if payload is not None:
                response = await self.client.request(method, url, json=payload)
            else:
                response = await self.client.request(method, url)
        except httpx.HTTPError as exc:
            message = f"{type(exc).__name__} calling {method} {url}: {exc}"
            self.log.warning(f"WARNING: {message}")
            raise RemoteError(remote_status=None, url=url, message=message) from exc
        return handle_response(response, self.log)
