"""Client for the Gestalt management API (Meta)."""

import asyncio
from typing import Any

import httpx

from src.clients.base import Log, RestClient, logger


class MetaClient(RestClient):
    """
    REST client for the management API.

    Every call carries the configured ``Authorization`` header. Calls made
    with the verb helpers block the caller until the response arrives;
    ``submit`` schedules a call as a task for fan-out or fire-and-forget.
    """

    def __init__(
        self,
        base_url: str,
        credentials: str,
        log: Log = logger,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        super().__init__(
            base_url,
            headers={"Authorization": credentials},
            log=log,
            timeout=timeout,
            transport=transport,
        )

    def submit(
        self, method: str, path: str, payload: Any | None = None
    ) -> "asyncio.Task[Any]":
        """
        Schedule a request without waiting for it.

        Returns:
            Task resolving to the handled response (see handle_response)
        """
        return asyncio.ensure_future(self.request(method, path, payload))

    async def get(self, path: str) -> Any:
        return await self.request("GET", path)

    async def post(self, path: str, payload: Any | None = None) -> Any:
        return await self.request("POST", path, payload)

    async def put(self, path: str, payload: Any | None = None) -> Any:
        return await self.request("PUT", path, payload)

    async def patch(self, path: str, payload: Any | None = None) -> Any:
        return await self.request("PATCH", path, payload)

    async def delete(self, path: str) -> Any:
        return await self.request("DELETE", path)
