"""Fixtures for repository tests."""

import json
from typing import Callable

import httpx
import pytest

from src.clients.meta_client import MetaClient

META_URL = "http://meta.test"


class Recorder:
    """MockTransport handler that records calls and answers from a route table."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.routes: dict[tuple[str, str], Callable[[httpx.Request], httpx.Response]] = {}

    def on(self, method: str, path: str, status_code: int = 200, body=None) -> None:
        self.routes[(method, path)] = lambda request: httpx.Response(
            status_code, json=body
        )

    def on_echo(self, method: str, path: str, status_code: int = 201) -> None:
        """Answer with the request body plus an id, as a create would."""

        def echo(request: httpx.Request) -> httpx.Response:
            body = json.loads(request.content)
            return httpx.Response(status_code, json={"id": "new-id", **body})

        self.routes[(method, path)] = echo

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get((request.method, request.url.path))
        if route is None:
            return httpx.Response(404, text="not found")
        return route(request)

    def calls(self, method: str | None = None) -> list[str]:
        return [
            f"{r.method} {r.url.raw_path.decode()}"
            for r in self.requests
            if method is None or r.method == method
        ]

    def body(self, index: int):
        return json.loads(self.requests[index].content)


@pytest.fixture
def recorder() -> Recorder:
    return Recorder()


@pytest.fixture
async def meta_client(recorder):
    async with MetaClient(
        META_URL, "Bearer t", transport=httpx.MockTransport(recorder)
    ) as client:
        yield client
