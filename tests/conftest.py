import asyncio
import json
from typing import Any, AsyncGenerator

import httpx
import pytest
import pytest_asyncio

from repo_sandbox.config import DeployConfig

API_HOST = "api.github.com"
RAW_HOST = "raw.githubusercontent.com"
SANDBOX_HOST = "codesandbox.io"


class FakeHosts:
    """In-memory source host, raw content host and sandbox host."""

    def __init__(self) -> None:
        self.branches: dict[str, list[str]] = {}
        self.trees: dict[str, list[dict[str, str]]] = {}
        self.files: dict[str, tuple[str, bytes]] = {}
        self.failing_files: set[str] = set()
        self.gates: dict[str, asyncio.Event] = {}
        self.submissions: list[dict[str, Any]] = []
        self.requests: list[httpx.Request] = []
        self.define_status = 200
        self.define_body: dict[str, Any] | None = None
        self._sandbox_count = 0

    def add_repo(self, account: str, repository: str, branch: str, files: dict[str, tuple[str, bytes]]) -> None:
        key = f"{account}/{repository}"
        self.branches.setdefault(key, []).append(branch)
        self.trees[f"{key}/{branch}"] = [{"path": path, "type": "blob"} for path in files]
        for path, (content_type, body) in files.items():
            self.files[f"/{key}/{branch}/{path}"] = (content_type, body)

    @property
    def raw_requests(self) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.host == RAW_HOST]

    async def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        host = request.url.host
        path = request.url.path

        if host == API_HOST:
            return await self._api(path)
        if host == RAW_HOST:
            return self._raw(path)
        if host == SANDBOX_HOST and path == "/api/v1/sandboxes/define":
            return self._define(request)
        return httpx.Response(404)

    async def _api(self, path: str) -> httpx.Response:
        rest = path.removeprefix("/repos/")
        if "/git/trees/" in rest:
            repo, branch = rest.split("/git/trees/", 1)
            tree = self.trees.get(f"{repo}/{branch}")
            if tree is None:
                return httpx.Response(404, json={"message": "Not Found"})
            return httpx.Response(200, json={"sha": "abc", "tree": tree, "truncated": False})

        if rest.endswith("/branches"):
            repo = rest.removesuffix("/branches")
            gate = self.gates.get(repo)
            if gate is not None:
                await gate.wait()
            if repo not in self.branches:
                return httpx.Response(404, json={"message": "Not Found"})
            return httpx.Response(200, json=[{"name": name} for name in self.branches[repo]])

        return httpx.Response(404)

    def _raw(self, path: str) -> httpx.Response:
        if path in self.failing_files:
            return httpx.Response(500, text="boom")
        if path not in self.files:
            return httpx.Response(404, text="404: Not Found")
        content_type, body = self.files[path]
        return httpx.Response(200, headers={"content-type": content_type}, content=body)

    def _define(self, request: httpx.Request) -> httpx.Response:
        payload = json.loads(request.content)
        self.submissions.append(payload)
        if self.define_status >= 400:
            return httpx.Response(self.define_status, json={"errors": ["rejected"]})
        if self.define_body is not None:
            return httpx.Response(200, json=self.define_body)
        self._sandbox_count += 1
        return httpx.Response(200, json={"sandbox_id": f"sbx{self._sandbox_count}"})


@pytest.fixture
def config() -> DeployConfig:
    return DeployConfig(debounce_delay=0.01, reaper_interval=0.01, idle_timeout=60.0)


@pytest.fixture
def hosts() -> FakeHosts:
    return FakeHosts()


@pytest_asyncio.fixture
async def http_client(hosts: FakeHosts) -> AsyncGenerator[httpx.AsyncClient, None]:
    client = httpx.AsyncClient(transport=httpx.MockTransport(hosts.handler))
    yield client
    await client.aclose()
