"""
Shared fixtures: a fake GitHub REST API served through httpx.MockTransport.
"""

import httpx
import pytest

from gitproof import config
from gitproof.vcs.github import GitHubProvider


class FakeGitHub:
    """
    Routes requests by URL path to canned responses and records every call.

    Unknown paths answer 404, like the real API.
    """

    def __init__(self):
        self.routes = {}
        self.requests: list[httpx.Request] = []

    def add(self, path: str, payload=None, status: int = 200) -> None:
        self.routes[path] = (status, payload)

    def add_pages(self, path: str, pages: list[list], fail_on_page: int | None = None):
        """Serve ``pages[n - 1]`` for ``?page=n``; optionally fail one page with 500."""

        def respond(request: httpx.Request) -> httpx.Response:
            page = int(request.url.params.get("page", "1"))
            if fail_on_page is not None and page == fail_on_page:
                return httpx.Response(500, json={"message": "Server Error"})
            items = pages[page - 1] if page <= len(pages) else []
            return httpx.Response(200, json=items)

        self.routes[path] = respond

    def add_handler(self, path: str, handler) -> None:
        self.routes[path] = handler

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get(request.url.path)
        if route is None:
            return httpx.Response(404, json={"message": "Not Found"})
        if callable(route):
            return route(request)
        status, payload = route
        if payload is None:
            return httpx.Response(status)
        return httpx.Response(status, json=payload)

    def count(self, path: str) -> int:
        return sum(1 for request in self.requests if request.url.path == path)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))


@pytest.fixture(autouse=True)
def reset_config(monkeypatch, tmp_path):
    """Isolate every test from CLI-set globals and the real project config."""
    monkeypatch.setattr(config, "PROJECT_ROOT", tmp_path)
    monkeypatch.delenv("GITPROOF_MAX_CONCURRENCY", raising=False)
    monkeypatch.delenv("GITPROOF_MAX_COMMIT_PAGES", raising=False)
    config.reset_settings()
    yield
    config.reset_settings()


@pytest.fixture
def fake_github():
    return FakeGitHub()


@pytest.fixture
def provider(fake_github):
    return GitHubProvider(token="test-token", client=fake_github.client())
