"""
GitHub VCS provider implementation for GitProof.

This module implements the GitHub-specific provider using the GitHub REST API
to fetch repository metadata, README, commits, collaboration listings and
manifest files for proof-of-work analysis.
"""

import base64
from collections.abc import AsyncIterator
from typing import Any

import httpx

from gitproof.config import COMMIT_PAGE_SIZE, get_github_token, get_max_commit_pages
from gitproof.http_client import _get_async_http_client
from gitproof.vcs.exceptions import GitHubAPIError, GitHubNotFoundError

# GitHub API endpoint
GITHUB_REST_API = "https://api.github.com"
GITHUB_API_VERSION = "2022-11-28"


class GitHubProvider:
    """GitHub provider using the REST API."""

    def __init__(
        self,
        token: str | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        """
        Initialize GitHub provider.

        Args:
            token: GitHub OAuth or Personal Access Token. If not provided, reads
                   from GITHUB_TOKEN environment variable.
            client: Optional HTTP client. Defaults to the shared pooled client.

        Raises:
            ValueError: If token is not provided and GITHUB_TOKEN env var is not set
        """
        self.token = token or get_github_token()
        if not self.token:
            raise ValueError(
                "GITHUB_TOKEN is required for GitHub provider.\n"
                "\n"
                "To get started:\n"
                "1. Create a GitHub Personal Access Token:\n"
                "   → https://github.com/settings/tokens/new\n"
                "2. Select scope: 'repo' (or 'public_repo' for public data only)\n"
                "3. Set the token:\n"
                "   export GITHUB_TOKEN='your_token_here'  # Linux/macOS\n"
                "   or add to your .env file: GITHUB_TOKEN=your_token_here\n"
            )
        self._client = client

    @property
    def headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.token}",
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": GITHUB_API_VERSION,
        }

    def get_repository_url(self, owner: str, repo: str) -> str:
        """Construct GitHub repository URL."""
        return f"https://github.com/{owner}/{repo}"

    async def _request(
        self, path: str, params: dict[str, Any] | None = None
    ) -> httpx.Response:
        """
        Issue a GET request against the REST API.

        Raises:
            GitHubNotFoundError: If the API answers 404
            GitHubAPIError: For any other non-2xx response
            httpx.HTTPError: On transport failures
        """
        client = self._client or await _get_async_http_client()
        response = await client.get(
            f"{GITHUB_REST_API}{path}", params=params, headers=self.headers
        )
        if response.status_code == 404:
            raise GitHubNotFoundError(f"Not found: {path}")
        if not response.is_success:
            raise GitHubAPIError(
                f"GitHub API error {response.status_code} for {path}: "
                f"{response.text[:200]}",
                status_code=response.status_code,
            )
        return response

    async def _get_json(
        self, path: str, params: dict[str, Any] | None = None
    ) -> Any:
        response = await self._request(path, params)
        # Empty repositories answer some listings with 204 No Content
        if response.status_code == 204 or not response.content:
            return None
        return response.json()

    async def iter_pages(
        self,
        path: str,
        params: dict[str, Any] | None = None,
        max_pages: int | None = None,
        page_size: int = COMMIT_PAGE_SIZE,
    ) -> AsyncIterator[list[dict[str, Any]]]:
        """
        Yield successive pages of a paginated listing.

        Iteration stops on an empty page, a short page (fewer than
        ``page_size`` items) or after ``max_pages`` pages; ``None`` walks to
        the end of the listing. Errors propagate to the consumer, which keeps
        whatever pages it already received.
        """
        page = 1
        while max_pages is None or page <= max_pages:
            query = dict(params or {})
            query.update({"per_page": page_size, "page": page})
            items = await self._get_json(path, query)
            if not items or not isinstance(items, list):
                return
            yield items
            if len(items) < page_size:
                return
            page += 1

    async def _collect(
        self,
        path: str,
        params: dict[str, Any] | None = None,
        max_pages: int | None = None,
    ) -> list[dict[str, Any]]:
        """Concatenate a listing, bounded by ``max_commit_pages`` unless given."""
        if max_pages is None:
            max_pages = get_max_commit_pages()
        collected: list[dict[str, Any]] = []
        async for items in self.iter_pages(path, params, max_pages=max_pages):
            collected.extend(items)
        return collected

    async def get_repository(self, owner: str, repo: str) -> dict[str, Any]:
        """Fetch repository metadata (``GET /repos/{owner}/{repo}``)."""
        data = await self._get_json(f"/repos/{owner}/{repo}")
        if not isinstance(data, dict):
            raise GitHubAPIError(f"Unexpected repository payload for {owner}/{repo}")
        return data

    async def get_readme(self, owner: str, repo: str) -> str:
        """
        Fetch and decode the repository README.

        Raises:
            GitHubNotFoundError: If the repository has no README
            ValueError: If the body cannot be decoded as base64 UTF-8 text
        """
        data = await self._get_json(f"/repos/{owner}/{repo}/readme")
        if not isinstance(data, dict) or "content" not in data:
            raise ValueError(f"README payload for {owner}/{repo} has no content")
        return decode_content(data["content"])

    def iter_commit_pages(
        self, owner: str, repo: str, max_pages: int | None = None
    ) -> AsyncIterator[list[dict[str, Any]]]:
        """
        Page through ``GET /repos/{owner}/{repo}/commits`` (100 per page).

        Without ``max_pages`` the whole history is walked.
        """
        return self.iter_pages(f"/repos/{owner}/{repo}/commits", max_pages=max_pages)

    async def list_contributors(self, owner: str, repo: str) -> list[dict[str, Any]]:
        return await self._collect(f"/repos/{owner}/{repo}/contributors")

    async def list_issues(self, owner: str, repo: str) -> list[dict[str, Any]]:
        """All issues (state=all). GitHub includes pull requests in this listing."""
        return await self._collect(
            f"/repos/{owner}/{repo}/issues", params={"state": "all"}
        )

    async def list_pull_requests(self, owner: str, repo: str) -> list[dict[str, Any]]:
        return await self._collect(
            f"/repos/{owner}/{repo}/pulls", params={"state": "all"}
        )

    async def get_root_listing(self, owner: str, repo: str) -> list[dict[str, Any]]:
        """Root directory entries (``name``/``type``/``path`` records)."""
        data = await self._get_json(f"/repos/{owner}/{repo}/contents/")
        return data if isinstance(data, list) else []

    async def file_exists(self, owner: str, repo: str, path: str) -> bool:
        """
        Check whether a file exists at ``path``.

        Returns False on 404; other errors propagate.
        """
        try:
            await self._request(f"/repos/{owner}/{repo}/contents/{path}")
        except GitHubNotFoundError:
            return False
        return True

    async def get_file_content(self, owner: str, repo: str, path: str) -> str:
        """
        Fetch a single file's encoded ``content`` field.

        Raises:
            GitHubNotFoundError: If the file does not exist
            ValueError: If ``path`` is a directory or has no content
        """
        data = await self._get_json(f"/repos/{owner}/{repo}/contents/{path}")
        if not isinstance(data, dict) or "content" not in data:
            raise ValueError(f"{path} in {owner}/{repo} is not a file")
        return data["content"]

    async def get_authenticated_user(self) -> dict[str, Any]:
        """Fetch the user the token belongs to (``GET /user``)."""
        data = await self._get_json("/user")
        if not isinstance(data, dict):
            raise GitHubAPIError("Unexpected payload for authenticated user")
        return data

    async def list_user_repositories(
        self, max_pages: int | None = None
    ) -> list[dict[str, Any]]:
        """Repositories of the authenticated user, most recently updated first."""
        return await self._collect(
            "/user/repos", params={"sort": "updated"}, max_pages=max_pages
        )


def decode_content(encoded: str) -> str:
    """
    Decode a base64 ``content`` field from the contents API into text.

    Raises:
        ValueError: If the payload is not valid base64 or not UTF-8
    """
    try:
        return base64.b64decode(encoded).decode("utf-8")
    except (ValueError, TypeError) as e:
        raise ValueError(f"Unable to decode content: {e}") from e
