"""Tests for GitHub VCS provider."""

import base64
from unittest.mock import patch

import pytest

from gitproof.config import set_max_commit_pages
from gitproof.vcs.exceptions import GitHubAPIError, GitHubNotFoundError
from gitproof.vcs.github import GitHubProvider, decode_content


def encode_content(text: str) -> str:
    return base64.b64encode(text.encode("utf-8")).decode("ascii")


def test_github_provider_requires_token():
    """Test that GitHubProvider requires a token."""
    with patch.dict("os.environ", {}, clear=True):
        with pytest.raises(ValueError, match="GITHUB_TOKEN is required"):
            GitHubProvider()


def test_github_provider_reads_token_from_env():
    """Test that GitHubProvider reads token from environment."""
    with patch.dict("os.environ", {"GITHUB_TOKEN": "env_token"}):
        provider = GitHubProvider()
        assert provider.token == "env_token"


def test_github_provider_headers():
    provider = GitHubProvider(token="test_token")
    assert provider.headers["Authorization"] == "Bearer test_token"
    assert provider.headers["Accept"] == "application/vnd.github+json"
    assert provider.headers["X-GitHub-Api-Version"] == "2022-11-28"


def test_github_provider_get_repository_url():
    provider = GitHubProvider(token="test_token")
    assert provider.get_repository_url("owner", "repo") == "https://github.com/owner/repo"


def test_decode_content_handles_wrapped_base64():
    encoded = encode_content("# Title\n")
    wrapped = encoded[:4] + "\n" + encoded[4:]
    assert decode_content(wrapped) == "# Title\n"


def test_decode_content_rejects_invalid_utf8():
    with pytest.raises(ValueError):
        decode_content("/w==")


@pytest.mark.asyncio
async def test_get_repository_sends_auth_header(provider, fake_github):
    fake_github.add("/repos/octo/hello", {"name": "hello", "full_name": "octo/hello"})

    data = await provider.get_repository("octo", "hello")

    assert data["full_name"] == "octo/hello"
    assert fake_github.requests[0].headers["Authorization"] == "Bearer test-token"


@pytest.mark.asyncio
async def test_get_repository_not_found(provider):
    with pytest.raises(GitHubNotFoundError) as exc_info:
        await provider.get_repository("octo", "missing")
    assert exc_info.value.status_code == 404


@pytest.mark.asyncio
async def test_server_error_raises_api_error(provider, fake_github):
    fake_github.add("/repos/octo/hello", {"message": "boom"}, status=502)

    with pytest.raises(GitHubAPIError) as exc_info:
        await provider.get_repository("octo", "hello")
    assert exc_info.value.status_code == 502


@pytest.mark.asyncio
async def test_get_readme_decodes_content(provider, fake_github):
    fake_github.add(
        "/repos/octo/hello/readme",
        {"content": encode_content("# Hello\nworld\n"), "encoding": "base64"},
    )
    assert await provider.get_readme("octo", "hello") == "# Hello\nworld\n"


@pytest.mark.asyncio
async def test_commit_pages_stop_on_short_page(provider, fake_github):
    full_page = [{"sha": str(i)} for i in range(100)]
    short_page = [{"sha": "last"}]
    fake_github.add_pages(
        "/repos/octo/hello/commits", [full_page, short_page, full_page]
    )

    pages = [page async for page in provider.iter_commit_pages("octo", "hello")]

    assert [len(page) for page in pages] == [100, 1]
    assert fake_github.count("/repos/octo/hello/commits") == 2
    first = fake_github.requests[0].url.params
    assert first["per_page"] == "100"
    assert first["page"] == "1"


@pytest.mark.asyncio
async def test_commit_pages_stop_on_empty_page(provider, fake_github):
    full_page = [{"sha": str(i)} for i in range(100)]
    fake_github.add_pages("/repos/octo/hello/commits", [full_page])

    pages = [page async for page in provider.iter_commit_pages("octo", "hello")]

    assert len(pages) == 1
    assert fake_github.count("/repos/octo/hello/commits") == 2


@pytest.mark.asyncio
async def test_commit_pages_respect_max_pages(provider, fake_github):
    full_page = [{"sha": str(i)} for i in range(100)]
    fake_github.add_pages("/repos/octo/hello/commits", [full_page] * 5)

    pages = [
        page async for page in provider.iter_commit_pages("octo", "hello", max_pages=3)
    ]

    assert len(pages) == 3


@pytest.mark.asyncio
async def test_empty_repository_commits_conflict(provider, fake_github):
    """GitHub answers 409 for the commit listing of an empty repository."""
    fake_github.add(
        "/repos/octo/empty/commits",
        {"message": "Git Repository is empty."},
        status=409,
    )

    with pytest.raises(GitHubAPIError):
        [page async for page in provider.iter_commit_pages("octo", "empty")]


@pytest.mark.asyncio
async def test_list_issues_requests_all_states(provider, fake_github):
    fake_github.add_pages("/repos/octo/hello/issues", [[{"state": "open"}]])

    issues = await provider.list_issues("octo", "hello")

    assert issues == [{"state": "open"}]
    assert fake_github.requests[0].url.params["state"] == "all"


@pytest.mark.asyncio
async def test_contributors_no_content(provider, fake_github):
    fake_github.add("/repos/octo/empty/contributors", None, status=204)
    assert await provider.list_contributors("octo", "empty") == []


@pytest.mark.asyncio
async def test_file_exists(provider, fake_github):
    fake_github.add("/repos/octo/hello/contents/package.json", {"content": ""})

    assert await provider.file_exists("octo", "hello", "package.json") is True
    assert await provider.file_exists("octo", "hello", "missing.json") is False


@pytest.mark.asyncio
async def test_file_exists_propagates_other_errors(provider, fake_github):
    fake_github.add("/repos/octo/hello/contents/package.json", {}, status=500)

    with pytest.raises(GitHubAPIError):
        await provider.file_exists("octo", "hello", "package.json")


@pytest.mark.asyncio
async def test_get_root_listing(provider, fake_github):
    listing = [{"name": "src", "type": "dir"}]
    fake_github.add("/repos/octo/hello/contents/", listing)

    assert await provider.get_root_listing("octo", "hello") == listing


@pytest.mark.asyncio
async def test_get_file_content_rejects_directory(provider, fake_github):
    fake_github.add("/repos/octo/hello/contents/package.json", [{"name": "x"}])

    with pytest.raises(ValueError):
        await provider.get_file_content("octo", "hello", "package.json")


@pytest.mark.asyncio
async def test_list_user_repositories(provider, fake_github):
    fake_github.add_pages("/user/repos", [[{"full_name": "octo/hello"}]])

    repos = await provider.list_user_repositories()

    assert repos == [{"full_name": "octo/hello"}]
    assert fake_github.requests[0].url.params["sort"] == "updated"


@pytest.mark.asyncio
async def test_commit_pages_without_limit_walk_whole_history(provider, fake_github):
    full_page = [{"sha": str(i)} for i in range(100)]
    fake_github.add_pages(
        "/repos/octo/hello/commits", [full_page] * 12 + [[{"sha": "x"}]]
    )

    pages = [page async for page in provider.iter_commit_pages("octo", "hello")]

    assert sum(len(page) for page in pages) == 1201


@pytest.mark.asyncio
async def test_listings_bounded_by_max_commit_pages(provider, fake_github):
    full_page = [{"login": str(i)} for i in range(100)]
    fake_github.add_pages("/repos/octo/hello/contributors", [full_page] * 5)
    set_max_commit_pages(2)

    contributors = await provider.list_contributors("octo", "hello")

    assert len(contributors) == 200
