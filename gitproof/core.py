"""
Core analysis logic for GitProof.

Each analyzer fetches what it needs through the GitHub provider and reports an
AnalyzerResult instead of raising. get_detailed_repo_metrics is the only place
that turns failed results into default values.
"""

import asyncio
from datetime import date
from typing import Any, NamedTuple

import httpx
from rich.console import Console

from gitproof.cache import ManifestExistenceCache
from gitproof.config import (
    get_max_commit_pages,
    get_max_concurrency,
    is_verbose_enabled,
)
from gitproof.metrics.base import (
    AnalyzerResult,
    CodeQuality,
    CollaborationMetrics,
    RepoMetrics,
)
from gitproof.metrics.code_quality import (
    MANIFEST_PATH,
    compute_code_quality,
    compute_tech_stack,
    decode_manifest,
)
from gitproof.metrics.collaboration import compute_collaboration_metrics
from gitproof.metrics.commit_activity import (
    calculate_longest_streak,
    commit_days,
    compute_commit_metrics,
    filter_commits_by_author,
)
from gitproof.metrics.developer_profile import (
    calculate_growth_score,
    determine_developer_type,
    determine_skill_evolution,
)
from gitproof.metrics.languages import aggregate_languages_by_year, get_last_coded_date
from gitproof.metrics.readme_quality import analyze_readme_content, empty_readme_metrics
from gitproof.vcs.exceptions import GitHubAPIError
from gitproof.vcs.github import GitHubProvider

console = Console()

# Failures an analyzer absorbs: API errors (including 404), transport errors,
# and decode/parse errors (UnicodeDecodeError and JSONDecodeError are ValueErrors)
RECOVERABLE_ERRORS = (GitHubAPIError, httpx.HTTPError, ValueError)


class ProfileSummary(NamedTuple):
    """User-level proof-of-work summary across analyzed repositories."""

    login: str
    total_repos: int
    total_stars: int
    total_forks: int
    developer_type: str
    skill_evolution: str
    growth_score: int  # 1-10, 0 without repositories
    longest_streak_days: int
    last_coded: str | None
    languages_by_year: dict[int, dict[str, int]]
    repositories: list[RepoMetrics]


def _warn(message: str) -> None:
    if is_verbose_enabled():
        console.print(f"  [yellow]⚠️  {message}[/yellow]")


# --- Analyzers ---


async def analyze_readme(
    provider: GitHubProvider, owner: str, repo: str
) -> AnalyzerResult:
    """Fetch and score the README. A missing README is reported as an error."""
    try:
        content = await provider.get_readme(owner, repo)
    except RECOVERABLE_ERRORS as e:
        return AnalyzerResult(error=e)
    return AnalyzerResult(value=analyze_readme_content(content))


async def collect_commits(
    provider: GitHubProvider,
    owner: str,
    repo: str,
    max_pages: int | None = None,
) -> AnalyzerResult:
    """
    Walk the commit listing to the end, or for at most ``max_pages`` pages.

    If a page fails, the commits gathered so far are returned alongside the
    error.
    """
    commits: list[dict[str, Any]] = []
    try:
        async for page in provider.iter_commit_pages(owner, repo, max_pages=max_pages):
            commits.extend(page)
    except RECOVERABLE_ERRORS as e:
        return AnalyzerResult(value=commits, error=e)
    return AnalyzerResult(value=commits)


async def analyze_commits(
    provider: GitHubProvider, owner: str, repo: str
) -> AnalyzerResult:
    collected = await collect_commits(provider, owner, repo)
    return AnalyzerResult(
        value=compute_commit_metrics(collected.value or []),
        error=collected.error,
    )


async def analyze_collaboration(
    provider: GitHubProvider,
    owner: str,
    repo: str,
    open_issues_count: int = 0,
    is_fork: bool = False,
) -> AnalyzerResult:
    """Fetch contributors, issues and pull requests concurrently and count them."""
    try:
        contributors, issues, pulls = await asyncio.gather(
            provider.list_contributors(owner, repo),
            provider.list_issues(owner, repo),
            provider.list_pull_requests(owner, repo),
        )
    except RECOVERABLE_ERRORS as e:
        return AnalyzerResult(error=e)
    return AnalyzerResult(
        value=compute_collaboration_metrics(
            contributors,
            issues,
            pulls,
            open_issues_count=open_issues_count,
            is_fork=is_fork,
        )
    )


async def check_manifest_exists(
    provider: GitHubProvider,
    cache: ManifestExistenceCache,
    owner: str,
    repo: str,
) -> bool:
    """
    Memoized manifest existence check.

    Any failure of the underlying request counts as "no manifest" and is
    cached like a 404, so a repository is never re-checked.
    """

    async def check() -> bool:
        try:
            return await provider.file_exists(owner, repo, MANIFEST_PATH)
        except RECOVERABLE_ERRORS as e:
            _warn(f"Manifest check failed for {owner}/{repo}: {e}")
            return False

    return await cache.get_or_check(owner, repo, check)


async def load_manifest(
    provider: GitHubProvider,
    cache: ManifestExistenceCache,
    owner: str,
    repo: str,
) -> dict[str, Any] | None:
    """Fetch and parse the manifest if the cache says it exists; None otherwise."""
    if not await check_manifest_exists(provider, cache, owner, repo):
        return None
    try:
        encoded = await provider.get_file_content(owner, repo, MANIFEST_PATH)
    except RECOVERABLE_ERRORS as e:
        _warn(f"Unable to read {MANIFEST_PATH} for {owner}/{repo}: {e}")
        return None
    manifest = decode_manifest(encoded)
    if manifest is None:
        _warn(f"Ignoring malformed {MANIFEST_PATH} in {owner}/{repo}")
    return manifest


async def analyze_code_quality(
    provider: GitHubProvider,
    cache: ManifestExistenceCache,
    owner: str,
    repo: str,
) -> AnalyzerResult:
    """
    Classify tests/CI from the root listing and count manifest dependencies.

    A failed root listing is reported as the error while manifest-based
    counts are still returned.
    """
    listing: list[dict[str, Any]] = []
    listing_error: Exception | None = None
    try:
        listing = await provider.get_root_listing(owner, repo)
    except RECOVERABLE_ERRORS as e:
        listing_error = e

    manifest = await load_manifest(provider, cache, owner, repo)
    return AnalyzerResult(
        value=compute_code_quality(listing, manifest), error=listing_error
    )


async def analyze_tech_stack(
    provider: GitHubProvider,
    cache: ManifestExistenceCache,
    owner: str,
    repo: str,
) -> AnalyzerResult:
    manifest = await load_manifest(provider, cache, owner, repo)
    return AnalyzerResult(value=compute_tech_stack(manifest))


# --- Aggregation ---


def default_repo_metrics(owner: str, repo: str) -> RepoMetrics:
    """Minimal record used when a repository could not be analyzed at all."""
    return RepoMetrics(
        owner=owner,
        name=repo,
        full_name=f"{owner}/{repo}",
        description="",
        language=None,
        created_at="",
        updated_at="",
        stars=0,
        forks=0,
        size=0,
        topics=[],
        is_fork=False,
        has_readme=False,
        readme_metrics=empty_readme_metrics(),
        commit_metrics=compute_commit_metrics([]),
        collaboration_metrics=CollaborationMetrics(),
        code_quality=CodeQuality(),
        tech_stack=compute_tech_stack(None),
    )


async def get_detailed_repo_metrics(
    provider: GitHubProvider,
    owner: str,
    repo: str,
    manifest_cache: ManifestExistenceCache | None = None,
) -> RepoMetrics:
    """
    Analyze one repository and assemble its RepoMetrics record.

    Args:
        provider: GitHub provider used for every request
        owner: Repository owner (user or organization)
        repo: Repository name
        manifest_cache: Shared manifest-existence cache. A private one is
                        created when omitted.

    Returns:
        RepoMetrics with defaults substituted for any failed sub-analysis

    Raises:
        GitHubAPIError: If repository metadata cannot be fetched
        httpx.HTTPError: On transport failure while fetching metadata
    """
    cache = manifest_cache if manifest_cache is not None else ManifestExistenceCache()

    repo_data = await provider.get_repository(owner, repo)
    is_fork = bool(repo_data.get("fork", False))

    readme, commits, collaboration, code_quality, tech_stack = await asyncio.gather(
        analyze_readme(provider, owner, repo),
        analyze_commits(provider, owner, repo),
        analyze_collaboration(
            provider,
            owner,
            repo,
            open_issues_count=repo_data.get("open_issues_count") or 0,
            is_fork=is_fork,
        ),
        analyze_code_quality(provider, cache, owner, repo),
        analyze_tech_stack(provider, cache, owner, repo),
    )

    # Retrieval failures and a missing README collapse to the same empty record
    for label, result in (
        ("README", readme),
        ("Commit history", commits),
        ("Collaboration", collaboration),
        ("Root listing", code_quality),
    ):
        if not result.ok:
            _warn(f"{label} unavailable for {owner}/{repo}: {result.error}")

    return RepoMetrics(
        owner=owner,
        name=repo_data.get("name") or repo,
        full_name=repo_data.get("full_name") or f"{owner}/{repo}",
        description=repo_data.get("description") or "",
        language=repo_data.get("language"),
        created_at=repo_data.get("created_at") or "",
        updated_at=repo_data.get("updated_at") or "",
        stars=repo_data.get("stargazers_count") or 0,
        forks=repo_data.get("forks_count") or 0,
        size=repo_data.get("size") or 0,
        topics=list(repo_data.get("topics") or []),
        is_fork=is_fork,
        has_readme=readme.ok,
        readme_metrics=readme.value if readme.ok else empty_readme_metrics(),
        commit_metrics=commits.value,
        collaboration_metrics=collaboration.value
        if collaboration.ok
        else CollaborationMetrics(
            open_issues=repo_data.get("open_issues_count") or 0, is_fork=is_fork
        ),
        code_quality=code_quality.value,
        tech_stack=tech_stack.value,
    )


async def analyze_repositories(
    provider: GitHubProvider,
    repositories: list[tuple[str, str]],
    max_concurrency: int | None = None,
    manifest_cache: ManifestExistenceCache | None = None,
) -> list[RepoMetrics]:
    """
    Analyze many repositories concurrently.

    At most ``max_concurrency`` repositories are in flight. A repository whose
    analysis raises is replaced by default_repo_metrics; the others are
    unaffected. Results keep the input order.
    """
    if not repositories:
        return []

    limit = max_concurrency or get_max_concurrency()
    semaphore = asyncio.Semaphore(max(1, limit))
    cache = manifest_cache if manifest_cache is not None else ManifestExistenceCache()

    async def analyze_with_limit(owner: str, name: str) -> RepoMetrics:
        async with semaphore:
            try:
                return await get_detailed_repo_metrics(provider, owner, name, cache)
            except Exception as e:
                console.print(
                    f"  [yellow]⚠️  Analysis error for {owner}/{name}: {e}[/yellow]"
                )
                return default_repo_metrics(owner, name)

    return list(
        await asyncio.gather(
            *(analyze_with_limit(owner, name) for owner, name in repositories)
        )
    )


# --- Profile ---


async def collect_user_commit_days(
    provider: GitHubProvider,
    repos: list[dict[str, Any]],
    login: str | None = None,
    max_concurrency: int | None = None,
) -> list[date]:
    """
    Commit days across a user's repositories, for the user-wide streak.

    Forks are skipped. When ``login`` is given, only that user's commits
    count. Each repository contributes at most ``max_commit_pages`` pages;
    one whose listing fails contributes the pages it got.
    """
    limit = max_concurrency or get_max_concurrency()
    max_pages = get_max_commit_pages()
    semaphore = asyncio.Semaphore(max(1, limit))

    async def days_for(repo: dict[str, Any]) -> list[date]:
        full_name = repo.get("full_name") or ""
        owner, _, name = full_name.partition("/")
        async with semaphore:
            collected = await collect_commits(
                provider, owner, name, max_pages=max_pages
            )
        if not collected.ok:
            _warn(f"Commit history incomplete for {full_name}: {collected.error}")
        commits = collected.value or []
        if login:
            commits = filter_commits_by_author(commits, login)
        return commit_days(commits)

    candidates = [
        repo
        for repo in repos
        if not repo.get("fork") and "/" in (repo.get("full_name") or "")
    ]
    per_repo = await asyncio.gather(*(days_for(repo) for repo in candidates))
    return [day for days in per_repo for day in days]


async def analyze_profile(
    provider: GitHubProvider,
    limit: int | None = None,
    include_forks: bool = False,
    max_concurrency: int | None = None,
) -> ProfileSummary:
    """
    Analyze the authenticated user's repositories and summarize them.

    Args:
        provider: GitHub provider authenticated as the user
        limit: Analyze only the ``limit`` most recently updated repositories
        include_forks: Also analyze forked repositories
        max_concurrency: Repository fan-out limit

    Returns:
        ProfileSummary with per-repository metrics attached
    """
    user = await provider.get_authenticated_user()
    login = user.get("login") or ""

    repos = await provider.list_user_repositories()
    if not include_forks:
        repos = [repo for repo in repos if not repo.get("fork")]
    if limit is not None:
        repos = repos[:limit]

    pairs = []
    for repo in repos:
        owner, _, name = (repo.get("full_name") or "").partition("/")
        if owner and name:
            pairs.append((owner, name))

    # One fan-out at a time; each honours max_concurrency
    metrics = await analyze_repositories(
        provider, pairs, max_concurrency=max_concurrency
    )
    days = await collect_user_commit_days(
        provider, repos, login=login or None, max_concurrency=max_concurrency
    )

    last_coded = get_last_coded_date(repos)
    return ProfileSummary(
        login=login,
        total_repos=len(repos),
        total_stars=sum(repo.get("stargazers_count") or 0 for repo in repos),
        total_forks=sum(repo.get("forks_count") or 0 for repo in repos),
        developer_type=determine_developer_type(repos),
        skill_evolution=determine_skill_evolution(repos),
        growth_score=calculate_growth_score(repos),
        longest_streak_days=calculate_longest_streak(days),
        last_coded=last_coded.isoformat() if last_coded else None,
        languages_by_year=aggregate_languages_by_year(metrics),
        repositories=metrics,
    )
