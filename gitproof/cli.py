"""
Command-line interface for GitProof.
"""

import asyncio
import functools
import json
from collections.abc import Callable, Coroutine
from typing import Any, TypeVar

import httpx
import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from gitproof.cache import ManifestExistenceCache
from gitproof.config import set_max_concurrency, set_verbose, set_verify_ssl
from gitproof.core import ProfileSummary, analyze_profile, analyze_repositories
from gitproof.http_client import close_async_http_client
from gitproof.metrics.base import RepoMetrics, to_dict
from gitproof.vcs.exceptions import GitHubAPIError
from gitproof.vcs.github import GitHubProvider

T = TypeVar("T")

# --- Typer App ---
app = typer.Typer(help="Proof-of-work metrics for GitHub repositories.")
console = Console()

# --- Helper Functions ---


def syncify(func: Callable[..., Coroutine[Any, Any, T]]) -> Callable[..., T]:
    """Run an async Typer command to completion, closing the shared client after."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> T:
        async def run() -> T:
            try:
                return await func(*args, **kwargs)
            finally:
                await close_async_http_client()

        return asyncio.run(run())

    return wrapper


def parse_repository_name(value: str) -> tuple[str, str]:
    """
    Parse an ``owner/name`` argument.

    Also accepts full ``https://github.com/owner/name`` URLs.

    Raises:
        ValueError: If the value does not name exactly one repository
    """
    cleaned = value.strip().removesuffix(".git").rstrip("/")
    for prefix in ("https://github.com/", "http://github.com/", "github.com/"):
        if cleaned.startswith(prefix):
            cleaned = cleaned[len(prefix) :]
            break
    owner, _, name = cleaned.partition("/")
    if not owner or not name or "/" in name:
        raise ValueError(f"Invalid repository '{value}'. Expected OWNER/NAME.")
    return owner, name


def _create_provider() -> GitHubProvider:
    try:
        return GitHubProvider()
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(code=1) from None


def _apply_options(verbose: bool, insecure: bool, concurrency: int | None) -> None:
    set_verbose(verbose)
    set_verify_ssl(not insecure)
    if concurrency is not None:
        set_max_concurrency(concurrency)


def _yes_no(value: bool) -> str:
    return "[green]yes[/green]" if value else "[dim]no[/dim]"


def display_results(results: list[RepoMetrics]) -> None:
    """Display repository metrics in a rich table."""
    table = Table(title="GitProof Repository Report")
    table.add_column("Repository", justify="left", style="cyan", no_wrap=True)
    table.add_column("README", justify="center")
    table.add_column("Commits", justify="right")
    table.add_column("Streak", justify="right")
    table.add_column("Contributors", justify="right")
    table.add_column("PRs merged", justify="right")
    table.add_column("Tests", justify="center")
    table.add_column("CI", justify="center")
    table.add_column("Frameworks", justify="left")

    for result in results:
        readme_score = (
            result.readme_metrics.overall_score if result.readme_metrics else 0
        )
        score_color = "green"
        if readme_score < 50:
            score_color = "red"
        elif readme_score < 80:
            score_color = "yellow"

        collaboration = result.collaboration_metrics
        table.add_row(
            result.full_name,
            f"[{score_color}]{readme_score}/100[/{score_color}]"
            if result.has_readme
            else "[dim]missing[/dim]",
            str(result.commit_metrics.total_commits),
            f"{result.commit_metrics.longest_streak_days}d",
            str(collaboration.total_contributors),
            f"{collaboration.merged_prs}/{collaboration.total_prs}",
            _yes_no(result.code_quality.has_tests),
            _yes_no(result.code_quality.has_ci),
            ", ".join(result.tech_stack.frameworks) or "-",
        )

    console.print(table)


def display_profile(summary: ProfileSummary) -> None:
    """Display a profile summary followed by the per-repository table."""
    console.print(f"\n[bold cyan]{summary.login or 'GitHub user'}[/bold cyan]")
    console.print(f"  Developer type: {summary.developer_type}")
    console.print(f"  Skill evolution: {summary.skill_evolution}")
    console.print(f"  Growth score: [magenta]{summary.growth_score}/10[/magenta]")
    console.print(
        f"  Repositories: {summary.total_repos}  "
        f"Stars: {summary.total_stars}  Forks: {summary.total_forks}"
    )
    console.print(f"  Longest commit streak: {summary.longest_streak_days} day(s)")
    console.print(f"  Last coded: {summary.last_coded or 'N/A'}")

    if summary.languages_by_year:
        table = Table(title="Languages by Year", show_header=True)
        table.add_column("Year", style="cyan")
        table.add_column("Languages", justify="left")
        for year in sorted(summary.languages_by_year):
            languages = summary.languages_by_year[year]
            ranked = sorted(languages.items(), key=lambda item: (-item[1], item[0]))
            table.add_row(
                str(year), ", ".join(f"{name} ({count})" for name, count in ranked)
            )
        console.print(table)

    if summary.repositories:
        display_results(summary.repositories)


# --- Commands ---


@app.command()
@syncify
async def analyze(
    repositories: list[str] = typer.Argument(
        ..., help="Repositories to analyze, as OWNER/NAME or GitHub URLs."
    ),
    output_json: bool = typer.Option(
        False, "--json", help="Print RepoMetrics records as JSON."
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Report sub-analyses that fell back to default values.",
    ),
    insecure: bool = typer.Option(
        False, "--insecure", help="Disable SSL certificate verification."
    ),
    concurrency: int | None = typer.Option(
        None,
        "--concurrency",
        "-c",
        min=1,
        help="Maximum repositories analyzed at once (default: 5).",
    ),
):
    """Analyze README quality, commit activity, collaboration and stack of repositories."""
    _apply_options(verbose, insecure, concurrency)

    try:
        pairs = [parse_repository_name(name) for name in repositories]
    except ValueError as e:
        console.print(f"[yellow]⚠️  {e}[/yellow]")
        raise typer.Exit(code=1) from None

    provider = _create_provider()
    if not output_json:
        names = ", ".join(f"{owner}/{name}" for owner, name in pairs)
        console.print(f"Analyzing [bold cyan]{names}[/bold cyan]...")

    results = await analyze_repositories(
        provider, pairs, manifest_cache=ManifestExistenceCache()
    )

    if output_json:
        typer.echo(json.dumps(to_dict(results), indent=2))
    else:
        display_results(results)


@app.command()
@syncify
async def profile(
    limit: int | None = typer.Option(
        None,
        "--limit",
        "-l",
        min=1,
        help="Only analyze the N most recently updated repositories.",
    ),
    include_forks: bool = typer.Option(
        False, "--include-forks", help="Also analyze forked repositories."
    ),
    output_json: bool = typer.Option(
        False, "--json", help="Print the profile summary as JSON."
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Report sub-analyses that fell back to default values.",
    ),
    insecure: bool = typer.Option(
        False, "--insecure", help="Disable SSL certificate verification."
    ),
    concurrency: int | None = typer.Option(
        None,
        "--concurrency",
        "-c",
        min=1,
        help="Maximum repositories analyzed at once (default: 5).",
    ),
):
    """Build a proof-of-work profile for the user that owns GITHUB_TOKEN."""
    _apply_options(verbose, insecure, concurrency)
    provider = _create_provider()

    if not output_json:
        console.print("🔍 Collecting repositories for the authenticated user...")

    try:
        summary = await analyze_profile(
            provider, limit=limit, include_forks=include_forks
        )
    except (GitHubAPIError, httpx.HTTPError) as e:
        console.print(f"[red]Profile analysis failed: {escape(str(e))}[/red]")
        raise typer.Exit(code=1) from None

    if output_json:
        typer.echo(json.dumps(to_dict(summary), indent=2))
    else:
        display_profile(summary)


if __name__ == "__main__":
    app()
