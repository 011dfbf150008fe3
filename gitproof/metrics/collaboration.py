"""Collaboration metric: contributors, issues and pull requests."""

from typing import Any

from gitproof.metrics.base import CollaborationMetrics


def count_closed_issues(issues: list[dict[str, Any]]) -> int:
    return sum(1 for issue in issues if issue.get("state") == "closed")


def count_merged_pull_requests(pulls: list[dict[str, Any]]) -> int:
    """
    Count merged pull requests.

    A merged PR reports ``state == "closed"`` just like a rejected one, so
    ``merged_at`` is the only reliable merge indicator.
    """
    return sum(1 for pull in pulls if pull.get("merged_at") is not None)


def compute_collaboration_metrics(
    contributors: list[dict[str, Any]],
    issues: list[dict[str, Any]],
    pulls: list[dict[str, Any]],
    open_issues_count: int = 0,
    is_fork: bool = False,
) -> CollaborationMetrics:
    """
    Aggregate independently fetched contributor, issue and PR listings.

    Args:
        contributors: Contributor listing
        issues: Issue listing (state=all); GitHub includes pull requests here
        pulls: Pull request listing (state=all)
        open_issues_count: ``open_issues_count`` from repository metadata
        is_fork: Whether the repository is a fork

    Returns:
        CollaborationMetrics with raw counts
    """
    return CollaborationMetrics(
        total_contributors=len(contributors),
        total_issues=len(issues),
        open_issues=open_issues_count,
        closed_issues=count_closed_issues(issues),
        total_prs=len(pulls),
        merged_prs=count_merged_pull_requests(pulls),
        is_fork=is_fork,
    )
