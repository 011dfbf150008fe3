"""Commit activity metric: volume, monthly frequency and longest streak."""

from collections.abc import Iterable
from datetime import date, datetime, timezone
from typing import Any

from gitproof.metrics.base import CommitMetrics


def parse_timestamp(value: str | None) -> datetime | None:
    """
    Parse an ISO-8601 timestamp as returned by the GitHub API.

    The offset of the timestamp is kept as-is; naive values are assumed UTC.
    Returns None for missing or malformed values.
    """
    if not value or not isinstance(value, str):
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def get_author_date(commit: dict[str, Any]) -> str | None:
    """Extract ``commit.author.date`` from a REST commit object."""
    commit_info = commit.get("commit") or {}
    author = commit_info.get("author") or {}
    author_date = author.get("date")
    return author_date if isinstance(author_date, str) and author_date else None


def sort_commits_chronologically(
    commits: list[dict[str, Any]],
) -> list[dict[str, Any]]:
    """
    Order commits oldest to newest by author date.

    Commits without a parseable author date keep their relative order and
    are placed before dated ones.
    """
    epoch = datetime.min.replace(tzinfo=timezone.utc)

    def sort_key(commit: dict[str, Any]) -> datetime:
        return parse_timestamp(get_author_date(commit)) or epoch

    return sorted(commits, key=sort_key)


def calculate_monthly_frequency(timestamps: Iterable[datetime]) -> dict[str, int]:
    """Count commits per zero-padded ``YYYY-MM`` month."""
    frequency: dict[str, int] = {}
    for timestamp in timestamps:
        key = f"{timestamp.year:04d}-{timestamp.month:02d}"
        frequency[key] = frequency.get(key, 0) + 1
    return frequency


def calculate_longest_streak(days: Iterable[date]) -> int:
    """
    Longest run of consecutive calendar days containing at least one commit.

    Duplicate days count once. No days gives 0, a single day gives 1.
    """
    unique_days = sorted(set(days))
    if not unique_days:
        return 0

    current_streak = 1
    longest_streak = 1
    for previous, current in zip(unique_days, unique_days[1:]):
        gap = (current - previous).days
        if gap == 1:
            current_streak += 1
            longest_streak = max(longest_streak, current_streak)
        elif gap > 1:
            current_streak = 1

    return longest_streak


def commit_days(commits: Iterable[dict[str, Any]]) -> list[date]:
    """Calendar days (in each timestamp's own offset) of dated commits."""
    days = []
    for commit in commits:
        timestamp = parse_timestamp(get_author_date(commit))
        if timestamp is not None:
            days.append(timestamp.date())
    return days


def compute_commit_metrics(commits: list[dict[str, Any]]) -> CommitMetrics:
    """
    Summarize a fully paginated commit list.

    The total counts every commit object, including those without an author
    date; frequency, streak and first/last dates only use dated commits.
    """
    ordered = sort_commits_chronologically(commits)

    dated: list[tuple[str, datetime]] = []
    for commit in ordered:
        raw_date = get_author_date(commit)
        timestamp = parse_timestamp(raw_date)
        if raw_date is not None and timestamp is not None:
            dated.append((raw_date, timestamp))

    timestamps = [timestamp for _, timestamp in dated]

    return CommitMetrics(
        total_commits=len(commits),
        last_commit_date=dated[-1][0] if dated else "",
        first_commit_date=dated[0][0] if dated else "",
        longest_streak_days=calculate_longest_streak(
            timestamp.date() for timestamp in timestamps
        ),
        commit_frequency=calculate_monthly_frequency(timestamps),
    )


def filter_commits_by_author(
    commits: list[dict[str, Any]], login: str
) -> list[dict[str, Any]]:
    """
    Keep commits authored by ``login``.

    A commit matches when its linked GitHub account has that login, or when
    the git author email contains it (both case-insensitive).
    """
    needle = login.lower()
    matched = []
    for commit in commits:
        account = commit.get("author") or {}
        account_login = (account.get("login") or "").lower()
        git_author = (commit.get("commit") or {}).get("author") or {}
        email = (git_author.get("email") or "").lower()
        if account_login == needle or needle in email:
            matched.append(commit)
    return matched
