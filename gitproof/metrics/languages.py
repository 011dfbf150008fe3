"""Language usage across repositories."""

from datetime import datetime
from typing import Any

from gitproof.metrics.base import RepoMetrics
from gitproof.metrics.commit_activity import parse_timestamp


def aggregate_languages_by_year(
    repos: list[RepoMetrics],
) -> dict[int, dict[str, int]]:
    """
    Count repositories per primary language, grouped by creation year.

    Repositories without a primary language or with an unparseable
    ``created_at`` contribute nothing.
    """
    yearly_languages: dict[int, dict[str, int]] = {}
    for repo in repos:
        if not repo.language:
            continue
        created_at = parse_timestamp(repo.created_at)
        if created_at is None:
            continue
        languages = yearly_languages.setdefault(created_at.year, {})
        languages[repo.language] = languages.get(repo.language, 0) + 1
    return yearly_languages


def calculate_language_percentages(languages: dict[str, int]) -> dict[str, float]:
    """Convert a bytes-per-language map into percentages (0-100)."""
    total_bytes = sum(languages.values())
    if total_bytes <= 0:
        return {}
    return {
        language: (byte_count / total_bytes) * 100
        for language, byte_count in languages.items()
    }


def get_last_coded_date(repos: list[dict[str, Any]]) -> datetime | None:
    """Latest ``pushed_at`` across raw repository records."""
    pushed = [
        timestamp
        for repo in repos
        if (timestamp := parse_timestamp(repo.get("pushed_at"))) is not None
    ]
    return max(pushed) if pushed else None
