"""
Tests for language aggregation across repositories.
"""

from datetime import datetime, timezone

from gitproof.core import default_repo_metrics
from gitproof.metrics.languages import (
    aggregate_languages_by_year,
    calculate_language_percentages,
    get_last_coded_date,
)


def _repo(name: str, language: str | None, created_at: str):
    return default_repo_metrics("octo", name)._replace(
        language=language, created_at=created_at
    )


class TestAggregateLanguagesByYear:
    def test_groups_by_creation_year(self):
        repos = [
            _repo("a", "TypeScript", "2021-03-01T00:00:00Z"),
            _repo("b", "TypeScript", "2021-11-01T00:00:00Z"),
            _repo("c", "Python", "2022-01-01T00:00:00Z"),
        ]
        assert aggregate_languages_by_year(repos) == {
            2021: {"TypeScript": 2},
            2022: {"Python": 1},
        }

    def test_null_language_creates_no_entry(self):
        repos = [_repo("a", None, "2020-01-01T00:00:00Z")]
        assert aggregate_languages_by_year(repos) == {}

    def test_bad_date_skipped(self):
        repos = [_repo("a", "Go", "")]
        assert aggregate_languages_by_year(repos) == {}

    def test_empty(self):
        assert aggregate_languages_by_year([]) == {}


def test_language_percentages():
    percentages = calculate_language_percentages({"Python": 750, "Shell": 250})
    assert percentages == {"Python": 75.0, "Shell": 25.0}


def test_language_percentages_empty():
    assert calculate_language_percentages({}) == {}


def test_last_coded_date():
    repos = [
        {"pushed_at": "2024-01-01T00:00:00Z"},
        {"pushed_at": "2024-06-01T00:00:00Z"},
        {"pushed_at": None},
    ]
    assert get_last_coded_date(repos) == datetime(2024, 6, 1, tzinfo=timezone.utc)


def test_last_coded_date_none():
    assert get_last_coded_date([{}]) is None
