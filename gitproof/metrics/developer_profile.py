"""
Developer profile heuristics over a user's repositories.

These work on raw repository records as returned by the GitHub REST API
(``name``, ``language``, ``topics``, ``created_at``, ``stargazers_count``,
``forks_count``).
"""

import math
from collections import Counter
from typing import Any

from gitproof.metrics.commit_activity import parse_timestamp

FRONTEND_TOPICS = {"react", "vue", "angular", "frontend", "ui", "ux"}
BACKEND_TOPICS = {"node", "express", "django", "flask", "spring", "backend", "api"}


def _topics(repo: dict[str, Any]) -> set[str]:
    return {topic.lower() for topic in repo.get("topics") or []}


def top_language(repos: list[dict[str, Any]]) -> str:
    counts = Counter(repo["language"] for repo in repos if repo.get("language"))
    if not counts:
        return "various"
    return counts.most_common(1)[0][0]


def determine_developer_type(repos: list[dict[str, Any]]) -> str:
    """Classify a developer as frontend, backend or full stack from topics and names."""
    language = top_language(repos)

    has_frontend = any(
        _topics(repo) & FRONTEND_TOPICS or "frontend" in repo.get("name", "").lower()
        for repo in repos
    )
    has_backend = any(
        _topics(repo) & BACKEND_TOPICS
        or "backend" in repo.get("name", "").lower()
        or "api" in repo.get("name", "").lower()
        for repo in repos
    )

    if has_frontend and has_backend:
        return "Full Stack Developer"
    if has_frontend:
        return f"Frontend Developer ({language})"
    if has_backend:
        return f"Backend Developer ({language})"
    return f"Software Developer ({language})"


def determine_skill_evolution(repos: list[dict[str, Any]]) -> str:
    """Describe where a developer started and how far their projects spread."""
    dated = [
        (created_at, repo)
        for repo in repos
        if (created_at := parse_timestamp(repo.get("created_at"))) is not None
    ]
    if not dated:
        return "No repositories found"

    dated.sort(key=lambda item: item[0])
    first_created, first_repo = dated[0]
    last_created, _ = dated[-1]
    first_language = first_repo.get("language") or "programming"

    if first_created.year == last_created.year:
        return f"Started with {first_language} in {first_created.year}"

    return (
        f"Started with {first_language} in {first_created.year}, "
        f"expanding to {len(dated)} projects across multiple technologies "
        f"by {last_created.year}"
    )


def calculate_growth_score(repos: list[dict[str, Any]]) -> int:
    """
    Growth score on a 1-10 scale (0 when there are no repositories).

    Scoring:
    - Repositories: 0.5 per repo, max 4
    - Stars: 0.1 per star, max 3
    - Forks: 0.2 per fork, max 3
    """
    if not repos:
        return 0

    total_stars = sum(repo.get("stargazers_count") or 0 for repo in repos)
    total_forks = sum(repo.get("forks_count") or 0 for repo in repos)

    repo_score = min(len(repos) * 0.5, 4)
    star_score = min(total_stars * 0.1, 3)
    fork_score = min(total_forks * 0.2, 3)

    # Round half up
    score = math.floor(repo_score + star_score + fork_score + 0.5)
    return min(10, max(1, score))
