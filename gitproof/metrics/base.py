"""
Shared metric records and serialization helpers.
"""

from typing import Any, NamedTuple


class ReadmeSection(NamedTuple):
    """A Markdown section (header levels 1-3) and the text that follows it."""

    name: str
    content_length: int
    has_code_examples: bool


class CriticalSections(NamedTuple):
    """Presence of the README topics that carry scoring weight."""

    installation: bool = False
    usage: bool = False
    contribution: bool = False
    license: bool = False
    architecture: bool = False


class Formatting(NamedTuple):
    """Markdown formatting features found in a README."""

    has_headers: bool = False
    has_code_blocks: bool = False
    has_lists: bool = False
    has_tables: bool = False
    has_images: bool = False
    has_badges: bool = False


class QualitySignals(NamedTuple):
    """Depth signals; is_boilerplate is a penalty, the rest are bonuses."""

    is_boilerplate: bool = False
    has_api_docs: bool = False
    has_env_setup: bool = False
    has_examples: bool = False
    has_troubleshooting: bool = False


class ReadmeMetrics(NamedTuple):
    """Structured analysis of a repository README."""

    word_count: int
    content: str
    sections: list[ReadmeSection]
    critical_sections: CriticalSections
    formatting: Formatting
    quality_signals: QualitySignals
    overall_score: int  # 0-100


class CommitMetrics(NamedTuple):
    """Commit history summary for one repository."""

    total_commits: int
    last_commit_date: str
    first_commit_date: str
    longest_streak_days: int
    commit_frequency: dict[str, int]  # "YYYY-MM" -> count


class CollaborationMetrics(NamedTuple):
    """Contributor, issue and pull request counts."""

    total_contributors: int = 0
    total_issues: int = 0
    open_issues: int = 0
    closed_issues: int = 0
    total_prs: int = 0
    merged_prs: int = 0
    is_fork: bool = False


class CodeQuality(NamedTuple):
    """Coarse code quality signals from the root listing and manifest."""

    has_tests: bool = False
    test_directory_files: int = 0
    has_ci: bool = False
    has_linter: bool = False
    has_prettier: bool = False
    dependency_count: int = 0
    dev_dependency_count: int = 0


class TechStack(NamedTuple):
    """Frameworks and libraries declared in the dependency manifest."""

    frameworks: list[str]
    major_libraries: list[str]
    dev_tools: list[str]


class RepoMetrics(NamedTuple):
    """The consolidated metrics record for one repository."""

    owner: str
    name: str
    full_name: str
    description: str
    language: str | None
    created_at: str
    updated_at: str
    stars: int
    forks: int
    size: int
    topics: list[str]
    is_fork: bool
    has_readme: bool
    readme_metrics: ReadmeMetrics | None
    commit_metrics: CommitMetrics
    collaboration_metrics: CollaborationMetrics
    code_quality: CodeQuality
    tech_stack: TechStack


class AnalyzerResult(NamedTuple):
    """Outcome of one I/O-backed analyzer.

    Analyzers never raise into the aggregator; they report failure here and
    the aggregator decides which default to substitute.
    """

    value: Any = None
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def to_dict(record: Any) -> Any:
    """
    Convert a metrics record into JSON-serializable builtins.

    NamedTuples become dicts (recursively); lists, tuples and dicts are walked.
    """
    if hasattr(record, "_asdict"):
        return {key: to_dict(value) for key, value in record._asdict().items()}
    if isinstance(record, dict):
        return {str(key): to_dict(value) for key, value in record.items()}
    if isinstance(record, (list, tuple)):
        return [to_dict(item) for item in record]
    return record
