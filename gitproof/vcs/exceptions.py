"""Exceptions for the GitHub provider."""


class GitHubAPIError(Exception):
    """Error from GitHub API."""

    def __init__(self, message: str, status_code: int | None = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class GitHubNotFoundError(GitHubAPIError):
    """The requested resource (repository, README, file) does not exist."""

    def __init__(self, message: str):
        super().__init__(message, status_code=404)
