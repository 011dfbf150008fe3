"""
VCS access layer for GitProof.

GitHub is the only supported platform; the provider talks to the REST API.
"""

from gitproof.vcs.exceptions import GitHubAPIError, GitHubNotFoundError
from gitproof.vcs.github import GitHubProvider

__all__ = [
    "GitHubAPIError",
    "GitHubNotFoundError",
    "GitHubProvider",
]
