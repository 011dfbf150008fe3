"""
Configuration management for GitProof.

Settings are resolved from (highest priority first):
1. Values set explicitly via the set_* functions (CLI flags)
2. Environment variables (a .env file is loaded via python-dotenv)
3. .gitproof.toml (local config)
4. pyproject.toml [tool.gitproof] (project-level config)
5. Built-in defaults
"""

import os
import tomllib
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# Directory searched for .gitproof.toml and pyproject.toml.
# None means the current working directory at lookup time.
PROJECT_ROOT: Path | None = None

# Global configuration for SSL verification
# Default: True (verify SSL certificates)
# Can be set to False by CLI --insecure flag
VERIFY_SSL = True

# Commit listing page size is fixed by the GitHub REST API maximum
COMMIT_PAGE_SIZE = 100
DEFAULT_MAX_COMMIT_PAGES = 10
DEFAULT_MAX_CONCURRENCY = 5

# Global settings (can be overridden)
_MAX_CONCURRENCY: int | None = None
_MAX_COMMIT_PAGES: int | None = None
_VERBOSE: bool | None = None


def load_config_file(config_path: Path) -> dict:
    """Load a TOML configuration file."""
    if not config_path.exists():
        return {}
    try:
        with open(config_path, "rb") as f:
            return tomllib.load(f)
    except Exception as e:
        raise ValueError(f"Failed to load config from {config_path}: {e}") from e


def get_tool_config() -> dict[str, Any]:
    """
    Load the [tool.gitproof] table.

    Files are looked up in PROJECT_ROOT, or the current working directory
    when it is unset.

    Priority:
    1. .gitproof.toml (local config, highest priority)
    2. pyproject.toml (project-level config, fallback)

    Returns:
        The first non-empty [tool.gitproof] table found, or an empty dict.
    """
    root = PROJECT_ROOT if PROJECT_ROOT is not None else Path.cwd()
    for filename in (".gitproof.toml", "pyproject.toml"):
        config = load_config_file(root / filename)
        tool_config = config.get("tool", {}).get("gitproof", {})
        if tool_config:
            return tool_config
    return {}


def get_github_token() -> str | None:
    """Return the GitHub bearer token from the GITHUB_TOKEN environment variable."""
    token = os.getenv("GITHUB_TOKEN")
    return token or None


def set_verify_ssl(verify: bool) -> None:
    """
    Set the SSL verification setting globally.

    Args:
        verify: Whether to verify SSL certificates.
    """
    global VERIFY_SSL
    VERIFY_SSL = verify


def get_verify_ssl() -> bool:
    """
    Get the current SSL verification setting.

    Returns:
        Whether SSL verification is enabled.
    """
    return VERIFY_SSL


def _get_int_setting(explicit: int | None, env_var: str, key: str, default: int) -> int:
    if explicit is not None:
        return explicit

    env_value = os.getenv(env_var)
    if env_value:
        try:
            return int(env_value)
        except ValueError:
            pass

    tool_config = get_tool_config()
    if key in tool_config:
        return int(tool_config[key])

    return default


def get_max_concurrency() -> int:
    """
    Get the number of repositories analyzed concurrently.

    Priority:
    1. Explicitly set value via set_max_concurrency()
    2. GITPROOF_MAX_CONCURRENCY environment variable
    3. max_concurrency in config files
    4. Default: 5

    Returns:
        Maximum number of in-flight repository analyses.
    """
    return _get_int_setting(
        _MAX_CONCURRENCY,
        "GITPROOF_MAX_CONCURRENCY",
        "max_concurrency",
        DEFAULT_MAX_CONCURRENCY,
    )


def set_max_concurrency(value: int) -> None:
    global _MAX_CONCURRENCY
    _MAX_CONCURRENCY = value


def get_max_commit_pages() -> int:
    """
    Get the maximum number of commit pages fetched per repository.

    Priority:
    1. Explicitly set value via set_max_commit_pages()
    2. GITPROOF_MAX_COMMIT_PAGES environment variable
    3. max_commit_pages in config files
    4. Default: 10 (1000 commits)
    """
    return _get_int_setting(
        _MAX_COMMIT_PAGES,
        "GITPROOF_MAX_COMMIT_PAGES",
        "max_commit_pages",
        DEFAULT_MAX_COMMIT_PAGES,
    )


def set_max_commit_pages(value: int) -> None:
    global _MAX_COMMIT_PAGES
    _MAX_COMMIT_PAGES = value


def is_verbose_enabled() -> bool:
    """
    Check if verbose output is enabled.

    Priority:
    1. Explicitly set value via set_verbose()
    2. verbose in config files
    3. Default: False
    """
    if _VERBOSE is not None:
        return _VERBOSE
    return bool(get_tool_config().get("verbose", False))


def set_verbose(enabled: bool) -> None:
    global _VERBOSE
    _VERBOSE = enabled


def reset_settings() -> None:
    """Drop explicitly set values so the next lookup re-resolves them."""
    global VERIFY_SSL, _MAX_CONCURRENCY, _MAX_COMMIT_PAGES, _VERBOSE
    VERIFY_SSL = True
    _MAX_CONCURRENCY = None
    _MAX_COMMIT_PAGES = None
    _VERBOSE = None
