"""Code quality and tech stack signals from the root listing and manifest."""

import base64
import json
from typing import Any

from gitproof.metrics.base import CodeQuality, TechStack

MANIFEST_PATH = "package.json"

TEST_DIRECTORY_NAMES = {"test", "tests", "__tests__"}
CI_DIRECTORY_NAME = ".github"

# Dependency key -> framework display name
FRAMEWORK_DEPENDENCIES = {
    "react": "React",
    "vue": "Vue",
    "angular": "Angular",
    "@angular/core": "Angular",
    "next": "Next.js",
}


def has_test_directory(listing: list[dict[str, Any]]) -> bool:
    return any(
        entry.get("type") == "dir" and entry.get("name") in TEST_DIRECTORY_NAMES
        for entry in listing
    )


def has_ci_configuration(listing: list[dict[str, Any]]) -> bool:
    """A top-level .github directory, or any top-level file whose name has '.yml'."""
    for entry in listing:
        entry_type = entry.get("type")
        name = entry.get("name") or ""
        if entry_type == "dir" and name == CI_DIRECTORY_NAME:
            return True
        if entry_type == "file" and ".yml" in name:
            return True
    return False


def decode_manifest(encoded_content: str) -> dict[str, Any] | None:
    """
    Decode a base64 ``package.json`` body into a dict.

    Returns None for any decode or parse failure, or when the document is
    not a JSON object.
    """
    try:
        raw = base64.b64decode(encoded_content)
        manifest = json.loads(raw.decode("utf-8"))
    except (ValueError, TypeError):
        return None
    return manifest if isinstance(manifest, dict) else None


def _dependency_names(manifest: dict[str, Any] | None, field: str) -> list[str]:
    if not manifest:
        return []
    dependencies = manifest.get(field)
    if not isinstance(dependencies, dict):
        return []
    return list(dependencies.keys())


def compute_code_quality(
    listing: list[dict[str, Any]], manifest: dict[str, Any] | None
) -> CodeQuality:
    """
    Classify tests, CI and dependency counts.

    Linter and formatter presence are approximated as "any dev dependency
    declared"; tool names are not inspected.
    """
    dependency_count = len(_dependency_names(manifest, "dependencies"))
    dev_dependency_count = len(_dependency_names(manifest, "devDependencies"))

    return CodeQuality(
        has_tests=has_test_directory(listing),
        test_directory_files=0,
        has_ci=has_ci_configuration(listing),
        has_linter=dev_dependency_count > 0,
        has_prettier=dev_dependency_count > 0,
        dependency_count=dependency_count,
        dev_dependency_count=dev_dependency_count,
    )


def compute_tech_stack(manifest: dict[str, Any] | None) -> TechStack:
    """Detect frameworks and list declared libraries and dev tools."""
    dependencies = _dependency_names(manifest, "dependencies")

    frameworks: list[str] = []
    for dependency, framework in FRAMEWORK_DEPENDENCIES.items():
        if dependency in dependencies and framework not in frameworks:
            frameworks.append(framework)

    return TechStack(
        frameworks=frameworks,
        major_libraries=dependencies,
        dev_tools=_dependency_names(manifest, "devDependencies"),
    )
